"""Tests for the login, logout and session status endpoints."""

from __future__ import annotations

from unittest.mock import patch

from rep_deployer.infrastructure.identity_provider import LoginResult
from rep_deployer.infrastructure.security import SESSION_COOKIE_NAME

AUTHENTICATE_PATH = "rep_deployer.application.use_cases.sessions.authenticate_user"


def test_login_sets_session_cookie(client) -> None:
    with patch(AUTHENTICATE_PATH, return_value=LoginResult(success=True, access_token="t")) as auth:
        response = client.post("/api/auth/login", json={"username": "alice", "password": "pw"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Login successful"}
    assert SESSION_COOKIE_NAME in response.cookies
    assert auth.call_args.args[1:] == ("alice", "pw")

    status = client.get("/api/auth/status")
    assert status.json() == {"authenticated": True, "username": "alice"}


def test_rejected_login_returns_error_without_cookie(client) -> None:
    rejected = LoginResult(success=False, error="Invalid user credentials")

    with patch(AUTHENTICATE_PATH, return_value=rejected):
        response = client.post("/api/auth/login", json={"username": "alice", "password": "bad"})

    assert response.status_code == 200
    assert response.json() == {"success": False, "error": "Invalid user credentials"}
    assert SESSION_COOKIE_NAME not in response.cookies


def test_login_requires_both_fields(client) -> None:
    with patch(AUTHENTICATE_PATH) as auth:
        response = client.post("/api/auth/login", json={"username": "alice"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Username and password are required"}
    auth.assert_not_called()


def test_malformed_login_body_is_rejected(client) -> None:
    response = client.post(
        "/api/auth/login", content="not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid request"}


def test_status_without_session(client) -> None:
    assert client.get("/api/auth/status").json() == {"authenticated": False, "username": None}


def test_tampered_cookie_is_not_a_session(client) -> None:
    client.cookies.set(SESSION_COOKIE_NAME, "not-a-token")

    assert client.get("/api/auth/status").json()["authenticated"] is False


def test_logout_clears_session(auth_client) -> None:
    assert auth_client.get("/api/auth/status").json()["authenticated"] is True

    response = auth_client.post("/api/auth/logout")

    assert response.json() == {"success": True, "message": "Logged out successfully"}
    cleared = response.headers["set-cookie"]
    assert cleared.startswith(f"{SESSION_COOKIE_NAME}=")
    assert "Max-Age=0" in cleared


def test_protected_route_requires_session(client) -> None:
    response = client.get("/api/servers")

    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "error": "Authentication required",
        "authenticated": False,
    }


def test_health_is_public(client) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "OK"
    assert body["uptime"] >= 0
    assert "timestamp" in body


def test_logged_out_cookie_cannot_be_replayed(client) -> None:
    with patch(AUTHENTICATE_PATH, return_value=LoginResult(success=True, access_token="t")):
        client.post("/api/auth/login", json={"username": "alice", "password": "pw"})
    old_cookie = client.cookies.get(SESSION_COOKIE_NAME)
    assert old_cookie

    client.post("/api/auth/logout")
    client.cookies.clear()
    client.cookies.set(SESSION_COOKIE_NAME, old_cookie)

    assert client.get("/api/auth/status").json() == {"authenticated": False, "username": None}
    replayed = client.get("/api/servers")
    assert replayed.status_code == 401
    assert replayed.json()["error"] == "Authentication required"


def test_logout_only_revokes_its_own_session(client) -> None:
    with patch(AUTHENTICATE_PATH, return_value=LoginResult(success=True, access_token="t")):
        client.post("/api/auth/login", json={"username": "alice", "password": "pw"})
        first = client.cookies.get(SESSION_COOKIE_NAME)
        client.cookies.clear()
        client.post("/api/auth/login", json={"username": "alice", "password": "pw"})
        second = client.cookies.get(SESSION_COOKIE_NAME)

    client.cookies.clear()
    client.cookies.set(SESSION_COOKIE_NAME, first)
    client.post("/api/auth/logout")

    client.cookies.clear()
    client.cookies.set(SESSION_COOKIE_NAME, second)
    assert client.get("/api/servers").status_code == 200
