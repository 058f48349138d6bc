"""Tests for the server listing, upload, deploy and clear endpoints."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock, patch

from rep_deployer.domain.errors import AuthError
from rep_deployer.infrastructure.bridge_client import BridgeClient

POST_PATH = "rep_deployer.infrastructure.bridge_client.requests.post"


def _upload(client, name: str = "build.rep", content: bytes = b"rep-bytes"):
    return client.post("/upload", files={"repFile": (name, content, "application/octet-stream")})


def _install_token_provider(client, provider: Mock) -> None:
    client.app.state.bridge_client = BridgeClient(
        request_timeout=5, token_timeout=5, token_provider=provider
    )


def _ok_response() -> Mock:
    response = Mock(ok=True, status_code=200)
    response.json.return_value = {"deployed": True}
    return response


def test_servers_are_listed_without_secrets(auth_client) -> None:
    response = auth_client.get("/api/servers")

    assert response.status_code == 200
    servers = response.json()
    assert [server["id"] for server in servers] == [0, 1]
    assert servers[0] == {
        "id": 0,
        "name": "Basic Bridge",
        "scheme": "http",
        "host": "basic.example.com",
        "port": 8080,
        "username": "deployer",
        "authType": "basic",
        "deploymentPathPrefix": "/bridge/bridge/rest/services",
    }
    assert servers[1]["authType"] == "oauth"
    for server in servers:
        assert "password" not in server
        assert "clientSecret" not in server


def test_upload_stores_file(auth_client, settings) -> None:
    response = _upload(auth_client)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["originalName"] == "build.rep"
    assert body["size"] == 9
    stored = Path(body["filePath"])
    assert stored.parent == settings.upload_dir
    assert stored.read_bytes() == b"rep-bytes"
    assert body["fileId"] in auth_client.app.state.ledger


def test_upload_accepts_uppercase_extension(auth_client) -> None:
    assert _upload(auth_client, name="BUILD.REP").status_code == 200


def test_upload_rejects_other_extensions(auth_client, settings) -> None:
    response = _upload(auth_client, name="notes.txt")

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Only .rep files are allowed"}
    assert len(auth_client.app.state.ledger) == 0


def test_upload_without_file_is_rejected(auth_client) -> None:
    response = auth_client.post("/upload", data={"other": "value"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "No file uploaded"}


def test_oversized_upload_is_rejected_and_removed(auth_client, settings) -> None:
    settings.max_file_size = 1
    response = _upload(auth_client, content=b"x" * (1024 * 1024 + 1))

    assert response.status_code == 400
    assert "maximum allowed size" in response.json()["error"]
    assert list(settings.upload_dir.iterdir()) == []


def test_upload_requires_session(client) -> None:
    assert _upload(client).status_code == 401


def test_deploy_reports_partial_success(auth_client) -> None:
    first = _upload(auth_client, name="a.rep").json()["fileId"]
    second = _upload(auth_client, name="b.rep").json()["fileId"]

    token = Mock(side_effect=AuthError("Invalid client credentials"))
    _install_token_provider(auth_client, token)

    with patch(POST_PATH, return_value=_ok_response()) as post:
        response = auth_client.post("/deploy", json={"fileIds": [first, second], "serverIds": [0, 1]})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Successfully deployed 2 deployment(s); 2 failed"
    assert body["successfulDeployments"] == [
        {"fileName": "a.rep", "server": "Basic Bridge", "message": "Deployment successful"},
        {"fileName": "b.rep", "server": "Basic Bridge", "message": "Deployment successful"},
    ]
    assert body["failedDeployments"] == [
        {"fileName": "a.rep", "server": "OAuth Bridge", "error": "Invalid client credentials"},
        {"fileName": "b.rep", "server": "OAuth Bridge", "error": "Invalid client credentials"},
    ]
    assert len(body["results"]) == 4
    assert post.call_count == 2
    assert token.call_count == 2


def test_deploy_to_unknown_server(auth_client) -> None:
    file_id = _upload(auth_client).json()["fileId"]

    with patch(POST_PATH) as post:
        response = auth_client.post("/deploy", json={"fileIds": [file_id], "serverIds": [5]})

    post.assert_not_called()
    body = response.json()
    assert response.status_code == 200
    assert body["success"] is False
    assert body["message"] == "No files were successfully deployed"
    assert body["failedDeployments"] == [
        {"fileName": "build.rep", "server": "Unknown", "error": "Server not found"}
    ]


def test_deploy_unknown_file(auth_client) -> None:
    with patch(POST_PATH) as post:
        response = auth_client.post("/deploy", json={"fileIds": ["missing"], "serverIds": [0]})

    post.assert_not_called()
    assert response.json()["failedDeployments"] == [
        {"fileName": "Unknown", "server": "All", "error": "File not found"}
    ]


def test_deploy_rejects_empty_selection(auth_client) -> None:
    token = Mock()
    _install_token_provider(auth_client, token)

    with patch(POST_PATH) as post:
        no_files = auth_client.post("/deploy", json={"fileIds": [], "serverIds": [0]})
        no_servers = auth_client.post("/deploy", json={"fileIds": ["x"], "serverIds": []})
        missing = auth_client.post("/deploy", json={})

    assert no_files.status_code == 400
    assert no_files.json() == {"success": False, "error": "No files selected for deployment"}
    assert no_servers.status_code == 400
    assert no_servers.json() == {"success": False, "error": "No servers selected for deployment"}
    assert missing.status_code == 400
    post.assert_not_called()
    token.assert_not_called()


def test_deploy_rejects_malformed_body(auth_client) -> None:
    response = auth_client.post("/deploy", json={"fileIds": "abc", "serverIds": ["zero"]})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid request"}


def test_deploy_requires_session(client) -> None:
    response = client.post("/deploy", json={"fileIds": ["x"], "serverIds": [0]})

    assert response.status_code == 401


def test_clear_removes_uploaded_files(auth_client, settings) -> None:
    _upload(auth_client, name="a.rep")
    _upload(auth_client, name="b.rep")

    response = auth_client.post("/clear")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "All files cleared"}
    assert len(auth_client.app.state.ledger) == 0
    assert list(settings.upload_dir.iterdir()) == []

    again = auth_client.post("/clear")
    assert again.json() == {"success": True, "message": "All files cleared"}


def test_clear_requires_session(client) -> None:
    assert client.post("/clear").status_code == 401


def test_each_app_has_its_own_ledger(auth_client, settings) -> None:
    from main import create_app

    _upload(auth_client)
    other = create_app(settings)

    assert len(auth_client.app.state.ledger) == 1
    assert len(other.state.ledger) == 0


def test_clear_reports_files_that_could_not_be_deleted(auth_client) -> None:
    from rep_deployer.infrastructure.upload_ledger import UploadLedger

    def refuse(path: str) -> bool:
        raise PermissionError("read-only filesystem")

    auth_client.app.state.ledger = UploadLedger(remove_file=refuse)
    _upload(auth_client, name="locked.rep")

    response = auth_client.post("/clear")

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Files cleared with 1 deletion error(s)",
        "deletionErrors": ["locked.rep: read-only filesystem"],
    }
    assert len(auth_client.app.state.ledger) == 0


def test_storage_failure_is_an_internal_error(auth_client, caplog) -> None:
    with patch(
        "rep_deployer.application.use_cases.uploads.save_stream",
        side_effect=OSError("No space left on device"),
    ):
        response = _upload(auth_client)

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Internal server error"}
    assert "No space left on device" in caplog.text
    assert len(auth_client.app.state.ledger) == 0
