"""Shared fixtures for the deployer test-suite."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Any, Callable

import pytest

from rep_deployer.config import Settings, reset_settings_cache
from rep_deployer.domain.entities import AuthType, DeploymentTarget, UploadedFile
from rep_deployer.infrastructure.security import SESSION_COOKIE_NAME, create_session_token

TEST_SECRET = "test-secret"

_ENV_VARS = (
    "SESSION_SECRET",
    "BRIDGE_SERVERS",
    "ALLOWED_EXTENSIONS",
    "CORS_ORIGINS",
    "UPLOAD_DIR",
    "MAX_FILE_SIZE",
    "PORT",
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch) -> Path:
    """Point the JSON config layer at an empty directory for every test."""

    config_dir = tmp_path_factory.mktemp("config")
    monkeypatch.setenv("CONFIG_DIR", str(config_dir))
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings_cache()
    yield config_dir
    reset_settings_cache()


@pytest.fixture()
def basic_server() -> dict[str, Any]:
    return {
        "name": "Basic Bridge",
        "scheme": "http",
        "host": "basic.example.com",
        "port": 8080,
        "authType": "basic",
        "username": "deployer",
        "password": "basic-pass",
    }


@pytest.fixture()
def oauth_server() -> dict[str, Any]:
    return {
        "name": "OAuth Bridge",
        "scheme": "https",
        "host": "oauth.example.com",
        "port": 443,
        "authType": "oauth",
        "username": "svc",
        "password": "oauth-pass",
        "keycloakUrl": "https://sso.example.com/realms/PAS/protocol/openid-connect/token",
        "clientId": "bridge-client",
        "clientSecret": "shh",
    }


@pytest.fixture()
def settings(tmp_path, basic_server, oauth_server) -> Settings:
    return Settings(
        session_secret=TEST_SECRET,
        upload_dir=tmp_path / "uploads",
        bridge_servers=[basic_server, oauth_server],
    )


@pytest.fixture()
def app(settings):
    from main import create_app

    return create_app(settings)


@pytest.fixture()
def client(app):
    from fastapi.testclient import TestClient

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def auth_client(client):
    """Test client carrying a valid session cookie."""

    token = create_session_token("alice", TEST_SECRET, timedelta(hours=1))
    client.cookies.set(SESSION_COOKIE_NAME, token)
    return client


@pytest.fixture()
def make_target() -> Callable[..., DeploymentTarget]:
    def factory(name: str = "Bridge", **overrides: Any) -> DeploymentTarget:
        values: dict[str, Any] = {
            "name": name,
            "scheme": "http",
            "host": f"{name.lower().replace(' ', '-')}.example.com",
            "port": 8080,
            "auth_type": AuthType.BASIC,
            "username": "deployer",
            "password": "secret",
        }
        values.update(overrides)
        return DeploymentTarget(**values)

    return factory


@pytest.fixture()
def stored_file(tmp_path) -> UploadedFile:
    path = tmp_path / "artifact.rep"
    path.write_bytes(b"rep-bytes")
    return UploadedFile(
        file_id="file-1",
        original_name="artifact.rep",
        size=9,
        storage_path=str(path),
    )
