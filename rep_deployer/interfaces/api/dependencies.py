"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, Request, status

from rep_deployer.config import Settings
from rep_deployer.infrastructure.bridge_client import BridgeClient
from rep_deployer.infrastructure.security import (
    SESSION_COOKIE_NAME,
    RevokedSessions,
    session_username,
)
from rep_deployer.infrastructure.target_registry import TargetRegistry
from rep_deployer.infrastructure.upload_ledger import UploadLedger


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_upload_ledger(request: Request) -> UploadLedger:
    return request.app.state.ledger


def get_target_registry(request: Request) -> TargetRegistry:
    return request.app.state.registry


def get_bridge_client(request: Request) -> BridgeClient:
    return request.app.state.bridge_client


def get_revoked_sessions(request: Request) -> RevokedSessions:
    return request.app.state.revoked_sessions


def get_session_username(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    revoked: RevokedSessions = Depends(get_revoked_sessions),
) -> str | None:
    """Return the username bound to the session cookie, if it is still valid."""

    return session_username(
        request.cookies.get(SESSION_COOKIE_NAME), settings.session_secret, revoked
    )


def require_session(username: str | None = Depends(get_session_username)) -> str:
    """Ensure the request carries an authenticated session."""

    if username is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "Authentication required", "authenticated": False},
        )
    return username


__all__ = [
    "get_app_settings",
    "get_bridge_client",
    "get_revoked_sessions",
    "get_session_username",
    "get_target_registry",
    "get_upload_ledger",
    "require_session",
]
