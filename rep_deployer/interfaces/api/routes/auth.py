"""Endpoints for logging in and out against Keycloak."""

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, Request, Response

from rep_deployer.application.use_cases import login_user
from rep_deployer.config import Settings
from rep_deployer.infrastructure.security import (
    SESSION_COOKIE_NAME,
    RevokedSessions,
    create_session_token,
    read_session,
)
from rep_deployer.interfaces.api.dependencies import (
    get_app_settings,
    get_revoked_sessions,
    get_session_username,
)
from rep_deployer.interfaces.api.schemas import (
    AuthStatusResponse,
    LoginRequest,
    LoginResponse,
    LogoutResponse,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/login", response_model=LoginResponse, response_model_exclude_none=True)
def login(
    payload: LoginRequest,
    response: Response,
    settings: Settings = Depends(get_app_settings),
) -> LoginResponse:
    """Authenticate against Keycloak and open a session on success."""

    logger.info("Attempting login for user: %s", payload.username)
    result = login_user(settings, payload.username, payload.password)
    if not result.success:
        return LoginResponse(success=False, error=result.error)

    token = create_session_token(
        payload.username,
        settings.session_secret,
        timedelta(seconds=settings.session_max_age_seconds),
    )
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    logger.info("Login successful for user: %s", payload.username)
    return LoginResponse(success=True, message="Login successful")


@router.post("/logout", response_model=LogoutResponse)
def logout(
    request: Request,
    response: Response,
    settings: Settings = Depends(get_app_settings),
    revoked: RevokedSessions = Depends(get_revoked_sessions),
) -> LogoutResponse:
    """End the session server-side so the old cookie cannot be replayed."""

    claims = read_session(request.cookies.get(SESSION_COOKIE_NAME), settings.session_secret)
    if claims is not None:
        revoked.revoke(claims)
        logger.info("Logged out user: %s", claims.username)
    response.delete_cookie(
        SESSION_COOKIE_NAME,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    return LogoutResponse(success=True, message="Logged out successfully")


@router.get("/status", response_model=AuthStatusResponse)
def auth_status(username: str | None = Depends(get_session_username)) -> AuthStatusResponse:
    return AuthStatusResponse(authenticated=username is not None, username=username)


__all__ = ["router"]
