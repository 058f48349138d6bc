"""Keycloak password-grant helpers.

Both the user login and the per-target token acquisition use the OAuth2
resource owner password grant. Certificate verification is controlled per
call: the identity provider and the targets commonly run with self-signed
certificates, so each caller passes its own explicit ``verify`` flag.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests

from rep_deployer.config import Settings
from rep_deployer.domain.entities import DeploymentTarget
from rep_deployer.domain.errors import AuthError

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
DEFAULT_LOGIN_ERROR = "Authentication failed"


@dataclass(frozen=True)
class LoginResult:
    """Outcome of authenticating an application user."""

    success: bool
    access_token: str | None = None
    error: str | None = None


def _extract_error_description(response: requests.Response) -> str | None:
    """Return the OAuth error description carried by ``response`` if any."""

    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    description = payload.get("error_description") or payload.get("error")
    return str(description) if description else None


def request_password_grant(
    token_url: str,
    form: dict[str, str],
    *,
    verify: bool,
    timeout: float,
    default_error: str,
) -> dict[str, Any]:
    """POST a password grant to ``token_url`` and return the token payload.

    Raises :class:`AuthError` when the request fails or no access token is
    returned.
    """

    try:
        response = requests.post(
            token_url,
            data=form,
            headers={"Content-Type": FORM_CONTENT_TYPE},
            verify=verify,
            timeout=timeout,
        )
    except requests.exceptions.Timeout as exc:
        logger.error("Token request to %s timed out", token_url)
        raise AuthError(f"{default_error}: identity provider timed out") from exc
    except requests.exceptions.RequestException as exc:
        logger.error("Token request to %s failed: %s", token_url, exc)
        raise AuthError(f"{default_error}: {exc}") from exc

    if not response.ok:
        description = _extract_error_description(response)
        logger.error(
            "Token request to %s was rejected with status %s: %s",
            token_url,
            response.status_code,
            description or response.text,
        )
        raise AuthError(description or default_error)

    try:
        payload = response.json()
    except ValueError as exc:
        raise AuthError(f"{default_error}: malformed token response") from exc

    if not isinstance(payload, dict) or not payload.get("access_token"):
        raise AuthError(f"{default_error}: access token missing from response")
    return payload


def acquire_token(target: DeploymentTarget, *, timeout: float) -> str:
    """Return a bearer token for an OAuth ``target``."""

    if not target.keycloak_url or not target.client_id:
        raise AuthError(f"Server {target.name} is missing its OAuth configuration")

    form = {
        "username": target.username,
        "password": target.password,
        "client_id": target.client_id,
        "grant_type": "password",
    }
    if target.client_secret:
        form["client_secret"] = target.client_secret

    logger.debug("Requesting OAuth token for %s (client %s)", target.name, target.client_id)
    payload = request_password_grant(
        target.keycloak_url,
        form,
        verify=target.verify_certificates,
        timeout=timeout,
        default_error=f"Failed to obtain access token for {target.name}",
    )
    return str(payload["access_token"])


def authenticate_user(settings: Settings, username: str, password: str) -> LoginResult:
    """Validate the credentials of an application user against Keycloak."""

    form = {
        "username": username,
        "password": password,
        "client_id": settings.keycloak_client_id,
        "grant_type": "password",
    }
    try:
        payload = request_password_grant(
            settings.keycloak_token_url,
            form,
            verify=settings.keycloak_verify_certificates,
            timeout=settings.identity_request_timeout_seconds,
            default_error=DEFAULT_LOGIN_ERROR,
        )
    except AuthError as exc:
        logger.info("Login failed for user %s: %s", username, exc.message)
        return LoginResult(success=False, error=exc.message)
    return LoginResult(success=True, access_token=str(payload["access_token"]))


__all__ = [
    "LoginResult",
    "acquire_token",
    "authenticate_user",
    "request_password_grant",
]
