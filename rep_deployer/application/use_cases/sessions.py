"""Use case for logging users in against the identity provider."""

from rep_deployer.config import Settings
from rep_deployer.domain.errors import ValidationError
from rep_deployer.infrastructure.identity_provider import LoginResult, authenticate_user


def login_user(settings: Settings, username: str | None, password: str | None) -> LoginResult:
    """Return the login outcome for ``username``.

    Missing credentials are rejected before contacting Keycloak.
    """

    if not username or not password:
        raise ValidationError("Username and password are required")
    return authenticate_user(settings, username, password)


__all__ = ["login_user"]
