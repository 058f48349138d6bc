"""Error hierarchy shared by the deployment workflow."""

from __future__ import annotations


class DeployerError(Exception):
    """Base class for errors raised by the deployer."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(DeployerError):
    """A request is missing required data."""

    status_code = 400


class AuthError(DeployerError):
    """Login or token acquisition was rejected."""

    status_code = 401


class NotFoundError(DeployerError):
    """An uploaded file or a deployment target could not be resolved."""

    status_code = 404


class DeployError(DeployerError):
    """A deployment request to a target failed."""

    status_code = 502

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.upstream_status = status_code
        self.body = body


class InternalError(DeployerError):
    """An unexpected fault that should surface with minimal detail."""

    status_code = 500


__all__ = [
    "AuthError",
    "DeployError",
    "DeployerError",
    "InternalError",
    "NotFoundError",
    "ValidationError",
]
