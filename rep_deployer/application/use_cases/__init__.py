"""Aggregate application use cases."""

from .deployments import dispatch_deployments
from .sessions import login_user
from .uploads import clear_uploads, register_upload

__all__ = [
    "clear_uploads",
    "dispatch_deployments",
    "login_user",
    "register_upload",
]
