"""Domain entities exposed by the application."""

from .deployment_outcome import (
    ALL_SERVERS,
    DEPLOYMENT_SUCCESS_MESSAGE,
    UNKNOWN_FILE,
    UNKNOWN_SERVER,
    DeploymentOutcome,
    DispatchReport,
)
from .deployment_target import (
    DEFAULT_DEPLOYMENT_PATH_PREFIX,
    AuthType,
    DeploymentTarget,
)
from .uploaded_file import UploadedFile

__all__ = [
    "ALL_SERVERS",
    "AuthType",
    "DEFAULT_DEPLOYMENT_PATH_PREFIX",
    "DEPLOYMENT_SUCCESS_MESSAGE",
    "DeploymentOutcome",
    "DeploymentTarget",
    "DispatchReport",
    "UNKNOWN_FILE",
    "UNKNOWN_SERVER",
    "UploadedFile",
]
