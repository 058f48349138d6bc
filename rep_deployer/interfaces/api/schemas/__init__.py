from .auth import AuthStatusResponse, LoginRequest, LoginResponse, LogoutResponse
from .deployment import (
    DeploymentOutcomeRead,
    DeployRequest,
    DispatchReportRead,
    FailedDeploymentRead,
    SuccessfulDeploymentRead,
)
from .health import HealthResponse
from .server import ServerRead
from .upload import ClearResponse, UploadResponse

__all__ = [
    "AuthStatusResponse",
    "ClearResponse",
    "DeployRequest",
    "DeploymentOutcomeRead",
    "DispatchReportRead",
    "FailedDeploymentRead",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "LogoutResponse",
    "ServerRead",
    "SuccessfulDeploymentRead",
    "UploadResponse",
]
