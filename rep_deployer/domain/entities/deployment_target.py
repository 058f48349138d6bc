"""Domain entity representing a Bridge server that accepts deployments."""

from dataclasses import dataclass
from enum import Enum

DEFAULT_DEPLOYMENT_PATH_PREFIX = "/bridge/bridge/rest/services"


class AuthType(str, Enum):
    """Credential flows supported when talking to a deployment target."""

    OAUTH = "oauth"
    BASIC = "basic"


@dataclass(frozen=True)
class DeploymentTarget:
    """Connection details and credentials for a single deployment target."""

    name: str
    scheme: str
    host: str
    port: int
    auth_type: AuthType
    username: str
    password: str
    keycloak_url: str | None = None
    client_id: str | None = None
    client_secret: str | None = None
    deployment_path_prefix: str = DEFAULT_DEPLOYMENT_PATH_PREFIX
    verify_certificates: bool = False

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"

    @property
    def deployment_url(self) -> str:
        """Return the endpoint that receives multipart deployments."""

        return f"{self.base_url}{self.deployment_path_prefix}"

    def uses_oauth(self) -> bool:
        return self.auth_type is AuthType.OAUTH


__all__ = ["AuthType", "DEFAULT_DEPLOYMENT_PATH_PREFIX", "DeploymentTarget"]
