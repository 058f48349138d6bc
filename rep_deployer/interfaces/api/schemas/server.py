"""Schemas describing the configured deployment targets."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from rep_deployer.domain.entities import AuthType, DeploymentTarget


class ServerRead(BaseModel):
    """Public view of a deployment target; credentials other than the username are omitted."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    name: str
    scheme: str
    host: str
    port: int
    username: str
    auth_type: AuthType
    deployment_path_prefix: str

    @classmethod
    def from_target(cls, index: int, target: DeploymentTarget) -> "ServerRead":
        return cls(
            id=index,
            name=target.name,
            scheme=target.scheme,
            host=target.host,
            port=target.port,
            username=target.username,
            auth_type=target.auth_type,
            deployment_path_prefix=target.deployment_path_prefix,
        )


__all__ = ["ServerRead"]
