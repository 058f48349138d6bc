"""Routes exposing the configured Bridge servers."""

from fastapi import APIRouter, Depends

from rep_deployer.infrastructure.target_registry import TargetRegistry
from rep_deployer.interfaces.api.dependencies import get_target_registry, require_session
from rep_deployer.interfaces.api.schemas import ServerRead

router = APIRouter(prefix="/api", tags=["servers"])


@router.get("/servers", response_model=list[ServerRead])
def list_servers(
    registry: TargetRegistry = Depends(get_target_registry),
    _: str = Depends(require_session),
) -> list[ServerRead]:
    """Return the deployment targets in the order used by ``serverIds``."""

    return [ServerRead.from_target(index, target) for index, target in enumerate(registry.list())]


__all__ = ["router"]
