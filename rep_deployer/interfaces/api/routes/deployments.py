"""Route deploying uploaded artifacts to the selected Bridge servers."""

from fastapi import APIRouter, Depends

from rep_deployer.application.use_cases import dispatch_deployments
from rep_deployer.config import Settings
from rep_deployer.infrastructure.bridge_client import BridgeClient
from rep_deployer.infrastructure.target_registry import TargetRegistry
from rep_deployer.infrastructure.upload_ledger import UploadLedger
from rep_deployer.interfaces.api.dependencies import (
    get_app_settings,
    get_bridge_client,
    get_target_registry,
    get_upload_ledger,
    require_session,
)
from rep_deployer.interfaces.api.schemas import DeployRequest, DispatchReportRead

router = APIRouter(tags=["deployments"])


@router.post("/deploy", response_model=DispatchReportRead, response_model_exclude_none=True)
def deploy(
    payload: DeployRequest,
    ledger: UploadLedger = Depends(get_upload_ledger),
    registry: TargetRegistry = Depends(get_target_registry),
    client: BridgeClient = Depends(get_bridge_client),
    settings: Settings = Depends(get_app_settings),
    _: str = Depends(require_session),
) -> DispatchReportRead:
    """Deploy each requested file to each requested server.

    The response is 200 even when some or every deployment failed; callers
    inspect ``failedDeployments`` for partial failures.
    """

    report = dispatch_deployments(
        payload.file_ids or [],
        payload.server_ids or [],
        ledger=ledger,
        registry=registry,
        deploy=client.deploy_to_target,
        max_workers=settings.deploy_max_workers,
    )
    return DispatchReportRead.from_report(report)


__all__ = ["router"]
