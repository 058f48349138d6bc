import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from rep_deployer.interfaces.api.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health(request: Request) -> HealthResponse:
    started_at = request.app.state.started_at
    return HealthResponse(
        status="OK",
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime=round(time.monotonic() - started_at, 3),
    )
