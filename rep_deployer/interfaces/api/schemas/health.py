"""Schema for the liveness endpoint."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    uptime: float
