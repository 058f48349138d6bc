"""Domain entities describing the result of a deployment batch."""

from dataclasses import dataclass, field
from typing import Any

UNKNOWN_FILE = "Unknown"
UNKNOWN_SERVER = "Unknown"
ALL_SERVERS = "All"
DEPLOYMENT_SUCCESS_MESSAGE = "Deployment successful"


@dataclass(frozen=True)
class DeploymentOutcome:
    """Result of sending one file to one target."""

    file: str
    server: str
    success: bool
    result: Any = None
    error: str | None = None

    @classmethod
    def succeeded(cls, file: str, server: str, result: Any) -> "DeploymentOutcome":
        return cls(file=file, server=server, success=True, result=result)

    @classmethod
    def failed(cls, file: str, server: str, error: str) -> "DeploymentOutcome":
        return cls(file=file, server=server, success=False, error=error)


@dataclass
class DispatchReport:
    """Aggregated view of every outcome produced by a deployment request."""

    success: bool
    message: str
    successful_deployments: list[dict[str, str]] = field(default_factory=list)
    failed_deployments: list[dict[str, str]] = field(default_factory=list)
    results: list[DeploymentOutcome] = field(default_factory=list)

    @classmethod
    def from_outcomes(cls, outcomes: list[DeploymentOutcome]) -> "DispatchReport":
        """Split ``outcomes`` into the successful and failed summaries."""

        successful = [
            {
                "fileName": outcome.file,
                "server": outcome.server,
                "message": DEPLOYMENT_SUCCESS_MESSAGE,
            }
            for outcome in outcomes
            if outcome.success
        ]
        failed = [
            {
                "fileName": outcome.file,
                "server": outcome.server,
                "error": outcome.error or "Deployment failed",
            }
            for outcome in outcomes
            if not outcome.success
        ]

        if successful:
            message = f"Successfully deployed {len(successful)} deployment(s)"
            if failed:
                message = f"{message}; {len(failed)} failed"
        else:
            message = "No files were successfully deployed"

        return cls(
            success=bool(successful),
            message=message,
            successful_deployments=successful,
            failed_deployments=failed,
            results=list(outcomes),
        )


__all__ = [
    "ALL_SERVERS",
    "DEPLOYMENT_SUCCESS_MESSAGE",
    "DeploymentOutcome",
    "DispatchReport",
    "UNKNOWN_FILE",
    "UNKNOWN_SERVER",
]
