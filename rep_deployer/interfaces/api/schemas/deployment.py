"""Schemas for the deploy endpoint."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from rep_deployer.domain.entities import DispatchReport


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DeployRequest(_CamelModel):
    file_ids: list[str] | None = Field(default=None, description="Identifiers returned by /upload")
    server_ids: list[int] | None = Field(default=None, description="Indices into /api/servers")


class SuccessfulDeploymentRead(_CamelModel):
    file_name: str
    server: str
    message: str


class FailedDeploymentRead(_CamelModel):
    file_name: str
    server: str
    error: str


class DeploymentOutcomeRead(_CamelModel):
    file: str
    server: str
    success: bool
    result: Any = None
    error: str | None = None


class DispatchReportRead(_CamelModel):
    success: bool
    message: str
    successful_deployments: list[SuccessfulDeploymentRead]
    failed_deployments: list[FailedDeploymentRead]
    results: list[DeploymentOutcomeRead]

    @classmethod
    def from_report(cls, report: DispatchReport) -> "DispatchReportRead":
        return cls(
            success=report.success,
            message=report.message,
            successful_deployments=[
                SuccessfulDeploymentRead.model_validate(item)
                for item in report.successful_deployments
            ],
            failed_deployments=[
                FailedDeploymentRead.model_validate(item) for item in report.failed_deployments
            ],
            results=[
                DeploymentOutcomeRead(
                    file=outcome.file,
                    server=outcome.server,
                    success=outcome.success,
                    result=outcome.result,
                    error=outcome.error,
                )
                for outcome in report.results
            ],
        )


__all__ = [
    "DeployRequest",
    "DeploymentOutcomeRead",
    "DispatchReportRead",
    "FailedDeploymentRead",
    "SuccessfulDeploymentRead",
]
