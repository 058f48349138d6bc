"""Use case fanning uploaded artifacts out to the selected deployment targets."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable

from rep_deployer.domain.entities import (
    ALL_SERVERS,
    UNKNOWN_FILE,
    UNKNOWN_SERVER,
    DeploymentOutcome,
    DeploymentTarget,
    DispatchReport,
    UploadedFile,
)
from rep_deployer.domain.errors import DeployerError, NotFoundError, ValidationError
from rep_deployer.infrastructure.target_registry import TargetRegistry
from rep_deployer.infrastructure.upload_ledger import UploadLedger

logger = logging.getLogger(__name__)

FILE_NOT_FOUND_MESSAGE = "File not found"
NO_FILES_MESSAGE = "No files selected for deployment"
NO_SERVERS_MESSAGE = "No servers selected for deployment"
DEFAULT_MAX_WORKERS = 4

DeployFunc = Callable[[UploadedFile, DeploymentTarget], Any]


def _deploy_pair(
    deploy: DeployFunc, uploaded: UploadedFile, target: DeploymentTarget
) -> DeploymentOutcome:
    """Run one deployment and convert any failure into an outcome."""

    try:
        result = deploy(uploaded, target)
    except DeployerError as exc:
        logger.error(
            "Deployment failed for %s to %s: %s",
            uploaded.original_name,
            target.name,
            exc.message,
        )
        return DeploymentOutcome.failed(uploaded.original_name, target.name, exc.message)
    except Exception as exc:  # noqa: BLE001 - recorded as this pair's failure
        logger.exception(
            "Unexpected error deploying %s to %s", uploaded.original_name, target.name
        )
        return DeploymentOutcome.failed(
            uploaded.original_name, target.name, str(exc) or exc.__class__.__name__
        )
    return DeploymentOutcome.succeeded(uploaded.original_name, target.name, result)


def dispatch_deployments(
    file_ids: Sequence[str],
    target_indices: Sequence[int],
    *,
    ledger: UploadLedger,
    registry: TargetRegistry,
    deploy: DeployFunc,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> DispatchReport:
    """Deploy every requested file to every requested target.

    Files that are not in the ledger yield a single failure with server
    ``"All"``; unknown target indices yield a failure with server
    ``"Unknown"``. Resolved pairs run on a bounded thread pool and a failing
    pair never prevents the others from running. Outcomes are reported in
    request order: files first, then targets.
    """

    if not file_ids:
        raise ValidationError(NO_FILES_MESSAGE)
    if not target_indices:
        raise ValidationError(NO_SERVERS_MESSAGE)

    uploads = ledger.snapshot()
    outcomes: list[DeploymentOutcome | None] = []
    pending: list[tuple[int, UploadedFile, DeploymentTarget]] = []

    for file_id in file_ids:
        uploaded = uploads.get(file_id)
        if uploaded is None:
            logger.warning("Deployment requested for unknown file id %s", file_id)
            outcomes.append(
                DeploymentOutcome.failed(UNKNOWN_FILE, ALL_SERVERS, FILE_NOT_FOUND_MESSAGE)
            )
            continue

        for index in target_indices:
            try:
                target = registry.get(index)
            except NotFoundError as exc:
                logger.warning("Deployment requested for unknown server index %s", index)
                outcomes.append(
                    DeploymentOutcome.failed(uploaded.original_name, UNKNOWN_SERVER, exc.message)
                )
                continue
            pending.append((len(outcomes), uploaded, target))
            outcomes.append(None)

    logger.info(
        "Dispatching %d deployment(s) for %d file(s) across %d server(s)",
        len(pending),
        len(file_ids),
        len(target_indices),
    )

    if pending:
        workers = max(1, min(max_workers, len(pending)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="deploy") as executor:
            future_map = {
                executor.submit(_deploy_pair, deploy, uploaded, target): slot
                for slot, uploaded, target in pending
            }
            for future in as_completed(future_map):
                outcomes[future_map[future]] = future.result()

    report = DispatchReport.from_outcomes(
        [outcome for outcome in outcomes if outcome is not None]
    )
    logger.info(
        "Deployment finished: %d succeeded, %d failed",
        len(report.successful_deployments),
        len(report.failed_deployments),
    )
    return report


__all__ = [
    "FILE_NOT_FOUND_MESSAGE",
    "NO_FILES_MESSAGE",
    "NO_SERVERS_MESSAGE",
    "dispatch_deployments",
]
