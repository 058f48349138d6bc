"""Routes receiving artifacts from the browser and discarding them."""

import logging

from fastapi import APIRouter, Depends, File, UploadFile

from rep_deployer.application.use_cases import clear_uploads, register_upload
from rep_deployer.config import Settings
from rep_deployer.domain.errors import ValidationError
from rep_deployer.infrastructure.upload_ledger import UploadLedger
from rep_deployer.interfaces.api.dependencies import (
    get_app_settings,
    get_upload_ledger,
    require_session,
)
from rep_deployer.interfaces.api.schemas import ClearResponse, UploadResponse

router = APIRouter(tags=["uploads"])
logger = logging.getLogger(__name__)


@router.post("/upload", response_model=UploadResponse)
def upload_file(
    rep_file: UploadFile | None = File(default=None, alias="repFile"),
    ledger: UploadLedger = Depends(get_upload_ledger),
    settings: Settings = Depends(get_app_settings),
    username: str = Depends(require_session),
) -> UploadResponse:
    """Store an uploaded artifact and return the identifier used by /deploy."""

    if rep_file is None or not rep_file.filename:
        raise ValidationError("No file uploaded")

    try:
        uploaded = register_upload(
            ledger,
            stream=rep_file.file,
            filename=rep_file.filename,
            upload_dir=settings.upload_dir,
            allowed_extensions=settings.allowed_extensions,
            max_bytes=settings.max_file_size_bytes,
        )
    finally:
        rep_file.file.close()

    logger.info("User %s uploaded %s as %s", username, uploaded.original_name, uploaded.file_id)
    return UploadResponse(
        success=True,
        file_id=uploaded.file_id,
        original_name=uploaded.original_name,
        size=uploaded.size,
        file_path=uploaded.storage_path,
    )


@router.post("/clear", response_model=ClearResponse, response_model_exclude_none=True)
def clear_files(
    ledger: UploadLedger = Depends(get_upload_ledger),
    _: str = Depends(require_session),
) -> ClearResponse:
    """Delete every uploaded artifact."""

    result = clear_uploads(ledger)
    if result.errors:
        return ClearResponse(
            success=True,
            message=f"Files cleared with {len(result.errors)} deletion error(s)",
            deletion_errors=result.errors,
        )
    return ClearResponse(success=True, message="All files cleared")


__all__ = ["router"]
