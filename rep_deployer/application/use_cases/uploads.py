"""Use cases for receiving and discarding uploaded artifacts."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import BinaryIO

from rep_deployer.domain.entities import UploadedFile
from rep_deployer.domain.errors import InternalError, ValidationError
from rep_deployer.infrastructure.storage import FileTooLargeError, save_stream
from rep_deployer.infrastructure.upload_ledger import ClearResult, UploadLedger


def _has_allowed_extension(filename: str, allowed_extensions: Sequence[str]) -> bool:
    lower = filename.lower()
    return any(lower.endswith(extension.lower()) for extension in allowed_extensions)


def register_upload(
    ledger: UploadLedger,
    *,
    stream: BinaryIO,
    filename: str,
    upload_dir: Path,
    allowed_extensions: Sequence[str],
    max_bytes: int,
) -> UploadedFile:
    """Persist ``stream`` to ``upload_dir`` and record it in ``ledger``."""

    if not filename:
        raise ValidationError("No file uploaded")

    if not _has_allowed_extension(filename, allowed_extensions):
        raise ValidationError(f"Only {', '.join(allowed_extensions)} files are allowed")

    try:
        stored = save_stream(stream, filename, upload_dir, max_bytes=max_bytes)
    except FileTooLargeError as exc:
        raise ValidationError(str(exc)) from exc
    except OSError as exc:
        raise InternalError(f"Failed to store uploaded file {filename}: {exc}") from exc

    return ledger.put(
        original_name=filename,
        size=stored.size,
        storage_path=str(stored.path),
    )


def clear_uploads(ledger: UploadLedger) -> ClearResult:
    """Remove every uploaded artifact together with its ledger entry."""

    return ledger.clear()


__all__ = ["clear_uploads", "register_upload"]
