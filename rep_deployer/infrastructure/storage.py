"""Local disk storage for uploaded artifacts."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO
from uuid import uuid4

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class FileTooLargeError(ValueError):
    """Raised when an upload exceeds the configured size limit."""


@dataclass(frozen=True)
class StoredFile:
    path: Path
    size: int


def _sanitize_filename(name: str) -> str:
    """Return ``name`` reduced to a filesystem-safe base name."""

    base = Path(name.replace("\\", "/")).name
    cleaned = re.sub(r"[^A-Za-z0-9._-]+", "_", base.strip())
    return cleaned.strip("_") or "upload"


def build_storage_name(original_name: str) -> str:
    """Return a unique on-disk name that keeps the original name readable."""

    return f"{uuid4().hex}-{_sanitize_filename(original_name)}"


def save_stream(
    stream: BinaryIO,
    original_name: str,
    directory: Path,
    *,
    max_bytes: int,
) -> StoredFile:
    """Copy ``stream`` into ``directory`` enforcing ``max_bytes``.

    A partially written file is removed before :class:`FileTooLargeError`
    is raised.
    """

    directory.mkdir(parents=True, exist_ok=True)
    destination = directory / build_storage_name(original_name)
    written = 0
    try:
        with destination.open("wb") as target:
            while True:
                chunk = stream.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > max_bytes:
                    raise FileTooLargeError(
                        f"File exceeds the maximum allowed size of {max_bytes} bytes"
                    )
                target.write(chunk)
    except BaseException:
        delete_file(destination)
        raise
    return StoredFile(path=destination, size=written)


def delete_file(path: str | Path) -> bool:
    """Delete the file located at ``path``.

    Returns ``False`` when the file was already gone.
    """

    try:
        Path(path).unlink()
    except FileNotFoundError:
        return False
    logger.debug("Removed stored file %s", path)
    return True


__all__ = [
    "FileTooLargeError",
    "StoredFile",
    "build_storage_name",
    "delete_file",
    "save_stream",
]
