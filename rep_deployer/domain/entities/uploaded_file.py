"""Domain entity describing an artifact received from the browser."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UploadedFile:
    """Metadata for an uploaded artifact waiting to be deployed."""

    file_id: str
    original_name: str
    size: int
    storage_path: str


__all__ = ["UploadedFile"]
