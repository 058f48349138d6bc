"""In-memory registry of uploaded artifacts."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping
from uuid import uuid4

from rep_deployer.domain.entities import UploadedFile
from rep_deployer.infrastructure.storage import delete_file

logger = logging.getLogger(__name__)


@dataclass
class ClearResult:
    """Summary of a :meth:`UploadLedger.clear` call."""

    removed_entries: int = 0
    deleted_files: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


class UploadLedger:
    """Map upload identifiers to the metadata of the stored artifact.

    All mutations go through a single lock. Readers may use :meth:`snapshot`
    to obtain an immutable view that is safe to iterate without locking.
    """

    def __init__(
        self,
        *,
        id_factory: Callable[[], str] | None = None,
        remove_file: Callable[[str], bool] = delete_file,
    ) -> None:
        self._entries: dict[str, UploadedFile] = {}
        self._lock = threading.Lock()
        self._id_factory = id_factory or (lambda: uuid4().hex)
        self._remove_file = remove_file

    def put(self, *, original_name: str, size: int, storage_path: str) -> UploadedFile:
        """Store the metadata for a new upload and return it with its identifier."""

        with self._lock:
            file_id = self._id_factory()
            while file_id in self._entries:
                file_id = self._id_factory()
            uploaded = UploadedFile(
                file_id=file_id,
                original_name=original_name,
                size=size,
                storage_path=storage_path,
            )
            self._entries[file_id] = uploaded
        logger.info("Registered upload %s (%s, %d bytes)", file_id, original_name, size)
        return uploaded

    def get(self, file_id: str) -> UploadedFile | None:
        with self._lock:
            return self._entries.get(file_id)

    def snapshot(self) -> Mapping[str, UploadedFile]:
        with self._lock:
            return MappingProxyType(dict(self._entries))

    def clear(self) -> ClearResult:
        """Delete every stored artifact, then forget all entries.

        A file that cannot be deleted is reported in the result; the
        remaining files are still processed.
        """

        result = ClearResult()
        with self._lock:
            entries = list(self._entries.values())
            for uploaded in entries:
                try:
                    if self._remove_file(uploaded.storage_path):
                        result.deleted_files += 1
                except OSError as exc:
                    message = f"{uploaded.original_name}: {exc}"
                    logger.error(
                        "Failed to delete stored file %s: %s", uploaded.storage_path, exc
                    )
                    result.errors.append(message)
            self._entries.clear()
            result.removed_entries = len(entries)
        logger.info(
            "Cleared %d upload(s), deleted %d file(s)",
            result.removed_entries,
            result.deleted_files,
        )
        return result

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, file_id: object) -> bool:
        with self._lock:
            return file_id in self._entries


__all__ = ["ClearResult", "UploadLedger"]
