"""Schemas for the upload and clear endpoints."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class UploadResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool
    file_id: str
    original_name: str
    size: int
    file_path: str


class ClearResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool
    message: str
    deletion_errors: list[str] | None = None


__all__ = ["ClearResponse", "UploadResponse"]
