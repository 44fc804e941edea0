"""
Request DTOs for URL shortening and management endpoints.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from schemas.models.base import PyObjectId
from shared.validators import validate_handle, validate_url


def check_origin(value: str) -> str:
    if not validate_url(value):
        raise ValueError("origin must be a valid http or https URL")
    return value


def check_shorten(value: str) -> str:
    if not validate_handle(value):
        raise ValueError(
            "shorten must contain only letters, numbers, hyphens, underscores and dot"
        )
    return value


class CreateUrlRequest(BaseModel):
    """Request body for POST /urls."""

    model_config = ConfigDict(populate_by_name=True)

    origin: Annotated[str, AfterValidator(check_origin)]
    shorten: Annotated[str, AfterValidator(check_shorten)]


class DeleteUrlsRequest(BaseModel):
    """Request body for DELETE /urls."""

    model_config = ConfigDict(populate_by_name=True)

    ids_to_delete: list[PyObjectId] = Field(alias="idsToDelete", min_length=1)
