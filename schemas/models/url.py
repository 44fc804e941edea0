"""
URL document model.

Maps to the `urls` MongoDB collection. `shorten` is the public short code
(unique); `clicks` is incremented atomically on every resolution.
"""

from __future__ import annotations

from pydantic import Field

from schemas.models.base import PyObjectId, TimestampedDoc

URLS_COLLECTION = "urls"


class UrlDoc(TimestampedDoc):
    """Document model for the `urls` collection."""

    origin: str
    shorten: str
    user_id: PyObjectId
    clicks: int = Field(default=0, ge=0)

    def to_public(self) -> dict:
        return self.model_dump(mode="json")
