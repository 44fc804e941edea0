"""
Verification code document model.

Maps to the `verification` MongoDB collection.

One document per email (unique index); issuing a new code replaces the whole
document. A TTL index on `created_at` lets MongoDB drop stale codes, so an
expired code simply no longer exists.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from schemas.models.base import MongoBaseModel, utcnow

VERIFICATION_COLLECTION = "verification"


class VerificationCodeDoc(MongoBaseModel):
    """Document model for the `verification` collection."""

    email: str
    verification_code: int = Field(ge=100000, le=999999)
    created_at: datetime = Field(default_factory=utcnow)
