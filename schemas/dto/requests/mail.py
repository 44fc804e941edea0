"""
Request DTOs for the email verification endpoints.

SendMailRequest   — POST /mail/send
VerifyMailQuery   — GET /mail/verify  (query string; links in the email hit it directly)
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from schemas.models.base import PyObjectId
from shared.generators import VERIFICATION_CODE_MAX, VERIFICATION_CODE_MIN


class SendMailRequest(BaseModel):
    """Request body for POST /mail/send."""

    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr


class VerifyMailQuery(BaseModel):
    """Query parameters for GET /mail/verify.

    At least one of ``email`` or ``userId`` is required; ``userId`` wins when
    both are present.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: Optional[EmailStr] = None
    user_id: Optional[PyObjectId] = Field(default=None, alias="userId")
    verification_code: int = Field(
        alias="verificationCode", ge=VERIFICATION_CODE_MIN, le=VERIFICATION_CODE_MAX
    )

    @model_validator(mode="after")
    def _at_least_one_identifier(self) -> "VerifyMailQuery":
        if self.email is None and self.user_id is None:
            raise ValueError("Provide at least email or user ID")
        return self
