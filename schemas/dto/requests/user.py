"""
Request DTOs for user account endpoints.

FindUnverifiedUserRequest — POST /users
UpdateUserRequest         — PATCH /users/me
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from schemas.dto.requests.auth import Username
from schemas.models.base import PyObjectId


class FindUnverifiedUserRequest(BaseModel):
    """Request body for POST /users.

    Used by the client's "verify your email" page to look up a pending account.
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[PyObjectId] = Field(default=None, alias="userId")
    username: Optional[Username] = None
    email: Optional[EmailStr] = None

    @model_validator(mode="after")
    def _at_least_one_identifier(self) -> "FindUnverifiedUserRequest":
        if self.user_id is None and self.username is None and self.email is None:
            raise ValueError("Provide at least one, user ID or email or username")
        return self


class UpdateUserRequest(BaseModel):
    """Request body for PATCH /users/me."""

    model_config = ConfigDict(populate_by_name=True)

    username: Username
