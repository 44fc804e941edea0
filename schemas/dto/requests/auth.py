"""
Request DTOs for authentication endpoints.

SignupRequest          — POST /auth/signup
LoginRequest           — POST /auth/login
ChangePasswordRequest  — POST /auth/change-password
"""

from __future__ import annotations

from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, model_validator

from shared.validators import password_strength_errors, validate_handle

USERNAME_MESSAGE = (
    "Username must contain only letters, numbers, hyphens, underscores and dot"
)


def check_username(value: str) -> str:
    if not validate_handle(value):
        raise ValueError(USERNAME_MESSAGE)
    return value


def check_strong_password(value: str) -> str:
    missing = password_strength_errors(value)
    if missing:
        raise ValueError("Password is not strong enough: " + ", ".join(missing))
    return value


Username = Annotated[str, AfterValidator(check_username)]
StrongPassword = Annotated[str, AfterValidator(check_strong_password)]


class SignupRequest(BaseModel):
    """Request body for POST /auth/signup."""

    model_config = ConfigDict(populate_by_name=True)

    username: Username
    email: EmailStr
    password: StrongPassword


class LoginRequest(BaseModel):
    """Request body for POST /auth/login.

    Exactly one of ``username`` or ``email`` must be given.
    """

    model_config = ConfigDict(populate_by_name=True)

    username: Optional[Username] = None
    email: Optional[EmailStr] = None
    password: str = Field(min_length=1)

    @model_validator(mode="after")
    def _exactly_one_identifier(self) -> "LoginRequest":
        if (self.username is None) == (self.email is None):
            raise ValueError("Provide either email or username, not both")
        return self


class ChangePasswordRequest(BaseModel):
    """Request body for POST /auth/change-password."""

    model_config = ConfigDict(populate_by_name=True)

    password: str = Field(min_length=1)
    new_password: StrongPassword = Field(alias="newPassword")

    @model_validator(mode="after")
    def _must_differ(self) -> "ChangePasswordRequest":
        if self.password == self.new_password:
            raise ValueError("New password must be different from previous")
        return self
