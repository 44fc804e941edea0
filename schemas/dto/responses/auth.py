"""
Response DTOs for authentication and user endpoints.

UserResponse             — public user shape (never includes the password hash)
TokenPair                — access + refresh tokens
SignupResponse           — POST /auth/signup  (201)
LoginResponse            — POST /auth/login  (200)
RefreshResponse          — GET /auth/refresh  (200)
UserEnvelope             — GET/PATCH/DELETE /users/me  (200)
UnverifiedUserResponse   — POST /users  (200)
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    username: str
    email: str
    is_verified: bool
    created_at: datetime
    updated_at: datetime


class TokenPair(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(serialization_alias="accessToken")
    refresh_token: str = Field(serialization_alias="refreshToken")


class AccessToken(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(serialization_alias="accessToken")


class SignupResponse(BaseModel):
    """Response body for POST /auth/signup (201)."""

    message: str
    data: UserResponse


class LoginResponse(BaseModel):
    """Response body for POST /auth/login (200)."""

    message: str
    data: TokenPair


class RefreshResponse(BaseModel):
    """Response body for GET /auth/refresh (200)."""

    message: str
    data: AccessToken


class UserEnvelope(BaseModel):
    message: str
    data: UserResponse


class UnverifiedUser(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(serialization_alias="userId")
    email: str
    username: str


class UnverifiedUserResponse(BaseModel):
    """Response body for POST /users (200)."""

    message: str
    data: UnverifiedUser
