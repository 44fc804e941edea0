"""
Authentication endpoints.

POST /auth/signup           — create an unverified account
POST /auth/login            — exchange username|email + password for tokens
GET  /auth/refresh          — new access token from a refresh-token bearer
POST /auth/change-password  — replace the caller's password
"""

from __future__ import annotations

from bson import ObjectId
from fastapi import APIRouter, Depends, status

from dependencies import (
    get_auth_service,
    get_current_user_id,
    get_refresh_subject,
    get_request_context,
)
from schemas.dto.requests.auth import ChangePasswordRequest, LoginRequest, SignupRequest
from schemas.dto.responses.auth import LoginResponse, RefreshResponse, SignupResponse
from schemas.dto.responses.common import MessageResponse
from services.auth_service import AuthService
from shared.context import RequestContext

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/signup", status_code=status.HTTP_201_CREATED, response_model=SignupResponse
)
async def signup(
    body: SignupRequest,
    auth: AuthService = Depends(get_auth_service),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    user = await auth.signup(body.username, body.email, body.password, ctx=ctx)
    return {"message": "User successfully created", "data": user.to_public()}


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    tokens = await auth.login(
        body.password, ctx=ctx, username=body.username, email=body.email
    )
    return {
        "message": "Login success",
        "data": {
            "access_token": tokens.access_token,
            "refresh_token": tokens.refresh_token,
        },
    }


@router.get("/refresh", response_model=RefreshResponse)
async def refresh(
    user_id: ObjectId = Depends(get_refresh_subject),
    auth: AuthService = Depends(get_auth_service),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    access_token = await auth.refresh(user_id, ctx=ctx)
    return {"message": "Refresh token success", "data": {"access_token": access_token}}


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    body: ChangePasswordRequest,
    user_id: ObjectId = Depends(get_current_user_id),
    auth: AuthService = Depends(get_auth_service),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    await auth.change_password(user_id, body.password, body.new_password, ctx=ctx)
    return {"message": "Password successfully changed"}
