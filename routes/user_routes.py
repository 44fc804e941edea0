"""
User account endpoints.

POST   /users     — look up a pending (unverified) account
GET    /users/me  — the caller's profile
PATCH  /users/me  — change the caller's username
DELETE /users/me  — delete the caller's account
"""

from __future__ import annotations

from bson import ObjectId
from fastapi import APIRouter, Depends

from dependencies import get_current_user_id, get_request_context, get_user_service
from schemas.dto.requests.user import FindUnverifiedUserRequest, UpdateUserRequest
from schemas.dto.responses.auth import UnverifiedUserResponse, UserEnvelope
from services.user_service import UserService
from shared.context import RequestContext

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UnverifiedUserResponse)
async def find_unverified_user(
    body: FindUnverifiedUserRequest,
    users: UserService = Depends(get_user_service),
) -> dict:
    user = await users.find_unverified(
        user_id=body.user_id, username=body.username, email=body.email
    )
    return {
        "message": "User (unverified) successfully retrieved",
        "data": {"user_id": str(user.id), "email": user.email, "username": user.username},
    }


@router.get("/me", response_model=UserEnvelope)
async def get_me(
    user_id: ObjectId = Depends(get_current_user_id),
    users: UserService = Depends(get_user_service),
) -> dict:
    user = await users.get_profile(user_id)
    return {"message": "User successfully retrieved", "data": user.to_public()}


@router.patch("/me", response_model=UserEnvelope)
async def update_me(
    body: UpdateUserRequest,
    user_id: ObjectId = Depends(get_current_user_id),
    users: UserService = Depends(get_user_service),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    user = await users.update_username(user_id, body.username, ctx=ctx)
    return {"message": "User successfully updated", "data": user.to_public()}


@router.delete("/me", response_model=UserEnvelope)
async def delete_me(
    user_id: ObjectId = Depends(get_current_user_id),
    users: UserService = Depends(get_user_service),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    user = await users.delete_account(user_id, ctx=ctx)
    return {"message": "User successfully deleted", "data": user.to_public()}
