"""
User account operations behind the /users routes.
"""

from __future__ import annotations

from typing import Optional

from bson import ObjectId

from errors import ForbiddenError
from repositories.user_repository import UserRepository
from schemas.models.user import UserDoc
from shared.context import RequestContext


class UserService:
    def __init__(self, users: UserRepository) -> None:
        self._users = users

    async def get_profile(self, user_id: ObjectId) -> UserDoc:
        return await self._users.find_user_by_id(user_id)

    async def update_username(
        self, user_id: ObjectId, username: str, *, ctx: RequestContext
    ) -> UserDoc:
        user = await self._users.set_username(user_id, username)
        ctx.log.info("username_updated", user_id=str(user_id))
        return user

    async def delete_account(self, user_id: ObjectId, *, ctx: RequestContext) -> UserDoc:
        user = await self._users.delete_user(user_id)
        ctx.log.warning("user_deleted", user_id=str(user_id))
        return user

    async def find_unverified(
        self,
        *,
        user_id: Optional[ObjectId] = None,
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> UserDoc:
        """Look up a pending account; verified accounts are refused."""
        if user_id is not None:
            user = await self._users.find_user_by_id(user_id)
        else:
            user = await self._users.find_user_by_identifier(
                username=username, email=email
            )
        if user.is_verified:
            raise ForbiddenError("Account already verified")
        return user
