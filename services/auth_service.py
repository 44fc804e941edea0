"""
Credential Service — password hashing, JWT issuance, signup, login and
password change.

Configuration (hash cost, secrets, lifetimes) is read from the AppSettings
object at call time. Password hashing is CPU-bound, so the async
orchestration methods run it in a worker thread.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional

import jwt
from bson import ObjectId

from config import AppSettings
from errors import AuthenticationError, BadRequestError, ForbiddenError
from repositories.user_repository import UserRepository
from schemas.models.user import UserDoc
from shared.context import RequestContext
from shared.crypto import hash_password, verify_password
from shared.tokens import TOKEN_TYPE_ACCESS, TOKEN_TYPE_REFRESH, decode_token, encode_token

PASSWORD_INCORRECT = "Password is incorrect"
VERIFY_EMAIL_FIRST = "Please verify your email before logging in."


@dataclass(frozen=True)
class JwtPayload:
    sub: str


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class AuthService:
    def __init__(self, settings: AppSettings, users: UserRepository) -> None:
        self._settings = settings
        self._users = users

    # ── Hashing ──────────────────────────────────────────────────────────────

    def hash(self, plain_text: str) -> str:
        return hash_password(
            plain_text, time_cost=self._settings.password.password_hash_time_cost
        )

    def compare_hash(self, plain_text: str, hashed_text: str) -> bool:
        return verify_password(plain_text, hashed_text)

    # ── Tokens ───────────────────────────────────────────────────────────────

    def generate_access_token(self, payload: JwtPayload) -> str:
        jwt_settings = self._settings.jwt
        return encode_token(
            payload.sub,
            secret=jwt_settings.jwt_secret_access_token,
            ttl_seconds=jwt_settings.jwt_expiration_access_token,
            token_type=TOKEN_TYPE_ACCESS,
            algorithm=jwt_settings.jwt_algorithm,
        )

    def generate_refresh_token(self, payload: JwtPayload) -> str:
        jwt_settings = self._settings.jwt
        return encode_token(
            payload.sub,
            secret=jwt_settings.jwt_secret_refresh_token,
            ttl_seconds=jwt_settings.jwt_expiration_refresh_token,
            token_type=TOKEN_TYPE_REFRESH,
            algorithm=jwt_settings.jwt_algorithm,
        )

    def verify_access_token(self, token: str) -> JwtPayload:
        jwt_settings = self._settings.jwt
        return self._verify(
            token, jwt_settings.jwt_secret_access_token, TOKEN_TYPE_ACCESS
        )

    def verify_refresh_token(self, token: str) -> JwtPayload:
        jwt_settings = self._settings.jwt
        return self._verify(
            token, jwt_settings.jwt_secret_refresh_token, TOKEN_TYPE_REFRESH
        )

    def _verify(self, token: str, secret: str, token_type: str) -> JwtPayload:
        try:
            claims = decode_token(
                token,
                secret=secret,
                token_type=token_type,
                algorithm=self._settings.jwt.jwt_algorithm,
            )
        except jwt.InvalidTokenError as e:
            raise AuthenticationError("Token not valid or not present") from e
        return JwtPayload(sub=claims["sub"])

    def issue_tokens(self, user_id: ObjectId) -> TokenPair:
        payload = JwtPayload(sub=str(user_id))
        return TokenPair(
            access_token=self.generate_access_token(payload),
            refresh_token=self.generate_refresh_token(payload),
        )

    # ── Account flows ────────────────────────────────────────────────────────

    async def signup(
        self, username: str, email: str, password: str, *, ctx: RequestContext
    ) -> UserDoc:
        hashed_password = await asyncio.to_thread(self.hash, password)
        user = await self._users.create_user(username, email, hashed_password)
        ctx.log.info("user_signed_up", user_id=str(user.id))
        return user

    async def login(
        self,
        password: str,
        *,
        ctx: RequestContext,
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> TokenPair:
        if (username is None) == (email is None):
            raise ValueError("exactly one of username or email is required")

        user = await self._users.find_user_by_identifier(username=username, email=email)

        # Unverified accounts are refused before the password is checked
        if not user.is_verified:
            ctx.log.info("login_rejected", user_id=str(user.id), reason="unverified")
            raise ForbiddenError(VERIFY_EMAIL_FIRST)

        stored_hash = await self._users.get_password_hash(user.id)
        if not await asyncio.to_thread(self.compare_hash, password, stored_hash):
            ctx.log.info("login_rejected", user_id=str(user.id), reason="bad_password")
            raise BadRequestError(PASSWORD_INCORRECT)

        ctx.log.info("user_logged_in", user_id=str(user.id))
        return self.issue_tokens(user.id)

    async def refresh(self, user_id: ObjectId, *, ctx: RequestContext) -> str:
        """Mint a new access token for the subject of a verified refresh token."""
        if not await self._users.exists(user_id):
            raise AuthenticationError("Token not valid or not present")
        ctx.log.info("access_token_refreshed", user_id=str(user_id))
        return self.generate_access_token(JwtPayload(sub=str(user_id)))

    async def change_password(
        self,
        user_id: ObjectId,
        current_password: str,
        new_password: str,
        *,
        ctx: RequestContext,
    ) -> None:
        stored_hash = await self._users.get_password_hash(user_id)
        if not await asyncio.to_thread(self.compare_hash, current_password, stored_hash):
            raise BadRequestError(PASSWORD_INCORRECT)

        new_hash = await asyncio.to_thread(self.hash, new_password)
        await self._users.set_password_hash(user_id, new_hash)
        ctx.log.info("password_changed", user_id=str(user_id))
