"""
Shared fixtures: settings, request context and in-memory stand-ins for the
MongoDB repositories and the mail transport.

The fakes yield to the event loop (``asyncio.sleep(0)``) before touching
state so tests that run operations concurrently with ``asyncio.gather``
actually interleave them.
"""

from __future__ import annotations

import asyncio
from typing import Optional, Union

import pytest
from bson import ObjectId

from config import (
    AppSettings,
    DatabaseSettings,
    EmailSettings,
    JWTSettings,
    PasswordSettings,
    VerificationSettings,
)
from errors import DuplicateKeyError, NotFoundError
from infrastructure.email.protocol import MailDeliveryError, MailMessage
from schemas.models.base import utcnow
from schemas.models.url import UrlDoc
from schemas.models.user import UserDoc
from schemas.models.verification import VerificationCodeDoc
from services.auth_service import AuthService
from services.url_service import UrlService
from services.user_service import UserService
from services.verification_service import VerificationService
from shared.context import RequestContext

STRONG_PASSWORD = "Str0ng!Pass"
OTHER_STRONG_PASSWORD = "An0ther!Pass"


# ── Fakes ─────────────────────────────────────────────────────────────────────


class FakeUserRepository:
    """Dict-backed UserRepository with the same uniqueness and not-found rules."""

    def __init__(self) -> None:
        self.docs: dict[ObjectId, UserDoc] = {}

    @staticmethod
    def _public(user: UserDoc) -> UserDoc:
        return user.model_copy(update={"password_hash": None})

    def _get(self, user_id: ObjectId) -> UserDoc:
        user = self.docs.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def _check_unique(self, exclude: Optional[ObjectId] = None, **fields) -> None:
        for user in self.docs.values():
            if user.id == exclude:
                continue
            for name, value in fields.items():
                if getattr(user, name) == value:
                    raise DuplicateKeyError(name)

    async def create_user(self, username: str, email: str, password_hash: str) -> UserDoc:
        await asyncio.sleep(0)
        self._check_unique(username=username, email=email)
        user = UserDoc(
            id=ObjectId(), username=username, email=email, password_hash=password_hash
        )
        self.docs[user.id] = user
        return self._public(user)

    async def find_user_by_id(self, user_id: ObjectId) -> UserDoc:
        await asyncio.sleep(0)
        return self._public(self._get(user_id))

    async def find_user_by_identifier(
        self, *, username: Optional[str] = None, email: Optional[str] = None
    ) -> UserDoc:
        await asyncio.sleep(0)
        for user in self.docs.values():
            if (username is not None and user.username == username) or (
                email is not None and user.email == email
            ):
                return self._public(user)
        raise NotFoundError("User not found")

    async def get_password_hash(self, user_id: ObjectId) -> str:
        await asyncio.sleep(0)
        return self._get(user_id).password_hash

    async def set_password_hash(self, user_id: ObjectId, password_hash: str) -> None:
        await asyncio.sleep(0)
        user = self._get(user_id)
        self.docs[user_id] = user.model_copy(
            update={"password_hash": password_hash, "updated_at": utcnow()}
        )

    async def set_username(self, user_id: ObjectId, username: str) -> UserDoc:
        await asyncio.sleep(0)
        user = self._get(user_id)
        self._check_unique(exclude=user_id, username=username)
        updated = user.model_copy(update={"username": username, "updated_at": utcnow()})
        self.docs[user_id] = updated
        return self._public(updated)

    async def set_verified(self, email: str) -> None:
        await asyncio.sleep(0)
        for user_id, user in self.docs.items():
            if user.email == email:
                self.docs[user_id] = user.model_copy(update={"is_verified": True})
                return
        raise NotFoundError("User not found")

    async def exists(self, user_id: ObjectId) -> bool:
        await asyncio.sleep(0)
        return user_id in self.docs

    async def delete_user(self, user_id: ObjectId) -> UserDoc:
        await asyncio.sleep(0)
        user = self._get(user_id)
        del self.docs[user_id]
        return self._public(user)

    # Test helpers

    def get_by_email(self, email: str) -> UserDoc:
        return next(u for u in self.docs.values() if u.email == email)


class FakeCodeStore:
    """Dict-backed VerificationCodeRepository keyed on email."""

    def __init__(self) -> None:
        self.records: dict[str, VerificationCodeDoc] = {}

    async def replace_code(self, email: str, code: int) -> VerificationCodeDoc:
        await asyncio.sleep(0)
        record = VerificationCodeDoc(email=email, verification_code=code)
        self.records[email] = record
        return record

    async def find_code(self, email: str, code: int) -> Optional[VerificationCodeDoc]:
        await asyncio.sleep(0)
        record = self.records.get(email)
        if record is None or record.verification_code != code:
            return None
        return record

    async def consume_code(self, email: str, code: int) -> Optional[VerificationCodeDoc]:
        await asyncio.sleep(0)
        # Check and delete happen without yielding, like find_one_and_delete
        record = self.records.get(email)
        if record is None or record.verification_code != code:
            return None
        del self.records[email]
        return record

    async def delete_code(self, email: str, code: Optional[int] = None) -> None:
        await asyncio.sleep(0)
        record = self.records.get(email)
        if record is None:
            return
        if code is None or record.verification_code == code:
            del self.records[email]

    def expire(self, email: str) -> None:
        """Drop the record the way the TTL index would."""
        self.records.pop(email, None)


class FakeMailTransport:
    def __init__(self) -> None:
        self.sent: list[MailMessage] = []
        # True raises MailDeliveryError; an exception instance is raised as-is
        self.fail: Union[bool, Exception] = False

    async def send(self, message: MailMessage) -> None:
        await asyncio.sleep(0)
        if isinstance(self.fail, Exception):
            raise self.fail
        if self.fail:
            raise MailDeliveryError("provider unavailable")
        self.sent.append(message)

    def last_code(self, email: str) -> int:
        for message in reversed(self.sent):
            if message.to == email:
                return message.context["verification_code"]
        raise AssertionError(f"no mail sent to {email}")


class FakeUrlRepository:
    def __init__(self) -> None:
        self.docs: dict[ObjectId, UrlDoc] = {}

    async def insert(self, user_id: ObjectId, origin: str, shorten: str) -> UrlDoc:
        await asyncio.sleep(0)
        if any(u.shorten == shorten for u in self.docs.values()):
            raise DuplicateKeyError("shorten")
        url = UrlDoc(id=ObjectId(), origin=origin, shorten=shorten, user_id=user_id)
        self.docs[url.id] = url
        return url

    async def find_by_user(self, user_id: ObjectId) -> list[UrlDoc]:
        await asyncio.sleep(0)
        owned = [u for u in reversed(list(self.docs.values())) if u.user_id == user_id]
        return sorted(owned, key=lambda u: u.created_at, reverse=True)

    async def increment_clicks(self, shorten: str) -> Optional[UrlDoc]:
        await asyncio.sleep(0)
        for url_id, url in self.docs.items():
            if url.shorten == shorten:
                updated = url.model_copy(update={"clicks": url.clicks + 1})
                self.docs[url_id] = updated
                return updated
        return None

    async def delete_many(self, user_id: ObjectId, ids: list[ObjectId]) -> int:
        await asyncio.sleep(0)
        doomed = [i for i in ids if i in self.docs and self.docs[i].user_id == user_id]
        for url_id in doomed:
            del self.docs[url_id]
        return len(doomed)


# ── Fixtures ──────────────────────────────────────────────────────────────────


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        db=DatabaseSettings(mongodb_uri="mongodb://localhost:27017/"),
        jwt=JWTSettings(
            jwt_secret_access_token="access-secret-for-tests",
            jwt_secret_refresh_token="refresh-secret-for-tests",
        ),
        password=PasswordSettings(password_hash_time_cost=1),
        verification=VerificationSettings(
            client_verification_url="https://app.example.com/verify/",
            direct_verification_url="https://api.example.com/mail/verify",
        ),
        email=EmailSettings(zepto_api_token="test-token"),
    )


@pytest.fixture
def ctx() -> RequestContext:
    return RequestContext.new("req_test")


@pytest.fixture
def users() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def codes() -> FakeCodeStore:
    return FakeCodeStore()


@pytest.fixture
def mail() -> FakeMailTransport:
    return FakeMailTransport()


@pytest.fixture
def urls() -> FakeUrlRepository:
    return FakeUrlRepository()


@pytest.fixture
def auth_service(settings, users) -> AuthService:
    return AuthService(settings, users)


@pytest.fixture
def verification_service(settings, users, codes, mail) -> VerificationService:
    return VerificationService(settings, users, codes, mail)


@pytest.fixture
def user_service(users) -> UserService:
    return UserService(users)


@pytest.fixture
def url_service(urls) -> UrlService:
    return UrlService(urls)
