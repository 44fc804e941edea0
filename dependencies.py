"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain functions used with
FastAPI's Depends() system. Tests swap repositories and the mail transport
through ``app.dependency_overrides``.
"""

from __future__ import annotations

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config import AppSettings
from errors import AuthenticationError
from infrastructure.email.protocol import MailTransport
from repositories.url_repository import UrlRepository
from repositories.user_repository import UserRepository
from repositories.verification_repository import VerificationCodeRepository
from schemas.models.url import URLS_COLLECTION
from schemas.models.user import USERS_COLLECTION
from schemas.models.verification import VERIFICATION_COLLECTION
from services.auth_service import AuthService
from services.url_service import UrlService
from services.user_service import UserService
from services.verification_service import VerificationService
from shared.context import RequestContext

TOKEN_INVALID = "Token not valid or not present"

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


async def get_db(request: Request):
    """Return the async MongoDB database from app.state."""
    return request.app.state.db


def get_request_context(request: Request) -> RequestContext:
    """Return the RequestContext built by the request middleware."""
    ctx = getattr(request.state, "context", None)
    if ctx is None:
        ctx = RequestContext.new()
        request.state.context = ctx
    return ctx


def get_mail_transport(request: Request) -> MailTransport:
    return request.app.state.mail_transport


# ── Repositories ─────────────────────────────────────────────────────────────


def get_user_repository(db=Depends(get_db)) -> UserRepository:
    return UserRepository(db[USERS_COLLECTION])


def get_verification_repository(db=Depends(get_db)) -> VerificationCodeRepository:
    return VerificationCodeRepository(db[VERIFICATION_COLLECTION])


def get_url_repository(db=Depends(get_db)) -> UrlRepository:
    return UrlRepository(db[URLS_COLLECTION])


# ── Services ─────────────────────────────────────────────────────────────────


def get_auth_service(
    settings: AppSettings = Depends(get_settings),
    users: UserRepository = Depends(get_user_repository),
) -> AuthService:
    return AuthService(settings, users)


def get_verification_service(
    settings: AppSettings = Depends(get_settings),
    users: UserRepository = Depends(get_user_repository),
    codes: VerificationCodeRepository = Depends(get_verification_repository),
    mail: MailTransport = Depends(get_mail_transport),
) -> VerificationService:
    return VerificationService(settings, users, codes, mail)


def get_user_service(
    users: UserRepository = Depends(get_user_repository),
) -> UserService:
    return UserService(users)


def get_url_service(urls: UrlRepository = Depends(get_url_repository)) -> UrlService:
    return UrlService(urls)


# ── Auth ─────────────────────────────────────────────────────────────────────


def _subject_to_object_id(sub: str) -> ObjectId:
    try:
        return ObjectId(sub)
    except (InvalidId, TypeError) as e:
        raise AuthenticationError(TOKEN_INVALID) from e


def _bearer_token(credentials: HTTPAuthorizationCredentials | None) -> str:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError(TOKEN_INVALID)
    return credentials.credentials


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    auth: AuthService = Depends(get_auth_service),
    users: UserRepository = Depends(get_user_repository),
) -> ObjectId:
    """Resolve the caller from an access-token bearer; the user must still exist."""
    payload = auth.verify_access_token(_bearer_token(credentials))
    user_id = _subject_to_object_id(payload.sub)
    if not await users.exists(user_id):
        raise AuthenticationError(TOKEN_INVALID)
    return user_id


def get_refresh_subject(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    auth: AuthService = Depends(get_auth_service),
) -> ObjectId:
    """Resolve the subject of a refresh-token bearer (existence is checked by the service)."""
    payload = auth.verify_refresh_token(_bearer_token(credentials))
    return _subject_to_object_id(payload.sub)
