"""
Verification Service — issue, deliver and redeem one-time email codes.

Code lifetime is enforced by the TTL index on the `verification` collection;
an expired code is indistinguishable from a wrong one.
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import urlencode

from bson import ObjectId

from config import AppSettings
from errors import BadRequestError, ConflictError, InternalError
from infrastructure.email.protocol import MailMessage, MailTransport
from repositories.user_repository import UserRepository
from repositories.verification_repository import VerificationCodeRepository
from schemas.models.user import UserDoc
from shared.context import RequestContext
from shared.generators import generate_verification_code

ALREADY_VERIFIED = "Account already verified"
INVALID_CODE = "Invalid verification code"

VERIFICATION_SUBJECT = "E-mail verification"
VERIFICATION_TEMPLATE = "email_verification"


class VerificationService:
    def __init__(
        self,
        settings: AppSettings,
        users: UserRepository,
        codes: VerificationCodeRepository,
        mail: MailTransport,
    ) -> None:
        self._settings = settings
        self._users = users
        self._codes = codes
        self._mail = mail

    def generate_code(self) -> int:
        return generate_verification_code()

    def _build_message(self, user: UserDoc, code: int) -> MailMessage:
        verification = self._settings.verification
        query = urlencode({"userId": str(user.id), "verificationCode": code})
        return MailMessage(
            to=user.email,
            subject=VERIFICATION_SUBJECT,
            template=VERIFICATION_TEMPLATE,
            context={
                "email": user.email,
                "username": user.username,
                "verification_code": code,
                "expires_in_minutes": max(
                    1, verification.verification_code_ttl_seconds // 60
                ),
                "website_verification_link": verification.client_verification_url
                + str(user.id),
                "direct_verification_link": f"{verification.direct_verification_url}?{query}",
            },
        )

    async def issue_and_send(self, email: str, *, ctx: RequestContext) -> None:
        user = await self._users.find_user_by_identifier(email=email)
        if user.is_verified:
            raise ConflictError(ALREADY_VERIFIED)

        code = self.generate_code()
        await self._codes.replace_code(user.email, code)

        try:
            await self._mail.send(self._build_message(user, code))
        except Exception as e:
            ctx.log.error(
                "verification_mail_failed",
                user_id=str(user.id),
                error=str(e),
                error_type=type(e).__name__,
            )
            # Match on the code so a newer one from a concurrent request survives
            await self._codes.delete_code(user.email, code)
            raise InternalError("Failed to send verification mail") from e

        ctx.log.info("verification_mail_sent", user_id=str(user.id))

    async def redeem(
        self,
        code: int,
        *,
        ctx: RequestContext,
        email: Optional[str] = None,
        user_id: Optional[ObjectId] = None,
    ) -> None:
        if user_id is not None:
            user = await self._users.find_user_by_id(user_id)
        elif email is not None:
            user = await self._users.find_user_by_identifier(email=email)
        else:
            raise ValueError("email or user_id is required")

        if user.is_verified:
            raise ConflictError(ALREADY_VERIFIED)

        # Deleting the record is the commit point: a concurrent redemption of
        # the same code finds nothing here.
        record = await self._codes.consume_code(user.email, code)
        if record is None:
            ctx.log.info("verification_rejected", user_id=str(user.id))
            raise BadRequestError(INVALID_CODE)

        await self._users.set_verified(user.email)
        ctx.log.info("user_verified", user_id=str(user.id))
