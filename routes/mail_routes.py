"""
Email verification endpoints.

POST /mail/send    — issue a code and send the verification email
GET  /mail/verify  — redeem a code (also the target of the email's direct link)
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from dependencies import get_request_context, get_verification_service
from schemas.dto.requests.mail import SendMailRequest, VerifyMailQuery
from schemas.dto.responses.common import MessageResponse
from services.verification_service import VerificationService
from shared.context import RequestContext

router = APIRouter(prefix="/mail", tags=["Mail"])


@router.post("/send", response_model=MessageResponse)
async def send(
    body: SendMailRequest,
    verification: VerificationService = Depends(get_verification_service),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    await verification.issue_and_send(body.email, ctx=ctx)
    return {"message": "Verification mail sent"}


@router.get("/verify", response_model=MessageResponse)
async def verify(
    query: Annotated[VerifyMailQuery, Query()],
    verification: VerificationService = Depends(get_verification_service),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    await verification.redeem(
        query.verification_code, ctx=ctx, email=query.email, user_id=query.user_id
    )
    return {"message": "Verification success"}
