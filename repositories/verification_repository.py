"""
Verification Code Store — the `verification` collection.

At most one record per email: replace_code() is a single atomic upsert keyed
on email. consume_code() is a single atomic find-and-delete keyed on
{email, verification_code}, so of two concurrent redemptions only one gets
the record back.
"""

from __future__ import annotations

from typing import Optional

from pymongo import ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection

from schemas.models.verification import VerificationCodeDoc


class VerificationCodeRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection

    async def replace_code(self, email: str, code: int) -> VerificationCodeDoc:
        doc = VerificationCodeDoc(email=email, verification_code=code)
        raw = await self._col.find_one_and_replace(
            {"email": email},
            doc.to_mongo(),
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return VerificationCodeDoc.from_mongo(raw)

    async def find_code(self, email: str, code: int) -> Optional[VerificationCodeDoc]:
        raw = await self._col.find_one({"email": email, "verification_code": code})
        return VerificationCodeDoc.from_mongo(raw)

    async def consume_code(
        self, email: str, code: int
    ) -> Optional[VerificationCodeDoc]:
        raw = await self._col.find_one_and_delete(
            {"email": email, "verification_code": code}
        )
        return VerificationCodeDoc.from_mongo(raw)

    async def delete_code(self, email: str, code: Optional[int] = None) -> None:
        query: dict = {"email": email}
        if code is not None:
            query["verification_code"] = code
        await self._col.delete_one(query)
