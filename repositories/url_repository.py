"""
URL store — the `urls` collection.
"""

from __future__ import annotations

from typing import Optional

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import DuplicateKeyError as MongoDuplicateKeyError

from repositories.base import as_duplicate_key_error
from schemas.models.base import utcnow
from schemas.models.url import UrlDoc


class UrlRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection

    async def insert(self, user_id: ObjectId, origin: str, shorten: str) -> UrlDoc:
        doc = UrlDoc(origin=origin, shorten=shorten, user_id=user_id)
        try:
            result = await self._col.insert_one(doc.to_mongo())
        except MongoDuplicateKeyError as e:
            raise as_duplicate_key_error(e) from e
        return doc.model_copy(update={"id": result.inserted_id})

    async def find_by_user(self, user_id: ObjectId) -> list[UrlDoc]:
        cursor = self._col.find({"user_id": user_id}).sort("created_at", DESCENDING)
        return [UrlDoc.from_mongo(raw) async for raw in cursor]

    async def increment_clicks(self, shorten: str) -> Optional[UrlDoc]:
        """Atomically add one click and return the updated document (None if missing)."""
        raw = await self._col.find_one_and_update(
            {"shorten": shorten},
            {"$inc": {"clicks": 1}, "$set": {"updated_at": utcnow()}},
            return_document=ReturnDocument.AFTER,
        )
        return UrlDoc.from_mongo(raw)

    async def delete_many(self, user_id: ObjectId, ids: list[ObjectId]) -> int:
        result = await self._col.delete_many({"_id": {"$in": ids}, "user_id": user_id})
        return result.deleted_count
