"""
User Directory — lookup/create/update of user records in the `users` collection.

Every read uses a projection that excludes ``password_hash``; the hash is only
reachable through get_password_hash(). Uniqueness of username and email is
enforced by unique indexes and surfaces as errors.DuplicateKeyError.
"""

from __future__ import annotations

from typing import Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import DuplicateKeyError as MongoDuplicateKeyError

from errors import NotFoundError
from repositories.base import as_duplicate_key_error
from schemas.models.base import utcnow
from schemas.models.user import UserDoc

_PUBLIC_PROJECTION = {"password_hash": 0}

USER_NOT_FOUND = "User not found"


class UserRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection

    async def create_user(
        self, username: str, email: str, password_hash: str
    ) -> UserDoc:
        doc = UserDoc(username=username, email=email, password_hash=password_hash)
        try:
            result = await self._col.insert_one(doc.to_mongo())
        except MongoDuplicateKeyError as e:
            raise as_duplicate_key_error(e) from e
        return doc.model_copy(update={"id": result.inserted_id, "password_hash": None})

    async def find_user_by_id(self, user_id: ObjectId) -> UserDoc:
        raw = await self._col.find_one({"_id": user_id}, _PUBLIC_PROJECTION)
        if raw is None:
            raise NotFoundError(USER_NOT_FOUND)
        return UserDoc.from_mongo(raw)

    async def find_user_by_identifier(
        self, *, username: Optional[str] = None, email: Optional[str] = None
    ) -> UserDoc:
        clauses = []
        if username is not None:
            clauses.append({"username": username})
        if email is not None:
            clauses.append({"email": email})
        if not clauses:
            raise ValueError("username or email is required")

        raw = await self._col.find_one({"$or": clauses}, _PUBLIC_PROJECTION)
        if raw is None:
            raise NotFoundError(USER_NOT_FOUND)
        return UserDoc.from_mongo(raw)

    async def get_password_hash(self, user_id: ObjectId) -> str:
        raw = await self._col.find_one({"_id": user_id}, {"password_hash": 1})
        if raw is None or not raw.get("password_hash"):
            raise NotFoundError(USER_NOT_FOUND)
        return raw["password_hash"]

    async def set_password_hash(self, user_id: ObjectId, password_hash: str) -> None:
        result = await self._col.update_one(
            {"_id": user_id},
            {"$set": {"password_hash": password_hash, "updated_at": utcnow()}},
        )
        if result.matched_count == 0:
            raise NotFoundError(USER_NOT_FOUND)

    async def set_username(self, user_id: ObjectId, username: str) -> UserDoc:
        try:
            raw = await self._col.find_one_and_update(
                {"_id": user_id},
                {"$set": {"username": username, "updated_at": utcnow()}},
                projection=_PUBLIC_PROJECTION,
                return_document=ReturnDocument.AFTER,
            )
        except MongoDuplicateKeyError as e:
            raise as_duplicate_key_error(e) from e
        if raw is None:
            raise NotFoundError(USER_NOT_FOUND)
        return UserDoc.from_mongo(raw)

    async def set_verified(self, email: str) -> None:
        # One-way: nothing in the directory ever sets is_verified back to False
        result = await self._col.update_one(
            {"email": email},
            {"$set": {"is_verified": True, "updated_at": utcnow()}},
        )
        if result.matched_count == 0:
            raise NotFoundError(USER_NOT_FOUND)

    async def exists(self, user_id: ObjectId) -> bool:
        return await self._col.count_documents({"_id": user_id}, limit=1) > 0

    async def delete_user(self, user_id: ObjectId) -> UserDoc:
        raw = await self._col.find_one_and_delete(
            {"_id": user_id}, projection=_PUBLIC_PROJECTION
        )
        if raw is None:
            raise NotFoundError(USER_NOT_FOUND)
        return UserDoc.from_mongo(raw)
