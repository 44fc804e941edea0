"""
URL shortening CRUD and click counting.
"""

from __future__ import annotations

from bson import ObjectId

from errors import NotFoundError
from repositories.url_repository import UrlRepository
from schemas.models.url import UrlDoc
from shared.context import RequestContext


class UrlService:
    def __init__(self, urls: UrlRepository) -> None:
        self._urls = urls

    async def create(
        self, user_id: ObjectId, origin: str, shorten: str, *, ctx: RequestContext
    ) -> UrlDoc:
        url = await self._urls.insert(user_id, origin, shorten)
        ctx.log.info("url_created", user_id=str(user_id), shorten=shorten)
        return url

    async def list_for_user(self, user_id: ObjectId) -> list[UrlDoc]:
        return await self._urls.find_by_user(user_id)

    async def resolve(self, shorten: str) -> str:
        """Return the origin for *shorten*, counting the click."""
        url = await self._urls.increment_clicks(shorten)
        if url is None:
            raise NotFoundError("Url not found")
        return url.origin

    async def delete_many(
        self, user_id: ObjectId, ids: list[ObjectId], *, ctx: RequestContext
    ) -> int:
        deleted = await self._urls.delete_many(user_id, ids)
        ctx.log.info("urls_deleted", user_id=str(user_id), count=deleted)
        return deleted
