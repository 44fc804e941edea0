"""
Short URL endpoints.

POST   /urls            — create a short URL owned by the caller
GET    /urls            — the caller's URLs, newest first
GET    /urls/{shorten}  — resolve a short code (public; counts a click)
DELETE /urls            — delete some of the caller's URLs by id
"""

from __future__ import annotations

from bson import ObjectId
from fastapi import APIRouter, Depends, status

from dependencies import get_current_user_id, get_request_context, get_url_service
from schemas.dto.requests.url import CreateUrlRequest, DeleteUrlsRequest
from schemas.dto.responses.common import MessageResponse
from schemas.dto.responses.url import OriginResponse, UrlEnvelope, UrlListResponse
from services.url_service import UrlService
from shared.context import RequestContext

router = APIRouter(prefix="/urls", tags=["Urls"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=UrlEnvelope)
async def create_url(
    body: CreateUrlRequest,
    user_id: ObjectId = Depends(get_current_user_id),
    urls: UrlService = Depends(get_url_service),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    url = await urls.create(user_id, body.origin, body.shorten, ctx=ctx)
    return {"message": "Url successfully created", "data": url.to_public()}


@router.get("", response_model=UrlListResponse)
async def list_urls(
    user_id: ObjectId = Depends(get_current_user_id),
    urls: UrlService = Depends(get_url_service),
) -> dict:
    items = await urls.list_for_user(user_id)
    return {
        "message": "Url(s) successfully retrieved",
        "data": [url.to_public() for url in items],
    }


@router.get("/{shorten}", response_model=OriginResponse)
async def resolve_url(
    shorten: str,
    urls: UrlService = Depends(get_url_service),
) -> dict:
    origin = await urls.resolve(shorten)
    return {"message": "Original url found", "data": origin}


@router.delete("", response_model=MessageResponse)
async def delete_urls(
    body: DeleteUrlsRequest,
    user_id: ObjectId = Depends(get_current_user_id),
    urls: UrlService = Depends(get_url_service),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    deleted = await urls.delete_many(user_id, body.ids_to_delete, ctx=ctx)
    return {"message": f"{deleted} Url(s) successfully deleted"}
