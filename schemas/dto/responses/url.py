"""
Response DTOs for URL endpoints.

UrlResponse        — single URL document shape
UrlEnvelope        — POST /urls (201)
UrlListResponse    — GET /urls (200)
OriginResponse     — GET /urls/{shorten} (200)
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UrlResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    origin: str
    shorten: str
    user_id: str
    clicks: int
    created_at: datetime
    updated_at: datetime


class UrlEnvelope(BaseModel):
    message: str
    data: UrlResponse


class UrlListResponse(BaseModel):
    message: str
    data: list[UrlResponse]


class OriginResponse(BaseModel):
    message: str
    data: str
