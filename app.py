"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from pymongo.asynchronous.mongo_client import AsyncMongoClient

from config import AppSettings
from errors import register_error_handlers
from infrastructure.email.zeptomail import ZeptoMailTransport
from infrastructure.http_client import HttpClient
from repositories.indexes import ensure_indexes
from routes.auth_routes import router as auth_router
from routes.health_routes import router as health_router
from routes.mail_routes import router as mail_router
from routes.url_routes import router as url_router
from routes.user_routes import router as user_router
from shared.context import RequestContext
from shared.logging import setup_logging

REQUEST_ID_HEADER = "X-Req-Id"
RESPONSE_REQUEST_ID_HEADER = "X-Request-ID"


def register_request_logging(app: FastAPI) -> None:
    """Attach a RequestContext to every request and log its completion."""

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        ctx = RequestContext.new(request.headers.get(REQUEST_ID_HEADER))
        request.state.context = ctx
        start = time.perf_counter()

        response = await call_next(request)

        ctx.log.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        response.headers[RESPONSE_REQUEST_ID_HEADER] = ctx.request_id
        return response


def include_routers(app: FastAPI) -> None:
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(mail_router)
    app.include_router(user_router)
    app.include_router(url_router)


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Create and return a fully configured FastAPI application."""
    if settings is None:
        settings = AppSettings()

    setup_logging(settings.logging, env=settings.env)

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
            profiles_sample_rate=settings.sentry.sentry_profile_sample_rate,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        mongo_client: AsyncMongoClient = AsyncMongoClient(settings.db.mongodb_uri)
        app.state.mongo_client = mongo_client
        app.state.db = mongo_client[settings.db.db_name]
        app.state.settings = settings

        await ensure_indexes(
            app.state.db, settings.verification.verification_code_ttl_seconds
        )

        http_client = HttpClient(timeout=settings.email.email_http_timeout_seconds)
        app.state.http_client = http_client
        app.state.mail_transport = ZeptoMailTransport(settings.email, http_client)

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        await http_client.aclose()
        await mongo_client.close()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_request_logging(app)

    register_error_handlers(app)
    include_routers(app)

    return app
