"""
Integration test wiring: the real routers, middleware and error handlers,
with repositories and the mail transport swapped for in-memory fakes.
"""

from contextlib import asynccontextmanager

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app import include_routers, register_request_logging
from dependencies import (
    get_url_repository,
    get_user_repository,
    get_verification_repository,
)
from errors import register_error_handlers


def build_test_app(settings, users, codes, urls, mail) -> FastAPI:
    """Build the API with fakes injected via lifespan and dependency overrides."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.settings = settings
        app.state.mail_transport = mail
        yield

    app = FastAPI(lifespan=lifespan)
    register_request_logging(app)
    register_error_handlers(app)
    include_routers(app)

    app.dependency_overrides[get_user_repository] = lambda: users
    app.dependency_overrides[get_verification_repository] = lambda: codes
    app.dependency_overrides[get_url_repository] = lambda: urls
    return app


@pytest.fixture
def client(settings, users, codes, urls, mail):
    app = build_test_app(settings, users, codes, urls, mail)
    with TestClient(app) as c:
        yield c
