"""
Plant API — Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the whole suite.
How:   Every test gets its own application built by `create_app()` over a
       fresh SQLite file (aiosqlite), with the media host replaced by an
       AsyncMock. HTTP tests talk to the app in-process through httpx's
       ASGITransport.

Fixture Hierarchy (all function-scoped):
    ├── media_host:      AsyncMock standing in for Cloudinary
    ├── client_factory:  builds (app, client) pairs with Settings overrides
    │   ├── app
    │   └── client
    ├── auth_headers:    Authorization header for a freshly registered user
    └── db_session:      AsyncSession for service-level tests
"""

import os

# Before any plant_api import: plant_api.main builds an app at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-not-real-0123456789abcdef"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"

from contextlib import AsyncExitStack, asynccontextmanager
from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from plant_api.config import Settings
from plant_api.database import Base
from plant_api.main import create_app
from plant_api.services.media_base import MediaHost, UploadResult
from plant_api.services.upload_service import UploadService

TEST_JWT_SECRET = "test-secret-not-real-0123456789abcdef"

SAMPLE_IMAGE_URL = (
    "https://res.cloudinary.com/demo/image/upload/v1/"
    "Mekar/00000001/APP_PLANT_PHOTO/P-17_1700000000000.jpg"
)
SAMPLE_PUBLIC_ID = "Mekar/00000001/APP_PLANT_PHOTO/P-17_1700000000000"


def make_settings(tmp_path, **overrides) -> Settings:
    values = {
        "database_url": f"sqlite+aiosqlite:///{tmp_path / 'plants.db'}",
        "jwt_secret": TEST_JWT_SECRET,
        "bcrypt_rounds": 4,  # minimum cost keeps the suite fast
        "cloudinary_cloud_name": "demo",
        "cloudinary_api_key": "test-key",
        "cloudinary_api_secret": "test-secret",
        "environment": "test",
        "log_level": "WARNING",
        "auth_rate_limit_requests": 1000,
    }
    values.update(overrides)
    return Settings(**values)


@asynccontextmanager
async def _running_app(settings: Settings, media_host: MediaHost):
    app = create_app(settings)
    app.state.upload_service = UploadService(media_host, settings.upload_max_file_size)
    async with app.state.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield app
    finally:
        await app.state.engine.dispose()


@pytest.fixture
def sample_image_bytes() -> bytes:
    """Smallest JPEG the content-type checks will accept (SOI + JFIF + EOI)."""
    return (
        b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00"
        b"\xff\xd9"
    )


@pytest.fixture
def media_host():
    """
    Media host double. `upload_image` is an AsyncMock, so tests can assert
    whether (and with what) the remote upload would have been called.
    """
    host = AsyncMock(spec=MediaHost)
    host.upload_image.return_value = UploadResult(url=SAMPLE_IMAGE_URL, public_id=SAMPLE_PUBLIC_ID)
    return host


@pytest_asyncio.fixture
async def client_factory(tmp_path, media_host):
    """
    Build an app with Settings overrides and an HTTP client for it.

    Usage:
        app, client = await client_factory(require_auth_for_resources=True)
    """
    async with AsyncExitStack() as stack:

        async def factory(**overrides):
            app = await stack.enter_async_context(
                _running_app(make_settings(tmp_path, **overrides), media_host)
            )
            # raise_app_exceptions=False: let the catch-all 500 handler answer
            transport = ASGITransport(app=app, raise_app_exceptions=False)
            client = await stack.enter_async_context(
                AsyncClient(transport=transport, base_url="http://test")
            )
            return app, client

        yield factory


@pytest_asyncio.fixture
async def api(client_factory):
    return await client_factory()


@pytest.fixture
def app(api):
    return api[0]


@pytest.fixture
def client(api) -> AsyncClient:
    return api[1]


@pytest_asyncio.fixture
async def auth_headers(client):
    """Register + log in `fern`; return the bearer header for that user."""
    await client.post("/auth/register", json={"username": "fern", "password": "s3cret-pass"})
    response = await client.post("/auth/login", json={"username": "fern", "password": "s3cret-pass"})
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest_asyncio.fixture
async def db_session(app) -> AsyncGenerator:
    async with app.state.session_factory() as session:
        yield session
