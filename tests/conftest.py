"""Shared test fixtures for pytest.

We set minimal env defaults (e.g. SECRET_KEY) early so importing modules
that instantiate settings (core.security) succeeds without needing an
external .env file during tests.
"""

import os
from collections.abc import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient


os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENVIRONMENT", "test")

from pydantic_ai import models  # noqa: E402

from dependencies.auth import get_current_user  # noqa: E402
from dependencies.db import get_db  # noqa: E402
from main import app  # noqa: E402
from tests.fixtures.quiz_fixtures import DEMO_USER_ID  # noqa: E402


# Block any real model requests in tests
models.ALLOW_MODEL_REQUESTS = False


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """
    Create a test client for the FastAPI application.
    """
    with TestClient(app) as client:
        yield client


class _FakeResult:
    """Lightweight stand-in for a SQLAlchemy result."""

    def scalars(self):
        return self

    def all(self):  # pragma: no cover - trivial
        return []

    def first(self):  # pragma: no cover - trivial
        return None

    def scalar_one_or_none(self):  # pragma: no cover - trivial
        return None


class _FakeSession:
    """Minimal fake async session used in lightweight tests.

    Only the small surface area required by current tests is implemented.
    """

    def add(self, _obj):  # pragma: no cover - no-op
        return None

    async def execute(self, _stmt):  # Always empty result
        return _FakeResult()

    async def commit(self):  # pragma: no cover - no-op
        return None

    async def refresh(self, _obj):  # pragma: no cover - no-op
        return None

    async def close(self):  # pragma: no cover - no-op
        return None


async def _override_get_db_factory() -> AsyncGenerator[_FakeSession, None]:
    """Yield a fake session for dependency override."""
    fake = _FakeSession()
    try:
        yield fake
    finally:  # pragma: no cover - cleanup path
        await fake.close()


async def _override_get_current_user_factory():  # pragma: no cover - simple helper
    class _DummyUser:
        id = DEMO_USER_ID

    return _DummyUser()


@pytest_asyncio.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Async client with DB & auth overrides (auto-auth)."""
    app.dependency_overrides[get_db] = _override_get_db_factory
    app.dependency_overrides[get_current_user] = _override_get_current_user_factory
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
    app.dependency_overrides.pop(get_db, None)
    app.dependency_overrides.pop(get_current_user, None)
