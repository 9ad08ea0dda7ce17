"""
Game Reviews API — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the whole suite.
How:   Points the app at a throwaway SQLite file (aiosqlite) BEFORE any
       gamereviews module is imported, because the engine is built from
       settings at import time.

Fixtures:
    ├── dataset:       the packaged JSON dataset, parsed
    ├── seeded_db:     schema rebuilt and dataset loaded before each test
    ├── test_client:   HTTPX AsyncClient talking to the app over ASGI
    ├── mock_store:    AsyncMock standing in for ReviewStore
    └── sample_review / sample_comment: schema objects for unit tests
"""

import os
import tempfile
from datetime import datetime, timezone
from unittest.mock import AsyncMock

# Must run before any gamereviews import
_TEST_DIR = tempfile.mkdtemp(prefix="gamereviews_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/test.db"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"
os.environ["DB_CONNECT_ATTEMPTS"] = "1"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from gamereviews.database import engine  # noqa: E402
from gamereviews.db.seed import load_dataset, seed  # noqa: E402
from gamereviews.schemas.comment import CommentItem  # noqa: E402
from gamereviews.schemas.review import ReviewDetail  # noqa: E402
from gamereviews.services.review_store import ReviewStore  # noqa: E402


@pytest_asyncio.fixture
async def dataset():
    return await load_dataset()


@pytest_asyncio.fixture
async def seeded_db(dataset):
    """
    Rebuild and reseed the database for one test.

    The engine is disposed afterwards so no pooled connection outlives the
    event loop of the test that opened it.
    """
    await seed(dataset)
    yield
    await engine.dispose()


@pytest_asyncio.fixture
async def test_client(seeded_db):
    """
    Async HTTP client bound to the FastAPI app, on a freshly seeded DB.

    Usage:
        async def test_categories(test_client):
            response = await test_client.get("/api/categories")
            assert response.status_code == 200
    """
    from gamereviews.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def mock_store():
    """ReviewStore double: every operation is an AsyncMock to configure per test."""
    return AsyncMock(spec=ReviewStore)


@pytest.fixture
def sample_review():
    return ReviewDetail(
        review_id=1,
        owner="mallionaire",
        title="Agricola",
        designer="Uwe Rosenberg",
        review_img_url="https://images.pexels.com/photos/974314/pexels-photo-974314.jpeg?w=700&h=700",
        review_body="Farmyard fun!",
        category="euro game",
        votes=1,
        created_at=datetime(2021, 1, 18, 10, 0, 20, tzinfo=timezone.utc),
        comment_count=0,
    )


@pytest.fixture
def sample_comment():
    return CommentItem(
        comment_id=7,
        review_id=1,
        author="mallionaire",
        body="This is a test!",
        votes=0,
        created_at=datetime.now(timezone.utc),
    )
