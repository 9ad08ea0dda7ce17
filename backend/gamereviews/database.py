"""
Game Reviews API — Database Engine & Session Management
=========================================================

What:  Async SQLAlchemy engine, session factory, declarative base and
       lifecycle helpers.
Why:   Centralizes all database connection logic in one place.
How:   One engine per process. The data-access layer opens a short-lived
       AsyncSession per operation so independent lookups can run
       concurrently (a single AsyncSession must not be shared between
       concurrently awaited operations).

Connection pooling applies to PostgreSQL (asyncpg). SQLite (aiosqlite, used
by the test suite) keeps SQLAlchemy's default pool for the dialect.
"""

import logging
from typing import Any, Dict

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from tenacity import (
    RetryError,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    AsyncRetrying,
)

from gamereviews.config import settings

logger = logging.getLogger(__name__)


def _engine_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {
        # SQL echo is only useful while developing
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


engine: AsyncEngine = create_async_engine(settings.database_url, **_engine_options())

# expire_on_commit=False: ORM objects stay readable after commit, which the
# store relies on when it converts freshly inserted rows to schemas
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all ORM models; its metadata drives Alembic and seeding."""
    pass


# ── Lifecycle Helpers ─────────────────────────────────────────────────────

async def ping_database() -> None:
    """Run ``SELECT 1``; raises SQLAlchemyError / OSError when unreachable."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def wait_for_database() -> bool:
    """
    Probe the database at startup with exponential backoff.

    Containers often start the API before PostgreSQL accepts connections, so
    the first few attempts are expected to fail. Returns False (after
    logging) instead of raising: the app still starts and /health reports
    the outage.
    """
    try:
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type((SQLAlchemyError, OSError)),
            stop=stop_after_attempt(settings.db_connect_attempts),
            wait=wait_exponential(multiplier=0.5, max=settings.db_connect_max_wait),
            before_sleep=before_sleep_log(logger, logging.WARNING),
        ):
            with attempt:
                await ping_database()
    except RetryError as e:
        logger.error(
            "Database unreachable after %d attempts: %s",
            settings.db_connect_attempts,
            e.last_attempt.exception() if e.last_attempt else "unknown error",
        )
        return False
    return True


async def dispose_engine() -> None:
    """Close all pooled connections. Called from the app lifespan on shutdown."""
    await engine.dispose()
