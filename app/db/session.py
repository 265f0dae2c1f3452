"""Async database engine and session factory.

The engine and session maker are built by the application lifespan and
kept on ``app.state``; request handlers get sessions through :func:`get_db`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import Settings

logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine; pool tuning only applies to server databases."""
    kwargs: dict = {"echo": settings.debug}
    if not settings.is_sqlite:
        kwargs.update(
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_timeout=settings.database_pool_timeout,
            pool_recycle=settings.database_pool_recycle,
            pool_pre_ping=True,
        )
    return create_async_engine(settings.async_database_url, **kwargs)


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


async def check_connection(engine: AsyncEngine, retries: int = 10, delay: float = 0.1) -> None:
    """Run ``SELECT 1`` until it succeeds, backing off linearly between attempts.

    Raises the last connection error once ``retries`` attempts have failed.
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            logger.info("Database connection established (attempt %d)", attempt)
            return
        except Exception as e:
            if attempt >= max(retries, 1):
                logger.error("Database connection failed after %d attempts: %s", attempt, e)
                raise
            wait = delay * attempt
            logger.warning("Database not reachable (%s); retrying in %.2fs (attempt %d)", e, wait, attempt)
            await asyncio.sleep(wait)


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency that yields an async DB session.

    Commits once the handler returns and rolls back if it raises, so every
    write a request makes lands together or not at all.
    """
    session_maker: async_sessionmaker[AsyncSession] = request.app.state.session_maker
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
