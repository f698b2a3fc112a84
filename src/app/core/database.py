"""Async SQLAlchemy engine, declarative base, and session factory.

Provides:
- Base: Declarative base for all persisted models
- get_session(): AsyncSession generator used as the repository session factory
- persistence_errors(): translates SQLAlchemy failures into PersistenceError
- init_db() / close_db(): lifespan hooks
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from src.app.config import get_settings
from src.app.core.exceptions import PersistenceError

logger = structlog.get_logger(__name__)

# ── Module-level engine (lazy init) ────────────────────────────────────────

_engine: AsyncEngine | None = None


def get_engine() -> AsyncEngine:
    """Get or create the async engine singleton."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_async_engine(
            settings.DATABASE_URL,
            pool_size=10,
            max_overflow=10,
            pool_pre_ping=True,
            echo=False,
        )
    return _engine


# ── Declarative Base ────────────────────────────────────────────────────────


class Base(DeclarativeBase):
    """Base class for all persisted models."""


# ── Session Factory ─────────────────────────────────────────────────────────


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield an AsyncSession bound to the engine."""
    engine = get_engine()
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


# ── Error Translation ───────────────────────────────────────────────────────


@asynccontextmanager
async def persistence_errors(operation: str) -> AsyncGenerator[None, None]:
    """Translate SQLAlchemy failures into PersistenceError.

    Usage:
        async with persistence_errors("content.create"):
            session.add(model)
            await session.commit()
    """
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("db.operation_failed", operation=operation, exc_info=True)
        raise PersistenceError(f"Database operation failed: {operation}") from exc


# ── Database Initialization ─────────────────────────────────────────────────


async def init_db() -> None:
    """Create tables that don't exist yet.

    Alembic owns the schema in deployed environments; this keeps a fresh
    development database usable without running migrations.
    """
    # Register every model on Base.metadata before create_all
    import src.app.analytics.models  # noqa: F401
    import src.app.bots.models  # noqa: F401
    import src.app.content.models  # noqa: F401
    import src.app.meetings.models  # noqa: F401
    import src.app.users.models  # noqa: F401

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Dispose of the engine and close all connections."""
    global _engine
    if _engine:
        await _engine.dispose()
        _engine = None
