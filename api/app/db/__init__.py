"""Database engine and session helpers.

The engine is created lazily from :func:`config.get_settings` the first time a
session is requested. Tests point the application at a throwaway database by
calling :func:`init_engine` with their own URL before issuing requests.
"""

from __future__ import annotations

from typing import AsyncGenerator, Optional

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from config import get_settings

from ..models import Base
from ..obs import add_query_logger

engine: Optional[AsyncEngine] = None
SessionLocal: Optional[async_sessionmaker[AsyncSession]] = None


def init_engine(url: Optional[str] = None) -> AsyncEngine:
    """Create the process-wide engine and session factory for ``url``."""

    global engine, SessionLocal
    settings = get_settings()
    url = url or settings.database_url
    kwargs: dict = {"echo": settings.sql_echo}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if make_url(url).database in (None, "", ":memory:"):
            # one shared connection so every session sees the same database
            kwargs["poolclass"] = StaticPool
    engine = create_async_engine(url, **kwargs)
    add_query_logger(engine, "orders")
    SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    return engine


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    if SessionLocal is None:
        init_engine()
    assert SessionLocal is not None
    return SessionLocal


async def create_all() -> None:
    """Create all tables on the current engine."""

    if engine is None:
        init_engine()
    assert engine is not None
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose() -> None:
    global engine, SessionLocal
    if engine is not None:
        await engine.dispose()
    engine = None
    SessionLocal = None


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one ``AsyncSession`` per request."""

    sessionmaker = get_sessionmaker()
    async with sessionmaker() as session:
        yield session


__all__ = [
    "engine",
    "SessionLocal",
    "init_engine",
    "get_sessionmaker",
    "create_all",
    "dispose",
    "get_session",
]
