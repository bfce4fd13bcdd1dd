"""Database configuration and session management."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import NullPool

# Declarative base for models (can be imported without engine)
Base = declarative_base()

# Global engine and session factory (initialized on first use)
engine = None
AsyncSessionLocal = None


def get_engine():
    """Get or create async engine."""
    global engine
    if engine is None:
        from guessr.core.config import settings

        engine = create_async_engine(
            settings.DATABASE_URL,
            echo=settings.ENVIRONMENT == "development",
            future=True,
            poolclass=NullPool if settings.ENVIRONMENT == "test" else None,
        )
    return engine


def get_session_factory():
    """Get or create async session factory."""
    global AsyncSessionLocal
    if AsyncSessionLocal is None:
        AsyncSessionLocal = sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )
    return AsyncSessionLocal


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for FastAPI routes to get database session.

    Usage:
        @app.get("/maps/{slug}")
        async def get_map(slug: str, db: AsyncSession = Depends(get_db)):
            ...
    """
    session_factory = get_session_factory()
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Session context manager for code paths outside the request cycle.

    WebSocket handlers and scripts use this instead of the ``get_db``
    dependency so the session is released before long-lived loops start.
    """
    session_factory = get_session_factory()
    async with session_factory() as session:
        yield session


async def close_db() -> None:
    """Close database connections."""
    if engine is None:
        return
    await engine.dispose()
