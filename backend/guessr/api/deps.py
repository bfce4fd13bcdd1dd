"""API dependencies for FastAPI route handlers.

This module provides dependency injection functions for:
- Database sessions
- Map record loading and page services
- Preview cyclers for the live preview stream
"""

from typing import AsyncGenerator, Awaitable, Callable

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from guessr.core.config import settings
from guessr.core.database import get_async_session
from guessr.core.database import get_db as get_db_session
from guessr.schemas.map import MapRecord
from guessr.services.map_service import MapPageService, MapRecordFetcher
from guessr.services.preview_cycler import PreviewCycler

MapLoader = Callable[[str], Awaitable[MapRecord]]
CyclerFactory = Callable[[], PreviewCycler]


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get database session.

    Yields:
        AsyncSession for database operations
    """
    async for session in get_db_session():
        yield session


async def get_map_fetcher(db: AsyncSession = Depends(get_db)) -> MapRecordFetcher:
    """Dependency to get a MapRecordFetcher bound to the request session."""
    return MapRecordFetcher(db)


async def get_map_page_service(
    fetcher: MapRecordFetcher = Depends(get_map_fetcher),
) -> MapPageService:
    """Dependency to get MapPageService instance.

    Args:
        fetcher: Record fetcher from dependency

    Returns:
        Configured MapPageService
    """
    return MapPageService(fetcher)


def get_map_loader() -> MapLoader:
    """Dependency for WebSocket handlers that need a single map lookup.

    The returned loader opens and releases its own session so no
    connection is held for the lifetime of the socket.
    """

    async def load(slug: str) -> MapRecord:
        async with get_async_session() as db:
            return await MapRecordFetcher(db).find_by_slug(slug)

    return load


def get_preview_cycler_factory() -> CyclerFactory:
    """Dependency returning a factory for configured preview cyclers."""

    def create() -> PreviewCycler:
        return PreviewCycler(
            api_key=settings.STREETVIEW_API_KEY,
            fov=settings.STREETVIEW_FOV,
            cycle_seconds=settings.PREVIEW_CYCLE_SECONDS,
            fade_seconds=settings.PREVIEW_FADE_SECONDS,
        )

    return create
