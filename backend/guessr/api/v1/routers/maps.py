"""API routes for public map pages."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse

from guessr.api.deps import get_map_fetcher, get_map_page_service
from guessr.core.config import settings
from guessr.schemas.map import MapPageResponse
from guessr.services.map_page import build_map_page, build_play_url
from guessr.services.map_service import (
    DataIntegrityError,
    MapNotFoundError,
    MapPageService,
    MapRecordFetcher,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/maps", tags=["maps"])


def preview_websocket_path(slug: str) -> str:
    """Path of the live preview stream for a map."""
    return f"{settings.API_V1_PREFIX}/ws/maps/{slug}/preview"


@router.get(
    "/{slug}",
    response_model=MapPageResponse,
    summary="Get map page",
    description="Get the display-ready page model for a community map",
)
async def get_map_page(
    slug: str,
    service: MapPageService = Depends(get_map_page_service),
) -> MapPageResponse:
    """Get the page model for a map.

    Args:
        slug: Public map identifier
        service: Map page service

    Returns:
        MapPageResponse with view model, preview URLs and stats

    Raises:
        HTTPException(404): If the map does not exist
        HTTPException(500): If the map's author is missing
    """
    try:
        view_model = await service.get_view_model(slug)
    except MapNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Map {slug} not found",
        )
    except DataIntegrityError as e:
        logger.error(f"Data integrity error for map {slug}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )

    return build_map_page(view_model, preview_websocket_path(slug))


@router.get(
    "/{slug}/play",
    response_class=RedirectResponse,
    status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    summary="Play map",
    description="Redirect to the game with this map selected",
)
async def play_map(
    slug: str,
    fetcher: MapRecordFetcher = Depends(get_map_fetcher),
) -> RedirectResponse:
    """Redirect to the game entry point with ``?map=<slug>``.

    Raises:
        HTTPException(404): If the map does not exist
    """
    try:
        await fetcher.find_by_slug(slug)
    except MapNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Map {slug} not found",
        )

    logger.info(f"Starting game on map {slug}")

    return RedirectResponse(
        url=build_play_url(slug, settings.GAME_ENTRY_URL),
        status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    )
