"""Services for map page data and the location preview."""

from guessr.services.map_page import build_map_page, build_play_url
from guessr.services.map_service import (
    DataIntegrityError,
    MapNotFoundError,
    MapPageService,
    MapRecordFetcher,
    build_map_view_model,
    get_map_page_service,
)
from guessr.services.preview_cycler import (
    CyclerState,
    FadeVisual,
    PreviewCycler,
    PreviewPhase,
    build_streetview_urls,
)

__all__ = [
    "MapRecordFetcher",
    "MapPageService",
    "MapNotFoundError",
    "DataIntegrityError",
    "build_map_view_model",
    "get_map_page_service",
    "build_map_page",
    "build_play_url",
    "PreviewCycler",
    "CyclerState",
    "PreviewPhase",
    "FadeVisual",
    "build_streetview_urls",
]
