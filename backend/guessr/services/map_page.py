"""Map page composition.

Lays out a ``MapViewModel`` into the blocks the client renders: head meta,
branding, imagery preview, stats row, play button and description.
"""

from urllib.parse import urlencode

from guessr.core.config import Settings, settings
from guessr.schemas.map import (
    Branding,
    DescriptionPanel,
    ImageryPanel,
    MapPageResponse,
    MapStat,
    MapViewModel,
    PageMeta,
    PlayAction,
)
from guessr.services.preview_cycler import build_streetview_urls
from guessr.utils.formatting import format_count, format_number


def build_play_url(slug: str, game_entry_url: str = "/") -> str:
    """Game entry URL that starts a session on the given map."""
    return f"{game_entry_url}?{urlencode({'map': slug})}"


def build_map_page(
    view_model: MapViewModel,
    websocket_path: str,
    config: Settings = settings,
) -> MapPageResponse:
    """Compose the page model for a map.

    Args:
        view_model: Display-ready map
        websocket_path: Path of the live preview stream for this map
        config: Settings providing branding, embed key and timing

    Returns:
        MapPageResponse ready to serialize
    """
    name = view_model.name

    meta = PageMeta(
        title=f"{name} - Play Free on {config.SITE_NAME}",
        description=(
            f"Explore {name} on {config.SITE_NAME}, a free GeoGuessr clone. "
            f"{view_model.description_short}"
        ),
    )

    imagery = ImageryPanel(
        urls=list(
            build_streetview_urls(
                view_model.data, config.STREETVIEW_API_KEY, config.STREETVIEW_FOV
            )
        ),
        cycle_seconds=config.PREVIEW_CYCLE_SECONDS,
        fade_seconds=config.PREVIEW_FADE_SECONDS,
        websocket_path=websocket_path,
    )

    stats = [
        MapStat(icon="👥", value=format_count(view_model.plays), label="Plays"),
        MapStat(icon="📍", value=format_number(len(view_model.data), 3), label="Locations"),
        MapStat(icon="❤️", value=format_count(view_model.hearts), label="Hearts"),
    ]

    description = DescriptionPanel(
        paragraphs=view_model.description_long.split("\n"),
        author=view_model.created_by,
        created_ago=view_model.created_at,
        credit=f"Created by {view_model.created_by} {view_model.created_at} ago",
    )

    return MapPageResponse(
        map=view_model,
        meta=meta,
        branding=Branding(site_name=config.SITE_NAME, tagline=config.SITE_TAGLINE),
        imagery=imagery,
        stats=stats,
        action=PlayAction(url=build_play_url(view_model.slug, config.GAME_ENTRY_URL)),
        description=description,
    )
