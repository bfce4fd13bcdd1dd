"""Map record loading and view model building.

This service provides the server side of a map page:
- Loading a map by slug and its author by id
- Joining both into a display-ready ``MapViewModel``
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from guessr.models.map import Map
from guessr.models.user import User
from guessr.schemas.map import MapRecord, MapViewModel, UserRecord
from guessr.utils.formatting import format_duration

logger = logging.getLogger(__name__)


class MapNotFoundError(Exception):
    """Raised when no map exists for a slug."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Map '{slug}' not found")


class DataIntegrityError(Exception):
    """Raised when a map references an author that does not exist."""

    def __init__(self, slug: str, user_id: int):
        self.slug = slug
        self.user_id = user_id
        super().__init__(f"Map '{slug}' references missing user {user_id}")


class MapRecordFetcher:
    """Read-only access to map and user rows."""

    def __init__(self, db: AsyncSession):
        """Initialize the fetcher.

        Args:
            db: Database session used for both reads
        """
        self.db = db

    async def find_by_slug(self, slug: str) -> MapRecord:
        """Load a map by its slug.

        Args:
            slug: Public map identifier

        Returns:
            Detached map record

        Raises:
            ValueError: If slug is empty
            MapNotFoundError: If no map has this slug
        """
        if not slug:
            raise ValueError("Slug must not be empty")

        result = await self.db.execute(select(Map).where(Map.slug == slug))
        map_obj = result.scalar_one_or_none()

        if map_obj is None:
            raise MapNotFoundError(slug)

        return MapRecord.model_validate(map_obj)

    async def find_user_by_id(self, user_id: int) -> Optional[UserRecord]:
        """Load a user by id, or None if there is no such user."""
        result = await self.db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()

        if user is None:
            return None

        return UserRecord.model_validate(user)

    async def fetch(self, slug: str) -> tuple[MapRecord, UserRecord]:
        """Load a map and its author.

        The author lookup depends on the map row, so the reads run one
        after the other.

        Args:
            slug: Public map identifier

        Returns:
            Tuple of (map record, author record)

        Raises:
            MapNotFoundError: If no map has this slug
            DataIntegrityError: If the map's author does not exist
        """
        map_record = await self.find_by_slug(slug)
        author = await self.find_user_by_id(map_record.created_by)

        if author is None:
            raise DataIntegrityError(slug, map_record.created_by)

        return map_record, author


def build_map_view_model(
    map_record: MapRecord,
    author: UserRecord,
    now: datetime,
    duration_formatter: Callable[[float], str] = format_duration,
) -> MapViewModel:
    """Join a map with its author into a display-ready view model.

    Args:
        map_record: Map as stored
        author: The map's author
        now: Reference time for the elapsed-time string
        duration_formatter: Renders elapsed milliseconds as text

    Returns:
        Immutable view model with ``created_by`` set to the username and
        ``created_at`` set to the formatted elapsed time
    """
    elapsed_ms = (now - map_record.created_at).total_seconds() * 1000

    return MapViewModel(
        slug=map_record.slug,
        name=map_record.name,
        description_short=map_record.description_short,
        description_long=map_record.description_long,
        data=map_record.data,
        plays=map_record.plays,
        hearts=map_record.hearts,
        created_at=duration_formatter(max(elapsed_ms, 0.0)),
        created_by=author.username,
    )


class MapPageService:
    """Builds the view model for one map page request."""

    def __init__(
        self,
        fetcher: MapRecordFetcher,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        """Initialize the page service.

        Args:
            fetcher: Record source for maps and users
            clock: Returns the current time for elapsed-time formatting
        """
        self.fetcher = fetcher
        self.clock = clock

    async def get_view_model(self, slug: str) -> MapViewModel:
        """Load and join the records for ``slug``.

        Raises:
            MapNotFoundError: If no map has this slug
            DataIntegrityError: If the map's author does not exist
        """
        map_record, author = await self.fetcher.fetch(slug)
        view_model = build_map_view_model(map_record, author, self.clock())

        logger.debug(f"Built view model for map {slug} by {author.username}")

        return view_model


def get_map_page_service(db: AsyncSession) -> MapPageService:
    """Factory function to create a MapPageService.

    Args:
        db: Database session

    Returns:
        Configured MapPageService
    """
    return MapPageService(MapRecordFetcher(db))
