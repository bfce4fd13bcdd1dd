"""Map page schemas.

Records mirror the database rows without ORM state; the view model and
page response are what the client receives.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Coordinate(BaseModel):
    """A single map location."""

    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float


class UserRecord(BaseModel):
    """Map author as stored."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    username: str


class MapRecord(BaseModel):
    """Map as stored, detached from the database session."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    slug: str = Field(..., min_length=1)
    name: str
    description_short: str = ""
    description_long: str = ""
    data: tuple[Coordinate, ...] = ()
    plays: int = Field(0, ge=0)
    hearts: int = Field(0, ge=0)
    created_at: datetime
    created_by: int


class MapViewModel(BaseModel):
    """Display-ready map with the author resolved and age formatted.

    ``created_by`` is the author's username and ``created_at`` the elapsed
    time since creation ("3 days"); raw ids and timestamps are not exposed.
    """

    model_config = ConfigDict(frozen=True)

    slug: str
    name: str
    description_short: str
    description_long: str
    data: tuple[Coordinate, ...]
    plays: int
    hearts: int
    created_at: str
    created_by: str


# ---------------------------------------------------------------------------
# Page model
# ---------------------------------------------------------------------------


class PageMeta(BaseModel):
    """Document head values."""

    title: str
    description: str


class Branding(BaseModel):
    """Site header block."""

    site_name: str
    tagline: str
    back_url: str = "/"
    back_label: str = "← Back to Game"


class ImageryPanel(BaseModel):
    """Rotating Street View preview.

    An empty ``urls`` list means the panel renders nothing.
    """

    urls: list[str] = Field(default_factory=list)
    cycle_seconds: float
    fade_seconds: float
    websocket_path: str


class MapStat(BaseModel):
    """One entry of the stats row."""

    icon: str
    value: str
    label: str


class PlayAction(BaseModel):
    """Call-to-action that starts a game on this map."""

    label: str = "PLAY"
    url: str


class DescriptionPanel(BaseModel):
    """Long description and author credit."""

    heading: str = "About this map"
    paragraphs: list[str]
    author: str
    created_ago: str
    credit: str


class MapPageResponse(BaseModel):
    """Everything the client needs to lay out a map page."""

    map: MapViewModel
    meta: PageMeta
    branding: Branding
    imagery: ImageryPanel
    stats: list[MapStat]
    action: PlayAction
    description: DescriptionPanel
