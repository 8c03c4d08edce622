"""Core data models for the website collection.

This module defines the records the collection store works with. All of
them are immutable msgspec structs; mutations produce new instances via
``msgspec.structs.replace``. Field names are snake_case in Python and
camelCase on the wire so persisted snapshots stay compatible with the
JSON layout used by exports.

Key components:
- Website: A bookmarked site with icon, tag and position data
- Tag: Named, colored label referenced by websites
- Settings: Display settings, including the grid size that sets page capacity
- Snapshot: Versioned envelope used for persistence and export/import
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import Any

import msgspec

CURRENT_VERSION = "2.0"

MAX_NAME_LENGTH = 50
MAX_TAG_NAME_LENGTH = 30
MAX_LINK_NAME_LENGTH = 30
MAX_EXTRA_LINKS = 10

MIN_ICON_ZOOM = 0.5
MAX_ICON_ZOOM = 3.0
MAX_ICON_OFFSET = 50.0


def generate_id() -> str:
    """Generate a new opaque identifier."""
    return str(uuid.uuid4())


class GridSize(str, enum.Enum):
    """Grid size options controlling columns and page capacity."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"

    @property
    def config(self) -> GridSizeConfig:
        return GRID_SIZES[self]

    @property
    def icons_per_page(self) -> int:
        return GRID_SIZES[self].icons_per_page

    @property
    def columns(self) -> int:
        return GRID_SIZES[self].columns


class ThemeOption(str, enum.Enum):
    """Color theme selection."""

    AUTO = "auto"
    LIGHT = "light"
    DARK = "dark"


class BackgroundType(str, enum.Enum):
    """Kind of page background."""

    GRADIENT = "gradient"
    WALLPAPER = "wallpaper"


class GridSizeConfig(msgspec.Struct, frozen=True):
    """Layout constants for a grid size."""

    icon_size: int
    gap: int
    columns: int
    icons_per_page: int


GRID_SIZES: dict[GridSize, GridSizeConfig] = {
    GridSize.SMALL: GridSizeConfig(icon_size=80, gap=20, columns=9, icons_per_page=45),
    GridSize.MEDIUM: GridSizeConfig(
        icon_size=100, gap=30, columns=7, icons_per_page=35
    ),
    GridSize.LARGE: GridSizeConfig(
        icon_size=120, gap=40, columns=5, icons_per_page=25
    ),
}


class GradientPreset(msgspec.Struct, frozen=True):
    """Named two-color background gradient."""

    name: str
    colors: tuple[str, str]
    angle: int = 135


GRADIENT_PRESETS: tuple[GradientPreset, ...] = (
    GradientPreset(name="Big Sur", colors=("#667eea", "#764ba2")),
    GradientPreset(name="Catalina", colors=("#ee9ca7", "#ffdde1")),
    GradientPreset(name="Monterey", colors=("#0093E9", "#80D0C7")),
    GradientPreset(name="Ventura", colors=("#FF6B6B", "#FFE66D")),
    GradientPreset(name="Ocean", colors=("#2E3192", "#1BFFFF")),
    GradientPreset(name="Sunset", colors=("#FF512F", "#F09819")),
)

TAG_COLORS: tuple[str, ...] = (
    "#FF6B6B",
    "#4ECDC4",
    "#45B7D1",
    "#FFA07A",
    "#98D8C8",
    "#F7DC6F",
    "#BB8FCE",
    "#85C1E2",
    "#F8B739",
    "#52B788",
    "#E76F51",
    "#2A9D8F",
)


class Position(msgspec.Struct, frozen=True):
    """Page membership and rank within the page."""

    page: int = 0
    order: int = 0

    def as_tuple(self) -> tuple[int, int]:
        return (self.page, self.order)


class WebsiteMetadata(msgspec.Struct, frozen=True, kw_only=True, rename="camel"):
    """Bookkeeping timestamps and visit statistics."""

    created_at: datetime = msgspec.field(default_factory=datetime.now)
    updated_at: datetime = msgspec.field(default_factory=datetime.now)
    visit_count: int = 0
    last_visited: datetime | None = None


class ExtraLink(msgspec.Struct, frozen=True, kw_only=True):
    """Secondary link attached to a website."""

    id: str = msgspec.field(default_factory=generate_id)
    name: str
    url: str


class Website(msgspec.Struct, frozen=True, kw_only=True, rename="camel"):
    """Immutable bookmarked website.

    ``favicon`` is derived from ``url`` and is not authoritative; a
    ``custom_icon`` always takes precedence when displayed. ``tag_ids`` and
    ``category_id`` are references into the tag registry and carry no
    ownership.
    """

    id: str = msgspec.field(default_factory=generate_id)
    name: str
    url: str
    favicon: str = ""
    custom_icon: str | None = None
    icon_zoom: float = 1.0
    icon_offset_x: float = 0.0
    icon_offset_y: float = 0.0
    icon_background_color: str = "transparent"
    category_id: str | None = None
    tag_ids: tuple[str, ...] = ()
    extra_links: tuple[ExtraLink, ...] = ()
    position: Position = msgspec.field(default_factory=Position)
    metadata: WebsiteMetadata = msgspec.field(default_factory=WebsiteMetadata)

    @property
    def page(self) -> int:
        return self.position.page

    @property
    def order(self) -> int:
        return self.position.order

    @property
    def display_icon(self) -> str:
        """Icon URL to show, preferring the custom override."""
        return self.custom_icon or self.favicon

    def references_tag(self, tag_id: str) -> bool:
        """Check whether this website points at a tag in any way."""
        return tag_id in self.tag_ids or self.category_id == tag_id

    def without_tag(self, tag_id: str) -> Website:
        """Return a copy with every reference to ``tag_id`` removed."""
        if not self.references_tag(tag_id):
            return self
        return msgspec.structs.replace(
            self,
            tag_ids=tuple(t for t in self.tag_ids if t != tag_id),
            category_id=None if self.category_id == tag_id else self.category_id,
        )

    def with_position(self, page: int, order: int) -> Website:
        if self.position.page == page and self.position.order == order:
            return self
        return msgspec.structs.replace(self, position=Position(page=page, order=order))

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary with wire field names."""
        return msgspec.json.decode(msgspec.json.encode(self))


class TagMetadata(msgspec.Struct, frozen=True, kw_only=True, rename="camel"):
    """Tag timestamps."""

    created_at: datetime = msgspec.field(default_factory=datetime.now)
    updated_at: datetime = msgspec.field(default_factory=datetime.now)


class Tag(msgspec.Struct, frozen=True, kw_only=True):
    """Named, colored label for websites."""

    id: str = msgspec.field(default_factory=generate_id)
    name: str
    color: str = TAG_COLORS[0]
    metadata: TagMetadata = msgspec.field(default_factory=TagMetadata)

    def __str__(self) -> str:
        return self.name


class TagWithCount(msgspec.Struct, frozen=True):
    """A tag together with the number of websites using it."""

    tag: Tag
    count: int


class BackgroundSettings(msgspec.Struct, frozen=True, kw_only=True):
    """Page background selection."""

    type: BackgroundType = BackgroundType.GRADIENT
    gradient: GradientPreset = msgspec.field(
        default_factory=lambda: GRADIENT_PRESETS[0]
    )


class Settings(msgspec.Struct, frozen=True, kw_only=True, rename="camel"):
    """Display settings. Replaced as a whole on update."""

    grid_size: GridSize = GridSize.MEDIUM
    background: BackgroundSettings = msgspec.field(default_factory=BackgroundSettings)
    wallpaper_url: str = ""
    animations: bool = True
    show_labels: bool = True
    theme: ThemeOption = ThemeOption.AUTO

    @property
    def icons_per_page(self) -> int:
        return self.grid_size.icons_per_page

    @property
    def columns(self) -> int:
        return self.grid_size.columns


DEFAULT_SETTINGS = Settings()


class SnapshotData(msgspec.Struct, frozen=True, kw_only=True):
    """The payload of a snapshot."""

    websites: tuple[Website, ...] = ()
    tags: tuple[Tag, ...] = ()
    settings: Settings = msgspec.field(default_factory=Settings)


class Snapshot(msgspec.Struct, frozen=True, kw_only=True):
    """Versioned envelope used for persistence and export/import."""

    version: str = CURRENT_VERSION
    data: SnapshotData = msgspec.field(default_factory=SnapshotData)
    timestamp: datetime = msgspec.field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return msgspec.json.decode(msgspec.json.encode(self))
