"""Core models, validation and errors for the website collection."""

from .exceptions import (
    ConflictError,
    DuplicateError,
    NotFoundError,
    PersistenceError,
    SiteGridError,
    SnapshotImportError,
    StorageFullError,
    ValidationError,
    format_error,
)
from .models import (
    CURRENT_VERSION,
    DEFAULT_SETTINGS,
    GRADIENT_PRESETS,
    GRID_SIZES,
    BackgroundSettings,
    ExtraLink,
    GradientPreset,
    GridSize,
    Position,
    Settings,
    Snapshot,
    SnapshotData,
    Tag,
    TagWithCount,
    ThemeOption,
    Website,
    WebsiteMetadata,
)

__all__ = [
    # Models
    "CURRENT_VERSION",
    "DEFAULT_SETTINGS",
    "GRADIENT_PRESETS",
    "GRID_SIZES",
    "BackgroundSettings",
    "ExtraLink",
    "GradientPreset",
    "GridSize",
    "Position",
    "Settings",
    "Snapshot",
    "SnapshotData",
    "Tag",
    "TagWithCount",
    "ThemeOption",
    "Website",
    "WebsiteMetadata",
    # Errors
    "SiteGridError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "DuplicateError",
    "SnapshotImportError",
    "PersistenceError",
    "StorageFullError",
    "format_error",
]
