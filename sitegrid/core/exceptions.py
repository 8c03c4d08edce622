"""Exception classes for the website collection."""

from __future__ import annotations

from collections.abc import Iterable, Mapping


class SiteGridError(Exception):
    """Base exception for collection errors."""

    def __init__(self, message: str):
        """Initialize with a user-facing message."""
        self.user_message = message
        super().__init__(message)


class ValidationError(SiteGridError, ValueError):
    """Raised when one or more fields fail validation.

    ``errors`` maps field names to messages so a form can highlight each
    offending field separately.
    """

    def __init__(self, errors: Mapping[str, str]):
        """Initialize with per-field messages."""
        self.errors = dict(errors)
        details = "; ".join(f"{field}: {msg}" for field, msg in self.errors.items())
        super().__init__(f"Validation failed: {details}")


class NotFoundError(SiteGridError):
    """Raised when a referenced id does not exist."""

    def __init__(self, item_type: str, item_id: str):
        """Initialize with item type and id."""
        self.item_type = item_type
        self.item_id = item_id
        super().__init__(f"{item_type} with ID {item_id} not found")


class ConflictError(SiteGridError):
    """Raised when a position update does not match the current layout."""

    def __init__(
        self,
        message: str,
        missing: Iterable[str] = (),
        extra: Iterable[str] = (),
        duplicates: Iterable[str] = (),
    ):
        """Initialize with the offending ids."""
        self.missing = tuple(missing)
        self.extra = tuple(extra)
        self.duplicates = tuple(duplicates)
        super().__init__(message)


class DuplicateError(SiteGridError):
    """Raised when a name already exists where it must be unique."""

    def __init__(self, item_type: str, name: str):
        """Initialize with item type and the clashing name."""
        self.item_type = item_type
        self.name = name
        super().__init__(f"A {item_type} with this name already exists: {name}")


class SnapshotImportError(SiteGridError):
    """Raised when a snapshot fails structural or semantic validation."""

    def __init__(
        self,
        message: str = "Failed to import data. Please check the file format.",
        problems: Iterable[str] = (),
    ):
        """Initialize with a summary and the individual problems."""
        self.problems = tuple(problems)
        if self.problems:
            message = f"{message}: " + "; ".join(self.problems)
        super().__init__(message)


class PersistenceError(SiteGridError):
    """Raised when a snapshot cannot be written to storage."""

    pass


class StorageFullError(PersistenceError):
    """Raised when the storage quota is exhausted."""

    def __init__(
        self,
        message: str = "Storage is full. Please delete some websites or export your data.",
    ):
        """Initialize with message."""
        super().__init__(message)


def format_error(error: object) -> str:
    """Format an error for user display."""
    if isinstance(error, SiteGridError):
        return error.user_message
    if isinstance(error, Exception):
        return str(error) or error.__class__.__name__
    if isinstance(error, str):
        return error
    return "An unexpected error occurred"
