"""In-memory storage backend.

Stands in for a sandboxed host key/value store. An optional byte quota
makes it behave like browser-style storage that rejects writes once full.
"""

from copy import deepcopy
from typing import Any

import msgspec

from sitegrid.core.exceptions import PersistenceError, StorageFullError

from .base import BaseBackend


class MemoryBackend(BaseBackend):
    """In-memory storage backend with an optional size quota."""

    def __init__(self, quota_bytes: int | None = None):
        """Initialize backend.

        Args:
            quota_bytes: Maximum encoded size of all stored values, or None
                for no limit
        """
        self._data: dict[str, dict[str, Any]] = {}
        self._sizes: dict[str, int] = {}
        self.quota_bytes = quota_bytes

    def initialize(self) -> None:
        """Initialize the backend (no-op for memory)."""
        pass

    def read(self, key: str) -> dict[str, Any] | None:
        """Read data by key."""
        if key in self._data:
            return deepcopy(self._data[key])
        return None

    def write(self, key: str, data: dict[str, Any]) -> None:
        """Write data with key, enforcing the quota."""
        try:
            size = len(msgspec.json.encode(data))
        except (TypeError, msgspec.EncodeError) as e:
            raise PersistenceError(f"Cannot serialize value for '{key}': {e}") from e

        if self.quota_bytes is not None:
            used = self.used_bytes - self._sizes.get(key, 0)
            if used + size > self.quota_bytes:
                raise StorageFullError()

        self._data[key] = deepcopy(data)
        self._sizes[key] = size

    def delete(self, key: str) -> bool:
        """Delete data by key."""
        if key in self._data:
            del self._data[key]
            del self._sizes[key]
            return True
        return False

    def exists(self, key: str) -> bool:
        """Check if key exists."""
        return key in self._data

    def keys(self) -> list[str]:
        """Get all keys."""
        return list(self._data.keys())

    def clear(self) -> None:
        """Clear all data."""
        self._data.clear()
        self._sizes.clear()

    def close(self) -> None:
        """Close backend (no-op for memory)."""
        pass

    @property
    def used_bytes(self) -> int:
        """Encoded size of everything stored."""
        return sum(self._sizes.values())

    def describe(self) -> dict[str, Any]:
        return {
            "type": "memory",
            "used_bytes": self.used_bytes,
            "quota_bytes": self.quota_bytes,
        }
