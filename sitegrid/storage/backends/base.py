"""Key/value backend contract shared by every snapshot host."""

from abc import ABC, abstractmethod
from typing import Any


class BaseBackend(ABC):
    """Abstract key/value store holding JSON-compatible dictionaries.

    Backends raise ``PersistenceError`` (or ``StorageFullError``) when a
    write cannot be completed, and return ``None`` for keys that are absent
    or unreadable. A failed write must leave the previous value in place.
    """

    @abstractmethod
    def initialize(self) -> None:
        """Prepare the store (create directories, open handles)."""

    @abstractmethod
    def read(self, key: str) -> dict[str, Any] | None:
        """Return a private copy of the value under ``key``."""

    @abstractmethod
    def write(self, key: str, data: dict[str, Any]) -> None:
        """Replace the value under ``key`` as a whole."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove ``key``; False when it was not stored."""

    @abstractmethod
    def keys(self) -> list[str]:
        pass

    def exists(self, key: str) -> bool:
        return key in self.keys()

    def clear(self) -> None:
        """Remove every key."""
        for key in self.keys():
            self.delete(key)

    def close(self) -> None:
        """Release resources; nothing to do by default."""

    def describe(self) -> dict[str, Any]:
        """Describe the backend for status output."""
        return {"type": self.__class__.__name__, "keys": len(self.keys())}
