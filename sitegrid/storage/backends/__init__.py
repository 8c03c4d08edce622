"""Pluggable storage backends.

Provides a unified key/value interface for different hosts:

- **FileSystemBackend**: JSON files with atomic writes
- **MemoryBackend**: In-process store with an optional quota
"""

from .base import BaseBackend
from .filesystem import FileSystemBackend
from .memory import MemoryBackend

__all__ = [
    "BaseBackend",
    "FileSystemBackend",
    "MemoryBackend",
]
