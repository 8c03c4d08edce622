"""Backend keeping each key in its own JSON file under a data directory."""

import errno
import fcntl
import json
import logging
import tempfile
import threading
from pathlib import Path
from typing import Any

from sitegrid.core.exceptions import PersistenceError, StorageFullError

from .base import BaseBackend

logger = logging.getLogger(__name__)

_FULL_ERRNOS = {errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)}


class FileSystemBackend(BaseBackend):
    """Stores ``<key>.json`` files; writes go through a temp file and a rename."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self._lock = threading.RLock()
        self.initialize()

    def initialize(self) -> None:
        """Create the data directory."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _key_to_filename(self, key: str) -> str:
        safe_key = "".join(c if c.isalnum() or c in "-_" else "_" for c in key)
        return f"{safe_key}.json"

    def _get_path(self, key: str) -> Path:
        return self.data_dir / self._key_to_filename(key)

    def read(self, key: str) -> dict[str, Any] | None:
        """Read data from file. Missing or corrupt files read as absent."""
        path = self._get_path(key)
        if not path.exists():
            return None

        try:
            with open(path) as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                try:
                    data = json.load(f)
                finally:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Unreadable storage file {path}: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Storage file {path} does not hold an object")
            return None
        return data

    def write(self, key: str, data: dict[str, Any]) -> None:
        """Replace the file for ``key``; the old file survives a failed write."""
        path = self._get_path(key)

        with self._lock:
            temp_path = None
            try:
                temp_fd, temp_name = tempfile.mkstemp(
                    dir=self.data_dir, suffix=".tmp"
                )
                temp_path = Path(temp_name)
                with open(temp_fd, "w") as f:
                    json.dump(data, f, indent=2, sort_keys=True)

                temp_path.replace(path)
            except OSError as e:
                if temp_path is not None:
                    temp_path.unlink(missing_ok=True)
                if e.errno in _FULL_ERRNOS:
                    raise StorageFullError() from e
                raise PersistenceError(f"Failed to write {path}: {e}") from e
            except (TypeError, ValueError) as e:
                if temp_path is not None:
                    temp_path.unlink(missing_ok=True)
                raise PersistenceError(f"Cannot serialize value for '{key}': {e}") from e

    def delete(self, key: str) -> bool:
        """Unlink the file for ``key``."""
        path = self._get_path(key)
        with self._lock:
            try:
                path.unlink()
                return True
            except FileNotFoundError:
                return False

    def exists(self, key: str) -> bool:
        return self._get_path(key).exists()

    def keys(self) -> list[str]:
        return sorted(path.stem for path in self.data_dir.glob("*.json"))

    def clear(self) -> None:
        """Remove all stored files."""
        with self._lock:
            for path in self.data_dir.glob("*.json"):
                path.unlink(missing_ok=True)

    def describe(self) -> dict[str, Any]:
        return {"type": "filesystem", "path": str(self.data_dir)}
