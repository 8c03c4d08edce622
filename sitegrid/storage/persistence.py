"""Snapshot persistence with failure reporting.

The collection store treats its in-memory state as authoritative and hands
each new snapshot to a ``SnapshotWriter``. Writes never raise into the
mutation that triggered them: failures are logged, kept as
``last_error`` and published as ``PERSISTENCE_FAILED``. Because every write
carries the full snapshot, the next successful write brings storage fully
up to date again.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Protocol

from sitegrid.core.exceptions import PersistenceError, format_error

from .backends.base import BaseBackend
from .events import EventBus, EventPublisher, EventType

logger = logging.getLogger(__name__)

SNAPSHOT_KEY = "snapshot"


class PersistenceAdapter(Protocol):
    """Where snapshots are read from and written to."""

    def read(self) -> dict[str, Any] | None:
        """Return the stored snapshot, or None when nothing usable is stored."""
        ...

    def write(self, snapshot: dict[str, Any]) -> None:
        """Store a snapshot, raising ``PersistenceError`` on failure."""
        ...


class SnapshotStorage:
    """Persistence adapter over a key/value backend."""

    def __init__(self, backend: BaseBackend, key: str = SNAPSHOT_KEY):
        """Initialize storage.

        Args:
            backend: Storage backend holding the snapshot
            key: Key the snapshot is stored under
        """
        self.backend = backend
        self.key = key
        self.backend.initialize()

    def read(self) -> dict[str, Any] | None:
        try:
            return self.backend.read(self.key)
        except (PersistenceError, OSError) as e:
            logger.warning(f"Failed to read stored snapshot: {e}")
            return None

    def write(self, snapshot: dict[str, Any]) -> None:
        try:
            self.backend.write(self.key, snapshot)
        except PersistenceError:
            raise
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"Failed to save data: {e}") from e

    def clear(self) -> None:
        self.backend.delete(self.key)

    def close(self) -> None:
        self.backend.close()


class SnapshotWriter(EventPublisher):
    """Hands snapshots to an adapter, synchronously or on a worker thread.

    In background mode a single worker drains a one-slot buffer, so a burst
    of mutations results in writing only the newest snapshot.
    """

    def __init__(
        self,
        adapter: PersistenceAdapter,
        event_bus: EventBus,
        background: bool = False,
    ):
        """Initialize writer.

        Args:
            adapter: Persistence adapter to write to
            event_bus: Bus for failure and recovery events
            background: Write on a worker thread instead of inline
        """
        super().__init__(event_bus)
        self.adapter = adapter
        self.background = background
        self.last_error: PersistenceError | None = None

        self._lock = threading.Lock()
        self._pending: dict[str, Any] | None = None
        self._draining = False
        self._future: Future | None = None
        self._executor: ThreadPoolExecutor | None = None
        if background:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="sitegrid-writer"
            )

    @property
    def has_pending_write(self) -> bool:
        with self._lock:
            return self._draining or self._pending is not None

    @property
    def failed(self) -> bool:
        return self.last_error is not None

    def submit(self, snapshot: dict[str, Any]) -> None:
        """Queue a snapshot for writing (or write it now in sync mode)."""
        if self._executor is None:
            self._write(snapshot)
            return

        with self._lock:
            self._pending = snapshot
            if not self._draining:
                self._draining = True
                self._future = self._executor.submit(self._drain)

    def _drain(self) -> None:
        while True:
            with self._lock:
                snapshot = self._pending
                self._pending = None
                if snapshot is None:
                    self._draining = False
                    return
            self._write(snapshot)

    def _write(self, snapshot: dict[str, Any]) -> None:
        try:
            self.adapter.write(snapshot)
        except PersistenceError as e:
            self._record_failure(e)
            return
        except Exception as e:
            logger.exception("Unexpected error while saving snapshot")
            self._record_failure(PersistenceError(f"Failed to save data: {e}"))
            return

        if self.last_error is not None:
            logger.info("Snapshot saved after earlier failure")
            self.last_error = None
            self._publish_event(
                EventType.PERSISTENCE_RESTORED, message="Changes saved"
            )

    def _record_failure(self, error: PersistenceError) -> None:
        logger.error(f"Failed to persist snapshot: {error}")
        self.last_error = error
        self._publish_event(
            EventType.PERSISTENCE_FAILED,
            message=format_error(error),
            error=error,
        )

    def flush(self, timeout: float | None = None) -> None:
        """Wait until queued snapshots have been written."""
        while True:
            with self._lock:
                future = self._future
                if not self._draining:
                    return
            if future is not None:
                future.result(timeout=timeout)

    def close(self) -> None:
        """Flush pending writes and stop the worker thread."""
        self.flush()
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
