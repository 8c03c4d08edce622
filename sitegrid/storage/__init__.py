"""Storage layer: snapshots, version upgrades, backends and events.

Main components:
- SnapshotStorage / SnapshotWriter: Persist snapshots and report failures
- load_snapshot / build_snapshot: Import validation and export
- EventBus: Change notifications
"""

from .backends import BaseBackend, FileSystemBackend, MemoryBackend
from .events import Event, EventBus, EventPublisher, EventType
from .migrations import SnapshotMigrator, default_migrator
from .persistence import PersistenceAdapter, SnapshotStorage, SnapshotWriter
from .snapshot import build_snapshot, encode_snapshot, load_snapshot, snapshot_to_dict

__all__ = [
    # Backends
    "BaseBackend",
    "FileSystemBackend",
    "MemoryBackend",
    # Events
    "Event",
    "EventBus",
    "EventPublisher",
    "EventType",
    # Snapshots
    "SnapshotMigrator",
    "default_migrator",
    "build_snapshot",
    "encode_snapshot",
    "load_snapshot",
    "snapshot_to_dict",
    # Persistence
    "PersistenceAdapter",
    "SnapshotStorage",
    "SnapshotWriter",
]
