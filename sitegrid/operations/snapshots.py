"""Export to and import from JSON files."""

from __future__ import annotations

import logging
from pathlib import Path

from sitegrid.collections.store import CollectionStore
from sitegrid.core.exceptions import SnapshotImportError
from sitegrid.storage.snapshot import encode_snapshot

from .results import OperationResult

logger = logging.getLogger(__name__)


class SnapshotOperations:
    """File-level export and import of the whole collection."""

    def __init__(self, store: CollectionStore):
        self.store = store

    def export_file(self, path: Path) -> OperationResult:
        snapshot = self.store.export_snapshot()
        path = Path(path)
        path.write_bytes(encode_snapshot(snapshot))

        logger.info(f"Exported {len(snapshot.data.websites)} websites to {path}")
        return OperationResult.ok(
            f"Exported {len(snapshot.data.websites)} websites to {path}",
            entity=snapshot,
        )

    def import_file(self, path: Path) -> OperationResult:
        """Import a JSON export, leaving the collection untouched on failure."""
        path = Path(path)
        try:
            raw = path.read_bytes()
        except OSError as e:
            return OperationResult.from_error(
                SnapshotImportError(f"Cannot read {path}", [str(e)])
            )

        try:
            snapshot = self.store.import_snapshot(raw)
        except SnapshotImportError as e:
            logger.warning(f"Import of {path} failed: {e}")
            return OperationResult.from_error(e)

        return OperationResult.ok(
            f"Imported {len(snapshot.data.websites)} websites and "
            f"{len(snapshot.data.tags)} tags",
            entity=snapshot,
        )
