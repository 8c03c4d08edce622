"""Tag operations with duplicate-name checks."""

from __future__ import annotations

import logging

from sitegrid.collections.store import CollectionStore
from sitegrid.core.exceptions import DuplicateError, SiteGridError

from .results import OperationResult

logger = logging.getLogger(__name__)


class TagOperations:
    """Create, rename, recolor and delete tags for a user interface.

    Tag names must be unique here, ignoring case, although the store itself
    accepts duplicates.
    """

    def __init__(self, store: CollectionStore):
        self.store = store

    def _check_unique(self, name: str, tag_id: str | None = None) -> None:
        existing = self.store.find_tag_by_name(name)
        if existing is not None and existing.id != tag_id:
            raise DuplicateError("tag", name.strip())

    def create(self, name: str, color: str | None = None) -> OperationResult:
        try:
            self._check_unique(name)
            tag = self.store.add_tag(name, color)
        except SiteGridError as e:
            logger.debug(f"Create tag rejected: {e}")
            return OperationResult.from_error(e)

        return OperationResult.ok(
            f"Created tag {tag.name}", entity_id=tag.id, entity=tag
        )

    def rename(self, tag_id: str, name: str) -> OperationResult:
        try:
            self._check_unique(name, tag_id)
            tag = self.store.rename_tag(tag_id, name)
        except SiteGridError as e:
            return OperationResult.from_error(e, entity_id=tag_id)

        return OperationResult.ok(
            f"Renamed tag to {tag.name}", entity_id=tag_id, entity=tag
        )

    def recolor(self, tag_id: str, color: str) -> OperationResult:
        try:
            tag = self.store.update_tag(tag_id, color=color)
        except SiteGridError as e:
            return OperationResult.from_error(e, entity_id=tag_id)

        return OperationResult.ok(
            f"Changed color of {tag.name}", entity_id=tag_id, entity=tag
        )

    def delete(self, tag_id: str) -> OperationResult:
        try:
            tag = self.store.delete_tag(tag_id)
        except SiteGridError as e:
            return OperationResult.from_error(e, entity_id=tag_id)

        return OperationResult.ok(
            f"Deleted tag {tag.name}", entity_id=tag_id, entity=tag
        )
