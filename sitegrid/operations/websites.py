"""Website operations that report outcomes as results instead of raising."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from sitegrid.collections.store import CollectionStore
from sitegrid.core.exceptions import SiteGridError

from .results import OperationResult

logger = logging.getLogger(__name__)


class WebsiteOperations:
    """Create, edit, move and delete websites for a user interface."""

    def __init__(self, store: CollectionStore):
        self.store = store

    def create(
        self,
        name: str,
        url: str,
        *,
        tag_ids: Sequence[str] = (),
        category_id: str | None = None,
        custom_icon: str | None = None,
        extra_links: Iterable[Any] = (),
    ) -> OperationResult:
        """Add a website.

        Returns:
            Success with the created website, or ``VALIDATION_FAILED`` with
            per-field messages
        """
        try:
            website = self.store.add_website(
                name,
                url,
                tag_ids=tag_ids,
                category_id=category_id,
                custom_icon=custom_icon,
                extra_links=extra_links,
            )
        except SiteGridError as e:
            logger.debug(f"Create website rejected: {e}")
            return OperationResult.from_error(e)

        return OperationResult.ok(
            f"Added {website.name}", entity_id=website.id, entity=website
        )

    def update(self, website_id: str, patch: Mapping[str, Any]) -> OperationResult:
        try:
            website = self.store.edit_website(website_id, patch)
        except SiteGridError as e:
            return OperationResult.from_error(e, entity_id=website_id)

        return OperationResult.ok(
            f"Updated {website.name}", entity_id=website_id, entity=website
        )

    def delete(self, website_id: str) -> OperationResult:
        try:
            website = self.store.delete_website(website_id)
        except SiteGridError as e:
            return OperationResult.from_error(e, entity_id=website_id)

        return OperationResult.ok(
            f"Deleted {website.name}", entity_id=website_id, entity=website
        )

    def visit(self, website_id: str) -> OperationResult:
        """Record a visit and return the website whose URL should be opened."""
        try:
            website = self.store.visit_website(website_id)
        except SiteGridError as e:
            return OperationResult.from_error(e, entity_id=website_id)

        return OperationResult.ok(website.url, entity_id=website_id, entity=website)

    def move(self, website_id: str, page: int, order: int) -> OperationResult:
        try:
            website = self.store.move_website(website_id, page, order)
        except SiteGridError as e:
            return OperationResult.from_error(e, entity_id=website_id)

        return OperationResult.ok(
            f"Moved {website.name} to page {page + 1}",
            entity_id=website_id,
            entity=website,
        )

    def reorder(self, page: int, ordered_ids: Sequence[str]) -> OperationResult:
        """Reorder a page; a stale id list yields ``CONFLICT``."""
        try:
            websites = self.store.update_website_positions(page, ordered_ids)
        except SiteGridError as e:
            return OperationResult.from_error(e)

        return OperationResult.ok(
            f"Reordered {len(websites)} websites on page {page + 1}", entity=websites
        )
