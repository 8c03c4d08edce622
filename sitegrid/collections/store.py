"""The collection store: websites, tags, settings and the current page.

This module implements:
- Website CRUD with validation and automatic page placement
- Drag-and-drop style moves and in-page reordering
- Tag management with reference pruning on delete
- Settings updates that re-lay pages when the grid size changes
- Snapshot export, import and persistence

The in-memory state is authoritative. Every mutation computes its complete
result first and commits it in one assignment, then hands a snapshot to the
``SnapshotWriter``. A failed write never undoes a mutation; it is reported
through ``persistence_error`` and a ``PERSISTENCE_FAILED`` event.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import datetime
from typing import Any

import msgspec

from sitegrid.core.exceptions import (
    NotFoundError,
    PersistenceError,
    SnapshotImportError,
    ValidationError,
)
from sitegrid.core.favicon import FaviconResolver, get_favicon_url
from sitegrid.core.models import (
    ExtraLink,
    GridSize,
    Position,
    Settings,
    Snapshot,
    Tag,
    TagWithCount,
    Website,
    WebsiteMetadata,
)
from sitegrid.core.positions import (
    compact_page,
    group_by_page,
    move,
    needs_redistribution,
    next_position,
    page_websites,
    redistribute,
    reorder_page,
    sort_by_position,
    total_pages,
)
from sitegrid.core.validators import WebsiteValidator, normalize_url
from sitegrid.search.query import filter_websites
from sitegrid.storage.events import EventBus, EventPublisher, EventType
from sitegrid.storage.persistence import PersistenceAdapter, SnapshotWriter
from sitegrid.storage.snapshot import build_snapshot, load_snapshot, snapshot_to_dict

from .seed import sample_tags, sample_websites
from .tags import TagRegistry

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(
    {
        "name",
        "url",
        "custom_icon",
        "icon_zoom",
        "icon_offset_x",
        "icon_offset_y",
        "icon_background_color",
        "category_id",
        "tag_ids",
        "extra_links",
        "position",
    }
)
IMMUTABLE_FIELDS = frozenset({"id", "metadata", "favicon"})


def _coerce_links(links: Iterable[Any] | None) -> tuple[ExtraLink, ...]:
    """Accept ``ExtraLink`` records or ``{"name", "url"}`` mappings."""
    if links is not None and (
        isinstance(links, (str, Mapping)) or not isinstance(links, Iterable)
    ):
        raise ValidationError({"extra_links": "Extra links must be a list"})
    result = []
    for i, link in enumerate(links or ()):
        if isinstance(link, ExtraLink):
            result.append(link)
            continue
        try:
            result.append(msgspec.convert(link, ExtraLink, strict=False))
        except msgspec.ValidationError as e:
            raise ValidationError({f"extra_links[{i}]": str(e)}) from e
    return tuple(result)


def _coerce_tag_ids(tag_ids: Any) -> tuple[str, ...]:
    if tag_ids is not None and (
        isinstance(tag_ids, str) or not isinstance(tag_ids, Iterable)
    ):
        raise ValidationError({"tag_ids": "Tag ids must be a list"})
    return tuple(tag_ids or ())


def _clean_links(links: Iterable[ExtraLink]) -> tuple[ExtraLink, ...]:
    return tuple(
        msgspec.structs.replace(link, name=link.name.strip(), url=normalize_url(link.url))
        for link in links
    )


def _coerce_position(value: Any) -> tuple[int, int]:
    if isinstance(value, Position):
        return value.page, value.order
    try:
        if isinstance(value, Mapping):
            page, order = value["page"], value["order"]
        else:
            page, order = value
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(
            {"position": "Position needs a page and an order"}
        ) from e
    if not isinstance(page, int) or not isinstance(order, int):
        raise ValidationError({"position": "Page and order must be integers"})
    return page, order


class CollectionStore(EventPublisher):
    """Owns the website collection and keeps it persisted."""

    def __init__(
        self,
        adapter: PersistenceAdapter | None = None,
        event_bus: EventBus | None = None,
        favicon_resolver: FaviconResolver = get_favicon_url,
        clock: Callable[[], datetime] = datetime.now,
        *,
        background_writes: bool = False,
        default_settings: Settings | None = None,
        seed: bool = True,
    ):
        """Initialize store.

        Args:
            adapter: Persistence adapter; None keeps the store in memory only
            event_bus: Event bus for change notifications
            favicon_resolver: Builds a favicon URL from a website URL
            clock: Source of timestamps
            background_writes: Persist on a worker thread
            default_settings: Settings for a store with nothing persisted
            seed: Load sample data when nothing is persisted
        """
        super().__init__(event_bus or EventBus())
        self.adapter = adapter
        self.favicon_resolver = favicon_resolver
        self.clock = clock
        self.seed = seed
        self.default_settings = default_settings or Settings()
        self.validator = WebsiteValidator()

        self._writer: SnapshotWriter | None = None
        if adapter is not None:
            self._writer = SnapshotWriter(
                adapter, self.event_bus, background=background_writes
            )

        self._websites: list[Website] = []
        self._tags = TagRegistry(clock=self.clock)
        self._settings = self.default_settings
        self._current_page = 0

    # Lifecycle

    def initialize(self) -> None:
        """Load the persisted snapshot, falling back to sample data."""
        raw = self.adapter.read() if self.adapter is not None else None

        if raw is not None:
            try:
                snapshot = load_snapshot(raw)
            except SnapshotImportError as e:
                logger.warning(f"Stored data is invalid, starting fresh: {e}")
            else:
                self._apply_snapshot(snapshot)
                logger.info(
                    f"Loaded {len(self._websites)} websites and {len(self._tags)} tags"
                )
                return

        if self.seed:
            self._load_seed()

    def _load_seed(self) -> None:
        self._tags.replace_all(sample_tags())
        self._websites = sample_websites(self.icons_per_page, self.favicon_resolver)
        self._current_page = 0
        logger.info("Loaded sample websites for first use")
        self._publish_event(EventType.SEED_LOADED, count=len(self._websites))
        self._persist()

    def close(self) -> None:
        """Flush pending writes and release the adapter."""
        if self._writer is not None:
            self._writer.close()
        close = getattr(self.adapter, "close", None)
        if close is not None:
            close()

    # Read views

    @property
    def websites(self) -> list[Website]:
        """All websites sorted by ``(page, order)``."""
        return sort_by_position(self._websites)

    @property
    def tags(self) -> list[Tag]:
        return self._tags.all()

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def icons_per_page(self) -> int:
        return self._settings.icons_per_page

    @property
    def total_pages(self) -> int:
        return total_pages(len(self._websites), self.icons_per_page)

    def websites_by_page(self) -> dict[int, list[Website]]:
        return group_by_page(self._websites)

    def page_websites(self, page: int) -> list[Website]:
        return page_websites(self._websites, page)

    def current_page_websites(self) -> list[Website]:
        return page_websites(self._websites, self._current_page)

    def tags_with_count(self) -> list[TagWithCount]:
        return self._tags.with_counts(self._websites)

    def get_website(self, website_id: str) -> Website | None:
        return next((w for w in self._websites if w.id == website_id), None)

    def get_tag(self, tag_id: str) -> Tag | None:
        return self._tags.get(tag_id)

    def find_tag_by_name(self, name: str) -> Tag | None:
        return self._tags.find_by_name(name)

    def _require_website(self, website_id: str) -> Website:
        website = self.get_website(website_id)
        if website is None:
            raise NotFoundError("Website", website_id)
        return website

    # Websites

    def add_website(
        self,
        name: str,
        url: str,
        *,
        tag_ids: Sequence[str] = (),
        category_id: str | None = None,
        custom_icon: str | None = None,
        extra_links: Iterable[Any] = (),
    ) -> Website:
        """Add a website at the end of the last page.

        A new page is started when the last page is full.

        Returns:
            The created website

        Raises:
            ValidationError: If any field is invalid
        """
        links = _coerce_links(extra_links)
        tag_ids = _coerce_tag_ids(tag_ids)
        fields: dict[str, Any] = {
            "name": name,
            "url": url,
            "tag_ids": tag_ids,
            "category_id": category_id,
            "extra_links": links,
        }
        if custom_icon is not None:
            fields["custom_icon"] = custom_icon
        self.validator.check(fields, self._tags.ids)

        url = normalize_url(url)
        now = self.clock()
        website = Website(
            name=name.strip(),
            url=url,
            favicon=self.favicon_resolver(url),
            custom_icon=custom_icon,
            category_id=category_id,
            tag_ids=tuple(tag_ids),
            extra_links=_clean_links(links),
            position=next_position(self._websites, self.icons_per_page),
            metadata=WebsiteMetadata(created_at=now, updated_at=now),
        )

        self._websites = self._settle(self._websites + [website])
        self._clamp_current_page()

        logger.info(f"Added website {website.name} ({website.id})")
        self._publish_event(EventType.WEBSITE_CREATED, website_id=website.id)
        self._persist()
        return self._require_website(website.id)

    def edit_website(self, website_id: str, patch: Mapping[str, Any]) -> Website:
        """Apply a partial update.

        Args:
            website_id: Website to update
            patch: New values keyed by snake_case field name. A ``position``
                entry moves the website as ``move_website`` does.

        Returns:
            The updated website

        Raises:
            NotFoundError: If the website does not exist
            ValidationError: If a key is unknown or immutable, or a value is invalid
            ConflictError: If a requested position is not available
        """
        website = self._require_website(website_id)
        changes = dict(patch)

        errors: dict[str, str] = {}
        for key in changes:
            if key in IMMUTABLE_FIELDS:
                errors[key] = "This field cannot be changed"
            elif key not in EDITABLE_FIELDS:
                errors[key] = "Unknown field"
        if errors:
            raise ValidationError(errors)

        position = changes.pop("position", None)
        if "tag_ids" in changes:
            changes["tag_ids"] = _coerce_tag_ids(changes["tag_ids"])
        if "extra_links" in changes:
            changes["extra_links"] = _coerce_links(changes["extra_links"])
        self.validator.check(changes, self._tags.ids)

        if "name" in changes:
            changes["name"] = changes["name"].strip()
        if "url" in changes:
            changes["url"] = normalize_url(changes["url"])
            changes["favicon"] = self.favicon_resolver(changes["url"])
        if "extra_links" in changes:
            changes["extra_links"] = _clean_links(changes["extra_links"])

        updated = website
        if changes:
            updated = msgspec.structs.replace(
                website,
                **changes,
                metadata=msgspec.structs.replace(
                    website.metadata, updated_at=self.clock()
                ),
            )

        websites = [updated if w.id == website_id else w for w in self._websites]
        if position is not None:
            page, order = _coerce_position(position)
            websites = move(websites, website_id, page, order, self.icons_per_page)

        self._websites = websites
        logger.info(f"Updated website {updated.name} ({website_id})")
        self._publish_event(
            EventType.WEBSITE_UPDATED,
            website_id=website_id,
            fields=sorted(changes) + (["position"] if position is not None else []),
        )
        self._persist()
        return self._require_website(website_id)

    def move_website(self, website_id: str, page: int, order: int) -> Website:
        """Move a website to ``(page, order)``, possibly on another page.

        Raises:
            NotFoundError: If the website does not exist
            ConflictError: If the page does not exist or is full
        """
        self._websites = move(
            self._websites, website_id, page, order, self.icons_per_page
        )

        logger.info(f"Moved website {website_id} to page {page}")
        self._publish_event(
            EventType.POSITIONS_UPDATED, website_id=website_id, page=page
        )
        self._persist()
        return self._require_website(website_id)

    def delete_website(self, website_id: str) -> Website:
        """Remove a website and close the gap on its page.

        Raises:
            NotFoundError: If the website does not exist
        """
        website = self._require_website(website_id)

        remaining = [w for w in self._websites if w.id != website_id]
        remaining = compact_page(remaining, website.page)
        self._websites = self._settle(remaining)
        self._clamp_current_page()

        logger.info(f"Deleted website {website.name} ({website_id})")
        self._publish_event(EventType.WEBSITE_DELETED, website_id=website_id)
        self._persist()
        return website

    def visit_website(self, website_id: str) -> Website:
        """Record a visit. Position is never touched."""
        website = self._require_website(website_id)
        now = self.clock()
        visited = msgspec.structs.replace(
            website,
            metadata=msgspec.structs.replace(
                website.metadata,
                visit_count=website.metadata.visit_count + 1,
                last_visited=now,
            ),
        )
        self._websites = [visited if w.id == website_id else w for w in self._websites]

        self._publish_event(EventType.WEBSITE_VISITED, website_id=website_id)
        self._persist()
        return visited

    def update_website_positions(
        self, page: int, ordered_ids: Sequence[str]
    ) -> list[Website]:
        """Reorder one page to match ``ordered_ids``.

        Raises:
            ConflictError: If ``ordered_ids`` is not exactly the ids on ``page``
        """
        self._websites = reorder_page(self._websites, page, list(ordered_ids))

        logger.info(f"Reordered {len(ordered_ids)} websites on page {page}")
        self._publish_event(EventType.POSITIONS_UPDATED, page=page)
        self._persist()
        return self.page_websites(page)

    # Tags

    def add_tag(self, name: str, color: str | None = None) -> Tag:
        """Create a tag. Names are validated but not checked for duplicates."""
        tag = self._tags.add(name, color)

        logger.info(f"Added tag {tag.name} ({tag.id})")
        self._publish_event(EventType.TAG_CREATED, tag_id=tag.id)
        self._persist()
        return tag

    def update_tag(
        self,
        tag_id: str,
        *,
        name: str | None = None,
        color: str | None = None,
    ) -> Tag:
        tag = self._tags.update(tag_id, name=name, color=color)

        self._publish_event(EventType.TAG_UPDATED, tag_id=tag_id)
        self._persist()
        return tag

    def rename_tag(self, tag_id: str, name: str) -> Tag:
        return self.update_tag(tag_id, name=name)

    def delete_tag(self, tag_id: str) -> Tag:
        """Delete a tag and prune it from every website.

        Pruned websites keep their ``updated_at``; only the reference goes.

        Raises:
            NotFoundError: If the tag does not exist
        """
        self._tags.require(tag_id)

        pruned = [w.without_tag(tag_id) for w in self._websites]
        affected = sum(
            1 for before, after in zip(self._websites, pruned) if before is not after
        )
        tag = self._tags.remove(tag_id)
        self._websites = pruned

        logger.info(f"Deleted tag {tag.name}, pruned from {affected} websites")
        self._publish_event(EventType.TAG_DELETED, tag_id=tag_id, pruned=affected)
        self._persist()
        return tag

    # Settings and navigation

    def update_settings(self, settings: Settings | Mapping[str, Any]) -> Settings:
        """Replace the settings as a whole.

        A change of grid size re-lays every page for the new capacity while
        keeping the overall order of websites.

        Raises:
            ValidationError: If a mapping cannot be converted to settings
        """
        if not isinstance(settings, Settings):
            try:
                settings = msgspec.convert(settings, Settings, strict=False)
            except msgspec.ValidationError as e:
                raise ValidationError({"settings": str(e)}) from e

        previous = self._settings
        websites = self._websites
        if settings.grid_size != previous.grid_size:
            websites = redistribute(websites, settings.icons_per_page)

        self._settings = settings
        self._websites = websites
        self._clamp_current_page()

        if settings.grid_size != previous.grid_size:
            logger.info(
                f"Grid size changed from {previous.grid_size.value} to "
                f"{settings.grid_size.value}; {self.total_pages} pages"
            )
        self._publish_event(
            EventType.SETTINGS_UPDATED,
            grid_size=settings.grid_size.value,
            previous_grid_size=previous.grid_size.value,
        )
        self._persist()
        return settings

    def set_grid_size(self, grid_size: GridSize | str) -> Settings:
        try:
            size = GridSize(grid_size)
        except ValueError as e:
            raise ValidationError(
                {"grid_size": f"Unknown grid size: {grid_size}"}
            ) from e
        return self.update_settings(
            msgspec.structs.replace(self._settings, grid_size=size)
        )

    def set_current_page(self, page: int) -> int:
        """Navigate to a page, clamped into the existing range."""
        self._current_page = max(0, min(page, self.total_pages - 1))
        return self._current_page

    def search(self, query: str, page: int | None = None) -> list[Website]:
        """Filter a page (the current one by default) by a search query."""
        page = self._current_page if page is None else page
        return filter_websites(query, self.page_websites(page), self._tags.all())

    # Snapshots

    def export_snapshot(self) -> Snapshot:
        return build_snapshot(self._websites, self._tags.all(), self._settings)

    def import_snapshot(self, raw: Any) -> Snapshot:
        """Replace the whole collection with a validated snapshot.

        Nothing changes unless every check passes.

        Raises:
            SnapshotImportError: If the snapshot is malformed or invalid
        """
        snapshot = load_snapshot(raw)
        self._apply_snapshot(snapshot)

        logger.info(
            f"Imported {len(snapshot.data.websites)} websites and "
            f"{len(snapshot.data.tags)} tags"
        )
        self._publish_event(
            EventType.SNAPSHOT_IMPORTED,
            websites=len(snapshot.data.websites),
            tags=len(snapshot.data.tags),
        )
        self._persist()
        return snapshot

    def _apply_snapshot(self, snapshot: Snapshot) -> None:
        self._tags.replace_all(snapshot.data.tags)
        self._websites = list(snapshot.data.websites)
        self._settings = snapshot.data.settings
        self._current_page = 0

    def clear_all(self) -> None:
        """Remove every website and tag and reset the settings."""
        self._websites = []
        self._tags.clear()
        self._settings = self.default_settings
        self._current_page = 0

        logger.info("Cleared all websites and tags")
        self._publish_event(EventType.STORAGE_CLEARED)
        self._persist()

    # Persistence

    @property
    def persistence_error(self) -> PersistenceError | None:
        return self._writer.last_error if self._writer is not None else None

    @property
    def has_pending_write(self) -> bool:
        return self._writer is not None and self._writer.has_pending_write

    def flush(self) -> None:
        """Wait for background writes to finish."""
        if self._writer is not None:
            self._writer.flush()

    def retry_persistence(self) -> bool:
        """Write the current state again after a failure.

        Returns:
            True if storage is up to date afterwards
        """
        if self._writer is None:
            return True
        self._persist()
        self._writer.flush()
        return self._writer.last_error is None

    def _persist(self) -> None:
        if self._writer is None:
            return
        self._writer.submit(snapshot_to_dict(self.export_snapshot()))

    # Layout helpers

    def _settle(self, websites: list[Website]) -> list[Website]:
        per_page = self.icons_per_page
        if needs_redistribution(websites, per_page):
            logger.info("Pages out of range after change; redistributing websites")
            return redistribute(websites, per_page)
        return sort_by_position(websites)

    def _clamp_current_page(self) -> None:
        self._current_page = max(0, min(self._current_page, self.total_pages - 1))
