"""Tag registry for website categorization.

This module implements:
- Tag CRUD with name and color validation
- Case-insensitive lookup by name
- Usage counts across a website collection
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable, Iterator
from datetime import datetime

import msgspec

from sitegrid.core.exceptions import NotFoundError
from sitegrid.core.models import TAG_COLORS, Tag, TagMetadata, TagWithCount, Website
from sitegrid.core.validators import TagValidator


class TagRegistry:
    """Mapping from tag id to tag, in creation order.

    Names are not required to be unique here; uniqueness is a user-interface
    rule enforced by the tag operations.
    """

    def __init__(
        self,
        tags: Iterable[Tag] = (),
        clock: Callable[[], datetime] = datetime.now,
    ):
        """Initialize registry.

        Args:
            tags: Initial tags, kept in the given order
            clock: Source of creation and update timestamps
        """
        self.clock = clock
        self._tags: dict[str, Tag] = {tag.id: tag for tag in tags}
        self.validator = TagValidator()

    def __iter__(self) -> Iterator[Tag]:
        return iter(list(self._tags.values()))

    def __len__(self) -> int:
        return len(self._tags)

    def __contains__(self, tag_id: object) -> bool:
        return tag_id in self._tags

    @property
    def ids(self) -> set[str]:
        return set(self._tags)

    def all(self) -> list[Tag]:
        """All tags in registry order."""
        return list(self._tags.values())

    def get(self, tag_id: str) -> Tag | None:
        return self._tags.get(tag_id)

    def require(self, tag_id: str) -> Tag:
        """Get a tag or raise ``NotFoundError``."""
        tag = self._tags.get(tag_id)
        if tag is None:
            raise NotFoundError("Tag", tag_id)
        return tag

    def find_by_name(self, name: str) -> Tag | None:
        """Find the first tag whose name matches case-insensitively."""
        wanted = name.strip().lower()
        for tag in self._tags.values():
            if tag.name.lower() == wanted:
                return tag
        return None

    def next_color(self) -> str:
        """Suggest a color for a new tag, cycling through the palette."""
        return TAG_COLORS[len(self._tags) % len(TAG_COLORS)]

    def add(self, name: str, color: str | None = None) -> Tag:
        """Create and register a tag.

        Raises:
            ValidationError: If name or color is invalid
        """
        color = color or self.next_color()
        self.validator.check({"name": name, "color": color})

        now = self.clock()
        tag = Tag(
            name=name.strip(),
            color=color,
            metadata=TagMetadata(created_at=now, updated_at=now),
        )
        self._tags[tag.id] = tag
        return tag

    def update(
        self,
        tag_id: str,
        name: str | None = None,
        color: str | None = None,
    ) -> Tag:
        """Change a tag's name and/or color.

        Raises:
            NotFoundError: If the tag does not exist
            ValidationError: If a new value is invalid
        """
        tag = self.require(tag_id)

        changes = {}
        if name is not None:
            changes["name"] = name
        if color is not None:
            changes["color"] = color
        if not changes:
            return tag

        self.validator.check(changes)
        if "name" in changes:
            changes["name"] = changes["name"].strip()

        updated = msgspec.structs.replace(
            tag,
            **changes,
            metadata=TagMetadata(
                created_at=tag.metadata.created_at, updated_at=self.clock()
            ),
        )
        self._tags[tag_id] = updated
        return updated

    def rename(self, tag_id: str, name: str) -> Tag:
        return self.update(tag_id, name=name)

    def remove(self, tag_id: str) -> Tag:
        """Unregister a tag.

        Raises:
            NotFoundError: If the tag does not exist
        """
        tag = self.require(tag_id)
        del self._tags[tag_id]
        return tag

    def replace_all(self, tags: Iterable[Tag]) -> None:
        """Swap in a complete new set of tags."""
        self._tags = {tag.id: tag for tag in tags}

    def clear(self) -> None:
        self._tags.clear()

    def with_counts(self, websites: Iterable[Website]) -> list[TagWithCount]:
        """Tags annotated with how many websites carry them in ``tag_ids``."""
        usage: Counter[str] = Counter()
        for website in websites:
            usage.update(set(website.tag_ids))
        return [TagWithCount(tag=tag, count=usage[tag.id]) for tag in self._tags.values()]
