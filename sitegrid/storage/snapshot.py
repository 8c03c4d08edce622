"""Snapshot building and validation for persistence and export/import.

Export builds a versioned envelope from the current state. Import runs the
reverse path in stages and never touches live state itself: it returns a
fully validated, normalized ``Snapshot`` that the collection store commits
in one step, or raises ``SnapshotImportError``.

Import stages:
1. Decode (JSON text or bytes) and require a mapping
2. Route through version upgrades
3. Check required keys
4. Convert to typed records (unknown fields ignored, optional fields defaulted)
5. Semantic checks (unique ids, names, URLs, extra links, positions)
6. Normalize references and page layout
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

import msgspec

from sitegrid.core.exceptions import SnapshotImportError
from sitegrid.core.models import (
    CURRENT_VERSION,
    Settings,
    Snapshot,
    SnapshotData,
    Tag,
    Website,
)
from sitegrid.core.positions import (
    compact_all,
    needs_redistribution,
    redistribute,
    sort_by_position,
)
from sitegrid.core.validators import TagValidator, WebsiteValidator, normalize_url

from .migrations import SnapshotMigrator, default_migrator

logger = logging.getLogger(__name__)

_WEBSITE_CHECKED_FIELDS = (
    "name",
    "url",
    "icon_zoom",
    "icon_offset_x",
    "icon_offset_y",
    "icon_background_color",
    "custom_icon",
    "extra_links",
)


def build_snapshot(
    websites: Iterable[Website],
    tags: Iterable[Tag],
    settings: Settings,
) -> Snapshot:
    """Build a snapshot of the given state, stamped with the current time.

    Records are immutable, so copying the containers is enough to make the
    snapshot independent of later mutations.
    """
    return Snapshot(
        version=CURRENT_VERSION,
        data=SnapshotData(
            websites=tuple(sort_by_position(websites)),
            tags=tuple(tags),
            settings=settings,
        ),
        timestamp=datetime.now(),
    )


def snapshot_to_dict(snapshot: Snapshot) -> dict[str, Any]:
    """Convert a snapshot to JSON-compatible builtins.

    Goes through JSON so sequences come back as lists on every msgspec
    release.
    """
    return msgspec.json.decode(msgspec.json.encode(snapshot))


def encode_snapshot(snapshot: Snapshot, indent: int = 2) -> bytes:
    """Encode a snapshot as (optionally indented) JSON bytes."""
    encoded = msgspec.json.encode(snapshot)
    if indent:
        return msgspec.json.format(encoded, indent=indent)
    return encoded


def _decode(raw: Any) -> dict[str, Any]:
    if isinstance(raw, Snapshot):
        return snapshot_to_dict(raw)

    if isinstance(raw, (bytes, bytearray, str)):
        try:
            raw = msgspec.json.decode(raw)
        except msgspec.DecodeError as e:
            raise SnapshotImportError("Snapshot is not valid JSON", [str(e)]) from e

    if not isinstance(raw, dict):
        raise SnapshotImportError(
            f"Snapshot must be an object, got {type(raw).__name__}"
        )
    return copy.deepcopy(raw)


def _check_required(raw: dict[str, Any]) -> None:
    problems = []
    for key in ("version", "data"):
        if key not in raw:
            problems.append(f"missing '{key}'")

    data = raw.get("data")
    if "data" in raw and not isinstance(data, dict):
        problems.append("'data' must be an object")
    elif isinstance(data, dict):
        if not isinstance(data.get("websites"), (list, tuple)):
            problems.append("'data.websites' must be a list")
        if "tags" in data and data["tags"] is not None:
            if not isinstance(data["tags"], (list, tuple)):
                problems.append("'data.tags' must be a list")
        if "settings" in data and data["settings"] is not None:
            if not isinstance(data["settings"], dict):
                problems.append("'data.settings' must be an object")

    if problems:
        raise SnapshotImportError("Snapshot is missing required data", problems)

    # Explicit nulls fall back to defaults
    for key in ("tags", "settings"):
        if data.get(key) is None:
            data.pop(key, None)


def _semantic_problems(snapshot: Snapshot) -> list[str]:
    problems = []
    website_validator = WebsiteValidator()
    tag_validator = TagValidator()

    seen_tags: set[str] = set()
    for i, tag in enumerate(snapshot.data.tags):
        if tag.id in seen_tags:
            problems.append(f"tags[{i}]: duplicate id {tag.id}")
        seen_tags.add(tag.id)
        for field, message in tag_validator.validate(
            {"name": tag.name, "color": tag.color}
        ).items():
            problems.append(f"tags[{i}].{field}: {message}")

    seen_websites: set[str] = set()
    for i, website in enumerate(snapshot.data.websites):
        if website.id in seen_websites:
            problems.append(f"websites[{i}]: duplicate id {website.id}")
        seen_websites.add(website.id)

        fields = {name: getattr(website, name) for name in _WEBSITE_CHECKED_FIELDS}
        for field, message in website_validator.validate(fields).items():
            problems.append(f"websites[{i}].{field}: {message}")

        if website.position.page < 0 or website.position.order < 0:
            problems.append(f"websites[{i}].position: negative page or order")
        if website.metadata.visit_count < 0:
            problems.append(f"websites[{i}].metadata.visitCount: negative count")

    return problems


def _normalize_website(website: Website, tag_ids: set[str]) -> Website:
    kept = tuple(dict.fromkeys(t for t in website.tag_ids if t in tag_ids))
    category = website.category_id if website.category_id in tag_ids else None
    return msgspec.structs.replace(
        website,
        name=website.name.strip(),
        url=normalize_url(website.url),
        tag_ids=kept,
        category_id=category,
    )


def _normalize(snapshot: Snapshot) -> Snapshot:
    tag_ids = {tag.id for tag in snapshot.data.tags}
    websites = [_normalize_website(w, tag_ids) for w in snapshot.data.websites]

    pruned = sum(
        len(before.tag_ids) - len(after.tag_ids)
        + (before.category_id is not None and after.category_id is None)
        for before, after in zip(snapshot.data.websites, websites)
    )
    if pruned:
        logger.warning(f"Pruned {pruned} dangling tag references from snapshot")

    per_page = snapshot.data.settings.icons_per_page
    websites = compact_all(websites)
    if needs_redistribution(websites, per_page):
        logger.warning("Snapshot pages exceed capacity; redistributing websites")
        websites = redistribute(websites, per_page)

    return msgspec.structs.replace(
        snapshot,
        data=msgspec.structs.replace(snapshot.data, websites=tuple(websites)),
    )


def load_snapshot(raw: Any, migrator: SnapshotMigrator | None = None) -> Snapshot:
    """Validate raw snapshot data and return a normalized ``Snapshot``.

    Args:
        raw: Snapshot as a dict, JSON text/bytes, or a ``Snapshot``
        migrator: Version upgrader (defaults to the built-in steps)

    Returns:
        Validated snapshot at ``CURRENT_VERSION``

    Raises:
        SnapshotImportError: On any structural or semantic problem
    """
    data = _decode(raw)
    migrator = migrator or default_migrator()
    data = migrator.upgrade(data)
    data["version"] = migrator.current_version
    _check_required(data)

    try:
        snapshot = msgspec.convert(data, Snapshot, strict=False)
    except msgspec.ValidationError as e:
        raise SnapshotImportError(
            "Snapshot does not match the expected structure", [str(e)]
        ) from e

    problems = _semantic_problems(snapshot)
    if problems:
        raise SnapshotImportError("Snapshot failed validation", problems)

    return _normalize(snapshot)
