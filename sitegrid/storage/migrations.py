"""Snapshot format upgrades.

Snapshots older than ``CURRENT_VERSION`` are routed through registered
upgrade steps, one version at a time, before validation. Snapshots from a
newer release cannot be interpreted safely and are rejected.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from sitegrid.core.exceptions import SnapshotImportError
from sitegrid.core.models import CURRENT_VERSION

logger = logging.getLogger(__name__)

UpgradeStep = Callable[[dict[str, Any]], dict[str, Any]]

LEGACY_VERSION = "1.0"


def parse_version(version: Any) -> tuple[int, ...] | None:
    """Parse ``"major.minor"`` into a comparable tuple, or None if malformed."""
    if not isinstance(version, str) or not version.strip():
        return None
    try:
        parts = [int(part) for part in version.strip().split(".")]
    except ValueError:
        return None
    if any(part < 0 for part in parts):
        return None
    # "2" and "2.0" are the same version
    while len(parts) > 1 and parts[-1] == 0:
        parts.pop()
    return tuple(parts)


def upgrade_flat_export(raw: dict[str, Any]) -> dict[str, Any]:
    """Convert the flat 1.0 layout into the 2.0 envelope.

    Version 1.0 exports kept ``websites``, ``tags`` (``categories`` in the
    desktop build) and ``settings`` at the top level next to ``version``.
    """
    if "data" in raw and isinstance(raw["data"], dict):
        data = dict(raw["data"])
    else:
        data = {
            "websites": raw.get("websites"),
            "tags": raw.get("tags", raw.get("categories")),
            "settings": raw.get("settings"),
        }

    if data.get("tags") is None:
        data["tags"] = []
    if not data.get("settings"):
        data.pop("settings", None)

    return {
        "version": "2.0",
        "data": data,
        "timestamp": raw.get("timestamp") or datetime.now().isoformat(),
    }


class SnapshotMigrator:
    """Applies registered upgrade steps to raw snapshot dictionaries."""

    def __init__(self, current_version: str = CURRENT_VERSION):
        self.current_version = current_version
        self._steps: dict[tuple[int, ...], tuple[str, UpgradeStep]] = {}

    def register(self, from_version: str, to_version: str, step: UpgradeStep) -> None:
        """Register an upgrade from one version to the next."""
        source = parse_version(from_version)
        target = parse_version(to_version)
        if source is None or target is None or target <= source:
            raise ValueError(f"Upgrade must move forward: {from_version} -> {to_version}")
        self._steps[source] = (to_version, step)

    def detect_version(self, raw: dict[str, Any]) -> str:
        """Read the snapshot version, treating unversioned flat exports as 1.0."""
        version = raw.get("version")
        if version is None and "websites" in raw:
            return LEGACY_VERSION
        if version is None:
            raise SnapshotImportError("Snapshot has no version")
        return str(version)

    def needs_upgrade(self, raw: dict[str, Any]) -> bool:
        return parse_version(self.detect_version(raw)) != parse_version(
            self.current_version
        )

    def upgrade(self, raw: dict[str, Any]) -> dict[str, Any]:
        """Bring a raw snapshot up to the current version.

        Raises:
            SnapshotImportError: If the version is malformed, newer than the
                current version, or has no upgrade path
        """
        version = self.detect_version(raw)
        parsed = parse_version(version)
        current = parse_version(self.current_version)

        if parsed is None:
            raise SnapshotImportError(f"Unrecognized snapshot version: {version!r}")
        if parsed > current:
            raise SnapshotImportError(
                f"Snapshot version {version} is newer than the supported "
                f"version {self.current_version}"
            )

        while parsed != current:
            if parsed not in self._steps:
                raise SnapshotImportError(
                    f"No upgrade path from snapshot version {version}"
                )
            next_version, step = self._steps[parsed]
            logger.info(f"Upgrading snapshot from {version} to {next_version}")
            raw = step(raw)
            raw["version"] = next_version
            version = next_version
            parsed = parse_version(version)

        return raw


def default_migrator() -> SnapshotMigrator:
    """Migrator with every built-in upgrade step registered."""
    migrator = SnapshotMigrator()
    migrator.register(LEGACY_VERSION, "2.0", upgrade_flat_export)
    return migrator
