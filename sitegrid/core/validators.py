"""Field validation for websites, tags and extra links.

Validation functions return plain booleans; the validator classes collect
per-field messages into a dictionary so callers can raise a single
``ValidationError`` describing every problem with an input at once.

Key validators:
- WebsiteValidator: name, URL, icon transform and reference checks
- ExtraLinkValidator: link name/URL rules and list-level constraints
- TagValidator: tag name and color checks
"""

from __future__ import annotations

import re
from collections.abc import Container, Iterable, Mapping
from typing import Any
from urllib.parse import urlsplit, urlunsplit

from .exceptions import ValidationError
from .models import (
    MAX_EXTRA_LINKS,
    MAX_ICON_OFFSET,
    MAX_ICON_ZOOM,
    MAX_LINK_NAME_LENGTH,
    MAX_NAME_LENGTH,
    MAX_TAG_NAME_LENGTH,
    MIN_ICON_ZOOM,
    ExtraLink,
)

DEFAULT_SCHEME = "https"

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://")
_HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")
_HOST_RE = re.compile(r"^[A-Za-z0-9\-._~%!$&'()*+,;=:]+$")


def normalize_url(url: str | None) -> str:
    """Normalize a URL by adding a scheme when it is missing.

    The scheme and host are lowercased and an empty path becomes ``/`` so
    that equivalent inputs normalize to the same string.

    Args:
        url: Raw URL as typed by the user

    Returns:
        Normalized URL, or an empty string for empty input
    """
    if not url:
        return ""

    normalized = url.strip()
    if not normalized:
        return ""

    if not _SCHEME_RE.match(normalized):
        normalized = f"{DEFAULT_SCHEME}://{normalized}"

    try:
        parts = urlsplit(normalized)
    except ValueError:
        return normalized

    if not parts.netloc:
        return normalized

    netloc = parts.netloc
    if "@" in netloc:
        userinfo, host = netloc.rsplit("@", 1)
        netloc = f"{userinfo}@{host.lower()}"
    else:
        netloc = netloc.lower()

    return urlunsplit(
        (parts.scheme.lower(), netloc, parts.path or "/", parts.query, parts.fragment)
    )


def is_valid_url(url: Any) -> bool:
    """Check that a string is an absolute http(s) URL with a host."""
    if not url or not isinstance(url, str):
        return False

    try:
        parts = urlsplit(url)
        # Accessing port validates it
        parts.port
    except ValueError:
        return False

    if parts.scheme.lower() not in ("http", "https"):
        return False

    host = parts.hostname
    if not host:
        return False

    return bool(_HOST_RE.match(host))


def get_domain(url: str | None) -> str:
    """Extract the host name from a URL, or an empty string."""
    if not url:
        return ""
    try:
        return urlsplit(url).hostname or ""
    except ValueError:
        return ""


def get_origin(url: str | None) -> str:
    """Extract scheme, host and port from a URL, or an empty string."""
    if not url:
        return ""
    try:
        parts = urlsplit(url)
    except ValueError:
        return ""
    if not parts.scheme or not parts.hostname:
        return ""
    return f"{parts.scheme}://{parts.netloc.rsplit('@', 1)[-1]}"


def is_valid_name(name: Any, max_length: int = MAX_NAME_LENGTH) -> bool:
    """Check that a name is non-empty after trimming and within length."""
    if not name or not isinstance(name, str):
        return False
    trimmed = name.strip()
    return 0 < len(trimmed) <= max_length


def is_valid_hex_color(color: Any) -> bool:
    """Check for a ``#RRGGBB`` color string."""
    if not isinstance(color, str):
        return False
    return bool(_HEX_COLOR_RE.match(color))


class ExtraLinkValidator:
    """Validate extra links attached to a website."""

    def validate_link(self, link: ExtraLink) -> dict[str, str]:
        """Validate a single link's name and URL."""
        errors = {}
        if not is_valid_name(link.name, MAX_LINK_NAME_LENGTH):
            errors["name"] = f"Name is required (max {MAX_LINK_NAME_LENGTH} characters)"
        if not is_valid_url(normalize_url(link.url)):
            errors["url"] = "Please enter a valid URL"
        return errors

    def validate(self, links: Iterable[ExtraLink]) -> dict[str, str]:
        """Validate a complete list of links.

        Returns:
            Mapping of ``extra_links`` or ``extra_links[i].field`` to messages
        """
        links = list(links)
        errors: dict[str, str] = {}

        if len(links) > MAX_EXTRA_LINKS:
            errors["extra_links"] = f"Maximum {MAX_EXTRA_LINKS} extra links allowed"

        seen: set[str] = set()
        for i, link in enumerate(links):
            for field, message in self.validate_link(link).items():
                errors[f"extra_links[{i}].{field}"] = message

            lowered = link.name.strip().lower()
            if lowered in seen:
                errors[f"extra_links[{i}].name"] = (
                    "A link with this name already exists"
                )
            seen.add(lowered)

        return errors


class WebsiteValidator:
    """Validate website fields before they reach the store."""

    def __init__(self):
        self.link_validator = ExtraLinkValidator()

    def validate(
        self,
        fields: Mapping[str, Any],
        tag_ids: Container[str] | None = None,
    ) -> dict[str, str]:
        """Validate the given website fields.

        Only the keys present in ``fields`` are checked, which makes the same
        validator usable for creation and for partial updates.

        Args:
            fields: Field values keyed by snake_case field name
            tag_ids: Known tag ids; when given, references are checked

        Returns:
            Mapping of field name to error message (empty when valid)
        """
        errors: dict[str, str] = {}

        if "name" in fields and not is_valid_name(fields["name"]):
            errors["name"] = f"Name is required (max {MAX_NAME_LENGTH} characters)"

        url = fields.get("url")
        if "url" in fields and (
            not isinstance(url, str) or not is_valid_url(normalize_url(url))
        ):
            errors["url"] = "Please enter a valid URL"

        if "icon_zoom" in fields:
            zoom = fields["icon_zoom"]
            if not _is_number(zoom) or not MIN_ICON_ZOOM <= zoom <= MAX_ICON_ZOOM:
                errors["icon_zoom"] = (
                    f"Zoom must be between {MIN_ICON_ZOOM} and {MAX_ICON_ZOOM}"
                )

        for field in ("icon_offset_x", "icon_offset_y"):
            if field in fields:
                offset = fields[field]
                if not _is_number(offset) or abs(offset) > MAX_ICON_OFFSET:
                    errors[field] = (
                        f"Offset must be between -{MAX_ICON_OFFSET:g} "
                        f"and {MAX_ICON_OFFSET:g} percent"
                    )

        if "icon_background_color" in fields:
            color = fields["icon_background_color"]
            if color != "transparent" and not is_valid_hex_color(color):
                errors["icon_background_color"] = (
                    "Background must be 'transparent' or a #RRGGBB color"
                )

        if "custom_icon" in fields:
            icon = fields["custom_icon"]
            if icon is not None and (not isinstance(icon, str) or not icon.strip()):
                errors["custom_icon"] = "Custom icon must be a non-empty string"

        if "tag_ids" in fields:
            ids = list(fields["tag_ids"] or ())
            if len(set(ids)) != len(ids):
                errors["tag_ids"] = "Tag ids must not repeat"
            elif tag_ids is not None:
                unknown = [t for t in ids if t not in tag_ids]
                if unknown:
                    errors["tag_ids"] = f"Unknown tag ids: {', '.join(unknown)}"

        if "category_id" in fields and tag_ids is not None:
            category = fields["category_id"]
            if category is not None and category not in tag_ids:
                errors["category_id"] = f"Unknown category: {category}"

        if "extra_links" in fields:
            errors.update(self.link_validator.validate(fields["extra_links"] or ()))

        return errors

    def check(
        self,
        fields: Mapping[str, Any],
        tag_ids: Container[str] | None = None,
    ) -> None:
        """Validate and raise ``ValidationError`` on any problem."""
        errors = self.validate(fields, tag_ids)
        if errors:
            raise ValidationError(errors)


class TagValidator:
    """Validate tag fields."""

    def validate(self, fields: Mapping[str, Any]) -> dict[str, str]:
        errors = {}
        if "name" in fields and not is_valid_name(fields["name"], MAX_TAG_NAME_LENGTH):
            errors["name"] = (
                f"Tag name is required (max {MAX_TAG_NAME_LENGTH} characters)"
            )
        if "color" in fields and not is_valid_hex_color(fields["color"]):
            errors["color"] = "Color must be a #RRGGBB hex value"
        return errors

    def check(self, fields: Mapping[str, Any]) -> None:
        errors = self.validate(fields)
        if errors:
            raise ValidationError(errors)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
