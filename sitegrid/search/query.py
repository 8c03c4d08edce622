"""Search query parsing and filtering for websites.

Two query forms are supported:

- Plain text: case-insensitive substring match against website names.
- Tag queries starting with ``tag:``: the longest tag name that prefixes
  the rest of the query selects a tag, and any text after it narrows the
  result by name. ``tag:work gh`` and ``tag:workgh`` both mean "tagged
  *work* and named like *gh*".

A tag query whose text matches no tag returns nothing; it never falls back
to an unfiltered list.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import msgspec

from sitegrid.core.models import Tag, Website

TAG_PREFIX = "tag:"


class TagQueryResult(msgspec.Struct, frozen=True):
    """Outcome of matching a tag query against the registry."""

    tag: Tag | None = None
    additional_text: str = ""


def is_tag_query(query: str) -> bool:
    """Check whether a query starts with ``tag:`` (any case)."""
    return query.strip().lower().startswith(TAG_PREFIX)


def parse_tag_query(query: str) -> str:
    """Return the text after ``tag:``, or an empty string for other queries."""
    trimmed = query.strip()
    if not trimmed.lower().startswith(TAG_PREFIX):
        return ""
    return trimmed[len(TAG_PREFIX) :].strip()


def find_matching_tag(text: str, tags: Iterable[Tag]) -> TagQueryResult:
    """Find the tag with the longest name that prefixes ``text``.

    Matching is case-insensitive. When several tags have the same longest
    name, the first one in ``tags`` wins.

    Args:
        text: Query text after the ``tag:`` prefix
        tags: Known tags, in registry order

    Returns:
        The matched tag (or None) and the remaining search text
    """
    text = text.strip()
    lowered = text.lower()
    if not lowered:
        return TagQueryResult()

    matched: Tag | None = None
    longest = 0
    for tag in tags:
        name = tag.name.lower()
        if name and lowered.startswith(name) and len(name) > longest:
            matched = tag
            longest = len(name)

    if matched is None:
        return TagQueryResult()

    return TagQueryResult(tag=matched, additional_text=text[longest:].strip())


def filter_tags(tags: Iterable[Tag], search_text: str) -> list[Tag]:
    """Tags whose name contains ``search_text`` (for tag suggestions)."""
    tags = list(tags)
    if not search_text:
        return tags
    needle = search_text.lower()
    return [tag for tag in tags if needle in tag.name.lower()]


def _name_contains(websites: Iterable[Website], text: str) -> list[Website]:
    needle = text.lower()
    return [w for w in websites if needle in w.name.lower()]


def filter_websites(
    query: str,
    websites: Sequence[Website],
    tags: Iterable[Tag],
) -> list[Website]:
    """Filter the websites of a page by a search query.

    Args:
        query: Raw search string
        websites: Websites of the current page, in display order
        tags: Tag registry contents

    Returns:
        Matching websites in their original order
    """
    query = query.strip()
    if not query:
        return list(websites)

    if not is_tag_query(query):
        return _name_contains(websites, query)

    remainder = parse_tag_query(query)
    if not remainder:
        return list(websites)

    result = find_matching_tag(remainder, tags)
    if result.tag is None:
        return []

    tag_id = result.tag.id
    tagged = [w for w in websites if tag_id in w.tag_ids]
    if result.additional_text:
        return _name_contains(tagged, result.additional_text)
    return tagged
