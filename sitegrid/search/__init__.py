"""Website search with tag-prefixed queries."""

from .query import (
    TAG_PREFIX,
    TagQueryResult,
    filter_tags,
    filter_websites,
    find_matching_tag,
    is_tag_query,
    parse_tag_query,
)

__all__ = [
    "TAG_PREFIX",
    "TagQueryResult",
    "filter_tags",
    "filter_websites",
    "find_matching_tag",
    "is_tag_query",
    "parse_tag_query",
]
