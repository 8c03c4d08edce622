"""Sample data loaded for first-time users."""

from __future__ import annotations

from sitegrid.core.favicon import FaviconResolver, get_favicon_url
from sitegrid.core.models import Position, Tag, Website
from sitegrid.core.validators import normalize_url

SAMPLE_WEBSITES: tuple[tuple[str, str], ...] = (
    ("Google", "https://google.com"),
    ("GitHub", "https://github.com"),
    ("YouTube", "https://youtube.com"),
    ("Twitter", "https://twitter.com"),
    ("Reddit", "https://reddit.com"),
    ("Stack Overflow", "https://stackoverflow.com"),
    ("LinkedIn", "https://linkedin.com"),
    ("Medium", "https://medium.com"),
)

SAMPLE_TAGS: tuple[tuple[str, str], ...] = (
    ("Work", "#667eea"),
    ("Personal", "#FF6B6B"),
    ("Shopping", "#4ECDC4"),
    ("Social", "#FFA07A"),
    ("Entertainment", "#98D8C8"),
)


def sample_websites(
    per_page: int, favicon_resolver: FaviconResolver = get_favicon_url
) -> list[Website]:
    """Sample websites laid out in order from the first page."""
    websites = []
    for index, (name, url) in enumerate(SAMPLE_WEBSITES):
        url = normalize_url(url)
        websites.append(
            Website(
                name=name,
                url=url,
                favicon=favicon_resolver(url),
                position=Position(page=index // per_page, order=index % per_page),
            )
        )
    return websites


def sample_tags() -> list[Tag]:
    return [Tag(name=name, color=color) for name, color in SAMPLE_TAGS]
