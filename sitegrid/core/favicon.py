"""Favicon URL construction.

Only URLs are built here; nothing is fetched. The collection store calls
the resolver when a website is added or its URL changes and stores the
result in ``Website.favicon``.
"""

from __future__ import annotations

from collections.abc import Callable
from urllib.parse import quote

from .validators import get_domain, get_origin

DEFAULT_ICON_URL = "/default-icon.svg"

FaviconResolver = Callable[[str], str]

FAVICON_SERVICES: dict[str, Callable[[str], str]] = {
    "google": lambda domain: (
        f"https://www.google.com/s2/favicons?domain={quote(domain)}&sz=128"
    ),
    "duckduckgo": lambda domain: f"https://icons.duckduckgo.com/ip3/{quote(domain)}.ico",
    "direct": lambda origin: f"{origin}/favicon.ico",
}


def get_favicon_url(url: str | None) -> str:
    """Return the display favicon URL for a website URL.

    Uses the Google favicon service; URLs without a host get the bundled
    default icon.
    """
    domain = get_domain(url)
    if not domain:
        return DEFAULT_ICON_URL
    return FAVICON_SERVICES["google"](domain)


def favicon_candidates(url: str | None) -> list[str]:
    """Return favicon URLs in fallback order, ending with the default icon."""
    domain = get_domain(url)
    if not domain:
        return [DEFAULT_ICON_URL]

    return [
        FAVICON_SERVICES["google"](domain),
        FAVICON_SERVICES["duckduckgo"](domain),
        FAVICON_SERVICES["direct"](get_origin(url)),
        DEFAULT_ICON_URL,
    ]
