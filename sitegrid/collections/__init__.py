"""Website collection: the store, tag registry and sample data."""

from .seed import sample_tags, sample_websites
from .store import CollectionStore
from .tags import TagRegistry

__all__ = [
    "CollectionStore",
    "TagRegistry",
    "sample_tags",
    "sample_websites",
]
