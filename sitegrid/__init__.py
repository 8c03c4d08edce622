"""Paginated, tag-organized website launcher with local persistence."""

__version__ = "0.1.0"
