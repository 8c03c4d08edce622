"""Command-line interface for sitegrid."""

from .main import cli, main

__all__ = ["cli", "main"]
