"""CLI helper functions."""

from __future__ import annotations

import click

from sitegrid.collections.store import CollectionStore
from sitegrid.core.models import Tag, Website


def resolve_website(store: CollectionStore, reference: str) -> Website:
    """Find a website by id, unique id prefix or exact name.

    Args:
        store: Collection store
        reference: Text given on the command line

    Returns:
        The matching website

    Raises:
        click.BadParameter: If nothing or more than one website matches
    """
    website = store.get_website(reference)
    if website is not None:
        return website

    matches = [w for w in store.websites if w.id.startswith(reference)]
    if not matches:
        wanted = reference.strip().lower()
        matches = [w for w in store.websites if w.name.lower() == wanted]

    if len(matches) == 1:
        return matches[0]
    if not matches:
        raise click.BadParameter(f"No website matches '{reference}'")
    raise click.BadParameter(
        f"'{reference}' matches {len(matches)} websites; use a longer id"
    )


def resolve_tag(store: CollectionStore, reference: str) -> Tag:
    """Find a tag by id, unique id prefix or name (any case)."""
    tag = store.get_tag(reference) or store.find_tag_by_name(reference)
    if tag is not None:
        return tag

    matches = [t for t in store.tags if t.id.startswith(reference)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        raise click.BadParameter(f"No tag matches '{reference}'")
    raise click.BadParameter(
        f"'{reference}' matches {len(matches)} tags; use a longer id"
    )


def resolve_tag_ids(store: CollectionStore, references: tuple[str, ...]) -> list[str]:
    return list(dict.fromkeys(resolve_tag(store, ref).id for ref in references))


def confirm_action(message: str, default: bool = False, force: bool = False) -> bool:
    """Confirm an action with the user.

    Args:
        message: Confirmation message
        default: Default response
        force: Skip confirmation if True

    Returns:
        True if confirmed
    """
    if force:
        return True

    return click.confirm(message, default=default)
