"""Website CLI commands.

Pages and positions are numbered from 1 on the command line.
"""

import click

from sitegrid.cli.helpers import (
    confirm_action,
    resolve_tag,
    resolve_tag_ids,
    resolve_website,
)
from sitegrid.cli.output import print_result, websites_table


def _page_index(page: int) -> int:
    if page < 1:
        raise click.BadParameter("Pages are numbered from 1", param_hint="PAGE")
    return page - 1


# Command: list
@click.command()
@click.option("--page", "-p", type=int, help="Page to show (default: all pages)")
@click.pass_context
def list_cmd(ctx: click.Context, page: int | None) -> None:
    """List websites page by page."""
    console = ctx.obj.console
    store = ctx.obj.store

    if page is not None:
        index = store.set_current_page(_page_index(page))
        pages = {index: store.page_websites(index)}
    else:
        pages = store.websites_by_page()

    if not any(pages.values()):
        console.print("[yellow]No websites yet[/yellow]")
        return

    for index, members in sorted(pages.items()):
        title = f"Page {index + 1} of {store.total_pages}"
        console.print(websites_table(members, store.tags, title=title))


# Command: add
@click.command()
@click.argument("name")
@click.argument("url")
@click.option("--tag", "-t", "tag_refs", multiple=True, help="Tag name or id")
@click.option("--category", help="Category tag name or id")
@click.option("--custom-icon", help="Icon URL used instead of the favicon")
@click.pass_context
def add(
    ctx: click.Context,
    name: str,
    url: str,
    tag_refs: tuple[str, ...],
    category: str | None,
    custom_icon: str | None,
) -> None:
    """Add a website at the end of the last page."""
    store = ctx.obj.store

    result = ctx.obj.websites.create(
        name,
        url,
        tag_ids=resolve_tag_ids(store, tag_refs),
        category_id=resolve_tag(store, category).id if category else None,
        custom_icon=custom_icon,
    )
    print_result(ctx.obj.console, result)
    if result.success:
        website = result.entity
        ctx.obj.console.print(
            f"  id {website.id}, page {website.page + 1}, position {website.order + 1}"
        )
    else:
        ctx.exit(1)


# Command: edit
@click.command()
@click.argument("website_ref")
@click.option("--name", help="New name")
@click.option("--url", help="New URL")
@click.option(
    "--tag", "-t", "tag_refs", multiple=True, help="Replace tags (repeatable)"
)
@click.option("--clear-tags", is_flag=True, help="Remove all tags")
@click.option("--category", help="Category tag name or id")
@click.option("--custom-icon", help="Icon URL used instead of the favicon")
@click.pass_context
def edit(
    ctx: click.Context,
    website_ref: str,
    name: str | None,
    url: str | None,
    tag_refs: tuple[str, ...],
    clear_tags: bool,
    category: str | None,
    custom_icon: str | None,
) -> None:
    """Edit a website's fields."""
    store = ctx.obj.store
    website = resolve_website(store, website_ref)

    patch: dict = {}
    if name is not None:
        patch["name"] = name
    if url is not None:
        patch["url"] = url
    if clear_tags:
        patch["tag_ids"] = []
    elif tag_refs:
        patch["tag_ids"] = resolve_tag_ids(store, tag_refs)
    if category is not None:
        patch["category_id"] = resolve_tag(store, category).id if category else None
    if custom_icon is not None:
        patch["custom_icon"] = custom_icon or None

    if not patch:
        ctx.obj.console.print("[yellow]Nothing to change[/yellow]")
        return

    result = ctx.obj.websites.update(website.id, patch)
    print_result(ctx.obj.console, result)
    if not result.success:
        ctx.exit(1)


# Command: delete
@click.command()
@click.argument("website_ref")
@click.option("--force", "-f", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete(ctx: click.Context, website_ref: str, force: bool) -> None:
    """Delete a website."""
    website = resolve_website(ctx.obj.store, website_ref)

    if not confirm_action(f"Delete {website.name}?", force=force):
        ctx.obj.console.print("[yellow]Cancelled[/yellow]")
        return

    result = ctx.obj.websites.delete(website.id)
    print_result(ctx.obj.console, result)
    if not result.success:
        ctx.exit(1)


# Command: open
@click.command()
@click.argument("website_ref")
@click.option("--no-launch", is_flag=True, help="Record the visit without opening")
@click.pass_context
def open_cmd(ctx: click.Context, website_ref: str, no_launch: bool) -> None:
    """Open a website in the browser and record the visit."""
    website = resolve_website(ctx.obj.store, website_ref)

    result = ctx.obj.websites.visit(website.id)
    if not result.success:
        print_result(ctx.obj.console, result)
        ctx.exit(1)

    ctx.obj.console.print(f"Opening {website.name} ({website.url})")
    if not no_launch:
        click.launch(website.url)


# Command: move
@click.command()
@click.argument("website_ref")
@click.argument("page", type=int)
@click.argument("position", type=int)
@click.pass_context
def move(ctx: click.Context, website_ref: str, page: int, position: int) -> None:
    """Move a website to POSITION on PAGE."""
    website = resolve_website(ctx.obj.store, website_ref)
    if position < 1:
        raise click.BadParameter("Positions are numbered from 1", param_hint="POSITION")

    result = ctx.obj.websites.move(website.id, _page_index(page), position - 1)
    print_result(ctx.obj.console, result)
    if not result.success:
        ctx.exit(1)


# Command: reorder
@click.command()
@click.argument("page", type=int)
@click.argument("website_refs", nargs=-1, required=True)
@click.pass_context
def reorder(ctx: click.Context, page: int, website_refs: tuple[str, ...]) -> None:
    """Reorder PAGE; list every website on the page in its new order."""
    store = ctx.obj.store
    ids = [resolve_website(store, ref).id for ref in website_refs]

    result = ctx.obj.websites.reorder(_page_index(page), ids)
    print_result(ctx.obj.console, result)
    if not result.success:
        ctx.exit(1)


# Command: search
@click.command()
@click.argument("query")
@click.option("--page", "-p", type=int, help="Page to search (default: current)")
@click.pass_context
def search(ctx: click.Context, query: str, page: int | None) -> None:
    """Search a page by name, or by tag with 'tag:NAME [text]'."""
    console = ctx.obj.console
    store = ctx.obj.store

    index = _page_index(page) if page is not None else store.current_page
    matches = store.search(query, page=index)
    if not matches:
        console.print(
            f"[yellow]No websites on page {index + 1} match '{query}'[/yellow]"
        )
        return

    console.print(websites_table(matches, store.tags, title=f"Results for '{query}'"))
