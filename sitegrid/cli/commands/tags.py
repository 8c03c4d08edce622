"""Tag CLI commands."""

import click

from sitegrid.cli.helpers import confirm_action, resolve_tag
from sitegrid.cli.output import print_result, tags_table


@click.group()
def tag():
    """Manage tags."""
    pass


@tag.command(name="list")
@click.pass_context
def list_tags(ctx: click.Context) -> None:
    """List tags with the number of websites using each."""
    console = ctx.obj.console
    tags = ctx.obj.store.tags_with_count()
    if not tags:
        console.print("[yellow]No tags yet[/yellow]")
        return
    console.print(tags_table(tags))


@tag.command(name="add")
@click.argument("name")
@click.option("--color", help="Color as #RRGGBB (default: next palette color)")
@click.pass_context
def add_tag(ctx: click.Context, name: str, color: str | None) -> None:
    """Create a tag."""
    result = ctx.obj.tags.create(name, color)
    print_result(ctx.obj.console, result)
    if not result.success:
        ctx.exit(1)


@tag.command(name="rename")
@click.argument("tag_ref")
@click.argument("name")
@click.pass_context
def rename_tag(ctx: click.Context, tag_ref: str, name: str) -> None:
    """Rename a tag."""
    tag = resolve_tag(ctx.obj.store, tag_ref)
    result = ctx.obj.tags.rename(tag.id, name)
    print_result(ctx.obj.console, result)
    if not result.success:
        ctx.exit(1)


@tag.command(name="recolor")
@click.argument("tag_ref")
@click.argument("color")
@click.pass_context
def recolor_tag(ctx: click.Context, tag_ref: str, color: str) -> None:
    """Change a tag's color."""
    tag = resolve_tag(ctx.obj.store, tag_ref)
    result = ctx.obj.tags.recolor(tag.id, color)
    print_result(ctx.obj.console, result)
    if not result.success:
        ctx.exit(1)


@tag.command(name="delete")
@click.argument("tag_ref")
@click.option("--force", "-f", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_tag(ctx: click.Context, tag_ref: str, force: bool) -> None:
    """Delete a tag and remove it from every website."""
    tag = resolve_tag(ctx.obj.store, tag_ref)

    if not confirm_action(f"Delete tag {tag.name}?", force=force):
        ctx.obj.console.print("[yellow]Cancelled[/yellow]")
        return

    result = ctx.obj.tags.delete(tag.id)
    print_result(ctx.obj.console, result)
    if not result.success:
        ctx.exit(1)
