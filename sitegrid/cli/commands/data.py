"""Settings, export, import and clear commands."""

from pathlib import Path

import click

from sitegrid.cli.helpers import confirm_action
from sitegrid.cli.output import print_result, settings_table
from sitegrid.core.models import GridSize


@click.group()
def settings():
    """Show or change display settings."""
    pass


@settings.command(name="show")
@click.pass_context
def show_settings(ctx: click.Context) -> None:
    """Show the current settings."""
    store = ctx.obj.store
    ctx.obj.console.print(settings_table(store.settings, store.total_pages))


@settings.command(name="grid-size")
@click.argument("size", type=click.Choice([s.value for s in GridSize]))
@click.pass_context
def grid_size(ctx: click.Context, size: str) -> None:
    """Change the grid size; websites are re-laid across pages."""
    store = ctx.obj.store
    store.set_grid_size(size)
    ctx.obj.console.print(
        f"[green]✓[/green] Grid size set to {size} "
        f"({store.icons_per_page} per page, {store.total_pages} pages)"
    )


@click.command()
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def export_command(ctx: click.Context, file: Path) -> None:
    """Export all websites, tags and settings to a JSON file."""
    result = ctx.obj.snapshots.export_file(file)
    print_result(ctx.obj.console, result)


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--force", "-f", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def import_command(ctx: click.Context, file: Path, force: bool) -> None:
    """Replace the collection with the contents of an export file."""
    if not confirm_action("Replace all current data with the file?", force=force):
        ctx.obj.console.print("[yellow]Cancelled[/yellow]")
        return

    result = ctx.obj.snapshots.import_file(file)
    print_result(ctx.obj.console, result)
    if not result.success:
        ctx.exit(1)


@click.command()
@click.option("--force", "-f", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def clear(ctx: click.Context, force: bool) -> None:
    """Delete every website and tag and reset the settings."""
    if not confirm_action("Delete all websites and tags?", force=force):
        ctx.obj.console.print("[yellow]Cancelled[/yellow]")
        return

    ctx.obj.store.clear_all()
    ctx.obj.console.print("[green]✓[/green] All data cleared")
