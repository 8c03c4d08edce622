"""Rich rendering of websites, tags, settings and operation results."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from rich.console import Console
from rich.table import Table

from sitegrid.core.models import Settings, Tag, TagWithCount, Website
from sitegrid.operations.results import OperationResult, ResultStatus


def short_id(identifier: str) -> str:
    return identifier[:8]


def tag_label(tag: Tag) -> str:
    return f"[{tag.color}]{tag.name}[/{tag.color}]"


def websites_table(
    websites: Sequence[Website],
    tags: Iterable[Tag],
    title: str | None = None,
) -> Table:
    """Build a table of websites in display order."""
    tags_by_id = {tag.id: tag for tag in tags}

    table = Table(title=title)
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="bold")
    table.add_column("URL")
    table.add_column("Tags")
    table.add_column("Visits", justify="right")

    for website in websites:
        labels = ", ".join(
            tag_label(tags_by_id[t]) for t in website.tag_ids if t in tags_by_id
        )
        table.add_row(
            str(website.order + 1),
            short_id(website.id),
            website.name,
            website.url,
            labels,
            str(website.metadata.visit_count),
        )

    return table


def tags_table(tags: Sequence[TagWithCount]) -> Table:
    table = Table(title="Tags")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Color")
    table.add_column("Websites", justify="right")

    for item in tags:
        table.add_row(
            short_id(item.tag.id),
            tag_label(item.tag),
            item.tag.color,
            str(item.count),
        )
    return table


def settings_table(settings: Settings, total_pages: int) -> Table:
    table = Table(title="Settings", show_header=False)
    table.add_column("Setting", style="bold")
    table.add_column("Value")

    table.add_row("Grid size", settings.grid_size.value)
    table.add_row("Columns", str(settings.columns))
    table.add_row("Icons per page", str(settings.icons_per_page))
    table.add_row("Pages", str(total_pages))
    table.add_row("Background", settings.background.type.value)
    table.add_row("Gradient", settings.background.gradient.name)
    table.add_row("Wallpaper", settings.wallpaper_url or "-")
    table.add_row("Animations", "on" if settings.animations else "off")
    table.add_row("Labels", "on" if settings.show_labels else "off")
    table.add_row("Theme", settings.theme.value)
    return table


def print_result(console: Console, result: OperationResult) -> None:
    """Print a success line or the details of a failure."""
    if result.success:
        console.print(f"[green]✓[/green] {result.message}")
        return

    if result.status == ResultStatus.VALIDATION_FAILED:
        console.print("[red]Validation failed:[/red]")
        for field, message in (result.validation_errors or {}).items():
            console.print(f"  - {field}: {message}")
        return

    console.print(f"[red]Error:[/red] {result.message}")
    for error in result.errors or []:
        console.print(f"  - {error}")
