"""Entry point of the ``sitegrid`` command and wiring of its collaborators."""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import click
from click.exceptions import Exit
from rich.console import Console

from sitegrid import __version__
from sitegrid.cli.commands import data, tags, websites
from sitegrid.collections.store import CollectionStore
from sitegrid.config import AppConfig, BackendType, load_config
from sitegrid.core.exceptions import format_error
from sitegrid.core.models import Settings
from sitegrid.operations import SnapshotOperations, TagOperations, WebsiteOperations
from sitegrid.storage.backends import BaseBackend, FileSystemBackend, MemoryBackend
from sitegrid.storage.events import Event, EventBus, EventType
from sitegrid.storage.persistence import SnapshotStorage

LOG_FORMAT = "%(levelname)s: %(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s %(name)s [%(levelname)s] %(message)s"


@dataclass
class Context:
    """Objects shared by every command through ``ctx.obj``."""

    store: CollectionStore
    websites: WebsiteOperations
    tags: TagOperations
    snapshots: SnapshotOperations
    console: Console
    event_bus: EventBus
    config: AppConfig
    debug: bool = False


def setup_logging(
    verbose: bool = False, quiet: bool = False, debug: bool = False
) -> None:
    """Route library logging to stderr at the level the flags ask for."""
    if debug or verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format=DEBUG_LOG_FORMAT if debug else LOG_FORMAT,
        datefmt="%H:%M:%S",
    )


def create_console(no_color: bool = False) -> Console:
    if no_color:
        return Console(no_color=True, highlight=False, color_system=None, width=120)
    return Console(width=120)


def create_backend(config: AppConfig) -> BaseBackend:
    if config.backend is BackendType.MEMORY:
        return MemoryBackend()
    return FileSystemBackend(config.data_path)


def build_store(config: AppConfig, event_bus: EventBus) -> CollectionStore:
    """Create and initialize the collection store described by ``config``."""
    store = CollectionStore(
        SnapshotStorage(create_backend(config)),
        event_bus,
        background_writes=config.background_writes,
        default_settings=Settings(grid_size=config.grid_size),
        seed=config.seed,
    )
    store.initialize()
    return store


def _report(ctx: click.Context, message: str) -> None:
    console = getattr(ctx.obj, "console", None)
    if console is not None:
        console.print(f"[red]Error:[/red] {message}")
    else:
        click.echo(f"Error: {message}", err=True)


class SiteGridGroup(click.Group):
    """Command group that prints uncaught errors instead of tracebacks.

    Click's own exceptions (usage errors, aborts, exits) pass through
    untouched. With ``--debug`` every other error is re-raised.
    """

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except (click.ClickException, click.Abort, Exit, SystemExit):
            raise
        except KeyboardInterrupt:
            _report(ctx, "Interrupted")
            ctx.exit(130)
        except Exception as e:
            if getattr(ctx.obj, "debug", False):
                raise
            _report(ctx, format_error(e))
            ctx.exit(1)


@click.group(cls=SiteGridGroup)
@click.option("--verbose", "-v", is_flag=True, help="Log every store change")
@click.option("--quiet", "-q", is_flag=True, help="Only log errors")
@click.option("--no-color", is_flag=True, help="Plain, uncolored output")
@click.option("--debug", is_flag=True, help="Show tracebacks for unexpected errors")
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML configuration file",
)
@click.option(
    "--data-dir",
    "-d",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory holding the saved collection",
)
@click.version_option(
    version=__version__, prog_name="sitegrid", message="sitegrid version %(version)s"
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    no_color: bool,
    debug: bool,
    config_file: Path | None,
    data_dir: Path | None,
) -> None:
    """Paginated website launcher.

    Keep a grid of websites organized in pages and tags, search them and
    open them in the browser.
    """
    setup_logging(verbose=verbose, quiet=quiet, debug=debug)
    console = create_console(no_color=no_color)

    overrides = {"data_dir": str(data_dir)} if data_dir else {}
    try:
        config = load_config(config_file, overrides)
    except ValueError as e:
        if debug:
            raise
        console.print(f"[red]Error loading configuration:[/red] {e}")
        ctx.exit(1)

    event_bus = EventBus()
    event_bus.subscribe(
        EventType.PERSISTENCE_FAILED,
        lambda event: _warn_unsaved(console, event),
    )

    try:
        store = build_store(config, event_bus)
    except Exception as e:
        if debug:
            raise
        console.print(f"[red]Cannot open the collection:[/red] {e}")
        ctx.exit(1)

    ctx.call_on_close(store.close)
    ctx.obj = Context(
        store=store,
        websites=WebsiteOperations(store),
        tags=TagOperations(store),
        snapshots=SnapshotOperations(store),
        console=console,
        event_bus=event_bus,
        config=config,
        debug=debug,
    )


def _warn_unsaved(console: Console, event: Event) -> None:
    console.print(f"[yellow]Warning:[/yellow] {event.message}")


cli.add_command(websites.list_cmd, name="list")
cli.add_command(websites.add)
cli.add_command(websites.edit)
cli.add_command(websites.delete)
cli.add_command(websites.open_cmd, name="open")
cli.add_command(websites.move)
cli.add_command(websites.reorder)
cli.add_command(websites.search)
cli.add_command(tags.tag)
cli.add_command(data.settings)
cli.add_command(data.export_command, name="export")
cli.add_command(data.import_command, name="import")
cli.add_command(data.clear)


def main() -> None:
    """Console script entry point."""
    try:
        cli()
    except KeyboardInterrupt:
        sys.exit(130)
    except Exception as e:
        if "--debug" in sys.argv:
            raise
        click.echo(f"Error: {format_error(e)}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
