"""Watch command for foldersync CLI.

Commands:
- watch: Keep a category in sync with a directory and print changes
"""

from __future__ import annotations

import logging
import sys
import threading
import time
from pathlib import Path

import click

from foldersync.cli.config import build_watch_config
from foldersync.core.types import ChangeKind, CollectionChange, DirectoryNotFoundError
from foldersync.sync import DispatchExecutor, ExtensionFilter, SynchronizedCategory

logger = logging.getLogger(__name__)


def format_change(change: CollectionChange) -> str:
    """Render a collection change as a single line."""
    if change.kind == ChangeKind.ADDED:
        return f"  + {change.item.path}"
    if change.kind == ChangeKind.REMOVED:
        return f"  - {change.item.path}"
    return f"  ~ {change.old_path} -> {change.item.path}"


@click.command()
@click.argument("directory", required=False, type=click.Path(path_type=Path))
@click.option("--extensions", "-e", help="Comma-separated extensions to track.")
@click.option(
    "--rescan-interval",
    type=float,
    default=None,
    help="Seconds between full resyncs (0 = never).",
)
@click.option(
    "--timeout",
    type=float,
    default=0.0,
    show_default=True,
    help="Stop after this many seconds (0 = run until Ctrl+C).",
)
@click.option("--name", default="Watched", show_default=True, help="Category name.")
def watch(
    directory: Path | None,
    extensions: str | None,
    rescan_interval: float | None,
    timeout: float,
    name: str,
) -> None:
    """Watch DIRECTORY and print tracked files as they come and go.

    DIRECTORY defaults to the configured watch folder.
    """
    try:
        config = build_watch_config(directory, extensions, rescan_interval)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    errors: list[BaseException] = []
    executor = DispatchExecutor(on_error=errors.append)

    try:
        category = SynchronizedCategory(
            name,
            config.directory,
            executor,
            extension_filter=ExtensionFilter(config.extensions),
            stop_timeout=config.stop_timeout,
        )
    except (DirectoryNotFoundError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    # Initial pass ran on this thread; from now on the executor owns the items
    for item in category:
        click.echo(f"  = {item.path}")
    click.echo(f"Tracking {len(category)} files in {config.directory}")

    category.items.subscribe(lambda change: click.echo(format_change(change)))
    executor.start()

    click.echo("\nWatching for changes... (Ctrl+C to stop)\n")
    stop_event = threading.Event()
    deadline = time.monotonic() + timeout if timeout > 0 else None
    next_rescan = (
        time.monotonic() + config.rescan_interval if config.rescan_interval > 0 else None
    )

    try:
        while not stop_event.is_set():
            now = time.monotonic()
            if deadline is not None and now >= deadline:
                break
            if next_rescan is not None and now >= next_rescan:
                logger.debug("Scheduling periodic resync of %s", config.directory)
                category.synchronizer.schedule_resynchronize()
                next_rescan = now + config.rescan_interval
            stop_event.wait(0.1)
    except KeyboardInterrupt:
        click.echo("\nStopping...")

    category.stop()
    executor.wait_idle(timeout=config.stop_timeout)
    executor.stop(timeout=config.stop_timeout)

    click.echo(f"Tracked {len(category)} files")
    if errors:
        click.echo(click.style(f"{len(errors)} errors while applying changes", fg="red"))
