"""Scan command for foldersync CLI.

Commands:
- scan: Reconcile once and list tracked files
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from foldersync.cli.config import build_watch_config
from foldersync.core.types import DirectoryNotFoundError
from foldersync.sync import (
    DirectorySynchronizer,
    DispatchExecutor,
    ExtensionFilter,
    TrackedCollection,
)


@click.command()
@click.argument("directory", required=False, type=click.Path(path_type=Path))
@click.option("--extensions", "-e", help="Comma-separated extensions to track.")
def scan(directory: Path | None, extensions: str | None) -> None:
    """List the files of DIRECTORY that would be tracked.

    DIRECTORY defaults to the configured watch folder.
    """
    try:
        config = build_watch_config(directory, extensions)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    # Never started: events seen during the pass are queued, then discarded
    # by stop(), so only this thread touches the collection.
    executor = DispatchExecutor(name="foldersync-scan")
    collection = TrackedCollection()
    try:
        synchronizer = DirectorySynchronizer(
            config.directory,
            collection,
            executor,
            extension_filter=ExtensionFilter(config.extensions),
            stop_timeout=config.stop_timeout,
        )
    except DirectoryNotFoundError as e:
        executor.stop()
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    synchronizer.stop()
    executor.stop()

    for item in collection:
        click.echo(str(item.path))
    click.echo(f"{len(collection)} tracked files in {config.directory}")
