"""Command-line interface for foldersync.

This module provides the main CLI entry point and assembles all commands.

Commands:
- scan: Reconcile a directory once and list tracked files
- watch: Keep a category in sync with a directory and print changes
- config: Show or update the saved configuration
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from foldersync.cli.config import (
    build_watch_config,
    get_config_dir,
    get_config_file,
    load_config,
    save_config,
)
from foldersync.cli.scan import scan
from foldersync.cli.settings import config_cmd
from foldersync.cli.watch import watch

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int = logging.WARNING, log_path: Path | None = None) -> None:
    """Configure logging to output to stderr and optionally a file.

    Args:
        level: Level for the foldersync logger.
        log_path: Path to a log file, if any.
    """
    formatter = logging.Formatter(LOG_FORMAT)

    root_logger = logging.getLogger("foldersync")
    root_logger.setLevel(level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


@click.group()
@click.version_option(package_name="foldersync")
@click.option("--verbose", "-v", count=True, help="Increase log verbosity (-v info, -vv debug).")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path, dir_okay=False),
    help="Also write logs to this file.",
)
def cli(verbose: int, log_file: Path | None) -> None:
    """foldersync - Keep a collection of files in sync with a directory."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG
    setup_logging(level, log_file)


cli.add_command(scan)
cli.add_command(watch)
cli.add_command(config_cmd)


def main() -> None:
    """Entry point for the CLI."""
    cli()


__all__ = [
    # Main entry points
    "cli",
    "main",
    "setup_logging",
    # Config utilities
    "build_watch_config",
    "get_config_dir",
    "get_config_file",
    "load_config",
    "save_config",
]
