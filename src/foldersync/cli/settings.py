"""Config command for foldersync CLI.

Commands:
- config: Show or update the saved configuration
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from foldersync.cli.config import get_config_file, load_config, save_config
from foldersync.sync.extensions import normalize_extensions


@click.command("config")
@click.option(
    "--directory",
    "-d",
    type=click.Path(path_type=Path, file_okay=False),
    help="Default directory to watch.",
)
@click.option("--extensions", "-e", help="Comma-separated extensions to track.")
@click.option("--rescan-interval", type=float, help="Seconds between full resyncs (0 = never).")
def config_cmd(
    directory: Path | None,
    extensions: str | None,
    rescan_interval: float | None,
) -> None:
    """Show or update the foldersync configuration.

    Without options, prints the current configuration.
    """
    config = load_config()

    if directory is None and extensions is None and rescan_interval is None:
        if not config:
            click.echo(f"No configuration found at {get_config_file()}")
            return
        for key, value in config.items():
            if isinstance(value, list):
                value = ",".join(str(v) for v in value)
            click.echo(f"{key}: {value}")
        return

    if directory is not None:
        config["directory"] = str(directory.expanduser().resolve())
    if extensions is not None:
        normalized = normalize_extensions(extensions.split(","))
        if not normalized:
            click.echo("Error: At least one extension is required", err=True)
            sys.exit(1)
        config["extensions"] = list(normalized)
    if rescan_interval is not None:
        if rescan_interval < 0:
            click.echo("Error: --rescan-interval must be >= 0", err=True)
            sys.exit(1)
        config["rescan_interval"] = rescan_interval

    save_config(config)
    click.echo(f"Configuration saved to {get_config_file()}")
