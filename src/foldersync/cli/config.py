"""Configuration utilities for foldersync CLI.

This module provides shared configuration functions used across CLI commands.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from foldersync.core.config import WatchConfig


def get_config_dir() -> Path:
    """Get the configuration directory for foldersync.

    Returns:
        Path to ~/.foldersync or equivalent.
    """
    return Path.home() / ".foldersync"


def get_config_file() -> Path:
    """Get the path to the config file."""
    return get_config_dir() / "config.json"


def load_config() -> dict[str, Any]:
    """Load configuration from config file."""
    config_file = get_config_file()
    if config_file.exists():
        return dict(json.loads(config_file.read_text(encoding="utf-8")))
    return {}


def save_config(config: dict[str, Any]) -> None:
    """Save configuration to config file."""
    config_file = get_config_file()
    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(json.dumps(config, indent=2), encoding="utf-8")


def build_watch_config(
    directory: Path | None,
    extensions: str | None = None,
    rescan_interval: float | None = None,
) -> WatchConfig:
    """Merge command-line values over the config file.

    Args:
        directory: Directory given on the command line, if any.
        extensions: Comma-separated extensions given on the command line.
        rescan_interval: Rescan interval given on the command line.

    Raises:
        ValueError: If no directory is known or a value is invalid.
    """
    data = load_config()
    if directory is not None:
        data["directory"] = str(directory)
    if extensions:
        data["extensions"] = extensions
    if rescan_interval is not None:
        data["rescan_interval"] = rescan_interval
    return WatchConfig.from_dict(data)
