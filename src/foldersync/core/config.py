"""Shared configuration classes for foldersync.

This module defines the configuration used by the CLI to build a watched
category.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from foldersync.sync.extensions import DEFAULT_EXTENSIONS, normalize_extensions


@dataclass
class WatchConfig:
    """Configuration for watching one directory.

    Attributes:
        directory: Directory to keep the collection in sync with.
        extensions: Allow-list of trackable file extensions.
        rescan_interval: Seconds between scheduled full resyncs (0 = never).
        stop_timeout: Seconds to wait for threads when shutting down.
    """

    directory: Path
    extensions: tuple[str, ...] = field(default=DEFAULT_EXTENSIONS)
    rescan_interval: float = 0.0
    stop_timeout: float = 5.0

    def __post_init__(self) -> None:
        """Normalize paths and extensions."""
        self.directory = Path(self.directory).expanduser().resolve()
        self.extensions = normalize_extensions(self.extensions)
        if not self.extensions:
            raise ValueError("At least one extension is required")
        if self.rescan_interval < 0:
            raise ValueError(f"rescan_interval must be >= 0, got {self.rescan_interval}")
        if self.stop_timeout <= 0:
            raise ValueError(f"stop_timeout must be > 0, got {self.stop_timeout}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WatchConfig:
        """Build a config from a JSON-compatible dict.

        Raises:
            ValueError: If the directory is missing or a value is invalid.
        """
        if not data.get("directory"):
            raise ValueError("No directory configured")

        extensions = data.get("extensions") or DEFAULT_EXTENSIONS
        if isinstance(extensions, str):
            extensions = tuple(e for e in extensions.split(",") if e.strip())

        return cls(
            directory=Path(data["directory"]),
            extensions=tuple(extensions),
            rescan_interval=float(data.get("rescan_interval", 0.0)),
            stop_timeout=float(data.get("stop_timeout", 5.0)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "directory": str(self.directory),
            "extensions": list(self.extensions),
            "rescan_interval": self.rescan_interval,
            "stop_timeout": self.stop_timeout,
        }
