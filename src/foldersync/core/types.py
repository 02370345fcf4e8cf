"""Shared types and dataclasses for directory synchronization.

This module provides:
- SyncError, DirectoryNotFoundError: Exception classes
- TrackedItem: A collection entry keyed by its absolute file path
- ChangeKind, CollectionChange: Collection change notifications
- ResyncResult: Outcome of a full reconciliation pass
- SynchronizerStats: Counters kept by the synchronizer
- Type aliases for callbacks
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum, auto
from pathlib import Path
from typing import Any


class SyncError(Exception):
    """Base exception for synchronization errors."""


class DirectoryNotFoundError(SyncError):
    """The watched directory does not exist or is not a directory."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(f"Directory not found: {path}")


@dataclass
class TrackedItem:
    """An entry of a tracked collection.

    The absolute path is the primary key. Settings are opaque to the
    synchronizer and survive in-place renames.

    Attributes:
        path: Absolute path of the file
        time_added: When the entry was created
        settings: Arbitrary per-item settings
    """

    path: Path
    time_added: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    settings: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(cls, path: Path) -> TrackedItem:
        """Create a new item with empty settings."""
        return cls(path=Path(path))

    @property
    def name(self) -> str:
        """Get the bare file name."""
        return self.path.name

    def __repr__(self) -> str:
        return f"TrackedItem({str(self.path)!r})"


# Type alias for item construction (path -> new item)
ItemFactory = Callable[[Path], TrackedItem]


class ChangeKind(IntEnum):
    """Kind of collection mutation."""

    ADDED = auto()
    REMOVED = auto()
    RENAMED = auto()


@dataclass(frozen=True)
class CollectionChange:
    """A single mutation of a tracked collection.

    Attributes:
        kind: What happened
        item: The item concerned (for RENAMED, already carrying the new path)
        index: Position of the item in the collection
        old_path: Previous path (RENAMED only)
    """

    kind: ChangeKind
    item: TrackedItem
    index: int
    old_path: Path | None = None


# Type alias for collection change subscribers
ChangeCallback = Callable[[CollectionChange], None]

# Type alias for deferred-error reporting
ErrorCallback = Callable[[BaseException], None]


@dataclass
class ResyncResult:
    """Result of a full reconciliation pass."""

    added: list[Path] = field(default_factory=list)
    removed: list[Path] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        """Check whether the pass mutated the collection."""
        return bool(self.added or self.removed)


@dataclass
class SynchronizerStats:
    """Statistics for a directory synchronizer."""

    events_received: int = 0
    events_ignored: int = 0
    added: int = 0
    removed: int = 0
    renamed: int = 0
    resyncs: int = 0
