"""Core module - Shared types and configuration."""

from foldersync.core.types import (
    ChangeKind,
    CollectionChange,
    DirectoryNotFoundError,
    ResyncResult,
    SyncError,
    SynchronizerStats,
    TrackedItem,
)

__all__ = [
    # Errors
    "DirectoryNotFoundError",
    "SyncError",
    # Types
    "ChangeKind",
    "CollectionChange",
    "ResyncResult",
    "SynchronizerStats",
    "TrackedItem",
]
