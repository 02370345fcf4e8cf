"""Directory synchronization.

Architecture:
    watchdog Observer → DirectorySynchronizer → SerializedExecutor → TrackedCollection

Components:
- **ExtensionFilter**: Decides which file names are tracked
- **TrackedCollection**: Ordered items keyed by absolute path
- **DispatchExecutor / ImmediateExecutor**: Serialize collection mutations
- **DirectorySynchronizer**: Full reconciliation plus incremental events
- **SynchronizedCategory**: Named collection bound to a directory
"""

from foldersync.sync.category import SynchronizedCategory, validate_category_name
from foldersync.sync.collection import TrackedCollection
from foldersync.sync.executor import (
    DispatchExecutor,
    ExecutorState,
    ExecutorStats,
    ImmediateExecutor,
    Priority,
    SerializedExecutor,
)
from foldersync.sync.extensions import (
    DEFAULT_EXTENSIONS,
    ExtensionFilter,
    is_trackable,
    normalize_extensions,
)
from foldersync.sync.synchronizer import DirectorySynchronizer

__all__ = [
    # Extensions
    "DEFAULT_EXTENSIONS",
    "ExtensionFilter",
    "is_trackable",
    "normalize_extensions",
    # Collection
    "TrackedCollection",
    # Executors
    "DispatchExecutor",
    "ExecutorState",
    "ExecutorStats",
    "ImmediateExecutor",
    "Priority",
    "SerializedExecutor",
    # Synchronization
    "DirectorySynchronizer",
    "SynchronizedCategory",
    "validate_category_name",
]
