"""Named category whose items mirror a directory.

A SynchronizedCategory owns a TrackedCollection and the
DirectorySynchronizer that keeps it in line with one folder. Items created
for new files receive a copy of the category's default settings.
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from foldersync.core.types import TrackedItem
from foldersync.sync.collection import TrackedCollection
from foldersync.sync.synchronizer import DirectorySynchronizer

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from watchdog.observers.api import BaseObserver

    from foldersync.core.types import ResyncResult
    from foldersync.sync.executor import SerializedExecutor
    from foldersync.sync.extensions import ExtensionFilter

logger = logging.getLogger(__name__)

NAME_MIN_LENGTH = 1
NAME_MAX_LENGTH = 30
NAME_INVALID_CHARS = frozenset("\r\n\t\b\a\v\f\x7f[]")


def validate_category_name(name: str) -> str:
    """Check a category name.

    Args:
        name: Proposed name.

    Returns:
        The name, unchanged.

    Raises:
        ValueError: If the name is too short, too long or has invalid characters.
    """
    if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        raise ValueError(
            f"Category name must be {NAME_MIN_LENGTH}-{NAME_MAX_LENGTH} characters, got {len(name)}"
        )
    invalid = sorted(set(name) & NAME_INVALID_CHARS)
    if invalid:
        raise ValueError(f"Category name contains invalid characters: {invalid!r}")
    return name


class SynchronizedCategory:
    """A named collection of items kept in sync with a directory.

    Usage:
        executor = DispatchExecutor()
        executor.start()
        with SynchronizedCategory("Wallpapers", folder, executor) as category:
            ...
        executor.stop()
    """

    def __init__(
        self,
        name: str,
        directory: Path | str,
        executor: SerializedExecutor,
        *,
        items: Iterable[TrackedItem] | None = None,
        default_settings: dict[str, Any] | None = None,
        extension_filter: ExtensionFilter | None = None,
        observer: BaseObserver | None = None,
        stop_timeout: float = 5.0,
    ) -> None:
        """Initialize the category and synchronize it with the directory.

        Args:
            name: Display name of the category.
            directory: Existing directory to mirror.
            executor: Serialized executor owning the items.
            items: Previously persisted items; entries whose file is gone
                are dropped by the initial reconciliation.
            default_settings: Settings copied into every new item.
            extension_filter: Allow-list for trackable names.
            observer: Watchdog observer to use.
            stop_timeout: Seconds to wait for the watcher on stop().

        Raises:
            DirectoryNotFoundError: If directory does not exist.
            ValueError: If the name is invalid.
        """
        self._name = validate_category_name(name)
        self.default_settings: dict[str, Any] = dict(default_settings or {})
        self._items = TrackedCollection(items)

        self._synchronizer = DirectorySynchronizer(
            directory,
            self._items,
            executor,
            extension_filter=extension_filter,
            item_factory=self._create_item,
            observer=observer,
            stop_timeout=stop_timeout,
        )
        logger.debug("Category %r bound to %s (%d items)", name, self.directory, len(self._items))

    @property
    def name(self) -> str:
        """Get the category name."""
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = validate_category_name(value)

    @property
    def directory(self) -> Path:
        """Get the mirrored directory."""
        return self._synchronizer.directory

    @property
    def items(self) -> TrackedCollection:
        """Get the synchronized items."""
        return self._items

    @property
    def synchronizer(self) -> DirectorySynchronizer:
        """Get the underlying synchronizer."""
        return self._synchronizer

    def _create_item(self, path: Path) -> TrackedItem:
        return TrackedItem(path=Path(path), settings=copy.deepcopy(self.default_settings))

    def resynchronize(self) -> ResyncResult:
        """Force a full reconciliation on the calling thread."""
        return self._synchronizer.resynchronize()

    def stop(self) -> None:
        """Stop watching the directory."""
        self._synchronizer.stop()

    def __enter__(self) -> SynchronizedCategory:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.stop()

    def __iter__(self) -> Iterator[TrackedItem]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __str__(self) -> str:
        return self._name
