"""Ordered collection of tracked items keyed by absolute path.

The collection keeps insertion order in a list and a dict index from
path to item for constant-time membership checks. It is NOT thread-safe:
only the owner thread (the one running the serialized executor) may touch
it. Subscribers are called synchronously after each mutation, on the
thread that performed it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from foldersync.core.types import ChangeCallback, ChangeKind, CollectionChange, TrackedItem

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

logger = logging.getLogger(__name__)


class TrackedCollection:
    """Ordered set of TrackedItem objects keyed by path."""

    def __init__(self, items: Iterable[TrackedItem] | None = None) -> None:
        """Initialize the collection.

        Args:
            items: Initial items, appended in order.

        Raises:
            ValueError: If two initial items share a path.
        """
        self._items: list[TrackedItem] = []
        self._index: dict[Path, TrackedItem] = {}
        self._subscribers: list[ChangeCallback] = []

        for item in items or ():
            self.append(item)

    def subscribe(self, callback: ChangeCallback) -> Callable[[], None]:
        """Register a change callback.

        Args:
            callback: Called with a CollectionChange after each mutation

        Returns:
            A function removing the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, change: CollectionChange) -> None:
        for callback in list(self._subscribers):
            try:
                callback(change)
            except Exception:
                logger.exception("Collection subscriber failed on %s", change.kind.name)

    def append(self, item: TrackedItem) -> None:
        """Add an item at the end.

        Raises:
            ValueError: If an item with the same path is already present.
        """
        if item.path in self._index:
            raise ValueError(f"Path already tracked: {item.path}")

        self._items.append(item)
        self._index[item.path] = item
        self._notify(CollectionChange(ChangeKind.ADDED, item, len(self._items) - 1))

    def remove(self, item: TrackedItem) -> None:
        """Remove an item.

        Raises:
            ValueError: If the item is not part of this collection.
        """
        if self._index.get(item.path) is not item:
            raise ValueError(f"Item not in collection: {item!r}")

        index = self._items.index(item)
        del self._items[index]
        del self._index[item.path]
        self._notify(CollectionChange(ChangeKind.REMOVED, item, index))

    def remove_path(self, path: Path) -> TrackedItem | None:
        """Remove the item with the given path, if any.

        Returns:
            The removed item, or None if no item had this path
        """
        item = self._index.get(Path(path))
        if item is not None:
            self.remove(item)
        return item

    def rename(self, item: TrackedItem, new_path: Path) -> None:
        """Change the path of an item in place, keeping its position.

        Raises:
            ValueError: If the item is not here or new_path is used by another item.
        """
        new_path = Path(new_path)
        if self._index.get(item.path) is not item:
            raise ValueError(f"Item not in collection: {item!r}")

        existing = self._index.get(new_path)
        if existing is item:
            return
        if existing is not None:
            raise ValueError(f"Path already tracked: {new_path}")

        old_path = item.path
        del self._index[old_path]
        item.path = new_path
        self._index[new_path] = item
        self._notify(
            CollectionChange(ChangeKind.RENAMED, item, self._items.index(item), old_path=old_path)
        )

    def get(self, path: Path) -> TrackedItem | None:
        """Get the item for a path without removing it."""
        return self._index.get(Path(path))

    def index_of(self, path: Path) -> int:
        """Get the position of the item with this path, or -1."""
        item = self._index.get(Path(path))
        if item is None:
            return -1
        return self._items.index(item)

    def paths(self) -> list[Path]:
        """Get all paths in collection order."""
        return [item.path for item in self._items]

    def clear(self) -> int:
        """Remove all items, notifying subscribers for each.

        Returns:
            Number of items removed
        """
        count = len(self._items)
        for item in reversed(list(self._items)):
            self.remove(item)
        return count

    def __contains__(self, path: object) -> bool:
        if isinstance(path, TrackedItem):
            return self._index.get(path.path) is path
        if isinstance(path, (str, Path)):
            return Path(path) in self._index
        return False

    def __getitem__(self, index: int) -> TrackedItem:
        return self._items[index]

    def __iter__(self) -> Iterator[TrackedItem]:
        """Iterate over a snapshot, so removal while iterating is safe."""
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"TrackedCollection({len(self._items)} items)"
