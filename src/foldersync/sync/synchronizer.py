"""Directory synchronizer keeping a tracked collection in line with a folder.

This module provides:
- DirectorySynchronizer: Watches one directory (non-recursive) using watchdog
  and reconciles a TrackedCollection with the files it contains

Two paths lead to the collection:

1. resynchronize() enumerates the directory and diffs it against the
   collection. It runs synchronously on the caller's thread. Callers that
   run concurrently with live notifications should use
   schedule_resynchronize() instead, which routes the pass through the
   executor.
2. Watchdog handlers run on the observer thread. They only classify the
   event and schedule a closure on the serialized executor at BACKGROUND
   priority; the closure mutates the collection on the owner thread.

Event table:
    | Event            | Filter                  | Scheduled action                  |
    |------------------|-------------------------|-----------------------------------|
    | created/modified | trackable name          | add_if_not_exist(path)            |
    | deleted          | none                    | remove item with path, if any     |
    | moved            | src != dest             | rename item in place, else add    |

add_if_not_exist() is the only way new items get created and it re-checks
membership when it runs, so duplicated notifications never produce
duplicate entries.
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import TYPE_CHECKING

from watchdog.events import (
    DirDeletedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from foldersync.core.types import (
    DirectoryNotFoundError,
    ItemFactory,
    ResyncResult,
    SynchronizerStats,
    TrackedItem,
)
from foldersync.sync.extensions import ExtensionFilter
from foldersync.sync.executor import Priority

if TYPE_CHECKING:
    from collections.abc import Callable

    from watchdog.observers.api import BaseObserver

    from foldersync.sync.collection import TrackedCollection
    from foldersync.sync.executor import SerializedExecutor

logger = logging.getLogger(__name__)


def _decode_path(path: str | bytes) -> Path:
    if isinstance(path, bytes):
        path = path.decode("utf-8", errors="replace")
    return Path(path)


class DirectorySynchronizer(FileSystemEventHandler):
    """Keeps a TrackedCollection consistent with the files of one directory.

    Watching starts on construction, followed by one synchronous
    resynchronize() pass. stop() ends watching; closures scheduled before
    stop() may still run afterwards.
    """

    def __init__(
        self,
        directory: Path | str,
        collection: TrackedCollection,
        executor: SerializedExecutor,
        *,
        extension_filter: ExtensionFilter | None = None,
        item_factory: ItemFactory = TrackedItem.create,
        observer: BaseObserver | None = None,
        stop_timeout: float = 5.0,
    ) -> None:
        """Initialize the synchronizer and run the first reconciliation.

        Args:
            directory: Existing directory to watch.
            collection: Collection to keep in sync.
            executor: Serialized executor owning the collection.
            extension_filter: Allow-list for trackable names.
            item_factory: Builds a new item for a path.
            observer: Watchdog observer to use (a new Observer by default).
            stop_timeout: Seconds to wait for the observer thread on stop().

        Raises:
            DirectoryNotFoundError: If directory does not exist.
            ValueError: If collection or executor is None.
        """
        super().__init__()
        if collection is None:
            raise ValueError("collection is required")
        if executor is None:
            raise ValueError("executor is required")

        self._directory = Path(directory).expanduser().resolve()
        if not self._directory.is_dir():
            raise DirectoryNotFoundError(directory)

        self._collection = collection
        self._executor = executor
        self._filter = extension_filter or ExtensionFilter()
        self._item_factory = item_factory
        self._stop_timeout = stop_timeout
        self._stats = SynchronizerStats()

        self._lock = threading.Lock()
        self._stopped = False
        self._observer: BaseObserver = observer if observer is not None else Observer()

        self._observer.schedule(self, str(self._directory), recursive=False)
        self._observer.start()
        logger.info("Watching %s", self._directory)

        try:
            self.resynchronize()
        except Exception:
            self.stop()
            raise

    @property
    def directory(self) -> Path:
        """Get the watched directory path."""
        return self._directory

    @property
    def collection(self) -> TrackedCollection:
        """Get the synchronized collection."""
        return self._collection

    @property
    def extension_filter(self) -> ExtensionFilter:
        """Get the extension filter."""
        return self._filter

    @property
    def stats(self) -> SynchronizerStats:
        """Get synchronizer statistics."""
        return self._stats

    @property
    def is_running(self) -> bool:
        """Check if the synchronizer is still watching."""
        return not self._stopped

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    def _enumerate_files(self, result: ResyncResult) -> list[Path]:
        """List regular files of the directory in enumeration order."""
        files: list[Path] = []
        try:
            with os.scandir(self._directory) as entries:
                for entry in entries:
                    try:
                        if not entry.is_file():
                            continue
                    except OSError as e:
                        # Entry vanished or is unreadable between listing and stat
                        logger.warning("Skipping %s: %s", entry.path, e)
                        result.skipped.append(entry.name)
                        continue
                    files.append(self._directory / entry.name)
        except (FileNotFoundError, NotADirectoryError) as e:
            raise DirectoryNotFoundError(self._directory) from e
        return files

    def resynchronize(self) -> ResyncResult:
        """Reconcile the collection with the current directory contents.

        Adds trackable files that have no entry yet, then removes entries
        whose file is gone. Runs on the caller's thread.

        Returns:
            The paths added and removed by this pass

        Raises:
            DirectoryNotFoundError: If the directory no longer exists
        """
        result = ResyncResult()
        files = self._enumerate_files(result)
        present = set(files)

        for path in files:
            if self._filter.is_trackable(path.name) and self.add_if_not_exist(path) is not None:
                result.added.append(path)

        for item in self._collection:
            if item.path in present:
                continue
            # Entry may already be gone when a notification raced this pass
            if self._collection.remove_path(item.path) is not None:
                self._stats.removed += 1
                result.removed.append(item.path)

        self._stats.resyncs += 1
        if result.changed:
            logger.info(
                "Resynchronized %s: %d added, %d removed",
                self._directory,
                len(result.added),
                len(result.removed),
            )
        else:
            logger.debug("Resynchronized %s: no changes", self._directory)
        return result

    def schedule_resynchronize(self) -> None:
        """Run resynchronize() on the executor, after already scheduled work."""
        self._schedule(self._resynchronize_safely)

    def _resynchronize_safely(self) -> None:
        if self._stopped:
            return
        self.resynchronize()

    def add_if_not_exist(self, path: Path) -> TrackedItem | None:
        """Append a new item for path unless one already exists.

        Returns:
            The new item, or None if the path was already tracked
        """
        path = Path(path)
        if path in self._collection:
            return None

        item = self._item_factory(path)
        self._collection.append(item)
        self._stats.added += 1
        logger.debug("Added %s", path)
        return item

    def _remove_path(self, path: Path) -> None:
        if self._collection.remove_path(path) is not None:
            self._stats.removed += 1
            logger.debug("Removed %s", path)

    def _rename(self, src_path: Path, dest_path: Path) -> None:
        item = self._collection.get(src_path)
        if item is None:
            self.add_if_not_exist(dest_path)
            return

        # Target overwritten by the move: the moved item takes its place
        if dest_path in self._collection:
            self._remove_path(dest_path)

        self._collection.rename(item, dest_path)
        self._stats.renamed += 1
        logger.debug("Renamed %s -> %s", src_path, dest_path)

    # ------------------------------------------------------------------
    # Watchdog handlers (observer thread)
    # ------------------------------------------------------------------

    def _schedule(self, action: Callable[[], object]) -> bool:
        try:
            self._executor.schedule(action, Priority.BACKGROUND)
        except RuntimeError as e:
            logger.debug("Dropping event for %s: %s", self._directory, e)
            return False
        return True

    def _accept(self, event: FileSystemEvent) -> bool:
        if self._stopped:
            return False
        self._stats.events_received += 1
        return True

    def _ignore(self, event: FileSystemEvent) -> None:
        self._stats.events_ignored += 1
        logger.debug("Ignoring %s", event)

    def _on_added(self, event: FileSystemEvent) -> None:
        if not self._accept(event):
            return

        path = _decode_path(event.src_path)
        if not isinstance(event, (FileCreatedEvent, FileModifiedEvent)):
            self._ignore(event)
            return
        if not self._filter.is_trackable(path.name):
            self._ignore(event)
            return

        self._schedule(lambda: self.add_if_not_exist(path))

    def on_created(self, event: FileSystemEvent) -> None:
        """Handle created event."""
        self._on_added(event)

    def on_modified(self, event: FileSystemEvent) -> None:
        """Handle modified event."""
        self._on_added(event)

    def on_deleted(self, event: FileSystemEvent) -> None:
        """Handle deleted event."""
        if not self._accept(event):
            return
        if not isinstance(event, (FileDeletedEvent, DirDeletedEvent)):
            self._ignore(event)
            return

        path = _decode_path(event.src_path)
        self._schedule(lambda: self._remove_path(path))

    def on_moved(self, event: FileSystemEvent) -> None:
        """Handle moved event."""
        if not self._accept(event):
            return
        if not isinstance(event, FileMovedEvent):
            self._ignore(event)
            return

        src_path = _decode_path(event.src_path)
        dest_path = _decode_path(event.dest_path)
        if src_path == dest_path:
            self._ignore(event)
            return

        self._schedule(lambda: self._rename(src_path, dest_path))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def stop(self) -> None:
        """Stop watching. Safe to call more than once; never raises."""
        with self._lock:
            if self._stopped:
                return
            self._stopped = True

        try:
            self._observer.unschedule_all()
            self._observer.stop()
            if self._observer.is_alive():
                self._observer.join(timeout=self._stop_timeout)
        except (OSError, RuntimeError) as e:
            logger.warning("Error while stopping watcher for %s: %s", self._directory, e)

        logger.info("Stopped watching %s", self._directory)

    def __enter__(self) -> DirectorySynchronizer:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.stop()

    def __repr__(self) -> str:
        state = "running" if not self._stopped else "stopped"
        return f"DirectorySynchronizer({str(self._directory)!r}, {state})"
