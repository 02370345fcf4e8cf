"""Shared fixtures for synchronization tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from foldersync.sync.collection import TrackedCollection
from foldersync.sync.executor import Priority


class RecordingExecutor:
    """Executor that queues actions until the test runs them."""

    def __init__(self) -> None:
        self.pending: list[tuple[Priority, Callable[[], object]]] = []
        self.schedule_count = 0
        self.closed = False

    def schedule(
        self,
        action: Callable[[], object],
        priority: Priority = Priority.BACKGROUND,
    ) -> None:
        if self.closed:
            raise RuntimeError("Executor is closed")
        self.pending.append((priority, action))
        self.schedule_count += 1

    def run_pending(self) -> int:
        """Run queued actions in FIFO order, including ones they schedule."""
        count = 0
        while self.pending:
            _, action = self.pending.pop(0)
            action()
            count += 1
        return count


class FakeObserver:
    """Stand-in for a watchdog observer that never starts a thread."""

    def __init__(self) -> None:
        self.scheduled: list[tuple[object, str, bool]] = []
        self.started = False
        self.stopped = False
        self.unscheduled = False

    def schedule(self, handler: object, path: str, recursive: bool = False) -> None:
        self.scheduled.append((handler, path, recursive))

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def unschedule_all(self) -> None:
        self.unscheduled = True

    def is_alive(self) -> bool:
        return self.started and not self.stopped

    def join(self, timeout: float | None = None) -> None:
        pass


@pytest.fixture
def watch_dir(tmp_path: Path) -> Path:
    """Create a directory to watch."""
    watch = tmp_path / "watched"
    watch.mkdir()
    return watch.resolve()


@pytest.fixture
def collection() -> TrackedCollection:
    """Create an empty collection."""
    return TrackedCollection()


@pytest.fixture
def executor() -> RecordingExecutor:
    """Create a recording executor."""
    return RecordingExecutor()


@pytest.fixture
def observer() -> FakeObserver:
    """Create a fake observer."""
    return FakeObserver()
