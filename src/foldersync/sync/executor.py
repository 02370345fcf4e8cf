"""Serialized executors for collection mutations.

This module provides:
- SerializedExecutor: Protocol every executor implements
- Priority: Scheduling priority (lower value runs first)
- DispatchExecutor: Owner thread running actions one at a time
- ImmediateExecutor: Runs actions inline on the calling thread

DispatchExecutor is the single logical owner of a tracked collection.
Watcher threads hand it closures through schedule(); the owner thread runs
them in (priority, submission) order, so actions from one producer at one
priority run FIFO.

An exception raised by an action has no caller to go back to. It is logged,
counted in stats, and passed to the on_error callback; the owner thread
keeps running.

Usage:
    executor = DispatchExecutor()
    executor.start()
    executor.schedule(lambda: collection.remove_path(path))
    snapshot = executor.invoke(lambda: collection.paths())
    executor.stop()
"""

from __future__ import annotations

import heapq
import itertools
import logging
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass
from enum import IntEnum, auto
from typing import TYPE_CHECKING, Protocol, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

    from foldersync.core.types import ErrorCallback

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Priority(IntEnum):
    """Scheduling priority.

    Values are ordered by priority (lower = runs first).
    """

    SEND = 0
    NORMAL = 10
    BACKGROUND = 20
    IDLE = 30


class ExecutorState(IntEnum):
    """State of a dispatch executor."""

    STOPPED = auto()
    RUNNING = auto()
    STOPPING = auto()
    CLOSED = auto()


@dataclass
class ExecutorStats:
    """Statistics for an executor."""

    scheduled: int = 0
    executed: int = 0
    errors: int = 0


class SerializedExecutor(Protocol):
    """Protocol for executors that serialize collection mutations.

    Implementations must run actions submitted by a single producer thread
    at the same priority in submission order.
    """

    def schedule(
        self,
        action: Callable[[], object],
        priority: Priority = Priority.BACKGROUND,
    ) -> None:
        """Submit an action for later execution on the owner context.

        Args:
            action: Zero-argument callable
            priority: Scheduling priority
        """
        ...


class _ErrorReporting:
    """Shared error channel for executors."""

    def __init__(self, on_error: ErrorCallback | None) -> None:
        self._on_error = on_error
        self._stats = ExecutorStats()

    @property
    def stats(self) -> ExecutorStats:
        """Get executor statistics."""
        return self._stats

    def set_on_error(self, callback: ErrorCallback | None) -> None:
        """Set callback for errors raised by scheduled actions."""
        self._on_error = callback

    def _run_action(self, action: Callable[[], object]) -> None:
        try:
            action()
        except Exception as e:
            self._stats.errors += 1
            logger.exception("Scheduled action failed: %r", action)
            if self._on_error:
                try:
                    self._on_error(e)
                except Exception:
                    logger.exception("Error callback failed")
        finally:
            self._stats.executed += 1


class ImmediateExecutor(_ErrorReporting):
    """Executor that runs every action inline on the calling thread.

    Suitable when the caller already is the only thread touching the
    collection, such as tests that deliver events by hand.
    """

    def __init__(self, on_error: ErrorCallback | None = None) -> None:
        super().__init__(on_error)

    def schedule(
        self,
        action: Callable[[], object],
        priority: Priority = Priority.BACKGROUND,
    ) -> None:
        """Run the action now."""
        self._stats.scheduled += 1
        self._run_action(action)

    def invoke(
        self,
        fn: Callable[[], T],
        priority: Priority = Priority.NORMAL,
        timeout: float | None = None,
    ) -> T:
        """Call fn now and return its result."""
        return fn()


class DispatchExecutor(_ErrorReporting):
    """Single owner thread executing scheduled actions one at a time.

    Attributes:
        name: Name of the owner thread
    """

    def __init__(
        self,
        name: str = "foldersync-dispatch",
        on_error: ErrorCallback | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            name: Owner thread name
            on_error: Callback for exceptions raised by scheduled actions
        """
        super().__init__(on_error)
        self.name = name

        self._lock = threading.RLock()
        self._not_empty = threading.Condition(self._lock)
        self._idle = threading.Condition(self._lock)
        self._heap: list[tuple[int, int, Callable[[], object], Future | None]] = []
        self._counter = itertools.count()
        self._busy = False

        self._state = ExecutorState.STOPPED
        self._thread: threading.Thread | None = None

    @property
    def state(self) -> ExecutorState:
        """Get current executor state."""
        return self._state

    @property
    def is_running(self) -> bool:
        """Check if the owner thread is accepting and running work."""
        return self._state == ExecutorState.RUNNING

    def is_owner_thread(self) -> bool:
        """Check if the caller runs on the owner thread."""
        return self._thread is not None and threading.current_thread() is self._thread

    def start(self) -> None:
        """Start the owner thread."""
        with self._lock:
            if self._state == ExecutorState.RUNNING:
                logger.warning("Executor %s already running", self.name)
                return
            if self._state == ExecutorState.CLOSED:
                raise RuntimeError("Executor is closed")

            self._state = ExecutorState.RUNNING
            self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
            self._thread.start()
            logger.info("Executor %s started", self.name)

    def stop(self, timeout: float = 5.0, drain: bool = False) -> None:
        """Stop the owner thread.

        Once stopped, the executor refuses new work.

        Args:
            timeout: Maximum time to wait for the thread to finish
            drain: Run already-queued actions before stopping
        """
        with self._lock:
            if self._state in (ExecutorState.STOPPING, ExecutorState.CLOSED):
                return
            was_running = self._state == ExecutorState.RUNNING
            self._state = ExecutorState.STOPPING

            if not drain and self._heap:
                logger.info("Executor %s discarding %d pending actions", self.name, len(self._heap))
                self._discard_pending()
            self._not_empty.notify_all()

        if was_running and self._thread and self._thread.is_alive():
            if self.is_owner_thread():
                logger.warning("Executor %s stopped from its own thread", self.name)
            else:
                self._thread.join(timeout=timeout)

        with self._lock:
            self._discard_pending()
            self._state = ExecutorState.CLOSED
            self._busy = False
            self._idle.notify_all()
            logger.info("Executor %s stopped", self.name)

    def schedule(
        self,
        action: Callable[[], object],
        priority: Priority = Priority.BACKGROUND,
    ) -> None:
        """Queue an action for the owner thread.

        Actions may be queued before start(); they run once the thread starts.

        Raises:
            RuntimeError: If the executor is stopping or closed
        """
        with self._lock:
            if self._state in (ExecutorState.STOPPING, ExecutorState.CLOSED):
                raise RuntimeError("Executor is closed")

            self._push(action, priority, None)

    def _push(
        self,
        action: Callable[[], object],
        priority: Priority,
        future: Future | None,
    ) -> None:
        heapq.heappush(self._heap, (int(priority), next(self._counter), action, future))
        self._stats.scheduled += 1
        self._not_empty.notify()

    def _discard_pending(self) -> None:
        """Drop queued actions and fail the futures of waiting invoke() calls."""
        for _, _, _, future in self._heap:
            if future is not None and not future.done():
                future.set_exception(RuntimeError("Executor is closed"))
        self._heap.clear()

    def invoke(
        self,
        fn: Callable[[], T],
        priority: Priority = Priority.NORMAL,
        timeout: float | None = None,
    ) -> T:
        """Run fn on the owner thread and wait for its result.

        Runs inline when called from the owner thread itself.

        Raises:
            TimeoutError: If the result is not ready within timeout
            RuntimeError: If the executor is not running, or is stopped
                before fn runs
        """
        if self.is_owner_thread():
            return fn()

        future: Future[T] = Future()

        def call() -> None:
            if not future.set_running_or_notify_cancel():
                return
            try:
                future.set_result(fn())
            except Exception as e:
                future.set_exception(e)

        with self._lock:
            if self._state != ExecutorState.RUNNING:
                raise RuntimeError("Executor is not running")
            self._push(call, priority, future)
        return future.result(timeout=timeout)

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until no action is queued or running.

        Args:
            timeout: Maximum seconds to wait (None = wait forever)

        Returns:
            True if idle, False if the timeout expired
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._idle:
            while self._heap or self._busy:
                if self._state == ExecutorState.CLOSED:
                    return not self._heap
                if deadline is None:
                    self._idle.wait()
                    continue
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
                self._idle.wait(timeout=remaining)
            return True

    def _run(self) -> None:
        """Main processing loop."""
        logger.debug("Executor %s processing loop started", self.name)

        while True:
            with self._not_empty:
                while not self._heap and self._state == ExecutorState.RUNNING:
                    self._not_empty.wait()

                if not self._heap:
                    break

                _, _, action, _ = heapq.heappop(self._heap)
                self._busy = True

            try:
                self._run_action(action)
            finally:
                with self._lock:
                    self._busy = False
                    if not self._heap:
                        self._idle.notify_all()

        logger.debug("Executor %s processing loop ended", self.name)

    def __len__(self) -> int:
        """Get number of pending actions."""
        with self._lock:
            return len(self._heap)

    def __enter__(self) -> DispatchExecutor:
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.stop()
