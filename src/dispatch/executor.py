"""Executor backends that start counting tasks."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Protocol

_LOGGER = logging.getLogger(__name__)


class Executor(Protocol):
    """Abstract execution backend.

    ``spawn`` either starts ``fn`` or raises :class:`RuntimeError`; it never
    silently drops work.  Completion tracking is the caller's job.
    """

    def spawn(self, name: str, fn: Callable[[], None]) -> None:
        """Start ``fn`` as the task called ``name``."""

    def shutdown(self) -> None:
        """Tear down resources allocated by the executor."""


class SequentialExecutor:
    """Deterministic executor running each task inline when spawned."""

    def __init__(self) -> None:
        self._closed = False

    def spawn(self, name: str, fn: Callable[[], None]) -> None:
        if self._closed:
            raise RuntimeError(f"cannot spawn {name}: executor is shut down")
        fn()

    def shutdown(self) -> None:
        self._closed = True


class ThreadedExecutor:
    """Runs tasks concurrently on a thread pool.

    ``max_workers`` of ``None`` or ``0`` lets the first :meth:`resize` call
    (made by the dispatcher with the number of inputs) pick one worker per
    task.
    """

    def __init__(self, max_workers: int | None = None) -> None:
        if max_workers is not None and max_workers < 0:
            raise ValueError("max_workers must be >= 0")
        self.max_workers = max_workers or None
        self._pool: ThreadPoolExecutor | None = None
        self._closed = False
        self._lock = threading.Lock()

    def resize(self, task_count: int) -> None:
        """Choose the pool size for ``task_count`` tasks if none was configured."""

        with self._lock:
            if self._pool is None and self.max_workers is None:
                self.max_workers = max(1, task_count)

    def _ensure_pool(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._closed:
                raise RuntimeError("executor is shut down")
            if self._pool is None:
                self._pool = ThreadPoolExecutor(
                    max_workers=self.max_workers,
                    thread_name_prefix="letterfreq",
                )
            return self._pool

    def spawn(self, name: str, fn: Callable[[], None]) -> None:
        future = self._ensure_pool().submit(fn)
        future.add_done_callback(lambda done: _report_crash(name, done))

    def shutdown(self) -> None:
        with self._lock:
            self._closed = True
            pool, self._pool = self._pool, None
        if pool is not None:
            pool.shutdown(wait=True)


def _report_crash(name: str, future: Future) -> None:
    exc = future.exception()
    if exc is not None:
        _LOGGER.error("Task %s escaped with %r", name, exc, exc_info=exc)


def make_executor(kind: str, max_workers: int = 0) -> Executor:
    """Construct the executor named by the ``dispatch.executor`` setting."""

    if kind == "sequential":
        return SequentialExecutor()
    if kind == "threaded":
        return ThreadedExecutor(max_workers)
    raise ValueError(f"Unknown executor kind: {kind!r}")


__all__ = ["Executor", "SequentialExecutor", "ThreadedExecutor", "make_executor"]
