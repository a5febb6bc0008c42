"""In-flight task accounting with a blocking completion barrier."""

from __future__ import annotations

import threading
from typing import Optional


class InFlightCounter:
    """Counts running tasks and lets one thread wait until none remain.

    Increments, decrements and the wait all go through one condition variable,
    so a waiter never observes a half-updated count.  Passing ``lock`` makes
    the counter share a mutual-exclusion primitive with another component.
    """

    def __init__(self, lock: Optional[threading.Lock] = None) -> None:
        self._cond = threading.Condition(lock if lock is not None else threading.Lock())
        self._count = 0

    @property
    def value(self) -> int:
        with self._cond:
            return self._count

    def increment(self) -> None:
        with self._cond:
            self._count += 1

    def decrement(self) -> None:
        with self._cond:
            if self._count <= 0:
                raise RuntimeError("in-flight counter decremented below zero")
            self._count -= 1
            if self._count == 0:
                self._cond.notify_all()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the count is zero; ``False`` only if ``timeout`` expired."""

        with self._cond:
            return self._cond.wait_for(lambda: self._count == 0, timeout=timeout)


__all__ = ["InFlightCounter"]
