from __future__ import annotations

import threading
from typing import Generic, TypeVar

T = TypeVar("T")


class LatestResultSlot(Generic[T]):
    """
    Single-slot handoff between recognition callbacks and the render loop.

    A value is accepted only if its sequence number is newer than every value
    accepted before, and it replaces whatever is still pending. Late results
    for older frames are rejected, so the render loop never goes backwards.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._latest_seq: int | None = None
        self._pending: tuple[int, T] | None = None

    @property
    def latest_seq(self) -> int | None:
        with self._cond:
            return self._latest_seq

    def offer(self, seq: int, value: T) -> bool:
        with self._cond:
            if self._latest_seq is not None and seq <= self._latest_seq:
                return False
            self._latest_seq = seq
            self._pending = (seq, value)
            self._cond.notify_all()
            return True

    def take(self, timeout: float | None = 0.0) -> tuple[int, T] | None:
        """
        Pop the pending value.

        `timeout=0` returns immediately; None blocks until a value arrives.
        """

        with self._cond:
            if self._pending is None and timeout != 0.0:
                self._cond.wait_for(lambda: self._pending is not None, timeout=timeout)
            pending, self._pending = self._pending, None
            return pending
