"""Monotonic one-second pulse source for the runtime loop."""

from __future__ import annotations

import time
from typing import Optional


class TickClock:
    """Reports how many whole tick intervals elapsed since the last check."""

    def __init__(self, interval_seconds: float = 1.0):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than zero")
        self._interval_seconds = float(interval_seconds)
        self._next_deadline: Optional[float] = None

    @property
    def interval_seconds(self) -> float:
        return self._interval_seconds

    def reset(self) -> None:
        self._next_deadline = time.monotonic() + self._interval_seconds

    def seconds_until_next_tick(self) -> float:
        if self._next_deadline is None:
            self.reset()
        return max(0.0, self._next_deadline - time.monotonic())

    def due_ticks(self) -> int:
        """Return the number of pulses now due and advance the deadline past them."""
        if self._next_deadline is None:
            self.reset()
            return 0

        now = time.monotonic()
        if now < self._next_deadline:
            return 0

        due = int((now - self._next_deadline) // self._interval_seconds) + 1
        self._next_deadline += due * self._interval_seconds
        return due
