"""Listener that forwards timer events to the UI in emission order."""

from __future__ import annotations

import logging
from typing import Callable

from breaktimer import StateInfo, TimerPhase
from storage import DailyStats

from .ui import RuntimeUIPublisher


class TimerEventPublisher:
    """Turns break timer notifications into websocket events.

    Payloads are built from a fresh snapshot so the UI never has to infer
    state from the notification alone.
    """

    def __init__(
        self,
        *,
        ui: RuntimeUIPublisher,
        snapshot: Callable[[], StateInfo],
        stats: Callable[[], DailyStats],
        logger: logging.Logger,
    ):
        self._ui = ui
        self._snapshot = snapshot
        self._stats = stats
        self._logger = logger

    def on_tick(self, remaining_seconds: int) -> None:
        del remaining_seconds  # Carried in the snapshot payload.
        self._ui.publish_tick(self._snapshot())

    def on_state_changed(self, phase: TimerPhase) -> None:
        self._logger.debug("Timer phase changed: %s", phase)
        self._ui.publish_state_changed(self._snapshot())

    def on_work_complete(self) -> None:
        self._ui.publish_work_complete()

    def on_rest_complete(self) -> None:
        self._ui.publish_rest_complete()
        self._ui.publish_stats(self._stats())
