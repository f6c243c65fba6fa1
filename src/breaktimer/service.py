"""Single-owner work/rest state machine driven by one-second ticks."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Literal, Optional, Protocol

from storage import DailyStats, Settings, StorageError

from .constants import (
    ACTION_PAUSE,
    ACTION_REFRESH,
    ACTION_RESUME,
    ACTION_SKIP_REST,
    ACTION_START,
    ACTION_TICK,
    COUNTING_PHASES,
    PHASE_PAUSED,
    PHASE_RESTING,
    PHASE_RUNNING,
    PHASE_STOPPED,
    REASON_NOT_COUNTING,
    REASON_NOT_PAUSED,
    REASON_NOT_PERSISTED,
    REASON_NOT_RESTING,
    REASON_NOT_RUNNING,
    REASON_NOT_STOPPED,
    REASON_PAUSED,
    REASON_REFRESHED,
    REASON_RESUMED,
    REASON_SKIPPED,
    REASON_STARTED,
    REASON_TICKED,
)
from .errors import PresentationUnavailableError

TimerPhase = Literal["Stopped", "Running", "Paused", "Resting"]
TimerAction = Literal[
    "start",
    "pause",
    "resume",
    "skip_rest",
    "tick",
    "refresh_settings",
]


@dataclass(frozen=True)
class StateInfo:
    """Immutable timer snapshot exposed to presentation and command callers."""
    phase: TimerPhase
    remaining_seconds: int
    work_duration_seconds: int
    rest_duration_seconds: int

    @property
    def active_duration_seconds(self) -> int:
        if self.phase == PHASE_RESTING:
            return self.rest_duration_seconds
        return self.work_duration_seconds

    @property
    def is_counting(self) -> bool:
        return self.phase in COUNTING_PHASES

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase,
            "remaining_seconds": self.remaining_seconds,
            "work_duration_seconds": self.work_duration_seconds,
            "rest_duration_seconds": self.rest_duration_seconds,
        }


@dataclass(frozen=True)
class TimerActionResult:
    """Acknowledgment returned after applying a timer command or tick."""
    action: TimerAction
    accepted: bool
    reason: str
    snapshot: StateInfo


class TimerEventListener(Protocol):
    def on_tick(self, remaining_seconds: int) -> None:
        ...

    def on_state_changed(self, phase: TimerPhase) -> None:
        ...

    def on_work_complete(self) -> None:
        ...

    def on_rest_complete(self) -> None:
        ...


class RestOverlay(Protocol):
    """Presentation surface for the rest countdown.

    `show_rest` raises PresentationUnavailableError when nothing can display it.
    """
    def show_rest(self, snapshot: StateInfo) -> None:
        ...

    def hide_rest(self) -> None:
        ...


class SettingsSource(Protocol):
    def get(self) -> Settings:
        ...


class CompletionCounter(Protocol):
    def increment(self) -> DailyStats:
        ...


class BreakTimer:
    """Work/rest cycle state machine.

    All mutating calls run to completion under one re-entrant lock, and
    listener notifications are delivered in order from inside that call. The
    in-memory transition is applied before any collaborator is invoked and is
    never rolled back when a collaborator fails.
    """

    def __init__(
        self,
        *,
        settings: SettingsSource,
        counter: CompletionCounter,
        overlay: Optional[RestOverlay] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._settings = settings
        self._counter = counter
        self._overlay = overlay
        self._logger = logger or logging.getLogger("breaktimer")
        self._lock = threading.RLock()
        self._listeners: list[TimerEventListener] = []

        self._phase: TimerPhase = PHASE_STOPPED
        self._work_duration_seconds = 0
        self._rest_duration_seconds = 0
        self._load_durations_locked()
        self._remaining_seconds = self._work_duration_seconds

    def subscribe(self, listener: TimerEventListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def snapshot(self) -> StateInfo:
        with self._lock:
            return self._snapshot_locked()

    def start(self) -> TimerActionResult:
        with self._lock:
            if self._phase != PHASE_STOPPED:
                return self._rejected_locked(ACTION_START, REASON_NOT_STOPPED)

            self._begin_work_locked()
            self._notify("on_state_changed", self._phase)
            return self._result_locked(ACTION_START, True, REASON_STARTED)

    def pause(self) -> TimerActionResult:
        with self._lock:
            if self._phase != PHASE_RUNNING:
                return self._rejected_locked(ACTION_PAUSE, REASON_NOT_RUNNING)

            self._phase = PHASE_PAUSED
            self._logger.info("Work paused: remaining=%ss", self._remaining_seconds)
            self._notify("on_state_changed", self._phase)
            return self._result_locked(ACTION_PAUSE, True, REASON_PAUSED)

    def resume(self) -> TimerActionResult:
        with self._lock:
            if self._phase != PHASE_PAUSED:
                return self._rejected_locked(ACTION_RESUME, REASON_NOT_PAUSED)

            self._phase = PHASE_RUNNING
            self._logger.info("Work resumed: remaining=%ss", self._remaining_seconds)
            self._notify("on_state_changed", self._phase)
            return self._result_locked(ACTION_RESUME, True, REASON_RESUMED)

    def skip_rest(self) -> TimerActionResult:
        with self._lock:
            if self._phase != PHASE_RESTING:
                return self._rejected_locked(ACTION_SKIP_REST, REASON_NOT_RESTING)

            self._logger.info("Rest skipped: remaining=%ss", self._remaining_seconds)
            persisted = self._finish_rest_locked()
            reason = REASON_SKIPPED if persisted else REASON_NOT_PERSISTED
            return self._result_locked(ACTION_SKIP_REST, True, reason)

    def tick(self) -> TimerActionResult:
        """Advance the active countdown by one second.

        Ticks outside Running/Resting, or at zero, change nothing and emit
        nothing.
        """
        with self._lock:
            if not self._snapshot_locked().is_counting or self._remaining_seconds <= 0:
                return self._result_locked(ACTION_TICK, False, REASON_NOT_COUNTING)

            self._remaining_seconds -= 1
            self._notify("on_tick", self._remaining_seconds)

            reason = REASON_TICKED
            if self._remaining_seconds == 0:
                if self._phase == PHASE_RUNNING:
                    self._finish_work_locked()
                else:
                    self._logger.info("Rest completed")
                    if not self._finish_rest_locked():
                        reason = REASON_NOT_PERSISTED

            return self._result_locked(ACTION_TICK, True, reason)

    def refresh_settings(self) -> TimerActionResult:
        """Pick up saved durations while Stopped; other phases keep their cycle."""
        with self._lock:
            if self._phase != PHASE_STOPPED:
                return self._rejected_locked(ACTION_REFRESH, REASON_NOT_STOPPED)

            self._load_durations_locked()
            self._remaining_seconds = self._work_duration_seconds
            return self._result_locked(ACTION_REFRESH, True, REASON_REFRESHED)

    def _begin_work_locked(self) -> None:
        self._load_durations_locked()
        self._phase = PHASE_RUNNING
        self._remaining_seconds = self._work_duration_seconds
        self._logger.info(
            "Work started: work=%ss rest=%ss",
            self._work_duration_seconds,
            self._rest_duration_seconds,
        )

    def _finish_work_locked(self) -> None:
        self._phase = PHASE_RESTING
        self._remaining_seconds = self._rest_duration_seconds
        self._logger.info("Work completed, resting for %ss", self._remaining_seconds)
        self._notify("on_work_complete")
        self._notify("on_state_changed", self._phase)

        if self._overlay is None:
            return
        try:
            self._overlay.show_rest(self._snapshot_locked())
        except PresentationUnavailableError as error:
            self._logger.warning(
                "Rest overlay unavailable, continuing with next work cycle: %s",
                error,
            )
            self._begin_work_locked()
            self._notify("on_state_changed", self._phase)

    def _finish_rest_locked(self) -> bool:
        """Count the rest and leave Resting; returns False if the count was not saved.

        The phase change runs even when the counter raises something other
        than StorageError; that error then propagates to the caller.
        """
        persisted = False
        try:
            self._counter.increment()
            persisted = True
        except StorageError as error:
            self._logger.error("Failed to record completed rest: %s", error)
        finally:
            self._leave_rest_locked()
        return persisted

    def _leave_rest_locked(self) -> None:
        if self._overlay is not None:
            try:
                self._overlay.hide_rest()
            except PresentationUnavailableError as error:
                self._logger.warning("Failed to hide rest overlay: %s", error)

        if self._settings.get().auto_start:
            self._begin_work_locked()
        else:
            self._load_durations_locked()
            self._phase = PHASE_STOPPED
            self._remaining_seconds = self._work_duration_seconds
            self._logger.info("Timer stopped after rest")

        self._notify("on_rest_complete")
        self._notify("on_state_changed", self._phase)

    def _load_durations_locked(self) -> None:
        settings = self._settings.get()
        self._work_duration_seconds = settings.work_duration_seconds
        self._rest_duration_seconds = settings.rest_duration_seconds

    def _notify(self, event: str, *args: Any) -> None:
        for listener in tuple(self._listeners):
            try:
                getattr(listener, event)(*args)
            except Exception as error:
                self._logger.warning("Timer listener failed on %s: %s", event, error)

    def _rejected_locked(self, action: TimerAction, reason: str) -> TimerActionResult:
        self._logger.debug("Ignoring %s while %s", action, self._phase)
        return self._result_locked(action, False, reason)

    def _result_locked(
        self,
        action: TimerAction,
        accepted: bool,
        reason: str,
    ) -> TimerActionResult:
        return TimerActionResult(
            action=action,
            accepted=accepted,
            reason=reason,
            snapshot=self._snapshot_locked(),
        )

    def _snapshot_locked(self) -> StateInfo:
        return StateInfo(
            phase=self._phase,
            remaining_seconds=self._remaining_seconds,
            work_duration_seconds=self._work_duration_seconds,
            rest_duration_seconds=self._rest_duration_seconds,
        )
