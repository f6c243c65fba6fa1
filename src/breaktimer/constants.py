"""Phase, action, and reason constants used by the break timer state machine."""

from __future__ import annotations

PHASE_STOPPED = "Stopped"
PHASE_RUNNING = "Running"
PHASE_PAUSED = "Paused"
PHASE_RESTING = "Resting"

COUNTING_PHASES: frozenset[str] = frozenset({PHASE_RUNNING, PHASE_RESTING})

ACTION_START = "start"
ACTION_PAUSE = "pause"
ACTION_RESUME = "resume"
ACTION_SKIP_REST = "skip_rest"
ACTION_TICK = "tick"
ACTION_REFRESH = "refresh_settings"

REASON_STARTED = "started"
REASON_PAUSED = "paused"
REASON_RESUMED = "resumed"
REASON_SKIPPED = "skipped"
REASON_TICKED = "ticked"
REASON_REFRESHED = "refreshed"
REASON_NOT_STOPPED = "not_stopped"
REASON_NOT_RUNNING = "not_running"
REASON_NOT_PAUSED = "not_paused"
REASON_NOT_RESTING = "not_resting"
REASON_NOT_COUNTING = "not_counting"
REASON_NOT_PERSISTED = "not_persisted"
