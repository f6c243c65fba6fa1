"""Status text and display helpers for break timer snapshots."""

from __future__ import annotations

from typing import Optional

from breaktimer import StateInfo
from breaktimer.constants import (
    PHASE_PAUSED,
    PHASE_RESTING,
    PHASE_RUNNING,
    REASON_NOT_PAUSED,
    REASON_NOT_PERSISTED,
    REASON_NOT_RESTING,
    REASON_NOT_RUNNING,
    REASON_NOT_STOPPED,
)


def format_duration(seconds: int) -> str:
    """Format a duration in seconds as `MM:SS`."""
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{remainder:02d}"


def progress_percent(snapshot: StateInfo) -> float:
    """Remaining share of the active phase, 100.0 at phase start."""
    total = snapshot.active_duration_seconds
    if total <= 0:
        return 0.0
    ratio = snapshot.remaining_seconds / total
    return round(max(0.0, min(1.0, ratio)) * 100, 1)


def status_message(snapshot: StateInfo) -> str:
    remaining = format_duration(snapshot.remaining_seconds)
    if snapshot.phase == PHASE_RUNNING:
        return f"Working ({remaining} until break)"
    if snapshot.phase == PHASE_PAUSED:
        return f"Paused ({remaining} left)"
    if snapshot.phase == PHASE_RESTING:
        return f"Resting ({remaining} left)"
    return "Ready"


def rejection_text(command: str, reason: str) -> str:
    if reason == REASON_NOT_STOPPED:
        return "Timer is already running or paused."
    if reason == REASON_NOT_RUNNING:
        return "Timer is not running."
    if reason == REASON_NOT_PAUSED:
        return "Timer is not paused."
    if reason == REASON_NOT_RESTING:
        return "Not in a rest break."
    return f"Command '{command}' was not applied."


def outcome_text(command: str, accepted: bool, reason: str) -> Optional[str]:
    """Message for a timer command result; None when there is nothing to say."""
    if not accepted:
        return rejection_text(command, reason)
    if reason == REASON_NOT_PERSISTED:
        return "Break finished but today's count could not be saved."
    return None
