"""Websocket event encoding and the replay cache for late-joining pages."""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from contracts.ui_protocol import STICKY_EVENT_ORDER, STICKY_EVENT_TYPES


def make_event(
    event_type: str,
    *,
    now_fn: Optional[Callable[[], datetime]] = None,
    **payload: Any,
) -> str:
    """Encode one outbound event as `{"type", "timestamp", **payload}` JSON."""
    now = (now_fn or _utc_now)()
    return json.dumps({"type": event_type, "timestamp": now.isoformat(), **payload})


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StickyEventStore:
    """Latest settings and overlay events, replayed on connect.

    Transient events (ticks, phase changes, stats, command results) are not
    kept; a new page gets the current phase and today's count from the hello
    event instead.
    """

    def __init__(self):
        self._latest: dict[str, str] = {}
        self._lock = threading.Lock()

    def remember(self, event_type: str, message: str) -> None:
        if event_type in STICKY_EVENT_TYPES:
            with self._lock:
                self._latest[event_type] = message

    def snapshot(self) -> list[str]:
        with self._lock:
            latest = dict(self._latest)
        return [latest[event_type] for event_type in STICKY_EVENT_ORDER if event_type in latest]


def decode_command(raw: str | bytes) -> Optional[dict[str, Any]]:
    """Decode an inbound message into a command mapping, or None if malformed."""
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            return None
    try:
        payload = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    command = payload.get("command")
    if not isinstance(command, str) or not command.strip():
        return None
    return {**payload, "command": command.strip()}
