from __future__ import annotations

from typing import Any, Optional, Protocol

from breaktimer import PresentationUnavailableError, StateInfo
from contracts.ui_protocol import (
    EVENT_COMMAND_RESULT,
    EVENT_REST_COMPLETE,
    EVENT_REST_OVERLAY,
    EVENT_SETTINGS,
    EVENT_STATE_CHANGED,
    EVENT_STATS,
    EVENT_TIMER_TICK,
    EVENT_WORK_COMPLETE,
)
from storage import DailyStats, Settings

from .messages import progress_percent, status_message


class UIServerLike(Protocol):
    @property
    def client_count(self) -> int:
        ...

    def publish(self, event_type: str, **payload: Any) -> None:
        ...


def state_payload(snapshot: StateInfo) -> dict[str, Any]:
    return {
        **snapshot.to_dict(),
        "progress_percent": progress_percent(snapshot),
        "message": status_message(snapshot),
    }


def stats_payload(stats: DailyStats) -> dict[str, Any]:
    return {"today_completed": stats.count, "date": stats.date}


class RuntimeUIPublisher:
    """Publishes timer events to the UI server and acts as the rest overlay."""

    def __init__(self, ui_server: Optional[UIServerLike]):
        self._ui_server = ui_server

    def publish(self, event_type: str, **payload: Any) -> None:
        if self._ui_server:
            self._ui_server.publish(event_type, **payload)

    def publish_tick(self, snapshot: StateInfo) -> None:
        self.publish(EVENT_TIMER_TICK, **state_payload(snapshot))

    def publish_state_changed(self, snapshot: StateInfo) -> None:
        self.publish(EVENT_STATE_CHANGED, **state_payload(snapshot))

    def publish_work_complete(self) -> None:
        self.publish(EVENT_WORK_COMPLETE)

    def publish_rest_complete(self) -> None:
        self.publish(EVENT_REST_COMPLETE)

    def publish_stats(self, stats: DailyStats) -> None:
        self.publish(EVENT_STATS, **stats_payload(stats))

    def publish_settings(self, settings: Settings) -> None:
        self.publish(EVENT_SETTINGS, **settings.to_dict())

    def publish_command_result(
        self,
        command: str,
        *,
        accepted: bool,
        reason: str = "",
        message: Optional[str] = None,
        **payload: Any,
    ) -> None:
        event_payload: dict[str, Any] = {
            "command": command,
            "accepted": accepted,
            **payload,
        }
        if reason:
            event_payload["reason"] = reason
        if message:
            event_payload["message"] = message
        self.publish(EVENT_COMMAND_RESULT, **event_payload)

    def show_rest(self, snapshot: StateInfo) -> None:
        if self._ui_server is None:
            raise PresentationUnavailableError("UI server is disabled")
        if self._ui_server.client_count <= 0:
            raise PresentationUnavailableError("No UI client connected")
        self.publish(EVENT_REST_OVERLAY, visible=True, **state_payload(snapshot))

    def hide_rest(self) -> None:
        self.publish(EVENT_REST_OVERLAY, visible=False)
