"""Dispatcher that executes UI commands against the break timer and stores."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Callable, Mapping, Optional

from breaktimer import BreakTimer, TimerActionResult
from contracts.ui_protocol import (
    COMMAND_GET_SETTINGS,
    COMMAND_GET_STATS,
    COMMAND_PAUSE,
    COMMAND_RESUME,
    COMMAND_SKIP_REST,
    COMMAND_START,
    COMMAND_UPDATE_SETTINGS,
    QUERY_COMMANDS,
    TIMER_COMMANDS,
)
from storage import InvalidSettingsError, PersistenceError, Settings

from .contracts import SettingsStoreLike, StatsStoreLike
from .messages import outcome_text
from .ui import RuntimeUIPublisher, state_payload, stats_payload

REASON_OK = "ok"
REASON_INVALID_SETTINGS = "invalid_settings"
REASON_NOT_PERSISTED = "not_persisted"
REASON_UNSUPPORTED_COMMAND = "unsupported_command"

_SETTINGS_FIELDS = frozenset(field.name for field in fields(Settings))


@dataclass(frozen=True)
class CommandResult:
    """Synchronous acknowledgment for a UI command."""
    command: str
    accepted: bool
    reason: str
    message: Optional[str] = None


class RuntimeCommandDispatcher:
    """Routes decoded websocket commands to timer, settings, and stats handlers."""

    def __init__(
        self,
        *,
        logger: logging.Logger,
        timer: BreakTimer,
        settings_store: SettingsStoreLike,
        stats_store: StatsStoreLike,
        ui: RuntimeUIPublisher,
    ):
        self._logger = logger
        self._timer = timer
        self._settings_store = settings_store
        self._stats_store = stats_store
        self._ui = ui
        self._timer_commands: dict[str, Callable[[], TimerActionResult]] = {
            COMMAND_START: timer.start,
            COMMAND_PAUSE: timer.pause,
            COMMAND_RESUME: timer.resume,
            COMMAND_SKIP_REST: timer.skip_rest,
        }

    def handle_command(self, command: Mapping[str, Any]) -> CommandResult:
        name = command.get("command")
        if not isinstance(name, str):
            name = ""

        if name in TIMER_COMMANDS:
            return self._handle_timer_command(name)
        if name in QUERY_COMMANDS:
            return self._handle_query(name)
        if name == COMMAND_UPDATE_SETTINGS:
            raw_settings = command.get("settings")
            if not isinstance(raw_settings, Mapping):
                return self._reply(
                    name,
                    False,
                    REASON_INVALID_SETTINGS,
                    message="'settings' must be an object.",
                )
            return self.update_settings(raw_settings)

        self._logger.warning("Unsupported UI command: %r", name)
        return self._reply(
            name,
            False,
            REASON_UNSUPPORTED_COMMAND,
            message=f"Unsupported command: {name or '<missing>'}",
        )

    def get_settings(self) -> Settings:
        return self._settings_store.get()

    def get_stats(self) -> dict[str, Any]:
        return stats_payload(self._stats_store.get())

    def update_settings(self, changes: Mapping[str, Any] | Settings) -> CommandResult:
        """Save new settings; the running cycle keeps its durations until it ends."""
        if isinstance(changes, Settings):
            candidate = changes
        else:
            unknown = sorted(key for key in changes if key not in _SETTINGS_FIELDS)
            if unknown:
                self._logger.warning("Ignoring unknown settings fields: %s", ", ".join(unknown))
            current = self._settings_store.get().to_dict()
            current.update({key: changes[key] for key in changes if key in _SETTINGS_FIELDS})
            candidate = Settings(**current)

        reason = REASON_OK
        message: Optional[str] = None
        try:
            saved = self._settings_store.set(candidate)
        except InvalidSettingsError as error:
            self._logger.warning("Rejected settings update: %s", error)
            return self._reply(
                COMMAND_UPDATE_SETTINGS,
                False,
                REASON_INVALID_SETTINGS,
                message=str(error),
                settings=self._settings_store.get().to_dict(),
            )
        except PersistenceError as error:
            self._logger.error("Settings applied but not persisted: %s", error)
            saved = self._settings_store.get()
            reason = REASON_NOT_PERSISTED
            message = "Settings applied but could not be saved."

        self._ui.publish_settings(saved)
        if self._timer.refresh_settings().accepted:
            self._ui.publish_state_changed(self._timer.snapshot())
        return self._reply(
            COMMAND_UPDATE_SETTINGS,
            True,
            reason,
            message=message,
            settings=saved.to_dict(),
        )

    def _handle_query(self, name: str) -> CommandResult:
        if name == COMMAND_GET_SETTINGS:
            settings = self.get_settings()
            self._ui.publish_settings(settings)
            return self._reply(name, True, REASON_OK, settings=settings.to_dict())
        if name == COMMAND_GET_STATS:
            return self._reply(name, True, REASON_OK, **self.get_stats())
        return self._reply(name, True, REASON_OK, state=state_payload(self._timer.snapshot()))

    def _handle_timer_command(self, name: str) -> CommandResult:
        result = self._timer_commands[name]()
        message = outcome_text(name, result.accepted, result.reason)
        return self._reply(
            name,
            result.accepted,
            result.reason,
            message=message,
            state=state_payload(result.snapshot),
        )

    def _reply(
        self,
        command: str,
        accepted: bool,
        reason: str,
        *,
        message: Optional[str] = None,
        **payload: Any,
    ) -> CommandResult:
        self._ui.publish_command_result(
            command,
            accepted=accepted,
            reason=reason,
            message=message,
            **payload,
        )
        return CommandResult(
            command=command,
            accepted=accepted,
            reason=reason,
            message=message,
        )
