"""Web UI websocket event and command constants."""

from __future__ import annotations

# Websocket event types
EVENT_HELLO = "hello"
EVENT_TIMER_TICK = "timer_tick"
EVENT_STATE_CHANGED = "state_changed"
EVENT_WORK_COMPLETE = "work_complete"
EVENT_REST_COMPLETE = "rest_complete"
EVENT_REST_OVERLAY = "rest_overlay"
EVENT_STATS = "stats"
EVENT_SETTINGS = "settings"
EVENT_COMMAND_RESULT = "command_result"
EVENT_ERROR = "error"

# Inbound websocket commands
COMMAND_START = "start"
COMMAND_PAUSE = "pause"
COMMAND_RESUME = "resume"
COMMAND_SKIP_REST = "skip_rest"
COMMAND_GET_STATE = "get_state"
COMMAND_GET_SETTINGS = "get_settings"
COMMAND_UPDATE_SETTINGS = "update_settings"
COMMAND_GET_STATS = "get_stats"

TIMER_COMMANDS: frozenset[str] = frozenset(
    {
        COMMAND_START,
        COMMAND_PAUSE,
        COMMAND_RESUME,
        COMMAND_SKIP_REST,
    }
)

QUERY_COMMANDS: frozenset[str] = frozenset(
    {
        COMMAND_GET_STATE,
        COMMAND_GET_SETTINGS,
        COMMAND_GET_STATS,
    }
)

STICKY_EVENT_TYPES: frozenset[str] = frozenset(
    {
        EVENT_REST_OVERLAY,
        EVENT_SETTINGS,
    }
)

STICKY_EVENT_ORDER: tuple[str, ...] = (
    EVENT_SETTINGS,
    EVENT_REST_OVERLAY,
)
