from .errors import BreakTimerError, PresentationUnavailableError
from .service import (
    BreakTimer,
    CompletionCounter,
    RestOverlay,
    SettingsSource,
    StateInfo,
    TimerAction,
    TimerActionResult,
    TimerEventListener,
    TimerPhase,
)

__all__ = [
    "BreakTimer",
    "BreakTimerError",
    "CompletionCounter",
    "PresentationUnavailableError",
    "RestOverlay",
    "SettingsSource",
    "StateInfo",
    "TimerAction",
    "TimerActionResult",
    "TimerEventListener",
    "TimerPhase",
]
