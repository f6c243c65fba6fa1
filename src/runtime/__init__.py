"""Runtime loop wiring the break timer to the clock, stores and browser page."""

from .clock import TickClock
from .commands import CommandResult, RuntimeCommandDispatcher
from .loop import RuntimeBootstrap, RuntimeEngine, RuntimeHooks

__all__ = [
    "CommandResult",
    "RuntimeBootstrap",
    "RuntimeCommandDispatcher",
    "RuntimeEngine",
    "RuntimeHooks",
    "TickClock",
]
