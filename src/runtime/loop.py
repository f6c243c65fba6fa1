"""Runtime loop that delivers clock ticks and queued UI commands to the timer."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from queue import Empty, Queue
from typing import Any, Callable, Optional

from breaktimer import BreakTimer
from server import UIServer

from .clock import TickClock
from .commands import RuntimeCommandDispatcher
from .contracts import SettingsStoreLike, StatsStoreLike
from .ticks import TimerEventPublisher
from .ui import RuntimeUIPublisher, state_payload


@dataclass(frozen=True)
class RuntimeHooks:
    """Injectable lifecycle hooks used by runtime startup and shutdown flow."""
    setup_signal_handlers: Callable[["RuntimeEngine"], None]


@dataclass(frozen=True)
class RuntimeBootstrap:
    """Dependency bundle required to construct the runtime engine."""
    logger: logging.Logger
    settings_store: SettingsStoreLike
    stats_store: StatsStoreLike
    ui_server: Optional[UIServer]
    hooks: RuntimeHooks


@dataclass
class RuntimeResources:
    """Mutable runtime resources created for the event loop lifecycle."""
    command_queue: Queue[Any]
    clock: TickClock
    stop_requested: threading.Event = field(default_factory=threading.Event)


class RuntimeEngine:
    """Single owner of the break timer.

    Clock pulses and UI commands are both consumed on the thread that calls
    `run()`, so timer mutations never overlap.
    """

    def __init__(self, bootstrap: RuntimeBootstrap, *, clock: Optional[TickClock] = None):
        self._bootstrap = bootstrap
        self._logger = bootstrap.logger

        self._ui = RuntimeUIPublisher(bootstrap.ui_server)
        self._timer = BreakTimer(
            settings=bootstrap.settings_store,
            counter=bootstrap.stats_store,
            overlay=self._ui,
            logger=logging.getLogger("breaktimer"),
        )
        self._timer.subscribe(
            TimerEventPublisher(
                ui=self._ui,
                snapshot=self._timer.snapshot,
                stats=bootstrap.stats_store.get,
                logger=self._logger,
            )
        )
        self._dispatcher = RuntimeCommandDispatcher(
            logger=self._logger,
            timer=self._timer,
            settings_store=bootstrap.settings_store,
            stats_store=bootstrap.stats_store,
            ui=self._ui,
        )
        self._resources = RuntimeResources(
            command_queue=Queue(),
            clock=clock or TickClock(),
        )

        ui_server = bootstrap.ui_server
        if ui_server is not None:
            ui_server.set_command_sink(self.submit_command)
            ui_server.set_hello_payload(self.hello_payload)

    @property
    def timer(self) -> BreakTimer:
        return self._timer

    @property
    def dispatcher(self) -> RuntimeCommandDispatcher:
        return self._dispatcher

    def submit_command(self, command: dict[str, Any]) -> None:
        """Queue a command for the runtime thread; safe to call from any thread."""
        self._resources.command_queue.put(command)

    def request_stop(self) -> None:
        self._resources.stop_requested.set()

    def hello_payload(self) -> dict[str, Any]:
        return {
            "state": state_payload(self._timer.snapshot()),
            "settings": self._bootstrap.settings_store.get().to_dict(),
            "today_completed": self._bootstrap.stats_store.get().count,
        }

    def run(self) -> int:
        self._bootstrap.hooks.setup_signal_handlers(self)
        self._publish_startup_sync()
        self._resources.clock.reset()
        self._logger.info("Break timer ready.")

        try:
            while not self._resources.stop_requested.is_set():
                self.run_once()
        except KeyboardInterrupt:
            self._logger.info("Shutdown requested by keyboard interrupt.")
            return 0
        except Exception as error:
            self._logger.error("Unexpected error: %s", error, exc_info=True)
            return 1
        finally:
            self._shutdown()

        self._logger.info("Break timer stopped.")
        return 0

    def run_once(self) -> None:
        """Wait for commands until the next pulse is due, then deliver due ticks."""
        clock = self._resources.clock
        self._drain_commands(timeout=clock.seconds_until_next_tick())
        for _ in range(clock.due_ticks()):
            self._deliver_tick()

    def _deliver_tick(self) -> None:
        try:
            self._timer.tick()
        except Exception as error:
            self._logger.error("Timer tick failed: %s", error, exc_info=True)

    def _drain_commands(self, *, timeout: float) -> None:
        queue = self._resources.command_queue
        try:
            command = queue.get(timeout=timeout) if timeout > 0 else queue.get_nowait()
        except Empty:
            return

        while True:
            self._handle_command(command)
            try:
                command = queue.get_nowait()
            except Empty:
                return

    def _handle_command(self, command: dict[str, Any]) -> None:
        try:
            self._dispatcher.handle_command(command)
        except Exception as error:
            self._logger.error("UI command failed: %s", error, exc_info=True)

    def _publish_startup_sync(self) -> None:
        self._ui.publish_settings(self._bootstrap.settings_store.get())
        self._ui.publish_stats(self._bootstrap.stats_store.get())
        self._ui.publish_state_changed(self._timer.snapshot())

    def _shutdown(self) -> None:
        ui_server = self._bootstrap.ui_server
        if ui_server is not None:
            self._logger.info("Stopping UI server...")
            try:
                ui_server.stop(timeout_seconds=5.0)
            except Exception as error:
                self._logger.error("Error stopping UI server: %s", error, exc_info=True)
