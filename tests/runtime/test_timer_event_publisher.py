import logging
import unittest

from breaktimer import BreakTimer, StateInfo
from runtime.ticks import TimerEventPublisher
from runtime.ui import RuntimeUIPublisher
from storage import DailyStats, Settings


class _UIServerStub:
    def __init__(self, client_count: int = 1):
        self.client_count = client_count
        self.events: list[tuple[str, dict[str, object]]] = []

    def publish(self, event_type: str, **payload):
        self.events.append((event_type, payload))

    def types(self) -> list[str]:
        return [event_type for event_type, _ in self.events]


class _SettingsStub:
    def __init__(self, settings: Settings):
        self.settings = settings

    def get(self) -> Settings:
        return self.settings


class _CounterStub:
    def __init__(self):
        self.count = 0

    def increment(self) -> DailyStats:
        self.count += 1
        return self.get()

    def get(self) -> DailyStats:
        return DailyStats(date="2024-01-02", count=self.count)


def _wire(settings: Settings, *, client_count: int = 1):
    server = _UIServerStub(client_count=client_count)
    ui = RuntimeUIPublisher(server)
    counter = _CounterStub()
    timer = BreakTimer(settings=_SettingsStub(settings), counter=counter, overlay=ui)
    timer.subscribe(
        TimerEventPublisher(
            ui=ui,
            snapshot=timer.snapshot,
            stats=counter.get,
            logger=logging.getLogger("test"),
        )
    )
    return timer, server, counter


class TimerEventPublisherTests(unittest.TestCase):
    def test_tick_payload_carries_full_snapshot_and_progress(self) -> None:
        timer, server, _ = _wire(Settings(work_minutes=1, rest_seconds=10))
        timer.start()
        for _ in range(15):
            timer.tick()

        event_type, payload = server.events[-1]
        self.assertEqual("timer_tick", event_type)
        self.assertEqual("Running", payload["phase"])
        self.assertEqual(45, payload["remaining_seconds"])
        self.assertEqual(75.0, payload["progress_percent"])
        self.assertEqual("Working (00:45 until break)", payload["message"])

    def test_work_completion_publishes_tick_then_state_then_overlay(self) -> None:
        timer, server, _ = _wire(Settings(work_minutes=1, rest_seconds=10))
        timer.start()
        server.events.clear()
        for _ in range(60):
            timer.tick()

        tail = server.types()[-4:]
        self.assertEqual(
            ["timer_tick", "work_complete", "state_changed", "rest_overlay"],
            tail,
        )
        overlay_payload = server.events[-1][1]
        self.assertTrue(overlay_payload["visible"])
        self.assertEqual("Resting", overlay_payload["phase"])
        self.assertEqual(10, overlay_payload["remaining_seconds"])

    def test_rest_completion_hides_overlay_and_publishes_stats(self) -> None:
        timer, server, counter = _wire(Settings(work_minutes=1, rest_seconds=1))
        timer.start()
        for _ in range(60):
            timer.tick()
        server.events.clear()

        timer.tick()

        self.assertEqual(
            ["timer_tick", "rest_overlay", "rest_complete", "stats", "state_changed"],
            server.types(),
        )
        self.assertFalse(server.events[1][1]["visible"])
        self.assertEqual(1, server.events[3][1]["today_completed"])
        self.assertEqual("Stopped", server.events[-1][1]["phase"])
        self.assertEqual(1, counter.count)

    def test_no_connected_client_skips_rest_and_restarts_work(self) -> None:
        timer, server, counter = _wire(
            Settings(work_minutes=1, rest_seconds=10),
            client_count=0,
        )
        timer.start()
        with self.assertLogs("breaktimer", level="WARNING"):
            for _ in range(60):
                timer.tick()

        snapshot: StateInfo = timer.snapshot()
        self.assertEqual("Running", snapshot.phase)
        self.assertEqual(60, snapshot.remaining_seconds)
        self.assertEqual(0, counter.count)
        self.assertNotIn("rest_overlay", server.types())
        self.assertEqual("Running", server.events[-1][1]["phase"])


if __name__ == "__main__":
    unittest.main()
