import datetime as dt
import json
import tempfile
import threading
import unittest
from pathlib import Path
from unittest.mock import patch

from storage import DailyCounterStore, DailyStats, PersistenceError


def _write_stats(path: Path, payload) -> None:
    path.write_text(json.dumps(payload), encoding="utf-8")


class DailyCounterStoreTests(unittest.TestCase):
    def test_missing_file_starts_at_zero_for_today(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            store = DailyCounterStore(
                Path(temp_dir) / "stats.json",
                today_fn=lambda: dt.date(2024, 1, 2),
            )
            self.assertEqual(DailyStats(date="2024-01-02", count=0), store.get())

    def test_rollover_is_applied_on_read_and_persisted_on_increment(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "stats.json"
            _write_stats(path, {"date": "2024-01-01", "count": 7})
            store = DailyCounterStore(path, today_fn=lambda: dt.date(2024, 1, 2))

            self.assertEqual(0, store.get().count)
            self.assertEqual(
                {"date": "2024-01-01", "count": 7},
                json.loads(path.read_text(encoding="utf-8")),
            )

            updated = store.increment()

            self.assertEqual(DailyStats(date="2024-01-02", count=1), updated)
            self.assertEqual(
                {"date": "2024-01-02", "count": 1},
                json.loads(path.read_text(encoding="utf-8")),
            )

    def test_same_day_count_keeps_increasing(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "stats.json"
            _write_stats(path, {"date": "2024-01-02", "count": 3})
            store = DailyCounterStore(path, today_fn=lambda: dt.date(2024, 1, 2))

            store.increment()
            store.increment()

            self.assertEqual(5, store.get().count)
            reloaded = DailyCounterStore(path, today_fn=lambda: dt.date(2024, 1, 2))
            self.assertEqual(5, reloaded.get().count)

    def test_midnight_crossing_resets_count_in_running_process(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            today = {"value": dt.date(2024, 1, 1)}
            store = DailyCounterStore(
                Path(temp_dir) / "stats.json",
                today_fn=lambda: today["value"],
            )
            store.increment()
            store.increment()

            today["value"] = dt.date(2024, 1, 2)

            self.assertEqual(DailyStats(date="2024-01-02", count=0), store.get())
            self.assertEqual(1, store.increment().count)

    def test_unreadable_file_is_treated_as_empty(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "stats.json"
            path.write_text("{not json", encoding="utf-8")
            store = DailyCounterStore(path, today_fn=lambda: dt.date(2024, 1, 2))

            with self.assertLogs("storage.stats", level="WARNING"):
                stats = store.get()

            self.assertEqual(DailyStats(date="2024-01-02", count=0), stats)

    def test_write_failure_raises_after_updating_memory(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            store = DailyCounterStore(
                Path(temp_dir) / "stats.json",
                today_fn=lambda: dt.date(2024, 1, 2),
            )
            with patch("storage.json_file.os.replace", side_effect=OSError("read-only")):
                with self.assertRaises(PersistenceError):
                    store.increment()

            self.assertEqual(1, store.get().count)
            self.assertEqual([], list(Path(temp_dir).glob("*.tmp")))

    def test_concurrent_increments_are_not_lost(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            store = DailyCounterStore(
                Path(temp_dir) / "stats.json",
                today_fn=lambda: dt.date(2024, 1, 2),
            )
            threads = [threading.Thread(target=store.increment) for _ in range(8)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

            self.assertEqual(8, store.get().count)


if __name__ == "__main__":
    unittest.main()
