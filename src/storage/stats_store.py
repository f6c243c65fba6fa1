"""Daily completed-rest counter persisted as a single `{date, count}` record."""

from __future__ import annotations

import datetime as dt
import logging
import threading
from pathlib import Path
from typing import Callable, Optional

from .errors import StorageError
from .json_file import read_json_record, write_json_record
from .models import DailyStats

DEFAULT_STATS_FILE = "stats.json"


class DailyCounterStore:
    """Counts completed rests for the current calendar day.

    The stored record is rolled over to `{today, 0}` whenever its date is not
    today's date. `get()` applies the rollover to the returned value only; the
    rolled-over record is written by the next `increment()`.
    """

    def __init__(
        self,
        path: Path | str,
        *,
        today_fn: Callable[[], dt.date] = dt.date.today,
        logger: Optional[logging.Logger] = None,
    ):
        self._path = Path(path)
        self._today_fn = today_fn
        self._logger = logger or logging.getLogger("storage.stats")
        self._lock = threading.Lock()
        self._record: Optional[DailyStats] = None

    @property
    def path(self) -> Path:
        return self._path

    def get(self) -> DailyStats:
        with self._lock:
            return self._current_locked()

    def increment(self) -> DailyStats:
        """Add one completed rest for today and persist the new record.

        Raises PersistenceError when the write fails; the in-memory count is
        already updated at that point.
        """
        with self._lock:
            current = self._current_locked()
            updated = DailyStats(date=current.date, count=current.count + 1)
            self._record = updated
            write_json_record(self._path, updated.to_dict())
            self._logger.info(
                "Completed rests today: date=%s count=%d",
                updated.date,
                updated.count,
            )
            return updated

    def _current_locked(self) -> DailyStats:
        today = self._today_fn().isoformat()
        record = self._load_locked()
        if record.date != today:
            return DailyStats(date=today, count=0)
        return record

    def _load_locked(self) -> DailyStats:
        if self._record is not None:
            return self._record

        today = self._today_fn().isoformat()
        try:
            raw = read_json_record(self._path)
        except StorageError as error:
            self._logger.warning("Ignoring unreadable stats file: %s", error)
            raw = None

        record = _stats_from_record(raw, today=today, logger=self._logger)
        self._record = record
        return record


def _stats_from_record(
    raw: Optional[dict],
    *,
    today: str,
    logger: logging.Logger,
) -> DailyStats:
    if raw is None:
        return DailyStats(date=today, count=0)

    date = raw.get("date")
    count = raw.get("count")
    if not isinstance(date, str) or not date:
        logger.warning("Stats record has no valid date; starting from zero.")
        return DailyStats(date=today, count=0)
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        logger.warning("Stats record has invalid count %r; starting from zero.", count)
        return DailyStats(date=date, count=0)
    return DailyStats(date=date, count=count)
