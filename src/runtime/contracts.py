"""Protocols describing the stores the runtime reads and writes."""

from __future__ import annotations

from typing import Protocol

from storage import DailyStats, Settings


class SettingsStoreLike(Protocol):
    def get(self) -> Settings:
        ...

    def set(self, settings: Settings) -> Settings:
        ...


class StatsStoreLike(Protocol):
    def get(self) -> DailyStats:
        ...

    def increment(self) -> DailyStats:
        ...
