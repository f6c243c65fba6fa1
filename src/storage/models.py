"""Immutable records persisted by the settings and stats stores."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from .errors import InvalidSettingsError

DEFAULT_WORK_MINUTES = 20
DEFAULT_REST_SECONDS = 20
DEFAULT_THEME = "light"


@dataclass(frozen=True)
class Settings:
    """User-facing timer settings; durations as entered in the settings form."""
    work_minutes: int = DEFAULT_WORK_MINUTES
    rest_seconds: int = DEFAULT_REST_SECONDS
    auto_start: bool = False
    theme: str = DEFAULT_THEME

    @property
    def work_duration_seconds(self) -> int:
        return int(self.work_minutes) * 60

    @property
    def rest_duration_seconds(self) -> int:
        return int(self.rest_seconds)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DailyStats:
    """Completed rest count for one calendar day (`YYYY-MM-DD`)."""
    date: str
    count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def validate_settings(settings: Settings) -> Settings:
    """Return settings unchanged or raise InvalidSettingsError."""
    if not _is_positive_int(settings.work_minutes):
        raise InvalidSettingsError(
            f"work_minutes must be a positive integer, got: {settings.work_minutes!r}"
        )
    if not _is_positive_int(settings.rest_seconds):
        raise InvalidSettingsError(
            f"rest_seconds must be a positive integer, got: {settings.rest_seconds!r}"
        )
    if not isinstance(settings.auto_start, bool):
        raise InvalidSettingsError(
            f"auto_start must be a boolean, got: {settings.auto_start!r}"
        )
    if not isinstance(settings.theme, str) or not settings.theme.strip():
        raise InvalidSettingsError("theme must be a non-empty string")
    return settings


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0
