"""Immutable settings objects parsed from config.toml."""

from __future__ import annotations

from dataclasses import dataclass


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class TimerDefaults:
    """Settings used until the user saves their own."""
    work_minutes: int = 20
    rest_seconds: int = 20
    auto_start: bool = False
    theme: str = "light"


@dataclass(frozen=True)
class StorageSettings:
    data_dir: str = ""
    settings_file: str = "settings.json"
    stats_file: str = "stats.json"


@dataclass(frozen=True)
class UIServerSettings:
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    index_file: str = ""


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"


@dataclass(frozen=True)
class AppConfig:
    timer: TimerDefaults
    storage: StorageSettings
    ui_server: UIServerSettings
    logging: LoggingSettings
    source_file: str
