"""Settings and daily stats persistence."""

from .errors import InvalidSettingsError, PersistenceError, StorageError
from .models import DailyStats, Settings, validate_settings
from .settings_store import DEFAULT_SETTINGS_FILE, SettingsStore
from .stats_store import DEFAULT_STATS_FILE, DailyCounterStore

__all__ = [
    "DEFAULT_SETTINGS_FILE",
    "DEFAULT_STATS_FILE",
    "DailyCounterStore",
    "DailyStats",
    "InvalidSettingsError",
    "PersistenceError",
    "Settings",
    "SettingsStore",
    "StorageError",
    "validate_settings",
]
