"""Persistent user settings with validation on save."""

from __future__ import annotations

import logging
import threading
from dataclasses import fields
from pathlib import Path
from typing import Any, Optional

from .errors import StorageError
from .json_file import read_json_record, write_json_record
from .models import Settings, validate_settings

DEFAULT_SETTINGS_FILE = "settings.json"


class SettingsStore:
    """Holds the last-known-good settings and mirrors them to disk."""

    def __init__(
        self,
        path: Path | str,
        *,
        defaults: Optional[Settings] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._path = Path(path)
        self._defaults = validate_settings(defaults or Settings())
        self._logger = logger or logging.getLogger("storage.settings")
        self._lock = threading.Lock()
        self._settings: Optional[Settings] = None

    @property
    def path(self) -> Path:
        return self._path

    def get(self) -> Settings:
        with self._lock:
            return self._load_locked()

    def set(self, settings: Settings) -> Settings:
        """Validate and store `settings`.

        Raises InvalidSettingsError without touching the stored value, or
        PersistenceError after the in-memory value has been replaced.
        """
        validate_settings(settings)
        with self._lock:
            self._settings = settings
            write_json_record(self._path, settings.to_dict())
        self._logger.info(
            "Settings saved: work_minutes=%d rest_seconds=%d auto_start=%s theme=%s",
            settings.work_minutes,
            settings.rest_seconds,
            settings.auto_start,
            settings.theme,
        )
        return settings

    def _load_locked(self) -> Settings:
        if self._settings is not None:
            return self._settings

        try:
            raw = read_json_record(self._path)
        except StorageError as error:
            self._logger.warning("Ignoring unreadable settings file: %s", error)
            raw = None

        settings = self._defaults if raw is None else self._merge_with_defaults(raw)
        self._settings = settings
        return settings

    def _merge_with_defaults(self, raw: dict[str, Any]) -> Settings:
        values: dict[str, Any] = {}
        for field in fields(Settings):
            default = getattr(self._defaults, field.name)
            value = raw.get(field.name, default)
            candidate = Settings(**{**self._defaults.to_dict(), field.name: value})
            try:
                validate_settings(candidate)
            except StorageError:
                self._logger.warning(
                    "Invalid stored value for %s: %r; using default %r",
                    field.name,
                    value,
                    default,
                )
                value = default
            values[field.name] = value
        return Settings(**values)
