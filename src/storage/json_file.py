"""Small helpers for reading and atomically replacing JSON record files."""

from __future__ import annotations

import contextlib
import json
import os
from pathlib import Path
from typing import Any, Mapping, Optional

from .errors import PersistenceError, StorageError


def read_json_record(path: Path) -> Optional[dict[str, Any]]:
    """Return the JSON object stored at `path`, or None when the file is missing."""
    if not path.exists():
        return None

    try:
        with open(path, "r", encoding="utf-8") as fh:
            raw = json.load(fh)
    except (OSError, ValueError) as error:
        raise StorageError(f"Failed to read {path}: {error}") from error

    if not isinstance(raw, dict):
        raise StorageError(f"Root JSON value in {path} must be an object.")
    return raw


def write_json_record(path: Path, record: Mapping[str, Any]) -> None:
    """Write `record` to a temp file next to `path` and rename it into place."""
    temp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(temp_path, "w", encoding="utf-8") as fh:
            json.dump(dict(record), fh, indent=2, ensure_ascii=False)
            fh.write("\n")
        os.replace(temp_path, path)
    except OSError as error:
        with contextlib.suppress(OSError):
            temp_path.unlink()
        raise PersistenceError(f"Failed to write {path}: {error}") from error
