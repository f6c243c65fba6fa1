"""Static asset lookup for the bundled timer page."""

from __future__ import annotations

import mimetypes
from pathlib import Path, PurePosixPath
from typing import Optional

# Assets the timer page ships with, so lookups do not depend on the host's
# mime database.
_ASSET_TYPES = {
    ".css": "text/css",
    ".html": "text/html",
    ".ico": "image/x-icon",
    ".js": "text/javascript",
    ".json": "application/json",
    ".svg": "image/svg+xml",
    ".wav": "audio/wav",
}
_CHARSET_TYPES = {"application/javascript", "application/json", "image/svg+xml"}


def resolve_static_file(ui_root: Path, request_path: str) -> Optional[Path]:
    """Map a request path onto a file below `ui_root`, or None.

    Hidden entries and anything that resolves outside the root are refused.
    """
    relative = PurePosixPath(request_path.lstrip("/"))
    if not relative.parts or any(part.startswith(".") and part != ".." for part in relative.parts):
        return None

    root = ui_root.resolve()
    candidate = root.joinpath(*relative.parts).resolve()
    if root not in candidate.parents or not candidate.is_file():
        return None
    return candidate


def guess_content_type(path: Path) -> str:
    mime_type = _ASSET_TYPES.get(path.suffix.lower())
    if mime_type is None:
        mime_type, _ = mimetypes.guess_type(path.name)
    if not mime_type:
        return "application/octet-stream"
    if mime_type.startswith("text/") or mime_type in _CHARSET_TYPES:
        return f"{mime_type}; charset=utf-8"
    return mime_type
