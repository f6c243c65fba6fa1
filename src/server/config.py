"""Validated settings for the timer page server."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

from app_config_schema import UIServerSettings


class ServerConfigurationError(Exception):
    """Raised when UI server configuration is invalid."""


WEBSOCKET_PATH = "/ws"
ROOT_PATH = "/"
INDEX_PATH = "/index.html"
HEALTHZ_PATH = "/healthz"


def default_index_file() -> Path:
    """Bundled page, next to `src/` in a checkout or in the frozen bundle."""
    bundle_root = getattr(sys, "_MEIPASS", None)
    base_dir = Path(bundle_root) if bundle_root else Path(__file__).resolve().parents[2]
    return base_dir / "web_ui" / "index.html"


@dataclass(frozen=True)
class UIServerConfig:
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    index_file: str = ""

    def __post_init__(self) -> None:
        if not self.host.strip():
            raise ServerConfigurationError("ui_server.host cannot be empty")
        if not 1 <= self.port <= 65535:
            raise ServerConfigurationError(
                f"ui_server.port must be in [1, 65535], got: {self.port}"
            )
        # A disabled server never reads the page.
        if self.enabled:
            _require_file(self.index_file)

    @property
    def websocket_path(self) -> str:
        return WEBSOCKET_PATH

    @property
    def ui_root(self) -> Path:
        """Directory whose files are served as page assets."""
        return Path(self.index_file).resolve().parent

    @classmethod
    def from_settings(cls, settings: UIServerSettings) -> "UIServerConfig":
        index_file = (settings.index_file or "").strip() or str(default_index_file())
        return cls(
            enabled=settings.enabled,
            host=settings.host,
            port=settings.port,
            index_file=index_file,
        )


def _require_file(index_file: str) -> None:
    if not index_file:
        raise ServerConfigurationError("ui_server.index_file cannot be empty")
    path = Path(index_file)
    if not path.is_file():
        reason = "is not a file" if path.exists() else "not found"
        raise ServerConfigurationError(f"UI index file {reason}: {path}")
