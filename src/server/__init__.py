"""Browser page server: timer page over HTTP, events and commands over a websocket."""

from .config import ServerConfigurationError, UIServerConfig, default_index_file
from .service import UIServer

__all__ = [
    "ServerConfigurationError",
    "UIServer",
    "UIServerConfig",
    "default_index_file",
]
