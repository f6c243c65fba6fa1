from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import threading
from pathlib import Path
from typing import Any, Callable, Optional
from urllib.parse import urlsplit

import websockets
from websockets.asyncio.server import ServerConnection
from websockets.datastructures import Headers
from websockets.http11 import Request, Response

from contracts.ui_protocol import EVENT_ERROR, EVENT_HELLO

from .config import HEALTHZ_PATH, INDEX_PATH, ROOT_PATH, UIServerConfig
from .events import StickyEventStore, decode_command, make_event
from .static_files import guess_content_type, resolve_static_file

CommandSink = Callable[[dict[str, Any]], None]
HelloPayload = Callable[[], dict[str, Any]]

_HTML = "text/html; charset=utf-8"
_JSON = "application/json"
_TEXT = "text/plain; charset=utf-8"


class UIServer:
    """Serves the timer page and pushes timer events to connected browsers.

    The asyncio loop runs on its own daemon thread. `publish()` and
    `client_count` are safe to use from the runtime thread; inbound commands
    are handed to the command sink from the server thread and must not block.
    """

    def __init__(
        self,
        config: UIServerConfig,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._logger = logger or logging.getLogger("ui_server")
        self._command_sink: Optional[CommandSink] = None
        self._hello_payload: Optional[HelloPayload] = None
        self._index_html = Path(config.index_file).read_bytes()
        self._sticky_events = StickyEventStore()

        self._clients: set[ServerConnection] = set()
        self._clients_lock = threading.Lock()

        self._thread: Optional[threading.Thread] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._shutdown: Optional[asyncio.Event] = None
        self._ready = threading.Event()
        self._startup_error: Optional[Exception] = None

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def port(self) -> int:
        return self._config.port

    @property
    def is_running(self) -> bool:
        return (
            self._thread is not None
            and self._thread.is_alive()
            and self._startup_error is None
        )

    @property
    def client_count(self) -> int:
        """Number of browsers currently able to show the rest overlay."""
        with self._clients_lock:
            return len(self._clients)

    def set_command_sink(self, fn: CommandSink) -> None:
        self._command_sink = fn

    def set_hello_payload(self, fn: HelloPayload) -> None:
        self._hello_payload = fn

    def start(self, timeout_seconds: float = 5.0) -> None:
        if self.is_running:
            self._logger.warning("UI server is already running")
            return

        self._startup_error = None
        self._ready.clear()
        self._thread = threading.Thread(
            target=self._thread_main,
            daemon=True,
            name="ui-server",
        )
        self._thread.start()

        if not self._ready.wait(timeout_seconds):
            raise RuntimeError(f"UI server did not start within {timeout_seconds:.1f}s")
        if self._startup_error is not None:
            raise RuntimeError(f"UI server startup failed: {self._startup_error}")

    def stop(self, timeout_seconds: float = 5.0) -> None:
        thread = self._thread
        if thread is None:
            return

        if self._loop is not None and self._shutdown is not None:
            self._loop.call_soon_threadsafe(self._shutdown.set)

        thread.join(timeout=timeout_seconds)
        if thread.is_alive():
            self._logger.error("UI server thread did not stop within %.1fs", timeout_seconds)

        self._thread = None
        self._loop = None
        self._shutdown = None

    def publish(self, event_type: str, **payload: Any) -> None:
        """Broadcast an event; sticky types are also kept for late joiners."""
        message = make_event(event_type, **payload)
        self._sticky_events.remember(event_type, message)

        loop = self._loop
        if not self.is_running or loop is None:
            return
        try:
            future = asyncio.run_coroutine_threadsafe(self._broadcast(message), loop)
        except RuntimeError:
            # Loop closed between the check and the call.
            return
        future.add_done_callback(self._log_broadcast_failure)

    def _log_broadcast_failure(self, future) -> None:
        try:
            future.result()
        except Exception as error:
            self._logger.debug("Broadcast failed: %s", error)

    def _thread_main(self) -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        self._shutdown = asyncio.Event()

        try:
            loop.run_until_complete(self._serve())
        except Exception as error:  # pragma: no cover - exercised manually
            self._startup_error = error
            self._logger.error("UI server failed: %s", error, exc_info=True)
            self._ready.set()
        finally:
            pending = asyncio.all_tasks(loop)
            for task in pending:
                task.cancel()
            with contextlib.suppress(Exception):
                loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
            loop.close()

    async def _serve(self) -> None:
        async with websockets.serve(
            self._on_connection,
            host=self._config.host,
            port=self._config.port,
            process_request=self._route_http,
            logger=self._logger,
        ):
            self._logger.info(
                "UI server listening on http://%s:%d (websocket: %s)",
                self._config.host,
                self._config.port,
                self._config.websocket_path,
            )
            self._ready.set()
            await self._shutdown.wait()
            await self._disconnect_all()

    async def _on_connection(self, websocket: ServerConnection) -> None:
        path = urlsplit(websocket.request.path).path if websocket.request else ""
        if path != self._config.websocket_path:
            await websocket.close(code=1008, reason="Invalid websocket path")
            return

        with self._clients_lock:
            self._clients.add(websocket)
        self._logger.info(
            "Client connected: %s (%d connected)",
            websocket.remote_address,
            self.client_count,
        )
        try:
            await websocket.send(make_event(EVENT_HELLO, **self._hello()))
            for message in self._sticky_events.snapshot():
                await websocket.send(message)

            async for raw in websocket:
                await self._receive(websocket, raw)
        except websockets.exceptions.ConnectionClosed:
            pass
        finally:
            with self._clients_lock:
                self._clients.discard(websocket)
            self._logger.info(
                "Client disconnected: %s (%d connected)",
                websocket.remote_address,
                self.client_count,
            )

    def _hello(self) -> dict[str, Any]:
        if self._hello_payload is None:
            return {}
        try:
            return self._hello_payload()
        except Exception as error:
            self._logger.warning("Failed to build hello payload: %s", error)
            return {}

    async def _receive(self, websocket: ServerConnection, raw: str | bytes) -> None:
        command = decode_command(raw)
        if command is None:
            self._logger.warning("Ignoring malformed UI message: %r", raw)
            await websocket.send(
                make_event(
                    EVENT_ERROR,
                    message='Expected a JSON object with a "command" string.',
                )
            )
            return

        self._logger.debug("UI command received: %s", command["command"])
        if self._command_sink is not None:
            self._command_sink(command)

    async def _route_http(
        self,
        connection: ServerConnection,
        request: Request,
    ) -> Response | None:
        del connection
        path = urlsplit(request.path).path

        if path == self._config.websocket_path:
            return None
        if path in (ROOT_PATH, INDEX_PATH):
            return _response(200, "OK", self._index_html, _HTML)
        if path == HEALTHZ_PATH:
            body = json.dumps({"status": "ok", "clients": self.client_count})
            return _response(200, "OK", body.encode("utf-8"), _JSON)

        asset = resolve_static_file(self._config.ui_root, path)
        if asset is not None:
            return _response(200, "OK", asset.read_bytes(), guess_content_type(asset))
        return _response(404, "Not Found", b"not found\n", _TEXT)

    async def _disconnect_all(self) -> None:
        with self._clients_lock:
            clients = tuple(self._clients)
            self._clients.clear()
        await asyncio.gather(
            *(client.close(code=1001, reason="Server shutting down") for client in clients),
            return_exceptions=True,
        )

    async def _broadcast(self, message: str) -> None:
        with self._clients_lock:
            clients = tuple(self._clients)
        if not clients:
            return

        results = await asyncio.gather(
            *(client.send(message) for client in clients),
            return_exceptions=True,
        )
        for client, result in zip(clients, results):
            if isinstance(result, Exception):
                self._logger.warning("Dropping client after failed send: %s", result)
                with self._clients_lock:
                    self._clients.discard(client)


def _response(status_code: int, reason: str, body: bytes, content_type: str) -> Response:
    headers = Headers()
    headers["Content-Type"] = content_type
    headers["Content-Length"] = str(len(body))
    headers["Cache-Control"] = "no-store"
    return Response(status_code, reason, headers, body)
