"""
WebSocket auxiliary server plugin.

Either mounts a WebSocket route on a running HTTP server (`bindTo`) or
serves its own Starlette app on a port.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable

from starlette.applications import Starlette
from starlette.routing import WebSocketRoute
from starlette.websockets import WebSocket

from kenx.core.interfaces.server import ActiveServerInfo
from kenx.implementations.servers.http import HttpServer, bound_port

logger = logging.getLogger(__name__)

MessageHandler = Callable[[WebSocket, str], Awaitable[Any] | Any]


class WebSocketServer:
    """
    WebSocket server plugin.

    Options:
        path: Route of the WebSocket endpoint (default "/ws")

    Usage:
        @sockets.on_message
        async def echo(websocket, message):
            await websocket.send_text(message)

        await sockets.broadcast("hello everyone")
    """

    def __init__(self, setup: Any, options: dict[str, Any] | None = None):
        options = options or {}
        self.setup = setup
        self.path: str = options.get("path", "/ws")
        self.clients: set[WebSocket] = set()
        self._handlers: list[MessageHandler] = []
        self._own: HttpServer | None = None
        self._server: Any = None
        self._info: ActiveServerInfo | None = None

    @property
    def server(self) -> Any:
        return self._server

    def on_message(self, handler: MessageHandler) -> MessageHandler:
        """Register a handler called with (websocket, message) for every text message."""
        self._handlers.append(handler)
        return handler

    async def endpoint(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.clients.add(websocket)
        try:
            async for message in websocket.iter_text():
                for handler in self._handlers:
                    result = handler(websocket, message)
                    if inspect.isawaitable(result):
                        await result
        finally:
            self.clients.discard(websocket)

    async def broadcast(self, message: str) -> int:
        """Send a text message to every connected client. Returns count sent."""
        sent = 0
        for client in list(self.clients):
            try:
                await client.send_text(message)
                sent += 1
            except RuntimeError as e:
                logger.warning(f"Dropping websocket client: {e}")
                self.clients.discard(client)
        return sent

    async def listen(self, arg: Any) -> ActiveServerInfo | None:
        """
        Start serving.

        Args:
            arg: A port number, or the `server` handle of a registered
                HTTP server to attach to
        """
        route = WebSocketRoute(self.path, self.endpoint)

        if isinstance(arg, int):
            self._own = HttpServer(self.setup, app=Starlette(routes=[route]))
            info = await self._own.listen(arg)
            self._server = self._own.server
            port = info.port if info else arg
        else:
            app = arg.config.app
            app.router.routes.append(route)
            self._server = arg
            port = bound_port(arg) or arg.config.port

        self._info = ActiveServerInfo(type="websocket", port=port)
        return self._info

    def get_info(self) -> ActiveServerInfo | None:
        return self._info

    async def close(self) -> None:
        for client in list(self.clients):
            await client.close()
        self.clients.clear()

        if self._own is not None:
            await self._own.close()
            self._own = None

        self._server = None
        self._info = None
