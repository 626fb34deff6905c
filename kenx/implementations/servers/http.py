"""
Default HTTP server plugin backed by uvicorn.
"""

from __future__ import annotations

import asyncio
from typing import Any

import uvicorn
from starlette.applications import Starlette
from starlette.types import ASGIApp

from kenx.core.config import ServerConfig
from kenx.core.interfaces.server import ActiveServerInfo

STARTUP_POLL_INTERVAL = 0.01


async def _serve(server: uvicorn.Server, host: str | None, port: int | None) -> None:
    # uvicorn calls sys.exit() when it cannot bind
    try:
        await server.serve()
    except SystemExit as e:
        raise OSError(f"HTTP server failed to start on {host}:{port} (exit status {e.code})") from e


def bound_port(server: uvicorn.Server) -> int | None:
    """Port the uvicorn server actually listens on (resolves port 0)."""
    for listener in getattr(server, "servers", None) or []:
        for sock in listener.sockets:
            return sock.getsockname()[1]
    return None


class HttpServer:
    """
    HTTP server plugin.

    Serves an ASGI application with uvicorn in a background task of the
    running event loop. Without an application a bare Starlette app is
    served, to which project code can add routes.

    Usage:
        server = HttpServer(setup)
        info = await server.listen(config)  # ServerConfig or a port
        server.app.add_route("/", homepage)
        ...
        await server.close()
    """

    def __init__(
        self,
        setup: Any,
        app: ASGIApp | None = None,
        application: Any = None,
    ):
        """
        Initialize HTTP server plugin.

        Args:
            setup: Setup manager handle
            app: ASGI application to serve (defaults to an empty Starlette app)
            application: Framework adapter that created this server, if any
        """
        self.setup = setup
        self.app = app if app is not None else Starlette()
        self.application = application
        self._server: uvicorn.Server | None = None
        self._task: asyncio.Task | None = None
        self._info: ActiveServerInfo | None = None

    @property
    def server(self) -> uvicorn.Server | None:
        return self._server

    async def listen(self, arg: ServerConfig | int) -> ActiveServerInfo | None:
        if isinstance(arg, int):
            host, port, options = self.setup.settings.http.host, arg, {}
        else:
            host, port, options = arg.host, arg.port, arg.options

        config = uvicorn.Config(
            self.app,
            host=host,
            port=port,
            log_config=None,
            **options,
        )
        server = uvicorn.Server(config)
        task = asyncio.create_task(_serve(server, host, port), name=f"kenx-http:{host}:{port}")

        while not server.started:
            if task.done():
                # Re-raise startup errors, else report the silent exit
                task.result()
                raise RuntimeError(f"HTTP server failed to start on {host}:{port}")
            await asyncio.sleep(STARTUP_POLL_INTERVAL)

        self._server = server
        self._task = task
        self._info = ActiveServerInfo(type="http", port=bound_port(server) or port)
        return self._info

    def get_info(self) -> ActiveServerInfo | None:
        return self._info

    async def close(self) -> None:
        if self._server is None:
            return

        self._server.should_exit = True
        if self._task is not None:
            await self._task

        self._server = None
        self._task = None
        self._info = None
