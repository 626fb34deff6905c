"""
FastAPI application adapter.
"""

from __future__ import annotations

import inspect
from typing import Any, Callable

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from kenx.core.config import ServerConfig
from kenx.implementations.servers.http import HttpServer


class FastAPIApplication:
    """
    Serve a FastAPI application as a kenx HTTP server.

    Setup file:
        {"type": "http", "application": {"type": "fastapi", "options": {"title": "Shop"}}}

    Usage (project code):
        server.application
            .decorate("db", database)
            .add_router("/users", users_router)
            .on_error(report)
    """

    def __init__(self, setup: Any, config: ServerConfig):
        self.setup = setup
        self.config = config
        options = (config.application.model_extra or {}).get("options", {}) if config.application else {}
        self.core = FastAPI(**options)

    @property
    def host(self) -> str | None:
        return self.config.host

    @property
    def port(self) -> int | None:
        return self.config.port

    def register(self, fn: Any, **options: Any) -> "FastAPIApplication":
        """Add an ASGI middleware class."""
        self.core.add_middleware(fn, **options)
        return self

    def decorate(self, attribute: str, value: Any) -> "FastAPIApplication":
        """Expose a value to request handlers as `request.app.state.<attribute>`."""
        setattr(self.core.state, attribute, value)
        return self

    def add_router(self, prefix: str, router: Any) -> "FastAPIApplication":
        self.core.include_router(router, prefix=prefix)
        return self

    def add_handler(self, type: Any, func: Callable[..., Any]) -> "FastAPIApplication":
        """Handle an exception class or an HTTP status code."""
        self.core.add_exception_handler(type, func)
        return self

    def on_error(self, listener: Callable[..., Any]) -> "FastAPIApplication":
        """
        Call `listener(error, request)` for unhandled errors.

        The client gets a generic 500 response; the message is only
        included in development.
        """

        async def global_exception_handler(request: Request, exc: Exception):
            result = listener(exc, request)
            if inspect.isawaitable(result):
                await result

            return JSONResponse(
                status_code=500,
                content={
                    "error": "internal_server_error",
                    "message": str(exc) if self.setup.settings.is_development else "An error occurred",
                },
            )

        self.core.add_exception_handler(Exception, global_exception_handler)
        return self

    async def serve(self, overhead: bool = False) -> HttpServer:
        """
        Create the HTTP server for this application.

        Args:
            overhead: Return the server without starting it, leaving
                `listen()` to the caller
        """
        server = HttpServer(self.setup, app=self.core, application=self)
        if not overhead:
            await server.listen(self.config)
        return server
