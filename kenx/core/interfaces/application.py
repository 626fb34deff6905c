"""
Application (framework adapter) plugin protocol.
Implementations: FastAPIApplication
"""
from __future__ import annotations

from typing import Any, Callable, Protocol, TypeVar, runtime_checkable

from .server import ServerPlugin


T = TypeVar("T")


@runtime_checkable
class ApplicationPlugin(Protocol[T]):
    """
    Protocol for framework adapters.

    Only `serve()` is used by the core. The configuration methods are passed
    through to project code and return the adapter for chaining.
    """

    core: T
    host: str
    port: int

    def register(self, fn: Any, **options: Any) -> "ApplicationPlugin[T]":
        """Register a middleware/extension on the framework."""
        ...

    def decorate(self, attribute: str, value: Any) -> "ApplicationPlugin[T]":
        """Attach a shared value to the application."""
        ...

    def add_router(self, prefix: str, router: Any) -> "ApplicationPlugin[T]":
        """Mount a router under a path prefix."""
        ...

    def add_handler(self, type: Any, func: Callable[..., Any]) -> "ApplicationPlugin[T]":
        """Register a handler for an error type or status code."""
        ...

    def on_error(self, listener: Callable[..., Any]) -> "ApplicationPlugin[T]":
        """Register a listener for unhandled errors."""
        ...

    async def serve(self, overhead: bool = False) -> ServerPlugin[Any]:
        """Create the HTTP server for this application and start it."""
        ...
