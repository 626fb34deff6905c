"""
Server plugin protocol.
Implementations: HttpServer, WebSocketServer
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, TypeVar, runtime_checkable


T = TypeVar("T", covariant=True)


@dataclass(frozen=True)
class ActiveServerInfo:
    """What a listening server reports about itself."""
    type: str
    port: int | None = None


@runtime_checkable
class ServerPlugin(Protocol[T]):
    """
    Protocol for server plugins.

    `server` is the underlying server handle (e.g. a `uvicorn.Server`) that
    auxiliary servers bind to through `bindTo`.
    """

    @property
    def server(self) -> T:
        ...

    async def listen(self, arg: Any) -> ActiveServerInfo | None:
        """Start listening. `arg` is a server config, a port or a server handle."""
        ...

    def get_info(self) -> ActiveServerInfo | None:
        """Info about the running server, None when not listening."""
        ...

    async def close(self) -> Any:
        """Stop the server."""
        ...
