"""
Database/resource plugin protocol.
Implementations: SQLAlchemyDatabase, RedisDatabase
"""
from __future__ import annotations

from typing import Protocol, TypeVar, runtime_checkable


T = TypeVar("T")


@runtime_checkable
class DatabasePlugin(Protocol[T]):
    """
    Protocol for connectable resources.

    Plugins are constructed "mounted" and only connect when `connect()` is
    called, either during autoload (`autoconnect`) or later by project code.
    """

    async def connect(self) -> T:
        """Open the connection and return it."""
        ...

    async def disconnect(self) -> None:
        """Close the connection."""
        ...

    def get_connection(self, name: str | None = None) -> T:
        """Get the open connection, optionally for a named database."""
        ...
