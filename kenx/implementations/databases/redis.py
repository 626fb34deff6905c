"""
Redis database plugin.
"""

from __future__ import annotations

from typing import Any

import redis.asyncio as redis

from kenx.core.config import DatabaseConfig


def build_url(options: dict[str, Any]) -> str:
    """Build a redis:// URL from host, port, password and db options."""
    host = options.get("host", "localhost")
    port = options.get("port", 6379)
    db = options.get("db", 0)
    password = options.get("password")

    auth = f":{password}@" if password else ""
    return f"redis://{auth}{host}:{port}/{db}"


class RedisDatabase:
    """
    Redis plugin.

    Setup file:
        {"type": "redis", "key": "cache", "plugin": "@kenx/redis",
         "uri": "redis://localhost:6379/0", "autoconnect": true}

    Usage:
        client = await cache.connect()
        await client.set("key", "value")

        # Another logical database on the same server
        sessions = cache.get_connection("2")
    """

    def __init__(self, setup: Any, config: DatabaseConfig):
        self.setup = setup
        self.url = config.uri or build_url(config.options)
        self.client_options: dict[str, Any] = {
            "decode_responses": True,
            **(config.extra("client", {}) or {}),
        }
        self.connection: redis.Redis | None = None
        self._databases: dict[int, redis.Redis] = {}

    async def connect(self) -> redis.Redis:
        if self.connection is None:
            client = redis.from_url(self.url, **self.client_options)
            try:
                await client.ping()
            except Exception:
                await client.aclose()
                raise
            self.connection = client

        return self.connection

    def get_connection(self, name: str | None = None) -> redis.Redis:
        """
        Get the client, or a client for another numbered database.

        Raises:
            RuntimeError: If not connected
        """
        if self.connection is None:
            raise RuntimeError("No database connection client found")

        if name is None:
            return self.connection

        index = int(name)
        if index not in self._databases:
            self._databases[index] = redis.from_url(self.url, db=index, **self.client_options)
        return self._databases[index]

    async def disconnect(self) -> None:
        for client in [self.connection, *self._databases.values()]:
            if client is not None:
                await client.aclose()
        self.connection = None
        self._databases.clear()
