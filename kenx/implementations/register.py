"""
Register all built-in plugin implementations with a plugin registry.
"""

from kenx.core.plugins.loader import lazy_import
from kenx.core.plugins.registry import PluginRegistry


BUILTIN_PLUGINS: dict[str, str] = {
    # ============ Servers ============
    "@kenx/http": "kenx.implementations.servers.http:HttpServer",
    "@kenx/websocket": "kenx.implementations.servers.websocket:WebSocketServer",
    # ============ Applications ============
    "@fastapi": "kenx.implementations.applications.fastapi:FastAPIApplication",
    # ============ Databases ============
    "@kenx/sqlalchemy": "kenx.implementations.databases.sqlalchemy:SQLAlchemyDatabase",
    "@kenx/redis": "kenx.implementations.databases.redis:RedisDatabase",
}


def register_plugins(registry: PluginRegistry) -> None:
    """Register all built-in plugins."""
    for identifier, path in BUILTIN_PLUGINS.items():
        registry.register(identifier, lazy_import(path))
