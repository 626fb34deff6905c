"""
Plugin registry mapping plugin identifiers to constructors.
"""
from __future__ import annotations

from typing import Any, Callable
import logging

from kenx.core.errors import PluginLoadError

logger = logging.getLogger(__name__)


class PluginRegistry:
    """
    Registry of loadable plugins.

    Identifiers are the strings used in the setup file (`plugin: "@kenx/http"`).
    A factory is anything callable with the plugin's constructor arguments:
    the class itself or a function importing it lazily.

    Example usage:
    ```python
    plugins = PluginRegistry()

    plugins.register("@kenx/http", HttpServer)
    plugins.register("@acme/queue", create_queue_server)

    HttpServer = plugins.get("@kenx/http")
    server = HttpServer(setup)
    ```
    """

    def __init__(self, name: str = "plugins"):
        self.name = name
        self._factories: dict[str, Callable[..., Any]] = {}

    def register(self, identifier: str, factory: Callable[..., Any]) -> None:
        """
        Register a plugin constructor.

        Args:
            identifier: Unique identifier used in configuration
            factory: Callable that creates the plugin instance
        """
        if identifier in self._factories:
            logger.warning(f"Overwriting existing {self.name} entry: {identifier}")

        self._factories[identifier] = factory
        logger.debug(f"Registered {self.name} entry: {identifier}")

    def unregister(self, identifier: str) -> bool:
        """Unregister a plugin."""
        if identifier in self._factories:
            del self._factories[identifier]
            return True
        return False

    def get(self, identifier: str) -> Callable[..., Any]:
        """
        Get a plugin constructor.

        Raises:
            PluginLoadError: If the identifier is not registered
        """
        if identifier not in self._factories:
            available = ", ".join(self._factories.keys()) or "none"
            raise PluginLoadError(identifier, f"not registered. Available: {available}")

        return self._factories[identifier]

    def list(self) -> list[str]:
        """List all registered identifiers."""
        return list(self._factories.keys())

    def has(self, identifier: str) -> bool:
        """Check if a plugin is registered."""
        return identifier in self._factories

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._factories
