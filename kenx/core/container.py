"""
Resource registry.
Holds every live plugin instance created during autoload under a
namespaced `section:key` resource key.
"""

from __future__ import annotations

from typing import Any, Iterator, NamedTuple


DEFAULT_KEY = "default"
WILDCARD = "*"


class ResourceKey(NamedTuple):
    """Two-part `section:key` identifier of a registered resource."""

    section: str
    key: str = DEFAULT_KEY

    @classmethod
    def parse(cls, value: str) -> "ResourceKey | None":
        """
        Parse a resource reference.

        A bare section (no colon) means the `default` key. Returns None for
        malformed references (missing section or key).
        """
        value = str(value)
        if ":" not in value:
            value = f"{value}:{DEFAULT_KEY}"

        section, key = value.split(":")[:2]
        if not section or not key:
            return None
        return cls(section, key)

    @classmethod
    def of(cls, section: str, key: str | None = None) -> "ResourceKey":
        return cls(section, key or DEFAULT_KEY)

    def __str__(self) -> str:
        return f"{self.section}:{self.key}"


class ResourceRegistry:
    """
    Ordered mapping of resource keys to live plugin instances.

    Populated by the factories during the sequential autoload phase and
    only read afterwards. Re-registering a key overwrites it silently.

    Example:
    ```python
    registry = ResourceRegistry()
    registry.register("database:default", db)

    registry.get("database:default")  # -> db
    list(registry.section("database"))  # -> [("default", db)]
    ```
    """

    def __init__(self) -> None:
        self._resources: dict[str, Any] = {}

    def register(self, key: str | ResourceKey, instance: Any) -> None:
        """Insert or overwrite a resource."""
        self._resources[str(key)] = instance

    def get(self, key: str | ResourceKey) -> Any | None:
        """Get a resource by its full key, None if absent."""
        return self._resources.get(str(key))

    def entries(self) -> list[tuple[str, Any]]:
        """All (key, instance) pairs in registration order."""
        return list(self._resources.items())

    def section(self, name: str) -> Iterator[tuple[str, Any]]:
        """Yield (key, instance) for every resource registered under a section."""
        for attribute, instance in self._resources.items():
            parsed = ResourceKey.parse(attribute)
            if parsed and parsed.section == name:
                yield parsed.key, instance

    def __contains__(self, key: object) -> bool:
        return str(key) in self._resources

    def __len__(self) -> int:
        return len(self._resources)

    def __iter__(self) -> Iterator[str]:
        return iter(self._resources)
