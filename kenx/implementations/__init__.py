"""
Built-in plugin implementations for the core interfaces.

Imported lazily through `register_plugins` so their third-party libraries
are only needed when a project uses them.
"""

from kenx.implementations.register import BUILTIN_PLUGINS, register_plugins

__all__ = [
    "BUILTIN_PLUGINS",
    "register_plugins",
]
