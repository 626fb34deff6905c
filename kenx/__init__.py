"""
Kenx - startup-time composition layer for modular server applications.

Loads a declarative setup of servers, databases and plugins, registers the
live resources under namespaced keys and hands them to project code.
"""

from kenx.core.container import ResourceKey, ResourceRegistry
from kenx.core.resolver import resolve, resolve_args
from kenx.main import Core, run

__version__ = "0.1.0"

__all__ = [
    "Core",
    "ResourceKey",
    "ResourceRegistry",
    "resolve",
    "resolve_args",
    "run",
    "__version__",
]
