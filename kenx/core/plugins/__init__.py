"""
Plugin system.
Maps plugin identifiers to constructors and loads them at startup.
"""

from .registry import PluginRegistry
from .loader import (
    import_object,
    lazy_import,
    load_from_config,
    load_from_entrypoints,
    load_module,
)

__all__ = [
    "PluginRegistry",
    "import_object",
    "lazy_import",
    "load_from_config",
    "load_from_entrypoints",
    "load_module",
]
