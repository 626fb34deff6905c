"""
Plugin and module loading utilities.
"""
from __future__ import annotations

from types import ModuleType
from typing import Any, Callable
from pathlib import Path
from importlib.metadata import entry_points
import importlib
import importlib.util
import logging
import sys

from kenx.core.errors import PluginLoadError
from .registry import PluginRegistry

logger = logging.getLogger(__name__)

ENTRYPOINT_GROUP = "kenx.plugins"


def import_object(path: str) -> Any:
    """
    Import an object from a "package.module:Attribute" path.

    Raises:
        PluginLoadError: If the module or attribute cannot be loaded
    """
    module_name, _, attribute = path.partition(":")
    if not module_name or not attribute:
        raise PluginLoadError(path, "expected 'package.module:Attribute'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise PluginLoadError(path, str(e)) from e

    obj: Any = module
    for part in attribute.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise PluginLoadError(path, f"'{module_name}' has no attribute '{attribute}'") from e
    return obj


def lazy_import(path: str) -> Callable[..., Any]:
    """Factory importing its target only when the plugin is constructed."""

    def factory(*args: Any, **kwargs: Any) -> Any:
        return import_object(path)(*args, **kwargs)

    factory.__qualname__ = f"lazy_import({path!r})"
    return factory


def load_from_config(registry: PluginRegistry, plugins: dict[str, str]) -> list[str]:
    """
    Register plugins declared in the setup file.

    Args:
        registry: Plugin registry to load into
        plugins: Identifier -> "package.module:Attribute"

    Returns:
        List of registered identifiers
    """
    loaded = []
    for identifier, path in plugins.items():
        registry.register(identifier, lazy_import(path))
        loaded.append(identifier)
    return loaded


def load_from_entrypoints(
    registry: PluginRegistry,
    group: str = ENTRYPOINT_GROUP,
) -> list[str]:
    """
    Load plugins from installed package entry points.

    This allows plugins to be installed as separate packages.

    Example pyproject.toml in plugin package:
    ```toml
    [project.entry-points."kenx.plugins"]
    "@acme/mongodb" = "acme_kenx.mongodb:MongoDatabase"
    ```

    Args:
        registry: Plugin registry to load into
        group: Entry point group name
    """
    loaded = []

    for ep in entry_points(group=group):
        registry.register(ep.name, lazy_import(ep.value))
        loaded.append(ep.name)
        logger.info(f"Registered plugin from entrypoint: {ep.name}")

    return loaded


def load_module(directory: Path | str, name: str) -> ModuleType | None:
    """
    Load a project module by file location.

    Looks for `<directory>/<name>.py` then `<directory>/<name>/__init__.py`.
    Packages keep their search path so relative imports work.

    Returns:
        The executed module, or None if no such file exists
    """
    directory = Path(directory)
    module_name = f"kenx_project.{name}"

    package_init = directory / name / "__init__.py"
    file_path = directory / f"{name}.py"

    if file_path.is_file():
        spec = importlib.util.spec_from_file_location(module_name, file_path)
    elif package_init.is_file():
        spec = importlib.util.spec_from_file_location(
            module_name,
            package_init,
            submodule_search_locations=[str(package_init.parent)],
        )
    else:
        return None

    if spec is None or spec.loader is None:
        return None

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise

    logger.debug(f"Loaded project module: {spec.origin}")
    return module
