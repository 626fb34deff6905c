"""
Setup manager: the orchestrator handle handed to every plugin.

Holds the setup configuration and the plugin registry, resolves plugin
identifiers to constructors and loads project modules from the project
directory.
"""
from __future__ import annotations

import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Callable

import structlog

from kenx.core.config import Settings, SetupConfig, get_settings, load_setup
from kenx.core.errors import ConfigurationError, PluginLoadError
from kenx.core.plugins import (
    PluginRegistry,
    import_object,
    load_from_config,
    load_from_entrypoints,
    load_module,
)


class SetupManager:
    """
    Configuration and loading facade shared with plugins.

    Usage:
        setup = SetupManager()
        setup.initialize({"servers": [...], "directory": {"root": "./app"}})

        HttpServer = setup.import_plugin("@kenx/http")
        models = setup.import_module("models", required=True)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        plugins: PluginRegistry | None = None,
    ):
        self.settings = settings or get_settings()
        self.plugins = plugins or PluginRegistry()
        self.context = structlog.get_logger("kenx")
        self._config: SetupConfig | None = None
        self._root: Path | None = None

    @property
    def initialized(self) -> bool:
        return self._config is not None

    def initialize(
        self,
        config: SetupConfig | dict[str, Any] | None = None,
        *,
        entrypoints: bool = True,
    ) -> SetupConfig:
        """
        Load the setup configuration and populate the plugin registry.

        Plugins are registered in order: built-ins, installed entry points,
        then the setup file's `plugins` mapping (later ones win).

        Args:
            config: Setup to use instead of reading `settings.setup_file`
            entrypoints: Also register plugins advertised by installed packages

        Raises:
            ConfigurationError: If the setup file is missing or invalid
        """
        from kenx.implementations.register import register_plugins

        if config is None:
            config = load_setup(Path(self.settings.setup_file))
        elif isinstance(config, dict):
            config = SetupConfig.model_validate(config)

        register_plugins(self.plugins)
        if entrypoints:
            load_from_entrypoints(self.plugins)
        load_from_config(self.plugins, config.plugins)

        self._config = config
        self._root = config.directory.resolved_root()

        # Project modules import their sibling files by plain name
        if str(self._root) not in sys.path:
            sys.path.insert(0, str(self._root))
        return config

    def get_config(self) -> SetupConfig:
        if self._config is None:
            raise ConfigurationError("Setup is not initialized")
        return self._config

    @property
    def root(self) -> Path:
        """Absolute project root directory."""
        if self._root is None:
            raise ConfigurationError("Setup is not initialized")
        return self._root

    def import_plugin(self, identifier: str | None) -> Callable[..., Any]:
        """
        Resolve a plugin identifier to its constructor.

        Registered identifiers win; otherwise "package.module:Attribute"
        paths are imported directly.

        Raises:
            PluginLoadError: If the identifier cannot be resolved
        """
        if not identifier:
            raise PluginLoadError(str(identifier), "empty plugin identifier")

        if identifier in self.plugins:
            return self.plugins.get(identifier)

        if ":" in identifier and not identifier.startswith("@"):
            constructor = import_object(identifier)
            if not callable(constructor):
                raise PluginLoadError(identifier, "not callable")
            return constructor

        # Raises with the list of available identifiers
        return self.plugins.get(identifier)

    def import_module(self, name: str, required: bool = False) -> ModuleType | None:
        """
        Load a project module from the project root.

        Raises:
            ConfigurationError: If `required` and the module does not exist
        """
        module = load_module(self.root, name)
        if module is None and required:
            raise ConfigurationError(f"No <{name}> module found in {self.root}")
        return module
