"""
Pytest fixtures for testing.

Provides:
- Test settings isolated from the developer environment
- Resource registry and setup manager fixtures
- A project directory fixture for writing project modules
- Mock implementations of the plugin interfaces
"""

import sys
import textwrap
from pathlib import Path
from typing import Any

import pytest

from kenx.core.config import Settings
from kenx.core.container import ResourceRegistry
from kenx.core.interfaces.server import ActiveServerInfo
from kenx.core.plugins import PluginRegistry
from kenx.core.setup import SetupManager


@pytest.fixture(autouse=True)
def import_path(monkeypatch: pytest.MonkeyPatch) -> None:
    """Undo project roots added to sys.path by the setup manager."""
    monkeypatch.setattr(sys, "path", sys.path[:])


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Settings that ignore HTTP_* variables and .env files."""
    monkeypatch.delenv("HTTP_HOST", raising=False)
    monkeypatch.delenv("HTTP_PORT", raising=False)
    return Settings(_env_file=None, environment="testing")


@pytest.fixture
def registry() -> ResourceRegistry:
    return ResourceRegistry()


@pytest.fixture
def plugins() -> PluginRegistry:
    """Plugin registry pre-populated with the mock plugins below."""
    registry = PluginRegistry()
    registry.register("@mock/http", MockServer)
    registry.register("@mock/socket", MockServer)
    registry.register("@mock/silent", MockSilentServer)
    registry.register("@mock/broken", MockBrokenServer)
    registry.register("@mockapp", MockApplication)
    registry.register("@mock/db", MockDatabase)
    registry.register("@mock/unreachable-db", MockUnreachableDatabase)
    return registry


@pytest.fixture
def setup_manager(settings: Settings, plugins: PluginRegistry) -> SetupManager:
    """Setup manager initialized with an empty setup."""
    setup = SetupManager(settings, plugins=plugins)
    setup.initialize({}, entrypoints=False)
    return setup


# ============ Project Directory ============


class Project:
    """Writes project modules into a temporary project root."""

    def __init__(self, root: Path):
        self.root = root

    def write(self, name: str, source: str) -> Path:
        path = self.root / f"{name}.py"
        path.write_text(textwrap.dedent(source))
        return path

    def write_package(self, name: str, source: str, **modules: str) -> Path:
        package = self.root / name
        package.mkdir(exist_ok=True)
        (package / "__init__.py").write_text(textwrap.dedent(source))
        for module, module_source in modules.items():
            (package / f"{module}.py").write_text(textwrap.dedent(module_source))
        return package

    def setup(
        self,
        settings: Settings,
        plugins: PluginRegistry,
        pattern: str = "-",
    ) -> SetupManager:
        setup = SetupManager(settings, plugins=plugins)
        setup.initialize(
            {"directory": {"root": str(self.root), "pattern": pattern}},
            entrypoints=False,
        )
        return setup


@pytest.fixture
def project(tmp_path: Path) -> Project:
    root = tmp_path / "project"
    root.mkdir()
    return Project(root)


# ============ Mock Implementations ============


class MockServer:
    """Mock server plugin recording what it was asked to listen on."""

    def __init__(self, setup: Any, options: Any = None):
        self.setup = setup
        self.options = options
        self.listened_with: Any = None
        self.server = object()
        self._info: ActiveServerInfo | None = None

    async def listen(self, arg: Any) -> ActiveServerInfo:
        self.listened_with = arg
        port = arg if isinstance(arg, int) else getattr(arg, "port", None)
        self._info = ActiveServerInfo(type="mock", port=port)
        return self._info

    def get_info(self) -> ActiveServerInfo | None:
        return self._info

    async def close(self) -> None:
        self._info = None


class MockSilentServer(MockServer):
    """Listens but never reports any information."""

    def get_info(self) -> None:
        return None


class MockBrokenServer(MockServer):
    """Fails to listen."""

    async def listen(self, arg: Any) -> ActiveServerInfo:
        raise OSError("Address already in use")


class MockApplication:
    """Mock framework adapter."""

    def __init__(self, setup: Any, config: Any):
        self.setup = setup
        self.config = config
        self.served = False

    async def serve(self, overhead: bool = False) -> MockServer:
        self.served = True
        server = MockServer(self.setup)
        server.app = self
        await server.listen(self.config)
        return server


class MockDatabase:
    """Mock database plugin."""

    def __init__(self, setup: Any, config: Any):
        self.setup = setup
        self.config = config
        self.connection: str | None = None

    async def connect(self) -> str:
        self.connection = f"connection:{self.config.key or 'default'}"
        return self.connection

    async def disconnect(self) -> None:
        self.connection = None

    def get_connection(self, name: str | None = None) -> str:
        if self.connection is None:
            raise RuntimeError("No database connection client found")
        return self.connection


class MockUnreachableDatabase(MockDatabase):
    async def connect(self) -> str:
        raise ConnectionRefusedError("Connection refused")
