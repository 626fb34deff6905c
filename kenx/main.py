"""
Kenx orchestrator entry point.
"""

import asyncio
from typing import Any, Sequence

import structlog

from kenx.core.config import SetupConfig, Settings, get_settings, load_environment
from kenx.core.container import ResourceRegistry
from kenx.core.dispatcher import Dispatcher
from kenx.core.errors import ConfigurationError, PluginError, fatal
from kenx.core.factories import (
    HTTP,
    connect_resource,
    create_auxiliary_server,
    create_http_server,
    create_resource,
)
from kenx.core.logging import bind_stage, configure_logging
from kenx.core.setup import SetupManager

logger = structlog.get_logger()


class Core:
    """
    Composition root.

    `autoload()` creates every configured database and server, strictly in
    sequence, and registers them. `dispatch()` then runs the project with
    the resources it declared interest in.

    Usage:
        core = Core()
        await core.autoload()
        await core.dispatch()
        await core.wait()
    """

    def __init__(
        self,
        settings: Settings | None = None,
        setup: SetupManager | None = None,
    ):
        self.settings = settings or get_settings()
        self.setup = setup or SetupManager(self.settings)
        self.registry = ResourceRegistry()
        self._autoloaded = False

    async def autoload(self, config: SetupConfig | dict[str, Any] | None = None) -> ResourceRegistry:
        """
        Load the setup and populate the resource registry.

        Databases first, then servers. Any failure terminates the process.
        """
        bind_stage("autoload")

        try:
            setup = self.setup.initialize(config)
        except Exception as e:
            fatal("setup", e)

        for db_config in setup.databases:
            database = await create_resource(self.setup, self.registry, db_config)

            # Establish connection during deployment
            if db_config.autoconnect:
                await connect_resource(database, db_config)

            logger.info(
                f"<{db_config.type} database> {'connected' if db_config.autoconnect else 'mounted'}",
                key=db_config.key or "default",
                target=db_config.target,
            )

        for server_config in setup.servers:
            if server_config.type == HTTP:
                server = await create_http_server(self.setup, self.registry, server_config)
            else:
                server = await create_auxiliary_server(self.setup, self.registry, server_config)

            info = server.get_info()
            if not info:
                fatal("server", PluginError("Server returns no information"), type=server_config.type)

            logger.info(
                f"<{server_config.type.upper()} server> running",
                key=server_config.key or "default",
                port=info.port,
            )

        self._autoloaded = True
        return self.registry

    async def dispatch(self, takeover: Sequence[str] | None = None) -> Any:
        """
        Run the project according to `directory.pattern`.

        Args:
            takeover: Resource references for the singleton entrypoint,
                overriding the module's own `takeover`
        """
        bind_stage("dispatch")
        if not self._autoloaded:
            fatal("setup", ConfigurationError("dispatch() called before autoload()"))

        logger.info("Ready")
        return await Dispatcher(self.setup, self.registry).dispatch(takeover)

    async def wait(self) -> None:
        """Keep the event loop running while servers serve."""
        await asyncio.Event().wait()


async def run(
    config: SetupConfig | dict[str, Any] | None = None,
    takeover: Sequence[str] | None = None,
) -> None:
    """Configure logging, autoload, dispatch and keep serving."""
    # dotenv variables must be visible before settings are read
    load_environment()
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)

    core = Core(settings)
    await core.autoload(config)
    await core.dispatch(takeover)
    await core.wait()
