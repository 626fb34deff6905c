"""
Server and resource factories.

Each factory loads a plugin through the setup manager, constructs it,
performs its listen/serve step and registers the result under
`<section>:<key|default>`. Any failure is fatal: it is logged with a
category label and the process exits. Nothing is registered on failure.
"""
from __future__ import annotations

from typing import Any

from kenx.core.config import DEFAULT_HTTP_PORT, DatabaseConfig, ServerConfig
from kenx.core.container import ResourceKey, ResourceRegistry
from kenx.core.errors import ConfigurationError, PluginError, fatal
from kenx.core.setup import SetupManager

HTTP = "http"
DATABASE = "database"


async def create_http_server(
    setup: SetupManager,
    registry: ResourceRegistry,
    config: ServerConfig,
) -> Any:
    """
    Create an HTTP server, through a framework adapter when one is configured.

    With `application`, the adapter plugin (`application.plugin`, or
    `@<application.type>`) is constructed with `(setup, config)` and its
    `serve()` result is registered. Otherwise the `plugin` server is
    constructed with `(setup)` and `listen(config)` is awaited.
    """
    config.host = config.host or setup.settings.http.host
    config.port = config.port or setup.settings.http.port or DEFAULT_HTTP_PORT

    key = ResourceKey.of(config.type or HTTP, config.key)

    if config.application and config.application.type:
        try:
            App = setup.import_plugin(
                config.application.plugin or f"@{config.application.type}"
            )
            application = App(setup, config)
            server = await application.serve()
        except Exception as e:
            fatal("server", e, kind="HTTP server application", key=str(key))
    else:
        try:
            if not config.plugin:
                raise ConfigurationError(
                    f"Undefined <{config.type or HTTP}> server plugin"
                )

            HttpServer = setup.import_plugin(config.plugin)
            server = HttpServer(setup)
            await server.listen(config)
        except Exception as e:
            fatal("server", e, kind="HTTP server", key=str(key))

    registry.register(key, server)
    return server


async def create_auxiliary_server(
    setup: SetupManager,
    registry: ResourceRegistry,
    config: ServerConfig,
) -> Any:
    """
    Create a non-HTTP server bound to a registered server or to a port.

    The binder is the `server` handle registered under `bindTo` when given,
    else the configured (or environment) port.
    """
    key = ResourceKey.of(config.type, config.key)

    try:
        if not config.plugin:
            raise ConfigurationError(
                f"Undefined <{config.type or 'auxiliary'}> server plugin"
            )

        config.port = config.port or setup.settings.http.port

        AuxServer = setup.import_plugin(config.plugin)
        server = AuxServer(setup, config.options)

        if config.bind_to:
            binder = getattr(registry.get(config.bind_to), "server", None)
        else:
            binder = config.port

        if not binder:
            raise ConfigurationError("Undefined BIND_TO or PORT configuration")

        await server.listen(binder)
    except Exception as e:
        fatal("server", e, kind="Auxiliary server", key=str(key))

    registry.register(key, server)
    return server


async def create_resource(
    setup: SetupManager,
    registry: ResourceRegistry,
    config: DatabaseConfig,
    section: str = DATABASE,
) -> Any:
    """
    Construct a resource plugin with `(setup, config)` and register it.

    Connecting is a separate step (see `connect_resource`).
    """
    key = ResourceKey.of(section, config.key)

    try:
        if not config.plugin:
            raise ConfigurationError(f"Undefined <{config.type}> {section} plugin")

        Resource = setup.import_plugin(config.plugin)
        resource = Resource(setup, config)
        if not resource:
            raise PluginError(f"<{config.type} {section}> is not supported")
    except Exception as e:
        fatal("resource", e, kind=f"{config.type.upper()} resource", key=str(key))

    registry.register(key, resource)
    return resource


async def connect_resource(resource: Any, config: DatabaseConfig) -> Any:
    """Connect a mounted resource, fatal on failure."""
    try:
        return await resource.connect()
    except Exception as e:
        fatal("resource", e, kind=f"{config.type.upper()} resource", target=config.target)
