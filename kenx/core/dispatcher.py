"""
Dispatcher: hands resolved resources to project code.

Two project shapes, selected by `directory.pattern`:
- singleton: one entrypoint module (`directory.entrypoint`, "main")
- mvc: `models` (required), `views` (optional), `controllers` (required)

Project modules expose a `factory` callable and an optional ordered
`takeover` list of resource references. The factory is called with one
positional argument per takeover section, in takeover order.
"""
from __future__ import annotations

import inspect
from dataclasses import dataclass
from types import ModuleType
from typing import Any, Callable, Sequence

import structlog

from kenx.core.container import ResourceRegistry
from kenx.core.errors import ConfigurationError, fatal
from kenx.core.resolver import resolve
from kenx.core.setup import SetupManager

logger = structlog.get_logger()

MVC = "mvc"

FACTORY_ATTR = "factory"
TAKEOVER_ATTR = "takeover"

MODELS_DEFAULT_TAKEOVER = ("database:*",)
CONTROLLERS_DEFAULT_TAKEOVER = ("http:*",)


@dataclass(frozen=True)
class ConsumerModule:
    """Validated shape of a project module."""

    name: str
    factory: Callable[..., Any] | None
    takeover: tuple[str, ...] | None

    @classmethod
    def from_module(cls, module: ModuleType, name: str) -> "ConsumerModule":
        """
        Validate a loaded module's `factory` and `takeover` exports.

        Raises:
            ConfigurationError: If `factory` is not callable or `takeover`
                is not a string or a sequence of strings
        """
        factory = getattr(module, FACTORY_ATTR, None)
        if factory is not None and not callable(factory):
            raise ConfigurationError(
                f"Invalid <{name}> module. Expected `{FACTORY_ATTR}` to be callable"
            )

        takeover = getattr(module, TAKEOVER_ATTR, None)
        if takeover is not None:
            takeover = _as_takeover(takeover, name)

        return cls(name=name, factory=factory, takeover=takeover)

    def require_factory(self) -> Callable[..., Any]:
        if self.factory is None:
            raise ConfigurationError(
                f"Invalid <{self.name}> module. Expected `{FACTORY_ATTR}` export"
            )
        return self.factory


def _as_takeover(value: Any, name: str) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, Sequence) and all(isinstance(ref, str) for ref in value):
        return tuple(value)
    raise ConfigurationError(
        f"Invalid <{name}> `{TAKEOVER_ATTR}`. Expected a list of resource references"
    )


async def invoke(factory: Callable[..., Any], *args: Any) -> Any:
    """Call a project factory, awaiting it when it is a coroutine function."""
    result = factory(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, dict) and not value)


class Dispatcher:
    """
    Runs project code against the populated resource registry.

    Usage:
        dispatcher = Dispatcher(setup, registry)
        await dispatcher.dispatch()
    """

    def __init__(self, setup: SetupManager, registry: ResourceRegistry):
        self.setup = setup
        self.registry = registry

    def resolve(self, takeover: Sequence[str] | str) -> dict[str, Any]:
        return resolve(self.registry, takeover)

    async def dispatch(self, takeover: Sequence[str] | None = None) -> Any:
        pattern = self.setup.get_config().directory.pattern
        if pattern == MVC:
            return await self.to_mvc()
        return await self.to_singleton(takeover)

    async def to_singleton(self, takeover: Sequence[str] | None = None) -> Any:
        """
        Run the single entrypoint module.

        A module without `factory` is a plain script and has already run
        when imported. Otherwise a takeover list is required, the caller's
        taking precedence over the module's.
        """
        try:
            name = self.setup.get_config().directory.entrypoint
            module = self.setup.import_module(name, required=True)
            entrypoint = ConsumerModule.from_module(module, name)

            if entrypoint.factory is None:
                logger.info("Plain script entrypoint", module=name)
                return None

            refs = takeover if takeover is not None else entrypoint.takeover
            if refs is None:
                raise ConfigurationError(f"No entrypoint <{TAKEOVER_ATTR}> export")

            args = self.resolve(_as_takeover(refs, name)).values()

            logger.info("Takeover ...")
            return await invoke(entrypoint.factory, *args)
        except Exception as e:
            fatal("entrypoint", e)

    async def to_mvc(self) -> Any:
        """
        Build models, optional views, then controllers.

        Controllers receive their takeover resources followed by the models
        and views results.
        """
        try:
            mfactory = ConsumerModule.from_module(
                self.setup.import_module("models", required=True), "models"
            )
            build_models = mfactory.require_factory()
            mdeps = self.resolve(mfactory.takeover or MODELS_DEFAULT_TAKEOVER)
            if all(_is_empty(v) for v in mdeps.values()):
                logger.warning("No takeover dependency available for <models>")

            models = await invoke(build_models, *mdeps.values())

            views = None
            vmodule = self.setup.import_module("views")
            if vmodule is not None:
                vfactory = ConsumerModule.from_module(vmodule, "views")
                vdeps = self.resolve(vfactory.takeover) if vfactory.takeover else {}
                if vdeps and all(_is_empty(v) for v in vdeps.values()):
                    logger.warning("No takeover dependency available for <views>")
                views = await invoke(vfactory.require_factory(), *vdeps.values())

            cfactory = ConsumerModule.from_module(
                self.setup.import_module("controllers", required=True), "controllers"
            )
            controllers = cfactory.require_factory()
            cdeps = self.resolve(cfactory.takeover or CONTROLLERS_DEFAULT_TAKEOVER)

            if all(_is_empty(v) for v in cdeps.values()):
                logger.warning("No resource available for <controllers>")
            if models is None:
                logger.warning("No models available for <controllers>")
            if views is None:
                logger.warning("No views available for <controllers>")

            logger.info("Takeover ...")
            return await invoke(controllers, *cdeps.values(), models, views)
        except Exception as e:
            fatal("mvc", e)
