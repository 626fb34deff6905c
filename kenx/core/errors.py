"""
Error taxonomy for the bootstrap pipeline.

Configuration and plugin errors are fatal: they are logged with a category
label at the stage boundary and the process exits with status 1.
"""
from __future__ import annotations

from typing import NoReturn

import structlog

logger = structlog.get_logger()


class KenxError(Exception):
    """Base class for all kenx errors."""


class ConfigurationError(KenxError):
    """Invalid or incomplete setup (undefined plugin, bind target, module...)."""


class PluginLoadError(KenxError):
    """A plugin identifier could not be resolved to a constructor."""

    def __init__(self, identifier: str, reason: str = ""):
        self.identifier = identifier
        message = f"Unable to load plugin '{identifier}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class PluginError(KenxError):
    """A plugin broke its contract (e.g. a server returned no information)."""


def fatal(category: str, error: BaseException | str, **fields) -> NoReturn:
    """
    Log a fatal bootstrap error and terminate the process.

    Args:
        category: Short label of the failing stage ("server", "resource", ...)
        error: Exception or message describing the failure
        **fields: Extra structured fields for the log event
    """
    if isinstance(error, BaseException):
        logger.error(
            str(error) or type(error).__name__,
            category=category,
            error_type=type(error).__name__,
            exc_info=error,
            **fields,
        )
    else:
        logger.error(error, category=category, **fields)

    raise SystemExit(1)
