"""
Plugin interfaces (protocols).
Servers, applications and databases must implement these to be loadable.
"""

from .server import ActiveServerInfo, ServerPlugin
from .application import ApplicationPlugin
from .database import DatabasePlugin

__all__ = [
    "ActiveServerInfo",
    "ServerPlugin",
    "ApplicationPlugin",
    "DatabasePlugin",
]
