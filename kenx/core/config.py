"""
Configuration using Pydantic Settings and the declarative setup file.

Two layers:
- `Settings`: process environment (and dotenv files) read at startup
- `SetupConfig`: the project setup file describing servers, databases,
  plugins and the project directory
"""

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from kenx.core.errors import ConfigurationError


DEFAULT_HTTP_PORT = 8000


class HTTPSettings(BaseSettings):
    """Default bind address for HTTP servers."""

    model_config = SettingsConfigDict(env_prefix="HTTP_")

    host: str = Field(default="0.0.0.0")
    port: int | None = Field(default=None, description="Fallback port for servers")


class Settings(BaseSettings):
    """Main runtime settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = Field(default="production")

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="text", description="json or text")

    setup_file: str = Field(
        default="kenx.json",
        validation_alias=AliasChoices("KENX_SETUP", "setup_file"),
    )

    http: HTTPSettings = Field(default_factory=HTTPSettings)

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        allowed = {"development", "staging", "production", "testing"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v not in {"json", "text"}:
            raise ValueError("log_format must be 'json' or 'text'")
        return v

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_environment(environment: str | None = None) -> Path:
    """
    Load dotenv variables into the process environment.

    Development loads `.env.dev`, every other environment the default `.env`.
    Existing variables are never overridden.

    Returns:
        Path of the dotenv file that was looked up
    """
    environment = environment or os.environ.get("ENVIRONMENT", "production")
    filename = ".env.dev" if environment == "development" else ".env"
    path = Path.cwd() / filename
    load_dotenv(path)
    return path


# ============================================================
# SETUP FILE
# ============================================================


class ApplicationConfig(BaseModel):
    """Framework adapter attached to an HTTP server."""

    model_config = ConfigDict(extra="allow")

    type: str
    plugin: str | None = None


class ResourceConfig(BaseModel):
    """Common shape of every configured resource."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str
    key: str | None = None
    plugin: str | None = None

    def extra(self, name: str, default: Any = None) -> Any:
        """Get a plugin-specific setting passed through from the setup file."""
        return (self.model_extra or {}).get(name, default)


class ServerConfig(ResourceConfig):
    """HTTP or auxiliary server configuration."""

    host: str | None = Field(default=None, alias="HOST")
    port: int | None = Field(default=None, alias="PORT")
    application: ApplicationConfig | None = None
    bind_to: str | None = Field(default=None, alias="bindTo")
    options: dict[str, Any] = Field(default_factory=dict)


class DatabaseConfig(ResourceConfig):
    """Database (or any connectable resource) configuration."""

    uri: str | None = None
    options: dict[str, Any] = Field(default_factory=dict)
    autoconnect: bool = False

    @property
    def target(self) -> str | None:
        """Human readable connection target for logs."""
        return self.uri or self.options.get("host")


class DirectoryConfig(BaseModel):
    """Project directory structure."""

    root: str = "."
    pattern: str = "-"
    entrypoint: str = "main"

    def resolved_root(self, cwd: Path | None = None) -> Path:
        root = Path(self.root).expanduser()
        if not root.is_absolute():
            root = (cwd or Path.cwd()) / root
        return root.resolve()


class SetupConfig(BaseModel):
    """Project setup: what to create and how the project is shaped."""

    servers: list[ServerConfig] = Field(default_factory=list)
    databases: list[DatabaseConfig] = Field(default_factory=list)
    directory: DirectoryConfig = Field(default_factory=DirectoryConfig)
    plugins: dict[str, str] = Field(
        default_factory=dict,
        description="Plugin identifier -> 'package.module:Attribute'",
    )


def load_setup(path: Path | str) -> SetupConfig:
    """
    Load and validate a JSON setup file.

    Raises:
        ConfigurationError: If the file is missing or invalid
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError(f"Setup file not found: {path}")

    try:
        return SetupConfig.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except (json.JSONDecodeError, ValidationError) as e:
        raise ConfigurationError(f"Invalid setup file {path}: {e}") from e
