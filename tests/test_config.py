"""
Tests for settings and setup file parsing.
"""

import json
import os

import pytest
from pydantic import ValidationError

from kenx.core.config import (
    DatabaseConfig,
    ServerConfig,
    Settings,
    SetupConfig,
    load_environment,
    load_setup,
)
from kenx.core.errors import ConfigurationError


def test_server_config_accepts_setup_file_names():
    config = ServerConfig.model_validate(
        {"type": "socket", "key": "chat", "plugin": "@kenx/websocket", "PORT": 9000, "bindTo": "http:default"}
    )

    assert config.port == 9000
    assert config.bind_to == "http:default"
    assert config.host is None


def test_server_config_accepts_field_names():
    config = ServerConfig(type="http", host="127.0.0.1", port=8080)

    assert config.host == "127.0.0.1"
    assert config.port == 8080


def test_extra_settings_pass_through():
    config = DatabaseConfig.model_validate(
        {"type": "postgres", "plugin": "@kenx/sqlalchemy", "uri": "sqlite://", "engine": {"echo": True}}
    )

    assert config.extra("engine") == {"echo": True}
    assert config.extra("missing", "fallback") == "fallback"


def test_database_target():
    assert DatabaseConfig(type="redis", uri="redis://cache").target == "redis://cache"
    assert DatabaseConfig(type="redis", options={"host": "cache"}).target == "cache"
    assert DatabaseConfig(type="redis").target is None


def test_setup_defaults():
    setup = SetupConfig()

    assert setup.servers == []
    assert setup.databases == []
    assert setup.directory.pattern == "-"
    assert setup.directory.entrypoint == "main"


def test_directory_root_resolution(tmp_path):
    setup = SetupConfig.model_validate({"directory": {"root": "app"}})

    assert setup.directory.resolved_root(tmp_path) == (tmp_path / "app").resolve()
    assert SetupConfig.model_validate(
        {"directory": {"root": str(tmp_path)}}
    ).directory.resolved_root() == tmp_path.resolve()


def test_load_setup(tmp_path):
    path = tmp_path / "kenx.json"
    path.write_text(json.dumps({
        "servers": [
            {"type": "http", "plugin": "@kenx/http", "PORT": 8080},
            {"type": "socket", "plugin": "@kenx/websocket", "bindTo": "http:default"},
        ],
        "databases": [
            {"type": "sqlite", "plugin": "@kenx/sqlalchemy", "uri": "sqlite+aiosqlite://", "autoconnect": True},
        ],
        "directory": {"root": "./src", "pattern": "mvc"},
        "plugins": {"@acme/queue": "acme.queue:QueueServer"},
    }))

    setup = load_setup(path)

    assert [s.type for s in setup.servers] == ["http", "socket"]
    assert setup.servers[0].port == 8080
    assert setup.servers[1].bind_to == "http:default"
    assert setup.databases[0].autoconnect is True
    assert setup.directory.pattern == "mvc"
    assert setup.plugins == {"@acme/queue": "acme.queue:QueueServer"}


def test_load_setup_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        load_setup(tmp_path / "kenx.json")


def test_load_setup_invalid_json(tmp_path):
    path = tmp_path / "kenx.json"
    path.write_text("{not json")

    with pytest.raises(ConfigurationError, match="Invalid setup file"):
        load_setup(path)


def test_load_setup_invalid_schema(tmp_path):
    path = tmp_path / "kenx.json"
    path.write_text(json.dumps({"servers": [{"plugin": "@kenx/http"}]}))

    with pytest.raises(ConfigurationError):
        load_setup(path)


def test_settings_validate_environment():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, environment="moon")


def test_settings_validate_log_format():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_format="xml")


def test_settings_http_from_environment(monkeypatch):
    monkeypatch.setenv("HTTP_HOST", "127.0.0.1")
    monkeypatch.setenv("HTTP_PORT", "9001")

    settings = Settings(_env_file=None)

    assert settings.http.host == "127.0.0.1"
    assert settings.http.port == 9001


def test_settings_setup_file_from_environment(monkeypatch):
    monkeypatch.setenv("KENX_SETUP", "conf/app.json")

    assert Settings(_env_file=None).setup_file == "conf/app.json"


@pytest.mark.parametrize(
    "environment,filename",
    [("development", ".env.dev"), ("production", ".env")],
)
def test_load_environment_picks_file(tmp_path, monkeypatch, environment, filename):
    monkeypatch.chdir(tmp_path)
    (tmp_path / filename).write_text("KENX_TEST_LOADED=yes\n")
    os.environ.pop("KENX_TEST_LOADED", None)

    try:
        path = load_environment(environment)

        assert path.name == filename
        assert os.environ["KENX_TEST_LOADED"] == "yes"
    finally:
        os.environ.pop("KENX_TEST_LOADED", None)


def test_load_environment_does_not_override(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("KENX_TEST_KEEP=file\n")
    monkeypatch.setenv("KENX_TEST_KEEP", "process")

    load_environment("production")

    assert os.environ["KENX_TEST_KEEP"] == "process"
