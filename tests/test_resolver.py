"""
Tests for resource reference resolution.
"""

import pytest

from kenx.core.container import ResourceRegistry
from kenx.core.resolver import group_references, resolve, resolve_args


@pytest.fixture
def populated() -> ResourceRegistry:
    registry = ResourceRegistry()
    registry.register("database:default", "D")
    registry.register("http:default", "H")
    registry.register("database:reports", "R")
    registry.register("http:admin", "A")
    registry.register("socket:chat", "S")
    return registry


def test_group_references_preserves_order():
    groups = group_references(["http:admin", "database", "http:*", ":bad", "x:"])

    assert list(groups) == ["http", "database"]
    assert groups["http"] == ["admin", "*"]
    assert groups["database"] == ["default"]


def test_single_string_reference(populated):
    assert resolve(populated, "http:admin") == {"http": "A"}


def test_wildcard_returns_whole_section(populated):
    """`section:*` returns exactly the keys registered under that section."""
    resolved = resolve(populated, "database:*")

    assert resolved == {"database": {"default": "D", "reports": "R"}}
    assert list(resolved["database"]) == ["default", "reports"]


def test_wildcard_on_empty_section(populated):
    assert resolve(populated, ["queue:*"]) == {"queue": {}}


def test_bare_section_equals_default_key(populated):
    assert resolve(populated, "database") == resolve(populated, "database:default")


def test_missing_key_resolves_to_none(populated):
    assert resolve(populated, ["database:missing"]) == {"database": None}


def test_malformed_references_are_dropped(populated):
    assert resolve(populated, [":default", "http:", "http"]) == {"http": "H"}


def test_multiple_keys_union_in_registry_order(populated):
    resolved = resolve(populated, ["database:reports", "database:default", "database:nope"])

    assert resolved == {"database": {"default": "D", "reports": "R"}}
    assert list(resolved["database"]) == ["default", "reports"]


def test_multiple_keys_with_wildcard_select_all(populated):
    resolved = resolve(populated, ["http:admin", "http:*"])

    assert resolved == {"http": {"default": "H", "admin": "A"}}


def test_sections_follow_first_appearance(populated):
    resolved = resolve(populated, ["socket:chat", "database:*", "http"])

    assert list(resolved) == ["socket", "database", "http"]


def test_takeover_arguments_are_positional(populated):
    """["database:*", "http:default"] gives the database mapping then the HTTP server."""
    args = resolve_args(populated, ["database:*", "http:default"])

    assert len(args) == 2
    assert args[0] == {"default": "D", "reports": "R"}
    assert args[1] == "H"


def test_resolution_is_idempotent(populated):
    refs = ["database:*", "http:admin", "socket"]

    assert resolve(populated, refs) == resolve(populated, refs)


def test_non_string_references_are_normalized():
    registry = ResourceRegistry()
    registry.register("42:default", "answer")

    assert resolve(registry, [42]) == {"42": "answer"}


def test_empty_takeover():
    assert resolve_args(ResourceRegistry(), []) == []
