"""
Resource resolver.

Turns resource references (takeover lists) into the registered instances a
consumer asked for. Pure with respect to the registry: nothing is created
or mutated here.

Reference forms:
- "database"          -> the `database:default` instance
- "database:reports"  -> the `database:reports` instance
- "database:*"        -> {key: instance} for every database
- ["http:admin", "http:public"] -> {key: instance} for the named keys
"""

from __future__ import annotations

from typing import Any, Iterable

from kenx.core.container import WILDCARD, ResourceKey, ResourceRegistry


References = str | Iterable[str]


def group_references(refs: References) -> dict[str, list[str]]:
    """
    Group references by section, keeping requested keys in input order.

    Malformed references are dropped silently.
    """
    if isinstance(refs, str):
        refs = [refs]

    groups: dict[str, list[str]] = {}
    for ref in refs:
        parsed = ResourceKey.parse(ref)
        if parsed is None:
            continue
        groups.setdefault(parsed.section, []).append(parsed.key)
    return groups


def _resolve_section(registry: ResourceRegistry, section: str, keys: list[str]) -> Any:
    if not keys:
        return None

    if len(keys) == 1:
        key = keys[0]
        if key == WILDCARD:
            return dict(registry.section(section))
        return registry.get(ResourceKey(section, key))

    # Several keys: union of the named entries, "*" anywhere selects all
    wanted = set(keys)
    return {
        key: instance
        for key, instance in registry.section(section)
        if WILDCARD in wanted or key in wanted
    }


def resolve(registry: ResourceRegistry, refs: References) -> dict[str, Any]:
    """
    Resolve references against the registry.

    Returns:
        Mapping of section -> resolved value, in the order sections first
        appear in `refs`. A value is a single instance, a {key: instance}
        mapping, or None when nothing is registered under the key.
    """
    return {
        section: _resolve_section(registry, section, keys)
        for section, keys in group_references(refs).items()
    }


def resolve_args(registry: ResourceRegistry, refs: References) -> list[Any]:
    """Positional arguments for a consumer factory, one per takeover section."""
    return list(resolve(registry, refs).values())
