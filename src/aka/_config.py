"""Routing configuration types and validation.

A configuration document (JSON/YAML shape) is validated into a trusted,
immutable copy:

  dict → parse_configuration() → RoutingConfiguration → compile_configuration() → RoutingTable

Document shape::

    version: "1.0.0"
    metadata: {created: ..., lastModified: ..., author: ...}   # optional
    groups:
      - name: Eheschliessung
        description: ...                                     # optional
        dependsOnKey: leika                                  # optional pair
        dependsOnValue: "99059001000000"
        routings:
          - name: BzMitte
            dependsOnKey: oeid                               # optional pair
            dependsOnValue: "2289"
            redirectTarget: https://example.com/bzmitte

Checks fail fast, in document order: version, groups list, non-empty
groups, each group (name, routings, each routing), then group-name
uniqueness (case-insensitive) once every group is known to be valid.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any

from aka._url import is_valid_url

logger = logging.getLogger("aka.config")

# ═══════════════════════════════════════════════════════════════════════════════
# Configuration types (frozen dataclasses)
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Condition:
    """A dependency condition: the request must carry key=value exactly."""

    key: str
    value: str


def _condition(key: str | None, value: str | None) -> Condition | None:
    # A condition needs a non-empty key and a value; "" is a valid value.
    if not key or value is None:
        return None
    return Condition(key, value)


@dataclass(frozen=True, slots=True)
class Routing:
    """One candidate redirect inside a group."""

    name: str
    redirect_target: str
    depends_on_key: str | None = None
    depends_on_value: str | None = None

    @property
    def condition(self) -> Condition | None:
        return _condition(self.depends_on_key, self.depends_on_value)

    @property
    def is_unconditional(self) -> bool:
        """True only when neither dependsOnKey nor dependsOnValue is set."""
        return self.depends_on_key is None and self.depends_on_value is None


@dataclass(frozen=True, slots=True)
class RoutingGroup:
    """A named bucket of routings, selected by the request path."""

    name: str
    routings: tuple[Routing, ...]
    description: str = ""
    depends_on_key: str | None = None
    depends_on_value: str | None = None

    @property
    def condition(self) -> Condition | None:
        return _condition(self.depends_on_key, self.depends_on_value)


@dataclass(frozen=True, slots=True)
class Metadata:
    """Informational document metadata. Never consulted when matching."""

    created: str | None = None
    last_modified: str | None = None
    author: str | None = None


@dataclass(frozen=True, slots=True)
class RoutingConfiguration:
    """Validated routing configuration.

    groups is non-empty, in declaration order, and group names are
    unique under case-insensitive comparison.
    """

    version: str
    groups: tuple[RoutingGroup, ...]
    metadata: Metadata | None = None

    def group_names(self) -> list[str]:
        return [g.name for g in self.groups]

    def find_group(self, name: str) -> RoutingGroup | None:
        """Look up a group by name, ignoring case."""
        wanted = name.lower()
        for group in self.groups:
            if group.name.lower() == wanted:
                return group
        return None


# ═══════════════════════════════════════════════════════════════════════════════
# Validation (dict → configuration types)
# ═══════════════════════════════════════════════════════════════════════════════


class ConfigurationInvalid(ValueError):
    """A configuration document failed structural validation."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


def parse_configuration(data: Any) -> RoutingConfiguration:
    """Validate an untrusted document into a RoutingConfiguration.

    An already validated RoutingConfiguration is returned unchanged.
    The input is never modified.

    Raises:
        ConfigurationInvalid: On the first structural violation found.
    """
    if isinstance(data, RoutingConfiguration):
        return data

    try:
        config = _parse_configuration(data)
    except ConfigurationInvalid as e:
        logger.error("Rejected routing configuration: %s", e.reason)
        raise

    logger.debug(
        "Validated routing configuration version=%s groups=%d",
        config.version,
        len(config.groups),
    )
    return config


def _parse_configuration(data: Any) -> RoutingConfiguration:
    if not isinstance(data, Mapping):
        msg = f"configuration must be a mapping, got {type(data).__name__}"
        raise ConfigurationInvalid(msg)

    version = data.get("version")
    if not isinstance(version, str):
        msg = "configuration version is required and must be a string"
        raise ConfigurationInvalid(msg)
    if not version:
        msg = "configuration version is required"
        raise ConfigurationInvalid(msg)

    metadata = _parse_metadata(data["metadata"]) if data.get("metadata") is not None else None

    raw_groups = data["groups"] if "groups" in data else data.get("routingGroups")
    if raw_groups is None:
        msg = "missing required field 'groups'"
        raise ConfigurationInvalid(msg)
    if not isinstance(raw_groups, list | tuple):
        msg = f"'groups' must be a list, got {type(raw_groups).__name__}"
        raise ConfigurationInvalid(msg)
    if not raw_groups:
        msg = "at least one routing group is required"
        raise ConfigurationInvalid(msg)

    groups = tuple(_parse_group(g, i) for i, g in enumerate(raw_groups))

    seen: dict[str, str] = {}
    for group in groups:
        key = group.name.lower()
        if key in seen:
            msg = f"duplicate routing group names found: {seen[key]!r} and {group.name!r}"
            raise ConfigurationInvalid(msg)
        seen[key] = group.name

    return RoutingConfiguration(version=version, groups=groups, metadata=metadata)


def _parse_group(data: Any, index: int) -> RoutingGroup:
    if not isinstance(data, Mapping):
        msg = f"routing group #{index} must be a mapping, got {type(data).__name__}"
        raise ConfigurationInvalid(msg)

    name = data.get("name")
    if not isinstance(name, str) or not name:
        msg = f"routing group #{index}: name is required and must be a non-empty string"
        raise ConfigurationInvalid(msg)

    description = data.get("description", "")
    if description is None:
        description = ""
    if not isinstance(description, str):
        msg = f"routing group {name!r}: description must be a string"
        raise ConfigurationInvalid(msg)

    key, value = _parse_dependency(data, f"routing group {name!r}")

    raw_routings = data.get("routings")
    if not isinstance(raw_routings, list | tuple):
        msg = f"routing group {name!r}: routings must be a list"
        raise ConfigurationInvalid(msg)
    if not raw_routings:
        msg = f"routing group {name!r} must have at least one routing"
        raise ConfigurationInvalid(msg)

    routings = tuple(_parse_routing(r, name) for r in raw_routings)
    return RoutingGroup(
        name=name,
        routings=routings,
        description=description,
        depends_on_key=key,
        depends_on_value=value,
    )


def _parse_routing(data: Any, group_name: str) -> Routing:
    if not isinstance(data, Mapping):
        msg = f"routing in group {group_name!r} must be a mapping, got {type(data).__name__}"
        raise ConfigurationInvalid(msg)

    name = data.get("name")
    if not isinstance(name, str) or not name:
        msg = f"routing name is required in group {group_name!r}"
        raise ConfigurationInvalid(msg)

    key, value = _parse_dependency(data, f"routing {name!r} in group {group_name!r}")

    target = data.get("redirectTarget")
    if not isinstance(target, str) or not target:
        msg = f"redirect target is required for routing {name!r} in group {group_name!r}"
        raise ConfigurationInvalid(msg)
    if not is_valid_url(target):
        msg = f"invalid redirect target URL {target!r} in routing {name!r}"
        raise ConfigurationInvalid(msg)

    return Routing(
        name=name,
        redirect_target=target,
        depends_on_key=key,
        depends_on_value=value,
    )


def _parse_dependency(data: Mapping[str, Any], where: str) -> tuple[str | None, str | None]:
    """Read the optional dependsOnKey/dependsOnValue pair.

    Each half is validated on its own; a half-specified pair, or one
    with an empty key, is kept as-is and treated as "no condition" when
    matching.
    """
    key = data.get("dependsOnKey")
    value = data.get("dependsOnValue")
    if key is not None and not isinstance(key, str):
        msg = f"{where}: dependsOnKey must be a string, got {type(key).__name__}"
        raise ConfigurationInvalid(msg)
    if value is not None and not isinstance(value, str):
        msg = f"{where}: dependsOnValue must be a string, got {type(value).__name__}"
        raise ConfigurationInvalid(msg)
    if _condition(key, value) is None and (key is not None or value is not None):
        logger.debug("%s: incomplete dependency pair is ignored", where)
    return key, value


def _parse_metadata(data: Any) -> Metadata:
    if not isinstance(data, Mapping):
        msg = f"metadata must be a mapping, got {type(data).__name__}"
        raise ConfigurationInvalid(msg)
    return Metadata(
        created=_text(data.get("created")),
        last_modified=_text(data.get("lastModified")),
        author=_text(data.get("author")),
    )


def _text(value: Any) -> str | None:
    # YAML turns unquoted ISO-8601 timestamps into date/datetime objects.
    if value is None:
        return None
    if isinstance(value, date):
        return value.isoformat()
    return str(value)
