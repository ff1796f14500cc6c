"""Matching engine — two-level first-match-wins resolution.

A RoutingConfiguration is compiled into a RoutingTable of predicates,
then evaluated against a RedirectRequest:

1. Groups are scanned in declaration order. A group is a candidate when
   its name equals the path (case-insensitive) and is selected when its
   condition, if any, holds. The first selected group ends the scan.
2. The selected group's routings are scanned in declaration order; the
   first one whose condition holds (or that has none) wins.
3. If none won and the group has exactly one routing with neither
   dependsOnKey nor dependsOnValue, that routing is the default.

Unlike a nested matcher with fallthrough, a selected group whose
routings all fail does NOT hand over to a later group: the result is
"no matching routing found".

A miss is a normal outcome carried in MatchResult, never an exception.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from aka._config import RoutingConfiguration
from aka._predicate import CATCH_ALL, Predicate, param_predicate, path_predicate
from aka._url import RedirectRequest

if TYPE_CHECKING:
    from aka._config import Condition, Routing, RoutingGroup
    from aka._types import ParameterMap

logger = logging.getLogger("aka.engine")

NO_MATCHING_GROUP = "no matching routing group found"
NO_MATCHING_ROUTING = "no matching routing found"


class MatchEngineError(Exception):
    """The engine was handed something that is not a validated configuration."""


@dataclass(frozen=True, slots=True)
class MatchResult:
    """Outcome of one resolution attempt.

    Either found=True with target_url, matched_group and matched_routing,
    or found=False with a reason.
    """

    found: bool
    target_url: str | None = None
    matched_group: str | None = None
    matched_routing: str | None = None
    reason: str | None = None

    @classmethod
    def hit(cls, group: RoutingGroup, routing: Routing) -> MatchResult:
        return cls(
            found=True,
            target_url=routing.redirect_target,
            matched_group=group.name,
            matched_routing=routing.name,
        )

    @classmethod
    def miss(cls, reason: str) -> MatchResult:
        return cls(found=False, reason=reason)


# ═══════════════════════════════════════════════════════════════════════════════
# Compiled form
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CompiledRouting:
    routing: Routing
    predicate: Predicate[RedirectRequest]


@dataclass(frozen=True, slots=True)
class CompiledGroup:
    """A group with its name predicate kept apart from its condition.

    Keeping them apart lets the engine tell "path does not match" from
    "path matches but the condition does not hold".
    """

    group: RoutingGroup
    name_predicate: Predicate[RedirectRequest]
    condition_predicate: Predicate[RedirectRequest]
    routings: tuple[CompiledRouting, ...]
    default: Routing | None = None

    def select_routing(self, request: RedirectRequest) -> Routing | None:
        """First routing whose condition holds, else the group default.

        The default is only set for a sole routing with neither
        dependsOnKey nor dependsOnValue. Such a routing compiles to
        CATCH_ALL and is already taken by the scan, so the default branch
        never changes the outcome.
        """
        for compiled in self.routings:
            if compiled.predicate.evaluate(request):
                logger.debug("Matching routing found: %s", compiled.routing.name)
                return compiled.routing
            _log_unmet("Routing", compiled.routing.name, compiled.routing.condition, request)

        if self.default is not None:
            logger.debug("Using default routing (no dependencies): %s", self.default.name)
        return self.default


@dataclass(frozen=True, slots=True)
class RoutingTable:
    """A compiled, immutable routing configuration.

    INV: first-match-wins at both levels; later entries are never consulted
    once an earlier one is selected.
    """

    configuration: RoutingConfiguration
    groups: tuple[CompiledGroup, ...]

    def evaluate(self, request: RedirectRequest) -> MatchResult:
        """Resolve a request to a MatchResult."""
        selected = self._select_group(request)
        if selected is None:
            return MatchResult.miss(NO_MATCHING_GROUP)

        routing = selected.select_routing(request)
        if routing is None:
            return MatchResult.miss(NO_MATCHING_ROUTING)

        return MatchResult.hit(selected.group, routing)

    def _select_group(self, request: RedirectRequest) -> CompiledGroup | None:
        for compiled in self.groups:
            if not compiled.name_predicate.evaluate(request):
                continue
            if compiled.condition_predicate.evaluate(request):
                logger.debug("Matching routing group found: %s", compiled.group.name)
                return compiled
            _log_unmet("Group", compiled.group.name, compiled.group.condition, request)
        return None


def compile_configuration(configuration: RoutingConfiguration) -> RoutingTable:
    """Compile a validated configuration into a RoutingTable.

    Raises:
        MatchEngineError: If configuration is not a validated
            RoutingConfiguration or has no groups.
    """
    if not isinstance(configuration, RoutingConfiguration):
        msg = (
            "expected a validated RoutingConfiguration, "
            f"got {type(configuration).__name__}"
        )
        raise MatchEngineError(msg)
    if not configuration.groups:
        msg = "routing configuration has no groups"
        raise MatchEngineError(msg)

    return RoutingTable(
        configuration=configuration,
        groups=tuple(_compile_group(g) for g in configuration.groups),
    )


def resolve(
    configuration: RoutingConfiguration,
    path: str,
    params: ParameterMap,
) -> MatchResult:
    """Resolve a path and parameter map against a configuration.

    Deterministic: the same inputs always give an equal MatchResult.
    """
    return compile_configuration(configuration).evaluate(RedirectRequest(path, params))


def _compile_group(group: RoutingGroup) -> CompiledGroup:
    routings = tuple(
        CompiledRouting(routing=r, predicate=_condition_predicate(r.condition))
        for r in group.routings
    )

    default = None
    if len(group.routings) == 1 and group.routings[0].is_unconditional:
        default = group.routings[0]

    return CompiledGroup(
        group=group,
        name_predicate=path_predicate(group.name),
        condition_predicate=_condition_predicate(group.condition),
        routings=routings,
        default=default,
    )


def _condition_predicate(condition: Condition | None) -> Predicate[RedirectRequest]:
    if condition is None:
        return CATCH_ALL
    return param_predicate(condition.key, condition.value)


def _log_unmet(
    kind: str, name: str, condition: Condition | None, request: RedirectRequest
) -> None:
    if condition is None:  # pragma: no cover
        return
    logger.debug(
        "%s dependency not met: %s (required %s=%r, actual %r)",
        kind,
        name,
        condition.key,
        condition.value,
        request.param(condition.key),
    )
