"""Predicates over a RedirectRequest — extract a value, then compare it.

SinglePredicate pairs a DataInput (path or query parameter) with an
ExactMatcher. And composes predicates with short-circuit evaluation;
the empty And is the catch-all used for routings without a condition.

Group names are compared case-insensitively, parameter values are
compared case-sensitively. Both go through ExactMatcher, the only
difference is the ignore_case flag.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from aka._types import DataInput, InputMatcher, MatchingData
    from aka._url import RedirectRequest


# ─── Inputs ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class PathInput:
    """Extracts the request path (no leading slash, no query string)."""

    def get(self, ctx: RedirectRequest, /) -> MatchingData:
        return ctx.path


@dataclass(frozen=True, slots=True)
class ParamInput:
    """Extracts a query parameter value by name.

    Returns None when the parameter is absent, which is different from
    a parameter that is present with an empty value.
    """

    name: str

    def get(self, ctx: RedirectRequest, /) -> MatchingData:
        return ctx.param(self.name)


# ─── Matcher ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ExactMatcher:
    """Exact string equality match.

    With ignore_case, both sides are lowercased. No trimming or other
    normalization is applied, so "123" never equals "123 ".
    """

    value: str
    ignore_case: bool = False
    _cmp_value: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_cmp_value", self.value.lower() if self.ignore_case else self.value
        )

    def matches(self, value: MatchingData, /) -> bool:
        if not isinstance(value, str):
            return False
        input_val = value.lower() if self.ignore_case else value
        return input_val == self._cmp_value


# ─── Predicates ──────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class SinglePredicate[Ctx]:
    """A single predicate: extract data, then match.

    If the DataInput returns None the predicate is False and the
    matcher is never consulted.
    """

    input: DataInput[Ctx]
    matcher: InputMatcher

    def evaluate(self, ctx: Any) -> bool:
        value = self.input.get(ctx)
        if value is None:
            return False
        return self.matcher.matches(value)


@dataclass(frozen=True, slots=True)
class And[Ctx]:
    """All predicates must match (logical AND).

    Short-circuits on the first False. Empty And returns True.
    """

    predicates: tuple[Predicate[Ctx], ...]

    def evaluate(self, ctx: Any) -> bool:
        return all(p.evaluate(ctx) for p in self.predicates)


type Predicate[Ctx] = SinglePredicate[Ctx] | And[Ctx]

# Matches every request.
CATCH_ALL: And[Any] = And(())


def path_predicate(name: str) -> SinglePredicate[RedirectRequest]:
    """Case-insensitive match of the request path against a group name."""
    return SinglePredicate(PathInput(), ExactMatcher(name, ignore_case=True))


def param_predicate(key: str, value: str) -> SinglePredicate[RedirectRequest]:
    """Case-sensitive match of one query parameter against a required value."""
    return SinglePredicate(ParamInput(key), ExactMatcher(value))
