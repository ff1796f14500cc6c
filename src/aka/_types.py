"""Core protocols and type aliases for aka.

- MatchingData is the value an input extracts from a request
- DataInput extracts a value from the request context
- InputMatcher decides whether an extracted value matches
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, TypeVar, runtime_checkable

# None means "not present in the request" and always evaluates to False.
MatchingData = str | None

# One decoded value per parameter name (last occurrence wins).
type ParameterMap = Mapping[str, str]

Ctx = TypeVar("Ctx", contravariant=True)


@runtime_checkable
class DataInput(Protocol[Ctx]):
    """Extract a value from a request context.

    Returning None signals "data not available" and causes the predicate
    to evaluate to False without consulting the matcher.
    """

    def get(self, ctx: Ctx, /) -> MatchingData: ...


@runtime_checkable
class InputMatcher(Protocol):
    """Match against an extracted value."""

    def matches(self, value: MatchingData, /) -> bool: ...
