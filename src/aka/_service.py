"""RedirectService — holds the loaded configuration and resolves URLs.

The loaded state (compiled table, where it came from, when it was
loaded) is one frozen value. initialize(), reload() and reset() replace
it with a single attribute assignment, so a concurrent resolve() sees
either the old configuration or the new one, never a mix.

Instances are independent: create one per application (or per test)
rather than sharing a module-level singleton.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from aka._config import RoutingConfiguration, parse_configuration
from aka._engine import MatchResult, compile_configuration
from aka._loader import load_configuration
from aka._url import decompose_url

if TYPE_CHECKING:
    from aka._engine import RoutingTable

logger = logging.getLogger("aka.service")

NOT_INITIALIZED = "not initialized"


class ResolutionError(Exception):
    """Base class for resolve() failures."""


class NotInitialized(ResolutionError):
    """resolve() or reload() was called before a successful initialize()."""

    def __init__(self) -> None:
        super().__init__("service not initialized, call initialize() first")


class NoMatch(ResolutionError):
    """No redirect target exists for the URL.

    An expected outcome rather than a fault: reason is one of the
    engine's miss reasons and result is the full MatchResult.
    """

    def __init__(self, result: MatchResult) -> None:
        self.result = result
        self.reason = result.reason or "no redirect target found"
        super().__init__(self.reason)


@dataclass(frozen=True, slots=True)
class ServiceStatus:
    """Read-only snapshot of the service state."""

    initialized: bool
    configuration_loaded: bool
    version: str | None = None
    group_count: int | None = None
    last_loaded: datetime | None = None


@dataclass(frozen=True, slots=True)
class _LoadedState:
    table: RoutingTable
    source: Path | None
    loaded_at: datetime


class RedirectService:
    """Resolve request URLs to redirect targets.

    Example::

        service = RedirectService()
        service.initialize({"version": "1", "groups": [...]})
        target = service.resolve("/Eheschliessung?leika=99059001000000")
    """

    def __init__(self) -> None:
        self._state: _LoadedState | None = None

    # ── Lifecycle ──────────────────────────────────────────────────────────

    def initialize(
        self, source: RoutingConfiguration | dict[str, Any] | str | os.PathLike[str]
    ) -> RoutingConfiguration:
        """Validate and install a configuration, replacing any previous one.

        source is a configuration document (mapping), an already validated
        RoutingConfiguration, or the path of a YAML/JSON file. On failure
        the previously installed configuration stays in place.

        Raises:
            ConfigurationInvalid: If the configuration fails validation.
            OSError: If a configuration file cannot be read.
        """
        path: Path | None = None
        if isinstance(source, str | os.PathLike):
            path = Path(source)
            logger.info("Loading routing configuration from %s", path)
            config = load_configuration(path)
        else:
            config = parse_configuration(source)

        self._install(config, path)
        return config

    def reload(self) -> RoutingConfiguration:
        """Reload the configuration from where it was last loaded.

        A file source is read again; a configuration given as an object
        is re-installed as-is.

        Raises:
            NotInitialized: If nothing has been loaded yet.
            ConfigurationInvalid: If the re-read file no longer validates.
        """
        state = self._state
        if state is None:
            raise NotInitialized
        logger.info("Reloading routing configuration")
        if state.source is None:
            config = state.table.configuration
        else:
            config = load_configuration(state.source)
        self._install(config, state.source)
        return config

    def reset(self) -> None:
        """Forget the loaded configuration."""
        self._state = None
        logger.info("Routing configuration cleared")

    # ── Resolution ─────────────────────────────────────────────────────────

    def find_redirect(self, url: str) -> MatchResult:
        """Resolve a URL to a MatchResult without raising on a miss."""
        state = self._state
        if state is None:
            return MatchResult.miss(NOT_INITIALIZED)
        return self._evaluate(state, url)

    def resolve(self, url: str) -> str:
        """Resolve a URL (absolute, or path with query) to its redirect target.

        Raises:
            NotInitialized: If called before initialize().
            NoMatch: If no group or routing matches.
        """
        state = self._state
        if state is None:
            raise NotInitialized

        result = self._evaluate(state, url)
        if not result.found or result.target_url is None:
            logger.warning("Redirect not found for %r: %s", url, result.reason)
            raise NoMatch(result)

        logger.info(
            "Redirect target found for %r: %s (group=%s, routing=%s)",
            url,
            result.target_url,
            result.matched_group,
            result.matched_routing,
        )
        return result.target_url

    # ── Introspection ──────────────────────────────────────────────────────

    @property
    def configuration(self) -> RoutingConfiguration | None:
        state = self._state
        return state.table.configuration if state is not None else None

    @property
    def is_initialized(self) -> bool:
        return self._state is not None

    def status(self) -> ServiceStatus:
        state = self._state
        if state is None:
            return ServiceStatus(initialized=False, configuration_loaded=False)
        config = state.table.configuration
        return ServiceStatus(
            initialized=True,
            configuration_loaded=True,
            version=config.version,
            group_count=len(config.groups),
            last_loaded=state.loaded_at,
        )

    def _install(self, config: RoutingConfiguration, source: Path | None) -> None:
        state = _LoadedState(
            table=compile_configuration(config),
            source=source,
            loaded_at=datetime.now(UTC),
        )
        self._state = state
        logger.info(
            "Routing configuration loaded: version=%s groups=%d",
            config.version,
            len(config.groups),
        )

    @staticmethod
    def _evaluate(state: _LoadedState, url: str) -> MatchResult:
        request = decompose_url(url)
        logger.debug("Parsed URL %r: path=%r params=%r", url, request.path, dict(request.params))
        return state.table.evaluate(request)
