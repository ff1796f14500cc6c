"""aka — resolve short request URLs to redirect targets.

A static, two-level rule table (groups selected by path, routings
selected by query parameters) turns a request URL into one target URL.
All public types are exported from this module for flat imports:

    from aka import RedirectService, parse_configuration, resolve
"""

__version__ = "2.2.2"

# Data model and validation
from aka._config import (
    Condition,
    ConfigurationInvalid,
    Metadata,
    Routing,
    RoutingConfiguration,
    RoutingGroup,
    parse_configuration,
)

# Matching engine
from aka._engine import (
    NO_MATCHING_GROUP,
    NO_MATCHING_ROUTING,
    CompiledGroup,
    CompiledRouting,
    MatchEngineError,
    MatchResult,
    RoutingTable,
    compile_configuration,
    resolve,
)

# Loading documents
from aka._loader import load_configuration, parse_configuration_text

# Predicates
from aka._predicate import (
    CATCH_ALL,
    And,
    ExactMatcher,
    ParamInput,
    PathInput,
    Predicate,
    SinglePredicate,
    param_predicate,
    path_predicate,
)

# Service
from aka._service import (
    NOT_INITIALIZED,
    NoMatch,
    NotInitialized,
    RedirectService,
    ResolutionError,
    ServiceStatus,
)
from aka._types import DataInput, InputMatcher, MatchingData, ParameterMap

# URL decomposition
from aka._url import (
    RedirectRequest,
    decompose_url,
    ensure_protocol,
    extract_path,
    is_valid_url,
    parse_url_params,
)

__all__ = [
    # Protocols
    "DataInput",
    "InputMatcher",
    "MatchingData",
    "ParameterMap",
    # URL decomposition
    "RedirectRequest",
    "decompose_url",
    "extract_path",
    "parse_url_params",
    "is_valid_url",
    "ensure_protocol",
    # Predicates
    "PathInput",
    "ParamInput",
    "ExactMatcher",
    "SinglePredicate",
    "And",
    "Predicate",
    "CATCH_ALL",
    "path_predicate",
    "param_predicate",
    # Configuration
    "Condition",
    "Routing",
    "RoutingGroup",
    "Metadata",
    "RoutingConfiguration",
    "ConfigurationInvalid",
    "parse_configuration",
    "parse_configuration_text",
    "load_configuration",
    # Engine
    "MatchResult",
    "CompiledRouting",
    "CompiledGroup",
    "RoutingTable",
    "MatchEngineError",
    "compile_configuration",
    "resolve",
    "NO_MATCHING_GROUP",
    "NO_MATCHING_ROUTING",
    # Service
    "RedirectService",
    "ServiceStatus",
    "ResolutionError",
    "NotInitialized",
    "NoMatch",
    "NOT_INITIALIZED",
]
