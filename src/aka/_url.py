"""URL decomposition — raw URL -> (path, parameters).

Accepts an absolute URL or a path with an optional query string and
produces a RedirectRequest. Nothing here raises on malformed input:
when a URL cannot be split, the text before the first "?" is taken as
the path and the query is parsed on a best-effort basis.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from urllib.parse import unquote, urlsplit

# Schemes that are meaningless without a host.
_NETLOC_SCHEMES = frozenset({"http", "https", "ftp", "ws", "wss"})

_ABSOLUTE_PREFIXES = ("http://", "https://")

# WHATWG forbidden host code points (whitespace is checked separately).
_FORBIDDEN_HOST_CHARS = frozenset("\x00#%/:<>?@[\\]^|")

_IPV6_CHARS = frozenset("0123456789abcdef:.")


@dataclass(frozen=True, slots=True)
class RedirectRequest:
    """Per-request matching context.

    path has no leading slash and is "" for the root. params maps each
    decoded parameter name to its decoded value and is read-only.
    """

    path: str = ""
    params: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    def param(self, name: str) -> str | None:
        """Get a query parameter by name, None when absent."""
        return self.params.get(name)

    @classmethod
    def from_url(cls, url: str) -> RedirectRequest:
        return decompose_url(url)


def decompose_url(url: str) -> RedirectRequest:
    """Split a URL-like string into a RedirectRequest."""
    if not url:
        return RedirectRequest()
    return RedirectRequest(path=extract_path(url), params=parse_url_params(_query_of(url)))


def extract_path(url: str) -> str:
    """Return the pathname of a URL without query, fragment or leading slash.

    >>> extract_path("https://example.com/Eheschliessung?leika=1")
    'Eheschliessung'
    >>> extract_path("/api/v1/redirect")
    'api/v1/redirect'
    """
    if not url:
        return ""
    pathname = _strip_query(url)
    if url.startswith(_ABSOLUTE_PREFIXES):
        try:
            pathname = urlsplit(url).path
        except ValueError:
            pass  # keep the text before "?"
    return pathname.removeprefix("/")


def parse_url_params(search: str) -> dict[str, str]:
    """Parse a query string into a flat parameter map.

    Pairs are split on "&", each pair on its first "=". A pair without
    "=" gets the empty string. Keys and values are percent-decoded
    independently; "+" is kept as-is. Pairs with an empty key are
    skipped and a repeated key keeps its last value.

    >>> parse_url_params("?equation=a=b+c&flag")
    {'equation': 'a=b+c', 'flag': ''}
    """
    params: dict[str, str] = {}
    if not search:
        return params

    query = search.removeprefix("?")
    for pair in query.split("&"):
        key, _, value = pair.partition("=")
        if not key:
            continue
        params[unquote(key)] = unquote(value)
    return params


def is_valid_url(url: str) -> bool:
    """Check that a string is a syntactically valid absolute URL.

    A scheme is required. Schemes such as http and https also need a
    host, and a port, when given, must be numeric and in range.
    """
    if not isinstance(url, str) or not url.strip():
        return False
    try:
        parts = urlsplit(url.strip())
        parts.port  # noqa: B018 - raises ValueError for a bad port
    except ValueError:
        return False
    if not parts.scheme:
        return False
    if parts.scheme.lower() in _NETLOC_SCHEMES:
        return _is_valid_host(parts.hostname)
    return bool(parts.netloc or parts.path)


def _is_valid_host(hostname: str | None) -> bool:
    if not hostname:
        return False
    # urlsplit strips the brackets of an IPv6 literal, leaving a ':'.
    if ":" in hostname:
        return all(c in _IPV6_CHARS for c in hostname)
    return not any(c.isspace() or c in _FORBIDDEN_HOST_CHARS for c in hostname)


def ensure_protocol(url: str) -> str:
    """Prefix https:// unless the URL already starts with http(s)://."""
    if url.startswith(_ABSOLUTE_PREFIXES):
        return url
    return f"https://{url}"


def _strip_query(url: str) -> str:
    return url.split("?", 1)[0].split("#", 1)[0]


def _query_of(url: str) -> str:
    _, sep, rest = url.split("#", 1)[0].partition("?")
    return rest if sep else ""
