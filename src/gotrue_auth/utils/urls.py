"""URL helpers shared by the request builder and the transport."""

from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import urlencode, urlsplit, urlunsplit


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def compact_query(query: Mapping[str, Any] | None) -> dict[str, str]:
    """Return *query* without ``None``/empty entries, values stringified."""
    if not query:
        return {}
    return {
        key: _query_value(value)
        for key, value in query.items()
        if value is not None and value != ""
    }


def append_query(url: str, query: Mapping[str, Any] | None) -> str:
    """Append *query* to *url*, keeping any query string already present.

    ``None`` values are dropped so optional parameters never show up as
    literal ``None`` or empty values on the wire.
    """
    params = compact_query(query)
    if not params:
        return url
    parts = urlsplit(url)
    encoded = urlencode(params)
    merged = f"{parts.query}&{encoded}" if parts.query else encoded
    return urlunsplit((parts.scheme, parts.netloc, parts.path, merged, parts.fragment))


def join_url(base: str, *paths: str) -> str:
    """Join *base* with path segments, collapsing duplicate slashes."""
    url = base.rstrip("/")
    for path in paths:
        if not path:
            continue
        url = f"{url}/{path.strip('/')}"
    return url
