"""Definitions of outgoing HTTP requests, given either as a bare URL or as a JSON object."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from sqlpage_web.url_parameters import _object_entries

VERSION = "0.34.0"
USER_AGENT = f"SQLPage/v{VERSION}"
EXPECTING = 'an http request object, e.g. \'{"url":"http://example.com"}\''

_FIELDS = ("url", "method", "headers", "username", "password", "body", "timeout_ms")
_U64_MAX = 2**64 - 1

HeaderList = list[tuple[str, str]]


def default_headers() -> HeaderList:
    """Headers sent when the request definition does not give any."""
    return [("Accept", "*/*"), ("User-Agent", USER_AGENT)]


@dataclass
class HttpFetchRequest:
    """An HTTP request to be sent on behalf of a SQL query."""

    url: str
    method: Optional[str] = None
    headers: HeaderList = field(default_factory=default_headers)
    username: Optional[str] = None
    password: Optional[str] = None
    body: Optional[str] = None
    timeout_ms: Optional[int] = None


def _optional_str(name: str, value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    raise ValueError(f"invalid type for field `{name}`, expected a string")


def _headers(raw: str) -> HeaderList:
    try:
        entries = _object_entries(raw)
    except ValueError as exc:
        raise ValueError("invalid type for field `headers`, expected a map") from exc
    pairs: HeaderList = []
    for key, value, _ in entries:
        if not isinstance(value, str):
            raise ValueError(f"invalid type for header `{key}`, expected a string")
        pairs.append((key, value))
    return pairs


def _timeout(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _U64_MAX:
        raise ValueError("invalid value for field `timeout_ms`, expected a non-negative integer")
    return value


def _convert(name: str, value: Any, raw: str) -> Any:
    if name == "url":
        if not isinstance(value, str):
            raise ValueError("invalid type for field `url`, expected a string")
        return value
    if name == "headers":
        return _headers(raw)
    if name == "body":
        return None if value is None else raw
    if name == "timeout_ms":
        return _timeout(value)
    return _optional_str(name, value)


def _from_json(text: str) -> HttpFetchRequest:
    try:
        entries = _object_entries(text)
    except ValueError as exc:
        raise ValueError(f"invalid type, expected {EXPECTING}") from exc
    values: dict[str, Any] = {}
    for name, value, raw in entries:
        if name not in _FIELDS:
            expected = ", ".join(f"`{f}`" for f in _FIELDS)
            raise ValueError(f"unknown field `{name}`, expected one of {expected}")
        if name in values:
            raise ValueError(f"duplicate field `{name}`")
        values[name] = _convert(name, value, raw)
    if "url" not in values:
        raise ValueError("missing field `url`")
    return HttpFetchRequest(**values)


def parse_fetch_request(text: str) -> HttpFetchRequest:
    """Parse a request definition.

    Text starting with ``http`` is taken as a URL to GET with default headers;
    anything else must be a JSON object with the fields of HttpFetchRequest.
    """
    if text.startswith("http"):
        return HttpFetchRequest(url=text)
    try:
        return _from_json(text)
    except ValueError as exc:
        raise ValueError(f"Invalid http fetch request definition: {text}") from exc