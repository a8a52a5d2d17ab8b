"""Turn a JSON object into a URL query string."""

from __future__ import annotations

import json
from typing import Any

_WHITESPACE = " \t\n\r"
_decoder = json.JSONDecoder()


def _percent_encode(text: str) -> str:
    return "".join(
        chr(byte) if chr(byte).isascii() and chr(byte).isalnum() else f"%{byte:02X}"
        for byte in text.encode("utf-8")
    )


def _skip_ws(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in _WHITESPACE:
        pos += 1
    return pos


def _char_at(text: str, pos: int) -> str:
    return text[pos] if pos < len(text) else ""


def _object_entries(text: str) -> list[tuple[str, Any, str]]:
    """Return (key, decoded value, raw value text) for each member of a JSON object."""
    pos = _skip_ws(text, 0)
    if _char_at(text, pos) != "{":
        raise ValueError("URL parameters must be given as a JSON object")
    pos = _skip_ws(text, pos + 1)
    entries: list[tuple[str, Any, str]] = []
    if _char_at(text, pos) == "}":
        pos += 1
    else:
        while True:
            if _char_at(text, pos) != '"':
                raise ValueError(f"Expected an object key at position {pos}")
            key, pos = _decoder.raw_decode(text, pos)
            pos = _skip_ws(text, pos)
            if _char_at(text, pos) != ":":
                raise ValueError(f"Expected ':' at position {pos}")
            start = _skip_ws(text, pos + 1)
            value, pos = _decoder.raw_decode(text, start)
            entries.append((key, value, text[start:pos]))
            pos = _skip_ws(text, pos)
            sep = _char_at(text, pos)
            if sep == "}":
                pos += 1
                break
            if sep != ",":
                raise ValueError(f"Expected ',' or '}}' at position {pos}")
            pos = _skip_ws(text, pos + 1)
    if _skip_ws(text, pos) != len(text):
        raise ValueError("Unexpected trailing characters after JSON object")
    return entries


def encode_url_parameters(json_text: str) -> str:
    """Encode a JSON object as ``key=value`` pairs joined by ``&``.

    String values are used as is, arrays produce one ``key[]=item`` pair per
    item (items serialized as JSON), and other values keep their JSON text.
    Everything but ASCII letters and digits is percent-encoded.
    """
    parts: list[str] = []
    for key, value, raw in _object_entries(json_text):
        encoded_key = _percent_encode(key)
        if isinstance(value, str):
            parts.append(f"{encoded_key}={_percent_encode(value)}")
        elif isinstance(value, list):
            parts.extend(
                f"{encoded_key}[]="
                + _percent_encode(json.dumps(item, ensure_ascii=False, separators=(",", ":")))
                for item in value
            )
        else:
            parts.append(f"{encoded_key}={_percent_encode(raw)}")
    return "&".join(parts)