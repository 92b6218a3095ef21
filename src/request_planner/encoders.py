"""Value encoders — turn resolved values into query-string-safe strings.

A parameter's ``metadata["encoder"]`` picks a named encoder; otherwise
the value's type decides.
"""

import base64
import json
from typing import Any, Callable

from request_planner.errors import UnknownEncoderError


def _to_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def encode_simple(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value
    return _to_json(value)


def encode_json(value: Any) -> str | None:
    return None if value is None else _to_json(value)


def encode_base64(value: Any) -> str | None:
    if value is None:
        return None
    text = value if isinstance(value, str) else _to_json(value)
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


DEFAULT_ENCODERS: dict[str, Callable[[Any], str | None]] = {
    "simple": encode_simple,
    "json": encode_json,
    "base64": encode_base64,
}


class ValueEncoder:
    """Registry of named encoders with type-based defaults."""

    def __init__(self, encoders: dict[str, Callable[[Any], str | None]] | None = None):
        self.encoders = dict(DEFAULT_ENCODERS)
        if encoders:
            self.encoders.update(encoders)

    def register(self, name: str, encoder: Callable[[Any], str | None]) -> None:
        self.encoders[name] = encoder

    def encode(self, value: Any, metadata: dict | None = None) -> str | None:
        """Encode ``value``; None stays None so it can be stripped later."""
        name = (metadata or {}).get("encoder", "simple")
        if name not in self.encoders:
            raise UnknownEncoderError(f"Unknown encoder: {name}")
        return self.encoders[name](value)
