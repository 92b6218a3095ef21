"""Query document parser.

Parses YAML (or JSON) query documents into QueryItem models. References
are recognised here, once, so the planner never has to guess whether a
list of strings is data or a path.

    name: orders
    resource: orders
    parameters:
      user_id: $user.id
      tags: {$value: [a, b], $expand: false}
"""

from pathlib import Path
from typing import Any

import yaml

from request_planner.errors import QueryParseError
from .base import LiteralValue, MapValue, ParameterValue, QueryItem, Reference, SequenceValue

REF_PREFIX = "$"
REF_KEY = "$ref"
VALUE_KEY = "$value"
EXPAND_KEY = "$expand"
META_KEY = "$meta"


def parse_query(file_path: Path) -> QueryItem:
    """Parse a file holding a single query item."""
    return parse_query_data(_load(file_path))


def parse_queries(file_path: Path) -> list[QueryItem]:
    """Parse a file holding one query item or a list of them."""
    doc = _load(file_path)
    if isinstance(doc, dict) and "queries" in doc:
        doc = doc["queries"]
    if isinstance(doc, dict):
        return [parse_query_data(doc)]
    if not isinstance(doc, list):
        raise QueryParseError(f"{file_path}: expected a query item or a list of them")
    return [parse_query_data(item) for item in doc]


def parse_query_data(data: Any) -> QueryItem:
    """Build a QueryItem from already-loaded document data."""
    if not isinstance(data, dict):
        raise QueryParseError(f"Query item must be a mapping, got {type(data).__name__}")
    if not data.get("name"):
        raise QueryParseError("Query item is missing 'name'")
    if not data.get("resource") and not data.get("url"):
        raise QueryParseError(f"Query item '{data['name']}' needs a 'resource' or a 'url'")

    parameters = data.get("parameters") or {}
    if not isinstance(parameters, dict):
        raise QueryParseError(f"Query item '{data['name']}': 'parameters' must be a mapping")

    return QueryItem(
        name=str(data["name"]),
        resource=data.get("resource"),
        url=data.get("url"),
        parameters={str(k): parse_value(v) for k, v in parameters.items()},
        headers={str(k): _parse_header(v) for k, v in (data.get("headers") or {}).items()},
        timeout=data.get("timeout"),
        metadata=data.get("metadata") or {},
    )


def parse_value(raw: Any) -> ParameterValue:
    """Convert one raw document value into a parameter node."""
    if isinstance(raw, dict):
        if REF_KEY in raw:
            return Reference(path=_check_path(list(raw[REF_KEY])))
        if VALUE_KEY in raw:
            node = parse_value(raw[VALUE_KEY])
            return node.model_copy(update={
                "expandable": bool(raw.get(EXPAND_KEY, True)),
                "metadata": dict(raw.get(META_KEY) or {}),
            })
        return MapValue(entries={str(k): parse_value(v) for k, v in raw.items()})

    if isinstance(raw, list):
        return SequenceValue(items=[parse_value(item) for item in raw])

    if isinstance(raw, str) and raw.startswith(REF_PREFIX):
        # "$$text" escapes a literal string starting with "$"
        if raw.startswith(REF_PREFIX * 2):
            return LiteralValue(value=raw[1:])
        return Reference(path=_split_path(raw[1:]))

    return LiteralValue(value=raw)


def _parse_header(raw: Any) -> str | Reference:
    if isinstance(raw, dict) and REF_KEY in raw:
        return Reference(path=_check_path(list(raw[REF_KEY])))
    if isinstance(raw, str) and raw.startswith(REF_PREFIX) and not raw.startswith(REF_PREFIX * 2):
        return Reference(path=_split_path(raw[1:]))
    if isinstance(raw, str) and raw.startswith(REF_PREFIX * 2):
        return raw[1:]
    return str(raw)


def _split_path(text: str) -> list[str | int]:
    segments: list[str | int] = []
    for segment in text.split("."):
        if not segment:
            raise QueryParseError(f"Invalid reference path: ${text}")
        segments.append(int(segment) if segment.isdigit() else segment)
    return _check_path(segments)


def _check_path(path: list) -> list:
    if not path or not isinstance(path[0], str):
        raise QueryParseError(f"Reference must start with an entity name: {path!r}")
    return path


def _load(file_path: Path) -> Any:
    text = file_path.read_text(encoding="utf-8")
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise QueryParseError(f"{file_path}: {e}") from e
