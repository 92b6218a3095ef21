"""Path primitives shared by the resolver, the interpolator and the expansion planner."""

import json
from typing import Any, Iterator

from pydantic import BaseModel

from request_planner.parser.base import MapValue, ParameterValue, Reference, SequenceValue


class Multiple(BaseModel):
    """The first list met while walking a path.

    ``base`` is the consumed prefix, ``path`` what is left to walk inside
    each element of ``items``.
    """

    base: list[str | int]
    path: list[str | int]
    items: list


def traverse(data: Any, path: list) -> Any:
    """Walk ``path`` into ``data``; lists are mapped over, missing keys yield None."""
    for i, segment in enumerate(path):
        if isinstance(data, list):
            if isinstance(segment, int):
                data = data[segment] if -len(data) <= segment < len(data) else None
                continue
            return [traverse(item, path[i:]) for item in data]
        if isinstance(data, dict):
            data = _get(data, segment)
        else:
            return None
    return data


def find_multiple(data: Any, path: list) -> Multiple | None:
    """Locate the first list along ``path``, or None if the path has none."""
    base: list[str | int] = []
    for i, segment in enumerate(path):
        if isinstance(data, list):
            if isinstance(segment, int):
                data = data[segment] if -len(data) <= segment < len(data) else None
                base.append(segment)
                continue
            return Multiple(base=base, path=list(path[i:]), items=data)
        if not isinstance(data, dict):
            return None
        data = _get(data, segment)
        base.append(segment)
    if isinstance(data, list):
        return Multiple(base=base, path=[], items=data)
    return None


def iter_references(node: ParameterValue, skip_non_expandable: bool = False) -> Iterator[Reference]:
    """Yield every reference in a parameter tree, depth first."""
    if skip_non_expandable and not node.expandable:
        return
    if isinstance(node, Reference):
        yield node
    elif isinstance(node, SequenceValue):
        for item in node.items:
            yield from iter_references(item, skip_non_expandable)
    elif isinstance(node, MapValue):
        for value in node.entries.values():
            yield from iter_references(value, skip_non_expandable)


def dependency_paths(values: dict[str, ParameterValue], skip_non_expandable: bool = False) -> list[list]:
    """All reference paths of a parameter mapping, in parameter order."""
    return [
        ref.path
        for value in values.values()
        for ref in iter_references(value, skip_non_expandable)
    ]


def canonical(value: Any) -> str:
    """A stable key so equal values compare equal regardless of where they came from."""
    return json.dumps(value, sort_keys=True, default=str)


def _get(data: dict, segment: str | int) -> Any:
    if segment in data:
        return data[segment]
    return data.get(str(segment))
