"""Dependency readiness: may a query item run given what has resolved so far?"""

from request_planner.parser.base import QueryItem, Reference
from request_planner.state import ResolvedState
from .extractor import dependency_paths


def get_dependencies(item: QueryItem) -> list[str]:
    """Entity names referenced by the item's parameters and headers, in order of first use."""
    names: list[str] = []
    paths = dependency_paths(item.parameters)
    paths.extend(h.path for h in item.headers.values() if isinstance(h, Reference))
    for path in paths:
        if path[0] not in names:
            names.append(path[0])
    return names


def is_success(state: ResolvedState, name: str) -> bool:
    """True when the entity's effective status is in [200, 300).

    An entity that never ran and one that answered without a status
    are both treated as failed.
    """
    record = state.effective(name)
    return record is not None and record.success


def are_dependencies_ok(item: QueryItem, state: ResolvedState) -> bool:
    return all(is_success(state, name) for name in get_dependencies(item))
