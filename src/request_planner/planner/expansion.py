"""Expansion planner — finds the multi-valued sources a query item fans out on.

A source is either a reference whose target holds a list somewhere along
its path, or a top-level literal sequence left expandable. Sources are
compared by content: two references landing on the same list, or a
literal equal to a referenced list, count as one source.
"""

import logging
from typing import Any, Literal

from pydantic import BaseModel

from request_planner.errors import ExpansionError, PlannerError
from request_planner.parser.base import LiteralValue, ParameterValue, QueryItem, SequenceValue
from request_planner.state import ResolvedState
from .extractor import canonical, find_multiple, iter_references

logger = logging.getLogger(__name__)


class ExpansionSource(BaseModel):
    """One way an item could expand.

    Reference sources keep plain items taken from the state, plus the full
    reference path and the path left to walk inside each item. Literal
    sources keep the sequence node and its item nodes.
    """

    kind: Literal["reference", "literal"]
    items: list[Any]
    fullpath: list[str | int] = []
    path: list[str | int] = []
    node: SequenceValue | None = None

    @property
    def body_key(self) -> str:
        if self.kind == "literal":
            return canonical(self.node.to_plain())
        return canonical(self.items)

    def elements(self) -> list[ParameterValue]:
        """The per-request elements, as nodes."""
        if self.kind == "literal":
            return list(self.items)
        return [LiteralValue(value=item) for item in self.items]


def reference_sources(values: dict[str, ParameterValue], state: ResolvedState) -> list[ExpansionSource]:
    """References (outside non-expandable nodes) whose target is multi-valued."""
    sources: list[ExpansionSource] = []
    seen: set[str] = set()
    for value in values.values():
        for ref in iter_references(value, skip_non_expandable=True):
            if ref.is_header:
                continue
            record = state.effective(ref.entity)
            if record is None:
                continue
            multiple = find_multiple(record.body, ref.path[1:])
            if multiple is None:
                continue
            source = ExpansionSource(
                kind="reference",
                items=multiple.items,
                fullpath=list(ref.path),
                path=multiple.path,
            )
            key = canonical([source.fullpath, source.body_key])
            if key not in seen:
                seen.add(key)
                sources.append(source)
    return sources


def literal_sources(values: dict[str, ParameterValue]) -> list[ExpansionSource]:
    """Top-level sequences left expandable."""
    sources: list[ExpansionSource] = []
    seen: set[str] = set()
    for value in values.values():
        if not isinstance(value, SequenceValue) or not value.expandable:
            continue
        source = ExpansionSource(kind="literal", items=value.items, node=value)
        if source.body_key not in seen:
            seen.add(source.body_key)
            sources.append(source)
    return sources


def distinct_bodies(sources: list[ExpansionSource]) -> list[str]:
    keys: list[str] = []
    for source in sources:
        if source.body_key not in keys:
            keys.append(source.body_key)
    return keys


def get_expansion_sources(item: QueryItem, state: ResolvedState) -> list[ExpansionSource]:
    """Every expansion source of the item: references first, then literals."""
    return reference_sources(item.parameters, state) + literal_sources(item.parameters)


def choose_source(
    sources: list[ExpansionSource],
    error_cls: type[PlannerError] = ExpansionError,
    context: str = "",
) -> ExpansionSource | None:
    """Return the source to expand on, None when there is none.

    Raises ``error_cls`` when the sources span more than one distinct list.
    """
    bodies = distinct_bodies(sources)
    if not bodies:
        return None
    if len(bodies) > 1:
        raise error_cls(
            f"{context}tried to expand based on {len(bodies)} independent lists. "
            "This is not allowed."
        )
    logger.debug("%sexpanding on %d element(s)", context, len(sources[0].items))
    return sources[0]
