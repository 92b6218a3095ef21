"""Template instantiator — one query item per element of the expansion source."""

from request_planner.parser.base import (
    LiteralValue,
    MapValue,
    ParameterValue,
    QueryItem,
    Reference,
    SequenceValue,
)
from .expansion import ExpansionSource
from .extractor import canonical, traverse


def instantiate_value(
    element: ParameterValue,
    sources: list[ExpansionSource],
    node: ParameterValue,
    top_level: bool = True,
) -> ParameterValue:
    """Substitute ``element`` into ``node`` wherever a source definition matches.

    References whose path is a source's full path take the element's value
    at that source's relative path. A top-level sequence equal to the literal
    source is replaced by the element itself. The expandable flag only
    matters when sources are detected, so non-expandable nodes are
    substituted too.
    """
    if isinstance(node, MapValue):
        entries = {
            key: instantiate_value(element, sources, value, top_level=False)
            for key, value in node.entries.items()
        }
        return node.model_copy(update={"entries": entries})

    if isinstance(node, Reference):
        for source in sources:
            if source.kind == "reference" and source.fullpath == node.path:
                value = traverse(element.to_plain(), source.path)
                return LiteralValue(value=value, metadata=node.metadata)
        return node

    if isinstance(node, SequenceValue):
        if top_level:
            return _substitute_literal(element, sources, node)
        items = [instantiate_value(element, sources, item, top_level=False) for item in node.items]
        return node.model_copy(update={"items": items})

    return node


def _substitute_literal(
    element: ParameterValue, sources: list[ExpansionSource], node: SequenceValue
) -> ParameterValue:
    literal = next((s for s in sources if s.kind == "literal"), None)
    if literal is None or literal.body_key != canonical(node.to_plain()):
        return node
    return element.model_copy(update={"metadata": {**node.metadata, **element.metadata}})


def build_query(item: QueryItem, element: ParameterValue, sources: list[ExpansionSource]) -> QueryItem:
    """A copy of ``item`` whose parameters are templated with ``element``."""
    parameters = {
        name: instantiate_value(element, sources, value)
        for name, value in item.parameters.items()
    }
    return item.model_copy(update={"parameters": parameters})
