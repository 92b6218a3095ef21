"""Value interpolator — resolves a parameter tree into plain values."""

import logging
from typing import Any

from request_planner.errors import InvalidParameterRepetition
from request_planner.parser.base import LiteralValue, MapValue, ParameterValue, Reference, SequenceValue
from request_planner.state import ResolvedState
from .expansion import ExpansionSource, choose_source, reference_sources
from .extractor import traverse
from .resolver import resolve_reference

logger = logging.getLogger(__name__)


def interpolate_value(node: ParameterValue, state: ResolvedState) -> Any:
    """Resolve ``node`` against ``state``.

    Maps whose direct values point into one multi-valued body resolve to a
    list of maps, one per element of that body.
    """
    if isinstance(node, Reference):
        return resolve_reference(node, state)
    if isinstance(node, SequenceValue):
        return [interpolate_value(item, state) for item in node.items]
    if isinstance(node, MapValue):
        return interpolate_map(node, state)
    return node.value


def interpolate_map(node: MapValue, state: ResolvedState) -> dict | list[dict]:
    direct = {
        key: value for key, value in node.entries.items()
        if isinstance(value, Reference)
    }
    sources = reference_sources(direct, state)
    source = choose_source(
        sources,
        error_cls=InvalidParameterRepetition,
        context="Map parameter ",
    )
    if source is None:
        return {key: interpolate_value(value, state) for key, value in node.entries.items()}

    logger.debug("Map parameter repeated over %d element(s)", len(source.items))
    return [
        interpolate_value(_map_for_element(node, item, sources), state)
        for item in source.items
    ]


def _map_for_element(node: MapValue, item: Any, sources: list[ExpansionSource]) -> MapValue:
    entries = {}
    for key, value in node.entries.items():
        match = None
        if isinstance(value, Reference):
            match = next((s for s in sources if s.fullpath == value.path), None)
        if match is None:
            entries[key] = value
        else:
            entries[key] = LiteralValue(value=traverse(item, match.path), metadata=value.metadata)
    return node.model_copy(update={"entries": entries})
