"""Reference resolver — looks a reference path up in the resolved state."""

import logging
from typing import Any

from request_planner.parser.base import Reference
from request_planner.state import ResolvedState, ResponseRecord
from .extractor import traverse

logger = logging.getLogger(__name__)


def value_from_record(record: ResponseRecord, ref: Reference) -> Any:
    """Extract the value addressed by ``ref`` from one response record."""
    if ref.is_header:
        return record.headers.get(ref.path[2])
    return traverse(record.body, ref.path[1:])


def resolve_reference(ref: Reference, state: ResolvedState) -> Any:
    """Resolve ``ref`` against ``state``; absent entities or paths give None."""
    record = state.effective(ref.entity)
    if record is None:
        logger.debug("Entity %s not in state, %s left unresolved", ref.entity, ref.path)
        return None
    return value_from_record(record, ref)
