"""Request assembler — turns one query item and the resolved state into request descriptors.

    requests = build_requests("http://api/users/:id", item, ValueEncoder(), state)

``build_requests`` raises on ambiguous expansion; ``plan`` returns a
``PlanResult`` carrying either the descriptors or the typed failure.
"""

import logging
from typing import Any

from pydantic import BaseModel

from request_planner import url_matcher
from request_planner.encoders import ValueEncoder
from request_planner.errors import ExpansionError, InvalidParameterRepetition, PlannerError
from request_planner.parser.base import ParameterValue, QueryItem, Reference
from request_planner.request import RequestDescriptor
from request_planner.state import ResolvedState
from .expansion import choose_source, get_expansion_sources
from .interpolate import interpolate_value
from .readiness import are_dependencies_ok
from .resolver import resolve_reference
from .template import build_query

logger = logging.getLogger(__name__)

FAILURE_TYPES: dict[str, type[PlannerError]] = {
    ExpansionError.error_type: ExpansionError,
    InvalidParameterRepetition.error_type: InvalidParameterRepetition,
}


class PlanningFailure(BaseModel):
    error_type: str
    message: str


class PlanResult(BaseModel):
    """Outcome of planning one query item."""

    requests: list[RequestDescriptor] = []
    error: PlanningFailure | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> list[RequestDescriptor]:
        """Return the descriptors, re-raising the failure if there is one."""
        if self.error is not None:
            raise FAILURE_TYPES[self.error.error_type](self.error.message)
        return self.requests


def transform(node: ParameterValue, encoder: ValueEncoder, state: ResolvedState) -> Any:
    """Interpolate then encode one parameter; lists are encoded element-wise."""
    resolved = interpolate_value(node, state)
    if isinstance(resolved, list):
        return [encoder.encode(item, node.metadata) for item in resolved]
    return encoder.encode(resolved, node.metadata)


def resolve_query_item(item: QueryItem, encoder: ValueEncoder, state: ResolvedState) -> dict[str, Any]:
    return {name: transform(value, encoder, state) for name, value in item.parameters.items()}


def strip_nils(value: Any) -> Any:
    """Drop None entries from maps and lists, recursively."""
    if isinstance(value, list):
        return [strip_nils(v) for v in value if v is not None]
    if isinstance(value, dict):
        return {k: strip_nils(v) for k, v in value.items() if v is not None}
    return value


def resolve_headers(item: QueryItem, state: ResolvedState) -> dict[str, str]:
    headers = {}
    for name, value in item.headers.items():
        if isinstance(value, Reference):
            value = resolve_reference(value, state)
        if value is not None:
            headers[name] = str(value)
    return headers


def build_request(
    url_template: str, item: QueryItem, encoder: ValueEncoder, state: ResolvedState
) -> RequestDescriptor | None:
    """Plan a single, non-expanding item. None when a dependency is not ready."""
    if not are_dependencies_ok(item, state):
        logger.debug("Skipping %s: dependencies not ready", item.name)
        return None

    params = strip_nils(resolve_query_item(item, encoder, state))
    query_params = None
    if not item.is_forced_url:
        query_params = url_matcher.dissoc_params(url_template, params)

    return RequestDescriptor(
        url=url_matcher.interpolate(url_template, params),
        resource=item.resource or item.url,
        query_params=query_params,
        headers=resolve_headers(item, state),
        timeout=item.timeout,
        metadata=item.metadata,
    )


def build_requests(
    url_template: str | None, item: QueryItem, encoder: ValueEncoder, state: ResolvedState
) -> list[RequestDescriptor]:
    """Plan ``item``: zero, one, or one request per element of its expansion source.

    Raises ExpansionError when the item would expand on more than one list.
    """
    if item.is_forced_url or url_template is None:
        url_template = item.url
    if url_template is None:
        raise PlannerError(f"Query item '{item.name}' has no URL to build")

    sources = get_expansion_sources(item, state)
    source = choose_source(sources, context=f"Query item '{item.name}' ")
    if source is None:
        request = build_request(url_template, item, encoder, state)
        return [request] if request is not None else []

    requests = []
    for element in source.elements():
        request = build_request(url_template, build_query(item, element, sources), encoder, state)
        if request is not None:
            requests.append(request)
    return requests


def plan(
    url_template: str | None,
    item: QueryItem,
    encoder: ValueEncoder | None,
    state: ResolvedState,
) -> PlanResult:
    """Like ``build_requests`` but reports ambiguity as a failed PlanResult."""
    try:
        requests = build_requests(url_template, item, encoder or ValueEncoder(), state)
    except (ExpansionError, InvalidParameterRepetition) as e:
        logger.info("Planning %s failed: %s", item.name, e.message)
        return PlanResult(error=PlanningFailure(error_type=e.error_type, message=e.message))
    return PlanResult(requests=requests)
