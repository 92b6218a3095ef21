"""Planner — binds settings (mappings, default timeout) to the request assembler."""

from request_planner.config import PlannerSettings
from request_planner.encoders import ValueEncoder
from request_planner.errors import UnknownResourceError
from request_planner.parser.base import QueryItem
from request_planner.planner.assembler import PlanResult, build_requests, plan
from request_planner.request import RequestDescriptor
from request_planner.state import ResolvedState


class Planner:
    """Plans query items against resource mappings."""

    def __init__(self, settings: PlannerSettings | None = None, encoder: ValueEncoder | None = None):
        self.settings = settings or PlannerSettings()
        self.encoder = encoder or ValueEncoder()

    def url_for(self, item: QueryItem) -> str | None:
        if item.is_forced_url:
            return item.url
        if item.resource not in self.settings.mappings:
            raise UnknownResourceError(f"No mapping for resource '{item.resource}'")
        return self.settings.mappings[item.resource]

    def _prepare(self, item: QueryItem) -> QueryItem:
        if item.timeout is None and self.settings.default_timeout is not None:
            return item.model_copy(update={"timeout": self.settings.default_timeout})
        return item

    def build(self, item: QueryItem, state: ResolvedState) -> list[RequestDescriptor]:
        """Plan ``item``, raising on ambiguous expansion."""
        return build_requests(self.url_for(item), self._prepare(item), self.encoder, state)

    def plan(self, item: QueryItem, state: ResolvedState) -> PlanResult:
        return plan(self.url_for(item), self._prepare(item), self.encoder, state)
