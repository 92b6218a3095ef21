"""Unified data models for parsed query items.

The query parser converts YAML/JSON documents into these models.
Every parameter node carries its own ``expandable`` flag and ``metadata``
so annotations travel with the value they describe.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

HEADER_MARKER = "headers"


class LiteralValue(BaseModel):
    """A scalar passed through unchanged (after encoding)."""

    kind: Literal["literal"] = "literal"
    value: Any = None
    expandable: bool = True
    metadata: dict = {}

    def to_plain(self) -> Any:
        return self.value


class SequenceValue(BaseModel):
    """An ordered list of parameter values."""

    kind: Literal["sequence"] = "sequence"
    items: list["ParameterValue"]
    expandable: bool = True
    metadata: dict = {}

    def to_plain(self) -> list:
        return [item.to_plain() for item in self.items]


class MapValue(BaseModel):
    """A mapping from key to parameter value."""

    kind: Literal["map"] = "map"
    entries: dict[str, "ParameterValue"]
    expandable: bool = True
    metadata: dict = {}

    def to_plain(self) -> dict:
        return {key: value.to_plain() for key, value in self.entries.items()}


class Reference(BaseModel):
    """A path into the result of a previously resolved entity.

    ``path[0]`` names the entity. ``[entity, "headers", field]`` addresses
    a response header; any other path is walked inside the response body.
    """

    kind: Literal["reference"] = "reference"
    path: list[str | int]
    expandable: bool = True
    metadata: dict = {}

    @property
    def entity(self) -> str:
        return str(self.path[0])

    @property
    def is_header(self) -> bool:
        return (
            len(self.path) >= 3
            and self.path[1] == HEADER_MARKER
            and isinstance(self.path[2], str)
        )

    def to_plain(self) -> dict:
        return {"$ref": list(self.path)}


ParameterValue = Annotated[
    Union[LiteralValue, SequenceValue, MapValue, Reference],
    Field(discriminator="kind"),
]

SequenceValue.model_rebuild()
MapValue.model_rebuild()


class QueryItem(BaseModel):
    """One declarative REST call, possibly expanding into many requests."""

    name: str
    resource: str | None = None  # named endpoint, looked up in mappings
    url: str | None = None  # forced literal URL, no query params derived
    parameters: dict[str, ParameterValue] = {}
    headers: dict[str, str | Reference] = {}
    timeout: int | None = None  # milliseconds
    metadata: dict = {}

    @property
    def is_forced_url(self) -> bool:
        return self.resource is None and self.url is not None
