"""Resolved state: results of the query items already executed.

The scheduler owns the state and only ever appends to it. The planner
reads it; nothing here mutates a state in place.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel


class ResponseRecord(BaseModel):
    """A single HTTP response as seen by the planner."""

    status: int | None = None
    body: Any = None
    headers: dict = {}

    @property
    def success(self) -> bool:
        return self.status is not None and 200 <= self.status < 300


EntityResult = ResponseRecord | list[ResponseRecord]


def effective_result(result: EntityResult | None) -> ResponseRecord | None:
    """Collapse an expanded entity into one record.

    The record with the highest status wins; its body is replaced by the
    list of every underlying body so per-element references still work.
    """
    if result is None or isinstance(result, ResponseRecord):
        return result
    ordered = sorted(result, key=lambda r: (r.status is not None, r.status or 0))
    highest = ordered[-1] if ordered else ResponseRecord()
    return highest.model_copy(update={"body": [r.body for r in result]})


class ResolvedState(BaseModel):
    """Ordered (entity name, result) pairs, in completion order."""

    done: list[tuple[str, EntityResult]] = []

    def find(self, name: str) -> EntityResult | None:
        """Return the first result recorded under ``name``."""
        for entity, result in self.done:
            if entity == name:
                return result
        return None

    def effective(self, name: str) -> ResponseRecord | None:
        return effective_result(self.find(name))

    def append(self, name: str, result: EntityResult) -> "ResolvedState":
        """Return a new state with one more resolved entity."""
        return ResolvedState(done=[*self.done, (name, result)])

    def names(self) -> list[str]:
        return [entity for entity, _ in self.done]


def load_state(file_path: Path) -> ResolvedState:
    """Load a state file.

    Accepts a list of ``{name, result}`` entries or a mapping of
    entity name to result; a result is a response record or a list of them.
    """
    doc = yaml.safe_load(file_path.read_text(encoding="utf-8")) or []
    if isinstance(doc, dict):
        doc = doc.get("done", [{"name": k, "result": v} for k, v in doc.items()])

    done = []
    for entry in doc:
        result = entry["result"]
        if isinstance(result, list):
            done.append((entry["name"], [ResponseRecord(**r) for r in result]))
        else:
            done.append((entry["name"], ResponseRecord(**result)))
    return ResolvedState(done=done)
