"""URL template matching.

Templates use ``:name`` or ``{name}`` placeholders, e.g.
``http://api.example.com/users/:id/orders`` or ``/pets/{petId}``.
"""

import re
from typing import Any
from urllib.parse import quote

PLACEHOLDER_RE = re.compile(r"(?<=/):([A-Za-z_][\w-]*)|\{([A-Za-z_][\w-]*)\}")


def placeholders(template: str) -> list[str]:
    """Placeholder names in order of appearance."""
    return [m.group(1) or m.group(2) for m in PLACEHOLDER_RE.finditer(template)]


def _format(value: Any) -> str:
    if isinstance(value, list):
        return ",".join(quote(str(v), safe="") for v in value)
    return quote(str(value), safe="")


def interpolate(template: str, params: dict[str, Any]) -> str:
    """Substitute placeholders; those with no value are left in place."""

    def _replace(match: re.Match) -> str:
        name = match.group(1) or match.group(2)
        value = params.get(name)
        if value is None:
            return match.group(0)
        return _format(value)

    return PLACEHOLDER_RE.sub(_replace, template)


def dissoc_params(template: str, params: dict[str, Any]) -> dict[str, Any]:
    """Parameters not consumed by a placeholder of ``template``."""
    used = set(placeholders(template))
    return {k: v for k, v in params.items() if k not in used}
