"""Field projection and plain-text rendering of search results.

Renderer-only: nothing here touches the cache, the network or the input
records.
"""

import json
from typing import Any, Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel, Field

from gpsearch.records import Record

NOT_AVAILABLE = "n/a"

# Defaults for fields the API omits when they are zero/false.
FIELD_DEFAULTS: Dict[str, str] = {
    "fork": "false",
    "stars": "0",
}

class ProjectedView(BaseModel):
    """Rendered line groups, one group per displayed record."""

    fields: List[str]
    groups: List[List[str]] = Field(default_factory=list)
    requested: Optional[int] = None
    available: int = 0

    @property
    def shown(self) -> int:
        return len(self.groups)

    @property
    def truncated(self) -> bool:
        return self.requested is not None and self.requested > self.available


def clamp_limit(limit: Optional[int], available: int) -> int:
    """Number of records to show: ``limit`` bounded by ``available``; None shows all."""
    if limit is None:
        return available
    return max(0, min(limit, available))


def format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def project_record(record: Record, fields: Sequence[str]) -> List[str]:
    """Render ``field: value`` lines for ``fields``, in order, substituting defaults."""
    lines = []
    for field in fields:
        value = record.get(field)
        if value is None:
            rendered = FIELD_DEFAULTS.get(field, NOT_AVAILABLE)
        else:
            rendered = format_value(value)
        lines.append(f"{field}: {rendered}")
    return lines


def render_projection(
    records: Sequence[Record],
    fields: Iterable[str],
    limit: Optional[int] = None,
) -> ProjectedView:
    """
    Project the first ``limit`` records onto ``fields``.

    Args:
        records: Records in display order
        fields: Field names to show, in order
        limit: Maximum number of records. None renders every record; a limit
            above the record count renders what is available.

    Returns:
        ProjectedView with one line group per shown record
    """
    field_list = list(fields)
    count = clamp_limit(limit, len(records))
    groups = [project_record(record, field_list) for record in records[:count]]
    return ProjectedView(
        fields=field_list,
        groups=groups,
        requested=limit,
        available=len(records),
    )


def render_text(view: ProjectedView) -> str:
    """
    Render a view as plain text.

    With several fields each record block is followed by a blank line; a
    single field is listed densely.
    """
    lines: List[str] = []
    if view.truncated:
        lines.append(f"Only {view.available}(<{view.requested}) packages exist, list them all")
    separate = len(view.fields) > 1
    for group in view.groups:
        lines.extend(group)
        if separate:
            lines.append("")
    return "\n".join(lines)


__all__ = [
    "FIELD_DEFAULTS",
    "NOT_AVAILABLE",
    "ProjectedView",
    "clamp_limit",
    "format_value",
    "project_record",
    "render_projection",
    "render_text",
]
