"""Search result records and value classification.

A record is a plain dict decoded from the upstream JSON. Any field may be
missing, and the same field may hold different scalar types in different
records, so callers check presence with ``has_field`` and dispatch on
``field_kind`` instead of trusting the raw value. A JSON ``null`` counts
as absent.
"""

from enum import Enum
from typing import Any, Dict, List

Record = Dict[str, Any]
RecordList = List[Record]


class FieldKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OTHER = "other"


def field_kind(value: Any) -> FieldKind:
    """Classify a field value. Booleans are checked before numbers."""
    if isinstance(value, bool):
        return FieldKind.BOOLEAN
    if isinstance(value, (int, float)):
        return FieldKind.NUMBER
    if isinstance(value, str):
        return FieldKind.STRING
    return FieldKind.OTHER


def has_field(record: Record, field: str) -> bool:
    return record.get(field) is not None


__all__ = ["FieldKind", "Record", "RecordList", "field_kind", "has_field"]
