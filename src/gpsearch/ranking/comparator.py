"""Stable, type-directed ordering of search result records.

Records are ordered on one field in three tiers:

1. Records that have the field (non-null) come before records that don't.
2. Present values are grouped by kind: numbers, then strings, then
   booleans, then anything else.
3. Within a kind, numbers descend, strings ascend and True comes before
   False; other values tie.

``reverse`` flips only tier 3. Every tie keeps input order.
"""

import math
from functools import cmp_to_key
from typing import Any, Iterable, List

from pydantic import BaseModel

from gpsearch.records import FieldKind, Record, field_kind, has_field

KIND_RANK = {
    FieldKind.NUMBER: 0,
    FieldKind.STRING: 1,
    FieldKind.BOOLEAN: 2,
    FieldKind.OTHER: 3,
}


def _cmp(left: Any, right: Any) -> int:
    return (left > right) - (left < right)


def _compare_numbers(v1: Any, v2: Any) -> int:
    # NaN is unordered; rank it below every real number.
    nan1 = isinstance(v1, float) and math.isnan(v1)
    nan2 = isinstance(v2, float) and math.isnan(v2)
    if nan1 or nan2:
        return _cmp(nan1, nan2)
    return _cmp(v2, v1)


def _compare_same_kind(kind: FieldKind, v1: Any, v2: Any) -> int:
    if kind == FieldKind.STRING:
        return _cmp(v1, v2)
    if kind == FieldKind.NUMBER:
        return _compare_numbers(v1, v2)
    if kind == FieldKind.BOOLEAN:
        return _cmp(v2, v1)
    return 0


def compare_records(a: Record, b: Record, field: str, reverse: bool = False) -> int:
    """
    Three-way comparison of two records on ``field``.

    Returns:
        Negative if ``a`` sorts first, positive if ``b`` does, 0 on a tie
    """
    has_a = has_field(a, field)
    has_b = has_field(b, field)
    if not has_a or not has_b:
        return _cmp(not has_a, not has_b)

    v1, v2 = a[field], b[field]
    kind1, kind2 = field_kind(v1), field_kind(v2)
    if kind1 != kind2:
        return _cmp(KIND_RANK[kind1], KIND_RANK[kind2])

    result = _compare_same_kind(kind1, v1, v2)
    return -result if reverse else result


def sort_records(records: Iterable[Record], field: str, reverse: bool = False) -> List[Record]:
    """Return a new list of ``records`` stably sorted on ``field``."""
    return sorted(records, key=cmp_to_key(lambda a, b: compare_records(a, b, field, reverse)))


class SortSpec(BaseModel):
    """Field to sort on plus the reverse flag, built once per invocation."""

    field: str
    reverse: bool = False

    def apply(self, records: Iterable[Record]) -> List[Record]:
        return sort_records(records, self.field, self.reverse)


__all__ = ["KIND_RANK", "SortSpec", "compare_records", "sort_records"]
