"""
Filter / sort engine shared by the in-memory store and client-side fallbacks.

Supported operators:
- "=="             stored value equals the given value
- "in"             stored value appears in the given list
- "array-contains" stored list contains the given value

Any other operator matches every document.
"""

from functools import cmp_to_key
from typing import Any, Iterable, List, Mapping

EQUAL = "=="
IN = "in"
ARRAY_CONTAINS = "array-contains"

SUPPORTED_OPERATORS = {EQUAL, IN, ARRAY_CONTAINS}

_MISSING = object()


def evaluate_condition(data: Mapping[str, Any], field: str, op: str, value: Any) -> bool:
    """Check one (field, op, value) condition against a document's data."""
    stored = data.get(field, _MISSING)

    if op == EQUAL:
        return stored is not _MISSING and stored == value
    if op == IN:
        if not isinstance(value, (list, tuple, set)):
            return False
        return stored is not _MISSING and stored in list(value)
    if op == ARRAY_CONTAINS:
        return isinstance(stored, list) and value in stored
    return True


def matches_all(data: Mapping[str, Any], conditions: Iterable) -> bool:
    """All conditions must hold (AND, never OR)."""
    return all(
        evaluate_condition(data, cond.field, cond.op, cond.value)
        for cond in conditions
    )


def _compare_values(a: Any, b: Any) -> int:
    # missing sorts first; values that cannot be ordered count as equal
    if a is _MISSING and b is _MISSING:
        return 0
    if a is _MISSING:
        return -1
    if b is _MISSING:
        return 1
    try:
        if a < b:
            return -1
        if a > b:
            return 1
    except TypeError:
        return 0
    return 0


def sort_records(records: List[Mapping[str, Any]], field: str, direction: str = "asc") -> List[Mapping[str, Any]]:
    """
    Return records sorted by one field.

    The sort is stable. Records missing the field end up at the start of an
    ascending result and at the end of a descending one.
    """
    descending = direction == "desc"

    def compare(a, b):
        result = _compare_values(a.get(field, _MISSING), b.get(field, _MISSING))
        return -result if descending else result

    return sorted(records, key=cmp_to_key(compare))
