"""
Payload sanitization applied before every document write.

Document databases reject (or silently mangle) empty values, so every
backend strips None-valued keys from a payload before storing it.
"""

from typing import Any


def remove_undefined_values(value: Any) -> Any:
    """
    Recursively drop None-valued keys from mappings.

    Sequences are rebuilt element by element so nested mappings get cleaned,
    but the elements themselves are kept even when None.

    Example:
        remove_undefined_values({"a": 1, "b": None, "c": [{"d": None}]})
        -> {"a": 1, "c": [{}]}
    """
    if isinstance(value, dict):
        return {
            key: remove_undefined_values(item)
            for key, item in value.items()
            if item is not None
        }
    if isinstance(value, (list, tuple)):
        return [remove_undefined_values(item) for item in value]
    return value
