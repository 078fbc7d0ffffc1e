"""Dotted expression paths into decoded JSON documents."""

from typing import Any

ROOT_EXPR = "."


def get_value_for_expr(data: Any, expr: str) -> Any:
    """
    Resolve a dotted field path against a JSON value.

    "." returns the whole document. Numeric segments index into lists.
    Any segment that cannot be resolved yields None.

    Examples:
        get_value_for_expr({"a": {"b": [1, 2]}}, "a.b")    -> [1, 2]
        get_value_for_expr({"a": {"b": [1, 2]}}, "a.b.1")  -> 2
        get_value_for_expr({"a": 1}, "missing")            -> None
    """
    if expr == ROOT_EXPR:
        return data
    value = data
    for part in expr.split("."):
        if not part:
            return None
        if isinstance(value, dict):
            if part not in value:
                return None
            value = value[part]
        elif isinstance(value, list) and part.isdigit():
            index = int(part)
            if index >= len(value):
                return None
            value = value[index]
        else:
            return None
    return value
