"""Operator table for comparison assertions."""

from __future__ import annotations

import operator
from typing import Any, Callable

_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "in": lambda left, right: left in right,
    "not in": lambda left, right: left not in right,
    "is": operator.is_,
    "is not": operator.is_not,
}


def resolve_operator(op: str) -> Callable[[Any, Any], bool]:
    fn = _OPERATORS.get(op)
    if fn is None:
        raise ValueError(
            f"Unknown comparison operator: {op!r}. "
            f"Available: {', '.join(_OPERATORS)}"
        )
    return fn


def render_comparison(left: Any, op: str, right: Any) -> str:
    """Render the operands the way failing assertions print them."""
    return f"<<{left!r} {op} {right!r}>>"
