"""
Evaluation of parsed filters against node paths and their properties.

Everything here is a pure function of its arguments, so a filter can be shared
between threads without locking.
"""

from __future__ import annotations

from collections.abc import Sequence

from .exceptions import InvalidNodePathError
from .expressions import (
    FilterExpression,
    FilterOperator,
    NopExpression,
    OperatorExpression,
    PropertyExpression,
    ValueAndPropertyExpression,
    ValueExpression,
)
from .properties import PropertyBag
from .tokenizer import PATH_SEPARATOR


def match_path(
    segments: Sequence[FilterExpression],
    path: str,
    properties: PropertyBag,
) -> bool:
    """
    Check a node path against per-segment filter expressions.

    A path shallower than the filter matches as long as every segment it has
    matches, so the ancestors of selected nodes are selected too. A path deeper
    than the filter only matches when the filter ends in `**`.

    Raises:
        InvalidNodePathError: If the path is empty or does not start with `/`.
    """
    if not path or path[0] != PATH_SEPARATOR:
        raise InvalidNodePathError(
            f"Invalid node path {path!r}, expected root as first character '{PATH_SEPARATOR}'"
        )

    for index, fragment in enumerate(path[1:].split(PATH_SEPARATOR)):
        if index >= len(segments):
            last = segments[-1] if segments else None
            return index > 0 and isinstance(last, ValueExpression) and last.is_match_all_below
        if not evaluate(segments[index], fragment, properties):
            return False
    return True


def evaluate(expr: FilterExpression, segment: str, properties: PropertyBag) -> bool:
    """Evaluate one segment expression against a single path segment."""
    if isinstance(expr, ValueExpression):
        return expr.matches(segment)
    if isinstance(expr, OperatorExpression):
        if expr.operator is FilterOperator.OR:
            return any(evaluate(e, segment, properties) for e in expr.operands)
        if expr.operator is FilterOperator.AND:
            return all(evaluate(e, segment, properties) for e in expr.operands)
        (operand,) = expr.operands
        return not evaluate(operand, segment, properties)
    if isinstance(expr, ValueAndPropertyExpression):
        return expr.value.matches(segment) and match_properties(expr.properties, properties)
    if isinstance(expr, NopExpression):
        return True
    raise TypeError(f"Unsupported segment expression: {type(expr).__name__}")


def match_properties(expr: FilterExpression, properties: PropertyBag) -> bool:
    """
    Evaluate a property filter against a node's properties.

    `key=value` holds when any key/value property matches both patterns; a bare
    token holds when any key/value property has a matching key.
    """
    if isinstance(expr, PropertyExpression):
        return any(
            expr.name.matches(prop.key) and expr.value.matches(prop.value)
            for prop in properties.key_value_pairs()
        )
    if isinstance(expr, ValueExpression):
        return any(expr.matches(prop.key) for prop in properties.key_value_pairs())
    if isinstance(expr, OperatorExpression):
        if expr.operator is FilterOperator.OR:
            return any(match_properties(e, properties) for e in expr.operands)
        if expr.operator is FilterOperator.AND:
            return all(match_properties(e, properties) for e in expr.operands)
        (operand,) = expr.operands
        return not match_properties(operand, properties)
    if isinstance(expr, NopExpression):
        return True
    raise TypeError(f"Unsupported property expression: {type(expr).__name__}")


__all__ = ["evaluate", "match_path", "match_properties"]
