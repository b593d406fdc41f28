"""Structural validation of parsed filters."""

from __future__ import annotations

from collections.abc import Sequence

from .exceptions import FilterValidationError
from .expressions import (
    FilterExpression,
    FilterOperator,
    NopExpression,
    OperatorExpression,
    PropertyExpression,
    ValueAndPropertyExpression,
    ValueExpression,
)
from .tokenizer import PATH_SEPARATOR


def validate_filter(segments: Sequence[FilterExpression]) -> None:
    """
    Validate every segment of a parsed filter.

    The `**` wildcard is only accepted in the final segment.

    Raises:
        FilterValidationError: On the first invalid fragment found.
    """
    last = len(segments) - 1
    for index, segment in enumerate(segments):
        validate_expression(segment, match_all_allowed=index == last)


def validate_expression(
    expr: FilterExpression,
    *,
    match_all_allowed: bool,
    in_properties: bool = False,
) -> None:
    """Recursively validate a single segment (or property filter) expression."""
    if isinstance(expr, OperatorExpression):
        count = len(expr.operands)
        if expr.operator is FilterOperator.NOT and count != 1:
            raise FilterValidationError(
                f"Operator '!' requires exactly one operand, got {count}",
                fragment=expr.to_string(),
            )
        if expr.operator is not FilterOperator.NOT and count < 2:
            raise FilterValidationError(
                f"Operator '{expr.operator.value}' requires at least two operands, got {count}",
                fragment=expr.to_string(),
            )
        for operand in expr.operands:
            validate_expression(
                operand, match_all_allowed=match_all_allowed, in_properties=in_properties
            )
        return

    if isinstance(expr, ValueExpression):
        if in_properties:
            return
        if PATH_SEPARATOR in expr.value:
            raise FilterValidationError(
                f'A filter "{expr.to_string()}" should not contain a {PATH_SEPARATOR} character.',
                fragment=expr.to_string(),
            )
        if expr.is_match_all_below and not match_all_allowed:
            raise FilterValidationError(
                "Only the final filter path can contain ** wildcard.",
                fragment=expr.to_string(),
            )
        return

    if isinstance(expr, ValueAndPropertyExpression):
        if in_properties:
            raise FilterValidationError(
                "Property filters cannot be nested", fragment=expr.to_string()
            )
        validate_expression(expr.value, match_all_allowed=match_all_allowed)
        validate_expression(expr.properties, match_all_allowed=True, in_properties=True)
        return

    if isinstance(expr, PropertyExpression):
        if not in_properties:
            raise FilterValidationError(
                f"'{expr.to_string()}' is only allowed inside a property filter '[...]'",
                fragment=expr.to_string(),
            )
        return

    if isinstance(expr, NopExpression):
        return

    raise FilterValidationError(f"Unsupported filter expression: {type(expr).__name__}")


__all__ = ["validate_expression", "validate_filter"]
