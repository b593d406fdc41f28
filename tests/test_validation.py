"""Tests for structural validation of hand-built expression trees."""

from __future__ import annotations

import pytest

from treefilter import (
    MATCH_ALL_BELOW,
    FilterExpression,
    FilterOperator,
    FilterValidationError,
    NopExpression,
    OperatorExpression,
    PropertyExpression,
    ValueAndPropertyExpression,
    ValueExpression,
    validate_expression,
    validate_filter,
)

A = ValueExpression("A")
B = ValueExpression("B")
ALL = ValueExpression(MATCH_ALL_BELOW)


class _Unknown(FilterExpression):
    def to_string(self) -> str:
        return "?"


def test_not_requires_exactly_one_operand() -> None:
    with pytest.raises(FilterValidationError) as exc:
        validate_filter([OperatorExpression(FilterOperator.NOT, (A, B))])
    assert exc.value.fragment == "!AB"


@pytest.mark.parametrize("operator", [FilterOperator.AND, FilterOperator.OR])
def test_binary_operators_require_two_operands(operator: FilterOperator) -> None:
    with pytest.raises(FilterValidationError):
        validate_filter([OperatorExpression(operator, (A,))])


def test_arity_is_checked_recursively() -> None:
    bad = OperatorExpression(FilterOperator.OR, (A,))
    with pytest.raises(FilterValidationError):
        validate_filter([OperatorExpression(FilterOperator.AND, (B, bad))])


def test_match_all_allowed_only_last() -> None:
    validate_filter([A, ALL])
    with pytest.raises(FilterValidationError) as exc:
        validate_filter([ALL, A])
    assert "** wildcard" in str(exc.value)


def test_match_all_nested_in_earlier_segment() -> None:
    nested = OperatorExpression(FilterOperator.OR, (A, ALL))
    with pytest.raises(FilterValidationError):
        validate_filter([nested, B])


def test_separator_in_value_is_rejected() -> None:
    with pytest.raises(FilterValidationError) as exc:
        validate_filter([ValueExpression("A/B")])
    assert exc.value.fragment == "A/B"


def test_property_values_are_not_segment_values() -> None:
    """Slashes and `**` are fine inside a property filter."""
    props = OperatorExpression(
        FilterOperator.AND,
        (
            PropertyExpression(ValueExpression("Url"), ValueExpression("a/b")),
            PropertyExpression(ValueExpression("K"), ALL),
        ),
    )
    validate_filter([ValueAndPropertyExpression(A, props), B])


def test_property_predicate_outside_brackets() -> None:
    with pytest.raises(FilterValidationError):
        validate_filter([PropertyExpression(A, B)])


def test_nested_property_filters() -> None:
    inner = ValueAndPropertyExpression(A, PropertyExpression(A, B))
    with pytest.raises(FilterValidationError):
        validate_filter([ValueAndPropertyExpression(B, inner)])


def test_nop_is_valid() -> None:
    validate_filter([NopExpression(), A])
    validate_expression(NopExpression(), match_all_allowed=False, in_properties=True)


def test_unknown_expression_kind() -> None:
    with pytest.raises(FilterValidationError):
        validate_filter([_Unknown()])
