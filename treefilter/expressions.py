"""
Expression tree for parsed tree node filters.

A parsed filter is a tuple of FilterExpression, one per `/`-delimited path
segment. The set of expression kinds is closed: the matcher and the validator
handle every class defined here and reject anything else.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum

# After tokenization `**` becomes `.*.*`
MATCH_ALL_BELOW = ".*.*"

# Characters that must be escaped again when rendering a value back as filter text
_FILTER_SYNTAX_CHARS = frozenset("\\*&|!()[]=/")


class FilterOperator(Enum):
    """Boolean operators of the filter language."""

    AND = "&"
    OR = "|"
    NOT = "!"


class FilterExpression(ABC):
    """Base class for filter expressions."""

    @abstractmethod
    def to_string(self) -> str:
        """Render the expression back into filter syntax."""
        ...

    def __str__(self) -> str:
        return self.to_string()


def _display_value(value: str) -> str:
    """Turn a regex-ready token back into the text a user would type."""
    out: list[str] = []
    i = 0
    while i < len(value):
        if value.startswith(".*", i):
            out.append("*")
            i += 2
            continue
        ch = value[i]
        if ch == "\\" and i + 1 < len(value):
            ch = value[i + 1]
            i += 1
            if ch in _FILTER_SYNTAX_CHARS:
                out.append("\\")
        out.append(ch)
        i += 1
    return "".join(out)


@dataclass(frozen=True)
class ValueExpression(FilterExpression):
    """
    A literal token with `*` wildcards.

    `value` is already a regular expression: literal characters are escaped and
    each `*` is expanded to `.*`. The pattern is compiled up front so matching
    never mutates the expression.
    """

    value: str
    pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "pattern", re.compile(self.value, re.DOTALL))

    @property
    def is_match_all_below(self) -> bool:
        """True for the `**` token, which selects a node and everything under it."""
        return self.value == MATCH_ALL_BELOW

    def matches(self, text: str) -> bool:
        return self.pattern.fullmatch(text) is not None

    def to_string(self) -> str:
        return _display_value(self.value)

    def __repr__(self) -> str:
        return f"ValueExpression({self.to_string()!r})"


@dataclass(frozen=True)
class OperatorExpression(FilterExpression):
    """
    A boolean operator applied to its operands.

    NOT takes exactly one operand. AND/OR take two or more; chains of the same
    operator are flattened, so `A|B|C` is a single OR with three operands.
    """

    operator: FilterOperator
    operands: tuple[FilterExpression, ...]

    def to_string(self) -> str:
        parts = [_wrap(operand) for operand in self.operands]
        if self.operator is FilterOperator.NOT:
            return "!" + "".join(parts)
        return self.operator.value.join(parts)

    def __repr__(self) -> str:
        return f"OperatorExpression({self.operator.name}, {list(self.operands)!r})"


def _wrap(expr: FilterExpression) -> str:
    if isinstance(expr, OperatorExpression):
        return f"({expr.to_string()})"
    return expr.to_string()


@dataclass(frozen=True)
class PropertyExpression(FilterExpression):
    """A `key=value` predicate inside a property filter."""

    name: ValueExpression
    value: ValueExpression

    def to_string(self) -> str:
        return f"{self.name.to_string()}={self.value.to_string()}"


@dataclass(frozen=True)
class ValueAndPropertyExpression(FilterExpression):
    """A node name combined with a bracketed property filter, e.g. `Test[Category=fast]`."""

    value: ValueExpression
    properties: FilterExpression

    def to_string(self) -> str:
        return f"{self.value.to_string()}[{self.properties.to_string()}]"


@dataclass(frozen=True)
class NopExpression(FilterExpression):
    """Matches everything. Never produced by the parser."""

    def to_string(self) -> str:
        return "<nop>"


__all__ = [
    "MATCH_ALL_BELOW",
    "FilterExpression",
    "FilterOperator",
    "NopExpression",
    "OperatorExpression",
    "PropertyExpression",
    "ValueAndPropertyExpression",
    "ValueExpression",
]
