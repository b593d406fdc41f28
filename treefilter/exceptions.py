"""
Exceptions raised by the tree node filter.

All library errors derive from TreeFilterError, which is itself a ValueError so
callers that only care about "bad input" can catch the builtin.
"""

from __future__ import annotations


class TreeFilterError(ValueError):
    """Base class for tree node filter errors."""


class FilterSyntaxError(TreeFilterError):
    """
    The filter string could not be tokenized or parsed.

    Covers lexical errors (a dangling escape character) as well as syntax errors
    such as unbalanced brackets or an operator where an operand was expected.
    """

    def __init__(self, message: str, *, position: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.message} (at position {self.position})"


class FilterValidationError(TreeFilterError):
    """The filter parsed, but the resulting expression tree is not valid."""

    def __init__(self, message: str, *, fragment: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.fragment = fragment

    def __str__(self) -> str:
        return self.message


class InvalidNodePathError(TreeFilterError):
    """A candidate node path passed to matches() is malformed."""


__all__ = [
    "FilterSyntaxError",
    "FilterValidationError",
    "InvalidNodePathError",
    "TreeFilterError",
]
