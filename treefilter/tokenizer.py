"""
Tokenizer for tree node filter strings.

Literal text is emitted already escaped for regular expression compilation, with
`*` expanded to `.*`, so the parser never has to think about regex syntax.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum, auto

from .exceptions import FilterSyntaxError

PATH_SEPARATOR = "/"
ESCAPE_CHAR = "\\"
WILDCARD_CHAR = "*"
WILDCARD_PATTERN = ".*"


class TokenType(Enum):
    """Token types for the filter parser."""

    VALUE = auto()  # Literal text (regex-escaped)
    AND = auto()  # &
    OR = auto()  # |
    NOT = auto()  # !
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    LBRACKET = auto()  # [
    RBRACKET = auto()  # ]
    EQUALS = auto()  # =
    SEPARATOR = auto()  # /


_STRUCTURAL = {
    "&": TokenType.AND,
    "|": TokenType.OR,
    "!": TokenType.NOT,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "=": TokenType.EQUALS,
    PATH_SEPARATOR: TokenType.SEPARATOR,
}


@dataclass(frozen=True, slots=True)
class Token:
    """A token from the filter string."""

    type: TokenType
    value: str
    pos: int  # Position in original string for error messages


def tokenize(filter_string: str) -> Iterator[Token]:
    """
    Lazily split a filter string into tokens.

    Raises:
        FilterSyntaxError: If the string ends with an unescaped backslash.
            Tokens preceding the error are still yielded first.
    """
    literal: list[str] = []
    literal_start = 0
    bracket_depth = 0
    i = 0
    length = len(filter_string)

    while i < length:
        ch = filter_string[i]

        if ch == ESCAPE_CHAR:
            if i + 1 >= length:
                raise FilterSyntaxError(
                    "An escape character should not terminate the filter string", position=i
                )
            if not literal:
                literal_start = i
            # Keep the escaped character literal, e.g. \[ stays a bracket, not a property
            literal.append(re.escape(filter_string[i + 1]))
            i += 2
            continue

        if ch == WILDCARD_CHAR:
            if not literal:
                literal_start = i
            literal.append(WILDCARD_PATTERN)
        elif ch == PATH_SEPARATOR and bracket_depth > 0:
            # Property values may contain slashes: Node[Key=a/b]
            if not literal:
                literal_start = i
            literal.append(ch)
        elif ch in _STRUCTURAL:
            if ch == "[":
                bracket_depth += 1
            elif ch == "]":
                bracket_depth -= 1
            if literal:
                yield Token(TokenType.VALUE, "".join(literal), literal_start)
                literal.clear()
            yield Token(_STRUCTURAL[ch], ch, i)
        else:
            if not literal:
                literal_start = i
            literal.append(re.escape(ch))

        i += 1

    if literal:
        yield Token(TokenType.VALUE, "".join(literal), literal_start)


__all__ = ["PATH_SEPARATOR", "Token", "TokenType", "tokenize"]
