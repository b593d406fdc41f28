"""
Parser for tree node filter strings.

This is Dijkstra's shunting-yard algorithm over two stacks: pending expressions
and pending operators. For `A | B`, A goes on the expression stack, `|` on the
operator stack and B on the expression stack; operators are then applied to the
topmost expressions until the operator stack is empty.

Grammar:

    FILTER    = EXPR ('/' EXPR)*
    EXPR      = '(' EXPR ')' | EXPR ('&' | '|') EXPR | '!' EXPR | NODE
    NODE      = TOKEN | TOKEN '[' PROP_EXPR ']'
    PROP_EXPR = '(' PROP_EXPR ')' | PROP_EXPR ('&' | '|') PROP_EXPR
              | TOKEN '=' TOKEN | TOKEN

Precedence, tightest first: `=` (inside brackets only), `!`, `&`, `|`, `/`.
"""

from __future__ import annotations

from enum import IntEnum

from .exceptions import FilterSyntaxError
from .expressions import (
    FilterExpression,
    FilterOperator,
    OperatorExpression,
    PropertyExpression,
    ValueAndPropertyExpression,
    ValueExpression,
)
from .tokenizer import Token, TokenType, tokenize
from .validation import validate_filter


class _OperatorKind(IntEnum):
    """Operator stack entries, ordered by binding strength."""

    # Barriers: only removed by their closing token, never by precedence
    GROUP = 0  # (
    PROPERTY = 1  # [
    SEPARATOR = 2  # /
    OR = 3
    AND = 4
    NOT = 5
    EQUALS = 6


_BARRIERS = (_OperatorKind.GROUP, _OperatorKind.PROPERTY)

_BOOLEAN_OPERATORS = {
    _OperatorKind.AND: FilterOperator.AND,
    _OperatorKind.OR: FilterOperator.OR,
}


class _Parser:
    """Shunting-yard parser producing one expression per path segment."""

    def __init__(self, filter_string: str):
        self.filter_string = filter_string
        self.expressions: list[FilterExpression] = []
        self.operators: list[tuple[_OperatorKind, int]] = []
        # Operators are not allowed at the start of an expression, right after
        # another operator or right after an opening bracket.
        self.operator_allowed = False
        # `[` is only allowed directly after a node value; A[P1=1][P2=2] and
        # nested properties like A[P1=B[P2=C]] are rejected.
        self.property_allowed = False
        self.group_depth = 0
        self.in_property = False
        # Last operator still waiting for its right-hand operand
        self.pending: Token | None = None
        self.previous: Token | None = None

    def parse(self) -> tuple[FilterExpression, ...]:
        """Parse the filter string into per-segment expressions (unvalidated)."""
        for token in tokenize(self.filter_string):
            self._consume(token)
            self.previous = token
        return self._finish()

    # -------------------------------------------------------------------------
    # Token handlers
    # -------------------------------------------------------------------------

    def _consume(self, token: Token) -> None:
        t = token.type
        if t is TokenType.VALUE:
            self._on_value(token)
        elif t in (TokenType.AND, TokenType.OR):
            self._on_boolean(token)
        elif t is TokenType.NOT:
            self._on_not(token)
        elif t is TokenType.SEPARATOR:
            self._on_separator(token)
        elif t is TokenType.LPAREN:
            self._on_lparen(token)
        elif t is TokenType.RPAREN:
            self._on_rparen(token)
        elif t is TokenType.LBRACKET:
            self._on_lbracket(token)
        elif t is TokenType.RBRACKET:
            self._on_rbracket(token)
        elif t is TokenType.EQUALS:
            self._on_equals(token)
        else:  # pragma: no cover
            raise FilterSyntaxError(f"Unexpected token '{token.value}'", position=token.pos)

    def _on_value(self, token: Token) -> None:
        if self.operator_allowed:
            # e.g. "(A)B" or "A[P=1]B"
            raise FilterSyntaxError(
                f"Unexpected value '{self.filter_string[token.pos :]}', expected an operator",
                position=token.pos,
            )
        self.expressions.append(ValueExpression(token.value))
        self.operator_allowed = True
        self.property_allowed = True
        self.pending = None

    def _on_boolean(self, token: Token) -> None:
        if not self.operator_allowed:
            raise FilterSyntaxError(
                f"Unexpected operator '{token.value}', expected an operand", position=token.pos
            )
        kind = _OperatorKind.AND if token.type is TokenType.AND else _OperatorKind.OR
        self._push_operator(kind, token.pos)
        self.operator_allowed = False
        self.property_allowed = False
        self.pending = token

    def _on_not(self, token: Token) -> None:
        if self.operator_allowed:
            raise FilterSyntaxError("'!' must precede an operand", position=token.pos)
        # Prefix operator: nothing to its left can be reduced yet
        self.operators.append((_OperatorKind.NOT, token.pos))
        self.property_allowed = False
        self.pending = token

    def _on_separator(self, token: Token) -> None:
        if self.pending is not None:
            raise FilterSyntaxError(
                f"Expected an operand after '{self.pending.value}'", position=token.pos
            )
        if self.previous is not None and self.previous.type is TokenType.SEPARATOR:
            raise FilterSyntaxError("Empty path segment", position=token.pos)
        if self.group_depth > 0:
            raise FilterSyntaxError("Path separator is not allowed inside '('", position=token.pos)
        self._push_operator(_OperatorKind.SEPARATOR, token.pos)
        self.operator_allowed = False
        self.property_allowed = False

    def _on_lparen(self, token: Token) -> None:
        if self.operator_allowed:
            raise FilterSyntaxError("Unexpected '(', expected an operator", position=token.pos)
        self.operators.append((_OperatorKind.GROUP, token.pos))
        self.group_depth += 1
        self.operator_allowed = False
        self.property_allowed = False
        self.pending = token

    def _on_rparen(self, token: Token) -> None:
        # If an operator is not allowed we are at the start of an expression, e.g. "()"
        if not self.operator_allowed:
            raise FilterSyntaxError("Unexpected ')', expected an operand", position=token.pos)
        self._reduce_until(_OperatorKind.GROUP, token)
        self.group_depth -= 1
        self.operator_allowed = True
        self.property_allowed = False

    def _on_lbracket(self, token: Token) -> None:
        if not self.property_allowed or self.in_property:
            raise FilterSyntaxError(
                "A property filter '[' must directly follow a node value", position=token.pos
            )
        self.operators.append((_OperatorKind.PROPERTY, token.pos))
        self.in_property = True
        self.operator_allowed = False
        self.property_allowed = False
        self.pending = token

    def _on_rbracket(self, token: Token) -> None:
        if not self.operator_allowed:
            raise FilterSyntaxError("Unexpected ']', expected an operand", position=token.pos)
        self._reduce_until(_OperatorKind.PROPERTY, token)

        # We should end up with a node value and its property filter on top
        properties = self._pop_operand(token.pos)
        node = self._pop_operand(token.pos)
        if not isinstance(node, ValueExpression):
            raise FilterSyntaxError(
                "A property filter must follow a plain node value", position=token.pos
            )
        self.expressions.append(ValueAndPropertyExpression(node, properties))
        self.in_property = False
        self.operator_allowed = True
        self.property_allowed = False

    def _on_equals(self, token: Token) -> None:
        if not self.in_property:
            raise FilterSyntaxError(
                "'=' is only allowed inside a property filter '[...]'", position=token.pos
            )
        if not self.operator_allowed:
            raise FilterSyntaxError("Unexpected '=', expected an operand", position=token.pos)
        # Binds tighter than anything else inside the brackets
        self.operators.append((_OperatorKind.EQUALS, token.pos))
        self.operator_allowed = False
        self.property_allowed = False
        self.pending = token

    def _finish(self) -> tuple[FilterExpression, ...]:
        if self.pending is not None:
            raise FilterSyntaxError(
                f"Unexpected end of filter, expected an operand after '{self.pending.value}'",
                position=self.pending.pos,
            )

        # A valid filter ends as processed separators plus one unprocessed expression
        while self.operators:
            kind, pos = self.operators.pop()
            if kind is _OperatorKind.SEPARATOR:
                continue
            if kind is _OperatorKind.GROUP:
                raise FilterSyntaxError("Unbalanced parentheses: '(' is never closed", position=pos)
            if kind is _OperatorKind.PROPERTY:
                raise FilterSyntaxError("Unbalanced brackets: '[' is never closed", position=pos)
            self._reduce(kind, pos)

        if not self.expressions:
            raise FilterSyntaxError("Empty filter expression")
        return tuple(self.expressions)

    # -------------------------------------------------------------------------
    # Stack operations
    # -------------------------------------------------------------------------

    def _push_operator(self, kind: _OperatorKind, pos: int) -> None:
        # Popping naturally groups A Op1 B Op2 C as A Op1 (B Op2 C). When Op1 binds
        # tighter the result must be (A Op1 B) Op2 C, so reduce those first.
        while self.operators:
            top, top_pos = self.operators[-1]
            if top in _BARRIERS or top <= kind:
                break
            self.operators.pop()
            self._reduce(top, top_pos)
        self.operators.append((kind, pos))

    def _reduce_until(self, barrier: _OperatorKind, token: Token) -> None:
        """Reduce operators until the matching opening barrier is removed."""
        expected = "(" if barrier is _OperatorKind.GROUP else "["
        while True:
            if not self.operators:
                # e.g. "A)" or "A]"
                raise FilterSyntaxError(
                    f"Unbalanced '{token.value}': no matching '{expected}'", position=token.pos
                )
            kind, pos = self.operators.pop()
            if kind is barrier:
                return
            if kind in _BARRIERS:
                opener = "(" if kind is _OperatorKind.GROUP else "["
                raise FilterSyntaxError(
                    f"Unbalanced '{token.value}': '{opener}' at position {pos} is not closed",
                    position=token.pos,
                )
            self._reduce(kind, pos)

    def _reduce(self, kind: _OperatorKind, pos: int) -> None:
        if kind in _BOOLEAN_OPERATORS:
            operands = [self._pop_operand(pos), self._pop_operand(pos)]
            # Fold following operators of the same kind into the same node so that
            # A | B | C is represented as OR {A, B, C}
            while self.operators and self.operators[-1][0] is kind:
                _, pos = self.operators.pop()
                operands.append(self._pop_operand(pos))
            operands.reverse()
            self.expressions.append(
                OperatorExpression(_BOOLEAN_OPERATORS[kind], tuple(operands))
            )
        elif kind is _OperatorKind.NOT:
            operand = self._pop_operand(pos)
            self.expressions.append(OperatorExpression(FilterOperator.NOT, (operand,)))
        elif kind is _OperatorKind.EQUALS:
            value = self._pop_operand(pos)
            name = self._pop_operand(pos)
            if not isinstance(name, ValueExpression) or not isinstance(value, ValueExpression):
                raise FilterSyntaxError("Both sides of '=' must be plain values", position=pos)
            self.expressions.append(PropertyExpression(name, value))
        else:
            # e.g. a '/' reaching reduction in the middle of a '( ... )'
            raise FilterSyntaxError("Invalid input filter string", position=pos)

    def _pop_operand(self, pos: int) -> FilterExpression:
        if not self.expressions:
            raise FilterSyntaxError("Missing operand", position=pos)
        return self.expressions.pop()


def parse(filter_string: str) -> tuple[FilterExpression, ...]:
    """
    Parse and validate a filter string.

    Args:
        filter_string: The filter, e.g. ``/MyAssembly/MyNamespace/(A|B)/**``

    Returns:
        One expression per `/`-delimited segment, in left-to-right order.

    Raises:
        FilterSyntaxError: If the string cannot be tokenized or parsed.
        FilterValidationError: If the parsed tree breaks a structural rule.

    Examples:
        >>> [str(segment) for segment in parse("/A|B/C[Category=fast]")]
        ['A|B', 'C[Category=fast]']
    """
    if not isinstance(filter_string, str):
        raise TypeError(f"filter must be a str, got {type(filter_string).__name__}")

    segments = _Parser(filter_string).parse()
    validate_filter(segments)
    return segments


__all__ = ["parse"]
