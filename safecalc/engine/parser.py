"""Recursive-descent parser and evaluator.

Grammar, lowest precedence first::

    expression := term (('+'|'-') term)*
    term       := factor (('*'|'/') factor)*
    factor     := unary postfix*
    unary      := '-' unary | primary
    postfix    := '%'
    primary    := NUMBER | '(' expression ')'

Values are computed during the descent; no tree is built. ``%`` divides its
operand by 100 and binds tighter than ``*`` and ``/``, so ``200+10%`` is
``200 + 0.1``.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from safecalc.schemas.errors import (
    DivisionByZero,
    EmptyExpression,
    NonFiniteResult,
    TooDeeplyNested,
    UnbalancedParentheses,
    UnexpectedToken,
)
from safecalc.schemas.tokens import Token, TokenKind

DEFAULT_MAX_DEPTH = 64
DEFAULT_SIGNIFICANT_DIGITS = 12
# Each nesting level costs a handful of Python frames
MAX_DEPTH_LIMIT = 128


class Parser:
    """Single-use parser over an immutable token sequence.

    ``length`` is the length of the source string, used as the position of
    errors found at end of input.
    """

    def __init__(
        self,
        tokens: Sequence[Token],
        length: int = 0,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self.tokens = tokens
        self.length = length
        self.max_depth = max_depth
        self.pos = 0
        self.depth = 0

    def parse(self) -> float:
        """Evaluate the whole token sequence and return the raw float."""
        if not self.tokens:
            raise EmptyExpression()

        value = self._expression()

        token = self._peek()
        if token is not None:
            if token.kind is TokenKind.RPAREN:
                raise UnbalancedParentheses(
                    f"Unmatched ')' at position {token.position}", token.position
                )
            raise UnexpectedToken(
                f"Unexpected {token.describe()} at position {token.position}",
                token.position,
            )
        return value

    # -- token helpers -------------------------------------------------------

    def _peek(self) -> Token | None:
        if self.pos >= len(self.tokens):
            return None
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def _at(self, *kinds: TokenKind) -> bool:
        token = self._peek()
        return token is not None and token.kind in kinds

    # -- grammar rules -------------------------------------------------------

    def _expression(self) -> float:
        value = self._term()
        while self._at(TokenKind.PLUS, TokenKind.MINUS):
            op = self._advance()
            right = self._term()
            value = value + right if op.kind is TokenKind.PLUS else value - right
        return value

    def _term(self) -> float:
        value = self._factor()
        while self._at(TokenKind.STAR, TokenKind.SLASH):
            op = self._advance()
            right = self._factor()
            if op.kind is TokenKind.STAR:
                value *= right
            elif right == 0:
                raise DivisionByZero(
                    f"Division by zero at position {op.position}", op.position
                )
            else:
                value /= right
        return value

    def _factor(self) -> float:
        value = self._unary()
        while self._at(TokenKind.PERCENT):
            self._advance()
            value /= 100
        return value

    def _unary(self) -> float:
        # Count leading minus signs instead of recursing so "-----1" stays flat
        negate = False
        while self._at(TokenKind.MINUS):
            self._advance()
            negate = not negate
        value = self._primary()
        return -value if negate else value

    def _primary(self) -> float:
        token = self._peek()
        if token is None:
            if self.depth > 0:
                raise UnbalancedParentheses(
                    "Missing ')' at end of expression", self.length
                )
            raise UnexpectedToken(
                f"Unexpected end of expression at position {self.length}",
                self.length,
            )

        if token.kind is TokenKind.NUMBER:
            self._advance()
            return token.value

        if token.kind is TokenKind.LPAREN:
            return self._group()

        if token.kind is TokenKind.RPAREN and self.depth == 0:
            raise UnbalancedParentheses(
                f"Unmatched ')' at position {token.position}", token.position
            )
        raise UnexpectedToken(
            f"Expected a number or '(' but found {token.describe()} "
            f"at position {token.position}",
            token.position,
        )

    def _group(self) -> float:
        opening = self._advance()
        if self.depth >= self.max_depth:
            raise TooDeeplyNested(
                f"Parentheses nested deeper than {self.max_depth} "
                f"at position {opening.position}",
                opening.position,
            )
        self.depth += 1
        value = self._expression()
        closing = self._peek()
        if closing is None:
            raise UnbalancedParentheses(
                f"Missing ')' for '(' at position {opening.position}",
                opening.position,
            )
        if closing.kind is not TokenKind.RPAREN:
            raise UnexpectedToken(
                f"Expected ')' but found {closing.describe()} "
                f"at position {closing.position}",
                closing.position,
            )
        self._advance()
        self.depth -= 1
        return value


def round_significant(value: float, digits: int = DEFAULT_SIGNIFICANT_DIGITS) -> float:
    """Round to ``digits`` significant decimal digits; ``-0.0`` becomes ``0.0``."""
    return float(f"{value:.{digits}g}") + 0.0


def evaluate_tokens(
    tokens: Sequence[Token],
    *,
    length: int = 0,
    max_depth: int = DEFAULT_MAX_DEPTH,
    significant_digits: int = DEFAULT_SIGNIFICANT_DIGITS,
) -> float:
    """Parse and evaluate ``tokens``, returning the rounded finite result.

    Raises:
        EvalError: Any parse or arithmetic failure (see ``safecalc.schemas.errors``).
    """
    raw = Parser(tokens, length=length, max_depth=max_depth).parse()
    if not math.isfinite(raw):
        raise NonFiniteResult(f"Result is not a finite number ({raw})")
    return round_significant(raw, significant_digits)
