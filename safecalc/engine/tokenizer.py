"""Lexical analysis for arithmetic expressions.

The accepted character class is ASCII digits, ``+ - * / % ( ) .`` and ASCII
whitespace. The whole input is checked against it before any token is
produced, so a stray character always wins over a malformed number.
"""

from __future__ import annotations

from safecalc.schemas.errors import MalformedNumber, UnexpectedCharacter
from safecalc.schemas.tokens import SYMBOL_KINDS, Token, TokenKind

DIGITS = frozenset("0123456789")
WHITESPACE = frozenset(" \t\r\n\f\v")
ALLOWED_CHARACTERS = DIGITS | WHITESPACE | frozenset(SYMBOL_KINDS) | {"."}


def check_characters(expression: str) -> None:
    """Raise ``UnexpectedCharacter`` for the first character outside the class."""
    for position, char in enumerate(expression):
        if char not in ALLOWED_CHARACTERS:
            raise UnexpectedCharacter(char, position)


def _scan_number(expression: str, start: int) -> tuple[Token, int]:
    """Consume a maximal run of digits and dots starting at ``start``."""
    end = start
    dot_at: int | None = None
    while end < len(expression) and (expression[end] in DIGITS or expression[end] == "."):
        if expression[end] == ".":
            if dot_at is not None:
                raise MalformedNumber(
                    f"Second decimal point at position {end}", end
                )
            dot_at = end
        end += 1

    text = expression[start:end]
    if text == ".":
        raise MalformedNumber(f"Decimal point without digits at position {start}", start)
    return Token(TokenKind.NUMBER, start, float(text)), end


def tokenize(expression: str) -> tuple[Token, ...]:
    """Convert an expression string into an ordered tuple of tokens.

    Args:
        expression: Raw ASCII expression. Visual glyphs (``×``, ``÷``, ``−``)
            must be normalized by the caller first.

    Returns:
        The tokens in input order. Empty for blank input.

    Raises:
        UnexpectedCharacter: A character outside the accepted class.
        MalformedNumber: A numeric literal with two decimal points or no digits.
    """
    check_characters(expression)

    tokens: list[Token] = []
    i = 0
    while i < len(expression):
        char = expression[i]
        if char in WHITESPACE:
            i += 1
            continue
        if char in DIGITS or char == ".":
            token, i = _scan_number(expression, i)
            tokens.append(token)
            continue
        tokens.append(Token(SYMBOL_KINDS[char], i))
        i += 1
    return tuple(tokens)
