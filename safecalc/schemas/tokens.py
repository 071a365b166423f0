"""Token definitions shared by the tokenizer and the parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class TokenKind(StrEnum):
    """Canonical token kinds recognized by the tokenizer."""

    NUMBER = "number"
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    PERCENT = "%"
    LPAREN = "("
    RPAREN = ")"


# Single-character operators and parentheses
SYMBOL_KINDS: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexical unit.

    ``value`` is only set for NUMBER tokens. ``position`` is the 0-based
    offset of the token's first character in the input string.
    """

    kind: TokenKind
    position: int
    value: float | None = None

    def describe(self) -> str:
        if self.kind is TokenKind.NUMBER:
            return f"number {self.value:g}"
        return f"'{self.kind.value}'"
