"""Typed evaluation errors.

Every failure the evaluator can report is an ``EvalError`` subclass carrying
an ``ErrorKind`` and, where it makes sense, the 0-based position in the input
that caused it. ``evaluate`` returns these as values; ``tokenize`` and the
parser raise them.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    """Canonical error kinds exposed to callers."""

    UNEXPECTED_CHARACTER = "UnexpectedCharacter"
    MALFORMED_NUMBER = "MalformedNumber"
    DIVISION_BY_ZERO = "DivisionByZero"
    UNBALANCED_PARENTHESES = "UnbalancedParentheses"
    UNEXPECTED_TOKEN = "UnexpectedToken"
    EMPTY_EXPRESSION = "EmptyExpression"
    NON_FINITE_RESULT = "NonFiniteResult"
    TOO_DEEPLY_NESTED = "TooDeeplyNested"


class EvalError(Exception):
    """Base class for all evaluation failures."""

    kind: ErrorKind

    def __init__(self, message: str, position: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EvalError):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.position == other.position
            and self.message == other.message
        )

    def __hash__(self) -> int:
        return hash((type(self), self.position, self.message))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, position={self.position})"

    def to_dict(self) -> dict[str, object]:
        return {
            "error": self.kind.value,
            "detail": self.message,
            "position": self.position,
        }


class LexError(EvalError):
    """Failure raised while tokenizing."""


class UnexpectedCharacter(LexError):
    kind = ErrorKind.UNEXPECTED_CHARACTER

    def __init__(self, char: str, position: int) -> None:
        super().__init__(f"Unexpected character {char!r} at position {position}", position)
        self.char = char


class MalformedNumber(LexError):
    kind = ErrorKind.MALFORMED_NUMBER


class DivisionByZero(EvalError):
    kind = ErrorKind.DIVISION_BY_ZERO


class UnbalancedParentheses(EvalError):
    kind = ErrorKind.UNBALANCED_PARENTHESES


class UnexpectedToken(EvalError):
    kind = ErrorKind.UNEXPECTED_TOKEN


class EmptyExpression(EvalError):
    kind = ErrorKind.EMPTY_EXPRESSION

    def __init__(self) -> None:
        super().__init__("Expression is empty")


class NonFiniteResult(EvalError):
    kind = ErrorKind.NON_FINITE_RESULT


class TooDeeplyNested(EvalError):
    kind = ErrorKind.TOO_DEEPLY_NESTED
