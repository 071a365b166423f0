"""Public evaluation entry point.

``evaluate`` is a pure function of its input string: it tokenizes, parses,
and returns an ``EvalResult`` that holds either the finite value or the typed
error. Nothing is executed and nothing persists between calls.
"""

from __future__ import annotations

from dataclasses import dataclass

from safecalc.engine.parser import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_SIGNIFICANT_DIGITS,
    MAX_DEPTH_LIMIT,
    evaluate_tokens,
)
from safecalc.engine.tokenizer import tokenize
from safecalc.schemas.errors import EvalError


@dataclass(frozen=True, slots=True)
class EvalResult:
    """Outcome of one evaluation: exactly one of ``value`` / ``error`` is set."""

    value: float | None = None
    error: EvalError | None = None

    def __post_init__(self) -> None:
        if (self.value is None) == (self.error is None):
            raise ValueError("EvalResult needs exactly one of value or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> float:
        """Return the value, or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value


def evaluate_or_raise(
    expression: str,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    significant_digits: int = DEFAULT_SIGNIFICANT_DIGITS,
) -> float:
    """Evaluate ``expression`` and return the value, raising ``EvalError`` on failure."""
    if not isinstance(expression, str):
        raise TypeError(f"expression must be str, not {type(expression).__name__}")
    if not 1 <= max_depth <= MAX_DEPTH_LIMIT:
        raise ValueError(f"max_depth must be between 1 and {MAX_DEPTH_LIMIT}, got {max_depth}")
    tokens = tokenize(expression)
    return evaluate_tokens(
        tokens,
        length=len(expression),
        max_depth=max_depth,
        significant_digits=significant_digits,
    )


def evaluate(
    expression: str,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    significant_digits: int = DEFAULT_SIGNIFICANT_DIGITS,
) -> EvalResult:
    """Evaluate an arithmetic expression.

    Supports ``+ - * /``, postfix ``%`` (divide by 100), unary minus and
    parentheses over decimal numbers.

    Args:
        expression: ASCII expression string, e.g. ``"200+10%"``.
        max_depth: Maximum parenthesis nesting depth.
        significant_digits: Digits kept when rounding the result.

    Returns:
        ``EvalResult`` with the rounded value, or with the ``EvalError``
        describing why evaluation failed.

    Examples:
        "2+2"      → EvalResult(value=4.0)
        "(1+2"     → EvalResult(error=UnbalancedParentheses(...))
        "10/0"     → EvalResult(error=DivisionByZero(...))
    """
    try:
        value = evaluate_or_raise(
            expression,
            max_depth=max_depth,
            significant_digits=significant_digits,
        )
    except EvalError as e:
        return EvalResult(error=e)
    return EvalResult(value=value)
