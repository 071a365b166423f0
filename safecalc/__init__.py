"""safecalc: safe arithmetic expression evaluation.

Infix arithmetic with percentages and parentheses, parsed by recursive
descent. No expression is ever executed as code.

    >>> from safecalc import evaluate
    >>> evaluate("2+2").value
    4.0
"""

from __future__ import annotations

from safecalc.engine.evaluator import EvalResult, evaluate, evaluate_or_raise
from safecalc.engine.tokenizer import tokenize
from safecalc.keypad.session import CalculatorSession
from safecalc.schemas.errors import (
    DivisionByZero,
    EmptyExpression,
    ErrorKind,
    EvalError,
    LexError,
    MalformedNumber,
    NonFiniteResult,
    TooDeeplyNested,
    UnbalancedParentheses,
    UnexpectedCharacter,
    UnexpectedToken,
)
from safecalc.utils.display import format_plain, format_result, normalize_glyphs

__version__ = "0.1.0"

__all__ = [
    "CalculatorSession",
    "DivisionByZero",
    "EmptyExpression",
    "ErrorKind",
    "EvalError",
    "EvalResult",
    "LexError",
    "MalformedNumber",
    "NonFiniteResult",
    "TooDeeplyNested",
    "UnbalancedParentheses",
    "UnexpectedCharacter",
    "UnexpectedToken",
    "evaluate",
    "evaluate_or_raise",
    "format_plain",
    "format_result",
    "normalize_glyphs",
    "tokenize",
]
