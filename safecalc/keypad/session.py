"""Keypad session: the state of an expression being typed.

A ``CalculatorSession`` is owned by one caller (a REPL, a widget, a test)
and passed nothing global. It keeps the typed text with visual glyphs and
hands a normalized copy to ``evaluate`` on each submission.
"""

from __future__ import annotations

import structlog

from safecalc.engine.evaluator import evaluate
from safecalc.schemas.errors import EvalError
from safecalc.utils.display import ERROR_DISPLAY, format_plain, format_result, normalize_glyphs

logger = structlog.get_logger(__name__)

# Keyboard key -> text appended to the expression
KEY_TEXT: dict[str, str] = {
    **{d: d for d in "0123456789"},
    ".": ".",
    "(": "(",
    ")": ")",
    "+": "+",
    "%": "%",
    "-": "−",
    "*": "×",
    "/": "÷",
    "NumpadAdd": "+",
    "NumpadSubtract": "−",
    "NumpadMultiply": "×",
    "NumpadDivide": "÷",
}

EQUALS_KEYS = frozenset({"Enter", "NumpadEnter", "="})
BACKSPACE_KEYS = frozenset({"Backspace"})
CLEAR_KEYS = frozenset({"Escape"})

# Typed text that continues from the previous result instead of replacing it
_CHAIN_OPERATORS = ("+", "−", "-", "×", "*", "÷", "/", "%")


class CalculatorSession:
    """Caller-owned calculator state.

    Limits not given here come from the ``[evaluator]`` table of calculator.toml.

    Args:
        max_depth: Parenthesis nesting cap passed to ``evaluate``.
        significant_digits: Rounding passed to ``evaluate``.
    """

    def __init__(self, *, max_depth: int | None = None, significant_digits: int | None = None) -> None:
        from safecalc.config import get_calc_settings

        self._eval_kwargs: dict[str, int] = get_calc_settings().evaluate_kwargs()
        if max_depth is not None:
            self._eval_kwargs["max_depth"] = max_depth
        if significant_digits is not None:
            self._eval_kwargs["significant_digits"] = significant_digits
        self.expression = ""
        self.last_result: float | None = None
        self.last_error: EvalError | None = None
        self.display = "0"

    def append(self, text: str) -> None:
        if not text:
            return
        if self.last_result is not None and not self.expression:
            if text[0] in "0123456789.":
                self.last_result = None
                self.display = "0"
            elif text.startswith(_CHAIN_OPERATORS):
                self.expression = format_plain(self.last_result)
        self.expression += text

    def clear(self) -> None:
        self.expression = ""
        self.last_result = None
        self.last_error = None
        self.display = "0"

    def backspace(self) -> None:
        if self.expression:
            self.expression = self.expression[:-1]
        else:
            self.last_result = None
            self.display = "0"

    def equals(self) -> float | None:
        """Evaluate the typed expression; returns the value or ``None`` on failure."""
        if not self.expression.strip():
            return None

        submitted = self.expression
        result = evaluate(normalize_glyphs(submitted), **self._eval_kwargs)
        self.expression = ""
        if result.ok:
            self.last_result = result.value
            self.last_error = None
            self.display = format_result(result.value)
            logger.debug("expression_evaluated", expression=submitted, value=result.value)
            return result.value

        self.last_result = None
        self.last_error = result.error
        self.display = ERROR_DISPLAY
        logger.debug(
            "expression_rejected",
            expression=submitted,
            kind=result.error.kind.value,
            position=result.error.position,
        )
        return None

    def press(self, key: str) -> bool:
        """Apply a keyboard key. Returns ``False`` for keys the keypad ignores."""
        if key in EQUALS_KEYS:
            self.equals()
        elif key in BACKSPACE_KEYS:
            self.backspace()
        elif key in CLEAR_KEYS:
            self.clear()
        elif key in KEY_TEXT:
            self.append(KEY_TEXT[key])
        else:
            return False
        return True

    def screen(self) -> tuple[str, str]:
        """Return ``(expression_line, display)`` as a keypad would show them."""
        return self.expression or "0", self.display
