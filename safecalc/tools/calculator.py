"""Calculator tool for LLM agents.

Gives an agent precise arithmetic through the safe evaluator instead of
relying on mental math. The expression is parsed, never executed.
"""

from __future__ import annotations

import structlog
from langchain_core.tools import tool

from safecalc.config import get_calc_settings
from safecalc.engine.evaluator import evaluate
from safecalc.utils.display import format_result, normalize_glyphs

logger = structlog.get_logger(__name__)


@tool
def calculate(expression: str) -> str:
    """Evaluate an arithmetic expression and return the result.

    Supports numbers, +, -, *, /, parentheses and postfix % (divides by 100).
    The visual operators ×, ÷ and − are accepted too.

    Examples:
        "5/6" → "0.833333333333"
        "((7-3)+(7-2))/2/6" → "0.75"
        "200+10%" → "200.1"
    """
    result = evaluate(
        normalize_glyphs(expression), **get_calc_settings().evaluate_kwargs()
    )
    if not result.ok:
        logger.info(
            "tool_expression_rejected",
            kind=result.error.kind.value,
            position=result.error.position,
        )
        return f"Error: {result.error.message}"
    return format_result(result.value)
