"""Caller-side helpers: visual glyph normalization and result formatting."""

from __future__ import annotations

from decimal import Decimal

# Visual operators a keypad shows, mapped to the evaluator's ASCII set
GLYPHS = {
    "×": "*",
    "÷": "/",
    "−": "-",  # U+2212 MINUS SIGN
}

ERROR_DISPLAY = "Error"

_MAX_PLAIN_INTEGER = 1e21


def normalize_glyphs(text: str) -> str:
    """Replace visual operator glyphs with their ASCII equivalents."""
    for glyph, ascii_op in GLYPHS.items():
        text = text.replace(glyph, ascii_op)
    return text


def format_result(value: float) -> str:
    """Render a result for display: ``4`` rather than ``4.0``."""
    if value.is_integer() and abs(value) < _MAX_PLAIN_INTEGER:
        return str(int(value))
    return repr(value)


def format_plain(value: float) -> str:
    """Render a finite result as digits the tokenizer accepts.

    Unlike ``format_result`` this never uses exponent notation, so
    ``1e-05`` becomes ``0.00001`` and ``1e+21`` becomes 22 digits.
    """
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
