"""Rich console output for the calculator CLI.

Renders one-shot results, evaluation errors with a caret under the
offending position, and the keypad screen for interactive sessions.
"""

from __future__ import annotations

import json

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from safecalc.engine.evaluator import EvalResult
from safecalc.schemas.errors import EvalError
from safecalc.utils.display import ERROR_DISPLAY, format_result

console = Console()


def result_to_dict(expression: str, result: EvalResult) -> dict[str, object]:
    """Flatten an evaluation outcome into a JSON-friendly dict."""
    if result.ok:
        return {
            "expression": expression,
            "value": result.value,
            "display": format_result(result.value),
            "error": None,
            "position": None,
        }
    return {
        "expression": expression,
        "value": None,
        "display": None,
        "error": result.error.kind.value,
        "position": result.error.position,
    }


def caret_line(expression: str, error: EvalError) -> str | None:
    """Return a line with ``^`` under the error position, if it has one."""
    if error.position is None:
        return None
    return " " * min(error.position, len(expression)) + "^"


def print_result(expression: str, result: EvalResult) -> None:
    """Print ``expression = value`` or a red error block."""
    if result.ok:
        console.print(
            Text.assemble(
                (expression.strip(), "cyan"),
                " = ",
                (format_result(result.value), "bold green"),
            )
        )
        return

    error = result.error
    console.print(Text.assemble(("Error", "bold red"), f" [{error.kind.value}] {error.message}"))
    caret = caret_line(expression, error)
    if caret is not None:
        console.print(Text(f"  {expression}", style="dim"))
        console.print(Text(f"  {caret}", style="red"))


def print_json_result(expression: str, result: EvalResult) -> None:
    """Print one JSON object per line (machine-readable mode)."""
    console.print(
        json.dumps(result_to_dict(expression, result), ensure_ascii=True),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def print_screen(expression_line: str, display: str) -> None:
    """Print the keypad screen: small expression line above the big display."""
    style = "bold red" if display == ERROR_DISPLAY else "bold bright_white"
    console.print(
        Panel(
            Text.assemble((expression_line, "dim"), "\n", (display, style)),
            border_style="bright_blue",
            width=40,
        )
    )


def print_keypad_help() -> None:
    """Print the interactive key reference."""
    console.print("[bold bright_white]safecalc keypad[/bold bright_white]")
    console.print("  Type digits and operators (+ - * / % ( ) .)")
    console.print("  Enter or = evaluates")
    console.print("  < or back deletes the last character")
    console.print("  c or clear resets")
    console.print("  q or quit exits")
