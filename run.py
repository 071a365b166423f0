"""CLI entry point for the safecalc arithmetic evaluator.

Usage:
    python run.py "2+2"                      # Evaluate one expression
    python run.py "200+10%" "(1+2)*3"        # Evaluate several
    python run.py --json "10/0"              # Machine-readable output
    python run.py -i                         # Interactive keypad
    echo "1+1" | python run.py               # Read expressions from stdin
"""

from __future__ import annotations

import argparse
import sys

import structlog
from rich.text import Text

from safecalc.config import CalcSettings, EvaluatorConfig, get_calc_settings, get_settings
from safecalc.engine.evaluator import evaluate
from safecalc.keypad.session import CalculatorSession
from safecalc.logging_config import setup_logging
from safecalc.utils.console import (
    console,
    print_json_result,
    print_keypad_help,
    print_result,
    print_screen,
)
from safecalc.utils.display import normalize_glyphs

logger = structlog.get_logger(__name__)

QUIT_WORDS = frozenset({"q", "quit", "exit"})
CLEAR_WORDS = frozenset({"c", "clear"})
BACK_WORDS = frozenset({"<", "back"})


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="safecalc: evaluate arithmetic expressions without executing code",
    )
    parser.add_argument(
        "expressions",
        nargs="*",
        help="Expressions to evaluate. Reads stdin when omitted.",
    )
    parser.add_argument(
        "-i",
        "--interactive",
        action="store_true",
        default=False,
        help="Start the interactive keypad.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Print one JSON object per expression.",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Maximum parenthesis nesting depth (default from calculator.toml).",
    )
    parser.add_argument(
        "--digits",
        type=int,
        default=None,
        help="Significant digits kept in results (default from calculator.toml).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level override (DEBUG, INFO, WARNING, ERROR).",
    )
    return parser.parse_args(argv)


def resolve_limits(args: argparse.Namespace) -> dict[str, int]:
    """Merge CLI overrides over calculator.toml values, re-validating bounds."""
    evaluator = get_calc_settings().evaluator.model_dump()
    if args.max_depth is not None:
        evaluator["max_depth"] = args.max_depth
    if args.digits is not None:
        evaluator["significant_digits"] = args.digits
    return CalcSettings(evaluator=EvaluatorConfig.model_validate(evaluator)).evaluate_kwargs()


def run_expressions(expressions: list[str], limits: dict[str, int], as_json: bool) -> int:
    """Evaluate each expression and print it. Returns the process exit code."""
    failed = 0
    for expression in expressions:
        result = evaluate(normalize_glyphs(expression), **limits)
        if not result.ok:
            failed += 1
            logger.debug(
                "expression_rejected",
                kind=result.error.kind.value,
                position=result.error.position,
            )
        if as_json:
            print_json_result(expression, result)
        else:
            print_result(expression, result)
    return 1 if failed else 0


def handle_keypad_line(session: CalculatorSession, line: str) -> bool:
    """Apply one line of REPL input. Returns ``False`` when the user quits."""
    command = line.strip().lower()
    if command in QUIT_WORDS:
        return False
    if command == "" or command == "=":
        session.press("Enter")
    elif command in CLEAR_WORDS:
        session.press("Escape")
    elif command in BACK_WORDS:
        session.press("Backspace")
    else:
        for key in line:
            if not session.press(key) and not key.isspace():
                console.print(Text(f"Ignored key: {key!r}", style="yellow"))
    return True


def run_keypad(limits: dict[str, int]) -> int:
    session = CalculatorSession(**limits)
    print_keypad_help()
    print_screen(*session.screen())
    while True:
        try:
            line = console.input("[bold bright_white]> [/bold bright_white]")
        except (EOFError, KeyboardInterrupt):
            console.print()
            return 0
        previous_error = session.last_error
        if not handle_keypad_line(session, line):
            return 0
        print_screen(*session.screen())
        error = session.last_error
        if error is not None and error is not previous_error:
            console.print(Text(f"  {error.kind.value}: {error.message}", style="dim"))


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    setup_logging(args.log_level or settings.log_level)
    limits = resolve_limits(args)

    if args.interactive:
        return run_keypad(limits)

    expressions = args.expressions
    if not expressions:
        expressions = [line.rstrip("\n") for line in sys.stdin if line.strip()]
    return run_expressions(expressions, limits, args.json)


if __name__ == "__main__":
    sys.exit(main())
