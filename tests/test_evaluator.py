"""Tests for the parser/evaluator and the public evaluate() entry point."""

from __future__ import annotations

import math
import random

import pytest

from safecalc import evaluate, evaluate_or_raise
from safecalc.engine.evaluator import EvalResult
from safecalc.engine.parser import round_significant
from safecalc.schemas.errors import (
    DivisionByZero,
    EmptyExpression,
    ErrorKind,
    EvalError,
    NonFiniteResult,
)


def value_of(expression: str, **kwargs) -> float:
    result = evaluate(expression, **kwargs)
    assert result.ok, result.error
    return result.value


def error_of(expression: str, **kwargs) -> EvalError:
    result = evaluate(expression, **kwargs)
    assert not result.ok, f"{expression!r} evaluated to {result.value}"
    return result.error


class TestArithmetic:
    @pytest.mark.parametrize(
        "expression, expected",
        [
            ("2+2", 4.0),
            ("2*3+4", 10.0),
            ("2+3*4", 14.0),
            ("(2+3)*4", 20.0),
            ("10-4-3", 3.0),
            ("100/10/5", 2.0),
            ("7", 7.0),
            ("(((7)))", 7.0),
            ("1.5*4", 6.0),
            ("0/5", 0.0),
        ],
    )
    def test_precedence_and_associativity(self, expression, expected):
        assert value_of(expression) == expected

    def test_floating_point_noise_rounded(self):
        assert value_of("0.1+0.2") == 0.3

    def test_repeating_fraction_rounded_to_12_digits(self):
        assert value_of("1/3") == 0.333333333333

    def test_custom_significant_digits(self):
        assert value_of("1/3", significant_digits=3) == 0.333

    def test_negative_zero_normalized(self):
        value = value_of("-0")
        assert value == 0.0
        assert math.copysign(1.0, value) == 1.0


class TestPercent:
    def test_percent_alone(self):
        assert value_of("50%") == 0.5

    def test_percent_binds_to_trailing_term(self):
        assert value_of("200+10%") == 200.1

    def test_percent_binds_tighter_than_multiplication(self):
        assert value_of("50%*200") == 100.0
        assert value_of("200*50%") == 100.0

    def test_repeated_percent(self):
        assert value_of("10%%") == 0.001

    def test_percent_after_group(self):
        assert value_of("(20+30)%") == 0.5

    def test_percent_applies_to_negated_operand(self):
        assert value_of("-5%") == -0.05


class TestUnaryMinus:
    def test_leading_minus(self):
        assert value_of("-3+5") == 2.0

    def test_minus_times_minus(self):
        assert value_of("-3*-2") == 6.0

    def test_double_negation(self):
        assert value_of("--5") == 5.0

    def test_binary_then_unary(self):
        assert value_of("2--3") == 5.0

    def test_negated_group(self):
        assert value_of("-(2+3)") == -5.0

    def test_many_minus_signs_do_not_recurse(self):
        assert value_of("-" * 10_000 + "1") == 1.0
        assert value_of("-" * 10_001 + "1") == -1.0

    def test_no_unary_plus(self):
        err = error_of("+5")
        assert err.kind is ErrorKind.UNEXPECTED_TOKEN
        assert err.position == 0


class TestErrors:
    def test_division_by_zero(self):
        err = error_of("10/0")
        assert isinstance(err, DivisionByZero)
        assert err.position == 2

    def test_division_by_computed_zero(self):
        assert error_of("10/(5-5)").kind is ErrorKind.DIVISION_BY_ZERO

    def test_division_by_negative_zero(self):
        assert error_of("1/-0").kind is ErrorKind.DIVISION_BY_ZERO

    def test_missing_close_paren(self):
        err = error_of("(1+2")
        assert err.kind is ErrorKind.UNBALANCED_PARENTHESES
        assert err.position == 0

    def test_trailing_close_paren(self):
        err = error_of("1+2)")
        assert err.kind is ErrorKind.UNBALANCED_PARENTHESES
        assert err.position == 3

    @pytest.mark.parametrize("expression", [")", "((1)", "(1+", "1+)"])
    def test_unbalanced_variants(self, expression):
        assert error_of(expression).kind is ErrorKind.UNBALANCED_PARENTHESES

    def test_empty_group(self):
        err = error_of("()")
        assert err.kind is ErrorKind.UNEXPECTED_TOKEN
        assert err.position == 1

    def test_missing_operand_inside_group(self):
        err = error_of("(2+)")
        assert err.kind is ErrorKind.UNEXPECTED_TOKEN
        assert err.position == 3

    def test_adjacent_numbers(self):
        err = error_of("2 2")
        assert err.kind is ErrorKind.UNEXPECTED_TOKEN
        assert err.position == 2

    def test_implicit_multiplication_rejected(self):
        assert error_of("2(3)").kind is ErrorKind.UNEXPECTED_TOKEN

    def test_missing_operand_in_group_before_number(self):
        err = error_of("(1 2)")
        assert err.kind is ErrorKind.UNEXPECTED_TOKEN
        assert err.position == 3

    def test_dangling_operator(self):
        err = error_of("2+")
        assert err.kind is ErrorKind.UNEXPECTED_TOKEN
        assert err.position == 2

    @pytest.mark.parametrize("expression", ["*2", "%", "2**3", "/"])
    def test_operator_where_operand_expected(self, expression):
        assert error_of(expression).kind is ErrorKind.UNEXPECTED_TOKEN

    @pytest.mark.parametrize("expression", ["", "   ", "\t\n"])
    def test_empty_expression(self, expression):
        err = error_of(expression)
        assert isinstance(err, EmptyExpression)
        assert err.position is None

    def test_overflowing_literal(self):
        assert error_of("9" * 400).kind is ErrorKind.NON_FINITE_RESULT

    def test_overflowing_product(self):
        big = "9" * 200
        assert error_of(f"{big}*{big}").kind is ErrorKind.NON_FINITE_RESULT

    def test_nan_result(self):
        big = "9" * 400
        err = error_of(f"{big}-{big}")
        assert isinstance(err, NonFiniteResult)

    def test_lex_errors_surface_through_evaluate(self):
        assert error_of("2 x 3").kind is ErrorKind.UNEXPECTED_CHARACTER
        assert error_of("1.2.3").kind is ErrorKind.MALFORMED_NUMBER


class TestNesting:
    def test_depth_at_cap(self):
        assert value_of("(" * 64 + "1" + ")" * 64) == 1.0

    def test_depth_over_cap(self):
        err = error_of("(" * 65 + "1" + ")" * 65)
        assert err.kind is ErrorKind.TOO_DEEPLY_NESTED
        assert err.position == 64

    def test_custom_cap(self):
        assert value_of("((1))", max_depth=2) == 1.0
        err = error_of("(((1)))", max_depth=2)
        assert err.kind is ErrorKind.TOO_DEEPLY_NESTED
        assert err.position == 2

    def test_sibling_groups_do_not_accumulate(self):
        assert value_of("+".join(["(1)"] * 100), max_depth=1) == 100.0

    def test_cap_at_limit_evaluates(self):
        assert value_of("(" * 128 + "1" + ")" * 128, max_depth=128) == 1.0

    @pytest.mark.parametrize("depth", [0, -5, 129, 1000])
    def test_cap_out_of_range_is_programming_error(self, depth):
        with pytest.raises(ValueError):
            evaluate("(" * 300 + "1" + ")" * 300, max_depth=depth)


class TestProperties:
    def test_sums_match_arithmetic(self):
        rng = random.Random(1234)
        for _ in range(200):
            numbers = [rng.randint(0, 10**6) / 100 for _ in range(rng.randint(1, 12))]
            expression = "+".join(f"{n:.2f}" for n in numbers)
            assert math.isclose(value_of(expression), sum(numbers), rel_tol=1e-11, abs_tol=1e-9)

    @pytest.mark.parametrize(
        "expression",
        ["2+2", "200+10%", "10/0", "(1+2", "", "2 2", "1/3", "-(4*2.5)%"],
    )
    def test_idempotent(self, expression):
        assert evaluate(expression) == evaluate(expression)

    def test_out_of_class_characters_always_rejected(self):
        rng = random.Random(42)
        alphabet = (
            "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
            "!@#$^&_=[]{};:'\",<>?~`|\\"
            "×÷−²π€é\u00a0\u2003"
        )
        for _ in range(500):
            text = "".join(rng.choice(alphabet) for _ in range(rng.randint(1, 20)))
            err = error_of(text)
            assert err.kind is ErrorKind.UNEXPECTED_CHARACTER
            assert err.position == 0

    def test_code_is_never_executed(self):
        err = error_of("__import__('os').system('echo pwned')")
        assert err.kind is ErrorKind.UNEXPECTED_CHARACTER


class TestEvalResult:
    def test_ok_result(self):
        result = evaluate("1+1")
        assert result.ok
        assert result.error is None
        assert result.unwrap() == 2.0

    def test_error_result_unwrap_raises(self):
        result = evaluate("1/0")
        assert not result.ok
        assert result.value is None
        with pytest.raises(DivisionByZero):
            result.unwrap()

    def test_requires_exactly_one_field(self):
        with pytest.raises(ValueError):
            EvalResult()
        with pytest.raises(ValueError):
            EvalResult(value=1.0, error=EmptyExpression())

    def test_error_to_dict(self):
        assert evaluate("10/0").error.to_dict() == {
            "error": "DivisionByZero",
            "detail": "Division by zero at position 2",
            "position": 2,
        }


class TestEvaluateOrRaise:
    def test_returns_value(self):
        assert evaluate_or_raise("6/4") == 1.5

    def test_raises_typed_error(self):
        with pytest.raises(EvalError) as exc:
            evaluate_or_raise("(1")
        assert exc.value.kind is ErrorKind.UNBALANCED_PARENTHESES

    def test_non_string_is_programming_error(self):
        with pytest.raises(TypeError):
            evaluate(123)  # type: ignore[arg-type]


class TestRoundSignificant:
    def test_keeps_twelve_digits(self):
        assert round_significant(123456789.123456789) == 123456789.123

    def test_large_value(self):
        assert round_significant(1.23456789012345e20) == 1.23456789012e20

    def test_negative_zero(self):
        assert math.copysign(1.0, round_significant(-0.0)) == 1.0
