import math

import numpy as np
import pytest

from curve_integrator.errors import ExpressionParseError
from curve_integrator.expression import parse_expression, tokenize


@pytest.mark.parametrize("text, x, expected", [
    ("x^2", 3.0, 9.0),
    ("2*x + 1", 4.0, 9.0),
    ("-x^2", 3.0, -9.0),
    ("2^3^2", 0.0, 512.0),
    ("2^-1", 0.0, 0.5),
    ("x**2 - 1", 2.0, 3.0),
    ("(x + 1)/(x - 1)", 3.0, 2.0),
    ("2x", 5.0, 10.0),
    ("0.5x^2", 2.0, 2.0),
    ("3(x + 1)", 1.0, 6.0),
    ("1.5e-3*x", 1000.0, 1.5),
    ("e^x", 1.0, math.e),
    ("2*e^(0.5*x)", 2.0, 2 * math.e),
    ("ln(e)", 0.0, 1.0),
    ("log(x)", math.e, 1.0),
    ("log10(x)", 100.0, 2.0),
    ("sqrt(x) + abs(-x)", 4.0, 6.0),
    ("sin(pi/2) + cos(0) + tan(0)", 0.0, 2.0),
    ("exp(0)", 0.0, 1.0),
    ("1 - 2 - 3", 0.0, -4.0),
    ("8/2/2", 0.0, 2.0),
])
def test_evaluates_scalars(text, x, expected):
    assert parse_expression(text)(x) == pytest.approx(expected)


def test_evaluates_arrays_and_constants():
    expr = parse_expression("4")
    out = expr.evaluate(np.array([0.0, 1.0, 2.0]))
    np.testing.assert_array_equal(out, [4.0, 4.0, 4.0])


def test_domain_violations_give_non_finite_values():
    expr = parse_expression("1/x + ln(x)")
    out = expr(np.array([0.0, -1.0, 1.0]))
    assert not np.isfinite(out[0])
    assert np.isnan(out[1])
    assert out[2] == pytest.approx(1.0)


def test_custom_variable_name():
    expr = parse_expression("t^2 + 1", variable="t")
    assert expr(2.0) == pytest.approx(5.0)
    with pytest.raises(ExpressionParseError):
        parse_expression("x + 1", variable="t")


def test_double_star_token_normalised():
    assert [t.text for t in tokenize("x**2")] == ["x", "^", "2", ""]


@pytest.mark.parametrize("text", [
    "",
    "   ",
    "x +",
    "(x + 1",
    "x + 1)",
    "2 3",
    "y + 1",
    "ln x",
    "x $ 2",
    "*x",
    "sqrt()",
])
def test_malformed_input_raises(text):
    with pytest.raises(ExpressionParseError):
        parse_expression(text)


def test_parse_error_reports_position():
    with pytest.raises(ExpressionParseError) as exc:
        parse_expression("x + foo")
    assert exc.value.position == 4
    assert exc.value.text == "x + foo"


def test_reserved_variable_name_rejected():
    with pytest.raises(ExpressionParseError):
        parse_expression("e + 1", variable="e")


def test_non_text_rejected():
    with pytest.raises(ExpressionParseError):
        parse_expression(3.0)
