import math

import numpy as np
import pytest

from curve_integrator.errors import (
    EvaluationDomainError,
    ExpressionParseError,
    InvalidBoundsError,
    InvalidSubdivisionCountError,
)
from curve_integrator.expression import parse_expression
from curve_integrator.fitting import ModelFamily, fit
from curve_integrator.integration import integrate


def reference_simpson(f, a, b, n):
    """Direct transcription of the node/weight formula, one node at a time."""
    h = (b - a) / n

    def x_at(i):
        return a + h * i

    mid = sum(f((x_at(i - 1) + x_at(i)) / 2) for i in range(1, n + 1))
    inner = sum(f(x_at(i)) for i in range(1, n))
    return (f(a) + f(b) + 4 * mid + 2 * inner) * h / 6


def test_square_from_zero_to_three():
    assert integrate("x^2", 0, 3, 1000) == pytest.approx(9.0, abs=1e-6)


@pytest.mark.parametrize("n", [2, 4, 10, 1000])
@pytest.mark.parametrize("a, b", [(0.0, 3.0), (-2.5, 7.25), (1.0, 1.0)])
def test_constant_integrand_gives_interval_length(a, b, n):
    assert integrate("1", a, b, n) == pytest.approx(b - a, rel=1e-12, abs=1e-12)
    assert integrate(lambda x: 1.0, a, b, n) == pytest.approx(b - a, rel=1e-12, abs=1e-12)


@pytest.mark.parametrize("text", ["x^2", "e^x", "sin(x) + 3", "1/(1 + x^2)"])
def test_swapping_bounds_negates(text):
    forward = integrate(text, 0.5, 2.0, 100)
    backward = integrate(text, 2.0, 0.5, 100)
    assert forward == pytest.approx(-backward, rel=1e-12)


def test_matches_node_weight_formula():
    f = parse_expression("x^3 - 2*x + sin(x)")
    expected = reference_simpson(lambda t: float(f(t)), -1.0, 2.0, 6)
    assert integrate(f, -1.0, 2.0, 6) == pytest.approx(expected, rel=1e-13)


def test_cubic_is_exact_even_with_two_panels():
    # Simpson's rule integrates cubics exactly
    assert integrate("x^3 + x", 0, 2, 2) == pytest.approx(6.0, rel=1e-14)


def test_accepts_fitted_model_and_callable():
    model = fit([(0, 0), (1, 1), (2, 4)], ModelFamily.polynomial(2))
    assert integrate(model, 0, 3, 10) == pytest.approx(9.0)
    assert integrate(np.exp, 0, 1, 100) == pytest.approx(math.e - 1, rel=1e-10)


def test_scalar_only_callable_is_evaluated_per_node():
    assert integrate(math.sqrt, 0, 4, 100) == pytest.approx(16 / 3, rel=1e-3)


@pytest.mark.parametrize("n", [1, 3, 999, 0, -2, 2.0, True, "10"])
def test_invalid_subdivision_count(n):
    with pytest.raises(InvalidSubdivisionCountError):
        integrate("x", 0, 1, n)


def test_malformed_expression():
    with pytest.raises(ExpressionParseError):
        integrate("x^", 0, 1, 10)


def test_undefined_node_names_x_value():
    with pytest.raises(EvaluationDomainError) as exc:
        integrate("1/x", -1, 1, 2)
    assert exc.value.x == 0.0

    with pytest.raises(EvaluationDomainError) as exc:
        integrate("ln(x)", 0, 1, 10)
    assert exc.value.x == 0.0


def test_undefined_node_from_scalar_callable():
    with pytest.raises(EvaluationDomainError) as exc:
        integrate(math.log, -1.0, 1.0, 4)
    assert exc.value.x == -1.0


def test_non_finite_bounds_rejected():
    with pytest.raises(InvalidBoundsError):
        integrate("x", 0, float("inf"), 10)
    with pytest.raises(InvalidBoundsError):
        integrate("x", "a", 1, 10)
