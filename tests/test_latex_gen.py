import numpy as np
import pytest

from curve_integrator.fitting import ModelFamily, fit
from curve_integrator.latex_gen import LaTeXGenerator


@pytest.fixture
def gen():
    return LaTeXGenerator(approx=True, decimals=2)


def test_linear(gen):
    model = fit([(0, 1), (1, 3)], ModelFamily.linear())
    latex = gen.generate(model)
    assert latex.startswith("$$f(x) = ") and latex.endswith("$$")
    assert "2.0 x" in latex
    assert "1.0" in latex


def test_exponential_uses_exp(gen):
    x = np.array([0.0, 1.0, 2.0])
    model = fit(np.column_stack([x, 2 * np.exp(0.5 * x)]), ModelFamily.exponential())
    assert "e^{0.5 x}" in gen.generate(model)


def test_logarithmic_uses_log(gen):
    x = np.array([1.0, 2.0, 4.0])
    model = fit(np.column_stack([x, 1 + 3 * np.log(x)]), ModelFamily.logarithmic())
    assert "\\log{\\left(x \\right)}" in gen.generate(model)


def test_power(gen):
    x = np.array([1.0, 2.0, 3.0])
    model = fit(np.column_stack([x, 4 * x ** 1.5]), ModelFamily.power())
    assert "x^{1.5}" in gen.generate(model)


def test_exact_mode_uses_fractions():
    model = fit([(0, 0.5), (2, 1.5)], ModelFamily.linear())
    latex = LaTeXGenerator(approx=False).generate(model)
    assert "\\frac{1}{2}" in latex


def test_decimals_are_clamped():
    assert LaTeXGenerator(decimals=42).decimals == 10
    assert LaTeXGenerator(decimals=-3).decimals == 0
