from __future__ import annotations

from typing import Callable

import sympy as sp

from .fitting import FamilyKind, FittedModel


class LaTeXGenerator:
    """Converts FittedModel -> display-math LaTeX string.

    Parameters
    ----------
    approx : bool
        When True (default) all numeric coefficients are rendered as
        rounded decimals with *decimals* digits after the point.
        When False, exact rational fractions are used.
    decimals : int
        Number of digits after the decimal point in approximate mode.
    """

    def __init__(self, approx: bool = True, decimals: int = 3) -> None:
        self.approx = approx
        self.decimals = max(0, min(10, int(decimals)))
        self._x = sp.Symbol("x")
        self._dispatch: dict[FamilyKind, Callable[[FittedModel], sp.Expr]] = {
            FamilyKind.LINEAR:      self._linear,
            FamilyKind.EXPONENTIAL: self._exponential,
            FamilyKind.LOGARITHMIC: self._logarithmic,
            FamilyKind.POWER:       self._power,
            FamilyKind.POLYNOMIAL:  self._polynomial,
        }

    def generate(self, model: FittedModel) -> str:
        return self._wrap(self._dispatch[model.family.kind](model))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _n(self, v: float) -> sp.Expr:
        """Convert float to sympy number respecting approx mode.

        Approx mode  → sp.Float with string representation at self.decimals places.
        Exact mode   → sp.Rational with denominator ≤ 1000 (exact fraction).
        """
        if self.approx:
            return sp.Float(f"{v:.{self.decimals}f}")
        return sp.Rational(v).limit_denominator(1000)

    def _wrap(self, expr: sp.Expr) -> str:
        # order="old" keeps descending powers for polynomials
        return f"$$f(x) = {sp.latex(expr, order='old')}$$"

    # ------------------------------------------------------------------
    # Per-family generators
    # ------------------------------------------------------------------

    def _linear(self, model: FittedModel) -> sp.Expr:
        a, b = model.coefficients
        return self._n(b) * self._x + self._n(a)

    def _exponential(self, model: FittedModel) -> sp.Expr:
        a, b = model.coefficients
        return self._n(a) * sp.exp(self._n(b) * self._x)

    def _logarithmic(self, model: FittedModel) -> sp.Expr:
        a, b = model.coefficients
        return self._n(a) + self._n(b) * sp.log(self._x)

    def _power(self, model: FittedModel) -> sp.Expr:
        a, b = model.coefficients
        return self._n(a) * self._x ** self._n(b)

    def _polynomial(self, model: FittedModel) -> sp.Expr:
        degree = len(model.coefficients) - 1
        terms = [self._n(c) * self._x ** (degree - i)
                 for i, c in enumerate(model.coefficients)]
        return sp.Add(*terms)
