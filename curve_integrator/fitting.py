"""
Least-squares curve fitting for five model families.

Families
--------
1.  Linear          y = a + b·x          scipy.stats.linregress on (x, y)
2.  Exponential     y = a·e^(b·x)        scipy.stats.linregress on (x, ln y)
3.  Logarithmic     y = a + b·ln(x)      scipy.stats.linregress on (ln x, y)
4.  Power           y = a·x^b            scipy.stats.linregress on (ln x, ln y)
5.  Polynomial(k)   y = Σ c_i·x^i        numpy.polynomial.Polynomial.fit (scaled Vandermonde)

Every fitted model carries a rendered expression that the integrator's
parser accepts, so a fit can be fed straight into ``integrate``.
"""

from __future__ import annotations

import logging
import numbers
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

import numpy as np
from numpy.polynomial import Polynomial
from numpy.typing import NDArray
from scipy import stats

from .errors import (
    InsufficientDataError,
    InvalidOrderError,
    NonFiniteFitError,
    NonPositiveXError,
    NonPositiveYError,
    SingularSystemError,
)
from .preprocessing import SampleSet, as_sample_arrays, first_non_positive
from .settings import DEFAULT_SIGNIFICANT_DIGITS

logger = logging.getLogger(__name__)

FloatArray = NDArray[np.float64]
EvaluationFunction = Callable[[Any], Any]

MIN_POLYNOMIAL_ORDER: int = 1
MAX_POLYNOMIAL_ORDER: int = 10


# ===========================================================================
# Model family
# ===========================================================================

class FamilyKind(Enum):
    LINEAR = "linear"
    EXPONENTIAL = "exponential"
    LOGARITHMIC = "logarithmic"
    POWER = "power"
    POLYNOMIAL = "polynomial"


@dataclass(frozen=True, slots=True)
class ModelFamily:
    kind: FamilyKind
    order: Optional[int] = None   # polynomial only

    def __post_init__(self) -> None:
        if self.kind is FamilyKind.POLYNOMIAL:
            order = self.order
            if (
                isinstance(order, bool)
                or not isinstance(order, numbers.Integral)
                or not (MIN_POLYNOMIAL_ORDER <= order <= MAX_POLYNOMIAL_ORDER)
            ):
                raise InvalidOrderError(order)
            object.__setattr__(self, "order", int(order))
        elif self.order is not None:
            raise ValueError(f"{self.kind.value} family takes no order, got {self.order!r}")

    @classmethod
    def linear(cls) -> ModelFamily:
        return cls(FamilyKind.LINEAR)

    @classmethod
    def exponential(cls) -> ModelFamily:
        return cls(FamilyKind.EXPONENTIAL)

    @classmethod
    def logarithmic(cls) -> ModelFamily:
        return cls(FamilyKind.LOGARITHMIC)

    @classmethod
    def power(cls) -> ModelFamily:
        return cls(FamilyKind.POWER)

    @classmethod
    def polynomial(cls, order: int) -> ModelFamily:
        return cls(FamilyKind.POLYNOMIAL, order)

    @classmethod
    def from_name(cls, name: str, order: Optional[int] = None) -> ModelFamily:
        """Build a family from its lowercase name, e.g. ``"polynomial"``."""
        try:
            kind = FamilyKind(name.strip().lower())
        except ValueError:
            choices = ", ".join(k.value for k in FamilyKind)
            raise ValueError(f"unknown model family {name!r}; choose one of {choices}") from None
        if kind is FamilyKind.POLYNOMIAL:
            return cls(kind, order)
        return cls(kind)

    @property
    def minimum_points(self) -> int:
        if self.kind is FamilyKind.POLYNOMIAL:
            return int(self.order) + 1
        return 2

    def __str__(self) -> str:
        if self.kind is FamilyKind.POLYNOMIAL:
            return f"polynomial(order={self.order})"
        return self.kind.value


# ===========================================================================
# Fitted model
# ===========================================================================

@dataclass(frozen=True, slots=True)
class FittedModel:
    family: ModelFamily
    coefficients: tuple[float, ...]
    evaluate: EvaluationFunction
    expression: str
    r2: float
    points: tuple[tuple[float, float], ...] = ()

    def __post_init__(self) -> None:
        if not callable(self.evaluate):
            raise ValueError("evaluate must be callable")
        if not np.isfinite(self.r2):
            raise ValueError(f"r2 must be finite, got {self.r2}")

    @property
    def equation(self) -> str:
        return f"y = {self.expression}"

    def predict(self, x: Any) -> Any:
        out = np.asarray(self.evaluate(np.asarray(x, dtype=np.float64)), dtype=np.float64)
        return float(out) if out.ndim == 0 else out

    def __call__(self, x: Any) -> Any:
        return self.predict(x)


# ===========================================================================
# Rendering helpers
# ===========================================================================

def format_coefficient(value: float, significant_digits: Optional[int]) -> str:
    """Render *value*; ``None`` gives the shortest text that round-trips the float."""
    if significant_digits is None:
        text = repr(float(value))
        if text.endswith(".0"):
            text = text[:-2]
    else:
        text = f"{value:.{significant_digits}g}"
    return "0" if text == "-0" else text


def join_terms(terms: list[tuple[float, str]], significant_digits: Optional[int]) -> str:
    """Join (coefficient, suffix) pairs into ``c1*s1 + c2*s2 - c3*s3``.

    An empty suffix renders the bare coefficient.  Every term is kept, zero
    coefficients included, so the layout of a family's expression is fixed.
    """
    parts: list[str] = []
    for i, (coef, suffix) in enumerate(terms):
        text = format_coefficient(abs(coef) if i else coef, significant_digits)
        body = f"{text}*{suffix}" if suffix else text
        if i == 0:
            parts.append(body)
        else:
            parts.append(f"- {body}" if coef < 0 else f"+ {body}")
    return " ".join(parts)


def _exponent(value: float, significant_digits: Optional[int]) -> str:
    text = format_coefficient(value, significant_digits)
    return f"({text})" if value < 0 else text


# ===========================================================================
# Abstract base fitter
# ===========================================================================

class ModelFitter(ABC):

    @abstractmethod
    def fit(self, x: FloatArray, y: FloatArray, family: ModelFamily,
            significant_digits: Optional[int]) -> FittedModel:
        raise NotImplementedError

    @staticmethod
    def _r2(y_true: FloatArray, y_pred: FloatArray) -> float:
        # Sums are taken on y / max|y| so that large finite data cannot overflow
        scale = float(np.max(np.abs(y_true))) or 1.0
        t = y_true / scale
        resid = t - y_pred / scale
        dev = t - np.mean(t)
        ss_res = float(np.sum(resid ** 2))
        ss_tot = float(np.sum(dev ** 2))
        if ss_tot <= 0:
            return 1.0 if ss_res <= 1e-24 else 0.0
        return 1.0 - ss_res / ss_tot

    @staticmethod
    def _linear_prefit(u: FloatArray, v: FloatArray) -> tuple[float, float]:
        """Least-squares line v ~ intercept + slope*u.  Returns (intercept, slope)."""
        if np.ptp(u) == 0:
            raise SingularSystemError(rank=1, required=2)
        result = stats.linregress(u, v)
        return float(result.intercept), float(result.slope)

    @staticmethod
    def _require_positive_x(x: FloatArray) -> None:
        i = first_non_positive(x)
        if i >= 0:
            raise NonPositiveXError(i, float(x[i]))

    @staticmethod
    def _require_positive_y(y: FloatArray) -> None:
        i = first_non_positive(y)
        if i >= 0:
            raise NonPositiveYError(i, float(y[i]))

    def _build(self, family: ModelFamily, coefficients: tuple[float, ...],
               evaluate: EvaluationFunction, expression: str,
               x: FloatArray, y: FloatArray) -> FittedModel:
        with np.errstate(over="ignore", invalid="ignore"):
            y_pred = np.asarray(evaluate(x), dtype=np.float64)
        if not (np.all(np.isfinite(coefficients)) and np.all(np.isfinite(y_pred))):
            raise NonFiniteFitError(family.kind.value)
        return FittedModel(
            family=family,
            coefficients=coefficients,
            evaluate=evaluate,
            expression=expression,
            r2=self._r2(y, y_pred),
            points=tuple(zip(x.tolist(), y_pred.tolist())),
        )


# ===========================================================================
# Two-parameter families (linear regression on transformed data)
# ===========================================================================

class LinearFitter(ModelFitter):
    """y = a + b·x"""

    def fit(self, x: FloatArray, y: FloatArray, family: ModelFamily,
            significant_digits: Optional[int]) -> FittedModel:
        a, b = self._linear_prefit(x, y)

        def evaluate(x_eval: Any) -> Any:
            return a + b * np.asarray(x_eval, dtype=np.float64)

        expression = join_terms([(b, "x"), (a, "")], significant_digits)
        return self._build(family, (a, b), evaluate, expression, x, y)


class ExponentialFitter(ModelFitter):
    """y = a·e^(b·x), fitted as ln y = ln a + b·x."""

    def fit(self, x: FloatArray, y: FloatArray, family: ModelFamily,
            significant_digits: Optional[int]) -> FittedModel:
        self._require_positive_y(y)
        log_a, b = self._linear_prefit(x, np.log(y))
        a = float(np.exp(log_a))

        def evaluate(x_eval: Any) -> Any:
            return a * np.exp(b * np.asarray(x_eval, dtype=np.float64))

        expression = (f"{format_coefficient(a, significant_digits)}"
                      f"*e^({format_coefficient(b, significant_digits)}*x)")
        return self._build(family, (a, b), evaluate, expression, x, y)


class LogarithmicFitter(ModelFitter):
    """y = a + b·ln(x)"""

    def fit(self, x: FloatArray, y: FloatArray, family: ModelFamily,
            significant_digits: Optional[int]) -> FittedModel:
        self._require_positive_x(x)
        a, b = self._linear_prefit(np.log(x), y)

        def evaluate(x_eval: Any) -> Any:
            return a + b * np.log(np.asarray(x_eval, dtype=np.float64))

        expression = join_terms([(a, ""), (b, "ln(x)")], significant_digits)
        return self._build(family, (a, b), evaluate, expression, x, y)


class PowerFitter(ModelFitter):
    """y = a·x^b, fitted as ln y = ln a + b·ln x."""

    def fit(self, x: FloatArray, y: FloatArray, family: ModelFamily,
            significant_digits: Optional[int]) -> FittedModel:
        self._require_positive_x(x)
        self._require_positive_y(y)
        log_a, b = self._linear_prefit(np.log(x), np.log(y))
        a = float(np.exp(log_a))

        def evaluate(x_eval: Any) -> Any:
            return a * np.power(np.asarray(x_eval, dtype=np.float64), b)

        expression = (f"{format_coefficient(a, significant_digits)}"
                      f"*x^{_exponent(b, significant_digits)}")
        return self._build(family, (a, b), evaluate, expression, x, y)


# ===========================================================================
# Polynomial fitter
# Polynomial.fit solves the Vandermonde least-squares problem on x mapped to
# [-1, 1]; convert() brings the coefficients back to the original domain.
# ===========================================================================

class PolynomialFitter(ModelFitter):

    def fit(self, x: FloatArray, y: FloatArray, family: ModelFamily,
            significant_digits: Optional[int]) -> FittedModel:
        order = int(family.order)
        n_coef = order + 1
        distinct = len(np.unique(x))
        if distinct < n_coef:
            raise SingularSystemError(rank=distinct, required=n_coef)

        p, (_, rank, _, _) = Polynomial.fit(x, y, order, full=True)
        if int(rank) < n_coef:
            raise SingularSystemError(rank=int(rank), required=n_coef)
        ascending = np.zeros(n_coef)
        converted = p.convert().coef
        ascending[:len(converted)] = converted
        coefficients = tuple(float(c) for c in ascending[::-1])   # x^k ... x^0
        poly = np.asarray(coefficients, dtype=np.float64)

        def evaluate(x_eval: Any) -> Any:
            return np.polyval(poly, np.asarray(x_eval, dtype=np.float64))

        terms = []
        for i, c in enumerate(coefficients):
            degree = order - i
            suffix = "" if degree == 0 else ("x" if degree == 1 else f"x^{degree}")
            terms.append((c, suffix))
        expression = join_terms(terms, significant_digits)
        return self._build(family, coefficients, evaluate, expression, x, y)


# ===========================================================================
# Dispatch
# ===========================================================================

_FITTERS: dict[FamilyKind, ModelFitter] = {
    FamilyKind.LINEAR: LinearFitter(),
    FamilyKind.EXPONENTIAL: ExponentialFitter(),
    FamilyKind.LOGARITHMIC: LogarithmicFitter(),
    FamilyKind.POWER: PowerFitter(),
    FamilyKind.POLYNOMIAL: PolynomialFitter(),
}


def fit(samples: SampleSet, family: ModelFamily,
        significant_digits: Optional[int] = DEFAULT_SIGNIFICANT_DIGITS) -> FittedModel:
    """Fit *family* to *samples* by least squares.

    Parameters
    ----------
    samples            : ordered (x, y) pairs; order does not affect the fit.
    family             : model family, see ``ModelFamily``.
    significant_digits : digits kept for each coefficient in ``expression``.

    Raises
    ------
    InsufficientDataError, InvalidOrderError, InvalidSampleError,
    NonPositiveXError, NonPositiveYError, SingularSystemError
    """
    if not isinstance(family, ModelFamily):
        raise TypeError(f"family must be a ModelFamily, got {type(family).__name__}")
    x, y = as_sample_arrays(samples)
    if len(x) < family.minimum_points:
        raise InsufficientDataError(len(x), family.minimum_points)

    model = _FITTERS[family.kind].fit(x, y, family, significant_digits)
    logger.debug("Fitted %s to %d points: %s (R^2=%.6f)",
                 family, len(x), model.expression, model.r2)
    return model
