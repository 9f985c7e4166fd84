"""
Composite Simpson quadrature with a fixed number of subdivisions.

The interval [a, b] is cut into N panels of width h = (b - a)/N with
breakpoints x_n = a + h·n.  Each panel is split at its midpoint
m_n = (x_{n-1} + x_n)/2, and

    ∫ f ≈ h/6 · [f(a) + f(b) + 4·Σ_{n=1..N} f(m_n) + 2·Σ_{n=1..N-1} f(x_n)]

which is Simpson's rule applied panel by panel (2N + 1 nodes in total).
"""

from __future__ import annotations

import logging
import math
import numbers
from typing import Any, Callable, Union

import numpy as np
from numpy.typing import NDArray

from .errors import (
    EvaluationDomainError,
    InvalidBoundsError,
    InvalidSubdivisionCountError,
)
from .expression import Expression, parse_expression
from .fitting import FittedModel
from .settings import DEFAULT_SUBDIVISIONS

logger = logging.getLogger(__name__)

FloatArray = NDArray[np.float64]
Integrand = Union[str, Expression, FittedModel, Callable[[Any], Any]]


def _check_subdivisions(n: Any) -> int:
    if isinstance(n, bool) or not isinstance(n, numbers.Integral) or n < 2 or n % 2:
        raise InvalidSubdivisionCountError(n)
    return int(n)


def _check_bound(lower: Any, upper: Any) -> tuple[float, float]:
    try:
        a, b = float(lower), float(upper)
    except (TypeError, ValueError):
        raise InvalidBoundsError(lower, upper, "bounds must be real numbers") from None
    if not (math.isfinite(a) and math.isfinite(b)):
        raise InvalidBoundsError(lower, upper, "bounds must be finite")
    return a, b


def as_integrand(expr_or_fn: Integrand) -> Callable[[Any], Any]:
    """Resolve text, a parsed expression, a fitted model or a callable to a function."""
    if isinstance(expr_or_fn, str):
        return parse_expression(expr_or_fn)
    if isinstance(expr_or_fn, FittedModel):
        return expr_or_fn.evaluate
    if callable(expr_or_fn):
        return expr_or_fn
    raise TypeError(f"cannot integrate object of type {type(expr_or_fn).__name__}")


def _evaluate_nodes(f: Callable[[Any], Any], nodes: FloatArray) -> FloatArray:
    """Evaluate *f* at every node, raising EvaluationDomainError on the first bad one."""
    try:
        with np.errstate(all="ignore"):
            values = np.asarray(f(nodes), dtype=np.float64)
        values = np.broadcast_to(values, nodes.shape)
    except (ArithmeticError, ValueError, TypeError):
        # Scalar-only callables (math.log etc.): evaluate node by node
        values = np.empty_like(nodes)
        for i, node in enumerate(nodes):
            try:
                values[i] = float(f(float(node)))
            except (ArithmeticError, ValueError):
                raise EvaluationDomainError(float(node)) from None

    bad = np.flatnonzero(~np.isfinite(values))
    if len(bad):
        raise EvaluationDomainError(float(nodes[bad[0]]))
    return values


def integrate(expr_or_fn: Integrand, lower: float, upper: float,
              subdivisions: int = DEFAULT_SUBDIVISIONS) -> float:
    """Approximate the integral of *expr_or_fn* from *lower* to *upper*.

    Parameters
    ----------
    expr_or_fn   : expression text in ``x``, a parsed Expression, a FittedModel,
                   or a callable evaluated on a numpy array of nodes.
    lower, upper : integration bounds; ``lower > upper`` gives the negated
                   integral over the reversed interval.
    subdivisions : number of panels N, an even integer >= 2.

    Raises
    ------
    InvalidSubdivisionCountError, ExpressionParseError, EvaluationDomainError,
    InvalidBoundsError
    """
    n = _check_subdivisions(subdivisions)
    a, b = _check_bound(lower, upper)
    f = as_integrand(expr_or_fn)

    h = (b - a) / n
    steps = np.arange(n + 1, dtype=np.float64)
    breakpoints = a + h * steps                                # x_0 .. x_N
    midpoints = (breakpoints[:-1] + breakpoints[1:]) / 2       # m_1 .. m_N

    # Endpoints, then midpoints, then interior breakpoints
    nodes = np.concatenate(([a, b], midpoints, breakpoints[1:-1]))
    values = _evaluate_nodes(f, nodes)
    f_ends = values[:2]
    f_mid = values[2:2 + n]
    f_inner = values[2 + n:]

    result = float(np.sum(f_ends) + 4 * np.sum(f_mid) + 2 * np.sum(f_inner)) * h / 6
    logger.debug("Integrated over [%g, %g] with N=%d: %.12g", a, b, n, result)
    return result
