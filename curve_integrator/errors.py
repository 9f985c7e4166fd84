"""Typed errors raised by the fitter and the integrator.

Every error derives from ``ValueError`` and keeps the offending value on the
instance so that a caller can render its own message.
"""

from __future__ import annotations

from typing import Any, Optional


class CurveIntegratorError(ValueError):
    """Base class for all errors raised by this package."""


# ===========================================================================
# Fitting
# ===========================================================================

class FitError(CurveIntegratorError):
    pass


class InsufficientDataError(FitError):

    def __init__(self, available: int, required: int) -> None:
        self.available = available
        self.required = required
        super().__init__(
            f"need at least {required} sample points, got {available}"
        )


class InvalidOrderError(FitError):

    def __init__(self, order: Any) -> None:
        self.order = order
        super().__init__(f"polynomial order must be an integer in [1, 10], got {order!r}")


class NonPositiveXError(FitError):
    """An x value is <= 0 where the model takes ln(x)."""

    def __init__(self, index: int, value: float) -> None:
        self.index = index
        self.value = value
        super().__init__(f"x must be positive, got x[{index}] = {value}")


class NonPositiveYError(FitError):
    """A y value is <= 0 where the model takes ln(y)."""

    def __init__(self, index: int, value: float) -> None:
        self.index = index
        self.value = value
        super().__init__(f"y must be positive, got y[{index}] = {value}")


class SingularSystemError(FitError):

    def __init__(self, rank: int, required: int) -> None:
        self.rank = rank
        self.required = required
        super().__init__(
            f"least-squares system is rank deficient (rank {rank}, need {required}); "
            "too few distinct x values"
        )


class InvalidSampleError(FitError):

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"invalid samples: {detail}")


class NonFiniteFitError(FitError):
    """The fitted coefficients or predictions overflowed to inf or nan."""

    def __init__(self, family: str) -> None:
        self.family = family
        super().__init__(f"{family} fit produced non-finite coefficients or predictions")


# ===========================================================================
# Integration
# ===========================================================================

class IntegrationError(CurveIntegratorError):
    pass


class InvalidSubdivisionCountError(IntegrationError):

    def __init__(self, subdivisions: Any) -> None:
        self.subdivisions = subdivisions
        super().__init__(
            f"subdivision count must be an even integer >= 2, got {subdivisions!r}"
        )


class ExpressionParseError(IntegrationError):

    def __init__(self, message: str, text: str = "", position: Optional[int] = None) -> None:
        self.message = message
        self.text = text
        self.position = position
        where = f" at position {position}" if position is not None else ""
        super().__init__(f"{message}{where} in {text!r}")


class EvaluationDomainError(IntegrationError):
    """The integrand is undefined (non-finite) at a quadrature node."""

    def __init__(self, x: float) -> None:
        self.x = x
        super().__init__(f"integrand is undefined at x = {x!r}")


class InvalidBoundsError(IntegrationError):

    def __init__(self, lower: Any, upper: Any, reason: str) -> None:
        self.lower = lower
        self.upper = upper
        self.reason = reason
        super().__init__(f"invalid bounds [{lower}, {upper}]: {reason}")
