from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .errors import InvalidBoundsError
from .fitting import FittedModel, ModelFamily, fit
from .integration import Integrand, integrate
from .latex_gen import LaTeXGenerator
from .preprocessing import SampleSet, sample_domain
from .settings import AnalysisSettings

logger = logging.getLogger(__name__)

# Velocity (y) against time (x), bell-shaped; the demo data set of the add-in.
REFERENCE_VELOCITY_SAMPLES: tuple[tuple[float, float], ...] = (
    (0, 0), (1, 1), (2, 4), (3, 8), (4, 14), (5, 21), (6, 28),
    (7, 35), (8, 43), (9, 51), (10, 58), (11, 64), (12, 69), (13, 73),
    (14, 75), (15, 73), (16, 68), (17, 60), (18, 49), (19, 35), (20, 33),
)


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    model: FittedModel
    lower: float
    upper: float
    subdivisions: int
    integral: float


class CurveIntegrationService:
    """Fit-then-integrate workflow with caller-side bound validation.

    The integrator accepts any finite bounds; this layer adds the policy that
    bounds must lie inside the sample domain [first x, last x] and must not
    be reversed.
    """

    def __init__(self, settings: Optional[AnalysisSettings] = None) -> None:
        self.settings = settings or AnalysisSettings()
        self.latex = LaTeXGenerator(self.settings.latex_approx, self.settings.latex_decimals)

    def fit(self, samples: SampleSet, family: ModelFamily) -> FittedModel:
        return fit(samples, family, significant_digits=self.settings.significant_digits)

    @staticmethod
    def sample_domain(samples: SampleSet) -> tuple[float, float]:
        return sample_domain(samples)

    def check_bounds(self, samples: SampleSet, lower: float, upper: float) -> None:
        first_x, last_x = sample_domain(samples)
        try:
            lower, upper = float(lower), float(upper)
        except (TypeError, ValueError):
            raise InvalidBoundsError(lower, upper, "bounds must be real numbers") from None
        if lower < first_x:
            raise InvalidBoundsError(lower, upper, f"lower bound is below the first x value {first_x}")
        if upper > last_x:
            raise InvalidBoundsError(lower, upper, f"upper bound is above the last x value {last_x}")
        if lower > upper:
            raise InvalidBoundsError(lower, upper, "lower bound exceeds upper bound")

    def integrate(self, model_or_expression: Integrand, lower: float, upper: float,
                  samples: Optional[SampleSet] = None) -> float:
        if samples is not None and self.settings.enforce_domain:
            self.check_bounds(samples, lower, upper)
        return integrate(model_or_expression, lower, upper, self.settings.subdivisions)

    def fit_and_integrate(self, samples: SampleSet, family: ModelFamily,
                          lower: float, upper: float) -> AnalysisResult:
        model = self.fit(samples, family)
        # Integrate the rendered expression, the artifact a caller would keep
        integral = self.integrate(model.expression, lower, upper, samples=samples)
        logger.info("%s over [%g, %g]: %.10g", model.equation, lower, upper, integral)
        return AnalysisResult(
            model=model,
            lower=float(lower),
            upper=float(upper),
            subdivisions=self.settings.subdivisions,
            integral=integral,
        )

    def to_latex(self, model: FittedModel) -> str:
        return self.latex.generate(model)
