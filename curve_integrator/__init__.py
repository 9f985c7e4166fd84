"""
Least-squares curve fitting and composite Simpson integration.

Modules:
    - fitting: linear, exponential, logarithmic, power and polynomial fits.
    - expression: parser/evaluator for the expressions the fitter renders.
    - integration: fixed-subdivision composite Simpson rule.
    - latex_gen: LaTeX rendering of fitted models.
    - service: fit-then-integrate workflow with sample-domain bound checks.
"""

__version__ = "1.0.0"

from .errors import (
    CurveIntegratorError,
    EvaluationDomainError,
    ExpressionParseError,
    FitError,
    InsufficientDataError,
    IntegrationError,
    InvalidBoundsError,
    InvalidOrderError,
    InvalidSampleError,
    InvalidSubdivisionCountError,
    NonFiniteFitError,
    NonPositiveXError,
    NonPositiveYError,
    SingularSystemError,
)
from .expression import Expression, parse_expression
from .fitting import FamilyKind, FittedModel, ModelFamily, fit
from .integration import integrate
from .latex_gen import LaTeXGenerator
from .service import REFERENCE_VELOCITY_SAMPLES, AnalysisResult, CurveIntegrationService
from .settings import AnalysisSettings

__all__ = [
    # Core operations
    "fit",
    "integrate",
    "parse_expression",
    # Types
    "Expression",
    "FamilyKind",
    "FittedModel",
    "ModelFamily",
    "AnalysisResult",
    "AnalysisSettings",
    "CurveIntegrationService",
    "LaTeXGenerator",
    "REFERENCE_VELOCITY_SAMPLES",
    # Errors
    "CurveIntegratorError",
    "FitError",
    "InsufficientDataError",
    "InvalidOrderError",
    "InvalidSampleError",
    "NonFiniteFitError",
    "NonPositiveXError",
    "NonPositiveYError",
    "SingularSystemError",
    "IntegrationError",
    "InvalidSubdivisionCountError",
    "ExpressionParseError",
    "EvaluationDomainError",
    "InvalidBoundsError",
]
