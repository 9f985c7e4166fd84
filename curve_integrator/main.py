"""
Command-line front end: fit a model family to (x, y) samples and integrate
the fitted expression, or integrate an expression typed on the command line.

    curve-integrator fit --family polynomial --order 4 --lower 0 --upper 20
    curve-integrator fit --data samples.csv --family exponential --latex
    curve-integrator integrate "x^2" 0 3 --subdivisions 1000
"""

from __future__ import annotations

import argparse
import csv
import logging
import sys
from typing import Optional, Sequence

from .errors import InvalidSampleError
from .fitting import FamilyKind, ModelFamily
from .integration import integrate
from .logging_config import setup_logging
from .service import REFERENCE_VELOCITY_SAMPLES, CurveIntegrationService
from .settings import DEFAULT_SIGNIFICANT_DIGITS, DEFAULT_SUBDIVISIONS, AnalysisSettings

logger = logging.getLogger(__name__)


def read_samples(path: str) -> list[tuple[float, float]]:
    """Read the first two columns of a CSV file; a non-numeric first row is a header."""
    samples: list[tuple[float, float]] = []
    with open(path, newline="", encoding="utf-8") as fh:
        for line_no, row in enumerate(csv.reader(fh), start=1):
            cells = [c.strip() for c in row]
            if not any(cells):
                continue
            if len(cells) < 2:
                raise InvalidSampleError(f"{path}:{line_no}: expected two columns")
            try:
                samples.append((float(cells[0]), float(cells[1])))
            except ValueError:
                if samples or line_no > 1:
                    raise InvalidSampleError(
                        f"{path}:{line_no}: non-numeric value in {cells[:2]}"
                    ) from None
                logger.debug("Skipping header row %s", cells[:2])
    return samples


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="curve-integrator",
        description="Least-squares curve fitting and composite Simpson integration.",
    )
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", help="also write log records to this file")
    sub = parser.add_subparsers(dest="command", required=True)

    p_fit = sub.add_parser("fit", help="fit a model family to samples")
    p_fit.add_argument("--data", help="CSV file with x,y columns (default: reference velocity data)")
    p_fit.add_argument("--family", required=True, choices=[k.value for k in FamilyKind])
    p_fit.add_argument("--order", type=int, help="polynomial order in [1, 10]")
    p_fit.add_argument("--lower", type=float, help="lower integration bound")
    p_fit.add_argument("--upper", type=float, help="upper integration bound")
    p_fit.add_argument("--subdivisions", type=int, default=DEFAULT_SUBDIVISIONS)
    p_fit.add_argument("--digits", type=int, default=DEFAULT_SIGNIFICANT_DIGITS,
                       help="significant digits in the printed expression")
    p_fit.add_argument("--latex", action="store_true", help="also print the model as LaTeX")

    p_int = sub.add_parser("integrate", help="integrate an expression in x")
    p_int.add_argument("expression")
    p_int.add_argument("lower", type=float)
    p_int.add_argument("upper", type=float)
    p_int.add_argument("--subdivisions", type=int, default=DEFAULT_SUBDIVISIONS)
    return parser


def _run_fit(args: argparse.Namespace) -> None:
    settings = AnalysisSettings(significant_digits=args.digits, subdivisions=args.subdivisions)
    service = CurveIntegrationService(settings)
    samples = read_samples(args.data) if args.data else list(REFERENCE_VELOCITY_SAMPLES)
    family = ModelFamily.from_name(args.family, args.order)

    if (args.lower is None) != (args.upper is None):
        raise ValueError("--lower and --upper must be given together")

    model = service.fit(samples, family)
    logger.info("Fitted %s to %d samples: %s (R^2=%.6f)",
                family.kind.value, len(samples), model.equation, model.r2)
    print(f"Predicted equation: {model.equation}")
    print(f"R^2: {model.r2:.6f}")
    if args.latex:
        print(service.to_latex(model))
    if args.lower is not None:
        value = service.integrate(model.expression, args.lower, args.upper, samples=samples)
        print(f"Approximate integral: {value:.10g}")


def _run_integrate(args: argparse.Namespace) -> None:
    value = integrate(args.expression, args.lower, args.upper, args.subdivisions)
    print(f"{value:.10g}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level), args.log_file)
    try:
        if args.command == "fit":
            _run_fit(args)
        else:
            _run_integrate(args)
    except (ValueError, OSError) as exc:
        # CurveIntegratorError subclasses ValueError
        print(f"error: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
