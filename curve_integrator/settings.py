from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# None renders each coefficient with the shortest text that reads back as the
# same float, so the expression reproduces the fitted model exactly.
DEFAULT_SIGNIFICANT_DIGITS: Optional[int] = None
DEFAULT_SUBDIVISIONS: int = 1000


@dataclass(frozen=True, slots=True)
class AnalysisSettings:
    significant_digits: Optional[int] = DEFAULT_SIGNIFICANT_DIGITS  # digits kept in rendered expressions
    subdivisions: int = DEFAULT_SUBDIVISIONS
    latex_approx: bool = True    # use decimal approximations in LaTeX output
    latex_decimals: int = 3      # digits after decimal point when approx is on
    enforce_domain: bool = True  # reject integration bounds outside the sample x range

    def __post_init__(self) -> None:
        if self.significant_digits is not None and not (1 <= self.significant_digits <= 17):
            raise ValueError(
                f"significant_digits must be in [1, 17] or None, got {self.significant_digits}"
            )
        if self.subdivisions < 2 or self.subdivisions % 2:
            raise ValueError(f"subdivisions must be an even integer >= 2, got {self.subdivisions}")
        if not (0 <= self.latex_decimals <= 10):
            raise ValueError(f"latex_decimals must be in [0, 10], got {self.latex_decimals}")
