from __future__ import annotations

from typing import Any, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .errors import InvalidSampleError

FloatArray = NDArray[np.float64]
SampleSet = Union[Sequence[Sequence[float]], NDArray[Any]]


def as_sample_arrays(samples: SampleSet) -> Tuple[FloatArray, FloatArray]:
    """Split a sample set into float x and y arrays, keeping the input order.

    Raises InvalidSampleError unless *samples* is an (n, 2) table of finite
    real numbers.  An empty input yields two empty arrays; the minimum size
    is a property of the model family and is checked by the fitter.
    """
    if isinstance(samples, (str, bytes)):
        raise InvalidSampleError("expected a sequence of (x, y) pairs, got a string")
    try:
        table = np.asarray(samples, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidSampleError(f"values must be real numbers ({exc})") from exc

    if table.size == 0:
        return np.empty(0), np.empty(0)
    if table.ndim != 2 or table.shape[1] != 2:
        raise InvalidSampleError(f"expected an (n, 2) table of pairs, got shape {table.shape}")

    bad = np.flatnonzero(~np.all(np.isfinite(table), axis=1))
    if len(bad):
        i = int(bad[0])
        raise InvalidSampleError(f"pair {i} is not finite: ({table[i, 0]}, {table[i, 1]})")

    return table[:, 0].copy(), table[:, 1].copy()


def sample_domain(samples: SampleSet) -> Tuple[float, float]:
    """Return (first x, last x) in input order."""
    x, _ = as_sample_arrays(samples)
    if len(x) == 0:
        raise InvalidSampleError("sample set is empty")
    return float(x[0]), float(x[-1])


def first_non_positive(values: FloatArray) -> int:
    """Index of the first value <= 0, or -1 when all are positive."""
    idx = np.flatnonzero(values <= 0)
    return int(idx[0]) if len(idx) else -1
