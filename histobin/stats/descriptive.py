from __future__ import annotations

import math
from typing import Iterable

import numpy as np

from histobin.errors import InvalidInputError


def as_sample(x: Iterable[float] | np.ndarray, *, allow_empty: bool = True) -> np.ndarray:
    """
    Copy `x` into a 1-D float64 array and validate it.
    The caller's data is never written to.
    """
    if isinstance(x, np.ndarray):
        arr = np.array(x, dtype=float, copy=True)
    else:
        arr = np.asarray(list(x), dtype=float)
    if arr.ndim != 1:
        arr = arr.reshape(-1)

    if not allow_empty and arr.size == 0:
        raise InvalidInputError("Sample is empty; at least one value is required")
    if arr.size and not np.isfinite(arr).all():
        bad = int((~np.isfinite(arr)).sum())
        raise InvalidInputError(f"Sample contains {bad} non-finite value(s) (NaN/inf)")
    return arr


def mean(sample: Iterable[float] | np.ndarray) -> float:
    arr = as_sample(sample, allow_empty=False)
    return float(arr.mean())


def stddev(sample: Iterable[float] | np.ndarray) -> float:
    """Population standard deviation (ddof=0)."""
    arr = as_sample(sample, allow_empty=False)
    return float(arr.std(ddof=0))


def quantile(sample: Iterable[float] | np.ndarray, p: float) -> float:
    """
    Quantile by linear interpolation between the two nearest order statistics
    at fractional rank p * (N - 1). p must lie in [0, 1].
    """
    p = float(p)
    if not math.isfinite(p) or p < 0.0 or p > 1.0:
        raise InvalidInputError(f"Quantile probability must be in [0, 1], got {p}")

    s = np.sort(as_sample(sample, allow_empty=False))
    if s.size == 1:
        return float(s[0])

    pos = (s.size - 1) * p
    lo = int(math.floor(pos))
    hi = int(math.ceil(pos))
    if lo == hi:
        return float(s[lo])

    frac = pos - lo
    return float(s[lo] * (1.0 - frac) + s[hi] * frac)


def iqr(sample: Iterable[float] | np.ndarray) -> float:
    arr = as_sample(sample, allow_empty=False)
    return quantile(arr, 0.75) - quantile(arr, 0.25)


def normal_pdf(x: float | Iterable[float] | np.ndarray, mu: float, sigma: float) -> np.ndarray:
    """Gaussian probability density, for overlaying on a density-normalized histogram."""
    if not sigma > 0:
        raise InvalidInputError(f"sigma must be > 0, got {sigma}")
    z = (np.asarray(x, dtype=float) - mu) / sigma
    return np.exp(-0.5 * z * z) / (sigma * math.sqrt(2.0 * math.pi))
