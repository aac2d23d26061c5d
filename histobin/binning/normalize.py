from __future__ import annotations

from typing import Iterable

import numpy as np


def _as_float(x: Iterable[float] | np.ndarray) -> np.ndarray:
    return np.asarray(x, dtype=float).reshape(-1)


def _effective_widths(widths: Iterable[float] | np.ndarray) -> np.ndarray:
    # A zero-width (degenerate) bin counts as unit width.
    w = _as_float(widths).copy()
    w[w <= 0] = 1.0
    return w


def probability(counts: Iterable[float] | np.ndarray, n: int) -> np.ndarray:
    """Percentage of the whole sample per bin: 100 * count / n."""
    c = _as_float(counts)
    if n <= 0:
        return np.zeros_like(c)
    return 100.0 * c / float(n)


def density(counts: Iterable[float] | np.ndarray, widths: Iterable[float] | np.ndarray, n: int) -> np.ndarray:
    """
    Probability density per bin: count / (n * width).
    Sum of density * width equals the retained fraction of the sample,
    so it can be drawn on the same axis as a theoretical pdf.
    """
    c = _as_float(counts)
    if n <= 0:
        return np.zeros_like(c)
    return c / (float(n) * _effective_widths(widths))


def count_density(counts: Iterable[float] | np.ndarray, widths: Iterable[float] | np.ndarray) -> np.ndarray:
    """Counts per unit of the value axis (count / width), not scaled by n."""
    return _as_float(counts) / _effective_widths(widths)


def cumulative(density_values: Iterable[float] | np.ndarray, widths: Iterable[float] | np.ndarray) -> np.ndarray:
    """
    Running integral of a density view evaluated at each bin edge.
    Shape (n_bins + 1,); cdf[0] = 0.
    """
    d = _as_float(density_values)
    w = _effective_widths(widths)
    cdf = np.zeros(d.size + 1, dtype=float)
    cdf[1:] = np.cumsum(d * w)
    return cdf
