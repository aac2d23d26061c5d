from __future__ import annotations

from typing import Iterable, List, Sequence

import numpy as np

from histobin.binning.edges import BinSpec
from histobin.binning.engine import Histogram, histogram
from histobin.errors import InvalidInputError
from histobin.stats.descriptive import as_sample


def shared_width_spec(samples: Sequence[Iterable[float] | np.ndarray], width: float) -> BinSpec:
    """Fixed-width bins spanning the global min/max of all samples."""
    arrays = [as_sample(s) for s in samples]
    non_empty = [a for a in arrays if a.size]
    if not non_empty:
        raise InvalidInputError("Overlay needs at least one non-empty sample")

    global_min = min(float(a.min()) for a in non_empty)
    global_max = max(float(a.max()) for a in non_empty)
    return BinSpec.from_width(width, global_min, global_max)


def overlay(samples: Sequence[Iterable[float] | np.ndarray], width: float) -> List[Histogram]:
    """
    Independent histograms over one shared edge set, so bars line up and
    probability/density views compare shapes across different sample sizes.
    """
    arrays = [as_sample(s) for s in samples]
    spec = shared_width_spec(arrays, width)
    return [histogram(a, spec) for a in arrays]
