from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

import numpy as np
import pandas as pd

from histobin.binning import normalize
from histobin.binning.edges import BinSpec
from histobin.errors import InvalidInputError
from histobin.rules.heuristics import BinRule, bin_count
from histobin.stats.descriptive import as_sample

logger = logging.getLogger(__name__)


def count_samples(sample: Iterable[float] | np.ndarray, edges: BinSpec | Iterable[float] | np.ndarray) -> np.ndarray:
    """
    Count samples into bins delimited by `edges` (a BinSpec, or a sequence
    validated like BinSpec.from_edges).

    - values below edges[0] or above edges[-1] are dropped
    - a value on an interior edge goes to the bin on its left
    - edges[0] belongs to the first bin, edges[-1] to the last
    """
    spec = edges if isinstance(edges, BinSpec) else BinSpec.from_edges(edges)
    x = as_sample(sample)
    e = spec.as_array()
    n_bins = spec.n_bins

    x = x[(x >= e[0]) & (x <= e[-1])]
    # side="left": an exact edge hit returns that edge's index, so idx - 1 is the left bin
    idx = np.searchsorted(e, x, side="left") - 1
    idx = np.clip(idx, 0, n_bins - 1)
    return np.bincount(idx, minlength=n_bins).astype(np.int64)


@dataclass(frozen=True, eq=False)
class Histogram:
    """
    Immutable histogram: bin spec, per-bin counts and the size of the sample
    it was built from (including dropped out-of-range values).
    """
    spec: BinSpec
    counts: np.ndarray
    n_samples: int

    def __post_init__(self) -> None:
        c = np.array(self.counts, dtype=np.int64, copy=True).reshape(-1)
        if c.size != self.spec.n_bins:
            raise InvalidInputError(f"Expected {self.spec.n_bins} counts, got {c.size}")
        if (c < 0).any():
            raise InvalidInputError("Counts must be non-negative")
        if int(c.sum()) > int(self.n_samples):
            raise InvalidInputError("Counts exceed the number of samples")
        c.setflags(write=False)
        object.__setattr__(self, "counts", c)
        object.__setattr__(self, "n_samples", int(self.n_samples))

    # -----------------------------
    # Geometry
    # -----------------------------

    @property
    def edges(self) -> np.ndarray:
        return self.spec.as_array()

    @property
    def lower(self) -> np.ndarray:
        return self.spec.lower

    @property
    def upper(self) -> np.ndarray:
        return self.spec.upper

    @property
    def centers(self) -> np.ndarray:
        return self.spec.centers

    @property
    def widths(self) -> np.ndarray:
        return self.spec.widths

    @property
    def n_bins(self) -> int:
        return self.spec.n_bins

    @property
    def n_retained(self) -> int:
        return int(self.counts.sum())

    @property
    def n_dropped(self) -> int:
        return self.n_samples - self.n_retained

    # -----------------------------
    # Views
    # -----------------------------

    def probability(self) -> np.ndarray:
        return normalize.probability(self.counts, self.n_samples)

    def density(self) -> np.ndarray:
        return normalize.density(self.counts, self.widths, self.n_samples)

    def count_density(self) -> np.ndarray:
        return normalize.count_density(self.counts, self.widths)

    def cumulative(self) -> np.ndarray:
        return normalize.cumulative(self.density(), self.widths)

    def view(self, name: str) -> np.ndarray:
        """Named view: count | probability | density | count_density."""
        key = str(name).strip().lower()
        if key == "count":
            return self.counts.astype(float)
        if key == "probability":
            return self.probability()
        if key == "density":
            return self.density()
        if key == "count_density":
            return self.count_density()
        raise InvalidInputError(
            f"Unknown view {name!r}. Allowed: ['count', 'probability', 'density', 'count_density']"
        )

    # -----------------------------
    # Export
    # -----------------------------

    def to_frame(self, view: Optional[str] = None) -> pd.DataFrame:
        """
        One row per bin with every view as a column.
        `view` adds a "value" column holding that view.
        """
        df = pd.DataFrame(
            {
                "lower": self.lower,
                "upper": self.upper,
                "center": self.centers,
                "width": self.widths,
                "count": self.counts,
                "probability": self.probability(),
                "density": self.density(),
                "count_density": self.count_density(),
            }
        )
        if view is not None:
            df["value"] = self.view(view)
        return df

    def to_dict(self, view: Optional[str] = None) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "edges": [float(v) for v in self.spec.edges],
            "counts": [int(v) for v in self.counts],
            "n_samples": self.n_samples,
            "n_dropped": self.n_dropped,
        }
        if view is not None:
            out["view"] = str(view).strip().lower()
            out["values"] = [float(v) for v in self.view(view)]
        return out


# -----------------------------
# Public construction
# -----------------------------

def histogram(sample: Iterable[float] | np.ndarray, spec: BinSpec) -> Histogram:
    x = as_sample(sample)
    counts = count_samples(x, spec)
    hist = Histogram(spec=spec, counts=counts, n_samples=int(x.size))
    logger.debug(
        "histogram: n=%d bins=%d dropped=%d range=[%g, %g]",
        hist.n_samples, hist.n_bins, hist.n_dropped, spec.edges[0], spec.edges[-1],
    )
    return hist


def _data_range(x: np.ndarray, lo: Optional[float], hi: Optional[float]) -> tuple[float, float]:
    if lo is not None and hi is not None:
        return float(lo), float(hi)
    if x.size == 0:
        raise InvalidInputError("Sample is empty; pass an explicit range to bin an empty sample")
    return (
        float(x.min()) if lo is None else float(lo),
        float(x.max()) if hi is None else float(hi),
    )


def histogram_from_count(
    sample: Iterable[float] | np.ndarray,
    count: int,
    lo: Optional[float] = None,
    hi: Optional[float] = None,
) -> Histogram:
    """`count` equal-width bins over [lo, hi] (defaults to the data range)."""
    x = as_sample(sample)
    lo, hi = _data_range(x, lo, hi)
    return histogram(x, BinSpec.from_count(count, lo, hi))


def histogram_from_width(
    sample: Iterable[float] | np.ndarray,
    width: float,
    first: Optional[float] = None,
    last: Optional[float] = None,
) -> Histogram:
    x = as_sample(sample)
    first, last = _data_range(x, first, last)
    return histogram(x, BinSpec.from_width(width, first, last))


def histogram_from_edges(sample: Iterable[float] | np.ndarray, edges: Iterable[float]) -> Histogram:
    return histogram(sample, BinSpec.from_edges(edges))


def histogram_from_rule(sample: Iterable[float] | np.ndarray, rule: str | BinRule = BinRule.AUTO) -> Histogram:
    x = as_sample(sample, allow_empty=False)
    k = bin_count(x, rule)
    logger.debug("rule %s selected %d bins", BinRule.parse(rule).value, k)
    return histogram_from_count(x, k)
