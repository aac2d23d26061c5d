from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Tuple

import numpy as np

from histobin.errors import InvalidInputError

# Relative slack so that (last - first) being an exact multiple of width
# does not lose the final bin to rounding.
WIDTH_TOL = 1e-9

# Upper bound on bins for count- and width-based specs; keeps edge arrays small.
MAX_SPEC_BINS = 100_000


def _finite(name: str, v: float) -> float:
    v = float(v)
    if not math.isfinite(v):
        raise InvalidInputError(f"{name} must be finite, got {v}")
    return v


def _pinned(edges: np.ndarray, lo: float, hi: float) -> Tuple[float, ...]:
    """
    Pin the end edges to lo/hi. A range only a few ULPs wide cannot hold
    distinct interior edges; it collapses to the single bin [lo, hi].
    """
    edges[0], edges[-1] = lo, hi
    if not np.all(np.diff(edges) > 0):
        return (lo, hi)
    return tuple(edges.tolist())


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True)
class BinSpec:
    """
    Validated bin edges.

    Bins are contiguous; edges are strictly increasing except for the
    degenerate single bin [v, v] used when the range collapses to a point.
    """
    edges: Tuple[float, ...]

    def __post_init__(self) -> None:
        e = tuple(float(v) for v in self.edges)
        object.__setattr__(self, "edges", e)

        if len(e) < 2:
            raise InvalidInputError(f"Bin edges need at least 2 values, got {len(e)}")
        if not all(math.isfinite(v) for v in e):
            raise InvalidInputError("Bin edges must be finite")
        if len(e) == 2 and e[0] == e[1]:
            return
        bad = [i for i in range(len(e) - 1) if not e[i] < e[i + 1]]
        if bad:
            i = bad[0]
            raise InvalidInputError(
                f"Bin edges must be strictly increasing: edges[{i}]={e[i]} >= edges[{i + 1}]={e[i + 1]}"
            )

    # -----------------------------
    # Constructors
    # -----------------------------

    @classmethod
    def from_edges(cls, edges: Iterable[float]) -> "BinSpec":
        e = tuple(float(v) for v in edges)
        if len(e) == 2 and e[0] == e[1]:
            raise InvalidInputError("Explicit bin edges must be strictly increasing")
        return cls(e)

    @classmethod
    def from_count(cls, count: int, lo: float, hi: float) -> "BinSpec":
        """
        `count` equal-width bins over [lo, hi]; first and last edge are exactly lo and hi.
        lo == hi gives a single zero-width bin.
        """
        if isinstance(count, bool) or int(count) != count or count < 1:
            raise InvalidInputError(f"Bin count must be a positive integer, got {count!r}")
        if count > MAX_SPEC_BINS:
            raise InvalidInputError(f"Bin count {count} exceeds the maximum of {MAX_SPEC_BINS}")
        lo = _finite("lo", lo)
        hi = _finite("hi", hi)
        if lo > hi:
            raise InvalidInputError(f"Range must satisfy lo <= hi, got lo={lo}, hi={hi}")
        if lo == hi:
            return cls((lo, hi))

        return cls(_pinned(np.linspace(lo, hi, int(count) + 1), lo, hi))

    @classmethod
    def from_width(cls, width: float, first: float, last: float) -> "BinSpec":
        """
        Bins of `width` starting at `first`. The last edge is pinned to `last`,
        so the final bin absorbs any remainder and may be wider than `width`.
        """
        width = _finite("width", width)
        if width <= 0:
            raise InvalidInputError(f"Bin width must be > 0, got {width}")
        first = _finite("first", first)
        last = _finite("last", last)
        if first > last:
            raise InvalidInputError(f"Range must satisfy first <= last, got first={first}, last={last}")
        if first == last:
            return cls((first, last))

        k = (last - first) / width * (1.0 + WIDTH_TOL)
        if not math.isfinite(k) or math.floor(k) > MAX_SPEC_BINS:
            raise InvalidInputError(
                f"Bin width {width} over [{first}, {last}] needs more than {MAX_SPEC_BINS} bins"
            )
        n = max(1, int(math.floor(k)))
        return cls(_pinned(first + width * np.arange(n + 1, dtype=float), first, last))

    # -----------------------------
    # Derived geometry
    # -----------------------------

    @property
    def n_bins(self) -> int:
        return len(self.edges) - 1

    @property
    def is_degenerate(self) -> bool:
        return self.n_bins == 1 and self.edges[0] == self.edges[1]

    def as_array(self) -> np.ndarray:
        return _readonly(np.asarray(self.edges, dtype=float))

    @property
    def lower(self) -> np.ndarray:
        return _readonly(np.asarray(self.edges[:-1], dtype=float))

    @property
    def upper(self) -> np.ndarray:
        return _readonly(np.asarray(self.edges[1:], dtype=float))

    @property
    def widths(self) -> np.ndarray:
        e = np.asarray(self.edges, dtype=float)
        return _readonly(np.diff(e))

    @property
    def centers(self) -> np.ndarray:
        e = np.asarray(self.edges, dtype=float)
        return _readonly(0.5 * (e[:-1] + e[1:]))
