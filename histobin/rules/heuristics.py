from __future__ import annotations

import math
from enum import Enum
from typing import Callable, Dict, Iterable

import numpy as np

from histobin.errors import InvalidInputError
from histobin.stats.descriptive import as_sample, quantile

MIN_BINS = 1
MAX_BINS = 500

INTEGER_TOL = 1e-9


def clamp_bins(k: int) -> int:
    return int(min(MAX_BINS, max(MIN_BINS, k)))


def _data(sample: Iterable[float] | np.ndarray) -> np.ndarray:
    return as_sample(sample, allow_empty=False)


def _bins_for_width(arr: np.ndarray, h: float) -> int:
    data_range = float(arr.max() - arr.min())
    k = data_range / h
    if not math.isfinite(k):
        return MAX_BINS
    return clamp_bins(math.ceil(k))


# -----------------------------
# Rules
# -----------------------------

def sturges_bins(sample: Iterable[float] | np.ndarray) -> int:
    n = _data(sample).size
    return clamp_bins(math.ceil(math.log2(n) + 1))


def sqrt_bins(sample: Iterable[float] | np.ndarray) -> int:
    n = _data(sample).size
    return clamp_bins(math.ceil(math.sqrt(n)))


def scott_bins(sample: Iterable[float] | np.ndarray) -> int:
    """
    Scott's rule: h = 3.5 * sigma / N^(1/3).
    Constant data (h == 0) and N < 2 give a single bin.
    """
    arr = _data(sample)
    n = arr.size
    if n < 2:
        return 1

    sigma = float(arr.std(ddof=0))
    h = 3.5 * sigma / n ** (1.0 / 3.0)
    if h <= 0:
        return 1
    return _bins_for_width(arr, h)


def freedman_diaconis_bins(sample: Iterable[float] | np.ndarray) -> int:
    """
    Freedman-Diaconis rule: h = 2 * IQR / N^(1/3).
    Falls back to Sturges when the IQR collapses to zero.
    """
    arr = _data(sample)
    n = arr.size
    if n < 2:
        return 1

    spread = quantile(arr, 0.75) - quantile(arr, 0.25)
    if spread <= 0:
        return sturges_bins(arr)

    h = 2.0 * spread / n ** (1.0 / 3.0)
    if h <= 0:
        return 1
    return _bins_for_width(arr, h)


def integer_bins(sample: Iterable[float] | np.ndarray) -> int:
    """One bin per integer when every value is integer-like, else Sturges."""
    arr = _data(sample)
    integer_like = bool(np.all(np.abs(arr - np.rint(arr)) < INTEGER_TOL))
    if not integer_like:
        return sturges_bins(arr)

    lo = math.floor(float(arr.min()))
    hi = math.ceil(float(arr.max()))
    return clamp_bins(hi - lo + 1)


def auto_bins(sample: Iterable[float] | np.ndarray) -> int:
    arr = _data(sample)
    return clamp_bins(max(freedman_diaconis_bins(arr), sturges_bins(arr)))


# -----------------------------
# Rule selection
# -----------------------------

class BinRule(str, Enum):
    AUTO = "auto"
    SCOTT = "scott"
    FREEDMAN_DIACONIS = "fd"
    INTEGERS = "integers"
    STURGES = "sturges"
    SQRT = "sqrt"

    @classmethod
    def parse(cls, name: "str | BinRule") -> "BinRule":
        if isinstance(name, BinRule):
            return name
        key = str(name).strip().lower()
        for rule in cls:
            if key in (rule.value, rule.name.lower()):
                return rule
        allowed = [r.value for r in cls]
        raise InvalidInputError(f"Unknown bin rule {name!r}. Allowed: {allowed}")


_RULES: Dict[BinRule, Callable[[np.ndarray], int]] = {
    BinRule.AUTO: auto_bins,
    BinRule.SCOTT: scott_bins,
    BinRule.FREEDMAN_DIACONIS: freedman_diaconis_bins,
    BinRule.INTEGERS: integer_bins,
    BinRule.STURGES: sturges_bins,
    BinRule.SQRT: sqrt_bins,
}


def bin_count(sample: Iterable[float] | np.ndarray, rule: str | BinRule = BinRule.AUTO) -> int:
    return _RULES[BinRule.parse(rule)](_data(sample))


def compare_rules(sample: Iterable[float] | np.ndarray) -> Dict[BinRule, int]:
    """Bin count of every rule, in BinRule order."""
    arr = _data(sample)
    return {rule: _RULES[rule](arr) for rule in BinRule}
