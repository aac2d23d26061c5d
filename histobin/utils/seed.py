from __future__ import annotations

import numpy as np

from histobin.errors import InvalidInputError


def make_rng(seed: int | None = 0) -> np.random.Generator:
    """
    Explicit, seedable generator for demo data.
    Pass it around instead of touching numpy's global random state.
    """
    return np.random.default_rng(seed)


def normal_sample(rng: np.random.Generator, n: int, mean: float = 0.0, std: float = 1.0) -> np.ndarray:
    if int(n) != n or n < 0:
        raise InvalidInputError(f"Sample size must be a non-negative integer, got {n!r}")
    if not std > 0:
        raise InvalidInputError(f"std must be > 0, got {std}")
    return rng.normal(loc=float(mean), scale=float(std), size=int(n))
