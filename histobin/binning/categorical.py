from __future__ import annotations

from typing import Hashable, Iterable

import pandas as pd

from histobin.errors import InvalidInputError


def categorical_counts(labels: Iterable[Hashable]) -> pd.Series:
    """
    Occurrences per category label, sorted by label.
    Index = labels, values = counts (int64).
    """
    s = pd.Series(list(labels), dtype=object)
    if s.empty:
        raise InvalidInputError("No category labels given")
    if s.isna().any():
        raise InvalidInputError(f"Category labels contain {int(s.isna().sum())} missing value(s)")

    counts = s.value_counts(sort=False).sort_index()
    counts.index.name = "category"
    counts.name = "count"
    return counts.astype("int64")
