from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import numpy as np
import pandas as pd

from histobin.errors import InvalidInputError

logger = logging.getLogger(__name__)


def _clean(name: str) -> str:
    return str(name).strip().strip('"').strip()


def find_column(columns: List[str], name: str) -> str:
    """Case-insensitive column lookup; quotes and surrounding whitespace are ignored."""
    want = _clean(name).lower()
    for c in columns:
        if _clean(c).lower() == want:
            return c
    raise InvalidInputError(f"CSV column '{name}' not found. Available: {', '.join(map(str, columns))}")


def load_csv_column(source: str | Path, column: str, limit: Optional[int] = None) -> np.ndarray:
    """
    Read one numeric column from a CSV file or URL.
    Rows that do not parse as a finite number are skipped.
    """
    if limit is not None and limit < 1:
        raise InvalidInputError(f"limit must be >= 1, got {limit}")

    df = pd.read_csv(source, nrows=limit, dtype=str, skipinitialspace=True)
    col = find_column(list(df.columns), column)

    values = pd.to_numeric(df[col].str.strip().str.strip('"'), errors="coerce")
    arr = values.to_numpy(dtype=float)
    keep = np.isfinite(arr)

    skipped = int((~keep).sum())
    if skipped:
        logger.debug("load_csv_column: skipped %d unparseable row(s) in %r", skipped, col)
    return arr[keep]
