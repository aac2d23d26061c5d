from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import json

from histobin.binning.engine import Histogram


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def save_json(path: Path, obj: Any, *, indent: int = 2) -> None:
    write_text(path, json.dumps(obj, indent=indent))


def load_json(path: Path) -> Any:
    return json.loads(read_text(path))


def save_histogram(path: Path, hist: Histogram, *, view: Optional[str] = None) -> Path:
    """
    .json -> edges/counts/n_samples mapping, plus "view"/"values" when a view is given
    anything else -> one CSV row per bin with every view as a column, plus "value"
    """
    path = Path(path)
    if path.suffix.lower() == ".json":
        save_json(path, hist.to_dict(view=view))
    else:
        path.parent.mkdir(parents=True, exist_ok=True)
        hist.to_frame(view=view).to_csv(path, index=False)
    return path
