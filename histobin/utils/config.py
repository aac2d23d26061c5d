from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from histobin.errors import InvalidInputError
from histobin.rules.heuristics import BinRule

VIEWS = ("count", "probability", "density", "count_density")
SOURCE_KINDS = ("normal", "csv")


# -----------------------------
# Config
# -----------------------------

@dataclass(frozen=True)
class SourceConfig:
    kind: str = "normal"

    # kind == "normal"
    n: int = 10000
    mean: float = 0.0
    std: float = 1.0
    seed: int = 0

    # kind == "csv"
    path: Optional[str] = None
    column: Optional[str] = None
    limit: Optional[int] = None


@dataclass(frozen=True)
class BinningConfig:
    rule: BinRule = BinRule.AUTO
    bins: Optional[int] = None
    width: Optional[float] = None
    edges: Optional[List[float]] = None

    @property
    def mode(self) -> str:
        if self.bins is not None:
            return "bins"
        if self.width is not None:
            return "width"
        if self.edges is not None:
            return "edges"
        return "rule"


@dataclass(frozen=True)
class HistogramConfig:
    source: SourceConfig
    binning: BinningConfig
    view: str = "count"
    output_path: Optional[Path] = None
    log_level: str = "INFO"
    log_file: Optional[Path] = None


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Missing config file: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInputError(f"Invalid YAML structure in {path}: expected a mapping at top level.")
    return data


def _section(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
    sec = cfg.get(name) or {}
    if not isinstance(sec, dict):
        raise InvalidInputError(f"config: '{name}' must be a mapping")
    return sec


def _opt(v: Any, cast):
    return None if v is None else cast(v)


def parse_config(cfg: Dict[str, Any]) -> HistogramConfig:
    src = _section(cfg, "source")
    kind = str(src.get("kind", "normal")).lower()
    if kind not in SOURCE_KINDS:
        raise InvalidInputError(f"config: source.kind must be one of {list(SOURCE_KINDS)}, got {kind!r}")

    source = SourceConfig(
        kind=kind,
        n=int(src.get("n", 10000)),
        mean=float(src.get("mean", 0.0)),
        std=float(src.get("std", 1.0)),
        seed=int(src.get("seed", 0)),
        path=_opt(src.get("path"), str),
        column=_opt(src.get("column"), str),
        limit=_opt(src.get("limit"), int),
    )
    if kind == "csv" and (not source.path or not source.column):
        raise InvalidInputError("config: source.path and source.column are required for kind 'csv'")

    b = _section(cfg, "binning")
    edges = b.get("edges")
    binning = BinningConfig(
        rule=BinRule.parse(b.get("rule", "auto")),
        bins=_opt(b.get("bins"), int),
        width=_opt(b.get("width"), float),
        edges=None if edges is None else list(map(float, edges)),
    )
    validate_binning(binning)

    out = _section(cfg, "output")
    view = str(out.get("view", "count")).lower()
    if view not in VIEWS:
        raise InvalidInputError(f"config: output.view must be one of {list(VIEWS)}, got {view!r}")

    log = _section(cfg, "logging")

    return HistogramConfig(
        source=source,
        binning=binning,
        view=view,
        output_path=_opt(out.get("path"), Path),
        log_level=str(log.get("level", "INFO")),
        log_file=_opt(log.get("file"), Path),
    )


def validate_binning(binning: BinningConfig) -> None:
    chosen = [k for k in ("bins", "width", "edges") if getattr(binning, k) is not None]
    if len(chosen) > 1:
        raise InvalidInputError(f"config: set at most one of binning.bins/width/edges, got {chosen}")
    if binning.edges is not None and len(binning.edges) < 2:
        raise InvalidInputError("config: binning.edges must have at least 2 edges")


def load_histogram_config(path: Path) -> HistogramConfig:
    return parse_config(_load_yaml(Path(path)))


def with_binning(cfg: HistogramConfig, **overrides: Any) -> HistogramConfig:
    """
    Replace binning settings (CLI overrides). Setting one of bins/width/rule
    clears the others so the override wins.
    """
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if not overrides:
        return cfg

    cleared: Dict[str, Any] = {"bins": None, "width": None, "edges": None}
    if "rule" in overrides:
        overrides["rule"] = BinRule.parse(overrides["rule"])
    binning = replace(cfg.binning, **{**cleared, **overrides})
    validate_binning(binning)
    return replace(cfg, binning=binning)
