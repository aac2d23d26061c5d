# histobin/cli/run_histogram.py

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import numpy as np

from histobin.binning.engine import (
    Histogram,
    histogram_from_count,
    histogram_from_edges,
    histogram_from_rule,
    histogram_from_width,
)
from histobin.io.artifacts import save_histogram
from histobin.io.csv_source import load_csv_column
from histobin.rules.heuristics import BinRule, compare_rules
from histobin.utils.config import (
    VIEWS,
    BinningConfig,
    SourceConfig,
    load_histogram_config,
    parse_config,
    with_binning,
)
from histobin.utils.logging import setup_logger
from histobin.utils.seed import make_rng, normal_sample


def load_sample(src: SourceConfig) -> np.ndarray:
    if src.kind == "csv":
        return load_csv_column(src.path, src.column, limit=src.limit)
    return normal_sample(make_rng(src.seed), src.n, mean=src.mean, std=src.std)


def build_histogram(sample: np.ndarray, binning: BinningConfig) -> Histogram:
    mode = binning.mode
    if mode == "bins":
        return histogram_from_count(sample, binning.bins)
    if mode == "width":
        return histogram_from_width(sample, binning.width)
    if mode == "edges":
        return histogram_from_edges(sample, binning.edges)
    return histogram_from_rule(sample, binning.rule)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="histobin",
        description="Bin a numeric sample into a histogram and write counts / normalized views.",
    )
    parser.add_argument("--config", type=Path, default=None, help="YAML config (see configs/histogram.yaml)")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--rule", choices=[r.value for r in BinRule], default=None, help="Bin-count heuristic")
    mode.add_argument("--bins", type=int, default=None, help="Fixed number of equal-width bins")
    mode.add_argument("--width", type=float, default=None, help="Fixed bin width")

    parser.add_argument("--view", choices=list(VIEWS), default=None, help="Which per-bin values to report")
    parser.add_argument("--out", type=Path, default=None, help="Output path (.json or .csv)")
    parser.add_argument("--compare", action="store_true", help="Also log the bin count of every rule")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _parser().parse_args(argv)

    cfg = load_histogram_config(args.config) if args.config is not None else parse_config({})
    cfg = with_binning(cfg, rule=args.rule, bins=args.bins, width=args.width)
    if args.view is not None:
        cfg = replace(cfg, view=args.view)
    if args.out is not None:
        cfg = replace(cfg, output_path=args.out)

    logger = setup_logger(level=cfg.log_level, log_file=cfg.log_file)

    if args.config is not None:
        logger.info(f"config: {args.config}")
    logger.info(f"source: kind={cfg.source.kind}")

    sample = load_sample(cfg.source)
    logger.info(f"sample: n={sample.size}")

    if args.compare:
        for rule, k in compare_rules(sample).items():
            logger.info(f"rule {rule.value:<9} -> {k} bins")

    hist = build_histogram(sample, cfg.binning)
    logger.info(
        f"binning: mode={cfg.binning.mode}, bins={hist.n_bins}, "
        f"retained={hist.n_retained}, dropped={hist.n_dropped}"
    )

    if cfg.output_path is not None:
        out = save_histogram(cfg.output_path, hist, view=cfg.view)
        logger.info(f"Saved {cfg.view} view: {out}")
    else:
        for lo, hi, v in zip(hist.lower, hist.upper, hist.view(cfg.view)):
            logger.info(f"[{lo:.6g}, {hi:.6g}] {cfg.view}={v:.6g}")

    logger.info("Done.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
