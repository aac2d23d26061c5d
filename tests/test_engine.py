"""
test_engine.py
--------------
Unit tests for counting, boundary tie-breaks and Histogram construction.
"""

import numpy as np
import pytest

from histobin.binning.edges import BinSpec
from histobin.binning.engine import (
    Histogram,
    count_samples,
    histogram,
    histogram_from_count,
    histogram_from_edges,
    histogram_from_rule,
    histogram_from_width,
)
from histobin.errors import InvalidInputError
from histobin.rules.heuristics import sturges_bins


# ---------------------------------------------------------------------------
# 1. Boundary rules
# ---------------------------------------------------------------------------

def test_interior_edge_goes_to_left_bin():
    assert count_samples([1.0], [0.0, 1.0, 2.0]).tolist() == [1, 0]


def test_global_max_is_counted_in_last_bin():
    assert count_samples([2.0], [0.0, 1.0, 2.0]).tolist() == [0, 1]


def test_global_min_is_counted_in_first_bin():
    assert count_samples([0.0], [0.0, 1.0, 2.0]).tolist() == [1, 0]


def test_out_of_range_samples_dropped():
    hist = histogram_from_edges([-0.5, 0.5, 1.5, 2.5], [0.0, 1.0, 2.0])
    assert hist.counts.tolist() == [1, 1]
    assert hist.n_samples == 4
    assert hist.n_dropped == 2


def test_every_edge_hit():
    edges = [0.0, 1.0, 2.0, 3.0]
    assert count_samples(edges, edges).tolist() == [2, 1, 1]


# ---------------------------------------------------------------------------
# 2. Conservation
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("k", [1, 2, 7, 50, 500])
def test_counts_sum_to_n_over_data_range(normal_10k, k):
    hist = histogram_from_count(normal_10k, k)
    assert hist.counts.sum() == normal_10k.size
    assert hist.n_dropped == 0


def test_width_binning_over_data_range_keeps_everything(normal_10k):
    hist = histogram_from_width(normal_10k, 0.25)
    assert hist.counts.sum() == normal_10k.size


def test_matches_numpy_for_interior_points(rng):
    # continuous draws never hit an interior edge, so numpy's convention agrees
    x = rng.uniform(0.0, 10.0, size=5000)
    edges = np.linspace(0.0, 10.0, 11)
    ours = count_samples(x, edges)
    ref, _ = np.histogram(x, bins=edges)
    assert ours.tolist() == ref.tolist()


# ---------------------------------------------------------------------------
# 3. Degenerate input
# ---------------------------------------------------------------------------

def test_constant_data_single_zero_width_bin(constant_sample):
    hist = histogram_from_count(constant_sample, 10)
    assert hist.n_bins == 1
    assert hist.counts.tolist() == [5]
    assert hist.widths.tolist() == [0.0]


def test_single_sample(rng):
    hist = histogram_from_rule([7.5])
    assert hist.counts.tolist() == [1]


def test_empty_sample_with_explicit_range():
    hist = histogram_from_count([], 4, 0.0, 1.0)
    assert hist.counts.tolist() == [0, 0, 0, 0]
    assert hist.probability().tolist() == [0.0] * 4
    assert hist.density().tolist() == [0.0] * 4


def test_empty_sample_without_range_rejected():
    with pytest.raises(InvalidInputError):
        histogram_from_count([], 4)


def test_non_finite_sample_rejected():
    with pytest.raises(InvalidInputError):
        histogram_from_edges([0.5, float("nan")], [0.0, 1.0])


# ---------------------------------------------------------------------------
# 4. Histogram value
# ---------------------------------------------------------------------------

def test_histogram_geometry():
    hist = histogram_from_edges([0.5, 1.5, 1.7], [0.0, 1.0, 3.0])
    assert hist.lower.tolist() == [0.0, 1.0]
    assert hist.upper.tolist() == [1.0, 3.0]
    assert hist.centers.tolist() == [0.5, 2.0]
    assert hist.widths.tolist() == [1.0, 2.0]
    assert hist.counts.tolist() == [1, 2]


def test_histogram_is_immutable():
    hist = histogram_from_edges([0.5], [0.0, 1.0])
    with pytest.raises(ValueError):
        hist.counts[0] = 10
    with pytest.raises(AttributeError):
        hist.n_samples = 3


def test_histogram_does_not_mutate_input():
    data = np.array([3.0, 1.0, 2.0])
    histogram_from_rule(data)
    assert data.tolist() == [3.0, 1.0, 2.0]


def test_histogram_rejects_inconsistent_counts():
    spec = BinSpec.from_edges([0.0, 1.0, 2.0])
    with pytest.raises(InvalidInputError):
        Histogram(spec=spec, counts=[1, 2, 3], n_samples=6)
    with pytest.raises(InvalidInputError):
        Histogram(spec=spec, counts=[4, 4], n_samples=5)


def test_rule_histogram_uses_rule_count():
    data = np.arange(1000, dtype=float)
    hist = histogram_from_rule(data, "sturges")
    assert hist.n_bins == sturges_bins(data)
    assert hist.edges[0] == 0.0 and hist.edges[-1] == 999.0


def test_integer_rule_on_integer_data():
    hist = histogram_from_rule([1, 2, 2, 3, 5], "integers")
    assert hist.n_bins == 5
    assert hist.counts.sum() == 5


def test_to_frame_and_dict():
    hist = histogram(np.array([0.1, 0.2, 0.9]), BinSpec.from_edges([0.0, 0.5, 1.0]))
    df = hist.to_frame()
    assert list(df.columns) == [
        "lower", "upper", "center", "width", "count", "probability", "density", "count_density",
    ]
    assert df["count"].tolist() == [2, 1]
    d = hist.to_dict()
    assert d == {"edges": [0.0, 0.5, 1.0], "counts": [2, 1], "n_samples": 3, "n_dropped": 0}


def test_view_by_name():
    hist = histogram_from_edges([0.1, 0.2, 0.9, 0.95], [0.0, 0.5, 1.0])
    assert hist.view("count").tolist() == [2.0, 2.0]
    assert hist.view("Probability").tolist() == [50.0, 50.0]
    with pytest.raises(InvalidInputError):
        hist.view("log")


def test_to_frame_and_dict_with_view():
    hist = histogram_from_edges([0.1, 0.2, 0.9, 1.5], [0.0, 0.5, 2.0])
    df = hist.to_frame(view="density")
    np.testing.assert_allclose(df["value"], [1.0, 1 / 3])
    d = hist.to_dict(view="Probability")
    assert d["view"] == "probability"
    assert d["values"] == [50.0, 50.0]


# ---------------------------------------------------------------------------
# 5. Narrow ranges and edge validation
# ---------------------------------------------------------------------------

def test_range_of_a_few_ulps_collapses_to_one_bin():
    data = [1.0, float(np.nextafter(1.0, 2.0))]
    hist = histogram_from_rule(data, "sturges")
    assert hist.n_bins == 1
    assert hist.counts.tolist() == [2]
    assert hist.edges.tolist() == data


@pytest.mark.parametrize("rule", ["auto", "scott", "fd", "integers", "sturges", "sqrt"])
def test_tiny_range_never_raises(rule):
    base = 1e15
    data = [base, float(np.nextafter(base, 2e15)), float(np.nextafter(np.nextafter(base, 2e15), 2e15))]
    hist = histogram_from_rule(data, rule)
    assert hist.counts.sum() == 3


@pytest.mark.parametrize("edges", [[0.0, 2.0, 1.0], [0.0, 1.0, 1.0, 2.0], [1.0], [3.0, 3.0]])
def test_count_samples_rejects_malformed_edges(edges):
    with pytest.raises(InvalidInputError):
        count_samples([0.5, 1.5], edges)


def test_count_samples_accepts_bin_spec():
    spec = BinSpec.from_count(10, 2.0, 2.0)
    assert count_samples([2.0, 2.0, 3.0], spec).tolist() == [2]
