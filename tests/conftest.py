"""
-------
conftest.py
-------
Shared pytest fixtures for histobin tests.
"""

import logging

import numpy as np
import pytest

from histobin.utils.seed import make_rng, normal_sample


# -----------------------------------------------------------------------------
# Samples
# -----------------------------------------------------------------------------
@pytest.fixture
def rng() -> np.random.Generator:
    """Deterministic generator, fresh per test."""
    return make_rng(1234)


@pytest.fixture
def normal_10k(rng) -> np.ndarray:
    """10k draws from N(0, 1)."""
    return normal_sample(rng, 10000, mean=0.0, std=1.0)


@pytest.fixture
def constant_sample() -> list:
    return [5.0, 5.0, 5.0, 5.0, 5.0]


# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
@pytest.fixture
def clean_logger():
    """Drop handlers installed on the package logger by setup_logger()."""
    logger = logging.getLogger("histobin")
    saved = list(logger.handlers)
    for h in saved:
        logger.removeHandler(h)
    yield logger
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    for h in saved:
        logger.addHandler(h)
