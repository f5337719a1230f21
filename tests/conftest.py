"""Pytest configuration and shared fixtures for tsconduit tests.

This module provides:
- Deterministic RNG fixtures for numpy
- A log-capturing stream for the package's non-propagating loggers
- Small simulated series shared across test modules
"""

import logging
import os
from io import StringIO
from typing import Iterator

import numpy as np
import pytest

from tsconduit.logging import configure_logging


def _seed() -> int:
    return int(os.environ.get("TEST_RNG_SEED", "0"))


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    This ensures tests are reproducible while allowing override for debugging.

    Returns:
        A seeded numpy.random.Generator instance.
    """
    return np.random.default_rng(_seed())


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Auto-use fixture to set the global numpy seed for reproducibility."""
    np.random.seed(_seed())


@pytest.fixture
def log_stream() -> Iterator[StringIO]:
    """Route every tsconduit logger to an in-memory stream at DEBUG level.

    tsconduit loggers do not propagate to the root logger, so ``caplog`` does
    not see them.
    """
    stream = StringIO()
    configure_logging(level=logging.DEBUG, stream=stream)
    try:
        yield stream
    finally:
        configure_logging(level=logging.WARNING)


def make_ar1(n: int, phi: float, seed: int = 42) -> np.ndarray:
    """Simulate x_t = phi * x_{t-1} + e_t with standard normal e_t."""
    eps = np.random.default_rng(seed).normal(size=n)
    x = np.zeros(n)
    x[0] = eps[0]
    for t in range(1, n):
        x[t] = phi * x[t - 1] + eps[t]
    return x


@pytest.fixture
def ar1_series() -> np.ndarray:
    """AR(1) series with phi=0.7, n=5000."""
    return make_ar1(5000, 0.7)


@pytest.fixture
def ar1_factory():
    """Return the AR(1) simulator so tests can pick n, phi and seed."""
    return make_ar1
