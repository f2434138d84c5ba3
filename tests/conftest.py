"""
Pytest configuration and fixtures for reproducible testing.

This file provides centralized test configuration including:
- Random seed management for reproducibility
- Shared fixtures (generators, data sets, short runs)
- Headless plotting backend
"""
import os
import sys

import matplotlib
matplotlib.use('Agg')

import pytest
import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), 'src'))

from flare_mcmc.model import INITIAL_PARAMS
from flare_mcmc.data import generate_synthetic_data


@pytest.fixture(scope="session", autouse=True)
def set_random_seeds():
    """Seed the legacy global NumPy state once per session.

    The package itself never touches global state; this only guards
    tests that reach for np.random directly.
    """
    np.random.seed(42)
    yield


@pytest.fixture
def rng():
    """Fresh seeded generator for each test."""
    return np.random.default_rng(42)


@pytest.fixture
def flare_data(rng):
    """100-point synthetic data set from the reference ground truth."""
    return generate_synthetic_data(INITIAL_PARAMS, point_count=100, t_max=10.0, rng=rng)


class SequenceRNG:
    """Generator stand-in returning preset values from random()."""

    def __init__(self, values):
        self._values = iter(values)

    def random(self):
        return next(self._values)


@pytest.fixture
def sequence_rng():
    return SequenceRNG
