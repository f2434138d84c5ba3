"""
Unit tests for the log-likelihood and random-walk proposals
"""

import math

import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), 'src'))

from flare_mcmc.model import FlareParams, INITIAL_PARAMS, PARAMETER_DOMAINS, PARAMETER_NAMES, intensity
from flare_mcmc.data import DataPoint
from flare_mcmc.likelihood import PROPOSAL_SCALES, log_likelihood, propose


class TestLogLikelihood:
    """Test Gaussian log-likelihood with observed-value noise estimate."""

    def test_empty_data_is_zero(self):
        assert log_likelihood(INITIAL_PARAMS, []) == 0.0

    def test_perfect_fit_is_zero(self):
        points = [DataPoint(t=t, ydata=intensity(t, INITIAL_PARAMS),
                            ymodel=intensity(t, INITIAL_PARAMS), sigma=1.0)
                  for t in (0.0, 0.5, 1.0, 2.5)]
        assert log_likelihood(INITIAL_PARAMS, points) == pytest.approx(0.0)

    def test_matches_hand_computation(self):
        p = FlareParams(A=0.8, tau=4.0, omega=3.0)
        points = [DataPoint(t=0.5, ydata=1.5, ymodel=0.0, sigma=99.0),
                  DataPoint(t=1.25, ydata=-2.0, ymodel=0.0, sigma=99.0)]
        expected = 0.0
        for point in points:
            s = 0.2 * abs(point.ydata) + 0.01
            expected -= (point.ydata - intensity(point.t, p)) ** 2 / (2 * s ** 2)
        assert log_likelihood(p, points) == pytest.approx(expected)

    def test_ignores_stored_sigma(self):
        p = FlareParams(A=0.8, tau=4.0, omega=3.0)
        a = [DataPoint(t=1.0, ydata=2.0, ymodel=0.0, sigma=0.01)]
        b = [DataPoint(t=1.0, ydata=2.0, ymodel=0.0, sigma=50.0)]
        assert log_likelihood(p, a) == log_likelihood(p, b)

    def test_truth_beats_wrong_parameters(self, flare_data):
        assert log_likelihood(INITIAL_PARAMS, flare_data) > \
            log_likelihood(FlareParams(A=0.5, tau=2.0, omega=5.0), flare_data)

    def test_non_positive(self, flare_data):
        assert log_likelihood(FlareParams(A=1.3, tau=6.0, omega=9.0), flare_data) <= 0.0

    def test_accepts_plain_list(self, flare_data):
        assert log_likelihood(INITIAL_PARAMS, list(flare_data)) == \
            pytest.approx(log_likelihood(INITIAL_PARAMS, flare_data))


class TestPropose:
    """Test bounded random-walk proposals."""

    def test_within_half_width_of_current(self, rng):
        current = FlareParams(A=1.0, tau=5.0, omega=10.0)
        step_size = 0.05
        for _ in range(500):
            p = propose(current, step_size, rng)
            for name in PARAMETER_NAMES:
                half_width = step_size * PROPOSAL_SCALES[name] / 2
                assert abs(p[name] - current[name]) <= half_width + 1e-12

    def test_always_in_domain(self, rng):
        edges = [FlareParams(A=0.0, tau=1.0, omega=1.0),
                 FlareParams(A=2.0, tau=10.0, omega=20.0)]
        for current in edges:
            for _ in range(200):
                p = propose(current, 50.0, rng)
                for name, (lower, upper) in PARAMETER_DOMAINS.items():
                    assert lower <= p[name] <= upper

    def test_edge_proposals_clamp(self, sequence_rng):
        current = FlareParams(A=0.0, tau=1.0, omega=1.0)
        p = propose(current, 1.0, sequence_rng([0.0, 0.0, 0.0]))
        assert (p.A, p.tau, p.omega) == (0.0, 1.0, 1.0)

    def test_draw_mapping(self, sequence_rng):
        current = FlareParams(A=1.0, tau=5.0, omega=10.0)
        p = propose(current, 0.1, sequence_rng([1.0, 0.5, 0.0]))
        assert p.A == pytest.approx(1.0 + 0.5 * 0.1 * 0.2)
        assert p.tau == pytest.approx(5.0)
        assert p.omega == pytest.approx(10.0 - 0.5 * 0.1 * 2.0)

    def test_consumes_one_draw_per_parameter(self):
        a = np.random.default_rng(11)
        b = np.random.default_rng(11)
        propose(INITIAL_PARAMS, 0.05, a)
        b.random(3)
        assert a.random() == b.random()

    def test_proposal_is_new_instance(self, rng):
        p = propose(INITIAL_PARAMS, 0.05, rng)
        assert isinstance(p, FlareParams)
        assert p is not INITIAL_PARAMS

    def test_default_generator(self):
        p = propose(INITIAL_PARAMS, 0.05)
        assert all(
            abs(p[name] - INITIAL_PARAMS[name]) <= 0.025 * PROPOSAL_SCALES[name]
            for name in PARAMETER_NAMES
        )
