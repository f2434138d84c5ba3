"""
Unit tests for synthetic data generation
"""

import pytest
import numpy as np
import pandas as pd
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), 'src'))

from flare_mcmc.model import FlareParams, INITIAL_PARAMS, InvalidConfiguration, intensity
from flare_mcmc.data import (
    DataPoint, ObservationSet, as_observation_set,
    generate_synthetic_data, random_true_params,
)


class TestGenerateSyntheticData:
    """Test the noisy light-curve generator."""

    def test_length_matches_point_count(self, rng):
        for n in (1, 10, 100, 257):
            assert len(generate_synthetic_data(INITIAL_PARAMS, point_count=n, rng=rng)) == n

    def test_times_strictly_increasing(self, flare_data):
        assert np.all(np.diff(flare_data.t) > 0)

    def test_time_grid(self, flare_data):
        assert flare_data.t[0] == 0.0
        np.testing.assert_allclose(flare_data.t, np.arange(100) * 0.1)
        assert flare_data.t[-1] < 10.0

    def test_sigma_strictly_positive(self, flare_data):
        assert np.all(flare_data.sigma > 0)
        assert np.all(flare_data.sigma >= 0.01)

    def test_noise_model(self, flare_data):
        np.testing.assert_allclose(flare_data.sigma, 0.2 * np.abs(flare_data.ymodel) + 0.01)
        assert np.all(np.abs(flare_data.ydata - flare_data.ymodel) <= flare_data.sigma * (1 + 1e-9))

    def test_ymodel_is_true_intensity(self, flare_data):
        for point in flare_data[:20]:
            assert point.ymodel == pytest.approx(intensity(point.t, INITIAL_PARAMS))

    def test_noise_is_present(self, flare_data):
        assert not np.allclose(flare_data.ydata, flare_data.ymodel)

    def test_same_seed_same_data(self):
        a = generate_synthetic_data(INITIAL_PARAMS, rng=np.random.default_rng(7))
        b = generate_synthetic_data(INITIAL_PARAMS, rng=np.random.default_rng(7))
        np.testing.assert_array_equal(a.ydata, b.ydata)

    def test_different_seed_different_data(self):
        a = generate_synthetic_data(INITIAL_PARAMS, rng=np.random.default_rng(7))
        b = generate_synthetic_data(INITIAL_PARAMS, rng=np.random.default_rng(8))
        assert not np.array_equal(a.ydata, b.ydata)

    def test_unseeded_generator_by_default(self):
        data = generate_synthetic_data(INITIAL_PARAMS, point_count=5)
        assert len(data) == 5

    def test_zero_points_gives_empty_set(self, rng):
        data = generate_synthetic_data(INITIAL_PARAMS, point_count=0, rng=rng)
        assert len(data) == 0
        assert data.t.shape == (0,)

    @pytest.mark.parametrize("kwargs", [
        {'point_count': -1},
        {'point_count': 2.5},
        {'t_max': 0.0},
        {'t_max': -10.0},
        {'t_max': float('inf')},
        {'t_max': float('nan')},
        {'t_max': 'ten'},
    ])
    def test_invalid_arguments(self, rng, kwargs):
        with pytest.raises(InvalidConfiguration):
            generate_synthetic_data(INITIAL_PARAMS, rng=rng, **kwargs)


class TestObservationSet:
    """Test the immutable observation container."""

    def test_is_a_sequence_of_datapoints(self, flare_data):
        assert isinstance(flare_data[0], DataPoint)
        assert list(flare_data)[3] == flare_data[3]

    def test_arrays_are_read_only(self, flare_data):
        with pytest.raises(ValueError):
            flare_data.ydata[0] = 1.0

    def test_datapoints_are_frozen(self, flare_data):
        with pytest.raises(Exception):
            flare_data[0].ydata = 1.0

    def test_slice_returns_observation_set(self, flare_data):
        head = flare_data[:10]
        assert isinstance(head, ObservationSet)
        assert len(head) == 10

    def test_wrap_plain_list(self):
        points = [DataPoint(t=0.0, ydata=0.0, ymodel=0.0, sigma=0.01),
                  DataPoint(t=0.5, ydata=1.0, ymodel=1.1, sigma=0.23)]
        obs = as_observation_set(points)
        np.testing.assert_array_equal(obs.t, [0.0, 0.5])
        assert as_observation_set(obs) is obs

    def test_to_frame(self, flare_data):
        df = flare_data.to_frame()
        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ['t', 'ydata', 'ymodel', 'sigma']
        assert len(df) == 100


class TestRandomTrueParams:
    """Test reset ground-truth randomization."""

    def test_ranges(self, rng):
        for _ in range(200):
            p = random_true_params(rng)
            assert 0.5 <= p.A < 2.0
            assert 2.0 <= p.tau < 9.0
            assert 5.0 <= p.omega < 15.0

    def test_deterministic_given_seed(self):
        a = random_true_params(np.random.default_rng(3))
        b = random_true_params(np.random.default_rng(3))
        assert a == b
        assert isinstance(a, FlareParams)
