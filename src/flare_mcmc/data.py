"""
Synthetic observation data for Solar Flare MCMC.

Generates noisy light curves from known ("true") flare parameters so the
sampler can be checked against ground truth.

Noise model:
    sigma = 0.2 * |ymodel| + 0.01        (20% proportional, with a floor)
    ydata = ymodel + U[-sigma, sigma)

Example:
    rng = np.random.default_rng(42)
    data = generate_synthetic_data(INITIAL_PARAMS, point_count=100, t_max=10.0, rng=rng)
    df = data.to_frame()   # columns: t, ydata, ymodel, sigma
"""
import numpy as np
import pandas as pd
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Iterable, Optional

from .model import FlareParams, InvalidConfiguration, intensity_curve, positive_real


# Proportional noise level and floor used for generation and for the
# likelihood's per-point noise estimate
NOISE_FRACTION = 0.2
NOISE_FLOOR = 0.01


def noise_scale(y: np.ndarray) -> np.ndarray:
    """Per-point noise scale 0.2·|y| + 0.01."""
    return NOISE_FRACTION * np.abs(y) + NOISE_FLOOR


@dataclass(frozen=True)
class DataPoint:
    """One observation of the flare light curve."""
    t: float        # Time (s)
    ydata: float    # Noisy observed intensity
    ymodel: float   # True intensity under the generating parameters
    sigma: float    # Observation noise scale (> 0)


class ObservationSet(Sequence):
    """Immutable, time-ordered set of DataPoints with array views.

    The arrays are read-only so the set can be shared between runs.
    """

    def __init__(self, points: Iterable[DataPoint]):
        self._points = tuple(points)
        self.t = self._column('t')
        self.ydata = self._column('ydata')
        self.ymodel = self._column('ymodel')
        self.sigma = self._column('sigma')

    def _column(self, name: str) -> np.ndarray:
        values = np.array([getattr(p, name) for p in self._points], dtype=float)
        values.flags.writeable = False
        return values

    def __getitem__(self, index):
        if isinstance(index, slice):
            return ObservationSet(self._points[index])
        return self._points[index]

    def __len__(self) -> int:
        return len(self._points)

    def __repr__(self) -> str:
        return f"ObservationSet(n={len(self)})"

    def to_frame(self) -> pd.DataFrame:
        """Observations as a DataFrame with columns t, ydata, ymodel, sigma."""
        return pd.DataFrame({
            't': self.t,
            'ydata': self.ydata,
            'ymodel': self.ymodel,
            'sigma': self.sigma,
        })


def as_observation_set(data: Iterable[DataPoint]) -> ObservationSet:
    """Wrap any sequence of DataPoints (no copy if already an ObservationSet)."""
    if isinstance(data, ObservationSet):
        return data
    return ObservationSet(data)


def generate_synthetic_data(true_params: FlareParams,
                            point_count: int = 100,
                            t_max: float = 10.0,
                            rng: Optional[np.random.Generator] = None) -> ObservationSet:
    """Sample the light curve on [0, t_max) and add uniform noise.

    Args:
        true_params: Generating (ground truth) parameters
        point_count: Number of samples; t_i = i * t_max / point_count
        t_max: End of the (open) time window in seconds
        rng: Random generator; a fresh unseeded one if None

    Returns:
        ObservationSet ordered by increasing t
    """
    if isinstance(point_count, bool) or not isinstance(point_count, (int, np.integer)):
        raise InvalidConfiguration(f"point_count must be an integer, got {point_count!r}")
    if point_count < 0:
        raise InvalidConfiguration(f"point_count must be non-negative, got {point_count}")
    t_max = positive_real('t_max', t_max)

    if rng is None:
        rng = np.random.default_rng()

    dt = t_max / point_count if point_count else 0.0
    t = np.arange(point_count) * dt
    ymodel = intensity_curve(t, true_params)
    sigma = noise_scale(ymodel)
    noise = (rng.random(point_count) - 0.5) * 2.0 * sigma
    ydata = ymodel + noise

    return ObservationSet(
        DataPoint(t=float(ti), ydata=float(yd), ymodel=float(ym), sigma=float(s))
        for ti, yd, ym, s in zip(t, ydata, ymodel, sigma)
    )


def random_true_params(rng: np.random.Generator) -> FlareParams:
    """Fresh ground truth for a reset: A in [0.5, 2), tau in [2, 9), omega in [5, 15)."""
    return FlareParams(
        A=0.5 + rng.random() * 1.5,
        tau=2.0 + rng.random() * 7.0,
        omega=5.0 + rng.random() * 10.0,
    )
