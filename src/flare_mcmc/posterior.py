"""
Posterior summaries from MCMC sample histories.

For each parameter independently:
- 20-bin histogram over the sampled range
- 68% credible interval from the 16th / 84th percentile ranks

Summaries are read-only views over the history passed in; calling them
twice on an unchanged history returns identical results.
"""
import math
import numpy as np
from typing import Dict, Iterable, List, NamedTuple

from .model import FlareParams, InvalidConfiguration, PARAMETER_DOMAINS, PARAMETER_NAMES


N_BINS = 20
MIN_SAMPLES = 10
FALLBACK_BIN_WIDTH = 0.001
CREDIBLE_LOW_RANK = 0.16
CREDIBLE_HIGH_RANK = 0.84


class HistogramBin(NamedTuple):
    start: float
    count: int


class CredibleInterval(NamedTuple):
    low: float
    high: float

    def contains(self, value: float) -> bool:
        return self.low <= value <= self.high


class PosteriorSummary(NamedTuple):
    bins: List[HistogramBin]
    interval: CredibleInterval


def _parameter_values(history: Iterable[FlareParams], key: str, burn_in: int = 0) -> List[float]:
    if key not in PARAMETER_DOMAINS:
        raise KeyError(f"Unknown parameter: {key}. Available: {list(PARAMETER_NAMES)}")
    if burn_in < 0:
        raise InvalidConfiguration(f"burn_in must be non-negative, got {burn_in}")
    values = [sample[key] for sample in history]
    return values[burn_in:]


def summarize(history: Iterable[FlareParams], key: str, burn_in: int = 0) -> PosteriorSummary:
    """Histogram and 68% credible interval for one parameter.

    Args:
        history: Sampled FlareParams, oldest first (SampleHistory or a list)
        key: Parameter name ('A', 'tau' or 'omega')
        burn_in: Number of leading samples to exclude (0 = use all)

    Returns:
        PosteriorSummary(bins, interval); empty bins and a (0, 0) interval
        when fewer than 10 samples remain.
    """
    values = sorted(_parameter_values(history, key, burn_in))
    n = len(values)
    if n < MIN_SAMPLES:
        return PosteriorSummary([], CredibleInterval(0.0, 0.0))

    lo, hi = values[0], values[-1]
    width = (hi - lo) / N_BINS or FALLBACK_BIN_WIDTH

    counts = [0] * N_BINS
    for v in values:
        idx = min(math.floor((v - lo) / width), N_BINS - 1)
        counts[idx] += 1

    bins = [HistogramBin(start=lo + i * width, count=c) for i, c in enumerate(counts)]
    interval = CredibleInterval(
        low=values[math.floor(n * CREDIBLE_LOW_RANK)],
        high=values[math.floor(n * CREDIBLE_HIGH_RANK)],
    )
    return PosteriorSummary(bins, interval)


def summarize_all(history: Iterable[FlareParams], burn_in: int = 0) -> Dict[str, PosteriorSummary]:
    """Posterior summary for every flare parameter."""
    samples = list(history)
    return {key: summarize(samples, key, burn_in) for key in PARAMETER_NAMES}


def posterior_statistics(history: Iterable[FlareParams], key: str, burn_in: int = 0) -> Dict:
    """Mean, median, std and the 68% credible interval for one parameter.

    Returns an empty dict when fewer than 10 samples remain.
    """
    samples = list(history)
    values = np.asarray(_parameter_values(samples, key, burn_in), dtype=float)
    if len(values) < MIN_SAMPLES:
        return {}

    interval = summarize(samples, key, burn_in).interval
    return {
        'mean': float(np.mean(values)),
        'median': float(np.median(values)),
        'std': float(np.std(values)),
        'ci_lower': interval.low,
        'ci_upper': interval.high,
        'n_samples': int(len(values)),
    }
