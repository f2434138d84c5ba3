"""
Solar Flare MCMC — Bayesian Inference Framework
================================================
Recovers flare parameters (A, τ, ω) from noisy light curves via a
Metropolis random-walk sampler.

Key Features:
- Seeded, per-run random generator (reproducible chains)
- Bounded sample history (sliding window, oldest evicted first)
- Cooperative stepping: one call = one Metropolis step
- Posterior histograms and 68% credible intervals per parameter

Mathematical Framework:
    Bayes' Theorem: P(θ|D) ∝ P(D|θ) × P(θ)

    P(θ) is flat over each parameter's domain, and the random-walk proposal
    is symmetric, so the acceptance probability reduces to

        r = exp(log L(θ') − log L(θ)),   accept iff u < r, u ~ U[0, 1)

Usage:
    from flare_mcmc import MCMCRun, MCMCConfig, FlareParams

    run = MCMCRun(MCMCConfig(iterations=1000, step_size=0.05, seed=7),
                  true_params=FlareParams(A=1.0, tau=5.0, omega=10.0))

    # Drive from a timer / UI loop ...
    result = run.step()

    # ... or to completion
    run.run(progressbar=True)
    summary = run.summary()

Author: Mahdad
License: MIT
"""

import threading
import warnings
from collections import deque
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Tuple

import numpy as np
import pandas as pd
from tqdm import tqdm

from .data import (
    DataPoint, ObservationSet, as_observation_set,
    generate_synthetic_data, random_true_params,
)
from .likelihood import log_likelihood, propose
from .model import (
    DEFAULT_START, INITIAL_PARAMS, PARAMETER_NAMES,
    FlareParams, InvalidConfiguration, intensity_curve, positive_real,
)
from .posterior import PosteriorSummary, posterior_statistics, summarize, summarize_all


# ═══════════════════════════════════════════════════════════════
# Configuration
# ═══════════════════════════════════════════════════════════════

# Acceptance-rate band regarded as healthy for random-walk Metropolis
TARGET_ACCEPTANCE = (0.20, 0.50)


def _is_int(value) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


@dataclass
class MCMCConfig:
    """Configuration for a Metropolis sampling run."""
    iterations: int = 1000         # Total steps in the run
    burn_in: int = 100             # Advisory; only applied to summaries on request
    step_size: float = 0.05        # Proposal spread multiplier
    seed: Optional[int] = 42       # Generator seed (None = fresh entropy)

    # Chain storage
    history_size: int = 1000       # Sliding window of retained samples

    # Synthetic data
    point_count: int = 100         # Observations per data set
    t_max: float = 10.0            # Observation window [0, t_max) in seconds

    verbose: bool = False          # Print progress lines

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Fail fast on settings the sampler cannot use."""
        if not _is_int(self.iterations) or self.iterations <= 0:
            raise InvalidConfiguration(f"iterations must be a positive integer, got {self.iterations!r}")
        if not _is_int(self.burn_in) or self.burn_in < 0:
            raise InvalidConfiguration(f"burn_in must be a non-negative integer, got {self.burn_in!r}")
        self.step_size = positive_real('step_size', self.step_size)
        if self.seed is not None and not _is_int(self.seed):
            raise InvalidConfiguration(f"seed must be an integer or None, got {self.seed!r}")
        if not _is_int(self.history_size) or self.history_size <= 0:
            raise InvalidConfiguration(f"history_size must be a positive integer, got {self.history_size!r}")
        if not _is_int(self.point_count) or self.point_count < 0:
            raise InvalidConfiguration(f"point_count must be a non-negative integer, got {self.point_count!r}")
        self.t_max = positive_real('t_max', self.t_max)


# ═══════════════════════════════════════════════════════════════
# Metropolis step
# ═══════════════════════════════════════════════════════════════

class StepResult(NamedTuple):
    next_params: FlareParams
    accepted: bool


def acceptance_ratio(log_l_current: float, log_l_proposal: float) -> float:
    """exp(log L' − log L); saturates to inf instead of overflowing."""
    with np.errstate(over='ignore', invalid='ignore'):
        return float(np.exp(np.float64(log_l_proposal) - np.float64(log_l_current)))


def metropolis_step(current: FlareParams,
                    data: Iterable[DataPoint],
                    step_size: float = 0.05,
                    rng: Optional[np.random.Generator] = None) -> StepResult:
    """Single Metropolis transition from `current`.

    Args:
        current: Current chain state
        data: Observations (ObservationSet or any sequence of DataPoints)
        step_size: Proposal spread multiplier (> 0)
        rng: Random generator, advanced by four draws; a fresh unseeded
            one if None

    Returns:
        StepResult(next_params, accepted); next_params is `current` itself
        when the proposal is rejected.
    """
    step_size = positive_real('step_size', step_size)
    if rng is None:
        rng = np.random.default_rng()

    obs = as_observation_set(data)
    proposal = propose(current, step_size, rng)

    r = acceptance_ratio(log_likelihood(current, obs), log_likelihood(proposal, obs))

    # NaN ratio compares False and rejects
    if rng.random() < r:
        return StepResult(proposal, True)
    return StepResult(current, False)


step = metropolis_step


# ═══════════════════════════════════════════════════════════════
# Sample history
# ═══════════════════════════════════════════════════════════════

class SampleHistory:
    """Sliding window over the most recent chain states (FIFO eviction)."""

    def __init__(self, maxlen: int = 1000):
        if not _is_int(maxlen) or maxlen <= 0:
            raise InvalidConfiguration(f"history size must be a positive integer, got {maxlen!r}")
        self._samples = deque(maxlen=maxlen)

    @property
    def maxlen(self) -> int:
        return self._samples.maxlen

    def append(self, params: FlareParams):
        self._samples.append(params)

    def clear(self):
        self._samples.clear()

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[FlareParams]:
        return iter(self._samples)

    def __getitem__(self, index: int) -> FlareParams:
        return self._samples[index]

    def values(self, key: str) -> np.ndarray:
        """Sampled values of one parameter, oldest first."""
        if key not in PARAMETER_NAMES:
            raise KeyError(f"Unknown parameter: {key}. Available: {list(PARAMETER_NAMES)}")
        return np.array([getattr(p, key) for p in self._samples], dtype=float)

    def tail(self, n: int = 100) -> List[FlareParams]:
        """The `n` most recent samples (trace view)."""
        if n <= 0:
            return []
        return list(self._samples)[-n:]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame([p.to_dict() for p in self._samples],
                            columns=list(PARAMETER_NAMES))


# ═══════════════════════════════════════════════════════════════
# Sampling run — Main Class
# ═══════════════════════════════════════════════════════════════

class MCMCRun:
    """One sampling session: data set, chain state, history and counters.

    Each run owns its generator and history, so independent runs can be
    stepped side by side. `step()` is atomic with respect to other
    `step()` / `reset()` calls on the same run.

    Lifecycle:
    1. Construct (generates data from `true_params` unless `data` is given)
    2. Call `step()` repeatedly, or `run()` to drive it
    3. Read `acceptance_rate`, `summary()`, `current`
    4. `reset()` for a fresh data set and an empty history
    """

    def __init__(self,
                 config: Optional[MCMCConfig] = None,
                 true_params: Optional[FlareParams] = None,
                 start_params: Optional[FlareParams] = None,
                 data: Optional[Iterable[DataPoint]] = None):
        """
        Args:
            config: Sampler configuration (defaults if None)
            true_params: Ground truth for synthetic data (INITIAL_PARAMS if None)
            start_params: Initial chain state (DEFAULT_START if None)
            data: Use these observations instead of generating them
        """
        self.config = config or MCMCConfig()
        self.rng = np.random.default_rng(self.config.seed)
        self.start_params = start_params or DEFAULT_START
        self.true_params = true_params or INITIAL_PARAMS
        self.history = SampleHistory(self.config.history_size)
        self._lock = threading.Lock()

        if data is not None:
            self.data = as_observation_set(data)
        else:
            self.data = self._generate(self.true_params)

        self.current = self.start_params
        self.iteration = 0
        self.accepted_count = 0

        self._log(f"Initialized: {len(self.data)} observations, "
                  f"{self.config.iterations} iterations, step size {self.config.step_size}")

    def _log(self, message: str):
        if self.config.verbose:
            print(f"[MCMC] {message}")

    def _generate(self, true_params: FlareParams) -> ObservationSet:
        data = generate_synthetic_data(true_params,
                                       point_count=self.config.point_count,
                                       t_max=self.config.t_max,
                                       rng=self.rng)
        if self.config.verbose:
            print(f"[Data] Generated {len(data)} points from {true_params}")
        return data

    # ── State ──

    @property
    def acceptance_rate(self) -> float:
        """Accepted steps / steps taken (0.0 before the first step)."""
        if self.iteration == 0:
            return 0.0
        return self.accepted_count / self.iteration

    @property
    def is_complete(self) -> bool:
        return self.iteration >= self.config.iterations

    @property
    def remaining(self) -> int:
        return max(0, self.config.iterations - self.iteration)

    @property
    def burn_in_progress(self) -> Tuple[int, int]:
        """(steps counted toward burn-in, burn-in length); display only."""
        return min(self.iteration, self.config.burn_in), self.config.burn_in

    # ── Stepping ──

    def _advance(self) -> Optional[StepResult]:
        """One step under the lock; None once the run is complete."""
        with self._lock:
            if self.is_complete:
                return None

            result = metropolis_step(self.current, self.data, self.config.step_size, self.rng)
            self.current = result.next_params
            self.history.append(result.next_params)
            self.iteration += 1
            if result.accepted:
                self.accepted_count += 1

            if self.is_complete:
                self._finish()
            return result

    def step(self) -> StepResult:
        """Advance the chain by one Metropolis step and record the state."""
        result = self._advance()
        if result is None:
            raise RuntimeError(f"Run complete: {self.iteration} of "
                               f"{self.config.iterations} iterations done. Call reset().")
        return result

    def run(self, n_steps: Optional[int] = None, progressbar: bool = False) -> FlareParams:
        """Step until `n_steps` more steps are taken or the run completes.

        Safe to call from several drivers at once: each stops quietly when
        the run completes.

        Returns:
            The current chain state
        """
        if n_steps is not None and (not _is_int(n_steps) or n_steps < 0):
            raise InvalidConfiguration(f"n_steps must be a non-negative integer, got {n_steps!r}")

        total = self.remaining if n_steps is None else min(n_steps, self.remaining)
        taken = 0
        with tqdm(total=total, desc='MCMC', disable=not progressbar) as bar:
            while n_steps is None or taken < n_steps:
                if self._advance() is None:
                    break
                taken += 1
                bar.update()
        return self.current

    def _finish(self):
        rate = self.acceptance_rate
        self._log(f"Inference complete: {self.iteration} iterations, "
                  f"acceptance {rate:.1%}, estimate {self.current}")

        low, high = TARGET_ACCEPTANCE
        if not low < rate < high:
            warnings.warn(f"Acceptance rate {rate:.1%} outside the {low:.0%}-{high:.0%} band; "
                          f"consider adjusting step_size (currently {self.config.step_size})")

    def reset(self, true_params: Optional[FlareParams] = None):
        """Clear history and counters and regenerate the data set.

        Args:
            true_params: New ground truth; randomized when None
        """
        with self._lock:
            self.true_params = true_params or random_true_params(self.rng)
            self.data = self._generate(self.true_params)
            self.current = self.start_params
            self.history.clear()
            self.iteration = 0
            self.accepted_count = 0
        self._log("Reset")

    # ── Results ──

    def estimated_curve(self) -> np.ndarray:
        """Model intensity of the current state at the observed times."""
        return intensity_curve(self.data.t, self.current)

    def parameter_errors(self) -> Dict[str, float]:
        """Percent error of the current state against the ground truth."""
        return self.current.relative_error(self.true_params)

    def _window_burn_in(self) -> int:
        # Samples in the window whose iteration index falls inside burn-in
        first_iteration = self.iteration - len(self.history)
        return max(0, self.config.burn_in - first_iteration)

    def summarize(self, key: str, discard_burn_in: bool = False) -> PosteriorSummary:
        """Posterior histogram and 68% interval for one parameter."""
        burn_in = self._window_burn_in() if discard_burn_in else 0
        return summarize(self.history, key, burn_in)

    def summary(self, discard_burn_in: bool = False) -> Dict[str, PosteriorSummary]:
        burn_in = self._window_burn_in() if discard_burn_in else 0
        return summarize_all(self.history, burn_in)

    def statistics(self, discard_burn_in: bool = False) -> Dict[str, Dict]:
        """Mean / median / std / interval per parameter."""
        burn_in = self._window_burn_in() if discard_burn_in else 0
        samples = list(self.history)
        return {key: posterior_statistics(samples, key, burn_in) for key in PARAMETER_NAMES}


# ═══════════════════════════════════════════════════════════════
# Demo
# ═══════════════════════════════════════════════════════════════

def demo_flare_mcmc(iterations: int = 1000, seed: int = 42):
    """Demonstrate parameter recovery on a synthetic flare."""
    print("╔══════════════════════════════════════════════════════════╗")
    print("║  Solar Flare MCMC — Metropolis Parameter Recovery Demo   ║")
    print("╚══════════════════════════════════════════════════════════╝")
    print()

    print("[1/3] Generating synthetic observations...")
    config = MCMCConfig(iterations=iterations, seed=seed, verbose=True)
    run = MCMCRun(config, true_params=INITIAL_PARAMS)

    print(f"\n[2/3] Running {iterations} Metropolis steps...")
    with warnings.catch_warnings():
        warnings.simplefilter('always')
        run.run(progressbar=True)

    print("\n[3/3] Posterior Summary:")
    stats = run.statistics()
    errors = run.parameter_errors()

    print(f"\n{'Parameter':<12} {'True':>10} {'Final':>10} {'Mean':>10} {'68% CI':>22} {'Err %':>8}")
    print("-" * 76)
    for name in PARAMETER_NAMES:
        s = stats[name]
        if not s:
            continue
        print(f"{name:<12} {run.true_params[name]:>10.4f} {run.current[name]:>10.4f} "
              f"{s['mean']:>10.4f} [{s['ci_lower']:>8.4f}, {s['ci_upper']:>8.4f}] "
              f"{errors[name]:>8.1f}")

    print(f"\nAcceptance rate: {run.acceptance_rate:.1%}")
    print("\n✓ Demo complete.")
    return run


if __name__ == '__main__':
    demo_flare_mcmc()
