"""
Solar Flare MCMC — Likelihood & Proposals
==========================================
Gaussian log-likelihood of an observation set under candidate parameters,
and the bounded random-walk proposal used by the Metropolis sampler.

Likelihood:
    log L(p) = Σ_i −(y_i − S(t_i; p))² / (2 σ_i²),   σ_i = 0.2·|y_i| + 0.01

σ_i comes from the *observed* value, so it is the same for every candidate.

Proposal:
    p'_k = clamp_k(p_k + (u − 0.5) · step_size · scale_k),   u ~ U[0, 1)

Author: Mahdad
License: MIT
"""

import numpy as np
from typing import Dict, Iterable, Optional

from .data import DataPoint, as_observation_set, noise_scale
from .model import FlareParams, PARAMETER_NAMES, intensity_curve


# Proposal width multiplier per parameter (relative sensitivity)
PROPOSAL_SCALES: Dict[str, float] = {
    'A': 0.2,
    'tau': 1.0,
    'omega': 2.0,
}


def log_likelihood(params: FlareParams, data: Iterable[DataPoint]) -> float:
    """Log-likelihood of `data` under `params` (0.0 for an empty set)."""
    obs = as_observation_set(data)
    if len(obs) == 0:
        return 0.0

    prediction = intensity_curve(obs.t, params)
    sigma = noise_scale(obs.ydata)
    with np.errstate(over='ignore', invalid='ignore'):
        residual = obs.ydata - prediction
        return float(-np.sum(residual ** 2 / (2.0 * sigma ** 2)))


def propose(current: FlareParams, step_size: float,
            rng: Optional[np.random.Generator] = None) -> FlareParams:
    """Draw a random-walk proposal around `current`, clamped to the domains.

    One uniform draw per parameter, in the order A, tau, omega. A fresh
    unseeded generator is used when `rng` is None.
    """
    if rng is None:
        rng = np.random.default_rng()

    values = {}
    for name in PARAMETER_NAMES:
        width = step_size * PROPOSAL_SCALES[name]
        values[name] = current[name] + (rng.random() - 0.5) * width
    # FlareParams clamps on construction
    return FlareParams(**values)
