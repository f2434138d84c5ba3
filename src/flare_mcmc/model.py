"""
Solar Flare MCMC — Signal Model
================================
Parametric light curve of a quenched, oscillating solar flare:

    S(t) = A · e^t · {1 − tanh[2(t − τ)]} · sin(ωt)

    A  = intensity scale (AU),        domain [0, 2]
    τ  = quench time constant (s),    domain [1, 10]
    ω  = angular frequency (rad/s),   domain [1, 20]

The e^t term grows without bound for large t; the tanh quench suppresses it
after t ≈ τ. Overflow for extreme t is left to IEEE semantics (inf / nan).

Author: Mahdad
License: MIT
"""

import numpy as np
from dataclasses import dataclass, asdict
from typing import Dict, Tuple, Union


class InvalidConfiguration(ValueError):
    """Raised when a caller passes a configuration the sampler cannot use."""


def positive_real(name: str, value) -> float:
    """Coerce `value` to a finite, strictly positive float or raise InvalidConfiguration."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidConfiguration(f"{name} must be a number, got {value!r}") from None
    if not np.isfinite(number) or number <= 0:
        raise InvalidConfiguration(f"{name} must be finite and positive, got {value!r}")
    return number


# ═══════════════════════════════════════════════════════════════
# Parameter domains
# ═══════════════════════════════════════════════════════════════

PARAMETER_NAMES: Tuple[str, ...] = ('A', 'tau', 'omega')

PARAMETER_DOMAINS: Dict[str, Tuple[float, float]] = {
    'A': (0.0, 2.0),
    'tau': (1.0, 10.0),
    'omega': (1.0, 20.0),
}

PARAMETER_LABELS: Dict[str, str] = {
    'A': 'Intensity Scale (A)',
    'tau': 'Quench Time (τ)',
    'omega': 'Angular Freq (ω)',
}

PARAMETER_UNITS: Dict[str, str] = {
    'A': 'AU',
    'tau': 's',
    'omega': 'rad/s',
}


def clamp(name: str, value: float) -> float:
    """Clamp a value into the closed domain of parameter `name`.

    NaN maps to the upper bound.
    """
    lower, upper = PARAMETER_DOMAINS[name]
    return float(max(lower, min(upper, value)))


@dataclass(frozen=True)
class FlareParams:
    """Flare signal parameters.

    Values outside a parameter's domain are clamped on construction, so
    every instance satisfies the domain invariant.
    """
    A: float = 1.0        # Intensity scale
    tau: float = 5.0      # Quench time (s)
    omega: float = 10.0   # Angular frequency (rad/s)

    def __post_init__(self):
        for name in PARAMETER_NAMES:
            object.__setattr__(self, name, clamp(name, getattr(self, name)))

    def __getitem__(self, key: str) -> float:
        if key not in PARAMETER_DOMAINS:
            raise KeyError(f"Unknown parameter: {key}. Available: {list(PARAMETER_NAMES)}")
        return getattr(self, key)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, values: Dict[str, float]) -> 'FlareParams':
        return cls(**{k: float(values[k]) for k in PARAMETER_NAMES})

    def as_array(self) -> np.ndarray:
        return np.array([self.A, self.tau, self.omega])

    def relative_error(self, reference: 'FlareParams') -> Dict[str, float]:
        """Percent error of each parameter against `reference` (e.g. ground truth).

        A zero reference value gives inf (or nan when both are zero).
        """
        errors = {}
        with np.errstate(divide='ignore', invalid='ignore'):
            for name in PARAMETER_NAMES:
                ref = np.float64(reference[name])
                errors[name] = float(np.abs((self[name] - ref) / ref) * 100.0)
        return errors


# Ground truth used by the reference scenario and the default chain start
INITIAL_PARAMS = FlareParams(A=1.0, tau=5.0, omega=10.0)
DEFAULT_START = FlareParams(A=0.5, tau=2.0, omega=5.0)


# ═══════════════════════════════════════════════════════════════
# Light curve
# ═══════════════════════════════════════════════════════════════

def intensity_curve(times: Union[np.ndarray, list], params: FlareParams) -> np.ndarray:
    """Vectorised S(t) over an array of times."""
    t = np.asarray(times, dtype=float)
    with np.errstate(over='ignore', invalid='ignore'):
        growth = params.A * np.exp(t)
        quench = 1.0 - np.tanh(2.0 * (t - params.tau))
        oscillation = np.sin(params.omega * t)
        return growth * quench * oscillation


def intensity(t: float, params: FlareParams) -> float:
    """Flare intensity S(t) at a single time point."""
    return float(intensity_curve(t, params))
