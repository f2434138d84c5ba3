"""
Solar Flare MCMC - Bayesian parameter estimation for flare light curves

Recovers the amplitude, quench time and angular frequency of a parametric
solar flare signal from noisy observations with a Metropolis random-walk
sampler, and summarizes the posterior per parameter.
"""

__version__ = "0.1.0"

# Signal model
from .model import (
    FlareParams,
    InvalidConfiguration,
    INITIAL_PARAMS,
    DEFAULT_START,
    PARAMETER_DOMAINS,
    PARAMETER_NAMES,
    intensity,
    intensity_curve,
)

# Data
from .data import (
    DataPoint,
    ObservationSet,
    generate_synthetic_data,
    random_true_params,
)

# Inference
from .likelihood import log_likelihood, propose, PROPOSAL_SCALES
from .bayesian import (
    MCMCConfig,
    MCMCRun,
    SampleHistory,
    StepResult,
    acceptance_ratio,
    metropolis_step,
    step,
)

# Posterior summaries
from .posterior import (
    HistogramBin,
    CredibleInterval,
    PosteriorSummary,
    summarize,
    summarize_all,
    posterior_statistics,
)

__all__ = [
    "FlareParams",
    "InvalidConfiguration",
    "INITIAL_PARAMS",
    "DEFAULT_START",
    "PARAMETER_DOMAINS",
    "PARAMETER_NAMES",
    "intensity",
    "intensity_curve",
    "DataPoint",
    "ObservationSet",
    "generate_synthetic_data",
    "random_true_params",
    "log_likelihood",
    "propose",
    "PROPOSAL_SCALES",
    "MCMCConfig",
    "MCMCRun",
    "SampleHistory",
    "StepResult",
    "acceptance_ratio",
    "metropolis_step",
    "step",
    "HistogramBin",
    "CredibleInterval",
    "PosteriorSummary",
    "summarize",
    "summarize_all",
    "posterior_statistics",
]
