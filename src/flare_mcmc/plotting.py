"""
Diagnostic figures for a sampling run.

- Signal recovery: observations with error bars, true curve, current estimate
- Posterior histograms with the 68% credible band, one panel per parameter
- Trace of the most recent samples
"""
import numpy as np
import matplotlib.pyplot as plt
import seaborn as sns
from typing import Optional

from .bayesian import MCMCRun
from .model import PARAMETER_DOMAINS, PARAMETER_LABELS, PARAMETER_NAMES, intensity_curve

sns.set_style('whitegrid')

PARAMETER_COLORS = {
    'A': '#f59e0b',
    'tau': '#0ea5e9',
    'omega': '#a855f7',
}


def plot_signal_fit(run: MCMCRun, ax: Optional[plt.Axes] = None) -> plt.Axes:
    """Observed light curve against the true and currently estimated curves."""
    if ax is None:
        _, ax = plt.subplots(figsize=(10, 4))

    data = run.data
    if len(data):
        ax.errorbar(data.t, data.ydata, yerr=data.sigma, fmt='o', ms=3,
                    color='0.4', alpha=0.6, label='Observed')
        t_fine = np.linspace(data.t[0], data.t[-1], 500)
        ax.plot(t_fine, intensity_curve(t_fine, run.true_params), '--',
                color='0.2', label='True')
        ax.plot(t_fine, intensity_curve(t_fine, run.current),
                color=PARAMETER_COLORS['A'], lw=2, label='Estimated')
        ax.legend(loc='upper right')

    ax.set_xlabel('t (s)')
    ax.set_ylabel('Intensity')
    ax.set_title(f'Signal Recovery (iteration {run.iteration})')
    return ax


def plot_posterior(run: MCMCRun, discard_burn_in: bool = False,
                   save_path: Optional[str] = None) -> plt.Figure:
    """Histogram and 68% credible band for each parameter."""
    fig, axes = plt.subplots(1, len(PARAMETER_NAMES), figsize=(14, 3.5))

    for ax, name in zip(axes, PARAMETER_NAMES):
        bins, interval = run.summarize(name, discard_burn_in=discard_burn_in)
        color = PARAMETER_COLORS[name]
        ax.set_title(f'{PARAMETER_LABELS[name]} Posterior')

        if not bins:
            ax.text(0.5, 0.5, 'Insufficient samples', ha='center', va='center',
                    transform=ax.transAxes)
            continue

        starts = [b.start for b in bins]
        counts = [b.count for b in bins]
        width = starts[1] - starts[0] if len(starts) > 1 else 0.001
        ax.bar(starts, counts, width=width, align='edge', color=color, alpha=0.7)
        ax.axvspan(interval.low, interval.high, color=color, alpha=0.15,
                   label=f'68% CI [{interval.low:.2f}, {interval.high:.2f}]')
        ax.axvline(run.true_params[name], color='0.2', ls='--', label='True')
        ax.legend(fontsize=8)

    fig.tight_layout()
    if save_path:
        fig.savefig(f"{save_path}_posterior.png", dpi=150, bbox_inches='tight')
    return fig


def plot_trace(run: MCMCRun, n_recent: int = 100,
               save_path: Optional[str] = None) -> plt.Figure:
    """Trace of the `n_recent` most recent samples, scaled to each domain."""
    fig, axes = plt.subplots(len(PARAMETER_NAMES), 1, figsize=(10, 6), sharex=True)
    recent = run.history.tail(n_recent)

    for ax, name in zip(axes, PARAMETER_NAMES):
        ax.plot([p[name] for p in recent], color=PARAMETER_COLORS[name], lw=1)
        ax.set_ylim(*PARAMETER_DOMAINS[name])
        ax.set_ylabel(name)

    axes[-1].set_xlabel('sample')
    fig.suptitle(f'Trace (last {len(recent)} samples)')
    fig.tight_layout()
    if save_path:
        fig.savefig(f"{save_path}_trace.png", dpi=150, bbox_inches='tight')
    return fig
