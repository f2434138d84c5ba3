"""
Solar Flare MCMC — Parameter Recovery Walkthrough
==================================================
Drives a sampling run the way an interactive front end would:

1. Generate a synthetic flare from known parameters
2. Step the chain in batches (stop / resume at any step boundary)
3. Report acceptance and posterior intervals after each batch
4. Reset with randomized ground truth and sample again
5. Save diagnostic figures

Author: Mahdad
"""

import sys
import os
import warnings

sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), 'src'))

from flare_mcmc import FlareParams, MCMCConfig, MCMCRun, PARAMETER_NAMES


def report(run: MCMCRun):
    done, burn_in = run.burn_in_progress
    print(f"  iteration {run.iteration:>5}  acceptance {run.acceptance_rate:>6.1%}  "
          f"burn-in {done}/{burn_in}")
    for name in PARAMETER_NAMES:
        _, interval = run.summarize(name, discard_burn_in=True)
        print(f"    {name:<6} current {run.current[name]:>8.4f}   "
              f"68% CI [{interval.low:.3f}, {interval.high:.3f}]")


def sample_in_batches(run: MCMCRun, batch: int = 250):
    while not run.is_complete:
        run.run(n_steps=batch)
        report(run)


def main():
    config = MCMCConfig(iterations=1000, burn_in=100, step_size=0.05, seed=2024)
    run = MCMCRun(config,
                  true_params=FlareParams(A=1.0, tau=5.0, omega=10.0),
                  start_params=FlareParams(A=0.5, tau=2.0, omega=5.0))

    print(f"[Data] {len(run.data)} observations, true parameters {run.true_params}")

    with warnings.catch_warnings():
        warnings.simplefilter('always')

        print("\n[1/2] Sampling reference flare...")
        sample_in_batches(run)
        print(f"  errors vs truth (%): {run.parameter_errors()}")

        print("\n[2/2] Reset with randomized ground truth...")
        run.reset()
        print(f"[Data] true parameters {run.true_params}")
        sample_in_batches(run)

    try:
        from flare_mcmc.plotting import plot_posterior, plot_trace
        plot_posterior(run, discard_burn_in=True, save_path='flare_demo')
        plot_trace(run, save_path='flare_demo')
        print("\n[Plotting] Saved flare_demo_posterior.png, flare_demo_trace.png")
    except ImportError as e:
        print(f"\n[Plotting] Skipped: {e}")


if __name__ == '__main__':
    main()
