"""
Solar Flare MCMC — Test Suite
=============================

Test modules:
- test_model.py: Signal model and parameter domains
- test_data.py: Synthetic data generation
- test_likelihood.py: Log-likelihood and proposals
- test_bayesian.py: Metropolis step, sample history, sampling runs
- test_posterior.py: Histograms and credible intervals
- test_plotting.py: Diagnostic figures
"""
