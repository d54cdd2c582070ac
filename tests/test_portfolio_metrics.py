import numpy as np
import pytest

from portfolio_frontier.metrics.portfolio import (
    RISK_FREE_RATE_ANNUAL,
    asset_annual_stats,
    portfolio_return_annual,
    portfolio_volatility_annual,
    sharpe_ratio,
    summarize_portfolio,
)


def test_return_is_weighted_mean_times_twelve():
    assert np.isclose(portfolio_return_annual([0.5, 0.5], [0.01, 0.02]), 0.18)


def test_volatility_annualizes_covariance():
    cov = np.array([[0.0025, 0.0], [0.0, 0.0]])
    assert np.isclose(portfolio_volatility_annual([1.0, 0.0], cov), np.sqrt(0.0025 * 12))


def test_negative_variance_noise_is_clamped():
    assert portfolio_volatility_annual([1.0], [[-1e-12]]) == 0.0


def test_sharpe_zero_volatility_is_zero():
    assert sharpe_ratio(0.5, 0.0) == 0.0
    assert sharpe_ratio(-0.5, 0.0) == 0.0


def test_sharpe_uses_fixed_risk_free_rate():
    assert RISK_FREE_RATE_ANNUAL == 0.035
    assert np.isclose(sharpe_ratio(0.135, 0.2), 0.5)


def test_summarize_portfolio_is_consistent():
    mu = np.array([0.01, 0.005])
    cov = np.array([[0.004, 0.001], [0.001, 0.002]])
    w = np.array([0.6, 0.4])
    metrics = summarize_portfolio(w, mu, cov)
    assert np.isclose(metrics.expected_return, portfolio_return_annual(w, mu))
    assert np.isclose(metrics.volatility, portfolio_volatility_annual(w, cov))
    assert np.isclose(metrics.sharpe, sharpe_ratio(metrics.expected_return, metrics.volatility))
    assert set(metrics.to_dict()) == {"expected_return", "volatility", "sharpe"}


def test_shape_mismatch_raises():
    with pytest.raises(ValueError):
        portfolio_return_annual([0.5, 0.5], [0.01])
    with pytest.raises(ValueError):
        portfolio_volatility_annual([1.0], np.eye(2))


def test_asset_annual_stats_per_asset():
    mu = np.array([0.01, -0.002])
    cov = np.array([[0.0025, 0.001], [0.001, -1e-12]])
    returns, vols = asset_annual_stats(mu, cov)
    assert np.allclose(returns, [0.12, -0.024])
    assert np.allclose(vols, [0.05 * np.sqrt(12), 0.0])
    with pytest.raises(ValueError):
        asset_annual_stats(mu, np.eye(3))
