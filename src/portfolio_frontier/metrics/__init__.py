"""Metrics subpackage exports."""

from portfolio_frontier.metrics.portfolio import (
    PERIODS_PER_YEAR,
    RISK_FREE_RATE_ANNUAL,
    PortfolioMetrics,
    asset_annual_stats,
    portfolio_return_annual,
    portfolio_volatility_annual,
    sharpe_ratio,
    summarize_portfolio,
)
from portfolio_frontier.metrics.statistics import (
    correlation_from_covariance,
    covariance_matrix,
    cumulative_returns,
    mean,
    mean_vector,
    top_correlation_pairs,
)

__all__ = [
    "mean",
    "mean_vector",
    "covariance_matrix",
    "correlation_from_covariance",
    "top_correlation_pairs",
    "cumulative_returns",
    "RISK_FREE_RATE_ANNUAL",
    "PERIODS_PER_YEAR",
    "PortfolioMetrics",
    "portfolio_return_annual",
    "portfolio_volatility_annual",
    "sharpe_ratio",
    "summarize_portfolio",
    "asset_annual_stats",
]
