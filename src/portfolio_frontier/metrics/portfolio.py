"""Annualized return, volatility and Sharpe ratio for a weight vector."""

from __future__ import annotations

from dataclasses import asdict, dataclass

import numpy as np
import numpy.typing as npt

RISK_FREE_RATE_ANNUAL = 0.035
PERIODS_PER_YEAR = 12


@dataclass(frozen=True)
class PortfolioMetrics:
    """Annualized portfolio summary."""

    expected_return: float
    volatility: float
    sharpe: float

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


def portfolio_return_annual(
    weights: npt.ArrayLike,
    mu_monthly: npt.ArrayLike,
    periods_per_year: int = PERIODS_PER_YEAR,
) -> float:
    """Simple annualization of the weighted mean monthly return."""
    w = np.asarray(weights, dtype=float)
    mu = np.asarray(mu_monthly, dtype=float)
    if w.shape != mu.shape:
        raise ValueError("weights length must match number of mean returns.")
    return float(w @ mu * periods_per_year)


def portfolio_volatility_annual(
    weights: npt.ArrayLike,
    cov_monthly: npt.ArrayLike,
    periods_per_year: int = PERIODS_PER_YEAR,
) -> float:
    """Annualized volatility ``sqrt(w' (12 * cov) w)`` with negative noise clamped to 0."""
    w = np.asarray(weights, dtype=float)
    cov_annual = np.asarray(cov_monthly, dtype=float) * periods_per_year
    if cov_annual.shape != (w.size, w.size):
        raise ValueError("covariance shape must match weights length.")
    variance = float(w @ cov_annual @ w)
    return float(np.sqrt(max(0.0, variance)))


def sharpe_ratio(
    return_annual: float,
    volatility_annual: float,
    risk_free_rate_annual: float = RISK_FREE_RATE_ANNUAL,
) -> float:
    """Excess return per unit of volatility; 0 when volatility is 0."""
    if volatility_annual > 0:
        return float((return_annual - risk_free_rate_annual) / volatility_annual)
    return 0.0


def summarize_portfolio(
    weights: npt.ArrayLike,
    mu_monthly: npt.ArrayLike,
    cov_monthly: npt.ArrayLike,
    risk_free_rate_annual: float = RISK_FREE_RATE_ANNUAL,
    periods_per_year: int = PERIODS_PER_YEAR,
) -> PortfolioMetrics:
    """Compute the annualized return, volatility and Sharpe ratio together."""
    ret = portfolio_return_annual(weights, mu_monthly, periods_per_year)
    vol = portfolio_volatility_annual(weights, cov_monthly, periods_per_year)
    return PortfolioMetrics(
        expected_return=ret,
        volatility=vol,
        sharpe=sharpe_ratio(ret, vol, risk_free_rate_annual),
    )


def asset_annual_stats(
    mu_monthly: npt.ArrayLike,
    cov_monthly: npt.ArrayLike,
    periods_per_year: int = PERIODS_PER_YEAR,
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """Standalone annualized return and volatility of every asset."""
    mu = np.asarray(mu_monthly, dtype=float)
    cov = np.asarray(cov_monthly, dtype=float)
    if cov.shape != (mu.size, mu.size):
        raise ValueError("covariance shape must match number of mean returns.")
    variances = np.maximum(0.0, np.diag(cov))
    return mu * periods_per_year, np.sqrt(variances) * np.sqrt(periods_per_year)
