"""Monte-Carlo efficient frontier from random long-only portfolios."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt
import pandas as pd

from portfolio_frontier.metrics.portfolio import (
    PERIODS_PER_YEAR,
    RISK_FREE_RATE_ANNUAL,
    summarize_portfolio,
)
from portfolio_frontier.rng import RandomSource

LOGGER = logging.getLogger(__name__)

CLOUD_COLUMNS = ["risk", "ret", "sharpe"]


@dataclass(frozen=True)
class FrontierPoint:
    risk: float
    ret: float
    sharpe: float
    weights: tuple[float, ...] = ()

    def to_dict(self) -> dict[str, float | list[float]]:
        return {
            "risk": self.risk,
            "ret": self.ret,
            "sharpe": self.sharpe,
            "weights": list(self.weights),
        }


@dataclass(frozen=True)
class FrontierResult:
    """Sampled cloud, bucketed upper envelope and best-Sharpe portfolio."""

    cloud: pd.DataFrame
    weights: npt.NDArray[np.float64]
    frontier: pd.DataFrame
    best_sharpe: FrontierPoint | None
    labels: list[str] = field(default_factory=list)

    def cloud_with_weights(self) -> pd.DataFrame:
        """Cloud metrics joined with one weight column per asset label."""
        weight_frame = pd.DataFrame(self.weights, columns=self.labels, index=self.cloud.index)
        return pd.concat([self.cloud, weight_frame], axis=1)


def sample_long_only_weights(
    n_assets: int,
    points: int,
    source: RandomSource,
) -> npt.NDArray[np.float64]:
    """Draw ``points`` simplex weight vectors from normalized exponentials."""
    draws = np.asarray(source.exponential((points, n_assets)), dtype=float)
    totals = draws.sum(axis=1, keepdims=True)
    totals[totals == 0] = 1.0
    return draws / totals


def evaluate_cloud(
    weights: npt.NDArray[np.float64],
    mu_monthly: npt.ArrayLike,
    cov_monthly: npt.ArrayLike,
    risk_free_rate_annual: float = RISK_FREE_RATE_ANNUAL,
    periods_per_year: int = PERIODS_PER_YEAR,
) -> pd.DataFrame:
    """Annualized risk, return and Sharpe for every row of ``weights``."""
    mu = np.asarray(mu_monthly, dtype=float)
    cov_annual = np.asarray(cov_monthly, dtype=float) * periods_per_year
    ret = weights @ mu * periods_per_year
    variance = np.einsum("ij,jk,ik->i", weights, cov_annual, weights)
    risk = np.sqrt(np.maximum(0.0, variance))
    sharpe = np.zeros_like(risk)
    np.divide(ret - risk_free_rate_annual, risk, out=sharpe, where=risk > 0)
    return pd.DataFrame({"risk": risk, "ret": ret, "sharpe": sharpe})


def extract_frontier_envelope(cloud: pd.DataFrame, buckets: int = 40) -> pd.DataFrame:
    """Keep the highest-return point in each equal-width risk bucket.

    Buckets span ``[min risk, max risk]``; the last bucket also holds the
    maximum. A zero-width range falls back to a unit bucket width.
    """
    if buckets < 1:
        raise ValueError("buckets must be at least 1.")
    if cloud.empty:
        return pd.DataFrame(columns=["risk", "ret"], dtype=float)

    ordered = cloud.sort_values("risk", kind="mergesort").reset_index(drop=True)
    min_risk = float(ordered["risk"].iloc[0])
    max_risk = float(ordered["risk"].iloc[-1])
    step = (max_risk - min_risk) / buckets or 1.0

    bucket = np.floor((ordered["risk"].to_numpy() - min_risk) / step).astype(int)
    ordered["bucket"] = np.clip(bucket, 0, buckets - 1)
    best_idx = ordered.groupby("bucket", sort=True)["ret"].idxmax()
    envelope = ordered.loc[best_idx.to_numpy(), ["risk", "ret"]]
    return envelope.reset_index(drop=True)


def best_sharpe_point(
    cloud: pd.DataFrame,
    weights: npt.NDArray[np.float64] | None = None,
) -> FrontierPoint | None:
    """First cloud point with the maximum Sharpe ratio."""
    if cloud.empty:
        return None
    pos = int(np.argmax(cloud["sharpe"].to_numpy()))
    row = cloud.iloc[pos]
    w = tuple(float(x) for x in weights[pos]) if weights is not None else ()
    return FrontierPoint(
        risk=float(row["risk"]),
        ret=float(row["ret"]),
        sharpe=float(row["sharpe"]),
        weights=w,
    )


def sample_frontier(
    mu_monthly: npt.ArrayLike,
    cov_monthly: npt.ArrayLike,
    points: int = 2600,
    seed: int = 2026,
    buckets: int = 40,
    risk_free_rate_annual: float = RISK_FREE_RATE_ANNUAL,
    labels: Sequence[str] | None = None,
    periods_per_year: int = PERIODS_PER_YEAR,
) -> FrontierResult:
    """Sample random long-only portfolios and summarize the efficient frontier."""
    mu = np.asarray(mu_monthly, dtype=float)
    n_assets = mu.size
    if np.asarray(cov_monthly).shape != (n_assets, n_assets):
        raise ValueError("covariance shape must match number of mean returns.")
    if points < 0:
        raise ValueError("points must be non-negative.")
    asset_labels = list(labels) if labels is not None else [f"w{i}" for i in range(n_assets)]
    if len(asset_labels) != n_assets:
        raise ValueError("labels length must match number of assets.")

    LOGGER.debug(
        "Sampling frontier (assets=%d, points=%d, buckets=%d, seed=%d)",
        n_assets,
        points,
        buckets,
        seed,
    )
    source = RandomSource(seed)
    weights = sample_long_only_weights(n_assets, points, source)
    cloud = evaluate_cloud(weights, mu, cov_monthly, risk_free_rate_annual, periods_per_year)
    return FrontierResult(
        cloud=cloud,
        weights=weights,
        frontier=extract_frontier_envelope(cloud, buckets),
        best_sharpe=best_sharpe_point(cloud, weights),
        labels=asset_labels,
    )


def current_point(
    weights: npt.ArrayLike,
    mu_monthly: npt.ArrayLike,
    cov_monthly: npt.ArrayLike,
    risk_free_rate_annual: float = RISK_FREE_RATE_ANNUAL,
    periods_per_year: int = PERIODS_PER_YEAR,
) -> FrontierPoint:
    """The user's portfolio expressed as a frontier marker."""
    metrics = summarize_portfolio(
        weights,
        mu_monthly,
        cov_monthly,
        risk_free_rate_annual=risk_free_rate_annual,
        periods_per_year=periods_per_year,
    )
    return FrontierPoint(
        risk=metrics.volatility,
        ret=metrics.expected_return,
        sharpe=metrics.sharpe,
        weights=tuple(float(x) for x in np.asarray(weights, dtype=float)),
    )
