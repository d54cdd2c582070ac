"""Synthetic monthly return series driven by a four-factor latent model."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

import numpy as np
import numpy.typing as npt
import pandas as pd

from portfolio_frontier.rng import RandomSource

# Monthly volatility of the market, growth, speculative and defensive factors.
FACTOR_VOLS = np.array([0.03, 0.05, 0.09, 0.025])
FACTOR_NAMES = ("market", "growth", "speculative", "defensive")
SHOCK_PROBABILITY = 0.07
SHOCK_MULTIPLIER = 2.2
RETURN_FLOOR = -0.35
RETURN_CAP = 0.45


class AssetLike(Protocol):
    id: str
    ticker: str


@dataclass(frozen=True)
class AssetProfile:
    """Drift, idiosyncratic volatility and factor loadings for one asset."""

    drift: float
    vol: float
    loadings: tuple[float, float, float, float]


DEFAULT_PROFILE = AssetProfile(drift=0.006, vol=0.06, loadings=(0.5, 0.2, 0.2, 0.2))

TUNED_PROFILES: dict[str, AssetProfile] = {
    "aapl": AssetProfile(drift=0.0105, vol=0.055, loadings=(0.70, 0.75, 0.05, -0.05)),
    "tsla": AssetProfile(drift=0.013, vol=0.095, loadings=(0.65, 0.95, 0.10, -0.05)),
    "gld": AssetProfile(drift=0.0035, vol=0.035, loadings=(0.10, -0.10, 0.00, 0.85)),
    "btc": AssetProfile(drift=0.0175, vol=0.145, loadings=(0.45, 0.20, 1.00, -0.05)),
}


@dataclass(frozen=True)
class SyntheticSeries:
    """Generated returns, one array per asset in input order."""

    months: int
    series: list[npt.NDArray[np.float64]]

    def to_frame(self, labels: Sequence[str]) -> pd.DataFrame:
        if len(labels) != len(self.series):
            raise ValueError("labels length must match number of generated series.")
        index = pd.RangeIndex(1, self.months + 1, name="month")
        return pd.DataFrame(dict(zip(labels, self.series)), index=index)


def resolve_profile(
    asset: AssetLike,
    profiles: Mapping[str, AssetProfile] | None = None,
) -> AssetProfile:
    """Look up a profile by asset id, then lowercase ticker."""
    table = TUNED_PROFILES if profiles is None else profiles
    for key in (asset.id, asset.ticker.lower()):
        if key in table:
            return table[key]
    return DEFAULT_PROFILE


def simulate_factors(months: int, source: RandomSource) -> npt.NDArray[np.float64]:
    """Draw a ``(months, 4)`` factor path with a shared heavy-tail shock per period."""
    shocked = source.uniform(months) < SHOCK_PROBABILITY
    multiplier = np.where(shocked, SHOCK_MULTIPLIER, 1.0)
    draws = source.normal((months, FACTOR_VOLS.size))
    return draws * FACTOR_VOLS * multiplier[:, None]


def generate_synthetic_returns(
    assets: Sequence[AssetLike],
    months: int = 84,
    seed: int = 1337,
    profiles: Mapping[str, AssetProfile] | None = None,
) -> SyntheticSeries:
    """Generate clamped monthly simple returns for ``assets``."""
    if months < 0:
        raise ValueError("months must be non-negative.")

    source = RandomSource(seed)
    factors = simulate_factors(months, source)

    series: list[npt.NDArray[np.float64]] = []
    for asset in assets:
        profile = resolve_profile(asset, profiles)
        factor_mix = factors @ np.asarray(profile.loadings, dtype=float)
        noise = source.normal(months) * profile.vol
        series.append(np.clip(profile.drift + factor_mix + noise, RETURN_FLOOR, RETURN_CAP))
    return SyntheticSeries(months=months, series=series)
