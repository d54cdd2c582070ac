"""Single-user portfolio session with explicit recomputation of derived statistics."""

from __future__ import annotations

import itertools
import logging
import re
from dataclasses import dataclass
from typing import Any

import numpy as np
import numpy.typing as npt
import pandas as pd

from portfolio_frontier.config import AppConfig
from portfolio_frontier.data.loaders import load_upload_returns
from portfolio_frontier.data.preprocess import align_series
from portfolio_frontier.data.synthetic import generate_synthetic_returns
from portfolio_frontier.metrics.portfolio import (
    PortfolioMetrics,
    asset_annual_stats,
    summarize_portfolio,
)
from portfolio_frontier.metrics.statistics import (
    correlation_from_covariance,
    covariance_matrix,
    cumulative_returns,
    mean_vector,
)
from portfolio_frontier.portfolio.frontier import (
    FrontierPoint,
    FrontierResult,
    current_point,
    sample_frontier,
)
from portfolio_frontier.portfolio.weights import (
    equal_weights,
    normalize_long_only,
    random_long_only_weights,
    resize_weights,
    update_weight,
)
from portfolio_frontier.rng import RandomSource

LOGGER = logging.getLogger(__name__)

_INSTRUMENT_NAME = re.compile(r"^Instrument_(\d+)$")


@dataclass(frozen=True)
class Asset:
    id: str
    name: str
    ticker: str


@dataclass(frozen=True)
class SessionSnapshot:
    """Derived statistics for one state of the session."""

    assets: list[Asset]
    weights: npt.NDArray[np.float64]
    raw_lengths: list[int]
    upload_names: list[str | None]
    aligned: list[npt.NDArray[np.float64]]
    mu: npt.NDArray[np.float64]
    cov: npt.NDArray[np.float64]
    corr: npt.NDArray[np.float64]
    metrics: PortfolioMetrics
    asset_returns_annual: npt.NDArray[np.float64]
    asset_volatilities_annual: npt.NDArray[np.float64]
    risk_free_rate_annual: float

    @property
    def tickers(self) -> list[str]:
        return [asset.ticker for asset in self.assets]

    @property
    def aligned_points(self) -> int:
        return int(self.aligned[0].size) if self.aligned else 0

    def cumulative_returns(self, tail: int | None = 60) -> pd.DataFrame:
        """Compounded return path of each aligned series, one column per ticker."""
        return cumulative_returns(self.aligned, self.tickers, tail=tail)


class PortfolioSession:
    """Owns assets, their return series and weights, keyed by stable asset ids.

    Mutating methods only change stored inputs; call :meth:`recompute` (or read
    :attr:`snapshot`) to get statistics. Changes to series or to the asset set
    mark any generated frontier as stale; weight edits do not.
    """

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or AppConfig()
        self.seed = self.config.data.seed
        self._order: list[str] = []
        self._assets: dict[str, Asset] = {}
        self._synthetic: dict[str, npt.NDArray[np.float64]] = {}
        self._uploads: dict[str, tuple[str, npt.NDArray[np.float64]]] = {}
        self._weights = np.zeros(0)
        self._ids = itertools.count(1)
        self._snapshot: SessionSnapshot | None = None
        self._frontier: FrontierResult | None = None
        self._frontier_generated = False

        for item in self.config.data.initial_assets:
            self._insert(Asset(id=item.id, name=item.name, ticker=item.ticker))
        self._weights = equal_weights(len(self._order))
        self._regenerate_synthetic()

    # ----- inspection -------------------------------------------------------

    @property
    def assets(self) -> list[Asset]:
        return [self._assets[asset_id] for asset_id in self._order]

    @property
    def weights(self) -> npt.NDArray[np.float64]:
        return self._weights.copy()

    def weight_of(self, asset_id: str) -> float:
        return float(self._weights[self._index(asset_id)])

    def series_for(self, asset_id: str) -> npt.NDArray[np.float64]:
        if asset_id in self._uploads:
            return self._uploads[asset_id][1]
        return self._synthetic[asset_id]

    def upload_name(self, asset_id: str) -> str | None:
        self._index(asset_id)
        upload = self._uploads.get(asset_id)
        return upload[0] if upload else None

    @property
    def frontier_generated(self) -> bool:
        return self._frontier_generated

    @property
    def frontier(self) -> FrontierResult | None:
        """The last generated frontier, or ``None`` if never generated or stale."""
        return self._frontier if self._frontier_generated else None

    # ----- asset set ----------------------------------------------------------

    def add_asset(self, name: str | None = None, ticker: str | None = None) -> Asset:
        """Append an instrument; unnamed ones are numbered ``Instrument_<n>``."""
        label = name or self._next_instrument_name()
        asset = Asset(id=self._next_id(), name=label, ticker=ticker or label)
        self._insert(asset)
        self._weights = resize_weights(self._weights, len(self._order))
        self._regenerate_synthetic()
        LOGGER.info("Added asset %s (%s)", asset.id, asset.ticker)
        return asset

    def remove_asset(self, asset_id: str) -> None:
        idx = self._index(asset_id)
        self._order.pop(idx)
        del self._assets[asset_id]
        self._uploads.pop(asset_id, None)
        self._weights = normalize_long_only(np.delete(self._weights, idx))
        self._regenerate_synthetic()
        LOGGER.info("Removed asset %s", asset_id)

    def rename_asset(self, asset_id: str, name: str, ticker: str | None = None) -> Asset:
        """Rename an instrument; the ticker follows the name unless given.

        Synthetic series are regenerated since profiles are matched on ticker.
        """
        self._index(asset_id)
        label = name.strip()
        if not label:
            raise ValueError("Asset name must not be empty.")
        asset = Asset(id=asset_id, name=label, ticker=(ticker or label).strip())
        self._assets[asset_id] = asset
        self._regenerate_synthetic()
        LOGGER.info("Renamed asset %s to %s", asset_id, asset.ticker)
        return asset

    # ----- data ---------------------------------------------------------------

    def refresh_data(self) -> None:
        """Advance the seed and regenerate synthetic series; uploads are kept."""
        self.seed += 1
        self._regenerate_synthetic()

    def upload_csv(self, asset_id: str, text: str, filename: str) -> npt.NDArray[np.float64]:
        """Replace an asset's series with returns parsed from OHLCV CSV text.

        Raises ``CsvValidationError`` before touching any state.
        """
        self._index(asset_id)
        returns = load_upload_returns(text, min_returns=self.config.data.min_upload_returns)
        self._uploads[asset_id] = (filename, returns)
        self._series_changed()
        LOGGER.info("Loaded %d returns for %s from %s", returns.size, asset_id, filename)
        return returns

    def clear_upload(self, asset_id: str) -> None:
        self._index(asset_id)
        if self._uploads.pop(asset_id, None) is not None:
            self._series_changed()

    # ----- weights ------------------------------------------------------------

    def set_weight(self, asset_id: str, value: float) -> npt.NDArray[np.float64]:
        self._weights = update_weight(
            self._weights,
            self._index(asset_id),
            value,
            tolerance=self.config.weights.tolerance,
        )
        self._snapshot = None
        return self.weights

    def set_weights(self, values: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """Replace all weights at once, normalized to the long-only simplex."""
        w = np.asarray(values, dtype=float)
        if w.shape != (len(self._order),):
            raise ValueError("weights length does not match number of assets.")
        self._weights = normalize_long_only(w)
        self._snapshot = None
        return self.weights

    def reset_weights(self) -> npt.NDArray[np.float64]:
        self._weights = equal_weights(len(self._order))
        self._snapshot = None
        return self.weights

    def randomize_weights(self) -> npt.NDArray[np.float64]:
        source = RandomSource(self.seed + self.config.weights.randomize_seed_offset)
        self._weights = random_long_only_weights(len(self._order), source)
        self._snapshot = None
        return self.weights

    # ----- derived values -----------------------------------------------------

    def recompute(self) -> SessionSnapshot:
        """Recompute aligned series, statistics and live metrics from current inputs."""
        series = [self.series_for(asset_id) for asset_id in self._order]
        aligned = align_series(series)
        mu = mean_vector(aligned)
        cov = covariance_matrix(aligned)
        rf = self.config.metrics.risk_free_rate_annual
        periods = self.config.annualization_factor
        asset_returns, asset_vols = asset_annual_stats(mu, cov, periods)
        self._snapshot = SessionSnapshot(
            assets=self.assets,
            weights=self.weights,
            raw_lengths=[int(s.size) for s in series],
            upload_names=[self.upload_name(asset_id) for asset_id in self._order],
            aligned=aligned,
            mu=mu,
            cov=cov,
            corr=correlation_from_covariance(cov),
            metrics=summarize_portfolio(
                self._weights,
                mu,
                cov,
                risk_free_rate_annual=rf,
                periods_per_year=periods,
            ),
            asset_returns_annual=asset_returns,
            asset_volatilities_annual=asset_vols,
            risk_free_rate_annual=rf,
        )
        return self._snapshot

    @property
    def snapshot(self) -> SessionSnapshot:
        if self._snapshot is None:
            return self.recompute()
        return self._snapshot

    def generate_frontier(self) -> FrontierResult:
        """Sample the frontier for the current statistics and mark it fresh."""
        snap = self.snapshot
        cfg = self.config.frontier
        self._frontier = sample_frontier(
            snap.mu,
            snap.cov,
            points=cfg.points,
            seed=cfg.seed,
            buckets=cfg.buckets,
            risk_free_rate_annual=snap.risk_free_rate_annual,
            labels=snap.tickers,
            periods_per_year=self.config.annualization_factor,
        )
        self._frontier_generated = True
        LOGGER.info(
            "Generated frontier with %d samples and %d envelope points",
            len(self._frontier.cloud),
            len(self._frontier.frontier),
        )
        return self._frontier

    def current_point(self) -> FrontierPoint:
        snap = self.snapshot
        return current_point(
            snap.weights,
            snap.mu,
            snap.cov,
            risk_free_rate_annual=snap.risk_free_rate_annual,
            periods_per_year=self.config.annualization_factor,
        )

    def commentary_facts(self) -> dict[str, Any]:
        from portfolio_frontier.commentary import build_commentary_facts

        cfg = self.config.commentary
        return build_commentary_facts(self.snapshot, notes=cfg.notes, top_pairs=cfg.top_pairs)

    # ----- internals ----------------------------------------------------------

    def _index(self, asset_id: str) -> int:
        try:
            return self._order.index(asset_id)
        except ValueError:
            raise KeyError(f"Unknown asset id '{asset_id}'") from None

    def _insert(self, asset: Asset) -> None:
        if asset.id in self._assets:
            raise ValueError(f"Duplicate asset id '{asset.id}'")
        self._order.append(asset.id)
        self._assets[asset.id] = asset

    def _next_id(self) -> str:
        while True:
            candidate = f"inst_{next(self._ids)}"
            if candidate not in self._assets:
                return candidate

    def _next_instrument_name(self) -> str:
        numbers = [
            int(match.group(1))
            for asset in self._assets.values()
            if (match := _INSTRUMENT_NAME.match(asset.name))
        ]
        return f"Instrument_{max(numbers) + 1 if numbers else 1}"

    def _regenerate_synthetic(self) -> None:
        generated = generate_synthetic_returns(
            self.assets,
            months=self.config.data.months,
            seed=self.seed,
        )
        self._synthetic = dict(zip(self._order, generated.series))
        self._series_changed()

    def _series_changed(self) -> None:
        self._snapshot = None
        self._frontier_generated = False
        self._frontier = None
