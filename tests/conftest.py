import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from portfolio_frontier.data.synthetic import generate_synthetic_returns
from portfolio_frontier.metrics.statistics import covariance_matrix, mean_vector
from portfolio_frontier.portfolio.session import Asset


def _ohlcv_csv(closes, header="Date,Open,High,Low,Close,Volume", newline="\n"):
    rows = [header]
    for i, close in enumerate(closes):
        date = f"{2000 + i // 12}-{i % 12 + 1:02d}-01"
        rows.append(f"{date},{close},{close},{close},{close},1000")
    return newline.join(rows) + newline


@pytest.fixture()
def make_csv():
    """Factory building OHLCV CSV text with one monthly row per close price."""
    return _ohlcv_csv


@pytest.fixture()
def demo_assets() -> list[Asset]:
    return [
        Asset(id="aapl", name="Apple", ticker="AAPL"),
        Asset(id="tsla", name="Tesla", ticker="TSLA"),
        Asset(id="gld", name="Gold", ticker="GLD"),
        Asset(id="btc", name="Bitcoin", ticker="BTC"),
    ]


@pytest.fixture()
def demo_stats(demo_assets) -> tuple[np.ndarray, np.ndarray]:
    generated = generate_synthetic_returns(demo_assets, months=84, seed=1337)
    return mean_vector(generated.series), covariance_matrix(generated.series)
