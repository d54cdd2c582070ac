"""Minimal end-to-end portfolio frontier example."""

from portfolio_frontier.config import AppConfig, merge_config
from portfolio_frontier.portfolio.session import PortfolioSession


def main() -> None:
    assets = [
        {"id": "aapl", "name": "Apple", "ticker": "AAPL"},
        {"id": "tsla", "name": "Tesla", "ticker": "TSLA"},
        {"id": "gld", "name": "Gold", "ticker": "GLD"},
        {"id": "btc", "name": "Bitcoin", "ticker": "BTC"},
    ]
    session = PortfolioSession(merge_config(AppConfig(), {"data": {"initial_assets": assets}}))
    session.set_weights([0.4, 0.1, 0.4, 0.1])

    snap = session.recompute()
    print("metrics:", snap.metrics.to_dict())

    result = session.generate_frontier()
    best = result.best_sharpe
    print("frontier points:", len(result.frontier))
    if best is not None:
        print("best sharpe:", round(best.sharpe, 3))
        print("weights:", dict(zip(result.labels, best.weights)))


if __name__ == "__main__":
    main()
