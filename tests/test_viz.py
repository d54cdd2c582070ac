from pathlib import Path

import numpy as np
import pytest

from portfolio_frontier.portfolio.frontier import current_point, sample_frontier
from portfolio_frontier.portfolio.session import PortfolioSession
from portfolio_frontier.viz.frontier import make_frontier_figure, plot_efficient_frontier
from portfolio_frontier.viz.heatmap import make_correlation_heatmap
from portfolio_frontier.viz.performance import make_cumulative_returns_figure


@pytest.fixture()
def frontier_result(demo_stats):
    mu, cov = demo_stats
    return sample_frontier(mu, cov, points=300, seed=4)


def test_frontier_figure_traces(frontier_result, demo_stats):
    mu, cov = demo_stats
    fig = make_frontier_figure(frontier_result, current=current_point(np.full(4, 0.25), mu, cov))
    names = [trace.name for trace in fig.data]
    assert names == ["Random portfolios", "Frontier (bucket max)", "Best Sharpe", "Current portfolio"]


def test_frontier_figure_requires_samples():
    empty = sample_frontier(np.array([0.01]), np.array([[0.001]]), points=0)
    with pytest.raises(ValueError):
        make_frontier_figure(empty)


def test_plot_backends_save(frontier_result, tmp_path: Path):
    png = tmp_path / "frontier.png"
    html = tmp_path / "frontier.html"
    plot_efficient_frontier(frontier_result, show=False, save_path=str(png), backend="matplotlib")
    plot_efficient_frontier(frontier_result, show=False, save_path=str(html), backend="plotly")
    assert png.exists()
    assert html.exists()
    with pytest.raises(ValueError):
        plot_efficient_frontier(frontier_result, show=False, backend="bokeh")


def test_correlation_heatmap():
    corr = np.array([[1.0, -0.4], [-0.4, 1.0]])
    fig = make_correlation_heatmap(corr, ["A", "B"])
    heatmap = fig.data[0]
    assert heatmap.zmin == -1.0
    assert heatmap.zmax == 1.0
    assert list(heatmap.x) == ["A", "B"]
    with pytest.raises(ValueError):
        make_correlation_heatmap(corr, ["A"])


def test_cumulative_returns_figure():
    session = PortfolioSession()
    session.add_asset()
    frame = session.snapshot.cumulative_returns(tail=24)
    fig = make_cumulative_returns_figure(frame)
    assert [trace.name for trace in fig.data] == ["Instrument_1", "Instrument_2"]
    assert len(fig.data[0].x) == 24
