"""Visualization subpackage exports."""

from portfolio_frontier.viz.frontier import make_frontier_figure, plot_efficient_frontier
from portfolio_frontier.viz.heatmap import make_correlation_heatmap
from portfolio_frontier.viz.performance import make_cumulative_returns_figure

__all__ = [
    "make_frontier_figure",
    "plot_efficient_frontier",
    "make_correlation_heatmap",
    "make_cumulative_returns_figure",
]
