"""Monte-Carlo efficient frontier visualization."""

from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
import plotly.graph_objects as go

from portfolio_frontier.portfolio.frontier import FrontierPoint, FrontierResult


def make_frontier_figure(
    result: FrontierResult,
    current: FrontierPoint | None = None,
    theme: str = "plotly_white",
) -> go.Figure:
    """Build interactive risk/return scatter with the sampled envelope for UI usage."""
    if result.cloud.empty:
        raise ValueError("No sampled portfolios available to plot frontier.")

    cloud = result.cloud
    fig = go.Figure()
    fig.add_scatter(
        x=cloud["risk"],
        y=cloud["ret"],
        mode="markers",
        name="Random portfolios",
        marker=dict(
            size=4,
            color=cloud["sharpe"],
            colorscale="Viridis",
            opacity=0.55,
            colorbar=dict(title="Sharpe"),
        ),
        hovertemplate="Volatility=%{x:.2%}<br>Return=%{y:.2%}<extra></extra>",
    )
    if not result.frontier.empty:
        fig.add_scatter(
            x=result.frontier["risk"],
            y=result.frontier["ret"],
            mode="lines+markers",
            name="Frontier (bucket max)",
            line=dict(color="#2dd4bf", width=2),
        )
    if result.best_sharpe is not None:
        fig.add_scatter(
            x=[result.best_sharpe.risk],
            y=[result.best_sharpe.ret],
            mode="markers",
            name="Best Sharpe",
            marker=dict(size=12, color="#9467bd", symbol="star"),
        )
    if current is not None:
        fig.add_scatter(
            x=[current.risk],
            y=[current.ret],
            mode="markers",
            name="Current portfolio",
            marker=dict(size=12, color="#d62728", symbol="x"),
        )

    fig.update_layout(template=theme, title="Efficient Frontier (random long-only portfolios)")
    fig.update_xaxes(title_text="Volatility (ann.)", tickformat=".0%")
    fig.update_yaxes(title_text="Return (ann.)", tickformat=".0%")
    return fig


def plot_efficient_frontier(
    result: FrontierResult,
    current: FrontierPoint | None = None,
    title: str | None = None,
    show: bool = True,
    save_path: str | None = None,
    backend: str = "plotly",
):
    """Plot the sampled cloud and frontier envelope."""
    if result.cloud.empty:
        raise ValueError("No sampled portfolios available to plot frontier.")
    plot_title = title or "Efficient Frontier"

    if backend == "matplotlib":
        fig, ax = plt.subplots(figsize=(8, 5))
        points = ax.scatter(
            result.cloud["risk"],
            result.cloud["ret"],
            c=result.cloud["sharpe"],
            s=6,
            alpha=0.5,
            cmap="viridis",
        )
        fig.colorbar(points, ax=ax, label="Sharpe")
        if not result.frontier.empty:
            ax.plot(result.frontier["risk"], result.frontier["ret"], marker="o", label="Frontier")
        if result.best_sharpe is not None:
            ax.scatter(
                result.best_sharpe.risk,
                result.best_sharpe.ret,
                marker="*",
                s=120,
                label="Best Sharpe",
            )
        if current is not None:
            ax.scatter(current.risk, current.ret, marker="x", s=80, label="Current")
        ax.set_xlabel("Volatility (ann.)")
        ax.set_ylabel("Return (ann.)")
        ax.set_title(plot_title)
        ax.legend()
        fig.tight_layout()
        if save_path:
            fig.savefig(save_path)
        if show:
            plt.show()
        return fig

    if backend != "plotly":
        raise ValueError("backend must be 'plotly' or 'matplotlib'.")

    fig = make_frontier_figure(result, current=current)
    fig.update_layout(title=plot_title)
    if save_path:
        _save_plotly(fig, save_path)
    if show:
        fig.show()
    return fig


def _save_plotly(fig: go.Figure, save_path: str) -> None:
    out = Path(save_path)
    if out.suffix.lower() == ".html":
        fig.write_html(str(out))
    else:
        fig.write_image(str(out))
