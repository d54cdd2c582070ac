"""Cumulative return trend chart."""

from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go


def make_cumulative_returns_figure(cumulative: pd.DataFrame, theme: str = "plotly_white") -> go.Figure:
    """Area chart of compounded returns with one trace per asset column."""
    fig = go.Figure()
    for column in cumulative.columns:
        fig.add_scatter(
            x=cumulative.index,
            y=cumulative[column],
            mode="lines",
            name=str(column),
            fill="tozeroy",
            opacity=0.6,
            hovertemplate="M%{x}: %{y:.2%}<extra></extra>",
        )
    fig.update_layout(template=theme, title="Cumulative returns (aligned monthly series)")
    fig.update_xaxes(title_text="Month")
    fig.update_yaxes(title_text="Cumulative return", tickformat=".0%")
    return fig
