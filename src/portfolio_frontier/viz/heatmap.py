"""Correlation heatmap."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt
import plotly.graph_objects as go


def make_correlation_heatmap(
    corr: npt.ArrayLike,
    labels: Sequence[str],
    theme: str = "plotly_white",
) -> go.Figure:
    """Annotated correlation matrix on a fixed [-1, 1] diverging scale."""
    matrix = np.asarray(corr, dtype=float)
    if matrix.shape != (len(labels), len(labels)):
        raise ValueError("labels length must match correlation matrix size.")

    fig = go.Figure(
        go.Heatmap(
            z=matrix,
            x=list(labels),
            y=list(labels),
            zmin=-1.0,
            zmax=1.0,
            colorscale="RdBu",
            reversescale=True,
            text=np.round(matrix, 2),
            texttemplate="%{text:.2f}",
            hovertemplate="%{y} / %{x}: %{z:.3f}<extra></extra>",
        )
    )
    fig.update_layout(template=theme, title="Correlation matrix (monthly returns)")
    fig.update_yaxes(autorange="reversed")
    return fig
