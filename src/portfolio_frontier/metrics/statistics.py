"""Mean, covariance and correlation estimators for monthly return series."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt
import pandas as pd

SeriesSet = Sequence[Sequence[float] | npt.NDArray[np.float64]]


def mean(series: Sequence[float] | npt.NDArray[np.float64]) -> float:
    """Arithmetic mean; an empty series has mean 0."""
    values = np.asarray(series, dtype=float)
    return float(values.sum() / max(1, values.size))


def mean_vector(series_set: SeriesSet) -> npt.NDArray[np.float64]:
    """Per-asset means in asset order."""
    return np.array([mean(series) for series in series_set], dtype=float)


def covariance_matrix(series_set: SeriesSet) -> npt.NDArray[np.float64]:
    """Unbiased sample covariance (divisor T-1) of aligned series.

    ``T`` is the shortest series length; longer rows contribute their trailing
    ``T`` values. Fewer than two periods yields an all-zero matrix.
    """
    n_assets = len(series_set)
    rows = [np.asarray(series, dtype=float) for series in series_set]
    t_count = min((row.size for row in rows), default=0)
    cov = np.zeros((n_assets, n_assets), dtype=float)
    if n_assets == 0 or t_count < 2:
        return cov

    matrix = np.vstack([row[row.size - t_count :] for row in rows])
    centered = matrix - matrix.mean(axis=1, keepdims=True)
    cov = centered @ centered.T / (t_count - 1)
    # Average with the transpose so cov[i, j] and cov[j, i] are identical floats.
    return (cov + cov.T) / 2.0


def correlation_from_covariance(cov: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Pearson correlation matrix; entries are 0 where a variance is 0."""
    cov_arr = np.atleast_2d(np.asarray(cov, dtype=float))
    if cov_arr.size == 0:
        return np.zeros((0, 0), dtype=float)
    sd = np.sqrt(np.maximum(0.0, np.diag(cov_arr)))
    denom = np.outer(sd, sd)
    corr = np.zeros_like(cov_arr)
    np.divide(cov_arr, denom, out=corr, where=denom > 0)
    return np.clip(corr, -1.0, 1.0)


def top_correlation_pairs(
    corr: npt.ArrayLike,
    labels: Sequence[str],
    k: int = 3,
) -> list[dict[str, float | str]]:
    """Return the ``k`` most positively correlated distinct pairs."""
    corr_arr = np.asarray(corr, dtype=float)
    if corr_arr.ndim != 2 or corr_arr.shape[0] != len(labels):
        raise ValueError("labels length must match correlation matrix size.")

    pairs: list[dict[str, float | str]] = []
    for i in range(len(labels)):
        for j in range(i + 1, len(labels)):
            pairs.append({"a": labels[i], "b": labels[j], "corr": float(corr_arr[i, j])})
    # Stable sort keeps matrix order for ties.
    pairs.sort(key=lambda pair: pair["corr"], reverse=True)
    return pairs[: max(0, k)]


def cumulative_returns(
    series_set: SeriesSet,
    labels: Sequence[str],
    tail: int | None = 60,
) -> pd.DataFrame:
    """Compounded growth ``prod(1 + r) - 1`` per asset over the shortest non-empty window.

    Each row is indexed by its 1-based month; missing values count as a zero
    return. Only the last ``tail`` rows are kept.
    """
    if len(labels) != len(series_set):
        raise ValueError("labels length must match number of series.")
    rows = [np.asarray(series, dtype=float) for series in series_set]
    lengths = [row.size for row in rows if row.size > 0]
    t_count = min(lengths) if lengths else 0

    matrix = np.zeros((t_count, len(rows)), dtype=float)
    for col, row in enumerate(rows):
        head = row[:t_count]
        matrix[: head.size, col] = head
    growth = np.cumprod(1.0 + matrix, axis=0) - 1.0

    frame = pd.DataFrame(growth, columns=list(labels))
    frame.index = pd.RangeIndex(1, t_count + 1, name="month")
    if tail is not None:
        frame = frame.iloc[max(0, t_count - tail) :]
    return frame
