"""Alignment of per-asset return series to a common trailing window."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt


def align_series(
    series_set: Sequence[Sequence[float] | npt.NDArray[np.float64]],
) -> list[npt.NDArray[np.float64]]:
    """Truncate every series to the last ``N`` values, ``N`` the shortest non-empty length.

    When fewer than two points are available the series are returned as-is and
    the statistics layer falls back to its zero matrices.
    """
    rows = [np.asarray(series, dtype=float) for series in series_set]
    lengths = [row.size for row in rows if row.size > 0]
    if not lengths or min(lengths) < 2:
        return rows
    n_points = min(lengths)
    return [row[max(0, row.size - n_points) :] for row in rows]
