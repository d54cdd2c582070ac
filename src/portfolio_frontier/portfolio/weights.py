"""Long-only weight vectors: normalization, single-slider edits and resizing."""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from portfolio_frontier.rng import RandomSource

ZERO_BASE_TOLERANCE = 1e-9


def normalize_long_only(weights: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Clip to non-negative and rescale to sum 1; all-zero input becomes uniform."""
    clipped = np.maximum(0.0, np.asarray(weights, dtype=float))
    total = clipped.sum()
    if clipped.size == 0:
        return clipped
    if total <= 0:
        return np.full(clipped.size, 1.0 / clipped.size)
    return clipped / total


def equal_weights(n_assets: int) -> npt.NDArray[np.float64]:
    """Uniform weights ``1/n``."""
    if n_assets < 0:
        raise ValueError("n_assets must be non-negative.")
    if n_assets == 0:
        return np.zeros(0)
    return np.full(n_assets, 1.0 / n_assets)


def random_long_only_weights(n_assets: int, source: RandomSource) -> npt.NDArray[np.float64]:
    """Exponential draws normalized to the simplex (flat Dirichlet)."""
    draws = np.asarray(source.exponential(n_assets), dtype=float)
    total = draws.sum()
    return draws / (total if total else 1.0)


def update_weight(
    previous: npt.ArrayLike,
    index: int,
    value: float,
    tolerance: float = ZERO_BASE_TOLERANCE,
) -> npt.NDArray[np.float64]:
    """Set ``previous[index]`` to ``value`` and rescale the rest to keep the sum at 1.

    Other weights keep their relative shares. When they held no mass the
    remainder is spread uniformly across them.
    """
    prev = np.asarray(previous, dtype=float)
    n_assets = prev.size
    if not 0 <= index < n_assets:
        raise IndexError(f"weight index {index} out of range for {n_assets} assets.")
    if n_assets == 1:
        return np.ones(1)

    v = float(np.clip(value, 0.0, 1.0))
    others = np.arange(n_assets) != index
    prev_other_sum = float(prev[others].sum())
    remaining = 1.0 - v

    updated = prev.copy()
    updated[index] = v
    if prev_other_sum <= tolerance:
        updated[others] = remaining / (n_assets - 1)
    else:
        updated[others] = prev[others] * (remaining / prev_other_sum)
    return normalize_long_only(updated)


def resize_weights(weights: npt.ArrayLike, n_assets: int) -> npt.NDArray[np.float64]:
    """Grow or shrink a weight vector, keeping existing values by index.

    New slots split whatever mass the kept weights are short of 1.
    """
    if n_assets < 0:
        raise ValueError("n_assets must be non-negative.")
    current = np.asarray(weights, dtype=float)
    kept = np.maximum(0.0, current[:n_assets])
    n_new = n_assets - kept.size
    if n_new <= 0:
        return normalize_long_only(kept)

    deficit = max(0.0, 1.0 - float(kept.sum()))
    filled = np.concatenate([kept, np.full(n_new, deficit / n_new)])
    return normalize_long_only(filled)

