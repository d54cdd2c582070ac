"""Seeded random source shared by the synthetic generator and frontier sampler."""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

Size = int | tuple[int, ...] | None

_MIN_UNIFORM = 1e-9


class RandomSource:
    """Reproducible stream of uniforms, normals and exponentials.

    Every draw advances one underlying generator, so two sources built from the
    same seed and asked for the same sequence of draws return identical values.
    """

    def __init__(self, seed: int) -> None:
        self.seed = int(seed)
        self._generator = np.random.default_rng(self.seed)

    def uniform(self, size: Size = None) -> float | npt.NDArray[np.float64]:
        """Draw values in [0, 1)."""
        if size is None:
            return float(self._generator.random())
        return self._generator.random(size)

    def normal(self, size: Size = None) -> float | npt.NDArray[np.float64]:
        """Draw standard-normal deviates with the Box-Muller transform."""
        u = self._nonzero_uniform(size)
        v = self._nonzero_uniform(size)
        z = np.sqrt(-2.0 * np.log(u)) * np.cos(2.0 * np.pi * v)
        if size is None:
            return float(z)
        return z

    def exponential(self, size: Size = None) -> float | npt.NDArray[np.float64]:
        """Draw unit exponential variates as ``-ln(u)``."""
        u = np.maximum(_MIN_UNIFORM, self.uniform(size))
        out = -np.log(u)
        if size is None:
            return float(out)
        return out

    def _nonzero_uniform(self, size: Size) -> npt.NDArray[np.float64]:
        if size is None:
            value = 0.0
            while value == 0.0:
                value = float(self._generator.random())
            return np.asarray(value, dtype=np.float64)

        draws = np.asarray(self._generator.random(size), dtype=np.float64)
        zeros = draws == 0.0
        # Redraw exact zeros so the logarithm stays finite.
        while zeros.any():
            draws[zeros] = self._generator.random(int(zeros.sum()))
            zeros = draws == 0.0
        return draws
