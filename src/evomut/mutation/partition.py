"""Probability partition mapping uniform draws onto strategy indices."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..config.loader import ConfigError

__all__ = ["ProbabilityPartition"]


class ProbabilityPartition:
    """Split ``[0, 1)`` into ordered segments proportional to raw weights.

    Segment ``i`` covers ``(c_{i-1}, c_i]`` where ``c_i`` is the cumulative
    normalised weight. The bound of the last segment with positive width, and
    every bound after it, is pinned to exactly ``1.0`` so floating point
    shortfall never leaves a draw unmapped. Zero-weight segments have no width
    and are never returned by :meth:`segment_for`.

    Parameters
    ----------
    weights:
        Non-negative finite raw weights, at least one of them positive.

    Raises
    ------
    ConfigError
        When the weights are empty, negative, non-finite or sum to zero.
    """

    def __init__(self, weights: Sequence[float]) -> None:
        raw = np.array(weights, dtype=float)
        if raw.ndim != 1 or raw.size == 0:
            raise ConfigError("weights must be a non-empty 1-dimensional sequence")
        if not np.all(np.isfinite(raw)):
            raise ConfigError(f"weights must be finite, got {raw.tolist()}")
        if np.any(raw < 0):
            raise ConfigError(f"weights must be non-negative, got {raw.tolist()}")
        peak = raw.max()
        if not peak > 0:
            raise ConfigError("weights must have a positive sum; no strategy could be selected")

        # Scaled by the largest weight so the sum stays finite.
        scaled = raw / peak
        probabilities = scaled / scaled.sum()
        bounds = np.cumsum(probabilities)
        reachable = np.flatnonzero(probabilities > 0)
        bounds[reachable[-1]:] = 1.0

        for array in (raw, probabilities, bounds, reachable):
            array.setflags(write=False)
        self._weights = raw
        self._probabilities = probabilities
        self._bounds = bounds
        self._reachable = reachable
        self._reachable_bounds = bounds[reachable]

    def __len__(self) -> int:
        return int(self._weights.size)

    def __repr__(self) -> str:
        probs = ", ".join(f"{p:.4f}" for p in self._probabilities)
        return f"ProbabilityPartition([{probs}])"

    @property
    def weights(self) -> tuple[float, ...]:
        return tuple(float(w) for w in self._weights)

    @property
    def probabilities(self) -> tuple[float, ...]:
        """Normalised weights, summing to one."""
        return tuple(float(p) for p in self._probabilities)

    @property
    def bounds(self) -> tuple[float, ...]:
        """Inclusive cumulative upper bound of every segment."""
        return tuple(float(b) for b in self._bounds)

    def segment_for(self, r: float) -> int:
        """Return the smallest positive-width segment ``i`` with ``r <= c_i``."""
        if not 0.0 <= r < 1.0:
            raise ValueError(f"draw must lie in [0, 1), got {r}")
        position = int(np.searchsorted(self._reachable_bounds, r, side="left"))
        return int(self._reachable[position])

    def segments_for(self, draws: Sequence[float] | np.ndarray) -> np.ndarray:
        """Vectorised :meth:`segment_for` over an array of draws."""
        values = np.asarray(draws, dtype=float)
        if values.size and not np.all((values >= 0.0) & (values < 1.0)):
            raise ValueError("draws must lie in [0, 1)")
        positions = np.searchsorted(self._reachable_bounds, values, side="left")
        return self._reachable[positions]
