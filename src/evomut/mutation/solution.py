"""Real-valued candidate solutions handled by the mutation operators."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

import numpy as np

from .random_source import RandomSource

__all__ = [
    "DoubleSolution",
    "random_solution",
]


def _to_vector(values: Sequence[float] | np.ndarray, name: str, size: int | None = None) -> np.ndarray:
    array = np.array(values, dtype=float)
    if array.ndim != 1:
        raise ValueError(f"{name} must be 1-dimensional")
    if size is not None and array.size != size:
        raise ValueError(f"{name} size mismatch: expected {size}, got {array.size}")
    return array


@dataclass(frozen=True)
class DoubleSolution:
    """Immutable vector of bounded decision variables.

    Operators never modify a solution; they build a new one with
    :meth:`copy`, which keeps bounds, objectives and attributes.
    """

    variables: np.ndarray
    lower_bounds: np.ndarray
    upper_bounds: np.ndarray
    objectives: np.ndarray = field(default_factory=lambda: np.empty(0))
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        variables = _to_vector(self.variables, "variables")
        lower = _to_vector(self.lower_bounds, "lower_bounds", variables.size)
        upper = _to_vector(self.upper_bounds, "upper_bounds", variables.size)
        if np.any(lower > upper):
            raise ValueError("lower_bounds must not exceed upper_bounds")
        for array in (variables, lower, upper):
            array.setflags(write=False)
        object.__setattr__(self, "variables", variables)
        object.__setattr__(self, "lower_bounds", lower)
        object.__setattr__(self, "upper_bounds", upper)
        object.__setattr__(self, "objectives", _to_vector(self.objectives, "objectives"))
        object.__setattr__(self, "attributes", dict(self.attributes))

    def __len__(self) -> int:
        return int(self.variables.size)

    def bounds(self, index: int) -> tuple[float, float]:
        return float(self.lower_bounds[index]), float(self.upper_bounds[index])

    def is_within_bounds(self) -> bool:
        return bool(np.all((self.variables >= self.lower_bounds) & (self.variables <= self.upper_bounds)))

    def copy(
        self,
        *,
        variables: Sequence[float] | np.ndarray | None = None,
        attributes: Mapping[str, Any] | None = None,
    ) -> "DoubleSolution":
        new_variables = self.variables if variables is None else _to_vector(variables, "variables", len(self))
        return DoubleSolution(
            new_variables,
            self.lower_bounds,
            self.upper_bounds,
            self.objectives,
            dict(self.attributes if attributes is None else attributes),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "variables": self.variables.tolist(),
            "lower_bounds": self.lower_bounds.tolist(),
            "upper_bounds": self.upper_bounds.tolist(),
            "objectives": self.objectives.tolist(),
            "attributes": dict(self.attributes),
        }

    @staticmethod
    def from_dict(payload: Mapping[str, Any]) -> "DoubleSolution":
        return DoubleSolution(
            payload["variables"],
            payload["lower_bounds"],
            payload["upper_bounds"],
            payload.get("objectives", []),
            payload.get("attributes", {}),
        )


def random_solution(bounds: Sequence[tuple[float, float]], rng: RandomSource) -> DoubleSolution:
    """Sample a solution uniformly inside ``bounds``."""
    if not bounds:
        raise ValueError("bounds must not be empty")
    lower = np.array([low for low, _ in bounds], dtype=float)
    upper = np.array([high for _, high in bounds], dtype=float)
    draws = np.array([rng.random() for _ in bounds])
    variables = lower + draws * (upper - lower)
    return DoubleSolution(variables, lower, upper, attributes={"origin": "random"})
