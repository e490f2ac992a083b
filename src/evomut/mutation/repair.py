"""Repair strategies bringing mutated genes back inside their bounds."""

from __future__ import annotations

from typing import Protocol

from .random_source import RandomSource

__all__ = [
    "RepairStrategy",
    "BoundRepair",
    "RandomRepair",
    "OppositeBoundRepair",
    "repair_factory",
]


def _check_bounds(lower: float, upper: float) -> None:
    if lower > upper:
        raise ValueError(f"lower bound {lower} is greater than upper bound {upper}")


class RepairStrategy(Protocol):
    def repair(self, value: float, lower: float, upper: float) -> float:
        ...


class BoundRepair:
    """Clamp out-of-range values onto the violated bound."""

    def repair(self, value: float, lower: float, upper: float) -> float:
        _check_bounds(lower, upper)
        return min(max(value, lower), upper)

    def __repr__(self) -> str:
        return "BoundRepair()"


class RandomRepair:
    """Replace out-of-range values with a uniform draw inside the bounds."""

    def __init__(self, rng: RandomSource) -> None:
        self._rng = rng

    def repair(self, value: float, lower: float, upper: float) -> float:
        _check_bounds(lower, upper)
        if lower <= value <= upper:
            return value
        return lower + self._rng.random() * (upper - lower)

    def __repr__(self) -> str:
        return "RandomRepair()"


class OppositeBoundRepair:
    """Send values below ``lower`` to ``upper`` and values above ``upper`` to ``lower``."""

    def repair(self, value: float, lower: float, upper: float) -> float:
        _check_bounds(lower, upper)
        if value < lower:
            return upper
        if value > upper:
            return lower
        return value

    def __repr__(self) -> str:
        return "OppositeBoundRepair()"


def repair_factory(name: str, rng: RandomSource | None = None) -> RepairStrategy:
    method = str(name).lower()
    if method in {"bounds", "bound"}:
        return BoundRepair()
    if method == "random":
        if rng is None:
            raise ValueError("random repair requires a random source")
        return RandomRepair(rng)
    if method == "opposite_bound":
        return OppositeBoundRepair()
    raise ValueError(f"unknown repair strategy '{name}'")
