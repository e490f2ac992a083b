"""Leaf mutation strategies for bounded real-valued solutions.

Every strategy visits the variables in order and mutates each one when a
fresh draw falls at or below ``probability``; mutated values are handed to the
configured repair strategy. Strategies never touch their input and return a
new :class:`DoubleSolution`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from ..config.loader import ConfigError
from .random_source import RandomSource
from .repair import RepairStrategy
from .solution import DoubleSolution

__all__ = [
    "MutationStrategy",
    "UniformMutation",
    "PolynomialMutation",
    "LinkedPolynomialMutation",
    "NonUniformMutation",
    "STRATEGY_REGISTRY",
    "strategy_factory",
]


@runtime_checkable
class MutationStrategy(Protocol):
    def execute(self, solution: DoubleSolution) -> DoubleSolution:
        ...


def _validate_probability(probability: float) -> None:
    if not 0.0 <= probability <= 1.0:
        raise ConfigError(f"mutation probability must be in [0, 1], got {probability}")


def _validate_non_negative(name: str, value: float) -> None:
    if not math.isfinite(value) or value < 0:
        raise ConfigError(f"{name} must be a finite value >= 0, got {value}")


def _polynomial_value(y: float, lower: float, upper: float, eta: float, u: float) -> float:
    span = upper - lower
    # Clipped so values already outside the bounds do not yield complex powers.
    delta1 = min(max((y - lower) / span, 0.0), 1.0)
    delta2 = min(max((upper - y) / span, 0.0), 1.0)
    mut_pow = 1.0 / (eta + 1.0)
    if u <= 0.5:
        xy = 1.0 - delta1
        val = 2.0 * u + (1.0 - 2.0 * u) * xy ** (eta + 1.0)
        deltaq = val**mut_pow - 1.0
    else:
        xy = 1.0 - delta2
        val = 2.0 * (1.0 - u) + 2.0 * (u - 0.5) * xy ** (eta + 1.0)
        deltaq = 1.0 - val**mut_pow
    return y + deltaq * span


@dataclass(frozen=True)
class UniformMutation:
    """Shift a variable by ``(u - 0.5) * perturbation``."""

    probability: float
    perturbation: float
    repair: RepairStrategy
    rng: RandomSource = field(repr=False)

    def __post_init__(self) -> None:
        _validate_probability(self.probability)
        _validate_non_negative("perturbation", self.perturbation)

    def execute(self, solution: DoubleSolution) -> DoubleSolution:
        variables = solution.variables.copy()
        for i in range(len(solution)):
            if self.rng.random() <= self.probability:
                lower, upper = solution.bounds(i)
                step = (self.rng.random() - 0.5) * self.perturbation
                variables[i] = self.repair.repair(float(variables[i]) + step, lower, upper)
        return solution.copy(variables=variables)


@dataclass(frozen=True)
class PolynomialMutation:
    """Deb's bounded polynomial mutation."""

    probability: float
    distribution_index: float
    repair: RepairStrategy
    rng: RandomSource = field(repr=False)

    def __post_init__(self) -> None:
        _validate_probability(self.probability)
        _validate_non_negative("distribution_index", self.distribution_index)

    def execute(self, solution: DoubleSolution) -> DoubleSolution:
        variables = solution.variables.copy()
        for i in range(len(solution)):
            if self.rng.random() <= self.probability:
                lower, upper = solution.bounds(i)
                if lower == upper:
                    variables[i] = lower
                    continue
                u = self.rng.random()
                value = _polynomial_value(float(variables[i]), lower, upper, self.distribution_index, u)
                variables[i] = self.repair.repair(value, lower, upper)
        return solution.copy(variables=variables)


@dataclass(frozen=True)
class LinkedPolynomialMutation:
    """Polynomial mutation sharing one ``u`` across all mutated variables.

    Tying the step of every variable to the same draw keeps correlated
    variables moving in the same relative direction.
    """

    probability: float
    distribution_index: float
    repair: RepairStrategy
    rng: RandomSource = field(repr=False)

    def __post_init__(self) -> None:
        _validate_probability(self.probability)
        _validate_non_negative("distribution_index", self.distribution_index)

    def execute(self, solution: DoubleSolution) -> DoubleSolution:
        variables = solution.variables.copy()
        u = self.rng.random()
        for i in range(len(solution)):
            if self.rng.random() <= self.probability:
                lower, upper = solution.bounds(i)
                if lower == upper:
                    variables[i] = lower
                    continue
                value = _polynomial_value(float(variables[i]), lower, upper, self.distribution_index, u)
                variables[i] = self.repair.repair(value, lower, upper)
        return solution.copy(variables=variables)


@dataclass
class NonUniformMutation:
    """Michalewicz non-uniform mutation.

    The step size shrinks as ``current_iteration`` approaches
    ``max_iterations``; the enclosing loop advances it with
    :meth:`set_current_iteration`.
    """

    probability: float
    perturbation: float
    max_iterations: int
    repair: RepairStrategy
    rng: RandomSource = field(repr=False)
    current_iteration: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        _validate_probability(self.probability)
        _validate_non_negative("perturbation", self.perturbation)
        if int(self.max_iterations) != self.max_iterations or self.max_iterations < 1:
            raise ConfigError(f"max_iterations must be an integer >= 1, got {self.max_iterations}")

    def set_current_iteration(self, iteration: int) -> None:
        if iteration < 0:
            raise ValueError(f"iteration must be >= 0, got {iteration}")
        self.current_iteration = int(iteration)

    def _delta(self, y: float) -> float:
        fraction = min(self.current_iteration / self.max_iterations, 1.0)
        return y * (1.0 - self.rng.random() ** ((1.0 - fraction) ** self.perturbation))

    def execute(self, solution: DoubleSolution) -> DoubleSolution:
        variables = solution.variables.copy()
        for i in range(len(solution)):
            if self.rng.random() <= self.probability:
                lower, upper = solution.bounds(i)
                value = float(variables[i])
                if self.rng.random() <= 0.5:
                    step = self._delta(upper - value)
                else:
                    step = self._delta(lower - value)
                variables[i] = self.repair.repair(value + step, lower, upper)
        return solution.copy(variables=variables)


STRATEGY_REGISTRY: dict[str, type] = {
    "uniform": UniformMutation,
    "polynomial": PolynomialMutation,
    "linked_polynomial": LinkedPolynomialMutation,
    "non_uniform": NonUniformMutation,
}


def strategy_factory(
    name: str,
    probability: float,
    repair: RepairStrategy,
    rng: RandomSource,
    **params: Any,
) -> MutationStrategy:
    """Build a registered strategy by name, forwarding its tuning ``params``."""
    key = str(name).lower()
    if key not in STRATEGY_REGISTRY:
        raise ConfigError(f"unknown mutation strategy '{name}'")
    try:
        return STRATEGY_REGISTRY[key](probability=probability, repair=repair, rng=rng, **params)
    except TypeError as exc:
        raise ConfigError(f"invalid parameters for mutation strategy '{name}': {exc}") from exc
