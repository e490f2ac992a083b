"""Composite mutation operator dispatching to one strategy per call.

The operator owns a :class:`ProbabilityPartition` and an ordered list of
strategies paired with its segments. Each call to :meth:`execute` consumes a
single draw from the random source and runs exactly one strategy.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from ..config.loader import ConfigError
from ..config.schemas import MultiMutationConfig
from ..config.settings import get_settings
from .partition import ProbabilityPartition
from .random_source import RandomSource, rng_factory
from .repair import RepairStrategy, repair_factory
from .solution import DoubleSolution
from .strategies import MutationStrategy, strategy_factory

__all__ = [
    "CompositeMutationOperator",
    "MULTI_MUTATION_STRATEGIES",
    "build_multi_mutation",
    "multi_mutation_from_config",
]

logger = logging.getLogger(__name__)

MULTI_MUTATION_STRATEGIES: tuple[str, ...] = (
    "uniform",
    "polynomial",
    "linked_polynomial",
    "non_uniform",
)


class CompositeMutationOperator:
    """Pick one registered strategy per call with probability proportional to its weight.

    Parameters
    ----------
    strategies:
        Ordered child strategies; strategy ``i`` owns segment ``i``.
    weights:
        Raw non-negative weights, one per strategy.
    rng:
        Random source for the dispatch draw.
    mutation_probability:
        Global mutation probability the children were built with. Exposed for
        reporting, never interpreted here.
    names:
        Optional labels for the strategies; defaults to ``"strategy_<i>"``.

    Raises
    ------
    ConfigError
        On mismatched lengths, duplicated names, an invalid probability or
        degenerate weights.
    """

    def __init__(
        self,
        strategies: Sequence[MutationStrategy],
        weights: Sequence[float],
        rng: RandomSource,
        *,
        mutation_probability: float,
        names: Sequence[str] | None = None,
    ) -> None:
        if not strategies:
            raise ConfigError("at least one mutation strategy is required")
        if len(strategies) != len(weights):
            raise ConfigError(
                f"got {len(strategies)} strategies but {len(weights)} weights"
            )
        if not 0.0 <= mutation_probability <= 1.0:
            raise ConfigError(
                f"mutation probability must be in [0, 1], got {mutation_probability}"
            )
        names = tuple(names) if names is not None else tuple(f"strategy_{i}" for i in range(len(strategies)))
        if len(names) != len(strategies):
            raise ConfigError("names must match the number of strategies")
        if len(set(names)) != len(names):
            raise ConfigError(f"strategy names must be unique, got {list(names)}")

        self._strategies = tuple(strategies)
        self._names = names
        self._partition = ProbabilityPartition(weights)
        self._rng = rng
        self._mutation_probability = float(mutation_probability)
        logger.info(
            "Composite mutation ready | probability=%s, %s",
            self._mutation_probability,
            ", ".join(f"{name}={p:.4f}" for name, p in self.probabilities.items()),
        )

    def __repr__(self) -> str:
        return f"CompositeMutationOperator(names={list(self._names)}, partition={self._partition!r})"

    @property
    def mutation_probability(self) -> float:
        return self._mutation_probability

    @property
    def partition(self) -> ProbabilityPartition:
        return self._partition

    @property
    def strategies(self) -> tuple[MutationStrategy, ...]:
        return self._strategies

    @property
    def names(self) -> tuple[str, ...]:
        return self._names

    @property
    def probabilities(self) -> dict[str, float]:
        """Normalised selection probability of every strategy, by name."""
        return dict(zip(self._names, self._partition.probabilities))

    def probability_of(self, name: str) -> float:
        try:
            index = self._names.index(name)
        except ValueError:
            raise KeyError(f"unknown strategy '{name}'") from None
        return self._partition.probabilities[index]

    def strategy(self, name: str) -> MutationStrategy:
        try:
            return self._strategies[self._names.index(name)]
        except ValueError:
            raise KeyError(f"unknown strategy '{name}'") from None

    def execute(self, solution: DoubleSolution) -> DoubleSolution:
        if solution is None:
            raise ValueError("solution must not be None")
        r = self._rng.random()
        index = self._partition.segment_for(r)
        logger.debug(
            "Dispatching draw %.6f to %s",
            r,
            self._names[index],
            extra={"draw": r, "strategy": self._names[index]},
        )
        return self._strategies[index].execute(solution)

    def to_dict(self) -> dict[str, Any]:
        return {
            "mutation_probability": self._mutation_probability,
            "strategies": list(self._names),
            "weights": list(self._partition.weights),
            "probabilities": self.probabilities,
        }


def build_multi_mutation(
    probability: float,
    repair: RepairStrategy,
    rng: RandomSource,
    *,
    p_uniform: float,
    p_polynomial: float,
    p_linked_polynomial: float,
    p_non_uniform: float,
    perturbation_uniform: float,
    distribution_index_polynomial: float,
    distribution_index_linked_polynomial: float,
    perturbation_non_uniform: float,
    max_iterations_non_uniform: int,
) -> CompositeMutationOperator:
    """Wire the uniform, polynomial, linked polynomial and non-uniform strategies.

    ``probability`` and ``repair`` are forwarded unchanged to every child;
    ``rng`` is shared by the dispatch draw and the children.
    """
    params: Mapping[str, Mapping[str, Any]] = {
        "uniform": {"perturbation": perturbation_uniform},
        "polynomial": {"distribution_index": distribution_index_polynomial},
        "linked_polynomial": {"distribution_index": distribution_index_linked_polynomial},
        "non_uniform": {
            "perturbation": perturbation_non_uniform,
            "max_iterations": max_iterations_non_uniform,
        },
    }
    strategies = [
        strategy_factory(name, probability, repair, rng, **params[name])
        for name in MULTI_MUTATION_STRATEGIES
    ]
    weights = (p_uniform, p_polynomial, p_linked_polynomial, p_non_uniform)
    return CompositeMutationOperator(
        strategies,
        weights,
        rng,
        mutation_probability=probability,
        names=MULTI_MUTATION_STRATEGIES,
    )


def multi_mutation_from_config(
    config: MultiMutationConfig, rng: RandomSource | None = None
) -> CompositeMutationOperator:
    """Build the four-strategy operator from a validated configuration.

    When ``rng`` is ``None`` a generator is created from ``config.seed``, or
    from ``Settings.random_seed`` when the configuration leaves it unset.
    """
    if rng is None:
        seed = config.seed if config.seed is not None else get_settings().random_seed
        rng = rng_factory(seed)
    return build_multi_mutation(
        config.probability,
        repair_factory(config.repair, rng),
        rng,
        p_uniform=config.weights.uniform,
        p_polynomial=config.weights.polynomial,
        p_linked_polynomial=config.weights.linked_polynomial,
        p_non_uniform=config.weights.non_uniform,
        perturbation_uniform=config.uniform.perturbation,
        distribution_index_polynomial=config.polynomial.distribution_index,
        distribution_index_linked_polynomial=config.linked_polynomial.distribution_index,
        perturbation_non_uniform=config.non_uniform.perturbation,
        max_iterations_non_uniform=config.non_uniform.max_iterations,
    )
