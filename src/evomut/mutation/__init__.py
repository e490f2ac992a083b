"""Public API for the mutation operators."""

from .composite import (
    MULTI_MUTATION_STRATEGIES,
    CompositeMutationOperator,
    build_multi_mutation,
    multi_mutation_from_config,
)
from .partition import ProbabilityPartition
from .random_source import RandomSource, ThreadLocalRandomSource, rng_factory
from .repair import (
    BoundRepair,
    OppositeBoundRepair,
    RandomRepair,
    RepairStrategy,
    repair_factory,
)
from .solution import DoubleSolution, random_solution
from .strategies import (
    STRATEGY_REGISTRY,
    LinkedPolynomialMutation,
    MutationStrategy,
    NonUniformMutation,
    PolynomialMutation,
    UniformMutation,
    strategy_factory,
)

__all__ = [
    "CompositeMutationOperator",
    "MULTI_MUTATION_STRATEGIES",
    "build_multi_mutation",
    "multi_mutation_from_config",
    "ProbabilityPartition",
    "RandomSource",
    "ThreadLocalRandomSource",
    "rng_factory",
    "BoundRepair",
    "OppositeBoundRepair",
    "RandomRepair",
    "RepairStrategy",
    "repair_factory",
    "DoubleSolution",
    "random_solution",
    "STRATEGY_REGISTRY",
    "LinkedPolynomialMutation",
    "MutationStrategy",
    "NonUniformMutation",
    "PolynomialMutation",
    "UniformMutation",
    "strategy_factory",
]
