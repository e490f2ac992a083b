"""
evomut: probability-weighted composite mutation for real-valued evolutionary search.

The high level entry points are re-exported here so callers can write
``from evomut import build_multi_mutation``.
"""

__version__ = "0.1.0"

from .config import ConfigError, MultiMutationConfig, load_config
from .mutation import (
    CompositeMutationOperator,
    DoubleSolution,
    ProbabilityPartition,
    build_multi_mutation,
    multi_mutation_from_config,
    rng_factory,
)

__all__ = [
    "__version__",
    "ConfigError",
    "MultiMutationConfig",
    "load_config",
    "CompositeMutationOperator",
    "DoubleSolution",
    "ProbabilityPartition",
    "build_multi_mutation",
    "multi_mutation_from_config",
    "rng_factory",
]
