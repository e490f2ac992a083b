"""Pydantic schemas for mutation operator configuration.

This module defines typed configuration for:
- the dispatch weights of the multi-mutation operator
- per-strategy tuning parameters
- the global mutation probability, repair strategy and seed

YAML files under ``configs/`` should validate against
:class:`MultiMutationConfig`.
"""

from __future__ import annotations

import math
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

__all__ = [
    "StrategyWeights",
    "UniformMutationConfig",
    "PolynomialMutationConfig",
    "LinkedPolynomialMutationConfig",
    "NonUniformMutationConfig",
    "MultiMutationConfig",
]


class StrategyWeights(BaseModel):
    """Raw, unnormalised dispatch weights.

    Attributes
    ----------
    uniform, polynomial, linked_polynomial, non_uniform : float
        Relative likelihood of each strategy. Zero disables a strategy; at
        least one weight must be positive.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    uniform: float = Field(default=1.0, ge=0)
    polynomial: float = Field(default=1.0, ge=0)
    linked_polynomial: float = Field(default=1.0, ge=0)
    non_uniform: float = Field(default=1.0, ge=0)

    @field_validator("uniform", "polynomial", "linked_polynomial", "non_uniform")
    @classmethod
    def validate_finite(cls, v: float) -> float:
        """Reject infinite weights."""
        if not math.isfinite(v):
            raise ValueError("weights must be finite")
        return v

    @model_validator(mode="after")
    def validate_positive_sum(self) -> "StrategyWeights":
        """Ensure at least one strategy stays reachable."""
        if self.total() <= 0:
            raise ValueError("at least one strategy weight must be positive")
        return self

    def total(self) -> float:
        return self.uniform + self.polynomial + self.linked_polynomial + self.non_uniform

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.uniform, self.polynomial, self.linked_polynomial, self.non_uniform)


class UniformMutationConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    perturbation: float = Field(default=0.5, ge=0, description="Width of the uniform step")


class PolynomialMutationConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    distribution_index: float = Field(default=20.0, ge=0)


class LinkedPolynomialMutationConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    distribution_index: float = Field(default=20.0, ge=0)


class NonUniformMutationConfig(BaseModel):
    """Non-uniform mutation parameters.

    Attributes
    ----------
    perturbation : float
        Shape exponent ``b`` controlling how fast the step shrinks.
    max_iterations : int
        Iteration count at which the step collapses to zero.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    perturbation: float = Field(default=0.5, ge=0)
    max_iterations: int = Field(default=250, gt=0)


class MultiMutationConfig(BaseModel):
    """Complete configuration of the four-strategy multi-mutation operator.

    Attributes
    ----------
    probability : float
        Global per-variable mutation probability forwarded to every strategy.
    repair : str
        Name of the repair strategy for out-of-bounds values.
    seed : int, optional
        Seed for the random source; ``None`` falls back to
        ``Settings.random_seed``.
    weights : StrategyWeights
        Raw dispatch weights, normalised at operator construction.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    probability: float = Field(ge=0, le=1, description="Global mutation probability")
    repair: Literal["bounds", "random", "opposite_bound"] = "bounds"
    seed: int | None = Field(default=None, ge=0)
    weights: StrategyWeights = Field(default_factory=StrategyWeights)
    uniform: UniformMutationConfig = Field(default_factory=UniformMutationConfig)
    polynomial: PolynomialMutationConfig = Field(default_factory=PolynomialMutationConfig)
    linked_polynomial: LinkedPolynomialMutationConfig = Field(
        default_factory=LinkedPolynomialMutationConfig
    )
    non_uniform: NonUniformMutationConfig = Field(default_factory=NonUniformMutationConfig)
