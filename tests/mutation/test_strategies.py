from __future__ import annotations

import numpy as np
import pytest

from evomut.config.loader import ConfigError
from evomut.mutation import strategies
from evomut.mutation.repair import BoundRepair
from evomut.mutation.solution import DoubleSolution


def _all_strategies(rng, probability=1.0):
    repair = BoundRepair()
    return [
        strategies.UniformMutation(probability, 0.8, repair, rng),
        strategies.PolynomialMutation(probability, 20.0, repair, rng),
        strategies.LinkedPolynomialMutation(probability, 20.0, repair, rng),
        strategies.NonUniformMutation(probability, 0.5, 50, repair, rng),
    ]


def test_strategies_respect_bounds_and_keep_input(solution) -> None:
    rng = np.random.default_rng(21)
    original = solution.variables.copy()
    for strategy in _all_strategies(rng):
        for _ in range(50):
            mutated = strategy.execute(solution)
            assert mutated is not solution
            assert mutated.is_within_bounds()
            np.testing.assert_array_equal(mutated.lower_bounds, solution.lower_bounds)
    np.testing.assert_array_equal(solution.variables, original)


def test_zero_probability_leaves_variables_untouched(solution) -> None:
    rng = np.random.default_rng(5)
    for strategy in _all_strategies(rng, probability=0.0):
        np.testing.assert_array_equal(strategy.execute(solution).variables, solution.variables)


def test_uniform_step_follows_draw(scripted_random) -> None:
    single = DoubleSolution([0.5], [0.0], [1.0])
    rng = scripted_random([0.1, 0.75])
    strategy = strategies.UniformMutation(0.5, 0.4, BoundRepair(), rng)
    assert strategy.execute(single).variables[0] == pytest.approx(0.6)
    assert rng.calls == 2


def test_uniform_step_is_bounded_by_half_perturbation() -> None:
    wide = DoubleSolution(np.zeros(20), np.full(20, -100.0), np.full(20, 100.0))
    strategy = strategies.UniformMutation(1.0, 0.6, BoundRepair(), np.random.default_rng(2))
    mutated = strategy.execute(wide)
    assert np.all(np.abs(mutated.variables) <= 0.3 + 1e-12)


def test_polynomial_midpoint_draw_is_neutral(scripted_random) -> None:
    single = DoubleSolution([0.3], [0.0], [1.0])
    strategy = strategies.PolynomialMutation(1.0, 20.0, BoundRepair(), scripted_random([0.0, 0.5]))
    assert strategy.execute(single).variables[0] == pytest.approx(0.3)


def test_polynomial_direction_follows_draw(scripted_random) -> None:
    single = DoubleSolution([0.5], [0.0], [1.0])
    down = strategies.PolynomialMutation(1.0, 5.0, BoundRepair(), scripted_random([0.0, 0.1]))
    up = strategies.PolynomialMutation(1.0, 5.0, BoundRepair(), scripted_random([0.0, 0.9]))
    assert down.execute(single).variables[0] < 0.5
    assert up.execute(single).variables[0] > 0.5


def test_polynomial_pins_fixed_variables() -> None:
    fixed = DoubleSolution([2.0, 0.5], [2.0, 0.0], [2.0, 1.0])
    strategy = strategies.PolynomialMutation(1.0, 20.0, BoundRepair(), np.random.default_rng(0))
    assert strategy.execute(fixed).variables[0] == 2.0


def test_linked_polynomial_shares_one_draw() -> None:
    twins = DoubleSolution(np.full(6, 0.4), np.zeros(6), np.ones(6))
    strategy = strategies.LinkedPolynomialMutation(1.0, 10.0, BoundRepair(), np.random.default_rng(17))
    mutated = strategy.execute(twins)
    assert np.allclose(mutated.variables, mutated.variables[0])
    assert not np.isclose(mutated.variables[0], 0.4)


def test_non_uniform_step_vanishes_at_last_iteration(solution) -> None:
    strategy = strategies.NonUniformMutation(1.0, 2.0, 10, BoundRepair(), np.random.default_rng(4))
    strategy.set_current_iteration(10)
    np.testing.assert_allclose(strategy.execute(solution).variables, solution.variables)


def test_non_uniform_iteration_must_be_non_negative() -> None:
    strategy = strategies.NonUniformMutation(0.1, 0.5, 10, BoundRepair(), np.random.default_rng(4))
    with pytest.raises(ValueError):
        strategy.set_current_iteration(-1)
    strategy.set_current_iteration(3)
    assert strategy.current_iteration == 3


@pytest.mark.parametrize(
    "build",
    [
        lambda rng: strategies.UniformMutation(1.5, 0.5, BoundRepair(), rng),
        lambda rng: strategies.UniformMutation(0.1, -0.5, BoundRepair(), rng),
        lambda rng: strategies.PolynomialMutation(0.1, -1.0, BoundRepair(), rng),
        lambda rng: strategies.LinkedPolynomialMutation(-0.1, 20.0, BoundRepair(), rng),
        lambda rng: strategies.NonUniformMutation(0.1, 0.5, 0, BoundRepair(), rng),
        lambda rng: strategies.NonUniformMutation(0.1, float("nan"), 10, BoundRepair(), rng),
    ],
)
def test_invalid_parameters_raise_config_error(build) -> None:
    with pytest.raises(ConfigError):
        build(np.random.default_rng(0))


def test_strategy_factory_uses_registry() -> None:
    rng = np.random.default_rng(0)
    built = strategies.strategy_factory("Polynomial", 0.2, BoundRepair(), rng, distribution_index=15.0)
    assert isinstance(built, strategies.PolynomialMutation)
    assert isinstance(built, strategies.MutationStrategy)
    assert built.distribution_index == 15.0

    with pytest.raises(ConfigError, match="unknown mutation strategy"):
        strategies.strategy_factory("gaussian", 0.2, BoundRepair(), rng)
    with pytest.raises(ConfigError, match="invalid parameters"):
        strategies.strategy_factory("uniform", 0.2, BoundRepair(), rng, sigma=1.0)
