from __future__ import annotations

from typing import Iterable

import numpy as np
import pytest

from evomut.mutation.solution import DoubleSolution


class ScriptedRandom:
    """Random source replaying a fixed list of draws, cycling when exhausted."""

    def __init__(self, draws: Iterable[float]) -> None:
        self._draws = list(draws)
        self.calls = 0

    def random(self) -> float:
        value = self._draws[self.calls % len(self._draws)]
        self.calls += 1
        return value


class CountingRandom:
    """Wrap a numpy generator and count how many draws were taken."""

    def __init__(self, seed: int = 0) -> None:
        self._rng = np.random.default_rng(seed)
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return float(self._rng.random())


class RecordingStrategy:
    """Strategy tagging its output so tests can tell which child ran."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.seen: list[DoubleSolution] = []

    def execute(self, solution: DoubleSolution) -> DoubleSolution:
        self.seen.append(solution)
        return solution.copy(attributes={**solution.attributes, "mutated_by": self.name})


@pytest.fixture
def solution() -> DoubleSolution:
    return DoubleSolution(
        np.array([0.5, -1.0, 2.5, 0.0]),
        np.array([0.0, -2.0, 0.0, -1.0]),
        np.array([1.0, 2.0, 5.0, 1.0]),
    )


@pytest.fixture
def recorders() -> list[RecordingStrategy]:
    return [RecordingStrategy(f"s{i}") for i in range(4)]


@pytest.fixture
def scripted_random() -> type[ScriptedRandom]:
    return ScriptedRandom


@pytest.fixture
def counting_random() -> CountingRandom:
    return CountingRandom(seed=7)


@pytest.fixture
def recording_strategy() -> type[RecordingStrategy]:
    return RecordingStrategy
