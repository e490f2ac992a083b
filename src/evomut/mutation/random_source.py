"""Random sources injected into the mutation operators.

Anything exposing ``random() -> float`` with draws in ``[0, 1)`` qualifies,
which includes :class:`numpy.random.Generator`. Operators never reach for a
process-wide generator; the caller decides which source a run uses.
"""

from __future__ import annotations

import logging
import threading
from typing import Protocol, runtime_checkable

import numpy as np

__all__ = [
    "RandomSource",
    "ThreadLocalRandomSource",
    "rng_factory",
]

logger = logging.getLogger(__name__)


@runtime_checkable
class RandomSource(Protocol):
    def random(self) -> float:
        """Return a uniform draw in ``[0, 1)``."""
        ...


def rng_factory(seed: int | np.random.SeedSequence | None = None) -> np.random.Generator:
    """Return a PCG64 ``Generator``; ``None`` seeds from OS entropy."""
    return np.random.default_rng(seed)


class ThreadLocalRandomSource:
    """Random source handing every thread its own generator.

    Generators are spawned from a single :class:`numpy.random.SeedSequence`,
    so the *n*-th thread to draw always receives the same stream for a given
    seed. Draws from different threads are statistically independent.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._seed_sequence = np.random.SeedSequence(seed)
        self._spawn_lock = threading.Lock()
        self._local = threading.local()
        self._spawned = 0

    @property
    def spawned(self) -> int:
        """Number of per-thread generators created so far."""
        return self._spawned

    def _generator(self) -> np.random.Generator:
        generator = getattr(self._local, "generator", None)
        if generator is None:
            with self._spawn_lock:
                (child,) = self._seed_sequence.spawn(1)
                self._spawned += 1
            generator = np.random.default_rng(child)
            self._local.generator = generator
            logger.debug("Spawned generator for thread %s", threading.current_thread().name)
        return generator

    def random(self) -> float:
        return float(self._generator().random())
