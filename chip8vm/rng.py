"""Random byte sources for the CXNN instruction."""

from abc import ABC, abstractmethod
from itertools import cycle
from typing import Iterable

import jax
import jax.numpy as jnp


class RandomSource(ABC):
    """Produces uniformly distributed bytes."""

    @abstractmethod
    def next_byte(self) -> int:
        """Return a value in [0, 255]."""


class JaxRandomSource(RandomSource):
    """Byte source backed by a JAX PRNG key, split on every draw."""

    def __init__(self, seed: int = 0):
        self.rng = jax.random.PRNGKey(seed)

    def next_byte(self) -> int:
        self.rng, subkey = jax.random.split(self.rng)
        return int(jax.random.randint(subkey, shape=(), minval=0, maxval=256, dtype=jnp.int32))


class SequenceRandomSource(RandomSource):
    """Repeats a fixed sequence of bytes, for deterministic runs."""

    def __init__(self, values: Iterable[int]):
        values = [int(v) & 0xFF for v in values]
        if not values:
            raise ValueError("SequenceRandomSource needs at least one value")
        self._values = cycle(values)

    def next_byte(self) -> int:
        return next(self._values)
