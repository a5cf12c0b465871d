"""
Random source for card drafts, hands and generated secrets.

The engine never calls the `random` module directly: a RandomSource is
injected into each match so tests can script outcomes.
"""

from __future__ import annotations
import random
from typing import Protocol, Sequence, TypeVar

T = TypeVar("T")

DIGITS = "0123456789"


class RandomSource(Protocol):
    """Anything that can sample without replacement and shuffle in place."""

    def sample(self, population: Sequence[T], k: int) -> list[T]:
        ...

    def shuffle(self, items: list[T]) -> None:
        ...


class SeededRandom:
    """RandomSource backed by a private random.Random instance."""

    def __init__(self, seed: int | None = None):
        self.seed = seed
        self._random = random.Random(seed)

    def sample(self, population: Sequence[T], k: int) -> list[T]:
        return self._random.sample(list(population), k)

    def shuffle(self, items: list[T]) -> None:
        self._random.shuffle(items)


def generate_secret(digit_count: int, rng: RandomSource) -> str:
    """Random sequence of `digit_count` distinct digits."""
    return "".join(rng.sample(DIGITS, digit_count))
