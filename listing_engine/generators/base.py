"""Shared plumbing for mock data generators."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Generic, Iterator, Sequence, TypeVar

from faker import Faker

T = TypeVar("T")
C = TypeVar("C")


class BaseGenerator(ABC, Generic[T]):
    """Seeded Faker plus a private ``random.Random``.

    Two generators built with the same seed produce the same entities,
    independent of the global ``random`` state.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    locale : str
        Faker locale (default ``en_US``).
    """

    def __init__(
        self,
        seed: int | None = None,
        locale: str = "en_US",
    ) -> None:
        self.fake = Faker(locale)
        self.random = random.Random(seed)
        if seed is not None:
            self.fake.seed_instance(seed)

    @abstractmethod
    def generate(self, entity_id: int) -> T:
        """Generate one entity with ``entity_id``."""

    def generate_batch(self, count: int, start_id: int = 1) -> Iterator[T]:
        """Generate ``count`` entities with consecutive ids.

        Parameters
        ----------
        count : int
            Number of entities to generate.
        start_id : int
            Id of the first entity.

        Yields
        ------
        T
            Generated entities.
        """
        for offset in range(count):
            yield self.generate(start_id + offset)

    def weighted_choice(self, choices: Sequence[C], weights: Sequence[float]) -> C:
        return self.random.choices(choices, weights=weights, k=1)[0]

    def stepped_amount(self, low: int, high: int, step: int) -> int:
        """Random amount in ``[low, high)`` rounded to ``step``."""
        return self.random.randrange(low, high, step)
