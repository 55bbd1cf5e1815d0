"""
RNG - Injectable Random Source
==============================

Every random draw the engine makes (sequence length, gap count, start value,
gap positions, families, pool shuffles) goes through a RandomSource, so a
seed or a scripted subclass makes a whole session reproducible.
"""

from __future__ import annotations

import random
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")


class RandomSource:
    """
    Thin wrapper around random.Random exposing only the draws the game uses.

    Tests can subclass it and override individual draws to script a round.
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize random source.

        Args:
            seed: Random seed for reproducibility. Random if None.
        """
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def seed(self) -> Optional[int]:
        """Seed the source was last reset with."""
        return self._seed

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in [low, high], both inclusive."""
        return self._rng.randint(low, high)

    def choice(self, options: Sequence[T]) -> T:
        """Uniform choice from a non-empty sequence."""
        return self._rng.choice(options)

    def shuffled(self, items: Sequence[T]) -> List[T]:
        """Return a shuffled copy of items."""
        result = list(items)
        self._rng.shuffle(result)
        return result

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the source with optional new seed.

        Args:
            seed: New random seed. Keeps current if None.
        """
        if seed is not None:
            self._seed = seed
        self._rng = random.Random(self._seed)

    def get_state(self) -> object:
        """Opaque state for checkpointing."""
        return self._rng.getstate()

    def set_state(self, state: object) -> None:
        """Restore a state returned by get_state()."""
        self._rng.setstate(state)
