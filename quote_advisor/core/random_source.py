"""
Random source used for premiums, risk scores and representative selection.
"""

import random
from typing import Protocol, Optional


class RandomSource(Protocol):
    """Anything that yields uniform floats in [0, 1)."""

    def random(self) -> float:
        ...


def random_index(source: RandomSource, size: int) -> int:
    """Uniform index in range(size)."""
    return int(source.random() * size)


def get_random_source(seed: Optional[int] = None) -> RandomSource:
    """Production random source; pass a seed for reproducible runs."""
    return random.Random(seed)
