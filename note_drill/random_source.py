"""Deterministic pseudo-random utilities for reproducible practice drills.

The generator is a Mulberry32-style avalanche mix over a 32-bit state, so a
drill seeded with the same integer always produces the same prompts.
"""

import time
from typing import Callable, List, Optional, Sequence, TypeVar

from .errors import EmptySequence, InvalidArgument
from .logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

MASK_32 = 0xFFFFFFFF
GOLDEN_GAMMA = 0x6D2B79F5
TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    return (a * b) & MASK_32


class SeededRandom:
    """Seedable random source producing floats, bounded ints, picks and shuffles."""

    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = int(time.time() * 1000)
        self.seed = seed & MASK_32
        self._state = self.seed
        logger.debug("SeededRandom created with seed %d", self.seed)

    def next_float(self) -> float:
        """Return the next float in [0, 1)."""
        self._state = (self._state + GOLDEN_GAMMA) & MASK_32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & MASK_32
        return ((t ^ (t >> 14)) & MASK_32) / TWO_POW_32

    def next_int(self, bound: int) -> int:
        """Return the next integer in [0, bound).

        Raises:
            InvalidArgument: If bound is not positive
        """
        if bound <= 0:
            raise InvalidArgument(f"bound must be greater than 0, got {bound}")
        return int(self.next_float() * bound)

    def pick(self, values: Sequence[T]) -> T:
        """Pick one element uniformly.

        Raises:
            EmptySequence: If values is empty
        """
        if len(values) == 0:
            raise EmptySequence("Cannot pick from an empty sequence")
        return values[self.next_int(len(values))]

    def shuffle(self, values: Sequence[T]) -> List[T]:
        """Return a Fisher-Yates shuffled copy; the input is left untouched."""
        result = list(values)
        for i in range(len(result) - 1, 0, -1):
            j = self.next_int(i + 1)
            result[i], result[j] = result[j], result[i]
        return result

    def pick_excluding(
        self,
        values: Sequence[T],
        excluded: Sequence[T],
        equality: Callable[[T, T], bool],
    ) -> T:
        return pick_excluding(values, excluded, equality, self)


def pick_excluding(
    values: Sequence[T],
    excluded: Sequence[T],
    equality: Callable[[T, T], bool],
    rng: SeededRandom,
) -> T:
    """Pick an element not equal to any excluded one.

    When the exclusions cover the whole pool the unfiltered pool is used
    instead, so a non-empty pool always yields an element.
    """
    filtered = [
        candidate
        for candidate in values
        if not any(equality(value, candidate) for value in excluded)
    ]
    if not filtered:
        if len(values) > 0:
            logger.debug(
                "Exclusion of %d items emptied a pool of %d, picking from full pool",
                len(excluded),
                len(values),
            )
        return rng.pick(values)
    return rng.pick(filtered)
