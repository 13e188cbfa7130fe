"""Deterministic shuffling for Shuffle-mode channels.

The permutation depends only on the input list and a seed string:
- seed string -> 64-bit FNV-1a hash over its UTF-8 bytes
- hash -> SplitMix64 generator state
- generator -> Fisher-Yates from the last index down

Python's hash() is salted per process and the random module's shuffle
has changed between releases, so neither is used here.
"""

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

MASK_64 = (1 << 64) - 1

FNV_OFFSET_BASIS_64 = 0xCBF29CE484222325
FNV_PRIME_64 = 0x100000001B3

_SPLITMIX_GAMMA = 0x9E3779B97F4A7C15
_SPLITMIX_MUL_1 = 0xBF58476D1CE4E5B9
_SPLITMIX_MUL_2 = 0x94D049BB133111EB


def fnv1a_64(text: str) -> int:
    """64-bit FNV-1a hash of a string's UTF-8 bytes."""
    value = FNV_OFFSET_BASIS_64
    for byte in text.encode("utf-8"):
        value ^= byte
        value = (value * FNV_PRIME_64) & MASK_64
    return value


class SplitMix64:
    """SplitMix64 pseudo-random generator (Steele, Lea & Flood)."""

    def __init__(self, seed: int):
        self._state = seed & MASK_64

    def next(self) -> int:
        """Next 64-bit output."""
        self._state = (self._state + _SPLITMIX_GAMMA) & MASK_64
        z = self._state
        z = ((z ^ (z >> 30)) * _SPLITMIX_MUL_1) & MASK_64
        z = ((z ^ (z >> 27)) * _SPLITMIX_MUL_2) & MASK_64
        return z ^ (z >> 31)

    def below(self, bound: int) -> int:
        """Uniform integer in [0, bound), by rejection sampling."""
        if bound <= 0:
            raise ValueError("bound must be positive")
        # Largest multiple of bound that fits in 64 bits
        limit = (1 << 64) - ((1 << 64) % bound)
        while True:
            value = self.next()
            if value < limit:
                return value % bound


def cycle_seed(channel_id: str, cycle_number: int) -> str:
    """Seed for one cycle of a channel.

    Cycle 0 is seeded by the bare channel id; every other cycle appends
    its number, so cycles before the anchor get "-1", "-2" suffixes. The
    same cycle number always yields the same seed, no matter which query
    window reaches it.
    """
    if cycle_number == 0:
        return channel_id
    return f"{channel_id}{cycle_number}"


def shuffle_deterministic(items: Sequence[T], seed: str) -> list[T]:
    """Return a reproducible permutation of items for a seed.

    Args:
        items: Items to permute (left untouched)
        seed: Seed string

    Returns:
        New list with the permuted items
    """
    shuffled = list(items)
    rng = SplitMix64(fnv1a_64(seed))
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.below(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled
