"""
Seeded random number generator for map generation.

Every stage of the generator draws from one SeededRNG instance that is
passed in explicitly. The algorithm is fixed (32-bit string hash feeding a
32-bit linear congruential step) so a seed produces the same map on every
platform and Python version.
"""
from typing import List, Sequence, TypeVar, Union

T = TypeVar("T")

Seed = Union[str, int]

_MODULUS = 0x100000000  # 2^32
_MULTIPLIER = 1664525
_INCREMENT = 1013904223


def hash_seed(seed: Seed) -> int:
    """
    Hash a seed to a non-negative 32-bit integer.

    Uses the ``h = h * 31 + code_point`` string hash wrapped to a signed
    32-bit integer, then takes its absolute value.

    Args:
        seed: String or integer seed (integers hash via their decimal form)

    Returns:
        Hash value in [0, 2^31]
    """
    text = str(seed)
    value = 0
    for char in text:
        value = (value * 31 + ord(char)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= _MODULUS
    return abs(value)


class SeededRNG:
    """
    Deterministic pseudo-random stream.

    Not thread-safe: one instance belongs to one generation run.
    """

    def __init__(self, seed: Seed):
        self.seed = str(seed)
        self.state = hash_seed(seed)

    def next_float(self) -> float:
        """Return a float in [0, 1)."""
        self.state = (self.state * _MULTIPLIER + _INCREMENT) % _MODULUS
        return self.state / _MODULUS

    def next_int(self, bound: int) -> int:
        """Return an integer in [0, bound)."""
        if bound <= 0:
            raise ValueError(f"bound must be positive, got {bound}")
        return int(self.next_float() * bound)

    def next_range(self, low: int, high: int) -> int:
        """Return an integer in [low, high] (inclusive)."""
        if high < low:
            raise ValueError(f"empty range [{low}, {high}]")
        return low + self.next_int(high - low + 1)

    def next_bool(self) -> bool:
        return self.next_float() > 0.5

    def choice(self, items: Sequence[T]) -> T:
        """Pick one element uniformly."""
        if not items:
            raise IndexError("cannot choose from an empty sequence")
        return items[self.next_int(len(items))]

    def shuffle(self, items: Sequence[T]) -> List[T]:
        """Return a shuffled copy (Fisher-Yates)."""
        shuffled = list(items)
        for i in range(len(shuffled) - 1, 0, -1):
            j = self.next_int(i + 1)
            shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
        return shuffled

    def __repr__(self) -> str:
        return f"SeededRNG(seed={self.seed!r}, state={self.state})"
