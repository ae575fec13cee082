"""
Short ID generation strategies for the short link service.
Uses Strategy Pattern so tests can substitute deterministic generators.
"""

import math
import secrets
import string
from abc import ABC, abstractmethod

# 64 URL-safe symbols: nothing here needs percent-encoding in a path segment
ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + "-_"


def keyspace_size(length: int) -> int:
    """Number of distinct IDs of ``length`` characters."""
    return len(ALPHABET) ** length


def collision_probability(records: int, length: int) -> float:
    """
    Birthday-bound probability that ``records`` random IDs contain a collision.

    Uses the approximation ``1 - exp(-n(n-1) / 2N)``. At length 8 the key
    space is 64^8 ~= 2.8e14, so a million records collide with probability
    around 0.2%, and each individual collision is absorbed by the
    allocator's retry loop.
    """
    if records < 2:
        return 0.0
    n = float(records)
    return -math.expm1(-n * (n - 1) / (2.0 * keyspace_size(length)))


class ShortIDGenerator(ABC):
    """Abstract base class for short ID generators"""

    @abstractmethod
    def generate(self, length: int) -> str:
        """
        Generate a candidate short ID.

        Does not guarantee uniqueness; the allocator checks the store.

        Args:
            length: Number of characters

        Returns:
            A string of ``length`` characters from ``ALPHABET``
        """


class RandomShortIDGenerator(ShortIDGenerator):
    """
    Uniform random IDs from a CSPRNG.

    Pros: unpredictable, no coordination between servers
    Cons: collisions are possible, so every candidate costs a store lookup
    """

    def __init__(self, alphabet: str = ALPHABET):
        self.alphabet = alphabet

    def generate(self, length: int) -> str:
        if length < 1:
            raise ValueError(f"Short ID length must be positive, got {length}")
        return "".join(secrets.choice(self.alphabet) for _ in range(length))
