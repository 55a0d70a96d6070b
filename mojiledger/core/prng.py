"""
Signature-seeded pseudorandom generator.

Counter-based SHA-512 construction:

    block_n = SHA512(seed || uint64_be(n))
    value_n = int.from_bytes(block_n[:DNA_BYTES], "big")

The n-th value depends only on the seed and n, so any conforming
implementation reproduces the stream byte for byte. The generator is
immutable: next() returns the value together with the advanced generator.
"""

import hashlib
from dataclasses import dataclass
from typing import List, Tuple

DNA_BYTES = 18
COUNTER_BYTES = 8


@dataclass(frozen=True)
class SeededGenerator:
    """
    Deterministic value stream keyed by transaction signature bytes.

    Fields:
        seed: Raw signature bytes
        counter: Number of values already drawn
    """
    seed: bytes
    counter: int = 0

    def block(self) -> bytes:
        """Digest block for the current counter, without advancing."""
        return hashlib.sha512(self.seed + self.counter.to_bytes(COUNTER_BYTES, "big")).digest()

    def next(self) -> Tuple[int, "SeededGenerator"]:
        """
        Draw one value.

        Returns:
            (value, generator advanced by one)
        """
        value = int.from_bytes(self.block()[:DNA_BYTES], "big")
        return value, SeededGenerator(self.seed, self.counter + 1)

    def draw(self, n: int) -> Tuple[List[int], "SeededGenerator"]:
        """Draw n values in order."""
        values = []
        gen = self
        for _ in range(n):
            value, gen = gen.next()
            values.append(value)
        return values, gen


def new_generator(seed: bytes) -> SeededGenerator:
    """
    Create a generator for the given seed.

    Raises:
        ValueError: If seed is empty or not bytes
    """
    if not isinstance(seed, (bytes, bytearray)) or not seed:
        raise ValueError("Generator seed must be non-empty bytes")
    return SeededGenerator(bytes(seed))
