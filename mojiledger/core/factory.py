"""
Moji factory: one generator draw -> one moji and its address.
"""

from typing import Tuple

from .addressing import moji_address
from .prng import SeededGenerator
from .records import Moji, encode_dna


def make_moji(identity: bytes, generator: SeededGenerator) -> Tuple[Moji, str, SeededGenerator]:
    """
    Build the next moji for identity.

    Draws exactly one value from generator. Pure: no store access.

    Returns:
        (moji, moji address, advanced generator)
    """
    value, generator = generator.next()
    moji = Moji(dna=encode_dna(value), owner=identity.hex())
    return moji, moji_address(identity, moji.dna), generator
