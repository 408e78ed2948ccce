"""
Bit-vector helpers.

Digests, addresses and packed field elements all travel through the
circuit as lists of 0/1 ints. Bit order is little-endian everywhere:
bits[0] is the least significant bit.
"""

from __future__ import annotations
from typing import List, Sequence
import random


def int_to_bits(value: int, length: int) -> List[int]:
    """
    Little-endian bit decomposition of a non-negative integer.

    Raises:
        ValueError: If value is negative or does not fit in length bits
    """
    if value < 0:
        raise ValueError(f"Cannot decompose negative value {value}")
    if value.bit_length() > length:
        raise ValueError(f"Value needs {value.bit_length()} bits, only {length} available")
    return [(value >> i) & 1 for i in range(length)]


def bits_to_int(bits: Sequence[int]) -> int:
    """Inverse of int_to_bits."""
    result = 0
    for i, bit in enumerate(bits):
        if bit not in (0, 1):
            raise ValueError(f"Not a bit at position {i}: {bit}")
        result |= bit << i
    return result


def field_elements_to_bits(elements: Sequence[int], element_bits: int) -> List[int]:
    """Concatenate the fixed-width bit decompositions of several elements."""
    bits: List[int] = []
    for element in elements:
        bits.extend(int_to_bits(int(element), element_bits))
    return bits


def random_bits(length: int, rng: random.Random) -> List[int]:
    """Uniform random bit vector drawn from the given generator."""
    return [rng.getrandbits(1) for _ in range(length)]
