"""
Common utilities for the zkgadgets library.

This module provides:
    - Finite field arithmetic (PrimeField, FieldElement)
    - Bit-vector helpers shared by digests, addresses and packing
"""

from .field import PrimeField, FieldElement, BN254_PRIME, bn254_field
from .bits import int_to_bits, bits_to_int, field_elements_to_bits, random_bits

__all__ = [
    "PrimeField",
    "FieldElement",
    "BN254_PRIME",
    "bn254_field",
    "int_to_bits",
    "bits_to_int",
    "field_elements_to_bits",
    "random_bits",
]
