"""
Finite Field Arithmetic for R1CS Circuits.

Every constraint in a Rank-1 Constraint System is an equation over a prime
field Z_p. This module provides the field type used by the protoboard and
all gadgets built on top of it.

Key Concepts:
    - All arithmetic is done modulo a prime p
    - Addition: (a + b) mod p
    - Multiplication: (a * b) mod p
    - Subtraction: (a - b + p) mod p (to keep positive)
    - size_in_bits: number of bits needed to write any element
    - capacity: number of bits that always fit in an element without wrapping

Example:
    >>> field = PrimeField(97)
    >>> a = field.element(45)
    >>> b = field.element(67)
    >>> c = a + b  # (45 + 67) mod 97 = 15
    >>> print(c)
    15

For Circuit Context:
    - The default field is the BN254 scalar field (254-bit prime), the
      field used by most pairing-based SNARK backends
    - A knapsack hash over BN254 outputs one element per dimension, which
      unpacks to 254 digest bits
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union


# BN254 scalar field modulus
BN254_PRIME = 21888242871839275222246405745257275088548364400416034343698204186575808495617


@dataclass
class FieldElement:
    """
    An element of a prime field Z_p.

    All operations automatically reduce the result modulo p.

    Attributes:
        value: The integer value (always in range [0, p-1])
        field: Reference to the parent PrimeField
    """
    value: int
    field: 'PrimeField'

    def __post_init__(self):
        """Ensure value is reduced modulo p."""
        self.value = self.value % self.field.prime

    def __repr__(self) -> str:
        return f"FieldElement({self.value}, mod {self.field.prime})"

    def __str__(self) -> str:
        return str(self.value)

    def __int__(self) -> int:
        return self.value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FieldElement):
            return self.value == other.value and self.field.prime == other.field.prime
        if isinstance(other, int):
            return self.value == (other % self.field.prime)
        return False

    def __hash__(self) -> int:
        return hash((self.value, self.field.prime))

    # Arithmetic Operations

    def __add__(self, other: Union[FieldElement, int]) -> FieldElement:
        """Addition in the field: (a + b) mod p"""
        other_val = other.value if isinstance(other, FieldElement) else other
        return FieldElement((self.value + other_val) % self.field.prime, self.field)

    def __radd__(self, other: int) -> FieldElement:
        return self.__add__(other)

    def __sub__(self, other: Union[FieldElement, int]) -> FieldElement:
        """Subtraction in the field: (a - b + p) mod p"""
        other_val = other.value if isinstance(other, FieldElement) else other
        return FieldElement((self.value - other_val) % self.field.prime, self.field)

    def __rsub__(self, other: int) -> FieldElement:
        return FieldElement((other - self.value) % self.field.prime, self.field)

    def __mul__(self, other: Union[FieldElement, int]) -> FieldElement:
        """Multiplication in the field: (a * b) mod p"""
        other_val = other.value if isinstance(other, FieldElement) else other
        return FieldElement((self.value * other_val) % self.field.prime, self.field)

    def __rmul__(self, other: int) -> FieldElement:
        return self.__mul__(other)

    def __neg__(self) -> FieldElement:
        """Negation: -a = p - a"""
        return FieldElement((self.field.prime - self.value) % self.field.prime, self.field)

    def is_zero(self) -> bool:
        """Check if this element is zero."""
        return self.value == 0

    def is_one(self) -> bool:
        """Check if this element is one."""
        return self.value == 1


class PrimeField:
    """
    A prime field Z_p for modular arithmetic.

    Provides factory methods for field elements, raw-int arithmetic for
    inner loops, and the bit-size properties gadgets need to decide how
    many bits a packed element occupies.

    Attributes:
        prime: The prime modulus p

    Example:
        >>> field = PrimeField(97)
        >>> field.size_in_bits
        7
        >>> field.capacity
        6
    """

    SMALL_TEST_PRIME = 97
    BN254_PRIME = BN254_PRIME

    def __init__(self, prime: int):
        """
        Initialize a prime field.

        Args:
            prime: The prime modulus. Should be prime for correct behavior.
                   (We don't verify primality for performance reasons)
        """
        if prime < 2:
            raise ValueError("Prime must be at least 2")
        self.prime = prime

    def __repr__(self) -> str:
        return f"PrimeField({self.prime})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, PrimeField) and other.prime == self.prime

    def __hash__(self) -> int:
        return hash(self.prime)

    @property
    def size_in_bits(self) -> int:
        """Bits needed to represent any element of the field."""
        return (self.prime - 1).bit_length()

    @property
    def capacity(self) -> int:
        """Bits that can be packed into one element without wrap-around."""
        return self.size_in_bits - 1

    def element(self, value: int) -> FieldElement:
        """Create a field element from an integer."""
        return FieldElement(value % self.prime, self)

    def zero(self) -> FieldElement:
        """Return the additive identity (0)."""
        return FieldElement(0, self)

    def one(self) -> FieldElement:
        """Return the multiplicative identity (1)."""
        return FieldElement(1, self)

    # Direct arithmetic (without creating FieldElement objects)
    # Used by linear-combination evaluation in the protoboard

    def add(self, a: int, b: int) -> int:
        """Add two integers in the field."""
        return (a + b) % self.prime

    def sub(self, a: int, b: int) -> int:
        """Subtract two integers in the field."""
        return (a - b) % self.prime

    def mul(self, a: int, b: int) -> int:
        """Multiply two integers in the field."""
        return (a * b) % self.prime

    def neg(self, a: int) -> int:
        """Negate an integer in the field."""
        return (self.prime - a) % self.prime


def bn254_field() -> PrimeField:
    """The default circuit field."""
    return PrimeField(BN254_PRIME)
