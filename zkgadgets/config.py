"""
Circuit Configuration.

A memory-load circuit's shape is fixed by three numbers: the tree depth,
the field, and the knapsack dimension (which together set the digest
width). CircuitConfig bundles them, validates them, and builds the shared
hash parameters for that shape.

Example:
    >>> config = CircuitConfig(name="small", tree_depth=4)
    >>> config.digest_len
    254
    >>> crh = config.make_crh()
"""

from __future__ import annotations
from dataclasses import dataclass

from .common.field import BN254_PRIME, PrimeField
from .gadgets.knapsack import KnapsackCRH
from .gadgets.memory_load import MemoryLoadGadget


@dataclass
class CircuitConfig:
    """
    Shape of a memory-load circuit.

    Attributes:
        name: Configuration name for identification
        tree_depth: Merkle tree depth (number of address bits)
        field_prime: Circuit field modulus
        knapsack_dimension: Field elements per knapsack digest
    """

    name: str = "default"
    tree_depth: int = 16
    field_prime: int = BN254_PRIME
    knapsack_dimension: int = 1

    def __post_init__(self):
        """Validate configuration."""
        if self.tree_depth < 1:
            raise ValueError("tree_depth must be at least 1")
        if self.knapsack_dimension < 1:
            raise ValueError("knapsack_dimension must be at least 1")
        if self.field_prime < 2:
            raise ValueError("field_prime must be at least 2")

    @property
    def field(self) -> PrimeField:
        return PrimeField(self.field_prime)

    @property
    def digest_len(self) -> int:
        """Bits per digest."""
        return self.knapsack_dimension * self.field.size_in_bits

    @property
    def block_len(self) -> int:
        """Bits per hash input (two digests)."""
        return 2 * self.digest_len

    def make_crh(self) -> KnapsackCRH:
        """Knapsack parameters with randomness sampled for this shape."""
        crh = KnapsackCRH(self.field, self.knapsack_dimension)
        crh.sample_randomness(self.block_len)
        return crh

    def expected_constraints(self) -> int:
        return MemoryLoadGadget.expected_constraints(
            self.tree_depth, KnapsackCRH(self.field, self.knapsack_dimension))

    def summary(self) -> str:
        """Return configuration summary string."""
        return (
            f"CircuitConfig '{self.name}':\n"
            f"  Tree depth: {self.tree_depth} ({1 << self.tree_depth} leaves)\n"
            f"  Field: {self.field.size_in_bits}-bit prime\n"
            f"  Knapsack dimension: {self.knapsack_dimension}\n"
            f"  Digest: {self.digest_len} bits, block: {self.block_len} bits\n"
            f"  Expected constraints: {self.expected_constraints():,}"
        )
