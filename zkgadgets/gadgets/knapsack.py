"""
Knapsack Collision-Resistant Hash and its Gadgets.

The knapsack (subset-sum) hash is the cheapest collision-resistant hash to
express in R1CS: its output is a linear function of the input bits.

    y_i = sum_j  a[i*L + j] * x_j   (mod p),   i = 0 .. dimension-1

where x is the L-bit input and a is a list of public random field
elements. Collision resistance rests on the hardness of subset sum over
the field. Each y_i is then unpacked to size_in_bits little-endian bits,
and the concatenation is the digest.

Key Properties:
    - Deterministic: the coefficients are derived from SHA-512, so every
      process sees the same public parameters
    - Shared: one KnapsackCRH object is passed to every hash gadget of a
      circuit; sampling only ever extends its coefficient list
    - Prefix-stable: coefficient k does not depend on the input width, so
      sampling for a wider input keeps all narrower hashes unchanged

Constraint Cost (bit output, one call):
    - dimension constraints for the linear combinations
    - dimension packing constraints
    - digest_len output bitness constraints
    - input_len input bitness constraints, only when requested

Any other hash can be plugged into the Merkle gadgets by implementing
CRHFunction.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, TYPE_CHECKING
import hashlib
import logging

import numpy as np

from ..common.bits import field_elements_to_bits
from ..common.field import PrimeField, bn254_field
from ..relations.r1cs import LinearCombination, R1CSConstraint
from .base import Gadget, generate_boolean_r1cs_constraint
from .basic import PackingGadget, VariableArray

if TYPE_CHECKING:
    from ..relations.protoboard import Protoboard
    from .digest import BlockVariable, DigestVariable

logger = logging.getLogger(__name__)


class CRHFunction(ABC):
    """
    Capability interface for a bit-output collision-resistant hash.

    Implementations provide both the off-circuit hash (for witness and
    test-vector generation) and a factory for the matching gadget.
    """

    def __init__(self, field: PrimeField):
        self.field = field

    @abstractmethod
    def get_digest_len(self) -> int:
        """Output width in bits."""

    @abstractmethod
    def sample_randomness(self, input_len: int) -> None:
        """Make the public parameters available for input_len-bit inputs."""

    @abstractmethod
    def has_randomness(self, input_len: int) -> bool:
        """Whether sample_randomness(input_len) has already run."""

    @abstractmethod
    def get_hash(self, bits: Sequence[int]) -> List[int]:
        """Hash a bit vector to a digest (off-circuit)."""

    @abstractmethod
    def expected_constraints(self, input_len: int, enforce_input_bitness: bool = False) -> int:
        """Exact constraint count of one gadget invocation."""

    @abstractmethod
    def gadget(self, pb: 'Protoboard', input_block: 'BlockVariable',
               output: 'DigestVariable', annotation_prefix: str = "") -> Gadget:
        """Build the in-circuit hash from input_block to output."""


class KnapsackCRH(CRHFunction):
    """
    Knapsack hash public parameters and off-circuit evaluation.

    Attributes:
        field: Field the coefficients live in
        dimension: Number of output field elements
        coefficients: Public random coefficients sampled so far

    Example:
        >>> crh = KnapsackCRH(PrimeField(97))
        >>> crh.sample_randomness(2 * crh.get_digest_len())
        >>> len(crh.get_hash([0, 1] * crh.get_digest_len()))
        7
    """

    def __init__(self, field: Optional[PrimeField] = None, dimension: int = 1):
        """
        Initialize with no coefficients sampled.

        Args:
            field: Hash field (default: BN254 scalar field)
            dimension: Output field elements per digest
        """
        super().__init__(field if field is not None else bn254_field())
        if dimension < 1:
            raise ValueError("dimension must be at least 1")
        self.dimension = dimension
        self.coefficients: List[int] = []

    def __repr__(self) -> str:
        return (f"KnapsackCRH(field_bits={self.field.size_in_bits}, dimension={self.dimension}, "
                f"coefficients={len(self.coefficients)})")

    def get_digest_len(self) -> int:
        return self.dimension * self.field.size_in_bits

    def get_block_len(self) -> int:
        """The Merkle block: two digests side by side."""
        return 2 * self.get_digest_len()

    def _sample_coefficient(self, index: int) -> int:
        """
        SHA-512 based rejection sampling of coefficient `index`.

        Candidate t is SHA512(index || t) truncated to size_in_bits; the
        first candidate below p is taken.
        """
        mask = (1 << self.field.size_in_bits) - 1
        attempt = 0
        while True:
            seed = index.to_bytes(8, "big") + attempt.to_bytes(8, "big")
            candidate = int.from_bytes(hashlib.sha512(seed).digest(), "big") & mask
            if candidate < self.field.prime:
                return candidate
            attempt += 1

    def sample_randomness(self, input_len: int) -> None:
        needed = self.dimension * input_len
        if len(self.coefficients) >= needed:
            return
        start = len(self.coefficients)
        self.coefficients.extend(self._sample_coefficient(k) for k in range(start, needed))
        logger.debug("sampled knapsack coefficients %d..%d for input_len=%d",
                     start, needed - 1, input_len)

    def has_randomness(self, input_len: int) -> bool:
        return len(self.coefficients) >= self.dimension * input_len

    def coefficient_rows(self, input_len: int) -> List[List[int]]:
        """Coefficients for an input_len-bit input, one row per output element."""
        if not self.has_randomness(input_len):
            raise ValueError(f"Knapsack randomness not sampled for input_len={input_len}")
        return [self.coefficients[i * input_len:(i + 1) * input_len] for i in range(self.dimension)]

    def hash_to_field(self, bits: Sequence[int]) -> List[int]:
        """The dimension output field elements, before unpacking."""
        rows = np.array(self.coefficient_rows(len(bits)), dtype=object)
        elements = rows.dot(np.array(list(bits), dtype=object)) % self.field.prime
        return [int(e) for e in elements]

    def get_hash(self, bits: Sequence[int]) -> List[int]:
        return field_elements_to_bits(self.hash_to_field(bits), self.field.size_in_bits)

    def expected_constraints(self, input_len: int, enforce_input_bitness: bool = False) -> int:
        hasher_constraints = self.dimension
        unpack_constraints = self.dimension * PackingGadget.expected_constraints(
            self.field.size_in_bits, enforce_bitness=True)
        input_constraints = input_len if enforce_input_bitness else 0
        return input_constraints + hasher_constraints + unpack_constraints

    def gadget(self, pb: 'Protoboard', input_block: 'BlockVariable',
               output: 'DigestVariable', annotation_prefix: str = "") -> KnapsackCRHWithBitOutGadget:
        return KnapsackCRHWithBitOutGadget(pb, self, input_block, output, annotation_prefix)


class KnapsackCRHWithFieldOutGadget(Gadget):
    """
    Knapsack hash with field-element output.

    One constraint per output element:  1 * <a_i, x> = y_i
    """

    def __init__(self, pb: 'Protoboard', crh: KnapsackCRH, input_block: 'BlockVariable',
                 output: Sequence, annotation_prefix: str = ""):
        super().__init__(pb, annotation_prefix)
        self.crh = crh
        self.input_block = input_block
        self.input_len = len(input_block)
        if not crh.has_randomness(self.input_len):
            raise ValueError(f"Knapsack randomness must be sampled for input_len={self.input_len} "
                             f"before building a hash gadget")
        if len(output) != crh.dimension:
            raise ValueError(f"Expected {crh.dimension} output elements, got {len(output)}")
        self.output = VariableArray(output)

    def generate_r1cs_constraints(self) -> None:
        rows = self.crh.coefficient_rows(self.input_len)
        for i, row in enumerate(rows):
            combination = LinearCombination.weighted(self.input_block.bits, row)
            self.pb.add_r1cs_constraint(R1CSConstraint(1, combination, self.output[i]),
                                        self.annotate(f"knapsack_{i}"))

    def generate_r1cs_witness(self) -> None:
        elements = self.crh.hash_to_field(self.input_block.get_block())
        self.output.fill_with_field_elements(self.pb, elements)


class KnapsackCRHWithBitOutGadget(Gadget):
    """
    Knapsack hash with digest (bit) output.

    Combines a field-output hasher with one unpacker per output element,
    so the hash result lands in a DigestVariable.

    Attributes:
        output_digest: Digest receiving the hash
        hasher: Field-output knapsack gadget
        unpackers: Packing gadgets from each output element to its digest bits
    """

    def __init__(self, pb: 'Protoboard', crh: KnapsackCRH, input_block: 'BlockVariable',
                 output_digest: 'DigestVariable', annotation_prefix: str = ""):
        super().__init__(pb, annotation_prefix)
        if output_digest.digest_size != crh.get_digest_len():
            raise ValueError(f"Output digest holds {output_digest.digest_size} bits, "
                             f"hash produces {crh.get_digest_len()}")
        self.crh = crh
        self.input_block = input_block
        self.output_digest = output_digest

        element_bits = crh.field.size_in_bits
        self.output = VariableArray.allocate(pb, crh.dimension, self.annotate("output"))
        self.hasher = KnapsackCRHWithFieldOutGadget(pb, crh, input_block, self.output,
                                                    self.annotate("hasher"))
        self.unpackers = [
            PackingGadget(pb, output_digest.bits[i * element_bits:(i + 1) * element_bits],
                          self.output[i], self.annotate(f"unpack_{i}"))
            for i in range(crh.dimension)
        ]

    def generate_r1cs_constraints(self, enforce_input_bitness: bool = False) -> None:
        """
        Args:
            enforce_input_bitness: Also constrain every input bit; callers
                whose input digests are already bit-checked pass False
        """
        if enforce_input_bitness:
            for i, bit in enumerate(self.input_block.bits):
                generate_boolean_r1cs_constraint(self.pb, bit, self.annotate(f"input_bitness_{i}"))
        self.hasher.generate_r1cs_constraints()
        for unpacker in self.unpackers:
            unpacker.generate_r1cs_constraints(enforce_bitness=True)

    def generate_r1cs_witness(self) -> None:
        """Hash the assigned input block and fill the output digest."""
        self.hasher.generate_r1cs_witness()
        for unpacker in self.unpackers:
            unpacker.generate_r1cs_witness_from_packed()

    def expected_constraints(self, enforce_input_bitness: bool = False) -> int:
        return self.crh.expected_constraints(len(self.input_block), enforce_input_bitness)
