"""
Digest and block variables.

A digest variable is the in-circuit form of a hash output: a fixed-length
run of bit variables. A block variable is the in-circuit form of a hash
input, here always two digests laid side by side (left then right).
"""

from __future__ import annotations
from typing import List, Sequence, TYPE_CHECKING

from .base import Gadget, generate_boolean_r1cs_constraint
from .basic import VariableArray

if TYPE_CHECKING:
    from ..relations.protoboard import Protoboard


class DigestVariable(Gadget):
    """
    Fixed-length digest of bit variables.

    Attributes:
        digest_size: Number of bits
        bits: The bit variables, in digest order
    """

    def __init__(self, pb: 'Protoboard', digest_size: int, annotation_prefix: str = ""):
        super().__init__(pb, annotation_prefix)
        self.digest_size = digest_size
        self.bits = VariableArray.allocate(pb, digest_size, self.annotate("bits"))

    def __len__(self) -> int:
        return self.digest_size

    def __repr__(self) -> str:
        return f"DigestVariable('{self.annotation_prefix}', size={self.digest_size})"

    def generate_r1cs_constraints(self) -> None:
        """One bitness constraint per bit. Calling twice duplicates them."""
        for i, bit in enumerate(self.bits):
            generate_boolean_r1cs_constraint(self.pb, bit, self.annotate(f"bitness_{i}"))

    def generate_r1cs_witness(self, contents: Sequence[int]) -> None:
        self.fill_with_bits(contents)

    def fill_with_bits(self, contents: Sequence[int]) -> None:
        """
        Assign a concrete digest.

        Raises:
            ValueError: If len(contents) != digest_size
        """
        if len(contents) != self.digest_size:
            raise ValueError(f"Digest '{self.annotation_prefix}' holds {self.digest_size} bits, "
                             f"got {len(contents)}")
        self.bits.fill_with_bits(self.pb, contents)

    def get_digest(self) -> List[int]:
        return self.bits.get_bits(self.pb)


class BlockVariable(Gadget):
    """
    Concatenation of several digests, used as a hash input block.

    The block does not allocate anything: its bits are the parts' bits,
    in order, so filling the parts fills the block.
    """

    def __init__(self, pb: 'Protoboard', parts: Sequence[DigestVariable], annotation_prefix: str = ""):
        super().__init__(pb, annotation_prefix)
        self.parts = list(parts)
        self.bits = VariableArray(bit for part in self.parts for bit in part.bits)
        self.block_size = len(self.bits)

    def __len__(self) -> int:
        return self.block_size

    def get_block(self) -> List[int]:
        return self.bits.get_bits(self.pb)
