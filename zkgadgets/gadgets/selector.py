"""
Digest selector gadget.

Given a known digest, a control bit and two candidate digests (left,
right), pin the known digest to the side the bit selects and leave the
other side free:

    is_right * (right[i] - left[i]) = input[i] - left[i]

    is_right = 0  =>  left[i]  = input[i], right[i] unconstrained
    is_right = 1  =>  right[i] = input[i], left[i]  unconstrained

The free side is where the Merkle sibling goes. One constraint per bit.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from ..relations.r1cs import R1CSConstraint, Variable
from .base import Gadget

if TYPE_CHECKING:
    from ..relations.protoboard import Protoboard
    from .digest import DigestVariable


class DigestSelectorGadget(Gadget):
    """
    Route a known digest into the left or right slot of a hash block.

    Attributes:
        digest_size: Bits per digest
        input: The known digest
        is_right: Control bit variable
        left, right: Candidate digests
    """

    def __init__(self, pb: 'Protoboard', digest_size: int, input: 'DigestVariable',
                 is_right: Variable, left: 'DigestVariable', right: 'DigestVariable',
                 annotation_prefix: str = ""):
        super().__init__(pb, annotation_prefix)
        for name, digest in (("input", input), ("left", left), ("right", right)):
            if digest.digest_size != digest_size:
                raise ValueError(f"Selector {name} digest holds {digest.digest_size} bits, "
                                 f"expected {digest_size}")
        self.digest_size = digest_size
        self.input = input
        self.is_right = is_right
        self.left = left
        self.right = right

    def generate_r1cs_constraints(self) -> None:
        for i in range(self.digest_size):
            left_bit = self.left.bits[i]
            self.pb.add_r1cs_constraint(
                R1CSConstraint(self.is_right, self.right.bits[i] - left_bit,
                               self.input.bits[i] - left_bit),
                self.annotate(f"propagate_{i}"))

    def generate_r1cs_witness(self) -> None:
        """Copy the known digest into the selected side; the other side is the caller's."""
        digest = self.input.get_digest()
        if self.pb.val(self.is_right).is_one():
            self.right.fill_with_bits(digest)
        else:
            self.left.fill_with_bits(digest)

    @staticmethod
    def expected_constraints(digest_size: int) -> int:
        return digest_size
