"""
Basic gadgets: variable arrays and bit packing.

Most gadgets work on ordered runs of variables (digest bits, address bits,
hash outputs). VariableArray is that run, with helpers to read and write
the whole array at once.

PackingGadget ties a bit vector to a single field element:

    packed = sum(2^i * bits[i])

It is how the knapsack hash turns its field-element output into digest
bits, and it works in both directions:

    - from bits: compute packed from already-known bits
    - from packed: decompose a known packed value into bits
"""

from __future__ import annotations
from typing import List, Sequence, TYPE_CHECKING

from ..common.bits import int_to_bits
from ..relations.r1cs import LinearCombination, R1CSConstraint, Variable
from .base import Gadget, generate_boolean_r1cs_constraint

if TYPE_CHECKING:
    from ..relations.protoboard import Protoboard


class VariableArray(list):
    """An ordered list of Variables with bulk read/write helpers."""

    @classmethod
    def allocate(cls, pb: 'Protoboard', size: int, annotation_prefix: str = "") -> VariableArray:
        """Allocate size fresh variables, annotated prefix_0 .. prefix_{size-1}."""
        return cls(pb.allocate(f"{annotation_prefix}_{i}" if annotation_prefix else "")
                   for i in range(size))

    def fill_with_bits(self, pb: 'Protoboard', bits: Sequence[int]) -> None:
        """
        Assign one bit per variable.

        Raises:
            ValueError: If the bit count does not match the array length
        """
        if len(bits) != len(self):
            raise ValueError(f"Expected {len(self)} bits, got {len(bits)}")
        for var, bit in zip(self, bits):
            pb.set_val(var, 1 if bit else 0)

    def fill_with_field_elements(self, pb: 'Protoboard', values: Sequence[int]) -> None:
        """Assign one field element per variable."""
        if len(values) != len(self):
            raise ValueError(f"Expected {len(self)} values, got {len(values)}")
        for var, value in zip(self, values):
            pb.set_val(var, value)

    def get_bits(self, pb: 'Protoboard') -> List[int]:
        """Read the array back as bits (any non-zero value reads as 1)."""
        return [0 if pb.val(var).is_zero() else 1 for var in self]

    def get_vals(self, pb: 'Protoboard') -> List[int]:
        return [pb.val(var).value for var in self]


class PackingGadget(Gadget):
    """
    Constrain packed == sum(2^i * bits[i]).

    Attributes:
        bits: Little-endian bit variables
        packed: Variable holding the packed field element
    """

    def __init__(self, pb: 'Protoboard', bits: Sequence[Variable], packed: Variable,
                 annotation_prefix: str = ""):
        super().__init__(pb, annotation_prefix)
        self.bits = VariableArray(bits)
        self.packed = packed

    def generate_r1cs_constraints(self, enforce_bitness: bool) -> None:
        """
        Emit the packing constraint, optionally preceded by bitness of every bit.

        Args:
            enforce_bitness: Also constrain each bit to {0, 1}
        """
        if enforce_bitness:
            for i, bit in enumerate(self.bits):
                generate_boolean_r1cs_constraint(self.pb, bit, self.annotate(f"bitness_{i}"))
        packed_sum = LinearCombination.weighted(self.bits, [1 << i for i in range(len(self.bits))])
        self.pb.add_r1cs_constraint(R1CSConstraint(1, packed_sum, self.packed),
                                    self.annotate("packing"))

    @staticmethod
    def expected_constraints(num_bits: int, enforce_bitness: bool) -> int:
        return (num_bits if enforce_bitness else 0) + 1

    def generate_r1cs_witness_from_bits(self) -> None:
        """packed := sum(2^i * bits[i]) using the bits already assigned."""
        packed = sum(bit << i for i, bit in enumerate(self.bits.get_bits(self.pb)))
        self.pb.set_val(self.packed, packed)

    def generate_r1cs_witness_from_packed(self) -> None:
        """
        bits := little-endian decomposition of the assigned packed value.

        Raises:
            ValueError: If the packed value does not fit in the available bits
        """
        value = self.pb.val(self.packed).value
        self.bits.fill_with_bits(self.pb, int_to_bits(value, len(self.bits)))
