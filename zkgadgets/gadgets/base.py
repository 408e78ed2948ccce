"""
Gadget base class.

A gadget is a reusable circuit fragment that knows two things:

    1. generate_r1cs_constraints(): how to write its constraints onto a
       protoboard (circuit-shape time, once)
    2. generate_r1cs_witness(): how to fill its internal variables for a
       concrete instance (once per proof)

Gadgets allocate their internal variables in __init__, so the circuit
shape is fixed as soon as the gadget is built.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from ..relations.r1cs import R1CSConstraint, Term

if TYPE_CHECKING:
    from ..relations.protoboard import Protoboard


class Gadget:
    """
    Common state for every gadget.

    Attributes:
        pb: Protoboard the gadget writes into
        annotation_prefix: Prefix for variable and constraint annotations
    """

    def __init__(self, pb: 'Protoboard', annotation_prefix: str = ""):
        self.pb = pb
        self.annotation_prefix = annotation_prefix

    def annotate(self, suffix: str) -> str:
        """Join the prefix and a suffix into one annotation."""
        return f"{self.annotation_prefix} {suffix}".strip()


def generate_boolean_r1cs_constraint(pb: 'Protoboard', lc: Term, annotation: str = "") -> None:
    """Emit lc * (1 - lc) = 0, forcing lc to be 0 or 1."""
    pb.add_r1cs_constraint(R1CSConstraint(lc, 1 - lc, 0), annotation)
