"""
R1CS relations: variables, linear combinations, constraints and the
protoboard that collects them.
"""

from .r1cs import ONE, Variable, LinearCombination, R1CSConstraint
from .protoboard import Protoboard

__all__ = [
    "ONE",
    "Variable",
    "LinearCombination",
    "R1CSConstraint",
    "Protoboard",
]
