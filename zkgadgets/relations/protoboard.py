"""
Protoboard: the shared constraint builder and assignment table.

Every gadget in a circuit writes into the same protoboard. It owns:

    - the assignment table (one field value per allocated variable)
    - the constraint list
    - the split between primary (public) and auxiliary (private) input

Variables are allocated arena-style: a Variable is just an index into the
assignment table, so gadgets can hold and pass them around freely.
Slot 0 is the constant ONE and is never reassigned.

Usage:
    >>> pb = Protoboard()
    >>> x = pb.allocate("x")
    >>> pb.add_r1cs_constraint(R1CSConstraint(x, 1 - x, 0), "x is a bit")
    >>> pb.set_val(x, 1)
    >>> pb.is_satisfied()
    True

One protoboard describes one circuit. Independent circuits must each use
their own protoboard; nothing is shared between instances.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Union
import logging

from ..common.field import FieldElement, PrimeField, bn254_field
from .r1cs import ONE, ONE_INDEX, LinearCombination, R1CSConstraint, Term, Variable

logger = logging.getLogger(__name__)


class Protoboard:
    """
    Constraint builder plus witness assignment table.

    Attributes:
        field: Prime field all values live in
        constraints: Emitted constraints, in emission order
        annotations: Variable index -> annotation given at allocation
    """

    def __init__(self, field: Optional[PrimeField] = None):
        """
        Initialize an empty protoboard.

        Args:
            field: Circuit field (default: BN254 scalar field)
        """
        self.field = field if field is not None else bn254_field()
        self.values: List[int] = [1]
        self.constraints: List[R1CSConstraint] = []
        self.annotations: Dict[int, str] = {ONE_INDEX: "ONE"}
        self._num_inputs = 0

    def __repr__(self) -> str:
        return (f"Protoboard(variables={self.num_variables()}, "
                f"constraints={self.num_constraints()}, inputs={self._num_inputs})")

    # Allocation and constraints

    def allocate(self, annotation: str = "") -> Variable:
        """Allocate a fresh variable, initially assigned 0."""
        index = len(self.values)
        self.values.append(0)
        if annotation:
            self.annotations[index] = annotation
        return Variable(index)

    def add_r1cs_constraint(self, constraint: R1CSConstraint, annotation: str = "") -> None:
        """Append a constraint; a non-empty annotation overrides the constraint's own."""
        if annotation:
            constraint.annotation = annotation
        self.constraints.append(constraint)

    # Assignment

    def val(self, var: Variable) -> FieldElement:
        """Current value of a variable."""
        return self.field.element(self.values[var.index])

    def set_val(self, var: Variable, value: Union[int, FieldElement]) -> None:
        """
        Assign a value to a variable.

        Raises:
            ValueError: If var is the constant ONE
            IndexError: If var was not allocated on this protoboard
        """
        if var.index == ONE_INDEX:
            raise ValueError("The constant ONE cannot be reassigned")
        if var.index >= len(self.values):
            raise IndexError(f"Variable {var!r} is not allocated on this protoboard")
        self.values[var.index] = int(value) % self.field.prime

    def lc_val(self, lc: Term) -> FieldElement:
        """Evaluate a linear combination under the current assignment."""
        return self.field.element(LinearCombination.of(lc).evaluate(self.values, self.field.prime))

    # Sizes and inputs

    def num_constraints(self) -> int:
        return len(self.constraints)

    def num_variables(self) -> int:
        """Allocated variables, not counting the constant ONE."""
        return len(self.values) - 1

    def num_inputs(self) -> int:
        return self._num_inputs

    def set_input_sizes(self, primary_input_size: int) -> None:
        """
        Declare the first primary_input_size variables as the public input.

        Raises:
            ValueError: If more inputs are declared than variables allocated
        """
        if primary_input_size > self.num_variables():
            raise ValueError(f"Cannot declare {primary_input_size} primary inputs; "
                             f"only {self.num_variables()} variables allocated")
        self._num_inputs = primary_input_size

    def primary_input(self) -> List[FieldElement]:
        return [self.field.element(v) for v in self.values[1:1 + self._num_inputs]]

    def auxiliary_input(self) -> List[FieldElement]:
        return [self.field.element(v) for v in self.values[1 + self._num_inputs:]]

    def full_variable_assignment(self) -> List[FieldElement]:
        """Primary input followed by auxiliary input (ONE excluded)."""
        return self.primary_input() + self.auxiliary_input()

    # Satisfiability

    def unsatisfied_constraints(self) -> List[int]:
        """Indices of every constraint the current assignment violates."""
        prime = self.field.prime
        return [i for i, constraint in enumerate(self.constraints)
                if not constraint.is_satisfied(self.values, prime)]

    def is_satisfied(self) -> bool:
        """
        Check every constraint against the current assignment.

        Stops at the first violation and logs its annotation at DEBUG level.
        """
        prime = self.field.prime
        for i, constraint in enumerate(self.constraints):
            if not constraint.is_satisfied(self.values, prime):
                logger.debug("constraint %d (%s) is not satisfied", i,
                             constraint.annotation or "unannotated")
                return False
        return True

    @property
    def one(self) -> Variable:
        return ONE
