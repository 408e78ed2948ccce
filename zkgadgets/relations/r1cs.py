"""
Rank-1 Constraint System Building Blocks.

An R1CS is a list of constraints of the form

    <A, z> * <B, z> = <C, z>

where z is the full variable assignment and A, B, C are sparse linear
combinations. This module defines the three objects needed to write such
constraints down:

    - Variable: an index into the protoboard's assignment table
    - LinearCombination: a sparse map index -> coefficient
    - R1CSConstraint: one a * b = c equation

Index 0 is reserved for the constant ONE, so the constant c is written as
c * ONE and every linear combination stays homogeneous.

Example:
    >>> x, y = Variable(1), Variable(2)
    >>> lc = x + 3 * y - 5
    >>> lc.terms
    {1: 1, 2: 3, 0: -5}
    >>> bit_check = R1CSConstraint(x, 1 - x, 0)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Union


ONE_INDEX = 0


@dataclass(frozen=True)
class Variable:
    """
    A circuit variable, identified by its slot in the assignment table.

    Variables carry no value; the protoboard owns the assignment.
    Arithmetic on variables produces LinearCombinations.
    """
    index: int

    def __repr__(self) -> str:
        return "ONE" if self.index == ONE_INDEX else f"x{self.index}"

    def __add__(self, other: Term) -> LinearCombination:
        return LinearCombination.of(self) + other

    def __radd__(self, other: Term) -> LinearCombination:
        return LinearCombination.of(other) + self

    def __sub__(self, other: Term) -> LinearCombination:
        return LinearCombination.of(self) - other

    def __rsub__(self, other: Term) -> LinearCombination:
        return LinearCombination.of(other) - self

    def __mul__(self, coeff: int) -> LinearCombination:
        if not isinstance(coeff, int):
            return NotImplemented
        return LinearCombination({self.index: coeff})

    __rmul__ = __mul__

    def __neg__(self) -> LinearCombination:
        return LinearCombination({self.index: -1})


ONE = Variable(ONE_INDEX)


@dataclass
class LinearCombination:
    """
    Sparse linear combination sum(coeff_i * x_i).

    Coefficients are kept as plain Python ints and reduced only when the
    combination is evaluated against a field.

    Attributes:
        terms: Mapping from variable index to coefficient
    """
    terms: Dict[int, int] = field(default_factory=dict)

    @classmethod
    def of(cls, value: Term) -> LinearCombination:
        """Lift an int, Variable or LinearCombination to a LinearCombination."""
        if isinstance(value, LinearCombination):
            return value
        if isinstance(value, Variable):
            return cls({value.index: 1})
        if isinstance(value, int):
            return cls({ONE_INDEX: value} if value else {})
        raise TypeError(f"Cannot build a linear combination from {type(value).__name__}")

    @classmethod
    def sum_of(cls, terms: Iterable[Term]) -> LinearCombination:
        """Sum several terms into one combination."""
        result = cls()
        for term in terms:
            result = result + term
        return result

    @classmethod
    def weighted(cls, variables: Sequence[Variable], coeffs: Sequence[int]) -> LinearCombination:
        """Build sum(coeffs[i] * variables[i])."""
        if len(variables) != len(coeffs):
            raise ValueError(f"{len(variables)} variables but {len(coeffs)} coefficients")
        terms: Dict[int, int] = {}
        for var, coeff in zip(variables, coeffs):
            terms[var.index] = terms.get(var.index, 0) + coeff
        return cls(terms)

    def __add__(self, other: Term) -> LinearCombination:
        other_lc = LinearCombination.of(other)
        terms = dict(self.terms)
        for index, coeff in other_lc.terms.items():
            terms[index] = terms.get(index, 0) + coeff
        return LinearCombination(terms)

    def __radd__(self, other: Term) -> LinearCombination:
        return LinearCombination.of(other) + self

    def __sub__(self, other: Term) -> LinearCombination:
        return self + (-LinearCombination.of(other))

    def __rsub__(self, other: Term) -> LinearCombination:
        return LinearCombination.of(other) - self

    def __mul__(self, coeff: int) -> LinearCombination:
        if not isinstance(coeff, int):
            return NotImplemented
        return LinearCombination({i: c * coeff for i, c in self.terms.items()})

    __rmul__ = __mul__

    def __neg__(self) -> LinearCombination:
        return self * -1

    def evaluate(self, assignment: Sequence[int], prime: int) -> int:
        """Evaluate against a full assignment (index 0 must hold 1)."""
        return sum(coeff * assignment[index] for index, coeff in self.terms.items()) % prime

    def variables(self) -> List[int]:
        """Indices referenced with a non-zero coefficient."""
        return [index for index, coeff in self.terms.items() if coeff]


Term = Union[int, Variable, LinearCombination]


@dataclass
class R1CSConstraint:
    """
    A single rank-1 constraint a * b = c.

    Attributes:
        a, b, c: Linear combinations (ints and Variables are lifted)
        annotation: Human-readable origin, reported when the constraint fails
    """
    a: LinearCombination
    b: LinearCombination
    c: LinearCombination
    annotation: str = ""

    def __post_init__(self):
        self.a = LinearCombination.of(self.a)
        self.b = LinearCombination.of(self.b)
        self.c = LinearCombination.of(self.c)

    def is_satisfied(self, assignment: Sequence[int], prime: int) -> bool:
        """Check a * b == c under the given assignment."""
        a_val = self.a.evaluate(assignment, prime)
        b_val = self.b.evaluate(assignment, prime)
        c_val = self.c.evaluate(assignment, prime)
        return (a_val * b_val - c_val) % prime == 0

    def __repr__(self) -> str:
        label = f" [{self.annotation}]" if self.annotation else ""
        return f"R1CSConstraint({self.a.terms} * {self.b.terms} = {self.c.terms}){label}"
