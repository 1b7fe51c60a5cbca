"""Rank-1 constraint system and the circuit interface.

A ConstraintSystem collects constraints of the form

    <a, z> * <b, z> = <c, z>

over the native field, where z = (1, instance..., witness...) and a, b, c are
sparse linear combinations. Circuits implement ConstraintSynthesizer and emit
their constraints into a system owned by the caller.

Example:
    cs = ConstraintSystem(FL)
    x = cs.new_witness(lambda: 3)
    y = cs.new_input(lambda: 9)
    cs.enforce({x: 1}, {x: 1}, {y: 1})
    assert cs.is_satisfied()
"""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, NamedTuple, Optional, Tuple

logger = logging.getLogger(__name__)


class ConstraintError(RuntimeError):
    """Raised when a variable or constraint cannot be added to a constraint system."""


class Variable(NamedTuple):
    """Handle to an allocated variable: kind is 'instance' or 'witness'."""
    kind: str
    index: int


ONE = Variable("instance", 0)

# Sparse linear combination: variable -> integer coefficient (reduced mod p on use)
LinearCombination = Dict[Variable, int]


def lc_add(a: LinearCombination, b: LinearCombination, scale: int = 1, modulus: Optional[int] = None) -> LinearCombination:
    """Return a + scale * b, dropping zero coefficients."""
    result = dict(a)
    for var, coeff in b.items():
        total = result.get(var, 0) + scale * coeff
        if modulus is not None:
            total %= modulus
        if total:
            result[var] = total
        else:
            result.pop(var, None)
    return result


def lc_scale(a: LinearCombination, scale: int, modulus: Optional[int] = None) -> LinearCombination:
    """Return scale * a."""
    if modulus is not None:
        scale %= modulus
        if scale == 0:
            return {}
        return {var: (coeff * scale) % modulus for var, coeff in a.items()}
    if scale == 0:
        return {}
    return {var: coeff * scale for var, coeff in a.items()}


class ConstraintSystem:
    """
    R1CS over a galois prime field.

    Instance variable 0 is the constant one. Assignments are stored as ints in
    [0, p); values handed back to callers are field elements.

    Attributes:
        field: galois FieldArray class of the native field
        modulus: Characteristic of field
        max_constraints: Optional capacity; exceeding it raises ConstraintError
    """

    def __init__(self, field, max_constraints: Optional[int] = None):
        self.field = field
        self.modulus = int(field.characteristic)
        self.max_constraints = max_constraints

        self.instance_assignment: List[int] = [1]
        self.witness_assignment: List[int] = []
        self.constraints: List[Tuple[LinearCombination, LinearCombination, LinearCombination]] = []
        self.constraint_names: List[str] = []

        self._namespace: List[str] = []

    # --- Allocation ---

    def _evaluate(self, value_fn: Callable[[], object], kind: str) -> int:
        try:
            value = value_fn()
        except Exception as e:
            raise ConstraintError(
                f"Failed to compute {kind} value at '{self.current_namespace()}': {e}"
            ) from e
        try:
            return int(value) % self.modulus
        except (TypeError, ValueError) as e:
            raise ConstraintError(
                f"{kind} value {value!r} at '{self.current_namespace()}' is not a field element"
            ) from e

    def new_input(self, value_fn: Callable[[], object]) -> Variable:
        """Allocate a public input variable."""
        self.instance_assignment.append(self._evaluate(value_fn, "instance"))
        return Variable("instance", len(self.instance_assignment) - 1)

    def new_witness(self, value_fn: Callable[[], object]) -> Variable:
        """Allocate a private witness variable."""
        self.witness_assignment.append(self._evaluate(value_fn, "witness"))
        return Variable("witness", len(self.witness_assignment) - 1)

    def enforce(self, a: LinearCombination, b: LinearCombination, c: LinearCombination) -> None:
        """Add the constraint <a, z> * <b, z> = <c, z>."""
        if self.max_constraints is not None and len(self.constraints) >= self.max_constraints:
            raise ConstraintError(
                f"Constraint capacity {self.max_constraints} exceeded at '{self.current_namespace()}'"
            )
        for lc in (a, b, c):
            for var in lc:
                self._check_variable(var)
        self.constraints.append((a, b, c))
        self.constraint_names.append(f"{self.current_namespace()}#{len(self.constraints) - 1}")

    def _check_variable(self, var: Variable) -> None:
        if var.kind == "instance":
            bound = len(self.instance_assignment)
        elif var.kind == "witness":
            bound = len(self.witness_assignment)
        else:
            raise ConstraintError(f"Unknown variable kind '{var.kind}'")
        if not 0 <= var.index < bound:
            raise ConstraintError(f"Variable {var} was not allocated in this constraint system")

    # --- Namespaces ---

    @contextmanager
    def namespace(self, name: str) -> Iterator["ConstraintSystem"]:
        """Label constraints added inside the block with name (nested with '/')."""
        self._namespace.append(name)
        try:
            yield self
        finally:
            self._namespace.pop()

    def current_namespace(self) -> str:
        return "/".join(self._namespace) or "<root>"

    # --- Evaluation ---

    def assignment(self, var: Variable) -> int:
        self._check_variable(var)
        if var.kind == "instance":
            return self.instance_assignment[var.index]
        return self.witness_assignment[var.index]

    def eval_lc(self, lc: LinearCombination) -> int:
        """Evaluate a linear combination on the current assignment."""
        acc = 0
        for var, coeff in lc.items():
            acc += coeff * self.assignment(var)
        return acc % self.modulus

    def which_is_unsatisfied(self) -> Optional[str]:
        """Name of the first unsatisfied constraint, or None."""
        for name, (a, b, c) in zip(self.constraint_names, self.constraints):
            if (self.eval_lc(a) * self.eval_lc(b) - self.eval_lc(c)) % self.modulus != 0:
                return name
        return None

    def is_satisfied(self) -> bool:
        unsatisfied = self.which_is_unsatisfied()
        if unsatisfied is not None:
            logger.debug("Constraint %s is not satisfied", unsatisfied)
        return unsatisfied is None

    # --- Shape ---

    @property
    def num_constraints(self) -> int:
        return len(self.constraints)

    @property
    def num_instance_variables(self) -> int:
        return len(self.instance_assignment)

    @property
    def num_witness_variables(self) -> int:
        return len(self.witness_assignment)

    def column(self, var: Variable) -> int:
        """Index of var in z = (instance..., witness...)."""
        if var.kind == "instance":
            return var.index
        return self.num_instance_variables + var.index

    def to_matrices(self) -> Tuple[List[List[Tuple[int, int]]], ...]:
        """Sparse A, B, C matrices: one row of (coefficient, column) pairs per constraint."""
        def row(lc: LinearCombination) -> List[Tuple[int, int]]:
            return [
                (coeff % self.modulus, self.column(var))
                for var, coeff in lc.items()
                if coeff % self.modulus
            ]

        a = [row(c[0]) for c in self.constraints]
        b = [row(c[1]) for c in self.constraints]
        c = [row(c[2]) for c in self.constraints]
        return a, b, c

    def full_assignment(self) -> List[int]:
        """z = (instance..., witness...)."""
        return self.instance_assignment + self.witness_assignment

    def summary(self) -> str:
        return (
            f"{self.num_constraints} constraints, "
            f"{self.num_instance_variables} instance, {self.num_witness_variables} witness variables"
        )


class ConstraintSynthesizer(ABC):
    """A circuit: emits its constraints into a caller-owned ConstraintSystem.

    Circuit instances are immutable; generate_constraints may be called once
    per constraint system (the SNARK backend calls it once for setup and once
    per proof).
    """

    @abstractmethod
    def generate_constraints(self, cs: ConstraintSystem) -> None:
        """Allocate variables and enforce the relation.

        Raises:
            ConstraintError: If allocation or constraint emission fails
        """
        pass

    @abstractmethod
    def public_inputs(self) -> List:
        """Public input values in allocation order (excluding the constant one)."""
        pass
