"""Boolean variables and bit-level comparison."""

from typing import Callable, Optional, Sequence

from constraints.base import (
    ONE,
    ConstraintError,
    ConstraintSystem,
    LinearCombination,
    lc_add,
)
from gadgets.fp import FpVar


class Boolean:
    """A bit: constant, or an allocated variable constrained to {0, 1}."""

    __slots__ = ("lc", "cs", "value")

    def __init__(self, value: bool, lc: LinearCombination, cs: Optional[ConstraintSystem] = None):
        self.value = bool(value)
        self.lc = lc
        self.cs = cs

    @classmethod
    def constant(cls, value: bool) -> "Boolean":
        return cls(value, {ONE: 1} if value else {})

    @classmethod
    def new_witness(cls, cs: ConstraintSystem, value_fn: Callable[[], object]) -> "Boolean":
        var = cs.new_witness(lambda: 1 if value_fn() else 0)
        bit = cls(cs.assignment(var) == 1, {var: 1}, cs)
        bit._enforce_booleanity()
        return bit

    @classmethod
    def new_input(cls, cs: ConstraintSystem, value_fn: Callable[[], object]) -> "Boolean":
        var = cs.new_input(lambda: 1 if value_fn() else 0)
        bit = cls(cs.assignment(var) == 1, {var: 1}, cs)
        bit._enforce_booleanity()
        return bit

    def _enforce_booleanity(self) -> None:
        # b * (1 - b) = 0
        self.cs.enforce(self.lc, lc_add({ONE: 1}, self.lc, -1), {})

    @property
    def is_constant(self) -> bool:
        return self.cs is None

    def not_(self) -> "Boolean":
        return Boolean(not self.value, lc_add({ONE: 1}, self.lc, -1), self.cs)

    def and_(self, other: "Boolean") -> "Boolean":
        if self.is_constant:
            return other if self.value else Boolean.constant(False)
        if other.is_constant:
            return self if other.value else Boolean.constant(False)
        cs = self.cs
        value = self.value and other.value
        var = cs.new_witness(lambda: 1 if value else 0)
        cs.enforce(self.lc, other.lc, {var: 1})
        return Boolean(value, {var: 1}, cs)

    def or_(self, other: "Boolean") -> "Boolean":
        return self.not_().and_(other.not_()).not_()

    def enforce_equal(self, other: "Boolean") -> None:
        cs = self.cs if self.cs is not None else other.cs
        if cs is None:
            if self.value != other.value:
                raise ConstraintError(f"Constant bits {self.value} and {other.value} are not equal")
            return
        cs.enforce(lc_add(self.lc, other.lc, -1), {ONE: 1}, {})

    def to_fp(self, field) -> FpVar:
        p = int(field.characteristic)
        return FpVar(field, int(self.value), {v: c % p for v, c in self.lc.items() if c % p}, self.cs)

    def __repr__(self) -> str:
        return f"Boolean({self.value}{', const' if self.is_constant else ''})"

    # --- Bit sequences ---

    @staticmethod
    def le_bits_to_fp(bits: Sequence["Boolean"], field) -> FpVar:
        """Weighted sum sum(2^i * bits[i]) as a native field variable (no constraints)."""
        acc = FpVar.constant(field, 0)
        for i, bit in enumerate(bits):
            acc = acc + bit.to_fp(field) * (1 << i)
        return acc

    @staticmethod
    def enforce_smaller_or_equal_than(bits: Sequence["Boolean"], bound: int) -> None:
        """Enforce that little-endian bits encode an integer <= bound.

        Scans from the most significant bit, tracking whether the prefix so far
        equals the bound's prefix. Where the bound has a 0, a 1 is only allowed
        once the prefix is already strictly smaller. Costs at most one
        constraint per bit.
        """
        if bound < 0:
            raise ValueError(f"bound must be non-negative, got {bound}")
        if len(bits) <= bound.bit_length() - 1 or (1 << len(bits)) - 1 <= bound:
            return

        prefix_equal = Boolean.constant(True)
        for i in reversed(range(len(bits))):
            bit = bits[i]
            if (bound >> i) & 1:
                prefix_equal = prefix_equal.and_(bit)
            else:
                _enforce_not_both(bit, prefix_equal)


def _enforce_not_both(a: Boolean, b: Boolean) -> None:
    """Enforce a AND b == false."""
    if (a.is_constant and not a.value) or (b.is_constant and not b.value):
        return
    cs = a.cs if a.cs is not None else b.cs
    if cs is None:
        raise ConstraintError("Constant bits violate the comparison bound")
    cs.enforce(a.lc, b.lc, {})


def bits_to_int(bits: Sequence[Boolean]) -> int:
    """Integer value of little-endian Booleans."""
    return sum(1 << i for i, bit in enumerate(bits) if bit.value)
