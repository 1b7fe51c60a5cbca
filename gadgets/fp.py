"""Native field variables.

FpVar is either a constant or a linear combination of allocated variables.
Linear operations never add constraints; multiplying two non-constant
FpVars allocates one witness and one constraint.
"""

from typing import Callable, List, Optional

from constraints.base import (
    ONE,
    ConstraintError,
    ConstraintSystem,
    LinearCombination,
    lc_add,
    lc_scale,
)


class FpVar:
    """Element of the constraint system's native field.

    Attributes:
        field: galois FieldArray class of the native field
        lc: Linear combination over allocated variables (constants use ONE)
        cs: Owning constraint system, None for constants
    """

    __slots__ = ("field", "lc", "cs", "_value")

    def __init__(self, field, value: int, lc: LinearCombination, cs: Optional[ConstraintSystem] = None):
        self.field = field
        self._value = int(value) % int(field.characteristic)
        self.lc = lc
        self.cs = cs

    # --- Construction ---

    @classmethod
    def constant(cls, field, value) -> "FpVar":
        p = int(field.characteristic)
        v = int(value) % p
        return cls(field, v, {ONE: v} if v else {})

    @classmethod
    def new_input(cls, cs: ConstraintSystem, value_fn: Callable[[], object]) -> "FpVar":
        var = cs.new_input(value_fn)
        return cls(cs.field, cs.assignment(var), {var: 1}, cs)

    @classmethod
    def new_witness(cls, cs: ConstraintSystem, value_fn: Callable[[], object]) -> "FpVar":
        var = cs.new_witness(value_fn)
        return cls(cs.field, cs.assignment(var), {var: 1}, cs)

    # --- Accessors ---

    @property
    def modulus(self) -> int:
        return int(self.field.characteristic)

    @property
    def value(self):
        """Assigned value as a field element."""
        return self.field(self._value)

    @property
    def is_constant(self) -> bool:
        return self.cs is None

    def _coerce(self, other) -> "FpVar":
        if isinstance(other, FpVar):
            return other
        return FpVar.constant(self.field, int(other) % self.modulus)

    def _join_cs(self, other: "FpVar") -> Optional[ConstraintSystem]:
        if self.cs is not None and other.cs is not None and self.cs is not other.cs:
            raise ConstraintError("Cannot combine variables from different constraint systems")
        return self.cs if self.cs is not None else other.cs

    # --- Arithmetic ---

    def __add__(self, other) -> "FpVar":
        other = self._coerce(other)
        p = self.modulus
        return FpVar(self.field, self._value + other._value, lc_add(self.lc, other.lc, 1, p), self._join_cs(other))

    __radd__ = __add__

    def __sub__(self, other) -> "FpVar":
        other = self._coerce(other)
        p = self.modulus
        return FpVar(self.field, self._value - other._value, lc_add(self.lc, other.lc, -1, p), self._join_cs(other))

    def __rsub__(self, other) -> "FpVar":
        return self._coerce(other) - self

    def __neg__(self) -> "FpVar":
        return FpVar(self.field, -self._value, lc_scale(self.lc, -1, self.modulus), self.cs)

    def __mul__(self, other) -> "FpVar":
        other = self._coerce(other)
        p = self.modulus
        if other.is_constant:
            return FpVar(self.field, self._value * other._value, lc_scale(self.lc, other._value, p), self.cs)
        if self.is_constant:
            return FpVar(self.field, self._value * other._value, lc_scale(other.lc, self._value, p), other.cs)

        cs = self._join_cs(other)
        product = (self._value * other._value) % p
        var = cs.new_witness(lambda: product)
        cs.enforce(self.lc, other.lc, {var: 1})
        return FpVar(self.field, product, {var: 1}, cs)

    __rmul__ = __mul__

    def square(self) -> "FpVar":
        return self * self

    def pow_by_constant(self, exponent: int) -> "FpVar":
        """Square-and-multiply over the bits of a public exponent (MSB first)."""
        if exponent < 0:
            raise ValueError(f"exponent must be non-negative, got {exponent}")
        result = FpVar.constant(self.field, 1)
        for bit in bin(exponent)[2:]:
            result = result.square()
            if bit == "1":
                result = result * self
        return result

    # --- Constraints ---

    def enforce_equal(self, other) -> None:
        """Enforce self == other with one constraint (self - other) * 1 = 0."""
        other = self._coerce(other)
        cs = self._join_cs(other)
        if cs is None:
            if self._value != other._value:
                raise ConstraintError(f"Constants {self._value} and {other._value} are not equal")
            return
        cs.enforce(lc_add(self.lc, other.lc, -1, self.modulus), {ONE: 1}, {})

    def to_bits_le(self) -> List["Boolean"]:
        """Canonical little-endian bit decomposition (bits(p) Booleans, value <= p - 1)."""
        from gadgets.boolean import Boolean

        n_bits = self.modulus.bit_length()
        if self.is_constant:
            return [Boolean.constant(bool((self._value >> i) & 1)) for i in range(n_bits)]

        cs = self.cs
        bits = [
            Boolean.new_witness(cs, lambda i=i: (self._value >> i) & 1)
            for i in range(n_bits)
        ]
        Boolean.le_bits_to_fp(bits, self.field).enforce_equal(self)
        Boolean.enforce_smaller_or_equal_than(bits, self.modulus - 1)
        return bits

    def __repr__(self) -> str:
        kind = "const" if self.is_constant else f"{len(self.lc)} terms"
        return f"FpVar({self._value}, {kind})"
