"""Nonnative field arithmetic: F_small values inside an F_large constraint system.

A value v in F_small is carried as limbs v_0 .. v_{n-1} with

    v = sum(v_i * 2^(i * limb_bits)),   0 <= v_i < 2^width_i

where every limb has width limb_bits except the last, which covers the
remaining bits of the F_small modulus. Every allocated limb is decomposed
into Booleans, which doubles as its range check; the concatenated bits are
also checked against the modulus so the representation is canonical.

Addition is limb-wise with small signed carries:

    a_i + b_i + c_{i-1} = w_i + q * l_i + c_i * 2^width_i,   c_i in {-1, 0, 1}

with q in {0, 1} and no carry out of the final limb. Summed over the limbs
this is a + b = w + q * l over the integers. Both sides of every limb
equation stay below 2^(limb_bits + 3), so the native field never wraps.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from constraints.base import ConstraintError, ConstraintSystem
from gadgets.boolean import Boolean, bits_to_int
from gadgets.fp import FpVar
from primitives.field import FL, FS, modulus_bits


@dataclass(frozen=True)
class NonNativeParams:
    """Limb layout for one (target field, native field) pair.

    Attributes:
        target_field: galois field class of the represented values
        limb_bits: Width of every limb but the last
        native_field: galois field class of the constraint system
    """
    target_field: type = FS
    limb_bits: int = 64
    native_field: type = FL

    def __post_init__(self):
        native_bits = modulus_bits(self.native_field)
        if self.limb_bits <= 0:
            raise ValueError(f"limb_bits must be positive, got {self.limb_bits}")
        if self.limb_bits + 3 >= native_bits:
            raise ValueError(
                f"limb_bits={self.limb_bits} leaves no carry head-room in a "
                f"{native_bits}-bit native field (need limb_bits + 3 < {native_bits})"
            )
        if int(self.target_field.characteristic) >= int(self.native_field.characteristic):
            raise ValueError("Target field must be smaller than the native field")

    @property
    def modulus(self) -> int:
        return int(self.target_field.characteristic)

    @property
    def modulus_bits(self) -> int:
        return modulus_bits(self.target_field)

    @property
    def num_limbs(self) -> int:
        return -(-self.modulus_bits // self.limb_bits)

    @property
    def limb_widths(self) -> List[int]:
        widths = [self.limb_bits] * self.num_limbs
        widths[-1] = self.modulus_bits - self.limb_bits * (self.num_limbs - 1)
        return widths

    def limb_offsets(self) -> List[int]:
        return [i * self.limb_bits for i in range(self.num_limbs)]

    def split(self, value: int) -> List[int]:
        """Split an integer into limb values."""
        return [
            (value >> offset) & ((1 << width) - 1)
            for offset, width in zip(self.limb_offsets(), self.limb_widths)
        ]


DEFAULT_NONNATIVE_PARAMS = NonNativeParams()


class NonNativeVar:
    """F_small value held as range-checked limbs in an F_large constraint system."""

    def __init__(self, params: NonNativeParams, limbs: List[FpVar], bits: List[Boolean],
                 cs: Optional[ConstraintSystem]):
        self.params = params
        self.limbs = limbs
        self.bits = bits
        self.cs = cs

    # --- Allocation ---

    @classmethod
    def new_witness(cls, cs: ConstraintSystem, value_fn: Callable[[], object],
                    params: NonNativeParams = DEFAULT_NONNATIVE_PARAMS) -> "NonNativeVar":
        return cls._allocate(cs, value_fn, params, FpVar.new_witness)

    @classmethod
    def new_input(cls, cs: ConstraintSystem, value_fn: Callable[[], object],
                  params: NonNativeParams = DEFAULT_NONNATIVE_PARAMS) -> "NonNativeVar":
        return cls._allocate(cs, value_fn, params, FpVar.new_input)

    @classmethod
    def _allocate(cls, cs, value_fn, params, alloc_limb) -> "NonNativeVar":
        value = _evaluate(cs, value_fn, params)
        limbs: List[FpVar] = []
        bits: List[Boolean] = []
        with cs.namespace("nonnative"):
            for limb_value, width in zip(params.split(value), params.limb_widths):
                limb = alloc_limb(cs, lambda v=limb_value: v)
                limb_bits = [
                    Boolean.new_witness(cs, lambda i=i, v=limb_value: (v >> i) & 1)
                    for i in range(width)
                ]
                Boolean.le_bits_to_fp(limb_bits, cs.field).enforce_equal(limb)
                limbs.append(limb)
                bits.extend(limb_bits)
            Boolean.enforce_smaller_or_equal_than(bits, params.modulus - 1)
        return cls(params, limbs, bits, cs)

    @classmethod
    def from_bits(cls, bits: Sequence[Boolean],
                  params: NonNativeParams = DEFAULT_NONNATIVE_PARAMS) -> "NonNativeVar":
        """Build from fewer than modulus_bits Booleans; adds no constraints."""
        if len(bits) >= params.modulus_bits:
            raise ValueError(
                f"from_bits takes fewer than {params.modulus_bits} bits, got {len(bits)}"
            )
        padded = list(bits) + [Boolean.constant(False)] * (params.modulus_bits - len(bits))
        limbs = [
            Boolean.le_bits_to_fp(padded[offset:offset + width], params.native_field)
            for offset, width in zip(params.limb_offsets(), params.limb_widths)
        ]
        cs = next((b.cs for b in bits if b.cs is not None), None)
        return cls(params, limbs, padded, cs)

    # --- Values ---

    @property
    def int_value(self) -> int:
        return bits_to_int(self.bits)

    @property
    def value(self):
        """Represented value as an F_small element."""
        return self.params.target_field(self.int_value % self.params.modulus)

    def to_native_value(self):
        """Represented value reduced into the native field."""
        native = self.params.native_field
        return native(self.int_value % int(native.characteristic))

    def to_bits(self, limit: Optional[int] = None) -> List[Boolean]:
        """Little-endian bits, truncated or padded with constant False to limit."""
        if limit is None:
            limit = self.params.modulus_bits
        bits = self.bits[:limit]
        return bits + [Boolean.constant(False)] * (limit - len(bits))

    # --- Arithmetic ---

    def add(self, other: "NonNativeVar") -> "NonNativeVar":
        """Canonical nonnative sum (self + other) mod l."""
        if other.params != self.params:
            raise ConstraintError("Cannot add nonnative variables with different limb layouts")
        cs = self.cs if self.cs is not None else other.cs
        if cs is None:
            raise ConstraintError("Nonnative addition of two constants needs a constraint system")
        if self.cs is not None and other.cs is not None and self.cs is not other.cs:
            raise ConstraintError("Cannot combine variables from different constraint systems")

        params = self.params
        total = self.int_value + other.int_value
        quotient = total // params.modulus
        result = total - quotient * params.modulus

        with cs.namespace("nonnative_add"):
            w = NonNativeVar.new_witness(cs, lambda: result, params)
            q = Boolean.new_witness(cs, lambda: quotient)
            q_fp = q.to_fp(cs.field)

            a_vals = params.split(self.int_value)
            b_vals = params.split(other.int_value)
            w_vals = params.split(result)
            l_vals = params.split(params.modulus)

            carry_in = FpVar.constant(cs.field, 0)
            carry_value = 0
            last = params.num_limbs - 1
            for i, width in enumerate(params.limb_widths):
                lhs = self.limbs[i] + other.limbs[i] + carry_in
                rhs = w.limbs[i] + q_fp * l_vals[i]
                if i == last:
                    lhs.enforce_equal(rhs)
                    break
                diff = a_vals[i] + b_vals[i] + carry_value - w_vals[i] - quotient * l_vals[i]
                carry_value = diff >> width
                carry = _new_carry(cs, carry_value)
                lhs.enforce_equal(rhs + carry * (1 << width))
                carry_in = carry
        return w

    def __add__(self, other: "NonNativeVar") -> "NonNativeVar":
        return self.add(other)

    def __repr__(self) -> str:
        return f"NonNativeVar({self.int_value}, {self.params.num_limbs} limbs)"


def _evaluate(cs: ConstraintSystem, value_fn: Callable[[], object], params: NonNativeParams) -> int:
    try:
        value = int(value_fn())
    except Exception as e:
        raise ConstraintError(
            f"Failed to compute nonnative value at '{cs.current_namespace()}': {e}"
        ) from e
    return value % params.modulus


def _new_carry(cs: ConstraintSystem, value: int) -> FpVar:
    """Witness constrained to {-1, 0, 1} by c^3 = c."""
    carry = FpVar.new_witness(cs, lambda: value)
    square = carry.square()
    cs.enforce(square.lc, carry.lc, carry.lc)
    return carry


def enforce_native_equal(native: FpVar, nonnative: NonNativeVar) -> List[Boolean]:
    """Enforce bit equality over the bits both fields can represent.

    Returns:
        The canonical bit decomposition of native, so callers can constrain
        the remaining high bits.
    """
    native_bits = native.to_bits_le()
    overlap = min(nonnative.params.modulus_bits, len(native_bits))
    for native_bit, nonnative_bit in zip(native_bits[:overlap], nonnative.to_bits(overlap)):
        native_bit.enforce_equal(nonnative_bit)
    return native_bits
