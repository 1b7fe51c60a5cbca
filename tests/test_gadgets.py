"""Tests for FpVar, Boolean and the curve point gadget."""

import random

import pytest

from constraints.base import ConstraintError, ConstraintSystem
from gadgets.boolean import Boolean, bits_to_int
from gadgets.curve import PointVar
from gadgets.fp import FpVar
from primitives.babyjubjub import Point
from primitives.field import BN254_SCALAR_PRIME, FL, random_element


def _bits(cs: ConstraintSystem, value: int, n_bits: int):
    return [Boolean.new_witness(cs, lambda i=i: (value >> i) & 1) for i in range(n_bits)]


class TestFpVar:
    """Test native field variables."""

    def test_linear_ops_are_free(self) -> None:
        cs = ConstraintSystem(FL)
        x = FpVar.new_witness(cs, lambda: 5)
        y = FpVar.new_witness(cs, lambda: 7)
        z = (x + y) * 3 - x + 1 - 2 * y
        assert cs.num_constraints == 0
        assert z.value == FL((5 + 7) * 3 - 5 + 1 - 14)

    def test_product_costs_one_constraint(self) -> None:
        cs = ConstraintSystem(FL)
        x = FpVar.new_witness(cs, lambda: 5)
        y = FpVar.new_input(cs, lambda: 7)
        z = x * y
        assert cs.num_constraints == 1
        assert z.value == FL(35)
        assert cs.is_satisfied()

    def test_negation_wraps(self) -> None:
        cs = ConstraintSystem(FL)
        x = FpVar.new_witness(cs, lambda: 1)
        assert (-x).value == FL(BN254_SCALAR_PRIME - 1)
        (x + (-x)).enforce_equal(0)
        assert cs.is_satisfied()

    def test_rsub(self) -> None:
        cs = ConstraintSystem(FL)
        x = FpVar.new_witness(cs, lambda: 3)
        assert (10 - x).value == FL(7)

    @pytest.mark.parametrize("exponent,constraints", [(0, 0), (1, 0), (2, 1), (5, 3), (7, 4)])
    def test_pow_by_constant(self, exponent: int, constraints: int) -> None:
        cs = ConstraintSystem(FL)
        x = FpVar.new_witness(cs, lambda: 3)
        y = x.pow_by_constant(exponent)
        assert y.value == FL(3) ** exponent
        assert cs.num_constraints == constraints
        assert cs.is_satisfied()

    def test_negative_exponent(self) -> None:
        cs = ConstraintSystem(FL)
        x = FpVar.new_witness(cs, lambda: 3)
        with pytest.raises(ValueError):
            x.pow_by_constant(-1)

    def test_enforce_equal(self) -> None:
        cs = ConstraintSystem(FL)
        x = FpVar.new_witness(cs, lambda: 3)
        y = FpVar.new_input(cs, lambda: 9)
        x.square().enforce_equal(y)
        assert cs.is_satisfied()
        x.enforce_equal(y)
        assert not cs.is_satisfied()

    def test_constant_equality(self) -> None:
        FpVar.constant(FL, 4).enforce_equal(4)
        with pytest.raises(ConstraintError):
            FpVar.constant(FL, 4).enforce_equal(5)

    def test_constants_stay_constant(self) -> None:
        a = FpVar.constant(FL, 6) * FpVar.constant(FL, 7) + 1
        assert a.is_constant
        assert a.value == FL(43)

    def test_mixing_systems_fails(self) -> None:
        x = FpVar.new_witness(ConstraintSystem(FL), lambda: 1)
        y = FpVar.new_witness(ConstraintSystem(FL), lambda: 1)
        with pytest.raises(ConstraintError):
            x + y

    def test_to_bits_le(self, rng: random.Random) -> None:
        cs = ConstraintSystem(FL)
        value = random_element(FL, rng)
        x = FpVar.new_witness(cs, lambda: value)
        bits = x.to_bits_le()
        assert len(bits) == 254
        assert bits_to_int(bits) == int(value)
        assert cs.is_satisfied()

    def test_to_bits_of_max_element(self) -> None:
        cs = ConstraintSystem(FL)
        x = FpVar.new_witness(cs, lambda: BN254_SCALAR_PRIME - 1)
        assert bits_to_int(x.to_bits_le()) == BN254_SCALAR_PRIME - 1
        assert cs.is_satisfied()

    def test_to_bits_constant(self) -> None:
        bits = FpVar.constant(FL, 6).to_bits_le()
        assert all(b.is_constant for b in bits)
        assert bits_to_int(bits) == 6


class TestBoolean:
    """Test bit variables."""

    @pytest.mark.parametrize("a,b", [(False, False), (False, True), (True, False), (True, True)])
    def test_truth_tables(self, a: bool, b: bool) -> None:
        cs = ConstraintSystem(FL)
        x = Boolean.new_witness(cs, lambda: a)
        y = Boolean.new_witness(cs, lambda: b)
        assert x.and_(y).value == (a and b)
        assert x.or_(y).value == (a or b)
        assert x.not_().value == (not a)
        assert cs.is_satisfied()

    def test_booleanity(self) -> None:
        cs = ConstraintSystem(FL)
        var = cs.new_witness(lambda: 2)
        Boolean(True, {var: 1}, cs)._enforce_booleanity()
        assert not cs.is_satisfied()

    def test_and_with_constants_is_free(self) -> None:
        cs = ConstraintSystem(FL)
        x = Boolean.new_witness(cs, lambda: 1)
        before = cs.num_constraints
        assert x.and_(Boolean.constant(True)) is x
        assert x.and_(Boolean.constant(False)).is_constant
        assert cs.num_constraints == before

    def test_enforce_equal(self) -> None:
        cs = ConstraintSystem(FL)
        x = Boolean.new_witness(cs, lambda: 1)
        x.enforce_equal(Boolean.constant(True))
        assert cs.is_satisfied()
        x.enforce_equal(Boolean.constant(False))
        assert not cs.is_satisfied()

    def test_constant_mismatch(self) -> None:
        with pytest.raises(ConstraintError):
            Boolean.constant(True).enforce_equal(Boolean.constant(False))

    def test_le_bits_to_fp(self) -> None:
        cs = ConstraintSystem(FL)
        bits = _bits(cs, 0b1011, 4)
        assert Boolean.le_bits_to_fp(bits, FL).value == FL(11)


class TestComparison:
    """Test enforce_smaller_or_equal_than."""

    @pytest.mark.parametrize("value,ok", [(0, True), (9, True), (10, True), (11, False), (12, False), (15, False)])
    def test_against_bound(self, value: int, ok: bool) -> None:
        cs = ConstraintSystem(FL)
        bits = _bits(cs, value, 4)
        Boolean.enforce_smaller_or_equal_than(bits, 10)
        assert cs.is_satisfied() == ok

    def test_exhaustive_small(self) -> None:
        for bound in range(16):
            for value in range(16):
                cs = ConstraintSystem(FL)
                bits = _bits(cs, value, 4)
                Boolean.enforce_smaller_or_equal_than(bits, bound)
                assert cs.is_satisfied() == (value <= bound), (value, bound)

    def test_trivial_when_bits_cannot_exceed(self) -> None:
        cs = ConstraintSystem(FL)
        bits = _bits(cs, 7, 3)
        before = cs.num_constraints
        Boolean.enforce_smaller_or_equal_than(bits, 7)
        Boolean.enforce_smaller_or_equal_than(bits, 100)
        assert cs.num_constraints == before

    def test_negative_bound(self) -> None:
        with pytest.raises(ValueError):
            Boolean.enforce_smaller_or_equal_than([], -1)


class TestPointVar:
    """Test the curve point gadget."""

    def test_on_curve(self, rng: random.Random) -> None:
        cs = ConstraintSystem(FL)
        point = Point.random(rng)
        var = PointVar.new_witness(cs, lambda: point)
        assert cs.is_satisfied()
        assert cs.num_constraints == 4
        assert var.value == point

    def test_off_curve(self) -> None:
        cs = ConstraintSystem(FL)
        PointVar.new_witness(cs, lambda: Point(FL(1), FL(1)))
        assert not cs.is_satisfied()

    def test_constraint_field(self) -> None:
        cs = ConstraintSystem(FL)
        g = Point.generator()
        var = PointVar.new_witness(cs, lambda: g)
        assert [v.value for v in var.to_constraint_field()] == g.to_field_elements()
