"""Tests for the cross-field sum circuit."""

import logging
import random

import pytest

from constraints.base import ConstraintSystem
from constraints.sum_verification import SumVerification
from gadgets.nonnative import NonNativeParams
from primitives.field import BABYJUBJUB_SUBGROUP_ORDER, FL, FS, random_element

L = BABYJUBJUB_SUBGROUP_ORDER


def _generate(circuit) -> ConstraintSystem:
    cs = ConstraintSystem(FL)
    circuit.generate_constraints(cs)
    return cs


class TestSumVerification:
    """Satisfiability of a + b = sum across fields."""

    def test_sum_correctness(self) -> None:
        cs = _generate(SumVerification(FS(4), FS(8), FL(12)))
        assert cs.is_satisfied(), cs.which_is_unsatisfied()

    def test_wrong_sum(self) -> None:
        cs = _generate(SumVerification(FS(4), FS(8), FL(13)))
        assert not cs.is_satisfied()

    def test_sum_with_high_bits_set(self) -> None:
        cs = _generate(SumVerification(FS(4), FS(8), FL(12 + 2**251)))
        assert not cs.is_satisfied()

    def test_random(self, rng: random.Random) -> None:
        for _ in range(3):
            a, b = random_element(FS, rng), random_element(FS, rng)
            total = int(a + b)
            assert _generate(SumVerification(a, b, FL(total))).is_satisfied()
            assert not _generate(SumVerification(a, b, FL(total + 1))).is_satisfied()

    def test_wraps_modulo_small_field(self) -> None:
        cs = _generate(SumVerification(FS(L - 1), FS(2), FL(1)))
        assert cs.is_satisfied()

    def test_narrow_limbs(self) -> None:
        circuit = SumVerification(FS(4), FS(8), FL(12), nonnative_params=NonNativeParams(limb_bits=32))
        assert _generate(circuit).is_satisfied()

    def test_public_inputs(self) -> None:
        circuit = SumVerification(FS(4), FS(8), FL(12))
        cs = _generate(circuit)
        assert circuit.public_inputs() == [FL(12)]
        assert cs.num_instance_variables == 2


class TestCrossCheck:
    """The plain-value comparison outside the circuit."""

    def test_mismatch_logs_warning(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="constraints.sum_verification"):
            _generate(SumVerification(FS(4), FS(8), FL(13)))
        assert "does not match" in caplog.text

    def test_match_is_silent(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="constraints.sum_verification"):
            _generate(SumVerification(FS(4), FS(8), FL(12)))
        assert caplog.text == ""

    def test_strict_mismatch_raises(self) -> None:
        with pytest.raises(ValueError, match="does not match"):
            _generate(SumVerification(FS(4), FS(8), FL(13), strict_cross_check=True))

    def test_strict_match(self) -> None:
        assert _generate(SumVerification(FS(4), FS(8), FL(12), strict_cross_check=True)).is_satisfied()

    def test_adds_no_constraints(self) -> None:
        lenient = _generate(SumVerification(FS(4), FS(8), FL(12)))
        strict = _generate(SumVerification(FS(4), FS(8), FL(12), strict_cross_check=True))
        assert lenient.num_constraints == strict.num_constraints
