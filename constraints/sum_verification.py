"""Cross-field sum: a + b = sum with a, b in F_small and sum in F_large.

a and b are private nonnative witnesses; sum is a public native input. The
nonnative result is compared with sum bit by bit over the 251 bits both
fields share, and the top bits of sum are forced to zero, so the only
satisfying sum is the canonical F_small value of a + b.

The plain-value comparison after reduction into F_large runs outside the
circuit. It emits no constraints and only catches modeling mistakes before
proving.
"""

import logging
from dataclasses import dataclass
from typing import List

from constraints.base import ConstraintSynthesizer, ConstraintSystem
from gadgets.boolean import Boolean
from gadgets.fp import FpVar
from gadgets.nonnative import (
    DEFAULT_NONNATIVE_PARAMS,
    NonNativeParams,
    NonNativeVar,
    enforce_native_equal,
)
from primitives.field import FL, FS

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class SumVerification(ConstraintSynthesizer):
    """
    Attributes:
        a: Private F_small summand
        b: Private F_small summand
        sum: Public F_large claimed sum
        nonnative_params: Limb layout for a and b
        strict_cross_check: Raise ValueError (instead of logging a warning)
            when the plain-value cross-check fails
    """
    a: FS
    b: FS
    sum: FL
    nonnative_params: NonNativeParams = DEFAULT_NONNATIVE_PARAMS
    strict_cross_check: bool = False

    def generate_constraints(self, cs: ConstraintSystem) -> None:
        params = self.nonnative_params

        with cs.namespace("sum"):
            sum_var = FpVar.new_input(cs, lambda: self.sum)
        with cs.namespace("a"):
            a_var = NonNativeVar.new_witness(cs, lambda: self.a, params)
        with cs.namespace("b"):
            b_var = NonNativeVar.new_witness(cs, lambda: self.b, params)

        result = a_var.add(b_var)

        with cs.namespace("bits_equal"):
            sum_bits = enforce_native_equal(sum_var, result)
            for bit in sum_bits[params.modulus_bits:]:
                bit.enforce_equal(Boolean.constant(False))

        self._cross_check(result)
        logger.debug("SumVerification: %s", cs.summary())

    def _cross_check(self, result: NonNativeVar) -> None:
        native = result.to_native_value()
        if int(native) == int(self.sum) % int(FL.characteristic):
            return
        message = f"Nonnative sum {int(native)} does not match public sum {int(self.sum)}"
        if self.strict_cross_check:
            raise ValueError(message)
        logger.warning(message)

    def public_inputs(self) -> List[FL]:
        return [self.sum]
