"""Poseidon preimage verification.

Proves knowledge of a Baby Jubjub point whose Poseidon hash (absorb [x, y],
squeeze one element) equals a public value.
"""

import logging
from dataclasses import dataclass
from typing import List

from constraints.base import ConstraintSynthesizer, ConstraintSystem
from gadgets.curve import PointVar
from gadgets.fp import FpVar
from gadgets.sponge import PoseidonSpongeVar
from primitives.babyjubjub import Point
from primitives.field import FL
from primitives.poseidon import poseidon_hash
from primitives.poseidon_params import PoseidonParams

logger = logging.getLogger(__name__)


def compute_hash(params: PoseidonParams, point: Point) -> FL:
    """Out-of-circuit hash the circuit checks against."""
    return poseidon_hash(params, point, 1)[0]


@dataclass(frozen=True, eq=False)
class PreimageVerification(ConstraintSynthesizer):
    """
    Attributes:
        params: Poseidon parameters shared by the native and in-circuit sponge
        point: Private preimage
        hash: Public hash value
    """
    params: PoseidonParams
    point: Point
    hash: FL

    def generate_constraints(self, cs: ConstraintSystem) -> None:
        sponge = PoseidonSpongeVar(cs, self.params)

        with cs.namespace("hash"):
            hash_var = FpVar.new_input(cs, lambda: self.hash)
        point_var = PointVar.new_witness(cs, lambda: self.point)

        sponge.absorb(point_var.to_constraint_field())
        squeezed = sponge.squeeze(1)[0]
        with cs.namespace("hash_equal"):
            squeezed.enforce_equal(hash_var)

        logger.debug("PreimageVerification: %s", cs.summary())

    def public_inputs(self) -> List[FL]:
        return [self.hash]
