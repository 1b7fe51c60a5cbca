"""
In-circuit Poseidon sponge.

PoseidonSpongeVar reuses the duplex bookkeeping of the native sponge, so a
sequence of absorb/squeeze calls produces the same lanes in the same order
as PoseidonSponge on the plain values.

Constraint cost per permutation: round constants and the MDS layer are
linear; every S-box x^alpha costs one constraint per square-and-multiply
step (3 for alpha = 5).
"""

import logging
from typing import List, Sequence

from constraints.base import ConstraintError, ConstraintSystem
from gadgets.boolean import Boolean
from gadgets.fp import FpVar
from gadgets.nonnative import NonNativeParams, NonNativeVar
from primitives.field import capacity_bits
from primitives.poseidon import DuplexSponge
from primitives.poseidon_params import PoseidonParams

logger = logging.getLogger(__name__)


class PoseidonSpongeVar(DuplexSponge):
    """Poseidon sponge whose state lanes are FpVars of one constraint system."""

    def __init__(self, cs: ConstraintSystem, params: PoseidonParams):
        self.cs = cs
        self._mds = [[int(v) for v in row] for row in params.mds]
        self._ark = [[int(v) for v in row] for row in params.ark]
        super().__init__(params)

    def _initial_state(self) -> List[FpVar]:
        return [FpVar.constant(self.cs.field, 0) for _ in range(self.params.width)]

    # --- Permutation ---

    def permute(self) -> None:
        params = self.params
        half_full = params.full_rounds // 2
        before = self.cs.num_constraints
        with self.cs.namespace("poseidon"):
            state = self.state
            for r in range(params.num_rounds):
                state = [lane + c for lane, c in zip(state, self._ark[r])]
                if r < half_full or r >= half_full + params.partial_rounds:
                    state = [lane.pow_by_constant(params.alpha) for lane in state]
                else:
                    state[0] = state[0].pow_by_constant(params.alpha)
                state = self._apply_mds(state)
        self.state = state
        logger.debug("Poseidon permutation: %d constraints", self.cs.num_constraints - before)

    def _apply_mds(self, state: List[FpVar]) -> List[FpVar]:
        out = []
        for row in self._mds:
            acc = FpVar.constant(self.cs.field, 0)
            for coeff, lane in zip(row, state):
                acc = acc + lane * coeff
            out.append(acc)
        return out

    # --- Absorb ---

    def absorb(self, elements: Sequence[FpVar]) -> None:
        """Absorb in-circuit F_large variables (or objects exposing to_constraint_field())."""
        if hasattr(elements, "to_constraint_field"):
            elements = elements.to_constraint_field()
        for elem in elements:
            if not isinstance(elem, FpVar):
                raise ConstraintError(f"Cannot absorb {type(elem).__name__} into an in-circuit sponge")
            if elem.cs is not None and elem.cs is not self.cs:
                raise ConstraintError("Absorbed variable belongs to a different constraint system")
        self._absorb_elements(list(elements))

    def absorb_bits(self, bits: Sequence[Boolean]) -> None:
        """Absorb Booleans packed little-endian into capacity_bits(field)-bit chunks."""
        chunk = capacity_bits(self.cs.field)
        self._absorb_elements([
            Boolean.le_bits_to_fp(bits[i:i + chunk], self.cs.field)
            for i in range(0, len(bits), chunk)
        ])

    # --- Squeeze ---

    def squeeze(self, count: int) -> List[FpVar]:
        """Squeeze count in-circuit F_large variables."""
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        return self._squeeze_elements(count)

    def squeeze_bits(self, count: int) -> List[Boolean]:
        """Squeeze count bits: the low capacity_bits(field) bits of each squeezed lane."""
        usable = capacity_bits(self.cs.field)
        n_elems = -(-count // usable)
        bits: List[Boolean] = []
        for elem in self._squeeze_elements(n_elems):
            bits.extend(elem.to_bits_le()[:usable])
        return bits[:count]

    def squeeze_nonnative(self, count: int, params: NonNativeParams) -> List[NonNativeVar]:
        """Squeeze count elements of the nonnative target field.

        Each element is built from capacity_bits(target) squeezed bits, matching
        PoseidonSponge.squeeze_small_field_elements.
        """
        usable = capacity_bits(params.target_field)
        bits = self.squeeze_bits(count * usable)
        return [
            NonNativeVar.from_bits(bits[i * usable:(i + 1) * usable], params)
            for i in range(count)
        ]
