"""
Poseidon permutation and duplex sponge over the BN254 scalar field.

The duplex bookkeeping lives in DuplexSponge and is shared with the
in-circuit sponge (gadgets/sponge.py), so both sides absorb, permute and
squeeze in exactly the same order.

State layout: [capacity lanes | rate lanes]. Absorbed elements are added into
the rate lanes; squeezed elements are read from them.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Sequence

import numpy as np

from primitives.field import FL, capacity_bits, from_bits_le, to_bits_le
from primitives.poseidon_params import PoseidonParams


def poseidon_permutation(state: np.ndarray, params: PoseidonParams) -> np.ndarray:
    """
    Apply the full Poseidon permutation to a width-element FL array.

    Every round adds its round constants to all lanes, applies the S-box
    (all lanes in full rounds, lane 0 in partial rounds) and multiplies by
    the MDS matrix. Half of the full rounds run before the partial rounds,
    half after.
    """
    if len(state) != params.width:
        raise ValueError(f"state must have {params.width} elements, got {len(state)}")

    state = FL(state).copy()
    half_full = params.full_rounds // 2
    for r in range(params.num_rounds):
        state = state + params.ark[r]
        if r < half_full or r >= half_full + params.partial_rounds:
            state = state ** params.alpha
        else:
            state[0] = state[0] ** params.alpha
        state = params.mds @ state
    return state


class SpongeMode(Enum):
    ABSORBING = "absorbing"
    SQUEEZING = "squeezing"


class DuplexSponge(ABC):
    """
    Duplex sponge bookkeeping, independent of how the state is represented.

    Attributes:
        params: Poseidon parameters (rate, capacity, permutation)
        state: Sequence of width lane values, indexable and assignable
        mode: Whether the sponge last absorbed or squeezed
        next_index: Next rate lane to absorb into / squeeze from
    """

    def __init__(self, params: PoseidonParams):
        self.params = params
        self.state = self._initial_state()
        self.mode = SpongeMode.ABSORBING
        self.next_index = 0

    @abstractmethod
    def _initial_state(self):
        """Return the all-zero state."""

    @abstractmethod
    def permute(self) -> None:
        """Apply the permutation to self.state in place."""

    def _absorb_elements(self, elements: Sequence) -> None:
        if len(elements) == 0:
            return
        rate = self.params.rate
        if self.mode is SpongeMode.SQUEEZING or self.next_index == rate:
            self.permute()
            start = 0
        else:
            start = self.next_index

        capacity = self.params.capacity
        remaining = list(elements)
        while True:
            if start + len(remaining) <= rate:
                for i, elem in enumerate(remaining):
                    self.state[capacity + start + i] = self.state[capacity + start + i] + elem
                self.mode = SpongeMode.ABSORBING
                self.next_index = start + len(remaining)
                return
            n_absorbed = rate - start
            for i in range(n_absorbed):
                self.state[capacity + start + i] = self.state[capacity + start + i] + remaining[i]
            self.permute()
            remaining = remaining[n_absorbed:]
            start = 0

    def _squeeze_elements(self, count: int) -> List:
        if count == 0:
            return []
        rate = self.params.rate
        if self.mode is SpongeMode.ABSORBING or self.next_index == rate:
            self.permute()
            start = 0
        else:
            start = self.next_index

        capacity = self.params.capacity
        output = []
        while True:
            needed = count - len(output)
            if start + needed <= rate:
                output.extend(self.state[capacity + start + i] for i in range(needed))
                self.mode = SpongeMode.SQUEEZING
                self.next_index = start + needed
                return output
            output.extend(self.state[capacity + i] for i in range(start, rate))
            self.permute()
            start = 0


class PoseidonSponge(DuplexSponge):
    """Out-of-circuit Poseidon sponge."""

    def _initial_state(self) -> np.ndarray:
        return FL.Zeros(self.params.width)

    def permute(self) -> None:
        self.state = poseidon_permutation(self.state, self.params)

    def absorb(self, item) -> None:
        """
        Absorb field elements.

        Args:
            item: Sequence of FL elements / ints, or an object exposing
                to_field_elements() (e.g. a curve point)
        """
        if hasattr(item, "to_field_elements"):
            item = item.to_field_elements()
        self._absorb_elements([FL(int(e) % FL.order) for e in item])

    def absorb_bits(self, bits: Sequence[bool]) -> None:
        """Absorb bits packed little-endian into chunks of capacity_bits(FL)."""
        chunk = capacity_bits(FL)
        self._absorb_elements([FL(from_bits_le(bits[i:i + chunk])) for i in range(0, len(bits), chunk)])

    def squeeze(self, count: int) -> np.ndarray:
        """Squeeze count FL elements."""
        return FL([int(e) for e in self._squeeze_elements(count)]) if count else FL.Zeros(0)

    def squeeze_bits(self, count: int) -> List[bool]:
        """Squeeze count bits, taking the low capacity_bits(FL) bits of each element."""
        usable = capacity_bits(FL)
        n_elems = -(-count // usable)
        bits: List[bool] = []
        for elem in self._squeeze_elements(n_elems):
            bits.extend(to_bits_le(int(elem), usable))
        return bits[:count]

    def squeeze_small_field_elements(self, count: int, field) -> np.ndarray:
        """Squeeze count elements of a smaller field, capacity_bits(field) bits each."""
        usable = capacity_bits(field)
        bits = self.squeeze_bits(count * usable)
        return field([from_bits_le(bits[i * usable:(i + 1) * usable]) for i in range(count)])


def poseidon_hash(params: PoseidonParams, item, n_outputs: int = 1) -> np.ndarray:
    """Absorb item into a fresh sponge and squeeze n_outputs elements."""
    sponge = PoseidonSponge(params)
    sponge.absorb(item)
    return sponge.squeeze(n_outputs)
