"""Grain LFSR derivation of Poseidon round constants and MDS matrices.

Implements the parameter generation procedure from the Poseidon reference
scripts (generate_parameters_grain): an 80-bit Grain LFSR seeded with the
instance description, self-shrinking output, rejection sampling for round
constants and a Cauchy matrix for the MDS layer.

The output is deterministic in (prime, width, full_rounds, partial_rounds),
which is what makes a derived table reproducible across machines.
"""

from collections import deque
from typing import Dict, Iterator, List

# Instance tags from the reference script
FIELD_PRIME = 1
SBOX_POWER = 0

_STATE_BITS = 80
_WARMUP_ROUNDS = 160


def _int_bits(value: int, width: int) -> List[int]:
    """Big-endian bits of value, zero-filled to width."""
    return [int(c) for c in format(value, f"0{width}b")]


class GrainLFSR:
    """Self-shrinking Grain LFSR used by the Poseidon parameter generator."""

    def __init__(self, field_bits: int, width: int, full_rounds: int, partial_rounds: int):
        seed = (
            _int_bits(FIELD_PRIME, 2)
            + _int_bits(SBOX_POWER, 4)
            + _int_bits(field_bits, 12)
            + _int_bits(width, 12)
            + _int_bits(full_rounds, 10)
            + _int_bits(partial_rounds, 10)
            + [1] * 30
        )
        assert len(seed) == _STATE_BITS
        self._state = deque(seed, maxlen=_STATE_BITS)
        for _ in range(_WARMUP_ROUNDS):
            self._step()

    def _step(self) -> int:
        s = self._state
        new_bit = s[62] ^ s[51] ^ s[38] ^ s[23] ^ s[13] ^ s[0]
        s.append(new_bit)
        return new_bit

    def bits(self) -> Iterator[int]:
        """Yield output bits: from each pair, emit the second bit iff the first is 1."""
        while True:
            first = self._step()
            while first == 0:
                self._step()
                first = self._step()
            yield self._step()

    def random_int(self, n_bits: int) -> int:
        """Read n_bits output bits as a big-endian integer."""
        gen = self.bits()
        acc = 0
        for _ in range(n_bits):
            acc = (acc << 1) | next(gen)
        return acc


def derive_poseidon_table(
    prime: int,
    width: int,
    full_rounds: int,
    partial_rounds: int,
    alpha: int = 5,
) -> Dict[str, object]:
    """Derive a Poseidon parameter table in the JSON layout read by poseidon_params.

    Round constants are rejection sampled below the prime. The MDS matrix is
    the Cauchy matrix M[i][j] = 1 / (x_i + y_j) over 2 * width distinct
    samples reduced mod p.

    Returns:
        Mapping with decimal-string entries, ready for json.dump
    """
    n_bits = prime.bit_length()
    lfsr = GrainLFSR(n_bits, width, full_rounds, partial_rounds)

    ark = []
    for _ in range((full_rounds + partial_rounds) * width):
        candidate = lfsr.random_int(n_bits)
        while candidate >= prime:
            candidate = lfsr.random_int(n_bits)
        ark.append(candidate)

    while True:
        samples = [lfsr.random_int(n_bits) % prime for _ in range(2 * width)]
        while len(set(samples)) != len(samples):
            samples = [lfsr.random_int(n_bits) % prime for _ in range(2 * width)]
        xs, ys = samples[:width], samples[width:]
        if all((x + y) % prime != 0 for x in xs for y in ys):
            break

    mds = [[pow(x + y, prime - 2, prime) for y in ys] for x in xs]

    return {
        "full_rounds": full_rounds,
        "partial_rounds": partial_rounds,
        "alpha": alpha,
        "capacity": 1,
        "mds": [[str(v) for v in row] for row in mds],
        "ark": [str(v) for v in ark],
    }
