"""BN254 scalar field GF(r) and the Baby Jubjub scalar field GF(l).

Uses galois library for all field arithmetic. FL and FS are the field types.

FL is the native field of every constraint system in this package (the
scalar field of the BN254 pairing curve). FS is the prime-order subgroup
order of Baby Jubjub, a twisted Edwards curve defined over FL. FS is strictly
smaller than FL, so FS values are carried inside FL circuits by the nonnative
bridge.

Both fields are built with an explicit primitive element and verify=False:
deriving the primitive element would factor p - 1, which takes minutes for
254-bit primes.
"""

import random
from typing import List

import galois

# --- Field Construction ---

BN254_SCALAR_PRIME = 21888242871839275222246405745257275088548364400416034343698204186575808495617
BABYJUBJUB_SUBGROUP_ORDER = 2736030358979909402780800718157159386076813972158567259200215660948447373041

FL = galois.GF(BN254_SCALAR_PRIME, primitive_element=5, verify=False)
"""Native field GF(r) - BN254 scalar field, Baby Jubjub base field."""

FS = galois.GF(BABYJUBJUB_SUBGROUP_ORDER, primitive_element=31, verify=False)
"""Embedded field GF(l) - Baby Jubjub prime-order subgroup scalars."""

FL_BITS = BN254_SCALAR_PRIME.bit_length()
FS_BITS = BABYJUBJUB_SUBGROUP_ORDER.bit_length()


# --- Helpers ---

def modulus_bits(field) -> int:
    """Return the bit length of the field's characteristic."""
    return int(field.characteristic).bit_length()


def capacity_bits(field) -> int:
    """Number of bits that always fit in a field element (bits(p) - 1)."""
    return modulus_bits(field) - 1


def to_bits_le(value: int, n_bits: int) -> List[bool]:
    """Little-endian bit decomposition of a non-negative integer, truncated to n_bits."""
    value = int(value)
    return [bool((value >> i) & 1) for i in range(n_bits)]


def from_bits_le(bits) -> int:
    """Reassemble a little-endian bit sequence into an integer."""
    acc = 0
    for i, bit in enumerate(bits):
        if bit:
            acc |= 1 << i
    return acc


def random_element(field, rng: random.Random):
    """Sample a uniform field element from an explicit random source."""
    return field(rng.randrange(int(field.order)))


def root_of_unity(n: int):
    """Return a primitive n-th root of unity in FL (n must be a power of 2)."""
    assert n > 0 and (n & (n - 1)) == 0, "Domain size must be power of 2"
    if (BN254_SCALAR_PRIME - 1) % n != 0:
        raise ValueError(f"FL has no subgroup of order {n}")
    return FL(5) ** ((BN254_SCALAR_PRIME - 1) // n)
