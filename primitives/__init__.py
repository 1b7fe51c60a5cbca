"""Primitives - Fields, Poseidon and the Baby Jubjub curve, outside any circuit."""

from primitives.field import (
    BABYJUBJUB_SUBGROUP_ORDER,
    BN254_SCALAR_PRIME,
    FL,
    FL_BITS,
    FS,
    FS_BITS,
    capacity_bits,
    modulus_bits,
    random_element,
)
from primitives.ntt import NTT
from primitives.poseidon_params import (
    PARAMETER_TABLES,
    ParameterFormatError,
    PoseidonParams,
    get_poseidon_params,
)
from primitives.poseidon import (
    DuplexSponge,
    PoseidonSponge,
    poseidon_hash,
    poseidon_permutation,
)
from primitives.babyjubjub import Point

__all__ = [
    # Field
    "BN254_SCALAR_PRIME",
    "BABYJUBJUB_SUBGROUP_ORDER",
    "FL",
    "FS",
    "FL_BITS",
    "FS_BITS",
    "capacity_bits",
    "modulus_bits",
    "random_element",
    # NTT
    "NTT",
    # Poseidon
    "PARAMETER_TABLES",
    "ParameterFormatError",
    "PoseidonParams",
    "get_poseidon_params",
    "DuplexSponge",
    "PoseidonSponge",
    "poseidon_hash",
    "poseidon_permutation",
    # Curve
    "Point",
]
