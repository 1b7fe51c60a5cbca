"""Circuit gadgets: native field variables, bits, nonnative limbs, sponge and curve points."""

from gadgets.fp import FpVar
from gadgets.boolean import Boolean
from gadgets.nonnative import (
    DEFAULT_NONNATIVE_PARAMS,
    NonNativeParams,
    NonNativeVar,
    enforce_native_equal,
)
from gadgets.sponge import PoseidonSpongeVar
from gadgets.curve import PointVar

__all__ = [
    "FpVar",
    "Boolean",
    "NonNativeParams",
    "NonNativeVar",
    "DEFAULT_NONNATIVE_PARAMS",
    "enforce_native_equal",
    "PoseidonSpongeVar",
    "PointVar",
]
