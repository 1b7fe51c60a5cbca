"""Multi-scalar multiplication over py_ecc optimized_bn128 groups."""

from typing import Optional, Sequence

from py_ecc.optimized_bn128 import Z1, Z2, add, curve_order, multiply


def msm(points: Sequence[Optional[tuple]], scalars: Sequence[int], zero=Z1):
    """sum(scalar_i * point_i), skipping zero scalars and absent (None) points."""
    if len(points) != len(scalars):
        raise ValueError(f"{len(points)} points but {len(scalars)} scalars")
    acc = zero
    for point, scalar in zip(points, scalars):
        scalar %= curve_order
        if scalar == 0 or point is None:
            continue
        acc = add(acc, multiply(point, scalar))
    return acc


def msm_g2(points, scalars):
    return msm(points, scalars, zero=Z2)
