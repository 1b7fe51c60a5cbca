"""Groth16 key and proof data structures and serialization.

Group elements are py_ecc optimized_bn128 points (Jacobian coordinates).
Serialized forms use affine coordinates as decimal strings; G2 coordinates
are [c0, c1] pairs over FQ2.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from py_ecc.optimized_bn128 import (
    FQ,
    FQ2,
    FQ12,
    b,
    b2,
    curve_order,
    is_inf,
    is_on_curve,
    multiply,
    normalize,
)

# --- Type Aliases ---
G1Point = Tuple[FQ, FQ, FQ]
G2Point = Tuple[FQ2, FQ2, FQ2]


# --- Key Data Structures ---

@dataclass
class VerifyingKey:
    """Verifier's half of the setup output."""
    alpha_g1: G1Point
    beta_g2: G2Point
    gamma_g2: G2Point
    delta_g2: G2Point
    gamma_abc_g1: List[G1Point]  # one per instance variable
    alpha_beta: FQ12  # e(alpha, beta), precomputed

    @property
    def num_public_inputs(self) -> int:
        return len(self.gamma_abc_g1) - 1


@dataclass
class ProvingKey:
    """Prover's half of the setup output, indexed by z = (instance, witness)."""
    vk: VerifyingKey
    beta_g1: G1Point
    delta_g1: G1Point
    a_query: List[G1Point] = field(default_factory=list)
    b_g1_query: List[G1Point] = field(default_factory=list)
    b_g2_query: List[G2Point] = field(default_factory=list)
    h_query: List[G1Point] = field(default_factory=list)  # tau^j * Z(tau) / delta
    l_query: List[G1Point] = field(default_factory=list)  # witness variables only
    num_instance: int = 0
    num_witness: int = 0
    num_constraints: int = 0
    domain_size: int = 0


# --- Proof ---

@dataclass
class Proof:
    a: G1Point
    b: G2Point
    c: G1Point

    def to_dict(self) -> Dict[str, Any]:
        return {"a": _g1_to_list(self.a), "b": _g2_to_list(self.b), "c": _g1_to_list(self.c)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Proof":
        """Parse a serialized proof.

        Raises:
            ValueError: If a point is malformed or fails the curve or subgroup check
        """
        try:
            return cls(
                a=_g1_from_list(data["a"]),
                b=_g2_from_list(data["b"]),
                c=_g1_from_list(data["c"]),
            )
        except (KeyError, TypeError, IndexError) as e:
            raise ValueError(f"Malformed proof: {e}") from e


# --- Point Serialization ---

def _g1_to_list(point: G1Point) -> List[str]:
    x, y = normalize(point)
    return [str(x.n), str(y.n)]


def _g2_to_list(point: G2Point) -> List[List[str]]:
    x, y = normalize(point)
    return [[str(c) for c in x.coeffs], [str(c) for c in y.coeffs]]


def _g1_from_list(coords: List[str]) -> G1Point:
    point = (FQ(int(coords[0])), FQ(int(coords[1])), FQ.one())
    if not is_on_curve(point, b):
        raise ValueError("G1 point is not on the curve")
    return point


def _g2_from_list(coords: List[List[str]]) -> G2Point:
    x = FQ2([int(c) for c in coords[0]])
    y = FQ2([int(c) for c in coords[1]])
    point = (x, y, FQ2.one())
    if not is_on_curve(point, b2):
        raise ValueError("G2 point is not on the curve")
    if not is_inf(multiply(point, curve_order)):
        raise ValueError("G2 point is not in the prime-order subgroup")
    return point
