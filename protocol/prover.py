"""Groth16 prover."""

import logging
import random

from py_ecc.optimized_bn128 import add, curve_order, multiply, neg

from constraints.base import ConstraintSynthesizer
from protocol.msm import msm, msm_g2
from protocol.proof import Proof, ProvingKey
from protocol.qap import QAP, build_constraint_system

logger = logging.getLogger(__name__)


def prove(pk: ProvingKey, circuit: ConstraintSynthesizer, rng: random.Random) -> Proof:
    """
    Prove that the circuit's assignment satisfies its constraints.

    Args:
        pk: Proving key from setup() for this circuit's shape
        circuit: Circuit instance carrying the witness and public inputs
        rng: Source of the blinding scalars r and s

    Raises:
        ValueError: If the assignment is unsatisfied or the circuit shape
            does not match the proving key
        ConstraintError: If constraint generation fails
    """
    cs = build_constraint_system(circuit)
    if (cs.num_constraints, cs.num_instance_variables, cs.num_witness_variables) != (
        pk.num_constraints, pk.num_instance, pk.num_witness
    ):
        raise ValueError(
            f"Circuit shape ({cs.summary()}) does not match the proving key "
            f"({pk.num_constraints} constraints, {pk.num_instance} instance, "
            f"{pk.num_witness} witness variables)"
        )
    unsatisfied = cs.which_is_unsatisfied()
    if unsatisfied is not None:
        raise ValueError(f"Cannot prove an unsatisfied constraint system (first failure: {unsatisfied})")

    z = cs.full_assignment()
    h = QAP.from_constraint_system(cs).compute_h(z)

    r = rng.randrange(1, curve_order)
    s = rng.randrange(1, curve_order)
    vk = pk.vk

    # A = alpha + sum z_i A_i(tau) + r * delta
    a = add(add(vk.alpha_g1, msm(pk.a_query, z)), multiply(pk.delta_g1, r))

    # B = beta + sum z_i B_i(tau) + s * delta, in both groups
    b_g2 = add(add(vk.beta_g2, msm_g2(pk.b_g2_query, z)), multiply(vk.delta_g2, s))
    b_g1 = add(add(pk.beta_g1, msm(pk.b_g1_query, z)), multiply(pk.delta_g1, s))

    # C = sum_witness z_i L_i + h(tau) Z(tau) / delta + s * A + r * B - r * s * delta
    c = msm(pk.l_query, z[pk.num_instance:])
    c = add(c, msm(pk.h_query, h))
    c = add(c, multiply(a, s))
    c = add(c, multiply(b_g1, r))
    c = add(c, neg(multiply(pk.delta_g1, r * s % curve_order)))

    logger.debug("Groth16 proof generated for %s", cs.summary())
    return Proof(a=a, b=b_g2, c=c)
