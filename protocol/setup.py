"""Groth16 circuit-specific setup over BN254."""

import logging
import random
from typing import List, Tuple

from py_ecc.optimized_bn128 import G1, G2, curve_order, multiply, pairing

from constraints.base import ConstraintSynthesizer
from protocol.proof import G1Point, ProvingKey, VerifyingKey
from protocol.qap import QAP, build_constraint_system

logger = logging.getLogger(__name__)


def _random_scalar(rng: random.Random) -> int:
    return rng.randrange(1, curve_order)


def _g1_vector(scalars: List[int]) -> List[G1Point]:
    return [multiply(G1, s) if s else None for s in scalars]


def setup(circuit: ConstraintSynthesizer, rng: random.Random) -> Tuple[ProvingKey, VerifyingKey]:
    """
    Generate proving and verifying keys for the circuit's constraint shape.

    The circuit's values only drive synthesis; the keys depend on its shape
    (constraint matrices and variable counts) alone.

    Args:
        circuit: Any instance of the circuit to set up
        rng: Source of the toxic waste (tau, alpha, beta, gamma, delta)

    Returns:
        (ProvingKey, VerifyingKey)
    """
    cs = build_constraint_system(circuit)
    qap = QAP.from_constraint_system(cs)

    while True:
        tau = _random_scalar(rng)
        if pow(tau, qap.domain_size, curve_order) != 1:
            break
    alpha, beta, gamma, delta = (_random_scalar(rng) for _ in range(4))

    a_tau, b_tau, c_tau, z_tau = qap.evaluate_at(tau)
    gamma_inv = pow(gamma, -1, curve_order)
    delta_inv = pow(delta, -1, curve_order)

    # beta * A_i + alpha * B_i + C_i, split by instance/witness
    combined = [
        (beta * a + alpha * b + c) % curve_order
        for a, b, c in zip(a_tau, b_tau, c_tau)
    ]
    n_inst = qap.num_instance

    alpha_g1 = multiply(G1, alpha)
    beta_g2 = multiply(G2, beta)

    vk = VerifyingKey(
        alpha_g1=alpha_g1,
        beta_g2=beta_g2,
        gamma_g2=multiply(G2, gamma),
        delta_g2=multiply(G2, delta),
        gamma_abc_g1=[multiply(G1, v * gamma_inv % curve_order) for v in combined[:n_inst]],
        alpha_beta=pairing(beta_g2, alpha_g1),
    )

    h_scalars = []
    power = z_tau * delta_inv % curve_order
    for _ in range(qap.domain_size - 1):
        h_scalars.append(power)
        power = power * tau % curve_order

    pk = ProvingKey(
        vk=vk,
        beta_g1=multiply(G1, beta),
        delta_g1=multiply(G1, delta),
        a_query=_g1_vector(a_tau),
        b_g1_query=_g1_vector(b_tau),
        b_g2_query=[multiply(G2, s) if s else None for s in b_tau],
        h_query=_g1_vector(h_scalars),
        l_query=_g1_vector([v * delta_inv % curve_order for v in combined[n_inst:]]),
        num_instance=n_inst,
        num_witness=qap.num_witness,
        num_constraints=qap.num_constraints,
        domain_size=qap.domain_size,
    )
    logger.debug(
        "Groth16 setup: %d constraints, domain %d, %d public inputs",
        qap.num_constraints, qap.domain_size, vk.num_public_inputs,
    )
    return pk, vk
