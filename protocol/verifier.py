"""Groth16 verifier.

Checks e(A, B) = e(alpha, beta) * e(IC, gamma) * e(C, delta), where IC is
the commitment to the public inputs built from the verifying key.
"""

import logging
from typing import Sequence

from py_ecc.optimized_bn128 import add, pairing

from protocol.msm import msm
from protocol.proof import Proof, VerifyingKey

logger = logging.getLogger(__name__)


def verify(vk: VerifyingKey, public_inputs: Sequence, proof: Proof) -> bool:
    """
    Verify a proof against public inputs (excluding the constant one).

    Raises:
        ValueError: If the number of public inputs does not match the key
    """
    if len(public_inputs) != vk.num_public_inputs:
        raise ValueError(
            f"Expected {vk.num_public_inputs} public inputs, got {len(public_inputs)}"
        )

    inputs = [1] + [int(x) for x in public_inputs]
    ic = msm(vk.gamma_abc_g1, inputs)

    lhs = pairing(proof.b, proof.a)
    rhs = vk.alpha_beta * pairing(vk.gamma_g2, ic) * pairing(vk.delta_g2, proof.c)
    ok = lhs == rhs
    if not ok:
        logger.debug("Groth16 pairing check failed")
    return ok
