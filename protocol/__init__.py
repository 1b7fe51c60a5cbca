"""Protocol - Groth16 over BN254 for the circuits in constraints/."""

from protocol.qap import QAP, build_constraint_system
from protocol.proof import Proof, ProvingKey, VerifyingKey
from protocol.setup import setup
from protocol.prover import prove
from protocol.verifier import verify

__all__ = [
    # QAP
    "QAP",
    "build_constraint_system",
    # Keys and proofs
    "Proof",
    "ProvingKey",
    "VerifyingKey",
    # Groth16
    "setup",
    "prove",
    "verify",
]
