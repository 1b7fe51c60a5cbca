"""End-to-end Groth16 tests over BN254.

Uses the reduced-round preimage circuit so setup and proving stay fast.
"""

import random

import pytest

from constraints.base import ConstraintSystem
from constraints.preimage_verification import PreimageVerification, compute_hash
from primitives.babyjubjub import Point
from primitives.field import BN254_SCALAR_PRIME, FL, random_element
from protocol import QAP, Proof, build_constraint_system, prove, setup, verify


@pytest.fixture(scope="module")
def preimage_setup():
    """Keys for the toy preimage circuit plus one valid instance."""
    from primitives.poseidon_params import get_poseidon_params

    rng = random.Random(2024)
    params = get_poseidon_params("toy-x5-3")
    point = Point.random(rng)
    circuit = PreimageVerification(params, point, compute_hash(params, point))
    pk, vk = setup(circuit, rng)
    return params, circuit, pk, vk


class TestQAP:
    """Test the R1CS to QAP reduction."""

    def test_domain_covers_rows(self, toy_params) -> None:
        g = Point.generator()
        cs = build_constraint_system(PreimageVerification(toy_params, g, compute_hash(toy_params, g)))
        qap = QAP.from_constraint_system(cs)
        assert qap.domain_size >= cs.num_constraints + cs.num_instance_variables
        assert qap.domain_size & (qap.domain_size - 1) == 0

    def test_lagrange_basis(self) -> None:
        cs = ConstraintSystem(FL)
        x = cs.new_witness(lambda: 3)
        cs.enforce({x: 1}, {x: 1}, {x: 3})
        qap = QAP.from_constraint_system(cs)
        omega = int(qap.ntt.omega)
        tau = 123456789
        values = qap.lagrange_at(tau)
        # Interpolating the identity: sum L_k(tau) * omega^k == tau
        acc = sum(v * pow(omega, k, BN254_SCALAR_PRIME) for k, v in enumerate(values)) % BN254_SCALAR_PRIME
        assert acc == tau
        assert sum(values) % BN254_SCALAR_PRIME == 1

    def test_lagrange_rejects_domain_point(self) -> None:
        cs = ConstraintSystem(FL)
        qap = QAP.from_constraint_system(cs)
        with pytest.raises(ValueError):
            qap.lagrange_at(1)

    def test_divisibility(self, toy_params, rng: random.Random) -> None:
        """A(tau) * B(tau) - C(tau) == h(tau) * Z(tau) at a random point."""
        point = Point.random(rng)
        cs = build_constraint_system(PreimageVerification(toy_params, point, compute_hash(toy_params, point)))
        qap = QAP.from_constraint_system(cs)
        z = cs.full_assignment()
        h = qap.compute_h(z)

        tau = int(random_element(FL, rng))
        a_tau, b_tau, c_tau, z_tau = qap.evaluate_at(tau)
        p = BN254_SCALAR_PRIME
        a = sum(zi * ai for zi, ai in zip(z, a_tau)) % p
        b = sum(zi * bi for zi, bi in zip(z, b_tau)) % p
        c = sum(zi * ci for zi, ci in zip(z, c_tau)) % p
        h_tau = sum(hj * pow(tau, j, p) for j, hj in enumerate(h)) % p
        assert (a * b - c) % p == h_tau * z_tau % p

    def test_unsatisfied_assignment(self) -> None:
        cs = ConstraintSystem(FL)
        x = cs.new_witness(lambda: 3)
        cs.enforce({x: 1}, {x: 1}, {x: 1})
        with pytest.raises(ValueError, match="does not satisfy"):
            QAP.from_constraint_system(cs).compute_h(cs.full_assignment())


class TestGroth16:
    """Setup, prove and verify round trips."""

    def test_roundtrip(self, preimage_setup) -> None:
        _, circuit, pk, vk = preimage_setup
        proof = prove(pk, circuit, random.Random(1))
        assert verify(vk, circuit.public_inputs(), proof)

    def test_wrong_public_input(self, preimage_setup) -> None:
        _, circuit, pk, vk = preimage_setup
        proof = prove(pk, circuit, random.Random(2))
        assert not verify(vk, [circuit.hash + FL(1)], proof)

    def test_other_instance_same_keys(self, preimage_setup) -> None:
        params, _, pk, vk = preimage_setup
        point = Point.random(random.Random(99))
        circuit = PreimageVerification(params, point, compute_hash(params, point))
        proof = prove(pk, circuit, random.Random(3))
        assert verify(vk, circuit.public_inputs(), proof)

    def test_unsatisfied_witness_not_provable(self, preimage_setup) -> None:
        params, circuit, pk, _ = preimage_setup
        bad = PreimageVerification(params, circuit.point, circuit.hash + FL(1))
        with pytest.raises(ValueError, match="unsatisfied"):
            prove(pk, bad, random.Random(4))

    def test_public_input_count(self, preimage_setup) -> None:
        _, circuit, pk, vk = preimage_setup
        proof = prove(pk, circuit, random.Random(5))
        assert vk.num_public_inputs == 1
        with pytest.raises(ValueError):
            verify(vk, [], proof)

    def test_proof_serialization(self, preimage_setup) -> None:
        _, circuit, pk, vk = preimage_setup
        proof = prove(pk, circuit, random.Random(6))
        restored = Proof.from_dict(proof.to_dict())
        assert restored.to_dict() == proof.to_dict()
        assert verify(vk, circuit.public_inputs(), restored)

    def test_malformed_proof(self, preimage_setup) -> None:
        _, circuit, pk, _ = preimage_setup
        data = prove(pk, circuit, random.Random(7)).to_dict()
        data["a"] = ["1", "3"]
        with pytest.raises(ValueError):
            Proof.from_dict(data)
        with pytest.raises(ValueError):
            Proof.from_dict({"a": data["a"]})

    def test_g2_outside_subgroup(self, preimage_setup) -> None:
        """On the twist curve but not a multiple of the G2 generator."""
        _, circuit, pk, _ = preimage_setup
        data = prove(pk, circuit, random.Random(9)).to_dict()
        data["b"] = [
            ["2", "1"],
            [
                "7292567877523311580221095596750716176434782432868683424513645834767876293070",
                "19659275751359636165940301690575149581329631496732780143538578556285923319774",
            ],
        ]
        with pytest.raises(ValueError, match="subgroup"):
            Proof.from_dict(data)

    def test_shape_mismatch(self, preimage_setup) -> None:
        from constraints.sum_verification import SumVerification
        from primitives.field import FS

        _, _, pk, _ = preimage_setup
        with pytest.raises(ValueError, match="does not match"):
            prove(pk, SumVerification(FS(4), FS(8), FL(12)), random.Random(8))
