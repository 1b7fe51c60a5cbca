"""
R1CS to QAP reduction over a radix-2 evaluation domain.

Row k of the constraint matrices is bound to the domain point omega^k. After
the constraint rows come one "instance copy" row per instance variable
(A = that variable, B = C = 0); these keep the instance columns linearly
independent so the verifier's input commitment is binding. Remaining rows
up to the domain size are zero.

For an assignment z the polynomials A(x) = sum z_i A_i(x) (and B, C) satisfy
A*B - C = h * Z on the domain exactly when every row holds, where
Z(x) = x^N - 1. The quotient h is computed on a coset, where Z is the
nonzero constant SHIFT^N - 1.
"""

import logging
from typing import List, Tuple

import numpy as np

from constraints.base import ConstraintSynthesizer, ConstraintSystem
from primitives.field import BN254_SCALAR_PRIME, FL
from primitives.ntt import NTT, SHIFT

logger = logging.getLogger(__name__)

R = BN254_SCALAR_PRIME

SparseRow = List[Tuple[int, int]]


def build_constraint_system(circuit: ConstraintSynthesizer) -> ConstraintSystem:
    """Run the circuit's constraint generation against a fresh system over FL."""
    cs = ConstraintSystem(FL)
    circuit.generate_constraints(cs)
    logger.debug("%s: %s", type(circuit).__name__, cs.summary())
    return cs


class QAP:
    """
    Quadratic arithmetic program derived from one constraint system's shape.

    Attributes:
        num_instance: Instance variables including the constant one
        num_witness: Witness variables
        num_constraints: R1CS rows (excluding instance copy rows)
        domain_size: Power of two covering all rows
    """

    def __init__(self, a: List[SparseRow], b: List[SparseRow], c: List[SparseRow],
                 num_instance: int, num_witness: int):
        self.num_instance = num_instance
        self.num_witness = num_witness
        self.num_constraints = len(a)

        self.a = a + [[(1, j)] for j in range(num_instance)]
        self.b = b + [[] for _ in range(num_instance)]
        self.c = c + [[] for _ in range(num_instance)]

        rows = len(self.a)
        self.domain_size = 1 << max(1, (rows - 1).bit_length())
        self._ntt = None

    @classmethod
    def from_constraint_system(cls, cs: ConstraintSystem) -> "QAP":
        a, b, c = cs.to_matrices()
        return cls(a, b, c, cs.num_instance_variables, cs.num_witness_variables)

    @property
    def num_variables(self) -> int:
        return self.num_instance + self.num_witness

    @property
    def ntt(self) -> NTT:
        if self._ntt is None:
            self._ntt = NTT(self.domain_size)
        return self._ntt

    # --- Setup side ---

    def lagrange_at(self, tau: int) -> List[int]:
        """L_k(tau) for every domain point, with L_k(omega^j) = [j == k].

        L_k(tau) = (tau^N - 1) / N * omega^k / (tau - omega^k)
        """
        n = self.domain_size
        z_tau = (pow(tau, n, R) - 1) % R
        if z_tau == 0:
            raise ValueError("Evaluation point lies in the domain")
        omega = int(self.ntt.omega)
        scale = z_tau * pow(n, -1, R) % R
        values = []
        omega_k = 1
        for _ in range(n):
            values.append(scale * omega_k * pow(tau - omega_k, -1, R) % R)
            omega_k = omega_k * omega % R
        return values

    def evaluate_at(self, tau: int) -> Tuple[List[int], List[int], List[int], int]:
        """Per-variable A_i(tau), B_i(tau), C_i(tau) and Z(tau)."""
        lagrange = self.lagrange_at(tau)
        columns = []
        for matrix in (self.a, self.b, self.c):
            evals = [0] * self.num_variables
            for row, entries in enumerate(matrix):
                for coeff, col in entries:
                    evals[col] = (evals[col] + coeff * lagrange[row]) % R
            columns.append(evals)
        z_tau = (pow(tau, self.domain_size, R) - 1) % R
        return columns[0], columns[1], columns[2], z_tau

    # --- Prover side ---

    def _row_evaluations(self, matrix: List[SparseRow], z: List[int]) -> np.ndarray:
        evals = [0] * self.domain_size
        for row, entries in enumerate(matrix):
            evals[row] = sum(coeff * z[col] for coeff, col in entries) % R
        return FL(evals)

    def compute_h(self, z: List[int]) -> List[int]:
        """Coefficients of h = (A*B - C) / Z for assignment z (degree <= N - 2).

        Raises:
            ValueError: If z does not satisfy the constraint rows
        """
        if len(z) != self.num_variables:
            raise ValueError(f"Assignment has {len(z)} entries, expected {self.num_variables}")

        ntt = self.ntt
        a_evals = self._row_evaluations(self.a, z)
        b_evals = self._row_evaluations(self.b, z)
        c_evals = self._row_evaluations(self.c, z)
        if np.any(a_evals * b_evals != c_evals):
            raise ValueError("Assignment does not satisfy the constraint system")

        a_coset = ntt.coset_ntt(ntt.intt(a_evals))
        b_coset = ntt.coset_ntt(ntt.intt(b_evals))
        c_coset = ntt.coset_ntt(ntt.intt(c_evals))

        z_coset_inv = (SHIFT ** self.domain_size - FL(1)) ** -1
        h = ntt.coset_intt((a_coset * b_coset - c_coset) * z_coset_inv)
        return [int(v) for v in h[: self.domain_size - 1]]
