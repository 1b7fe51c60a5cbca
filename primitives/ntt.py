"""Number Theoretic Transform over the BN254 scalar field."""

import numpy as np

from primitives.field import FL, root_of_unity

# Coset shift for evaluations off the subgroup: the multiplicative generator
SHIFT = FL(5)
SHIFT_INV = SHIFT ** -1


# --- NTT Engine ---

class NTT:
    """Radix-2 NTT engine for polynomial operations over FL."""

    def __init__(self, domain_size: int) -> None:
        """Initialize NTT engine for given domain size."""
        assert domain_size > 0, "Domain size must be positive"
        assert (domain_size & (domain_size - 1)) == 0, "Domain size must be power of 2"

        self.n = domain_size
        self.n_bits = _log2(domain_size)

        self.omega = root_of_unity(domain_size)
        self.omega_inv = self.omega ** -1
        self.n_inv = FL(domain_size) ** -1

        # Precompute twiddle factors
        self.roots = _precompute_roots(self.omega, domain_size)
        self.roots_inv = _precompute_roots(self.omega_inv, domain_size)

        self._rev = _bit_reverse_indices(domain_size)

        # Coset shift arrays (computed lazily)
        self.r: np.ndarray | None = None
        self.r_inv: np.ndarray | None = None

    def _compute_r(self) -> None:
        """Compute coset shift arrays r[i] = SHIFT^i and r_inv[i] = SHIFT^-i."""
        self.r = _precompute_roots(SHIFT, self.n)
        self.r_inv = _precompute_roots(SHIFT_INV, self.n)

    def ntt(self, coeffs: np.ndarray) -> np.ndarray:
        """Forward NTT: coefficients -> evaluations at omega^i."""
        if coeffs.size == 0:
            return coeffs
        return self._transform(_pad(coeffs, self.n), self.roots)

    def intt(self, evals: np.ndarray) -> np.ndarray:
        """Inverse NTT: evaluations at omega^i -> coefficients."""
        if evals.size == 0:
            return evals
        return self._transform(_pad(evals, self.n), self.roots_inv) * self.n_inv

    def coset_ntt(self, coeffs: np.ndarray) -> np.ndarray:
        """Evaluate at SHIFT * omega^i."""
        if self.r is None:
            self._compute_r()
        return self.ntt(_pad(coeffs, self.n) * self.r)

    def coset_intt(self, evals: np.ndarray) -> np.ndarray:
        """Interpolate from evaluations at SHIFT * omega^i."""
        if self.r_inv is None:
            self._compute_r()
        return self.intt(evals) * self.r_inv

    def _transform(self, values: np.ndarray, roots: np.ndarray) -> np.ndarray:
        """Iterative Cooley-Tukey butterfly over a bit-reversed copy."""
        out = values[self._rev].copy()
        half = 1
        while half < self.n:
            # Twiddles for this layer: roots[k * n / (2 * half)] for k < half
            twiddles = roots[:: self.n // (2 * half)][:half]
            blocks = out.reshape(-1, 2 * half)
            even = blocks[:, :half].copy()
            odd = blocks[:, half:] * twiddles
            blocks[:, :half] = even + odd
            blocks[:, half:] = even - odd
            half *= 2
        return out


# --- Helpers ---

def _log2(size: int) -> int:
    """Compute log2 of size (must be power of 2)."""
    assert size != 0
    res = 0
    while size != 1:
        size >>= 1
        res += 1
    return res


def _precompute_roots(omega, n_roots: int) -> np.ndarray:
    """Precompute powers: roots[k] = omega^k."""
    roots = FL.Zeros(n_roots)
    roots[0] = FL(1)
    for i in range(1, n_roots):
        roots[i] = roots[i - 1] * omega
    return roots


def _bit_reverse_indices(n: int) -> np.ndarray:
    """Permutation mapping i to its bit-reversed index over log2(n) bits."""
    n_bits = _log2(n)
    rev = np.zeros(n, dtype=np.int64)
    for i in range(n):
        rev[i] = int(format(i, f"0{n_bits}b")[::-1], 2) if n_bits else 0
    return rev


def _pad(values: np.ndarray, n: int) -> np.ndarray:
    """Zero-pad a 1D FL array to length n."""
    if len(values) == n:
        return values
    if len(values) > n:
        raise ValueError(f"Input of length {len(values)} exceeds domain size {n}")
    padded = FL.Zeros(n)
    padded[: len(values)] = values
    return padded
