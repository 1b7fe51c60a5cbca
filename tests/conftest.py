"""Shared fixtures: seeded randomness and parameter sets."""

import random

import pytest

from primitives.poseidon_params import get_poseidon_params


@pytest.fixture
def rng() -> random.Random:
    """Deterministic random source; every randomized test draws from it."""
    return random.Random(0x5EED)


@pytest.fixture(scope="session")
def toy_params():
    """Reduced-round Poseidon parameters for fast circuit tests."""
    return get_poseidon_params("toy-x5-3")


@pytest.fixture(scope="session")
def bn254_params():
    """Full-strength Poseidon parameters (Grain-derived, memoized)."""
    return get_poseidon_params("bn254-x5-3")
