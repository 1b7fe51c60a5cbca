"""Poseidon parameter provider.

Parameters come from versioned tables in the JSON layout used by the
reference implementations:

    {
        "version": "bn254-x5-3",
        "full_rounds": 8, "partial_rounds": 57, "alpha": 5, "capacity": 1,
        "mds": [["...", ...], ...],       # width x width
        "ark": ["...", ...]               # (full_rounds + partial_rounds) * width
    }

Entries may be decimal strings, 0x-prefixed hex strings or ints. Parsing only
validates shape and range; it never derives values.

Usage:
    params = get_poseidon_params("bn254-x5-3")
    sponge = PoseidonSponge(params)
"""

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

import numpy as np

from primitives.field import BN254_SCALAR_PRIME, FL

_TABLE_DIR = Path(__file__).parent / "param_tables"


class ParameterFormatError(ValueError):
    """Raised when a Poseidon parameter table is malformed."""


@dataclass(frozen=True, eq=False)
class PoseidonParams:
    """Poseidon permutation parameters over FL.

    Attributes:
        full_rounds: Rounds with the S-box on every lane (split evenly before/after)
        partial_rounds: Rounds with the S-box on lane 0 only
        alpha: S-box exponent
        mds: width x width MDS matrix (FL array)
        ark: Round constants, one row of width elements per round (FL array)
        rate: Lanes absorbed/squeezed per permutation
        capacity: Lanes never touched by absorb/squeeze
        version: Version tag of the table the values came from
    """
    full_rounds: int
    partial_rounds: int
    alpha: int
    mds: np.ndarray
    ark: np.ndarray
    rate: int
    capacity: int
    version: Optional[str] = None

    @property
    def width(self) -> int:
        return self.rate + self.capacity

    @property
    def num_rounds(self) -> int:
        return self.full_rounds + self.partial_rounds

    @classmethod
    def from_table(cls, table: Mapping[str, Any]) -> "PoseidonParams":
        """Parse and shape-check a raw parameter table.

        Raises:
            ParameterFormatError: On missing keys, non-square MDS, round-constant
                count not matching the round counts, or out-of-range entries
        """
        try:
            full_rounds = int(table["full_rounds"])
            partial_rounds = int(table["partial_rounds"])
            alpha = int(table["alpha"])
            raw_mds = table["mds"]
            raw_ark = table["ark"]
        except KeyError as e:
            raise ParameterFormatError(f"Parameter table is missing key {e}") from e
        except (TypeError, ValueError) as e:
            raise ParameterFormatError(f"Round counts and alpha must be integers: {e}") from e

        if full_rounds < 0 or full_rounds % 2 != 0:
            raise ParameterFormatError(f"full_rounds must be even and non-negative, got {full_rounds}")
        if partial_rounds < 0:
            raise ParameterFormatError(f"partial_rounds must be non-negative, got {partial_rounds}")
        if alpha < 2:
            raise ParameterFormatError(f"alpha must be >= 2, got {alpha}")

        if not isinstance(raw_mds, Sequence) or len(raw_mds) == 0:
            raise ParameterFormatError("mds must be a non-empty matrix")
        width = len(raw_mds)
        for i, row in enumerate(raw_mds):
            if not isinstance(row, Sequence) or isinstance(row, str) or len(row) != width:
                raise ParameterFormatError(
                    f"mds must be square: row {i} has {len(row) if isinstance(row, Sequence) else '?'} "
                    f"entries, expected {width}"
                )

        if not isinstance(raw_ark, Sequence) or isinstance(raw_ark, str):
            raise ParameterFormatError("ark must be a flat list of round constants")
        if len(raw_ark) % width != 0:
            raise ParameterFormatError(
                f"Round-constant count {len(raw_ark)} is not divisible by state width {width}"
            )
        expected = (full_rounds + partial_rounds) * width
        if len(raw_ark) != expected:
            raise ParameterFormatError(
                f"Expected {expected} round constants for {full_rounds}+{partial_rounds} rounds "
                f"of width {width}, got {len(raw_ark)}"
            )

        capacity = int(table.get("capacity", 1))
        if not 1 <= capacity < width:
            raise ParameterFormatError(f"capacity must be in [1, {width}), got {capacity}")

        mds = FL([[_parse_element(v) for v in row] for row in raw_mds])
        ark = FL([_parse_element(v) for v in raw_ark]).reshape(full_rounds + partial_rounds, width)

        return cls(
            full_rounds=full_rounds,
            partial_rounds=partial_rounds,
            alpha=alpha,
            mds=mds,
            ark=ark,
            rate=width - capacity,
            capacity=capacity,
            version=table.get("version"),
        )


def _parse_element(raw: Any) -> int:
    """Parse one table entry into an integer in [0, p)."""
    try:
        if isinstance(raw, str):
            value = int(raw, 16) if raw.lower().startswith("0x") else int(raw, 10)
        elif isinstance(raw, bool):
            raise TypeError("booleans are not field elements")
        else:
            value = int(raw)
    except (TypeError, ValueError) as e:
        raise ParameterFormatError(f"Invalid field element {raw!r}: {e}") from e
    if not 0 <= value < BN254_SCALAR_PRIME:
        raise ParameterFormatError(f"Field element {raw!r} is out of range [0, p)")
    return value


# --- Table Registry ---

def _load_json_table(filename: str) -> Callable[[], Dict[str, Any]]:
    def load() -> Dict[str, Any]:
        with open(_TABLE_DIR / filename) as f:
            return json.load(f)
    return load


# Versioned tables: name -> loader returning the raw JSON-like table
PARAMETER_TABLES: Dict[str, Callable[[], Dict[str, Any]]] = {
    "bn254-x5-3": _load_json_table("bn254_x5_3.json"),
    "toy-x5-3": _load_json_table("toy_x5_3.json"),
}


def get_poseidon_params(name: str = "bn254-x5-3") -> PoseidonParams:
    """Return the validated Poseidon parameters for a registered table.

    Memoized: the same name always yields the same PoseidonParams object.

    Raises:
        KeyError: If no table is registered under name
        ParameterFormatError: If the stored table is malformed
    """
    if name not in PARAMETER_TABLES:
        raise KeyError(
            f"No Poseidon parameter table '{name}'. "
            f"Available: {list(PARAMETER_TABLES.keys())}"
        )
    return _load_params(name)


@lru_cache(maxsize=None)
def _load_params(name: str) -> PoseidonParams:
    return PoseidonParams.from_table(PARAMETER_TABLES[name]())
