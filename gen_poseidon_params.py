#!/usr/bin/env python3
"""
Write a Poseidon parameter table to JSON.

The table is derived with the Grain LFSR and checked by the same parser the
circuits use before it is written.

Usage:
    python gen_poseidon_params.py --width 3 --full-rounds 8 --partial-rounds 57 \
        --output bn254_x5_3.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from primitives.field import BN254_SCALAR_PRIME
from primitives.grain import derive_poseidon_table
from primitives.poseidon_params import PoseidonParams

logger = logging.getLogger("gen_poseidon_params")


def main() -> int:
    parser = argparse.ArgumentParser(description="Derive a Poseidon parameter table over BN254 Fr")
    parser.add_argument("--width", type=int, default=3)
    parser.add_argument("--full-rounds", type=int, default=8)
    parser.add_argument("--partial-rounds", type=int, default=57)
    parser.add_argument("--alpha", type=int, default=5)
    parser.add_argument("--version", default=None, help="Version tag stored in the table")
    parser.add_argument("--output", type=Path, required=True)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    table = derive_poseidon_table(
        BN254_SCALAR_PRIME, args.width, args.full_rounds, args.partial_rounds, args.alpha
    )
    PoseidonParams.from_table(table)

    version = args.version or f"bn254-x{args.alpha}-{args.width}"
    table = {"version": version, **table}
    with open(args.output, "w") as f:
        json.dump(table, f, indent=2)
    logger.info("Wrote %s (%d round constants)", args.output, len(table["ark"]))
    return 0


if __name__ == "__main__":
    sys.exit(main())
