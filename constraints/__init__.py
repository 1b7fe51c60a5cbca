"""Constraint system engine and circuits.

Circuits are registered by name and resolved lazily, so importing the engine
(constraints.base) does not pull in the gadgets the circuits are built from.
"""

from importlib import import_module
from typing import Dict, Type

from constraints.base import (
    ONE,
    ConstraintError,
    ConstraintSynthesizer,
    ConstraintSystem,
    Variable,
)

CIRCUIT_REGISTRY: Dict[str, str] = {
    "preimage_verification": "constraints.preimage_verification:PreimageVerification",
    "sum_verification": "constraints.sum_verification:SumVerification",
}


def get_circuit_class(name: str) -> Type[ConstraintSynthesizer]:
    """Get the circuit class registered under name.

    Raises:
        KeyError: If no circuit is registered under name
    """
    if name not in CIRCUIT_REGISTRY:
        available = ", ".join(sorted(CIRCUIT_REGISTRY))
        raise KeyError(f"Unknown circuit '{name}'. Available: {available}")
    module_name, class_name = CIRCUIT_REGISTRY[name].split(":")
    return getattr(import_module(module_name), class_name)


__all__ = [
    "ONE",
    "ConstraintError",
    "ConstraintSynthesizer",
    "ConstraintSystem",
    "Variable",
    "CIRCUIT_REGISTRY",
    "get_circuit_class",
]
