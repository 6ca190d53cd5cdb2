"""Prime fields used by the circuits.

Uses galois library for all field arithmetic. FP and GL are the field types.

FP is the Pallas base field, the field the halo2 Fibonacci examples are
written over. Its primitive element is passed explicitly: letting galois
search for one would factor p - 1, which is far too slow for a 255-bit prime.

GL is the Goldilocks field, kept as a drop-in alternative. Nothing in the
constraint system depends on which of the two is used.
"""

from typing import Dict, Union

import galois

# --- Field Construction ---

PALLAS_BASE_PRIME = 0x40000000000000000000000000000000224698FC094CF91B992D30ED00000001
PALLAS_GENERATOR = 5

GOLDILOCKS_PRIME = 0xFFFFFFFF00000001

FP = galois.GF(PALLAS_BASE_PRIME, primitive_element=PALLAS_GENERATOR, verify=False)
"""Pallas base field GF(p)."""

GL = galois.GF(GOLDILOCKS_PRIME)
"""Goldilocks field GF(2^64 - 2^32 + 1)."""

FF = FP
"""Default field for circuits that don't pick one."""

FIELDS: Dict[str, type] = {
    "pasta_fp": FP,
    "goldilocks": GL,
}


def get_field(name: str) -> type:
    """Look up a field class by name.

    Raises:
        KeyError: If the name isn't registered
    """
    if name not in FIELDS:
        raise KeyError(f"Unknown field '{name}'. Available: {list(FIELDS.keys())}")
    return FIELDS[name]


# --- Element Conversion ---

def to_field(field: type, x: Union[int, galois.FieldArray]) -> galois.FieldArray:
    """Convert an int (possibly negative or >= p) to a scalar of `field`.

    Elements that already belong to `field` are returned unchanged.
    """
    if isinstance(x, field):
        return x
    if isinstance(x, galois.FieldArray):
        raise TypeError(f"Element of {type(x).name} cannot be used in {field.name}")
    return field(int(x) % field.order)
