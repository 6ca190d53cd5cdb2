"""Primitives - Field arithmetic and witness values."""

from primitives.field import (
    FF,
    FIELDS,
    FP,
    GL,
    GOLDILOCKS_PRIME,
    PALLAS_BASE_PRIME,
    get_field,
    to_field,
)
from primitives.value import Value

__all__ = [
    # Field
    "FF",
    "FP",
    "GL",
    "FIELDS",
    "GOLDILOCKS_PRIME",
    "PALLAS_BASE_PRIME",
    "get_field",
    "to_field",
    # Witness values
    "Value",
]
