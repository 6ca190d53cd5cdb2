"""Shared pieces of the two Fibonacci layouts.

Both layouts prove the same statement: starting from seeds f(0) = a and
f(1) = b, the recurrence f(i) = f(i-1) + f(i-2) reaches f(n_terms - 1),
which is exposed as instance[0][0]. They differ only in how terms are laid
out in columns.
"""

from typing import Optional

from circuits.base import Circuit, Witness
from primitives.field import FF, to_field
from primitives.value import Value

DEFAULT_TERMS = 10
MIN_TERMS = 3


def fibonacci_term(field: type, a: int, b: int, n_terms: int):
    """Reference value f(n_terms - 1) computed outside any circuit."""
    if n_terms < 1:
        raise ValueError(f"n_terms must be positive, got {n_terms}")
    x, y = to_field(field, a), to_field(field, b)
    for _ in range(n_terms - 1):
        x, y = y, x + y
    return x


class FibonacciCircuit(Circuit):
    """Seeds and length common to both layouts."""

    def __init__(self, a: Witness = None, b: Witness = None,
                 n_terms: int = DEFAULT_TERMS, field: Optional[type] = None):
        if n_terms < MIN_TERMS:
            raise ValueError(f"n_terms must be at least {MIN_TERMS}, got {n_terms}")
        self.field = field if field is not None else FF
        self.a = Value.unknown() if a is None else self.witness(a)
        self.b = Value.unknown() if b is None else self.witness(b)
        self.n_terms = n_terms

    def without_witnesses(self) -> "FibonacciCircuit":
        return type(self)(n_terms=self.n_terms, field=self.field)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(a={self.a!r}, b={self.b!r}, n_terms={self.n_terms})"
