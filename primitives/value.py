"""Witness values that may not be computed yet.

A Value wraps a field element or stands for "unknown". Arithmetic on
Values propagates unknown: if either operand is unknown, so is the result.
Circuits build their witnesses with Values so the same synthesis code runs
whether or not the witnesses are available (see Circuit.without_witnesses).

Example:
    a = Value.known(FP(1))
    b = Value.unknown()
    (a + a).inner   # FP(2)
    (a + b).is_known()  # False
"""

from typing import Callable


class Value:
    """Known field element or the unknown sentinel."""

    __slots__ = ("_inner",)

    def __init__(self, inner=None):
        self._inner = inner

    @classmethod
    def known(cls, inner) -> "Value":
        if inner is None:
            raise ValueError("Value.known() requires an element; use Value.unknown()")
        return cls(inner)

    @classmethod
    def unknown(cls) -> "Value":
        return cls(None)

    def is_known(self) -> bool:
        return self._inner is not None

    @property
    def inner(self):
        """The wrapped element, or None if unknown."""
        return self._inner

    def map(self, fn: Callable) -> "Value":
        if self._inner is None:
            return self
        return Value(fn(self._inner))

    def zip_with(self, other: "Value", fn: Callable) -> "Value":
        if self._inner is None or other._inner is None:
            return Value.unknown()
        return Value(fn(self._inner, other._inner))

    def __add__(self, other: "Value") -> "Value":
        return self.zip_with(other, lambda x, y: x + y)

    def __sub__(self, other: "Value") -> "Value":
        return self.zip_with(other, lambda x, y: x - y)

    def __mul__(self, other: "Value") -> "Value":
        return self.zip_with(other, lambda x, y: x * y)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        if self._inner is None or other._inner is None:
            return self._inner is None and other._inner is None
        return int(self._inner) == int(other._inner)

    def __hash__(self) -> int:
        return hash(None if self._inner is None else int(self._inner))

    def __repr__(self) -> str:
        if self._inner is None:
            return "Value(unknown)"
        return f"Value({int(self._inner)})"
