"""Column, selector and cell identities.

These are plain value objects: they name a location in the assignment table
but hold no data. The constraint system hands them out; the layouter and
the checker use them as keys.
"""

from dataclasses import dataclass
from enum import Enum


class ColumnKind(Enum):
    """What a column holds."""
    ADVICE = "advice"      # witness values, assigned by regions
    INSTANCE = "instance"  # public inputs, filled from the instance vectors
    FIXED = "fixed"        # circuit constants, zero unless assigned


@dataclass(frozen=True)
class Column:
    """A column of the assignment table."""
    index: int
    kind: ColumnKind

    def __str__(self) -> str:
        return f"{self.kind.value}[{self.index}]"


@dataclass(frozen=True)
class Selector:
    """A boolean column gating a gate row by row."""
    index: int

    def __str__(self) -> str:
        return f"selector[{self.index}]"


@dataclass(frozen=True)
class Cell:
    """A (column, absolute row) location."""
    column: Column
    row: int

    def __str__(self) -> str:
        return f"{self.column}@{self.row}"
