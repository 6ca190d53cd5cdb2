"""Violation records reported by the mock prover.

Each record names where the problem is: a gate and row, a pair of cells,
or an instance position. Region names are attached where known, as a
debugging aid only.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from plonk.columns import Cell, Column


@dataclass(frozen=True)
class ConstraintNotSatisfied:
    """Polynomial `index` of `gate` is non-zero at `row`."""
    gate: str
    index: int
    row: int
    region: Optional[str] = None
    cell_values: Tuple[Tuple[Column, int, int], ...] = field(default=(), compare=False)

    def __str__(self) -> str:
        cells = ", ".join(f"{c}[{rot:+d}]={v}" for c, rot, v in self.cell_values)
        where = f" in region '{self.region}'" if self.region else ""
        return f"Constraint {self.index} of gate '{self.gate}' not satisfied at row {self.row}{where} ({cells})"


@dataclass(frozen=True)
class UnresolvedWitness:
    """A gate row can't be checked because a queried cell holds an unknown witness."""
    gate: str
    row: int
    cells: Tuple[Cell, ...]
    region: Optional[str] = None

    def __str__(self) -> str:
        cells = ", ".join(str(c) for c in self.cells)
        return f"Gate '{self.gate}' at row {self.row} reads unknown witness(es): {cells}"


@dataclass(frozen=True)
class CellNotAssigned:
    """A gate row queries a cell no region ever wrote."""
    gate: str
    row: int
    cell: Cell
    region: Optional[str] = None

    def __str__(self) -> str:
        return f"Gate '{self.gate}' at row {self.row} queries unassigned cell {self.cell}"


@dataclass(frozen=True)
class CopyConstraintViolated:
    left: Cell
    right: Cell

    def __str__(self) -> str:
        return f"Copy constraint {self.left} == {self.right} violated"


@dataclass(frozen=True)
class CopyConstraintUnresolved:
    """One or both sides of a copy constraint hold an unknown witness."""
    left: Cell
    right: Cell

    def __str__(self) -> str:
        return f"Copy constraint {self.left} == {self.right} has unknown witness(es)"


@dataclass(frozen=True)
class InstanceMismatch:
    column: Column
    index: int
    expected: int
    actual: int

    def __str__(self) -> str:
        return (f"Public input {self.column}[{self.index}] is {self.expected}, "
                f"but the bound cell holds {self.actual}")


@dataclass(frozen=True)
class InstanceIndexOutOfRange:
    column: Column
    index: int
    available: int

    def __str__(self) -> str:
        return (f"Public input {self.column}[{self.index}] requested, "
                f"but only {self.available} value(s) supplied")


@dataclass(frozen=True)
class InstanceUnresolved:
    column: Column
    index: int
    cell: Cell

    def __str__(self) -> str:
        return f"Public input {self.column}[{self.index}] is bound to unknown witness {self.cell}"
