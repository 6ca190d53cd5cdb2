"""Region assignment: maps relatively addressed regions onto table rows.

Synthesis calls Layouter.assign_region(name, body) once per region. The
body receives a Region and writes cells at offsets relative to the region's
start. Regions are stacked in call order: each one starts where the
previous one ended, so placement costs O(1) per region.

Example:
    def first_row(region):
        region.enable_selector(sel, 0)
        a = region.assign(col_a, 0, Value.known(FP(1)))
        b = region.copy(prev_c, col_b, 0)
        return a, b

    a, b = layouter.assign_region("first row", first_row)
    layouter.expose_public(b, instance, 0)
    table = layouter.finalize([[55]])
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, TypeVar, Union

import galois
import numpy as np

from plonk.assignment import AssignmentTable, CopyConstraint, InstanceBinding
from plonk.columns import Cell, Column, ColumnKind, Selector
from plonk.constraint_system import Schema
from plonk.errors import CellAlreadyAssigned, EqualityNotEnabled, InstanceTooLarge, RowDomainTooSmall
from primitives.field import to_field
from primitives.value import Value

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class AssignedCell:
    """A cell written during synthesis, together with the value written."""
    cell: Cell
    value: Value


class Region:
    """Assignment interface for one region. Offsets are relative to `base`."""

    def __init__(self, layouter: "Layouter", name: str, index: int, base: int):
        self._layouter = layouter
        self.name = name
        self.index = index
        self.base = base
        self.height = 0

    def _row(self, offset: int) -> int:
        if offset < 0:
            raise ValueError(f"Negative offset {offset} in region '{self.name}'")
        self.height = max(self.height, offset + 1)
        return self._layouter._claim_row(self.base + offset, self.index)

    def assign(self, column: Column, offset: int,
               value: Union[Value, int, galois.FieldArray]) -> AssignedCell:
        """Write a fresh value; plain ints and field elements are treated as known.

        Raises:
            CellAlreadyAssigned: If the cell was written before
            TypeError: If `column` is an instance column
        """
        if column.kind is ColumnKind.INSTANCE:
            raise TypeError(f"Regions cannot assign instance column {column}")
        if not isinstance(value, Value):
            value = Value.known(value)
        cell = Cell(column, self._row(offset))
        return self._layouter._write(cell, value, self.name)

    def copy(self, source: AssignedCell, column: Column, offset: int) -> AssignedCell:
        """Write `source`'s value into a new cell and constrain the two to be equal.

        Equality support is checked on both columns before anything is written.

        Raises:
            EqualityNotEnabled: If either column lacks equality support
            CellAlreadyAssigned: If the destination was written before
        """
        self._layouter._require_equality(source.cell.column)
        self._layouter._require_equality(column)
        dest = self.assign(column, offset, source.value)
        self._layouter._record_copy(source.cell, dest.cell)
        return dest

    def constrain_equal(self, left: AssignedCell, right: AssignedCell) -> None:
        """Record a copy constraint between two cells that already exist."""
        self._layouter._require_equality(left.cell.column)
        self._layouter._require_equality(right.cell.column)
        self._layouter._record_copy(left.cell, right.cell)

    def enable_selector(self, selector: Selector, offset: int) -> None:
        self._layouter._enable(selector, self._row(offset))


class Layouter:
    """Stacks regions into an assignment table for `schema` over 2^k rows."""

    def __init__(self, schema: Schema, k: int):
        self.schema = schema
        self.k = k
        self.n = 1 << k
        self.usable_rows = schema.usable_rows(k)
        field = schema.field

        self._values = {c: field.Zeros(self.n) for c in schema.columns}
        self._assigned = {c: np.zeros(self.n, dtype=bool) for c in schema.columns}
        self._known = {c: np.zeros(self.n, dtype=bool) for c in schema.columns}
        self._selectors = {s: np.zeros(self.n, dtype=bool) for s in schema.selectors}
        self._row_regions = np.full(self.n, -1, dtype=np.int64)
        self._region_names: List[str] = []
        self._copies: List[CopyConstraint] = []
        self._bindings: List[InstanceBinding] = []
        self._cursor = 0
        self._active: Optional[Region] = None
        self._finalized = False

    # --- Public API ---

    def assign_region(self, name: str, body: Callable[[Region], T]) -> T:
        """Run `body` in a new region placed after all previous ones.

        Returns:
            Whatever `body` returns (typically the AssignedCells the next
            region needs)
        """
        self._check_open()
        if self._active is not None:
            raise RuntimeError(f"Region '{name}' opened inside region '{self._active.name}'")
        region = Region(self, name, len(self._region_names), self._cursor)
        self._region_names.append(name)
        self._active = region
        try:
            result = body(region)
        finally:
            self._active = None
        self._cursor = region.base + region.height
        logger.debug("Region %d '%s' placed at rows [%d, %d)",
                     region.index, name, region.base, self._cursor)
        return result

    def expose_public(self, cell: Union[AssignedCell, Cell], column: Column, index: int) -> None:
        """Bind `cell` to position `index` of the public input for `column`.

        Raises:
            TypeError: If `column` isn't an instance column
            EqualityNotEnabled: If either column lacks equality support
        """
        self._check_open()
        if isinstance(cell, AssignedCell):
            cell = cell.cell
        if column.kind is not ColumnKind.INSTANCE:
            raise TypeError(f"Public values must be bound to an instance column, got {column}")
        if index < 0:
            raise ValueError(f"Negative public input index {index}")
        self._require_equality(cell.column)
        self._require_equality(column)
        self._bindings.append(InstanceBinding(cell, column, index))

    def finalize(self, instances: Sequence[Sequence]) -> AssignmentTable:
        """Fill instance columns and freeze the table.

        Args:
            instances: One public-input vector per instance column, in
                allocation order

        Raises:
            ValueError: If the number of vectors doesn't match the instance columns
            InstanceTooLarge: If a vector doesn't fit in the usable rows
        """
        self._check_open()
        field = self.schema.field
        instance_columns = self.schema.columns_of(ColumnKind.INSTANCE)
        if len(instances) != len(instance_columns):
            raise ValueError(f"Expected {len(instance_columns)} instance vectors, got {len(instances)}")

        converted = []
        for column, vector in zip(instance_columns, instances):
            if len(vector) > self.usable_rows:
                raise InstanceTooLarge(self.k, column, len(vector), self.usable_rows)
            vector = tuple(to_field(field, v) for v in vector)
            for row, v in enumerate(vector):
                self._values[column][row] = v
            converted.append(vector)

        # Instance and fixed cells always have a value (zero unless set).
        for column in self.schema.columns:
            if column.kind is not ColumnKind.ADVICE:
                self._assigned[column][:] = True
                self._known[column][:] = True

        self._finalized = True
        logger.debug("Finalized table: %d regions, %d rows used of %d usable, %d copies, %d bindings",
                     len(self._region_names), self._cursor, self.usable_rows,
                     len(self._copies), len(self._bindings))
        return AssignmentTable(
            self.schema, self.k,
            values=self._values,
            assigned=self._assigned,
            known=self._known,
            selectors=self._selectors,
            row_regions=self._row_regions,
            region_names=self._region_names,
            copies=tuple(self._copies),
            bindings=tuple(self._bindings),
            instances=tuple(converted),
        )

    # --- Internals used by Region ---

    def _check_open(self) -> None:
        if self._finalized:
            raise RuntimeError("Layouter already finalized")

    def _claim_row(self, row: int, region_index: int) -> int:
        if row >= self.usable_rows:
            logger.warning("Row %d falls outside the %d usable rows of k=%d",
                           row, self.usable_rows, self.k)
            raise RowDomainTooSmall(self.k, row + 1, self.usable_rows)
        self._row_regions[row] = region_index
        return row

    def _write(self, cell: Cell, value: Value, region: str) -> AssignedCell:
        column, row = cell.column, cell.row
        if self._assigned[column][row]:
            raise CellAlreadyAssigned(column, row, region)
        self._assigned[column][row] = True
        if value.is_known():
            value = value.map(lambda x: to_field(self.schema.field, x))
            self._values[column][row] = value.inner
            self._known[column][row] = True
        return AssignedCell(cell, value)

    def _enable(self, selector: Selector, row: int) -> None:
        if selector not in self._selectors:
            raise ValueError(f"{selector} is not part of the schema")
        self._selectors[selector][row] = True

    def _require_equality(self, column: Column) -> None:
        if not self.schema.is_equality_enabled(column):
            raise EqualityNotEnabled(column)

    def _record_copy(self, left: Cell, right: Cell) -> None:
        logger.debug("Copy constraint %s == %s", left, right)
        self._copies.append(CopyConstraint(left, right))
