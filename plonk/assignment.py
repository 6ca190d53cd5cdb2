"""Frozen assignment table produced by synthesis.

The table stores one galois array per column, plus two boolean masks per
column: which cells were assigned, and which of those hold a known value.
Cells that are unassigned or unknown hold zero in the value array; callers
that care must consult the masks (value() does this for single cells).

Arrays are marked read-only once the table is built. Tests that need a
tampered table use with_value() / with_selector(), which copy.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

import numpy as np

from plonk.columns import Cell, Column, Selector
from primitives.field import to_field
from primitives.value import Value


@dataclass(frozen=True)
class CopyConstraint:
    """Two cells that must hold the same value."""
    left: Cell
    right: Cell


@dataclass(frozen=True)
class InstanceBinding:
    """A cell that must equal instance[column][index]."""
    cell: Cell
    column: Column
    index: int


def _freeze(arr: np.ndarray) -> np.ndarray:
    arr.flags.writeable = False
    return arr


class AssignmentTable:
    """Cell values, selector activations and recorded constraints for one circuit instance."""

    def __init__(
        self,
        schema,
        k: int,
        values: Dict[Column, np.ndarray],
        assigned: Dict[Column, np.ndarray],
        known: Dict[Column, np.ndarray],
        selectors: Dict[Selector, np.ndarray],
        row_regions: np.ndarray,
        region_names: List[str],
        copies: Tuple[CopyConstraint, ...],
        bindings: Tuple[InstanceBinding, ...],
        instances: Tuple[Tuple, ...],
    ):
        self.schema = schema
        self.field = schema.field
        self.k = k
        self.n = 1 << k
        self.usable_rows = schema.usable_rows(k)
        self._values = {c: _freeze(v) for c, v in values.items()}
        self._assigned = {c: _freeze(v) for c, v in assigned.items()}
        self._known = {c: _freeze(v) for c, v in known.items()}
        self._selectors = {s: _freeze(v) for s, v in selectors.items()}
        self._row_regions = _freeze(row_regions)
        self.region_names = tuple(region_names)
        self.copies = copies
        self.bindings = bindings
        self.instances = instances

    # --- Column access ---

    def column_values(self, column: Column) -> np.ndarray:
        return self._values[column]

    def assigned_mask(self, column: Column) -> np.ndarray:
        return self._assigned[column]

    def known_mask(self, column: Column) -> np.ndarray:
        return self._known[column]

    def selector_rows(self, selector: Selector) -> np.ndarray:
        """Boolean mask of rows where the selector is enabled."""
        return self._selectors[selector]

    # --- Cell access ---

    def is_assigned(self, column: Column, row: int) -> bool:
        return bool(self._assigned[column][row])

    def value(self, column: Column, row: int) -> Value:
        """Value at a cell; unassigned cells read as unknown."""
        if not (self._assigned[column][row] and self._known[column][row]):
            return Value.unknown()
        return Value.known(self._values[column][row])

    def cell_value(self, cell: Cell) -> Value:
        return self.value(cell.column, cell.row)

    def is_selector_enabled(self, selector: Selector, row: int) -> bool:
        return bool(self._selectors[selector][row])

    def region_at(self, row: int) -> Optional[str]:
        """Name of the region that placed `row`, if any."""
        index = int(self._row_regions[row])
        return self.region_names[index] if index >= 0 else None

    # --- Copy-on-write ---

    def _replace(self, **overrides) -> "AssignmentTable":
        fields = dict(
            values=dict(self._values),
            assigned=dict(self._assigned),
            known=dict(self._known),
            selectors=dict(self._selectors),
        )
        for name, (key, arr) in overrides.items():
            fields[name][key] = arr
        return AssignmentTable(
            self.schema, self.k,
            row_regions=self._row_regions.copy(),
            region_names=list(self.region_names),
            copies=self.copies,
            bindings=self.bindings,
            instances=self.instances,
            **fields,
        )

    def with_value(self, cell: Cell, value: Union[Value, int]) -> "AssignmentTable":
        """Copy of this table with one cell overwritten (and marked assigned)."""
        column, row = cell.column, cell.row
        values = self._values[column].copy()
        assigned = self._assigned[column].copy()
        known = self._known[column].copy()
        if not isinstance(value, Value):
            value = Value.known(value)
        assigned[row] = True
        known[row] = value.is_known()
        values[row] = to_field(self.field, value.inner) if value.is_known() else 0
        return self._replace(
            values=(column, values),
            assigned=(column, assigned),
            known=(column, known),
        )

    def with_selector(self, selector: Selector, row: int, enabled: bool) -> "AssignmentTable":
        """Copy of this table with one selector row switched on or off."""
        rows = self._selectors[selector].copy()
        rows[row] = enabled
        return self._replace(selectors=(selector, rows))
