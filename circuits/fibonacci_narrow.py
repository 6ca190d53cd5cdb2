"""Narrow Fibonacci layout: one advice column, one term per row.

    x      | s
    f(0)   | 1
    f(1)   | 1
    f(2)   | 1
    ...
    f(n-3) | 1
    f(n-2) | 0
    f(n-1) | 0     exposed as instance[0][0]

Gate "fibonacci": s * (x[0] + x[1] - x[2]) = 0. The gate at row r reads rows
r..r+2, so the selector is on exactly where that window lies inside the
sequence: rows 0 .. n-3. The whole sequence is one region, so no copy
constraints are needed.
"""

from dataclasses import dataclass

from circuits.fibonacci import FibonacciCircuit
from plonk.columns import Column, Selector
from plonk.constraint_system import ConstraintSystem
from plonk.layouter import AssignedCell, Layouter, Region

# Rotations read by the gate: x[r], x[r+1], x[r+2].
WINDOW = 3


@dataclass(frozen=True)
class FibonacciNarrowConfig:
    advice: Column
    selector: Selector
    instance: Column


class FibonacciNarrowChip:
    """Assigns the whole sequence in a single region."""

    def __init__(self, config: FibonacciNarrowConfig):
        self.config = config

    @staticmethod
    def configure(meta: ConstraintSystem, advice: Column, instance: Column) -> FibonacciNarrowConfig:
        meta.enable_equality(advice)
        meta.enable_equality(instance)

        selector = meta.allocate_selector()

        def fibonacci(vc):
            a = vc.query_advice(advice, 0)
            b = vc.query_advice(advice, 1)
            c = vc.query_advice(advice, 2)
            s = vc.query_selector(selector)
            return [s * (a + b - c)]

        meta.add_gate("fibonacci", selector, fibonacci)
        return FibonacciNarrowConfig(advice=advice, selector=selector, instance=instance)

    def assign(self, layouter: Layouter, a, b, n_rows: int) -> AssignedCell:
        column = self.config.advice
        last_window_start = n_rows - WINDOW

        def table(region: Region):
            a_cell = region.assign(column, 0, a)
            b_cell = region.assign(column, 1, b)
            for row in range(2, n_rows):
                c_cell = region.assign(column, row, a_cell.value + b_cell.value)
                a_cell, b_cell = b_cell, c_cell
            for row in range(last_window_start + 1):
                region.enable_selector(self.config.selector, row)
            return b_cell

        return layouter.assign_region("entire fibonacci table", table)

    def expose_public(self, layouter: Layouter, cell: AssignedCell, index: int) -> None:
        layouter.expose_public(cell, self.config.instance, index)


class FibonacciNarrow(FibonacciCircuit):
    """Fibonacci over n_terms terms in n_terms rows of a single column."""

    def configure(self, meta: ConstraintSystem) -> FibonacciNarrowConfig:
        advice = meta.advice_column()
        instance = meta.instance_column()
        return FibonacciNarrowChip.configure(meta, advice, instance)

    def synthesize(self, config: FibonacciNarrowConfig, layouter: Layouter) -> None:
        chip = FibonacciNarrowChip(config)
        last = chip.assign(layouter, self.a, self.b, self.n_terms)
        chip.expose_public(layouter, last, 0)

    def rows_needed(self) -> int:
        return self.n_terms
