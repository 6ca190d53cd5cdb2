"""Wide Fibonacci layout: three advice columns, one row per step.

    a      | b      | c      | s
    f(0)   | f(1)   | f(2)   | 1     first row, assigned fresh
    f(1)   | f(2)   | f(3)   | 1     a, b copied from the row above
    ...
    f(n-3) | f(n-2) | f(n-1) | 1     c is exposed as instance[0][0]

Gate "fibonacci": s * (a + b - c) = 0, every query at rotation 0. The
rows are chained only by copy constraints, so each row is its own region.
"""

from dataclasses import dataclass
from typing import Tuple

from circuits.fibonacci import FibonacciCircuit
from plonk.columns import Column, Selector
from plonk.constraint_system import ConstraintSystem
from plonk.layouter import AssignedCell, Layouter, Region


@dataclass(frozen=True)
class FibonacciWideConfig:
    advice: Tuple[Column, Column, Column]
    selector: Selector
    instance: Column


class FibonacciWideChip:
    """Region-level assignment helpers for the wide layout."""

    def __init__(self, config: FibonacciWideConfig):
        self.config = config

    @staticmethod
    def configure(meta: ConstraintSystem, advice: Tuple[Column, Column, Column],
                  instance: Column) -> FibonacciWideConfig:
        col_a, col_b, col_c = advice
        for column in (col_a, col_b, col_c, instance):
            meta.enable_equality(column)

        selector = meta.allocate_selector()

        def fibonacci(vc):
            a = vc.query_advice(col_a, 0)
            b = vc.query_advice(col_b, 0)
            c = vc.query_advice(col_c, 0)
            s = vc.query_selector(selector)
            return [s * (a + b - c)]

        meta.add_gate("fibonacci", selector, fibonacci)
        return FibonacciWideConfig(advice=(col_a, col_b, col_c), selector=selector, instance=instance)

    def assign_first_row(self, layouter: Layouter, a, b) -> Tuple[AssignedCell, AssignedCell, AssignedCell]:
        col_a, col_b, col_c = self.config.advice

        def first_row(region: Region):
            region.enable_selector(self.config.selector, 0)
            a_cell = region.assign(col_a, 0, a)
            b_cell = region.assign(col_b, 0, b)
            c_cell = region.assign(col_c, 0, a + b)
            return a_cell, b_cell, c_cell

        return layouter.assign_region("first row", first_row)

    def assign_row(self, layouter: Layouter, prev_b: AssignedCell,
                   prev_c: AssignedCell) -> Tuple[AssignedCell, AssignedCell]:
        col_a, col_b, col_c = self.config.advice

        def next_row(region: Region):
            region.enable_selector(self.config.selector, 0)
            region.copy(prev_b, col_a, 0)
            b_cell = region.copy(prev_c, col_b, 0)
            c_cell = region.assign(col_c, 0, prev_b.value + prev_c.value)
            return b_cell, c_cell

        return layouter.assign_region("next row", next_row)

    def expose_public(self, layouter: Layouter, cell: AssignedCell, index: int) -> None:
        layouter.expose_public(cell, self.config.instance, index)


class FibonacciWide(FibonacciCircuit):
    """Fibonacci over n_terms terms in n_terms - 2 rows of (a, b, c)."""

    def configure(self, meta: ConstraintSystem) -> FibonacciWideConfig:
        advice = (meta.advice_column(), meta.advice_column(), meta.advice_column())
        instance = meta.instance_column()
        return FibonacciWideChip.configure(meta, advice, instance)

    def synthesize(self, config: FibonacciWideConfig, layouter: Layouter) -> None:
        chip = FibonacciWideChip(config)
        _, prev_b, prev_c = chip.assign_first_row(layouter, self.a, self.b)
        # The first row already holds three terms; each further row adds one.
        for _ in range(3, self.n_terms):
            prev_b, prev_c = chip.assign_row(layouter, prev_b, prev_c)
        chip.expose_public(layouter, prev_c, 0)

    def rows_needed(self) -> int:
        return self.n_terms - 2
