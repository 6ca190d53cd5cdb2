"""Gate expressions and the contexts they are evaluated in.

A gate is a list of Expression trees. Leaves query the assignment table
(ColumnQuery, SelectorQuery) or hold a constant; internal nodes are Add,
Sub and Mul. Trees are plain data, so the same gate can be evaluated,
inspected for the cells it reads, or printed.

Evaluation is a tree walk against an EvaluationContext, which decides what a
leaf means:

- TableEvaluationContext returns whole columns (galois arrays), rotating
  them with np.roll, so one walk yields the gate's value on every row.
- RowEvaluationContext returns Values at a single row, propagating unknown
  witnesses. The checker uses it to report the cells behind a failure.

Example:
    a = meta.query_advice(col_a, 0)
    b = meta.query_advice(col_a, 1)
    s = meta.query_selector(sel)
    gate = s * (a + b - meta.query_advice(col_a, 2))

    values = gate.evaluate(TableEvaluationContext(table))   # one per row
    at_3 = gate.evaluate(RowEvaluationContext(table, 3))     # Value
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, FrozenSet, Tuple, Union

import numpy as np

from plonk.columns import Column, Selector
from primitives.field import to_field
from primitives.value import Value

if TYPE_CHECKING:
    from plonk.assignment import AssignmentTable

Query = Tuple[Column, int]


# --- Expression Trees ---

class Expression(ABC):
    """Polynomial over queried cells."""

    @abstractmethod
    def evaluate(self, ctx: "EvaluationContext"):
        pass

    @abstractmethod
    def column_queries(self) -> FrozenSet[Query]:
        """(column, rotation) pairs read by this expression."""
        pass

    @abstractmethod
    def selectors(self) -> FrozenSet[Selector]:
        pass

    @abstractmethod
    def degree(self) -> int:
        pass

    def __add__(self, other: Union["Expression", int]) -> "Expression":
        return Add(self, _lift(other))

    def __radd__(self, other: int) -> "Expression":
        return Add(_lift(other), self)

    def __sub__(self, other: Union["Expression", int]) -> "Expression":
        return Sub(self, _lift(other))

    def __rsub__(self, other: int) -> "Expression":
        return Sub(_lift(other), self)

    def __mul__(self, other: Union["Expression", int]) -> "Expression":
        return Mul(self, _lift(other))

    def __rmul__(self, other: int) -> "Expression":
        return Mul(_lift(other), self)

    def __neg__(self) -> "Expression":
        return Sub(Constant(0), self)


def _lift(x: Union[Expression, int]) -> Expression:
    if isinstance(x, Expression):
        return x
    if isinstance(x, int):
        return Constant(x)
    raise TypeError(f"Cannot use {type(x).__name__} in a gate expression")


class Constant(Expression):
    """Integer constant, reduced into the field at evaluation time."""

    def __init__(self, value: int):
        self.value = value

    def evaluate(self, ctx):
        return ctx.constant(self.value)

    def column_queries(self):
        return frozenset()

    def selectors(self):
        return frozenset()

    def degree(self):
        return 0

    def __repr__(self):
        return str(self.value)


class ColumnQuery(Expression):
    """Value of `column` at the current row + `rotation`."""

    def __init__(self, column: Column, rotation: int = 0):
        self.column = column
        self.rotation = rotation

    def evaluate(self, ctx):
        return ctx.column(self.column, self.rotation)

    def column_queries(self):
        return frozenset({(self.column, self.rotation)})

    def selectors(self):
        return frozenset()

    def degree(self):
        return 1

    def __repr__(self):
        return f"{self.column}[{self.rotation:+d}]"


class SelectorQuery(Expression):
    """1 where the selector is enabled, 0 elsewhere."""

    def __init__(self, selector: Selector):
        self.selector = selector

    def evaluate(self, ctx):
        return ctx.selector(self.selector)

    def column_queries(self):
        return frozenset()

    def selectors(self):
        return frozenset({self.selector})

    def degree(self):
        return 1

    def __repr__(self):
        return str(self.selector)


class _BinaryOp(Expression):
    symbol = "?"

    def __init__(self, left: Expression, right: Expression):
        self.left = left
        self.right = right

    def column_queries(self):
        return self.left.column_queries() | self.right.column_queries()

    def selectors(self):
        return self.left.selectors() | self.right.selectors()

    def degree(self):
        return max(self.left.degree(), self.right.degree())

    def __repr__(self):
        return f"({self.left!r} {self.symbol} {self.right!r})"


class Add(_BinaryOp):
    symbol = "+"

    def evaluate(self, ctx):
        return self.left.evaluate(ctx) + self.right.evaluate(ctx)


class Sub(_BinaryOp):
    symbol = "-"

    def evaluate(self, ctx):
        return self.left.evaluate(ctx) - self.right.evaluate(ctx)


class Mul(_BinaryOp):
    symbol = "*"

    def evaluate(self, ctx):
        return self.left.evaluate(ctx) * self.right.evaluate(ctx)

    def degree(self):
        return self.left.degree() + self.right.degree()


# --- Evaluation Contexts ---

class EvaluationContext(ABC):
    """What the leaves of an expression resolve to."""

    @abstractmethod
    def column(self, column: Column, rotation: int):
        pass

    @abstractmethod
    def selector(self, selector: Selector):
        pass

    @abstractmethod
    def constant(self, value: int):
        pass


class TableEvaluationContext(EvaluationContext):
    """Whole-table evaluation - leaves are arrays of length n.

    Rotations wrap around the domain, so row r of a query at rotation k
    reads row (r + k) mod n. Unknown and unassigned cells read as zero here;
    the checker masks those rows out using the table's known/assigned masks.
    """

    def __init__(self, table: "AssignmentTable"):
        self._table = table

    def column(self, column: Column, rotation: int):
        return np.roll(self._table.column_values(column), -rotation)

    def selector(self, selector: Selector):
        field = self._table.field
        values = field.Zeros(self._table.n)
        values[self._table.selector_rows(selector)] = 1
        return values

    def constant(self, value: int):
        return to_field(self._table.field, value)


class RowEvaluationContext(EvaluationContext):
    """Single-row evaluation - leaves are Values at `row`."""

    def __init__(self, table: "AssignmentTable", row: int):
        self._table = table
        self._row = row

    def column(self, column: Column, rotation: int) -> Value:
        return self._table.value(column, (self._row + rotation) % self._table.n)

    def selector(self, selector: Selector) -> Value:
        enabled = self._table.is_selector_enabled(selector, self._row)
        return Value.known(self._table.field(1 if enabled else 0))

    def constant(self, value: int) -> Value:
        return Value.known(to_field(self._table.field, value))
