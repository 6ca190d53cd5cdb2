"""Constraint system builder and the frozen schema it produces.

A circuit's configure step allocates columns and selectors, declares gates
and marks which columns take part in copy constraints. freeze() then turns
the builder into an immutable Schema, which the layouter and the checker
share.

Example:
    meta = ConstraintSystem(FP)
    col = meta.advice_column()
    meta.enable_equality(col)
    s = meta.allocate_selector()
    meta.add_gate("double", s, lambda vc: vc.query_selector(s) * (
        vc.query_advice(col, 0) * 2 - vc.query_advice(col, 1)))
    schema = meta.freeze()
"""

from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, List, Sequence, Set, Tuple, Union

from plonk.columns import Column, ColumnKind, Selector
from plonk.errors import SchemaFrozenError
from plonk.expressions import ColumnQuery, Expression, Query, SelectorQuery

# Minimum number of blinding rows a proving backend reserves per column.
MIN_BLINDING_FACTORS = 3


# --- Gates ---

@dataclass(frozen=True)
class Gate:
    """Named set of polynomials that must vanish where `selector` is enabled."""
    name: str
    selector: Selector
    polynomials: Tuple[Expression, ...]

    def column_queries(self) -> FrozenSet[Query]:
        queries: FrozenSet[Query] = frozenset()
        for poly in self.polynomials:
            queries |= poly.column_queries()
        return queries

    def degree(self) -> int:
        return max(poly.degree() for poly in self.polynomials)


class VirtualCells:
    """Query interface handed to gate builders."""

    def __init__(self, meta: "ConstraintSystem"):
        self._meta = meta

    def query(self, column: Column, rotation: int = 0) -> Expression:
        self._meta._check_column(column)
        return ColumnQuery(column, rotation)

    def query_advice(self, column: Column, rotation: int = 0) -> Expression:
        return self.query(_expect_kind(column, ColumnKind.ADVICE), rotation)

    def query_instance(self, column: Column, rotation: int = 0) -> Expression:
        return self.query(_expect_kind(column, ColumnKind.INSTANCE), rotation)

    def query_fixed(self, column: Column, rotation: int = 0) -> Expression:
        return self.query(_expect_kind(column, ColumnKind.FIXED), rotation)

    def query_selector(self, selector: Selector) -> Expression:
        self._meta._check_selector(selector)
        return SelectorQuery(selector)


def _expect_kind(column: Column, kind: ColumnKind) -> Column:
    if column.kind is not kind:
        raise TypeError(f"Expected {kind.value} column, got {column}")
    return column


# --- Schema ---

@dataclass(frozen=True)
class Schema:
    """Immutable result of the configure phase."""
    field: type
    columns: Tuple[Column, ...]
    selectors: Tuple[Selector, ...]
    gates: Tuple[Gate, ...]
    equality_columns: FrozenSet[Column]

    def columns_of(self, kind: ColumnKind) -> Tuple[Column, ...]:
        return tuple(c for c in self.columns if c.kind is kind)

    def is_equality_enabled(self, column: Column) -> bool:
        return column in self.equality_columns

    def blinding_factors(self) -> int:
        """Rows at the end of the domain a prover fills with random blinding values.

        One per query of the most-queried advice column (at least
        MIN_BLINDING_FACTORS), plus one for the permutation argument and one
        so the evaluation at the challenge point stays hidden.
        """
        queries: Set[Query] = set()
        for gate in self.gates:
            queries |= gate.column_queries()
        queries_per_column: Dict[Column, int] = {}
        for column, _ in queries:
            if column.kind is ColumnKind.ADVICE:
                queries_per_column[column] = queries_per_column.get(column, 0) + 1
        factors = max([MIN_BLINDING_FACTORS, *queries_per_column.values()])
        return factors + 2

    def reserved_rows(self) -> int:
        """Rows unavailable to the circuit: blinding rows plus the last-row marker."""
        return self.blinding_factors() + 1

    def usable_rows(self, k: int) -> int:
        return (1 << k) - self.reserved_rows()


# --- Builder ---

class ConstraintSystem:
    """Mutable builder for a Schema. Not usable after freeze()."""

    def __init__(self, field: type):
        self.field = field
        self._columns: List[Column] = []
        self._counts: Dict[ColumnKind, int] = {kind: 0 for kind in ColumnKind}
        self._selectors: List[Selector] = []
        self._gates: List[Gate] = []
        self._equality: List[Column] = []
        self._frozen = False

    def _check_mutable(self) -> None:
        if self._frozen:
            raise SchemaFrozenError("Constraint system is frozen; configure has finished")

    def _check_column(self, column: Column) -> None:
        if column not in self._columns:
            raise ValueError(f"{column} was not allocated by this constraint system")

    def _check_selector(self, selector: Selector) -> None:
        if selector not in self._selectors:
            raise ValueError(f"{selector} was not allocated by this constraint system")

    # Columns

    def allocate_column(self, kind: ColumnKind) -> Column:
        self._check_mutable()
        column = Column(self._counts[kind], kind)
        self._counts[kind] += 1
        self._columns.append(column)
        return column

    def advice_column(self) -> Column:
        return self.allocate_column(ColumnKind.ADVICE)

    def instance_column(self) -> Column:
        return self.allocate_column(ColumnKind.INSTANCE)

    def fixed_column(self) -> Column:
        return self.allocate_column(ColumnKind.FIXED)

    def enable_equality(self, column: Column) -> None:
        self._check_mutable()
        self._check_column(column)
        if column not in self._equality:
            self._equality.append(column)

    # Selectors and gates

    def allocate_selector(self) -> Selector:
        self._check_mutable()
        selector = Selector(len(self._selectors))
        self._selectors.append(selector)
        return selector

    def add_gate(
        self,
        name: str,
        selector: Selector,
        builder: Callable[[VirtualCells], Union[Expression, Sequence[Expression]]],
    ) -> Gate:
        """Register a gate.

        Args:
            name: Gate name, used in violation reports
            selector: Rows where the gate is enforced
            builder: Called with a VirtualCells; returns the polynomial(s)
                that must evaluate to zero

        Returns:
            The registered Gate
        """
        self._check_mutable()
        self._check_selector(selector)
        polys = builder(VirtualCells(self))
        if isinstance(polys, Expression):
            polys = [polys]
        polys = tuple(polys)
        if not polys:
            raise ValueError(f"Gate '{name}' has no polynomials")
        for poly in polys:
            if not isinstance(poly, Expression):
                raise TypeError(f"Gate '{name}' returned {type(poly).__name__}, expected Expression")
        gate = Gate(name, selector, polys)
        self._gates.append(gate)
        return gate

    def freeze(self) -> Schema:
        self._check_mutable()
        self._frozen = True
        return Schema(
            field=self.field,
            columns=tuple(self._columns),
            selectors=tuple(self._selectors),
            gates=tuple(self._gates),
            equality_columns=frozenset(self._equality),
        )
