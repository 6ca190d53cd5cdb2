"""Mock prover: checks a synthesized circuit without generating a proof.

The mock prover sees every witness, so instead of a proof it produces a
verdict listing each place the assignment breaks the circuit's rules. It
is the debugging step before real proof generation: if MockProver rejects
an assignment, no backend could prove it.

Checking runs in a fixed order and never stops early:
1. Gates - every polynomial of every gate, at every row where the gate's
   selector is enabled, must evaluate to zero.
2. Copy constraints - both cells of each recorded pair must be equal.
3. Instance bindings - each exposed cell must equal its public input.

Structural problems (double assignment, missing equality support, a domain
that is too small) are exceptions raised by run(); they never reach
verify().

Example:
    prover = MockProver.run(4, FibonacciWide(a=1, b=1), [[55]])
    verdict = prover.verify()
    assert verdict.is_satisfied
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from plonk.assignment import AssignmentTable
from plonk.columns import Cell, ColumnKind
from plonk.constraint_system import ConstraintSystem, Gate, Schema
from plonk.errors import RowDomainTooSmall
from plonk.expressions import Expression, RowEvaluationContext, TableEvaluationContext
from plonk.layouter import Layouter
from plonk.violations import (
    CellNotAssigned,
    ConstraintNotSatisfied,
    CopyConstraintUnresolved,
    CopyConstraintViolated,
    InstanceIndexOutOfRange,
    InstanceMismatch,
    InstanceUnresolved,
    UnresolvedWitness,
)
from primitives.value import Value

logger = logging.getLogger(__name__)


# --- Verdicts ---

class Verdict:
    """Result of MockProver.verify()."""
    violations: Tuple

    @property
    def is_satisfied(self) -> bool:
        return not self.violations

    def of_type(self, kind: type) -> list:
        return [v for v in self.violations if isinstance(v, kind)]


@dataclass(frozen=True)
class Satisfied(Verdict):
    """Every gate, copy constraint and instance binding holds."""
    violations: Tuple = ()


@dataclass(frozen=True)
class Violated(Verdict):
    """At least one check failed; `violations` lists them in check order."""
    violations: Tuple


# --- Domain Sizing ---

def _configure(circuit) -> Tuple[Schema, object]:
    meta = ConstraintSystem(circuit.field)
    config = circuit.configure(meta)
    return meta.freeze(), config


def minimum_k(circuit) -> int:
    """Smallest k whose 2^k domain holds the circuit's rows plus reserved rows."""
    schema, _ = _configure(circuit)
    total = circuit.rows_needed() + schema.reserved_rows()
    return max(1, (total - 1).bit_length())


# --- Mock Prover ---

class MockProver:
    """Checks one circuit instance's assignment table against its schema."""

    def __init__(self, schema: Schema, table: AssignmentTable):
        self.schema = schema
        self.table = table

    @classmethod
    def run(cls, k: int, circuit, instances: Sequence[Sequence]) -> "MockProver":
        """Configure and synthesize `circuit` over a 2^k row domain.

        Args:
            k: log2 of the domain size
            circuit: Circuit to configure and synthesize
            instances: One public-input vector per instance column

        Returns:
            MockProver ready to verify()

        Raises:
            RowDomainTooSmall: If the circuit needs more rows than 2^k leaves usable
            PlonkError: Any structural error raised during synthesis
        """
        if k < 0:
            raise ValueError(f"k must be non-negative, got {k}")
        schema, config = _configure(circuit)

        usable = schema.usable_rows(k)
        required = circuit.rows_needed()
        if required > usable:
            logger.warning("k=%d is too small: %d rows required, %d usable", k, required, usable)
            raise RowDomainTooSmall(k, required, usable)

        layouter = Layouter(schema, k)
        circuit.synthesize(config, layouter)
        return cls(schema, layouter.finalize(instances))

    def verify(self) -> Verdict:
        """Run every check and collect all violations.

        Returns:
            Satisfied() or Violated(violations)
        """
        violations: List = []
        violations.extend(self._check_gates())
        violations.extend(self._check_copies())
        violations.extend(self._check_instances())

        logger.info("Checked %d gates, %d copy constraints, %d instance bindings over %d rows: %d violation(s)",
                    len(self.schema.gates), len(self.table.copies), len(self.table.bindings),
                    self.table.n, len(violations))
        if violations:
            return Violated(tuple(violations))
        return Satisfied()

    def assert_satisfied(self) -> None:
        """Raise AssertionError listing every violation, if there are any."""
        verdict = self.verify()
        if not verdict.is_satisfied:
            lines = "\n".join(f"  {v}" for v in verdict.violations)
            raise AssertionError(f"Circuit not satisfied ({len(verdict.violations)} violations):\n{lines}")

    def exposed_values(self) -> List[Value]:
        """Values of the cells bound to public inputs, in binding order."""
        return [self.table.cell_value(b.cell) for b in self.table.bindings]

    # --- Gates ---

    def _evaluate(self, poly: Expression, ctx: TableEvaluationContext) -> np.ndarray:
        values = poly.evaluate(ctx)
        if np.ndim(values) == 0:
            values = self.table.field.Zeros(self.table.n) + values
        return values.view(np.ndarray) != 0

    def _check_gates(self) -> List:
        table = self.table
        n = table.n
        ctx = TableEvaluationContext(table)
        violations: List = []

        for gate in self.schema.gates:
            active = table.selector_rows(gate.selector)
            if not active.any():
                continue
            queries = sorted(gate.column_queries(),
                             key=lambda q: (q[0].kind.value, q[0].index, q[1]))

            # Rolled masks: entry r describes the cell query q reads at row r.
            unassigned = {q: ~np.roll(table.assigned_mask(q[0]), -q[1]) for q in queries}
            unknown = {q: ~np.roll(table.known_mask(q[0]), -q[1]) & ~unassigned[q] for q in queries}
            any_unassigned = np.zeros(n, dtype=bool)
            any_unknown = np.zeros(n, dtype=bool)
            for q in queries:
                any_unassigned |= unassigned[q]
                any_unknown |= unknown[q]

            nonzero = [self._evaluate(poly, ctx) for poly in gate.polynomials]
            any_nonzero = np.zeros(n, dtype=bool)
            for mask in nonzero:
                any_nonzero |= mask

            flagged = active & (any_unassigned | any_unknown | any_nonzero)
            for row in np.flatnonzero(flagged):
                row = int(row)
                violations.extend(self._gate_row_violations(gate, row, queries, unassigned, unknown, nonzero))

        return violations

    def _gate_row_violations(self, gate: Gate, row: int, queries, unassigned, unknown, nonzero) -> List:
        table = self.table
        region = table.region_at(row)

        def cell(q) -> Cell:
            return Cell(q[0], (row + q[1]) % table.n)

        missing = [cell(q) for q in queries if unassigned[q][row]]
        if missing:
            return [CellNotAssigned(gate.name, row, c, region) for c in missing]

        open_cells = tuple(cell(q) for q in queries if unknown[q][row])
        if open_cells:
            return [UnresolvedWitness(gate.name, row, open_cells, region)]

        row_ctx = RowEvaluationContext(table, row)
        cell_values = tuple(
            (column, rotation, int(row_ctx.column(column, rotation).inner))
            for column, rotation in queries
        )
        return [
            ConstraintNotSatisfied(gate.name, index, row, region, cell_values)
            for index, mask in enumerate(nonzero) if mask[row]
        ]

    # --- Copy Constraints ---

    def _check_copies(self) -> List:
        violations: List = []
        for copy in self.table.copies:
            left = self.table.cell_value(copy.left)
            right = self.table.cell_value(copy.right)
            if not (left.is_known() and right.is_known()):
                violations.append(CopyConstraintUnresolved(copy.left, copy.right))
            elif left != right:
                violations.append(CopyConstraintViolated(copy.left, copy.right))
        return violations

    # --- Instance Bindings ---

    def _check_instances(self) -> List:
        instance_columns = self.schema.columns_of(ColumnKind.INSTANCE)
        violations: List = []
        for binding in self.table.bindings:
            vector = self.table.instances[instance_columns.index(binding.column)]
            if binding.index >= len(vector):
                violations.append(InstanceIndexOutOfRange(binding.column, binding.index, len(vector)))
                continue
            # The instance cell itself is the bound side, as a copy constraint would read it.
            public = self.table.value(binding.column, binding.index)
            value = self.table.cell_value(binding.cell)
            if not (value.is_known() and public.is_known()):
                violations.append(InstanceUnresolved(binding.column, binding.index, binding.cell))
                continue
            expected = int(public.inner)
            actual = int(value.inner)
            if expected != actual:
                violations.append(InstanceMismatch(binding.column, binding.index, expected, actual))
        return violations
