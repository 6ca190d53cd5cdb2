"""End-to-end tests for the wide and narrow Fibonacci circuits."""

import pytest

from circuits import CIRCUIT_REGISTRY, FibonacciNarrow, FibonacciWide, fibonacci_term, get_circuit
from plonk import (
    Cell,
    ColumnKind,
    ConstraintNotSatisfied,
    CopyConstraintUnresolved,
    CopyConstraintViolated,
    InstanceMismatch,
    InstanceUnresolved,
    MockProver,
    RowDomainTooSmall,
    Satisfied,
    UnresolvedWitness,
    Violated,
    minimum_k,
)
from primitives.field import FP, GL
from primitives.value import Value

LAYOUTS = sorted(CIRCUIT_REGISTRY)


def run(layout: str, a=1, b=1, n_terms=10, instances=None, k=None, field=FP) -> MockProver:
    circuit = get_circuit(layout, a, b, n_terms, field=field)
    if k is None:
        k = minimum_k(circuit)
    if instances is None:
        instances = [[int(fibonacci_term(field, a, b, n_terms))]]
    return MockProver.run(k, circuit, instances)


def gate_rows(verdict) -> list[int]:
    return sorted(v.row for v in verdict.violations if isinstance(v, ConstraintNotSatisfied))


# --- Reference Values ---

def test_fibonacci_term_tenth_is_55() -> None:
    assert int(fibonacci_term(FP, 1, 1, 10)) == 55


def test_fibonacci_term_wraps_in_field() -> None:
    assert fibonacci_term(FP, FP.order - 1, 1, 3) == FP(0)


def test_n_terms_below_three_rejected() -> None:
    for layout in LAYOUTS:
        with pytest.raises(ValueError):
            get_circuit(layout, 1, 1, 2)


def test_unknown_layout_rejected() -> None:
    with pytest.raises(KeyError):
        get_circuit("diagonal", 1, 1, 10)


# --- Honest Runs ---

class TestHonestRuns:
    """Seeds 1, 1 over ten terms, checked at k=4 as in the halo2 examples."""

    @pytest.mark.parametrize("layout", LAYOUTS)
    def test_satisfied_with_55(self, layout: str) -> None:
        prover = run(layout, instances=[[55]], k=4)
        verdict = prover.verify()
        assert isinstance(verdict, Satisfied)
        assert verdict.is_satisfied
        prover.assert_satisfied()

    @pytest.mark.parametrize("layout", LAYOUTS)
    def test_exposed_value_is_55(self, layout: str) -> None:
        prover = run(layout, k=4)
        [exposed] = prover.exposed_values()
        assert int(exposed.inner) == 55

    @pytest.mark.parametrize("layout", LAYOUTS)
    def test_wrong_public_input_single_mismatch(self, layout: str) -> None:
        verdict = run(layout, instances=[[54]], k=4).verify()
        assert isinstance(verdict, Violated)
        assert len(verdict.violations) == 1
        [mismatch] = verdict.violations
        assert isinstance(mismatch, InstanceMismatch)
        assert mismatch.index == 0
        assert mismatch.expected == 54
        assert mismatch.actual == 55

    @pytest.mark.parametrize("layout", LAYOUTS)
    def test_assert_satisfied_raises_on_mismatch(self, layout: str) -> None:
        with pytest.raises(AssertionError, match="Public input"):
            run(layout, instances=[[54]], k=4).assert_satisfied()

    def test_minimum_k_for_ten_terms(self) -> None:
        assert minimum_k(FibonacciWide(1, 1, 10)) == 4
        assert minimum_k(FibonacciNarrow(1, 1, 10)) == 4

    @pytest.mark.parametrize("layout", LAYOUTS)
    def test_domain_too_small(self, layout: str) -> None:
        with pytest.raises(RowDomainTooSmall):
            run(layout, k=3)

    def test_narrow_ten_terms_fill_usable_rows(self) -> None:
        prover = run("narrow", k=4)
        assert prover.table.usable_rows == 10
        with pytest.raises(RowDomainTooSmall):
            run("narrow", n_terms=11, k=4)


# --- Layout Details ---

class TestNarrowSelector:

    @pytest.mark.parametrize("n_terms", [3, 4, 10, 17])
    def test_selector_covers_full_windows_only(self, n_terms: int) -> None:
        prover = run("narrow", n_terms=n_terms)
        [selector] = prover.schema.selectors
        enabled = [r for r in range(prover.table.n) if prover.table.is_selector_enabled(selector, r)]
        assert enabled == list(range(n_terms - 2))

    def test_single_region_no_copies(self) -> None:
        prover = run("narrow")
        assert prover.table.region_names == ("entire fibonacci table",)
        assert prover.table.copies == ()


class TestWideLayout:

    def test_one_region_per_row(self) -> None:
        prover = run("wide", n_terms=10)
        assert len(prover.table.region_names) == 8
        assert prover.table.region_at(0) == "first row"
        assert prover.table.region_at(7) == "next row"
        assert prover.table.region_at(8) is None

    def test_two_copies_per_following_row(self) -> None:
        prover = run("wide", n_terms=10)
        assert len(prover.table.copies) == 2 * 7

    def test_three_terms_single_row(self) -> None:
        prover = run("wide", a=2, b=3, n_terms=3)
        assert isinstance(prover.verify(), Satisfied)
        assert int(prover.exposed_values()[0].inner) == 5


# --- Tampering ---

def _advice(prover: MockProver):
    return prover.schema.columns_of(ColumnKind.ADVICE)


class TestTampering:
    """A tampered cell is flagged by every check that reads it, and no other."""

    def test_wide_middle_cell(self) -> None:
        prover = run("wide")
        col_a, col_b, col_c = _advice(prover)
        tampered = prover.table.with_value(Cell(col_b, 3), 999)
        verdict = MockProver(prover.schema, tampered).verify()

        assert gate_rows(verdict) == [3]
        copies = {(v.left, v.right) for v in verdict.violations
                  if isinstance(v, CopyConstraintViolated)}
        assert copies == {
            (Cell(col_c, 2), Cell(col_b, 3)),
            (Cell(col_b, 3), Cell(col_a, 4)),
        }
        assert len(verdict.violations) == 3

    def test_wide_exposed_cell(self) -> None:
        prover = run("wide")
        _, _, col_c = _advice(prover)
        tampered = prover.table.with_value(Cell(col_c, 7), 56)
        verdict = MockProver(prover.schema, tampered).verify()

        assert gate_rows(verdict) == [7]
        assert verdict.of_type(CopyConstraintViolated) == []
        [mismatch] = verdict.of_type(InstanceMismatch)
        assert mismatch.actual == 56

    @pytest.mark.parametrize("layout", LAYOUTS)
    def test_instance_cell(self, layout: str) -> None:
        prover = run(layout)
        [instance] = prover.schema.columns_of(ColumnKind.INSTANCE)
        tampered = prover.table.with_value(Cell(instance, 0), 54)
        verdict = MockProver(prover.schema, tampered).verify()

        [mismatch] = verdict.violations
        assert isinstance(mismatch, InstanceMismatch)
        assert (mismatch.index, mismatch.expected, mismatch.actual) == (0, 54, 55)

    def test_instance_cell_made_unknown(self) -> None:
        prover = run("narrow")
        [instance] = prover.schema.columns_of(ColumnKind.INSTANCE)
        tampered = prover.table.with_value(Cell(instance, 0), Value.unknown())
        verdict = MockProver(prover.schema, tampered).verify()
        assert [type(v) for v in verdict.violations] == [InstanceUnresolved]

    def test_narrow_middle_cell(self) -> None:
        prover = run("narrow")
        [column] = _advice(prover)
        tampered = prover.table.with_value(Cell(column, 4), 0)
        verdict = MockProver(prover.schema, tampered).verify()

        # Row 4 is read at rotation 2, 1 and 0 by the gates at rows 2, 3, 4.
        assert gate_rows(verdict) == [2, 3, 4]
        assert len(verdict.violations) == 3

    def test_narrow_first_cell(self) -> None:
        prover = run("narrow")
        [column] = _advice(prover)
        tampered = prover.table.with_value(Cell(column, 0), 7)
        verdict = MockProver(prover.schema, tampered).verify()
        assert gate_rows(verdict) == [0]

    def test_violation_carries_cell_values(self) -> None:
        prover = run("narrow")
        [column] = _advice(prover)
        tampered = prover.table.with_value(Cell(column, 2), 10)
        verdict = MockProver(prover.schema, tampered).verify()
        first = verdict.violations[0]
        assert first.row == 0
        assert first.gate == "fibonacci"
        assert first.region == "entire fibonacci table"
        assert [(rot, v) for _, rot, v in first.cell_values] == [(0, 1), (1, 1), (2, 10)]

    def test_original_table_untouched(self) -> None:
        prover = run("narrow")
        [column] = _advice(prover)
        prover.table.with_value(Cell(column, 4), 0)
        assert isinstance(prover.verify(), Satisfied)


class TestSelectorGating:

    def test_narrow_disabled_row_not_checked(self) -> None:
        prover = run("narrow")
        [column] = _advice(prover)
        [selector] = prover.schema.selectors
        tampered = prover.table.with_value(Cell(column, 4), 0)
        tampered = tampered.with_selector(selector, 4, False)
        verdict = MockProver(prover.schema, tampered).verify()
        assert gate_rows(verdict) == [2, 3]

    def test_narrow_all_reading_rows_disabled(self) -> None:
        prover = run("narrow")
        [column] = _advice(prover)
        [selector] = prover.schema.selectors
        tampered = prover.table.with_value(Cell(column, 4), 0)
        for row in (2, 3, 4):
            tampered = tampered.with_selector(selector, row, False)
        assert isinstance(MockProver(prover.schema, tampered).verify(), Satisfied)

    def test_wide_disabled_row_keeps_copy_violation(self) -> None:
        prover = run("wide")
        _, _, col_c = _advice(prover)
        [selector] = prover.schema.selectors
        tampered = prover.table.with_value(Cell(col_c, 3), 1000)
        tampered = tampered.with_selector(selector, 3, False)
        verdict = MockProver(prover.schema, tampered).verify()
        assert gate_rows(verdict) == []
        assert len(verdict.of_type(CopyConstraintViolated)) == 1


# --- Layout Equivalence ---

SEEDS = [(1, 1), (0, 1), (2, 3), (5, 8), (FP.order - 1, 1), (12345678901234567890, 42)]


def shared_k(n_terms: int) -> int:
    """Smallest k that fits both layouts; narrow needs two more rows than wide."""
    return max(minimum_k(get_circuit(layout, 1, 1, n_terms)) for layout in LAYOUTS)


class TestLayoutEquivalence:
    """Wide and narrow layouts agree on verdicts and exposed values.

    Both layouts run over the same domain, large enough for the narrow
    layout's n_terms rows (wide uses n_terms - 2).
    """

    @pytest.mark.parametrize("a, b", SEEDS)
    @pytest.mark.parametrize("n_terms", [3, 4, 10, 11, 21])
    def test_same_exposed_value(self, a: int, b: int, n_terms: int) -> None:
        k = shared_k(n_terms)
        wide = run("wide", a, b, n_terms, k=k)
        narrow = run("narrow", a, b, n_terms, k=k)
        assert wide.exposed_values() == narrow.exposed_values()
        assert int(wide.exposed_values()[0].inner) == int(fibonacci_term(FP, a, b, n_terms))
        assert type(wide.verify()) is type(narrow.verify()) is Satisfied

    @pytest.mark.parametrize("a, b", SEEDS[:3])
    @pytest.mark.parametrize("n_terms", [5, 12])
    def test_same_rejection(self, a: int, b: int, n_terms: int) -> None:
        wrong = int(fibonacci_term(FP, a, b, n_terms)) + 1
        k = shared_k(n_terms)
        wide = run("wide", a, b, n_terms, instances=[[wrong]], k=k).verify()
        narrow = run("narrow", a, b, n_terms, instances=[[wrong]], k=k).verify()
        assert type(wide) is type(narrow) is Violated
        assert [type(v) for v in wide.violations] == [type(v) for v in narrow.violations] == [InstanceMismatch]

    @pytest.mark.parametrize("layout", LAYOUTS)
    def test_goldilocks_field(self, layout: str) -> None:
        prover = run(layout, a=1, b=1, n_terms=10, field=GL, instances=[[55]])
        assert isinstance(prover.verify(), Satisfied)

    def test_row_counts_differ_at_fixed_k(self) -> None:
        """At k=4, eleven terms fit the wide layout's 9 rows but not the narrow layout's 11."""
        assert run("wide", n_terms=11, k=4).verify().is_satisfied
        with pytest.raises(RowDomainTooSmall):
            run("narrow", n_terms=11, k=4)
        assert shared_k(11) == 5


# --- Unknown Witnesses ---

class TestWithoutWitnesses:

    @pytest.mark.parametrize("layout", LAYOUTS)
    def test_nothing_reported_as_violation(self, layout: str) -> None:
        circuit = get_circuit(layout, 1, 1, 10).without_witnesses()
        verdict = MockProver.run(4, circuit, [[55]]).verify()
        assert isinstance(verdict, Violated)
        assert verdict.of_type(ConstraintNotSatisfied) == []
        assert verdict.of_type(CopyConstraintViolated) == []
        assert verdict.of_type(InstanceMismatch) == []
        assert len(verdict.of_type(InstanceUnresolved)) == 1

    def test_wide_every_gate_row_unresolved(self) -> None:
        verdict = MockProver.run(4, FibonacciWide(n_terms=10), [[55]]).verify()
        assert sorted(v.row for v in verdict.of_type(UnresolvedWitness)) == list(range(8))
        assert len(verdict.of_type(CopyConstraintUnresolved)) == 14

    def test_narrow_partial_witness(self) -> None:
        # Only b unknown: row 0 reads it, so does every row after.
        prover = MockProver.run(4, FibonacciNarrow(a=1, n_terms=10), [[55]])
        unresolved = prover.verify().of_type(UnresolvedWitness)
        assert [v.row for v in unresolved] == list(range(8))
        [column] = _advice(prover)
        assert unresolved[0].cells == (Cell(column, 1), Cell(column, 2))

