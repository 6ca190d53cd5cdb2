"""PLONKish constraint system, region layouter and mock prover."""

from plonk.assignment import AssignmentTable, CopyConstraint, InstanceBinding
from plonk.columns import Cell, Column, ColumnKind, Selector
from plonk.constraint_system import ConstraintSystem, Gate, Schema, VirtualCells
from plonk.errors import (
    CellAlreadyAssigned,
    EqualityNotEnabled,
    InstanceTooLarge,
    PlonkError,
    RowDomainTooSmall,
    SchemaFrozenError,
)
from plonk.expressions import (
    Add,
    ColumnQuery,
    Constant,
    Expression,
    Mul,
    RowEvaluationContext,
    SelectorQuery,
    Sub,
    TableEvaluationContext,
)
from plonk.layouter import AssignedCell, Layouter, Region
from plonk.mock_prover import MockProver, Satisfied, Verdict, Violated, minimum_k
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

__all__ = [
    # Columns
    "Cell",
    "Column",
    "ColumnKind",
    "Selector",
    # Expressions
    "Expression",
    "ColumnQuery",
    "SelectorQuery",
    "Constant",
    "Add",
    "Sub",
    "Mul",
    "TableEvaluationContext",
    "RowEvaluationContext",
    # Schema
    "ConstraintSystem",
    "VirtualCells",
    "Gate",
    "Schema",
    # Synthesis
    "Layouter",
    "Region",
    "AssignedCell",
    "AssignmentTable",
    "CopyConstraint",
    "InstanceBinding",
    # Checking
    "MockProver",
    "Satisfied",
    "Violated",
    "Verdict",
    "minimum_k",
    # Errors
    "PlonkError",
    "SchemaFrozenError",
    "CellAlreadyAssigned",
    "EqualityNotEnabled",
    "RowDomainTooSmall",
    "InstanceTooLarge",
    # Violations
    "ConstraintNotSatisfied",
    "UnresolvedWitness",
    "CellNotAssigned",
    "CopyConstraintViolated",
    "CopyConstraintUnresolved",
    "InstanceMismatch",
    "InstanceIndexOutOfRange",
    "InstanceUnresolved",
]
