"""Structural errors raised while configuring or synthesizing a circuit.

These abort immediately: a schema or assignment table that hit one of them
is not trustworthy and must never reach the checker. Semantic failures
found while checking a finished table are not exceptions; they are the
violation records in plonk.violations.
"""


class PlonkError(Exception):
    """Base class for configuration and synthesis errors."""


class SchemaFrozenError(PlonkError):
    """Raised when the constraint system is modified after freeze()."""


class CellAlreadyAssigned(PlonkError):
    """A cell was written twice during synthesis."""

    def __init__(self, column, row: int, region: str = ""):
        self.column = column
        self.row = row
        self.region = region
        where = f" in region '{region}'" if region else ""
        super().__init__(f"Cell ({column}, row {row}) already assigned{where}")


class EqualityNotEnabled(PlonkError):
    """A copy constraint or instance binding touched a column without equality support."""

    def __init__(self, column):
        self.column = column
        super().__init__(f"Equality constraints not enabled on {column}")


class RowDomainTooSmall(PlonkError):
    """The 2^k row domain can't hold the rows the circuit needs."""

    def __init__(self, k: int, required: int, usable: int):
        self.k = k
        self.required = required
        self.usable = usable
        super().__init__(
            f"k={k} gives {usable} usable rows, but {required} are required"
        )


class InstanceTooLarge(RowDomainTooSmall):
    """A public-input vector is longer than the usable rows."""

    def __init__(self, k: int, column, length: int, usable: int):
        self.column = column
        super().__init__(k, length, usable)
        self.args = (f"Public input for {column} has {length} values, "
                     f"but k={k} gives {usable} usable rows",)
