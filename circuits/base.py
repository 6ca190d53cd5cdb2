"""Base class for circuit definitions.

A circuit has two phases, mirrored by its two abstract methods:

- configure(meta) declares columns, selectors, gates and equality support on
  a ConstraintSystem and returns whatever handles synthesize() will need
  (the circuit's "config").
- synthesize(config, layouter) assigns witnesses region by region and binds
  public outputs.

MockProver.run() drives both phases. Circuits hold their witnesses as
Values; without_witnesses() returns the same circuit with every witness
unknown, which must still configure and synthesize (only checking changes).
"""

from abc import ABC, abstractmethod
from typing import Any, Union

import galois

from plonk.constraint_system import ConstraintSystem
from plonk.layouter import Layouter
from primitives.field import FF, to_field
from primitives.value import Value

Witness = Union[Value, int, galois.FieldArray]


class Circuit(ABC):
    """Configure/synthesize pair over a prime field."""

    field: type = FF

    def witness(self, x: Witness) -> Value:
        """Normalize an int, field element or Value into a Value over self.field."""
        if isinstance(x, Value):
            return x.map(lambda inner: to_field(self.field, inner))
        return Value.known(to_field(self.field, x))

    @abstractmethod
    def configure(self, meta: ConstraintSystem) -> Any:
        """Declare the circuit's columns and gates. Returns the circuit's config."""
        pass

    @abstractmethod
    def synthesize(self, config: Any, layouter: Layouter) -> None:
        """Assign witnesses and expose public outputs."""
        pass

    @abstractmethod
    def without_witnesses(self) -> "Circuit":
        """Same circuit with every witness replaced by Value.unknown()."""
        pass

    @abstractmethod
    def rows_needed(self) -> int:
        """Rows synthesize() will use; checked against the domain before synthesis."""
        pass
