"""Run configuration for the Fibonacci circuits.

A RunConfig names a layout, its seeds and length, the field, the domain size
and the public inputs to check against. It loads from a dict or a JSON file:

    {
        "layout": "narrow",
        "a": 1,
        "b": 1,
        "n_terms": 10,
        "k": 4,
        "field": "pasta_fp",
        "instances": [[55]]
    }

Every key but "layout" is optional. A missing k is replaced by the smallest
domain that fits; missing instances default to the expected Fibonacci term,
so a bare config checks an honest run.
"""

import json
from dataclasses import dataclass
from typing import List, Optional

from circuits import fibonacci_term, get_circuit
from circuits.fibonacci import DEFAULT_TERMS
from plonk.mock_prover import MockProver, minimum_k
from primitives.field import get_field

_KNOWN_KEYS = {"layout", "a", "b", "n_terms", "k", "field", "instances"}


@dataclass
class RunConfig:
    """Parameters for one configure/synthesize/check run."""
    layout: str
    a: int = 1
    b: int = 1
    n_terms: int = DEFAULT_TERMS
    k: Optional[int] = None
    field: str = "pasta_fp"
    instances: Optional[List[List[int]]] = None

    @classmethod
    def from_dict(cls, d: dict) -> "RunConfig":
        unknown = set(d) - _KNOWN_KEYS
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        if "layout" not in d:
            raise ValueError("Config must name a layout")
        return cls(**d)

    @classmethod
    def from_json(cls, path: str) -> "RunConfig":
        """Load RunConfig from a JSON file."""
        with open(path) as f:
            return cls.from_dict(json.load(f))

    def build_circuit(self):
        return get_circuit(self.layout, self.a, self.b, self.n_terms, field=get_field(self.field))

    def expected_public(self) -> int:
        return int(fibonacci_term(get_field(self.field), self.a, self.b, self.n_terms))


def run_config(config: RunConfig) -> MockProver:
    """Configure and synthesize the circuit described by `config`."""
    circuit = config.build_circuit()
    k = config.k if config.k is not None else minimum_k(circuit)
    instances = config.instances if config.instances is not None else [[config.expected_public()]]
    return MockProver.run(k, circuit, instances)
