"""Circuit definitions.

Each layout of the Fibonacci circuit is a Circuit subclass. The registry
maps layout names to classes so configs and tests can pick one by name.
"""

from .base import Circuit
from .fibonacci import FibonacciCircuit, fibonacci_term
from .fibonacci_narrow import FibonacciNarrow
from .fibonacci_wide import FibonacciWide

# Registry mapping layout names to circuit classes
CIRCUIT_REGISTRY: dict[str, type[FibonacciCircuit]] = {
    "wide": FibonacciWide,
    "narrow": FibonacciNarrow,
}


def get_circuit(layout: str, *args, **kwargs) -> FibonacciCircuit:
    """Instantiate the circuit registered under `layout`.

    Args:
        layout: Layout name (e.g., 'wide', 'narrow')
        *args, **kwargs: Passed to the circuit constructor

    Raises:
        KeyError: If no circuit is registered under `layout`
    """
    if layout not in CIRCUIT_REGISTRY:
        raise KeyError(
            f"No circuit for layout '{layout}'. "
            f"Available: {list(CIRCUIT_REGISTRY.keys())}"
        )
    return CIRCUIT_REGISTRY[layout](*args, **kwargs)


__all__ = [
    "Circuit",
    "FibonacciCircuit",
    "FibonacciWide",
    "FibonacciNarrow",
    "fibonacci_term",
    "CIRCUIT_REGISTRY",
    "get_circuit",
]
