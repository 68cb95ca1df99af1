"""Logic-gate truth tables over {0, 1}^2."""

from __future__ import annotations

from typing import Callable, Dict

from ..core.types import Dataset, Sample

_GATES: Dict[str, Callable[[int, int], int]] = {
    "and": lambda a, b: a & b,
    "or": lambda a, b: a | b,
    "nand": lambda a, b: 1 - (a & b),
    "xor": lambda a, b: a ^ b,
}


def truth_table(gate: str) -> Dataset:
    """Return the four ``{0, 1}^2`` samples of ``gate``."""

    key = gate.lower()
    if key not in _GATES:
        available = ", ".join(sorted(_GATES))
        raise KeyError(f"Unknown gate {gate!r}. Available gates: {available}")
    rule = _GATES[key]
    return tuple(
        Sample(inputs=(float(a), float(b)), targets=(float(rule(a, b)),))
        for a in (0, 1)
        for b in (0, 1)
    )


def available_gates():
    return sorted(_GATES)


__all__ = ["available_gates", "truth_table"]
