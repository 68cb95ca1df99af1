"""Typed failures raised by the neuroplay engine."""

from __future__ import annotations


class NeuroplayError(Exception):
    """Base class for structural misuse of the engine."""


class UnknownActivationError(NeuroplayError, KeyError):
    """Raised when an activation name is not registered."""


class UnknownLossError(NeuroplayError, KeyError):
    """Raised when a loss name is not registered."""


class TopologyError(NeuroplayError, ValueError):
    """Raised for an invalid network topology."""


class ShapeMismatchError(NeuroplayError, ValueError):
    """Raised when a vector length does not match the layer or sample contract."""


__all__ = [
    "NeuroplayError",
    "ShapeMismatchError",
    "TopologyError",
    "UnknownActivationError",
    "UnknownLossError",
]
