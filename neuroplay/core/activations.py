"""Activation functions and their derivative rules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

import numpy as np

from .errors import UnknownActivationError
from .types import Array

# Sigmoid arguments are clamped to this range before exponentiating.
SIGMOID_CLAMP = 500.0

ActivationFn = Callable[[Array], Array]
DerivativeFn = Callable[[Array, Array], Array]


class ActivationKind(str, Enum):
    SIGMOID = "sigmoid"
    RELU = "relu"
    TANH = "tanh"
    LINEAR = "linear"


@dataclass(frozen=True)
class Activation:
    """Element-wise activation with its derivative rule.

    ``derivative`` receives both the pre-activation sums and the activated
    outputs of a layer. Sigmoid and tanh read the outputs, relu reads the sign
    of the pre-activation (a zero output is ambiguous) and linear ignores both.
    """

    kind: ActivationKind
    display_name: str
    fn: ActivationFn
    derivative: DerivativeFn

    @property
    def name(self) -> str:
        return self.kind.value

    def __call__(self, pre_activation: Array) -> Array:
        return self.fn(pre_activation)


def sigmoid(x: Array) -> Array:
    """Return the logistic sigmoid of ``x`` with overflow-safe clamping."""

    clipped = np.clip(x, -SIGMOID_CLAMP, SIGMOID_CLAMP)
    return 1.0 / (1.0 + np.exp(-clipped))


def relu(x: Array) -> Array:
    """Return the ReLU activation."""

    return np.maximum(x, 0.0)


def tanh(x: Array) -> Array:
    return np.tanh(x)


def linear(x: Array) -> Array:
    return np.asarray(x, dtype=np.float64)


def _sigmoid_deriv(pre_activation: Array, outputs: Array) -> Array:
    return outputs * (1.0 - outputs)


def _relu_deriv(pre_activation: Array, outputs: Array) -> Array:
    return (pre_activation > 0).astype(np.float64)


def _tanh_deriv(pre_activation: Array, outputs: Array) -> Array:
    return 1.0 - outputs * outputs


def _linear_deriv(pre_activation: Array, outputs: Array) -> Array:
    return np.ones_like(pre_activation, dtype=np.float64)


_REGISTRY: Mapping[ActivationKind, Activation] = MappingProxyType(
    {
        ActivationKind.SIGMOID: Activation(
            ActivationKind.SIGMOID, "Sigmoid", sigmoid, _sigmoid_deriv
        ),
        ActivationKind.RELU: Activation(ActivationKind.RELU, "ReLU", relu, _relu_deriv),
        ActivationKind.TANH: Activation(ActivationKind.TANH, "Tanh", tanh, _tanh_deriv),
        ActivationKind.LINEAR: Activation(
            ActivationKind.LINEAR, "Linear", linear, _linear_deriv
        ),
    }
)


def get_activation(name: str | ActivationKind | Activation) -> Activation:
    """Return the activation registered under ``name``.

    Raises :class:`UnknownActivationError` for unregistered names instead of
    silently substituting a default.
    """

    if isinstance(name, Activation):
        return name
    try:
        kind = ActivationKind(name.lower() if isinstance(name, str) else name)
    except ValueError as exc:
        available = ", ".join(available_activations())
        raise UnknownActivationError(
            f"Unknown activation {name!r}. Available activations: {available}"
        ) from exc
    return _REGISTRY[kind]


def available_activations() -> Iterable[str]:
    return sorted(kind.value for kind in _REGISTRY)


__all__ = [
    "Activation",
    "ActivationKind",
    "SIGMOID_CLAMP",
    "available_activations",
    "get_activation",
    "linear",
    "relu",
    "sigmoid",
    "tanh",
]
