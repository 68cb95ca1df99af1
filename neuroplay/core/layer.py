"""Fully connected layer with explicit forward records and gradient accumulation."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .activations import Activation, ActivationKind, get_activation
from .errors import ShapeMismatchError
from .types import Array, LayerRecord, LayerSnapshot

# Biases are initialised uniformly in [-BIAS_INIT, BIAS_INIT].
BIAS_INIT = 0.1


def xavier_scale(fan_in: int, fan_out: int) -> float:
    """Return ``sqrt(2 / (fan_in + fan_out))``."""

    return float(np.sqrt(2.0 / (fan_in + fan_out)))


class Layer:
    """A single affine transform followed by an activation.

    ``weights`` has shape ``(output_size, input_size)``. Gradients from
    repeated :meth:`backward` calls are summed into ``grad_weights`` and
    ``grad_biases`` until :meth:`apply_gradients` consumes them.
    """

    def __init__(
        self,
        input_size: int,
        output_size: int,
        activation: str | ActivationKind | Activation = "sigmoid",
        *,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.input_size = int(input_size)
        self.output_size = int(output_size)
        self.activation = get_activation(activation)
        rng = rng if rng is not None else np.random.default_rng()

        scale = xavier_scale(self.input_size, self.output_size)
        self.weights = rng.uniform(-scale, scale, size=(self.output_size, self.input_size))
        self.biases = rng.uniform(-BIAS_INIT, BIAS_INIT, size=self.output_size)
        self.grad_weights = np.zeros_like(self.weights)
        self.grad_biases = np.zeros_like(self.biases)

    def __repr__(self) -> str:
        return (
            f"Layer({self.input_size}, {self.output_size}, "
            f"activation={self.activation.name!r})"
        )

    def forward(self, inputs: Sequence[float] | Array) -> LayerRecord:
        """Compute ``fn(W x + b)`` and return the record needed for backprop."""

        x = np.asarray(inputs, dtype=np.float64).reshape(-1)
        if x.size != self.input_size:
            raise ShapeMismatchError(
                f"Layer expects {self.input_size} inputs but received {x.size}"
            )
        pre_activation = self.weights @ x + self.biases
        outputs = self.activation.fn(pre_activation)
        return LayerRecord(inputs=x.copy(), pre_activation=pre_activation, outputs=outputs)

    def backward(self, record: LayerRecord, output_grad: Sequence[float] | Array) -> Array:
        """Accumulate parameter gradients and return dL/dinputs.

        The returned gradient uses the current weights, so it must be computed
        before :meth:`apply_gradients` changes them.
        """

        grad = np.asarray(output_grad, dtype=np.float64).reshape(-1)
        if grad.size != self.output_size:
            raise ShapeMismatchError(
                f"Layer expects a gradient of {self.output_size} values but received {grad.size}"
            )
        delta = grad * self.activation.derivative(record.pre_activation, record.outputs)
        self.grad_biases += delta
        self.grad_weights += np.outer(delta, record.inputs)
        return self.weights.T @ delta

    def apply_gradients(
        self, learning_rate: float, l2: float = 0.0, batch_size: int = 1
    ) -> None:
        """Take one descent step with the averaged gradients, then reset them."""

        self.weights -= learning_rate * (self.grad_weights / batch_size + l2 * self.weights)
        self.biases -= learning_rate * (self.grad_biases / batch_size)
        self.zero_grad()

    def zero_grad(self) -> None:
        self.grad_weights.fill(0.0)
        self.grad_biases.fill(0.0)

    def param_count(self) -> int:
        return self.input_size * self.output_size + self.output_size

    def snapshot(self, index: int = 0) -> LayerSnapshot:
        weights = self.weights.copy()
        biases = self.biases.copy()
        weights.setflags(write=False)
        biases.setflags(write=False)
        return LayerSnapshot(
            layer=index, weights=weights, biases=biases, activation=self.activation.name
        )


__all__ = ["BIAS_INIT", "Layer", "xavier_scale"]
