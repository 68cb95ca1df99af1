"""Standalone neuron: a weighted sum plus bias through an activation."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .activations import Activation, ActivationKind, get_activation
from .errors import ShapeMismatchError


class SingleNeuron:
    """Weighted sum plus bias through an activation, with no training state."""

    def __init__(
        self,
        num_inputs: int = 1,
        activation: str | ActivationKind | Activation = "sigmoid",
        *,
        rng: np.random.Generator | None = None,
    ) -> None:
        rng = rng if rng is not None else np.random.default_rng()
        self.weights = rng.uniform(-1.0, 1.0, size=int(num_inputs))
        self.bias = 0.0
        self.activation = get_activation(activation)
        self.last_sum: float | None = None
        self.last_output: float | None = None

    def forward(self, inputs: Sequence[float]) -> float:
        x = np.asarray(inputs, dtype=np.float64).reshape(-1)
        if x.size != self.weights.size:
            raise ShapeMismatchError(
                f"Neuron expects {self.weights.size} inputs but received {x.size}"
            )
        total = float(self.bias + self.weights @ x)
        self.last_sum = total
        self.last_output = float(self.activation.fn(np.array([total]))[0])
        return self.last_output


__all__ = ["SingleNeuron"]
