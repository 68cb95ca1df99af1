"""Feed-forward network built from a topology vector."""

from __future__ import annotations

import numbers
from typing import Callable, List, Sequence

import numpy as np

from .activations import Activation, ActivationKind, get_activation
from .errors import ShapeMismatchError, TopologyError
from .layer import Layer
from .losses import Loss, LossKind, get_loss
from .types import Array, ForwardTrace, LayerSnapshot, Sample

EpochCallback = Callable[[int, float], None]


def validate_topology(topology: Sequence[int]) -> List[int]:
    """Return ``topology`` as a list of ints or raise :class:`TopologyError`."""

    dims = list(topology)
    if len(dims) < 2:
        raise TopologyError(
            f"Topology needs at least an input and an output width, got {dims}"
        )
    for idx, width in enumerate(dims):
        if isinstance(width, bool) or not isinstance(width, numbers.Integral):
            raise TopologyError(f"Topology entry {idx} must be an integer, got {width!r}")
        if width <= 0:
            raise TopologyError(f"Topology entry {idx} must be positive, got {width}")
    return [int(width) for width in dims]


class NeuralNetwork:
    """An ordered stack of :class:`Layer` objects.

    Every layer but the last uses ``activation``; the last uses
    ``output_activation``. Training is full-batch gradient descent: one call
    to :meth:`train_batch` is one update and one epoch.
    """

    def __init__(
        self,
        topology: Sequence[int],
        activation: str | ActivationKind | Activation = "sigmoid",
        output_activation: str | ActivationKind | Activation = "sigmoid",
        *,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.topology = validate_topology(topology)
        hidden = get_activation(activation)
        output = get_activation(output_activation)
        self.activation_name = hidden.name
        self.output_activation_name = output.name

        rng = rng if rng is not None else np.random.default_rng(seed)
        last = len(self.topology) - 2
        self.layers: List[Layer] = [
            Layer(fan_in, fan_out, output if idx == last else hidden, rng=rng)
            for idx, (fan_in, fan_out) in enumerate(zip(self.topology[:-1], self.topology[1:]))
        ]
        self.epoch = 0
        self.loss = float("inf")

    def __repr__(self) -> str:
        return (
            f"NeuralNetwork({self.topology}, activation={self.activation_name!r}, "
            f"output_activation={self.output_activation_name!r})"
        )

    # ------------------------------------------------------------------
    # Inference

    def trace(self, inputs: Sequence[float] | Array) -> tuple[Array, ForwardTrace]:
        """Run a forward pass and return the output with its per-layer records."""

        records = []
        x = inputs
        for layer in self.layers:
            record = layer.forward(x)
            records.append(record)
            x = record.outputs
        trace = ForwardTrace(records=records)
        return trace.output, trace

    def forward(self, inputs: Sequence[float] | Array) -> Array:
        output, _ = self.trace(inputs)
        return output

    def backward(self, trace: ForwardTrace, output_grad: Array) -> Array:
        """Propagate ``output_grad`` from the last layer to the first."""

        grad = output_grad
        for layer, record in zip(reversed(self.layers), reversed(trace.records)):
            grad = layer.backward(record, grad)
        return grad

    # ------------------------------------------------------------------
    # Training

    def zero_grad(self) -> None:
        for layer in self.layers:
            layer.zero_grad()

    def gradient_step(
        self,
        samples: Sequence[Sample],
        learning_rate: float = 0.1,
        loss: str | LossKind | Loss = "mse",
        l2: float = 0.0,
    ) -> float:
        """Accumulate gradients over ``samples`` in order and apply one update.

        Returns the average loss measured before the update. Does not advance
        the epoch counter.
        """

        if len(samples) == 0:
            raise ValueError("Cannot train on an empty dataset")
        loss_fn = get_loss(loss)
        self.zero_grad()

        total = 0.0
        for sample in samples:
            self._check_sample(sample)
            prediction, trace = self.trace(sample.inputs)
            total += loss_fn(prediction, sample.targets)
            self.backward(trace, loss_fn.grad(prediction, sample.targets))

        for layer in self.layers:
            layer.apply_gradients(learning_rate, l2, len(samples))
        return total / len(samples)

    def train_batch(
        self,
        dataset: Sequence[Sample],
        learning_rate: float = 0.1,
        loss: str | LossKind | Loss = "mse",
        l2: float = 0.0,
    ) -> float:
        """Run one full-batch gradient-descent step (one epoch) over ``dataset``.

        Samples are visited in the given order; shuffle beforehand if needed.
        """

        average = self.gradient_step(dataset, learning_rate, loss, l2)
        self.end_epoch(average)
        return average

    def end_epoch(self, loss: float) -> None:
        self.loss = float(loss)
        self.epoch += 1

    def train(
        self,
        dataset: Sequence[Sample],
        epochs: int,
        learning_rate: float = 0.1,
        loss: str | LossKind | Loss = "mse",
        l2: float = 0.0,
        on_epoch: EpochCallback | None = None,
    ) -> List[float]:
        """Call :meth:`train_batch` ``epochs`` times and return the loss history."""

        loss_fn = get_loss(loss)
        history: List[float] = []
        for _ in range(int(epochs)):
            value = self.train_batch(dataset, learning_rate, loss_fn, l2)
            history.append(value)
            if on_epoch is not None:
                on_epoch(self.epoch, value)
        return history

    def _check_sample(self, sample: Sample) -> None:
        if sample.inputs.size != self.topology[0]:
            raise ShapeMismatchError(
                f"Sample has {sample.inputs.size} inputs but the network expects "
                f"{self.topology[0]}"
            )
        if sample.targets.size != self.topology[-1]:
            raise ShapeMismatchError(
                f"Sample has {sample.targets.size} targets but the network produces "
                f"{self.topology[-1]}"
            )

    # ------------------------------------------------------------------
    # Introspection

    def param_count(self) -> int:
        return sum(layer.param_count() for layer in self.layers)

    def get_weights(self) -> List[LayerSnapshot]:
        """Return read-only copies of every layer's weights and biases."""

        return [layer.snapshot(idx) for idx, layer in enumerate(self.layers)]

    def classify_grid(
        self,
        resolution: int = 50,
        x_min: float = -6.0,
        x_max: float = 6.0,
        y_min: float = -6.0,
        y_max: float = 6.0,
    ) -> Array:
        """Evaluate the first output at each cell centre of a regular grid.

        Returns a flat float32 array of ``resolution ** 2`` values in row-major
        order: row ``i`` walks y, column ``j`` walks x.
        """

        if self.topology[0] != 2:
            raise TopologyError(
                f"classify_grid needs a network with 2 inputs, got {self.topology[0]}"
            )
        resolution = int(resolution)
        grid = np.zeros(resolution * resolution, dtype=np.float32)
        x_step = (x_max - x_min) / resolution
        y_step = (y_max - y_min) / resolution
        for i in range(resolution):
            y = y_min + i * y_step + y_step / 2
            for j in range(resolution):
                x = x_min + j * x_step + x_step / 2
                grid[i * resolution + j] = self.forward((x, y))[0]
        return grid


__all__ = ["EpochCallback", "NeuralNetwork", "validate_topology"]
