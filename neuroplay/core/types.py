"""Core typing contracts for neuroplay."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

Array = np.ndarray


def _frozen_vector(values: Sequence[float] | Array) -> Array:
    array = np.array(values, dtype=np.float64).reshape(-1)
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class Sample:
    """A single labelled training example.

    ``inputs`` and ``targets`` are stored as read-only float64 vectors so that
    datasets can be shared between runs without being mutated by training.
    """

    inputs: Array
    targets: Array

    def __post_init__(self) -> None:
        object.__setattr__(self, "inputs", _frozen_vector(self.inputs))
        object.__setattr__(self, "targets", _frozen_vector(self.targets))


Dataset = Tuple[Sample, ...]


@dataclass(frozen=True)
class Batch:
    """Stacked view of a dataset, one row per sample."""

    inputs: Array
    targets: Array


@dataclass(frozen=True)
class LayerRecord:
    """Values produced by one :meth:`Layer.forward` call.

    The record is owned by the caller and handed back to
    :meth:`Layer.backward`, so several forward passes may be in flight at once.
    """

    inputs: Array
    pre_activation: Array
    outputs: Array


@dataclass(frozen=True)
class ForwardTrace:
    """Per-layer records captured during a network forward pass."""

    records: List[LayerRecord]

    @property
    def output(self) -> Array:
        return self.records[-1].outputs


@dataclass(frozen=True)
class LayerSnapshot:
    """Read-only copy of a layer's parameters for rendering."""

    layer: int
    weights: Array
    biases: Array
    activation: str


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`neuroplay.training.pipelines.run_pipeline`."""

    epochs: int
    final_loss: float
    metrics_path: str
    manifest_path: str
    summary_path: str = ""


def to_batch(dataset: Sequence[Sample]) -> Batch:
    """Stack ``dataset`` into a :class:`Batch` of 2-D arrays."""

    if not dataset:
        return Batch(inputs=np.zeros((0, 0)), targets=np.zeros((0, 0)))
    inputs = np.stack([sample.inputs for sample in dataset])
    targets = np.stack([sample.targets for sample in dataset])
    return Batch(inputs=inputs, targets=targets)


__all__ = [
    "Array",
    "Batch",
    "Dataset",
    "ForwardTrace",
    "LayerRecord",
    "LayerSnapshot",
    "RunResult",
    "Sample",
    "to_batch",
]
