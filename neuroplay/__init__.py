"""neuroplay public API."""

from .core import activations, losses, types  # noqa: F401
from .core.activations import get_activation
from .core.errors import (
    NeuroplayError,
    ShapeMismatchError,
    TopologyError,
    UnknownActivationError,
    UnknownLossError,
)
from .core.layer import Layer
from .core.losses import get_loss
from .core.network import NeuralNetwork
from .core.neuron import SingleNeuron
from .core.types import LayerRecord, LayerSnapshot, Sample
from .data import checkerboard, circle, gaussian, spiral, truth_table, xor
from .training.pipelines import load_preset, presets, run_pipeline
from .training.trainer import Trainer

__version__ = "0.1.0"

__all__ = [
    "Layer",
    "LayerRecord",
    "LayerSnapshot",
    "NeuralNetwork",
    "NeuroplayError",
    "Sample",
    "ShapeMismatchError",
    "SingleNeuron",
    "TopologyError",
    "Trainer",
    "UnknownActivationError",
    "UnknownLossError",
    "activations",
    "checkerboard",
    "circle",
    "gaussian",
    "get_activation",
    "get_loss",
    "load_preset",
    "losses",
    "presets",
    "run_pipeline",
    "spiral",
    "truth_table",
    "types",
    "xor",
]
