"""Core numerical primitives for neuroplay."""

from . import activations, errors, layer, losses, network, neuron, types

__all__ = ["activations", "errors", "layer", "losses", "network", "neuron", "types"]
