"""Training loops, batching policies, metrics and pipelines."""

from .batching import BatchPolicy, FullBatch, MiniBatch, make_policy
from .pipelines import load_preset, presets, run_pipeline
from .trainer import TrainResult, Trainer

__all__ = [
    "BatchPolicy",
    "FullBatch",
    "MiniBatch",
    "TrainResult",
    "Trainer",
    "load_preset",
    "make_policy",
    "presets",
    "run_pipeline",
]
