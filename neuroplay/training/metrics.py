"""Metric helpers for the trainer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping

import numpy as np

from ..core.types import Array

# Network outputs at or above this value count as the positive class.
DECISION_THRESHOLD = 0.5


@dataclass(frozen=True)
class MetricResult:
    name: str
    value: float


def default_metrics(task_type: str) -> List[str]:
    if task_type == "regression":
        return ["mae", "rmse"]
    if task_type == "binary":
        return ["accuracy", "precision", "recall", "f1"]
    raise ValueError(f"Unknown task type: {task_type}")


def _confusion(predictions: Array, targets: Array) -> tuple[float, float, float]:
    pred_idx = (predictions >= DECISION_THRESHOLD).astype(int)
    targ_idx = (targets >= DECISION_THRESHOLD).astype(int)
    tp = float(np.sum((pred_idx == 1) & (targ_idx == 1)))
    fp = float(np.sum((pred_idx == 1) & (targ_idx == 0)))
    fn = float(np.sum((pred_idx == 0) & (targ_idx == 1)))
    return tp, fp, fn


def compute_metric(name: str, predictions: Array, targets: Array) -> MetricResult:
    """Compute ``name`` over stacked ``predictions`` and ``targets``.

    Predictions are activated network outputs, so binary metrics threshold
    them directly without applying a sigmoid first.
    """

    key = name.lower()
    preds = np.asarray(predictions, dtype=np.float64)
    targs = np.asarray(targets, dtype=np.float64)
    if key == "mae":
        value = float(np.mean(np.abs(preds - targs)))
    elif key == "rmse":
        value = float(np.sqrt(np.mean((preds - targs) ** 2)))
    elif key == "accuracy":
        pred_idx = (preds >= DECISION_THRESHOLD).astype(int)
        targ_idx = (targs >= DECISION_THRESHOLD).astype(int)
        value = float(np.mean(pred_idx == targ_idx))
    elif key in {"precision", "recall", "f1"}:
        tp, fp, fn = _confusion(preds, targs)
        precision = tp / (tp + fp + 1e-9)
        recall = tp / (tp + fn + 1e-9)
        if key == "precision":
            value = float(precision)
        elif key == "recall":
            value = float(recall)
        else:
            value = float(2 * precision * recall / (precision + recall + 1e-9))
    else:
        raise KeyError(f"Unknown metric: {name}")
    return MetricResult(name=key, value=value)


def compute_metrics(
    names: Iterable[str], predictions: Array, targets: Array
) -> Mapping[str, float]:
    results: Dict[str, float] = {}
    for name in names:
        metric = compute_metric(name, predictions, targets)
        results[metric.name] = metric.value
    return results


__all__ = ["DECISION_THRESHOLD", "MetricResult", "compute_metrics", "default_metrics"]
