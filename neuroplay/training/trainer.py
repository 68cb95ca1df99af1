"""Epoch loop around :class:`NeuralNetwork` with metrics and callbacks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping, Sequence

import numpy as np

from ..core.losses import Loss, LossKind, get_loss
from ..core.network import NeuralNetwork
from ..core.types import Sample, to_batch
from .batching import BatchPolicy, FullBatch
from .metrics import compute_metrics, default_metrics


@dataclass
class TrainResult:
    """Outcome of :meth:`Trainer.run`."""

    epochs: int
    history: List[float] = field(default_factory=list)
    metrics: Mapping[str, float] = field(default_factory=dict)
    eval_metrics: Mapping[str, float] = field(default_factory=dict)
    stopped_early: bool = False

    @property
    def final_loss(self) -> float:
        return self.history[-1] if self.history else float("inf")


class Trainer:
    """Run training epochs with a pluggable batching policy.

    With the default :class:`FullBatch` policy every epoch is exactly one
    :meth:`NeuralNetwork.train_batch` call.
    """

    def __init__(
        self,
        network: NeuralNetwork,
        *,
        learning_rate: float = 0.1,
        loss: str | LossKind | Loss = "mse",
        l2: float = 0.0,
        policy: BatchPolicy | None = None,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        self.network = network
        self.learning_rate = float(learning_rate)
        self.loss = get_loss(loss)
        self.l2 = float(l2)
        self.policy = policy or FullBatch()
        self.callbacks = list(callbacks or [])

    def run(
        self,
        dataset: Sequence[Sample],
        epochs: int,
        *,
        eval_dataset: Sequence[Sample] | None = None,
        task_type: str = "binary",
        metric_names: Sequence[str] | str = "default",
        split_loggers: Mapping[str, Sequence[object]] | None = None,
        early_stopping_patience: int | None = None,
    ) -> TrainResult:
        if isinstance(metric_names, str):
            if metric_names == "default" or metric_names.strip() == "":
                metric_names = default_metrics(task_type)
            else:
                metric_names = [m.strip() for m in metric_names.split(",") if m.strip()]
        if not metric_names:
            metric_names = default_metrics(task_type)

        split_loggers = split_loggers or {}
        result = TrainResult(epochs=0)
        best_loss = float("inf")
        epochs_no_improve = 0

        for _ in range(int(epochs)):
            epoch_loss = self._run_epoch(dataset)
            self.network.end_epoch(epoch_loss)
            epoch = self.network.epoch
            result.epochs += 1
            result.history.append(epoch_loss)

            train_metrics = {"loss": epoch_loss}
            train_metrics.update(self.evaluate(dataset, metric_names, with_loss=False))
            result.metrics = train_metrics
            self._emit_epoch("train", epoch, train_metrics, split_loggers)

            target_loss = epoch_loss
            if eval_dataset:
                eval_metrics = self.evaluate(eval_dataset, metric_names)
                result.eval_metrics = eval_metrics
                self._emit_epoch("eval", epoch, eval_metrics, split_loggers)
                target_loss = eval_metrics["loss"]

            if target_loss < best_loss - 1e-9:
                best_loss = target_loss
                epochs_no_improve = 0
            else:
                epochs_no_improve += 1
                if early_stopping_patience and epochs_no_improve >= early_stopping_patience:
                    result.stopped_early = True
                    break
        return result

    def evaluate(
        self,
        dataset: Sequence[Sample],
        metric_names: Sequence[str],
        *,
        with_loss: bool = True,
    ) -> Mapping[str, float]:
        """Score ``dataset`` without touching the parameters."""

        if not dataset:
            return {}
        batch = to_batch(dataset)
        predictions = np.stack([self.network.forward(x) for x in batch.inputs])
        metrics: dict[str, float] = {}
        if with_loss:
            losses = [self.loss(p, t) for p, t in zip(predictions, batch.targets)]
            metrics["loss"] = float(np.mean(losses))
        metrics.update(compute_metrics(metric_names, predictions, batch.targets))
        return metrics

    # ------------------------------------------------------------------
    # Internal helpers

    def _run_epoch(self, dataset: Sequence[Sample]) -> float:
        total = 0.0
        seen = 0
        for batch in self.policy.batches(dataset, self.network.epoch):
            average = self.network.gradient_step(batch, self.learning_rate, self.loss, self.l2)
            total += average * len(batch)
            seen += len(batch)
        return total / max(1, seen)

    def _emit_epoch(
        self,
        split: str,
        epoch: int,
        metrics: Mapping[str, float],
        loggers: Mapping[str, Sequence[object]],
    ) -> None:
        if split == "train":
            for callback in self.callbacks:
                if hasattr(callback, "on_epoch"):
                    callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
        for callback in loggers.get(split, []):
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)


__all__ = ["TrainResult", "Trainer"]
