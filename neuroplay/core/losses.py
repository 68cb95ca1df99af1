"""Loss registry used by the training loops."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

import numpy as np

from .errors import ShapeMismatchError, UnknownLossError
from .types import Array

# Probabilities are clamped into [EPS, 1 - EPS] before taking logarithms.
BCE_EPSILON = 1e-15

LossFn = Callable[[Array, Array], float]
LossGrad = Callable[[Array, Array], Array]


class LossKind(str, Enum):
    MSE = "mse"
    BCE = "bce"


@dataclass(frozen=True)
class Loss:
    """Loss wrapper exposing the scalar loss and dL/dy per output dimension."""

    kind: LossKind
    fn: LossFn
    grad_fn: LossGrad

    @property
    def name(self) -> str:
        return self.kind.value

    def __call__(self, predicted: Array, target: Array) -> float:
        predicted, target = _check_pair(predicted, target)
        return self.fn(predicted, target)

    def grad(self, predicted: Array, target: Array) -> Array:
        predicted, target = _check_pair(predicted, target)
        return self.grad_fn(predicted, target)


def _check_pair(predicted: Array, target: Array) -> tuple[Array, Array]:
    predicted = np.asarray(predicted, dtype=np.float64).reshape(-1)
    target = np.asarray(target, dtype=np.float64).reshape(-1)
    if predicted.shape != target.shape:
        raise ShapeMismatchError(
            f"Prediction has {predicted.size} values but target has {target.size}"
        )
    return predicted, target


def _mse(pred: Array, target: Array) -> float:
    diff = pred - target
    return float(np.mean(np.square(diff)))


def _mse_grad(pred: Array, target: Array) -> Array:
    return 2.0 * (pred - target) / pred.size


def _bce(pred: Array, target: Array) -> float:
    p = np.clip(pred, BCE_EPSILON, 1.0 - BCE_EPSILON)
    return float(np.mean(-(target * np.log(p) + (1.0 - target) * np.log(1.0 - p))))


def _bce_grad(pred: Array, target: Array) -> Array:
    p = np.clip(pred, BCE_EPSILON, 1.0 - BCE_EPSILON)
    return (-target / p + (1.0 - target) / (1.0 - p)) / pred.size


_REGISTRY: Mapping[LossKind, Loss] = MappingProxyType(
    {
        LossKind.MSE: Loss(LossKind.MSE, _mse, _mse_grad),
        LossKind.BCE: Loss(LossKind.BCE, _bce, _bce_grad),
    }
)

# Accepted spellings for each loss.
_ALIASES: Mapping[str, LossKind] = MappingProxyType(
    {
        "mse": LossKind.MSE,
        "mean_squared_error": LossKind.MSE,
        "mean-squared-error": LossKind.MSE,
        "bce": LossKind.BCE,
        "binary_cross_entropy": LossKind.BCE,
        "binary-cross-entropy": LossKind.BCE,
        "cross_entropy": LossKind.BCE,
        "crossentropy": LossKind.BCE,
    }
)


def get_loss(name: str | LossKind | Loss) -> Loss:
    """Return the loss registered under ``name`` or raise :class:`UnknownLossError`."""

    if isinstance(name, Loss):
        return name
    key = name.value if isinstance(name, LossKind) else str(name).lower()
    if key not in _ALIASES:
        available = ", ".join(available_losses())
        raise UnknownLossError(f"Unknown loss {name!r}. Available losses: {available}")
    return _REGISTRY[_ALIASES[key]]


def available_losses() -> Iterable[str]:
    return sorted(kind.value for kind in _REGISTRY)


__all__ = ["BCE_EPSILON", "Loss", "LossKind", "available_losses", "get_loss"]
