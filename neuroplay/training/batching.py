"""Batching policies that decide how an epoch is split into updates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Protocol, Sequence

import numpy as np

from ..core.types import Sample


class BatchPolicy(Protocol):
    """Protocol implemented by batching strategies."""

    def batches(self, dataset: Sequence[Sample], epoch: int) -> Iterator[Sequence[Sample]]:
        """Yield the sample groups that receive one gradient step each."""


@dataclass(frozen=True)
class FullBatch:
    """One update per epoch over the whole dataset, in the given order."""

    def batches(self, dataset: Sequence[Sample], epoch: int) -> Iterator[Sequence[Sample]]:
        yield dataset


@dataclass(frozen=True)
class MiniBatch:
    """Fixed-size slices of the dataset, optionally reshuffled every epoch."""

    batch_size: int
    shuffle: bool = True
    seed: int = 0

    def __post_init__(self) -> None:
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")

    def batches(self, dataset: Sequence[Sample], epoch: int) -> Iterator[Sequence[Sample]]:
        order = np.arange(len(dataset))
        if self.shuffle:
            np.random.default_rng(self.seed + epoch).shuffle(order)
        for start in range(0, len(order), self.batch_size):
            yield [dataset[int(idx)] for idx in order[start : start + self.batch_size]]


def make_policy(batch_size: int | None = None, *, shuffle: bool = True, seed: int = 0) -> BatchPolicy:
    """Return :class:`FullBatch` when ``batch_size`` is unset, else :class:`MiniBatch`."""

    if batch_size is None:
        return FullBatch()
    return MiniBatch(batch_size=int(batch_size), shuffle=shuffle, seed=seed)


__all__ = ["BatchPolicy", "FullBatch", "MiniBatch", "make_policy"]
