"""Utility helpers for dataset generators."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..core.types import Dataset, Sample


def resolve_rng(
    seed: int | None = None, rng: np.random.Generator | None = None
) -> np.random.Generator:
    """Prefer an explicit generator, else build one from ``seed``."""

    if rng is not None:
        return rng
    return np.random.default_rng(seed)


def jitter(rng: np.random.Generator, amount: float) -> float:
    """Return uniform noise in ``[-amount / 2, amount / 2)``."""

    if amount <= 0:
        return 0.0
    return float((rng.random() - 0.5) * amount)


def shuffled(
    dataset: Sequence[Sample], *, seed: int | None = None, rng: np.random.Generator | None = None
) -> Dataset:
    """Return a shuffled copy of ``dataset``; training never shuffles internally."""

    generator = resolve_rng(seed, rng)
    order = generator.permutation(len(dataset))
    return tuple(dataset[int(idx)] for idx in order)


def train_test_split(
    dataset: Sequence[Sample], *, test_split: float = 0.2, seed: int = 0
) -> tuple[Dataset, Dataset]:
    """Deterministically split ``dataset`` into train and test tuples."""

    if not 0 <= test_split < 1:
        raise ValueError("test_split must be in [0, 1)")
    mixed = shuffled(dataset, seed=seed)
    test_size = int(round(len(mixed) * test_split))
    return mixed[test_size:], mixed[:test_size]


__all__ = ["jitter", "resolve_rng", "shuffled", "train_test_split"]
