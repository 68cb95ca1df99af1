"""Synthetic 2-D binary classification datasets for the playground.

Every generator returns an immutable tuple of :class:`Sample` objects with a
2-element input ``(x, y)`` and a 1-element target in ``{0, 1}``. ``noise`` is
the full width of the uniform jitter added to each coordinate; it never
changes the label, which is always computed from the clean coordinates.
"""

from __future__ import annotations

import math

import numpy as np

from ..core.types import Dataset, Sample
from .utils import jitter, resolve_rng


def xor_label(x: float, y: float) -> int:
    """Return 1 when ``x`` and ``y`` lie in opposite half-planes."""

    return int((x > 0) != (y > 0))


def checkerboard_label(x: float, y: float) -> int:
    """Return the parity of the unit cell containing ``(x, y)`` on ``[-4, 4]^2``."""

    return (math.floor(x + 4) + math.floor(y + 4)) % 2


def circle(
    n: int = 200,
    *,
    noise: float = 0.3,
    seed: int | None = None,
    rng: np.random.Generator | None = None,
) -> Dataset:
    """Inner disc (label 1, radius < 2) against an outer ring (label 0, radius 2.5 to 4.5)."""

    rng = resolve_rng(seed, rng)
    samples = []
    for _ in range(int(n)):
        angle = rng.random() * 2 * math.pi
        inner = rng.random() < 0.5
        radius = rng.random() * 2 if inner else 2.5 + rng.random() * 2
        x = radius * math.cos(angle) + jitter(rng, noise)
        y = radius * math.sin(angle) + jitter(rng, noise)
        samples.append(Sample(inputs=(x, y), targets=(1.0 if inner else 0.0,)))
    return tuple(samples)


def xor(
    n: int = 200,
    *,
    noise: float = 0.5,
    seed: int | None = None,
    rng: np.random.Generator | None = None,
) -> Dataset:
    """Axis-aligned XOR quadrants on ``[-3, 3]^2``."""

    rng = resolve_rng(seed, rng)
    samples = []
    for _ in range(int(n)):
        x = rng.random() * 6 - 3
        y = rng.random() * 6 - 3
        label = xor_label(x, y)
        samples.append(
            Sample(
                inputs=(x + jitter(rng, noise), y + jitter(rng, noise)),
                targets=(float(label),),
            )
        )
    return tuple(samples)


def spiral(
    n: int = 200,
    *,
    noise: float = 0.5,
    seed: int | None = None,
    rng: np.random.Generator | None = None,
) -> Dataset:
    """Two interleaved spirals; returns ``2 * (n // 2)`` samples, class 0 first."""

    rng = resolve_rng(seed, rng)
    half = int(n) // 2
    samples = []
    for cls in range(2):
        for i in range(half):
            radius = i / half * 5
            theta = 1.75 * i / half * 2 * math.pi + cls * math.pi
            x = radius * math.sin(theta) + jitter(rng, noise)
            y = radius * math.cos(theta) + jitter(rng, noise)
            samples.append(Sample(inputs=(x, y), targets=(float(cls),)))
    return tuple(samples)


def gaussian(
    n: int = 200,
    *,
    noise: float = 0.0,
    spread: float = 1.2,
    seed: int | None = None,
    rng: np.random.Generator | None = None,
) -> Dataset:
    """Two Gaussian blobs centred on ``(2, 2)`` (label 1) and ``(-2, -2)`` (label 0).

    Returns ``2 * (n // 2)`` samples, alternating between the classes. ``spread``
    is the standard deviation of each blob; ``noise`` adds uniform jitter on top.
    """

    rng = resolve_rng(seed, rng)
    samples = []
    for _ in range(int(n) // 2):
        positive = rng.standard_normal(2) * spread + 2.0
        negative = rng.standard_normal(2) * spread - 2.0
        positive += (jitter(rng, noise), jitter(rng, noise))
        negative += (jitter(rng, noise), jitter(rng, noise))
        samples.append(Sample(inputs=positive, targets=(1.0,)))
        samples.append(Sample(inputs=negative, targets=(0.0,)))
    return tuple(samples)


def checkerboard(
    n: int = 200,
    *,
    noise: float = 0.0,
    seed: int | None = None,
    rng: np.random.Generator | None = None,
) -> Dataset:
    """Unit-cell parity pattern on ``[-4, 4]^2``."""

    rng = resolve_rng(seed, rng)
    samples = []
    for _ in range(int(n)):
        x = rng.random() * 8 - 4
        y = rng.random() * 8 - 4
        label = checkerboard_label(x, y)
        samples.append(
            Sample(
                inputs=(x + jitter(rng, noise), y + jitter(rng, noise)),
                targets=(float(label),),
            )
        )
    return tuple(samples)


GENERATORS = {
    "circle": circle,
    "xor": xor,
    "spiral": spiral,
    "gaussian": gaussian,
    "checkerboard": checkerboard,
}

__all__ = [
    "GENERATORS",
    "checkerboard",
    "checkerboard_label",
    "circle",
    "gaussian",
    "spiral",
    "xor",
    "xor_label",
]
