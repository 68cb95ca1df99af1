"""Headless-safe plotting adapters."""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence, Tuple

import numpy as np

from ..core.network import NeuralNetwork
from ..core.types import Sample, to_batch


def _pyplot():
    import matplotlib

    matplotlib.use("Agg", force=True)
    import matplotlib.pyplot as plt  # imported lazily for headless safety

    return plt


class PlotAdapter:
    """Collect per-epoch loss and optionally emit a training-curve figure."""

    def __init__(self, run_dir: str | Path, enable_plots: bool = False):
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self._history: List[Tuple[int, float]] = []
        if self.enable_plots:
            self.run_dir.mkdir(parents=True, exist_ok=True)

    def on_epoch(self, epoch: int, metrics) -> None:
        if not self.enable_plots:
            return
        self._history.append((int(epoch), float(metrics.get("loss", 0.0))))

    def close(self) -> Path | None:
        if not self.enable_plots or not self._history:
            return None
        plt = _pyplot()
        epochs, losses = zip(*self._history)
        fig, ax = plt.subplots()
        ax.plot(epochs, losses)
        ax.set_xlabel("Epoch")
        ax.set_ylabel("Loss")
        ax.set_title("Training Curve")
        plot_path = self.run_dir / "loss.png"
        fig.savefig(plot_path)
        plt.close(fig)
        return plot_path

    __call__ = on_epoch


def plot_decision_boundary(
    network: NeuralNetwork,
    dataset: Sequence[Sample],
    path: str | Path,
    *,
    bounds: float = 6.0,
    resolution: int = 50,
) -> Path:
    """Render the :meth:`NeuralNetwork.classify_grid` heatmap with the samples on top."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    grid = network.classify_grid(resolution, -bounds, bounds, -bounds, bounds)
    image = grid.reshape(resolution, resolution)

    plt = _pyplot()
    fig, ax = plt.subplots()
    ax.imshow(
        image,
        origin="lower",
        extent=(-bounds, bounds, -bounds, bounds),
        cmap="RdBu",
        vmin=0.0,
        vmax=1.0,
    )
    if dataset:
        batch = to_batch(dataset)
        labels = batch.targets[:, 0]
        ax.scatter(
            batch.inputs[:, 0],
            batch.inputs[:, 1],
            c=np.where(labels >= 0.5, "tab:blue", "tab:red"),
            edgecolors="white",
            linewidths=0.5,
            s=14,
        )
    ax.set_xlim(-bounds, bounds)
    ax.set_ylim(-bounds, bounds)
    ax.set_title("Decision Boundary")
    fig.savefig(path)
    plt.close(fig)
    return path
