"""Per-epoch metric recording for training runs."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Dict, List, Mapping

from ..core.network import NeuralNetwork


class MetricsWriter:
    """Record one split's epochs as JSONL and CSV files under ``run_dir``.

    Rows are built from the network state at the time of the callback, so the
    epoch always matches ``network.epoch``. Non-train splits also carry the
    network's last training loss next to their own metrics.
    """

    def __init__(
        self,
        run_dir: str | Path,
        network: NeuralNetwork,
        *,
        split: str = "train",
        seed: int | None = None,
        sha: str = "unknown",
    ) -> None:
        run_dir = Path(run_dir)
        run_dir.mkdir(parents=True, exist_ok=True)
        self.network = network
        self.split = split
        self.seed = seed
        self.sha = sha
        self.jsonl_path = run_dir / f"metrics_{split}.jsonl"
        self.csv_path = run_dir / f"metrics_{split}.csv"
        self.jsonl_path.write_text("")
        self.csv_path.write_text("")
        self._fieldnames: List[str] | None = None

    def record(self, metrics: Mapping[str, float]) -> Dict[str, object]:
        row: Dict[str, object] = {
            "epoch": self.network.epoch,
            "split": self.split,
            "seed": self.seed,
            "sha": self.sha,
        }
        if self.split != "train":
            row["train_loss"] = float(self.network.loss)
        row.update(
            {
                name: float(value)
                for name, value in metrics.items()
                if isinstance(value, (int, float)) and not isinstance(value, bool)
            }
        )
        return row

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        row = self.record(metrics)
        with self.jsonl_path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(row) + "\n")

        # the first row fixes the CSV columns for the whole run
        if self._fieldnames is None:
            self._fieldnames = list(row)
            header = True
        else:
            header = False
        with self.csv_path.open("a", encoding="utf-8", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=self._fieldnames, extrasaction="ignore")
            if header:
                writer.writeheader()
            writer.writerow(row)


__all__ = ["MetricsWriter"]
