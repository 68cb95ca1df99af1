"""Run artifact helpers."""

from __future__ import annotations

import json
import platform
import subprocess
import time
from pathlib import Path
from typing import Mapping, Sequence

import numpy as np

from ..core.types import LayerSnapshot


def git_sha() -> str:
    """Return the checkout's HEAD commit, or ``"unknown"`` outside a git tree."""

    try:
        out = subprocess.check_output(["git", "rev-parse", "HEAD"], stderr=subprocess.DEVNULL)
    except (OSError, subprocess.CalledProcessError):
        return "unknown"
    return out.decode().strip()


def write_manifest(
    path: str | Path,
    *,
    config: Mapping[str, object],
    dataset_provenance: Mapping[str, object],
    architecture: Mapping[str, object] | None = None,
    sha: str = "unknown",
) -> str:
    """Write the run manifest: config, data provenance, topology and environment."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    manifest = {
        "git_sha": sha,
        "generated_at": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        "config": config,
        "dataset": dict(dataset_provenance),
        "architecture": dict(architecture or {}),
        "environment": {
            "python": platform.python_version(),
            "numpy": np.__version__,
        },
    }
    path.write_text(json.dumps(manifest, indent=2))
    return str(path)


def describe_layers(snapshots: Sequence[LayerSnapshot]) -> list[dict]:
    """Summarise layer snapshots as JSON-friendly shape records."""

    return [
        {
            "layer": snap.layer,
            "activation": snap.activation,
            "weights_shape": list(snap.weights.shape),
            "biases_shape": list(snap.biases.shape),
        }
        for snap in snapshots
    ]
