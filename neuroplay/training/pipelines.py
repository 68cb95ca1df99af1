"""Pipeline assembly for neuroplay playground runs."""

from __future__ import annotations

import json
import time
from copy import deepcopy
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Sequence

from ..core.network import NeuralNetwork
from ..core.types import RunResult
from ..data import registry
from ..data.utils import train_test_split
from ..reporting.artifacts import describe_layers, git_sha, write_manifest
from ..reporting.metrics import MetricsWriter
from ..reporting.plots import PlotAdapter, plot_decision_boundary
from ..reporting.summary import write_summary
from .batching import make_policy
from .trainer import Trainer

_PRESETS: Dict[str, Mapping[str, object]] = {
    "smoke": {
        "data": {"name": "gaussian", "options": {"n": 40, "seed": 0}},
        "model": {"hidden": [3], "activation": "sigmoid", "output_activation": "sigmoid"},
        "train": {
            "epochs": 20,
            "lr": 0.5,
            "loss": "mse",
            "seed": 0,
            "run_dir": "runs/smoke",
            "enable_plots": False,
        },
    },
    "gaussian-blobs": {
        "data": {"name": "gaussian", "options": {"n": 200, "seed": 0}},
        "model": {"hidden": [4], "activation": "sigmoid", "output_activation": "sigmoid"},
        "train": {
            "epochs": 500,
            "lr": 0.5,
            "loss": "mse",
            "seed": 1,
            "run_dir": "runs/gaussian-blobs",
            "enable_plots": False,
        },
    },
    "xor-linear": {
        "data": {"name": "xor", "options": {"n": 200, "seed": 0}},
        "model": {"hidden": [], "output_activation": "sigmoid"},
        "train": {
            "epochs": 1000,
            "lr": 0.5,
            "loss": "mse",
            "seed": 1,
            "run_dir": "runs/xor-linear",
            "enable_plots": False,
        },
    },
    "xor-hidden": {
        "data": {"name": "xor", "options": {"n": 200, "seed": 0}},
        "model": {"hidden": [4], "activation": "tanh", "output_activation": "sigmoid"},
        "train": {
            "epochs": 1000,
            "lr": 0.5,
            "loss": "mse",
            "seed": 1,
            "run_dir": "runs/xor-hidden",
            "enable_plots": False,
        },
    },
    "circle-playground": {
        "data": {"name": "circle", "options": {"n": 200, "seed": 0}},
        "model": {"hidden": [6, 4], "activation": "tanh", "output_activation": "sigmoid"},
        "train": {
            "epochs": 400,
            "lr": 0.3,
            "loss": "bce",
            "l2": 0.0005,
            "seed": 3,
            "test_split": 0.2,
            "run_dir": "runs/circle-playground",
            "enable_plots": False,
        },
    },
    "spiral-deep": {
        "data": {"name": "spiral", "options": {"n": 200, "seed": 0}},
        "model": {"hidden": [8, 8, 6], "activation": "tanh", "output_activation": "sigmoid"},
        "train": {
            "epochs": 800,
            "lr": 0.1,
            "loss": "bce",
            "batch_size": 20,
            "seed": 5,
            "run_dir": "runs/spiral-deep",
            "enable_plots": False,
        },
    },
    "checkerboard-relu": {
        "data": {"name": "checkerboard", "options": {"n": 300, "seed": 0}},
        "model": {"hidden": [16, 8], "activation": "relu", "output_activation": "sigmoid"},
        "train": {
            "epochs": 600,
            "lr": 0.05,
            "loss": "bce",
            "batch_size": 30,
            "seed": 7,
            "run_dir": "runs/checkerboard-relu",
            "enable_plots": False,
        },
    },
    "and-gate": {
        "data": {"name": "and_gate", "options": {}},
        "model": {"hidden": [], "output_activation": "sigmoid"},
        "train": {
            "epochs": 2000,
            "lr": 1.0,
            "loss": "bce",
            "seed": 0,
            "run_dir": "runs/and-gate",
            "enable_plots": False,
        },
    },
    "xor-gate": {
        "data": {"name": "xor_gate", "options": {}},
        "model": {"hidden": [3], "activation": "sigmoid", "output_activation": "sigmoid"},
        "train": {
            "epochs": 3000,
            "lr": 2.0,
            "loss": "mse",
            "seed": 2,
            "run_dir": "runs/xor-gate",
            "enable_plots": False,
        },
    },
    "activation-sweep": {
        "sweep": {"activations": ["sigmoid", "tanh", "relu"], "seeds": [0, 1]},
        "data": {"name": "circle", "options": {"n": 120, "seed": 0}},
        "model": {"hidden": [6], "output_activation": "sigmoid"},
        "train": {
            "epochs": 50,
            "lr": 0.3,
            "loss": "bce",
            "run_dir": "runs/activation-sweep",
            "enable_plots": False,
        },
    },
}

_PRESET_DIR = Path(__file__).resolve().parents[2] / "configs" / "presets"
_FILE_PRESETS_CACHE: Dict[str, Mapping[str, object]] | None = None


def _read_preset_file(path: Path) -> Mapping[str, object]:
    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        import yaml

        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise ValueError(f"Unsupported preset file type: {path.suffix}")

    if not isinstance(data, Mapping):
        raise TypeError(f"Preset {path.name} must decode to a mapping")
    return data


def _file_presets() -> Dict[str, Mapping[str, object]]:
    global _FILE_PRESETS_CACHE
    if _FILE_PRESETS_CACHE is None:
        presets: Dict[str, Mapping[str, object]] = {}
        if _PRESET_DIR.exists():
            for file in sorted(_PRESET_DIR.iterdir()):
                if file.suffix.lower() not in {".yaml", ".yml", ".json"}:
                    continue
                data = _read_preset_file(file)
                missing = {"data", "model", "train"} - set(data)
                if missing:
                    missing_str = ", ".join(sorted(missing))
                    raise KeyError(
                        f"Preset {file.name} is missing required sections: {missing_str}"
                    )
                presets[file.stem] = json.loads(json.dumps(data))
        _FILE_PRESETS_CACHE = presets
    return {name: deepcopy(cfg) for name, cfg in _FILE_PRESETS_CACHE.items()}


def presets() -> Mapping[str, Mapping[str, object]]:
    combined: Dict[str, Mapping[str, object]] = {}
    combined.update({name: deepcopy(cfg) for name, cfg in _PRESETS.items()})
    combined.update(_file_presets())
    return combined


def load_preset(name: str) -> Mapping[str, object]:
    file_overrides = _file_presets()
    if name in file_overrides:
        return file_overrides[name]
    try:
        return deepcopy(_PRESETS[name])
    except KeyError as exc:
        raise KeyError(f"Unknown preset: {name}") from exc


def run_pipeline(config: Mapping[str, object]) -> RunResult | List[RunResult]:
    if "sweep" in config:
        return _run_sweep(config)
    return _train_single(config)


def _run_sweep(config: Mapping[str, object]) -> List[RunResult]:
    sweep_cfg = config["sweep"]
    base_dir = Path(dict(config.get("train", {})).get("run_dir", "runs/sweep"))
    results: List[RunResult] = []
    for activation in sweep_cfg.get("activations", ["sigmoid"]):
        for seed in sweep_cfg.get("seeds", [0]):
            cfg = deepcopy(dict(config))
            cfg.pop("sweep", None)
            cfg.setdefault("model", {})["activation"] = activation
            cfg.setdefault("train", {})["seed"] = seed
            cfg["train"]["run_dir"] = str(base_dir / f"{activation}-seed{seed}")
            results.append(_train_single(cfg))
    return results


def _train_single(config: Mapping[str, object]) -> RunResult:
    data_cfg = dict(config["data"])
    model_cfg = dict(config["model"])
    train_cfg = dict(config["train"])

    dataset = registry.get_dataset(data_cfg["name"], **data_cfg.get("options", {}))
    data_spec = dataset.data_spec

    seed = int(train_cfg.get("seed", 0))
    epochs = int(train_cfg.get("epochs", 1))
    lr = float(train_cfg.get("lr", 0.1))
    loss_name = str(train_cfg.get("loss", "mse"))
    l2 = float(train_cfg.get("l2", 0.0))
    batch_size = train_cfg.get("batch_size")
    early_stopping = train_cfg.get("early_stopping_patience")
    early_stopping = int(early_stopping) if early_stopping is not None else None
    metrics_cfg = train_cfg.get("metrics", "default")
    if isinstance(metrics_cfg, str):
        metrics_list = metrics_cfg
    else:
        metrics_list = ",".join(str(item) for item in metrics_cfg)

    test_split = float(train_cfg.get("test_split", 0.0))
    if test_split > 0:
        train_samples, eval_samples = train_test_split(
            dataset.samples, test_split=test_split, seed=seed
        )
    else:
        train_samples, eval_samples = dataset.samples, ()

    dims = _build_dims(model_cfg, data_spec)
    activation = str(model_cfg.get("activation", "sigmoid"))
    output_activation = str(model_cfg.get("output_activation", "sigmoid"))
    network = NeuralNetwork(dims, activation, output_activation, seed=seed)

    run_dir = _resolve_run_dir(train_cfg, dataset.name)
    run_dir.mkdir(parents=True, exist_ok=True)

    _print_startup_summary(
        dataset_name=dataset.name,
        samples=len(train_samples),
        dims=dims,
        activations=(activation, output_activation),
        loss=loss_name,
        batching="full" if batch_size is None else f"mini ({int(batch_size)})",
        param_count=network.param_count(),
    )

    sha = git_sha()
    train_writer = MetricsWriter(run_dir, network, split="train", seed=seed, sha=sha)
    split_loggers: Dict[str, List[object]] = {"train": [train_writer]}
    if eval_samples:
        split_loggers["eval"] = [
            MetricsWriter(run_dir, network, split="eval", seed=seed, sha=sha)
        ]
    enable_plots = bool(train_cfg.get("enable_plots", False))
    plotter = PlotAdapter(run_dir, enable_plots=enable_plots)

    trainer = Trainer(
        network,
        learning_rate=lr,
        loss=loss_name,
        l2=l2,
        policy=make_policy(
            int(batch_size) if batch_size is not None else None, seed=seed
        ),
        callbacks=[plotter],
    )
    result = trainer.run(
        train_samples,
        epochs,
        eval_dataset=eval_samples or None,
        task_type=data_spec.task_type,
        metric_names=metrics_list,
        split_loggers=split_loggers,
        early_stopping_patience=early_stopping,
    )

    plotter.close()
    if enable_plots and dims[0] == 2:
        plot_decision_boundary(
            network,
            dataset.samples,
            run_dir / "boundary.png",
            bounds=float(data_spec.extra.get("bounds", 6.0)),
            resolution=int(train_cfg.get("grid_resolution", 50)),
        )

    final_metrics = {"train": dict(result.metrics), "eval": dict(result.eval_metrics)}
    (run_dir / "metrics_final.json").write_text(json.dumps(final_metrics, indent=2))

    manifest = write_manifest(
        run_dir / "manifest.json",
        config=_safe_config(config, dims),
        dataset_provenance=dataset.provenance,
        architecture={
            "topology": dims,
            "params": network.param_count(),
            "layers": describe_layers(network.get_weights()),
        },
        sha=sha,
    )
    summary_tail = int(train_cfg.get("summary_tail", 32))
    summary_path = write_summary(
        train_writer.jsonl_path, run_dir / "summary.json", tail=summary_tail
    )
    (run_dir / "config.json").write_text(json.dumps(_safe_config(config, dims), indent=2))

    return RunResult(
        epochs=result.epochs,
        final_loss=result.final_loss,
        metrics_path=str(train_writer.jsonl_path),
        manifest_path=manifest,
        summary_path=str(summary_path),
    )


def _resolve_run_dir(train_cfg: Mapping[str, object], dataset: str) -> Path:
    if "run_dir" in train_cfg:
        return Path(train_cfg["run_dir"])
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp / dataset


def _build_dims(model_cfg: Mapping[str, object], data_spec: registry.DataSpec) -> List[int]:
    d_in = int(model_cfg.get("d_in", data_spec.d_in))
    d_out = int(model_cfg.get("d_out", data_spec.d_out))
    if d_in != data_spec.d_in:
        raise ValueError(f"Configured d_in={d_in} but the dataset provides {data_spec.d_in}")
    if d_out != data_spec.d_out:
        raise ValueError(f"Configured d_out={d_out} but the dataset provides {data_spec.d_out}")
    dims = [d_in]
    dims.extend(int(h) for h in model_cfg.get("hidden", []))
    dims.append(d_out)
    return dims


def _safe_config(config: Mapping[str, object], dims: Iterable[int]) -> Mapping[str, object]:
    copied = json.loads(json.dumps(config))
    copied.setdefault("model", {})["topology"] = list(dims)
    return copied


def _print_startup_summary(
    *,
    dataset_name: str,
    samples: int,
    dims: Sequence[int],
    activations: Sequence[str],
    loss: str,
    batching: str,
    param_count: int,
) -> None:
    print("=== neuroplay run ===")
    print(f"Dataset       : {dataset_name} ({samples} samples)")
    print(f"Topology      : {list(dims)}")
    print(f"Activations   : hidden={activations[0]} output={activations[1]}")
    print(f"Loss          : {loss}")
    print(f"Batching      : {batching}")
    print(f"Parameters    : {param_count}")
    print("=====================")


__all__ = ["load_preset", "presets", "run_pipeline"]
