"""Command line entry point for neuroplay playground runs."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable

from neuroplay.core.activations import available_activations
from neuroplay.core.losses import available_losses
from neuroplay.data import registry as data_registry
from neuroplay.training import pipelines


def _format_result(result) -> str:
    payload = {
        "epochs": result.epochs,
        "final_loss": result.final_loss,
        "metrics": result.metrics_path,
        "manifest": result.manifest_path,
    }
    if getattr(result, "summary_path", ""):
        payload["summary"] = result.summary_path
    return json.dumps(payload, sort_keys=True)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(pipelines.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="smoke",
        help="Preset configuration to execute",
    )
    parser.add_argument(
        "--config", type=Path, help="Optional JSON/YAML config override"
    )
    parser.add_argument(
        "--dataset",
        choices=sorted(data_registry.available_datasets()),
        help="Override the dataset used by the run",
    )
    parser.add_argument("--samples", type=int, help="Number of samples to generate")
    parser.add_argument(
        "--hidden",
        help="Comma separated hidden layer widths, e.g. '4,4' (empty for none)",
    )
    parser.add_argument(
        "--activation", choices=sorted(available_activations()), help="Hidden activation"
    )
    parser.add_argument(
        "--output-activation",
        choices=sorted(available_activations()),
        help="Output activation",
    )
    parser.add_argument("--loss", choices=sorted(available_losses()), help="Loss function")
    parser.add_argument("--epochs", type=int, help="Number of epochs")
    parser.add_argument("--lr", type=float, help="Learning rate")
    parser.add_argument("--l2", type=float, help="L2 penalty coefficient")
    parser.add_argument(
        "--batch-size",
        type=int,
        help="Mini-batch size (omit for full-batch gradient descent)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed used for dataset generation and weight initialisation",
    )
    parser.add_argument("--run-dir", type=Path, help="Directory for run artifacts")
    parser.add_argument(
        "--enable-plots", action="store_true", help="Write loss and decision-boundary plots"
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--list-datasets", action="store_true", help="List available datasets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    return parser.parse_args(argv)


def _load_override(path: Path) -> dict:
    text = path.read_text()
    if path.suffix in {".yml", ".yaml"}:
        import yaml

        return yaml.safe_load(text) or {}
    return json.loads(text)


def _merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge(dict(base[key]), value)
        else:
            base[key] = value
    return base


def _apply_flags(config: dict, args: argparse.Namespace) -> dict:
    data_cfg = config.setdefault("data", {})
    model_cfg = config.setdefault("model", {})
    train_cfg = config.setdefault("train", {})

    if args.dataset:
        data_cfg["name"] = args.dataset
        data_cfg["options"] = {}
    opts = data_cfg.setdefault("options", {})
    if args.samples is not None:
        opts["n"] = int(args.samples)
    if args.seed is not None:
        if not data_cfg.get("name", "").endswith("_gate"):
            opts["seed"] = int(args.seed)
        train_cfg["seed"] = int(args.seed)

    if args.hidden is not None:
        model_cfg["hidden"] = [int(h) for h in args.hidden.split(",") if h.strip()]
    if args.activation:
        model_cfg["activation"] = args.activation
    if args.output_activation:
        model_cfg["output_activation"] = args.output_activation

    if args.loss:
        train_cfg["loss"] = args.loss
    if args.epochs is not None:
        train_cfg["epochs"] = int(args.epochs)
    if args.lr is not None:
        train_cfg["lr"] = float(args.lr)
    if args.l2 is not None:
        train_cfg["l2"] = float(args.l2)
    if args.batch_size is not None:
        train_cfg["batch_size"] = int(args.batch_size)
    if args.run_dir is not None:
        train_cfg["run_dir"] = str(args.run_dir)
    if args.enable_plots:
        train_cfg["enable_plots"] = True
    return config


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    if args.list_datasets:
        for name in data_registry.available_datasets():
            print(name)
        raise SystemExit(0)

    config = json.loads(json.dumps(pipelines.load_preset(args.preset)))

    if args.config:
        override = _load_override(args.config)
        if {"data", "model", "train"} <= set(override.keys()):
            config = json.loads(json.dumps(override))
        else:
            config = _merge(config, override)

    config = _apply_flags(config, args)

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    result = pipelines.run_pipeline(config)

    if isinstance(result, list):
        for item in result:
            print(_format_result(item))
    else:
        print(_format_result(result))


if __name__ == "__main__":
    main()
