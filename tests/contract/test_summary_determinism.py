from pathlib import Path

from neuroplay.training import pipelines


def _config(run_dir):
    return {
        "data": {"name": "circle", "options": {"n": 60, "seed": 123}},
        "model": {"hidden": [4], "activation": "tanh", "output_activation": "sigmoid"},
        "train": {
            "epochs": 15,
            "lr": 0.3,
            "loss": "bce",
            "batch_size": 16,
            "seed": 55,
            "run_dir": str(run_dir),
            "enable_plots": False,
        },
    }


def test_summary_outputs_are_deterministic(tmp_path):
    first = pipelines.run_pipeline(_config(tmp_path / "run_a"))
    second = pipelines.run_pipeline(_config(tmp_path / "run_b"))

    assert Path(first.metrics_path).read_bytes() == Path(second.metrics_path).read_bytes()
    assert Path(first.summary_path).read_bytes() == Path(second.summary_path).read_bytes()
    assert first.final_loss == second.final_loss
