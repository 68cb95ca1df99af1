import csv
import json
from pathlib import Path

from neuroplay.core.network import NeuralNetwork
from neuroplay.core.types import Sample
from neuroplay.reporting.artifacts import write_manifest
from neuroplay.reporting.metrics import MetricsWriter


def _network():
    return NeuralNetwork([2, 2, 1], seed=0)


def test_writer_rows_follow_network_state(tmp_path):
    net = _network()
    data = [Sample((1.0, 0.0), (1.0,)), Sample((0.0, 1.0), (0.0,))]
    train = MetricsWriter(tmp_path, net, split="train", seed=7, sha="abc123")
    evaluation = MetricsWriter(tmp_path, net, split="eval", seed=7, sha="abc123")

    for _ in range(2):
        loss = net.train_batch(data, learning_rate=0.5)
        train.on_epoch(net.epoch, {"loss": loss, "accuracy": 0.5})
        evaluation.on_epoch(net.epoch, {"loss": 0.3})

    rows = [json.loads(line) for line in train.jsonl_path.read_text().splitlines()]
    assert [row["epoch"] for row in rows] == [1, 2]
    assert rows[-1]["loss"] == net.loss
    assert rows[0]["sha"] == "abc123" and rows[0]["seed"] == 7
    assert "train_loss" not in rows[0]

    eval_rows = [json.loads(line) for line in evaluation.jsonl_path.read_text().splitlines()]
    assert eval_rows[-1]["train_loss"] == net.loss
    assert eval_rows[-1]["loss"] == 0.3


def test_writer_csv_has_single_header(tmp_path):
    net = _network()
    writer = MetricsWriter(tmp_path, net, split="train")
    writer.on_epoch(0, {"loss": 1.0})
    writer.on_epoch(0, {"loss": 0.5})
    with writer.csv_path.open(newline="") as handle:
        rows = list(csv.DictReader(handle))
    assert len(rows) == 2
    assert [float(row["loss"]) for row in rows] == [1.0, 0.5]
    assert writer.csv_path.name == "metrics_train.csv"


def test_writer_truncates_previous_run(tmp_path):
    net = _network()
    MetricsWriter(tmp_path, net).on_epoch(0, {"loss": 1.0})
    fresh = MetricsWriter(tmp_path, net)
    assert fresh.jsonl_path.read_text() == ""


def test_manifest_records_given_sha(tmp_path):
    path = write_manifest(
        tmp_path / "manifest.json",
        config={"train": {}},
        dataset_provenance={"generator": "xor"},
        sha="deadbeef",
    )
    manifest = json.loads(Path(path).read_text())
    assert manifest["git_sha"] == "deadbeef"
    assert "numpy" in manifest["environment"]
