import math

import numpy as np
import pytest

from neuroplay.data import (
    available_datasets,
    checkerboard,
    checkerboard_label,
    circle,
    gaussian,
    get_dataset,
    shuffled,
    spiral,
    train_test_split,
    truth_table,
    xor,
    xor_label,
)


def _check_shapes(samples):
    for sample in samples:
        assert sample.inputs.shape == (2,)
        assert sample.targets.shape == (1,)
        assert sample.targets[0] in (0.0, 1.0)


@pytest.mark.parametrize("n", [1, 7, 200])
def test_circle_and_xor_return_n_samples(n):
    for generate in (circle, xor, checkerboard):
        samples = generate(n, seed=0)
        assert len(samples) == n
        _check_shapes(samples)


@pytest.mark.parametrize("n", [7, 200])
def test_balanced_generators_round_down_to_even(n):
    for generate in (spiral, gaussian):
        samples = generate(n, seed=0)
        assert len(samples) == 2 * (n // 2)
        labels = [s.targets[0] for s in samples]
        assert labels.count(1.0) == labels.count(0.0)
        _check_shapes(samples)


def test_samples_are_immutable():
    sample = xor(1, seed=0)[0]
    with pytest.raises(ValueError):
        sample.inputs[0] = 10.0
    assert isinstance(xor(3, seed=0), tuple)


def test_generators_are_reproducible_with_seed():
    first = circle(20, seed=11)
    second = circle(20, seed=11)
    assert all(np.array_equal(a.inputs, b.inputs) for a, b in zip(first, second))


def test_xor_labels_follow_sign_rule():
    clean = xor(300, noise=0.0, seed=1)
    assert all(s.targets[0] == xor_label(*s.inputs) for s in clean)

    noisy = xor(300, seed=1)
    agree = sum(s.targets[0] == xor_label(*s.inputs) for s in noisy)
    # jitter of at most 0.25 per axis only flips points hugging an axis
    assert agree / len(noisy) > 0.85
    for sample in noisy:
        x, y = sample.inputs
        if min(abs(x), abs(y)) > 0.25:
            assert sample.targets[0] == xor_label(x, y)


def test_checkerboard_parity_rule():
    assert checkerboard_label(0.5, 0.5) == (4 + 4) % 2
    assert checkerboard_label(-0.5, 0.5) == 1
    assert checkerboard_label(-3.5, -2.5) == 1
    assert checkerboard_label(1.2, 2.7) == (math.floor(5.2) + math.floor(6.7)) % 2
    samples = checkerboard(100, seed=2)
    assert all(s.targets[0] == checkerboard_label(*s.inputs) for s in samples)


def test_circle_label_matches_radius():
    for sample in circle(200, seed=3):
        radius = float(np.hypot(*sample.inputs))
        if sample.targets[0] == 1.0:
            assert radius < 2.0 + 0.3
        else:
            assert radius > 2.5 - 0.3


def test_gaussian_blobs_are_centred():
    samples = gaussian(400, seed=4)
    pos = np.array([s.inputs for s in samples if s.targets[0] == 1.0])
    neg = np.array([s.inputs for s in samples if s.targets[0] == 0.0])
    assert np.allclose(pos.mean(axis=0), [2.0, 2.0], atol=0.4)
    assert np.allclose(neg.mean(axis=0), [-2.0, -2.0], atol=0.4)


def test_spiral_starts_at_origin_for_each_class():
    samples = spiral(100, noise=0.0, seed=0)
    assert np.allclose(samples[0].inputs, [0.0, 0.0])
    assert np.allclose(samples[50].inputs, [0.0, 0.0])
    assert samples[0].targets[0] == 0.0
    assert samples[50].targets[0] == 1.0


def test_truth_tables():
    table = {tuple(s.inputs): s.targets[0] for s in truth_table("AND")}
    assert table == {(0.0, 0.0): 0.0, (0.0, 1.0): 0.0, (1.0, 0.0): 0.0, (1.0, 1.0): 1.0}
    assert [s.targets[0] for s in truth_table("xor")] == [0.0, 1.0, 1.0, 0.0]
    with pytest.raises(KeyError):
        truth_table("implies")


def test_registry_and_split_helpers():
    names = list(available_datasets())
    assert {"circle", "xor", "spiral", "gaussian", "checkerboard", "and_gate"} <= set(names)
    spec = get_dataset("xor", n=50, seed=0)
    assert len(spec) == 50
    assert spec.data_spec.d_in == 2 and spec.data_spec.task_type == "binary"
    assert spec.as_batch().inputs.shape == (50, 2)
    with pytest.raises(KeyError):
        get_dataset("moons")

    train, test = train_test_split(spec.samples, test_split=0.2, seed=0)
    assert len(train) == 40 and len(test) == 10
    mixed = shuffled(spec.samples, seed=1)
    assert sorted(map(id, mixed)) == sorted(map(id, spec.samples))


@pytest.mark.parametrize("name", ["circle", "xor", "spiral", "gaussian", "checkerboard"])
def test_every_generator_accepts_noise(name):
    spec = get_dataset(name, n=10, noise=0.1, seed=0)
    assert len(spec) == 10
    assert spec.provenance["noise"] == 0.1
    _check_shapes(spec.samples)


def test_gaussian_noise_jitters_around_the_blob_centres():
    # zero spread isolates the uniform jitter
    noisy = gaussian(50, noise=0.4, spread=0.0, seed=6)
    centres = np.array([[2.0, 2.0] if s.targets[0] == 1.0 else [-2.0, -2.0] for s in noisy])
    offsets = np.array([s.inputs for s in noisy]) - centres
    assert np.all(np.abs(offsets) <= 0.2)
    assert np.any(offsets != 0.0)
    assert [s.targets[0] for s in noisy[:4]] == [1.0, 0.0, 1.0, 0.0]

    clean = gaussian(4, spread=0.0, seed=0)
    assert clean[0].inputs.tolist() == [2.0, 2.0]
    assert clean[1].inputs.tolist() == [-2.0, -2.0]
