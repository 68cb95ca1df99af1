import numpy as np
import pytest

from neuroplay.core.errors import ShapeMismatchError
from neuroplay.core.layer import BIAS_INIT, Layer, xavier_scale


def _layer(activation="sigmoid", sizes=(3, 2), seed=0):
    return Layer(*sizes, activation, rng=np.random.default_rng(seed))


def test_initialisation_shapes_and_ranges():
    layer = _layer(sizes=(5, 3))
    assert layer.weights.shape == (3, 5)
    assert layer.biases.shape == (3,)
    scale = xavier_scale(5, 3)
    assert np.all(np.abs(layer.weights) <= scale)
    assert np.all(np.abs(layer.biases) <= BIAS_INIT)
    assert not layer.grad_weights.any()
    assert not layer.grad_biases.any()
    assert layer.param_count() == 5 * 3 + 3


def test_forward_computes_affine_then_activation():
    layer = _layer("linear", sizes=(2, 2))
    layer.weights[:] = [[1.0, 2.0], [-1.0, 0.5]]
    layer.biases[:] = [0.5, -0.5]
    record = layer.forward([1.0, 2.0])
    assert np.allclose(record.pre_activation, [5.5, -0.5])
    assert np.allclose(record.outputs, [5.5, -0.5])
    assert np.array_equal(record.inputs, [1.0, 2.0])


def test_forward_records_are_independent():
    layer = _layer("tanh")
    first = layer.forward([1.0, 0.0, -1.0])
    second = layer.forward([0.2, 0.4, 0.6])
    layer.backward(first, [1.0, 1.0])
    expected = first.outputs
    delta = 1.0 - expected**2
    assert np.allclose(layer.grad_biases, delta)
    assert np.allclose(layer.grad_weights, np.outer(delta, first.inputs))
    assert not np.allclose(second.outputs, first.outputs)


def test_backward_accumulates_and_uses_pre_update_weights():
    layer = _layer("relu", sizes=(2, 2))
    layer.weights[:] = [[1.0, -1.0], [0.5, 2.0]]
    layer.biases[:] = [0.0, 0.0]
    record = layer.forward([1.0, 2.0])  # pre-activation [-1, 4.5]
    grad_in = layer.backward(record, [3.0, 2.0])
    assert np.allclose(layer.grad_biases, [0.0, 2.0])
    assert np.allclose(grad_in, [0.5 * 2.0, 2.0 * 2.0])

    layer.backward(record, [3.0, 2.0])
    assert np.allclose(layer.grad_biases, [0.0, 4.0])
    assert np.allclose(layer.grad_weights, [[0.0, 0.0], [4.0, 8.0]])


def test_apply_gradients_averages_penalises_and_resets():
    layer = _layer("linear", sizes=(1, 1))
    layer.weights[:] = [[2.0]]
    layer.biases[:] = [1.0]
    layer.grad_weights[:] = [[4.0]]
    layer.grad_biases[:] = [2.0]
    layer.apply_gradients(learning_rate=0.1, l2=0.5, batch_size=2)
    assert layer.weights[0, 0] == pytest.approx(2.0 - 0.1 * (2.0 + 1.0))
    assert layer.biases[0] == pytest.approx(1.0 - 0.1 * 1.0)
    assert not layer.grad_weights.any()
    assert not layer.grad_biases.any()


def test_zero_grad_keeps_parameters():
    layer = _layer()
    before = layer.weights.copy()
    layer.backward(layer.forward([1.0, 2.0, 3.0]), [1.0, -1.0])
    assert layer.grad_weights.any()
    layer.zero_grad()
    assert not layer.grad_weights.any()
    assert np.array_equal(layer.weights, before)


def test_shape_mismatch_is_reported():
    layer = _layer()
    with pytest.raises(ShapeMismatchError):
        layer.forward([1.0, 2.0])
    record = layer.forward([1.0, 2.0, 3.0])
    with pytest.raises(ShapeMismatchError):
        layer.backward(record, [1.0, 2.0, 3.0])


def test_snapshot_is_read_only_copy():
    layer = _layer()
    snap = layer.snapshot(3)
    assert snap.layer == 3
    assert snap.activation == "sigmoid"
    with pytest.raises(ValueError):
        snap.weights[0, 0] = 10.0
    layer.weights[0, 0] = 42.0
    assert snap.weights[0, 0] != 42.0
