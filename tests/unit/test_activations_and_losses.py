import numpy as np
import pytest

from neuroplay.core.activations import (
    ActivationKind,
    available_activations,
    get_activation,
    sigmoid,
)
from neuroplay.core.errors import ShapeMismatchError, UnknownActivationError, UnknownLossError
from neuroplay.core.losses import BCE_EPSILON, LossKind, available_losses, get_loss


def test_registry_lookup_by_name_and_kind():
    assert list(available_activations()) == ["linear", "relu", "sigmoid", "tanh"]
    assert get_activation("ReLU").kind is ActivationKind.RELU
    assert get_activation(ActivationKind.TANH).display_name == "Tanh"
    relu = get_activation("relu")
    assert get_activation(relu) is relu


def test_unknown_activation_raises_instead_of_falling_back():
    with pytest.raises(UnknownActivationError) as excinfo:
        get_activation("softplus")
    assert "sigmoid" in str(excinfo.value)
    assert isinstance(excinfo.value, KeyError)


def test_sigmoid_clamps_extreme_inputs():
    with np.errstate(over="raise"):
        out = sigmoid(np.array([-1e6, 0.0, 1e6]))
    assert np.all(np.isfinite(out))
    assert out[0] == pytest.approx(0.0, abs=1e-200)
    assert out[1] == pytest.approx(0.5)
    assert out[2] == pytest.approx(1.0)


def test_derivative_conventions():
    pre = np.array([-2.0, 0.0, 1.5])

    sig = get_activation("sigmoid")
    y = sig.fn(pre)
    assert np.allclose(sig.derivative(pre, y), y * (1 - y))

    tanh = get_activation("tanh")
    y = tanh.fn(pre)
    assert np.allclose(tanh.derivative(pre, y), 1 - y**2)

    relu = get_activation("relu")
    y = relu.fn(pre)
    # zero output at pre == 0 still has zero slope; the rule reads the pre-activation sign
    assert np.array_equal(relu.derivative(pre, y), np.array([0.0, 0.0, 1.0]))

    lin = get_activation("linear")
    assert np.array_equal(lin.derivative(pre, lin.fn(pre)), np.ones(3))


def test_mse_value_and_gradient():
    mse = get_loss("mse")
    pred = np.array([0.5, 1.0])
    target = np.array([0.0, 1.0])
    assert mse(pred, target) == pytest.approx(0.125)
    assert np.allclose(mse.grad(pred, target), [0.5, 0.0])


def test_bce_clamps_probabilities():
    bce = get_loss("crossEntropy")
    assert bce.kind is LossKind.BCE
    value = bce(np.array([0.0]), np.array([1.0]))
    assert np.isfinite(value)
    assert value == pytest.approx(-np.log(BCE_EPSILON))
    grad = bce.grad(np.array([1.0]), np.array([1.0]))
    assert np.all(np.isfinite(grad))


def test_bce_gradient_matches_finite_difference():
    bce = get_loss("bce")
    pred = np.array([0.3, 0.8])
    target = np.array([1.0, 0.0])
    eps = 1e-6
    numeric = []
    for i in range(pred.size):
        bumped = pred.copy()
        bumped[i] += eps
        numeric.append((bce(bumped, target) - bce(pred, target)) / eps)
    assert np.allclose(bce.grad(pred, target), numeric, atol=1e-4)


def test_loss_registry_errors():
    assert list(available_losses()) == ["bce", "mse"]
    with pytest.raises(UnknownLossError):
        get_loss("hinge")
    with pytest.raises(ShapeMismatchError):
        get_loss("mse")(np.zeros(2), np.zeros(3))
