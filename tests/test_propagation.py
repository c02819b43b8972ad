"""
Tests for Forward Propagation and Dataset Metrics
=================================================

Known outputs of networks whose weights are all 1.0 (no bias), softmax
normalisation, one-hot prediction, and the dataset-level MSE, cross-entropy
and CCR.
"""

from __future__ import annotations

import math
import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from mlp.core.activations import normalise, one_hot_argmax, sigmoid
from mlp.network.perceptron import MultilayerPerceptron
from mlp.utils.data_utils import Dataset, load_dataset

DATA_DIR = ROOT / "examples" / "data"
DELTA = 1e-10


@pytest.fixture
def xor_data() -> Dataset:
    return load_dataset(DATA_DIR / "xor.dat")


@pytest.fixture
def xor_2_outputs() -> Dataset:
    return load_dataset(DATA_DIR / "xor_2_outputs.dat")


def _forward(net: MultilayerPerceptron, x: list[float]) -> float:
    net.feed(x)
    net.propagate()
    return net.output(0)


# ────────────────────────────────────────────────────────────────────
# Known outputs
# ────────────────────────────────────────────────────────────────────
class TestKnownOutputs:
    @pytest.mark.parametrize("x,expected", [
        ([0.0, 0.0], 0.6224593312),
        ([0.0, 1.0], 0.6750375273),
        ([1.0, 0.0], 0.6750375273),
        ([1.0, 1.0], 0.7069873680),
    ])
    def test_one_layer_one_neuron(self, x, expected):
        net = MultilayerPerceptron(1, 1, 1)
        assert _forward(net, x) == pytest.approx(expected, abs=DELTA)

    @pytest.mark.parametrize("x,expected", [
        ([0.0, 0.0], 0.7310585786),
        ([0.0, 1.0], 0.8118562749),
        ([1.0, 0.0], 0.8118562749),
        ([1.0, 1.0], 0.8534092045),
    ])
    def test_one_layer_two_neurons(self, x, expected):
        net = MultilayerPerceptron(1, 2, 1)
        assert _forward(net, x) == pytest.approx(expected, abs=DELTA)

    @pytest.mark.parametrize("x,expected", [
        ([0.0, 0.0], 0.8118562749),
        ([0.0, 1.0], 0.8353064996),
        ([1.0, 0.0], 0.8353064996),
        ([1.0, 1.0], 0.8464231617),
    ])
    def test_two_layers_two_neurons(self, x, expected):
        net = MultilayerPerceptron(2, 2, 1)
        assert _forward(net, x) == pytest.approx(expected, abs=DELTA)

    def test_deep_wide_network(self):
        net = MultilayerPerceptron(20, 20, 3)
        net.feed([-1.0, -2.0, 0.0, 1.0, 2.0])
        outputs = net.propagate()
        assert outputs.shape == (3,)
        np.testing.assert_allclose(outputs, [0.9999999979] * 3, atol=DELTA)

    def test_propagation_is_deterministic(self):
        net = MultilayerPerceptron(3, 4, 2)
        net.randomize_weights()
        net.feed([0.3, -0.7])
        first = net.propagate()
        second = net.propagate()
        np.testing.assert_array_equal(first, second)

    def test_bias_shifts_output(self):
        net = MultilayerPerceptron(1, 1, 1, use_bias=True)
        net.set_bias(-1, 0, 1.0)
        # hidden: σ(0) = 0.5 ; output: σ(0.5 + 1.0)
        assert _forward(net, [0.0]) == pytest.approx(sigmoid(1.5), abs=DELTA)


class TestBuffers:
    def test_feed_copies_input(self):
        net = MultilayerPerceptron()
        x = [1.0, 2.0]
        net.feed(x)
        x[0] = 99.0
        np.testing.assert_array_equal(net.inputs, [1.0, 2.0])

    def test_inputs_and_outputs_are_copies(self):
        net = MultilayerPerceptron()
        net.feed([0.0])
        net.propagate()
        net.inputs[0] = 5.0
        net.outputs[0] = 5.0
        assert net.inputs[0] == 0.0
        assert net.output(0) != 5.0


# ────────────────────────────────────────────────────────────────────
# Softmax and prediction
# ────────────────────────────────────────────────────────────────────
class TestSoftmax:
    def test_softmax_sums_to_one(self):
        net = MultilayerPerceptron(2, 5, 4)
        net.randomize_weights()
        net.feed([0.2, -0.4, 0.9])
        net.propagate()
        y = net.apply_softmax()
        assert np.sum(y) == pytest.approx(1.0, abs=1e-9)
        assert np.all(y > 0.0)

    def test_softmax_divides_by_sum(self):
        np.testing.assert_allclose(normalise(np.array([1.0, 3.0])), [0.25, 0.75])

    def test_zero_sum_left_unchanged(self):
        np.testing.assert_array_equal(normalise(np.zeros(3)), np.zeros(3))

    def test_prediction_is_one_hot_at_argmax(self):
        net = MultilayerPerceptron(1, 3, 3)
        net.randomize_weights()
        net.feed([0.5, -0.5])
        raw = net.propagate()
        pred = net.apply_prediction()
        assert pred.sum() == 1.0
        assert int(np.argmax(pred)) == int(np.argmax(raw))

    def test_prediction_ties_pick_lowest_index(self):
        np.testing.assert_array_equal(one_hot_argmax(np.array([0.3, 0.3, 0.1])), [1, 0, 0])

    def test_predict_in_softmax_mode(self):
        net = MultilayerPerceptron(1, 2, 2, activation="softmax")
        y = net.predict([1.0, -1.0])
        assert y.sum() == pytest.approx(1.0)

    def test_predict_in_sigmoid_mode_is_raw(self):
        net = MultilayerPerceptron(1, 1, 1)
        assert net.predict([0.0, 0.0])[0] == pytest.approx(0.6224593312, abs=DELTA)


# ────────────────────────────────────────────────────────────────────
# Metrics
# ────────────────────────────────────────────────────────────────────
class TestMetrics:
    def test_single_example_mse(self):
        net = MultilayerPerceptron(2, 2, 1)
        actual = _forward(net, [1.0, 0.0])
        assert net.mean_squared_error([1.0]) == pytest.approx((actual - 1.0) ** 2)

    def test_single_example_cross_entropy(self):
        net = MultilayerPerceptron(1, 1, 2)
        net.feed([0.0])
        y = net.propagate()
        expected = -(1.0 * math.log(y[0])) / 2
        assert net.cross_entropy_error([1.0, 0.0]) == pytest.approx(expected)

    def test_dataset_mse_on_xor(self, xor_data):
        net = MultilayerPerceptron(2, 2, 1)
        assert net.dataset_mse(xor_data) == pytest.approx(0.3388368051, abs=DELTA)

    def test_dataset_error_follows_loss(self, xor_data):
        net = MultilayerPerceptron(2, 2, 1)
        assert net.dataset_error(xor_data) == net.dataset_mse(xor_data)
        net.loss = "cross_entropy"
        assert net.dataset_error(xor_data) == net.dataset_cross_entropy(xor_data)

    def test_softmax_metrics_on_identical_outputs(self, xor_2_outputs):
        # All weights 1.0 → both outputs equal → prediction is always [1, 0].
        net = MultilayerPerceptron(1, 1, 2, activation="softmax")
        assert net.ccr(xor_2_outputs) == pytest.approx(0.5)
        assert net.dataset_mse(xor_2_outputs) == pytest.approx(0.5)
        assert net.dataset_cross_entropy(xor_2_outputs) == pytest.approx(math.log(2) / 2)

    def test_ccr_in_sigmoid_mode_needs_exact_match(self, xor_data):
        net = MultilayerPerceptron(2, 2, 1)
        assert net.ccr(xor_data) == 0.0

    def test_empty_dataset_metrics_are_zero(self):
        net = MultilayerPerceptron()
        empty = Dataset()
        assert net.dataset_mse(empty) == 0.0
        assert net.dataset_cross_entropy(empty) == 0.0
        assert net.ccr(empty) == 0.0
