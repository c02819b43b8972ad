"""
Tests for Gradient Checking
============================

Validates the gradient verification utilities themselves,
plus end-to-end gradient checking of the backpropagated weight changes.
"""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from mlp.network.perceptron import MultilayerPerceptron
from mlp.validation.gradient_check import (
    get_parameters,
    gradient_check,
    gradient_check_network,
    numerical_gradient,
    set_parameters,
)


class TestGradientCheck:
    def test_quadratic_function(self):
        """f(x) = x², grad = 2x — should pass easily."""
        x = np.array([3.0, -2.0, 0.5])
        analytic = 2.0 * x
        rel_err = gradient_check(lambda p: float(np.sum(p ** 2)), x, analytic)
        assert rel_err < 1e-7

    def test_wrong_gradient_detected(self):
        """Intentionally wrong gradient should give high error."""
        x = np.array([3.0, -2.0, 0.5])
        wrong_grad = np.zeros_like(x)  # wrong!
        rel_err = gradient_check(lambda p: float(np.sum(p ** 2)), x, wrong_grad)
        assert rel_err > 0.5

    def test_numerical_gradient_of_linear_function(self):
        x = np.array([1.0, 2.0, 3.0])
        grad = numerical_gradient(lambda p: float(np.dot([1.0, -2.0, 0.5], p)), x)
        np.testing.assert_allclose(grad, [1.0, -2.0, 0.5], atol=1e-6)


class TestParameterFlattening:
    def test_round_trip(self):
        net = MultilayerPerceptron(2, 3, 2, use_bias=True)
        net.feed([0.0, 0.0])
        net.randomize_weights()
        params = get_parameters(net)
        assert params.size == net.count_params()

        set_parameters(net, np.zeros_like(params))
        assert np.all(get_parameters(net) == 0.0)
        set_parameters(net, params)
        np.testing.assert_array_equal(get_parameters(net), params)


class TestNetworkGradients:
    @pytest.mark.parametrize("loss", ["mse", "cross_entropy"])
    @pytest.mark.parametrize("use_bias", [False, True])
    def test_backprop_matches_finite_differences(self, loss, use_bias):
        net = MultilayerPerceptron(2, 3, 2, use_bias=use_bias, loss=loss)
        net.feed([0.0, 0.0, 0.0])
        net.randomize_weights()
        rel_err = gradient_check_network(net, [0.4, -0.7, 0.1], [1.0, 0.0])
        assert rel_err < 1e-5

    def test_weights_restored(self):
        net = MultilayerPerceptron(1, 2, 1)
        net.feed([0.0, 0.0])
        net.randomize_weights()
        before = get_parameters(net)
        gradient_check_network(net, [0.5, 0.5], [1.0])
        np.testing.assert_array_equal(get_parameters(net), before)

    def test_softmax_not_supported(self):
        net = MultilayerPerceptron(1, 2, 2, activation="softmax")
        with pytest.raises(ValueError):
            gradient_check_network(net, [0.5], [1.0, 0.0])
