"""
Gradient Checking — Numerical Verification of Backpropagation
=============================================================

Gradient checking compares the **analytical** gradient (the weight changes
accumulated by backprop) against a **numerical** approximation using finite
differences.

Numerical gradient
------------------
.. math::
    \\frac{\\partial E}{\\partial \\theta_i}
    \\approx \\frac{E(\\theta_i + \\varepsilon) - E(\\theta_i - \\varepsilon)}
                   {2 \\varepsilon}

This is the **centered difference** formula — O(ε²) accurate.

Relative error
--------------
.. math::
    \\text{rel\\_error} =
        \\frac{\\|g_{\\text{analytic}} - g_{\\text{numeric}}\\|_2}
             {\\|g_{\\text{analytic}}\\|_2 + \\|g_{\\text{numeric}}\\|_2 + \\varepsilon}

Rules of thumb:
  • rel_error < 1e-5  — ✅ correct implementation
  • rel_error < 1e-3  — ⚠️  may have a bug
  • rel_error > 1e-3  — ❌ almost certainly buggy

Objective per loss regime (Sigmoid outputs only):
  • MSE           — :math:`E = \\tfrac{1}{2}\\sum_i (d_i - y_i)^2`
  • Cross-entropy — :math:`E = -\\sum_i d_i \\ln y_i`
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Sequence

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from ..network.perceptron import MultilayerPerceptron


def gradient_check(
    loss_fn: Callable[[NDArray], float],
    params: NDArray,
    analytic_grad: NDArray,
    epsilon: float = 1e-7,
) -> float:
    """Check gradient of a scalar loss function w.r.t. a flat parameter array.

    Parameters
    ----------
    loss_fn       : callable — takes params (flat ndarray) → scalar loss.
    params        : ndarray, shape (D,) — current parameter values.
    analytic_grad : ndarray, shape (D,) — gradient from backprop.
    epsilon       : float — perturbation size.

    Returns
    -------
    rel_error : float — relative error between numeric and analytic grads.
    """
    numeric_grad = numerical_gradient(loss_fn, params, epsilon)

    diff = np.linalg.norm(analytic_grad - numeric_grad)
    norm_sum = np.linalg.norm(analytic_grad) + np.linalg.norm(numeric_grad) + 1e-15
    rel_error: float = float(diff / norm_sum)

    return rel_error


def numerical_gradient(
    loss_fn: Callable[[NDArray], float],
    params: NDArray,
    epsilon: float = 1e-7,
) -> NDArray:
    """Centred-difference gradient of ``loss_fn`` at ``params``."""
    numeric_grad = np.zeros_like(params)

    for i in range(params.size):
        # ── perturb +ε ──
        params_plus = params.copy()
        params_plus[i] += epsilon
        loss_plus = loss_fn(params_plus)

        # ── perturb −ε ──
        params_minus = params.copy()
        params_minus[i] -= epsilon
        loss_minus = loss_fn(params_minus)

        # ── centred difference ──
        numeric_grad[i] = (loss_plus - loss_minus) / (2.0 * epsilon)

    return numeric_grad


# ────────────────────────────────────────────────────────────────────
# Network parameter flattening
# ────────────────────────────────────────────────────────────────────
def _neurons(network: "MultilayerPerceptron"):
    for layer in [*network.hidden_layers, network.output_layer]:
        yield from layer


def get_parameters(network: "MultilayerPerceptron") -> NDArray:
    """Flatten every weight (and bias, when enabled) in layer order."""
    values: list[float] = []
    for neuron in _neurons(network):
        values.extend(neuron.weights.tolist())
        if network.use_bias:
            values.append(neuron.bias)
    return np.array(values, dtype=np.float64)


def set_parameters(network: "MultilayerPerceptron", params: NDArray) -> None:
    """Inverse of :func:`get_parameters`."""
    offset = 0
    for neuron in _neurons(network):
        n = neuron.n_inputs
        neuron.weights = np.array(params[offset:offset + n], dtype=np.float64)
        offset += n
        if network.use_bias:
            neuron.bias = float(params[offset])
            offset += 1


def get_gradients(network: "MultilayerPerceptron") -> NDArray:
    """Flatten the accumulated weight (and bias) changes in parameter order."""
    values: list[float] = []
    for neuron in _neurons(network):
        values.extend(neuron.weight_changes.tolist())
        if network.use_bias:
            values.append(neuron.bias_change)
    return np.array(values, dtype=np.float64)


def gradient_check_network(
    network: "MultilayerPerceptron",
    inputs: Sequence[float],
    desired: Sequence[float],
    epsilon: float = 1e-6,
) -> float:
    """Compare backprop's accumulated changes with finite differences.

    Runs ``reset_gradients → compute_deltas → accumulate_gradients`` for one
    example and checks the result against the derivative of the loss
    objective.  The network's weights are left as they were.

    Parameters
    ----------
    network : MultilayerPerceptron — must use Sigmoid outputs.
    inputs  : sequence of float — one input vector.
    desired : sequence of float — its desired outputs.
    epsilon : perturbation size.

    Returns
    -------
    rel_error : float
    """
    if network.activation.predicts:
        raise ValueError("gradient checking supports Sigmoid outputs only")

    Y = np.asarray(desired, dtype=np.float64)
    loss = network.loss
    original = get_parameters(network)

    network.feed(inputs)
    network.reset_gradients()
    network.compute_deltas(Y)
    network.accumulate_gradients()
    analytic = get_gradients(network)

    def objective(params: NDArray) -> float:
        set_parameters(network, params)
        network.feed(inputs)
        return loss.objective(Y, network.propagate())

    try:
        rel_error = gradient_check(objective, original, analytic, epsilon)
    finally:
        set_parameters(network, original)
        network.reset_gradients()

    return rel_error
