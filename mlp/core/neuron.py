"""
Neuron — The Atomic Learnable Unit
==================================

A neuron owns one weight per incoming connection, an optional bias, and the
scratch values written during a training step.

Notation
--------
  w   : weight vector          — shape (n_in,)
  x   : upstream outputs       — shape (n_in,)
  b   : bias (scalar, only applied when the network enables bias)
  y   : output  = σ(w · x + b)
  δ   : delta   — backpropagated error signal
  Δw  : weight_changes        — accumulated gradient of the current step
  Δw' : last_weight_changes   — snapshot of the previous step (momentum)
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from .activations import sigmoid
from .initializers import (
    DEFAULT_WEIGHT,
    constant_init,
    secure_uniform_init,
    zeros_init,
)

INITIAL_OUTPUT: float = 0.5


class Neuron:
    """Single sigmoid unit with momentum bookkeeping.

    A freshly built neuron has no incoming connections; the owning network
    sizes its weight vector through :meth:`resize`.
    """

    def __init__(self) -> None:
        self.weights: NDArray = zeros_init(0)
        self.weight_changes: NDArray = zeros_init(0)
        self.last_weight_changes: NDArray = zeros_init(0)
        self.bias: float = 0.0
        self.bias_change: float = 0.0
        self.last_bias_change: float = 0.0
        self.delta: float = 0.0
        self.output: float = INITIAL_OUTPUT

    # ── connections ──────────────────────────────────────────────
    @property
    def n_inputs(self) -> int:
        return int(self.weights.shape[0])

    def resize(self, n_inputs: int) -> bool:
        """Trim or extend the weight vector to ``n_inputs`` connections.

        Surviving weights keep their values. Missing weights are appended
        with ``DEFAULT_WEIGHT`` and their gradient slots with 0.

        Returns
        -------
        changed : bool — whether the neuron was modified.
        """
        current = self.n_inputs
        if current == n_inputs:
            return False

        if current > n_inputs:
            self.weights = self.weights[:n_inputs].copy()
            self.weight_changes = self.weight_changes[:n_inputs].copy()
            self.last_weight_changes = self.last_weight_changes[:n_inputs].copy()
        else:
            missing = n_inputs - current
            self.weights = np.concatenate(
                [self.weights, constant_init(missing, DEFAULT_WEIGHT)]
            )
            self.weight_changes = np.concatenate(
                [self.weight_changes, zeros_init(missing)]
            )
            self.last_weight_changes = np.concatenate(
                [self.last_weight_changes, zeros_init(missing)]
            )
        return True

    def randomize(self, use_bias: bool, rng=None) -> None:
        """Draw every weight (and the bias, if enabled) from U[-1, 1]."""
        self.weights = secure_uniform_init(self.n_inputs, rng)
        if use_bias:
            self.bias = float(secure_uniform_init(1, rng)[0])

    # ── forward ──────────────────────────────────────────────────
    def activate(self, upstream: NDArray, use_bias: bool) -> float:
        """Compute and store y = σ(w · x [+ b])."""
        z = float(np.dot(upstream, self.weights))
        if use_bias:
            z += self.bias
        self.output = float(sigmoid(z))
        return self.output

    # ── training bookkeeping ─────────────────────────────────────
    def reset_changes(self) -> None:
        self.weight_changes[:] = 0.0
        self.bias_change = 0.0

    def accumulate(self, upstream: NDArray, use_bias: bool) -> None:
        """Δw[j] += δ · x[j]  (and Δb += δ when bias is enabled)."""
        self.weight_changes += self.delta * upstream
        if use_bias:
            self.bias_change += self.delta

    def update(self, learning_rate: float, momentum: float, use_bias: bool) -> None:
        r"""Apply one momentum gradient-descent step.

        .. math::
            w_j \leftarrow w_j - \eta \, \Delta w_j - \eta \, \mu \, \Delta w'_j

        then :math:`\Delta w' := \Delta w` (a copy, not the same buffer).
        """
        self.weights -= learning_rate * self.weight_changes
        self.weights -= learning_rate * momentum * self.last_weight_changes
        if use_bias:
            self.bias -= learning_rate * self.bias_change
            self.bias -= learning_rate * momentum * self.last_bias_change
        self.last_weight_changes = self.weight_changes.copy()
        self.last_bias_change = self.bias_change

    def __str__(self) -> str:
        text = ""
        if self.n_inputs > 0:
            terms = ", ".join(
                f"{float(w)!r} x i{i}" for i, w in enumerate(self.weights)
            )
            text = f"({terms}) + "
        return f"{text}{self.bias!r} ---Neuron---> {self.output!r}"

    def __repr__(self) -> str:
        return f"Neuron(n_inputs={self.n_inputs}, bias={self.bias}, output={self.output})"
