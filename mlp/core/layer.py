"""
Layer — Arena of Neurons Sharing One Upstream Source
====================================================

A layer is an ordered group of neurons addressed by position.  It knows
nothing about its neighbours: the network passes in an immutable snapshot of
the upstream outputs (forward) or the downstream layer (backward).

Notation
--------
  x  : upstream outputs     — shape (n_in,)
  y  : layer outputs        — shape (n_out,)
  W  : stacked weights      — shape (n_out, n_in)   (row r = neuron r)
  δ  : layer deltas         — shape (n_out,)
"""

from __future__ import annotations

from typing import Iterator

import numpy as np
from numpy.typing import NDArray

from .neuron import Neuron


class Layer:
    """Ordered collection of :class:`Neuron` objects.

    Parameters
    ----------
    n_neurons : int
        Number of freshly constructed neurons (no connections yet).
    """

    def __init__(self, n_neurons: int) -> None:
        self._neurons: list[Neuron] = [Neuron() for _ in range(n_neurons)]

    # ── structure ────────────────────────────────────────────────
    @property
    def width(self) -> int:
        return len(self._neurons)

    @property
    def neurons(self) -> list[Neuron]:
        return self._neurons

    def connect(self, upstream_width: int) -> bool:
        """Resize every neuron to ``upstream_width`` incoming weights.

        Returns
        -------
        changed : bool — whether any neuron was modified.
        """
        changed = False
        for neuron in self._neurons:
            changed = neuron.resize(upstream_width) or changed
        return changed

    def input_widths(self) -> list[int]:
        return [n.n_inputs for n in self._neurons]

    # ── forward ──────────────────────────────────────────────────
    def outputs(self) -> NDArray:
        """Snapshot of the current outputs (a new array, never a view)."""
        return np.array([n.output for n in self._neurons], dtype=np.float64)

    def forward(self, x: NDArray, use_bias: bool) -> NDArray:
        """Compute y_r = σ(W_r · x [+ b_r]) for every neuron r."""
        for neuron in self._neurons:
            neuron.activate(x, use_bias)
        return self.outputs()

    # ── backward ─────────────────────────────────────────────────
    def deltas(self) -> NDArray:
        return np.array([n.delta for n in self._neurons], dtype=np.float64)

    def set_deltas(self, deltas: NDArray) -> None:
        for neuron, delta in zip(self._neurons, deltas):
            neuron.delta = float(delta)

    def backward(self, downstream: "Layer") -> NDArray:
        r"""Compute hidden deltas from the immediately-downstream layer.

        .. math::
            \delta_i = y_i (1 - y_i) \sum_j \delta^{next}_j \, W^{next}_{ji}
        """
        W_next: NDArray = np.vstack([n.weights for n in downstream.neurons])  # (n_next, n_out)
        back_sum: NDArray = downstream.deltas() @ W_next                      # (n_out,)

        y = self.outputs()
        deltas: NDArray = y * (1.0 - y) * back_sum
        self.set_deltas(deltas)
        return deltas

    def accumulate(self, x: NDArray, use_bias: bool) -> None:
        for neuron in self._neurons:
            neuron.accumulate(x, use_bias)

    def reset_changes(self) -> None:
        for neuron in self._neurons:
            neuron.reset_changes()

    def update(self, learning_rate: float, momentum: float, use_bias: bool) -> None:
        for neuron in self._neurons:
            neuron.update(learning_rate, momentum, use_bias)

    def randomize(self, use_bias: bool, rng=None) -> None:
        for neuron in self._neurons:
            neuron.randomize(use_bias, rng)

    # ── container protocol ───────────────────────────────────────
    def __len__(self) -> int:
        return len(self._neurons)

    def __iter__(self) -> Iterator[Neuron]:
        return iter(self._neurons)

    def __getitem__(self, position: int) -> Neuron:
        return self._neurons[position]

    def __repr__(self) -> str:
        return f"Layer(width={self.width})"
