"""
Multilayer Perceptron — Topology, Forward Pass, Metrics & Backpropagation
=========================================================================

The network is an input buffer, a stack of hidden layers (at least one) and
an output layer.  Every neuron is a sigmoid unit; the output regime
(``Sigmoid`` / ``Softmax``) and the loss (``MSE`` / ``CrossEntropy``) are
strategy objects chosen once per assignment.

Architecture diagram
--------------------
::

    x ─→ [Hidden 0] ─→ [Hidden 1] ─→ ... ─→ [Hidden H-1] ─→ [Output] ─→ ŷ

    δ_out ─→ δ_{H-1} ─→ ... ─→ δ_0          (backward, hidden deltas)

Training step
-------------
::

    feed → propagate → output deltas → hidden deltas → accumulate Δw
         → [repeat per example in batch mode] → update weights

Connections are kept consistent by an idempotent *repair* pass: every neuron
has exactly as many weights as its upstream layer has outputs.  Missing
weights are created with value 1.0; surplus weights are dropped from the end.
"""

from __future__ import annotations

from typing import Callable, Iterable, Sequence

import numpy as np
from numpy.typing import NDArray

from ..core.activations import Activation, get_activation, normalise, one_hot_argmax
from ..core.errors import InvalidParameterError, ShapeMismatchError
from ..core.layer import Layer
from ..core.losses import CrossEntropyLoss, Loss, MSELoss, get_loss, is_exact_match
from ..core.neuron import Neuron
from ..utils.logger import get_logger

logger = get_logger(__name__)


def _check_unit_interval(name: str, value: float) -> float:
    value = float(value)
    if not 0.0 <= value <= 1.0:
        raise InvalidParameterError(
            f"{name} must be between 0 and 1. Actual value: {value}"
        )
    return value


class MultilayerPerceptron:
    """Fully-connected feed-forward network trained by backpropagation.

    Parameters
    ----------
    hidden_layers  : int — number of hidden layers (≥ 1).
    hidden_neurons : int — neurons in each hidden layer (≥ 1).
    output_neurons : int — neurons in the output layer (≥ 1).
    learning_rate  : float ∈ [0, 1] — step size η (default 0.9).
    momentum       : float ∈ [0, 1] — momentum μ (default 0.1).
    use_bias       : bool — add a trainable bias to every neuron.
    activation     : "sigmoid" | "softmax" | Activation.
    loss           : "mse" | "cross_entropy" | Loss.

    Example
    -------
    >>> net = MultilayerPerceptron(2, 2, 1)
    >>> net.feed([0.0, 0.0])
    >>> net.propagate()
    >>> round(net.output(0), 10)
    0.8118562749
    """

    def __init__(
        self,
        hidden_layers: int = 1,
        hidden_neurons: int = 1,
        output_neurons: int = 1,
        learning_rate: float = 0.9,
        momentum: float = 0.1,
        use_bias: bool = False,
        activation: str | Activation = "sigmoid",
        loss: str | Loss = "mse",
    ) -> None:
        self._inputs: NDArray = np.zeros(1, dtype=np.float64)
        self._outputs: NDArray = np.zeros(0, dtype=np.float64)
        self._hidden: list[Layer] = []
        self._output_layer: Layer = Layer(0)

        self.use_bias: bool = bool(use_bias)
        self.learning_rate = learning_rate
        self.momentum = momentum
        self.activation = activation
        self.loss = loss

        self.set_hidden_topology(hidden_layers, hidden_neurons)
        self.set_output_size(output_neurons)

    # ── hyperparameters ──────────────────────────────────────────
    @property
    def learning_rate(self) -> float:
        return self._learning_rate

    @learning_rate.setter
    def learning_rate(self, value: float) -> None:
        self._learning_rate = _check_unit_interval("learning rate", value)

    @property
    def momentum(self) -> float:
        return self._momentum

    @momentum.setter
    def momentum(self, value: float) -> None:
        self._momentum = _check_unit_interval("momentum", value)

    @property
    def activation(self) -> Activation:
        return self._activation

    @activation.setter
    def activation(self, value: str | Activation) -> None:
        self._activation = get_activation(value)

    @property
    def loss(self) -> Loss:
        return self._loss

    @loss.setter
    def loss(self, value: str | Loss) -> None:
        self._loss = get_loss(value)

    # ── topology ─────────────────────────────────────────────────
    def set_hidden_topology(self, num_layers: int, neurons_per_layer: int) -> None:
        """Rebuild the hidden stack with fresh neurons and reconnect everything."""
        if num_layers < 1 or neurons_per_layer < 1:
            raise InvalidParameterError(
                "a network needs at least one hidden layer of one neuron; "
                f"got {num_layers} layer(s) of {neurons_per_layer} neuron(s)"
            )
        self._hidden = [Layer(neurons_per_layer) for _ in range(num_layers)]
        self.repair_connections()

    def set_output_size(self, n_neurons: int) -> None:
        """Rebuild the output layer with fresh neurons."""
        if n_neurons < 1:
            raise InvalidParameterError(
                f"the output layer needs at least one neuron; got {n_neurons}"
            )
        self._output_layer = Layer(n_neurons)
        self._outputs = self._output_layer.outputs()
        self._output_layer.connect(self._hidden[-1].width)

    def repair_connections(self) -> bool:
        """Run the full repair pass: input→hidden, hidden→hidden, hidden→output.

        Returns
        -------
        changed : bool — whether any weight vector was resized.
        """
        changed = self._hidden[0].connect(len(self._inputs))
        for upstream, layer in zip(self._hidden, self._hidden[1:]):
            changed = layer.connect(upstream.width) or changed
        changed = self._output_layer.connect(self._hidden[-1].width) or changed
        return changed

    @property
    def num_hidden_layers(self) -> int:
        return len(self._hidden)

    @property
    def output_size(self) -> int:
        return self._output_layer.width

    @property
    def hidden_layers(self) -> list[Layer]:
        return list(self._hidden)

    @property
    def output_layer(self) -> Layer:
        return self._output_layer

    def _layer(self, layer_index: int) -> Layer:
        if layer_index < 0:
            return self._output_layer
        return self._hidden[layer_index]

    def layer_size(self, layer_index: int) -> int:
        """Width of hidden layer ``layer_index``; negative indices mean the output layer."""
        return self._layer(layer_index).width

    def neuron(self, layer_index: int, position: int) -> Neuron:
        return self._layer(layer_index)[position]

    def neuron_weights(self, layer_index: int, position: int) -> NDArray:
        return self.neuron(layer_index, position).weights.copy()

    def set_neuron_weights(
        self, layer_index: int, position: int, weights: Sequence[float]
    ) -> bool:
        """Overwrite a neuron's weights when the length matches.

        Returns
        -------
        accepted : bool — False (and nothing changed) on a length mismatch.
        """
        selected = self.neuron(layer_index, position)
        values = np.array(weights, dtype=np.float64)
        if values.shape != selected.weights.shape:
            return False
        selected.weights = values
        return True

    def bias(self, layer_index: int, position: int) -> float:
        return self.neuron(layer_index, position).bias

    def set_bias(self, layer_index: int, position: int, value: float) -> None:
        self.neuron(layer_index, position).bias = float(value)

    def _all_layers(self) -> list[Layer]:
        return [*self._hidden, self._output_layer]

    # ── forward ──────────────────────────────────────────────────
    def feed(self, inputs: Iterable[float]) -> None:
        """Store a private copy of ``inputs`` and reconnect the first hidden layer."""
        self._inputs = np.array(list(inputs), dtype=np.float64)
        self._hidden[0].connect(len(self._inputs))

    @property
    def inputs(self) -> NDArray:
        return self._inputs.copy()

    @property
    def outputs(self) -> NDArray:
        return self._outputs.copy()

    def output(self, index: int) -> float:
        return float(self._outputs[index])

    def propagate(self) -> NDArray:
        """Forward pass from the stored inputs to the output buffer.

        Returns
        -------
        outputs : ndarray, shape (output_size,) — a copy of the output buffer.
        """
        upstream: NDArray = self._inputs.copy()
        for layer in self._hidden:
            upstream = layer.forward(upstream, self.use_bias)
        self._outputs = self._output_layer.forward(upstream, self.use_bias)
        return self.outputs

    def apply_softmax(self) -> NDArray:
        """Normalise the output buffer by its sum (see ``activations.normalise``)."""
        if float(np.sum(self._outputs)) == 0.0:
            logger.warning("Output sum is zero; softmax normalisation skipped")
        self._outputs = normalise(self._outputs)
        return self.outputs

    def apply_prediction(self) -> NDArray:
        """Replace the output buffer with a one-hot vector at its arg-max."""
        self._outputs = one_hot_argmax(self._outputs)
        return self.outputs

    def predict(self, inputs: Iterable[float]) -> NDArray:
        """Feed, propagate and post-process according to the activation regime."""
        self.feed(inputs)
        self.propagate()
        self._outputs = self._activation.post_process(self._outputs)
        return self.outputs

    def _evaluate_example(self, inputs: Iterable[float], predict: bool) -> NDArray:
        self.feed(inputs)
        self.propagate()
        if self._activation.predicts:
            self.apply_softmax()
            if predict:
                self.apply_prediction()
        return self._outputs

    # ── metrics ──────────────────────────────────────────────────
    def mean_squared_error(self, desired: Sequence[float]) -> float:
        """MSE of the current output buffer against one desired vector."""
        return MSELoss().forward(self._outputs, np.asarray(desired, dtype=np.float64))

    def cross_entropy_error(self, desired: Sequence[float]) -> float:
        """Cross-entropy of the current output buffer against one desired vector."""
        return CrossEntropyLoss().forward(self._outputs, np.asarray(desired, dtype=np.float64))

    def _dataset_error(self, data, loss: Loss) -> float:
        n = len(data)
        if n == 0:
            return 0.0
        predict = loss.uses_prediction
        total = 0.0
        for inputs in data:
            Y_hat = self._evaluate_example(inputs, predict)
            total += loss.forward(Y_hat, np.asarray(data[inputs], dtype=np.float64))
        return total / n

    def dataset_mse(self, data) -> float:
        """Average MSE over a dataset (on one-hot predictions in Softmax mode)."""
        return self._dataset_error(data, MSELoss())

    def dataset_cross_entropy(self, data) -> float:
        r""":math:`-\frac{1}{N K}\sum_n\sum_k d_k \ln y_k`, zero outputs skipped."""
        return self._dataset_error(data, CrossEntropyLoss())

    def dataset_error(self, data) -> float:
        """The training objective selected by the loss regime."""
        return self._dataset_error(data, self._loss)

    def ccr(self, data) -> float:
        """Correct-classification rate: share of exactly matching output vectors."""
        n = len(data)
        if n == 0:
            return 0.0
        correct = 0
        for inputs in data:
            Y_hat = self._evaluate_example(inputs, predict=True)
            if is_exact_match(data[inputs], Y_hat):
                correct += 1
        return correct / n

    # ── backward ─────────────────────────────────────────────────
    def compute_deltas(self, desired: Sequence[float]) -> None:
        """Propagate, then compute output and hidden deltas for ``desired``.

        Raises
        ------
        ShapeMismatchError — before any neuron is touched, when
            ``len(desired)`` differs from the output layer width.
        """
        Y = np.asarray(desired, dtype=np.float64)
        if Y.shape != (self._output_layer.width,):
            raise ShapeMismatchError(self._output_layer.width, int(Y.size))

        self.propagate()
        self._outputs = self._activation.post_process(self._outputs)
        output_deltas = self._activation.output_deltas(self._outputs, Y, self._loss)
        self._output_layer.set_deltas(output_deltas)

        downstream = self._output_layer
        for layer in reversed(self._hidden):
            layer.backward(downstream)
            downstream = layer

    def reset_gradients(self) -> None:
        for layer in self._all_layers():
            layer.reset_changes()

    def accumulate_gradients(self) -> None:
        """Δw[j] += δ · upstream[j] for every neuron of every layer."""
        upstream: NDArray = self._inputs.copy()
        for layer in self._all_layers():
            snapshot = layer.outputs()
            layer.accumulate(upstream, self.use_bias)
            upstream = snapshot

    def update_weights(self) -> None:
        for layer in self._all_layers():
            layer.update(self._learning_rate, self._momentum, self.use_bias)

    def randomize_weights(self, rng=None) -> None:
        """Draw all weights (and biases, if enabled) uniformly from [-1, 1]."""
        for layer in self._all_layers():
            layer.randomize(self.use_bias, rng)

    def online_backpropagation(
        self, inputs: Iterable[float], desired: Sequence[float]
    ) -> None:
        """One online step: feed, reset, deltas, accumulate, update."""
        self.feed(inputs)
        self.reset_gradients()
        self.compute_deltas(desired)
        self.accumulate_gradients()
        self.update_weights()

    def online_epoch(self, data) -> None:
        for inputs in data:
            self.online_backpropagation(inputs, data[inputs])

    def offline_epoch(self, data) -> None:
        """One batch step: accumulate over the whole dataset, update once."""
        self.reset_gradients()
        for inputs in data:
            self.feed(inputs)
            self.compute_deltas(data[inputs])
            self.accumulate_gradients()
        self.update_weights()

    # ── training loop shortcuts ──────────────────────────────────
    def train_online(
        self,
        data,
        max_iterations: int,
        min_improvement: float,
        on_iteration: Callable[[int, float], bool | None] | None = None,
        test_data=None,
    ):
        """Train with online backpropagation (see ``trainer.train``)."""
        from .trainer import train

        return train(
            self, data, max_iterations, min_improvement,
            offline=False, on_iteration=on_iteration, test_data=test_data,
        )

    def train_offline(
        self,
        data,
        max_iterations: int,
        min_improvement: float,
        on_iteration: Callable[[int, float], bool | None] | None = None,
        test_data=None,
    ):
        """Train with offline (batch) backpropagation (see ``trainer.train``)."""
        from .trainer import train

        return train(
            self, data, max_iterations, min_improvement,
            offline=True, on_iteration=on_iteration, test_data=test_data,
        )

    # ── utilities ────────────────────────────────────────────────
    def count_params(self) -> int:
        """Total number of trainable scalars (biases counted when enabled)."""
        total = 0
        for layer in self._all_layers():
            for n in layer:
                total += n.n_inputs + (1 if self.use_bias else 0)
        return total

    def __str__(self) -> str:
        lines: list[str] = [
            f"Learning rate: {self._learning_rate}",
            f"Momentum: {self._momentum}",
            f"Number of hidden layers: {self.num_hidden_layers}",
            f"Size of hidden layers: {self.layer_size(0)}",
            f"Size of output layer: {self.output_size}",
            "",
        ]
        for i, layer in enumerate(self._hidden):
            lines.append(f"Layer {i + 1} of {self.num_hidden_layers}")
            for j, n in enumerate(layer):
                lines.append(f"\t[{j}] {n}")
            lines.append("")
        lines.append("Output layer")
        for j, n in enumerate(self._output_layer):
            lines.append(f"\t[{j}] {n}")
        lines.append("")
        return "\n".join(lines)

    def __repr__(self) -> str:
        # Must not fail on a network whose constructor raised part way.
        activation = getattr(self, "_activation", None)
        loss = getattr(self, "_loss", None)
        activation_name = activation.name if activation is not None else None
        loss_name = loss.name if loss is not None else None
        return (
            f"MultilayerPerceptron(hidden_layers={self.num_hidden_layers}, "
            f"hidden_neurons={self.layer_size(0) if self._hidden else 0}, "
            f"output_neurons={self.output_size}, "
            f"learning_rate={getattr(self, '_learning_rate', None)}, "
            f"momentum={getattr(self, '_momentum', None)}, "
            f"use_bias={self.use_bias}, "
            f"activation={activation_name!r}, "
            f"loss={loss_name!r})"
        )
