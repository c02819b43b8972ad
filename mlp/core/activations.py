r"""
Output Activation Regimes — Post-processing & Output Deltas
===========================================================

Every neuron computes the logistic sigmoid.  What differs between the two
regimes is what happens to the *output buffer* of the network afterwards and
how the output-layer deltas are derived:

  • Sigmoid  — the buffer is used as-is; δ_i = −t_i · y_i (1 − y_i)
  • Softmax  — the buffer is normalised by its sum; δ = −J · t

where ``t`` is the loss-specific error term (see ``losses.py``) and ``J`` the
Jacobian of the normalisation.

Softmax quirk
-------------
The "softmax" here divides the already-squashed sigmoid outputs by their sum:

.. math::
    y_i \leftarrow \frac{y_i}{\sum_k y_k}

It is *not* :math:`e^{z_i} / \sum_k e^{z_k}` over pre-activations.  The delta
formulas and the dataset metrics are all written against this normalisation,
so it is kept as is.
"""

from __future__ import annotations

import sys

import numpy as np
from numpy.typing import NDArray

from .errors import InvalidParameterError

# Smallest normal double, substituted where a delta is analytically undefined.
DELTA_GUARD: float = sys.float_info.min


# ────────────────────────────────────────────────────────────────────
# Element-wise helpers
# ────────────────────────────────────────────────────────────────────
def sigmoid(z: NDArray | float) -> NDArray | float:
    r"""Logistic function :math:`\sigma(z) = 1 / (1 + e^{-z})`.

    No clipping: for large negative ``z`` the exponential overflows to
    ``inf`` and the result is exactly 0.0, which is what the zero-output
    handling in the losses relies on.
    """
    with np.errstate(over="ignore"):
        return 1.0 / (1.0 + np.exp(-np.asarray(z, dtype=np.float64)))


def normalise(outputs: NDArray) -> NDArray:
    """Divide every output by the sum of all outputs.

    A zero sum leaves the vector unchanged.
    """
    total = float(np.sum(outputs))
    if total == 0.0:
        return np.array(outputs, dtype=np.float64)
    return np.asarray(outputs, dtype=np.float64) / total


def one_hot_argmax(outputs: NDArray) -> NDArray:
    """One-hot vector at the index of the largest output (first on ties)."""
    prediction = np.zeros(len(outputs), dtype=np.float64)
    if len(outputs) > 0:
        prediction[int(np.argmax(outputs))] = 1.0
    return prediction


# ────────────────────────────────────────────────────────────────────
# Base class
# ────────────────────────────────────────────────────────────────────
class Activation:
    """Abstract output regime.

    ``predicts`` tells the metric engine whether classification metrics
    (dataset MSE and CCR) are computed on arg-max predictions.
    """

    name: str = ""
    predicts: bool = False

    def post_process(self, outputs: NDArray) -> NDArray:
        raise NotImplementedError

    def output_deltas(self, outputs: NDArray, desired: NDArray, loss) -> NDArray:
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


# ────────────────────────────────────────────────────────────────────
# Sigmoid
# ────────────────────────────────────────────────────────────────────
class Sigmoid(Activation):
    r"""Plain sigmoid outputs.

    Output delta
    ------------
    .. math::
        \delta_i = -t_i \, y_i \, (1 - y_i)

    With MSE, :math:`t_i = d_i - y_i`; with cross-entropy,
    :math:`t_i = d_i / y_i`.  When the cross-entropy term is undefined
    (:math:`y_i = 0`) the delta is replaced by ``DELTA_GUARD``.
    """

    name = "sigmoid"
    predicts = False

    def post_process(self, outputs: NDArray) -> NDArray:
        return np.array(outputs, dtype=np.float64)

    def output_deltas(self, outputs: NDArray, desired: NDArray, loss) -> NDArray:
        terms = loss.error_terms(desired, outputs)
        deltas: NDArray = -terms * outputs * (1.0 - outputs)
        return np.where(loss.degenerate(outputs), DELTA_GUARD, deltas)


# ────────────────────────────────────────────────────────────────────
# Softmax (sum normalisation)
# ────────────────────────────────────────────────────────────────────
class Softmax(Activation):
    r"""Sum-normalised outputs for multi-class classification.

    Output delta
    ------------
    The Jacobian of the normalisation, written as in the canonical softmax:

    .. math::
        J_{ji} = y_j (\delta_{ij} - y_i)

    and each output delta sums the error terms through it:

    .. math::
        \delta_j = -\sum_i t_i \, J_{ji}

    ``outputs`` are normalised again before the Jacobian is built.
    """

    name = "softmax"
    predicts = True

    def post_process(self, outputs: NDArray) -> NDArray:
        return normalise(outputs)

    def output_deltas(self, outputs: NDArray, desired: NDArray, loss) -> NDArray:
        y = normalise(outputs)
        terms = loss.error_terms(desired, y)

        # J[j, i] = y_j · (1 − y_i) if i == j else −y_j · y_i
        jacobian: NDArray = np.diag(y) - np.outer(y, y)
        deltas: NDArray = -(jacobian @ terms)
        return deltas


ACTIVATIONS: dict[str, type[Activation]] = {
    Sigmoid.name: Sigmoid,
    Softmax.name: Softmax,
}


def get_activation(activation: str | Activation) -> Activation:
    """Resolve a name (``"sigmoid"`` / ``"softmax"``) or pass an instance through."""
    if isinstance(activation, Activation):
        return activation
    key = str(activation).strip().lower()
    if key not in ACTIVATIONS:
        raise InvalidParameterError(
            f"unknown activation {activation!r}; expected one of {sorted(ACTIVATIONS)}"
        )
    return ACTIVATIONS[key]()
