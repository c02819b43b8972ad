"""
Loss Functions — Metrics & Output Error Terms
=============================================

Each loss class implements:
  • forward(Y_hat, Y)        → scalar error for one example
  • error_terms(Y, Y_hat)    → per-output term t_i fed into the output deltas
  • degenerate(Y_hat)        → mask of outputs where t_i is undefined
  • objective(Y, Y_hat)      → the function whose gradient the deltas follow

Notation
--------
  Ŷ (Y_hat) : network outputs   — shape (n_outputs,)
  Y         : desired outputs   — shape (n_outputs,)
  K         : number of outputs

Zero outputs in cross-entropy are handled by policy rather than errors: the
metric skips the term and the delta uses a tiny guard value.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from .activations import DELTA_GUARD
from .errors import InvalidParameterError


# ────────────────────────────────────────────────────────────────────
# Per-example metrics
# ────────────────────────────────────────────────────────────────────
def mean_squared_error(Y: NDArray, Y_hat: NDArray) -> float:
    r""":math:`\frac{1}{K}\sum_i (\hat{Y}_i - Y_i)^2`."""
    Y_hat = np.asarray(Y_hat, dtype=np.float64)
    Y = np.asarray(Y, dtype=np.float64)
    if Y_hat.size == 0:
        return 0.0
    return float(np.mean((Y_hat - Y) ** 2))


def cross_entropy_sum(Y: NDArray, Y_hat: NDArray) -> float:
    r""":math:`\sum_i Y_i \ln \hat{Y}_i`, skipping terms where :math:`\hat{Y}_i = 0`.

    Note the sum is *not* negated; callers apply the sign and normalisation.
    """
    Y_hat = np.asarray(Y_hat, dtype=np.float64)
    Y = np.asarray(Y, dtype=np.float64)
    mask = Y_hat != 0.0
    return float(np.sum(Y[mask] * np.log(Y_hat[mask])))


def is_exact_match(Y: NDArray, Y_hat: NDArray) -> bool:
    """Component-wise exact equality, used by the CCR metric."""
    return bool(np.array_equal(np.asarray(Y_hat), np.asarray(Y)))


# ────────────────────────────────────────────────────────────────────
# Base class
# ────────────────────────────────────────────────────────────────────
class Loss:
    """Abstract loss regime.

    ``uses_prediction`` tells the metric engine whether, in a predicting
    activation regime, the dataset error is measured on arg-max predictions
    instead of the normalised outputs.
    """

    name: str = ""
    uses_prediction: bool = False

    def forward(self, Y_hat: NDArray, Y: NDArray) -> float:
        raise NotImplementedError

    def error_terms(self, Y: NDArray, Y_hat: NDArray) -> NDArray:
        raise NotImplementedError

    def degenerate(self, Y_hat: NDArray) -> NDArray:
        return np.zeros(len(Y_hat), dtype=bool)

    def objective(self, Y: NDArray, Y_hat: NDArray) -> float:
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


# ────────────────────────────────────────────────────────────────────
# Mean Squared Error
# ────────────────────────────────────────────────────────────────────
class MSELoss(Loss):
    r"""Mean squared error.

    Forward
    -------
    .. math::
        L = \frac{1}{K} \sum_{i=1}^{K} (\hat{Y}_i - Y_i)^2

    Error term
    ----------
    .. math::
        t_i = Y_i - \hat{Y}_i

    which, through the sigmoid derivative, is the gradient of
    :math:`E = \tfrac{1}{2}\sum_i (Y_i - \hat{Y}_i)^2`.
    """

    name = "mse"
    uses_prediction = True

    def forward(self, Y_hat: NDArray, Y: NDArray) -> float:
        return mean_squared_error(Y, Y_hat)

    def error_terms(self, Y: NDArray, Y_hat: NDArray) -> NDArray:
        return np.asarray(Y, dtype=np.float64) - np.asarray(Y_hat, dtype=np.float64)

    def objective(self, Y: NDArray, Y_hat: NDArray) -> float:
        diff = np.asarray(Y, dtype=np.float64) - np.asarray(Y_hat, dtype=np.float64)
        return float(0.5 * np.sum(diff ** 2))


# ────────────────────────────────────────────────────────────────────
# Cross-Entropy
# ────────────────────────────────────────────────────────────────────
class CrossEntropyLoss(Loss):
    r"""Cross-entropy.

    Forward
    -------
    .. math::
        L = -\frac{1}{K} \sum_{i=1}^{K} Y_i \ln \hat{Y}_i
        \qquad (\hat{Y}_i = 0 \text{ terms skipped})

    Error term
    ----------
    .. math::
        t_i = \frac{Y_i}{\hat{Y}_i}

    replaced by ``DELTA_GUARD`` when :math:`\hat{Y}_i = 0`.
    """

    name = "cross_entropy"
    uses_prediction = False

    def forward(self, Y_hat: NDArray, Y: NDArray) -> float:
        k = len(Y)
        if k == 0:
            return 0.0
        return -cross_entropy_sum(Y, Y_hat) / k

    def error_terms(self, Y: NDArray, Y_hat: NDArray) -> NDArray:
        Y = np.asarray(Y, dtype=np.float64)
        Y_hat = np.asarray(Y_hat, dtype=np.float64)
        terms = np.full(Y.shape, DELTA_GUARD, dtype=np.float64)
        np.divide(Y, Y_hat, out=terms, where=Y_hat != 0.0)
        return terms

    def degenerate(self, Y_hat: NDArray) -> NDArray:
        return np.asarray(Y_hat) == 0.0

    def objective(self, Y: NDArray, Y_hat: NDArray) -> float:
        return -cross_entropy_sum(Y, Y_hat)


LOSSES: dict[str, type[Loss]] = {
    MSELoss.name: MSELoss,
    CrossEntropyLoss.name: CrossEntropyLoss,
}

_ALIASES: dict[str, str] = {
    "entropy": CrossEntropyLoss.name,
    "cross-entropy": CrossEntropyLoss.name,
    "crossentropy": CrossEntropyLoss.name,
}


def get_loss(loss: str | Loss) -> Loss:
    """Resolve a name (``"mse"`` / ``"cross_entropy"``) or pass an instance through."""
    if isinstance(loss, Loss):
        return loss
    key = str(loss).strip().lower()
    key = _ALIASES.get(key, key)
    if key not in LOSSES:
        raise InvalidParameterError(
            f"unknown loss {loss!r}; expected one of {sorted(LOSSES)}"
        )
    return LOSSES[key]()
