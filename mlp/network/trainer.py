"""
Training Loop — Convergence-Driven Backpropagation
==================================================

::

    randomize weights
    repeat up to max_iterations:
        before = objective(data)
        online / offline epoch
        after  = objective(data)
        on_iteration(i, after)  → True stops the run
        |after − before| < min_improvement  → converged

All three stop reasons are successful outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from ..core.errors import InvalidParameterError
from ..utils.logger import get_logger

if TYPE_CHECKING:
    from ..utils.data_utils import Dataset
    from .perceptron import MultilayerPerceptron

logger = get_logger(__name__)

IterationCallback = Callable[[int, float], Optional[bool]]


class StopReason(Enum):
    MAX_ITERATIONS = "max_iterations"
    CONVERGED = "converged"
    STOPPED = "stopped"


@dataclass
class TrainResult:
    """Outcome of one training run."""
    iterations: int
    stop_reason: StopReason
    train_error: float
    test_error: Optional[float] = None
    history: list[float] = field(default_factory=list)


def train(
    network: "MultilayerPerceptron",
    data: "Dataset",
    max_iterations: int,
    min_improvement: float,
    offline: bool = False,
    on_iteration: IterationCallback | None = None,
    test_data: "Dataset | None" = None,
) -> TrainResult:
    """Train ``network`` on ``data`` until convergence or the iteration cap.

    Parameters
    ----------
    network         : MultilayerPerceptron — trained in place.
    data            : Dataset — training examples.
    max_iterations  : int ≥ 0 — epoch cap.
    min_improvement : float ≥ 0 — stop once an epoch changes the objective
                      by less than this.
    offline         : bool — batch epochs instead of online epochs.
    on_iteration    : callable(iteration, error), optional — returning True
                      stops training before the next epoch.
    test_data       : Dataset, optional — evaluated once after training.

    Returns
    -------
    result : TrainResult
    """
    if max_iterations < 0:
        raise InvalidParameterError(
            f"max_iterations must not be negative; got {max_iterations}"
        )
    if min_improvement < 0:
        raise InvalidParameterError(
            f"min_improvement must not be negative; got {min_improvement}"
        )

    mode = "offline" if offline else "online"
    epoch = network.offline_epoch if offline else network.online_epoch

    network.randomize_weights()

    history: list[float] = []
    stop_reason = StopReason.MAX_ITERATIONS
    iterations = 0

    for iteration in range(1, max_iterations + 1):
        before = network.dataset_error(data)
        epoch(data)
        after = network.dataset_error(data)

        history.append(after)
        iterations = iteration
        logger.debug(
            "Epoch %d/%d [%s]  error %.10f → %.10f",
            iteration, max_iterations, mode, before, after,
        )

        if on_iteration is not None and on_iteration(iteration, after):
            stop_reason = StopReason.STOPPED
            break
        if abs(after - before) < min_improvement:
            stop_reason = StopReason.CONVERGED
            break

    train_error = history[-1] if history else network.dataset_error(data)
    test_error = network.dataset_error(test_data) if test_data is not None else None

    logger.info(
        "Training finished after %d %s epoch(s) (%s): train error %.10f%s",
        iterations, mode, stop_reason.value, train_error,
        f", test error {test_error:.10f}" if test_error is not None else "",
    )
    return TrainResult(
        iterations=iterations,
        stop_reason=stop_reason,
        train_error=train_error,
        test_error=test_error,
        history=history,
    )
