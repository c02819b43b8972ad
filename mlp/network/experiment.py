"""
Experiment Runner — Repeated Training & Error Statistics
========================================================

An experiment trains ``repetitions`` independent networks, each from a fresh
random initialisation, and summarises their train / test errors:

.. math::
    \\mu = \\frac{1}{R} \\sum_r e_r
    \\qquad
    \\sigma = \\sqrt{\\frac{1}{R} \\sum_r (e_r - \\mu)^2}

(population standard deviation).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

import numpy as np

from ..core.errors import DataFormatError
from ..utils.config import TrainingConfig
from ..utils.data_utils import Dataset
from ..utils.logger import get_logger
from .perceptron import MultilayerPerceptron
from .trainer import StopReason, train

logger = get_logger(__name__)


# ────────────────────────────────────────────────────────────────────
# Context & results
# ────────────────────────────────────────────────────────────────────
@dataclass
class ExperimentContext:
    """Everything one experiment needs: hyperparameters and both datasets."""
    config: TrainingConfig
    train_data: Dataset
    test_data: Dataset


@dataclass
class RepetitionResult:
    """Errors of one trained network."""
    index: int
    train_error: float
    test_error: float
    iterations: int
    stop_reason: StopReason
    history: list[float] = field(default_factory=list)


@dataclass
class ExperimentReport:
    """Per-repetition results plus their summary statistics."""
    results: list[RepetitionResult]
    train_mean: float
    train_std: float
    test_mean: float
    test_std: float
    network_dump: str = ""

    def summary(self) -> str:
        return (
            f"Train error (mean +- std): {self.train_mean:.10f} +- {self.train_std:.10f}\n"
            f"Test error (mean +- std):  {self.test_mean:.10f} +- {self.test_std:.10f}"
        )


# ────────────────────────────────────────────────────────────────────
# Helpers
# ────────────────────────────────────────────────────────────────────
def check_context(context: ExperimentContext) -> None:
    """Raise ``DataFormatError`` unless both datasets are usable together."""
    train_data, test_data = context.train_data, context.test_data
    if len(train_data) == 0:
        raise DataFormatError("training data is empty")
    if len(test_data) == 0:
        raise DataFormatError("test data is empty")
    if train_data.inputs_length != test_data.inputs_length:
        raise DataFormatError(
            f"train/test input lengths differ: "
            f"{train_data.inputs_length} vs {test_data.inputs_length}"
        )
    if train_data.outputs_length != test_data.outputs_length:
        raise DataFormatError(
            f"train/test output lengths differ: "
            f"{train_data.outputs_length} vs {test_data.outputs_length}"
        )


def build_network(config: TrainingConfig, data: Dataset) -> MultilayerPerceptron:
    """Create a network shaped for ``data`` with the hyperparameters of ``config``."""
    network = MultilayerPerceptron(
        hidden_layers=config.hidden_layers,
        hidden_neurons=config.hidden_neurons,
        output_neurons=max(data.outputs_length, 1),
        learning_rate=config.learning_rate,
        momentum=config.momentum,
        use_bias=config.use_bias,
        activation=config.activation,
        loss=config.loss,
    )
    network.feed([0.0] * data.inputs_length)
    return network


# ────────────────────────────────────────────────────────────────────
# Runner
# ────────────────────────────────────────────────────────────────────
def run_experiment(
    context: ExperimentContext,
    on_repetition: Optional[Callable[[int, RepetitionResult], None]] = None,
) -> ExperimentReport:
    """Train ``config.repetitions`` fresh networks one after another.

    Parameters
    ----------
    context       : ExperimentContext
    on_repetition : callable(index, result), optional — called after each
                    repetition (index counts from 0).

    Returns
    -------
    report : ExperimentReport
    """
    check_context(context)
    config = context.config

    results: list[RepetitionResult] = []
    network: MultilayerPerceptron | None = None

    for index in range(config.repetitions):
        network = build_network(config, context.train_data)
        outcome = train(
            network,
            context.train_data,
            config.max_iterations,
            config.min_improvement,
            offline=config.offline,
            test_data=context.test_data,
        )
        result = RepetitionResult(
            index=index,
            train_error=outcome.train_error,
            test_error=outcome.test_error if outcome.test_error is not None else 0.0,
            iterations=outcome.iterations,
            stop_reason=outcome.stop_reason,
            history=outcome.history,
        )
        results.append(result)
        logger.info(
            "Repetition %d/%d: train error %.10f, test error %.10f",
            index + 1, config.repetitions, result.train_error, result.test_error,
        )
        if on_repetition is not None:
            on_repetition(index, result)

    train_errors = np.array([r.train_error for r in results], dtype=np.float64)
    test_errors = np.array([r.test_error for r in results], dtype=np.float64)

    report = ExperimentReport(
        results=results,
        train_mean=float(np.mean(train_errors)),
        train_std=float(np.std(train_errors)),
        test_mean=float(np.mean(test_errors)),
        test_std=float(np.std(test_errors)),
        network_dump=str(network) if network is not None else "",
    )
    logger.info("Experiment finished\n%s", report.summary())
    return report
