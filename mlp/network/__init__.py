"""Network: the multilayer perceptron, its training loop and the experiment runner."""

from .perceptron import MultilayerPerceptron
from .trainer import StopReason, TrainResult, train
from .experiment import (
    ExperimentContext,
    ExperimentReport,
    RepetitionResult,
    build_network,
    check_context,
    run_experiment,
)

__all__ = [
    "MultilayerPerceptron",
    "StopReason", "TrainResult", "train",
    "ExperimentContext", "ExperimentReport", "RepetitionResult",
    "build_network", "check_context", "run_experiment",
]
