"""Multilayer perceptron trained by online and batch backpropagation."""

from .core.errors import NetworkError, InvalidParameterError, ShapeMismatchError, DataFormatError
from .network import MultilayerPerceptron, StopReason, TrainResult, train
from .utils import Dataset, load_dataset, TrainingConfig, load_config

__version__ = "1.0.0"

__all__ = [
    "NetworkError", "InvalidParameterError", "ShapeMismatchError", "DataFormatError",
    "MultilayerPerceptron", "StopReason", "TrainResult", "train",
    "Dataset", "load_dataset", "TrainingConfig", "load_config",
]
