"""Core building blocks: neurons, layers, activations, losses, initializers, errors."""

from .activations import Sigmoid, Softmax, get_activation, sigmoid, normalise, one_hot_argmax
from .errors import NetworkError, InvalidParameterError, ShapeMismatchError, DataFormatError
from .layer import Layer
from .losses import MSELoss, CrossEntropyLoss, get_loss
from .neuron import Neuron
from .initializers import secure_uniform_init, constant_init, zeros_init

__all__ = [
    "Sigmoid", "Softmax", "get_activation", "sigmoid", "normalise", "one_hot_argmax",
    "NetworkError", "InvalidParameterError", "ShapeMismatchError", "DataFormatError",
    "Layer",
    "MSELoss", "CrossEntropyLoss", "get_loss",
    "Neuron",
    "secure_uniform_init", "constant_init", "zeros_init",
]
