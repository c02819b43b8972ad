"""
Exceptions
==========

Every error the network engine raises derives from ``NetworkError``.
The concrete classes also subclass ``ValueError`` so that generic callers
catching bad arguments keep working.

  • InvalidParameterError — a scalar hyperparameter or size out of range
  • ShapeMismatchError    — a vector whose length disagrees with a layer
  • DataFormatError       — a malformed dataset file or incompatible data
"""

from __future__ import annotations


class NetworkError(Exception):
    """Base class for all multilayer-perceptron errors."""


class InvalidParameterError(NetworkError, ValueError):
    """Raised by setters when a value is outside its valid domain.

    The previous value is always left untouched.
    """


class ShapeMismatchError(NetworkError, ValueError):
    """Raised when a desired-output vector does not match the output layer."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"size of desired outputs must be {expected} but is {actual}"
        )
        self.expected = expected
        self.actual = actual


class DataFormatError(NetworkError, ValueError):
    """Raised when a dataset cannot be parsed or used."""
