"""
Weight Initializers
===================

All initializers follow the pattern:

    values = init_fn(size, rng) → ndarray, shape (size,)

The training loop starts from :func:`secure_uniform_init`, which draws from the
operating system's cryptographically strong source.  It cannot be seeded:
training runs are not meant to be replayed bit for bit.
"""

from __future__ import annotations

import random

import numpy as np
from numpy.typing import NDArray

DEFAULT_WEIGHT: float = 1.0

_SYSTEM_RANDOM = random.SystemRandom()


def secure_uniform_init(
    size: int,
    rng: random.SystemRandom | None = None,
    low: float = -1.0,
    high: float = 1.0,
) -> NDArray:
    r"""Uniform initialization from a cryptographically strong generator.

    .. math::
        w \sim \mathcal{U}[\text{low}, \text{high}]

    Parameters
    ----------
    size : int — number of values.
    rng  : SystemRandom, optional — defaults to a shared OS-backed generator.
    low, high : float — interval bounds (default [-1, 1]).

    Returns
    -------
    values : ndarray, shape (size,)
    """
    if rng is None:
        rng = _SYSTEM_RANDOM
    span = high - low
    return np.array([low + rng.random() * span for _ in range(size)], dtype=np.float64)


def constant_init(size: int, value: float = DEFAULT_WEIGHT) -> NDArray:
    """Every connection set to ``value`` (1.0 for freshly connected neurons)."""
    return np.full(size, value, dtype=np.float64)


def zeros_init(size: int) -> NDArray:
    """All-zeros initialization (gradient accumulators)."""
    return np.zeros(size, dtype=np.float64)
