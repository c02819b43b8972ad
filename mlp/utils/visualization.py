"""
Visualization Utilities
=======================

Matplotlib helpers for training curves and per-repetition error summaries.

All functions accept a ``save_path`` argument (pathlib.Path); the figure is
saved when it is given and closed either way.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import numpy as np

import matplotlib
matplotlib.use("Agg")  # non-interactive backend
import matplotlib.pyplot as plt


# ────────────────────────────────────────────────────────────────────
# Training curve
# ────────────────────────────────────────────────────────────────────
def plot_training_curve(
    history: Sequence[float],
    save_path: Optional[Path] = None,
    title: str = "Training History",
    ylabel: str = "Error",
) -> None:
    """Plot the per-epoch training objective.

    Parameters
    ----------
    history   : sequence of float — objective after every epoch.
    save_path : Path, optional — if given, saves the figure.
    """
    fig, ax = plt.subplots(figsize=(8, 5))

    epochs = np.arange(1, len(history) + 1)
    ax.plot(epochs, history, label="Train Error")
    ax.set_xlabel("Epoch")
    ax.set_ylabel(ylabel)
    ax.set_title(title)
    if len(history) > 0 and min(history) > 0:
        ax.set_yscale("log")
    ax.legend()
    ax.grid(True, alpha=0.3)
    fig.tight_layout()

    if save_path:
        save_path = Path(save_path)
        save_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
    plt.close(fig)


# ────────────────────────────────────────────────────────────────────
# Repetition summary
# ────────────────────────────────────────────────────────────────────
def plot_repetition_errors(
    train_errors: Sequence[float],
    test_errors: Sequence[float],
    save_path: Optional[Path] = None,
    title: str = "Errors per Repetition",
) -> None:
    """Grouped bars of train / test error, one group per repetition."""
    n = len(train_errors)
    idx = np.arange(n)
    width = 0.4

    fig, ax = plt.subplots(figsize=(max(6, n * 0.8), 5))
    ax.bar(idx - width / 2, train_errors, width, label="Train", color="steelblue")
    ax.bar(idx + width / 2, test_errors, width, label="Test", color="coral")
    ax.set_xticks(idx)
    ax.set_xticklabels([str(i + 1) for i in idx])
    ax.set_xlabel("Repetition")
    ax.set_ylabel("Error")
    ax.set_title(title)
    ax.legend()
    ax.grid(True, axis="y", alpha=0.3)
    fig.tight_layout()

    if save_path:
        save_path = Path(save_path)
        save_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
