"""
XOR Example — The Classic Non-Linear Classification Demo
=========================================================

XOR cannot be solved by a single perceptron (Minsky & Papert, 1969).
A network with hidden layers of ≥ 2 neurons can learn it.

Truth table (bipolar inputs)
----------------------------
::

    X1  X2  |  Y
    -1  -1  |  0
    -1   1  |  1
     1  -1  |  1
     1   1  |  0
"""

from __future__ import annotations

import sys
from pathlib import Path

# ── project imports ──
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from mlp.network.perceptron import MultilayerPerceptron
from mlp.utils.data_utils import load_dataset
from mlp.utils.visualization import plot_training_curve


def main() -> None:
    output_dir = ROOT / "outputs" / "plots"
    output_dir.mkdir(parents=True, exist_ok=True)

    # ── dataset ──
    data = load_dataset(ROOT / "examples" / "data" / "xor.dat")

    # ── model ──
    network = MultilayerPerceptron(
        hidden_layers=2,
        hidden_neurons=25,
        output_neurons=data.outputs_length,
        learning_rate=0.9,
        momentum=0.9,
        use_bias=True,
    )

    print("=" * 50)
    print("XOR Example — Multilayer Perceptron")
    print("=" * 50)
    print(repr(network))
    print()

    # ── train ──
    result = network.train_offline(data, max_iterations=1000, min_improvement=1e-5)

    # ── evaluate ──
    print("Predictions after training:")
    for x in data:
        y_hat = network.predict(x)
        print(f"  {x} → {y_hat[0]:.4f}  (target: {data[x][0]})")

    print(f"\nStopped after {result.iterations} epochs ({result.stop_reason.value})")
    print(f"Final MSE: {result.train_error:.6f}")

    # ── plot ──
    plot_training_curve(result.history, save_path=output_dir / "xor_training.png", title="XOR Training")
    print(f"Training curve saved to {output_dir / 'xor_training.png'}")


if __name__ == "__main__":
    main()
