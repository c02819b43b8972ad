#!/usr/bin/env python3
"""
CLI Entry Point — Train a Multilayer Perceptron
===============================================

Usage examples::

    mlp-train --train examples/data/xor.dat
    mlp-train --train train.dat --test test.dat --config config/default.yaml
    python -m mlp.cli --train examples/data/xor.dat --hidden-layers 2 \\
        --hidden-neurons 25 --bias --momentum 0.9 --offline --plot xor.png
    mlp-train --train examples/data/xor.dat --repetitions 5 --plot-repetitions reps.png
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from .core.activations import ACTIVATIONS
from .core.errors import NetworkError
from .core.losses import LOSSES
from .network.experiment import ExperimentContext, run_experiment
from .utils.config import load_config
from .utils.data_utils import load_dataset
from .utils.logger import configure_logging, get_logger

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_USAGE = 2


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Train a multilayer perceptron with backpropagation.",
    )
    parser.add_argument("--train", type=Path, required=True, help="Training dataset file.")
    parser.add_argument("--test", type=Path, default=None,
                        help="Test dataset file (default: the training file).")
    parser.add_argument("--config", type=Path, default=None, help="YAML config file.")

    net = parser.add_argument_group("network")
    net.add_argument("--hidden-layers", type=int, default=None, help="Number of hidden layers.")
    net.add_argument("--hidden-neurons", type=int, default=None, help="Neurons per hidden layer.")
    net.add_argument("--bias", action=argparse.BooleanOptionalAction, default=None,
                     help="Use a trainable bias in every neuron.")
    net.add_argument("--activation", choices=sorted(ACTIVATIONS), default=None,
                     help="Output regime.")
    net.add_argument("--loss", choices=sorted(LOSSES), default=None, help="Loss function.")

    training = parser.add_argument_group("training")
    training.add_argument("--learning-rate", type=float, default=None, help="Learning rate in [0, 1].")
    training.add_argument("--momentum", type=float, default=None, help="Momentum in [0, 1].")
    training.add_argument("--offline", action=argparse.BooleanOptionalAction, default=None,
                          help="Batch (offline) instead of online backpropagation.")
    training.add_argument("--max-iterations", type=int, default=None, help="Epoch cap.")
    training.add_argument("--min-improvement", type=float, default=None,
                          help="Stop once an epoch improves the error by less than this.")
    training.add_argument("--repetitions", type=int, default=None,
                          help="Independent training runs.")

    out = parser.add_argument_group("output")
    out.add_argument("--plot", type=Path, default=None,
                     help="Save the training curve of the last repetition here.")
    out.add_argument("--plot-repetitions", type=Path, default=None,
                     help="Save a bar chart of train and test error per repetition here.")
    out.add_argument("--log-level", default="INFO",
                     choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Console log level.")
    out.add_argument("--log-file", type=Path, default=None, help="Rotating DEBUG log file.")
    return parser.parse_args(argv)


def _overrides(args: argparse.Namespace) -> dict[str, dict[str, Any]]:
    """Collect the command line values that were actually given."""
    mapping = {
        "network": {
            "hidden_layers": args.hidden_layers,
            "hidden_neurons": args.hidden_neurons,
            "use_bias": args.bias,
            "activation": args.activation,
            "loss": args.loss,
        },
        "training": {
            "learning_rate": args.learning_rate,
            "momentum": args.momentum,
            "offline": args.offline,
            "max_iterations": args.max_iterations,
            "min_improvement": args.min_improvement,
            "repetitions": args.repetitions,
        },
    }
    return {
        section: {k: v for k, v in values.items() if v is not None}
        for section, values in mapping.items()
    }


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level, args.log_file)

    try:
        config = load_config(args.config, _overrides(args))
        train_data = load_dataset(args.train)
        test_data = load_dataset(args.test) if args.test is not None else train_data
        context = ExperimentContext(config=config, train_data=train_data, test_data=test_data)
        logger.info("Configuration: %s", config.to_dict())
        report = run_experiment(context)
    except (NetworkError, OSError) as exc:
        logger.error("%s", exc)
        return EXIT_USAGE

    print(report.summary())
    print()
    print(report.network_dump)

    if args.plot is not None and report.results:
        from .utils.visualization import plot_training_curve

        plot_training_curve(
            report.results[-1].history,
            save_path=args.plot,
            title=f"Training error ({config.loss}, {'offline' if config.offline else 'online'})",
        )
        logger.info("Training curve saved to %s", args.plot)

    if args.plot_repetitions is not None and report.results:
        from .utils.visualization import plot_repetition_errors

        plot_repetition_errors(
            [r.train_error for r in report.results],
            [r.test_error for r in report.results],
            save_path=args.plot_repetitions,
            title=f"Error per repetition ({config.loss})",
        )
        logger.info("Repetition errors saved to %s", args.plot_repetitions)

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
