"""
Tests for the Command Line Entry Point and Plotting Helpers
===========================================================
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from mlp.cli import EXIT_OK, EXIT_USAGE, main, parse_args
from mlp.utils.visualization import plot_repetition_errors, plot_training_curve

DATA_DIR = ROOT / "examples" / "data"
XOR = str(DATA_DIR / "xor.dat")


class TestParseArgs:
    def test_train_is_required(self):
        with pytest.raises(SystemExit):
            parse_args([])

    def test_unset_overrides_are_none(self):
        args = parse_args(["--train", XOR])
        assert args.hidden_layers is None
        assert args.bias is None
        assert args.offline is None
        assert args.test is None

    def test_boolean_flags(self):
        args = parse_args(["--train", XOR, "--bias", "--no-offline"])
        assert args.bias is True
        assert args.offline is False

    def test_unknown_activation_rejected(self):
        with pytest.raises(SystemExit):
            parse_args(["--train", XOR, "--activation", "relu"])


class TestMain:
    def test_successful_run(self, capsys):
        code = main([
            "--train", XOR, "--hidden-neurons", "3", "--max-iterations", "5",
            "--min-improvement", "0", "--repetitions", "2", "--log-level", "WARNING",
        ])
        out = capsys.readouterr().out
        assert code == EXIT_OK
        assert "Train error (mean +- std)" in out
        assert "Number of hidden layers: 1" in out

    def test_offline_softmax_run(self, capsys):
        code = main([
            "--train", str(DATA_DIR / "xor_2_outputs.dat"),
            "--test", str(DATA_DIR / "xor_2_outputs.dat"),
            "--activation", "softmax", "--loss", "cross_entropy", "--offline",
            "--bias", "--max-iterations", "3", "--log-level", "ERROR",
        ])
        assert code == EXIT_OK
        assert "Size of output layer: 2" in capsys.readouterr().out

    def test_plot_written(self, tmp_path):
        plot = tmp_path / "curve.png"
        code = main(["--train", XOR, "--max-iterations", "4", "--min-improvement", "0",
                     "--plot", str(plot), "--log-level", "ERROR"])
        assert code == EXIT_OK
        assert plot.exists()

    def test_repetition_plot_written(self, tmp_path):
        plot = tmp_path / "reps.png"
        code = main(["--train", XOR, "--max-iterations", "3", "--repetitions", "3",
                     "--plot-repetitions", str(plot), "--log-level", "ERROR"])
        assert code == EXIT_OK
        assert plot.exists()

    def test_missing_file_exit_code(self, tmp_path):
        assert main(["--train", str(tmp_path / "nope.dat"), "--log-level", "ERROR"]) == EXIT_USAGE

    def test_binary_dataset_exit_code(self, tmp_path):
        path = tmp_path / "data.dat"
        path.write_bytes(b"\xff\xfe\x00binary")
        assert main(["--train", str(path), "--log-level", "ERROR"]) == EXIT_USAGE

    def test_invalid_learning_rate_exit_code(self):
        assert main(["--train", XOR, "--learning-rate", "3", "--log-level", "ERROR"]) == EXIT_USAGE

    def test_mistyped_config_value_exit_code(self, tmp_path):
        config = tmp_path / "cfg.yaml"
        config.write_text("training:\n  learning_rate: fast\n")
        code = main(["--train", XOR, "--config", str(config), "--log-level", "ERROR"])
        assert code == EXIT_USAGE

    def test_mismatched_test_data_exit_code(self):
        code = main(["--train", XOR, "--test", str(DATA_DIR / "xor_2_outputs.dat"),
                     "--log-level", "ERROR"])
        assert code == EXIT_USAGE

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "train.log"
        code = main(["--train", XOR, "--max-iterations", "2", "--log-level", "ERROR",
                     "--log-file", str(log_file)])
        assert code == EXIT_OK
        assert log_file.exists()


class TestPlots:
    def test_training_curve_saved(self, tmp_path):
        path = tmp_path / "plots" / "history.png"
        plot_training_curve([0.5, 0.3, 0.2, 0.15], save_path=path)
        assert path.exists()

    def test_training_curve_with_zero_error(self, tmp_path):
        path = tmp_path / "zero.png"
        plot_training_curve([0.5, 0.0], save_path=path)
        assert path.exists()

    def test_repetition_errors_saved(self, tmp_path):
        path = tmp_path / "reps.png"
        plot_repetition_errors([0.1, 0.2, 0.15], [0.12, 0.25, 0.2], save_path=path)
        assert path.exists()
