"""
Tests for YAML Configuration
============================
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
import yaml

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from mlp.core.errors import InvalidParameterError
from mlp.utils.config import DEFAULT_CONFIG, TrainingConfig, load_config, merge_configs


class TestDefaults:
    def test_no_file(self):
        config = load_config()
        assert config == TrainingConfig()
        assert config.learning_rate == 0.9
        assert config.momentum == 0.1
        assert config.activation == "sigmoid"
        assert config.loss == "mse"

    def test_shipped_default_file(self):
        config = load_config(ROOT / "config" / "default.yaml")
        assert config.hidden_neurons == 4
        assert config == TrainingConfig()

    def test_to_dict_matches_defaults(self):
        assert TrainingConfig().to_dict() == DEFAULT_CONFIG


class TestOverrides:
    def test_yaml_file_overrides(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text(yaml.safe_dump({
            "network": {"hidden_layers": 2, "activation": "softmax", "loss": "entropy"},
            "training": {"offline": True},
        }))
        config = load_config(path)
        assert config.hidden_layers == 2
        assert config.hidden_neurons == 4
        assert config.activation == "softmax"
        assert config.loss == "cross_entropy"
        assert config.offline is True

    def test_overrides_win_over_file(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("training:\n  momentum: 0.5\n")
        config = load_config(path, {"training": {"momentum": 0.8}})
        assert config.momentum == 0.8

    def test_empty_file(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("")
        assert load_config(path) == TrainingConfig()

    def test_merge_is_deep_and_pure(self):
        base = {"a": {"x": 1, "y": 2}, "b": 3}
        merged = merge_configs(base, {"a": {"y": 20}})
        assert merged == {"a": {"x": 1, "y": 20}, "b": 3}
        assert base["a"]["y"] == 2

    def test_round_trip(self):
        config = TrainingConfig(hidden_layers=3, use_bias=True, repetitions=7)
        assert TrainingConfig.from_dict(config.to_dict()) == config


class TestValidation:
    @pytest.mark.parametrize("section,key,value", [
        ("training", "learning_rate", 1.5),
        ("training", "momentum", -0.1),
        ("training", "max_iterations", -1),
        ("training", "min_improvement", -1e-3),
        ("training", "repetitions", 0),
        ("network", "hidden_layers", 0),
        ("network", "hidden_neurons", 0),
        ("network", "activation", "relu"),
        ("network", "loss", "hinge"),
    ])
    def test_invalid_values(self, section, key, value):
        with pytest.raises(InvalidParameterError):
            load_config(overrides={section: {key: value}})

    @pytest.mark.parametrize("section,key,value", [
        ("training", "learning_rate", "fast"),
        ("training", "momentum", None),
        ("training", "max_iterations", "ten"),
        ("training", "offline", "yes"),
        ("training", "repetitions", True),
        ("network", "hidden_layers", 1.5),
        ("network", "hidden_neurons", [4]),
        ("network", "use_bias", "no"),
        ("network", "use_bias", 0),
    ])
    def test_mistyped_values(self, section, key, value):
        with pytest.raises(InvalidParameterError, match=key):
            load_config(overrides={section: {key: value}})

    def test_numeric_values_are_coerced(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("network:\n  hidden_layers: 2.0\ntraining:\n  min_improvement: 1e-4\n")
        config = load_config(path)
        assert config.hidden_layers == 2
        assert isinstance(config.hidden_layers, int)
        assert config.min_improvement == pytest.approx(1e-4)

    def test_unknown_key(self):
        with pytest.raises(InvalidParameterError, match="unknown training option"):
            TrainingConfig.from_dict({"training": {"batch_size": 32}})

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(InvalidParameterError):
            load_config(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("network: [unclosed\n")
        with pytest.raises(InvalidParameterError):
            load_config(path)
