"""
Configuration loader — YAML parsing, defaults, validation.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from ..core.activations import get_activation
from ..core.errors import InvalidParameterError
from ..core.losses import get_loss


DEFAULT_CONFIG: dict[str, dict[str, Any]] = {
    "network": {
        "hidden_layers": 1,
        "hidden_neurons": 4,
        "use_bias": False,
        "activation": "sigmoid",
        "loss": "mse",
    },
    "training": {
        "learning_rate": 0.9,
        "momentum": 0.1,
        "max_iterations": 1000,
        "min_improvement": 1.0e-5,
        "offline": False,
        "repetitions": 1,
    },
}


def _as_int(name: str, value: Any) -> int:
    """Integers, integral floats and numeric strings; ``bool`` is refused."""
    if isinstance(value, bool):
        raise InvalidParameterError(f"{name} must be an integer. Actual value: {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidParameterError(f"{name} must be an integer. Actual value: {value!r}")
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(
            f"{name} must be an integer. Actual value: {value!r}"
        ) from exc


def _as_float(name: str, value: Any) -> float:
    # YAML reads exponent literals such as 1e-5 as strings.
    if isinstance(value, bool):
        raise InvalidParameterError(f"{name} must be a number. Actual value: {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(
            f"{name} must be a number. Actual value: {value!r}"
        ) from exc


# ──────────────────────────────────────────────────────────
#  Typed view
# ──────────────────────────────────────────────────────────

@dataclass
class TrainingConfig:
    """Validated network and training hyperparameters."""
    hidden_layers: int = 1
    hidden_neurons: int = 4
    use_bias: bool = False
    activation: str = "sigmoid"
    loss: str = "mse"
    learning_rate: float = 0.9
    momentum: float = 0.1
    max_iterations: int = 1000
    min_improvement: float = 1.0e-5
    offline: bool = False
    repetitions: int = 1

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Coerce every field to its type and raise ``InvalidParameterError``
        on the first value that is mistyped or out of range."""
        for name in ("hidden_layers", "hidden_neurons", "repetitions", "max_iterations"):
            setattr(self, name, _as_int(name, getattr(self, name)))
        for name in ("learning_rate", "momentum", "min_improvement"):
            setattr(self, name, _as_float(name, getattr(self, name)))
        for name in ("use_bias", "offline"):
            if not isinstance(getattr(self, name), bool):
                raise InvalidParameterError(
                    f"{name} must be true or false. Actual value: {getattr(self, name)!r}"
                )

        for name in ("hidden_layers", "hidden_neurons", "repetitions"):
            if getattr(self, name) < 1:
                raise InvalidParameterError(f"{name} must be at least 1")
        if self.max_iterations < 0:
            raise InvalidParameterError("max_iterations must not be negative")
        if not self.min_improvement >= 0.0:
            raise InvalidParameterError("min_improvement must not be negative")
        for name in ("learning_rate", "momentum"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise InvalidParameterError(
                    f"{name} must be between 0 and 1. Actual value: {value}"
                )
        # Canonical names, so to_dict() writes what get_* accepts.
        self.activation = get_activation(self.activation).name
        self.loss = get_loss(self.loss).name

    @classmethod
    def from_dict(cls, cfg: dict[str, Any]) -> "TrainingConfig":
        """Build from a ``{"network": {...}, "training": {...}}`` mapping.

        Missing keys take their defaults; unknown keys are rejected.
        """
        flat: dict[str, Any] = {}
        for section in ("network", "training"):
            values = cfg.get(section) or {}
            unknown = set(values) - set(DEFAULT_CONFIG[section])
            if unknown:
                raise InvalidParameterError(
                    f"unknown {section} option(s): {', '.join(sorted(unknown))}"
                )
            flat.update(values)
        return cls(**flat)

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {
            section: {key: getattr(self, key) for key in keys}
            for section, keys in DEFAULT_CONFIG.items()
        }


# ──────────────────────────────────────────────────────────
#  Config loading
# ──────────────────────────────────────────────────────────

def load_config(path: str | Path | None = None, overrides: dict | None = None) -> TrainingConfig:
    """Load a YAML config over the defaults, apply *overrides*, and validate."""
    cfg = deepcopy(DEFAULT_CONFIG)
    if path is not None:
        path = Path(path)
        with open(path, encoding="utf-8") as f:
            try:
                loaded = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise InvalidParameterError(f"{path}: invalid YAML ({exc})") from exc
        if not isinstance(loaded, dict):
            raise InvalidParameterError(f"{path}: top level must be a mapping")
        cfg = merge_configs(cfg, loaded)
    if overrides:
        cfg = merge_configs(cfg, overrides)
    return TrainingConfig.from_dict(cfg)


def merge_configs(base: dict, override: dict) -> dict:
    """Deep-merge *override* into *base* (override wins)."""
    merged = deepcopy(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = merge_configs(merged[k], v)
        else:
            merged[k] = deepcopy(v)
    return merged
