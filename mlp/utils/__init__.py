"""Utility functions: datasets, configuration, logging, visualization."""

from .data_utils import Dataset, load_dataset
from .config import TrainingConfig, DEFAULT_CONFIG, load_config, merge_configs
from .logger import get_logger, configure_logging

__all__ = [
    "Dataset", "load_dataset",
    "TrainingConfig", "DEFAULT_CONFIG", "load_config", "merge_configs",
    "get_logger", "configure_logging",
]
