"""Multilayer Perceptron with Backpropagation — pip-installable package."""

from setuptools import setup, find_packages
from pathlib import Path

ROOT = Path(__file__).parent

setup(
    name="mlp-backprop",
    version="1.0.0",
    description="Multilayer perceptron with online and batch backpropagation",
    author="Luca Gandolfi",
    packages=find_packages(include=["mlp", "mlp.*"]),
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.24.0",
        "matplotlib>=3.8.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "mlp-train=mlp.cli:main",
        ],
    },
)
