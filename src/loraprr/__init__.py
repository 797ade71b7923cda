"""Packet reception ratio experiments for a one-hop LoRa network."""

from .config import ConfigurationError, ExperimentConfig
from .experiment import execute_run, run_experiment

__version__ = "0.1.0"

__all__ = ["ConfigurationError", "ExperimentConfig", "execute_run", "run_experiment"]
