"""Core data types: precision kinds, results and experiment configuration."""

from precisioncg.core.precision import (
    PrecisionKind,
    PrecisionSpec,
    PRECISION_SPECS,
    precision_spec,
)
from precisioncg.core.result import ConvergenceResult
from precisioncg.core.config import ExperimentConfig, load_config

__all__ = [
    "PrecisionKind",
    "PrecisionSpec",
    "PRECISION_SPECS",
    "precision_spec",
    "ConvergenceResult",
    "ExperimentConfig",
    "load_config",
]
