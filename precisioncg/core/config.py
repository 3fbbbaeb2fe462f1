"""
YAML → ExperimentConfig.

Schema (example):

problem:
  name: nos7
  matrix: inputs/nos7.mtx     # relative paths resolve against the YAML file
solver:
  max_iter: 1000
  tolerance: 1.0e-15
precisions: [double, dd, dq, qx]
output:
  directory: results          # optional; no .mat export when omitted
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union
import yaml

from precisioncg.core.precision import PrecisionKind
from precisioncg.errors import ConfigError

DEFAULT_MAX_ITER = 1000
DEFAULT_TOLERANCE = 1e-15


@dataclass
class ExperimentConfig:
    """One matrix solved at one or more precisions."""

    matrix_path: Path
    problem_name: str
    precisions: list[PrecisionKind] = field(
        default_factory=lambda: list(PrecisionKind)
    )
    max_iter: int = DEFAULT_MAX_ITER
    tolerance: float = DEFAULT_TOLERANCE
    output_dir: Optional[Path] = None

    def __post_init__(self):
        self.matrix_path = Path(self.matrix_path)
        if self.output_dir is not None:
            self.output_dir = Path(self.output_dir)
        try:
            self.precisions = [PrecisionKind.from_label(p) for p in self.precisions]
        except ValueError as exc:
            raise ConfigError(str(exc)) from None
        if not self.precisions:
            raise ConfigError("At least one precision is required")
        if int(self.max_iter) <= 0:
            raise ConfigError(f"max_iter must be positive (got {self.max_iter})")
        if not float(self.tolerance) > 0.0:
            raise ConfigError(f"tolerance must be positive (got {self.tolerance})")
        self.max_iter = int(self.max_iter)
        self.tolerance = float(self.tolerance)


def _resolve_path(base: Path, value: Union[str, Path]) -> Path:
    """Resolve a possibly relative path against base."""
    path = Path(value).expanduser()
    return path if path.is_absolute() else (base / path).resolve()


def _section(raw: dict[str, Any], key: str) -> dict[str, Any]:
    """Return a top-level mapping, empty when absent."""
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"{key} must be a mapping (got {type(value).__name__})")
    return value


def load_config(path: Union[str, Path]) -> ExperimentConfig:
    """
    Load an experiment description from YAML.

    Args:
        path: YAML file

    Returns:
        Validated ExperimentConfig

    Raises:
        ConfigError: If the file is unreadable, not a mapping, or invalid
    """
    cfg_file = Path(path).expanduser().resolve()
    try:
        raw = yaml.safe_load(cfg_file.read_text())
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot read config {cfg_file}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError("Top-level YAML must be a mapping")

    return config_from_dict(raw, base=cfg_file.parent)


def config_from_dict(raw: dict[str, Any], base: Optional[Path] = None) -> ExperimentConfig:
    """Build an ExperimentConfig from an already parsed mapping."""
    base = Path.cwd() if base is None else base

    problem = _section(raw, "problem")
    if "matrix" not in problem:
        raise ConfigError("problem.matrix is required")
    matrix_path = _resolve_path(base, problem["matrix"])
    name = str(problem.get("name") or matrix_path.stem)

    solver = _section(raw, "solver")
    output = _section(raw, "output")
    out_dir = output.get("directory")

    try:
        return ExperimentConfig(
            matrix_path=matrix_path,
            problem_name=name,
            precisions=list(raw.get("precisions") or list(PrecisionKind)),
            max_iter=solver.get("max_iter", DEFAULT_MAX_ITER),
            tolerance=solver.get("tolerance", DEFAULT_TOLERANCE),
            output_dir=_resolve_path(base, out_dir) if out_dir else None,
        )
    except (TypeError, ValueError) as exc:
        if isinstance(exc, ConfigError):
            raise
        raise ConfigError(f"Invalid solver settings: {exc}") from exc
