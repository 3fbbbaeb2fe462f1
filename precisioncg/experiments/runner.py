"""
Driver comparing CG convergence across precisions on one matrix.

Responsibilities:
- Load the ExperimentConfig (YAML or command-line flags).
- For each precision: load the matrix, set x* = ones, b = A x*, x0 = 0, solve.
- Report every solve and, when an output directory is set, export .mat files.

Usage examples:
    precisioncg experiment.yaml
    python -m precisioncg --matrix inputs/nos7.mtx --precision dd --precision qx
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO
from numpy.typing import NDArray

from precisioncg.algebra.sparse import SparseMatrix
from precisioncg.algebra.vector import ones, zeros
from precisioncg.core.config import (
    DEFAULT_MAX_ITER,
    DEFAULT_TOLERANCE,
    ExperimentConfig,
    load_config,
)
from precisioncg.core.precision import PrecisionKind
from precisioncg.core.result import ConvergenceResult
from precisioncg.errors import ConfigError, MatrixMarketError
from precisioncg.io.mat_export import export_convergence_data
from precisioncg.io.matrix_market import load_matrix_market
from precisioncg.io.report import print_num_results
from precisioncg.scalars.factory import scalar_type
from precisioncg.solvers.cg import conjugate_gradient

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def solve_problem(
    A: SparseMatrix,
    max_iter: int = DEFAULT_MAX_ITER,
    tolerance: float = DEFAULT_TOLERANCE,
) -> tuple[ConvergenceResult, NDArray]:
    """
    Solve A x = A·ones from a zero initial guess.

    Args:
        A: SPD matrix in the desired scalar type
        max_iter: Iteration cap
        tolerance: Absolute residual threshold

    Returns:
        result: Convergence history
        x: Final iterate
    """
    n = A.shape[0]
    x_true = ones(n, A.scalar_type)
    b = A @ x_true
    x = zeros(n, A.scalar_type)
    result = conjugate_gradient(A, b, x, x_true, max_iter=max_iter, tolerance=tolerance)
    return result, x


def run_experiment(
    config: ExperimentConfig, stream: Optional[TextIO] = None
) -> dict[PrecisionKind, ConvergenceResult]:
    """
    Run every configured precision on the configured matrix.

    Raises:
        MatrixMarketError: If the matrix file cannot be loaded
    """
    results: dict[PrecisionKind, ConvergenceResult] = {}
    for kind in config.precisions:
        A = load_matrix_market(config.matrix_path, scalar_type(kind))
        logger.info(
            "Solving %s in %s precision (n=%d, nnz=%d, max_iter=%d, tol=%.1e)",
            config.problem_name, kind.value, A.shape[0], A.nnz,
            config.max_iter, config.tolerance,
        )
        result, _ = solve_problem(A, config.max_iter, config.tolerance)
        results[kind] = result

        print_num_results(result, f"{config.problem_name} [{kind.value}]", stream)

        if config.output_dir is not None:
            out = config.output_dir / f"{config.problem_name}_{kind.value}.mat"
            if not export_convergence_data(result, out, config.problem_name, kind.value):
                logger.warning("Export failed for %s; continuing", out)
    return results


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="precisioncg",
        description="Compare CG convergence on a Matrix Market problem across precisions.",
    )
    p.add_argument("config", nargs="?", help="Experiment YAML file")
    p.add_argument("--matrix", help="Matrix Market file (instead of a config)")
    p.add_argument("--name", help="Problem name (defaults to the file stem)")
    p.add_argument(
        "--precision",
        action="append",
        choices=[k.value for k in PrecisionKind],
        help="Precision to run; repeat for several (default: all)",
    )
    p.add_argument("--max-iter", type=int, default=None, help="Iteration cap")
    p.add_argument("--tolerance", type=float, default=None, help="Residual threshold")
    p.add_argument("--output", help="Directory for .mat exports")
    p.add_argument("--log-level", default="INFO", help="Logging level (default INFO)")
    return p


def _config_from_args(args: argparse.Namespace) -> ExperimentConfig:
    if args.config:
        cfg = load_config(args.config)
    else:
        matrix = Path(args.matrix)
        cfg = ExperimentConfig(matrix_path=matrix, problem_name=args.name or matrix.stem)

    # Command-line flags override the file
    if args.name:
        cfg.problem_name = args.name
    if args.precision:
        cfg.precisions = [PrecisionKind.from_label(p) for p in args.precision]
    if args.max_iter is not None:
        if args.max_iter <= 0:
            raise ConfigError(f"max_iter must be positive (got {args.max_iter})")
        cfg.max_iter = args.max_iter
    if args.tolerance is not None:
        if not args.tolerance > 0.0:
            raise ConfigError(f"tolerance must be positive (got {args.tolerance})")
        cfg.tolerance = args.tolerance
    if args.output:
        cfg.output_dir = Path(args.output)
    return cfg


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Console entry point. Returns 0 on success, 2 on input errors."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not args.config and not args.matrix:
        parser.error("either a config file or --matrix is required")

    level = getattr(logging, str(args.log_level).upper(), logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=_LOG_FORMAT)

    try:
        cfg = _config_from_args(args)
        run_experiment(cfg, sys.stdout)
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2
    except MatrixMarketError as exc:
        logger.error("%s", exc)
        return 2
    return 0
