"""MATLAB .mat export of convergence data.

Layout of the written file::

    data.metadata     matrix_name, precision_name, precision_digits,
                      converged, iterations_performed, computation_time,
                      final_relres_2norm, final_true_relres_2norm,
                      final_relerr_2norm, final_relerr_Anorm
    data.convergence  hist_iterations, hist_relres_2, hist_relerr_2,
                      hist_relerr_A, iter_final
"""

import logging
from pathlib import Path
from typing import Any, Union
import numpy as np
import scipy.io

from precisioncg.core.precision import PRECISION_SPECS, PrecisionKind
from precisioncg.core.result import ConvergenceResult

logger = logging.getLogger(__name__)


def precision_digits(precision_name: str) -> int:
    """
    Digit label recorded for a precision in exported metadata.

    These are the export labels (dd 30, dq 66), not the arithmetic
    layer's nominal digits. Unknown names fall back to double.
    """
    try:
        kind = PrecisionKind.from_label(precision_name)
    except ValueError:
        return PRECISION_SPECS[PrecisionKind.DOUBLE].export_digits
    return PRECISION_SPECS[kind].export_digits


def convergence_struct(
    result: ConvergenceResult, matrix_name: str, precision_name: str
) -> dict[str, Any]:
    """Build the nested dict that savemat turns into the ``data`` struct."""
    metadata = {
        "matrix_name": matrix_name,
        "precision_name": precision_name,
        "precision_digits": float(precision_digits(precision_name)),
        "converged": np.uint8(1 if result.converged else 0),
        "iterations_performed": float(result.iterations),
        "computation_time": float(result.elapsed),
        "final_relres_2norm": result.final_relres_2,
        "final_true_relres_2norm": result.true_relres_2,
        "final_relerr_2norm": result.final_relerr_2,
        "final_relerr_Anorm": result.final_relerr_A,
    }
    convergence = {
        "hist_iterations": np.arange(result.history_length, dtype=np.float64),
        "hist_relres_2": np.asarray(result.hist_relres_2, dtype=np.float64),
        "hist_relerr_2": np.asarray(result.hist_relerr_2, dtype=np.float64),
        "hist_relerr_A": np.asarray(result.hist_relerr_A, dtype=np.float64),
        "iter_final": float(result.iterations),
    }
    return {"metadata": metadata, "convergence": convergence}


def export_convergence_data(
    result: ConvergenceResult,
    filename: Union[str, Path],
    matrix_name: str,
    precision_name: str,
) -> bool:
    """
    Write a ConvergenceResult to a MATLAB .mat file.

    Args:
        result: Completed solve
        filename: Output .mat path (parent directories are created)
        matrix_name: Name of the matrix problem
        precision_name: Precision label ("double", "dd", "dq", "qx")

    Returns:
        True on success, False if the file could not be written
    """
    filename = Path(filename)
    try:
        filename.parent.mkdir(parents=True, exist_ok=True)
        scipy.io.savemat(
            str(filename),
            {"data": convergence_struct(result, matrix_name, precision_name)},
        )
    except (OSError, ValueError) as exc:
        logger.error("Error exporting to %s: %s", filename, exc)
        return False

    logger.info("Exported convergence data to %s", filename)
    return True
