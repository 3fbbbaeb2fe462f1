"""
precisioncg: Conjugate Gradient convergence at selectable arithmetic precision.

This library provides:
- Scalar number types for double, double-double, double-quad and
  extended-quad precision behind one operator interface
- A sparse matrix container over those scalars
- A generic Conjugate Gradient solver recording residual and error histories
- Matrix Market input, MATLAB .mat export and text reports
"""

__version__ = "0.1.0"

from precisioncg.core.precision import PrecisionKind
from precisioncg.core.result import ConvergenceResult
from precisioncg.scalars.number import (
    ScalarNumber,
    DoubleNumber,
    DDNumber,
    DQNumber,
    QXNumber,
)
from precisioncg.scalars.factory import scalar_type
from precisioncg.algebra.sparse import SparseMatrix
from precisioncg.solvers.cg import conjugate_gradient

__all__ = [
    "PrecisionKind",
    "ConvergenceResult",
    "ScalarNumber",
    "DoubleNumber",
    "DDNumber",
    "DQNumber",
    "QXNumber",
    "scalar_type",
    "SparseMatrix",
    "conjugate_gradient",
]
