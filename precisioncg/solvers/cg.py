"""Conjugate Gradient solver, generic over the scalar precision."""

import logging
import math
import time
from numpy.typing import NDArray

from precisioncg.algebra.sparse import SparseMatrix
from precisioncg.algebra.vector import axpy, dot, norm2, subtract
from precisioncg.core.result import ConvergenceResult
from precisioncg.scalars.number import ScalarNumber

logger = logging.getLogger(__name__)


def conjugate_gradient(
    A: SparseMatrix,
    b: NDArray,
    x: NDArray,
    x_true: NDArray,
    max_iter: int = 1000,
    tolerance: float = 1e-15,
) -> ConvergenceResult:
    """
    Unpreconditioned CG for an SPD system A x = b.

    r_0 = b - A x_0, p_0 = r_0. For k = 0, ..., max_iter - 1:
        1. α = (r·r) / (p·Ap)
        2. x ← x + α p,  r ← r - α Ap
        3. Record ||r||/||b||, ||x - x*||/||x*||, ||A(x - x*)||/||x*||
        4. Stop if ||r|| < tolerance (absolute, narrowed to double)
        5. β = (r·r)_new / (r·r)_old,  p ← r + β p

    All vector state stays in the scalars' precision; only the recorded
    metrics are narrowed to doubles. A must be symmetric positive definite;
    this is not checked, and breakdown (p·Ap → 0) is not guarded, so a
    degenerate problem shows up as non-finite metrics rather than an error.

    Args:
        A: SPD matrix (n, n)
        b: Right-hand side
        x: Initial guess, overwritten in place with the final iterate
        x_true: Reference solution for the error metrics
        max_iter: Iteration cap
        tolerance: Threshold on the absolute residual 2-norm

    Returns:
        ConvergenceResult with histories of length iterations + 1
    """
    start = time.perf_counter()

    r = subtract(b, A @ x)
    p = r.copy()
    rs_old = dot(r, r)

    b_norm = norm2(b)
    x_true_norm = norm2(x_true)

    hist_relres_2 = [float(rs_old.sqrt() / b_norm)]
    relerr_2, relerr_A = _error_metrics(A, x, x_true, x_true_norm)
    hist_relerr_2 = [relerr_2]
    hist_relerr_A = [relerr_A]

    converged = False
    for k in range(max_iter):
        Ap = A @ p
        alpha = rs_old / dot(p, Ap)

        x[:] = axpy(alpha, p, x)
        r = axpy(-alpha, Ap, r)

        rs_new = dot(r, r)
        residual_norm = rs_new.sqrt()

        hist_relres_2.append(float(residual_norm / b_norm))
        relerr_2, relerr_A = _error_metrics(A, x, x_true, x_true_norm)
        hist_relerr_2.append(relerr_2)
        hist_relerr_A.append(relerr_A)
        logger.debug(
            "CG iter %d: relres=%.3e relerr=%.3e", k + 1, hist_relres_2[-1], relerr_2
        )

        if residual_norm.to_double() < tolerance:
            converged = True
            iterations = k + 1
            break

        beta = rs_new / rs_old
        p = axpy(beta, p, r)
        rs_old = rs_new
    else:
        iterations = max_iter

    elapsed = time.perf_counter() - start

    # Recomputed from x to expose drift in the recurrence residual
    true_relres_2 = float(norm2(subtract(A @ x, b)) / b_norm)

    if converged:
        logger.info(
            "CG converged in %d iterations (%.3f s), true relres %.2e",
            iterations, elapsed, true_relres_2,
        )
    else:
        logger.info(
            "CG did not converge within %d iterations (%.3f s), relres %.2e",
            iterations, elapsed, hist_relres_2[-1],
        )
    if not math.isfinite(true_relres_2):
        logger.warning("CG produced a non-finite true residual")

    return ConvergenceResult(
        iterations=iterations,
        converged=converged,
        elapsed=elapsed,
        hist_relres_2=tuple(hist_relres_2),
        hist_relerr_2=tuple(hist_relerr_2),
        hist_relerr_A=tuple(hist_relerr_A),
        true_relres_2=true_relres_2,
    )


def _error_metrics(
    A: SparseMatrix, x: NDArray, x_true: NDArray, x_true_norm: ScalarNumber
) -> tuple[float, float]:
    """Relative error in the 2-norm and in ||A e||, narrowed to doubles."""
    error = subtract(x, x_true)
    relerr_2 = float(norm2(error) / x_true_norm)
    relerr_A = float(norm2(A @ error) / x_true_norm)
    return relerr_2, relerr_A
