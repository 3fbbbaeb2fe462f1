"""Plain-text summary of a solve."""

import sys
from typing import Optional, TextIO

from precisioncg.core.result import ConvergenceResult

_RULE = "=========================="


def print_num_results(
    result: ConvergenceResult,
    problem_name: str = "",
    stream: Optional[TextIO] = None,
) -> None:
    """
    Print convergence status, timing and the final metrics.

    Args:
        result: Completed solve
        problem_name: Optional label printed in the banner
        stream: Output stream (stdout by default)
    """
    out = sys.stdout if stream is None else stream

    lines = [_RULE, "Numerical Results."]
    if problem_name:
        lines.append(f"Problem: {problem_name}")
    lines.append(_RULE)

    if result.converged:
        lines.append(f"Converged! (iter = {result.iterations})")
    else:
        lines.append(f"NOT converged. (max_iter = {result.iterations})")

    lines += [
        f"# Iter.: {result.iterations}",
        f"Time[s]: {result.elapsed:.3f}",
        f"Relres_2norm = {result.final_relres_2:.2e}",
        f"True_Relres_2norm = {result.true_relres_2:.2e}",
        f"Relerr_2norm = {result.final_relerr_2:.2e}",
        f"Relerr_Anorm = {result.final_relerr_A:.2e}",
        _RULE,
        "",
    ]
    print("\n".join(lines), file=out)
