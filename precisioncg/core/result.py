"""Convergence result of a single CG solve."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ConvergenceResult:
    """Outcome and per-iteration history of one solve.

    All histories are narrowed to native doubles and share the same length,
    ``iterations + 1``; index 0 holds the state before the first iteration.
    """

    iterations: int                    # final iteration count
    converged: bool
    elapsed: float                     # wall-clock seconds of the CG loop
    hist_relres_2: tuple[float, ...]   # ||r_k|| / ||b||
    hist_relerr_2: tuple[float, ...]   # ||x_k - x*|| / ||x*||
    hist_relerr_A: tuple[float, ...]   # ||A (x_k - x*)|| / ||x*||
    true_relres_2: float               # ||A x - b|| / ||b|| from the final x

    @property
    def history_length(self) -> int:
        """Number of recorded history entries."""
        return len(self.hist_relres_2)

    @property
    def final_relres_2(self) -> float:
        """Recurrence residual at the final iteration."""
        return self.hist_relres_2[-1]

    @property
    def final_relerr_2(self) -> float:
        return self.hist_relerr_2[-1]

    @property
    def final_relerr_A(self) -> float:
        return self.hist_relerr_A[-1]
