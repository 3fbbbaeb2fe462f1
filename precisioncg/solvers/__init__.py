"""Iterative solvers."""

from precisioncg.solvers.cg import conjugate_gradient

__all__ = [
    "conjugate_gradient",
]
