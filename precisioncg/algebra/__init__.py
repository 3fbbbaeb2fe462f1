"""Generic sparse linear algebra over scalar numbers."""

from precisioncg.algebra.sparse import SparseMatrix
from precisioncg.algebra.vector import (
    zeros,
    ones,
    from_doubles,
    to_doubles,
    dot,
    norm2,
    axpy,
    subtract,
)

__all__ = [
    "SparseMatrix",
    "zeros",
    "ones",
    "from_doubles",
    "to_doubles",
    "dot",
    "norm2",
    "axpy",
    "subtract",
]
