"""Dense vectors of scalar numbers.

Vectors are 1-D numpy arrays of dtype ``object`` holding ``ScalarNumber``
instances, so numpy's elementwise ``+``, ``-`` and scalar ``*`` dispatch to
the scalar operators. Scalars are immutable, which makes sharing one
instance between several slots safe.
"""

from functools import reduce
from typing import Iterable
import operator
import numpy as np
from numpy.typing import NDArray

from precisioncg.scalars.number import ScalarNumber


def zeros(n: int, scalar_type: type[ScalarNumber]) -> NDArray:
    """Vector of n zeros."""
    return np.full(n, scalar_type.zero(), dtype=object)


def ones(n: int, scalar_type: type[ScalarNumber]) -> NDArray:
    """Vector of n ones."""
    return np.full(n, scalar_type.one(), dtype=object)


def from_doubles(
    values: Iterable[float], scalar_type: type[ScalarNumber]
) -> NDArray:
    """
    Convert native doubles into a scalar vector.

    Args:
        values: Native values (list, tuple or float array)
        scalar_type: Target ScalarNumber subclass

    Returns:
        Object array of scalar_type instances
    """
    items = [scalar_type(float(v)) for v in values]
    v = np.empty(len(items), dtype=object)
    v[:] = items
    return v


def to_doubles(x: NDArray) -> NDArray:
    """Narrow a scalar vector to a float64 array."""
    return np.array([float(s) for s in x], dtype=np.float64)


def dot(x: NDArray, y: NDArray) -> ScalarNumber:
    """
    Inner product accumulated left to right in the scalars' precision.

    Raises:
        ValueError: On length mismatch or empty vectors
    """
    if len(x) != len(y):
        raise ValueError(f"Length mismatch in dot product: {len(x)} vs {len(y)}")
    if len(x) == 0:
        raise ValueError("Dot product of empty vectors")
    return reduce(operator.add, map(operator.mul, x, y))


def norm2(x: NDArray) -> ScalarNumber:
    """Euclidean norm."""
    return dot(x, x).sqrt()


def axpy(alpha: ScalarNumber, x: NDArray, y: NDArray) -> NDArray:
    """
    Return alpha * x + y as a new vector.

    Floating-point status flags left by the scalar operators are ignored
    regardless of the caller's ``np.errstate``.
    """
    with np.errstate(all="ignore"):
        return alpha * x + y


def subtract(x: NDArray, y: NDArray) -> NDArray:
    """Return x - y as a new vector."""
    with np.errstate(all="ignore"):
        return x - y
