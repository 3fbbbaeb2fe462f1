"""Matrix Market (coordinate format) reader.

Supported headers::

    %%MatrixMarket matrix coordinate {real|integer|pattern} {general|symmetric|skew-symmetric}

The header is checked with ``scipy.io.mminfo`` before the body is parsed by
``scipy.io.mmread``, which expands symmetric and skew-symmetric storage to
the full matrix and validates indices and the entry count. Values are read
as native doubles and then converted to the requested scalar type.
"""

import logging
from pathlib import Path
from typing import Union
import scipy.io
import scipy.sparse

from precisioncg.algebra.sparse import SparseMatrix
from precisioncg.errors import MatrixMarketError
from precisioncg.scalars.number import ScalarNumber, DoubleNumber

logger = logging.getLogger(__name__)

_SUPPORTED_FIELDS = ("real", "integer", "pattern")
_SUPPORTED_SYMMETRIES = ("general", "symmetric", "skew-symmetric")


def load_matrix_market(
    path: Union[str, Path],
    scalar_type: type[ScalarNumber] = DoubleNumber,
) -> SparseMatrix:
    """
    Load a coordinate Matrix Market file.

    Args:
        path: File to read
        scalar_type: ScalarNumber subclass of the returned entries

    Returns:
        SparseMatrix in full storage

    Raises:
        MatrixMarketError: If the file cannot be read, its header is not a
            supported coordinate header, or its body is malformed (bad
            entry, index outside the declared dimensions, wrong entry count)
    """
    path = Path(path)
    try:
        nrows, ncols, entries, fmt, field, symmetry = scipy.io.mminfo(str(path))
    except OSError as exc:
        raise MatrixMarketError(f"Cannot open file: {path}") from exc
    except (ValueError, RuntimeError) as exc:
        raise MatrixMarketError(
            f"Matrix Market read error: {exc} for file: {path}"
        ) from exc

    if fmt != "coordinate":
        raise MatrixMarketError(f"Unsupported format {fmt!r} for file: {path}")
    if field not in _SUPPORTED_FIELDS:
        raise MatrixMarketError(f"Unsupported field {field!r} for file: {path}")
    if symmetry not in _SUPPORTED_SYMMETRIES:
        raise MatrixMarketError(f"Unsupported symmetry {symmetry!r} for file: {path}")

    try:
        coo = scipy.sparse.coo_matrix(scipy.io.mmread(str(path)))
    except (ValueError, RuntimeError, OSError) as exc:
        raise MatrixMarketError(
            f"Matrix Market read error: {exc} for file: {path}"
        ) from exc

    matrix = SparseMatrix.from_scipy(coo.astype("float64"), scalar_type)
    logger.info(
        "Loaded %s: %dx%d, %d stored entries from %d in file (%s, %s)",
        path.name, nrows, ncols, matrix.nnz, entries, symmetry, scalar_type.__name__,
    )
    return matrix
