"""Sparse matrices of scalar numbers."""

from typing import Any, Iterable, Iterator
import numpy as np
import scipy.sparse
from numpy.typing import NDArray

from precisioncg.scalars.number import ScalarNumber


class SparseMatrix:
    """
    Compressed sparse row matrix with ScalarNumber entries.

    The structure is fixed at construction and never changes; all
    operations return new matrices or vectors.
    """

    def __init__(
        self,
        shape: tuple[int, int],
        indptr: Any,
        indices: Any,
        data: Iterable[ScalarNumber],
        scalar_type: type[ScalarNumber],
    ):
        """
        Initialize from CSR arrays.

        Args:
            shape: (m, n) dimensions
            indptr: Row pointers, length m + 1
            indices: Column index of each stored entry
            data: Stored entries, all of type scalar_type
            scalar_type: ScalarNumber subclass of the entries
        """
        m, n = int(shape[0]), int(shape[1])
        if m < 0 or n < 0:
            raise ValueError(f"Invalid shape {shape}")

        self._shape = (m, n)
        self._scalar_type = scalar_type
        self._indptr = np.asarray(indptr, dtype=np.int64)
        self._indices = np.asarray(indices, dtype=np.int64)
        self._data = tuple(data)

        if self._indptr.shape != (m + 1,):
            raise ValueError(f"indptr must have length {m + 1}")
        if len(self._indices) != len(self._data) or self._indptr[-1] != len(self._data):
            raise ValueError("indices, data and indptr disagree on the entry count")
        if any(type(v) is not scalar_type for v in self._data):
            raise ValueError(f"All entries must be {scalar_type.__name__}")

        self._indptr.setflags(write=False)
        self._indices.setflags(write=False)

        # Plain lists are much faster to index from Python loops
        self._indptr_list = self._indptr.tolist()
        self._indices_list = self._indices.tolist()

    @classmethod
    def from_triplets(
        cls,
        shape: tuple[int, int],
        rows: Iterable[int],
        cols: Iterable[int],
        values: Iterable[Any],
        scalar_type: type[ScalarNumber],
    ) -> "SparseMatrix":
        """
        Build from 0-based (row, col, value) triplets.

        Duplicate positions are summed in the scalar precision. Values that
        are not already scalar_type are converted from native doubles.

        Raises:
            ValueError: If an index lies outside shape
        """
        m, n = int(shape[0]), int(shape[1])
        rows = np.asarray(list(rows), dtype=np.int64)
        cols = np.asarray(list(cols), dtype=np.int64)
        values = [v if type(v) is scalar_type else scalar_type(v) for v in values]
        if not (len(rows) == len(cols) == len(values)):
            raise ValueError("rows, cols and values must have equal length")

        if len(rows):
            bad = (rows < 0) | (rows >= m) | (cols < 0) | (cols >= n)
            if bad.any():
                k = int(np.flatnonzero(bad)[0])
                raise ValueError(
                    f"Index out of bounds: row={rows[k]}, col={cols[k]} "
                    f"for matrix {m}x{n}"
                )

        # Stable sort keeps duplicate summation order deterministic
        order = np.lexsort((cols, rows))
        out_rows: list[int] = []
        out_cols: list[int] = []
        out_data: list[ScalarNumber] = []
        for k in order.tolist():
            i, j = int(rows[k]), int(cols[k])
            if out_rows and out_rows[-1] == i and out_cols[-1] == j:
                out_data[-1] = out_data[-1] + values[k]
            else:
                out_rows.append(i)
                out_cols.append(j)
                out_data.append(values[k])

        counts = np.bincount(np.asarray(out_rows, dtype=np.int64), minlength=m)
        indptr = np.zeros(m + 1, dtype=np.int64)
        np.cumsum(counts[:m], out=indptr[1:])
        return cls((m, n), indptr, out_cols, out_data, scalar_type)

    @classmethod
    def from_scipy(
        cls, matrix: Any, scalar_type: type[ScalarNumber]
    ) -> "SparseMatrix":
        """Convert a scipy sparse matrix or dense array of native doubles."""
        coo = scipy.sparse.coo_matrix(matrix)
        return cls.from_triplets(
            coo.shape, coo.row, coo.col, coo.data.tolist(), scalar_type
        )

    def to_scipy(self) -> scipy.sparse.csr_matrix:
        """Narrow to a float64 scipy CSR matrix."""
        data = np.array([float(v) for v in self._data], dtype=np.float64)
        return scipy.sparse.csr_matrix(
            (data, self._indices.copy(), self._indptr.copy()), shape=self._shape
        )

    @property
    def shape(self) -> tuple[int, int]:
        return self._shape

    @property
    def nnz(self) -> int:
        """Number of stored entries."""
        return len(self._data)

    @property
    def scalar_type(self) -> type[ScalarNumber]:
        return self._scalar_type

    def triplets(self) -> Iterator[tuple[int, int, ScalarNumber]]:
        """Yield stored entries as (row, col, value) in row-major order."""
        indptr, indices = self._indptr_list, self._indices_list
        for i in range(self._shape[0]):
            for k in range(indptr[i], indptr[i + 1]):
                yield i, indices[k], self._data[k]

    def diagonal(self) -> NDArray:
        """Main diagonal as a scalar vector (zeros where nothing is stored)."""
        d = np.full(min(self._shape), self._scalar_type.zero(), dtype=object)
        for i, j, v in self.triplets():
            if i == j:
                d[i] = v
        return d

    def matvec(self, x: NDArray) -> NDArray:
        """
        Compute A @ x.

        Args:
            x: Scalar vector of length n

        Returns:
            Scalar vector of length m
        """
        m, n = self._shape
        if len(x) != n:
            raise ValueError(f"Vector of length {len(x)} does not match {m}x{n} matrix")

        indptr, indices, data = self._indptr_list, self._indices_list, self._data
        zero = self._scalar_type.zero()
        y = np.empty(m, dtype=object)
        for i in range(m):
            acc = zero
            for k in range(indptr[i], indptr[i + 1]):
                acc = acc + data[k] * x[indices[k]]
            y[i] = acc
        return y

    def __matmul__(self, x: NDArray) -> NDArray:
        """Support A @ x syntax."""
        return self.matvec(x)

    def _combine(self, other: "SparseMatrix", sign: int) -> "SparseMatrix":
        if not isinstance(other, SparseMatrix):
            return NotImplemented
        if other.shape != self.shape or other.scalar_type is not self.scalar_type:
            raise ValueError("Matrices must share shape and scalar type")
        rows, cols, values = [], [], []
        for i, j, v in self.triplets():
            rows.append(i)
            cols.append(j)
            values.append(v)
        for i, j, v in other.triplets():
            rows.append(i)
            cols.append(j)
            values.append(v if sign > 0 else -v)
        return SparseMatrix.from_triplets(
            self.shape, rows, cols, values, self.scalar_type
        )

    def __add__(self, other: "SparseMatrix") -> "SparseMatrix":
        return self._combine(other, +1)

    def __sub__(self, other: "SparseMatrix") -> "SparseMatrix":
        return self._combine(other, -1)

    def __mul__(self, alpha: Any) -> "SparseMatrix":
        """Scale every stored entry by alpha."""
        if isinstance(alpha, (SparseMatrix, np.ndarray)):
            return NotImplemented
        data = [v * alpha for v in self._data]
        return SparseMatrix(
            self._shape, self._indptr, self._indices, data, self._scalar_type
        )

    def __rmul__(self, alpha: Any) -> "SparseMatrix":
        return self.__mul__(alpha)

    def __repr__(self) -> str:
        m, n = self._shape
        return (
            f"SparseMatrix({m}x{n}, nnz={self.nnz}, "
            f"scalar_type={self._scalar_type.__name__})"
        )
