"""
Sparse Views - mutable views over caller-owned compressed storage.

Provides:
    - SparseMatrixView (MapSparseMat): compressed sparse column (CSC)
    - SparseVectorView (MapSparseVec): (index, value) pairs plus a length

Compressed-Column Form:
    colptr[j] .. colptr[j+1] delimit the entries of column j inside
    ``rowind`` (row of each entry) and ``values`` (value of each entry).
    ``colptr`` has cols + 1 entries, starts at 0, and its last entry is
    the number of stored entries.

Mutability:
    Values may be written in place (the caller's buffer changes). The
    sparsity structure is fixed: writing a position that is not stored
    raises KeyError.

Iteration:
    Entries are yielded in storage order - column by column, then in the
    order rows appear inside each column. For canonical input (sorted
    row indices) that is ascending (col, row) order.

Example:
    >>> colptr = np.array([0, 2, 3, 4, 6])
    >>> rowind = np.array([0, 2, 1, 0, 1, 2])
    >>> values = np.array([1.0, 5.0, 3.0, 2.0, 4.0, 6.0])
    >>> mat = SparseMatrixView(colptr, rowind, values, 3, 4)
    >>> mat.nnz
    6
    >>> next(iter(mat))
    SparseEntry(row=0, col=0, value=1.0)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterator, NamedTuple, Tuple

import numpy as np

from ._base import ViewBase, check_index
from ._buffers import check_dim, flat_buffer
from ._dtypes import DType
from ._layout import Ownership, Semantics, Structure, TypeSpec
from ._ownership import BorrowTracker
from .errors import (
    InvalidView,
    ST_ERROR_DIMENSION_MISMATCH,
    ST_ERROR_INDEX_OUT_OF_BOUNDS,
    ST_ERROR_INVALID_ARGUMENT,
    ST_ERROR_TYPE_MISMATCH,
)

if TYPE_CHECKING:
    from scipy.sparse import csc_matrix

logger = logging.getLogger("solvertypes.views")

__all__ = ['SparseMatrixView', 'SparseVectorView', 'SparseEntry', 'SparseVectorEntry']


# =============================================================================
# Lazy Imports (avoid importing scipy unless interop is used)
# =============================================================================

def _import_scipy_sparse():
    """Lazy import of scipy.sparse (only when needed)."""
    try:
        import scipy.sparse
        return scipy.sparse
    except ImportError as e:
        raise ImportError(
            "scipy is required for SciPy integration. "
            "Install with: pip install scipy"
        ) from e


def _check_scipy_sparse(obj: Any) -> bool:
    """Check if object is scipy sparse matrix (without importing scipy)."""
    module = type(obj).__module__
    return module is not None and module.startswith('scipy.sparse')


class SparseEntry(NamedTuple):
    """One stored entry of a sparse matrix."""
    row: int
    col: int
    value: float


class SparseVectorEntry(NamedTuple):
    """One stored entry of a sparse vector."""
    index: int
    value: float


def _sorted_within_segments(indices: np.ndarray, starts: np.ndarray) -> bool:
    """True if indices strictly increase inside every segment.

    ``starts`` holds the offset of the first entry of each segment.
    """
    if indices.size < 2:
        return True
    rising = indices[1:] > indices[:-1]
    boundary = np.zeros(indices.size - 1, dtype=bool)
    inner = starts[(starts > 0) & (starts < indices.size)].astype(np.int64)
    boundary[inner - 1] = True
    return bool(np.all(rising | boundary))


# =============================================================================
# Sparse Matrix View
# =============================================================================

class SparseMatrixView(ViewBase):
    """
    Mutable, non-owning view of a CSC sparse matrix.

    Attributes:
        shape: Matrix dimensions (rows, cols).
        nnz: Number of stored entries (``colptr[cols]``).
        values: Writable array over the caller's values buffer.
    """

    spec = TypeSpec(
        alias='MapSparseMat',
        structure=Structure.SPARSE,
        ownership=Ownership.BORROWED,
        dtype=DType.float64,
        semantics=Semantics.MATRIX,
        ndim=2,
        mutable=True,
    )

    __slots__ = ('_colptr', '_rowind', '_values', '_rows', '_cols', '_nnz')

    def __init__(self, colptr: Any, rowind: Any, values: Any, rows: int, cols: int):
        """
        Create view over compressed-column arrays.

        Args:
            colptr: Integer column pointers, length cols + 1
            rowind: Integer row index of each stored entry
            values: float64 value of each stored entry (must be writable)
            rows: Row count
            cols: Column count

        Raises:
            InvalidView: If any array is null, mistyped, non-contiguous,
                         or inconsistent with the declared dimensions
        """
        rows = check_dim(rows, "rows")
        cols = check_dim(cols, "cols")

        colptr_arr = flat_buffer(colptr, DType.int64, "colptr", one_dimensional=True)
        rowind_arr = flat_buffer(rowind, DType.int64, "rowind", one_dimensional=True)
        values_arr = flat_buffer(values, DType.float64, "values", writable=True, one_dimensional=True)

        if colptr_arr.size != cols + 1:
            raise InvalidView(
                ST_ERROR_DIMENSION_MISMATCH,
                f"colptr has {colptr_arr.size} entries, expected cols + 1 = {cols + 1}",
            )
        if colptr_arr[0] != 0:
            raise InvalidView(
                ST_ERROR_INVALID_ARGUMENT,
                f"colptr must start at 0, got {int(colptr_arr[0])}",
            )
        if cols > 0 and np.any(colptr_arr[1:] < colptr_arr[:-1]):
            raise InvalidView(ST_ERROR_INVALID_ARGUMENT, "colptr must be non-decreasing")

        nnz = int(colptr_arr[-1])
        if rowind_arr.size != nnz:
            raise InvalidView(
                ST_ERROR_DIMENSION_MISMATCH,
                f"rowind has {rowind_arr.size} entries, colptr[cols] = {nnz}",
            )
        if values_arr.size != nnz:
            raise InvalidView(
                ST_ERROR_DIMENSION_MISMATCH,
                f"values has {values_arr.size} entries, colptr[cols] = {nnz}",
            )
        if nnz > 0 and (rowind_arr.min() < 0 or rowind_arr.max() >= rows):
            raise InvalidView(
                ST_ERROR_INDEX_OUT_OF_BOUNDS,
                f"row indices must lie in [0, {rows})",
            )

        super().__init__(values)
        self._rows = rows
        self._cols = cols
        self._nnz = nnz
        self._colptr = colptr_arr
        self._rowind = rowind_arr
        self._values = values_arr
        logger.debug("wrapped %dx%d sparse matrix view with %d entries", rows, cols, nnz)

    # =========================================================================
    # Factory Methods
    # =========================================================================

    @classmethod
    def from_scipy(cls, mat: "csc_matrix") -> "SparseMatrixView":
        """
        Borrow the arrays of a scipy CSC matrix (zero-copy).

        Raises:
            InvalidView: If mat is not a float64 CSC scipy sparse matrix
        """
        if not _check_scipy_sparse(mat):
            raise InvalidView(
                ST_ERROR_TYPE_MISMATCH,
                f"Expected scipy sparse matrix, got {type(mat).__name__}",
            )
        if mat.format != 'csc':
            raise InvalidView(
                ST_ERROR_TYPE_MISMATCH,
                f"Expected CSC format, got {mat.format}. Convert with .tocsc() first.",
            )
        rows, cols = mat.shape
        view = cls(mat.indptr, mat.indices, mat.data, rows, cols)
        view._tracker = BorrowTracker.borrowed(mat)
        return view

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> Tuple[int, int]:
        return (self._rows, self._cols)

    @property
    def nnz(self) -> int:
        """Number of structurally non-zero entries."""
        return self._nnz

    @property
    def format(self) -> str:
        return 'csc'

    @property
    def col_pointers(self) -> np.ndarray:
        """Read-only column pointer array."""
        self._ensure_valid()
        out = self._colptr.view()
        out.flags.writeable = False
        return out

    @property
    def row_indices(self) -> np.ndarray:
        """Read-only row index array."""
        self._ensure_valid()
        out = self._rowind.view()
        out.flags.writeable = False
        return out

    @property
    def values(self) -> np.ndarray:
        """Writable array over the caller's values."""
        self._ensure_valid()
        return self._values

    @property
    def has_sorted_indices(self) -> bool:
        """Whether row indices strictly increase inside every column."""
        self._ensure_valid()
        return _sorted_within_segments(self._rowind, self._colptr[:-1])

    # =========================================================================
    # Iteration
    # =========================================================================

    def __iter__(self) -> Iterator[SparseEntry]:
        """Yield (row, col, value) for every stored entry, in storage order."""
        self._ensure_valid()
        colptr = self._colptr.tolist()
        rowind = self._rowind
        values = self._values
        for j in range(self._cols):
            for k in range(colptr[j], colptr[j + 1]):
                yield SparseEntry(int(rowind[k]), j, float(values[k]))

    def triplets(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Coordinate form of the stored entries (copies), in storage order.

        Returns:
            (rows, cols, values) arrays of length nnz
        """
        self._ensure_valid()
        counts = np.diff(self._colptr).astype(np.int64)
        col_of_entry = np.repeat(np.arange(self._cols, dtype=np.int64), counts)
        return self._rowind.astype(np.int64), col_of_entry, self._values.copy()

    def col(self, j: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Stored entries of column j.

        Returns:
            (row_indices, values) - zero-copy; values is writable
        """
        self._ensure_valid()
        j = check_index(j, self._cols, "col")
        start, stop = int(self._colptr[j]), int(self._colptr[j + 1])
        return self._rowind[start:stop], self._values[start:stop]

    # =========================================================================
    # Element Access
    # =========================================================================

    def _find(self, i: int, j: int) -> int:
        """Storage position of (i, j), or -1 if not stored."""
        start, stop = int(self._colptr[j]), int(self._colptr[j + 1])
        hits = np.flatnonzero(self._rowind[start:stop] == i)
        return start + int(hits[0]) if hits.size else -1

    def __getitem__(self, key) -> float:
        """Value at (row, col); positions that are not stored read 0.0."""
        if not isinstance(key, tuple) or len(key) != 2:
            raise TypeError("Index must be (row, col) tuple")
        self._ensure_valid()
        i = check_index(key[0], self._rows, "row")
        j = check_index(key[1], self._cols, "col")
        if not 0 <= j < self._cols:
            return 0.0
        k = self._find(i, j)
        return float(self._values[k]) if k >= 0 else 0.0

    def __setitem__(self, key, value: float) -> None:
        """
        Overwrite a stored value.

        Raises:
            KeyError: If (row, col) is not structurally non-zero
        """
        if not isinstance(key, tuple) or len(key) != 2:
            raise TypeError("Index must be (row, col) tuple")
        self._ensure_valid()
        i = check_index(key[0], self._rows, "row")
        j = check_index(key[1], self._cols, "col")
        k = self._find(i, j) if 0 <= j < self._cols else -1
        if k < 0:
            raise KeyError(f"entry ({key[0]}, {key[1]}) is not stored; structure is fixed")
        self._values[k] = value

    # =========================================================================
    # Conversion
    # =========================================================================

    def to_dense(self) -> np.ndarray:
        """Dense (rows, cols) copy; duplicate entries are summed."""
        rows, cols, values = self.triplets()
        dense = np.zeros((self._rows, self._cols), dtype=np.float64, order='F')
        np.add.at(dense, (rows, cols), values)
        return dense

    def to_scipy(self) -> "csc_matrix":
        """
        scipy CSC matrix over the same arrays.

        scipy may downcast index arrays (copying them); values are shared.
        """
        self._ensure_valid()
        sp = _import_scipy_sparse()
        return sp.csc_matrix(
            (self._values, self._rowind, self._colptr),
            shape=(self._rows, self._cols),
            copy=False,
        )

    def _drop(self) -> None:
        self._colptr = None
        self._rowind = None
        self._values = None

    def __repr__(self) -> str:
        if not self.is_valid:
            return "<SparseMatrixView [released]>"
        return f"<SparseMatrixView {self._rows}x{self._cols} nnz={self._nnz} [borrowed, csc]>"


# =============================================================================
# Sparse Vector View
# =============================================================================

class SparseVectorView(ViewBase):
    """
    Mutable, non-owning view of a sparse vector.

    Example:
        >>> vec = SparseVectorView(np.array([1, 4]), np.array([2.0, 7.0]), 6)
        >>> vec[4], vec[0]
        (7.0, 0.0)
    """

    spec = TypeSpec(
        alias='MapSparseVec',
        structure=Structure.SPARSE,
        ownership=Ownership.BORROWED,
        dtype=DType.float64,
        semantics=Semantics.MATRIX,
        ndim=1,
        mutable=True,
    )

    __slots__ = ('_indices', '_values', '_length', '_nnz')

    def __init__(self, indices: Any, values: Any, size: int):
        """
        Create view over (index, value) pairs.

        Args:
            indices: Integer position of each stored entry
            values: float64 value of each stored entry (must be writable)
            size: Logical length of the vector

        Raises:
            InvalidView: If arrays are null, mistyped, of different lengths,
                         or an index lies outside [0, size)
        """
        size = check_dim(size, "size")
        idx_arr = flat_buffer(indices, DType.int64, "indices", one_dimensional=True)
        val_arr = flat_buffer(values, DType.float64, "values", writable=True, one_dimensional=True)

        if idx_arr.size != val_arr.size:
            raise InvalidView(
                ST_ERROR_DIMENSION_MISMATCH,
                f"indices has {idx_arr.size} entries, values has {val_arr.size}",
            )
        if idx_arr.size > 0 and (idx_arr.min() < 0 or idx_arr.max() >= size):
            raise InvalidView(
                ST_ERROR_INDEX_OUT_OF_BOUNDS,
                f"indices must lie in [0, {size})",
            )

        super().__init__(values)
        self._length = size
        self._nnz = int(idx_arr.size)
        self._indices = idx_arr
        self._values = val_arr
        logger.debug("wrapped sparse vector view of length %d with %d entries", size, self._nnz)

    @property
    def length(self) -> int:
        return self._length

    @property
    def shape(self) -> Tuple[int]:
        return (self._length,)

    @property
    def nnz(self) -> int:
        """Number of structurally non-zero entries."""
        return self._nnz

    @property
    def indices(self) -> np.ndarray:
        """Read-only index array."""
        self._ensure_valid()
        out = self._indices.view()
        out.flags.writeable = False
        return out

    @property
    def values(self) -> np.ndarray:
        """Writable array over the caller's values."""
        self._ensure_valid()
        return self._values

    @property
    def has_sorted_indices(self) -> bool:
        self._ensure_valid()
        return _sorted_within_segments(self._indices, np.zeros(1, dtype=np.int64))

    def __len__(self) -> int:
        return self._length

    def __iter__(self) -> Iterator[SparseVectorEntry]:
        """Yield (index, value) for every stored entry, in storage order."""
        self._ensure_valid()
        for k in range(self._nnz):
            yield SparseVectorEntry(int(self._indices[k]), float(self._values[k]))

    def _find(self, i: int) -> int:
        hits = np.flatnonzero(self._indices == i)
        return int(hits[0]) if hits.size else -1

    def __getitem__(self, idx: int) -> float:
        """Value at position idx; positions that are not stored read 0.0."""
        self._ensure_valid()
        k = self._find(check_index(idx, self._length))
        return float(self._values[k]) if k >= 0 else 0.0

    def __setitem__(self, idx: int, value: float) -> None:
        """
        Overwrite a stored value.

        Raises:
            KeyError: If position idx is not stored
        """
        self._ensure_valid()
        k = self._find(check_index(idx, self._length))
        if k < 0:
            raise KeyError(f"entry {idx} is not stored; structure is fixed")
        self._values[k] = value

    def to_dense(self) -> np.ndarray:
        """Dense copy; duplicate entries are summed."""
        self._ensure_valid()
        dense = np.zeros(self._length, dtype=np.float64)
        np.add.at(dense, self._indices, self._values)
        return dense

    def _drop(self) -> None:
        self._indices = None
        self._values = None

    def __repr__(self) -> str:
        if not self.is_valid:
            return "<SparseVectorView [released]>"
        return f"<SparseVectorView length={self._length} nnz={self._nnz} [borrowed]>"
