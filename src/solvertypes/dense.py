"""
Dense Views - read-only views over caller-owned doubles.

Provides:
    - DenseMatrixView (MapMat): rows x cols, column-major
    - DenseVectorView (MapVec): contiguous 1-D

Layout:
    Matrices are always interpreted column-major: element (i, j) lives at
    offset ``i + j * rows`` of the supplied buffer. This matches R's
    storage of numeric matrices, so an R matrix can be passed straight
    through.

Neither class copies the buffer. The caller keeps the memory alive for
as long as the view is in use; see ``ViewBase`` for the lifecycle.

Example:
    >>> buf = np.array([1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
    >>> mat = DenseMatrixView(buf, 2, 3)
    >>> mat(0, 1), mat(1, 2)
    (3.0, 6.0)
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Optional, Tuple

import numpy as np

from ._base import ViewBase, check_index
from ._buffers import array_from_address, as_buffer_array, check_dim, flat_buffer
from ._dtypes import DType
from ._layout import Ownership, Semantics, Structure, TypeSpec
from .errors import InvalidView, ST_ERROR_DIMENSION_MISMATCH, ST_ERROR_NOT_CONTIGUOUS
from .owned import VectorXd

logger = logging.getLogger("solvertypes.views")

__all__ = ['DenseMatrixView', 'DenseVectorView']


def _read_only(arr: np.ndarray) -> np.ndarray:
    """New array object over the same memory with writes disabled."""
    view = arr.view()
    view.flags.writeable = False
    return view


class DenseMatrixView(ViewBase):
    """
    Read-only, non-owning view of a column-major dense matrix.

    Attributes:
        rows: Number of rows.
        cols: Number of columns.
        shape: (rows, cols).

    WARNING:
        - No data is copied
        - Caller MUST keep the buffer alive and unchanged in size
    """

    spec = TypeSpec(
        alias='MapMat',
        structure=Structure.DENSE,
        ownership=Ownership.BORROWED,
        dtype=DType.float64,
        semantics=Semantics.MATRIX,
        ndim=2,
        mutable=False,
    )

    __slots__ = ('_matrix', '_rows', '_cols')

    def __init__(self, buffer: Any, rows: int, cols: int):
        """
        Create view over ``buffer`` interpreted as rows x cols, column-major.

        Args:
            buffer: float64 numpy array or buffer-protocol object holding
                    exactly rows*cols doubles. A 2-D array must be
                    Fortran-ordered and have shape (rows, cols).
            rows: Row count
            cols: Column count

        Raises:
            InvalidView: If the buffer is null, not float64, not contiguous,
                         or its length is not rows * cols
        """
        rows = check_dim(rows, "rows")
        cols = check_dim(cols, "cols")

        arr = as_buffer_array(buffer, "buffer")
        if arr.ndim > 2:
            raise InvalidView(
                ST_ERROR_DIMENSION_MISMATCH,
                f"buffer must be 1-D or 2-D, got {arr.ndim}D",
            )
        if arr.ndim == 2:
            if arr.shape != (rows, cols):
                raise InvalidView(
                    ST_ERROR_DIMENSION_MISMATCH,
                    f"buffer has shape {arr.shape}, declared ({rows}, {cols})",
                )
            if not arr.flags['F_CONTIGUOUS']:
                raise InvalidView(
                    ST_ERROR_NOT_CONTIGUOUS,
                    "2-D buffer must be column-major. Use np.asfortranarray() before wrapping.",
                )

        flat = flat_buffer(arr, DType.float64, "buffer")
        if flat.size != rows * cols:
            raise InvalidView(
                ST_ERROR_DIMENSION_MISMATCH,
                f"buffer has {flat.size} elements, expected rows*cols = "
                f"{rows}*{cols} = {rows * cols}",
            )

        super().__init__(buffer)
        self._rows = rows
        self._cols = cols
        self._matrix = _read_only(flat.reshape((rows, cols), order='F'))
        logger.debug("wrapped %dx%d dense matrix view", rows, cols)

    # =========================================================================
    # Factory Methods
    # =========================================================================

    @classmethod
    def wrap(cls, data: np.ndarray) -> "DenseMatrixView":
        """
        Create view over a numpy array, taking the shape from it.

        1-D arrays are treated as (n, 1) column vectors.

        Args:
            data: float64 array, 1-D or Fortran-ordered 2-D
        """
        arr = as_buffer_array(data, "data")
        if arr.ndim == 1:
            return cls(arr, arr.shape[0], 1)
        if arr.ndim == 2:
            return cls(arr, arr.shape[0], arr.shape[1])
        raise InvalidView(ST_ERROR_DIMENSION_MISMATCH, f"Expected 1D or 2D array, got {arr.ndim}D")

    @classmethod
    def from_address(cls, address: Any, rows: int, cols: int) -> "DenseMatrixView":
        """
        Create view over rows*cols doubles at a raw address.

        WARNING: nothing can verify the memory; the caller guarantees
        rows*cols readable doubles start at ``address``.

        Raises:
            InvalidView: If the address is null
        """
        rows = check_dim(rows, "rows")
        cols = check_dim(cols, "cols")
        return cls(array_from_address(address, rows * cols, DType.float64), rows, cols)

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

    # =========================================================================
    # Element Access
    # =========================================================================

    def __call__(self, row: int, col: int) -> float:
        """Element at (row, col)."""
        self._ensure_valid()
        i = check_index(row, self._rows, "row")
        j = check_index(col, self._cols, "col")
        return float(self._matrix[i, j])

    def __getitem__(self, key) -> float:
        if not isinstance(key, tuple) or len(key) != 2:
            raise TypeError("Index must be (row, col) tuple")
        return self(key[0], key[1])

    def __iter__(self) -> Iterator[np.ndarray]:
        """Iterate over rows (read-only strided arrays), matching len()."""
        self._ensure_valid()
        return iter(self._matrix)

    def col(self, j: int) -> np.ndarray:
        """Column j as a read-only zero-copy array."""
        self._ensure_valid()
        return self._matrix[:, check_index(j, self._cols, "col")]

    def row(self, i: int) -> np.ndarray:
        """Row i as a read-only strided array."""
        self._ensure_valid()
        return self._matrix[check_index(i, self._rows, "row"), :]

    def as_array(self) -> np.ndarray:
        """Read-only (rows, cols) numpy array over the caller's memory."""
        self._ensure_valid()
        return self._matrix

    def to_numpy(self) -> np.ndarray:
        """Independent copy as a (rows, cols) numpy array."""
        self._ensure_valid()
        return np.array(self._matrix, order='F', copy=True)

    def _drop(self) -> None:
        self._matrix = None

    def __len__(self) -> int:
        return self._rows

    def __repr__(self) -> str:
        if not self.is_valid:
            return "<DenseMatrixView [released]>"
        return f"<DenseMatrixView {self._rows}x{self._cols} [borrowed, read-only]>"


class DenseVectorView(ViewBase):
    """
    Read-only, non-owning view of contiguous doubles.

    Example:
        >>> vec = DenseVectorView(np.arange(4.0))
        >>> len(vec), vec[3]
        (4, 3.0)
    """

    spec = TypeSpec(
        alias='MapVec',
        structure=Structure.DENSE,
        ownership=Ownership.BORROWED,
        dtype=DType.float64,
        semantics=Semantics.MATRIX,
        ndim=1,
        mutable=False,
    )

    __slots__ = ('_vector', '_length')

    def __init__(self, buffer: Any, length: Optional[int] = None):
        """
        Create view over ``buffer``.

        Args:
            buffer: float64 numpy array or buffer-protocol object
            length: Declared length; must equal the buffer length when given

        Raises:
            InvalidView: If the buffer is null, not float64, not contiguous,
                         or its length differs from ``length``
        """
        flat = flat_buffer(buffer, DType.float64, "buffer", one_dimensional=True)
        if length is not None:
            length = check_dim(length, "length")
            if flat.size != length:
                raise InvalidView(
                    ST_ERROR_DIMENSION_MISMATCH,
                    f"buffer has {flat.size} elements, declared length {length}",
                )

        super().__init__(buffer)
        self._length = flat.size
        self._vector = _read_only(flat)
        logger.debug("wrapped dense vector view of length %d", self._length)

    @classmethod
    def from_address(cls, address: Any, length: int) -> "DenseVectorView":
        """
        Create view over ``length`` doubles at a raw address.

        Raises:
            InvalidView: If the address is null
        """
        return cls(array_from_address(address, length, DType.float64))

    @property
    def length(self) -> int:
        return self._length

    @property
    def shape(self) -> Tuple[int]:
        return (self._length,)

    def __getitem__(self, idx: int) -> float:
        self._ensure_valid()
        return float(self._vector[check_index(idx, self._length)])

    def __iter__(self) -> Iterator[float]:
        self._ensure_valid()
        for value in self._vector:
            yield float(value)

    def __len__(self) -> int:
        return self._length

    def as_array(self) -> np.ndarray:
        """Read-only 1-D numpy array over the caller's memory."""
        self._ensure_valid()
        return self._vector

    def to_numpy(self) -> np.ndarray:
        """Independent copy as a numpy array."""
        self._ensure_valid()
        return self._vector.copy()

    def to_owned(self) -> VectorXd:
        """Copy into an owning real vector."""
        self._ensure_valid()
        return VectorXd.from_values(self._vector)

    def _drop(self) -> None:
        self._vector = None

    def __repr__(self) -> str:
        if not self.is_valid:
            return "<DenseVectorView [released]>"
        return f"<DenseVectorView length={self._length} [borrowed, read-only]>"
