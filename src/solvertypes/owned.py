"""
Owning Dense Containers

Independently allocated, resizable 1-D buffers with value semantics:

    VectorXd (VecXd): real vector, matrix-algebra semantics
    VectorXi (VecXi): integer vector, matrix-algebra semantics
    ArrayXd:          real array, elementwise semantics
    ArrayXb:          boolean array, elementwise semantics (selection masks)

Semantics:
    - ``T()`` is empty, ``T(n)`` holds n zeros (False for ArrayXb)
    - ``copy()`` is deep; the copy shares no storage with the original
    - ``move()`` hands the buffer to a new object and leaves the source empty
    - ``resize(n)`` keeps the common prefix and zero-fills new slots

None of these types performs arithmetic. ``as_array()`` exposes the
buffer to numpy for that.

Example:
    >>> v = VectorXd.from_values([1.0, 2.0, 3.0])
    >>> w = v.copy()
    >>> w[0] = 10.0
    >>> v[0]
    1.0
    >>> u = move(v)
    >>> len(v), len(u)
    (0, 3)
"""

from __future__ import annotations

import logging
import numbers
from typing import Any, ClassVar, Iterable, Iterator, List, Optional, TypeVar, Union

import numpy as np

from ._base import check_index
from ._config import get_config
from ._dtypes import DType, normalize_dtype
from ._layout import Ownership, Semantics, Structure, TypeSpec

logger = logging.getLogger("solvertypes.owned")

__all__ = ['OwnedBuffer', 'VectorXd', 'VectorXi', 'ArrayXd', 'ArrayXb', 'move']

T = TypeVar('T', bound='OwnedBuffer')


def _check_size(size: Any) -> int:
    if isinstance(size, bool) or not isinstance(size, numbers.Integral):
        raise TypeError(f"size must be an integer, got {type(size).__name__}")
    size = int(size)
    if size < 0:
        raise ValueError(f"size must be non-negative, got {size}")
    return size


class OwnedBuffer:
    """
    Base class for owning 1-D containers.

    Attributes:
        size: Number of elements.
        dtype: Element type (DType).
        semantics: Matrix or elementwise.
    """

    spec: ClassVar[TypeSpec]

    __slots__ = ('_data', '__weakref__')

    def __init__(self, size: int = 0):
        """
        Allocate ``size`` zero-initialised elements.

        Raises:
            TypeError: If size is not an integer
            ValueError: If size is negative
        """
        self._data = np.zeros(_check_size(size), dtype=self._element_dtype())

    @classmethod
    def _element_dtype(cls) -> np.dtype:
        return cls.spec.dtype.numpy_dtype

    @classmethod
    def _adopt(cls: type[T], data: np.ndarray) -> T:
        """Wrap an array this object will exclusively own."""
        obj = cls.__new__(cls)
        obj._data = data
        return obj

    # -------------------------------------------------------------------------
    # Initialization Methods
    # -------------------------------------------------------------------------

    @classmethod
    def zeros(cls: type[T], size: int) -> T:
        """Create zero-initialized container."""
        return cls(size)

    @classmethod
    def from_values(cls: type[T], values: Iterable) -> T:
        """
        Create container holding a copy of ``values``.

        Args:
            values: Any 1-D iterable, list or numpy array

        Raises:
            ValueError: If values are not one-dimensional, or an integer
                        container is given non-integral values
        """
        if not isinstance(values, np.ndarray) and not hasattr(values, '__len__'):
            values = list(values)
        dtype = cls._element_dtype()
        if np.issubdtype(dtype, np.integer):
            src = np.asarray(values)
            if src.dtype.kind == 'f':
                if not np.all(np.isfinite(src)) or np.any(src != np.round(src)):
                    raise ValueError(f"{cls.__name__} requires integral values, got {src.dtype}")
            elif src.dtype.kind not in 'iub':
                raise ValueError(f"{cls.__name__} requires integral values, got {src.dtype}")
            values = src
        data = np.array(values, dtype=dtype, copy=True)
        if data.ndim != 1:
            raise ValueError(f"Expected 1-D values, got {data.ndim}D")
        return cls._adopt(data)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def size(self) -> int:
        return self._data.shape[0]

    @property
    def shape(self) -> tuple:
        return self._data.shape

    @property
    def is_empty(self) -> bool:
        return self._data.shape[0] == 0

    @property
    def dtype(self) -> DType:
        return normalize_dtype(self._data.dtype)

    @property
    def semantics(self) -> Semantics:
        return self.spec.semantics

    @property
    def ownership(self) -> Ownership:
        return Ownership.OWNED

    @property
    def is_view(self) -> bool:
        return False

    @property
    def nbytes(self) -> int:
        return self._data.nbytes

    # -------------------------------------------------------------------------
    # Element Access
    # -------------------------------------------------------------------------

    def __getitem__(self, idx: Union[int, slice]):
        """Element by index, or a new container for a slice."""
        if isinstance(idx, slice):
            return self._adopt(self._data[idx].copy())
        return self._data[check_index(idx, self.size)].item()

    def __setitem__(self, idx: Union[int, slice], value) -> None:
        if isinstance(idx, slice):
            self._data[idx] = value
        else:
            self._data[check_index(idx, self.size)] = value

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator:
        return iter(self._data.tolist())

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return bool(np.array_equal(self._data, other._data))

    __hash__ = None  # mutable

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def tolist(self) -> List:
        return self._data.tolist()

    def to_numpy(self) -> np.ndarray:
        """Independent numpy copy."""
        return self._data.copy()

    def as_array(self) -> np.ndarray:
        """
        The owned buffer itself, for numpy arithmetic.

        WARNING: the returned array aliases this container until the next
        resize() or move().
        """
        return self._data

    # -------------------------------------------------------------------------
    # Value Semantics
    # -------------------------------------------------------------------------

    def copy(self: T) -> T:
        """Create a deep copy."""
        return self._adopt(self._data.copy())

    def __copy__(self: T) -> T:
        return self.copy()

    def __deepcopy__(self: T, memo: Optional[dict] = None) -> T:
        return self.copy()

    def move(self: T) -> T:
        """
        Transfer the buffer to a new object.

        The source is left empty (size 0) and may be reused.
        """
        moved = self._adopt(self._data)
        self._data = np.zeros(0, dtype=self._data.dtype)
        logger.debug("moved %s of %d elements", type(self).__name__, moved.size)
        return moved

    def resize(self, size: int) -> None:
        """
        Change the number of elements.

        Elements ``[0, min(old, new))`` are kept; new slots are zero.
        """
        size = _check_size(size)
        old = self.size
        if size == old:
            return
        data = np.zeros(size, dtype=self._data.dtype)
        keep = min(old, size)
        data[:keep] = self._data[:keep]
        self._data = data
        logger.debug("resized %s from %d to %d", type(self).__name__, old, size)

    def fill(self, value) -> None:
        """Fill with a constant value."""
        self._data.fill(value)

    # -------------------------------------------------------------------------
    # Representation
    # -------------------------------------------------------------------------

    def __repr__(self) -> str:
        name = type(self).__name__
        values = self._data.tolist()
        if len(values) > 6:
            values = values[:3] + ['...'] + values[-3:]
        return f"{name}({values}, dtype={self.dtype})"


# =============================================================================
# Catalog Types
# =============================================================================

class VectorXd(OwnedBuffer):
    """Owning real vector (matrix-algebra semantics)."""

    spec = TypeSpec(
        alias='VecXd',
        structure=Structure.DENSE,
        ownership=Ownership.OWNED,
        dtype=DType.float64,
        semantics=Semantics.MATRIX,
        ndim=1,
        mutable=True,
    )

    __slots__ = ()

    def to_array(self) -> 'ArrayXd':
        """Copy into an elementwise real array."""
        return ArrayXd._adopt(self._data.copy())


class VectorXi(OwnedBuffer):
    """
    Owning integer vector (matrix-algebra semantics).

    Integer width is taken from ``get_config().index_dtype`` at
    construction (int32 unless configured otherwise).
    """

    spec = TypeSpec(
        alias='VecXi',
        structure=Structure.DENSE,
        ownership=Ownership.OWNED,
        dtype=DType.int32,
        semantics=Semantics.MATRIX,
        ndim=1,
        mutable=True,
    )

    __slots__ = ()

    @classmethod
    def _element_dtype(cls) -> np.dtype:
        return get_config().index_numpy_dtype


class ArrayXd(OwnedBuffer):
    """Owning real array (elementwise semantics)."""

    spec = TypeSpec(
        alias='ArrayXd',
        structure=Structure.DENSE,
        ownership=Ownership.OWNED,
        dtype=DType.float64,
        semantics=Semantics.ELEMENTWISE,
        ndim=1,
        mutable=True,
    )

    __slots__ = ()

    def to_vector(self) -> VectorXd:
        """Copy into a matrix-algebra real vector."""
        return VectorXd._adopt(self._data.copy())


class ArrayXb(OwnedBuffer):
    """
    Owning boolean array (elementwise semantics).

    Typically a selection mask; ``ArrayXb(n)`` is all False.
    """

    spec = TypeSpec(
        alias='ArrayXb',
        structure=Structure.DENSE,
        ownership=Ownership.OWNED,
        dtype=DType.bool,
        semantics=Semantics.ELEMENTWISE,
        ndim=1,
        mutable=True,
    )

    __slots__ = ()


def move(obj: T) -> T:
    """
    Transfer ownership of ``obj``'s buffer to a new object.

    Equivalent to ``obj.move()``; afterwards ``len(obj) == 0``.
    """
    return obj.move()
