"""
View Base Class

All four view types share the same lifecycle: they are created at the
call boundary over memory the caller owns, may be used as a context
manager, and stop referencing that memory once released.

Typical usage:
    arr = np.asfortranarray(np.random.randn(100, 50))

    with DenseMatrixView.wrap(arr) as mat:
        # arr MUST stay unmodified-in-shape and alive here
        value = mat(3, 7)
    # mat no longer references arr
"""

from __future__ import annotations

import logging
import operator
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Optional, Tuple, TypeVar

from ._config import get_config
from ._layout import Ownership, TypeSpec
from ._ownership import BorrowTracker

logger = logging.getLogger("solvertypes.views")

__all__ = ['ViewBase', 'check_index']

T = TypeVar('T', bound='ViewBase')


def check_index(idx: Any, n: int, what: str = "index") -> int:
    """
    Normalize and (when enabled) bounds-check an element index.

    Negative indices count from the end. With bounds checking disabled the
    range check is skipped and the raw position is returned.

    Raises:
        IndexError: If the index is outside ``[-n, n)`` and checking is on
        TypeError: If idx is not an integer
    """
    pos = operator.index(idx)
    if pos < 0:
        pos += n
    if get_config().check_bounds and not 0 <= pos < n:
        raise IndexError(f"{what} {idx} out of bounds [0, {n})")
    return pos


class ViewBase(ABC):
    """
    Abstract base class for borrowed views.

    A view never allocates, copies or frees the memory it references.
    Subclasses hold numpy arrays aliasing the caller's buffer and drop
    them in ``_drop()`` when released.
    """

    spec: ClassVar[TypeSpec]

    __slots__ = ('_tracker', '__weakref__')

    def __init__(self, source: Any):
        self._tracker = BorrowTracker.borrowed(source)

    def __enter__(self: T) -> T:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()

    def release(self) -> None:
        """
        End the borrow.

        NOTE: This does NOT free any data. The view simply stops
        referencing the caller's buffer; further access raises ValueError.
        """
        if not self._tracker.is_valid:
            return
        self._tracker.release()
        self._drop()
        logger.debug("released %s", type(self).__name__)

    @abstractmethod
    def _drop(self) -> None:
        """Forget every array aliasing the caller's memory."""
        ...

    def _ensure_valid(self) -> None:
        self._tracker.ensure_valid()

    # =========================================================================
    # Common Properties
    # =========================================================================

    @property
    def ownership(self) -> Ownership:
        return Ownership.BORROWED

    @property
    def is_view(self) -> bool:
        return True

    @property
    def is_valid(self) -> bool:
        """False once the view has been released."""
        return self._tracker.is_valid

    @property
    def source(self) -> Optional[Any]:
        """The caller's object this view borrows from, if still known."""
        return self._tracker.source

    @property
    @abstractmethod
    def shape(self) -> Tuple[int, ...]:
        ...

    @property
    def size(self) -> int:
        """Number of logical element positions (product of the shape)."""
        n = 1
        for dim in self.shape:
            n *= dim
        return n

    @property
    def ndim(self) -> int:
        return len(self.shape)

    @property
    def dtype(self):
        return self.spec.dtype
