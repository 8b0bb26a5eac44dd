"""Ownership and Borrow Tracking.

Views in the catalog borrow memory owned by their caller. A view is
meant to live only for the call in which the caller guarantees the
buffer is valid, so every view carries a ``BorrowTracker`` that records
where the memory came from and whether the borrow has ended.

Safety Model:
    1. OWNED data: the object manages its own buffer, always valid
    2. BORROWED data: valid until ``release()`` (or the end of a
       ``with`` block); afterwards every access raises ``ValueError``
"""

from typing import Any, Optional
from weakref import ref

from ._layout import Ownership

__all__ = [
    'BorrowTracker',
    'ensure_alive',
]


class BorrowTracker:
    """Tracks ownership and validity of borrowed data.

    Attributes:
        _ownership: OWNED or BORROWED.
        _weak_ref: Weak reference to the caller's source object.
        _strong_ref: Used when the source cannot be weakly referenced.
        _released: Whether the borrow has ended.

    Example:
        >>> tracker = BorrowTracker.borrowed(buffer)
        >>> tracker.is_valid
        True
        >>> tracker.release()
        >>> tracker.ensure_valid()
        Traceback (most recent call last):
        ...
        ValueError: view has been released
    """

    __slots__ = ('_ownership', '_weak_ref', '_strong_ref', '_released')

    def __init__(self, source: Optional[Any] = None, ownership: Ownership = Ownership.OWNED):
        self._ownership = ownership
        self._weak_ref: Optional[ref] = None
        self._strong_ref: Optional[Any] = None
        self._released = False

        if source is not None and ownership is Ownership.BORROWED:
            try:
                self._weak_ref = ref(source)
            except TypeError:
                # bytes, memoryview slices and the like
                self._strong_ref = source

    @classmethod
    def owned(cls) -> 'BorrowTracker':
        """Create tracker for owned data."""
        return cls(source=None, ownership=Ownership.OWNED)

    @classmethod
    def borrowed(cls, source: Any) -> 'BorrowTracker':
        """Create tracker for data borrowed from ``source``."""
        return cls(source=source, ownership=Ownership.BORROWED)

    @property
    def ownership(self) -> Ownership:
        return self._ownership

    @property
    def is_owned(self) -> bool:
        return self._ownership is Ownership.OWNED

    @property
    def is_borrowed(self) -> bool:
        return self._ownership is Ownership.BORROWED

    @property
    def is_valid(self) -> bool:
        """True unless a borrow has been released."""
        return not self._released

    @property
    def source(self) -> Optional[Any]:
        """The caller's object the data was borrowed from (None if owned,
        released, or no longer alive)."""
        if self._released:
            return None
        if self._strong_ref is not None:
            return self._strong_ref
        if self._weak_ref is not None:
            return self._weak_ref()
        return None

    def release(self) -> None:
        """End the borrow. Idempotent; a no-op for owned data."""
        if self._ownership is Ownership.OWNED:
            return
        self._released = True
        self._weak_ref = None
        self._strong_ref = None

    def ensure_valid(self) -> None:
        """Raise if the borrow has ended.

        Raises:
            ValueError: If the view was released.
        """
        if self._released:
            raise ValueError("view has been released")

    def __repr__(self) -> str:
        if self._ownership is Ownership.OWNED:
            return "BorrowTracker(owned)"
        if self._released:
            return "BorrowTracker(borrowed, released)"
        src = self.source
        name = type(src).__name__ if src is not None else 'unknown'
        return f"BorrowTracker(borrowed from {name})"


def ensure_alive(obj: Any) -> None:
    """Ensure object's data is still accessible.

    Args:
        obj: Any catalog object.

    Raises:
        ValueError: If obj is a released view.
    """
    tracker = getattr(obj, '_tracker', None)
    if tracker is not None:
        tracker.ensure_valid()
