"""
Buffer validation at the construction boundary.

Every view is built from memory the caller already owns. These helpers
turn a caller-supplied buffer (numpy array, buffer-protocol object or
raw address) into a flat numpy array that aliases the same memory, or
raise ``InvalidView``. Nothing here copies or allocates element storage.
"""

from __future__ import annotations

import ctypes
import numbers
from typing import Any, Union

import numpy as np

from ._dtypes import DType
from .errors import (
    InvalidView,
    ST_ERROR_NULL_POINTER,
    ST_ERROR_NOT_CONTIGUOUS,
    ST_ERROR_READ_ONLY,
    ST_ERROR_INVALID_ARGUMENT,
    ST_ERROR_TYPE_MISMATCH,
)

__all__ = ['as_buffer_array', 'flat_buffer', 'array_from_address', 'check_dim']


AddressLike = Union[int, ctypes.c_void_p, Any]


def check_dim(value: Any, name: str) -> int:
    """
    Validate a dimension argument.

    Raises:
        InvalidView: If value is not a non-negative integer
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidView(
            ST_ERROR_INVALID_ARGUMENT,
            f"{name} must be an integer, got {type(value).__name__}",
        )
    value = int(value)
    if value < 0:
        raise InvalidView(ST_ERROR_INVALID_ARGUMENT, f"{name} must be non-negative, got {value}")
    return value


def as_buffer_array(buffer: Any, name: str = "buffer") -> np.ndarray:
    """
    Expose a caller buffer as a numpy array without copying.

    Args:
        buffer: numpy array or object supporting the buffer protocol
        name: Argument name used in error messages

    Raises:
        InvalidView: If buffer is None, a Python sequence, or not a buffer
    """
    if buffer is None:
        raise InvalidView(ST_ERROR_NULL_POINTER, f"{name} is None")

    if isinstance(buffer, np.ndarray):
        return buffer

    if isinstance(buffer, (list, tuple)):
        raise InvalidView(
            ST_ERROR_TYPE_MISMATCH,
            f"{name} is a Python {type(buffer).__name__}; views do not copy. "
            f"Convert with np.asarray(..., dtype=np.float64) first.",
        )

    try:
        mv = memoryview(buffer)
    except TypeError:
        raise InvalidView(
            ST_ERROR_TYPE_MISMATCH,
            f"{name} of type {type(buffer).__name__} does not support the buffer protocol",
        )
    return np.asarray(mv)


def _check_element_type(arr: np.ndarray, dtype: DType, name: str) -> None:
    if dtype is DType.float64:
        ok = arr.dtype == np.float64
    elif dtype in (DType.int32, DType.int64):
        # Any native integer width is accepted for index arrays
        ok = np.issubdtype(arr.dtype, np.integer)
    else:
        ok = arr.dtype == dtype.numpy_dtype
    if not ok:
        raise InvalidView(
            ST_ERROR_TYPE_MISMATCH,
            f"{name} has dtype {arr.dtype}, expected {dtype} "
            f"(convert before wrapping, no implicit copy)",
        )


def flat_buffer(
    buffer: Any,
    dtype: DType,
    name: str = "buffer",
    *,
    writable: bool = False,
    one_dimensional: bool = False,
) -> np.ndarray:
    """
    Validate a caller buffer and return a flat zero-copy view of it.

    Args:
        buffer: numpy array or buffer-protocol object
        dtype: Required element type
        name: Argument name used in error messages
        writable: Require the memory to be writable
        one_dimensional: Reject arrays with more than one dimension

    Returns:
        1-D numpy array sharing memory with ``buffer``

    Raises:
        InvalidView: On any null/type/contiguity/writability problem
    """
    arr = as_buffer_array(buffer, name)
    _check_element_type(arr, dtype, name)

    if one_dimensional and arr.ndim > 1:
        raise InvalidView(
            ST_ERROR_INVALID_ARGUMENT,
            f"{name} must be one-dimensional, got {arr.ndim}D",
        )
    if not (arr.flags['C_CONTIGUOUS'] or arr.flags['F_CONTIGUOUS']):
        raise InvalidView(
            ST_ERROR_NOT_CONTIGUOUS,
            f"{name} must be contiguous. Use np.ascontiguousarray() before wrapping.",
        )
    if writable and not arr.flags['WRITEABLE']:
        raise InvalidView(ST_ERROR_READ_ONLY, f"{name} is read-only but the view is mutable")

    # Contiguous memory ravels in memory order without a copy
    return arr.ravel(order='K')


def _address_value(address: AddressLike) -> int:
    if address is None:
        return 0
    if isinstance(address, ctypes.c_void_p):
        return address.value or 0
    if isinstance(address, numbers.Integral) and not isinstance(address, bool):
        return int(address)
    try:
        return ctypes.cast(address, ctypes.c_void_p).value or 0
    except ctypes.ArgumentError:
        raise InvalidView(
            ST_ERROR_INVALID_ARGUMENT,
            f"address must be an int or ctypes pointer, got {type(address).__name__}",
        )


def array_from_address(address: AddressLike, length: int, dtype: DType) -> np.ndarray:
    """
    Map ``length`` elements starting at a raw address.

    Args:
        address: Integer address, ``c_void_p`` or typed ctypes pointer
        length: Number of elements the caller guarantees are readable
        dtype: Element type at that address

    Raises:
        InvalidView: If the address is null
    """
    length = check_dim(length, "length")
    addr = _address_value(address)
    if addr == 0:
        raise InvalidView(ST_ERROR_NULL_POINTER, "address is null")
    if length == 0:
        return np.empty(0, dtype=dtype.numpy_dtype)

    ctype = np.ctypeslib.as_ctypes_type(dtype.numpy_dtype)
    block = (ctype * length).from_address(addr)
    return np.ctypeslib.as_array(block)
