"""
Data Type Definitions

Provides type-safe element type constants and validation for the
catalog. Every container in the catalog stores exactly one of these.
"""

from typing import Union
from enum import Enum

import numpy as np

__all__ = ['DType', 'float64', 'int32', 'int64', 'bool_']


class DType(Enum):
    """
    Element Type Enumeration.

    Example:
        >>> from solvertypes import DType, VectorXi
        >>> VectorXi(4).dtype is DType.int32
        True
    """

    float64 = 'float64'
    int32 = 'int32'
    int64 = 'int64'
    bool = 'bool'

    @property
    def numpy_dtype(self) -> np.dtype:
        """Equivalent numpy dtype."""
        return np.dtype(self.value)

    @property
    def itemsize(self) -> int:
        """Bytes per element."""
        return self.numpy_dtype.itemsize

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"DType.{self.name}"


# =============================================================================
# Module-Level Constants (For Clean Syntax)
# =============================================================================

float64 = DType.float64
int32 = DType.int32
int64 = DType.int64
bool_ = DType.bool


# =============================================================================
# Type Utilities
# =============================================================================

def normalize_dtype(dtype: Union[str, DType, np.dtype]) -> DType:
    """
    Normalize a dtype spelling to a DType member.

    Args:
        dtype: String, DType enum or numpy dtype

    Returns:
        DType member

    Raises:
        ValueError: If dtype is not one of the catalog element types

    Example:
        >>> normalize_dtype('float64')
        DType.float64
        >>> normalize_dtype(np.dtype(np.int32))
        DType.int32
    """
    if isinstance(dtype, DType):
        return dtype
    if isinstance(dtype, str):
        name = dtype
    else:
        try:
            name = np.dtype(dtype).name
        except TypeError:
            raise TypeError(f"dtype must be str, DType or numpy dtype, got {type(dtype)}")
    try:
        return DType(name)
    except ValueError:
        valid = [e.value for e in DType]
        raise ValueError(f"Unsupported dtype: {name}. Supported: {valid}")


def is_float_dtype(dtype: Union[str, DType, np.dtype]) -> bool:
    """Check if dtype is floating point."""
    return normalize_dtype(dtype) is DType.float64


def is_int_dtype(dtype: Union[str, DType, np.dtype]) -> bool:
    """Check if dtype is integer."""
    return normalize_dtype(dtype) in (DType.int32, DType.int64)
