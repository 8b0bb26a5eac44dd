"""
Global configuration for solvertypes.

Provides:
- Bounds checking toggle for element access (the equivalent of a debug build)
- Integer width used by integer vectors
"""

from __future__ import annotations

import os
import logging
from typing import Union

import numpy as np

from ._dtypes import DType, normalize_dtype

logger = logging.getLogger("solvertypes.config")

_BOUNDS_ENV = 'SOLVERTYPES_CHECK_BOUNDS'


def _bounds_from_env() -> bool:
    """Bounds checking is on unless the environment disables it."""
    return os.environ.get(_BOUNDS_ENV, '').lower() not in ('0', 'false', 'no', 'off')


# =============================================================================
# Global Configuration State
# =============================================================================

class _Config:
    """
    Global configuration singleton.
    """

    def __init__(self):
        self._check_bounds = _bounds_from_env()
        # C ``int`` is 32 bits on every platform R supports
        self._index_dtype = DType.int32

    @property
    def check_bounds(self) -> bool:
        """Whether element access validates indices."""
        return self._check_bounds

    @check_bounds.setter
    def check_bounds(self, value: bool):
        self._check_bounds = bool(value)

    @property
    def index_dtype(self) -> DType:
        """Element type of integer vectors."""
        return self._index_dtype

    @index_dtype.setter
    def index_dtype(self, value: Union[DType, str]):
        value = normalize_dtype(value)
        if value not in (DType.int32, DType.int64):
            raise ValueError(f"index dtype must be int32 or int64, got {value}")
        self._index_dtype = value

    @property
    def index_numpy_dtype(self) -> np.dtype:
        return self._index_dtype.numpy_dtype

    def reset(self) -> None:
        """Restore defaults (environment is re-read)."""
        self.__init__()


# Global config instance
_config = _Config()


# =============================================================================
# Public API
# =============================================================================

def get_config() -> _Config:
    """Get global configuration instance."""
    return _config


def set_bounds_check(enabled: bool) -> None:
    """
    Enable or disable bounds checking for element access.

    Example:
        >>> solvertypes.set_bounds_check(False)  # release-build behaviour
    """
    _config.check_bounds = enabled
    logger.info("bounds checking %s", "enabled" if _config.check_bounds else "disabled")


def get_bounds_check() -> bool:
    return _config.check_bounds


def set_index_dtype(dtype: Union[DType, str]) -> None:
    """
    Set integer width for integer vectors created afterwards.

    Args:
        dtype: 'int32' or 'int64'
    """
    _config.index_dtype = dtype
    logger.info("integer vector dtype set to %s", _config.index_dtype)


def get_index_dtype() -> DType:
    return _config.index_dtype
