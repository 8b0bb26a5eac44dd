"""
Error handling for solvertypes.

The only checked failure in the catalog is construction of a view over a
buffer whose declared shape does not agree with what was supplied. Those
failures raise ``InvalidView`` immediately; nothing is truncated, padded
or retried.
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# Error Codes
# =============================================================================

ST_OK = 0

# Buffer errors (1-9)
ST_ERROR_NULL_POINTER = 1
ST_ERROR_NOT_CONTIGUOUS = 2
ST_ERROR_READ_ONLY = 3

# Argument errors (10-19)
ST_ERROR_INVALID_ARGUMENT = 10
ST_ERROR_DIMENSION_MISMATCH = 11
ST_ERROR_INDEX_OUT_OF_BOUNDS = 14

# Type errors (20-29)
ST_ERROR_TYPE_MISMATCH = 21


_ERROR_MESSAGES = {
    ST_OK: "Success",
    ST_ERROR_NULL_POINTER: "Null buffer",
    ST_ERROR_NOT_CONTIGUOUS: "Buffer is not contiguous",
    ST_ERROR_READ_ONLY: "Buffer is read-only",
    ST_ERROR_INVALID_ARGUMENT: "Invalid argument",
    ST_ERROR_DIMENSION_MISMATCH: "Dimension mismatch",
    ST_ERROR_INDEX_OUT_OF_BOUNDS: "Index out of bounds",
    ST_ERROR_TYPE_MISMATCH: "Type mismatch",
}


# =============================================================================
# Exception Classes
# =============================================================================

class SolverTypesError(Exception):
    """
    Base exception for all solvertypes errors.
    """

    OK = ST_OK
    ERROR_NULL_POINTER = ST_ERROR_NULL_POINTER
    ERROR_NOT_CONTIGUOUS = ST_ERROR_NOT_CONTIGUOUS
    ERROR_READ_ONLY = ST_ERROR_READ_ONLY
    ERROR_INVALID_ARGUMENT = ST_ERROR_INVALID_ARGUMENT
    ERROR_DIMENSION_MISMATCH = ST_ERROR_DIMENSION_MISMATCH
    ERROR_INDEX_OUT_OF_BOUNDS = ST_ERROR_INDEX_OUT_OF_BOUNDS
    ERROR_TYPE_MISMATCH = ST_ERROR_TYPE_MISMATCH

    def __init__(self, code: int, message: Optional[str] = None):
        """
        Create exception.

        Args:
            code: One of the ST_ERROR_* codes
            message: Optional detailed message (generic text if not provided)
        """
        self.code = code
        if message is None:
            message = _ERROR_MESSAGES.get(code, f"Unknown error (code={code})")
        self.message = message
        super().__init__(f"Error {code}: {message}")

    @classmethod
    def from_code(cls, code: int, context: str = "") -> "SolverTypesError":
        """Create exception from error code with optional context."""
        base_msg = _ERROR_MESSAGES.get(code, "Unknown error")
        msg = f"{context}: {base_msg}" if context else base_msg
        return cls(code, msg)


class InvalidView(SolverTypesError, ValueError):
    """
    A view could not be constructed over the supplied buffer.

    Raised for null buffers, wrong element types, non-contiguous memory,
    and any disagreement between declared dimensions and buffer lengths.
    Subclasses ``ValueError`` so generic callers can catch it as bad input.
    """


# Same condition, named after the most common cause
ShapeMismatch = InvalidView
