"""Layout Descriptors.

This module defines the four properties every catalog type declares
about the data it carries:

    - Structure: dense (every position stored) or sparse (only
      structural non-zeros stored, indexed by position)
    - Ownership: owned buffer or borrowed view of caller memory
    - Element type: see ``_dtypes.DType``
    - Semantics: matrix-algebra or elementwise-array

A ``TypeSpec`` bundles them together with the shape rank and
mutability, and is attached to every catalog class as ``spec``.

Example:
    >>> from solvertypes import DenseMatrixView
    >>> DenseMatrixView.spec.ownership
    <Ownership.BORROWED: 'borrowed'>
"""

from enum import Enum
from dataclasses import dataclass

from ._dtypes import DType

__all__ = [
    'Structure',
    'Ownership',
    'Semantics',
    'TypeSpec',
]


# =============================================================================
# Enumerations
# =============================================================================

class Structure(Enum):
    """Storage structure.

    Attributes:
        DENSE: Every element position is physically stored.
        SPARSE: Only structurally non-zero elements are stored, together
                with their positions (compressed-column for matrices).
    """
    DENSE = 'dense'
    SPARSE = 'sparse'


class Ownership(Enum):
    """Data ownership model.

    Attributes:
        OWNED: The object allocated its buffer and manages it with value
               semantics. Copy is deep, move transfers the buffer.

        BORROWED: The object references memory owned by the caller.
                  It never allocates or frees that memory and must not
                  outlive it.
    """
    OWNED = 'owned'
    BORROWED = 'borrowed'


class Semantics(Enum):
    """Algebraic intent of a container.

    Attributes:
        MATRIX: Linear-algebra vector/matrix (products, norms).
        ELEMENTWISE: Array of independent coefficients (masks, weights).
    """
    MATRIX = 'matrix'
    ELEMENTWISE = 'elementwise'


# =============================================================================
# Type Specification
# =============================================================================

@dataclass(frozen=True)
class TypeSpec:
    """Static description of one catalog type.

    Attributes:
        alias: Short catalog name (``MapMat``, ``VecXd``, ...).
        structure: Dense or sparse storage.
        ownership: Owned or borrowed.
        dtype: Element type.
        semantics: Matrix or elementwise.
        ndim: 1 for vectors/arrays, 2 for matrices.
        mutable: Whether element values may be written.
    """
    alias: str
    structure: Structure
    ownership: Ownership
    dtype: DType
    semantics: Semantics
    ndim: int
    mutable: bool

    @property
    def is_view(self) -> bool:
        return self.ownership is Ownership.BORROWED

    @property
    def is_sparse(self) -> bool:
        return self.structure is Structure.SPARSE

    def __repr__(self) -> str:
        return (
            f"TypeSpec({self.alias}: {self.structure.value}, "
            f"{self.ownership.value}, {self.dtype}, {self.semantics.value}, "
            f"ndim={self.ndim}, {'mutable' if self.mutable else 'read-only'})"
        )
