"""
solvertypes - Numeric view/value types for solver code

A shared vocabulary of numeric containers for code that receives buffers
from a foreign caller (e.g. an R session) and hands them to a solver:

- Zero-copy views over caller memory (dense and CSC sparse)
- Owning, resizable vectors and arrays with value semantics
- Construction-time shape validation (InvalidView)

Architecture:
    ┌──────────────────────────────────────────────┐
    │  Structure: DENSE | SPARSE                   │
    │  Ownership: OWNED | BORROWED                 │
    │  Element:   float64 | int32/int64 | bool     │
    │  Semantics: MATRIX | ELEMENTWISE             │
    └──────────────────────────────────────────────┘

Example:
    >>> import numpy as np
    >>> import solvertypes as st
    >>>
    >>> buf = np.array([1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
    >>> with st.MapMat(buf, 2, 3) as mat:   # column-major, no copy
    ...     mat(1, 2)
    6.0
    >>> v = st.VecXd(3)                      # owning, zero-initialised
    >>> st.describe(v).semantics
    <Semantics.MATRIX: 'matrix'>
"""

__version__ = '0.1.0'

from ._dtypes import DType, float64, int32, int64, bool_
from ._layout import Structure, Ownership, Semantics, TypeSpec
from ._config import (
    get_config,
    set_bounds_check,
    get_bounds_check,
    set_index_dtype,
    get_index_dtype,
)
from .errors import SolverTypesError, InvalidView, ShapeMismatch
from .dense import DenseMatrixView, DenseVectorView
from .sparse import SparseMatrixView, SparseVectorView, SparseEntry, SparseVectorEntry
from .owned import OwnedBuffer, VectorXd, VectorXi, ArrayXd, ArrayXb, move
from .catalog import CATALOG, lookup, type_for, describe

# =============================================================================
# Catalog Aliases
# =============================================================================

MapMat = DenseMatrixView
MapVec = DenseVectorView
MapSparseMat = SparseMatrixView
MapSparseVec = SparseVectorView
VecXd = VectorXd
VecXi = VectorXi

__all__ = [
    # Views
    'DenseMatrixView',
    'DenseVectorView',
    'SparseMatrixView',
    'SparseVectorView',
    'SparseEntry',
    'SparseVectorEntry',

    # Owning types
    'OwnedBuffer',
    'VectorXd',
    'VectorXi',
    'ArrayXd',
    'ArrayXb',
    'move',

    # Aliases
    'MapMat',
    'MapVec',
    'MapSparseMat',
    'MapSparseVec',
    'VecXd',
    'VecXi',

    # Catalog
    'CATALOG',
    'lookup',
    'type_for',
    'describe',
    'TypeSpec',
    'Structure',
    'Ownership',
    'Semantics',

    # Element types
    'DType',
    'float64',
    'int32',
    'int64',
    'bool_',

    # Configuration
    'get_config',
    'set_bounds_check',
    'get_bounds_check',
    'set_index_dtype',
    'get_index_dtype',

    # Errors
    'SolverTypesError',
    'InvalidView',
    'ShapeMismatch',
]
