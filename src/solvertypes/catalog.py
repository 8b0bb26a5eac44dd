"""Type Catalog.

The fixed vocabulary of numeric container types, keyed by their short
alias. Solver code declares, per parameter, which catalog type it takes;
``describe()`` recovers the four properties (structure, ownership,
element type, semantics) from any instance or class.

    Alias         Class              Structure  Ownership  Element  Semantics
    -----------------------------------------------------------------------
    MapMat        DenseMatrixView    dense      borrowed   float64  matrix
    MapVec        DenseVectorView    dense      borrowed   float64  matrix
    MapSparseMat  SparseMatrixView   sparse     borrowed   float64  matrix
    MapSparseVec  SparseVectorView   sparse     borrowed   float64  matrix
    VecXd         VectorXd           dense      owned      float64  matrix
    VecXi         VectorXi           dense      owned      int32*   matrix
    ArrayXd       ArrayXd            dense      owned      float64  elementwise
    ArrayXb       ArrayXb            dense      owned      bool     elementwise

    * int64 when configured with ``set_index_dtype()``.
"""

import dataclasses
from typing import Any, Dict, Type

from ._layout import TypeSpec
from .dense import DenseMatrixView, DenseVectorView
from .owned import ArrayXb, ArrayXd, VectorXd, VectorXi
from .sparse import SparseMatrixView, SparseVectorView

__all__ = ['CATALOG', 'TYPES', 'lookup', 'type_for', 'describe']


_CLASSES = (
    DenseMatrixView,
    DenseVectorView,
    SparseMatrixView,
    SparseVectorView,
    VectorXd,
    VectorXi,
    ArrayXd,
    ArrayXb,
)

# alias -> TypeSpec
CATALOG: Dict[str, TypeSpec] = {cls.spec.alias: cls.spec for cls in _CLASSES}

# alias -> class
TYPES: Dict[str, Type] = {cls.spec.alias: cls for cls in _CLASSES}


def lookup(alias: str) -> TypeSpec:
    """
    TypeSpec for a catalog alias.

    Raises:
        KeyError: If alias is not in the catalog
    """
    try:
        return CATALOG[alias]
    except KeyError:
        raise KeyError(f"Unknown catalog type '{alias}'. Known: {sorted(CATALOG)}") from None


def type_for(alias: str) -> Type:
    """Class implementing a catalog alias."""
    lookup(alias)
    return TYPES[alias]


def describe(obj: Any) -> TypeSpec:
    """
    TypeSpec of a catalog instance or class.

    Classes (and ``CATALOG``) report the default element type. An instance
    reports its actual one, so a ``VectorXi`` built after
    ``set_index_dtype('int64')`` describes itself as int64.

    Raises:
        TypeError: If obj is not a catalog type
    """
    cls = obj if isinstance(obj, type) else type(obj)
    for klass in _CLASSES:
        if issubclass(cls, klass):
            spec = klass.spec
            if cls is not obj and obj.dtype is not spec.dtype:
                spec = dataclasses.replace(spec, dtype=obj.dtype)
            return spec
    raise TypeError(f"{cls.__name__} is not a catalog type")
