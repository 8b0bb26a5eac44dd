"""
Tests for global configuration.
"""

import pytest
import numpy as np

from solvertypes import (
    DType,
    SparseVectorView,
    VectorXi,
    get_bounds_check,
    get_config,
    get_index_dtype,
    set_bounds_check,
    set_index_dtype,
)


class TestBoundsCheck:
    """Bounds checking toggle."""

    def test_default_on(self):
        assert get_bounds_check()

    def test_toggle(self):
        set_bounds_check(False)
        assert not get_bounds_check()
        set_bounds_check(True)
        assert get_bounds_check()

    def test_unchecked_sparse_read(self):
        """Without checks an out-of-range position just reads as absent."""
        vec = SparseVectorView(np.array([1]), np.array([2.0]), 3)
        set_bounds_check(False)
        assert vec[10] == 0.0

    def test_checked_sparse_read(self):
        vec = SparseVectorView(np.array([1]), np.array([2.0]), 3)
        with pytest.raises(IndexError):
            vec[10]

    @pytest.mark.parametrize("value", ["0", "false", "NO", "off"])
    def test_environment_disables(self, monkeypatch, value):
        monkeypatch.setenv("SOLVERTYPES_CHECK_BOUNDS", value)
        get_config().reset()
        assert not get_bounds_check()

    def test_environment_other_values_enable(self, monkeypatch):
        monkeypatch.setenv("SOLVERTYPES_CHECK_BOUNDS", "1")
        get_config().reset()
        assert get_bounds_check()


class TestIndexDtype:
    """Integer width of VecXi."""

    def test_default(self):
        assert get_index_dtype() is DType.int32

    def test_set(self):
        set_index_dtype(DType.int64)
        assert get_index_dtype() is DType.int64
        assert VectorXi.from_values([1, 2]).dtype is DType.int64

    def test_existing_vectors_keep_width(self):
        v = VectorXi(1)
        set_index_dtype('int64')
        assert v.dtype is DType.int32

    def test_rejects_non_integer(self):
        with pytest.raises(ValueError):
            set_index_dtype('float64')

    def test_rejects_unknown(self):
        with pytest.raises(ValueError):
            set_index_dtype('int8')
