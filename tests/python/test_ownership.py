"""
Tests for borrow tracking and error types.
"""

import pytest
import numpy as np

from solvertypes import DenseVectorView, InvalidView, ShapeMismatch, SolverTypesError, VectorXd
from solvertypes._layout import Ownership
from solvertypes._ownership import BorrowTracker, ensure_alive


# =============================================================================
# BorrowTracker
# =============================================================================

class TestBorrowTracker:
    """Test BorrowTracker states."""

    def test_owned(self):
        tracker = BorrowTracker.owned()
        assert tracker.is_owned
        assert not tracker.is_borrowed
        assert tracker.ownership is Ownership.OWNED
        assert tracker.is_valid
        assert tracker.source is None
        # Releasing owned data is a no-op
        tracker.release()
        assert tracker.is_valid

    def test_borrowed_weak_source(self):
        buf = np.zeros(3)
        tracker = BorrowTracker.borrowed(buf)
        assert tracker.is_borrowed
        assert tracker.source is buf
        assert "ndarray" in repr(tracker)

    def test_borrowed_unweakrefable_source(self):
        data = b"\x00" * 8
        tracker = BorrowTracker.borrowed(data)
        assert tracker.source is data

    def test_release(self):
        tracker = BorrowTracker.borrowed(np.zeros(1))
        tracker.release()
        assert not tracker.is_valid
        assert tracker.source is None
        assert "released" in repr(tracker)
        with pytest.raises(ValueError):
            tracker.ensure_valid()

    def test_ensure_alive(self):
        view = DenseVectorView(np.zeros(2))
        ensure_alive(view)
        ensure_alive(VectorXd(2))
        view.release()
        with pytest.raises(ValueError):
            ensure_alive(view)

    def test_view_source(self):
        buf = np.zeros(2)
        view = DenseVectorView(buf)
        assert view.source is buf
        view.release()
        assert view.source is None


# =============================================================================
# Errors
# =============================================================================

class TestErrors:
    """Test error hierarchy and codes."""

    def test_hierarchy(self):
        assert issubclass(InvalidView, SolverTypesError)
        assert issubclass(InvalidView, ValueError)
        assert ShapeMismatch is InvalidView

    def test_default_message(self):
        err = InvalidView(SolverTypesError.ERROR_DIMENSION_MISMATCH)
        assert err.code == 11
        assert err.message == "Dimension mismatch"
        assert "Dimension mismatch" in str(err)

    def test_from_code(self):
        err = InvalidView.from_code(SolverTypesError.ERROR_NULL_POINTER, "wrap matrix")
        assert isinstance(err, InvalidView)
        assert err.message == "wrap matrix: Null buffer"

    def test_unknown_code(self):
        err = SolverTypesError(999)
        assert "999" in err.message
