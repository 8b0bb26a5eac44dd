"""
Tests for dense views (MapMat, MapVec).
"""

import array
import itertools

import pytest
import numpy as np

from solvertypes import (
    DenseMatrixView,
    DenseVectorView,
    InvalidView,
    SolverTypesError,
    VectorXd,
)


# =============================================================================
# Dense Matrix View
# =============================================================================

class TestDenseMatrixConstruction:
    """Construction and shape reporting."""

    def test_column_major_example(self, column_major_buffer):
        """Element (i, j) reads buffer[i + j*rows]."""
        view = DenseMatrixView(column_major_buffer, 2, 3)
        assert view.rows == 2
        assert view.cols == 3
        assert view.shape == (2, 3)
        assert view(0, 0) == 1.0
        assert view(1, 0) == 2.0
        assert view(0, 1) == 3.0
        assert view(1, 2) == 6.0

    def test_every_offset_reads_back(self):
        """All valid (i, j) read the matching offset for several shapes."""
        for rows, cols in [(1, 1), (3, 4), (5, 2), (1, 7)]:
            buf = np.arange(rows * cols, dtype=np.float64)
            view = DenseMatrixView(buf, rows, cols)
            for i, j in itertools.product(range(rows), range(cols)):
                assert view(i, j) == buf[i + j * rows]

    def test_tuple_indexing(self, column_major_buffer):
        view = DenseMatrixView(column_major_buffer, 2, 3)
        assert view[1, 1] == 4.0

    def test_iterates_rows(self, column_major_buffer):
        view = DenseMatrixView(column_major_buffer, 2, 3)
        rows = list(view)
        assert len(rows) == len(view) == 2
        np.testing.assert_array_equal(rows[0], [1.0, 3.0, 5.0])
        np.testing.assert_array_equal(rows[1], [2.0, 4.0, 6.0])
        with pytest.raises(ValueError):
            rows[0][0] = 9.0

    def test_zero_size(self):
        """Empty shapes construct without error."""
        for rows, cols in [(0, 0), (0, 3), (4, 0)]:
            view = DenseMatrixView(np.empty(0), rows, cols)
            assert view.shape == (rows, cols)
            assert view.size == 0

    def test_wrap_fortran_array(self):
        data = np.asfortranarray(np.arange(6.0).reshape(2, 3))
        view = DenseMatrixView.wrap(data)
        assert view.shape == (2, 3)
        for i, j in itertools.product(range(2), range(3)):
            assert view(i, j) == data[i, j]

    def test_wrap_1d_is_column(self):
        view = DenseMatrixView.wrap(np.arange(4.0))
        assert view.shape == (4, 1)

    def test_buffer_protocol_object(self):
        buf = array.array('d', [1.0, 2.0, 3.0, 4.0])
        view = DenseMatrixView(buf, 2, 2)
        assert view(1, 1) == 4.0

    def test_from_address(self, column_major_buffer):
        view = DenseMatrixView.from_address(column_major_buffer.ctypes.data, 2, 3)
        assert view(1, 2) == 6.0


class TestDenseMatrixValidation:
    """Construction-time failures raise InvalidView."""

    def test_length_mismatch(self):
        with pytest.raises(InvalidView) as exc_info:
            DenseMatrixView(np.arange(5.0), 2, 3)
        assert exc_info.value.code == SolverTypesError.ERROR_DIMENSION_MISMATCH

    def test_longer_buffer_is_not_truncated(self):
        with pytest.raises(InvalidView):
            DenseMatrixView(np.arange(7.0), 2, 3)

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            DenseMatrixView(np.arange(5.0), 2, 3)

    def test_none_buffer(self):
        with pytest.raises(InvalidView) as exc_info:
            DenseMatrixView(None, 2, 3)
        assert exc_info.value.code == SolverTypesError.ERROR_NULL_POINTER

    def test_null_address(self):
        with pytest.raises(InvalidView):
            DenseMatrixView.from_address(0, 2, 3)

    def test_python_list_rejected(self):
        with pytest.raises(InvalidView):
            DenseMatrixView([1.0, 2.0, 3.0, 4.0], 2, 2)

    def test_wrong_dtype(self):
        with pytest.raises(InvalidView) as exc_info:
            DenseMatrixView(np.arange(6, dtype=np.int64), 2, 3)
        assert exc_info.value.code == SolverTypesError.ERROR_TYPE_MISMATCH

    def test_non_contiguous(self):
        with pytest.raises(InvalidView) as exc_info:
            DenseMatrixView(np.arange(12.0)[::2], 2, 3)
        assert exc_info.value.code == SolverTypesError.ERROR_NOT_CONTIGUOUS

    def test_row_major_2d_rejected(self):
        with pytest.raises(InvalidView):
            DenseMatrixView(np.arange(6.0).reshape(2, 3), 2, 3)

    def test_2d_shape_mismatch(self):
        data = np.asfortranarray(np.arange(6.0).reshape(3, 2))
        with pytest.raises(InvalidView):
            DenseMatrixView(data, 2, 3)

    def test_row_major_memoryview_rejected(self):
        """A row-major buffer is not reinterpreted as column-major."""
        data = np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
        with pytest.raises(InvalidView) as exc_info:
            DenseMatrixView(memoryview(data), 2, 3)
        assert exc_info.value.code == SolverTypesError.ERROR_NOT_CONTIGUOUS

    def test_column_major_memoryview_accepted(self):
        data = np.asfortranarray([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
        mat = DenseMatrixView(memoryview(data), 2, 3)
        assert mat(0, 1) == 2.0
        assert mat(1, 2) == 6.0

    def test_memoryview_shape_mismatch(self):
        data = np.asfortranarray(np.arange(6.0).reshape(3, 2))
        with pytest.raises(InvalidView) as exc_info:
            DenseMatrixView(memoryview(data), 2, 3)
        assert exc_info.value.code == SolverTypesError.ERROR_DIMENSION_MISMATCH

    def test_3d_rejected(self):
        with pytest.raises(InvalidView):
            DenseMatrixView(np.zeros((2, 3, 1), order='F'), 2, 3)

    def test_negative_dimension(self):
        with pytest.raises(InvalidView):
            DenseMatrixView(np.empty(0), -1, 0)


class TestDenseMatrixBorrowing:
    """Views alias caller memory and never write to it."""

    def test_no_copy(self, column_major_buffer):
        view = DenseMatrixView(column_major_buffer, 2, 3)
        assert np.shares_memory(view.as_array(), column_major_buffer)
        column_major_buffer[0] = 42.0
        assert view(0, 0) == 42.0

    def test_read_only(self, column_major_buffer):
        view = DenseMatrixView(column_major_buffer, 2, 3)
        with pytest.raises(ValueError):
            view.as_array()[0, 0] = 1.0
        # Caller's buffer stays writable
        column_major_buffer[1] = 7.0

    def test_col_and_row(self, column_major_buffer):
        view = DenseMatrixView(column_major_buffer, 2, 3)
        np.testing.assert_array_equal(view.col(1), [3.0, 4.0])
        np.testing.assert_array_equal(view.row(1), [2.0, 4.0, 6.0])

    def test_to_numpy_is_copy(self, column_major_buffer):
        view = DenseMatrixView(column_major_buffer, 2, 3)
        out = view.to_numpy()
        out[0, 0] = -1.0
        assert column_major_buffer[0] == 1.0

    def test_bounds(self, column_major_buffer):
        view = DenseMatrixView(column_major_buffer, 2, 3)
        with pytest.raises(IndexError):
            view(2, 0)
        with pytest.raises(IndexError):
            view(0, 3)
        assert view(-1, -1) == 6.0

    def test_release(self, column_major_buffer):
        with DenseMatrixView(column_major_buffer, 2, 3) as view:
            assert view.is_valid
        assert not view.is_valid
        assert view.shape == (2, 3)
        with pytest.raises(ValueError):
            view(0, 0)
        assert "released" in repr(view)
        # Release never touches the caller's memory
        np.testing.assert_array_equal(column_major_buffer, [1, 2, 3, 4, 5, 6])

    def test_release_is_idempotent(self, column_major_buffer):
        view = DenseMatrixView(column_major_buffer, 2, 3)
        view.release()
        view.release()
        assert not view.is_valid


# =============================================================================
# Dense Vector View
# =============================================================================

class TestDenseVectorView:
    """Tests for DenseVectorView."""

    def test_basic(self):
        buf = np.array([1.0, 2.0, 3.0])
        vec = DenseVectorView(buf)
        assert len(vec) == 3
        assert vec.length == 3
        assert vec[2] == 3.0
        assert list(vec) == [1.0, 2.0, 3.0]

    def test_declared_length(self):
        buf = np.array([1.0, 2.0, 3.0])
        assert DenseVectorView(buf, 3).length == 3
        with pytest.raises(InvalidView):
            DenseVectorView(buf, 4)

    def test_zero_length(self):
        vec = DenseVectorView(np.empty(0), 0)
        assert len(vec) == 0
        assert list(vec) == []

    def test_none(self):
        with pytest.raises(InvalidView):
            DenseVectorView(None)

    def test_2d_rejected(self):
        with pytest.raises(InvalidView) as exc_info:
            DenseVectorView(np.zeros((2, 2)))
        assert exc_info.value.code == SolverTypesError.ERROR_INVALID_ARGUMENT

    def test_from_address(self):
        buf = np.array([4.0, 5.0])
        vec = DenseVectorView.from_address(buf.ctypes.data, 2)
        assert vec[1] == 5.0
        with pytest.raises(InvalidView):
            DenseVectorView.from_address(0, 2)

    def test_to_owned_is_independent(self):
        buf = np.array([1.0, 2.0])
        owned = DenseVectorView(buf).to_owned()
        assert isinstance(owned, VectorXd)
        owned[0] = 9.0
        assert buf[0] == 1.0

    def test_read_only(self):
        vec = DenseVectorView(np.array([1.0, 2.0]))
        with pytest.raises(ValueError):
            vec.as_array()[0] = 3.0

    def test_bounds(self):
        vec = DenseVectorView(np.array([1.0, 2.0]))
        with pytest.raises(IndexError):
            vec[2]
