"""
Pytest configuration and shared fixtures for solvertypes tests.
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

from solvertypes import get_config


# Try to import scipy
try:
    import scipy.sparse as sp
    HAS_SCIPY = True
except ImportError:
    HAS_SCIPY = False


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def restore_config():
    """Every test starts and ends with default configuration."""
    get_config().reset()
    yield
    get_config().reset()


@pytest.fixture(scope="session")
def requires_scipy():
    """Skip test if scipy is not available."""
    if not HAS_SCIPY:
        pytest.skip("scipy not available")


@pytest.fixture
def column_major_buffer():
    """Buffer [1..6] read as a 2x3 column-major matrix.

    Matrix:
    [[1, 3, 5],
     [2, 4, 6]]
    """
    return np.array([1.0, 2.0, 3.0, 4.0, 5.0, 6.0])


@pytest.fixture
def dense_matrix_small():
    """Dense reference for the small CSC fixture."""
    return np.array([
        [1, 0, 2, 0],
        [0, 3, 0, 4],
        [5, 0, 0, 6]
    ], dtype=np.float64)


@pytest.fixture
def small_csc_arrays():
    """Compressed-column arrays of a 3x4 matrix.

    Matrix:
    [[1, 0, 2, 0],
     [0, 3, 0, 4],
     [5, 0, 0, 6]]

    Returns:
        (colptr, rowind, values, rows, cols)
    """
    colptr = np.array([0, 2, 3, 4, 6], dtype=np.int64)
    rowind = np.array([0, 2, 1, 0, 1, 2], dtype=np.int64)
    values = np.array([1.0, 5.0, 3.0, 2.0, 4.0, 6.0])
    return colptr, rowind, values, 3, 4


@pytest.fixture
def scipy_csc_matrix(requires_scipy, dense_matrix_small):
    """Create a scipy CSC matrix for interop testing."""
    return sp.csc_matrix(dense_matrix_small)
