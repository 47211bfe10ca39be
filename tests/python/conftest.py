"""
Pytest configuration and shared fixtures for sigmat tests.
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

import sigmat
from sigmat.matrix import (
    FullMatrix,
    SymmetricMatrix,
    SparseMatrix,
    SparseRowMatrix,
    SparseColumnMatrix,
)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def reset_config():
    """Restore the global configuration after every test."""
    yield
    sigmat.config.reset()


@pytest.fixture
def dense_values():
    """Values of the 3x4 test matrix in row-major order.

    Matrix:
    [[1, 0, 2, 0],
     [0, 3, 0, 4],
     [5, 0, 0, 6]]
    """
    return [1.0, 0.0, 2.0, 0.0,
            0.0, 3.0, 0.0, 4.0,
            5.0, 0.0, 0.0, 6.0]


@pytest.fixture
def dense_matrix_small(dense_values):
    """The 3x4 test matrix as a numpy array."""
    return np.array(dense_values, dtype=np.float64).reshape(3, 4)


@pytest.fixture
def full_matrix_small(dense_values):
    """The 3x4 test matrix as FullMatrix."""
    return FullMatrix(3, 4, values=dense_values)


@pytest.fixture
def square_matrix():
    """2x2 FullMatrix [[1, 2], [3, 4]]."""
    return FullMatrix(2, 2, values=[1, 2, 3, 4])


@pytest.fixture
def symmetric_matrix():
    """3x3 SymmetricMatrix with distinct upper-triangle values.

    Matrix:
    [[1, 2, 3],
     [2, 4, 5],
     [3, 5, 6]]
    """
    mat = SymmetricMatrix(3)
    value = 1.0
    for row in range(3):
        for column in range(row, 3):
            mat.set(row, column, value)
            value += 1.0
    return mat


@pytest.fixture(params=[SparseMatrix, SparseRowMatrix, SparseColumnMatrix],
                ids=["sparse", "row", "column"])
def sparse_class(request):
    """Each of the map-based sparse matrix classes."""
    return request.param


@pytest.fixture
def sparse_matrix_small(sparse_class, dense_matrix_small):
    """The 3x4 test matrix in each sparse layout."""
    mat = sparse_class(3, 4)
    for row in range(3):
        for column in range(4):
            mat.set(row, column, dense_matrix_small[row, column])
    return mat


# =============================================================================
# Helper Functions
# =============================================================================

def assert_array_equal(a1, a2, rtol=1e-5, atol=1e-8):
    """Assert two arrays are approximately equal."""
    if hasattr(a1, 'to_dense'):
        a1 = a1.to_dense()
    if hasattr(a2, 'to_dense'):
        a2 = a2.to_dense()

    np.testing.assert_allclose(np.asarray(a1), np.asarray(a2), rtol=rtol, atol=atol)


def assert_matrices_equal(mat1, mat2, rtol=1e-5):
    """Assert two matrices have the same shape and values."""
    assert mat1.shape == mat2.shape
    np.testing.assert_allclose(mat1.to_dense(), mat2.to_dense(), rtol=rtol)


def matrix_to_dense(mat):
    """Convert any matrix to dense numpy through ``get`` only."""
    dense = np.zeros(mat.shape, dtype=np.float64)
    for i in range(mat.rows):
        for j in range(mat.columns):
            dense[i, j] = mat.get(i, j)
    return dense
