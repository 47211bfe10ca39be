"""
Tests for SymmetricMatrix and SymmetricBandMatrix.
"""

import random

import pytest
import numpy as np

from sigmat.buffer import FloatBackingBuffer, SignedByteBackingBuffer
from sigmat.matrix import FullMatrix, SymmetricMatrix, SymmetricBandMatrix
from sigmat.error import MatrixIndexError, MatrixValueError


# =============================================================================
# SymmetricMatrix Tests
# =============================================================================

class TestSymmetricMatrix:
    """Test triangular compaction."""

    def test_storage_size(self):
        """Test only the upper triangle is allocated."""
        mat = SymmetricMatrix(4)
        assert mat.shape == (4, 4)
        assert mat.length == 4
        assert mat.buffer.size == 10

    def test_mirrored_reads(self, symmetric_matrix):
        """Test (r, c) and (c, r) agree everywhere."""
        for row in range(3):
            for column in range(3):
                assert symmetric_matrix.get(row, column) == symmetric_matrix.get(column, row)

    def test_layout(self, symmetric_matrix):
        """Test values land in row-major upper-triangle order."""
        np.testing.assert_array_equal(
            symmetric_matrix.to_dense(),
            [[1, 2, 3], [2, 4, 5], [3, 5, 6]])
        np.testing.assert_array_equal(
            symmetric_matrix.buffer.to_numpy(), [1, 2, 3, 4, 5, 6])

    def test_lower_write_mirrors(self):
        """Test writes below the diagonal land in the upper triangle."""
        mat = SymmetricMatrix(3)
        mat.set(2, 0, 4.0)
        assert mat.get(0, 2) == 4.0
        assert mat.get_linear(2) == 4.0

    def test_write_read_all(self):
        """Test every upper-triangle slot round trips."""
        length = 6
        values = [random.random() for _ in range(length * length)]
        mat = SymmetricMatrix(length, FloatBackingBuffer(dtype='float64'))
        for row in range(length):
            for column in range(row, length):
                mat.set(row, column, values[row * length + column])
        for row in range(length):
            for column in range(row, length):
                assert mat.get(row, column) == values[row * length + column]
                assert mat.get(column, row) == values[row * length + column]

    @pytest.mark.parametrize("row, column", [(-1, 0), (0, -1), (3, 0), (0, 3)])
    def test_out_of_bounds(self, row, column):
        """Test bounds are checked before mirroring."""
        mat = SymmetricMatrix(3)
        with pytest.raises(MatrixIndexError):
            mat.get(row, column)
        with pytest.raises(MatrixIndexError):
            mat.set(row, column, 1.0)

    def test_zero_padded(self):
        """Test padded reads outside the matrix."""
        mat = SymmetricMatrix(2, zero_padded=True)
        mat.fill(1.0)
        assert mat.get(2, 0) == 0.0
        assert mat.get(-1, -1) == 0.0

    def test_fill(self):
        """Test fill covers both triangles."""
        mat = SymmetricMatrix(3)
        mat.fill(2.0)
        np.testing.assert_array_equal(mat.to_dense(), np.full((3, 3), 2.0))

    def test_copy_values(self):
        """Test row-major bulk load of a symmetric array."""
        mat = SymmetricMatrix(2)
        mat.copy_values([1, 2, 2, 3])
        np.testing.assert_array_equal(mat.to_dense(), [[1, 2], [2, 3]])

    def test_from_matrix(self):
        """Test copying from dense storage."""
        source = FullMatrix(2, 2, values=[1, 5, 5, 2])
        mat = SymmetricMatrix.from_matrix(source)
        assert mat == source
        assert mat.buffer.size == 3

    def test_quantized(self):
        """Test symmetric storage on a quantized buffer."""
        mat = SymmetricMatrix(3, SignedByteBackingBuffer())
        mat.set(1, 2, 1.0)
        assert mat.get(2, 1) == 1.0
        assert mat.buffer.nbytes == 6

    def test_sums(self, symmetric_matrix):
        """Test generic reductions cover both triangles."""
        assert symmetric_matrix.sum() == 31.0
        np.testing.assert_array_equal(symmetric_matrix.row_sum(), symmetric_matrix.column_sum())

    def test_copy(self, symmetric_matrix):
        """Test deep copy."""
        clone = symmetric_matrix.copy()
        clone.set(0, 0, 0.0)
        assert symmetric_matrix.get(0, 0) == 1.0
        assert isinstance(clone, SymmetricMatrix)


# =============================================================================
# SymmetricBandMatrix Tests
# =============================================================================

class TestSymmetricBandMatrix:
    """Test banded compaction."""

    def test_storage_size(self):
        """Test min(k + 1, length) slots per row."""
        assert SymmetricBandMatrix(5, 3).buffer.size == 10
        assert SymmetricBandMatrix(3, 5).buffer.size == 9
        assert SymmetricBandMatrix(3, 11).buffer.size == 9

    def test_properties(self):
        """Test bandwidth and default."""
        mat = SymmetricBandMatrix(5, 3, default=0.5)
        assert mat.bandwidth == 3
        assert mat.default == 0.5
        assert mat.shape == (5, 5)

    def test_mirrored_band_write(self):
        """Test writes are mirrored inside the band."""
        mat = SymmetricBandMatrix(5, 3)
        mat.set(0, 1, 7.0)
        assert mat.get(1, 0) == 7.0

    def test_write_out_of_band(self):
        """Test writes outside the band are rejected."""
        mat = SymmetricBandMatrix(5, 3)
        with pytest.raises(MatrixIndexError):
            mat.set(0, 4, 1.0)
        with pytest.raises(MatrixIndexError):
            mat.set(0, 2, 5.0)
        with pytest.raises(MatrixIndexError):
            mat.set(2, 0, 5.0)

    def test_read_out_of_band(self):
        """Test in-range reads outside the band return the default."""
        mat = SymmetricBandMatrix(5, 3, default=-1.0)
        assert mat.get(0, 4) == -1.0
        assert mat.get(4, 0) == -1.0
        assert mat.get(0, 1) == 0.0

    def test_write_and_read(self):
        """Test every band slot round trips in both triangles."""
        values = [random.random() for _ in range(25)]
        mat = SymmetricBandMatrix(5, 3, FloatBackingBuffer(dtype='float64'))
        for row in range(5):
            for column in range(row, min(row + 2, 5)):
                mat.set(row, column, values[row * 5 + column])

        for row in range(5):
            for column in range(row, min(row + 2, 5)):
                assert mat.get(row, column) == values[row * 5 + column]
        for column in range(5):
            for row in range(column, min(column + 2, 5)):
                assert mat.get(row, column) == values[column * 5 + row]

    @pytest.mark.parametrize("row, column", [(-1, 0), (0, -1), (5, 0), (0, 5)])
    def test_out_of_bounds(self, row, column):
        """Test validity is checked before the band."""
        with pytest.raises(MatrixIndexError):
            SymmetricBandMatrix(5, 3).get(row, column)

    def test_out_of_bounds_padded(self):
        """Test padded reads outside the matrix return 0, not the default."""
        mat = SymmetricBandMatrix(5, 3, zero_padded=True, default=2.0)
        assert mat.get(0, 5) == 0.0
        assert mat.get(0, 4) == 2.0

    @pytest.mark.parametrize("bandwidth", [0, 2, 4, -1, -3])
    def test_invalid_bandwidth(self, bandwidth):
        """Test even or non-positive bandwidth is rejected."""
        with pytest.raises(MatrixValueError):
            SymmetricBandMatrix(5, bandwidth)

    def test_fill(self):
        """Test fill also sets the out-of-band default."""
        mat = SymmetricBandMatrix(3, 3)
        mat.fill(5.0)
        assert mat.default == 5.0
        for row in range(3):
            np.testing.assert_array_equal(mat.get_row(row), [5, 5, 5])

    def test_copy_values(self):
        """Test bulk load when the band spans the matrix."""
        mat = SymmetricBandMatrix(3, 5)
        mat.copy_values([5] * 9)
        for row in range(3):
            np.testing.assert_array_equal(mat.get_row(row), [5, 5, 5])

    def test_fill_quantized_default(self):
        """Test fill stores the default as the buffer encodes it."""
        mat = SymmetricBandMatrix(5, 3, SignedByteBackingBuffer())
        mat.fill(0.5)
        assert mat.get(0, 4) == mat.get(0, 0)
        assert mat.default == pytest.approx(63 / 127)

    def test_fill_rejected_leaves_matrix(self):
        """Test a rejected fill changes neither band nor default."""
        mat = SymmetricBandMatrix(5, 3, SignedByteBackingBuffer())
        mat.set(1, 1, 1.0)
        with pytest.raises(MatrixValueError):
            mat.fill(2.0)
        assert mat.get(0, 4) == 0.0
        assert mat.get(1, 1) == 1.0

    def test_default_validated(self):
        """Test the constructor default goes through the buffer encoding."""
        with pytest.raises(MatrixValueError):
            SymmetricBandMatrix(5, 3, SignedByteBackingBuffer(), default=2.0)
        mat = SymmetricBandMatrix(5, 3, FloatBackingBuffer(dtype='float32'), default=0.1)
        assert mat.default == float(np.float32(0.1))

    def test_copy_values_narrow_band(self):
        """Test bulk loads stop at the first element outside the band."""
        mat = SymmetricBandMatrix(3, 1)
        with pytest.raises(MatrixIndexError):
            mat.copy_values([1, 2, 3, 4, 5, 6, 7, 8, 9])
        assert mat.get(0, 0) == 1.0
        assert mat.get(1, 1) == 0.0

    def test_from_matrix_narrow_band(self, square_matrix):
        """Test copying a full matrix into a narrow band fails off the band."""
        mat = SymmetricBandMatrix(2, 1)
        with pytest.raises(MatrixIndexError):
            mat.copy_from(square_matrix)
        assert mat.get(0, 0) == 1.0

        diagonal = FullMatrix(2, 2, values=[1, 0, 0, 4])
        with pytest.raises(MatrixIndexError):
            SymmetricBandMatrix.from_matrix(diagonal, 1)

    def test_diagonal_only(self):
        """Test bandwidth 1 keeps just the diagonal."""
        mat = SymmetricBandMatrix(4, 1)
        assert mat.buffer.size == 4
        mat.set(2, 2, 3.0)
        assert mat.get(2, 2) == 3.0
        with pytest.raises(MatrixIndexError):
            mat.set(1, 2, 1.0)

    def test_copy(self):
        """Test deep copy keeps band settings."""
        mat = SymmetricBandMatrix(4, 3, default=1.0)
        mat.set(1, 2, 4.0)
        clone = mat.copy()
        clone.set(1, 2, 0.0)
        assert mat.get(2, 1) == 4.0
        assert clone.bandwidth == 3
        assert clone.default == 1.0
