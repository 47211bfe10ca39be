"""
Symmetric Matrices

Square matrices with ``m[r, c] == m[c, r]`` that store only the upper
triangle. Reads and writes below the diagonal are mirrored to ``(c, r)``.

Storage Layouts (length 4):

    SymmetricMatrix           SymmetricBandMatrix (bandwidth 3)
    0 1 2 3                   0 1 . .
    . 4 5 6                   . 2 3 .
    . . 7 8                   . . 4 5
    . . . 9                   . . . 6 (7)

The band layout keeps ``min(k + 1, length)`` slots per row, so the last
rows carry a few unused slots.
"""

import logging
from typing import Optional, TYPE_CHECKING

from ._base import Matrix, MutableMatrix
from ..error import MatrixIndexError, MatrixValueError

if TYPE_CHECKING:
    from ..buffer import BackingBuffer

__all__ = ['SymmetricMatrix', 'SymmetricBandMatrix']

logger = logging.getLogger("sigmat.matrix")


class SymmetricMatrix(MutableMatrix):
    """
    Symmetric ``length x length`` matrix in ``length * (length + 1) / 2`` slots.

    Args:
        length: Number of rows and columns
        buffer: Unallocated backing buffer (default from ``StorageConfig``)
        zero_padded: Zero padding (default from ``StorageConfig``)

    Example:
        >>> mat = SymmetricMatrix(3)
        >>> mat.set(2, 0, 4.0)
        >>> mat.get(0, 2)
        4.0
    """

    def __init__(self, length: int,
                 buffer: Optional['BackingBuffer'] = None,
                 zero_padded: Optional[bool] = None):
        super().__init__(length, length, buffer, zero_padded)
        logger.debug("Created %r on %r", self, self._buffer)

    @classmethod
    def from_matrix(cls, matrix: Matrix,
                    buffer: Optional['BackingBuffer'] = None,
                    zero_padded: Optional[bool] = None) -> 'SymmetricMatrix':
        """Copy ``matrix`` into symmetric storage.

        The result has ``matrix.rows`` as length. Where the source is not
        symmetric, the element copied last (the lower triangle) wins.
        """
        if zero_padded is None:
            zero_padded = matrix.zero_padded
        result = cls(matrix.rows, buffer, zero_padded)
        result.copy_from(matrix)
        return result

    @property
    def length(self) -> int:
        """Number of rows (and columns)."""
        return self._rows

    def _storage_size(self) -> int:
        return self._rows * (self._rows + 1) // 2

    def _to_index(self, row: int, column: int) -> int:
        if row > column:
            row, column = column, row
        return row * self._rows + column - row * (row + 1) // 2

    def fill(self, value: float) -> None:
        self._buffer.fill(value)


class SymmetricBandMatrix(SymmetricMatrix):
    """
    Symmetric matrix that only stores a diagonal band.

    A band of odd width ``2k + 1`` covers every element with
    ``|row - column| <= k``. In-range reads outside the band return
    ``default``; writes outside the band raise ``MatrixIndexError``.

    ``default`` is held as the buffer would store it, so it reads the same as
    an in-band element set to the same value. Bulk writes (``copy_values``,
    ``copy_from``, ``from_matrix``) go element by element in row-major order
    and stop with ``MatrixIndexError`` at the first out-of-band element; the
    elements before it stay written.

    Args:
        length: Number of rows and columns
        bandwidth: Odd, positive band width
        buffer: Unallocated backing buffer (default from ``StorageConfig``)
        zero_padded: Zero padding (default from ``StorageConfig``)
        default: Value of the elements outside the band

    Raises:
        MatrixValueError: If ``bandwidth`` is even or not positive, or the
            buffer cannot represent ``default``
    """

    def __init__(self, length: int, bandwidth: int,
                 buffer: Optional['BackingBuffer'] = None,
                 zero_padded: Optional[bool] = None,
                 default: float = 0.0):
        if bandwidth <= 0 or bandwidth % 2 == 0:
            raise MatrixValueError(
                f"Bandwidth must be odd and positive because of symmetry: {bandwidth}")
        self._half_width = (bandwidth - 1) // 2
        self._columns_per_row = min(self._half_width + 1, length)
        self._default = float(default)
        super().__init__(length, buffer, zero_padded)

    @classmethod
    def from_matrix(cls, matrix: Matrix, bandwidth: int,
                    buffer: Optional['BackingBuffer'] = None,
                    zero_padded: Optional[bool] = None,
                    default: float = 0.0) -> 'SymmetricBandMatrix':
        """Copy ``matrix`` into band storage of the given width.

        Raises:
            MatrixIndexError: If ``matrix`` has an element outside the band
        """
        if zero_padded is None:
            zero_padded = matrix.zero_padded
        result = cls(matrix.rows, bandwidth, buffer, zero_padded, default)
        result.copy_from(matrix)
        return result

    @property
    def bandwidth(self) -> int:
        """Width of the stored band (``2k + 1``)."""
        return 2 * self._half_width + 1

    @property
    def default(self) -> float:
        """Value of the elements outside the band."""
        return self._default

    def allocate(self, buffer: 'BackingBuffer') -> None:
        default = buffer.representable(self._default)
        super().allocate(buffer)
        self._default = default

    def _in_band(self, row: int, column: int) -> bool:
        return abs(row - column) <= self._half_width

    def _storage_size(self) -> int:
        return self._rows * self._columns_per_row

    def _to_index(self, row: int, column: int) -> int:
        if row > column:
            row, column = column, row
        return row * self._columns_per_row + column - row

    def get(self, row: int, column: int) -> float:
        if self._is_padded_miss(row, column):
            return 0.0
        if not self._in_band(row, column):
            return self._default
        return self._buffer.get(self._to_index(row, column))

    def set(self, row: int, column: int, value: float) -> None:
        self._check_bounds(row, column)
        if not self._in_band(row, column):
            raise MatrixIndexError(
                f"Storage at row: {row}, column: {column} is outside the band "
                f"of width {self.bandwidth}")
        self._buffer.set(self._to_index(row, column), value)

    def fill(self, value: float) -> None:
        """Set every element, the ones outside the band included, to ``value``."""
        self._buffer.fill(value)
        self._default = self._buffer.representable(value)
