"""
Full (Dense) Matrix

Row-major storage of every element in a single backing buffer. The element
type, and therefore precision and memory footprint, is decided by the
buffer: float, rounded int, or 8-bit quantized.

Example:
    >>> mat = FullMatrix(2, 2, values=[1, 2, 3, 4])
    >>> mat.get(1, 0)
    3.0
    >>> small = FullMatrix(512, 512, SignedByteBackingBuffer())
"""

import logging
from typing import Optional, TYPE_CHECKING

import numpy as np

from ._base import Matrix, MutableMatrix
from .._config import get_config
from .._typing import DenseInput, RealValues, as_real_array
from ..error import MatrixValueError

if TYPE_CHECKING:
    from ..buffer import BackingBuffer

__all__ = ['FullMatrix']

logger = logging.getLogger("sigmat.matrix")


class FullMatrix(MutableMatrix):
    """
    Dense matrix; ``(row, column)`` lives at ``row * columns + column``.

    Args:
        rows: Number of rows
        columns: Number of columns
        buffer: Unallocated backing buffer (default from ``StorageConfig``)
        zero_padded: Zero padding (default from ``StorageConfig``)
        direct: Override ``StorageConfig.direct`` for the default buffer;
            not allowed together with ``buffer``
        values: Optional row-major initial values (``rows * columns`` of them)

    Raises:
        MatrixValueError: If both ``buffer`` and ``direct`` are given
    """

    def __init__(self, rows: int, columns: int,
                 buffer: Optional['BackingBuffer'] = None,
                 zero_padded: Optional[bool] = None,
                 *,
                 direct: Optional[bool] = None,
                 values: Optional[RealValues] = None):
        if buffer is not None and direct is not None:
            raise MatrixValueError(
                "direct= applies to the default buffer only; configure the given buffer instead")
        if direct is not None:
            storage = get_config().storage
            buffer = storage.registry.create(storage.buffer, direct=direct, dtype=storage.dtype)
        super().__init__(rows, columns, buffer, zero_padded)
        logger.debug("Created %r on %r", self, self._buffer)
        if values is not None:
            self.copy_values(values)

    # =========================================================================
    # Constructors
    # =========================================================================

    @classmethod
    def from_matrix(cls, matrix: Matrix,
                    buffer: Optional['BackingBuffer'] = None,
                    zero_padded: Optional[bool] = None) -> 'FullMatrix':
        """Materialize any matrix (views included) into dense storage.

        Args:
            matrix: Source matrix
            buffer: Backing buffer for the copy
            zero_padded: Padding of the copy (default: the source's)
        """
        if zero_padded is None:
            zero_padded = matrix.zero_padded
        result = cls(matrix.rows, matrix.columns, buffer, zero_padded)
        result.copy_from(matrix)
        return result

    @classmethod
    def from_dense(cls, array: DenseInput,
                   buffer: Optional['BackingBuffer'] = None,
                   zero_padded: Optional[bool] = None) -> 'FullMatrix':
        """Create from a 2-D array or nested lists.

        Example:
            >>> FullMatrix.from_dense([[1, 0, 2], [0, 3, 0]]).shape
            (2, 3)

        Raises:
            MatrixValueError: If ``array`` is not two-dimensional
        """
        dense = np.asarray(array, dtype=np.float64)
        if dense.ndim != 2:
            raise MatrixValueError(
                f"Expected a 2-D array, got {dense.ndim} dimension(s)",
                MatrixValueError.ERROR_DIMENSION_MISMATCH)
        result = cls(dense.shape[0], dense.shape[1], buffer, zero_padded)
        result.copy_values(dense)
        return result

    # =========================================================================
    # Storage-aware Paths
    # =========================================================================

    def fill(self, value: float) -> None:
        self._buffer.fill(value)

    def copy_values(self, values: RealValues) -> None:
        flat = as_real_array(values, self._rows * self._columns)
        for index, value in enumerate(flat):
            self._buffer.set(index, value)

    def to_dense(self) -> np.ndarray:
        return self._buffer.to_numpy().reshape(self._rows, self._columns)

    def sum(self) -> float:
        return float(self._buffer.to_numpy().sum())

    def row_sum(self) -> np.ndarray:
        return self.to_dense().sum(axis=1)

    def column_sum(self) -> np.ndarray:
        return self.to_dense().sum(axis=0)
