"""
Matrix Base Classes

This module defines the abstract base classes of the sigmat matrix type
system. Every matrix, whether it owns storage or is a lazy algebra view,
answers the same logical ``(row, column) -> value`` contract.

Type Hierarchy:

    Matrix (ABC)                    # read contract, reductions, algebra views
    ├── views (AddMatrix, ...)      # buffer-less, see _views.py
    └── MutableMatrix (ABC)         # write contract over a BackingBuffer
        ├── FullMatrix
        ├── SymmetricMatrix
        │   └── SymmetricBandMatrix
        ├── SparseMatrix
        ├── SparseRowMatrix
        └── SparseColumnMatrix

Design Philosophy:

1. One Logical Contract: callers only ever see ``(row, column)``. How a
   storage matrix maps coordinates to buffer indices is private to it.

2. Zero Padding: a zero-padded matrix answers out-of-range reads with 0.
   Out-of-range writes always fail.

3. Lazy Algebra: ``add``, ``multiply``, ``transpose`` and friends return
   views that recompute every element from their operands on access. Views
   never cache, so they always reflect the operands' latest state.

4. Generic Reductions: ``sum``, ``row_sum``, ``column_sum``, ``get_row`` and
   ``get_column`` are defined through ``get`` over the full logical extent.
   Storage types override them where their layout allows a faster path.

Example:

    mat = FullMatrix(2, 2, values=[1, 2, 3, 4])
    view = mat.transpose().multiply(2.0)
    view.get(0, 1)   # 6.0
    mat.set(1, 0, 0)
    view.get(0, 1)   # 0.0 - views follow their operands
"""

import copy
import logging
import numbers
from abc import ABC, abstractmethod
from typing import Iterator, Optional, Tuple, Union, TYPE_CHECKING

import numpy as np

from .._config import get_config
from .._typing import RealValues, as_real_array, check_dimensions
from ..error import (
    MatrixIndexError,
    UnsupportedOperationError,
    index_error,
)

if TYPE_CHECKING:
    from ..buffer import BackingBuffer

__all__ = [
    'Matrix',
    'MutableMatrix',
    'copy_region',
]

logger = logging.getLogger("sigmat.matrix")


class Matrix(ABC):
    """
    Abstract base class for all matrices.

    Required Properties (subclasses must implement):
        rows: Number of rows
        columns: Number of columns
        zero_padded: Whether out-of-range reads return 0

    Required Methods (subclasses must implement):
        get(row, column): Element access

    Equality compares every element and is therefore O(rows * columns).
    Hashing only folds in the shape and the leading diagonal elements
    (see ``ComputeConfig.hash_diagonal_limit``).
    """

    __slots__ = ()

    # =========================================================================
    # Abstract Properties
    # =========================================================================

    @property
    @abstractmethod
    def rows(self) -> int:
        """Number of rows."""
        ...

    @property
    @abstractmethod
    def columns(self) -> int:
        """Number of columns."""
        ...

    @property
    @abstractmethod
    def zero_padded(self) -> bool:
        """Whether reads outside the matrix return 0 instead of failing."""
        ...

    # =========================================================================
    # Derived Properties
    # =========================================================================

    @property
    def shape(self) -> Tuple[int, int]:
        """Matrix dimensions (rows, columns)."""
        return self.rows, self.columns

    @property
    def is_view(self) -> bool:
        """Whether this matrix is computed from other matrices."""
        return False

    @property
    def T(self) -> 'Matrix':
        """Transpose view."""
        return self.transpose()

    # =========================================================================
    # Element Access
    # =========================================================================

    @abstractmethod
    def get(self, row: int, column: int) -> float:
        """Get the value at ``(row, column)``.

        Raises:
            MatrixIndexError: If the coordinates are out of bounds and the
                matrix is not zero-padded
        """
        ...

    def get_linear(self, index: int) -> float:
        """Read a slot of the backing buffer directly.

        Raises:
            UnsupportedOperationError: If the matrix has no backing buffer
        """
        raise UnsupportedOperationError(
            f"{self.__class__.__name__} does not support linear index access")

    def get_row(self, row: int) -> np.ndarray:
        """Values of ``row`` as a float64 array of length ``columns``."""
        return np.array([self.get(row, column) for column in range(self.columns)],
                        dtype=np.float64)

    def get_column(self, column: int) -> np.ndarray:
        """Values of ``column`` as a float64 array of length ``rows``."""
        return np.array([self.get(row, column) for row in range(self.rows)],
                        dtype=np.float64)

    # =========================================================================
    # Reductions
    # =========================================================================

    def sum(self) -> float:
        """Sum of all elements."""
        total = 0.0
        for row in range(self.rows):
            for column in range(self.columns):
                total += self.get(row, column)
        return total

    def row_sum(self) -> np.ndarray:
        """Per-row sums (length ``rows``)."""
        sums = np.zeros(self.rows, dtype=np.float64)
        for row in range(self.rows):
            for column in range(self.columns):
                sums[row] += self.get(row, column)
        return sums

    def column_sum(self) -> np.ndarray:
        """Per-column sums (length ``columns``)."""
        sums = np.zeros(self.columns, dtype=np.float64)
        for row in range(self.rows):
            for column in range(self.columns):
                sums[column] += self.get(row, column)
        return sums

    def to_dense(self) -> np.ndarray:
        """Materialize into a 2-D float64 array."""
        dense = np.zeros(self.shape, dtype=np.float64)
        for row in range(self.rows):
            dense[row, :] = self.get_row(row)
        return dense

    # =========================================================================
    # Algebra Views
    # =========================================================================

    def add(self, other: 'Matrix') -> 'Matrix':
        """View of ``self + other``."""
        from ._views import AddMatrix
        return AddMatrix(self, other)

    def subtract(self, other: 'Matrix') -> 'Matrix':
        """View of ``self - other``."""
        from ._views import SubtractMatrix
        return SubtractMatrix(self, other)

    def multiply(self, other: Union['Matrix', float]) -> 'Matrix':
        """View of the matrix product, or of the scalar product if ``other`` is a number.

        Raises:
            MatrixValueError: If ``self.columns != other.rows``
        """
        from ._views import MultiplyMatrix, ScalarMultiplyMatrix
        if isinstance(other, Matrix):
            return MultiplyMatrix(self, other)
        if isinstance(other, numbers.Real):
            return ScalarMultiplyMatrix(self, float(other))
        raise TypeError(f"Cannot multiply {self.__class__.__name__} by {type(other).__name__}")

    def hadamard_multiply(self, other: 'Matrix') -> 'Matrix':
        """View of the element-wise product."""
        from ._views import HadamardMultiplyMatrix
        return HadamardMultiplyMatrix(self, other)

    def transpose(self) -> 'Matrix':
        """View with rows and columns swapped."""
        from ._views import TransposeMatrix
        return TransposeMatrix(self)

    def translate(self, rows: int, columns: int) -> 'Matrix':
        """View of this matrix moved by ``rows``/``columns`` inside a larger space."""
        from ._views import TranslatedMatrix
        return TranslatedMatrix(self, rows, columns)

    def enlarge(self, other: 'Matrix') -> 'Matrix':
        """View as large as both matrices; ``other`` fills in beyond this matrix' bounds."""
        from ._views import EnlargeMatrix
        return EnlargeMatrix(self, other)

    # =========================================================================
    # Bounds Handling
    # =========================================================================

    def _is_invalid(self, row: int, column: int) -> bool:
        return row < 0 or column < 0 or row >= self.rows or column >= self.columns

    def _check_bounds(self, row: int, column: int) -> None:
        if self._is_invalid(row, column):
            raise index_error(row, column)

    def _is_padded_miss(self, row: int, column: int) -> bool:
        """True if the read falls outside the matrix and yields 0.

        Raises:
            MatrixIndexError: If the read falls outside a non-padded matrix
        """
        if self._is_invalid(row, column):
            if self.zero_padded:
                return True
            raise index_error(row, column)
        return False

    # =========================================================================
    # Magic Methods
    # =========================================================================

    def __getitem__(self, key: Tuple[int, int]) -> float:
        if not isinstance(key, tuple) or len(key) != 2:
            raise TypeError("Matrix indices must be (row, column) pairs")
        return self.get(key[0], key[1])

    def __iter__(self) -> Iterator[np.ndarray]:
        for row in range(self.rows):
            yield self.get_row(row)

    def __len__(self) -> int:
        """Return number of rows."""
        return self.rows

    def __add__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, other):
        if isinstance(other, Matrix):
            return self.hadamard_multiply(other)
        if isinstance(other, numbers.Real):
            return self.multiply(other)
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, numbers.Real):
            return self.multiply(other)
        return NotImplemented

    def __matmul__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.multiply(other)

    def __neg__(self):
        return self.multiply(-1.0)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        if self.shape != other.shape:
            return False
        for row in range(self.rows):
            for column in range(self.columns):
                if self.get(row, column) != other.get(row, column):
                    return False
        return True

    def __hash__(self) -> int:
        limit = get_config().compute.hash_diagonal_limit
        diagonal = min(limit, self.rows, self.columns)
        return hash((self.rows, self.columns)
                    + tuple(self.get(i, i) for i in range(diagonal)))

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}("
                f"rows={self.rows}, columns={self.columns}, "
                f"zero_padded={self.zero_padded})")

    def __str__(self) -> str:
        return self.__repr__()


class MutableMatrix(Matrix):
    """
    Abstract base class for matrices that own their storage.

    Subclasses decide how coordinates map to buffer slots (``_to_index``) and
    how many slots they need (``_storage_size``). Map-based sparse matrices
    hold no buffer at all and override the element accessors.

    Args:
        rows: Number of rows
        columns: Number of columns
        buffer: Backing buffer; a fresh one from ``StorageConfig`` if omitted
        zero_padded: Zero padding; ``StorageConfig.zero_padded`` if omitted
        allocate: Allocate the buffer now
    """

    def __init__(self, rows: int, columns: int,
                 buffer: Optional['BackingBuffer'] = None,
                 zero_padded: Optional[bool] = None,
                 allocate: bool = True):
        check_dimensions(rows, columns)
        storage = get_config().storage
        self._rows = rows
        self._columns = columns
        self._zero_padded = storage.zero_padded if zero_padded is None else bool(zero_padded)
        self._buffer = buffer
        if allocate:
            self.allocate(buffer if buffer is not None else storage.new_buffer())

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def columns(self) -> int:
        return self._columns

    @property
    def zero_padded(self) -> bool:
        return self._zero_padded

    @property
    def buffer(self) -> Optional['BackingBuffer']:
        """The backing buffer, or None for map-based storage."""
        return self._buffer

    # =========================================================================
    # Storage
    # =========================================================================

    def allocate(self, buffer: 'BackingBuffer') -> None:
        """Allocate ``buffer`` with the size this storage layout needs and adopt it."""
        buffer.allocate(self._storage_size())
        self._buffer = buffer

    def _storage_size(self) -> int:
        return self._rows * self._columns

    def _to_index(self, row: int, column: int) -> int:
        return row * self._columns + column

    # =========================================================================
    # Element Access
    # =========================================================================

    def get(self, row: int, column: int) -> float:
        if self._is_padded_miss(row, column):
            return 0.0
        return self._buffer.get(self._to_index(row, column))

    def get_linear(self, index: int) -> float:
        if self._buffer is None:
            return super().get_linear(index)
        return self._buffer.get(index)

    def set(self, row: int, column: int, value: float) -> None:
        """Set the value at ``(row, column)``.

        Raises:
            MatrixIndexError: If the coordinates are out of bounds
            MatrixValueError: If the buffer cannot represent ``value``
        """
        self._check_bounds(row, column)
        self._buffer.set(self._to_index(row, column), value)

    def __setitem__(self, key: Tuple[int, int], value: float) -> None:
        if not isinstance(key, tuple) or len(key) != 2:
            raise TypeError("Matrix indices must be (row, column) pairs")
        self.set(key[0], key[1], value)

    # =========================================================================
    # Bulk Writes
    # =========================================================================

    def fill(self, value: float) -> None:
        """Set every element to ``value``."""
        for row in range(self._rows):
            for column in range(self._columns):
                self.set(row, column, value)

    def copy_values(self, values: RealValues) -> None:
        """Load ``rows * columns`` values in row-major order.

        Raises:
            MatrixValueError: If the number of values does not match
        """
        flat = as_real_array(values, self._rows * self._columns)
        i = 0
        for row in range(self._rows):
            for column in range(self._columns):
                self.set(row, column, flat[i])
                i += 1

    def copy_from(self, matrix: Matrix,
                  from_row: int = 0, from_column: int = 0,
                  to_row: int = 0, to_column: int = 0,
                  rows: Optional[int] = None, columns: Optional[int] = None) -> None:
        """
        Copy a region of ``matrix`` into this matrix.

        Without a region, the overlapping top-left part of both matrices is
        copied.

        Args:
            matrix: Source matrix
            from_row: First source row
            from_column: First source column
            to_row: First target row
            to_column: First target column
            rows: Number of rows to copy (default: as many as fit)
            columns: Number of columns to copy (default: as many as fit)
        """
        if rows is None:
            rows = max(0, min(self._rows - to_row, matrix.rows - from_row))
        if columns is None:
            columns = max(0, min(self._columns - to_column, matrix.columns - from_column))
        copy_region(matrix, from_row, from_column, self, to_row, to_column, rows, columns)

    def set_row(self, row: int, values: RealValues) -> None:
        """Overwrite ``row`` with ``columns`` values.

        Raises:
            MatrixIndexError: If ``row`` is out of bounds
            MatrixValueError: If the number of values does not match
        """
        flat = as_real_array(values, self._columns, "row")
        if row < 0 or row >= self._rows:
            raise MatrixIndexError(f"Row: {row}")
        for column, value in enumerate(flat):
            self.set(row, column, value)

    def set_column(self, column: int, values: RealValues) -> None:
        """Overwrite ``column`` with ``rows`` values.

        Raises:
            MatrixIndexError: If ``column`` is out of bounds
            MatrixValueError: If the number of values does not match
        """
        flat = as_real_array(values, self._rows, "column")
        if column < 0 or column >= self._columns:
            raise MatrixIndexError(f"Column: {column}")
        for row, value in enumerate(flat):
            self.set(row, column, value)

    # =========================================================================
    # Copy
    # =========================================================================

    def copy(self) -> 'MutableMatrix':
        """Create a deep copy with its own storage.

        O(size); the source must not be mutated during the copy.
        """
        clone = copy.copy(self)
        if self._buffer is not None:
            clone._buffer = self._buffer.copy()
        logger.debug("Copied %r", self)
        return clone


def copy_region(from_matrix: Matrix, from_row: int, from_column: int,
                to_matrix: MutableMatrix, to_row: int, to_column: int,
                rows: int, columns: int) -> None:
    """
    Copy a ``rows x columns`` block between matrices.

    Reads go through ``from_matrix.get`` (so zero padding applies) and writes
    through ``to_matrix.set`` (so out-of-range targets fail).
    """
    logger.debug("Copying %dx%d block from %r (%d, %d) to %r (%d, %d)",
                 rows, columns, from_matrix, from_row, from_column,
                 to_matrix, to_row, to_column)
    for i in range(rows):
        for j in range(columns):
            to_matrix.set(to_row + i, to_column + j,
                          from_matrix.get(from_row + i, from_column + j))
