"""
Sparse Matrices

Hash-map storage for matrices that are mostly zero. Absent entries read as
0 and writing 0 removes an entry, so memory tracks the number of non-zeros.

Variants:

    SparseMatrix        {(row, column): value}        # random access
    SparseRowMatrix     {row: {column: value}}        # fast get_row/set_row
    SparseColumnMatrix  {column: {row: value}}        # fast get_column/set_column

None of them uses a backing buffer: ``allocate`` and ``get_linear`` raise
``UnsupportedOperationError``. Reductions visit stored entries only.

Example:
    >>> mat = SparseRowMatrix(10_000, 10_000)
    >>> mat.set(3, 7, 1.5)
    >>> mat.nnz
    1
    >>> mat.to_scipy()        # scipy.sparse.csr_matrix
"""

import copy
import logging
from typing import Any, Dict, Iterator, Optional, Tuple, TYPE_CHECKING

import numpy as np

from ._base import MutableMatrix
from .._typing import RealValues, as_real_array
from ..error import MatrixIndexError, UnsupportedOperationError

if TYPE_CHECKING:
    from ..buffer import BackingBuffer

__all__ = ['SparseMatrix', 'SparseRowMatrix', 'SparseColumnMatrix']

logger = logging.getLogger("sigmat.matrix")

Entry = Tuple[Tuple[int, int], float]


class _SparseBase(MutableMatrix):
    """
    Shared behavior of the map-based matrices.

    Subclasses implement ``get``, ``set``, ``items``, ``nnz`` and
    ``_copy_entries``, and name their scipy format in ``_scipy_format``.
    """

    _scipy_format = 'coo'

    def __init__(self, rows: int, columns: int, zero_padded: Optional[bool] = None):
        super().__init__(rows, columns, None, zero_padded, allocate=False)
        logger.debug("Created %r", self)

    # =========================================================================
    # Storage
    # =========================================================================

    def allocate(self, buffer: 'BackingBuffer') -> None:
        raise UnsupportedOperationError(
            f"{self.__class__.__name__} does not use a backing buffer")

    @property
    def nnz(self) -> int:
        """Number of stored (non-zero) entries."""
        raise NotImplementedError

    def items(self) -> Iterator[Entry]:
        """Iterate over stored ``((row, column), value)`` pairs."""
        raise NotImplementedError

    def _copy_entries(self) -> Any:
        raise NotImplementedError

    def copy(self) -> 'MutableMatrix':
        clone = copy.copy(self)
        clone._entries = self._copy_entries()
        logger.debug("Copied %r (nnz=%d)", self, self.nnz)
        return clone

    def fill(self, value: float) -> None:
        if value == 0:
            self._entries.clear()
        else:
            super().fill(value)

    # =========================================================================
    # Reductions (stored entries only)
    # =========================================================================

    def sum(self) -> float:
        total = 0.0
        for _, value in self.items():
            total += value
        return total

    def row_sum(self) -> np.ndarray:
        sums = np.zeros(self._rows, dtype=np.float64)
        for (row, _), value in self.items():
            sums[row] += value
        return sums

    def column_sum(self) -> np.ndarray:
        sums = np.zeros(self._columns, dtype=np.float64)
        for (_, column), value in self.items():
            sums[column] += value
        return sums

    def to_dense(self) -> np.ndarray:
        dense = np.zeros(self.shape, dtype=np.float64)
        for (row, column), value in self.items():
            dense[row, column] = value
        return dense

    # =========================================================================
    # Conversion
    # =========================================================================

    def to_scipy(self) -> Any:
        """Convert to a scipy.sparse matrix (COO, CSR or CSC by variant)."""
        import scipy.sparse as sp

        entries = list(self.items())
        data = np.array([value for _, value in entries], dtype=np.float64)
        rows = np.array([key[0] for key, _ in entries], dtype=np.int64)
        columns = np.array([key[1] for key, _ in entries], dtype=np.int64)
        coo = sp.coo_matrix((data, (rows, columns)), shape=self.shape)
        return coo.asformat(self._scipy_format)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _padded_line(self, index: int, limit: int, length: int, what: str) -> Optional[np.ndarray]:
        """Zeros for an out-of-range padded row/column, None if in range."""
        if 0 <= index < limit:
            return None
        if self._zero_padded:
            return np.zeros(length, dtype=np.float64)
        raise MatrixIndexError(f"{what}: {index}")


class SparseMatrix(_SparseBase):
    """
    Sparse matrix keyed by ``(row, column)`` tuples.

    Args:
        rows: Number of rows
        columns: Number of columns
        zero_padded: Zero padding (default from ``StorageConfig``)
    """

    def __init__(self, rows: int, columns: int, zero_padded: Optional[bool] = None):
        self._entries: Dict[Tuple[int, int], float] = {}
        super().__init__(rows, columns, zero_padded)

    @property
    def nnz(self) -> int:
        return len(self._entries)

    def items(self) -> Iterator[Entry]:
        return iter(self._entries.items())

    def get(self, row: int, column: int) -> float:
        if self._is_padded_miss(row, column):
            return 0.0
        return self._entries.get((row, column), 0.0)

    def set(self, row: int, column: int, value: float) -> None:
        self._check_bounds(row, column)
        if value == 0:
            self._entries.pop((row, column), None)
        else:
            self._entries[(row, column)] = float(value)

    def _copy_entries(self) -> Dict[Tuple[int, int], float]:
        return dict(self._entries)


class _NestedSparse(_SparseBase):
    """
    Sparse matrix as ``{outer: {inner: value}}``.

    ``_transposed`` tells whether the outer key is the column. Inner dicts
    are dropped as soon as they become empty.
    """

    _transposed = False

    def __init__(self, rows: int, columns: int, zero_padded: Optional[bool] = None):
        self._entries: Dict[int, Dict[int, float]] = {}
        super().__init__(rows, columns, zero_padded)

    @property
    def nnz(self) -> int:
        return sum(len(inner) for inner in self._entries.values())

    def _key(self, row: int, column: int) -> Tuple[int, int]:
        return (column, row) if self._transposed else (row, column)

    def items(self) -> Iterator[Entry]:
        for outer, inner in self._entries.items():
            for position, value in inner.items():
                yield self._key(outer, position), value

    def get(self, row: int, column: int) -> float:
        if self._is_padded_miss(row, column):
            return 0.0
        outer, position = self._key(row, column)
        inner = self._entries.get(outer)
        if inner is None:
            return 0.0
        return inner.get(position, 0.0)

    def set(self, row: int, column: int, value: float) -> None:
        self._check_bounds(row, column)
        outer, position = self._key(row, column)
        self._put(outer, position, value)

    def _put(self, outer: int, position: int, value: float) -> None:
        inner = self._entries.get(outer)
        if value != 0:
            if inner is None:
                inner = self._entries[outer] = {}
            inner[position] = float(value)
        elif inner is not None:
            inner.pop(position, None)
            if not inner:
                del self._entries[outer]

    def _line(self, outer: int, length: int) -> np.ndarray:
        values = np.zeros(length, dtype=np.float64)
        inner = self._entries.get(outer)
        if inner:
            values[list(inner.keys())] = list(inner.values())
        return values

    def _set_line(self, outer: int, values: np.ndarray) -> None:
        for position, value in enumerate(values):
            self._put(outer, position, value)

    def _copy_entries(self) -> Dict[int, Dict[int, float]]:
        return {outer: dict(inner) for outer, inner in self._entries.items()}


class SparseRowMatrix(_NestedSparse):
    """
    Sparse matrix organized by row.

    ``get_row`` and ``set_row`` cost O(non-zeros of the row) plus the
    length of the returned or given array.

    Args:
        rows: Number of rows
        columns: Number of columns
        zero_padded: Zero padding (default from ``StorageConfig``)
    """

    _scipy_format = 'csr'

    def get_row(self, row: int) -> np.ndarray:
        padded = self._padded_line(row, self._rows, self._columns, "Row")
        if padded is not None:
            return padded
        return self._line(row, self._columns)

    def set_row(self, row: int, values: RealValues) -> None:
        flat = as_real_array(values, self._columns, "row")
        if row < 0 or row >= self._rows:
            raise MatrixIndexError(f"Row: {row}")
        self._set_line(row, flat)


class SparseColumnMatrix(_NestedSparse):
    """
    Sparse matrix organized by column.

    ``get_column`` and ``set_column`` cost O(non-zeros of the column) plus
    the length of the returned or given array.

    Args:
        rows: Number of rows
        columns: Number of columns
        zero_padded: Zero padding (default from ``StorageConfig``)
    """

    _scipy_format = 'csc'
    _transposed = True

    def get_column(self, column: int) -> np.ndarray:
        padded = self._padded_line(column, self._columns, self._rows, "Column")
        if padded is not None:
            return padded
        return self._line(column, self._rows)

    def set_column(self, column: int, values: RealValues) -> None:
        flat = as_real_array(values, self._rows, "column")
        if column < 0 or column >= self._columns:
            raise MatrixIndexError(f"Column: {column}")
        self._set_line(column, flat)
