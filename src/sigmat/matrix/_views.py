"""
Composition Views

Buffer-less matrices computed from one or two operands.

Design Philosophy:
1. Reference Chain: views hold strong references to their operands
2. No Caching: every ``get`` recomputes from the operands, so later operand
   mutations are visible on the next read
3. Flat Hierarchy: one small class per operation, tagged by ``ViewKind``

Dimension Rules:
- Add, Subtract, Hadamard and Enlarge span the larger of both operands.
  Shapes are not validated; a smaller, non-padded operand fails on read.
- Multiply requires ``a.columns == b.rows`` and checks it on construction.
- Translate shifts the operand and shrinks to ``max(0, n + shift)``.
"""

from enum import Enum
from typing import Tuple

from ._base import Matrix
from ..error import MatrixValueError

__all__ = [
    'ViewKind',
    'MatrixView',
    'AddMatrix',
    'SubtractMatrix',
    'ScalarMultiplyMatrix',
    'MultiplyMatrix',
    'HadamardMultiplyMatrix',
    'TransposeMatrix',
    'TranslatedMatrix',
    'EnlargeMatrix',
]


class ViewKind(Enum):
    """Operation a composition view computes.

    Example:
        >>> (a + b).kind   # ViewKind.ADD
        >>> a.T.kind       # ViewKind.TRANSPOSE
    """
    ADD = 'add'
    SUBTRACT = 'subtract'
    SCALAR_MULTIPLY = 'scalar_multiply'
    MULTIPLY = 'multiply'
    HADAMARD_MULTIPLY = 'hadamard_multiply'
    TRANSPOSE = 'transpose'
    TRANSLATE = 'translate'
    ENLARGE = 'enlarge'


# =============================================================================
# Base Classes (Private)
# =============================================================================

class MatrixView(Matrix):
    """
    Base class of all composition views.

    Subclasses set ``kind`` and implement ``get``, ``rows``, ``columns`` and
    ``zero_padded`` from their operands.
    """

    __slots__ = ()

    kind: ViewKind

    @property
    def is_view(self) -> bool:
        return True

    @property
    def operands(self) -> Tuple[Matrix, ...]:
        """Matrices this view is computed from."""
        raise NotImplementedError


class _UnaryView(MatrixView):

    __slots__ = ('_matrix',)

    def __init__(self, matrix: Matrix):
        self._matrix = matrix

    @property
    def operands(self) -> Tuple[Matrix, ...]:
        return (self._matrix,)

    @property
    def rows(self) -> int:
        return self._matrix.rows

    @property
    def columns(self) -> int:
        return self._matrix.columns

    @property
    def zero_padded(self) -> bool:
        return self._matrix.zero_padded


class _BinaryView(MatrixView):
    """Two operands spanning the larger of both shapes."""

    __slots__ = ('_first', '_second')

    def __init__(self, first: Matrix, second: Matrix):
        self._first = first
        self._second = second

    @property
    def operands(self) -> Tuple[Matrix, ...]:
        return self._first, self._second

    @property
    def rows(self) -> int:
        return max(self._first.rows, self._second.rows)

    @property
    def columns(self) -> int:
        return max(self._first.columns, self._second.columns)

    @property
    def zero_padded(self) -> bool:
        return self._first.zero_padded and self._second.zero_padded


# =============================================================================
# Element-wise Views
# =============================================================================

class AddMatrix(_BinaryView):
    """``a + b`` element by element."""

    __slots__ = ()
    kind = ViewKind.ADD

    def get(self, row: int, column: int) -> float:
        return self._first.get(row, column) + self._second.get(row, column)


class SubtractMatrix(_BinaryView):
    """``a - b`` element by element."""

    __slots__ = ()
    kind = ViewKind.SUBTRACT

    def get(self, row: int, column: int) -> float:
        return self._first.get(row, column) - self._second.get(row, column)


class HadamardMultiplyMatrix(_BinaryView):
    """``a * b`` element by element. Padding follows the first operand."""

    __slots__ = ()
    kind = ViewKind.HADAMARD_MULTIPLY

    @property
    def zero_padded(self) -> bool:
        return self._first.zero_padded

    def get(self, row: int, column: int) -> float:
        return self._first.get(row, column) * self._second.get(row, column)


class EnlargeMatrix(_BinaryView):
    """
    The first operand, extended by the second beyond its bounds.

    Reads inside the first operand's shape come from it; everything else
    comes from the second operand. Padding follows the second operand.
    """

    __slots__ = ()
    kind = ViewKind.ENLARGE

    @property
    def zero_padded(self) -> bool:
        return self._second.zero_padded

    def get(self, row: int, column: int) -> float:
        if row >= self._first.rows or column >= self._first.columns:
            return self._second.get(row, column)
        return self._first.get(row, column)


class ScalarMultiplyMatrix(_UnaryView):
    """Every element times a constant factor."""

    __slots__ = ('_factor',)
    kind = ViewKind.SCALAR_MULTIPLY

    def __init__(self, matrix: Matrix, factor: float):
        super().__init__(matrix)
        self._factor = factor

    @property
    def factor(self) -> float:
        return self._factor

    def get(self, row: int, column: int) -> float:
        return self._matrix.get(row, column) * self._factor


# =============================================================================
# Structural Views
# =============================================================================

class MultiplyMatrix(_BinaryView):
    """
    Matrix product ``a @ b``.

    Each read costs ``a.columns`` operand reads; materialize with
    ``FullMatrix.from_matrix`` when elements are read repeatedly.

    Raises:
        MatrixValueError: On construction if ``a.columns != b.rows``
    """

    __slots__ = ()
    kind = ViewKind.MULTIPLY

    def __init__(self, first: Matrix, second: Matrix):
        if first.columns != second.rows:
            raise MatrixValueError(
                f"Cannot multiply {first.rows}x{first.columns} by "
                f"{second.rows}x{second.columns} matrix",
                MatrixValueError.ERROR_DIMENSION_MISMATCH)
        super().__init__(first, second)

    @property
    def rows(self) -> int:
        return self._first.rows

    @property
    def columns(self) -> int:
        return self._second.columns

    def get(self, row: int, column: int) -> float:
        total = 0.0
        for k in range(self._first.columns):
            total += self._first.get(row, k) * self._second.get(k, column)
        return total


class TransposeMatrix(_UnaryView):
    """Rows and columns swapped."""

    __slots__ = ()
    kind = ViewKind.TRANSPOSE

    @property
    def rows(self) -> int:
        return self._matrix.columns

    @property
    def columns(self) -> int:
        return self._matrix.rows

    def get(self, row: int, column: int) -> float:
        return self._matrix.get(column, row)


class TranslatedMatrix(_UnaryView):
    """
    The operand moved by ``(rows, columns)``.

    Positive shifts move the content down/right and grow the view; negative
    shifts drop leading rows/columns. Reads before the shifted origin land
    on negative operand coordinates and are 0 only if the operand is padded.
    """

    __slots__ = ('_row_shift', '_column_shift')
    kind = ViewKind.TRANSLATE

    def __init__(self, matrix: Matrix, rows: int, columns: int):
        super().__init__(matrix)
        self._row_shift = rows
        self._column_shift = columns

    @property
    def offset(self) -> Tuple[int, int]:
        """Applied ``(rows, columns)`` shift."""
        return self._row_shift, self._column_shift

    @property
    def rows(self) -> int:
        return max(0, self._matrix.rows + self._row_shift)

    @property
    def columns(self) -> int:
        return max(0, self._matrix.columns + self._column_shift)

    def get(self, row: int, column: int) -> float:
        return self._matrix.get(row - self._row_shift, column - self._column_shift)
