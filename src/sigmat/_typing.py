"""
sigmat Type Definitions and Protocols.

Type aliases and small conversion helpers shared by the matrix and buffer
packages. ``MatrixLike`` describes the read contract structurally, so DSP
collaborators can accept any object exposing it without importing the
concrete classes.
"""

from __future__ import annotations

from typing import (
    Optional,
    Protocol,
    Sequence,
    Tuple,
    Union,
    runtime_checkable,
)

import numpy as np

from .error import MatrixValueError


# =============================================================================
# Protocol Definitions
# =============================================================================

@runtime_checkable
class MatrixLike(Protocol):
    """Protocol for objects offering logical ``(row, column)`` reads."""

    @property
    def rows(self) -> int:
        ...

    @property
    def columns(self) -> int:
        ...

    @property
    def zero_padded(self) -> bool:
        ...

    def get(self, row: int, column: int) -> float:
        ...


# =============================================================================
# Type Aliases
# =============================================================================

# Flat real inputs (bulk loads, row/column writes)
RealValues = Union[np.ndarray, Sequence[float]]

# Two-dimensional dense inputs
DenseInput = Union[np.ndarray, Sequence[Sequence[float]]]

Shape = Tuple[int, int]


# =============================================================================
# Helpers
# =============================================================================

def as_real_array(values: RealValues, length: Optional[int] = None,
                  what: str = "values") -> np.ndarray:
    """
    Flatten ``values`` into a float64 array.

    Args:
        values: Sequence or array (multi-dimensional arrays are read row-major)
        length: Required length, if any
        what: Name used in the error message

    Raises:
        MatrixValueError: If ``length`` is given and does not match
    """
    array = np.asarray(values, dtype=np.float64).ravel()
    if length is not None and len(array) != length:
        raise MatrixValueError(
            f"{what} must have length {length}, got {len(array)}",
            MatrixValueError.ERROR_DIMENSION_MISMATCH)
    return array


def check_dimensions(rows: int, columns: int) -> None:
    """Reject negative matrix dimensions."""
    if rows < 0 or columns < 0:
        raise MatrixValueError(
            f"Matrix dimensions must be non-negative, got ({rows}, {columns})")


def is_matrix(obj) -> bool:
    """Check whether ``obj`` satisfies the matrix read contract."""
    return isinstance(obj, MatrixLike)


__all__ = [
    "MatrixLike",
    "RealValues",
    "DenseInput",
    "Shape",
    "as_real_array",
    "check_dimensions",
    "is_matrix",
]
