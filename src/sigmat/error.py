"""
Error handling for sigmat.

Every failure raised by the library is a programming or input error, never a
transient condition, so nothing here is retried. Each exception carries a
numeric code from the table below and also subclasses the matching builtin
exception, so callers may catch either ``MatrixIndexError`` or ``IndexError``.
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# Error Codes
# =============================================================================

# Success
SIGMAT_OK = 0

# General errors (1-9)
SIGMAT_ERROR_UNKNOWN = 1
SIGMAT_ERROR_INTERNAL = 2

# Argument errors (10-19)
SIGMAT_ERROR_INVALID_ARGUMENT = 10
SIGMAT_ERROR_DIMENSION_MISMATCH = 11
SIGMAT_ERROR_RANGE_ERROR = 13
SIGMAT_ERROR_INDEX_OUT_OF_BOUNDS = 14

# Storage errors (30-39)
SIGMAT_ERROR_BUFFER_STATE = 36

# Feature errors (40-49)
SIGMAT_ERROR_UNSUPPORTED_OPERATION = 40


# Error code to message mapping
_ERROR_MESSAGES = {
    SIGMAT_OK: "Success",
    SIGMAT_ERROR_UNKNOWN: "Unknown error",
    SIGMAT_ERROR_INTERNAL: "Internal error",
    SIGMAT_ERROR_INVALID_ARGUMENT: "Invalid argument",
    SIGMAT_ERROR_DIMENSION_MISMATCH: "Dimension mismatch",
    SIGMAT_ERROR_RANGE_ERROR: "Value out of representable range",
    SIGMAT_ERROR_INDEX_OUT_OF_BOUNDS: "Index out of bounds",
    SIGMAT_ERROR_BUFFER_STATE: "Invalid buffer state",
    SIGMAT_ERROR_UNSUPPORTED_OPERATION: "Unsupported operation",
}


# =============================================================================
# Exception Classes
# =============================================================================

class MatrixError(Exception):
    """
    Base exception for all sigmat errors.

    Attributes:
        code: Numeric error code (one of the ``SIGMAT_ERROR_*`` constants)
        message: Human readable detail
    """

    # Re-export error codes as class attributes for convenience
    OK = SIGMAT_OK
    ERROR_UNKNOWN = SIGMAT_ERROR_UNKNOWN
    ERROR_INTERNAL = SIGMAT_ERROR_INTERNAL
    ERROR_INVALID_ARGUMENT = SIGMAT_ERROR_INVALID_ARGUMENT
    ERROR_DIMENSION_MISMATCH = SIGMAT_ERROR_DIMENSION_MISMATCH
    ERROR_RANGE_ERROR = SIGMAT_ERROR_RANGE_ERROR
    ERROR_INDEX_OUT_OF_BOUNDS = SIGMAT_ERROR_INDEX_OUT_OF_BOUNDS
    ERROR_BUFFER_STATE = SIGMAT_ERROR_BUFFER_STATE
    ERROR_UNSUPPORTED_OPERATION = SIGMAT_ERROR_UNSUPPORTED_OPERATION

    default_code = SIGMAT_ERROR_UNKNOWN

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None):
        """
        Create a sigmat exception.

        Args:
            message: Optional detailed message (taken from the code table if not provided)
            code: Error code, defaults to the class' ``default_code``
        """
        if code is None:
            code = self.default_code
        self.code = code
        if message is None:
            message = _ERROR_MESSAGES.get(code, f"Unknown error (code={code})")
        self.message = message
        super().__init__(f"sigmat error {code}: {message}")

    @classmethod
    def from_code(cls, code: int, context: str = "") -> "MatrixError":
        """Create the exception matching ``code`` with optional context."""
        base_msg = _ERROR_MESSAGES.get(code, "Unknown error")
        msg = f"{context}: {base_msg}" if context else base_msg
        error_cls = _CODE_CLASSES.get(code, cls)
        return error_cls(msg, code)


class MatrixIndexError(MatrixError, IndexError):
    """Row, column or linear index outside the valid range."""

    default_code = SIGMAT_ERROR_INDEX_OUT_OF_BOUNDS


class MatrixValueError(MatrixError, ValueError):
    """Argument the matrix or its buffer cannot accept."""

    default_code = SIGMAT_ERROR_INVALID_ARGUMENT


class UnsupportedOperationError(MatrixError, NotImplementedError):
    """Operation that is structurally inapplicable to the receiver."""

    default_code = SIGMAT_ERROR_UNSUPPORTED_OPERATION


class BufferStateError(MatrixError, RuntimeError):
    """Backing buffer used before allocation or allocated twice."""

    default_code = SIGMAT_ERROR_BUFFER_STATE


_CODE_CLASSES = {
    SIGMAT_ERROR_INVALID_ARGUMENT: MatrixValueError,
    SIGMAT_ERROR_DIMENSION_MISMATCH: MatrixValueError,
    SIGMAT_ERROR_RANGE_ERROR: MatrixValueError,
    SIGMAT_ERROR_INDEX_OUT_OF_BOUNDS: MatrixIndexError,
    SIGMAT_ERROR_BUFFER_STATE: BufferStateError,
    SIGMAT_ERROR_UNSUPPORTED_OPERATION: UnsupportedOperationError,
}


# =============================================================================
# Helpers
# =============================================================================

def index_error(row: int, column: int) -> MatrixIndexError:
    """Build the out-of-bounds error for a ``(row, column)`` pair."""
    return MatrixIndexError(f"Row: {row}, Column: {column}")


__all__ = [
    "SIGMAT_OK",
    "SIGMAT_ERROR_UNKNOWN",
    "SIGMAT_ERROR_INTERNAL",
    "SIGMAT_ERROR_INVALID_ARGUMENT",
    "SIGMAT_ERROR_DIMENSION_MISMATCH",
    "SIGMAT_ERROR_RANGE_ERROR",
    "SIGMAT_ERROR_INDEX_OUT_OF_BOUNDS",
    "SIGMAT_ERROR_BUFFER_STATE",
    "SIGMAT_ERROR_UNSUPPORTED_OPERATION",
    "MatrixError",
    "MatrixIndexError",
    "MatrixValueError",
    "UnsupportedOperationError",
    "BufferStateError",
    "index_error",
]
