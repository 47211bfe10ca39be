"""
Quantized Backing Buffers

Fixed-point 8-bit storage trading precision for space (one byte per slot):

    - SignedByteBackingBuffer: values in [-1, 1], step 1/127
    - UnsignedByteBackingBuffer: values in [0, 1], step 1/255

``set`` scales the value and truncates it to 8 bits; ``get`` reverses the
scale, so a read returns the representable value at or just below (toward
zero) the written one. Values outside the supported range, and NaN, raise
``MatrixValueError``.
"""

import math

from ._dense import ArrayBackingBuffer
from ..error import MatrixValueError, SIGMAT_ERROR_RANGE_ERROR

__all__ = ['SignedByteBackingBuffer', 'UnsignedByteBackingBuffer']


SIGNED_BYTE_MAX = 127
UNSIGNED_BYTE_MAX = 255


class SignedByteBackingBuffer(ArrayBackingBuffer):
    """Signed 8-bit fixed point storage for values in ``[-1, 1]``."""

    def __init__(self, direct: bool = False):
        super().__init__(direct, 'int8')

    def _encode(self, value: float) -> int:
        if math.isnan(value) or value > 1.0 or value < -1.0:
            raise MatrixValueError(
                f"SignedByteBackingBuffer only supports values in [-1, 1]: {value}",
                SIGMAT_ERROR_RANGE_ERROR)
        return int(value * SIGNED_BYTE_MAX)

    def _decode(self, stored):
        return stored / SIGNED_BYTE_MAX


class UnsignedByteBackingBuffer(ArrayBackingBuffer):
    """Unsigned 8-bit fixed point storage for values in ``[0, 1]``."""

    def __init__(self, direct: bool = False):
        super().__init__(direct, 'uint8')

    def _encode(self, value: float) -> int:
        if math.isnan(value) or value > 1.0 or value < 0.0:
            raise MatrixValueError(
                f"UnsignedByteBackingBuffer only supports values in [0, 1]: {value}",
                SIGMAT_ERROR_RANGE_ERROR)
        return int(value * UNSIGNED_BYTE_MAX)

    def _decode(self, stored):
        return stored / UNSIGNED_BYTE_MAX
