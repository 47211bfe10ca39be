"""
Dense Backing Buffers

Flat numpy-backed stores, one slot per logical index:

    - FloatBackingBuffer: exact storage at float64 (default) or float32
    - IntBackingBuffer: values rounded half up to the nearest int32

Both accept ``direct=True`` to place the block in native, 64-byte aligned
memory. Direct mode changes locality and lifetime only, never precision.
"""

import copy
import math

import numpy as np

from ._base import BackingBuffer
from ._memory import allocate_block, copy_block
from ..error import MatrixValueError, SIGMAT_ERROR_RANGE_ERROR

__all__ = ['ArrayBackingBuffer', 'FloatBackingBuffer', 'IntBackingBuffer']


_INT32_MIN = -2 ** 31
_INT32_MAX = 2 ** 31 - 1


class ArrayBackingBuffer(BackingBuffer):
    """
    Shared implementation for buffers stored in one flat numpy block.

    Subclasses choose the element dtype and override ``_encode``/``_decode``
    to convert between logical values and stored elements.
    """

    def __init__(self, direct: bool = False, dtype: str = 'float64'):
        super().__init__()
        self._direct = direct
        self._dtype = dtype
        self._block = None

    @property
    def direct(self) -> bool:
        """Whether the block lives in native memory."""
        return self._direct

    @property
    def dtype(self) -> str:
        """Element type of the stored block."""
        return self._dtype

    @property
    def nbytes(self) -> int:
        """Bytes held by the block."""
        return 0 if self._block is None else self._block.nbytes

    def fill(self, value: float) -> None:
        self._require_allocated()
        self._block[:] = self._encode(value)

    def representable(self, value: float) -> float:
        return float(self._decode(np.asarray(self._encode(value), dtype=self._dtype)))

    def to_numpy(self) -> np.ndarray:
        if self._block is None:
            return np.zeros(0, dtype=np.float64)
        return self._decode(self._block.astype(np.float64))

    # -------------------------------------------------------------------------
    # Encoding hooks
    # -------------------------------------------------------------------------

    def _encode(self, value: float):
        return value

    def _decode(self, stored):
        return stored

    # -------------------------------------------------------------------------
    # BackingBuffer hooks
    # -------------------------------------------------------------------------

    def _allocate(self, size: int) -> None:
        self._block = allocate_block(size, self._dtype, self._direct)

    def _get(self, index: int) -> float:
        return float(self._decode(self._block[index]))

    def _set(self, index: int, value: float) -> None:
        self._block[index] = self._encode(value)

    def _empty_like(self) -> 'ArrayBackingBuffer':
        clone = copy.copy(self)
        clone._block = None
        clone._size = 0
        clone._allocated = False
        return clone

    def _copy_into_from(self, source: 'ArrayBackingBuffer') -> None:
        self._block = copy_block(source._block, self._direct)

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(size={self._size}, "
                f"dtype={self._dtype}, direct={self._direct})")


class FloatBackingBuffer(ArrayBackingBuffer):
    """
    Exact floating point storage.

    Example:
        >>> buf = FloatBackingBuffer(direct=True)
        >>> buf.allocate(4)
        >>> buf.set(0, 0.25)
        >>> buf.get(0)
        0.25
    """

    def __init__(self, direct: bool = False, dtype: str = 'float64'):
        if dtype not in ('float32', 'float64'):
            raise MatrixValueError(f"FloatBackingBuffer dtype must be float32 or float64: {dtype}")
        super().__init__(direct, dtype)
        self._max = float(np.finfo(dtype).max)

    def _encode(self, value: float) -> float:
        if math.isfinite(value) and abs(value) > self._max:
            raise MatrixValueError(
                f"FloatBackingBuffer({self._dtype}) cannot represent {value}",
                SIGMAT_ERROR_RANGE_ERROR)
        return value


class IntBackingBuffer(ArrayBackingBuffer):
    """
    Integer storage; ``set`` rounds to the nearest whole number.

    Precision loss is irreversible: ``set(i, 2.5)`` followed by ``get(i)``
    returns ``3.0``.
    """

    def __init__(self, direct: bool = False):
        super().__init__(direct, 'int32')

    def _encode(self, value: float) -> int:
        if math.isnan(value):
            raise MatrixValueError("IntBackingBuffer cannot store NaN",
                                   SIGMAT_ERROR_RANGE_ERROR)
        rounded = math.floor(value + 0.5) if math.isfinite(value) else value
        if not (_INT32_MIN <= rounded <= _INT32_MAX):
            raise MatrixValueError(f"IntBackingBuffer only supports 32-bit integers: {value}",
                                   SIGMAT_ERROR_RANGE_ERROR)
        return rounded
