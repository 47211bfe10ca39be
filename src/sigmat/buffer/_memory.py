"""
Raw Memory Blocks

Allocation of the flat arrays that back the dense buffers. Heap blocks are
ordinary numpy arrays; native ("direct") blocks are carved out of a 64-byte
aligned ctypes allocation and exposed as a numpy view, so element access is
identical in both modes and only locality and lifetime differ.
"""

import ctypes
from typing import Tuple

import numpy as np

from ..error import MatrixValueError

__all__ = ['allocate_block', 'copy_block', 'is_native', 'DEFAULT_ALIGN']


DEFAULT_ALIGN = 64


# =============================================================================
# Type Mapping
# =============================================================================

_TYPE_MAP = {
    'float32': (ctypes.c_float, np.float32, 4),
    'float64': (ctypes.c_double, np.float64, 8),
    'int32': (ctypes.c_int32, np.int32, 4),
    'int8': (ctypes.c_int8, np.int8, 1),
    'uint8': (ctypes.c_uint8, np.uint8, 1),
}


def _get_type_info(dtype: str) -> Tuple[type, type, int]:
    """Get (ctypes_type, numpy_type, itemsize) for dtype string."""
    if dtype not in _TYPE_MAP:
        raise MatrixValueError(f"Unsupported dtype: {dtype}. "
                               f"Supported: {list(_TYPE_MAP.keys())}")
    return _TYPE_MAP[dtype]


# =============================================================================
# Allocation
# =============================================================================

def allocate_block(size: int, dtype: str, direct: bool = False,
                   align: int = DEFAULT_ALIGN) -> np.ndarray:
    """
    Allocate a zero-initialized flat array.

    Args:
        size: Number of elements
        dtype: Element type ('float32', 'float64', 'int32', 'int8', 'uint8')
        direct: Allocate natively through ctypes instead of on the numpy heap
        align: Byte alignment of native blocks

    Returns:
        1-D numpy array of length ``size``
    """
    if size < 0:
        raise MatrixValueError(f"Buffer size must be non-negative, got {size}")

    _, np_type, itemsize = _get_type_info(dtype)

    if not direct or size == 0:
        return np.zeros(size, dtype=np_type)

    nbytes = size * itemsize
    # Over-allocate so an aligned start address always fits
    raw = (ctypes.c_uint8 * (nbytes + align))()
    addr = ctypes.addressof(raw)
    offset = ((addr + align - 1) & ~(align - 1)) - addr

    # The numpy view chain keeps ``raw`` alive
    octets = np.frombuffer(raw, dtype=np.uint8)
    return octets[offset:offset + nbytes].view(np_type)


def copy_block(block: np.ndarray, direct: bool = False) -> np.ndarray:
    """Copy a block into a fresh allocation of the same kind."""
    dtype = block.dtype.name
    new = allocate_block(len(block), dtype, direct)
    new[:] = block
    return new


def is_native(block: np.ndarray) -> bool:
    """Check whether a block lives in a ctypes allocation."""
    base = block
    while isinstance(base, np.ndarray) and base.base is not None:
        base = base.base
    return isinstance(base, ctypes.Array)
