"""
Sparse Backing Buffer

Dictionary-backed store over linear indices. Only values that differ from the
configured default occupy memory; writing the default removes the entry.
"""

from typing import Dict, Optional

import numpy as np

from ._base import BackingBuffer

__all__ = ['SparseBackingBuffer']


class SparseBackingBuffer(BackingBuffer):
    """
    Linear store holding only non-default values.

    Attributes:
        default: Value reported for slots without an entry
        nnz: Number of stored (non-default) entries

    Example:
        >>> buf = SparseBackingBuffer(default=0.0)
        >>> buf.allocate(1_000_000)
        >>> buf.set(42, 3.0)
        >>> buf.nnz
        1
        >>> buf.set(42, 0.0)
        >>> buf.nnz
        0
    """

    def __init__(self, default: float = 0.0):
        super().__init__()
        self._default = float(default)
        self._entries: Optional[Dict[int, float]] = None

    @property
    def default(self) -> float:
        """Value of every slot without an entry."""
        return self._default

    @property
    def nnz(self) -> int:
        """Number of stored entries."""
        return 0 if self._entries is None else len(self._entries)

    def fill(self, value: float) -> None:
        self._require_allocated()
        if value == self._default:
            self._entries.clear()
        else:
            self._entries = dict.fromkeys(range(self._size), float(value))

    def to_numpy(self) -> np.ndarray:
        values = np.full(self._size, self._default, dtype=np.float64)
        if self._entries:
            values[list(self._entries.keys())] = list(self._entries.values())
        return values

    # -------------------------------------------------------------------------
    # BackingBuffer hooks
    # -------------------------------------------------------------------------

    def _allocate(self, size: int) -> None:
        self._entries = {}

    def _get(self, index: int) -> float:
        return self._entries.get(index, self._default)

    def _set(self, index: int, value: float) -> None:
        if value == self._default:
            self._entries.pop(index, None)
        else:
            self._entries[index] = float(value)

    def _empty_like(self) -> 'SparseBackingBuffer':
        return SparseBackingBuffer(self._default)

    def _copy_into_from(self, source: 'SparseBackingBuffer') -> None:
        self._entries = dict(source._entries)

    def __repr__(self) -> str:
        return (f"SparseBackingBuffer(size={self._size}, "
                f"nnz={self.nnz}, default={self._default})")
