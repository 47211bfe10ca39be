"""
Backing Buffer Base Class

A backing buffer is the physical, linear storage underneath a concrete
matrix. The matrix translates ``(row, column)`` into a linear index; the
buffer only ever sees indices in ``[0, size)``.

Lifecycle:

    buffer = FloatBackingBuffer()
    buffer.allocate(12)      # exactly once
    buffer.set(3, 1.5)
    buffer.get(3)            # 1.5

Calling ``get``/``set`` before ``allocate``, or calling ``allocate`` twice,
raises ``BufferStateError`` while ``DebugConfig.check_allocation`` is on.
Indices outside ``[0, size)`` raise ``MatrixIndexError`` while
``DebugConfig.check_index`` is on.
"""

import logging
from abc import ABC, abstractmethod

import numpy as np

from ..error import BufferStateError, MatrixIndexError

__all__ = ['BackingBuffer']

logger = logging.getLogger("sigmat.buffer")


class BackingBuffer(ABC):
    """
    Abstract linear store of real values.

    Subclasses implement ``_allocate``, ``_get``, ``_set``, ``_empty_like``,
    ``_copy_into_from`` and ``to_numpy``; the public methods add the lifecycle
    and index checks.

    Attributes:
        size: Number of addressable slots (0 before allocation)
        is_allocated: Whether ``allocate`` has been called
    """

    def __init__(self):
        # Resolved per instance: the configuration module builds its default
        # registry from this package.
        from .._config import get_config
        debug = get_config().debug
        self._check_allocation = debug.check_allocation
        self._check_index = debug.check_index
        self._size = 0
        self._allocated = False

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def allocate(self, size: int) -> None:
        """Allocate storage for ``size`` slots.

        Args:
            size: Number of slots

        Raises:
            BufferStateError: If the buffer was already allocated
        """
        if self._allocated and self._check_allocation:
            raise BufferStateError(
                f"{self.__class__.__name__} is already allocated (size={self._size})")
        self._allocate(size)
        self._size = size
        self._allocated = True
        logger.debug("Allocated %s with %d slots", self.__class__.__name__, size)

    @property
    def is_allocated(self) -> bool:
        """Whether the buffer has been allocated."""
        return self._allocated

    @property
    def size(self) -> int:
        """Number of addressable slots."""
        return self._size

    # =========================================================================
    # Element Access
    # =========================================================================

    def get(self, index: int) -> float:
        """Read the value stored at ``index``."""
        self._check(index)
        return self._get(index)

    def set(self, index: int, value: float) -> None:
        """Store ``value`` at ``index``.

        Raises:
            MatrixValueError: If the buffer cannot represent ``value``
        """
        self._check(index)
        self._set(index, value)

    def fill(self, value: float) -> None:
        """Store ``value`` in every slot."""
        self._require_allocated()
        for index in range(self._size):
            self._set(index, value)

    def representable(self, value: float) -> float:
        """Value a read returns after ``value`` was stored; needs no allocation.

        Raises:
            MatrixValueError: If the buffer cannot represent ``value``
        """
        return float(value)

    def _require_allocated(self) -> None:
        if self._check_allocation and not self._allocated:
            raise BufferStateError(
                f"{self.__class__.__name__} used before allocation")

    def _check(self, index: int) -> None:
        self._require_allocated()
        if self._check_index and (index < 0 or index >= self._size):
            raise MatrixIndexError(f"Index {index} out of bounds [0, {self._size})")

    # =========================================================================
    # Copy / Conversion
    # =========================================================================

    def copy(self) -> 'BackingBuffer':
        """Create a deep copy.

        The copy is allocated with the same size and receives the current
        contents. O(size); the source must not be mutated concurrently.
        """
        clone = self._empty_like()
        if self._allocated:
            clone._copy_into_from(self)
            clone._size = self._size
            clone._allocated = True
        logger.debug("Copied %s (%d slots)", self.__class__.__name__, self._size)
        return clone

    @abstractmethod
    def to_numpy(self) -> np.ndarray:
        """Decoded contents as a float64 array of length ``size``."""
        ...

    # =========================================================================
    # Subclass Hooks
    # =========================================================================

    @abstractmethod
    def _allocate(self, size: int) -> None:
        ...

    @abstractmethod
    def _get(self, index: int) -> float:
        ...

    @abstractmethod
    def _set(self, index: int, value: float) -> None:
        ...

    @abstractmethod
    def _empty_like(self) -> 'BackingBuffer':
        """Unallocated buffer with the same configuration."""
        ...

    @abstractmethod
    def _copy_into_from(self, source: 'BackingBuffer') -> None:
        """Take over a private copy of ``source``'s storage."""
        ...

    # =========================================================================
    # Magic Methods
    # =========================================================================

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}("
                f"size={self._size}, allocated={self._allocated})")
