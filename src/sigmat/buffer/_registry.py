"""
Buffer Registry

Maps short names to backing buffer factories. Storage matrices built without
an explicit buffer ask the registry held by ``StorageConfig`` for a fresh one,
so alternate implementations are plugged in by configuration instead of
process-wide lookups.

Example:
    >>> registry = BufferRegistry.with_defaults()
    >>> registry.create('signed_byte')
    SignedByteBackingBuffer(size=0, dtype=int8, direct=False)
    >>> registry.register('half', lambda direct, dtype: FloatBackingBuffer(direct, 'float32'))
"""

import logging
from typing import Callable, Dict, List

from ._base import BackingBuffer
from ._dense import FloatBackingBuffer, IntBackingBuffer
from ._quantized import SignedByteBackingBuffer, UnsignedByteBackingBuffer
from ._sparse import SparseBackingBuffer
from ..error import MatrixValueError

__all__ = ['BufferFactory', 'BufferRegistry']

logger = logging.getLogger("sigmat.config")


# A factory receives the storage options and returns an unallocated buffer
BufferFactory = Callable[[bool, str], BackingBuffer]


# =============================================================================
# Built-in Factories
# =============================================================================

def _float_buffer(direct: bool, dtype: str) -> BackingBuffer:
    return FloatBackingBuffer(direct, dtype)


def _int_buffer(direct: bool, dtype: str) -> BackingBuffer:
    return IntBackingBuffer(direct)


def _signed_byte_buffer(direct: bool, dtype: str) -> BackingBuffer:
    return SignedByteBackingBuffer(direct)


def _unsigned_byte_buffer(direct: bool, dtype: str) -> BackingBuffer:
    return UnsignedByteBackingBuffer(direct)


def _sparse_buffer(direct: bool, dtype: str) -> BackingBuffer:
    return SparseBackingBuffer()


_DEFAULT_FACTORIES = {
    'float': _float_buffer,
    'int': _int_buffer,
    'signed_byte': _signed_byte_buffer,
    'unsigned_byte': _unsigned_byte_buffer,
    'sparse': _sparse_buffer,
}


# =============================================================================
# Registry
# =============================================================================

class BufferRegistry:
    """
    Name to factory mapping for backing buffers.

    Registries are plain objects; each ``StorageConfig`` carries its own.
    """

    def __init__(self):
        self._factories: Dict[str, BufferFactory] = {}

    @classmethod
    def with_defaults(cls) -> 'BufferRegistry':
        """Registry holding the five built-in buffers."""
        registry = cls()
        for name, factory in _DEFAULT_FACTORIES.items():
            registry.register(name, factory)
        return registry

    def register(self, name: str, factory: BufferFactory, replace: bool = False) -> None:
        """
        Register a buffer factory.

        Args:
            name: Lookup name
            factory: Callable ``factory(direct, dtype)`` returning an unallocated buffer
            replace: Allow overriding an existing registration

        Raises:
            MatrixValueError: If ``name`` is taken and ``replace`` is False
        """
        if name in self._factories and not replace:
            raise MatrixValueError(f"Buffer '{name}' is already registered")
        self._factories[name] = factory
        logger.debug("Registered buffer factory '%s'", name)

    def unregister(self, name: str) -> None:
        """Remove a registration."""
        if name not in self._factories:
            raise MatrixValueError(f"Unknown buffer: '{name}'")
        del self._factories[name]

    def create(self, name: str, direct: bool = False, dtype: str = 'float64') -> BackingBuffer:
        """
        Build an unallocated buffer.

        Raises:
            MatrixValueError: If ``name`` is not registered
        """
        try:
            factory = self._factories[name]
        except KeyError:
            raise MatrixValueError(
                f"Unknown buffer: '{name}'. Registered: {self.names()}") from None
        return factory(direct, dtype)

    def names(self) -> List[str]:
        """Registered names in registration order."""
        return list(self._factories)

    def copy(self) -> 'BufferRegistry':
        """Independent registry with the same registrations."""
        clone = BufferRegistry()
        clone._factories = dict(self._factories)
        return clone

    def __contains__(self, name: str) -> bool:
        return name in self._factories

    def __repr__(self) -> str:
        return f"BufferRegistry({self.names()})"
