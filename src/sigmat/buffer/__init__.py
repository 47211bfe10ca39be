"""sigmat Backing Buffers.

Linear, index-addressed storage strategies used underneath the concrete
matrices in ``sigmat.matrix``.

Type Hierarchy:

    BackingBuffer (ABC)
    ├── ArrayBackingBuffer            # flat numpy block, heap or native
    │   ├── FloatBackingBuffer        # exact float32/float64
    │   ├── IntBackingBuffer          # rounded to int32
    │   ├── SignedByteBackingBuffer   # [-1, 1] in 8 bits
    │   └── UnsignedByteBackingBuffer # [0, 1] in 8 bits
    └── SparseBackingBuffer           # dict, default value elided

Every buffer follows allocate-once-then-use:

    >>> from sigmat.buffer import FloatBackingBuffer
    >>> buf = FloatBackingBuffer()
    >>> buf.allocate(6)
    >>> buf.set(5, 2.0)
    >>> buf.get(5)
    2.0
"""

from ._base import BackingBuffer
from ._dense import ArrayBackingBuffer, FloatBackingBuffer, IntBackingBuffer
from ._quantized import SignedByteBackingBuffer, UnsignedByteBackingBuffer
from ._sparse import SparseBackingBuffer
from ._registry import BufferFactory, BufferRegistry

__all__ = [
    'BackingBuffer',
    'ArrayBackingBuffer',
    'FloatBackingBuffer',
    'IntBackingBuffer',
    'SignedByteBackingBuffer',
    'UnsignedByteBackingBuffer',
    'SparseBackingBuffer',
    'BufferFactory',
    'BufferRegistry',
]
