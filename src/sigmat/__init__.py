"""
sigmat - Signal Matrix Library

Numeric matrix layer for digital signal processing:
- One logical ``(row, column) -> value`` contract for every matrix
- Lazy algebra views (add, multiply, transpose, translate, ...)
- Compact symmetric and banded-symmetric storage
- Pluggable backing buffers (float, int, 8-bit quantized, sparse)
- scipy.sparse interoperability

Modules:
- matrix: Matrix types, views and conversions
- buffer: Backing buffers and the buffer registry
- error: Exception classes and error codes

Architecture:
    ┌──────────────────────────────────────────────┐
    │   Matrix views (lazy, recomputed on read)    │
    ├──────────────────────────────────────────────┤
    │   Full | Symmetric | Band | Sparse matrices  │
    ├──────────────────────────────────────────────┤
    │   Float | Int | Byte | Sparse buffers        │
    └──────────────────────────────────────────────┘

Example:
    >>> import sigmat
    >>> from sigmat import FullMatrix, SignedByteBackingBuffer
    >>>
    >>> mat = FullMatrix(2, 2, values=[1, 2, 3, 4])
    >>> mat.T.get(0, 1)
    3.0
    >>> mat.multiply(2.0).sum()
    20.0
    >>>
    >>> # Quantized storage for large similarity matrices
    >>> small = FullMatrix(1024, 1024, SignedByteBackingBuffer())
    >>>
    >>> # Defaults for matrices built without an explicit buffer
    >>> with sigmat.config.local(storage=sigmat.StorageConfig(buffer='int')):
    ...     ints = FullMatrix(4, 4)
"""

__version__ = '0.1.0'

# Import main modules
from . import buffer
from . import matrix
from . import error

from ._config import (
    StorageConfig,
    ComputeConfig,
    DebugConfig,
    SigmatConfig,
    config,
    get_config,
    set_storage,
    set_debug,
)

# Re-export common types
from .error import (
    MatrixError,
    MatrixIndexError,
    MatrixValueError,
    UnsupportedOperationError,
    BufferStateError,
)

from .buffer import (
    BackingBuffer,
    FloatBackingBuffer,
    IntBackingBuffer,
    SignedByteBackingBuffer,
    UnsignedByteBackingBuffer,
    SparseBackingBuffer,
    BufferRegistry,
)

from .matrix import (
    Matrix,
    MutableMatrix,
    ViewKind,
    FullMatrix,
    SymmetricMatrix,
    SymmetricBandMatrix,
    SparseMatrix,
    SparseRowMatrix,
    SparseColumnMatrix,
    copy_region,
    to_scipy,
    from_scipy,
)

from ._typing import MatrixLike, is_matrix

__all__ = [
    # Version
    '__version__',

    # Modules
    'buffer',
    'matrix',
    'error',

    # Configuration
    'StorageConfig',
    'ComputeConfig',
    'DebugConfig',
    'SigmatConfig',
    'config',
    'get_config',
    'set_storage',
    'set_debug',

    # Errors
    'MatrixError',
    'MatrixIndexError',
    'MatrixValueError',
    'UnsupportedOperationError',
    'BufferStateError',

    # Buffers
    'BackingBuffer',
    'FloatBackingBuffer',
    'IntBackingBuffer',
    'SignedByteBackingBuffer',
    'UnsignedByteBackingBuffer',
    'SparseBackingBuffer',
    'BufferRegistry',

    # Matrices
    'Matrix',
    'MutableMatrix',
    'ViewKind',
    'FullMatrix',
    'SymmetricMatrix',
    'SymmetricBandMatrix',
    'SparseMatrix',
    'SparseRowMatrix',
    'SparseColumnMatrix',

    # Functions
    'copy_region',
    'to_scipy',
    'from_scipy',

    # Typing
    'MatrixLike',
    'is_matrix',
]
