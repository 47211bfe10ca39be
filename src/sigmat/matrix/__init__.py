"""sigmat Matrices.

Storage matrices and lazy algebra views behind one ``(row, column)``
contract.

Storage:
    FullMatrix            dense, any backing buffer
    SymmetricMatrix       upper triangle only
    SymmetricBandMatrix   diagonal band of a symmetric matrix
    SparseMatrix          {(row, column): value}
    SparseRowMatrix       {row: {column: value}}
    SparseColumnMatrix    {column: {row: value}}

Views (returned by the algebra methods, never cached):
    AddMatrix, SubtractMatrix, ScalarMultiplyMatrix, MultiplyMatrix,
    HadamardMultiplyMatrix, TransposeMatrix, TranslatedMatrix, EnlargeMatrix

Example:
    >>> from sigmat.matrix import FullMatrix
    >>> a = FullMatrix(2, 2, values=[1, 2, 3, 4])
    >>> (a @ a.T).get(0, 1)
    11.0
"""

from ._base import Matrix, MutableMatrix
from ._views import (
    ViewKind,
    MatrixView,
    AddMatrix,
    SubtractMatrix,
    ScalarMultiplyMatrix,
    MultiplyMatrix,
    HadamardMultiplyMatrix,
    TransposeMatrix,
    TranslatedMatrix,
    EnlargeMatrix,
)
from ._full import FullMatrix
from ._symmetric import SymmetricMatrix, SymmetricBandMatrix
from ._sparse import SparseMatrix, SparseRowMatrix, SparseColumnMatrix
from ._ops import copy_region, to_scipy, from_scipy

__all__ = [
    # Base classes
    'Matrix',
    'MutableMatrix',
    # Views
    'ViewKind',
    'MatrixView',
    'AddMatrix',
    'SubtractMatrix',
    'ScalarMultiplyMatrix',
    'MultiplyMatrix',
    'HadamardMultiplyMatrix',
    'TransposeMatrix',
    'TranslatedMatrix',
    'EnlargeMatrix',
    # Storage
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
]
