"""
Matrix Operations

Free functions that work across matrix types: region copies and scipy
interoperability.

Example:
    >>> import scipy.sparse as sp
    >>> mat = from_scipy(sp.random(100, 50, density=0.01), kind='row')
    >>> to_scipy(mat.T).shape
    (50, 100)
"""

import logging
from typing import Any, Dict, Optional, Type

from ._base import Matrix, MutableMatrix, copy_region
from ._full import FullMatrix
from ._sparse import SparseColumnMatrix, SparseMatrix, SparseRowMatrix, _SparseBase
from ..error import MatrixValueError

__all__ = ['copy_region', 'to_scipy', 'from_scipy']

logger = logging.getLogger("sigmat.matrix")


_KINDS: Dict[str, Type[MutableMatrix]] = {
    'sparse': SparseMatrix,
    'row': SparseRowMatrix,
    'column': SparseColumnMatrix,
    'full': FullMatrix,
}


def to_scipy(matrix: Matrix) -> Any:
    """
    Convert any matrix to scipy.sparse.

    Sparse matrices convert from their stored entries (COO, CSR or CSC by
    variant); everything else is materialized densely and returned as CSR.
    """
    if isinstance(matrix, _SparseBase):
        return matrix.to_scipy()

    import scipy.sparse as sp
    return sp.csr_matrix(matrix.to_dense())


def from_scipy(sparse: Any, kind: str = 'sparse', zero_padded: Optional[bool] = None) -> MutableMatrix:
    """
    Build a sigmat matrix from a scipy.sparse matrix.

    Args:
        sparse: Any scipy.sparse matrix or array
        kind: Target type: 'sparse', 'row', 'column' or 'full'
        zero_padded: Zero padding of the result (default from ``StorageConfig``)

    Raises:
        TypeError: If ``sparse`` is not a scipy.sparse matrix
        MatrixValueError: If ``kind`` is unknown
    """
    import scipy.sparse as sp

    if not sp.issparse(sparse):
        raise TypeError(f"Expected a scipy.sparse matrix, got {type(sparse).__name__}")
    try:
        cls = _KINDS[kind]
    except KeyError:
        raise MatrixValueError(
            f"Unknown matrix kind: '{kind}'. Expected one of {sorted(_KINDS)}") from None

    coo = sp.coo_matrix(sparse)
    coo.sum_duplicates()
    rows, columns = coo.shape
    result = cls(rows, columns, zero_padded=zero_padded)
    for row, column, value in zip(coo.row, coo.col, coo.data):
        result.set(int(row), int(column), float(value))
    logger.debug("Converted scipy %s (nnz=%d) to %r", sparse.format, coo.nnz, result)
    return result
