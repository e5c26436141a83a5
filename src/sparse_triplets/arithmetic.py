import logging

from .csr import to_csr
from .sparse_matrix import SparseMatrix
from .matrix_errors import DimensionMismatchError


logger = logging.getLogger(__name__)


def _merge(a: SparseMatrix, b: SparseMatrix, sign: int, operation: str) -> SparseMatrix:
    """
    Combine two same-shape matrices as a + sign * b.

    Walks both canonical triplet sequences with two cursors; the result is
    produced in (row, col) order so every set() lands at the end of the
    result.
    """
    if a.shape != b.shape:
        raise DimensionMismatchError(operation, a.shape, b.shape)

    result = SparseMatrix(a.rows, a.cols)
    left = a.triplets
    right = b.triplets
    i = 0
    j = 0
    while i < len(left) and j < len(right):
        ta = left[i]
        tb = right[j]
        if (ta.row, ta.col) < (tb.row, tb.col):
            result.set(ta.row, ta.col, ta.value)
            i += 1
        elif (ta.row, ta.col) > (tb.row, tb.col):
            result.set(tb.row, tb.col, sign * tb.value)
            j += 1
        else:
            combined = ta.value + sign * tb.value
            if combined != 0:
                result.set(ta.row, ta.col, combined)
            i += 1
            j += 1

    for ta in left[i:]:
        result.set(ta.row, ta.col, ta.value)
    for tb in right[j:]:
        result.set(tb.row, tb.col, sign * tb.value)

    logger.debug(f"{operation} {a.rows}x{a.cols}: {a.nnz} + {b.nnz} entries -> {result.nnz}")
    return result


def add(a: SparseMatrix, b: SparseMatrix) -> SparseMatrix:
    """Element-wise sum of two matrices of identical shape.

    Raises:
        DimensionMismatchError: If the shapes differ.
    """
    return _merge(a, b, 1, 'add')


def subtract(a: SparseMatrix, b: SparseMatrix) -> SparseMatrix:
    """Element-wise difference a - b of two matrices of identical shape.

    Raises:
        DimensionMismatchError: If the shapes differ.
    """
    return _merge(a, b, -1, 'subtract')


def multiply(a: SparseMatrix, b: SparseMatrix) -> SparseMatrix:
    """
    Matrix product a @ b using row-by-row accumulation over CSR views.

    For every stored (i, k, x) of a, row k of b is scanned and x * y is
    accumulated into result (i, j) for each stored (k, j, y). The
    accumulation goes through get/set on the result, so each update costs a
    binary search plus a shift-insert. Entries that net to zero are removed
    by set() and never appear in the result.

    Raises:
        DimensionMismatchError: If a.cols != b.rows.
    """
    if a.cols != b.rows:
        raise DimensionMismatchError('multiply', a.shape, b.shape)

    result = SparseMatrix(a.rows, b.cols)
    csr_a = to_csr(a)
    csr_b = to_csr(b)

    for i in range(csr_a.rows):
        a_cols, a_vals = csr_a.row(i)
        for k, x in zip(a_cols.tolist(), a_vals.tolist()):
            b_cols, b_vals = csr_b.row(k)
            for j, y in zip(b_cols.tolist(), b_vals.tolist()):
                result.set(i, j, result.get(i, j) + x * y)

    logger.debug(f"multiply {a.rows}x{a.cols} @ {b.rows}x{b.cols}: {a.nnz}, {b.nnz} entries -> {result.nnz}")
    return result
