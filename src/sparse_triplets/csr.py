import numpy as np
import scipy.sparse as sp
from dataclasses import dataclass

from .sparse_matrix import SparseMatrix


@dataclass(frozen=True)
class CSRView:
    """
    Read-only compressed sparse row index derived from a SparseMatrix.

    Entries of row r live at positions row_ptr[r]:row_ptr[r + 1] of
    col_indices and values, in ascending column order.
    """
    rows: int
    cols: int
    row_ptr: np.ndarray  # int64, length rows + 1
    col_indices: np.ndarray  # int64, length nnz
    values: np.ndarray  # object (Python ints), length nnz

    @property
    def nnz(self) -> int:
        return int(self.row_ptr[-1])

    def row(self, i: int) -> tuple[np.ndarray, np.ndarray]:
        """Returns the (col_indices, values) slices of row i."""
        start, end = self.row_ptr[i], self.row_ptr[i + 1]
        return self.col_indices[start:end], self.values[start:end]

    def to_scipy(self) -> sp.csr_array:
        """Returns an equivalent int64 scipy.sparse.csr_array (copies the arrays).

        Raises:
            OverflowError: If a stored value does not fit in int64.
        """
        return sp.csr_array((self.values.astype(np.int64), self.col_indices.copy(), self.row_ptr.copy()),
                            shape=(self.rows, self.cols))


def to_csr(matrix: SparseMatrix) -> CSRView:
    """
    Build a CSR view of a matrix in canonical (row, col) order.

    Row counts are accumulated into row_ptr[1:], turned into offsets with a
    prefix sum, and then each (col, value) pair is scattered to its row's
    next free slot. Entries keep their input order within a row.
    Values are kept as Python ints so products never wrap.
    """
    nnz = matrix.nnz
    row_ptr = np.zeros(matrix.rows + 1, dtype=np.int64)
    col_indices = np.empty(nnz, dtype=np.int64)
    values = np.empty(nnz, dtype=object)

    triplets = matrix.triplets
    for t in triplets:
        row_ptr[t.row + 1] += 1
    np.cumsum(row_ptr, out=row_ptr)

    cursor = row_ptr[:-1].copy()
    for t in triplets:
        pos = cursor[t.row]
        col_indices[pos] = t.col
        values[pos] = t.value
        cursor[t.row] += 1

    for arr in (row_ptr, col_indices, values):
        arr.flags.writeable = False
    return CSRView(matrix.rows, matrix.cols, row_ptr, col_indices, values)
