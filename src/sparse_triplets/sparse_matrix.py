import bisect
import numpy as np
import pandas as pd
from typing import Iterable, NamedTuple
from dataclasses import dataclass, field

from .constants import TripletColumn
from .matrix_errors import InvalidDimensionsError, IndexOutOfRangeError, MissingColumnError


_INT64_MIN = int(np.iinfo(np.int64).min)
_INT64_MAX = int(np.iinfo(np.int64).max)


class Triplet(NamedTuple):
    """A single non-zero matrix entry."""
    row: int
    col: int
    value: int


def _position(t: Triplet) -> tuple[int, int]:
    return (t.row, t.col)


def _is_integer(x) -> bool:
    return isinstance(x, (int, np.integer)) and not isinstance(x, (bool, np.bool_))


def value_dtype(values) -> type:
    """np.int64 when every value fits in it, otherwise object so Python ints are kept whole."""
    if all(_INT64_MIN <= v <= _INT64_MAX for v in values):
        return np.int64
    return object


@dataclass
class SparseMatrix:
    """
    Sparse integer matrix stored as (row, col, value) triplets.

    The triplet list is kept in canonical form at all times: strictly sorted
    by (row, col) and free of zero values. Lookups and inserts locate their
    position with a binary search over that ordering.
    """
    rows: int
    cols: int
    _triplets: list[Triplet] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self):
        if not (_is_integer(self.rows) and _is_integer(self.cols)) or self.rows <= 0 or self.cols <= 0:
            raise InvalidDimensionsError(self.rows, self.cols)
        self.rows = int(self.rows)
        self.cols = int(self.cols)

    @classmethod
    def from_triplets(cls, rows: int, cols: int, triplets: Iterable[tuple[int, int, int]]) -> 'SparseMatrix':
        """Build a matrix from an unordered collection of (row, col, value) entries.

        Zero values are dropped. When a position appears more than once the
        last non-zero value wins. The entries are sorted once at the end.

        Raises:
            InvalidDimensionsError: If rows or cols is not a positive integer.
            IndexOutOfRangeError: If any entry lies outside the matrix.
        """
        matrix = cls(rows, cols)
        entries: dict[tuple[int, int], int] = {}
        for row, col, value in triplets:
            matrix._check_bounds(row, col)
            _check_value(value)
            if value == 0:
                continue
            entries[(int(row), int(col))] = int(value)
        matrix._triplets = [Triplet(r, c, v) for (r, c), v in sorted(entries.items())]
        return matrix

    @classmethod
    def from_dense(cls, array) -> 'SparseMatrix':
        """Build a matrix from a 2-D integer array, keeping only its non-zero entries."""
        arr = np.asarray(array)
        if arr.ndim != 2:
            raise ValueError(f"Expected a 2-D array, got {arr.ndim} dimension(s)")
        if not np.issubdtype(arr.dtype, np.integer):
            raise TypeError(f"Expected an integer array, got dtype {arr.dtype}")
        matrix = cls(arr.shape[0], arr.shape[1])
        # np.nonzero walks in row-major order, which is already canonical
        nz_rows, nz_cols = np.nonzero(arr)
        matrix._triplets = [Triplet(int(r), int(c), int(arr[r, c])) for r, c in zip(nz_rows, nz_cols)]
        return matrix

    @classmethod
    def from_frame(cls, df: pd.DataFrame, rows: int, cols: int) -> 'SparseMatrix':
        """Build a matrix from a DataFrame with row, col and value columns.

        Raises:
            MissingColumnError: If a row, col or value column is absent.
        """
        for col in TripletColumn.ALL:
            if col not in df.columns:
                raise MissingColumnError(col, list(df.columns))
        return cls.from_triplets(rows, cols, zip(df[TripletColumn.ROW].tolist(),
                                                 df[TripletColumn.COL].tolist(),
                                                 df[TripletColumn.VALUE].tolist()))

    @property
    def shape(self) -> tuple[int, int]:
        return (self.rows, self.cols)

    @property
    def nnz(self) -> int:
        return len(self._triplets)

    @property
    def triplets(self) -> tuple[Triplet, ...]:
        """Snapshot of the stored triplets in canonical order."""
        return tuple(self._triplets)

    def _check_bounds(self, row: int, col: int) -> None:
        if not (_is_integer(row) and _is_integer(col)):
            raise TypeError(f"Matrix indices must be integers, got ({row!r}, {col!r})")
        if row < 0 or row >= self.rows or col < 0 or col >= self.cols:
            raise IndexOutOfRangeError(row, col, self.rows, self.cols)

    def _search(self, row: int, col: int) -> tuple[int, bool]:
        """Binary search for (row, col).

        Returns:
            The index of the entry if present, otherwise the index at which it
            would be inserted, together with whether it was found.
        """
        idx = bisect.bisect_left(self._triplets, (row, col), key=_position)
        found = idx < len(self._triplets) and _position(self._triplets[idx]) == (row, col)
        return idx, found

    def get(self, row: int, col: int) -> int:
        """Get the value at position (row, col), or 0 if nothing is stored there."""
        self._check_bounds(row, col)
        idx, found = self._search(row, col)
        return self._triplets[idx].value if found else 0

    def set(self, row: int, col: int, value: int) -> None:
        """Set the value at position (row, col).

        A value of 0 removes the stored entry. Any other value overwrites an
        existing entry in place or is inserted at its sorted position.
        """
        self._check_bounds(row, col)
        _check_value(value)
        idx, found = self._search(row, col)
        if found:
            if value == 0:
                del self._triplets[idx]
            else:
                self._triplets[idx] = Triplet(int(row), int(col), int(value))
        elif value != 0:
            self._triplets.insert(idx, Triplet(int(row), int(col), int(value)))

    def add_at(self, row: int, col: int, value: int) -> None:
        """Add a value to the element at position (row, col)."""
        self.set(row, col, self.get(row, col) + value)

    def __getitem__(self, key) -> int:
        """Returns the value at position (i, j).

        Args:
            key: A tuple (i, j)

        Returns:
            The value at position (i, j), or 0 if not found.
        """
        if isinstance(key, tuple) and len(key) == 2:
            i, j = key
        else:
            raise KeyError("SparseMatrix indices must be a tuple of length 2")
        return self.get(i, j)

    def __setitem__(self, key, value: int) -> None:
        if isinstance(key, tuple) and len(key) == 2:
            i, j = key
        else:
            raise KeyError("SparseMatrix indices must be a tuple of length 2")
        self.set(i, j, value)

    def __delitem__(self, key) -> None:
        if isinstance(key, tuple) and len(key) == 2:
            i, j = key
        else:
            raise KeyError("SparseMatrix indices must be a tuple of length 2")
        self.set(i, j, 0)

    def __contains__(self, key) -> bool:
        """Checks if a non-zero value is stored at position (i, j)."""
        if not (isinstance(key, tuple) and len(key) == 2):
            return False
        i, j = key
        if not (_is_integer(i) and _is_integer(j)):
            return False
        return self._search(i, j)[1]

    def __len__(self) -> int:
        """Returns the number of non-zero elements."""
        return len(self._triplets)

    def __iter__(self):
        """Iterates over the stored triplets in canonical order."""
        return iter(self.triplets)

    def keys(self) -> list[tuple[int, int]]:
        """Returns the positions of non-zero elements."""
        return [_position(t) for t in self._triplets]

    def values(self) -> list[int]:
        """Returns the values of non-zero elements."""
        return [t.value for t in self._triplets]

    def items(self) -> list[tuple[tuple[int, int], int]]:
        """Returns a list of (position, value) pairs, mimicking dict.items()."""
        return [(_position(t), t.value) for t in self._triplets]

    def clear(self) -> None:
        """Removes all elements from the matrix."""
        self._triplets.clear()

    def copy(self) -> 'SparseMatrix':
        """Returns a copy of the matrix."""
        result = SparseMatrix(self.rows, self.cols)
        result._triplets = self._triplets.copy()
        return result

    def to_dense(self) -> np.ndarray:
        """Returns a dense int64 array, or an object array if a value does not fit in int64."""
        dense = np.zeros((self.rows, self.cols), dtype=value_dtype(self.values()))
        for row, col, value in self._triplets:
            dense[row, col] = value
        return dense

    def to_frame(self) -> pd.DataFrame:
        """Returns the triplets as a DataFrame with row, col and value columns."""
        rows, cols, values = (list(data) for data in zip(*self._triplets)) if self._triplets else ([], [], [])
        return pd.DataFrame({
            TripletColumn.ROW: np.asarray(rows, dtype=np.int64),
            TripletColumn.COL: np.asarray(cols, dtype=np.int64),
            TripletColumn.VALUE: np.asarray(values, dtype=value_dtype(values)),
        })

    def __add__(self, other: 'SparseMatrix') -> 'SparseMatrix':
        from .arithmetic import add
        return add(self, other)

    def __sub__(self, other: 'SparseMatrix') -> 'SparseMatrix':
        from .arithmetic import subtract
        return subtract(self, other)

    def __matmul__(self, other: 'SparseMatrix') -> 'SparseMatrix':
        from .arithmetic import multiply
        return multiply(self, other)

    def __repr__(self) -> str:
        """String representation of the matrix."""
        items_str = ", ".join(f"({r}, {c}, {v})" for r, c, v in self._triplets)
        return f"SparseMatrix({self.rows}x{self.cols}, {{{items_str}}})"


def _check_value(value) -> None:
    if not _is_integer(value):
        raise TypeError(f"Matrix values must be integers, got {value!r}")
