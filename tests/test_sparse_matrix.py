import pytest
import os
import sys
import numpy as np
import pandas as pd

# Add the src directory to Python path to import local sparse_triplets
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from sparse_triplets import SparseMatrix, Triplet, InvalidDimensionsError, IndexOutOfRangeError, MissingColumnError
from test_utils import assert_canonical, random_dense


@pytest.fixture
def matrix() -> SparseMatrix:
    m = SparseMatrix(3, 4)
    m.set(2, 1, 7)
    m.set(0, 3, -2)
    m.set(1, 0, 5)
    return m


@pytest.mark.parametrize("rows, cols", [(0, 3), (3, 0), (-1, 2), (2, -5), (1.5, 2), (True, 2)])
def test_invalid_dimensions(rows, cols):
    with pytest.raises(InvalidDimensionsError):
        SparseMatrix(rows, cols)


def test_new_matrix_is_empty():
    m = SparseMatrix(2, 3)
    assert m.shape == (2, 3)
    assert m.nnz == 0
    assert len(m) == 0
    assert m.get(1, 2) == 0


def test_set_keeps_canonical_order(matrix):
    assert matrix.triplets == (Triplet(0, 3, -2), Triplet(1, 0, 5), Triplet(2, 1, 7))
    assert_canonical(matrix)


def test_get_returns_stored_or_zero(matrix):
    assert matrix.get(2, 1) == 7
    assert matrix.get(0, 3) == -2
    assert matrix.get(0, 0) == 0
    assert matrix[1, 0] == 5


def test_set_overwrites_in_place(matrix):
    matrix.set(1, 0, 9)
    assert matrix.get(1, 0) == 9
    assert matrix.nnz == 3
    assert_canonical(matrix)


def test_set_zero_removes_entry(matrix):
    matrix.set(1, 0, 0)
    assert matrix.nnz == 2
    assert (1, 0) not in matrix
    assert matrix.keys() == [(0, 3), (2, 1)]


def test_set_zero_on_missing_entry_is_noop(matrix):
    matrix.set(0, 0, 0)
    assert matrix.nnz == 3


@pytest.mark.parametrize("row, col", [(-1, 0), (0, -1), (3, 0), (0, 4), (10, 10)])
def test_out_of_range_access(matrix, row, col):
    with pytest.raises(IndexOutOfRangeError):
        matrix.get(row, col)
    with pytest.raises(IndexOutOfRangeError):
        matrix.set(row, col, 1)


def test_out_of_range_is_an_index_error(matrix):
    with pytest.raises(IndexError):
        matrix[5, 5]


def test_non_integer_value_rejected(matrix):
    with pytest.raises(TypeError):
        matrix.set(0, 0, 1.5)


def test_random_sets_stay_canonical():
    rng = np.random.default_rng(7)
    m = SparseMatrix(6, 5)
    expected = np.zeros((6, 5), dtype=np.int64)
    for _ in range(300):
        r = int(rng.integers(0, 6))
        c = int(rng.integers(0, 5))
        v = int(rng.integers(-2, 3))
        m.set(r, c, v)
        expected[r, c] = v
        assert_canonical(m)
    assert np.array_equal(m.to_dense(), expected)


def test_copy_is_independent(matrix):
    dup = matrix.copy()
    assert dup == matrix
    dup.set(0, 0, 4)
    matrix.set(2, 1, 0)
    assert matrix.get(0, 0) == 0
    assert dup.get(2, 1) == 7


def test_triplets_snapshot_does_not_alias(matrix):
    snapshot = matrix.triplets
    matrix.set(0, 0, 1)
    assert len(snapshot) == 3
    assert matrix.nnz == 4


def test_mapping_interface(matrix):
    matrix[0, 0] = 3
    del matrix[2, 1]
    assert (0, 0) in matrix
    assert (2, 1) not in matrix
    assert (0, 'a') not in matrix
    assert matrix.items() == [((0, 0), 3), ((0, 3), -2), ((1, 0), 5)]
    assert matrix.values() == [3, -2, 5]
    assert list(matrix) == [Triplet(0, 0, 3), Triplet(0, 3, -2), Triplet(1, 0, 5)]
    matrix.add_at(0, 0, -3)
    assert (0, 0) not in matrix
    matrix.clear()
    assert len(matrix) == 0
    assert matrix.shape == (3, 4)


def test_bad_key_type(matrix):
    with pytest.raises(KeyError):
        matrix[1]


def test_from_triplets_sorts_and_drops_zeros():
    m = SparseMatrix.from_triplets(3, 3, [(2, 2, 1), (0, 1, 0), (1, 1, 4), (0, 0, 2), (1, 1, 6)])
    assert m.triplets == (Triplet(0, 0, 2), Triplet(1, 1, 6), Triplet(2, 2, 1))


def test_from_triplets_bounds():
    with pytest.raises(IndexOutOfRangeError):
        SparseMatrix.from_triplets(2, 2, [(0, 0, 1), (2, 0, 1)])


def test_dense_round_trip():
    rng = np.random.default_rng(0)
    dense = random_dense(rng, 5, 7)
    m = SparseMatrix.from_dense(dense)
    assert_canonical(m)
    assert m.nnz == int(np.count_nonzero(dense))
    assert np.array_equal(m.to_dense(), dense)


def test_from_dense_rejects_floats_and_bad_shapes():
    with pytest.raises(TypeError):
        SparseMatrix.from_dense(np.ones((2, 2)))
    with pytest.raises(ValueError):
        SparseMatrix.from_dense(np.ones(3, dtype=np.int64))


def test_frame_round_trip(matrix):
    df = matrix.to_frame()
    assert list(df.columns) == ['row', 'col', 'value']
    assert df['value'].tolist() == [-2, 5, 7]
    assert SparseMatrix.from_frame(df, 3, 4) == matrix


def test_empty_frame():
    df = SparseMatrix(2, 2).to_frame()
    assert len(df) == 0
    assert SparseMatrix.from_frame(df, 2, 2).nnz == 0


def test_from_frame_requires_columns():
    with pytest.raises(MissingColumnError) as exc_info:
        SparseMatrix.from_frame(pd.DataFrame({'row': [0], 'col': [0]}), 2, 2)
    assert exc_info.value.column == 'value'


def test_equality_includes_shape():
    a = SparseMatrix.from_triplets(2, 2, [(0, 0, 1)])
    b = SparseMatrix.from_triplets(2, 3, [(0, 0, 1)])
    assert a != b
    assert a == SparseMatrix.from_triplets(2, 2, [(0, 0, 1)])


def test_repr(matrix):
    assert repr(matrix) == "SparseMatrix(3x4, {(0, 3, -2), (1, 0, 5), (2, 1, 7)})"


def test_values_beyond_int64_are_kept_whole():
    big = 2 ** 70
    m = SparseMatrix.from_triplets(2, 2, [(0, 1, big), (1, 0, -3)])
    dense = m.to_dense()
    assert dense.dtype == object
    assert dense[0, 1] == big
    assert dense[1, 0] == -3
    assert dense[0, 0] == 0
    df = m.to_frame()
    assert df['value'].tolist() == [big, -3]
    assert SparseMatrix.from_frame(df, 2, 2) == m


def test_to_dense_is_int64_when_values_fit(matrix):
    assert matrix.to_dense().dtype == np.int64
    assert matrix.to_frame()['value'].dtype == np.int64
