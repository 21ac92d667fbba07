import pytest

from inox2d.matrix import Matrix2d, Matrix2dFromSliceVecsError

ROWS = [[1, 2, 3], [4, 5, 6]]


def test_from_slice_vecs_dimensions_and_index():
    m = Matrix2d.from_slice_vecs(ROWS, False)
    assert (m.width, m.height) == (3, 2)
    for iy, row in enumerate(ROWS):
        for ix, value in enumerate(row):
            assert m[(ix, iy)] == value


def test_transposed_swaps_indices():
    m = Matrix2d.from_slice_vecs(ROWS, True)
    for iy, row in enumerate(ROWS):
        for ix, value in enumerate(row):
            assert m[(iy, ix)] == value
            assert m.get(iy, ix) == value


def test_empty_rows():
    m = Matrix2d.from_slice_vecs([], True)
    assert (m.width, m.height, m.data) == (0, 0, [])
    assert m.transposed is True


def test_uneven_rows_raise():
    with pytest.raises(Matrix2dFromSliceVecsError) as info:
        Matrix2d.from_slice_vecs([[1, 2], [1, 2, 3]], False)
    assert info.value.lengths == [2, 3]
    assert "[2, 3]" in str(info.value)


def test_index_out_of_bounds():
    m = Matrix2d.from_slice_vecs(ROWS, False)
    assert m[(2, 1)] == 6
    with pytest.raises(IndexError):
        m[(3, 0)]
    with pytest.raises(IndexError):
        m[(0, 2)]


def test_get_outside_data_is_none():
    m = Matrix2d.from_slice_vecs(ROWS, False)
    assert m.get(0, 2) is None
    assert m.get(-1, 0) is None


def test_default_filled():
    m = Matrix2d.default_filled(2, 3, False, 7)
    assert len(m.data) == 6
    assert all(m[(ix, iy)] == 7 for ix in range(2) for iy in range(3))


def test_default_filled_copies_mutable_fill():
    m = Matrix2d.default_filled(2, 1, False, [])
    m[(0, 0)].append(1)
    assert m[(1, 0)] == []