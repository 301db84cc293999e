import numpy as np
import pytest

from ndkit.arrays import (
    collapse,
    copy_of,
    cycle,
    expand,
    fold,
    pad,
    paste,
    resize,
    sub_array,
    sub_space,
    unfold,
)


@pytest.mark.parametrize(
    ("start", "stop"),
    [
        ((0, 0, 0), (3, 4, 5)),
        ((1, 0, 2), (3, 2, 5)),
        ((2, 3, 4), (3, 4, 5)),
        ((1, 1, 1), (1, 3, 3)),
    ],
)
def test_sub_array(start: tuple[int, ...], stop: tuple[int, ...]) -> None:
    A = np.arange(60).reshape(3, 4, 5)
    sub = sub_array(A, start, stop)
    assert sub.shape == tuple(b - a for a, b in zip(start, stop, strict=True))
    assert np.array_equal(sub, A[tuple(map(slice, start, stop))])
    assert not np.shares_memory(sub, A)


def test_sub_array_rank_mismatch() -> None:
    with pytest.raises(ValueError):
        sub_array(np.zeros((3, 3)), (0,), (1, 1))


class TestPaste:
    def test_paste(self) -> None:
        dst = np.zeros((4, 4))
        paste(np.ones((2, 2)), dst, (1, 1))
        assert np.all(dst[1:3, 1:3] == 1)
        assert dst.sum() == 4

    def test_clipped(self) -> None:
        dst = np.zeros((4, 4))
        paste(np.ones((3, 3)), dst, (2, 2))
        assert np.all(dst[2:, 2:] == 1)
        assert dst.sum() == 4

    def test_offset_outside(self) -> None:
        dst = np.zeros((2, 2))
        paste(np.ones((2, 2)), dst, (5, 0))
        assert not dst.any()

    def test_round_trip(self, array: np.ndarray) -> None:
        patch = -array[(slice(0, 1),) * array.ndim]
        offset = tuple(n - 1 for n in array.shape)
        stop = tuple(o + 1 for o in offset)
        paste(patch, array, offset)
        assert np.array_equal(sub_array(array, offset, stop), patch)

    def test_nested_sequence_patch(self) -> None:
        dst = np.zeros(4, dtype=int)
        paste([7, 8], dst, (1,))
        assert dst.tolist() == [0, 7, 8, 0]

    def test_requires_ndarray(self) -> None:
        with pytest.raises(TypeError):
            paste([1], [0, 0], (0,))

    def test_unsafe_cast(self) -> None:
        dst = np.zeros(3, dtype=int)
        with pytest.raises(TypeError):
            paste(np.array([0.5]), dst, (0,))

    def test_rank_mismatch(self) -> None:
        with pytest.raises(ValueError):
            paste(np.ones(2), np.zeros((2, 2)), (0, 0))


class TestResize:
    def test_identity(self, array: np.ndarray) -> None:
        resized = resize(array, array.shape)
        assert resized is not array
        assert np.array_equal(resized, array)

    def test_grow(self) -> None:
        resized = resize([[1, 2], [3, 4]], (3, 3))
        assert resized.tolist() == [[1, 2, 0], [3, 4, 0], [0, 0, 0]]

    def test_shrink(self) -> None:
        resized = resize(np.arange(9).reshape(3, 3), (2, 1))
        assert resized.tolist() == [[0], [3]]

    def test_objects(self, tallies: np.ndarray, tally_type) -> None:
        resized = resize(tallies, (3, 4))
        assert resized[0, 1] == tallies[0, 1]
        assert resized[2, 2] == tally_type()
        assert resized[0, 3] == tally_type()
        assert resized[0, 3] is not resized[1, 3]

    def test_rank_mismatch(self) -> None:
        with pytest.raises(ValueError):
            resize(np.zeros((2, 2)), (2,))


def test_pad() -> None:
    A = np.ones((3, 4))
    assert pad(A, (2, 2)) is A
    assert np.all(A[:2, :2] == 1)
    assert A.sum() == 4
    B = np.ones((2, 2))
    pad(B, (5, 5))
    assert np.all(B == 1)


def test_copy_of(array: np.ndarray, tallies: np.ndarray) -> None:
    copied = copy_of(array)
    assert np.array_equal(copied, array)
    assert not np.shares_memory(copied, array)
    copied = copy_of(tallies)
    assert copied[1, 2] == tallies[1, 2]
    assert copied[1, 2] is not tallies[1, 2]


@pytest.mark.parametrize(
    ("keep_index", "index"),
    [
        ([1], (1,)),
        ([-1, 2], (slice(None), 2)),
        ([0, -1, 3], (0, slice(None), 3)),
        ([-1, -1], ()),
    ],
)
def test_sub_space(keep_index: list[int], index: tuple) -> None:
    A = np.arange(24).reshape(2, 3, 4)
    result = sub_space(A, keep_index)
    assert result.shape == A[index].shape
    assert np.array_equal(result, A[index])


def test_sub_space_too_long() -> None:
    with pytest.raises(ValueError):
        sub_space(np.zeros((2, 2)), [0, 0, 0])


class TestCollapseExpand:
    def test_collapse(self) -> None:
        A = np.arange(6).reshape(1, 3, 1, 2)
        assert collapse(A).shape == (3, 2)
        assert np.array_equal(collapse(A), A.reshape(3, 2))

    def test_collapse_all(self) -> None:
        result = collapse(np.full((1, 1), 5))
        assert result.shape == ()
        assert result == 5

    def test_expand(self) -> None:
        A = np.arange(6).reshape(3, 2)
        assert expand(A, [False, True, False, True]).shape == (1, 3, 1, 2)

    def test_inverse(self, array: np.ndarray) -> None:
        placement = [n != 1 for n in array.shape]
        assert np.array_equal(expand(collapse(array), placement), array)

    @pytest.mark.parametrize("placement", [[True], [True, False, False]])
    def test_expand_invalid(self, placement: list[bool]) -> None:
        with pytest.raises(ValueError):
            expand(np.zeros((3, 2)), placement)


class TestFold:
    def test_unfold(self) -> None:
        assert unfold([[1, 2], [3, 4]]).tolist() == [1, 2, 3, 4]

    def test_round_trip(self, array: np.ndarray) -> None:
        assert np.array_equal(fold(unfold(array), array.shape), array)

    def test_size_mismatch(self) -> None:
        with pytest.raises(ValueError):
            fold(np.arange(5), (2, 3))

    def test_not_linear(self) -> None:
        with pytest.raises(ValueError):
            fold(np.zeros((2, 3)), (6,))


class TestCycle:
    def test_1d(self) -> None:
        A = np.arange(5)
        assert cycle(A, 2) is A
        assert A.tolist() == [2, 3, 4, 0, 1]

    def test_2d(self) -> None:
        A = np.arange(6).reshape(2, 3)
        cycle(A, (1, 1))
        assert A.tolist() == [[4, 5, 3], [1, 2, 0]]

    def test_wraps(self) -> None:
        A = np.arange(4)
        cycle(A, -1)
        assert A.tolist() == [3, 0, 1, 2]
        cycle(A, 9)
        assert A.tolist() == [0, 1, 2, 3]

    def test_too_many_shifts(self) -> None:
        with pytest.raises(ValueError):
            cycle(np.arange(3), (1, 1))
