"""Sub-array extraction and composition."""
from collections.abc import Sequence
from copy import deepcopy

import numpy as np

from ndkit.typing import ArrayLike, Index
from ndkit.utils.array import region

from .arithmetic import clear, clipped_overlap, require_ndarray
from .introspection import as_array, create_array

__all__ = (
    "sub_array",
    "paste",
    "resize",
    "pad",
    "copy_of",
    "sub_space",
    "collapse",
    "expand",
    "unfold",
    "fold",
    "cycle",
)


def sub_array(array: ArrayLike, start: Index, stop: Index) -> np.ndarray:
    """Copy of the half-open region ``[start, stop)``.

    The rank is preserved, so ``sub_array(A, start, stop).shape[d]``
    equals ``stop[d] - start[d]`` for every valid region.

    Raises
    ------
    ValueError
        If ``start`` or ``stop`` do not have one entry per axis.
    """
    array = as_array(array)
    if len(start) != array.ndim or len(stop) != array.ndim:
        errmsg = f"region rank does not match array rank {array.ndim}"
        raise ValueError(errmsg)
    return array[region(start, stop, array.shape)].copy()


def paste(patch: ArrayLike, array: np.ndarray, offset: Index) -> None:
    """Copy ``patch`` into ``array`` starting at ``offset``.

    Along every axis the copied extent is
    ``min(array.shape[d] - offset[d], patch.shape[d])``,
    so a patch overflowing the destination is silently clipped.

    Raises
    ------
    ValueError
        If ranks of ``patch``, ``array`` and ``offset`` differ.
    TypeError
        If ``array`` is not a :class:`numpy.ndarray` or ``patch`` elements
        cannot be cast safely to the destination kind.
    """
    require_ndarray(array)
    patch = as_array(patch)
    n = clipped_overlap(array, offset, patch)
    src = tuple(slice(0, k) for k in n)
    dst = tuple(slice(o, o + k) for o, k in zip(offset, n, strict=True))
    np.copyto(array[dst], patch[src], casting="same_kind")


def resize(array: ArrayLike, new_shape: Sequence[int]) -> np.ndarray:
    """New array of ``new_shape`` holding the overlapping content of ``array``.

    Shrinking truncates, growing pads with zeros (default instances for
    object arrays).
    """
    array = as_array(array)
    if len(new_shape) != array.ndim:
        errmsg = f"cannot resize rank {array.ndim} array to shape {tuple(new_shape)}"
        raise ValueError(errmsg)
    resized = create_array(array.dtype, new_shape)
    paste(array, resized, (0,) * array.ndim)
    pad(resized, array.shape)
    return resized


def pad(array: np.ndarray, from_shape: Sequence[int]) -> np.ndarray:
    """Clear everything outside of the box ``[0, from_shape)`` in place.

    Returns
    -------
    array
        The same (modified) array for chaining.
    """
    require_ndarray(array)
    if len(from_shape) != array.ndim:
        errmsg = f"'from_shape' must have {array.ndim} entries"
        raise ValueError(errmsg)
    origin = (0,) * array.ndim
    for axis, n in enumerate(from_shape):
        if n >= array.shape[axis]:
            continue
        start = list(origin)
        start[axis] = n
        clear(array, start, array.shape)
    return array


def copy_of(array: ArrayLike) -> np.ndarray:
    """Independent copy; object elements are deep-copied."""
    array = as_array(array)
    if array.dtype == object:
        return deepcopy(array)
    return array.copy()


def sub_space(array: ArrayLike, keep_index: Index) -> np.ndarray:
    """Project out leading axes.

    Parameters
    ----------
    array
        Array to project.
    keep_index
        One entry per leading axis. Non-negative entries select
        that index and drop the axis, negative entries keep the whole axis.
        Axes beyond ``len(keep_index)`` are always kept.
    """
    array = as_array(array)
    if len(keep_index) > array.ndim:
        errmsg = f"'keep_index' longer than array rank {array.ndim}"
        raise ValueError(errmsg)
    idx = tuple(k if k >= 0 else slice(None) for k in keep_index)
    # Trailing ellipsis keeps the result an array even if every axis is dropped.
    return array[(*idx, Ellipsis)].copy()


def collapse(array: ArrayLike) -> np.ndarray:
    """Drop all singleton axes."""
    array = as_array(array)
    return sub_space(array, [0 if n == 1 else -1 for n in array.shape])


def expand(array: ArrayLike, placement: Sequence[bool]) -> np.ndarray:
    """Insert singleton axes; inverse of :func:`collapse`.

    Parameters
    ----------
    placement
        Mask over the axes of the result. ``True`` marks positions
        of the existing axes (in order) and ``False`` new singleton axes.

    Raises
    ------
    ValueError
        If ``placement`` is shorter than the rank of ``array``
        or the number of ``True`` entries differs from it.
    """
    array = as_array(array)
    if len(placement) < array.ndim:
        errmsg = "'placement' must be at least as long as the array rank"
        raise ValueError(errmsg)
    if sum(map(bool, placement)) != array.ndim:
        errmsg = (
            f"'placement' marks {sum(map(bool, placement))} axes "
            f"for an array of rank {array.ndim}"
        )
        raise ValueError(errmsg)
    sizes = iter(array.shape)
    new_shape = tuple(next(sizes) if keep else 1 for keep in placement)
    return array.reshape(new_shape).copy()


def unfold(array: ArrayLike) -> np.ndarray:
    """Flat row-major copy of all elements."""
    return as_array(array).ravel().copy()


def fold(linear: ArrayLike, shape: Sequence[int]) -> np.ndarray:
    """Fold 1D array into ``shape`` in row-major order.

    Raises
    ------
    ValueError
        If ``linear`` is not 1D or its size differs from the target size.
    """
    linear = as_array(linear)
    if linear.ndim != 1:
        errmsg = f"can only fold 1D arrays, got rank {linear.ndim}"
        raise ValueError(errmsg)
    size = int(np.prod(shape, dtype=int))
    if size != linear.size:
        errmsg = f"cannot fold {linear.size} elements into shape {tuple(shape)}"
        raise ValueError(errmsg)
    return linear.reshape(tuple(shape)).copy()


def cycle(array: np.ndarray, shifts: int | Index) -> np.ndarray:
    """Cyclically shift elements in place.

    The element at index ``shifts[d]`` along axis ``d`` moves to index ``0``.
    A single integer shifts the first axis only.
    """
    require_ndarray(array)
    if isinstance(shifts, int | np.integer):
        shifts = (int(shifts),)
    if len(shifts) > array.ndim:
        errmsg = f"more shifts than axes in array of rank {array.ndim}"
        raise ValueError(errmsg)
    rolled = array
    for axis, n in enumerate(shifts):
        if array.shape[axis]:
            rolled = np.roll(rolled, -(n % array.shape[axis]), axis=axis)
    array[...] = rolled
    return array
