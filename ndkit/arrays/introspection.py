"""Shape and element type introspection of N-dimensional arrays.

All functions accept anything :func:`as_array` can convert:
:class:`numpy.ndarray` instances, scalars and nested sequences.
Nested sequences must be rectangular, i.e. all siblings at the same depth
must have the same length. Ragged input is rejected instead of being
measured along the first element path.
"""
from collections.abc import Sequence
from typing import Any

import numpy as np

from ndkit.typing import ArrayLike, Index, Kind, Shape
from ndkit.utils.array import region

__all__ = (
    "as_array",
    "rank",
    "shape",
    "element_type",
    "element_count",
    "first_element",
    "value_at",
    "create_array",
    "initialize",
)


def as_array(obj: ArrayLike, dtype: Kind | None = None) -> np.ndarray:
    """Convert ``obj`` to an array without copying existing arrays.

    Parameters
    ----------
    obj
        Array, scalar or nested sequence.
    dtype
        Optional element kind to convert to.

    Raises
    ------
    ValueError
        If ``obj`` is a ragged nested sequence.
    """
    if isinstance(obj, np.ndarray):
        return obj if dtype is None else obj.astype(dtype, copy=False)
    try:
        return np.asarray(obj, dtype=dtype)
    except ValueError as exc:
        errmsg = f"cannot convert non-rectangular sequence to an array: {exc}"
        raise ValueError(errmsg) from exc


def rank(array: ArrayLike | None) -> int:
    """Number of nested dimensions; ``0`` for scalars and ``None``."""
    if array is None:
        return 0
    return as_array(array).ndim


def shape(array: ArrayLike | None) -> Shape:
    """Per-axis extents; empty for scalars and ``None``."""
    if array is None:
        return ()
    return tuple(as_array(array).shape)


def element_type(array: ArrayLike | None) -> Kind | None:
    """Element kind.

    For numeric arrays it is the :class:`numpy.dtype`. Object arrays
    report the Python type of their first element.
    """
    if array is None:
        return None
    array = as_array(array)
    if array.dtype == object and array.size:
        return type(first_element(array))
    return array.dtype


def element_count(array: ArrayLike | None) -> int:
    """Total number of elements; ``1`` for scalars."""
    return int(np.prod(shape(array), dtype=int))


def first_element(array: ArrayLike) -> Any:
    """Element reached by descending into index ``0`` along every axis."""
    array = as_array(array)
    return array[(0,) * array.ndim]


def value_at(array: ArrayLike, index: Index) -> Any:
    """Element at a full multi-index.

    Raises
    ------
    ValueError
        If ``index`` does not have one entry per axis.
    """
    array = as_array(array)
    if len(index) != array.ndim:
        errmsg = f"index of length {len(index)} for array of rank {array.ndim}"
        raise ValueError(errmsg)
    return array[tuple(index)]


def create_array(kind: Kind, shape: Sequence[int]) -> np.ndarray:
    """Allocate a zero-valued array.

    Arrays of Python classes (anything that is not a numpy scalar type)
    are allocated with ``object`` dtype and filled with ``None``.
    Use :func:`initialize` to populate them with default instances.
    """
    dtype = _as_dtype(kind)
    if dtype == object:
        return np.full(tuple(shape), None, dtype=object)
    return np.zeros(tuple(shape), dtype=dtype)


def initialize(
    array: np.ndarray,
    cls: type,
    start: Index | None = None,
    stop: Index | None = None,
) -> None:
    """Populate object array region with fresh ``cls()`` instances."""
    if array.dtype != object:
        errmsg = f"only object arrays can be initialized, got '{array.dtype}'"
        raise TypeError(errmsg)
    view = array[region(start, stop, array.shape)]
    for idx in np.ndindex(view.shape):
        view[idx] = cls()


# Internals --------------------------------------------------------------------------


def _as_dtype(kind: Kind) -> np.dtype:
    if isinstance(kind, np.dtype):
        return kind
    builtin = (np.generic, bool, int, float, complex)
    if isinstance(kind, type) and not issubclass(kind, builtin):
        return np.dtype(object)
    return np.dtype(kind)
