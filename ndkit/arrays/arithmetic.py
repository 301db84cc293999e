"""Element-wise arithmetic over rectangular regions of arrays.

Functions mutating their first argument require a :class:`numpy.ndarray`
destination and never allocate. Element kinds are checked before the first
write, so a rejected call leaves the destination untouched.
"""
from copy import copy
from typing import Any

import numpy as np

from ndkit.typing import ArrayLike, FloatND, Index
from ndkit.utils.array import make_arrays, region

from .introspection import as_array, element_type, first_element, initialize

__all__ = (
    "clear",
    "fill",
    "add",
    "scale",
    "offset",
    "product",
    "dot",
    "absolute",
    "replace_values",
    "default_weights",
    "as_double",
    "as_float",
    "add_pin_at",
    "require_ndarray",
    "clipped_overlap",
    "require_additive",
)

NUMERIC_KINDS = "iufc"

# Value kinds accepted by 'fill' for each array kind.
FILL_KINDS = {
    "f": "fi",
    "i": "i",
    "u": "i",
    "b": "b",
    "c": "cfi",
}


def clear(
    array: np.ndarray,
    start: Index | None = None,
    stop: Index | None = None,
) -> None:
    """Zero the region ``[start, stop)``, by default the whole array.

    Object arrays get fresh default instances of their element type instead.
    """
    require_ndarray(array)
    idx = region(start, stop, array.shape)
    if array.dtype == object:
        if array.size:
            initialize(array, type(first_element(array)), start, stop)
        return
    array[idx] = 0


def fill(
    array: np.ndarray,
    value: Any,
    start: Index | None = None,
    stop: Index | None = None,
) -> None:
    """Set every element of the region ``[start, stop)`` to ``value``.

    Raises
    ------
    TypeError
        If the kind of ``value`` does not match the array element kind,
        e.g. when filling a floating point array with a boolean.
        Object array cells receive shallow copies of ``value``,
        which must be an instance of the element type.
    ValueError
        If an integer ``value`` is out of range of an integer array.
    """
    require_ndarray(array)
    idx = region(start, stop, array.shape)
    if array.dtype == object:
        cls = element_type(array)
        if _is_element_class(cls) and not isinstance(value, cls):
            errmsg = (
                f"cannot fill array of '{cls.__name__}' "
                f"with value of '{type(value).__name__}'"
            )
            raise TypeError(errmsg)
        view = array[idx]
        for i in np.ndindex(view.shape):
            view[i] = copy(value)
        return
    accepted = FILL_KINDS.get(array.dtype.kind)
    if accepted is None:
        errmsg = f"cannot fill array of '{array.dtype}'"
        raise TypeError(errmsg)
    if _value_kind(value) not in accepted:
        errmsg = (
            f"cannot fill array of '{array.dtype}' "
            f"with value of '{type(value).__name__}'"
        )
        raise TypeError(errmsg)
    if array.dtype.kind in "iu":
        info = np.iinfo(array.dtype)
        if not info.min <= int(value) <= info.max:
            errmsg = f"value {value} out of range of '{array.dtype}'"
            raise ValueError(errmsg)
    array[idx] = value


def add(array: np.ndarray, offset: Index, patch: ArrayLike) -> None:
    """Accumulate ``patch`` into ``array`` starting at ``offset``.

    The region is clipped to the overlap exactly as in
    :func:`ndkit.arrays.compose.paste`. Nested sequences passed as ``patch``
    are converted to the element kind of ``array``.

    Raises
    ------
    TypeError
        If ``patch`` is an array of a different element kind,
        or the element kind does not support addition.
    """
    require_ndarray(array)
    if isinstance(patch, np.ndarray):
        if patch.dtype != array.dtype:
            errmsg = f"cannot add '{patch.dtype}' array to '{array.dtype}' array"
            raise TypeError(errmsg)
    else:
        patch = as_array(patch, dtype=array.dtype)
    require_additive(array)
    n = clipped_overlap(array, offset, patch)
    src = tuple(slice(0, k) for k in n)
    dst = tuple(slice(o, o + k) for o, k in zip(offset, n, strict=True))
    array[dst] += patch[src]


def scale(array: np.ndarray, factor: Any) -> None:
    """Multiply every element in place.

    Parameters
    ----------
    factor
        Scalar or array broadcastable to the shape of ``array``.
        Integer arrays are rescaled with truncation towards zero.
    """
    require_ndarray(array)
    if array.dtype == object:
        array *= factor
        return
    _require_numeric(array, "scale")
    np.multiply(array, factor, out=array, casting="unsafe")


def offset(array: np.ndarray, constant: Any) -> None:
    """Add ``constant`` to every element in place."""
    require_ndarray(array)
    if array.dtype == object:
        array += constant
        return
    _require_numeric(array, "offset")
    np.add(array, constant, out=array, casting="unsafe")


def product(a: ArrayLike, b: ArrayLike) -> np.ndarray:
    """Element-wise product of two arrays of the same shape."""
    a, b = make_arrays(a, b)
    _require_same_shape(a, b)
    return a * b


def dot(a: ArrayLike, b: ArrayLike) -> Any:
    """Sum of element-wise products skipping pairs with a missing value.

    Pairs in which either element is ``NaN`` do not contribute,
    so the result of all-missing input is ``0``.
    """
    a, b = make_arrays(a, b)
    _require_same_shape(a, b)
    for x in (a, b):
        _require_numeric(x, "dot")
    valid = ~(np.isnan(a) | np.isnan(b))
    return np.sum(a[valid] * b[valid]).item()


def absolute(array: np.ndarray) -> None:
    """Replace elements with their absolute values in place.

    Complex arrays keep their dtype and get zero imaginary parts.
    """
    require_ndarray(array)
    if array.dtype == object:
        for i in np.ndindex(array.shape):
            array[i] = abs(array[i])
        return
    _require_numeric(array, "absolute")
    np.abs(array, out=array, casting="unsafe")


def replace_values(array: np.ndarray, old: Any, new: Any) -> None:
    """Replace all occurrences of ``old`` with ``new`` in place.

    ``old`` may be ``NaN``, which matches all missing values.
    """
    require_ndarray(array)
    if isinstance(old, float) and np.isnan(old):
        mask = np.isnan(array)
    else:
        mask = array == old
    array[mask] = new


def default_weights(data: ArrayLike) -> FloatND:
    """Unit weights with zeros at missing (``NaN``) values."""
    data = as_array(data)
    if data.dtype.kind != "f":
        errmsg = f"'{data.dtype}' arrays cannot be assigned default weights"
        raise TypeError(errmsg)
    return np.where(np.isnan(data), 0, 1).astype(data.dtype)


def as_double(data: ArrayLike) -> FloatND:
    """Double precision copy."""
    return as_array(data).astype(np.float64)


def as_float(data: ArrayLike) -> FloatND:
    """Single precision copy."""
    return as_array(data).astype(np.float32)


def add_pin_at(
    array: np.ndarray,
    value: Any,
    position: Index | FloatND,
    scale: float = 1.0,
) -> None:
    """Add ``scale * value`` to the cell containing a fractional position.

    Raises
    ------
    IndexError
        If ``position`` falls outside of the array.
    """
    require_ndarray(array)
    if len(position) != array.ndim:
        errmsg = f"position of length {len(position)} for array of rank {array.ndim}"
        raise ValueError(errmsg)
    idx = tuple(int(np.floor(p)) for p in position)
    if any(not 0 <= i < n for i, n in zip(idx, array.shape, strict=True)):
        errmsg = f"position {tuple(position)} outside of array of shape {array.shape}"
        raise IndexError(errmsg)
    array[idx] += scale * value


def require_ndarray(array: Any) -> None:
    """Ensure that in-place destination is an array.

    Raises
    ------
    TypeError
        If ``array`` is not a :class:`numpy.ndarray`.
    """
    if not isinstance(array, np.ndarray):
        errmsg = f"destination must be 'numpy.ndarray', got '{type(array).__name__}'"
        raise TypeError(errmsg)


def clipped_overlap(
    array: np.ndarray, offset: Index, patch: np.ndarray
) -> tuple[int, ...]:
    """Extents of ``patch`` that fit into ``array`` when placed at ``offset``.

    Raises
    ------
    ValueError
        If ranks of ``array``, ``patch`` and ``offset`` differ.
    """
    if not len(offset) == array.ndim == patch.ndim:
        errmsg = (
            f"rank mismatch: array {array.ndim}, patch {patch.ndim}, "
            f"offset {len(offset)}"
        )
        raise ValueError(errmsg)
    return tuple(
        max(min(n - o, k), 0)
        for n, o, k in zip(array.shape, offset, patch.shape, strict=True)
    )


def require_additive(array: np.ndarray) -> None:
    """Ensure that array elements can be accumulated.

    Raises
    ------
    TypeError
        If elements are neither numeric nor objects supporting ``+``.
    """
    if array.dtype == object:
        cls = element_type(array)
        if _is_element_class(cls) and not hasattr(cls, "__add__"):
            errmsg = f"'{cls.__name__}' elements do not support addition"
            raise TypeError(errmsg)
        return
    _require_numeric(array, "add")


# Internals --------------------------------------------------------------------------


def _value_kind(value: Any) -> str:
    if isinstance(value, bool | np.bool_):
        return "b"
    if isinstance(value, int | np.integer):
        return "i"
    if isinstance(value, float | np.floating):
        return "f"
    if isinstance(value, complex | np.complexfloating):
        return "c"
    return "O"


def _is_element_class(cls: Any) -> bool:
    # Unpopulated object arrays hold None and accept anything.
    return isinstance(cls, type) and cls is not type(None)


def _require_numeric(array: np.ndarray, operation: str) -> None:
    if array.dtype.kind not in NUMERIC_KINDS:
        errmsg = f"'{operation}' is not supported for '{array.dtype}' arrays"
        raise TypeError(errmsg)


def _require_same_shape(a: np.ndarray, b: np.ndarray) -> None:
    if a.shape != b.shape:
        errmsg = f"shape mismatch: {a.shape} and {b.shape}"
        raise ValueError(errmsg)
