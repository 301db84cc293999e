"""Array utility functions."""
from collections.abc import Sequence
from typing import Any

import numpy as np

from ndkit.typing import FloatND


def make_arrays(*args: Any) -> tuple[np.ndarray, ...]:
    """Convert arguments to arrays."""
    return tuple(np.array(a) for a in args)


def expand_dims(X: np.ndarray, n: int = 1, axis: int = 0) -> np.ndarray:
    """Expand array dimensions.

    Parameters
    ----------
    X
        Array to modify.
    axis
        Axis index at which to start expanding.
    n
        Number of axes to add.
    """
    for _ in range(n):
        X = np.expand_dims(X, axis)
    return X


def ndgrid(*Xs: np.ndarray) -> tuple[np.ndarray, ...]:
    """Reshape sequence of arrays or scalars, so they form a grid
    of N-dimensional coordinates allowing for outer vectorization.

    Scalars do not add unitary axes, but are returned
    as 0-dimensional :class:`numpy.ndarray` instances.
    """
    Xs = tuple(np.array(X) for X in Xs)
    ndims = [X.ndim for X in Xs]
    mesh = []
    for i, X in enumerate(Xs):
        if X.ndim >= 1:
            n_left = sum(ndims[:i])
            n_right = sum(ndims[i + 1 :])
            X = expand_dims(X, n_left, 0)
            X = expand_dims(X, n_right, -1)
        mesh.append(X)
    return tuple(mesh)


def outer(*profiles: FloatND) -> FloatND:
    """Outer product of 1D profiles.

    The result has one axis per profile, so ``outer(a, b)[i, j] == a[i] * b[j]``.
    No profiles give a 0-dimensional unit array.
    """
    result = np.array(1.0)
    for X in ndgrid(*profiles):
        result = result * X
    return result


def region(
    start: Sequence[int] | None, stop: Sequence[int] | None, shape: Sequence[int]
) -> tuple[slice, ...]:
    """Index expression selecting the half-open box ``[start, stop)``.

    Missing ``start`` or ``stop`` default to the origin and ``shape``.

    Raises
    ------
    ValueError
        If ``start`` and ``stop`` do not have one entry per axis.
    """
    start = tuple(start) if start is not None else (0,) * len(shape)
    stop = tuple(stop) if stop is not None else tuple(shape)
    if len(start) != len(shape) or len(stop) != len(shape):
        errmsg = (
            f"'start' and 'stop' must have {len(shape)} entries, "
            f"got {len(start)} and {len(stop)}"
        )
        raise ValueError(errmsg)
    return tuple(slice(int(a), int(b)) for a, b in zip(start, stop, strict=True))
