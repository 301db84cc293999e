"""Resampling of arrays between resolutions."""
import logging
from collections.abc import Sequence
from typing import Any

import numpy as np

from ndkit.typing import ArrayLike, FloatND

from .arithmetic import as_double, require_additive, require_ndarray
from .config import default_config, registry
from .kernels import Kernel
from .introspection import as_array, create_array, initialize
from .smoothing import smoothed

__all__ = ("coarse_regrid", "coarse_regrid_of", "smooth_regrid_of")

logger = logging.getLogger(__name__)


def coarse_regrid(source: ArrayLike, destination: np.ndarray) -> None:
    """Scatter-accumulate ``source`` into ``destination`` in place.

    Along every axis the source element at index ``i`` is added to
    the destination bucket ``floor(stretch * i)`` with
    ``stretch = destination.shape[d] / source.shape[d]``.
    This is not an interpolation: several source cells may be summed
    into one bucket and some buckets may receive nothing.

    Raises
    ------
    ValueError
        If ranks differ or the destination is empty along an axis
        on which the source is not.
    TypeError
        If element kinds differ or do not support addition.
    """
    require_ndarray(destination)
    source = as_array(source)
    if source.ndim != destination.ndim:
        errmsg = f"cannot regrid rank {source.ndim} array into rank {destination.ndim}"
        raise ValueError(errmsg)
    if source.dtype != destination.dtype:
        errmsg = f"cannot regrid '{source.dtype}' array into '{destination.dtype}'"
        raise TypeError(errmsg)
    require_additive(destination)
    if source.size == 0:
        return
    if destination.size == 0:
        errmsg = f"cannot regrid {source.shape} array into {destination.shape}"
        raise ValueError(errmsg)

    if source.ndim == 0:
        destination[...] += source
        return

    buckets = [
        _buckets(n, m) for n, m in zip(source.shape, destination.shape, strict=True)
    ]
    if destination.dtype == object:
        for i in np.ndindex(source.shape):
            b = tuple(bucket[k] for bucket, k in zip(buckets, i, strict=True))
            destination[b] = destination[b] + source[i]
        return
    np.add.at(destination, np.ix_(*buckets), source)


def coarse_regrid_of(array: ArrayLike, stretch: Sequence[float]) -> np.ndarray:
    """Coarse regrid into a new array of shape ``round(stretch * shape)``."""
    array = as_array(array)
    if len(stretch) != array.ndim:
        errmsg = f"'stretch' must have {array.ndim} entries, got {len(stretch)}"
        raise ValueError(errmsg)
    shape = [
        int(np.floor(s * n + 0.5)) for s, n in zip(stretch, array.shape, strict=True)
    ]
    regridded = create_array(array.dtype, shape)
    if regridded.dtype == object and array.size:
        initialize(regridded, type(array[(0,) * array.ndim]))
    logger.debug("regridding %s array to %s", array.shape, tuple(shape))
    coarse_regrid(array, regridded)
    return regridded


def smooth_regrid_of(
    array: ArrayLike,
    stretch: Sequence[float],
    kernel: Kernel | str | None = None,
    **kwds: Any,
) -> FloatND:
    """Coarse regrid followed by anti-aliasing smoothing.

    Axes with ``stretch`` above the ``regrid.fwhm_threshold`` config value
    (``1`` by default) are smoothed with a kernel FWHM equal to the stretch,
    the remaining axes are not smoothed at all.

    Parameters
    ----------
    array
        Floating point array. Single precision is promoted to double.
    stretch
        Per-axis ratio of target to source extent.
    kernel
        Kernel factory or the name of a registered one.
        Defaults to the ``regrid.kernel`` config entry (Gaussian).
    **kwds
        Passed to :func:`ndkit.arrays.smoothing.smoothed`.

    Raises
    ------
    TypeError
        If ``array`` is not floating point.
    """
    array = as_array(array)
    if array.dtype.kind != "f":
        errmsg = f"cannot smoothly regrid arrays of '{array.dtype}'"
        raise TypeError(errmsg)
    coarse = as_double(coarse_regrid_of(array, stretch))

    config = default_config()
    if kernel is None:
        kernel = config.lookup("regrid.kernel")
    elif isinstance(kernel, str):
        kernel = registry.arrays.kernels.get(kernel)()
    threshold = config.lookup("regrid.fwhm_threshold", 1.0)
    fwhm = [s if s > threshold else 0.0 for s in stretch]
    logger.debug("smoothing regridded %s array with FWHM %s", coarse.shape, fwhm)
    return smoothed(coarse, kernel(fwhm), **kwds)


# Internals --------------------------------------------------------------------------


def _buckets(n: int, m: int) -> np.ndarray:
    stretch = m / n
    idx = np.floor(stretch * np.arange(n)).astype(int)
    return np.minimum(idx, m - 1)
