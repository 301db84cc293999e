"""Normalized convolution of weighted data with a kernel window."""
import logging
from collections.abc import Sequence
from typing import Any
from warnings import catch_warnings, filterwarnings

import numpy as np
from more_itertools import chunked
from pqdm.threads import pqdm
from scipy.signal import correlate
from tqdm.auto import tqdm

from ndkit.typing import ArrayLike, FloatND

from .arithmetic import default_weights
from .config import default_config
from .kernels import halfwidths
from .introspection import as_array

__all__ = ("smoothed",)

logger = logging.getLogger(__name__)


def smoothed(
    signal: ArrayLike,
    kernel: ArrayLike,
    weights: ArrayLike | None = None,
    *,
    n_jobs: int | None = None,
    chunk_size: int | None = None,
    method: str | None = None,
    progress: bool | None = None,
) -> FloatND:
    """Smooth weighted data with a kernel window.

    The value at every cell ``p`` is the kernel weighted sum of
    ``signal * weights`` over the window centered on ``p``, divided by the
    kernel weighted sum of ``weights`` over the same window. Window cells
    beyond the array edges and missing (``NaN``) values do not contribute
    to either sum, so the result is corrected for partial coverage instead of
    assuming a full kernel footprint. Cells without any weighted coverage
    are ``NaN``.

    Parameters
    ----------
    signal
        Floating point data. Single precision is promoted to double.
    kernel
        Kernel array of the same rank as ``signal``. Its center cell,
        at ``(kernel.shape[d] - 1) // 2`` along every axis,
        aligns with the target cell.
    weights
        Non-negative weights of the same shape as ``signal``.
        Defaults to unit weights with zeros at missing values.
    n_jobs
        Number of worker threads evaluating chunks of the first axis.
    chunk_size
        Number of cells along the first axis per chunk.
    method
        Correlation method passed to :func:`scipy.signal.correlate`.
        Exact ``"direct"`` evaluation is used by default.
    progress
        Should progress bar be displayed.

    Options left as ``None`` are taken from the ``[smoothing]`` config section.

    Raises
    ------
    TypeError
        If ``signal`` is not floating point.
    ValueError
        If shapes of ``signal`` and ``weights`` differ, kernel rank
        differs from signal rank or kernel is empty.
    """
    signal = as_array(signal)
    if signal.dtype.kind != "f":
        errmsg = f"can smooth floating point arrays only, got '{signal.dtype}'"
        raise TypeError(errmsg)
    signal = signal.astype(np.float64, copy=False)
    if weights is None:
        weights = default_weights(signal)
    weights = as_array(weights, dtype=np.float64)
    kernel = as_array(kernel, dtype=np.float64)
    if weights.shape != signal.shape:
        errmsg = f"'weights' shape {weights.shape} differs from {signal.shape}"
        raise ValueError(errmsg)
    if kernel.ndim != signal.ndim:
        errmsg = f"kernel of rank {kernel.ndim} for data of rank {signal.ndim}"
        raise ValueError(errmsg)
    if kernel.size == 0:
        errmsg = "kernel cannot be empty"
        raise ValueError(errmsg)

    if signal.ndim == 0:
        out = smoothed(
            signal[None],
            kernel[None],
            weights[None],
            n_jobs=n_jobs,
            chunk_size=chunk_size,
            method=method,
            progress=progress,
        )
        return out.reshape(())
    if signal.size == 0:
        return np.empty(signal.shape)

    config = default_config()
    n_jobs = _setting(n_jobs, config, "n_jobs", 1)
    chunk_size = _setting(chunk_size, config, "chunk_size", 32)
    method = _setting(method, config, "method", "direct")
    progress = _setting(progress, config, "progress", False)
    if n_jobs < 1 or chunk_size < 1:
        errmsg = "'n_jobs' and 'chunk_size' have to be positive"
        raise ValueError(errmsg)

    with catch_warnings():
        filterwarnings("ignore", "invalid")
        weighted = signal * weights
    # Missing values and cells beyond the edges contribute to neither sum.
    weighted = np.where(np.isnan(weighted), 0.0, weighted)
    weights = np.where(np.isnan(weights), 0.0, weights)
    before = halfwidths(kernel)
    after = [n - 1 - b for n, b in zip(kernel.shape, before, strict=True)]
    pad_width = list(zip(before, after, strict=True))
    weighted = np.pad(weighted, pad_width)
    weights = np.pad(weights, pad_width)
    # Number of weighted cells under the kernel footprint; integral for any method.
    support = (weights != 0).astype(np.float64)
    footprint = (kernel != 0).astype(np.float64)

    def correlate_rows(rows: Sequence[int]) -> tuple[int, FloatND, FloatND, FloatND]:
        window = slice(rows[0], rows[-1] + kernel.shape[0])
        num = correlate(weighted[window], kernel, mode="valid", method=method)
        norm = correlate(weights[window], kernel, mode="valid", method=method)
        cover = correlate(support[window], footprint, mode="valid", method=method)
        return window.start, num, norm, cover

    chunks = list(chunked(range(signal.shape[0]), chunk_size))
    logger.debug(
        "smoothing %s array with %s kernel in %d chunk(s) using %d job(s)",
        signal.shape,
        kernel.shape,
        len(chunks),
        n_jobs,
    )
    tqdm_kwargs: dict[str, Any] = {"disable": not progress, "leave": False}
    if n_jobs == 1 or len(chunks) == 1:
        results = map(correlate_rows, tqdm(chunks, **tqdm_kwargs))
    else:
        results = pqdm(
            chunks,
            correlate_rows,
            n_jobs=min(n_jobs, len(chunks)),
            exception_behaviour="immediate",
            **tqdm_kwargs,
        )

    out = np.empty(signal.shape)
    for start, num, norm, cover in results:
        with catch_warnings():
            filterwarnings("ignore", "invalid|divide")
            values = num / norm
        values[(norm == 0) | (cover < 0.5)] = np.nan
        out[start : start + len(values)] = values
    return out


# Internals --------------------------------------------------------------------------


def _setting(value: Any, config: Any, key: str, default: Any) -> Any:
    if value is not None:
        return value
    return config.lookup(f"smoothing.{key}", default)
