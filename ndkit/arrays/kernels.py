"""Convolution kernels for smoothing and regridding."""
from abc import ABC, abstractmethod
from collections.abc import Sequence
from math import ceil, log, sqrt

import numpy as np

from ndkit.arrays.config import registry
from ndkit.typing import FloatND
from ndkit.utils.array import outer

__all__ = ("Kernel", "GaussianKernel", "BoxcarKernel", "gaussian_kernel", "halfwidths")

SIGMAS_IN_FWHM = 2 * sqrt(2 * log(2))


class Kernel(ABC):
    """Kernel factory.

    Kernels are built for a per-axis full width at half maximum (FWHM)
    in units of array cells. Every axis of the resulting array
    has an odd length, so the kernel center aligns with the target cell.
    """

    def __call__(self, fwhm: Sequence[float]) -> FloatND:
        """Build N-dimensional kernel with one axis per ``fwhm`` entry."""
        fwhm = [float(f) for f in fwhm]
        if any(f < 0 for f in fwhm):
            errmsg = "'fwhm' cannot be negative"
            raise ValueError(errmsg)
        return outer(*(self.profile(f, len(fwhm)) for f in fwhm))

    @abstractmethod
    def profile(self, fwhm: float, rank: int) -> FloatND:
        """1D kernel profile along a single axis of a rank ``rank`` kernel."""


@registry.arrays.kernels.register("gaussian")
class GaussianKernel(Kernel):
    """Gaussian kernel.

    Attributes
    ----------
    width
        Truncation radius in standard deviations.
        Defaults to ``3 + rank`` when ``None``.
    """

    def __init__(self, width: float | None = None) -> None:
        if width is not None and width <= 0:
            errmsg = "'width' has to be positive"
            raise ValueError(errmsg)
        self.width = width

    def profile(self, fwhm: float, rank: int) -> FloatND:
        sigma = fwhm / SIGMAS_IN_FWHM
        if sigma == 0:
            return np.ones(1)
        width = self.width if self.width is not None else 3.0 + rank
        n = ceil(width * sigma)
        d = np.arange(-n, n + 1)
        return np.exp(-0.5 * (d / sigma) ** 2)


@registry.arrays.kernels.register("boxcar")
class BoxcarKernel(Kernel):
    """Flat kernel spanning ``fwhm`` cells, rounded up to an odd count."""

    def profile(self, fwhm: float, rank: int) -> FloatND:
        n = max(ceil(fwhm), 1)
        if n % 2 == 0:
            n += 1
        return np.ones(n)


def gaussian_kernel(fwhm: Sequence[float], width: float | None = None) -> FloatND:
    """Gaussian kernel truncated at ``width`` standard deviations."""
    return GaussianKernel(width)(fwhm)


def halfwidths(kernel: FloatND) -> tuple[int, ...]:
    """Per-axis number of kernel cells before the center cell."""
    return tuple((n - 1) // 2 for n in np.shape(kernel))
