from collections.abc import Sequence
from pathlib import Path
from typing import Any, TypeAlias

import numpy as np
import numpy.typing as npt

PathLike = str | Path

ArrayLike: TypeAlias = npt.ArrayLike
Index: TypeAlias = Sequence[int]
Shape: TypeAlias = tuple[int, ...]
Kind: TypeAlias = np.dtype[Any] | type

FloatND = float | npt.NDArray[np.floating]
