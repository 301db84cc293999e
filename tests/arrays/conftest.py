from fractions import Fraction
from typing import Self

import numpy as np
import pytest

from ndkit.arrays import create_array, initialize


class Tally:
    """Mutable additive element used to exercise object arrays."""

    def __init__(self, count: int = 0) -> None:
        self.count = count

    def __add__(self, other: Self) -> Self:
        return type(self)(self.count + other.count)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Tally) and self.count == other.count

    def __repr__(self) -> str:
        return f"Tally({self.count})"


@pytest.fixture(scope="function", params=[(5,), (3, 4), (2, 3, 4), (1, 3, 1, 2)])
def array(request) -> np.ndarray:
    shape = request.param
    return np.arange(np.prod(shape), dtype=float).reshape(shape) + 1


@pytest.fixture(scope="function")
def tallies() -> np.ndarray:
    arr = create_array(Tally, (2, 3))
    initialize(arr, Tally)
    for i, idx in enumerate(np.ndindex(arr.shape)):
        arr[idx] = Tally(i)
    return arr


@pytest.fixture(scope="function")
def fractions() -> np.ndarray:
    return np.array([Fraction(1, 2), Fraction(1, 3), Fraction(1, 6), Fraction(1)])


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    return np.random.default_rng(1729)


@pytest.fixture(scope="session")
def tally_type() -> type[Tally]:
    return Tally
