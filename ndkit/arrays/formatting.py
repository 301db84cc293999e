"""Textual representation of nested arrays.

Arrays are written as bracketed, comma-separated lists,
e.g. ``{{1,2},{3,4}}`` for a 2x2 array, and parsed back from the same
grammar. Whitespace around elements and brackets is ignored when parsing.
"""
from collections.abc import Callable
from typing import Any

import numpy as np

from ndkit.typing import ArrayLike, Kind

from .arithmetic import require_ndarray
from .config import default_config
from .introspection import as_array

__all__ = ("ArrayParseError", "to_string", "parse", "parse_into")

OPEN = "{"
CLOSE = "}"
SEPARATOR = ","

TRUE = frozenset({"true", "t", "yes", "y", "on", "1"})
FALSE = frozenset({"false", "f", "no", "n", "off", "0"})


class ArrayParseError(ValueError):
    """Malformed textual array representation."""


def to_string(array: ArrayLike, decimals: int | None = None) -> str:
    """Format array as nested bracketed lists.

    Parameters
    ----------
    array
        Array or nested sequence.
    decimals
        Number of decimals of floating point elements written
        in fixed-point notation. When ``None`` the ``formatting.float_format``
        config entry (a :func:`format` spec) is used.

    Examples
    --------
    >>> to_string([1.0, 2.0, 3.0], decimals=0)
    '{1,2,3}'
    >>> to_string([[1, 2], [3, 4]])
    '{{1,2},{3,4}}'
    """
    array = as_array(array)
    if decimals is not None:
        spec = f".{decimals}f"
    else:
        spec = default_config().lookup("formatting.float_format", "g")
    return _format(array, _element_formatter(array.dtype, spec))


def parse(text: str, kind: Kind) -> np.ndarray:
    """Parse text into a freshly allocated array.

    Text without enclosing brackets is parsed as a single element
    and returned as a 0-dimensional array.

    Raises
    ------
    ArrayParseError
        On unbalanced brackets, empty elements, non-rectangular nesting
        or elements that are not valid values of ``kind``.
    TypeError
        If ``kind`` is not a numeric or boolean element kind.
    """
    dtype = np.dtype(kind)
    convert = _converter(dtype)
    tree = _parse_tree(text)
    values = _convert(tree, convert)
    try:
        return np.array(values, dtype=dtype)
    except (ValueError, OverflowError) as exc:
        errmsg = f"cannot build '{dtype}' array from '{text}': {exc}"
        raise ArrayParseError(errmsg) from exc


def parse_into(text: str, array: np.ndarray) -> None:
    """Parse text into an existing array.

    The nesting of ``text`` must match the shape of ``array`` exactly.
    Nothing is written unless the whole text is parsed successfully.

    Raises
    ------
    ArrayParseError
        On malformed text or a mismatch between the number of parsed
        elements and the array extents.
    TypeError
        If ``array`` is not a numeric or boolean :class:`numpy.ndarray`.
    """
    require_ndarray(array)
    convert = _converter(array.dtype)
    tree = _parse_tree(text)
    _match_shape(tree, array.shape)
    values = _convert(tree, convert)
    try:
        parsed = np.array(values, dtype=array.dtype)
    except OverflowError as exc:
        errmsg = f"values of '{text}' do not fit into '{array.dtype}': {exc}"
        raise ArrayParseError(errmsg) from exc
    array[...] = parsed


# Internals --------------------------------------------------------------------------


def _format(array: np.ndarray, formatter: Callable[[Any], str]) -> str:
    if array.ndim == 0:
        return formatter(array[()])
    items = (_format(array[i, ...], formatter) for i in range(array.shape[0]))
    return OPEN + SEPARATOR.join(items) + CLOSE


def _element_formatter(dtype: np.dtype, spec: str) -> Callable[[Any], str]:
    if dtype.kind == "b":
        return lambda x: "true" if x else "false"
    if dtype.kind in "iu":
        return lambda x: str(int(x))
    if dtype.kind == "f":
        return lambda x: format(float(x), spec)
    if dtype.kind == "c":
        return lambda x: format(complex(x), spec)
    return str


def _parse_tree(text: str) -> Any:
    """Split text into nested lists of element tokens."""
    text = text.strip()
    if text.startswith(OPEN) and text.endswith(CLOSE):
        body = text[1:-1].strip()
        if not body:
            return []
        return [_parse_tree(token) for token in _split(body)]
    if OPEN in text or CLOSE in text:
        errmsg = f"malformed array literal '{text}'"
        raise ArrayParseError(errmsg)
    if not text:
        errmsg = "empty array element"
        raise ArrayParseError(errmsg)
    return text


def _split(body: str) -> list[str]:
    """Split on separators outside of nested brackets."""
    tokens = []
    depth = 0
    start = 0
    for i, char in enumerate(body):
        if char == OPEN:
            depth += 1
        elif char == CLOSE:
            depth -= 1
            if depth < 0:
                errmsg = f"unbalanced '{CLOSE}' in '{body}'"
                raise ArrayParseError(errmsg)
        elif char == SEPARATOR and depth == 0:
            tokens.append(body[start:i])
            start = i + 1
    if depth != 0:
        errmsg = f"unbalanced '{OPEN}' in '{body}'"
        raise ArrayParseError(errmsg)
    tokens.append(body[start:])
    return tokens


def _match_shape(tree: Any, shape: tuple[int, ...]) -> None:
    if not shape:
        if isinstance(tree, list):
            errmsg = "nested list where a single element is expected"
            raise ArrayParseError(errmsg)
        return
    if not isinstance(tree, list):
        errmsg = f"single element '{tree}' where a list of {shape[0]} is expected"
        raise ArrayParseError(errmsg)
    if len(tree) != shape[0]:
        errmsg = f"{len(tree)} elements parsed into an axis of length {shape[0]}"
        raise ArrayParseError(errmsg)
    for sub in tree:
        _match_shape(sub, shape[1:])


def _convert(tree: Any, convert: Callable[[str], Any]) -> Any:
    if isinstance(tree, list):
        return [_convert(sub, convert) for sub in tree]
    try:
        return convert(tree)
    except ValueError as exc:
        errmsg = f"invalid array element '{tree}': {exc}"
        raise ArrayParseError(errmsg) from exc


def _converter(dtype: np.dtype) -> Callable[[str], Any]:
    if dtype.kind == "b":
        return _parse_bool
    if dtype.kind in "iu":
        return _parse_int
    if dtype.kind == "f":
        return float
    if dtype.kind == "c":
        return lambda token: complex(token.replace(" ", ""))
    errmsg = f"cannot parse arrays of '{dtype}'"
    raise TypeError(errmsg)


def _parse_int(token: str) -> int:
    try:
        return int(token, 0)
    except ValueError:
        return int(token)


def _parse_bool(token: str) -> bool:
    word = token.strip().lower()
    if word in TRUE:
        return True
    if word in FALSE:
        return False
    errmsg = f"'{token}' is not a boolean"
    raise ValueError(errmsg)
