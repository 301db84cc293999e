"""Stateless operations over rectangular N-dimensional arrays."""
from .config import Config, default_config, registry
from .kernels import BoxcarKernel, GaussianKernel, Kernel, gaussian_kernel, halfwidths
from .introspection import (
    as_array,
    create_array,
    element_count,
    element_type,
    first_element,
    initialize,
    rank,
    shape,
    value_at,
)
from .arithmetic import (
    absolute,
    add,
    add_pin_at,
    as_double,
    as_float,
    clear,
    default_weights,
    dot,
    fill,
    offset,
    product,
    replace_values,
    scale,
)
from .compose import (
    collapse,
    copy_of,
    cycle,
    expand,
    fold,
    pad,
    paste,
    resize,
    sub_array,
    sub_space,
    unfold,
)
from .smoothing import smoothed
from .regrid import coarse_regrid, coarse_regrid_of, smooth_regrid_of
from .formatting import ArrayParseError, parse, parse_into, to_string

__all__ = (
    "Config",
    "default_config",
    "registry",
    "Kernel",
    "GaussianKernel",
    "BoxcarKernel",
    "gaussian_kernel",
    "halfwidths",
    "as_array",
    "create_array",
    "element_count",
    "element_type",
    "first_element",
    "initialize",
    "rank",
    "shape",
    "value_at",
    "absolute",
    "add",
    "add_pin_at",
    "as_double",
    "as_float",
    "clear",
    "default_weights",
    "dot",
    "fill",
    "offset",
    "product",
    "replace_values",
    "scale",
    "collapse",
    "copy_of",
    "cycle",
    "expand",
    "fold",
    "pad",
    "paste",
    "resize",
    "sub_array",
    "sub_space",
    "unfold",
    "smoothed",
    "coarse_regrid",
    "coarse_regrid_of",
    "smooth_regrid_of",
    "ArrayParseError",
    "parse",
    "parse_into",
    "to_string",
)
