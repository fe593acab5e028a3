"""
Array routines: factories, named reductions and scans, selection and views,
shape manipulation, joining, take / put, sorting and approximate equality.
"""

from ._comparison import allclose, isclose
from ._factories import (
    arange,
    empty,
    empty_like,
    full,
    full_like,
    linspace,
    ones,
    ones_like,
    zeros,
    zeros_like,
)
from ._manipulation import (
    broadcast_to,
    concatenate,
    expand_dims,
    put,
    putmask,
    squeeze,
    stack,
    take,
    take_along_axis,
)
from ._reductions import (
    all,
    amax,
    amin,
    any,
    argmax,
    argmin,
    count_nonzero,
    cumprod,
    cumsum,
    mean,
    prod,
    std,
    sum,
    var,
)
from ._selection import (
    clamp,
    diagonal,
    maximum,
    minimum,
    reverse,
    transpose,
    where,
)
from ._sorting import argsort, sort

__all__ = [
    "arange",
    "empty",
    "empty_like",
    "full",
    "full_like",
    "linspace",
    "ones",
    "ones_like",
    "zeros",
    "zeros_like",
    "all",
    "amax",
    "amin",
    "any",
    "argmax",
    "argmin",
    "count_nonzero",
    "cumprod",
    "cumsum",
    "mean",
    "prod",
    "sum",
    "var",
    "std",
    "clamp",
    "diagonal",
    "maximum",
    "minimum",
    "reverse",
    "transpose",
    "where",
    "broadcast_to",
    "expand_dims",
    "squeeze",
    "concatenate",
    "stack",
    "take",
    "take_along_axis",
    "put",
    "putmask",
    "sort",
    "argsort",
    "isclose",
    "allclose",
]
