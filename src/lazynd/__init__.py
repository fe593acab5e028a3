"""
lazynd: lazy, shape-aware n-dimensional expressions.

lazynd represents n-dimensional data as *expressions*. Dense tensors own
their elements; views and indirect tensors alias them; lazy nodes compute
elements on demand from their operands. Operators and `apply`/`apply2`
build lazy nodes, and nothing is evaluated until an element is read,
iterated, or the expression is materialized with `.copy()`.

    >>> import lazynd as lz
    >>> a = lz.Tensor.from_values([[1, 2, 3], [4, 5, 6]])
    >>> b = a * 2 + 1          # lazy, no evaluation yet
    >>> b.copy().tolist()
    [[3, 5, 7], [9, 11, 13]]
    >>> lz.reduce(max, a, axes=0).tolist()
    [4, 5, 6]
"""

import logging

from .domain import (
    AxisError,
    EmptyReductionError,
    IExpression,
    IStorageExpression,
    Index,
    Layout,
    LazyNDError,
    OutOfRangeError,
    PrintOptions,
    Shape,
    ShapeMismatchError,
)
from .domain._shape import (
    broadcast_shapes,
    index_sequence,
    make_index,
    make_shape,
    make_strides,
    ravel_index,
    shape_cat,
    unravel_index,
)
from .infrastructure.iterators import TensorIterator
from .infrastructure.tensor import (
    BaseExpression,
    ConstantExpression,
    IndirectTensor,
    LazyBinary,
    LazyNary,
    LazyOuter,
    LazyReduction,
    LazyUnary,
    SequenceExpression,
    Tensor,
    TensorView,
    format_expression,
)
from .infrastructure.functional import (
    accumulate,
    apply,
    apply2,
    dropdims,
    keepdims,
    outer,
    reduce,
    vectorize,
)
from .infrastructure.routines import (
    all,
    allclose,
    amax,
    amin,
    any,
    arange,
    argmax,
    argmin,
    argsort,
    broadcast_to,
    clamp,
    concatenate,
    count_nonzero,
    cumprod,
    cumsum,
    diagonal,
    empty,
    empty_like,
    expand_dims,
    full,
    full_like,
    isclose,
    linspace,
    maximum,
    mean,
    minimum,
    ones,
    ones_like,
    prod,
    put,
    putmask,
    reverse,
    sort,
    squeeze,
    stack,
    std,
    sum,
    take,
    take_along_axis,
    transpose,
    var,
    where,
    zeros,
    zeros_like,
)

ROW_MAJOR = Layout.ROW_MAJOR
COLUMN_MAJOR = Layout.COLUMN_MAJOR

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # errors
    "LazyNDError",
    "ShapeMismatchError",
    "OutOfRangeError",
    "AxisError",
    "EmptyReductionError",
    # shapes and layouts
    "Shape",
    "Index",
    "Layout",
    "ROW_MAJOR",
    "COLUMN_MAJOR",
    "make_shape",
    "make_index",
    "make_strides",
    "ravel_index",
    "unravel_index",
    "broadcast_shapes",
    "shape_cat",
    "index_sequence",
    # expressions
    "IExpression",
    "IStorageExpression",
    "BaseExpression",
    "Tensor",
    "TensorView",
    "IndirectTensor",
    "LazyUnary",
    "LazyBinary",
    "LazyNary",
    "LazyOuter",
    "LazyReduction",
    "ConstantExpression",
    "SequenceExpression",
    "TensorIterator",
    # functional engine
    "apply",
    "apply2",
    "outer",
    "vectorize",
    "reduce",
    "accumulate",
    "keepdims",
    "dropdims",
    # routines
    "empty",
    "empty_like",
    "zeros",
    "zeros_like",
    "ones",
    "ones_like",
    "full",
    "full_like",
    "arange",
    "linspace",
    "sum",
    "prod",
    "amax",
    "amin",
    "mean",
    "var",
    "std",
    "all",
    "any",
    "count_nonzero",
    "argmax",
    "argmin",
    "cumsum",
    "cumprod",
    "where",
    "maximum",
    "minimum",
    "clamp",
    "transpose",
    "reverse",
    "diagonal",
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
    # text rendering
    "PrintOptions",
    "format_expression",
]
