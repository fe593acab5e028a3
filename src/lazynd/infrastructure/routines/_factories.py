"""
Expression factories.

`empty` allocates a dense `Tensor`. Every other factory returns a lazy node
that allocates nothing until it is materialized:

    zeros((3, 4))          # ConstantExpression, no storage
    zeros((3, 4)).copy()   # dense Tensor of zeros
"""

from __future__ import annotations

import math
from typing import Any, Optional

import numpy as np

from ...domain._layout import Layout, LayoutLike
from ...domain._shape import ShapeLike
from ..tensor._dense_tensor import Tensor
from ..tensor._lazy import ConstantExpression, SequenceExpression


def empty(
    shape: ShapeLike, dtype: Any = np.float64, *, layout: LayoutLike = Layout.ROW_MAJOR
) -> Tensor:
    """
    Allocate a dense tensor of `shape`.

    The contents are zero-initialized (NumPy's allocator does not leak
    uninitialized memory into Python objects), but callers should not rely on
    any particular initial value.
    """
    return Tensor(shape, dtype, layout=layout)


def full(
    shape: ShapeLike,
    fill_value: Any,
    dtype: Any = None,
    *,
    layout: LayoutLike = Layout.ROW_MAJOR,
) -> ConstantExpression:
    """Lazy expression of `shape` whose every element is `fill_value`."""
    return ConstantExpression(shape, fill_value, dtype, layout)


def zeros(
    shape: ShapeLike, dtype: Any = np.float64, *, layout: LayoutLike = Layout.ROW_MAJOR
) -> ConstantExpression:
    return ConstantExpression(shape, 0, dtype, layout)


def ones(
    shape: ShapeLike, dtype: Any = np.float64, *, layout: LayoutLike = Layout.ROW_MAJOR
) -> ConstantExpression:
    return ConstantExpression(shape, 1, dtype, layout)


def _like_dtype(a: Any, dtype: Any) -> Any:
    if dtype is not None:
        return dtype
    return a.dtype if a.dtype is not None else np.float64


def empty_like(a: Any, dtype: Any = None) -> Tensor:
    """Allocate a dense tensor with the shape and layout of `a`."""
    return empty(a.shape, _like_dtype(a, dtype), layout=a.layout)


def zeros_like(a: Any, dtype: Any = None) -> ConstantExpression:
    return zeros(a.shape, _like_dtype(a, dtype), layout=a.layout)


def ones_like(a: Any, dtype: Any = None) -> ConstantExpression:
    return ones(a.shape, _like_dtype(a, dtype), layout=a.layout)


def full_like(a: Any, fill_value: Any, dtype: Any = None) -> ConstantExpression:
    return full(a.shape, fill_value, dtype if dtype is not None else a.dtype, layout=a.layout)


def arange(
    start: Any,
    stop: Optional[Any] = None,
    step: Any = 1,
    dtype: Any = None,
) -> SequenceExpression:
    """
    Lazy 1-D sequence of evenly spaced values in ``[start, stop)``.

    With a single argument, it is the stop value and the sequence starts at 0.

    Raises
    ------
    ValueError
        If `step` is zero.

    Examples
    --------
    >>> arange(5).tolist()
    [0, 1, 2, 3, 4]
    >>> arange(1, 2, 0.25).tolist()
    [1.0, 1.25, 1.5, 1.75]
    """
    if stop is None:
        start, stop = 0, start
    if step == 0:
        raise ValueError("arange step must be non-zero")
    num = max(0, math.ceil((stop - start) / step))
    return SequenceExpression(start, step, num, dtype)


def linspace(
    start: Any,
    stop: Any,
    num: int = 50,
    endpoint: bool = True,
    dtype: Any = None,
) -> SequenceExpression:
    """
    Lazy 1-D sequence of `num` evenly spaced values from `start` to `stop`.

    Parameters
    ----------
    start, stop : number
        End points of the interval.
    num : int, optional
        Number of values. Defaults to 50.
    endpoint : bool, optional
        If True (default), `stop` is the last value; otherwise it is excluded.
    dtype : np.dtype-like, optional
        Element type. Defaults to float.

    Raises
    ------
    ValueError
        If `num` is negative.
    """
    if num < 0:
        raise ValueError(f"Number of samples, {num}, must be non-negative")
    div = (num - 1) if endpoint else num
    step = (stop - start) / div if div > 0 else 0.0
    last = stop if endpoint and num > 1 else None
    return SequenceExpression(
        start, step, num, dtype if dtype is not None else np.float64, stop=last
    )
