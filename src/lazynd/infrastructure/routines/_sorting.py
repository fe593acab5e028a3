"""
Sorting routines.

Both routines use Python's stable `sorted`, so equal elements keep their
row-major (or along-axis) order. `key` and `reverse` have the meaning they
have for `sorted`.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import numpy as np

from ...domain._layout import Layout
from ...domain._shape import Index, index_sequence, normalize_axis
from ..functional._apply import as_expression
from ..tensor._dense_tensor import Tensor
from ..tensor._lazy import is_expression

logger = logging.getLogger(__name__)

Key = Optional[Callable[[Any], Any]]


def _operand(a: Any) -> Any:
    a = as_expression(a)
    if not is_expression(a):
        raise TypeError(f"expected a tensor-like operand, got {type(a).__name__}")
    return a


def _lanes(a: Any, axis: int):
    """Yield the coordinate list of every 1-D lane of `a` along `axis`."""
    n = a.shape[axis]
    for start in index_sequence(a.shape.replace(axis, 1), Layout.ROW_MAJOR):
        lane = []
        c = list(start)
        for i in range(n):
            c[axis] = i
            lane.append(tuple(c))
        yield lane


def _order(values: list, key: Key, reverse: bool) -> list:
    if key is None:
        return sorted(range(len(values)), key=values.__getitem__, reverse=reverse)
    return sorted(range(len(values)), key=lambda i: key(values[i]), reverse=reverse)


def sort(a: Any, axis: Optional[int] = None, *, key: Key = None, reverse: bool = False) -> Tensor:
    """
    Return a sorted copy of `a`.

    Parameters
    ----------
    a : BaseExpression | np.ndarray
        Operand.
    axis : int, optional
        Axis to sort along. When omitted, the elements are flattened in
        row-major order and a rank-1 tensor is returned.
    key : Callable, optional
        Sort key applied to each element.
    reverse : bool, optional
        Sort in descending order.

    Returns
    -------
    Tensor
        Same dtype as `a` when it is known.

    Examples
    --------
    >>> sort(Tensor.from_values([[3, 1], [2, 0]])).tolist()
    [0, 1, 2, 3]
    >>> sort(Tensor.from_values([[3, 1], [2, 0]]), axis=0).tolist()
    [[2, 0], [3, 1]]
    """
    a = _operand(a)
    if axis is None:
        values = list(a.values(Layout.ROW_MAJOR))
        ordered = [values[i] for i in _order(values, key, reverse)]
        return Tensor.from_iterable(ordered, (len(ordered),), dtype=a.dtype)

    axis = normalize_axis(axis, a.ndim)
    logger.debug("Sorting shape %s along axis %d", tuple(a.shape), axis)
    result = a.copy(Layout.ROW_MAJOR)
    for lane in _lanes(a, axis):
        values = [a._read(c) for c in lane]
        for c, i in zip(lane, _order(values, key, reverse)):
            result._write(c, values[i])
    return result


def argsort(
    a: Any, axis: Optional[int] = None, *, key: Key = None, reverse: bool = False
) -> Any:
    """
    Return the positions that would sort `a`.

    Returns
    -------
    list[Index] | Tensor
        Without `axis`, the `Index` of every element in sorted order; the
        list is a valid gather key, so ``a[argsort(a)]`` equals ``sort(a)``.
        With `axis`, an int64 tensor of the shape of `a` holding positions
        along `axis`, suitable for `take_along_axis`.
    """
    a = _operand(a)
    if axis is None:
        coords = list(index_sequence(a.shape, Layout.ROW_MAJOR))
        values = [a._read(c) for c in coords]
        return [Index(coords[i]) for i in _order(values, key, reverse)]

    axis = normalize_axis(axis, a.ndim)
    result = Tensor(a.shape, np.int64)
    for lane in _lanes(a, axis):
        values = [a._read(c) for c in lane]
        for c, i in zip(lane, _order(values, key, reverse)):
            result._write(c, i)
    return result
