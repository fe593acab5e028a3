"""
Named reductions and scans built on the functional engine.

All reductions accept the `axes` / `keepdims` / `where` / `out` keywords of
`lazynd.reduce`. Reductions with an identity element (``sum``, ``prod``,
``all``, ``any``, ``count_nonzero``) seed the fold with it, so they are
defined on empty input; ``amax``, ``amin``, ``mean`` and the arg-reductions
raise `EmptyReductionError` instead.
"""

from __future__ import annotations

import builtins
import math
import operator
from typing import Any, Callable, Optional

import numpy as np

from ...domain._errors import EmptyReductionError
from ...domain._layout import Layout
from ...domain._shape import Index, Shape, index_sequence, normalize_axis
from ..functional import accumulate, reduce
from ..functional._apply import as_expression, evaluate_into
from ..tensor._dense_tensor import Tensor
from ..tensor._lazy import ConstantExpression, NoValue


def _max(acc: Any, x: Any) -> Any:
    return x if x > acc else acc


def _min(acc: Any, x: Any) -> Any:
    return x if x < acc else acc


def _and(acc: Any, x: Any) -> bool:
    return bool(acc) and bool(x)


def _or(acc: Any, x: Any) -> bool:
    return bool(acc) or bool(x)


def _count(acc: int, x: Any) -> int:
    return acc + 1 if x else acc


def sum(a: Any, axes: Any = None, *, init: Any = 0, **kwargs: Any) -> Any:
    """
    Sum of the elements over `axes`.

    >>> sum(Tensor.from_values([[1, 2], [3, 4]]), axes=0).tolist()
    [4, 6]
    """
    return reduce(operator.add, a, axes, init=init, name="sum", **kwargs)


def prod(a: Any, axes: Any = None, *, init: Any = 1, **kwargs: Any) -> Any:
    return reduce(operator.mul, a, axes, init=init, name="prod", **kwargs)


def amax(a: Any, axes: Any = None, *, init: Any = NoValue, **kwargs: Any) -> Any:
    """
    Maximum over `axes`.

    Raises
    ------
    EmptyReductionError
        If a slice has no participating element and `init` is not given.
    """
    return reduce(_max, a, axes, init=init, name="max", **kwargs)


def amin(a: Any, axes: Any = None, *, init: Any = NoValue, **kwargs: Any) -> Any:
    """Minimum over `axes`; see `amax`."""
    return reduce(_min, a, axes, init=init, name="min", **kwargs)


def all(a: Any, axes: Any = None, **kwargs: Any) -> Any:
    """True when every participating element is truthy (True if none)."""
    return reduce(_and, a, axes, init=True, name="all", **kwargs)


def any(a: Any, axes: Any = None, **kwargs: Any) -> Any:
    """True when some participating element is truthy (False if none)."""
    return reduce(_or, a, axes, init=False, name="any", **kwargs)


def count_nonzero(a: Any, axes: Any = None, **kwargs: Any) -> Any:
    return reduce(_count, a, axes, init=0, name="count_nonzero", **kwargs)


def mean(
    a: Any,
    axes: Any = None,
    *,
    keepdims: bool = False,
    where: Any = None,
    out: Optional[Any] = None,
) -> Any:
    """
    Arithmetic mean over `axes`.

    With `where`, only the participating elements are counted.

    Raises
    ------
    EmptyReductionError
        If some output element averages zero elements.
    """
    a = as_expression(a)
    full = axes is None and not keepdims
    total = reduce(
        operator.add, a, axes, keepdims=keepdims, init=0, where=where, name="mean"
    )
    count = _count_participating(a, axes, keepdims, where, "mean")
    return _average(total, count, full, out, "mean")


def _count_participating(a: Any, axes: Any, keepdims: bool, where: Any, name: str) -> Any:
    return reduce(
        _count,
        ConstantExpression(a.shape, 1),
        axes,
        keepdims=keepdims,
        init=0,
        where=where,
        name=name,
    )


def _average(
    total: Any,
    count: Any,
    full: bool,
    out: Optional[Any],
    name: str,
    ddof: int = 0,
    finish: Optional[Callable[[Any], Any]] = None,
) -> Any:
    # Divides by ``count - ddof``; `finish` is applied to each quotient.
    if full:
        if count - ddof <= 0:
            raise EmptyReductionError(name)
        value = total / (count - ddof)
        if finish is not None:
            value = finish(value)
        if out is None:
            return value
        return evaluate_into(out, Tensor.from_values(value, dtype=np.float64))
    if builtins.any(c - ddof <= 0 for c in count.values()):
        raise EmptyReductionError(name)
    quotient = total / (count - ddof)
    if finish is not None:
        quotient = quotient.apply(finish)
    result = Tensor.from_expression(quotient, dtype=np.float64)
    if out is not None:
        return evaluate_into(out, result)
    return result


def var(
    a: Any,
    axes: Any = None,
    *,
    ddof: int = 0,
    keepdims: bool = False,
    where: Any = None,
    out: Optional[Any] = None,
) -> Any:
    """
    Variance over `axes`: the mean of ``abs(a - mean(a)) ** 2``.

    Parameters
    ----------
    a : BaseExpression | np.ndarray
        Operand.
    axes : int | Sequence[int], optional
        Axes to reduce. Defaults to every axis.
    ddof : int, optional
        Delta degrees of freedom: the squared deviations are divided by
        ``n - ddof``. ``ddof=1`` gives the unbiased sample variance.
    keepdims : bool, optional
        Keep the reduced axes with size 1.
    where : BaseExpression, optional
        Mask of participating elements; the mean and ``n`` are taken over
        those only.
    out : StorageExpression, optional
        Destination with the shape of the result.

    Returns
    -------
    float | Tensor
        A scalar for a full reduction without `keepdims` or `out`, otherwise
        a float64 `Tensor`.

    Raises
    ------
    EmptyReductionError
        If some output element has ``n - ddof <= 0``.
    """
    return _variance(a, axes, ddof, keepdims, where, out, "var")


def std(
    a: Any,
    axes: Any = None,
    *,
    ddof: int = 0,
    keepdims: bool = False,
    where: Any = None,
    out: Optional[Any] = None,
) -> Any:
    """Standard deviation over `axes`, the square root of `var`."""
    return _variance(a, axes, ddof, keepdims, where, out, "std", finish=math.sqrt)


def _variance(
    a: Any,
    axes: Any,
    ddof: int,
    keepdims: bool,
    where: Any,
    out: Optional[Any],
    name: str,
    finish: Optional[Callable[[Any], Any]] = None,
) -> Any:
    a = as_expression(a)
    full = axes is None and not keepdims
    centre = mean(a, axes, keepdims=True, where=where)
    squared = abs(a - centre) ** 2
    total = reduce(
        operator.add, squared, axes, keepdims=keepdims, init=0, where=where, name=name
    )
    count = _count_participating(a, axes, keepdims, where, name)
    return _average(total, count, full, out, name, ddof, finish)


def _arg_reduce(a: Any, axis: Optional[int], better: Any, keepdims: bool, name: str) -> Any:
    a = as_expression(a)
    if axis is None:
        best = best_coords = None
        for coords in index_sequence(a.shape, Layout.ROW_MAJOR):
            x = a._read(coords)
            if best_coords is None or better(x, best):
                best, best_coords = x, coords
        if best_coords is None:
            raise EmptyReductionError(name)
        return Index(best_coords)

    axis = normalize_axis(axis, a.ndim)
    n = a.shape[axis]
    out_shape = a.shape.replace(axis, 1) if keepdims else Shape(
        s for k, s in enumerate(a.shape) if k != axis
    )
    result = Tensor(out_shape, np.int64)
    if result.size and n == 0:
        raise EmptyReductionError(name)
    rest = a.shape.replace(axis, 1)
    for coords in index_sequence(rest):
        c = list(coords)
        best, pos = a._read(coords), 0
        for i in range(1, n):
            c[axis] = i
            x = a._read(tuple(c))
            if better(x, best):
                best, pos = x, i
        key = coords if keepdims else coords[:axis] + coords[axis + 1 :]
        result._write(key, pos)
    return result


def argmax(a: Any, axis: Optional[int] = None, *, keepdims: bool = False) -> Any:
    """
    Position of the first maximum.

    Returns
    -------
    Index | Tensor
        With ``axis=None``, the `Index` of the first maximum in row-major
        order. Otherwise an int64 `Tensor` of positions along `axis`.
    """
    return _arg_reduce(a, axis, operator.gt, keepdims, "argmax")


def argmin(a: Any, axis: Optional[int] = None, *, keepdims: bool = False) -> Any:
    """Position of the first minimum; see `argmax`."""
    return _arg_reduce(a, axis, operator.lt, keepdims, "argmin")


def cumsum(a: Any, axis: int = 0, **kwargs: Any) -> Tensor:
    """
    Inclusive running sum along `axis`.

    >>> cumsum(Tensor.from_values([1, 2, 3])).tolist()
    [1, 3, 6]
    """
    return accumulate(operator.add, a, axis, **kwargs)


def cumprod(a: Any, axis: int = 0, **kwargs: Any) -> Tensor:
    return accumulate(operator.mul, a, axis, **kwargs)


__all__ = [
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
]
