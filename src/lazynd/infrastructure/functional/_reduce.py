"""
Reduction and scan engine.

`reduce` folds a binary function over one, several or all axes of an
expression; `accumulate` computes the inclusive scan along one axis.

Fold order
----------
Within every output element the participating input elements are visited
in ascending lexicographic order of their coordinates on the reduced axes.
For non-associative functions the result depends on that order, so it is
part of the contract.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional, Union

from ...domain._errors import EmptyReductionError, ShapeMismatchError
from ...domain._layout import Layout
from ...domain._shape import broadcast_shapes, index_sequence, normalize_axis
from ..tensor._base import BaseExpression
from ..tensor._dense_tensor import Tensor
from ..tensor._lazy import LazyReduction, NoValue, broadcast_reader
from ._apply import as_expression, evaluate_into

logger = logging.getLogger(__name__)

keepdims = True
"""Pass as ``keepdims=keepdims`` to keep reduced axes with size 1."""

dropdims = False
"""Pass as ``keepdims=dropdims`` to remove reduced axes (the default)."""

Axes = Optional[Union[int, Iterable[int]]]


def _mask_reader(where: Any, shape: Any) -> Optional[Callable[[tuple], Any]]:
    if where is None:
        return None
    where = as_expression(where)
    if not isinstance(where, BaseExpression):
        return broadcast_reader(bool(where), shape)
    try:
        target = broadcast_shapes(shape, where.shape)
    except ShapeMismatchError:
        target = None
    if target != shape:
        raise ShapeMismatchError.for_broadcast(where.shape, shape)
    return broadcast_reader(where, shape)


def _reduce_all(
    f: Callable[[Any, Any], Any],
    a: BaseExpression,
    init: Any,
    where: Any,
    name: str,
) -> Any:
    mask = _mask_reader(where, a.shape)
    read = a._read
    acc = init
    have = init is not NoValue
    for coords in index_sequence(a.shape, Layout.ROW_MAJOR):
        if mask is not None and not mask(coords):
            continue
        x = read(coords)
        if have:
            acc = f(acc, x)
        else:
            acc = x
            have = True
    if not have:
        raise EmptyReductionError(name)
    return acc


def reduce(
    f: Callable[[Any, Any], Any],
    a: Any,
    axes: Axes = None,
    *,
    keepdims: bool = False,
    init: Any = NoValue,
    where: Any = None,
    out: Optional[Any] = None,
    dtype: Any = None,
    name: str = "reduce",
) -> Any:
    """
    Fold `f` over the given axes of `a`.

    Parameters
    ----------
    f : Callable[[Any, Any], Any]
        Binary function called as ``f(accumulator, element)``.
    a : BaseExpression | np.ndarray
        Operand.
    axes : int | Iterable[int] | None, optional
        Axes to reduce. ``None`` (default) reduces every axis. Negative axes
        count from the end.
    keepdims : bool, optional
        If True, reduced axes are kept with size 1 so the result broadcasts
        against `a`.
    init : Any, optional
        Initial accumulator. Without it the first participating element
        seeds the fold.
    where : BaseExpression | np.ndarray | bool, optional
        Mask broadcastable to ``a.shape``. Only elements where it is true
        participate.
    out : StorageExpression, optional
        Destination; must have the shape of the result.
    dtype : np.dtype-like, optional
        Element type of a tensor result.
    name : str, optional
        Operation name used in error messages.

    Returns
    -------
    Any
        A scalar when ``axes is None`` and ``keepdims`` is False and no `out`
        is given; otherwise a `Tensor` (or `out`).

    Raises
    ------
    AxisError
        If an axis is out of range or repeated.
    ShapeMismatchError
        If `where` or `out` has an incompatible shape.
    EmptyReductionError
        If some output element has no participating input and no `init`.

    Examples
    --------
    >>> import operator
    >>> t = Tensor.from_values([[1, 2, 3], [4, 5, 6]])
    >>> int(reduce(operator.add, t))
    21
    >>> reduce(operator.add, t, axes=1).tolist()
    [6, 15]
    """
    a = as_expression(a)
    if not isinstance(a, BaseExpression):
        raise TypeError(f"reduce requires an expression operand, got {type(a).__name__}")

    if axes is None and not keepdims and out is None:
        logger.debug("Reducing %s of shape %s to a scalar", name, tuple(a.shape))
        return _reduce_all(f, a, init, where, name)

    where = as_expression(where)
    node = LazyReduction(
        f, a, axes, keepdims=keepdims, init=init, where=where, dtype=dtype, name=name
    )
    logger.debug(
        "Reducing %s over axes %s: %s -> %s",
        name,
        node.axes,
        tuple(a.shape),
        tuple(node.shape),
    )
    if out is not None:
        return evaluate_into(out, node)
    return Tensor.from_expression(node, layout=Layout.ROW_MAJOR)


def accumulate(
    f: Callable[[Any, Any], Any],
    a: Any,
    axis: int = 0,
    *,
    out: Optional[Any] = None,
    dtype: Any = None,
) -> Any:
    """
    Inclusive scan of `f` along `axis`.

    ``result[..., 0, ...] = a[..., 0, ...]`` and
    ``result[..., i, ...] = f(result[..., i - 1, ...], a[..., i, ...])``.

    Parameters
    ----------
    f : Callable[[Any, Any], Any]
        Binary function.
    a : BaseExpression | np.ndarray
        Operand.
    axis : int, optional
        Axis along which to scan. Defaults to 0.
    out : StorageExpression, optional
        Destination with the shape of `a`.
    dtype : np.dtype-like, optional
        Element type of the result.

    Returns
    -------
    Tensor | StorageExpression
        A new tensor of the same shape as `a`, or `out`.

    Raises
    ------
    AxisError
        If `axis` is out of range.
    ShapeMismatchError
        If `out` does not have the shape of `a`.

    Examples
    --------
    >>> import operator
    >>> accumulate(operator.add, Tensor.from_values([1, 2, 3, 4])).tolist()
    [1, 3, 6, 10]
    """
    a = as_expression(a)
    if not isinstance(a, BaseExpression):
        raise TypeError(
            f"accumulate requires an expression operand, got {type(a).__name__}"
        )
    axis = normalize_axis(axis, a.ndim)
    if out is not None and out.shape != a.shape:
        raise ShapeMismatchError.for_output(a.shape, out.shape)

    result = Tensor.from_expression(a, dtype=dtype, layout=Layout.ROW_MAJOR)
    n = a.shape[axis]
    rest = a.shape.replace(axis, 1)
    for coords in index_sequence(rest):
        c = list(coords)
        prev = tuple(c)
        acc = result._read(prev) if n else None
        for i in range(1, n):
            c[axis] = i
            cur = tuple(c)
            acc = f(acc, result._read(cur))
            result._write(cur, acc)

    if out is not None:
        return evaluate_into(out, result)
    return result
