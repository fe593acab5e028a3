"""
Shape manipulation, joining, and index-based take / put routines.

`broadcast_to`, `expand_dims` and `squeeze` are zero-copy views and need a
tensor or view operand. `concatenate`, `stack` and `take_along_axis`
return a new `Tensor`, and `take` copies its selection. `put` and `putmask`
write into storage-backed operands in place.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence, Union

import numpy as np

from ...domain._errors import OutOfRangeError, ShapeMismatchError
from ...domain._layout import Layout
from ...domain._shape import Shape, broadcast_shapes, index_sequence, normalize_axis
from ..functional._apply import as_expression, evaluate_into
from ..tensor._dense_tensor import Tensor
from ..tensor._lazy import is_expression
from ..tensor._storage import StorageExpression, StridedExpression
from ._selection import _strided, where

logger = logging.getLogger(__name__)


def broadcast_to(a: Any, shape: Any) -> Any:
    """
    Return a read-only view of `a` repeated to `shape`.

    >>> broadcast_to(Tensor.from_values([1, 2, 3]), (2, 3)).tolist()
    [[1, 2, 3], [1, 2, 3]]
    """
    return _strided(a, "broadcast_to").broadcast_to(shape)


def expand_dims(a: Any, axes: Union[int, Sequence[int]]) -> Any:
    """Return a view of `a` with size-1 axes inserted at `axes`."""
    return _strided(a, "expand_dims").expand_dims(axes)


def squeeze(a: Any, axes: Optional[Union[int, Sequence[int]]] = None) -> Any:
    """Return a view of `a` without its size-1 axes (or only `axes`)."""
    return _strided(a, "squeeze").squeeze(axes)


def _as_strided(a: Any) -> StridedExpression:
    a = as_expression(a)
    if not is_expression(a):
        raise TypeError(f"expected a tensor-like operand, got {type(a).__name__}")
    if not isinstance(a, StridedExpression):
        a = a.copy()
    return a


def _result_dtype(parts: Sequence[Any]) -> np.dtype:
    return np.result_type(*(p.dtype for p in parts))


def concatenate(arrays: Sequence[Any], axis: int = 0) -> Tensor:
    """
    Join a sequence of expressions along an existing axis.

    Parameters
    ----------
    arrays : Sequence
        Expressions (or arrays) of equal rank whose shapes agree on every
        axis except `axis`.
    axis : int, optional
        The axis to join along. Defaults to 0.

    Returns
    -------
    Tensor
        A new tensor; lazy operands are evaluated once.

    Raises
    ------
    ValueError
        If `arrays` is empty.
    AxisError
        If `axis` is out of range.
    ShapeMismatchError
        If the ranks differ, or the shapes differ off `axis`.
    """
    parts = [_as_strided(a) for a in arrays]
    if not parts:
        raise ValueError("need at least one tensor to concatenate")
    first = parts[0].shape
    axis = normalize_axis(axis, first.ndim)
    for p in parts[1:]:
        s = p.shape
        if s.ndim != first.ndim or any(
            n != m for k, (n, m) in enumerate(zip(s, first)) if k != axis
        ):
            raise ShapeMismatchError(
                f"cannot concatenate shapes {tuple(first)} and {tuple(s)} "
                f"along axis {axis}",
                (first, s),
            )

    total = 0
    for p in parts:
        total += p.shape[axis]
    out_shape = first.replace(axis, total)
    logger.debug(
        "Concatenating %d operands into shape %s", len(parts), tuple(out_shape)
    )
    result = Tensor(out_shape, _result_dtype(parts), layout=parts[0].layout)
    lead = (slice(None),) * axis
    start = 0
    for p in parts:
        stop = start + p.shape[axis]
        result[lead + (slice(start, stop),)] = p
        start = stop
    return result


def stack(arrays: Sequence[Any], axis: int = 0) -> Tensor:
    """
    Join a sequence of equally shaped expressions along a new axis.

    `axis` is the position of the new axis in the result.

    >>> a, b = Tensor.from_values([1, 2]), Tensor.from_values([3, 4])
    >>> stack([a, b], axis=1).tolist()
    [[1, 3], [2, 4]]
    """
    parts = [_as_strided(a) for a in arrays]
    if not parts:
        raise ValueError("need at least one tensor to stack")
    first = parts[0].shape
    for p in parts[1:]:
        if p.shape != first:
            raise ShapeMismatchError(
                f"all tensors must have the same shape to stack, got "
                f"{tuple(first)} and {tuple(p.shape)}",
                (first, p.shape),
            )
    axis = normalize_axis(axis, first.ndim + 1)
    return concatenate([p.expand_dims(axis) for p in parts], axis)


def _along(axis: int, i: Any) -> tuple:
    return (slice(None),) * axis + (i,)


def _copied(selection: Any) -> Any:
    # A key naming a single element yields the element itself.
    return selection.copy() if is_expression(selection) else selection


def take(a: Any, indices: Any, axis: Optional[int] = None) -> Any:
    """
    Take elements from `a`.

    Parameters
    ----------
    a : BaseExpression | np.ndarray
        Source.
    indices : Any
        Without `axis`, any gather key accepted by ``a[...]`` (a list of
        `Index` values, a boolean mask, or integers when `a` has rank 1).
        With `axis`, an integer or a 1-D sequence of integers selecting
        positions along that axis.
    axis : int, optional
        Axis to take along.

    Returns
    -------
    Tensor | scalar
        Always a copy. A single integer with `axis` drops that axis, and a
        key naming one element returns that element.

    Raises
    ------
    OutOfRangeError
        If a position is out of bounds.
    """
    a = _as_strided(a)
    if axis is None:
        return _copied(a[indices])

    axis = normalize_axis(axis, a.ndim)
    n = a.shape[axis]
    if np.ndim(indices) == 0:
        return _copied(a[_along(axis, int(indices))])

    positions = [int(i) for i in np.asarray(indices).reshape(-1)]
    for i in positions:
        if i < -n or i >= n:
            raise OutOfRangeError(i, n)
    result = Tensor(a.shape.replace(axis, len(positions)), a.dtype, layout=a.layout)
    for j, i in enumerate(positions):
        result[_along(axis, j)] = a[_along(axis, i % n)]
    return result


def take_along_axis(a: Any, indices: Any, axis: int) -> Tensor:
    """
    Take values by matching 1-D lanes of `a` and `indices` along `axis`.

    `indices` must have the rank of `a` and the same size on every other
    axis; `argsort(a, axis)` produces a suitable argument.

    >>> t = Tensor.from_values([[3, 1, 2], [9, 7, 8]])
    >>> take_along_axis(t, argsort(t, axis=1), axis=1).tolist()
    [[1, 2, 3], [7, 8, 9]]
    """
    a = _as_strided(a)
    idx = as_expression(indices)
    if not is_expression(idx):
        raise TypeError(
            f"indices must be tensor-like, got {type(indices).__name__}"
        )
    axis = normalize_axis(axis, a.ndim)
    if idx.ndim != a.ndim or any(
        n != m for k, (n, m) in enumerate(zip(idx.shape, a.shape)) if k != axis
    ):
        raise ShapeMismatchError(
            f"indices of shape {tuple(idx.shape)} do not match source of shape "
            f"{tuple(a.shape)} off axis {axis}",
            (idx.shape, a.shape),
        )
    n = a.shape[axis]
    result = Tensor(idx.shape, a.dtype, layout=a.layout)
    for coords in index_sequence(idx.shape, Layout.ROW_MAJOR):
        i = int(idx._read(coords))
        if i < -n or i >= n:
            raise OutOfRangeError(i, n)
        source = list(coords)
        source[axis] = i % n
        result._write(coords, a._read(tuple(source)))
    return result


def _storage(a: Any, what: str) -> StorageExpression:
    if not isinstance(a, StorageExpression):
        raise TypeError(
            f"{what} requires a tensor, view or indirect tensor, "
            f"got {type(a).__name__}"
        )
    return a


def put(a: Any, indices: Any, values: Any) -> None:
    """
    Write `values` into `a` at the gathered positions, like ``a[indices] = values``.

    `values` is broadcast to the shape of the selection. When `indices`
    repeats a position, the last value written there is kept.
    """
    _storage(a, "put")[indices] = values


def putmask(a: Any, mask: Any, values: Any) -> None:
    """
    Write `values` into `a` where `mask` is true.

    Parameters
    ----------
    a : StorageExpression
        Destination.
    mask : BaseExpression | np.ndarray
        Boolean mask with exactly the shape of `a`.
    values : Any
        Scalar, or expression broadcast to the shape of `a`; element ``i``
        of the broadcast values goes to element ``i`` of `a`.

    Raises
    ------
    ShapeMismatchError
        If `mask` does not have the shape of `a` or `values` does not
        broadcast to it. `a` is left untouched in that case.
    """
    a = _storage(a, "putmask")
    mask = as_expression(mask)
    if not is_expression(mask) or mask.shape != a.shape:
        shape = getattr(mask, "shape", ())
        raise ShapeMismatchError(
            f"mask of shape {tuple(shape)} does not match tensor of shape "
            f"{tuple(a.shape)}",
            (Shape(shape), a.shape),
        )
    values = as_expression(values)
    if is_expression(values) and broadcast_shapes(a.shape, values.shape) != a.shape:
        raise ShapeMismatchError(
            f"could not broadcast values of shape {tuple(values.shape)} "
            f"into shape {tuple(a.shape)}",
            (values.shape, a.shape),
        )
    evaluate_into(a, where(mask, values, a))
