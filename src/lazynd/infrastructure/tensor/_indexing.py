"""
Subscript parsing for storage-backed expressions.

Two families of keys are recognized:

- *basic* keys (integers, slices, ``...`` and ``None``), which select a
  regular sub-grid and are turned into a new ``(shape, strides, offset)``
  triple, and
- *gather* keys (boolean masks, integer arrays and lists of coordinates),
  which select arbitrary elements and are turned into a list of source
  coordinates.
"""

from __future__ import annotations

import operator
from typing import Any, Sequence

import numpy as np

from ...domain._errors import OutOfRangeError, ShapeMismatchError
from ...domain._shape import Shape, assert_within_bounds


def _is_int(item: Any) -> bool:
    if isinstance(item, (bool, np.bool_)):
        return False
    try:
        operator.index(item)
    except TypeError:
        return False
    return True


def is_basic_key(key: Any) -> bool:
    items = key if type(key) is tuple else (key,)
    return all(
        item is None or item is Ellipsis or isinstance(item, slice) or _is_int(item)
        for item in items
    )


def basic_selection(
    key: Any,
    shape: Sequence[int],
    strides: Sequence[int],
    offset: int,
) -> tuple[Shape, tuple[int, ...], int]:
    """
    Apply a basic key to a strided layout.

    Returns
    -------
    tuple[Shape, tuple[int, ...], int]
        The shape, strides and offset of the selection. Integer entries drop
        their axis, slices keep it (possibly reversed or strided) and
        ``None`` inserts a new axis of size 1.

    Raises
    ------
    IndexError
        If the key has more than one ellipsis or too many entries.
    OutOfRangeError
        If an integer entry is out of bounds.
    """
    items = list(key) if type(key) is tuple else [key]
    ndim = len(shape)
    n_ellipsis = sum(1 for item in items if item is Ellipsis)
    if n_ellipsis > 1:
        raise IndexError("an index can only have a single ellipsis ('...')")
    n_consuming = sum(1 for item in items if item is not None and item is not Ellipsis)
    if n_consuming > ndim:
        raise IndexError(
            f"too many indices: expression is {ndim}-dimensional, "
            f"but {n_consuming} were indexed"
        )
    fill = [slice(None)] * (ndim - n_consuming)
    if n_ellipsis:
        at = items.index(Ellipsis)
        items[at : at + 1] = fill
    else:
        items.extend(fill)

    out_shape: list[int] = []
    out_strides: list[int] = []
    axis = 0
    for item in items:
        if item is None:
            out_shape.append(1)
            out_strides.append(0)
            continue
        n = shape[axis]
        s = strides[axis]
        if isinstance(item, slice):
            start, stop, step = item.indices(n)
            length = len(range(start, stop, step))
            out_shape.append(length)
            out_strides.append(s * step)
            if length:
                offset += start * s
        else:
            i = operator.index(item)
            if i < -n or i >= n:
                raise OutOfRangeError(i, n)
            offset += (i + n if i < 0 else i) * s
        axis += 1
    return Shape(out_shape), tuple(out_strides), offset


def _to_array(key: Any) -> np.ndarray:
    to_numpy = getattr(key, "to_numpy", None)
    if callable(to_numpy):
        return to_numpy()
    return np.asarray(key)


def gather_selection(key: Any, shape: Shape) -> tuple[Shape, list[tuple[int, ...]]]:
    """
    Resolve a gather key into the selected source coordinates.

    Supported keys
    --------------
    - a boolean mask (expression or array) of exactly `shape`: selects the
      positions where it is true, in row-major order; the result is 1-D;
    - a list of coordinate tuples / `Index` values: selects those positions,
      in order; the result is 1-D;
    - an integer array (expression, array or list) when `shape` has rank 1:
      the result has the shape of the index array.

    Raises
    ------
    ShapeMismatchError
        If a boolean mask does not have exactly `shape`.
    OutOfRangeError
        If a selected position is out of bounds.
    TypeError
        If the key is not one of the supported forms.
    """
    if isinstance(key, list) and key and all(isinstance(c, tuple) for c in key):
        coords = [assert_within_bounds(shape, tuple(c)) for c in key]
        return Shape((len(coords),)), coords

    arr = _to_array(key)
    if arr.dtype == np.bool_:
        if arr.shape != tuple(shape):
            raise ShapeMismatchError(
                f"boolean index of shape {arr.shape} does not match "
                f"expression of shape {tuple(shape)}",
                (arr.shape, tuple(shape)),
            )
        coords = [tuple(int(i) for i in c) for c in np.argwhere(arr)]
        return Shape((len(coords),)), coords

    if arr.size == 0:
        arr = arr.astype(np.intp)
    if arr.dtype.kind not in "iu":
        raise TypeError(f"invalid index of type {type(key).__name__} (dtype {arr.dtype})")
    if len(shape) != 1:
        raise TypeError(
            "integer-array indexing requires a rank-1 expression; "
            "pass a list of Index values to gather from higher ranks"
        )
    coords = [assert_within_bounds(shape, (int(i),)) for i in arr.ravel()]
    return Shape(arr.shape), coords

