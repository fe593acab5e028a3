"""
Lazy expression nodes.

A lazy node stores its operands and a function, and computes an element
only when that element is read. Building a node costs O(1) in the number of
elements (shape validation aside); reading an element costs one evaluation
of every node on the path from the root to the leaves, per read.

Node kinds
----------
- `LazyUnary`: ``f(x)`` for every element of one operand.
- `LazyBinary` / `LazyNary`: ``f(x, y, ...)`` over broadcast operands;
  scalars participate unchanged for every element.
- `LazyOuter`: ``f(a[i...], b[j...])`` over the concatenated shape.
- `LazyReduction`: a fold over a subset of axes of its operand.
- `ConstantExpression`: every element is the same value.
- `SequenceExpression`: arithmetic progressions (``arange`` / ``linspace``).

Notes
-----
- Results are never cached. Reading the same element twice evaluates the
  whole subtree twice. Materialize with `.copy()` to pay the cost once.
- Operands are held by reference. A node built over a tensor observes later
  writes to that tensor.
"""

from __future__ import annotations

import itertools
from typing import Any, Callable, Optional, Sequence

import numpy as np

from ...domain._errors import EmptyReductionError, ShapeMismatchError
from ...domain._layout import Layout, LayoutLike
from ...domain._shape import (
    Shape,
    as_shape,
    broadcast_shapes,
    normalize_axes,
    shape_cat,
)
from ._base import BaseExpression


class _NoValueType:
    """Marker for "no initial value" in reductions (distinct from None)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "<no value>"

    def __reduce__(self):
        return (_NoValueType, ())


NoValue = _NoValueType()


def is_expression(value: Any) -> bool:
    return isinstance(value, BaseExpression)


def broadcast_reader(operand: Any, out_shape: Sequence[int]) -> Callable[[tuple], Any]:
    """
    Build a reader mapping coordinates of `out_shape` to elements of `operand`.

    Scalars read as themselves. Expression operands are right-aligned with
    `out_shape`; their size-1 axes are stretched. Leading size-1 axes beyond
    the rank of `out_shape` are read at coordinate 0. The caller guarantees
    that ``operand.shape`` broadcasts to `out_shape`.
    """
    if not is_expression(operand):
        return lambda coords: operand

    shape = tuple(operand.shape)
    out = tuple(out_shape)
    read = operand._read
    if shape == out:
        return read

    ndim = len(shape)
    lead = len(out) - ndim
    pairs = [
        (k, lead + k)
        for k in range(ndim)
        if lead + k >= 0 and not (shape[k] == 1 and out[lead + k] != 1)
    ]

    def reader(coords: tuple) -> Any:
        c = [0] * ndim
        for k, j in pairs:
            c[k] = coords[j]
        return read(tuple(c))

    return reader


def _as_dtype(dtype: Any) -> Optional[np.dtype]:
    return None if dtype is None else np.dtype(dtype)


class LazyExpression(BaseExpression):
    """Common state of lazy nodes: a shape, a layout and an optional dtype."""

    _shape: Shape
    _dtype: Optional[np.dtype] = None

    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def dtype(self) -> Optional[np.dtype]:
        return self._dtype

    @property
    def operands(self) -> tuple:
        return ()


class LazyUnary(LazyExpression):
    """
    Elementwise ``f(x)`` over a single operand.

    Parameters
    ----------
    f : Callable[[Any], Any]
        Function applied to every element.
    operand : BaseExpression
        The source expression. Its shape and layout are inherited.
    dtype : np.dtype-like, optional
        Element dtype of the result if known in advance.
    """

    def __init__(self, f: Callable[[Any], Any], operand: Any, dtype: Any = None) -> None:
        if not is_expression(operand):
            raise TypeError(
                f"LazyUnary requires an expression operand, got {type(operand).__name__}"
            )
        self._f = f
        self._operand = operand
        self._shape = operand.shape
        self._layout = operand.layout
        self._dtype = _as_dtype(dtype)

    @property
    def function(self) -> Callable[[Any], Any]:
        return self._f

    @property
    def operands(self) -> tuple:
        return (self._operand,)

    def _read(self, coords: tuple) -> Any:
        return self._f(self._operand._read(coords))


class LazyNary(LazyExpression):
    """
    Elementwise ``f(x0, x1, ...)`` over broadcast operands.

    At least one operand must be an expression. The result shape is the
    broadcast of the expression operands' shapes, and the layout is the one
    of the first expression operand.

    Raises
    ------
    ShapeMismatchError
        If the operands' shapes cannot be broadcast together.
    TypeError
        If no operand is an expression.
    """

    def __init__(self, f: Callable[..., Any], *operands: Any, dtype: Any = None) -> None:
        exprs = [op for op in operands if is_expression(op)]
        if not exprs:
            raise TypeError(f"{type(self).__name__} requires at least one expression operand")
        self._f = f
        self._operands = operands
        self._shape = broadcast_shapes(*(e.shape for e in exprs))
        self._layout = exprs[0].layout
        self._dtype = _as_dtype(dtype)
        self._readers = tuple(broadcast_reader(op, self._shape) for op in operands)

    @property
    def function(self) -> Callable[..., Any]:
        return self._f

    @property
    def operands(self) -> tuple:
        return self._operands

    def _read(self, coords: tuple) -> Any:
        return self._f(*(r(coords) for r in self._readers))


class LazyBinary(LazyNary):
    """Elementwise ``f(lhs, rhs)`` over two broadcast operands."""

    def __init__(self, f: Callable[[Any, Any], Any], lhs: Any, rhs: Any, dtype: Any = None) -> None:
        super().__init__(f, lhs, rhs, dtype=dtype)
        self._lhs_reader, self._rhs_reader = self._readers

    @property
    def lhs(self) -> Any:
        return self._operands[0]

    @property
    def rhs(self) -> Any:
        return self._operands[1]

    def _read(self, coords: tuple) -> Any:
        return self._f(self._lhs_reader(coords), self._rhs_reader(coords))


class LazyOuter(LazyExpression):
    """
    Generalized outer product ``out[i..., j...] = f(a[i...], b[j...])``.

    The result shape is ``shape_cat(a.shape, b.shape)``.
    """

    def __init__(self, f: Callable[[Any, Any], Any], a: Any, b: Any, dtype: Any = None) -> None:
        if not (is_expression(a) and is_expression(b)):
            raise TypeError("outer requires two expression operands")
        self._f = f
        self._a = a
        self._b = b
        self._split = a.ndim
        self._shape = shape_cat(a.shape, b.shape)
        self._layout = a.layout
        self._dtype = _as_dtype(dtype)

    @property
    def operands(self) -> tuple:
        return (self._a, self._b)

    def _read(self, coords: tuple) -> Any:
        k = self._split
        return self._f(self._a._read(coords[:k]), self._b._read(coords[k:]))


class ConstantExpression(LazyExpression):
    """
    Expression whose every element is `value`.

    Used by ``zeros``, ``ones`` and ``full``; no storage is allocated until
    the expression is materialized.
    """

    def __init__(
        self,
        shape: Any,
        value: Any,
        dtype: Any = None,
        layout: LayoutLike = Layout.ROW_MAJOR,
    ) -> None:
        self._shape = as_shape(shape)
        self._layout = Layout.coerce(layout)
        self._dtype = _as_dtype(dtype)
        if self._dtype is not None and self._dtype.kind != "O":
            value = self._dtype.type(value)
        self._value = value

    @property
    def value(self) -> Any:
        return self._value

    def _read(self, coords: tuple) -> Any:
        return self._value


class SequenceExpression(LazyExpression):
    """
    One-dimensional arithmetic progression ``start + i * step``.

    Parameters
    ----------
    start, step : number
        First element and increment.
    num : int
        Number of elements.
    dtype : np.dtype-like, optional
        If given, every element is converted to this type.
    stop : number, optional
        If given, the last element is exactly `stop` instead of the
        (possibly rounded) ``start + (num - 1) * step``.
    """

    def __init__(
        self,
        start: Any,
        step: Any,
        num: int,
        dtype: Any = None,
        *,
        stop: Any = None,
    ) -> None:
        self._start = start
        self._step = step
        self._stop = stop
        self._shape = Shape((num,))
        self._dtype = _as_dtype(dtype)
        self._convert = None if self._dtype is None else self._dtype.type

    @property
    def start(self) -> Any:
        return self._start

    @property
    def step(self) -> Any:
        return self._step

    def _read(self, coords: tuple) -> Any:
        i = coords[0]
        if self._stop is not None and i == self._shape[0] - 1:
            value = self._stop
        else:
            value = self._start + i * self._step
        return value if self._convert is None else self._convert(value)


class LazyReduction(LazyExpression):
    """
    Fold of `f` over a subset of the axes of `operand`.

    Every output element ``out[c]`` folds the operand elements whose
    coordinates agree with ``c`` on the kept axes, visited in ascending
    lexicographic order of their coordinates on the reduced axes:

        acc = init (or the first participating element when no init)
        acc = f(acc, x) for every further participating element x

    Parameters
    ----------
    f : Callable[[Any, Any], Any]
        Binary fold function ``f(acc, x)``.
    operand : BaseExpression
        The expression to reduce.
    axes : int | Sequence[int] | None
        Axes to reduce; None reduces every axis.
    keepdims : bool
        If True, reduced axes are kept with size 1.
    init : Any
        Initial accumulator. `NoValue` means "seed with the first element".
    where : BaseExpression | bool | None
        Optional mask broadcastable to ``operand.shape``; elements where it
        is false do not participate.
    name : str
        Operation name used in error messages.

    Raises
    ------
    AxisError
        If an axis is out of range or repeated.
    ShapeMismatchError
        If `where` does not broadcast to the operand's shape.
    EmptyReductionError
        When an element is read whose fold has no participating element and
        no `init`.
    """

    def __init__(
        self,
        f: Callable[[Any, Any], Any],
        operand: Any,
        axes: Any = None,
        *,
        keepdims: bool = False,
        init: Any = NoValue,
        where: Any = None,
        dtype: Any = None,
        name: str = "reduce",
    ) -> None:
        if not is_expression(operand):
            raise TypeError(
                f"reduction requires an expression operand, got {type(operand).__name__}"
            )
        in_shape = operand.shape
        ndim = in_shape.ndim
        self._f = f
        self._operand = operand
        self._axes = normalize_axes(axes, ndim)
        self._kept = tuple(k for k in range(ndim) if k not in self._axes)
        self._keepdims = bool(keepdims)
        self._init = init
        self._name = name
        self._ndim_in = ndim
        self._ranges = tuple(range(in_shape[k]) for k in self._axes)
        self._layout = operand.layout
        self._dtype = _as_dtype(dtype)

        if self._keepdims:
            self._shape = Shape(
                1 if k in self._axes else in_shape[k] for k in range(ndim)
            )
        else:
            self._shape = Shape(in_shape[k] for k in self._kept)

        if where is None:
            self._mask = None
        elif is_expression(where):
            try:
                target = broadcast_shapes(in_shape, where.shape)
            except ShapeMismatchError:
                target = None
            if target != in_shape:
                raise ShapeMismatchError.for_broadcast(where.shape, in_shape)
            self._mask = broadcast_reader(where, in_shape)
        else:
            self._mask = broadcast_reader(bool(where), in_shape)

    @property
    def axes(self) -> tuple[int, ...]:
        return self._axes

    @property
    def keepdims(self) -> bool:
        return self._keepdims

    @property
    def operands(self) -> tuple:
        return (self._operand,)

    def _read(self, coords: tuple) -> Any:
        full = [0] * self._ndim_in
        if self._keepdims:
            for k in self._kept:
                full[k] = coords[k]
        else:
            for j, k in enumerate(self._kept):
                full[k] = coords[j]

        f = self._f
        read = self._operand._read
        mask = self._mask
        axes = self._axes
        acc = self._init
        have = acc is not NoValue
        for sub in itertools.product(*self._ranges):
            for k, v in zip(axes, sub):
                full[k] = v
            c = tuple(full)
            if mask is not None and not mask(c):
                continue
            x = read(c)
            if have:
                acc = f(acc, x)
            else:
                acc = x
                have = True
        if not have:
            raise EmptyReductionError(self._name)
        return acc
