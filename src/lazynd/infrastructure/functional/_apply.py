"""
Elementwise application of user functions.

`apply` and `apply2` lift a scalar function to expressions. Without ``out``
they return a lazy node; with ``out`` they evaluate eagerly into the given
storage and return it.

Eager evaluation always validates the output shape before writing anything,
then evaluates every element into a temporary before the first write, so
``out`` may alias an operand.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import numpy as np

from ...domain._errors import ShapeMismatchError
from ..tensor._base import BaseExpression
from ..tensor._dense_tensor import Tensor
from ..tensor._lazy import LazyBinary, LazyNary, LazyOuter, LazyUnary
from ..tensor._storage import StorageExpression

logger = logging.getLogger(__name__)


def as_expression(value: Any) -> Any:
    """
    Return `value` as an operand of the functional engine.

    Expressions are returned unchanged, NumPy arrays are copied into a
    `Tensor`, and anything else is treated as a scalar and returned as-is.
    """
    if isinstance(value, BaseExpression):
        return value
    if isinstance(value, np.ndarray):
        return Tensor.from_numpy(value)
    return value


def evaluate_into(out: Any, expr: BaseExpression) -> Any:
    """
    Evaluate `expr` into the storage-backed expression `out`.

    Raises
    ------
    TypeError
        If `out` is not storage-backed.
    ShapeMismatchError
        If ``out.shape`` differs from ``expr.shape``.
    """
    if not isinstance(out, StorageExpression):
        raise TypeError(
            f"out must be a tensor, view or indirect tensor, got {type(out).__name__}"
        )
    if out.shape != expr.shape:
        raise ShapeMismatchError.for_output(expr.shape, out.shape)
    logger.debug(
        "Evaluating %s of shape %s into out", type(expr).__name__, tuple(expr.shape)
    )
    out._store(expr)
    return out


def apply(
    f: Callable[[Any], Any],
    a: Any,
    *,
    out: Optional[Any] = None,
    dtype: Any = None,
) -> Any:
    """
    Apply `f` to every element of `a`.

    Parameters
    ----------
    f : Callable[[Any], Any]
        Scalar function.
    a : BaseExpression | np.ndarray
        Operand.
    out : StorageExpression, optional
        If given, the result is written into `out` (which must have the
        shape of `a`) and `out` is returned.
    dtype : np.dtype-like, optional
        Element dtype of the result, if known.

    Returns
    -------
    LazyUnary | StorageExpression
        The lazy node ``f(a)``, or `out`.

    Examples
    --------
    >>> t = Tensor.from_values([1.0, 4.0, 9.0])
    >>> apply(math.sqrt, t).tolist()
    [1.0, 2.0, 3.0]
    """
    a = as_expression(a)
    if not isinstance(a, BaseExpression):
        raise TypeError(f"apply requires an expression operand, got {type(a).__name__}")
    node = LazyUnary(f, a, dtype=dtype)
    if out is None:
        return node
    return evaluate_into(out, node)


def apply2(
    f: Callable[[Any, Any], Any],
    a: Any,
    b: Any,
    *,
    out: Optional[Any] = None,
    dtype: Any = None,
) -> Any:
    """
    Apply the binary function `f` elementwise over broadcast `a` and `b`.

    At least one of `a`, `b` must be an expression (or array); the other may
    be a scalar.

    Parameters
    ----------
    f : Callable[[Any, Any], Any]
        Binary scalar function.
    a, b : BaseExpression | np.ndarray | scalar
        Operands. Their shapes must be broadcast-compatible.
    out : StorageExpression, optional
        Destination with exactly the broadcast shape.
    dtype : np.dtype-like, optional
        Element dtype of the result, if known.

    Returns
    -------
    LazyBinary | StorageExpression
        The lazy node, or `out` after it has been written.

    Raises
    ------
    ShapeMismatchError
        If the operand shapes are not compatible, or `out` has a different
        shape than the broadcast result. Nothing is written in either case.
    """
    node = LazyBinary(f, as_expression(a), as_expression(b), dtype=dtype)
    if out is None:
        return node
    return evaluate_into(out, node)


def outer(
    f: Callable[[Any, Any], Any],
    a: Any,
    b: Any,
    *,
    out: Optional[Any] = None,
    dtype: Any = None,
) -> Any:
    """
    Generalized outer product: ``result[i..., j...] = f(a[i...], b[j...])``.

    The result has rank ``a.ndim + b.ndim``.
    """
    node = LazyOuter(f, as_expression(a), as_expression(b), dtype=dtype)
    if out is None:
        return node
    return evaluate_into(out, node)


class vectorize:
    """
    Lift a scalar function of any arity to expressions.

    Calling the result with at least one expression (or array) argument
    returns a lazy node over the broadcast arguments; calling it with scalars
    only calls the function directly.

    Examples
    --------
    >>> clip01 = vectorize(lambda x, lo, hi: min(max(x, lo), hi))
    >>> clip01(Tensor.from_values([-1.0, 0.5, 2.0]), 0.0, 1.0).tolist()
    [0.0, 0.5, 1.0]
    """

    def __init__(self, f: Callable[..., Any], *, dtype: Any = None) -> None:
        self.f = f
        self.dtype = dtype
        self.__doc__ = getattr(f, "__doc__", None)
        self.__name__ = getattr(f, "__name__", type(self).__name__)

    def __call__(self, *args: Any, out: Optional[Any] = None) -> Any:
        operands = [as_expression(x) for x in args]
        if not any(isinstance(x, BaseExpression) for x in operands):
            if out is not None:
                raise TypeError("out requires at least one expression argument")
            return self.f(*operands)
        node = LazyNary(self.f, *operands, dtype=self.dtype)
        if out is None:
            return node
        return evaluate_into(out, node)

    def __repr__(self) -> str:
        return f"vectorize({self.__name__})"
