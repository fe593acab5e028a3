"""
Elementwise selection and view routines.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from ..functional._apply import as_expression
from ..functional import apply2
from ..tensor._lazy import LazyNary
from ..tensor._storage import StridedExpression


def _select(cond: Any, x: Any, y: Any) -> Any:
    return x if cond else y


def where(cond: Any, x: Any, y: Any) -> LazyNary:
    """
    Lazy elementwise ``x if cond else y``.

    The three operands are broadcast together; `x` and `y` may be scalars.
    Only the selected branch is read for each element.

    Examples
    --------
    >>> t = Tensor.from_values([-2, 3, -1])
    >>> where(t > 0, t, 0).tolist()
    [0, 3, 0]
    """
    cond, x, y = as_expression(cond), as_expression(x), as_expression(y)
    return _LazySelect(cond, x, y)


class _LazySelect(LazyNary):
    def __init__(self, cond: Any, x: Any, y: Any) -> None:
        super().__init__(_select, cond, x, y)
        self._cond_reader, self._x_reader, self._y_reader = self._readers

    def _read(self, coords: tuple) -> Any:
        if self._cond_reader(coords):
            return self._x_reader(coords)
        return self._y_reader(coords)


def _maximum(x: Any, y: Any) -> Any:
    return y if y > x else x


def _minimum(x: Any, y: Any) -> Any:
    return y if y < x else x


def maximum(a: Any, b: Any, *, out: Optional[Any] = None) -> Any:
    """Elementwise maximum of two broadcast operands."""
    return apply2(_maximum, a, b, out=out)


def minimum(a: Any, b: Any, *, out: Optional[Any] = None) -> Any:
    """Elementwise minimum of two broadcast operands."""
    return apply2(_minimum, a, b, out=out)


def _clamp(x: Any, lo: Any, hi: Any) -> Any:
    if lo is not None and x < lo:
        x = lo
    if hi is not None and x > hi:
        x = hi
    return x


def clamp(a: Any, lo: Any = None, hi: Any = None) -> LazyNary:
    """
    Lazy elementwise clamp of `a` to ``[lo, hi]``.

    Either bound may be None (unbounded) and either may be an expression
    broadcast against `a`.
    """
    return LazyNary(_clamp, as_expression(a), as_expression(lo), as_expression(hi))


def _strided(a: Any, what: str) -> StridedExpression:
    a = as_expression(a)
    if not isinstance(a, StridedExpression):
        raise TypeError(
            f"{what} requires a tensor or view, got {type(a).__name__}; "
            "materialize lazy expressions with .copy() first"
        )
    return a


def transpose(a: Any, axes: Optional[Sequence[int]] = None) -> Any:
    """Return a view of `a` with its axes permuted (reversed by default)."""
    return _strided(a, "transpose").transpose(axes)


def reverse(a: Any, axis: int = 0) -> Any:
    """Return a view of `a` with the elements along `axis` in reverse order."""
    return _strided(a, "reverse").reverse(axis)


def diagonal(a: Any, offset: int = 0) -> Any:
    """Return a view of the `offset`-th diagonal of a rank-2 tensor or view."""
    return _strided(a, "diagonal").diagonal(offset)
