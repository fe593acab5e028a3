"""
Unary mixin defining elementwise single-operand operations.
"""

from __future__ import annotations

import operator
from abc import ABC
from typing import Any, Callable

import numpy as np


def _unary(f: Callable[[Any], Any], operand: Any, dtype: Any = None) -> Any:
    from ....functional import apply

    return apply(f, operand, dtype=dtype)


class TensorMixinUnary(ABC):
    """
    Mixin providing elementwise unary operations.

    Every method returns a lazy node of the same shape as the receiver.
    """

    def __neg__(self) -> Any:
        return _unary(operator.neg, self)

    def __pos__(self) -> Any:
        return _unary(operator.pos, self)

    def __abs__(self) -> Any:
        return _unary(abs, self)

    def __invert__(self) -> Any:
        """
        Elementwise ``~x``.

        Booleans are negated logically (``~True`` is ``False``), integers
        bitwise.
        """
        return _unary(_invert, self)

    def apply(self, f: Callable[[Any], Any]) -> Any:
        """Return the lazy expression ``f(x)`` for every element ``x``."""
        return _unary(f, self)

    def astype(self, dtype: Any) -> Any:
        """
        Return a lazy expression converting every element to `dtype`.

        Parameters
        ----------
        dtype : np.dtype-like
            Target element type; each element is converted with
            ``np.dtype(dtype).type``.
        """
        dtype = np.dtype(dtype)
        return _unary(dtype.type, self, dtype=dtype)

    def clamp(self, lo: Any = None, hi: Any = None) -> Any:
        """
        Limit every element to ``[lo, hi]``.

        Either bound may be omitted. Bounds may be scalars or expressions
        broadcastable to the receiver.
        """
        from ....routines import clamp

        return clamp(self, lo, hi)


def _invert(x: Any) -> Any:
    if isinstance(x, (bool, np.bool_)):
        return not x
    return ~x
