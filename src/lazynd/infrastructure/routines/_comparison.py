"""
Approximate equality.
"""

from __future__ import annotations

import functools
import math
from typing import Any

import numpy as np

from ..functional import apply2
from ..functional._apply import as_expression
from ..tensor._lazy import is_expression
from ._reductions import all as _all


def _close(x: float, y: float, rtol: float, atol: float) -> bool:
    if x == y:
        return True
    if math.isinf(x) or math.isinf(y):
        return False
    return abs(x - y) <= max(rtol * max(abs(x), abs(y)), atol)


def _isclose(x: Any, y: Any, rtol: float, atol: float) -> bool:
    if isinstance(x, (complex, np.complexfloating)) or isinstance(
        y, (complex, np.complexfloating)
    ):
        x, y = complex(x), complex(y)
        return _close(x.real, y.real, rtol, atol) and _close(x.imag, y.imag, rtol, atol)
    return _close(float(x), float(y), rtol, atol)


def isclose(a: Any, b: Any, *, rtol: float = 1e-8, atol: float = 0.0) -> Any:
    """
    Lazy elementwise test of ``abs(a - b) <= max(rtol * max(abs(a), abs(b)), atol)``.

    Integers are compared as floats. NaN is never close to anything, and an
    infinity is only close to itself. Complex values are compared on their
    real and imaginary parts separately.

    Parameters
    ----------
    a, b : BaseExpression | np.ndarray | scalar
        Operands, broadcast together.
    rtol : float, optional
        Relative tolerance.
    atol : float, optional
        Absolute tolerance.

    Returns
    -------
    LazyBinary | bool
        A lazy boolean node, or a plain bool when both operands are scalars.

    Raises
    ------
    ValueError
        If a tolerance is negative.
    """
    if rtol < 0 or atol < 0:
        raise ValueError(f"tolerances must be non-negative, got rtol={rtol}, atol={atol}")
    f = functools.partial(_isclose, rtol=rtol, atol=atol)
    a, b = as_expression(a), as_expression(b)
    if not (is_expression(a) or is_expression(b)):
        return f(a, b)
    return apply2(f, a, b, dtype=np.bool_)


def allclose(a: Any, b: Any, *, rtol: float = 1e-8, atol: float = 0.0) -> bool:
    """True when every element pair is close; see `isclose`."""
    result = isclose(a, b, rtol=rtol, atol=atol)
    if is_expression(result):
        return bool(_all(result))
    return result
