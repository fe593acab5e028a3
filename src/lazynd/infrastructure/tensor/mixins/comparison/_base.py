"""
Comparison mixin defining elementwise relational and logical operators.

Unlike Python containers, expressions compare elementwise: ``a == b`` is a
lazy expression of booleans, not a single bool. Use ``(a == b).all()`` to
test whole-expression equality.
"""

from __future__ import annotations

import operator
from abc import ABC
from typing import Any


def _compare(f, lhs: Any, rhs: Any) -> Any:
    from ....functional import apply2

    return apply2(f, lhs, rhs)


def _logical_and(x: Any, y: Any) -> bool:
    return bool(x) and bool(y)


def _logical_or(x: Any, y: Any) -> bool:
    return bool(x) or bool(y)


def _logical_xor(x: Any, y: Any) -> bool:
    return bool(x) != bool(y)


class TensorMixinComparison(ABC):
    """
    Mixin providing elementwise comparisons and logical operators.

    Notes
    -----
    - Defining ``__eq__`` elementwise makes expressions unhashable.
    - ``&``, ``|`` and ``^`` are logical (truthiness based), which matches
      their bitwise counterparts on boolean masks.
    """

    def __eq__(self, other: Any) -> Any:  # type: ignore[override]
        return _compare(operator.eq, self, other)

    def __ne__(self, other: Any) -> Any:  # type: ignore[override]
        return _compare(operator.ne, self, other)

    def __lt__(self, other: Any) -> Any:
        return _compare(operator.lt, self, other)

    def __le__(self, other: Any) -> Any:
        return _compare(operator.le, self, other)

    def __gt__(self, other: Any) -> Any:
        return _compare(operator.gt, self, other)

    def __ge__(self, other: Any) -> Any:
        return _compare(operator.ge, self, other)

    __hash__ = None  # type: ignore[assignment]

    def __and__(self, other: Any) -> Any:
        return _compare(_logical_and, self, other)

    def __rand__(self, other: Any) -> Any:
        return _compare(_logical_and, other, self)

    def __or__(self, other: Any) -> Any:
        return _compare(_logical_or, self, other)

    def __ror__(self, other: Any) -> Any:
        return _compare(_logical_or, other, self)

    def __xor__(self, other: Any) -> Any:
        return _compare(_logical_xor, self, other)

    def __rxor__(self, other: Any) -> Any:
        return _compare(_logical_xor, other, self)
