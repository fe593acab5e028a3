"""
Arithmetic mixin defining elementwise expression operators.

This module declares :class:`TensorMixinArithmetic`. Each operator lifts the
matching function from the `operator` module through `apply2`, so

    a + b

is the lazy node ``apply2(operator.add, a, b)``. Nothing is computed until
the node is read, iterated or materialized.
"""

from __future__ import annotations

import operator
from abc import ABC
from typing import Any, Callable


def _binary(f: Callable[[Any, Any], Any], lhs: Any, rhs: Any) -> Any:
    from ....functional import apply2

    return apply2(f, lhs, rhs)


class TensorMixinArithmetic(ABC):
    """
    Mixin providing elementwise arithmetic operators.

    Notes
    -----
    - Operands are broadcast against each other; incompatible shapes raise
      `ShapeMismatchError` when the operator is applied, not when the result
      is read.
    - Scalars (anything that is not an expression or a NumPy array) are used
      unchanged for every element.
    - Element values follow the semantics of the element type; integer
      overflow and division by zero behave exactly as they would for two
      scalars of that type.
    """

    # ----------------------------
    # Addition
    # ----------------------------
    def __add__(self, other: Any) -> Any:
        """
        Elementwise addition.

        Parameters
        ----------
        other : BaseExpression | np.ndarray | scalar
            Right-hand operand, broadcast against this expression.

        Returns
        -------
        LazyBinary
            Lazy node reading ``self[i] + other[i]``.

        Notes
        -----
        Incompatible shapes raise `ShapeMismatchError` here, before any
        element is read.
        """
        return _binary(operator.add, self, other)

    def __radd__(self, other: Any) -> Any:
        """
        Right-hand addition to support ``scalar + expression``.

        Parameters
        ----------
        other : scalar | np.ndarray
            Left-hand operand.

        Returns
        -------
        LazyBinary
            Lazy node reading ``other[i] + self[i]``.

        Notes
        -----
        The operand order is kept, so element types whose ``+`` is not
        commutative (strings, sequences) concatenate in the written order.
        """
        return _binary(operator.add, other, self)

    # ----------------------------
    # Subtraction
    # ----------------------------
    def __sub__(self, other: Any) -> Any:
        """
        Elementwise subtraction.

        Parameters
        ----------
        other : BaseExpression | np.ndarray | scalar
            Right-hand operand, broadcast against this expression.

        Returns
        -------
        LazyBinary
            Lazy node reading ``self[i] - other[i]``.
        """
        return _binary(operator.sub, self, other)

    def __rsub__(self, other: Any) -> Any:
        """
        Right-hand subtraction to support ``scalar - expression``.

        Parameters
        ----------
        other : scalar | np.ndarray
            Left-hand operand (the minuend).

        Returns
        -------
        LazyBinary
            Lazy node reading ``other[i] - self[i]``.

        Notes
        -----
        Subtraction is not commutative; the node applies ``operator.sub``
        with `other` first instead of delegating to :meth:`__sub__`.
        """
        return _binary(operator.sub, other, self)

    # ----------------------------
    # Multiplication
    # ----------------------------
    def __mul__(self, other: Any) -> Any:
        """
        Elementwise multiplication.

        Parameters
        ----------
        other : BaseExpression | np.ndarray | scalar
            Right-hand operand, broadcast against this expression.

        Returns
        -------
        LazyBinary
            Lazy node reading ``self[i] * other[i]``.

        Notes
        -----
        This is the elementwise (Hadamard) product, not a matrix product.
        """
        return _binary(operator.mul, self, other)

    def __rmul__(self, other: Any) -> Any:
        """
        Right-hand multiplication to support ``scalar * expression``.

        Parameters
        ----------
        other : scalar | np.ndarray
            Left-hand operand.

        Returns
        -------
        LazyBinary
            Lazy node reading ``other[i] * self[i]``.
        """
        return _binary(operator.mul, other, self)

    # ----------------------------
    # True division
    # ----------------------------
    def __truediv__(self, other: Any) -> Any:
        """
        Elementwise true division.

        Parameters
        ----------
        other : BaseExpression | np.ndarray | scalar
            Divisor, broadcast against this expression.

        Returns
        -------
        LazyBinary
            Lazy node reading ``self[i] / other[i]``.

        Notes
        -----
        Integer operands produce floats, as with Python's ``/``. Division by
        zero surfaces when the offending element is read: NumPy float
        scalars give ``inf`` or ``nan`` with a warning, Python numbers raise
        `ZeroDivisionError`.
        """
        return _binary(operator.truediv, self, other)

    def __rtruediv__(self, other: Any) -> Any:
        """
        Right-hand true division to support ``scalar / expression``.

        Parameters
        ----------
        other : scalar | np.ndarray
            Dividend.

        Returns
        -------
        LazyBinary
            Lazy node reading ``other[i] / self[i]``.

        Notes
        -----
        The elements of this expression are the divisors.
        """
        return _binary(operator.truediv, other, self)

    # ----------------------------
    # Floor division
    # ----------------------------
    def __floordiv__(self, other: Any) -> Any:
        """
        Elementwise floor division.

        Parameters
        ----------
        other : BaseExpression | np.ndarray | scalar
            Divisor, broadcast against this expression.

        Returns
        -------
        LazyBinary
            Lazy node reading ``self[i] // other[i]``.

        Notes
        -----
        Rounds toward negative infinity, so ``-7 // 2 == -4``.
        """
        return _binary(operator.floordiv, self, other)

    def __rfloordiv__(self, other: Any) -> Any:
        """
        Right-hand floor division to support ``scalar // expression``.

        Parameters
        ----------
        other : scalar | np.ndarray
            Dividend.

        Returns
        -------
        LazyBinary
            Lazy node reading ``other[i] // self[i]``.
        """
        return _binary(operator.floordiv, other, self)

    # ----------------------------
    # Modulo
    # ----------------------------
    def __mod__(self, other: Any) -> Any:
        """
        Elementwise remainder.

        Parameters
        ----------
        other : BaseExpression | np.ndarray | scalar
            Divisor, broadcast against this expression.

        Returns
        -------
        LazyBinary
            Lazy node reading ``self[i] % other[i]``.

        Notes
        -----
        The remainder takes the sign of the divisor, matching
        :meth:`__floordiv__` so that ``(a // b) * b + a % b == a``. For
        example ``-7 % 3 == 2``.
        """
        return _binary(operator.mod, self, other)

    def __rmod__(self, other: Any) -> Any:
        """
        Right-hand remainder to support ``scalar % expression``.

        Parameters
        ----------
        other : scalar | np.ndarray
            Dividend.

        Returns
        -------
        LazyBinary
            Lazy node reading ``other[i] % self[i]``.

        Notes
        -----
        The elements of this expression are the divisors, so the result
        takes their sign.
        """
        return _binary(operator.mod, other, self)

    # ----------------------------
    # Power
    # ----------------------------
    def __pow__(self, other: Any) -> Any:
        """
        Elementwise power.

        Parameters
        ----------
        other : BaseExpression | np.ndarray | scalar
            Exponent, broadcast against this expression.

        Returns
        -------
        LazyBinary
            Lazy node reading ``self[i] ** other[i]``.

        Notes
        -----
        A negative integer exponent on an integer element follows the
        element type: Python ints give a float, NumPy integer scalars raise
        `ValueError` when the element is read.
        """
        return _binary(operator.pow, self, other)

    def __rpow__(self, other: Any) -> Any:
        """
        Right-hand power to support ``scalar ** expression``.

        Parameters
        ----------
        other : scalar | np.ndarray
            Base.

        Returns
        -------
        LazyBinary
            Lazy node reading ``other[i] ** self[i]``.

        Notes
        -----
        The elements of this expression are the exponents.
        """
        return _binary(operator.pow, other, self)
