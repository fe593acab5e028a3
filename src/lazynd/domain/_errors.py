"""
Error taxonomy for lazynd.

This module defines the exceptions raised by the shape algebra, the
expression types and the application/reduction engine. Every error kind
derives from :class:`LazyNDError` and from the builtin exception a Python
caller would naturally catch for the same condition (``ValueError`` for
shape problems, ``IndexError`` for positions and axes).

All errors are raised synchronously by the call that detects them. None of
them are retried or recovered internally, and allocation failures are left
to propagate as ``MemoryError`` untouched.
"""

from __future__ import annotations

from typing import Optional, Sequence


class LazyNDError(Exception):
    """Base class for lazynd-specific exceptions."""


class ShapeMismatchError(LazyNDError, ValueError):
    """
    Raised when shapes cannot be broadcast together or when an explicit
    output location does not have the expected shape.

    Attributes
    ----------
    shapes : tuple[tuple[int, ...], ...]
        The offending shapes, as given by the caller (never an intermediate
        broadcasting result).
    """

    def __init__(
        self, message: str, shapes: Optional[Sequence[Sequence[int]]] = None
    ) -> None:
        """
        Initialize the ShapeMismatchError.

        Parameters
        ----------
        message : str
            Human-readable description. It should already name the shapes.
        shapes : Optional[Sequence[Sequence[int]]]
            The shapes involved in the mismatch.
        """
        super().__init__(message)
        self.shapes = tuple(tuple(s) for s in shapes) if shapes else ()

    @classmethod
    def for_broadcast(cls, *shapes: Sequence[int]) -> "ShapeMismatchError":
        """
        Build the error reported when shapes are not broadcast-compatible.
        """
        listed = " ".join(str(tuple(s)) for s in shapes)
        return cls(
            f"operands could not be broadcast together with shapes {listed}",
            shapes,
        )

    @classmethod
    def for_output(
        cls, expected: Sequence[int], got: Sequence[int]
    ) -> "ShapeMismatchError":
        """
        Build the error reported when an ``out`` argument has the wrong shape.
        """
        return cls(
            f"non-conformable output shape {tuple(got)}, "
            f"expected {tuple(expected)}",
            (expected, got),
        )


class OutOfRangeError(LazyNDError, IndexError):
    """
    Raised by bounds-checked element access when a position is outside the
    valid range.

    Attributes
    ----------
    index : int
        The offending position.
    bound : int
        The exclusive upper bound that was violated.
    """

    def __init__(self, index: int, bound: int, what: str = "index") -> None:
        super().__init__(
            f"{what} {index} is out of bounds for size {bound}"
        )
        self.index = index
        self.bound = bound


class AxisError(LazyNDError, IndexError):
    """
    Raised when an axis argument exceeds the rank of its operand, or when an
    axis is repeated inside a multi-axis argument.

    Attributes
    ----------
    axis : int
        The offending axis, as given by the caller.
    ndim : int
        Rank of the operand the axis was applied to.
    """

    def __init__(self, axis: int, ndim: int, *, duplicate: bool = False) -> None:
        if duplicate:
            message = f"repeated axis {axis} in axes argument"
        else:
            message = f"axis {axis} is out of bounds for tensor of dimension {ndim}"
        super().__init__(message)
        self.axis = axis
        self.ndim = ndim
        self.duplicate = duplicate


class EmptyReductionError(LazyNDError, ValueError):
    """
    Raised when a reduction has no initial value and no element participates
    in it (empty operand, or every element masked out by ``where``).
    """

    def __init__(self, op_name: str = "reduce") -> None:
        super().__init__(
            f"{op_name} of an empty sequence with no initial value"
        )
        self.op_name = op_name
