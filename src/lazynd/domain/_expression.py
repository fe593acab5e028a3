"""
Expression interface definitions.

This module defines the domain-level contract shared by every tensor-like
object in lazynd using structural typing. Four concrete kinds satisfy it:

- the owning dense `Tensor`,
- the strided `TensorView`,
- the gather-by-index `IndirectTensor`,
- the lazy computation nodes (unary, binary, n-ary, reduction, outer,
  constant fill and sequences).

Notes
-----
- Only dense tensors and views expose `data`. Lazy nodes and indirect
  tensors have no address-of-element operation, so algorithms that need the
  underlying buffer can only target materializable backends.
- `_read` is the unchecked per-coordinate accessor used internally by lazy
  nodes and iterators; every public accessor is bounds-checked.
"""

from __future__ import annotations

from typing import Any, Iterator, Optional, Protocol, runtime_checkable

from ._layout import Layout, LayoutLike
from ._shape import Shape


@runtime_checkable
class IExpression(Protocol):
    """
    Expression interface.

    An `IExpression` is anything with a shape whose elements can be read by
    coordinate and walked in row-major or column-major order, regardless of
    whether the elements are stored or computed on demand.
    """

    @property
    def shape(self) -> Shape:
        """
        Return the extent along each axis.

        ``expr.shape[axis]`` is the bounds-checked per-axis query.
        """
        ...

    @property
    def ndim(self) -> int:
        """Return the number of axes."""
        ...

    @property
    def size(self) -> int:
        """Return the number of elements (``shape.prod()``)."""
        ...

    @property
    def layout(self) -> Layout:
        """
        Return the default traversal order used when `begin`/`end` are
        called without an explicit layout.
        """
        ...

    def __call__(self, *indices: int) -> Any:
        """
        Bounds-checked read of the element at the given coordinates.

        Raises
        ------
        OutOfRangeError
            If any coordinate is out of bounds.
        """
        ...

    def _read(self, coords: tuple[int, ...]) -> Any:
        """Unchecked read of the element at normalized coordinates."""
        ...

    def begin(self, layout: Optional[LayoutLike] = None) -> Iterator[Any]:
        """Return an iterator positioned at the first element."""
        ...

    def end(self, layout: Optional[LayoutLike] = None) -> Iterator[Any]:
        """Return an iterator positioned one past the last element."""
        ...

    def is_contiguous(self) -> bool:
        """
        Return whether the elements are stored contiguously with canonical
        strides for the expression's shape and layout.
        """
        ...


@runtime_checkable
class IStorageExpression(IExpression, Protocol):
    """
    Expression whose elements live in memory and can be written.

    Dense tensors, views and indirect tensors satisfy this protocol.
    """

    def _write(self, coords: tuple[int, ...], value: Any) -> None:
        """Unchecked write of the element at normalized coordinates."""
        ...
