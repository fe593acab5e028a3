"""
Random-access cursor over any expression.

`TensorIterator` walks an expression in a caller-chosen traversal order
(row-major or column-major), independent of how the elements are stored or
computed. At each position it reports both the flat position in traversal
order (`index`) and the per-axis coordinates (`coords`), and reads or writes
the element through the expression's unchecked accessors.

Design notes
------------
- Single-step moves update the coordinates incrementally instead of
  unravelling the flat index. The coordinate update differs between layouts;
  both variants are registered as control paths keyed by the iterator's
  `layout` (see `_layout_paths.py`).
- Jumps (`+= n`, `-= n`, subscripts) unravel the new flat index directly.
- Only iterators over the same expression and the same traversal order can
  be compared or subtracted.
"""

from __future__ import annotations

from typing import Any, Optional

from ...domain._errors import OutOfRangeError
from ...domain._layout import Layout, LayoutLike
from ...domain._shape import Index, _unravel


class TensorIterator:
    """
    Random-access iterator over an expression.

    Parameters
    ----------
    expr : BaseExpression
        The expression to traverse.
    index : int, optional
        Initial flat position in traversal order. Defaults to 0.
    layout : LayoutLike, optional
        Traversal order. Defaults to the expression's own layout.
    readonly : bool, optional
        If True, assignment through `value` is rejected even when the
        expression is storage-backed. Iterators returned by `cbegin`/`cend`
        are read-only.

    Notes
    -----
    - Dereferencing an iterator positioned outside ``[0, size)`` raises
      `OutOfRangeError`; it never reads unrelated memory.
    - The iterator also follows the Python iterator protocol: `next(it)`
      returns the current element and advances.
    """

    __slots__ = ("_expr", "_shape", "_size", "_layout", "_index", "_coords", "_readonly")

    def __init__(
        self,
        expr: Any,
        index: int = 0,
        layout: Optional[LayoutLike] = None,
        *,
        readonly: bool = False,
    ) -> None:
        self._expr = expr
        self._shape = tuple(expr.shape)
        self._size = expr.size
        self._layout = expr.layout if layout is None else Layout.coerce(layout)
        self._readonly = bool(readonly)
        self._index = int(index)
        self._sync_coords()

    def _sync_coords(self) -> None:
        if 0 <= self._index < self._size:
            self._coords = _unravel(self._index, self._shape, self._layout)
        else:
            self._coords = None

    # ------------------------------------------------------------------
    # Position
    # ------------------------------------------------------------------
    @property
    def expression(self) -> Any:
        """The expression being traversed."""
        return self._expr

    @property
    def layout(self) -> Layout:
        """Traversal order of this iterator."""
        return self._layout

    @property
    def index(self) -> int:
        """Flat position in traversal order."""
        return self._index

    @property
    def coords(self) -> Index:
        """
        Per-axis coordinates of the current position.

        Raises
        ------
        OutOfRangeError
            If the iterator is not positioned on an element.
        """
        if self._coords is None:
            raise OutOfRangeError(self._index, self._size, what="iterator position")
        return Index(self._coords)

    @property
    def readonly(self) -> bool:
        return self._readonly

    # ------------------------------------------------------------------
    # Dereference
    # ------------------------------------------------------------------
    @property
    def value(self) -> Any:
        """The element at the current position."""
        if self._coords is None:
            raise OutOfRangeError(self._index, self._size, what="iterator position")
        return self._expr._read(tuple(self._coords))

    @value.setter
    def value(self, new_value: Any) -> None:
        if self._readonly or not hasattr(self._expr, "_write"):
            raise TypeError(
                f"cannot assign through a read-only iterator over "
                f"{type(self._expr).__name__}"
            )
        if self._coords is None:
            raise OutOfRangeError(self._index, self._size, what="iterator position")
        self._expr._write(tuple(self._coords), new_value)

    def __getitem__(self, offset: int) -> Any:
        return (self + offset).value

    def __setitem__(self, offset: int, new_value: Any) -> None:
        target = self + offset
        target.value = new_value

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------
    def _step_forward(self) -> None:
        """Advance by one position (dispatched on `layout`)."""
        ...

    def _step_backward(self) -> None:
        """Move back by one position (dispatched on `layout`)."""
        ...

    def increment(self) -> "TensorIterator":
        """Advance by one position in place (``++it``)."""
        self._step_forward()
        return self

    def decrement(self) -> "TensorIterator":
        """Move back by one position in place (``--it``)."""
        self._step_backward()
        return self

    def copy(self) -> "TensorIterator":
        clone = TensorIterator.__new__(TensorIterator)
        clone._expr = self._expr
        clone._shape = self._shape
        clone._size = self._size
        clone._layout = self._layout
        clone._readonly = self._readonly
        clone._index = self._index
        clone._coords = None if self._coords is None else list(self._coords)
        return clone

    def __iadd__(self, n: int) -> "TensorIterator":
        n = int(n)
        if n == 1:
            self._step_forward()
        elif n == -1:
            self._step_backward()
        elif n:
            self._index += n
            self._sync_coords()
        return self

    def __isub__(self, n: int) -> "TensorIterator":
        return self.__iadd__(-int(n))

    def __add__(self, n: int) -> "TensorIterator":
        if isinstance(n, TensorIterator):
            return NotImplemented
        clone = self.copy()
        clone += n
        return clone

    __radd__ = __add__

    def __sub__(self, other):
        if isinstance(other, TensorIterator):
            self._check_compatible(other)
            return self._index - other._index
        clone = self.copy()
        clone -= other
        return clone

    # ------------------------------------------------------------------
    # Comparisons
    # ------------------------------------------------------------------
    def _check_compatible(self, other: "TensorIterator") -> None:
        if other._expr is not self._expr:
            raise ValueError("iterators over different expressions are not comparable")
        if other._layout is not self._layout:
            raise ValueError(
                "iterators with different traversal orders are not comparable"
            )

    def __eq__(self, other: object):
        if not isinstance(other, TensorIterator):
            return NotImplemented
        self._check_compatible(other)
        return self._index == other._index

    def __ne__(self, other: object):
        if not isinstance(other, TensorIterator):
            return NotImplemented
        self._check_compatible(other)
        return self._index != other._index

    def __lt__(self, other: "TensorIterator") -> bool:
        self._check_compatible(other)
        return self._index < other._index

    def __le__(self, other: "TensorIterator") -> bool:
        self._check_compatible(other)
        return self._index <= other._index

    def __gt__(self, other: "TensorIterator") -> bool:
        self._check_compatible(other)
        return self._index > other._index

    def __ge__(self, other: "TensorIterator") -> bool:
        self._check_compatible(other)
        return self._index >= other._index

    __hash__ = None

    # ------------------------------------------------------------------
    # Python iterator protocol
    # ------------------------------------------------------------------
    def __iter__(self) -> "TensorIterator":
        return self

    def __next__(self) -> Any:
        if self._coords is None:
            raise StopIteration
        current = self._expr._read(tuple(self._coords))
        self._step_forward()
        return current

    def __repr__(self) -> str:
        return (
            f"TensorIterator(expression={type(self._expr).__name__}, "
            f"index={self._index}, layout={self._layout.name})"
        )
