"""
Shape and index algebra.

This module defines the per-axis integer tuples used throughout lazynd and
the pure functions operating on them:

- `Shape`: the extent of an expression along each axis.
- `Index`: a position inside an expression, one coordinate per axis.
- flat-index conversion (`ravel_index`, `unravel_index`) under a `Layout`,
- canonical stride derivation (`make_strides`),
- broadcast-shape unification (`broadcast_shapes`) and concatenation
  (`shape_cat`),
- axis normalization helpers shared by the reduction engine.

Design notes
------------
- `Shape` and `Index` share their representation (both are `tuple`
  subclasses) but are deliberately *not* interchangeable: a `Shape` never
  compares equal to an `Index`, and the `as_shape` / `as_index` coercions
  used by the public API reject the other kind with `TypeError`.
- Both types are immutable values. Per-axis "mutation" is expressed through
  `replace`, which returns a new value.
- Rank is fixed per value at construction; nothing here depends on a global
  rank.
"""

from __future__ import annotations

import itertools
import operator
from typing import Any, Iterable, Iterator, Optional, Sequence, Union

from ._errors import AxisError, OutOfRangeError, ShapeMismatchError
from ._layout import Layout, LayoutLike


def _as_int(value: Any, what: str) -> int:
    try:
        return operator.index(value)
    except TypeError:
        raise TypeError(
            f"{what} entries must be integers, got {type(value).__name__}"
        ) from None


class _AxisTuple(tuple):
    """
    Common representation of `Shape` and `Index`.

    Accepts either the per-axis values as separate arguments or a single
    iterable of values.
    """

    _kind = "axis tuple"

    def __new__(cls, *values: Any):
        if len(values) == 1 and not _is_integral(values[0]):
            values = tuple(values[0])
        items = tuple(_as_int(v, cls._kind) for v in values)
        cls._validate(items)
        return super().__new__(cls, items)

    @classmethod
    def _validate(cls, items: tuple[int, ...]) -> None:
        pass

    @property
    def ndim(self) -> int:
        """Number of axes."""
        return tuple.__len__(self)

    def __getitem__(self, key):
        if isinstance(key, slice):
            return type(self)(tuple.__getitem__(self, key))
        axis = _as_int(key, "axis")
        n = tuple.__len__(self)
        if axis < -n or axis >= n:
            raise OutOfRangeError(axis, n, what="axis")
        return tuple.__getitem__(self, axis)

    def replace(self, axis: int, value: int):
        """
        Return a copy with the entry at `axis` replaced by `value`.

        Raises
        ------
        OutOfRangeError
            If `axis` is not a valid axis.
        """
        n = self.ndim
        if axis < -n or axis >= n:
            raise OutOfRangeError(axis, n, what="axis")
        items = list(self)
        items[axis % n] = value
        return type(self)(items)

    def transpose(self):
        """Return a copy with the axes in reversed order."""
        return type(self)(tuple(reversed(self)))

    def __eq__(self, other: object):
        if isinstance(other, _AxisTuple) and type(other) is not type(self):
            return False
        return tuple.__eq__(self, other)

    def __ne__(self, other: object):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = tuple.__hash__

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(str(v) for v in self)})"


def _is_integral(value: Any) -> bool:
    try:
        operator.index(value)
    except TypeError:
        return False
    return True


class Shape(_AxisTuple):
    """
    Extent of an expression along each axis.

    Examples
    --------
    >>> Shape(2, 3)
    Shape(2, 3)
    >>> Shape((4, 1)).prod()
    4

    Notes
    -----
    The size of a rank-0 shape is 1; a shape with any zero-sized axis has
    size 0.
    """

    _kind = "shape"

    @classmethod
    def _validate(cls, items: tuple[int, ...]) -> None:
        for v in items:
            if v < 0:
                raise ValueError(
                    f"negative dimensions are not allowed, got {items}"
                )

    def prod(self) -> int:
        """Return the product of the sizes along all the axes."""
        size = 1
        for v in self:
            size *= v
        return size

    @property
    def size(self) -> int:
        return self.prod()


class Index(_AxisTuple):
    """
    Position of an element, one coordinate per axis.

    `Index` has the same representation as `Shape` but a different meaning;
    the two never compare equal.
    """

    _kind = "index"


ShapeLike = Union[Shape, Sequence[int], int]
IndexLike = Union[Index, Sequence[int], int]


def make_shape(*sizes: int) -> Shape:
    """
    Create a `Shape` whose rank is the number of arguments.

    Raises
    ------
    TypeError
        If an argument is not an integer.
    ValueError
        If a size is negative.
    """
    return Shape(sizes)


def make_index(*indices: int) -> Index:
    """Create an `Index` whose rank is the number of arguments."""
    return Index(indices)


def as_shape(value: ShapeLike) -> Shape:
    """
    Coerce a user-facing shape argument to `Shape`.

    Raises
    ------
    TypeError
        If `value` is an `Index` (positions are not extents).
    """
    if isinstance(value, Shape):
        return value
    if isinstance(value, Index):
        raise TypeError(f"expected a shape, got index {value!r}")
    if _is_integral(value):
        return Shape((value,))
    return Shape(value)


def as_index(value: IndexLike) -> Index:
    """
    Coerce a user-facing position argument to `Index`.

    Raises
    ------
    TypeError
        If `value` is a `Shape` (extents are not positions).
    """
    if isinstance(value, Index):
        return value
    if isinstance(value, Shape):
        raise TypeError(f"expected an index, got shape {value!r}")
    if _is_integral(value):
        return Index((value,))
    return Index(value)


def assert_within_bounds(shape: Shape, index: Sequence[int]) -> tuple[int, ...]:
    """
    Check that `index` designates an element of an expression of `shape`.

    Negative coordinates count from the end of their axis.

    Returns
    -------
    tuple[int, ...]
        The normalized (non-negative) coordinates.

    Raises
    ------
    TypeError
        If the number of coordinates differs from the rank of `shape`.
    OutOfRangeError
        If any coordinate is outside its axis.
    """
    if len(index) != len(shape):
        raise TypeError(
            f"expected {len(shape)} indices for shape {tuple(shape)}, "
            f"got {len(index)}"
        )
    out = []
    for i, n in zip(index, tuple.__iter__(shape)):
        i = _as_int(i, "index")
        if i < -n or i >= n:
            raise OutOfRangeError(i, n)
        out.append(i + n if i < 0 else i)
    return tuple(out)


def ravel_index(
    index: IndexLike, shape: ShapeLike, layout: LayoutLike = Layout.ROW_MAJOR
) -> int:
    """
    Convert a tuple of coordinates into a flat index.

    Parameters
    ----------
    index : IndexLike
        Coordinates to flatten.
    shape : ShapeLike
        Shape used for raveling.
    layout : LayoutLike, optional
        Whether the flat index counts in row-major (default) or column-major
        order.

    Returns
    -------
    int
        The flat index.

    Raises
    ------
    OutOfRangeError
        If `index` is out of bounds for `shape`.
    """
    shape = as_shape(shape)
    coords = assert_within_bounds(shape, as_index(index))
    if Layout.coerce(layout) is Layout.ROW_MAJOR:
        pairs = zip(coords, shape)
    else:
        pairs = zip(reversed(coords), reversed(shape))
    flat = 0
    for i, n in pairs:
        flat = flat * n + i
    return flat


def unravel_index(
    flat: int, shape: ShapeLike, layout: LayoutLike = Layout.ROW_MAJOR
) -> Index:
    """
    Convert a flat index into a tuple of coordinates.

    This is the exact inverse of `ravel_index` for the same shape and layout.

    Raises
    ------
    OutOfRangeError
        If `flat` is not in ``[0, shape.prod())``.
    """
    shape = as_shape(shape)
    flat = _as_int(flat, "index")
    size = shape.prod()
    if flat < 0 or flat >= size:
        raise OutOfRangeError(flat, size)
    return Index(_unravel(flat, shape, Layout.coerce(layout)))


def _unravel(flat: int, shape: Sequence[int], layout: Layout) -> list[int]:
    """Unchecked unravel; returns a mutable coordinate list."""
    ndim = len(shape)
    coords = [0] * ndim
    axes = range(ndim - 1, -1, -1) if layout is Layout.ROW_MAJOR else range(ndim)
    for axis in axes:
        n = tuple.__getitem__(shape, axis) if isinstance(shape, tuple) else shape[axis]
        if n:
            flat, coords[axis] = divmod(flat, n)
    return coords


def make_strides(
    shape: ShapeLike, layout: LayoutLike = Layout.ROW_MAJOR
) -> tuple[int, ...]:
    """
    Compute the canonical strides (in elements) of dense storage.

    Parameters
    ----------
    shape : ShapeLike
        Extent along each axis.
    layout : LayoutLike, optional
        Storage order. Defaults to row-major.

    Returns
    -------
    tuple[int, ...]
        ``strides[k]`` is the distance between consecutive elements along
        axis ``k``.
    """
    shape = as_shape(shape)
    ndim = shape.ndim
    strides = [0] * ndim
    acc = 1
    if Layout.coerce(layout) is Layout.ROW_MAJOR:
        axes = range(ndim - 1, -1, -1)
    else:
        axes = range(ndim)
    for axis in axes:
        strides[axis] = acc
        acc *= tuple.__getitem__(shape, axis)
    return tuple(strides)


def broadcast_shapes(*shapes: ShapeLike) -> Shape:
    """
    Broadcast any number of shapes into a common shape.

    Two sizes along an axis are compatible if they are equal or one of them
    is 1; the result takes the size that is not 1. Shapes of lower rank are
    aligned to the right and padded with ones on the left.

    The shapes are folded left to right. When a pair is incompatible, the
    error names the two *original* shapes that conflict, never an
    intermediate result.

    Raises
    ------
    ShapeMismatchError
        If the shapes cannot be broadcast together.
    """
    originals = [as_shape(s) for s in shapes]
    if not originals:
        return Shape(())
    ndim = max(s.ndim for s in originals)
    padded = [(1,) * (ndim - s.ndim) + tuple(s) for s in originals]

    result = list(padded[0])
    for j in range(1, len(padded)):
        current = padded[j]
        for axis in range(ndim):
            a, b = result[axis], current[axis]
            if a == b or b == 1:
                continue
            if a == 1:
                result[axis] = b
                continue
            culprit = next(
                i
                for i in range(j)
                if padded[i][axis] not in (1, b)
            )
            raise ShapeMismatchError.for_broadcast(originals[culprit], originals[j])
    return Shape(result)


def shape_cat(*shapes: ShapeLike) -> Shape:
    """Concatenate shapes: the result has rank equal to the sum of ranks."""
    out: list[int] = []
    for s in shapes:
        out.extend(as_shape(s))
    return Shape(out)


def normalize_axis(axis: int, ndim: int) -> int:
    """
    Validate a single axis argument and map negative axes to non-negative.

    Raises
    ------
    AxisError
        If `axis` is not in ``[-ndim, ndim)``.
    """
    axis = _as_int(axis, "axis")
    if axis < -ndim or axis >= ndim:
        raise AxisError(axis, ndim)
    return axis + ndim if axis < 0 else axis


def normalize_axes(
    axes: Optional[Union[int, Iterable[int]]], ndim: int
) -> tuple[int, ...]:
    """
    Validate an axis or collection of axes.

    ``None`` selects every axis.

    Returns
    -------
    tuple[int, ...]
        The normalized axes in ascending order.

    Raises
    ------
    AxisError
        If an axis is out of range or repeated.
    """
    if axes is None:
        return tuple(range(ndim))
    if _is_integral(axes):
        return (normalize_axis(axes, ndim),)
    seen: list[int] = []
    for axis in axes:
        normalized = normalize_axis(axis, ndim)
        if normalized in seen:
            raise AxisError(axis, ndim, duplicate=True)
        seen.append(normalized)
    return tuple(sorted(seen))


def index_sequence(
    shape: ShapeLike, layout: LayoutLike = Layout.ROW_MAJOR
) -> Iterator[tuple[int, ...]]:
    """
    Yield every coordinate tuple of `shape` in the given traversal order.

    Row-major order is the ascending lexicographic order of the coordinates.
    """
    shape = as_shape(shape)
    if Layout.coerce(layout) is Layout.ROW_MAJOR:
        yield from itertools.product(*(range(n) for n in shape))
        return
    for rev in itertools.product(*(range(n) for n in reversed(shape))):
        yield rev[::-1]
