"""
Memory mixin: zero-copy reinterpretation of strided storage.

Every method returns a `TensorView` sharing the receiver's buffer, except
`flatten` (always a copy) and `reshape` of a non-contiguous receiver (which
has to copy first).
"""

from __future__ import annotations

from abc import ABC
from typing import Any, Optional, Sequence, Union

from .....domain._errors import AxisError, ShapeMismatchError
from .....domain._layout import Layout
from .....domain._shape import (
    Shape,
    as_shape,
    make_strides,
    normalize_axes,
    normalize_axis,
)


class TensorMixinMemory(ABC):
    """
    Mixin for expressions with a ``(buffer, offset, shape, strides)``
    representation.

    Notes
    -----
    Views keep a reference to the buffer they were created from. Resizing or
    moving the owning tensor later does not invalidate them; they keep
    observing the old buffer.
    """

    def _make_view(
        self,
        shape: Sequence[int],
        offset: int,
        strides: Sequence[int],
        layout: Layout,
        readonly: Optional[bool] = None,
    ) -> Any:
        from ..._tensor_view import TensorView

        return TensorView(
            self._buffer,
            shape,
            offset,
            strides,
            layout,
            base=self._owner(),
            readonly=self._readonly if readonly is None else readonly,
        )

    def transpose(self, axes: Optional[Sequence[int]] = None) -> Any:
        """
        Permute the axes.

        Parameters
        ----------
        axes : Sequence[int], optional
            A permutation of ``range(ndim)``. Defaults to reversing the axes,
            in which case the view's layout is flipped so that its default
            traversal still follows memory order.

        Raises
        ------
        AxisError
            If an axis is out of range or repeated.
        ValueError
            If `axes` does not name every axis.
        """
        ndim = self.ndim
        shape = self.shape
        if axes is None:
            perm = tuple(range(ndim - 1, -1, -1))
        else:
            perm = []
            for axis in axes:
                k = normalize_axis(axis, ndim)
                if k in perm:
                    raise AxisError(axis, ndim, duplicate=True)
                perm.append(k)
            if len(perm) != ndim:
                raise ValueError(f"axes {tuple(axes)} don't match expression of rank {ndim}")
            perm = tuple(perm)

        layout = self.layout
        if ndim > 1 and perm == tuple(range(ndim - 1, -1, -1)):
            layout = layout.flipped()
        return self._make_view(
            Shape(shape[k] for k in perm),
            self._offset,
            tuple(self._strides[k] for k in perm),
            layout,
        )

    @property
    def T(self) -> Any:
        return self.transpose()

    def reverse(self, axis: int = 0) -> Any:
        """Return a view with the order of elements along `axis` reversed."""
        axis = normalize_axis(axis, self.ndim)
        n = self.shape[axis]
        s = self._strides[axis]
        strides = list(self._strides)
        strides[axis] = -s
        offset = self._offset + (n - 1) * s if n else self._offset
        return self._make_view(self.shape, offset, tuple(strides), self.layout)

    def diagonal(self, offset: int = 0) -> Any:
        """
        Return a 1-D view of the `offset`-th diagonal of a rank-2 expression.

        Positive offsets select diagonals above the main one.
        """
        if self.ndim != 2:
            raise ValueError(f"diagonal requires a rank-2 expression, got rank {self.ndim}")
        rows, cols = self.shape
        s0, s1 = self._strides
        if offset >= 0:
            length = max(0, min(rows, cols - offset))
            start = self._offset + offset * s1
        else:
            length = max(0, min(rows + offset, cols))
            start = self._offset - offset * s0
        if length == 0:
            start = self._offset
        return self._make_view(Shape((length,)), start, (s0 + s1,), Layout.ROW_MAJOR)

    def broadcast_to(self, shape: Any) -> Any:
        """
        Return a read-only view of the receiver repeated to `shape`.

        Size-1 axes are stretched with a zero stride and missing leading axes
        are added the same way, so several elements of the view share one
        buffer position. Nothing is copied.

        Parameters
        ----------
        shape : ShapeLike
            Target shape. The receiver's shape must broadcast to it.

        Returns
        -------
        TensorView
            A view with ``readonly`` set.

        Raises
        ------
        ShapeMismatchError
            If the receiver's shape does not broadcast to `shape`.
        """
        target = as_shape(shape)
        src = self.shape
        lead = target.ndim - src.ndim
        compatible = lead >= 0 and all(
            n == 1 or n == target[lead + k] for k, n in enumerate(src)
        )
        if not compatible:
            raise ShapeMismatchError(
                f"cannot broadcast shape {tuple(src)} to {tuple(target)}",
                (src, target),
            )
        strides = [0] * lead + [
            0 if n == 1 and target[lead + k] != 1 else s
            for k, (n, s) in enumerate(zip(src, self._strides))
        ]
        return self._make_view(
            target, self._offset, tuple(strides), self.layout, readonly=True
        )

    def expand_dims(self, axes: Union[int, Sequence[int]]) -> Any:
        """
        Return a view with size-1 axes inserted at `axes`.

        `axes` are positions in the result, so they are normalized against
        ``ndim + len(axes)``.

        >>> Tensor((2, 3)).expand_dims((0, -1)).shape
        Shape(1, 2, 3, 1)
        """
        if not isinstance(axes, (tuple, list)):
            axes = (axes,)
        ndim = self.ndim + len(axes)
        inserted = normalize_axes(axes, ndim)
        shape, strides = [], []
        rest = iter(zip(self.shape, self._strides))
        for k in range(ndim):
            if k in inserted:
                shape.append(1)
                strides.append(0)
            else:
                n, s = next(rest)
                shape.append(n)
                strides.append(s)
        return self._make_view(Shape(shape), self._offset, tuple(strides), self.layout)

    def squeeze(self, axes: Optional[Union[int, Sequence[int]]] = None) -> Any:
        """
        Return a view with size-1 axes removed.

        Parameters
        ----------
        axes : int | Sequence[int], optional
            The axes to remove. Defaults to every axis of size 1.

        Raises
        ------
        AxisError
            If an axis is out of range or repeated.
        ValueError
            If a selected axis does not have size 1.
        """
        shape = self.shape
        if axes is None:
            removed = tuple(k for k, n in enumerate(shape) if n == 1)
        else:
            removed = normalize_axes(axes, self.ndim)
            for k in removed:
                if shape[k] != 1:
                    raise ValueError(
                        f"cannot squeeze axis {k} of size {shape[k]}; "
                        "only size-1 axes can be removed"
                    )
        kept = [k for k in range(self.ndim) if k not in removed]
        return self._make_view(
            Shape(shape[k] for k in kept),
            self._offset,
            tuple(self._strides[k] for k in kept),
            self.layout,
        )

    def reshape(self, *shape: Any) -> Any:
        """
        Reinterpret the elements, taken in row-major order, with a new shape.

        One entry may be -1, in which case it is inferred. The result is a
        view when the receiver is row-major contiguous, otherwise a view of a
        row-major copy.

        Raises
        ------
        ShapeMismatchError
            If the number of elements differs.
        """
        if len(shape) == 1 and isinstance(shape[0], (tuple, list)):
            shape = tuple(shape[0])
        size = self.size
        dims = list(shape)
        if dims.count(-1) > 1:
            raise ValueError("can only specify one unknown dimension")
        if -1 in dims:
            known = 1
            for d in dims:
                if d != -1:
                    known *= d
            if known == 0 or size % known:
                raise ShapeMismatchError(
                    f"cannot reshape expression of size {size} into shape {tuple(shape)}",
                    (self.shape, tuple(shape)),
                )
            dims[dims.index(-1)] = size // known
        new_shape = Shape(dims)
        if new_shape.prod() != size:
            raise ShapeMismatchError(
                f"cannot reshape expression of size {size} into shape {tuple(new_shape)}",
                (self.shape, new_shape),
            )
        source = self
        if not (self.layout is Layout.ROW_MAJOR and self.is_contiguous()):
            source = self.copy(Layout.ROW_MAJOR)
        return source._make_view(
            new_shape, source._offset, make_strides(new_shape), Layout.ROW_MAJOR
        )

    def flatten(self) -> Any:
        """Return a new rank-1 `Tensor` with the elements in row-major order."""
        from ..._dense_tensor import Tensor

        return Tensor.from_iterable(
            self.values(Layout.ROW_MAJOR), (self.size,), dtype=self.dtype
        )
