"""
Non-owning strided view over a flat buffer.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

import numpy as np

from ...domain._errors import OutOfRangeError
from ...domain._layout import Layout, LayoutLike
from ...domain._shape import Shape, as_shape, make_strides
from ._storage import StridedExpression


class TensorView(StridedExpression):
    """
    A view of ``buffer`` addressed as ``offset + sum(coords[k] * strides[k])``.

    Writes through the view modify the underlying buffer and are visible to
    every other tensor or view sharing it.

    Parameters
    ----------
    buffer : np.ndarray
        Flat 1-D storage. It is not copied.
    shape : ShapeLike
        Shape of the view.
    offset : int, optional
        Buffer position of the element at all-zero coordinates.
    strides : Sequence[int], optional
        Per-axis distance between consecutive elements, in elements. May be
        zero or negative. Defaults to the canonical strides of `shape` under
        `layout`.
    layout : LayoutLike, optional
        Default traversal order of the view.
    base : Tensor, optional
        The dense tensor that allocated `buffer`, kept for introspection.
    readonly : bool, optional
        Reject writes through this expression. Defaults to False.

    Raises
    ------
    TypeError
        If `buffer` is not a 1-D NumPy array.
    ValueError
        If the number of strides differs from the rank of `shape`.
    OutOfRangeError
        If some element of the view would fall outside `buffer`.

    Examples
    --------
    >>> buf = np.arange(6)
    >>> v = TensorView(buf, (2, 3))
    >>> int(v(1, 2))
    5
    """

    def __init__(
        self,
        buffer: np.ndarray,
        shape: Any,
        offset: int = 0,
        strides: Optional[Sequence[int]] = None,
        layout: LayoutLike = Layout.ROW_MAJOR,
        *,
        base: Any = None,
        readonly: bool = False,
    ) -> None:
        if not isinstance(buffer, np.ndarray) or buffer.ndim != 1:
            raise TypeError("TensorView requires a flat 1-D numpy buffer")
        self._buffer = buffer
        self._dtype = buffer.dtype
        self._shape = as_shape(shape)
        self._layout = Layout.coerce(layout)
        self._offset = int(offset)
        if strides is None:
            strides = make_strides(self._shape, self._layout)
        self._strides = tuple(int(s) for s in strides)
        if len(self._strides) != self._shape.ndim:
            raise ValueError(
                f"got {len(self._strides)} strides for shape {tuple(self._shape)}"
            )
        self._base = base
        self._readonly = bool(readonly)
        self._check_extent()

    def _check_extent(self) -> None:
        if self._shape.prod() == 0:
            return
        lo = hi = self._offset
        for n, s in zip(self._shape, self._strides):
            span = (n - 1) * s
            if span < 0:
                lo += span
            else:
                hi += span
        bound = self._buffer.shape[0]
        if lo < 0:
            raise OutOfRangeError(lo, bound, what="view position")
        if hi >= bound:
            raise OutOfRangeError(hi, bound, what="view position")

    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def base(self) -> Any:
        """The dense tensor that owns the buffer, or None."""
        return self._base

    def _owner(self) -> Any:
        return self._base
