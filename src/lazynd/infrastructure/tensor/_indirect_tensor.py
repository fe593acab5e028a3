"""
Gather-by-index tensor.

An `IndirectTensor` stores one buffer position per element: element ``i``
(in the tensor's own layout order) lives at ``buffer[indptr[i]]``. It is
what boolean-mask and index-array selection return, and it is writable:

    t[t > 0] = 0          # writes through an IndirectTensor

When two entries of `indptr` designate the same buffer position, a bulk
write stores to that position more than once and the last write wins.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from ...domain._errors import OutOfRangeError, ShapeMismatchError
from ...domain._layout import Layout, LayoutLike
from ...domain._shape import Shape, as_shape, make_strides
from ._storage import StorageExpression


class IndirectTensor(StorageExpression):
    """
    Tensor whose elements are addressed through an index table.

    Parameters
    ----------
    buffer : np.ndarray
        Flat 1-D storage. It is not copied.
    shape : ShapeLike
        Shape of the indirect tensor.
    indptr : array_like of int
        Buffer position of each element, in `layout` order. Must have exactly
        ``shape.prod()`` entries.
    layout : LayoutLike, optional
        Order in which `indptr` lists the elements. Defaults to row-major.
    base : Tensor, optional
        The dense tensor that allocated `buffer`.
    readonly : bool, optional
        Reject writes through this expression. Defaults to False.

    Raises
    ------
    ShapeMismatchError
        If the number of positions differs from the number of elements.
    OutOfRangeError
        If a position falls outside `buffer`.
    """

    def __init__(
        self,
        buffer: np.ndarray,
        shape: Any,
        indptr: Any,
        layout: LayoutLike = Layout.ROW_MAJOR,
        *,
        base: Any = None,
        readonly: bool = False,
    ) -> None:
        if not isinstance(buffer, np.ndarray) or buffer.ndim != 1:
            raise TypeError("IndirectTensor requires a flat 1-D numpy buffer")
        self._buffer = buffer
        self._dtype = buffer.dtype
        self._shape = as_shape(shape)
        self._layout = Layout.coerce(layout)
        positions = np.asarray(indptr, dtype=np.intp).reshape(-1)
        if positions.shape[0] != self._shape.prod():
            raise ShapeMismatchError(
                f"index table has {positions.shape[0]} entries, "
                f"shape {tuple(self._shape)} needs {self._shape.prod()}",
                (positions.shape, self._shape),
            )
        if positions.size:
            bound = buffer.shape[0]
            lo, hi = int(positions.min()), int(positions.max())
            if lo < 0:
                raise OutOfRangeError(lo, bound, what="buffer position")
            if hi >= bound:
                raise OutOfRangeError(hi, bound, what="buffer position")
        self._indptr = positions
        self._flat_strides = make_strides(self._shape, self._layout)
        self._base = base
        self._readonly = bool(readonly)

    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def indptr(self) -> np.ndarray:
        """Buffer position of every element, in layout order (read-only copy)."""
        return self._indptr.copy()

    @property
    def base(self) -> Any:
        return self._base

    def _owner(self) -> Any:
        return self._base

    def _buffer_offset(self, coords: tuple[int, ...]) -> int:
        flat = 0
        for c, s in zip(coords, self._flat_strides):
            flat += c * s
        return int(self._indptr[flat])
