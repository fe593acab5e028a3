"""
Owning dense tensor (NumPy backend).

`Tensor` owns a flat 1-D NumPy buffer holding exactly ``shape.prod()``
elements in its storage `layout`. It is the only expression kind that
allocates, and the usual target of materialization:

    t = (a + b * 2).copy()

Design notes
------------
- The buffer is always contiguous with canonical strides; slicing, transposing
  and the other memory operations return `TensorView` objects sharing it.
- Copying allocates an independent buffer. Moving transfers the buffer and
  leaves the source empty (all axes of size 0, ``data is None``).
- `assign` of an expression with a different shape reallocates, like a
  container assignment. Element-wise writes through ``t[...] = x`` instead
  broadcast `x` into the existing shape.
"""

from __future__ import annotations

import copy as _copy
import itertools
import logging
from typing import Any, Iterable, Optional

import numpy as np

from ...domain._errors import ShapeMismatchError
from ...domain._layout import Layout, LayoutLike
from ...domain._shape import Shape, ShapeLike, as_shape, make_strides
from ._base import BaseExpression, values_to_buffer
from ._storage import StridedExpression

logger = logging.getLogger(__name__)


class Tensor(StridedExpression):
    """
    Dense, owning, n-dimensional tensor.

    Parameters
    ----------
    shape : ShapeLike, optional
        Extent along each axis. Defaults to rank 0 (a single element).
    dtype : np.dtype-like, optional
        Element type. Defaults to ``np.float64``.
    layout : LayoutLike, optional
        Storage order. Defaults to row-major.
    fill_value : Any, optional
        Initial value of every element. Defaults to zero.

    Examples
    --------
    >>> t = Tensor((2, 3), dtype=np.int64)
    >>> t[1, 2] = 7
    >>> t.tolist()
    [[0, 0, 0], [0, 0, 7]]
    """

    def __init__(
        self,
        shape: ShapeLike = (),
        dtype: Any = np.float64,
        *,
        layout: LayoutLike = Layout.ROW_MAJOR,
        fill_value: Any = None,
    ) -> None:
        self._shape = as_shape(shape)
        self._layout = Layout.coerce(layout)
        self._dtype = np.dtype(dtype)
        self._offset = 0
        self._strides = make_strides(self._shape, self._layout)
        self.__initialize_data(fill_value)

    def __initialize_data(self, fill_value: Any) -> None:
        """
        Allocate the buffer for the current shape and dtype.

        The buffer is zero-initialized, then filled with `fill_value` if one
        is given.
        """
        self._buffer = np.zeros(self._shape.prod(), dtype=self._dtype)
        if fill_value is not None:
            self._buffer.fill(fill_value)

    @classmethod
    def _wrap(cls, buffer: np.ndarray, shape: ShapeLike, layout: LayoutLike) -> "Tensor":
        """Adopt a flat buffer without copying it."""
        obj = cls.__new__(cls)
        obj._shape = as_shape(shape)
        obj._layout = Layout.coerce(layout)
        obj._dtype = buffer.dtype
        obj._offset = 0
        obj._strides = make_strides(obj._shape, obj._layout)
        obj._buffer = buffer
        return obj

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_numpy(
        cls,
        array: Any,
        *,
        dtype: Any = None,
        layout: LayoutLike = Layout.ROW_MAJOR,
    ) -> "Tensor":
        """
        Create a tensor holding a copy of `array`.

        Parameters
        ----------
        array : array_like
            Source data; its shape becomes the tensor's shape.
        dtype : np.dtype-like, optional
            Element type. Defaults to the array's dtype.
        layout : LayoutLike, optional
            Storage order of the new tensor.
        """
        layout = Layout.coerce(layout)
        arr = np.asarray(array, dtype=dtype)
        buffer = np.ravel(arr, order=layout.value).copy()
        return cls._wrap(buffer, arr.shape, layout)

    @classmethod
    def from_values(
        cls,
        values: Any,
        dtype: Any = None,
        *,
        layout: LayoutLike = Layout.ROW_MAJOR,
    ) -> "Tensor":
        """
        Create a tensor from (nested) Python sequences.

        >>> Tensor.from_values([[1, 2], [3, 4]]).shape
        Shape(2, 2)
        """
        return cls.from_numpy(np.array(values, dtype=dtype), layout=layout)

    @classmethod
    def from_iterable(
        cls,
        iterable: Iterable[Any],
        shape: ShapeLike,
        dtype: Any = None,
        *,
        layout: LayoutLike = Layout.ROW_MAJOR,
    ) -> "Tensor":
        """
        Create a tensor of `shape` from the first ``shape.prod()`` items of
        `iterable`, taken in storage order.

        Raises
        ------
        ValueError
            If `iterable` yields fewer items than the tensor has elements.
        """
        shape = as_shape(shape)
        size = shape.prod()
        values = list(itertools.islice(iterable, size))
        if len(values) < size:
            raise ValueError(
                f"iterable yielded {len(values)} elements, expected {size} "
                f"for shape {tuple(shape)}"
            )
        return cls._wrap(values_to_buffer(values, dtype), shape, layout)

    @classmethod
    def from_expression(
        cls,
        expr: Any,
        dtype: Any = None,
        *,
        layout: Optional[LayoutLike] = None,
    ) -> "Tensor":
        """
        Evaluate `expr` into a new tensor.

        Every element of `expr` is read exactly once, in the storage order of
        the result.

        Parameters
        ----------
        expr : BaseExpression | np.ndarray
            Expression to evaluate.
        dtype : np.dtype-like, optional
            Element type. Defaults to ``expr.dtype`` when known, otherwise it
            is inferred from the values.
        layout : LayoutLike, optional
            Storage order. Defaults to ``expr.layout``.
        """
        if isinstance(expr, np.ndarray):
            return cls.from_numpy(expr, dtype=dtype, layout=layout or Layout.ROW_MAJOR)
        if not isinstance(expr, BaseExpression):
            raise TypeError(
                f"expected an expression or ndarray, got {type(expr).__name__}"
            )
        layout = expr.layout if layout is None else Layout.coerce(layout)
        if dtype is None:
            dtype = expr.dtype
        logger.debug(
            "Materializing %s of shape %s (%s)",
            type(expr).__name__,
            tuple(expr.shape),
            layout.name,
        )
        values = list(expr.values(layout))
        return cls._wrap(values_to_buffer(values, dtype), expr.shape, layout)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    def _owner(self) -> "Tensor":
        return self

    def is_contiguous(self) -> bool:
        return True

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def copy(self, layout: Optional[LayoutLike] = None) -> "Tensor":
        """Return an independent tensor with the same elements."""
        layout = self._layout if layout is None else Layout.coerce(layout)
        if layout is self._layout and self._buffer is not None:
            return Tensor._wrap(self._buffer.copy(), self._shape, layout)
        return Tensor.from_expression(self, layout=layout)

    def __copy__(self) -> "Tensor":
        return self.copy()

    def __deepcopy__(self, memo: dict) -> "Tensor":
        if self._dtype == np.dtype(object) and self._buffer is not None:
            buffer = _copy.deepcopy(self._buffer, memo)
            return Tensor._wrap(buffer, self._shape, self._layout)
        return self.copy()

    def move(self) -> "Tensor":
        """
        Transfer the buffer to a new tensor and leave this one empty.

        After the move this tensor has every axis of size 0 (same rank) and
        ``data is None``; it can be reused through `resize` or `assign`.
        """
        moved = Tensor._wrap(self._buffer, self._shape, self._layout)
        if self._buffer is None:
            moved._dtype = self._dtype
        self._shape = Shape((0,) * self._shape.ndim)
        self._strides = make_strides(self._shape, self._layout)
        self._buffer = None
        return moved

    def resize(self, shape: ShapeLike) -> "Tensor":
        """
        Change the shape, reallocating if it differs.

        The contents after a reallocation are zero. Views created earlier
        keep referring to the previous buffer.
        """
        shape = as_shape(shape)
        if shape == self._shape and self._buffer is not None:
            return self
        logger.debug("Resizing tensor from %s to %s", tuple(self._shape), tuple(shape))
        self._shape = shape
        self._strides = make_strides(shape, self._layout)
        self.__initialize_data(None)
        return self

    def assign(self, value: Any) -> "Tensor":
        """
        Replace the contents with `value`.

        Parameters
        ----------
        value : Any
            A scalar (written to every element), a NumPy array or an
            expression. An expression or array whose shape differs from this
            tensor's shape replaces the shape, and the buffer is reallocated;
            otherwise the existing buffer is overwritten.

        Notes
        -----
        `value` is fully evaluated before the buffer is touched, so it may
        refer to this tensor.
        """
        if isinstance(value, np.ndarray):
            value = Tensor.from_numpy(value)
        if isinstance(value, BaseExpression) and value.shape != self._shape:
            values = list(value.values(self._layout))
            shape = value.shape
            self._buffer = values_to_buffer(values, self._dtype)
            self._shape = shape
            self._strides = make_strides(shape, self._layout)
            return self
        if self._buffer is None:
            self.__initialize_data(None)
        return super().assign(value)

    def fill(self, value: Any) -> "Tensor":
        if self._buffer is not None:
            self._buffer.fill(value)
        return self

    def _write_all(self, order: list, values: list) -> None:
        # `order` is the storage order of a dense buffer.
        if self._dtype == np.dtype(object):
            for i, v in enumerate(values):
                self._buffer[i] = v
            return
        self._buffer[:] = values_to_buffer(values, self._dtype)

    def copy_from_numpy(self, array: Any) -> "Tensor":
        """
        Overwrite the contents with the elements of `array`.

        Raises
        ------
        ShapeMismatchError
            If ``array.shape`` differs from this tensor's shape.
        """
        arr = np.asarray(array)
        if arr.shape != tuple(self._shape):
            raise ShapeMismatchError(
                f"cannot copy array of shape {arr.shape} into tensor of shape "
                f"{tuple(self._shape)}",
                (arr.shape, self._shape),
            )
        self._buffer[:] = np.ravel(arr, order=self._layout.value)
        return self

    def to_numpy(self, dtype: Any = None) -> np.ndarray:
        """Return a copy of the elements as a NumPy array of `shape`."""
        if self._buffer is None:
            return np.empty(tuple(self._shape), dtype=dtype or self._dtype)
        arr = self._buffer.reshape(tuple(self._shape), order=self._layout.value).copy()
        if dtype is not None:
            arr = arr.astype(dtype)
        return arr
