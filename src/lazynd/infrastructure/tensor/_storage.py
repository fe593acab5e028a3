"""
Shared behavior of storage-backed expressions.

`StorageExpression` is the base of every kind whose elements live in a flat
NumPy buffer (`Tensor`, `TensorView`, `IndirectTensor`). A subclass only
maps coordinates to a buffer position (`_buffer_offset`); reading, writing,
slicing, gathering and bulk assignment are implemented here.

`StridedExpression` further covers the kinds addressed by an
``offset + sum(coords * strides)`` formula (`Tensor`, `TensorView`), which is
what makes zero-copy slicing and the memory mixin possible.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import numpy as np

from ...domain._errors import ShapeMismatchError
from ...domain._layout import Layout
from ...domain._shape import (
    Shape,
    _unravel,
    assert_within_bounds,
    broadcast_shapes,
    index_sequence,
    make_strides,
)
from ._base import BaseExpression, values_to_buffer
from ._indexing import basic_selection, gather_selection, is_basic_key
from ._lazy import broadcast_reader, is_expression
from .mixins.memory import TensorMixinMemory

logger = logging.getLogger(__name__)


class StorageExpression(BaseExpression):
    """
    Expression whose elements are stored in ``self._buffer``.

    Subclasses set ``_buffer`` (a flat 1-D `np.ndarray`) and implement
    `_buffer_offset`.
    """

    _buffer: Optional[np.ndarray]
    _dtype: np.dtype
    _readonly: bool = False

    @property
    def readonly(self) -> bool:
        """True when writes through this expression are rejected."""
        return self._readonly

    def _check_writable(self) -> None:
        if self._readonly:
            raise ValueError(
                f"assignment destination is read-only ({type(self).__name__})"
            )

    @property
    def dtype(self) -> np.dtype:
        if self._buffer is None:
            return self._dtype
        return self._buffer.dtype

    def _buffer_offset(self, coords: tuple[int, ...]) -> int:
        raise NotImplementedError

    def _owner(self) -> Any:
        """The dense tensor the buffer was allocated for, if known."""
        return None

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------
    def _read(self, coords: tuple[int, ...]) -> Any:
        return self._buffer[self._buffer_offset(coords)]

    def _write(self, coords: tuple[int, ...], value: Any) -> None:
        self._check_writable()
        self._buffer[self._buffer_offset(coords)] = value

    def __setitem__(self, key: Any, value: Any) -> None:
        coords = self._element_key(key)
        if coords is not None:
            self._write(assert_within_bounds(self.shape, coords), value)
            return
        self._select(key).assign(value)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def _select(self, key: Any) -> Any:
        if is_basic_key(key):
            return self._select_basic(key)
        out_shape, coords = gather_selection(key, self.shape)
        return self._gather(out_shape, coords)

    def _select_basic(self, key: Any) -> Any:
        # Apply the key to the row-major positions of this expression, then
        # gather the positions it selects.
        shape = self.shape
        out_shape, strides, offset = basic_selection(
            key, shape, make_strides(shape), 0
        )
        coords = []
        for out in index_sequence(out_shape):
            pos = offset
            for c, s in zip(out, strides):
                pos += c * s
            coords.append(tuple(_unravel(pos, shape, Layout.ROW_MAJOR)))
        return self._gather(out_shape, coords)

    def _gather(self, out_shape: Shape, coords: list) -> Any:
        from ._indirect_tensor import IndirectTensor

        indptr = np.fromiter(
            (self._buffer_offset(c) for c in coords), dtype=np.intp, count=len(coords)
        )
        return IndirectTensor(
            self._buffer,
            out_shape,
            indptr,
            base=self._owner(),
            readonly=self._readonly,
        )

    # ------------------------------------------------------------------
    # Bulk writes
    # ------------------------------------------------------------------
    def fill(self, value: Any) -> "StorageExpression":
        """Write `value` into every element."""
        for coords in index_sequence(self.shape, self.layout):
            self._write(coords, value)
        return self

    def assign(self, value: Any) -> "StorageExpression":
        """
        Write `value` into every element.

        Parameters
        ----------
        value : Any
            A scalar (written everywhere), a NumPy array, or an expression
            whose shape broadcasts to this expression's shape.

        Raises
        ------
        ShapeMismatchError
            If `value`'s shape does not broadcast to this shape.

        Notes
        -----
        `value` is fully evaluated before the first write, so the source may
        alias the destination (``t[1:] = t[:-1]`` shifts correctly).
        """
        self._store(value)
        return self

    def _store(self, value: Any) -> None:
        if isinstance(value, np.ndarray):
            from ._dense_tensor import Tensor

            value = Tensor.from_numpy(value)
        if not is_expression(value):
            self.fill(value)
            return

        target = self.shape
        shape = tuple(value.shape)
        # Leading size-1 axes beyond the target rank are dropped, as in NumPy.
        extra = len(shape) - len(target)
        if extra > 0 and all(n == 1 for n in shape[:extra]):
            shape = shape[extra:]
        try:
            result = broadcast_shapes(target, shape)
        except ShapeMismatchError:
            result = None
        if result != target:
            raise ShapeMismatchError(
                f"could not broadcast input of shape {tuple(value.shape)} "
                f"into shape {tuple(target)}",
                (value.shape, target),
            )

        logger.debug(
            "Evaluating %s of shape %s into %s",
            type(value).__name__,
            tuple(target),
            type(self).__name__,
        )
        reader = broadcast_reader(value, target)
        order = list(index_sequence(target, self.layout))
        values = [reader(c) for c in order]
        self._write_all(order, values)

    def _write_all(self, order: list, values: list) -> None:
        self._check_writable()
        # Every value is converted to the buffer dtype before the first store.
        converted = values_to_buffer(values, self._buffer.dtype)
        positions = np.fromiter(
            (self._buffer_offset(c) for c in order), dtype=np.intp, count=len(order)
        )
        if (
            converted.dtype == np.dtype(object)
            or np.unique(positions).size != positions.size
        ):
            # Repeated positions keep the last value written.
            for p, v in zip(positions, converted):
                self._buffer[p] = v
            return
        self._buffer[positions] = converted


class StridedExpression(TensorMixinMemory, StorageExpression):
    """
    Storage addressed as ``offset + sum(coords[k] * strides[k])``.

    Strides are in elements and may be zero (broadcast axes) or negative
    (reversed axes).
    """

    _offset: int
    _strides: tuple[int, ...]

    @property
    def data(self) -> Optional[np.ndarray]:
        """The underlying flat buffer (shared, not copied)."""
        return self._buffer

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def strides(self) -> tuple[int, ...]:
        return self._strides

    def _buffer_offset(self, coords: tuple[int, ...]) -> int:
        pos = self._offset
        for c, s in zip(coords, self._strides):
            pos += c * s
        return pos

    def is_contiguous(self) -> bool:
        canonical = make_strides(self.shape, self.layout)
        return all(
            n <= 1 or s == c
            for n, s, c in zip(self.shape, self._strides, canonical)
        )

    def _select_basic(self, key: Any) -> Any:
        shape, strides, offset = basic_selection(
            key, self.shape, self._strides, self._offset
        )
        return self._make_view(shape, offset, strides, self.layout)

    def view(self) -> Any:
        """Return a `TensorView` over the same elements."""
        return self._make_view(self.shape, self._offset, self._strides, self.layout)
