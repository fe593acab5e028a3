"""
Common behavior of every expression kind.

`BaseExpression` implements the parts of the expression interface that do
not depend on where elements come from: shape queries, bounds-checked
element access, iterator construction, materialization to NumPy and text
rendering. Concrete kinds only provide `shape`, `_read` and (for storage
kinds) `_write`.

Operators (``+``, ``<``, ``abs`` ...) and reductions are inherited from the
mixins and always build lazy nodes; no operator on an expression evaluates
anything by itself.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Optional

import numpy as np

from ...domain._config import PrintOptions
from ...domain._expression import IExpression
from ...domain._layout import Layout, LayoutLike
from ...domain._shape import Index, Shape, assert_within_bounds, index_sequence
from ..iterators import TensorIterator
from .mixins.arithmetic import TensorMixinArithmetic
from .mixins.comparison import TensorMixinComparison
from .mixins.reduction import TensorMixinReduction
from .mixins.unary import TensorMixinUnary

logger = logging.getLogger(__name__)


def values_to_buffer(values: list, dtype: Any = None) -> np.ndarray:
    """
    Pack a list of element values into a flat 1-D NumPy array.

    Elements that NumPy would otherwise interpret as nested sequences (for
    instance `Index` values) are stored in an object array.
    """
    if dtype is not None and np.dtype(dtype) != np.dtype(object):
        return np.asarray(values, dtype=dtype).reshape(len(values))
    if dtype is None:
        try:
            arr = np.asarray(values)
        except ValueError:
            arr = None
        if arr is not None and arr.ndim == 1:
            return arr
    arr = np.empty(len(values), dtype=object)
    for i, v in enumerate(values):
        arr[i] = v
    return arr


class BaseExpression(
    TensorMixinArithmetic,
    TensorMixinComparison,
    TensorMixinUnary,
    TensorMixinReduction,
    IExpression,
):
    """
    Shared implementation of the expression interface.

    Subclasses must provide:

    - `shape` (a `Shape`),
    - `_read(coords)`: unchecked read at normalized coordinates.

    and may override `layout` (defaults to row-major), `dtype` (defaults to
    None, meaning "inferred from the values when materialized") and
    `is_contiguous`.
    """

    _layout: Layout = Layout.ROW_MAJOR

    # Let NumPy defer to our reflected operators (ndarray + expression).
    __array_ufunc__ = None

    # ------------------------------------------------------------------
    # Shape queries
    # ------------------------------------------------------------------
    @property
    def shape(self) -> Shape:
        raise NotImplementedError

    @property
    def ndim(self) -> int:
        return self.shape.ndim

    @property
    def size(self) -> int:
        return self.shape.prod()

    @property
    def layout(self) -> Layout:
        return self._layout

    @property
    def dtype(self) -> Optional[np.dtype]:
        """Element dtype if known without evaluating, otherwise None."""
        return None

    def __len__(self) -> int:
        if self.ndim == 0:
            raise TypeError("len() of a rank-0 expression")
        return self.shape[0]

    def is_contiguous(self) -> bool:
        return False

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------
    def _read(self, coords: tuple[int, ...]) -> Any:
        raise NotImplementedError

    def __call__(self, *indices: int) -> Any:
        """
        Bounds-checked read of a single element.

        Examples
        --------
        >>> t = Tensor.from_values([[1, 2], [3, 4]])
        >>> t(1, 0)
        3
        """
        if len(indices) == 1 and isinstance(indices[0], tuple):
            indices = indices[0]
        return self._read(assert_within_bounds(self.shape, indices))

    def at(self, index: Any) -> Any:
        """Bounds-checked read at an `Index` (or any coordinate sequence)."""
        if isinstance(index, Shape):
            raise TypeError(f"expected an index, got shape {index!r}")
        return self._read(assert_within_bounds(self.shape, tuple(index)))

    def _element_key(self, key: Any) -> Optional[tuple]:
        """Return the coordinates if `key` designates a single element."""
        if isinstance(key, Shape):
            raise TypeError(f"expected an index, got shape {key!r}")
        if isinstance(key, Index):
            return tuple(key)
        if isinstance(key, (int, np.integer)) and not isinstance(key, bool):
            return (key,) if self.ndim == 1 else None
        if (
            isinstance(key, tuple)
            and len(key) == self.ndim
            and all(
                isinstance(k, (int, np.integer)) and not isinstance(k, bool)
                for k in key
            )
        ):
            return key
        return None

    def __getitem__(self, key: Any) -> Any:
        coords = self._element_key(key)
        if coords is not None:
            return self._read(assert_within_bounds(self.shape, coords))
        return self._select(key)

    def _select(self, key: Any) -> Any:
        raise TypeError(
            f"{type(self).__name__} supports element access only; "
            "materialize it with .copy() to slice or gather"
        )

    # ------------------------------------------------------------------
    # Iteration
    # ------------------------------------------------------------------
    def begin(self, layout: Optional[LayoutLike] = None) -> TensorIterator:
        return TensorIterator(self, 0, layout)

    def end(self, layout: Optional[LayoutLike] = None) -> TensorIterator:
        return TensorIterator(self, self.size, layout)

    def cbegin(self, layout: Optional[LayoutLike] = None) -> TensorIterator:
        return TensorIterator(self, 0, layout, readonly=True)

    def cend(self, layout: Optional[LayoutLike] = None) -> TensorIterator:
        return TensorIterator(self, self.size, layout, readonly=True)

    def __iter__(self) -> Iterator[Any]:
        """Iterate over the elements in row-major order."""
        return iter(self.cbegin(Layout.ROW_MAJOR))

    def values(self, layout: Optional[LayoutLike] = None) -> Iterator[Any]:
        """
        Yield every element in the given traversal order.

        Equivalent to walking ``cbegin(layout)`` to ``cend(layout)``, without
        the per-step bookkeeping of a random-access iterator.
        """
        layout = self.layout if layout is None else Layout.coerce(layout)
        read = self._read
        for coords in index_sequence(self.shape, layout):
            yield read(coords)

    def __bool__(self) -> bool:
        if self.size != 1:
            raise ValueError(
                "The truth value of an expression with more than one element "
                "is ambiguous. Use .all() or .any()"
            )
        return bool(next(self.values()))

    # ------------------------------------------------------------------
    # Materialization
    # ------------------------------------------------------------------
    def to_numpy(self, dtype: Any = None) -> np.ndarray:
        """
        Evaluate every element and return a new NumPy array of `shape`.

        The elements are visited once each, in row-major order.
        """
        if dtype is None:
            dtype = self.dtype
        logger.debug(
            "Materializing %s of shape %s to numpy",
            type(self).__name__,
            tuple(self.shape),
        )
        buffer = values_to_buffer(list(self.values(Layout.ROW_MAJOR)), dtype)
        return buffer.reshape(tuple(self.shape))

    def __array__(self, dtype: Any = None, copy: Any = None) -> np.ndarray:
        return self.to_numpy(dtype)

    def tolist(self) -> Any:
        """Return the elements as (nested) Python lists."""
        return self.to_numpy().tolist()

    def item(self) -> Any:
        """Return the single element of a size-1 expression."""
        if self.size != 1:
            raise ValueError("can only convert an expression of size 1 to a scalar")
        return next(self.values())

    def copy(self, layout: Optional[LayoutLike] = None) -> Any:
        """
        Evaluate this expression into a new, independent dense `Tensor`.

        Parameters
        ----------
        layout : LayoutLike, optional
            Storage order of the result. Defaults to this expression's layout.
        """
        from ._dense_tensor import Tensor

        return Tensor.from_expression(self, layout=layout)

    def materialize(self, layout: Optional[LayoutLike] = None) -> Any:
        return self.copy(layout)

    # ------------------------------------------------------------------
    # Text rendering
    # ------------------------------------------------------------------
    def to_string(self, options: Optional[PrintOptions] = None) -> str:
        """Render the elements using `options` (defaults when omitted)."""
        from ._formatting import format_expression

        return format_expression(self, options)

    def __str__(self) -> str:
        from ._formatting import format_expression

        return format_expression(self)

    def __repr__(self) -> str:
        from ._formatting import format_repr

        return format_repr(self)
