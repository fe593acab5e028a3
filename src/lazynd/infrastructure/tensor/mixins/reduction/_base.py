"""
Reduction mixin exposing the reduction routines as methods.

Each method forwards to the routine of the same name in
``lazynd.infrastructure.routines``; see there for the exact semantics of
`axes`, `keepdims`, `init` and `where`.
"""

from __future__ import annotations

from abc import ABC
from typing import Any, Callable, Optional, Sequence, Union

Axes = Optional[Union[int, Sequence[int]]]


class TensorMixinReduction(ABC):
    """
    Mixin providing reductions (``sum``, ``max``, ``mean`` ...) and scans
    (``cumsum``, ``cumprod``).

    Notes
    -----
    - With ``axes=None`` and ``keepdims=False`` the result is a scalar.
    - Otherwise the result is a dense `Tensor` whose shape is the receiver's
      shape with the reduced axes removed (or set to 1 with
      ``keepdims=True``).
    """

    def reduce(
        self,
        f: Callable[[Any, Any], Any],
        axes: Axes = None,
        **kwargs: Any,
    ) -> Any:
        """Fold `f` over `axes`; see `lazynd.reduce`."""
        from ....functional import reduce

        return reduce(f, self, axes, **kwargs)

    def accumulate(self, f: Callable[[Any, Any], Any], axis: int = 0, **kwargs: Any) -> Any:
        """Inclusive scan of `f` along `axis`; see `lazynd.accumulate`."""
        from ....functional import accumulate

        return accumulate(f, self, axis, **kwargs)

    def sum(self, axes: Axes = None, **kwargs: Any) -> Any:
        from ....routines import sum as _sum

        return _sum(self, axes, **kwargs)

    def prod(self, axes: Axes = None, **kwargs: Any) -> Any:
        from ....routines import prod

        return prod(self, axes, **kwargs)

    def max(self, axes: Axes = None, **kwargs: Any) -> Any:
        from ....routines import amax

        return amax(self, axes, **kwargs)

    def min(self, axes: Axes = None, **kwargs: Any) -> Any:
        from ....routines import amin

        return amin(self, axes, **kwargs)

    def mean(self, axes: Axes = None, **kwargs: Any) -> Any:
        from ....routines import mean

        return mean(self, axes, **kwargs)

    def var(self, axes: Axes = None, **kwargs: Any) -> Any:
        from ....routines import var

        return var(self, axes, **kwargs)

    def std(self, axes: Axes = None, **kwargs: Any) -> Any:
        from ....routines import std

        return std(self, axes, **kwargs)

    def all(self, axes: Axes = None, **kwargs: Any) -> Any:
        from ....routines import all as _all

        return _all(self, axes, **kwargs)

    def any(self, axes: Axes = None, **kwargs: Any) -> Any:
        from ....routines import any as _any

        return _any(self, axes, **kwargs)

    def count_nonzero(self, axes: Axes = None, **kwargs: Any) -> Any:
        from ....routines import count_nonzero

        return count_nonzero(self, axes, **kwargs)

    def argmax(self, axis: Optional[int] = None, **kwargs: Any) -> Any:
        from ....routines import argmax

        return argmax(self, axis, **kwargs)

    def argmin(self, axis: Optional[int] = None, **kwargs: Any) -> Any:
        from ....routines import argmin

        return argmin(self, axis, **kwargs)

    def cumsum(self, axis: int = 0, **kwargs: Any) -> Any:
        from ....routines import cumsum

        return cumsum(self, axis, **kwargs)

    def cumprod(self, axis: int = 0, **kwargs: Any) -> Any:
        from ....routines import cumprod

        return cumprod(self, axis, **kwargs)
