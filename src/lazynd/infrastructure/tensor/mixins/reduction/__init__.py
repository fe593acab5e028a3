"""
Reduction and scan methods for expressions.

The methods are thin wrappers over the routines in
``lazynd.infrastructure.routines``, so ``a.sum(axes=0)`` and
``lazynd.sum(a, axes=0)`` are the same operation.

Public API
----------
- ``TensorMixinReduction``
"""

from ._base import TensorMixinReduction

__all__ = [
    TensorMixinReduction.__name__,
]
