"""
Zero-copy reinterpretations of strided storage.

Transposition, reversal, diagonals and reshaping only rewrite the
``(offset, shape, strides)`` triple of a view; no element is copied.

Public API
----------
- ``TensorMixinMemory``
"""

from ._base import TensorMixinMemory

__all__ = [
    TensorMixinMemory.__name__,
]
