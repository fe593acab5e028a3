"""
Elementwise unary operations for expressions.

Public API
----------
- ``TensorMixinUnary``
"""

from ._base import TensorMixinUnary

__all__ = [
    TensorMixinUnary.__name__,
]
