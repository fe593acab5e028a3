"""
Arithmetic operators for expressions.

Provides ``+``, ``-``, ``*``, ``/``, ``//``, ``%`` and ``**`` together with
their reflected forms. Every operator returns a lazy binary node that
broadcasts its operands; scalars are used as-is for every element.

Public API
----------
- ``TensorMixinArithmetic``
"""

from ._base import TensorMixinArithmetic

__all__ = [
    TensorMixinArithmetic.__name__,
]
