"""
Comparison and logical operators for expressions.

Comparisons (``==``, ``!=``, ``<``, ``<=``, ``>``, ``>=``) and the logical
operators (``&``, ``|``, ``^``) build lazy nodes of booleans, NumPy style.

Public API
----------
- ``TensorMixinComparison``
"""

from ._base import TensorMixinComparison

__all__ = [
    TensorMixinComparison.__name__,
]
