"""
Traversal of expressions.

The layout-specific step implementations are imported for their side effects
(registering control paths on `TensorIterator`); only the iterator class is
part of the public interface.
"""

from ._layout_paths import *
from ._tensor_iterator import TensorIterator

__all__ = [
    TensorIterator.__name__,
]
