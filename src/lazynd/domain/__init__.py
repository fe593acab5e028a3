"""
Backend-agnostic contracts of lazynd: shapes, layouts, errors, options and
the expression protocol.
"""

from ._errors import (
    AxisError,
    EmptyReductionError,
    LazyNDError,
    OutOfRangeError,
    ShapeMismatchError,
)
from ._layout import Layout
from ._shape import Index, Shape
from ._config import PrintOptions
from ._expression import IExpression, IStorageExpression

__all__ = [
    AxisError.__name__,
    EmptyReductionError.__name__,
    LazyNDError.__name__,
    OutOfRangeError.__name__,
    ShapeMismatchError.__name__,
    Layout.__name__,
    Index.__name__,
    Shape.__name__,
    PrintOptions.__name__,
    IExpression.__name__,
    IStorageExpression.__name__,
]
