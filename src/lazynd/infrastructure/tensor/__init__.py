"""
Expression kinds.

- `Tensor`: owning dense storage.
- `TensorView`: strided, non-owning window onto a buffer.
- `IndirectTensor`: elements gathered through an index table.
- lazy nodes (`LazyUnary`, `LazyBinary`, `LazyNary`, `LazyOuter`,
  `LazyReduction`, `ConstantExpression`, `SequenceExpression`).

All of them derive from `BaseExpression` and share element access,
iteration, operators and materialization.
"""

from ._base import BaseExpression
from ._dense_tensor import Tensor
from ._formatting import format_expression
from ._indirect_tensor import IndirectTensor
from ._lazy import (
    ConstantExpression,
    LazyBinary,
    LazyExpression,
    LazyNary,
    LazyOuter,
    LazyReduction,
    LazyUnary,
    NoValue,
    SequenceExpression,
    broadcast_reader,
    is_expression,
)
from ._storage import StorageExpression, StridedExpression
from ._tensor_view import TensorView

__all__ = [
    BaseExpression.__name__,
    StorageExpression.__name__,
    StridedExpression.__name__,
    Tensor.__name__,
    TensorView.__name__,
    IndirectTensor.__name__,
    LazyExpression.__name__,
    LazyUnary.__name__,
    LazyBinary.__name__,
    LazyNary.__name__,
    LazyOuter.__name__,
    LazyReduction.__name__,
    ConstantExpression.__name__,
    SequenceExpression.__name__,
    "NoValue",
    broadcast_reader.__name__,
    is_expression.__name__,
    format_expression.__name__,
]
