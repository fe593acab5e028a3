"""
Functional engine: elementwise application, outer products, reductions and
scans over expressions.
"""

from ._apply import apply, apply2, as_expression, evaluate_into, outer, vectorize
from ._reduce import accumulate, dropdims, keepdims, reduce

__all__ = [
    apply.__name__,
    apply2.__name__,
    outer.__name__,
    vectorize.__name__,
    reduce.__name__,
    accumulate.__name__,
    as_expression.__name__,
    evaluate_into.__name__,
    "keepdims",
    "dropdims",
]
