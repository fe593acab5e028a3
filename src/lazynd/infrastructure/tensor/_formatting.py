"""
Text rendering of expressions.

Rendering evaluates the expression (row-major) and delegates the layout of
the text to `numpy.array2string`, configured from a `PrintOptions` value.
"""

from __future__ import annotations

from typing import Any, Optional

import numpy as np

from ...domain._config import DEFAULT_PRINT_OPTIONS, PrintOptions


def _render(expr: Any, options: PrintOptions, prefix: str = "") -> str:
    arr = expr.to_numpy()
    return np.array2string(
        arr,
        precision=options.precision,
        threshold=options.threshold,
        edgeitems=options.edgeitems,
        max_line_width=options.linewidth,
        suppress_small=options.suppress,
        separator=", ",
        prefix=prefix,
    )


def format_expression(expr: Any, options: Optional[PrintOptions] = None) -> str:
    """
    Render the elements of `expr` as nested brackets.

    Parameters
    ----------
    expr : BaseExpression
        Expression to render. It is evaluated once.
    options : PrintOptions, optional
        Rendering options; defaults to `DEFAULT_PRINT_OPTIONS`.

    Returns
    -------
    str
        e.g. ``"[[1, 2], [3, 4]]"`` (wrapped according to `options`).
    """
    return _render(expr, options or DEFAULT_PRINT_OPTIONS)


def format_repr(expr: Any, options: Optional[PrintOptions] = None) -> str:
    """Render ``Kind([...], shape=(...))`` for `repr`."""
    name = type(expr).__name__
    prefix = f"{name}("
    body = _render(expr, options or DEFAULT_PRINT_OPTIONS, prefix=prefix)
    return f"{prefix}{body}, shape={tuple(expr.shape)})"
