"""
Text rendering options.

Formatting is configured through an explicit, immutable `PrintOptions`
value handed to the formatter. There is no process-wide mutable state:
callers that want different output build a different `PrintOptions`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class PrintOptions:
    """
    Options controlling how expressions are rendered as text.

    Attributes
    ----------
    precision : int
        Number of digits of precision for floating point output.
    threshold : int
        Total number of elements above which the output is summarized.
    edgeitems : int
        Number of items kept at the beginning and end of each axis when
        summarizing.
    linewidth : int
        Number of characters per line before wrapping.
    suppress : bool
        If True, print small floating point values as zero instead of using
        scientific notation.
    """

    precision: int = 8
    threshold: int = 1000
    edgeitems: int = 3
    linewidth: int = 75
    suppress: bool = False

    def __post_init__(self) -> None:
        if self.precision < 0:
            raise ValueError(f"precision must be non-negative, got {self.precision}")
        if self.threshold < 0:
            raise ValueError(f"threshold must be non-negative, got {self.threshold}")
        if self.edgeitems < 0:
            raise ValueError(f"edgeitems must be non-negative, got {self.edgeitems}")
        if self.linewidth <= 0:
            raise ValueError(f"linewidth must be positive, got {self.linewidth}")

    def with_changes(self, **changes) -> "PrintOptions":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


DEFAULT_PRINT_OPTIONS = PrintOptions()
