"""
Memory layout and traversal order.

`Layout` serves two independent purposes:

- for storage-backed expressions, it determines how canonical strides are
  derived from a shape (which axis is contiguous in memory), and
- for iterators, it determines the order in which coordinates are visited.

An iterator's traversal order does not have to match the storage layout of
the expression it walks (e.g., row-major traversal of a transposed view).
"""

from __future__ import annotations

from enum import Enum
from typing import Union


class Layout(Enum):
    """
    Enumeration of the two supported orders.

    Attributes
    ----------
    ROW_MAJOR : Layout
        Last axis varies fastest (C order).
    COLUMN_MAJOR : Layout
        First axis varies fastest (Fortran order).
    """

    ROW_MAJOR = "C"
    COLUMN_MAJOR = "F"

    @classmethod
    def coerce(cls, value: Union["Layout", str, bool]) -> "Layout":
        """
        Normalize a user-facing layout argument.

        Parameters
        ----------
        value : Layout | str | bool
            A `Layout`, one of ``"C"``, ``"F"``, ``"row_major"``,
            ``"column_major"`` (case-insensitive), or a bool where True means
            row-major.

        Returns
        -------
        Layout
            The corresponding layout.

        Raises
        ------
        ValueError
            If the value does not name a layout.
        """
        if isinstance(value, Layout):
            return value
        if isinstance(value, bool):
            return cls.ROW_MAJOR if value else cls.COLUMN_MAJOR
        if isinstance(value, str):
            key = value.strip().lower()
            if key in ("c", "row_major", "row-major"):
                return cls.ROW_MAJOR
            if key in ("f", "column_major", "column-major", "col_major"):
                return cls.COLUMN_MAJOR
        raise ValueError(
            f"Invalid layout {value!r}. Expected 'C', 'F', 'row_major' or 'column_major'"
        )

    def flipped(self) -> "Layout":
        """Return the opposite layout."""
        if self is Layout.ROW_MAJOR:
            return Layout.COLUMN_MAJOR
        return Layout.ROW_MAJOR

    def is_row_major(self) -> bool:
        return self is Layout.ROW_MAJOR

    def is_column_major(self) -> bool:
        return self is Layout.COLUMN_MAJOR


LayoutLike = Union[Layout, str, bool]
