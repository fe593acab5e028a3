"""
Layout-specific single-step moves for `TensorIterator`.

Row-major traversal carries from the last axis toward the first;
column-major traversal carries from the first axis toward the last. Moving
past either end leaves the iterator without coordinates until it is moved
back into ``[0, size)``.
"""

from ...domain._layout import Layout
from ._iterator_builder import iterator_control_path_manager
from ._tensor_iterator import TensorIterator as TI


def _carry_forward(self: TI, axes) -> None:
    self._index += 1
    coords = self._coords
    if coords is None:
        self._sync_coords()
        return
    shape = self._shape
    for axis in axes:
        coords[axis] += 1
        if coords[axis] < shape[axis]:
            return
        coords[axis] = 0
    self._coords = None


def _carry_backward(self: TI, axes) -> None:
    self._index -= 1
    coords = self._coords
    if coords is None:
        self._sync_coords()
        return
    shape = self._shape
    for axis in axes:
        if coords[axis] > 0:
            coords[axis] -= 1
            return
        coords[axis] = shape[axis] - 1
    self._coords = None


@iterator_control_path_manager(TI, TI._step_forward, Layout.ROW_MAJOR)
def step_forward_row_major(self: TI) -> None:
    _carry_forward(self, range(len(self._shape) - 1, -1, -1))


@iterator_control_path_manager(TI, TI._step_forward, Layout.COLUMN_MAJOR)
def step_forward_column_major(self: TI) -> None:
    _carry_forward(self, range(len(self._shape)))


@iterator_control_path_manager(TI, TI._step_backward, Layout.ROW_MAJOR)
def step_backward_row_major(self: TI) -> None:
    _carry_backward(self, range(len(self._shape) - 1, -1, -1))


@iterator_control_path_manager(TI, TI._step_backward, Layout.COLUMN_MAJOR)
def step_backward_column_major(self: TI) -> None:
    _carry_backward(self, range(len(self._shape)))


__all__ = []
