"""
Iterator control-path manager for layout-specific dispatch.

Specializes the generic `create_path_builder` utility with the state
attribute ``"layout"``: single-step moves on `TensorIterator` dispatch to the
implementation registered for ``self.layout``.

Typical usage
-------------
    @iterator_control_path_manager(
        TensorIterator, TensorIterator._step_forward, Layout.ROW_MAJOR
    )
    def step_forward_row_major(self): ...
"""

from ...domain.utils._control_path import create_path_builder

# Control-path manager that dispatches iterator methods based on `self.layout`
iterator_control_path_manager = create_path_builder("layout")
