import copy
import unittest

import numpy as np

from lazynd.domain._errors import OutOfRangeError, ShapeMismatchError
from lazynd.domain._layout import Layout
from lazynd.domain._shape import Index, Shape
from lazynd.infrastructure.tensor import Tensor, TensorView


class TestTensorConstruction(unittest.TestCase):
    def test_default_is_rank_zero_float(self):
        t = Tensor()
        self.assertEqual(t.shape, Shape(()))
        self.assertEqual(t.size, 1)
        self.assertEqual(t.dtype, np.float64)
        self.assertEqual(t.item(), 0.0)

    def test_shape_dtype_and_fill_value(self):
        t = Tensor((2, 3), np.int32, fill_value=4)
        self.assertEqual(t.shape, Shape(2, 3))
        self.assertEqual(t.ndim, 2)
        self.assertEqual(len(t), 2)
        self.assertEqual(t.dtype, np.int32)
        np.testing.assert_array_equal(t.to_numpy(), np.full((2, 3), 4, dtype=np.int32))

    def test_len_of_rank_zero_raises(self):
        with self.assertRaises(TypeError):
            len(Tensor())

    def test_from_numpy_copies(self):
        arr = np.arange(6.0).reshape(2, 3)
        t = Tensor.from_numpy(arr)
        arr[0, 0] = 100.0
        self.assertEqual(t(0, 0), 0.0)
        np.testing.assert_array_equal(t.to_numpy(), np.arange(6.0).reshape(2, 3))

    def test_from_numpy_column_major_storage(self):
        arr = np.arange(6).reshape(2, 3)
        t = Tensor.from_numpy(arr, layout=Layout.COLUMN_MAJOR)
        self.assertIs(t.layout, Layout.COLUMN_MAJOR)
        self.assertEqual(t.strides, (1, 2))
        np.testing.assert_array_equal(t.data, arr.ravel(order="F"))
        np.testing.assert_array_equal(t.to_numpy(), arr)

    def test_from_values_infers_dtype(self):
        t = Tensor.from_values([[1, 2], [3, 4]])
        self.assertEqual(t.dtype.kind, "i")
        self.assertEqual(t.tolist(), [[1, 2], [3, 4]])
        f = Tensor.from_values([1, 2], dtype=np.float32)
        self.assertEqual(f.dtype, np.float32)

    def test_from_iterable_takes_storage_order(self):
        t = Tensor.from_iterable(iter(range(10)), (2, 3))
        self.assertEqual(t.tolist(), [[0, 1, 2], [3, 4, 5]])
        f = Tensor.from_iterable(range(6), (2, 3), layout="F")
        self.assertEqual(f.tolist(), [[0, 2, 4], [1, 3, 5]])

    def test_from_iterable_too_short_raises(self):
        with self.assertRaises(ValueError):
            Tensor.from_iterable([1, 2], (3,))

    def test_from_expression_evaluates(self):
        a = Tensor.from_values([1, 2, 3])
        t = Tensor.from_expression(a * 10)
        self.assertIsInstance(t, Tensor)
        self.assertEqual(t.tolist(), [10, 20, 30])
        with self.assertRaises(TypeError):
            Tensor.from_expression([1, 2, 3])

    def test_object_elements(self):
        t = Tensor.from_iterable([Index(0, 1), Index(1, 0)], (2,))
        self.assertEqual(t.dtype, np.dtype(object))
        self.assertEqual(t(1), Index(1, 0))


class TestTensorElementAccess(unittest.TestCase):
    def setUp(self):
        self.rng = np.random.default_rng(0)
        self.arr = self.rng.standard_normal((3, 4))
        self.t = Tensor.from_numpy(self.arr)

    def test_call_and_at_match_numpy(self):
        for i in range(3):
            for j in range(4):
                self.assertEqual(self.t(i, j), self.arr[i, j])
                self.assertEqual(self.t.at(Index(i, j)), self.arr[i, j])
                self.assertEqual(self.t[i, j], self.arr[i, j])

    def test_negative_indices(self):
        self.assertEqual(self.t(-1, -1), self.arr[2, 3])

    def test_bounds_checked_access_raises(self):
        with self.assertRaises(OutOfRangeError):
            self.t(3, 0)
        with self.assertRaises(IndexError):
            self.t[0, 4]
        with self.assertRaises(TypeError):
            self.t(1)

    def test_shape_is_not_an_index(self):
        with self.assertRaises(TypeError):
            self.t.at(Shape(1, 1))

    def test_element_assignment(self):
        self.t[1, 2] = 5.0
        self.t[Index(0, 0)] = -1.0
        self.assertEqual(self.t(1, 2), 5.0)
        self.assertEqual(self.t(0, 0), -1.0)

    def test_column_major_element_access(self):
        f = Tensor.from_numpy(self.arr, layout=Layout.COLUMN_MAJOR)
        for i in range(3):
            for j in range(4):
                self.assertEqual(f(i, j), self.arr[i, j])

    def test_bool_of_single_element(self):
        self.assertTrue(bool(Tensor((1,), fill_value=1)))
        with self.assertRaises(ValueError):
            bool(self.t)


class TestTensorLifecycle(unittest.TestCase):
    def test_copy_is_independent(self):
        t = Tensor.from_values([1.0, 2.0])
        c = t.copy()
        c[0] = 9.0
        self.assertEqual(t(0), 1.0)
        self.assertEqual(copy.copy(t).tolist(), [1.0, 2.0])
        self.assertEqual(copy.deepcopy(t).tolist(), [1.0, 2.0])

    def test_copy_can_change_layout(self):
        t = Tensor.from_values([[1, 2], [3, 4]])
        f = t.copy(Layout.COLUMN_MAJOR)
        self.assertIs(f.layout, Layout.COLUMN_MAJOR)
        np.testing.assert_array_equal(f.data, [1, 3, 2, 4])
        self.assertEqual(f.tolist(), t.tolist())

    def test_move_transfers_buffer(self):
        t = Tensor.from_values([[1, 2], [3, 4]])
        buf = t.data
        moved = t.move()
        self.assertIs(moved.data, buf)
        self.assertEqual(moved.tolist(), [[1, 2], [3, 4]])
        self.assertEqual(t.shape, Shape(0, 0))
        self.assertIsNone(t.data)
        self.assertEqual(t.size, 0)

    def test_moved_tensor_can_be_reused(self):
        t = Tensor.from_values([1, 2, 3])
        t.move()
        t.resize((2,))
        self.assertEqual(t.tolist(), [0, 0])
        t.assign(Tensor.from_values([5, 6, 7]))
        self.assertEqual(t.tolist(), [5, 6, 7])

    def test_resize_reallocates_and_views_keep_old_buffer(self):
        t = Tensor.from_values([1.0, 2.0, 3.0])
        v = t[1:]
        t.resize((4,))
        self.assertEqual(t.tolist(), [0.0, 0.0, 0.0, 0.0])
        self.assertEqual(v.tolist(), [2.0, 3.0])

    def test_resize_same_shape_keeps_contents(self):
        t = Tensor.from_values([1.0, 2.0])
        self.assertIs(t.resize((2,)), t)
        self.assertEqual(t.tolist(), [1.0, 2.0])

    def test_assign_same_shape_overwrites_in_place(self):
        t = Tensor.from_values([1, 2, 3])
        buf = t.data
        t.assign(Tensor.from_values([4, 5, 6]))
        self.assertIs(t.data, buf)
        self.assertEqual(t.tolist(), [4, 5, 6])

    def test_assign_different_shape_reallocates(self):
        t = Tensor.from_values([1, 2, 3])
        t.assign(np.ones((2, 2), dtype=np.int64))
        self.assertEqual(t.shape, Shape(2, 2))
        self.assertEqual(t.tolist(), [[1, 1], [1, 1]])

    def test_assign_scalar_fills(self):
        t = Tensor((2, 2))
        t.assign(3.5)
        np.testing.assert_array_equal(t.to_numpy(), np.full((2, 2), 3.5))

    def test_assign_from_self_expression(self):
        t = Tensor.from_values([1, 2, 3])
        t.assign(t * 2)
        self.assertEqual(t.tolist(), [2, 4, 6])

    def test_copy_from_numpy(self):
        t = Tensor((2, 2), layout="F")
        t.copy_from_numpy(np.array([[1.0, 2.0], [3.0, 4.0]]))
        self.assertEqual(t.tolist(), [[1.0, 2.0], [3.0, 4.0]])
        with self.assertRaises(ShapeMismatchError):
            t.copy_from_numpy(np.zeros(3))

    def test_fill(self):
        t = Tensor((3,), np.int64)
        t.fill(7)
        self.assertEqual(t.tolist(), [7, 7, 7])

    def test_is_contiguous_and_view(self):
        t = Tensor((2, 3))
        self.assertTrue(t.is_contiguous())
        v = t.view()
        self.assertIsInstance(v, TensorView)
        self.assertIs(v.base, t)
        v[0, 0] = 1.0
        self.assertEqual(t(0, 0), 1.0)

    def test_array_protocol(self):
        t = Tensor.from_values([[1, 2], [3, 4]])
        np.testing.assert_array_equal(np.asarray(t), [[1, 2], [3, 4]])


if __name__ == "__main__":
    unittest.main()
