import unittest

import numpy as np

from lazynd.domain._errors import AxisError, OutOfRangeError, ShapeMismatchError
from lazynd.domain._shape import Index, Shape
from lazynd.infrastructure.routines import (
    argsort,
    broadcast_to,
    concatenate,
    expand_dims,
    put,
    putmask,
    squeeze,
    stack,
    take,
    take_along_axis,
)
from lazynd.infrastructure.tensor import Tensor, TensorView


class TestViewManipulation(unittest.TestCase):
    def setUp(self):
        self.arr = np.arange(6, dtype=np.int64).reshape(2, 3)
        self.t = Tensor.from_numpy(self.arr)

    def test_functions_match_methods(self):
        b = broadcast_to(self.t, (4, 2, 3))
        self.assertIsInstance(b, TensorView)
        np.testing.assert_array_equal(b.to_numpy(), np.broadcast_to(self.arr, (4, 2, 3)))
        self.assertEqual(expand_dims(self.t, 1).shape, Shape(2, 1, 3))
        self.assertEqual(squeeze(expand_dims(self.t, (0, 2))).shape, Shape(2, 3))

    def test_broadcast_row(self):
        row = Tensor.from_values([1, 2, 3])
        self.assertEqual(broadcast_to(row, (2, 3)).tolist(), [[1, 2, 3], [1, 2, 3]])

    def test_lazy_operand_is_rejected(self):
        with self.assertRaises(TypeError):
            broadcast_to(self.t + 1, (2, 2, 3))
        with self.assertRaises(TypeError):
            squeeze(self.t * 2)

    def test_expand_dims_view_writes_through(self):
        v = expand_dims(self.t, 0)
        v[0, 1, 2] = 50
        self.assertEqual(int(self.t(1, 2)), 50)

    def test_squeeze_errors(self):
        with self.assertRaises(ValueError):
            squeeze(self.t, 0)
        with self.assertRaises(AxisError):
            squeeze(self.t, 2)


class TestJoining(unittest.TestCase):
    def setUp(self):
        self.rng = np.random.default_rng(5)
        self.a = self.rng.integers(0, 10, size=(2, 3))
        self.b = self.rng.integers(0, 10, size=(4, 3))
        self.c = self.rng.integers(0, 10, size=(2, 5))

    def test_concatenate_matches_numpy(self):
        got = concatenate([Tensor.from_numpy(self.a), Tensor.from_numpy(self.b)])
        self.assertIsInstance(got, Tensor)
        np.testing.assert_array_equal(got.to_numpy(), np.concatenate([self.a, self.b]))
        got = concatenate([Tensor.from_numpy(self.a), self.c], axis=-1)
        np.testing.assert_array_equal(
            got.to_numpy(), np.concatenate([self.a, self.c], axis=1)
        )

    def test_concatenate_promotes_dtype(self):
        got = concatenate([Tensor.from_values([1, 2]), Tensor.from_values([0.5])])
        self.assertEqual(got.dtype, np.float64)
        self.assertEqual(got.tolist(), [1.0, 2.0, 0.5])

    def test_concatenate_evaluates_lazy_operands(self):
        t = Tensor.from_numpy(self.a)
        got = concatenate([t + 1, t.T.T, t[:, ::-1]], axis=1)
        expected = np.concatenate([self.a + 1, self.a, self.a[:, ::-1]], axis=1)
        np.testing.assert_array_equal(got.to_numpy(), expected)

    def test_concatenate_errors(self):
        with self.assertRaises(ValueError):
            concatenate([])
        with self.assertRaises(ShapeMismatchError):
            concatenate([self.a, self.b], axis=1)
        with self.assertRaises(ShapeMismatchError):
            concatenate([self.a, self.a.reshape(-1)])
        with self.assertRaises(AxisError):
            concatenate([self.a, self.a], axis=2)

    def test_stack(self):
        x, y = Tensor.from_values([1, 2]), Tensor.from_values([3, 4])
        self.assertEqual(stack([x, y]).tolist(), [[1, 2], [3, 4]])
        self.assertEqual(stack([x, y], axis=1).tolist(), [[1, 3], [2, 4]])
        for axis in (0, 1, 2, -1):
            with self.subTest(axis=axis):
                got = stack([self.a, self.a * 2], axis=axis)
                np.testing.assert_array_equal(
                    got.to_numpy(), np.stack([self.a, self.a * 2], axis=axis)
                )

    def test_stack_errors(self):
        with self.assertRaises(ValueError):
            stack([])
        with self.assertRaises(ShapeMismatchError):
            stack([self.a, self.b])
        with self.assertRaises(AxisError):
            stack([self.a, self.a], axis=3)


class TestTakePut(unittest.TestCase):
    def setUp(self):
        self.arr = np.arange(12, dtype=np.int64).reshape(3, 4)
        self.t = Tensor.from_numpy(self.arr)

    def test_take_flat_keys(self):
        got = take(self.t, [Index(2, 1), Index(0, 3)])
        self.assertIsInstance(got, Tensor)
        self.assertEqual(got.tolist(), [9, 3])
        got = take(self.t, self.t % 5 == 0)
        self.assertEqual(got.tolist(), [0, 5, 10])
        v = Tensor.from_values([10, 20, 30])
        self.assertEqual(take(v, [2, 0, 2]).tolist(), [30, 10, 30])
        self.assertEqual(take(v, -1), 30)

    def test_take_is_a_copy(self):
        got = take(self.t, [Index(0, 0)])
        got[0] = -1
        self.assertEqual(int(self.t(0, 0)), 0)

    def test_take_along_an_axis_matches_numpy(self):
        for axis, indices in ((0, [2, 0]), (1, [3, -1, 0]), (-1, [1])):
            with self.subTest(axis=axis, indices=indices):
                np.testing.assert_array_equal(
                    take(self.t, indices, axis).to_numpy(),
                    np.take(self.arr, indices, axis=axis),
                )
        np.testing.assert_array_equal(take(self.t, 1, 1).to_numpy(), self.arr[:, 1])

    def test_take_out_of_range(self):
        with self.assertRaises(OutOfRangeError):
            take(self.t, [0, 4], axis=1)
        with self.assertRaises(OutOfRangeError):
            take(self.t, [Index(3, 0)])
        with self.assertRaises(AxisError):
            take(self.t, [0], axis=2)

    def test_take_along_axis_with_argsort(self):
        rng = np.random.default_rng(3)
        arr = rng.integers(0, 20, size=(3, 5))
        t = Tensor.from_numpy(arr)
        for axis in (0, 1):
            with self.subTest(axis=axis):
                got = take_along_axis(t, argsort(t, axis), axis)
                np.testing.assert_array_equal(got.to_numpy(), np.sort(arr, axis=axis))

    def test_take_along_axis_errors(self):
        with self.assertRaises(ShapeMismatchError):
            take_along_axis(self.t, Tensor((2, 4), np.int64), 1)
        with self.assertRaises(OutOfRangeError):
            take_along_axis(self.t, Tensor.from_values([[0], [4], [1]]), 1)
        with self.assertRaises(TypeError):
            take_along_axis(self.t, 0, 1)

    def test_put_writes_through(self):
        put(self.t, [Index(0, 1), Index(2, 2)], Tensor.from_values([-1, -2]))
        expected = self.arr.copy()
        expected[0, 1], expected[2, 2] = -1, -2
        np.testing.assert_array_equal(self.t.to_numpy(), expected)

    def test_put_repeated_position_keeps_last_value(self):
        v = Tensor.from_values([0, 0, 0, 0])
        put(v, [1, 3, 1], Tensor.from_values([5, 6, 7]))
        self.assertEqual(v.tolist(), [0, 7, 0, 6])

    def test_put_into_view(self):
        view = self.t[:, 1:]
        put(view, view > 8, 0)
        expected = self.arr.copy()
        expected[:, 1:][expected[:, 1:] > 8] = 0
        np.testing.assert_array_equal(self.t.to_numpy(), expected)

    def test_put_requires_storage(self):
        with self.assertRaises(TypeError):
            put(self.t + 1, [Index(0, 0)], 1)

    def test_putmask(self):
        putmask(self.t, self.t % 2 == 0, Tensor.from_values([100, 200, 300, 400]))
        expected = np.where(self.arr % 2 == 0, [100, 200, 300, 400], self.arr)
        np.testing.assert_array_equal(self.t.to_numpy(), expected)

    def test_putmask_scalar(self):
        putmask(self.t, self.arr > 6, -1)
        expected = self.arr.copy()
        expected[expected > 6] = -1
        np.testing.assert_array_equal(self.t.to_numpy(), expected)

    def test_putmask_errors_leave_destination_untouched(self):
        with self.assertRaises(ShapeMismatchError):
            putmask(self.t, Tensor((4, 3), np.bool_), 0)
        with self.assertRaises(ShapeMismatchError):
            putmask(self.t, self.t > 2, Tensor.from_values([1, 2, 3]))
        np.testing.assert_array_equal(self.t.to_numpy(), self.arr)


if __name__ == "__main__":
    unittest.main()
