import unittest

import numpy as np

from lazynd.domain._errors import OutOfRangeError
from lazynd.domain._layout import Layout
from lazynd.domain._shape import Index
from lazynd.infrastructure.iterators import TensorIterator
from lazynd.infrastructure.tensor import Tensor


class TestTensorIterator(unittest.TestCase):
    def setUp(self):
        self.arr = np.arange(6, dtype=np.int64).reshape(2, 3)
        self.t = Tensor.from_numpy(self.arr)

    def test_row_major_walk_visits_c_order(self):
        it = self.t.begin(Layout.ROW_MAJOR)
        end = self.t.end(Layout.ROW_MAJOR)
        seen = []
        while it != end:
            seen.append(int(it.value))
            it.increment()
        self.assertEqual(seen, self.arr.ravel(order="C").tolist())

    def test_column_major_walk_visits_f_order(self):
        it = self.t.begin(Layout.COLUMN_MAJOR)
        seen = []
        while it != self.t.end(Layout.COLUMN_MAJOR):
            seen.append(int(it.value))
            it += 1
        self.assertEqual(seen, self.arr.ravel(order="F").tolist())

    def test_coords_track_index_in_both_orders(self):
        for layout in (Layout.ROW_MAJOR, Layout.COLUMN_MAJOR):
            it = self.t.begin(layout)
            for flat in range(self.t.size):
                with self.subTest(layout=layout, flat=flat):
                    self.assertEqual(it.index, flat)
                    expected = np.unravel_index(flat, (2, 3), order=layout.value)
                    self.assertEqual(tuple(it.coords), tuple(int(i) for i in expected))
                    self.assertIsInstance(it.coords, Index)
                it.increment()

    def test_decrement_walks_backwards(self):
        it = self.t.end()
        seen = []
        while it != self.t.begin():
            it.decrement()
            seen.append(int(it.value))
        self.assertEqual(seen, [5, 4, 3, 2, 1, 0])

    def test_default_traversal_follows_expression_layout(self):
        f = Tensor.from_numpy(self.arr, layout=Layout.COLUMN_MAJOR)
        self.assertIs(f.begin().layout, Layout.COLUMN_MAJOR)
        self.assertEqual([int(x) for x in f.begin()], [0, 3, 1, 4, 2, 5])

    def test_random_access_jumps(self):
        it = self.t.begin()
        it += 4
        self.assertEqual(tuple(it.coords), (1, 1))
        it -= 3
        self.assertEqual(tuple(it.coords), (0, 1))
        self.assertEqual(int((it + 2).value), 3)
        self.assertEqual(int((2 + it).value), 3)
        self.assertEqual(int((it - 1).value), 0)
        self.assertEqual(int(it[4]), 5)
        self.assertEqual(it.index, 1)

    def test_distance_between_iterators(self):
        self.assertEqual(self.t.end() - self.t.begin(), 6)
        self.assertEqual(self.t.begin() - self.t.end(), -6)

    def test_ordering(self):
        a = self.t.begin()
        b = a + 2
        self.assertTrue(a < b)
        self.assertTrue(a <= b)
        self.assertTrue(b > a)
        self.assertTrue(b >= a)
        self.assertTrue(a == self.t.begin())
        self.assertFalse(a != self.t.begin())

    def test_iterators_of_different_expressions_are_not_comparable(self):
        other = Tensor.from_numpy(self.arr)
        with self.assertRaises(ValueError):
            self.t.begin() == other.begin()
        with self.assertRaises(ValueError):
            self.t.end() - other.begin()

    def test_iterators_with_different_orders_are_not_comparable(self):
        with self.assertRaises(ValueError):
            self.t.begin(Layout.ROW_MAJOR) < self.t.begin(Layout.COLUMN_MAJOR)

    def test_dereference_off_the_end_raises(self):
        with self.assertRaises(OutOfRangeError):
            self.t.end().value
        with self.assertRaises(OutOfRangeError):
            (self.t.begin() - 1).coords

    def test_moving_back_into_range_restores_coords(self):
        it = self.t.end()
        it += 1
        it.decrement()
        it.decrement()
        self.assertEqual(tuple(it.coords), (1, 2))
        before = self.t.begin() - 1
        before.increment()
        self.assertEqual(tuple(before.coords), (0, 0))

    def test_write_through_mutable_iterator(self):
        it = self.t.begin() + 2
        it.value = 42
        self.assertEqual(int(self.t(0, 2)), 42)
        it[1] = 7
        self.assertEqual(int(self.t(1, 0)), 7)

    def test_const_iterator_rejects_writes(self):
        it = self.t.cbegin()
        self.assertTrue(it.readonly)
        with self.assertRaises(TypeError):
            it.value = 1

    def test_lazy_expression_iterator_rejects_writes(self):
        it = (self.t + 1).begin()
        self.assertEqual(int(it.value), 1)
        with self.assertRaises(TypeError):
            it.value = 3

    def test_copy_is_independent(self):
        it = self.t.begin()
        clone = it.copy()
        clone.increment()
        self.assertEqual(it.index, 0)
        self.assertEqual(clone.index, 1)

    def test_python_iteration_protocol(self):
        self.assertEqual([int(x) for x in self.t], [0, 1, 2, 3, 4, 5])
        it = TensorIterator(self.t, 4)
        self.assertEqual([int(x) for x in it], [4, 5])
        with self.assertRaises(StopIteration):
            next(it)

    def test_rank_zero_expression_has_one_position(self):
        t = Tensor((), np.int64, fill_value=9)
        it = t.begin()
        self.assertEqual(tuple(it.coords), ())
        self.assertEqual(int(it.value), 9)
        it.increment()
        self.assertTrue(it == t.end())

    def test_empty_expression_begin_equals_end(self):
        t = Tensor((0, 3))
        self.assertTrue(t.begin() == t.end())
        self.assertEqual(list(t), [])

    def test_iterators_are_unhashable(self):
        with self.assertRaises(TypeError):
            hash(self.t.begin())


if __name__ == "__main__":
    unittest.main()
