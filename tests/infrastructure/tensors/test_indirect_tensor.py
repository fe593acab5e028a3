import unittest

import numpy as np

from lazynd.domain._errors import OutOfRangeError, ShapeMismatchError
from lazynd.domain._shape import Index, Shape
from lazynd.infrastructure.tensor import IndirectTensor, Tensor


class TestIndirectTensor(unittest.TestCase):
    def setUp(self):
        self.rng = np.random.default_rng(7)
        self.arr = self.rng.integers(-5, 6, size=(3, 4))
        self.t = Tensor.from_numpy(self.arr)

    def test_direct_construction(self):
        buf = np.array([10, 20, 30, 40])
        ind = IndirectTensor(buf, (2, 2), [3, 0, 0, 1])
        self.assertEqual(ind.shape, Shape(2, 2))
        self.assertEqual(ind.tolist(), [[40, 10], [10, 20]])
        np.testing.assert_array_equal(ind.indptr, [3, 0, 0, 1])

    def test_indptr_is_a_copy(self):
        ind = IndirectTensor(np.arange(3), (2,), [0, 2])
        ind.indptr[0] = 1
        self.assertEqual(ind.tolist(), [0, 2])

    def test_entry_count_must_match_shape(self):
        with self.assertRaises(ShapeMismatchError):
            IndirectTensor(np.arange(4), (2, 2), [0, 1, 2])

    def test_positions_must_be_inside_buffer(self):
        with self.assertRaises(OutOfRangeError):
            IndirectTensor(np.arange(4), (2,), [0, 4])
        with self.assertRaises(OutOfRangeError):
            IndirectTensor(np.arange(4), (2,), [-1, 0])

    def test_rejects_non_flat_buffer(self):
        with self.assertRaises(TypeError):
            IndirectTensor(np.zeros((2, 2)), (1,), [0])

    def test_boolean_mask_selection_matches_numpy(self):
        mask = self.arr > 0
        sel = self.t[mask]
        self.assertIsInstance(sel, IndirectTensor)
        np.testing.assert_array_equal(sel.to_numpy(), self.arr[mask])
        self.assertIs(sel.base, self.t)

    def test_lazy_boolean_mask_selection(self):
        sel = self.t[self.t > 0]
        np.testing.assert_array_equal(sel.to_numpy(), self.arr[self.arr > 0])

    def test_masked_assignment_writes_through(self):
        self.t[self.t < 0] = 0
        expected = self.arr.copy()
        expected[expected < 0] = 0
        np.testing.assert_array_equal(self.t.to_numpy(), expected)

    def test_mask_shape_must_match(self):
        with self.assertRaises(ShapeMismatchError):
            self.t[np.ones((3,), dtype=bool)]

    def test_coordinate_list_selection(self):
        sel = self.t[[(0, 1), Index(2, 3), (-1, 0)]]
        self.assertEqual(sel.shape, Shape(3))
        self.assertEqual(
            sel.tolist(), [self.arr[0, 1], self.arr[2, 3], self.arr[2, 0]]
        )
        with self.assertRaises(OutOfRangeError):
            self.t[[(3, 0)]]

    def test_integer_array_selection_on_rank_one(self):
        v = Tensor.from_values([10, 20, 30, 40])
        sel = v[np.array([[3, 0], [1, 1]])]
        self.assertEqual(sel.shape, Shape(2, 2))
        self.assertEqual(sel.tolist(), [[40, 10], [20, 20]])
        self.assertEqual(v[[2, -1]].tolist(), [30, 40])

    def test_integer_array_selection_rejected_on_higher_rank(self):
        with self.assertRaises(TypeError):
            self.t[np.array([0, 1])]

    def test_float_index_rejected(self):
        v = Tensor.from_values([1, 2, 3])
        with self.assertRaises(TypeError):
            v[np.array([0.5])]

    def test_duplicate_positions_last_write_wins(self):
        v = Tensor.from_values([0, 0, 0])
        sel = v[[0, 0, 2]]
        sel.assign(Tensor.from_values([1, 2, 3]))
        self.assertEqual(v.tolist(), [2, 0, 3])

    def test_selection_of_view_refers_to_original_buffer(self):
        view = self.t[::-1, :]
        sel = view[[(0, 0)]]
        sel[0] = 123
        self.assertEqual(int(self.t(2, 0)), 123)

    def test_basic_slice_of_indirect_tensor(self):
        sel = self.t[[(0, 0), (1, 1), (2, 2), (0, 3)]]
        sub = sel[1::2]
        self.assertIsInstance(sub, IndirectTensor)
        self.assertEqual(sub.tolist(), [self.arr[1, 1], self.arr[0, 3]])
        sub[0] = 77
        self.assertEqual(int(self.t(1, 1)), 77)

    def test_empty_selection(self):
        sel = self.t[np.zeros((3, 4), dtype=bool)]
        self.assertEqual(sel.shape, Shape(0))
        self.assertEqual(sel.tolist(), [])


if __name__ == "__main__":
    unittest.main()
