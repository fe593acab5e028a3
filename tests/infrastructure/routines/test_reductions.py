import unittest

import numpy as np

from lazynd.domain._errors import EmptyReductionError
from lazynd.domain._shape import Index, Shape
from lazynd.infrastructure import routines
from lazynd.infrastructure.tensor import Tensor


class TestNamedReductions(unittest.TestCase):
    def setUp(self):
        self.rng = np.random.default_rng(21)
        self.arr = self.rng.integers(-3, 4, size=(3, 4, 2))
        self.t = Tensor.from_numpy(self.arr)

    def test_sum_prod_max_min_match_numpy(self):
        cases = [
            (routines.sum, np.sum),
            (routines.prod, np.prod),
            (routines.amax, np.max),
            (routines.amin, np.min),
        ]
        for ours, theirs in cases:
            for axes in (None, 0, (1, 2), -1):
                with self.subTest(op=ours.__name__, axes=axes):
                    got = ours(self.t, axes)
                    expected = theirs(self.arr, axis=axes)
                    np.testing.assert_array_equal(np.asarray(got), expected)

    def test_keepdims(self):
        got = routines.sum(self.t, 1, keepdims=True)
        self.assertEqual(got.shape, Shape(3, 1, 2))
        np.testing.assert_array_equal(got.to_numpy(), self.arr.sum(axis=1, keepdims=True))

    def test_identity_reductions_on_empty(self):
        empty = Tensor((0, 3))
        self.assertEqual(routines.sum(empty), 0)
        self.assertEqual(routines.prod(empty), 1)
        self.assertTrue(routines.all(empty))
        self.assertFalse(routines.any(empty))
        self.assertEqual(routines.count_nonzero(empty), 0)
        self.assertEqual(routines.sum(empty, 0).tolist(), [0.0, 0.0, 0.0])

    def test_max_of_empty_raises(self):
        with self.assertRaises(EmptyReductionError) as ctx:
            routines.amax(Tensor((0,)))
        self.assertEqual(ctx.exception.op_name, "max")
        self.assertEqual(routines.amax(Tensor((0,)), init=-1), -1)

    def test_where(self):
        mask = self.arr > 0
        self.assertEqual(routines.sum(self.t, where=mask), self.arr[mask].sum())
        self.assertEqual(
            routines.amax(self.t, where=self.t < 0), self.arr[self.arr < 0].max()
        )

    def test_all_any_count_nonzero(self):
        t = Tensor.from_values([[1, 0, 2], [3, 4, 5]])
        self.assertFalse(routines.all(t))
        self.assertTrue(routines.any(t))
        self.assertEqual(routines.all(t, 1).tolist(), [False, True])
        self.assertEqual(routines.any(t == 0, 0).tolist(), [False, True, False])
        self.assertEqual(routines.count_nonzero(t), 5)
        self.assertEqual(routines.count_nonzero(t, 0).tolist(), [2, 1, 2])

    def test_mean(self):
        f = Tensor.from_numpy(self.arr.astype(np.float64))
        self.assertAlmostEqual(routines.mean(f), self.arr.mean())
        got = routines.mean(f, (0, 2))
        self.assertEqual(got.dtype, np.float64)
        np.testing.assert_allclose(got.to_numpy(), self.arr.mean(axis=(0, 2)))
        np.testing.assert_allclose(
            routines.mean(self.t, 1, keepdims=True).to_numpy(),
            self.arr.mean(axis=1, keepdims=True),
        )

    def test_mean_with_where_counts_participants(self):
        t = Tensor.from_values([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
        self.assertAlmostEqual(routines.mean(t, where=t > 2.0), 4.5)
        np.testing.assert_allclose(
            routines.mean(t, 1, where=t > 1.0).to_numpy(), [2.5, 5.0]
        )

    def test_mean_of_empty_raises(self):
        with self.assertRaises(EmptyReductionError):
            routines.mean(Tensor((0,)))
        t = Tensor.from_values([[1.0, 2.0], [3.0, 4.0]])
        with self.assertRaises(EmptyReductionError):
            routines.mean(t, 1, where=t > 2.5)

    def test_mean_out(self):
        out = Tensor((4, 2))
        routines.mean(self.t, 0, out=out)
        np.testing.assert_allclose(out.to_numpy(), self.arr.mean(axis=0))
        scalar_out = Tensor(())
        routines.mean(self.t, out=scalar_out)
        self.assertAlmostEqual(scalar_out.item(), self.arr.mean())

    def test_var_std_match_numpy(self):
        for axes in (None, 0, (0, 2), -1):
            for ddof in (0, 1):
                with self.subTest(axes=axes, ddof=ddof):
                    np.testing.assert_allclose(
                        np.asarray(routines.var(self.t, axes, ddof=ddof)),
                        np.var(self.arr, axis=axes, ddof=ddof),
                    )
                    np.testing.assert_allclose(
                        np.asarray(routines.std(self.t, axes, ddof=ddof)),
                        np.std(self.arr, axis=axes, ddof=ddof),
                    )

    def test_var_keepdims_and_out(self):
        got = routines.var(self.t, 1, keepdims=True)
        self.assertEqual(got.shape, Shape(3, 1, 2))
        self.assertEqual(got.dtype, np.float64)
        np.testing.assert_allclose(got.to_numpy(), self.arr.var(axis=1, keepdims=True))
        out = Tensor((3, 4))
        routines.std(self.t, 2, out=out)
        np.testing.assert_allclose(out.to_numpy(), self.arr.std(axis=2))

    def test_var_with_where(self):
        t = Tensor.from_values([[1.0, 2.0, 4.0], [3.0, 5.0, 9.0]])
        self.assertAlmostEqual(routines.var(t, where=t > 1.5), np.var([2.0, 4.0, 3.0, 5.0, 9.0]))
        np.testing.assert_allclose(
            routines.std(t, 1, where=t < 6.0, ddof=1).to_numpy(),
            [np.std([1.0, 2.0, 4.0], ddof=1), np.std([3.0, 5.0], ddof=1)],
        )

    def test_var_without_degrees_of_freedom_raises(self):
        with self.assertRaises(EmptyReductionError):
            routines.var(Tensor.from_values([2.0]), ddof=1)
        with self.assertRaises(EmptyReductionError):
            routines.std(Tensor((2, 3)), 1, ddof=3)
        with self.assertRaises(EmptyReductionError):
            routines.var(Tensor((0,)))

    def test_argmax_argmin_full(self):
        t = Tensor.from_values([[3, 9, 1], [9, 0, 4]])
        idx = routines.argmax(t)
        self.assertIsInstance(idx, Index)
        self.assertEqual(tuple(idx), (0, 1))
        self.assertEqual(tuple(routines.argmin(t)), (1, 1))

    def test_argmax_along_axis_matches_numpy(self):
        for axis in (0, 1, 2, -1):
            with self.subTest(axis=axis):
                got = routines.argmax(self.t, axis)
                self.assertEqual(got.dtype, np.int64)
                np.testing.assert_array_equal(got.to_numpy(), np.argmax(self.arr, axis=axis))
                np.testing.assert_array_equal(
                    routines.argmin(self.t, axis).to_numpy(), np.argmin(self.arr, axis=axis)
                )

    def test_argmax_keepdims(self):
        got = routines.argmax(self.t, 1, keepdims=True)
        self.assertEqual(got.shape, Shape(3, 1, 2))
        np.testing.assert_array_equal(
            got.to_numpy(), np.argmax(self.arr, axis=1, keepdims=True)
        )

    def test_argmax_of_empty_raises(self):
        with self.assertRaises(EmptyReductionError):
            routines.argmax(Tensor((0,)))
        with self.assertRaises(EmptyReductionError):
            routines.argmin(Tensor((2, 0)), 1)

    def test_cumsum_cumprod(self):
        for axis in (0, 1, 2):
            with self.subTest(axis=axis):
                np.testing.assert_array_equal(
                    routines.cumsum(self.t, axis).to_numpy(), np.cumsum(self.arr, axis=axis)
                )
                np.testing.assert_array_equal(
                    routines.cumprod(self.t, axis).to_numpy(), np.cumprod(self.arr, axis=axis)
                )


class TestReductionMethods(unittest.TestCase):
    def setUp(self):
        self.arr = np.array([[4.0, -1.0, 2.0], [0.5, 3.0, -6.0]])
        self.t = Tensor.from_numpy(self.arr)

    def test_methods_forward_to_routines(self):
        self.assertEqual(self.t.sum(), self.arr.sum())
        self.assertEqual(self.t.prod(), self.arr.prod())
        self.assertEqual(self.t.max(), self.arr.max())
        self.assertEqual(self.t.min(), self.arr.min())
        self.assertAlmostEqual(self.t.mean(), self.arr.mean())
        self.assertAlmostEqual(self.t.var(), self.arr.var())
        self.assertAlmostEqual(self.t.std(ddof=1), self.arr.std(ddof=1))
        self.assertTrue(self.t.any())
        self.assertTrue(self.t.all())
        self.assertEqual(self.t.count_nonzero(), 6)
        self.assertEqual(tuple(self.t.argmax()), (0, 0))
        self.assertEqual(tuple(self.t.argmin()), (1, 2))
        np.testing.assert_array_equal(self.t.max(1).to_numpy(), self.arr.max(axis=1))
        np.testing.assert_array_equal(self.t.cumsum(1).to_numpy(), np.cumsum(self.arr, axis=1))
        np.testing.assert_array_equal(self.t.cumprod(0).to_numpy(), np.cumprod(self.arr, axis=0))

    def test_reductions_of_lazy_expressions(self):
        expr = self.t * self.t
        self.assertEqual(expr.sum(), (self.arr ** 2).sum())
        np.testing.assert_array_equal(expr.argmax(0).to_numpy(), np.argmax(self.arr ** 2, axis=0))


if __name__ == "__main__":
    unittest.main()
