import logging
import unittest

import numpy as np

from lazynd.domain._config import PrintOptions
from lazynd.infrastructure.tensor import Tensor, format_expression


class TestFormatting(unittest.TestCase):
    def test_str_of_vector(self):
        self.assertEqual(str(Tensor.from_values([1, 2, 3])), "[1, 2, 3]")

    def test_str_of_matrix_nests_brackets(self):
        text = str(Tensor.from_values([[1, 2], [3, 4]]))
        self.assertEqual(text.replace("\n", ""), "[[1, 2], [3, 4]]")

    def test_lazy_expressions_render_their_values(self):
        t = Tensor.from_values([1, 2, 3])
        self.assertEqual(str(t * 2), "[2, 4, 6]")

    def test_repr_names_kind_and_shape(self):
        r = repr(Tensor.from_values([1, 2]))
        self.assertTrue(r.startswith("Tensor([1, 2]"))
        self.assertTrue(r.endswith("shape=(2,))"))
        self.assertTrue(repr(Tensor.from_values([1, 2]) + 1).startswith("LazyBinary("))

    def test_precision_option(self):
        t = Tensor.from_values([1.0 / 3.0])
        self.assertEqual(format_expression(t, PrintOptions(precision=2)), "[0.33]")
        self.assertEqual(t.to_string(PrintOptions(precision=4)), "[0.3333]")

    def test_threshold_summarizes(self):
        t = Tensor.from_numpy(np.arange(100))
        text = format_expression(t, PrintOptions(threshold=10, edgeitems=2))
        self.assertIn("...", text)
        self.assertLess(len(text), 40)
        self.assertTrue(text.endswith("98, 99]"))

    def test_rendering_logs_materialization(self):
        t = Tensor.from_values([1, 2]) + 1
        with self.assertLogs("lazynd.infrastructure.tensor._base", level="DEBUG"):
            str(t)


if __name__ == "__main__":
    unittest.main()
