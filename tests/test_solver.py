"""Unit tests for solver module."""

import unittest

import sympy as sp

from critpoint_pkg.solver import (
    DEGENERATE_MESSAGE,
    find_stationary_points,
    is_nonzero_constant,
)
from critpoint_pkg.types import FirstDerivatives

x, y = sp.symbols("x y")


class TestDegeneracy(unittest.TestCase):
    """Test the nonzero-constant derivative short circuit."""

    def test_nonzero_constant(self):
        self.assertTrue(is_nonzero_constant(sp.Integer(1)))
        self.assertTrue(is_nonzero_constant(sp.pi))
        self.assertFalse(is_nonzero_constant(sp.Integer(0)))
        self.assertFalse(is_nonzero_constant(2 * x))

    def test_dx_constant(self):
        result = find_stationary_points(FirstDerivatives(dx=sp.Integer(1), dy=2 * y))
        self.assertEqual(result.candidates, ())
        self.assertEqual(result.degenerate_message, DEGENERATE_MESSAGE)

    def test_dy_constant(self):
        result = find_stationary_points(FirstDerivatives(dx=2 * x, dy=sp.Integer(-3)))
        self.assertEqual(result.candidates, ())
        self.assertEqual(result.degenerate_message, DEGENERATE_MESSAGE)

    def test_zero_constant_falls_through_to_solving(self):
        # f = y^2: df/dx is the literal 0, which is solved rather than flagged
        result = find_stationary_points(FirstDerivatives(dx=sp.Integer(0), dy=2 * y))
        self.assertIsNone(result.degenerate_message)
        self.assertEqual(result.candidates, ())


class TestCandidates(unittest.TestCase):
    """Test Cartesian pairing of independent solutions."""

    def test_single_solution_each(self):
        result = find_stationary_points(FirstDerivatives(dx=2 * x, dy=-2 * y))
        self.assertEqual(result.candidates, ((0, 0),))
        self.assertIsNone(result.degenerate_message)

    def test_cartesian_product_order(self):
        result = find_stationary_points(
            FirstDerivatives(dx=3 * x**2 - 3, dy=3 * y**2 - 3)
        )
        x_solutions = sp.solve(3 * x**2 - 3, x)
        y_solutions = sp.solve(3 * y**2 - 3, y)
        expected = tuple((xs, ys) for xs in x_solutions for ys in y_solutions)
        self.assertEqual(len(result.candidates), 4)
        self.assertEqual(result.candidates, expected)

    def test_mixed_single_and_multiple(self):
        result = find_stationary_points(
            FirstDerivatives(dx=4 * x * (x**2 - 1), dy=2 * y)
        )
        self.assertEqual([c[1] for c in result.candidates], [0, 0, 0])
        self.assertEqual(sorted(c[0] for c in result.candidates), [-1, 0, 1])

    def test_no_real_solutions(self):
        result = find_stationary_points(FirstDerivatives(dx=x**2 + 1, dy=2 * y))
        self.assertEqual(result.candidates, ())
        self.assertIsNone(result.degenerate_message)

    def test_coupled_system_pairs_are_not_verified(self):
        # df/dx = 2x + y, df/dy = x + 2y: each solution refers to the other variable
        result = find_stationary_points(FirstDerivatives(dx=2 * x + y, dy=x + 2 * y))
        self.assertEqual(result.candidates, ((-y / 2, -x / 2),))


if __name__ == "__main__":
    unittest.main()
