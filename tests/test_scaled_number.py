import math
import unittest
import numpy as np
from numpy.testing import assert_allclose
from deltagammainc.scaled_number import ScaledNumber, scaled_to_float, scaled_to_log10

__author__ = 'Robbert Harms'
__date__ = '2026-10-19'
__maintainer__ = 'Robbert Harms'
__email__ = 'robbert@xkls.nl'
__licence__ = 'LGPL v3'


class test_ScaledNumberConstruction(unittest.TestCase):

    def test_normalization(self):
        number = ScaledNumber(1234.5)
        self.assertAlmostEqual(number.rho, 0.12345, places=15)
        self.assertEqual(number.sigma, 4)

    def test_powers_of_ten(self):
        self.assertEqual(ScaledNumber(0.1).as_tuple(), (0.1, 0))
        self.assertEqual(ScaledNumber(1.0).as_tuple(), (0.1, 1))

    def test_negative(self):
        number = ScaledNumber(-250)
        self.assertAlmostEqual(number.rho, -0.25, places=15)
        self.assertEqual(number.sigma, 3)

    def test_zero(self):
        number = ScaledNumber(0.0, 12)
        self.assertTrue(number.is_zero())
        self.assertEqual(number.as_tuple(), (0.0, 0))
        self.assertEqual(ScaledNumber.zero(), number)

    def test_from_log(self):
        number = ScaledNumber.from_log(math.log(5) - 400 * math.log(10))
        self.assertAlmostEqual(number.rho, 0.5, places=10)
        self.assertEqual(number.sigma, -399)

        negative = ScaledNumber.from_log(math.log(20), sign=-1)
        self.assertAlmostEqual(negative.rho, -0.2, places=14)
        self.assertEqual(negative.sigma, 2)

    def test_from_log_zero(self):
        self.assertTrue(ScaledNumber.from_log(-math.inf).is_zero())

    def test_invalid(self):
        self.assertRaises(ValueError, ScaledNumber, math.inf)
        self.assertRaises(ValueError, ScaledNumber, math.nan)
        self.assertRaises(ValueError, ScaledNumber, 0.5, 1.5)
        self.assertRaises(ValueError, ScaledNumber.from_log, math.nan)
        self.assertRaises(ValueError, ScaledNumber.from_log, math.inf)


class test_ScaledNumberArithmetic(unittest.TestCase):

    def test_add(self):
        total = ScaledNumber(0.5, 3) + ScaledNumber(0.25, 1)
        self.assertAlmostEqual(total.to_float(), 502.5, places=10)
        self.assertEqual(total.sigma, 3)

    def test_add_float(self):
        self.assertAlmostEqual((ScaledNumber(0.5, 1) + 2.5).to_float(), 7.5, places=12)
        self.assertAlmostEqual((2.5 + ScaledNumber(0.5, 1)).to_float(), 7.5, places=12)

    def test_add_negligible(self):
        large = ScaledNumber(0.5, 100)
        self.assertEqual(large + ScaledNumber(0.5, 10), large)

    def test_subtract(self):
        self.assertAlmostEqual((ScaledNumber(3.0) - ScaledNumber(1.5)).to_float(), 1.5, places=14)
        self.assertTrue((ScaledNumber(0.5, 3) - ScaledNumber(0.5, 3)).is_zero())

    def test_multiply(self):
        product = ScaledNumber(0.5, 200) * ScaledNumber(0.4, 300)
        self.assertEqual(product.as_tuple(), (0.2, 500))

    def test_divide(self):
        quotient = ScaledNumber(0.5, 10) / ScaledNumber(0.25, 4)
        self.assertEqual(quotient.as_tuple(), (0.2, 7))

    def test_divide_by_zero(self):
        self.assertRaises(ZeroDivisionError, lambda: ScaledNumber(0.5) / ScaledNumber.zero())

    def test_negation(self):
        self.assertEqual((-ScaledNumber(0.5, 3)).as_tuple(), (-0.5, 3))
        self.assertEqual(abs(ScaledNumber(-0.5, 3)).as_tuple(), (0.5, 3))


class test_ScaledNumberComparison(unittest.TestCase):

    def test_positive(self):
        self.assertGreater(ScaledNumber(0.5, 10), ScaledNumber(0.9, 9))
        self.assertLess(ScaledNumber(0.2, 10), ScaledNumber(0.3, 10))

    def test_negative(self):
        self.assertLess(ScaledNumber(-0.5, 10), ScaledNumber(-0.9, 9))
        self.assertGreater(ScaledNumber(-0.3, 10), ScaledNumber(-0.5, 10))

    def test_zero(self):
        self.assertLess(ScaledNumber.zero(), ScaledNumber(0.5, -300))
        self.assertGreater(ScaledNumber(0.5, -300), ScaledNumber.zero())
        self.assertLess(ScaledNumber(-0.5, -300), ScaledNumber.zero())
        self.assertFalse(ScaledNumber.zero() < ScaledNumber.zero())

    def test_mixed_signs(self):
        self.assertLess(ScaledNumber(-0.5, 300), ScaledNumber(0.1, -300))


class test_ScaledNumberConversion(unittest.TestCase):

    def test_to_float(self):
        self.assertAlmostEqual(float(ScaledNumber(0.5, 3)), 500, places=10)

    def test_saturation(self):
        self.assertEqual(ScaledNumber(0.5, 400).to_float(), math.inf)
        self.assertEqual(ScaledNumber(-0.5, 400).to_float(), -math.inf)
        self.assertEqual(ScaledNumber(0.5, -500).to_float(), 0.0)

    def test_logarithms(self):
        number = ScaledNumber(0.5, 3)
        self.assertAlmostEqual(number.log(), math.log(500), places=13)
        self.assertAlmostEqual(number.log10(), math.log10(500), places=13)
        self.assertEqual(ScaledNumber.zero().log(), -math.inf)

    def test_array_conversion(self):
        rho = np.array([0.5, 0.25, 0])
        sigma = np.array([3, -2, 0])

        assert_allclose(scaled_to_float(rho, sigma), [500, 0.0025, 0], rtol=1e-14)
        assert_allclose(scaled_to_log10(rho[:2], sigma[:2]), [math.log10(500), math.log10(0.0025)], rtol=1e-14)
        self.assertEqual(scaled_to_log10(rho, sigma)[2], -math.inf)

    def test_array_saturation(self):
        values = scaled_to_float([0.5, 0.5], [400, -500])
        self.assertEqual(values[0], np.inf)
        self.assertEqual(values[1], 0)
