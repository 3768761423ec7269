import itertools
import math
import unittest
import mpmath
import numpy as np
from numpy.testing import assert_allclose
from scipy.special import gammainc, gammaincc, gammaln
from deltagammainc.configuration import KernelSettings
from deltagammainc.errors import NonConvergence
from deltagammainc.library_functions import log_gamma_star, log_gamma_1p, lambda_deviation, \
    log_regularized_prefactor, log_lower_series, log_negative_mu_series, log_upper_series, \
    log_negative_mu_difference_series, log_upper_continued_fraction, temme_coefficients, \
    log_temme_expansion, log_negative_mu_expansion, is_narrow_interval, log_narrow_interval, \
    narrow_interval_distortion

__author__ = 'Robbert Harms'
__date__ = '2026-10-19'
__maintainer__ = 'Robbert Harms'
__email__ = 'robbert@xkls.nl'
__licence__ = 'LGPL v3'


class test_SpecialFunctions(unittest.TestCase):

    def test_log_gamma_star(self):
        for p in [0.5, 3, 9.5, 10, 25.5, 1000]:
            expected = gammaln(p) - ((p - 0.5) * math.log(p) - p + 0.5 * math.log(2 * math.pi))
            self.assertAlmostEqual(log_gamma_star(p), expected, places=11)

    def test_lambda_deviation(self):
        self.assertEqual(lambda_deviation(5, 5), 0)
        self.assertAlmostEqual(lambda_deviation(1, 2), 0.5 - 1 + math.log(2), places=15)
        self.assertAlmostEqual(lambda_deviation(2.2, 2), 0.1 - math.log(1.1), places=15)

    def test_log_regularized_prefactor(self):
        for z, p in [(0.5, 2), (12, 15), (300, 250.5)]:
            expected = p * math.log(z) - z - gammaln(p)
            self.assertAlmostEqual(log_regularized_prefactor(z, p), expected, delta=1e-12 * max(1, abs(expected)))
        self.assertEqual(log_regularized_prefactor(0, 2), -math.inf)

    def test_log_gamma_1p(self):
        for x in [1e-12, 1e-4, 0.3, -0.3, 0.7, 1.2, 5]:
            with mpmath.workdps(30):
                expected = float(mpmath.loggamma(1 + mpmath.mpf(x)))
            assert_allclose(log_gamma_1p(x), expected, rtol=1e-13)


class test_Series(unittest.TestCase):

    def setUp(self):
        self.settings = KernelSettings()

    def test_lower_series(self):
        test_params = np.array(list(itertools.product([0.1, 1, 3, 6.5], [0.5, 1, 2.5, 7])), dtype=np.float64)

        results = [math.exp(log_regularized_prefactor(z, p) + log_lower_series(z, p, self.settings))
                   for z, p in test_params]
        assert_allclose(results, gammainc(test_params[:, 1], test_params[:, 0]), rtol=1e-11)

    def test_lower_series_at_zero(self):
        self.assertAlmostEqual(log_lower_series(0, 2.5, self.settings), -math.log(2.5), places=15)

    def test_lower_series_non_convergence(self):
        self.assertRaises(NonConvergence, log_lower_series, 3, 2.5, KernelSettings(series_max_iterations=1))

    def test_negative_mu_series(self):
        for z, p in [(0.5, 1), (5, 2.5), (30, 0.3), (70, 12)]:
            with mpmath.workdps(30):
                expected = mpmath.log(mpmath.exp(-z) * mpmath.hyp1f1(p, p + 1, z) / p)
            self.assertAlmostEqual(log_negative_mu_series(z, p, self.settings), float(expected), places=12)

    def test_upper_series(self):
        test_params = np.array(list(itertools.product([0.01, 0.5, 1.1], [1e-3, 0.1, 0.5, 1])), dtype=np.float64)

        results = [math.exp(log_regularized_prefactor(z, p) + log_upper_series(z, p, self.settings))
                   for z, p in test_params]
        assert_allclose(results, gammaincc(test_params[:, 1], test_params[:, 0]), rtol=1e-12)

    def test_upper_series_small_shape(self):
        for z, p in [(0.01, 1e-10), (0.5, 1e-12), (1.1, 1e-4)]:
            with mpmath.workdps(40):
                expected = mpmath.log(mpmath.gammainc(p, mpmath.mpf(z)) * mpmath.exp(z) / mpmath.mpf(z) ** p)
            self.assertAlmostEqual(log_upper_series(z, p, self.settings), float(expected), places=13)

    def test_negative_mu_difference_series(self):
        def cumulative(z, p):
            return mpmath.mpf(z) ** p / p * mpmath.hyp1f1(p, p + 1, z)

        for lower, upper, p in [(0, 2, 1.5), (0.01, 0.5, 1e-10), (0.01, 3, 1e-8), (5, 40, 3.5)]:
            with mpmath.workdps(40):
                expected = mpmath.log(cumulative(upper, p) - cumulative(lower, p))
            self.assertAlmostEqual(log_negative_mu_difference_series(lower, upper, p, self.settings),
                                   float(expected), places=12)

    def test_negative_mu_difference_series_closed_form(self):
        # for p equal to one the integral is e^b - e^a
        self.assertAlmostEqual(log_negative_mu_difference_series(1, 3, 1, self.settings),
                               math.log(math.exp(3) - math.exp(1)), places=14)

    def test_negative_mu_series_closed_form(self):
        z = 2.0
        self.assertAlmostEqual(log_negative_mu_series(z, 1, self.settings), math.log(-math.expm1(-z) / z),
                               places=14)


class test_ContinuedFraction(unittest.TestCase):

    def test_upper_continued_fraction(self):
        settings = KernelSettings()
        test_params = np.array([[3, 0.5], [10.5, 0.5], [50, 0.5], [4, 2], [12, 2], [8.5, 5.5], [30, 5.5]])

        results = [math.exp(log_regularized_prefactor(z, p) + log_upper_continued_fraction(z, p, settings))
                   for z, p in test_params]
        assert_allclose(results, gammaincc(test_params[:, 1], test_params[:, 0]), rtol=1e-11)

    def test_exponential(self):
        # for p equal to one, G is exactly 1 / z
        self.assertAlmostEqual(log_upper_continued_fraction(7, 1, KernelSettings()), -math.log(7), places=14)

    def test_non_convergence(self):
        self.assertRaises(NonConvergence, log_upper_continued_fraction, 4, 2.5,
                          KernelSettings(continued_fraction_max_iterations=1))


class test_TemmeExpansion(unittest.TestCase):

    def test_first_coefficients(self):
        table = temme_coefficients(3, 4)
        self.assertEqual(table.shape, (3, 4))
        assert_allclose(table[0], [-1 / 3., 1 / 12., -2 / 135., 1 / 864.], rtol=1e-14)
        assert_allclose(table[1, :3], [-1 / 540., -1 / 288., 1 / 378.], rtol=1e-14)
        self.assertAlmostEqual(table[2, 0], 25 / 6048., places=16)

    def test_upper(self):
        settings = KernelSettings()
        for p in [20, 50, 500.5]:
            for z in [0.75 * p, p, 1.25 * p]:
                result = math.exp(log_regularized_prefactor(z, p) + log_temme_expansion(z, p, 'upper', settings))
                assert_allclose(result, gammaincc(p, z), rtol=1e-11)

    def test_lower(self):
        settings = KernelSettings()
        for p in [20, 50, 500.5]:
            for z in [0.75 * p, 0.9 * p, p]:
                result = math.exp(log_regularized_prefactor(z, p) + log_temme_expansion(z, p, 'lower', settings))
                assert_allclose(result, gammainc(p, z), rtol=1e-11)

    def test_kinds_add_up(self):
        settings = KernelSettings()
        p, z = 40, 38
        lower = math.exp(log_regularized_prefactor(z, p) + log_temme_expansion(z, p, 'lower', settings))
        upper = math.exp(log_regularized_prefactor(z, p) + log_temme_expansion(z, p, 'upper', settings))
        self.assertAlmostEqual(lower + upper, 1, places=14)

    def test_unknown_kind(self):
        self.assertRaises(ValueError, log_temme_expansion, 30, 30, 'middle', KernelSettings())


class test_NegativeMuExpansion(unittest.TestCase):

    def test_agrees_with_series(self):
        settings = KernelSettings()
        for z, p in [(71, 30), (79, 2), (10, 90.5), (200, 0.5)]:
            self.assertAlmostEqual(log_negative_mu_expansion(z, p, settings), log_negative_mu_series(z, p, settings),
                                   places=12)

    def test_reference(self):
        z, p = 150, 20.5
        with mpmath.workdps(40):
            expected = mpmath.log(mpmath.exp(-z) * mpmath.hyp1f1(p, p + 1, z) / p)
        self.assertAlmostEqual(log_negative_mu_expansion(z, p, KernelSettings()), float(expected), places=12)


class test_NarrowInterval(unittest.TestCase):

    def setUp(self):
        self.settings = KernelSettings()

    def test_criterion(self):
        self.assertTrue(is_narrow_interval(10, 10.1, 1, 3.5, self.settings))
        self.assertFalse(is_narrow_interval(1, 3, 1, 2, self.settings))
        self.assertFalse(is_narrow_interval(0, 1e-10, 1, 2, self.settings))
        self.assertFalse(is_narrow_interval(5, 5, 1, 2, self.settings))
        self.assertEqual(narrow_interval_distortion(1, math.inf, 1, 2), math.inf)

    def test_positive_mu(self):
        for x, y, mu, p in [(10, 10.1, 1, 3.5), (2, 2.001, 3, 0.5), (1000, 1000.5, 0.9, 1000.2)]:
            with mpmath.workdps(40):
                expected = mpmath.log(mpmath.gammainc(p, mu * mpmath.mpf(x), mu * mpmath.mpf(y)) / mpmath.mpf(mu) ** p)
            self.assertTrue(is_narrow_interval(x, y, mu, p, self.settings))
            self.assertAlmostEqual(log_narrow_interval(x, y, mu, p, self.settings), float(expected), places=11)

    def test_negative_mu(self):
        x, y, mu, p = 5, 5.2, -0.5, 2
        with mpmath.workdps(40):
            expected = mpmath.log(mpmath.quad(lambda s: s ** (p - 1) * mpmath.exp(-mu * s), [x, y]))
        self.assertTrue(is_narrow_interval(x, y, mu, p, self.settings))
        self.assertAlmostEqual(log_narrow_interval(x, y, mu, p, self.settings), float(expected), places=12)

    def test_orientation(self):
        self.assertEqual(log_narrow_interval(10, 10.1, 1, 3.5, self.settings),
                         log_narrow_interval(10.1, 10, 1, 3.5, self.settings))
