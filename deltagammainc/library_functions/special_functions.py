"""Special function helpers shared by the evaluators.

All functions in this module work on Python floats and return natural logarithms where the values themselves would
over- or underflow.
"""
import math
import numpy as np
from scipy.special import gammaln, zeta

__author__ = 'Robbert Harms'
__date__ = '2026-10-19'
__maintainer__ = 'Robbert Harms'
__email__ = 'robbert@xkls.nl'
__licence__ = 'LGPL v3'


LOG_SQRT_2PI = 0.5 * math.log(2 * math.pi)

# B_2k / (2k (2k - 1)), the coefficients of the Stirling series of log(Gamma)
_STIRLING_COEFFICIENTS = (1 / 12., -1 / 360., 1 / 1260., -1 / 1680., 1 / 1188., -691 / 360360., 1 / 156.,
                          -3617 / 122400.)

# above this argument the Stirling series is accurate to double precision
_STIRLING_MIN_ARGUMENT = 10

# -euler_gamma followed by (-1)^n zeta(n) / n, the Taylor coefficients of log(Gamma(1 + x)) / x around zero
_LOG_GAMMA_1P_COEFFICIENTS = (-float(np.euler_gamma),) + tuple((-1) ** n * float(zeta(n)) / n for n in range(2, 61))


def log_gamma(p):
    """The natural logarithm of the gamma function for positive arguments."""
    return float(gammaln(p))


def log_gamma_1p(x):
    """Compute ``log(Gamma(1 + x))`` accurately, also for x close to zero or to one.

    Adding one to a small x loses its trailing digits, we therefore sum the Taylor series around zero for
    ``|x| <= 0.5`` and use ``log(Gamma(1 + x)) = log(x) + log(Gamma(x))`` with the same series around one.

    Args:
        x (float): the argument, larger than minus one

    Returns:
        float: the logarithm of the gamma function at ``1 + x``
    """
    if abs(x) <= 0.5:
        return x * horner(_LOG_GAMMA_1P_COEFFICIENTS, x)
    if abs(x - 1) < 0.5:
        return math.log(x) + (x - 1) * horner(_LOG_GAMMA_1P_COEFFICIENTS, x - 1)
    return log_gamma(x + 1)


def log_gamma_star(p):
    r"""The natural logarithm of the scaled gamma function.

    The scaled gamma function removes the dominant part of Stirling's approximation from the gamma function:

    .. math::

        \Gamma^*(p) = \frac{\Gamma(p)}{\sqrt{2\pi} p^{p - 1/2} e^{-p}}

    which tends to one for large p. For large arguments we sum the Stirling series directly, computing the
    difference of the logarithms would lose all digits to cancellation.

    Args:
        p (float): a positive argument

    Returns:
        float: :math:`\log(\Gamma^*(p))`
    """
    if p >= _STIRLING_MIN_ARGUMENT:
        inverse_square = 1 / (p * p)
        total = 0
        for coefficient in reversed(_STIRLING_COEFFICIENTS):
            total = total * inverse_square + coefficient
        return total / p
    return log_gamma(p) - ((p - 0.5) * math.log(p) - p + LOG_SQRT_2PI)


def lambda_deviation(z, p):
    r"""Compute :math:`\lambda - 1 - \log(\lambda)` with :math:`\lambda = z / p`.

    Close to :math:`\lambda = 1` we use ``log1p`` to keep the relative accuracy.

    Args:
        z (float): the positive bound
        p (float): the positive shape parameter

    Returns:
        float: the non-negative deviation
    """
    u = (z - p) / p
    if abs(u) <= 0.5:
        return max(u - math.log1p(u), 0.0)
    return u - math.log(z / p)


def log_regularized_prefactor(z, p):
    r"""The logarithm of :math:`z^p e^{-z} / \Gamma(p)`.

    This is the factor that links the regularized incomplete gamma functions :math:`P(p, z)` and :math:`Q(p, z)` to
    the series and continued fraction quantities :math:`G(p, z)`. For large p the three terms are large and of
    opposite sign, we then use :math:`-p (\lambda - 1 - \log\lambda) + \log(p / 2\pi) / 2 - \log\Gamma^*(p)`.

    Args:
        z (float): the positive bound
        p (float): the positive shape parameter

    Returns:
        float: the logarithm of the prefactor, ``-inf`` for z equal to zero
    """
    if z == 0:
        return -math.inf
    if p >= _STIRLING_MIN_ARGUMENT:
        return -p * lambda_deviation(z, p) + 0.5 * math.log(p) - LOG_SQRT_2PI - log_gamma_star(p)
    return p * math.log(z) - z - log_gamma(p)


def horner(coefficients, x):
    """Evaluate the polynomial with the given coefficients (in increasing order) at x."""
    total = 0.0
    for coefficient in reversed(coefficients):
        total = total * x + coefficient
    return total
