r"""Power series evaluators of the integral.

For positive mu (normalized to one) this computes

.. math::

    G(p, z) = e^{z} z^{-p} \gamma(p, z) = \sum_{k=0}^{\infty} \frac{z^k}{p (p+1) \cdots (p+k)}

which converges for every z but is only fast when z is small compared to p. For negative mu (normalized to minus
one) we need the growing integrand :math:`t^{p-1} e^{t}`, there we use the positive term series

.. math::

    e^{-z} z^{-p} \int_0^z t^{p-1} e^{t} dt = e^{-z} \sum_{k=0}^{\infty} \frac{z^k}{k! (p + k)}

which has no cancellation, in contrast to the alternating series one gets from analytic continuation.

For a small shape parameter the cumulative values on both sides of an interval are dominated by the same term
:math:`z^p / p`. Their difference then loses the digits of p, we avoid that with two more series. For positive mu
the upper incomplete gamma function at a small argument follows from DLMF 8.7.3:

.. math::

    Q(p, z) = 1 - \frac{z^p}{\Gamma(p + 1)} - \frac{z^p}{\Gamma(p)} \sum_{n=1}^{\infty} \frac{(-z)^n}{n! (p + n)}

where the first two terms are combined with ``expm1``. For negative mu we sum the difference of the two sides term
by term:

.. math::

    \int_a^b t^{p-1} e^{t} dt = b^p \sum_{k=0}^{\infty} \frac{b^k}{k!} \frac{1 - (a / b)^{p + k}}{p + k}
"""
import math
from deltagammainc.errors import NonConvergence
from deltagammainc.library_functions.special_functions import log_gamma, log_gamma_1p

__author__ = 'Robbert Harms'
__date__ = '2026-10-19'
__maintainer__ = 'Robbert Harms'
__email__ = 'robbert@xkls.nl'
__licence__ = 'LGPL v3'


def log_lower_series(z, p, settings):
    """Compute ``log(G(p, z))`` for the lower incomplete gamma function using the power series.

    Args:
        z (float): the non-negative, finite bound
        p (float): the positive shape parameter
        settings (deltagammainc.configuration.KernelSettings): the tolerance and the maximum number of terms

    Returns:
        float: the logarithm of the series value

    Raises:
        NonConvergence: if the series did not converge within the maximum number of terms
    """
    term = 1 / p
    total = term
    for k in range(1, settings.series_max_iterations + 1):
        term *= z / (p + k)
        total += term
        if term <= total * settings.tolerance:
            return math.log(total)
    raise NonConvergence('The power series did not converge within {} terms for p={}, z={}.'.format(
        settings.series_max_iterations, p, z))


def log_negative_mu_series(z, p, settings):
    """Compute ``log(e^-z z^-p int_0^z t^(p-1) e^t dt)`` using the positive term series.

    Args:
        z (float): the non-negative, finite bound
        p (float): the positive shape parameter
        settings (deltagammainc.configuration.KernelSettings): the tolerance and the maximum number of terms

    Returns:
        float: the logarithm of the series value

    Raises:
        NonConvergence: if the series did not converge within the maximum number of terms
    """
    weight = 1.0
    total = 1 / p
    for k in range(1, settings.series_max_iterations + 1):
        weight *= z / k
        term = weight / (p + k)
        total += term

        # the terms grow until k passes z
        if k > z and term <= total * settings.tolerance:
            return math.log(total) - z
    raise NonConvergence('The negative mu series did not converge within {} terms for p={}, z={}.'.format(
        settings.series_max_iterations, p, z))


def log_upper_series(z, p, settings):
    """Compute ``log(G(p, z))`` for the upper incomplete gamma function using the series for a small argument.

    Here ``G(p, z) = e^z z^-p Gamma(p, z)``, the same quantity as computed by the continued fraction, which would need
    a number of iterations growing like ``1 / z`` at these arguments. This is a port of ``igamc_series`` of the cephes
    library, with the regularized value scaled back by ``Gamma(p)`` in log space.

    Args:
        z (float): the positive bound, at most about one
        p (float): the positive shape parameter
        settings (deltagammainc.configuration.KernelSettings): the tolerance and the maximum number of terms

    Returns:
        float: the logarithm of the series value

    Raises:
        NonConvergence: if the series did not converge within the maximum number of terms, or if the complementary
            value vanished in rounding
    """
    log_z = math.log(z)
    factor = 1.0
    total = 0.0
    for n in range(1, settings.series_max_iterations + 1):
        factor *= -z / n
        term = factor / (p + n)
        total += term
        if abs(term) <= abs(total) * settings.tolerance:
            regularized = -math.expm1(p * log_z - log_gamma_1p(p)) - math.exp(p * log_z - log_gamma(p)) * total
            if regularized <= 0:
                raise NonConvergence('The upper series vanished in rounding for p={}, z={}.'.format(p, z))
            return log_gamma(p) + math.log(regularized) - p * log_z + z
    raise NonConvergence('The upper series did not converge within {} terms for p={}, z={}.'.format(
        settings.series_max_iterations, p, z))


def log_negative_mu_difference_series(lower, upper, p, settings):
    """Compute ``log(int_lower^upper t^(p-1) e^t dt)`` by summing the difference of the two sides term by term.

    Every term is positive and the factors ``1 - (lower / upper)^(p + k)`` are computed with ``expm1``, so the result
    keeps its relative accuracy for any shape parameter, also when both sides are dominated by ``z^p / p``.

    Args:
        lower (float): the smallest bound, non-negative
        upper (float): the largest bound, positive and finite
        p (float): the positive shape parameter
        settings (deltagammainc.configuration.KernelSettings): the tolerance and the maximum number of terms

    Returns:
        float: the logarithm of the integral

    Raises:
        NonConvergence: if the series did not converge within the maximum number of terms
    """
    log_ratio = math.log(lower / upper) if lower > 0 else -math.inf
    weight = 1.0
    total = -math.expm1(p * log_ratio) / p
    for k in range(1, settings.series_max_iterations + 1):
        weight *= upper / k
        term = weight * -math.expm1((p + k) * log_ratio) / (p + k)
        total += term

        # the terms grow until k passes the upper bound
        if k > upper and term <= total * settings.tolerance:
            return p * math.log(upper) + math.log(total)
    raise NonConvergence('The negative mu difference series did not converge within {} terms for p={}, '
                         'z=({}, {}).'.format(settings.series_max_iterations, p, lower, upper))
