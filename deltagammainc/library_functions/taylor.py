r"""Direct expansion of the integral over a narrow interval.

If both bounds are close together, the integral is much smaller than either of the two cumulative values it would
otherwise be computed from, and taking their difference loses digits. We then expand the integrand around the midpoint
:math:`m` of the interval instead:

.. math::

    s^{p-1} e^{-\mu s} = m^{p-1} e^{-\mu m} \sum_{n=0}^{\infty} c_n t^n, \quad t = s - m

and integrate term by term over :math:`[-h/2, h/2]`, where only the even terms remain. The coefficients follow from the
differential equation :math:`(m + t) g'(t) = ((p - 1) - \mu (m + t)) g(t)`, which gives the three term recurrence

.. math::

    m (n + 1) c_{n+1} = ((p - 1) - \mu m - n) c_n - \mu c_{n-1}.
"""
import math
from deltagammainc.errors import NonConvergence

__author__ = 'Robbert Harms'
__date__ = '2026-10-19'
__maintainer__ = 'Robbert Harms'
__email__ = 'robbert@xkls.nl'
__licence__ = 'LGPL v3'


def narrow_interval_distortion(x, y, mu, p):
    """Bound the variation of the logarithm of the integrand over the disc around the midpoint.

    The bound is ``a h + |p - 1| (h/m)^2 / (2 (1 - h/m))`` with ``m`` the midpoint, ``h`` the interval width and
    ``a = |(p - 1)/m - mu|``. It is only defined if the disc of radius ``h`` stays within ``m / 2`` of the midpoint.

    Args:
        x (float): one bound of the interval
        y (float): the other bound
        mu (float): the rate of the exponential
        p (float): the shape parameter

    Returns:
        float: the distortion bound, infinity if the interval is too wide (or unbounded) for the expansion
    """
    if math.isinf(x) or math.isinf(y):
        return math.inf

    midpoint = (x + y) / 2
    width = abs(y - x)
    if midpoint <= 0 or width > midpoint / 2:
        return math.inf

    ratio = width / midpoint
    slope = abs((p - 1) / midpoint - mu)
    return slope * width + abs(p - 1) * ratio ** 2 / (2 * (1 - ratio))


def is_narrow_interval(x, y, mu, p, settings):
    """Check if the integral between x and y should be computed with the narrow interval expansion.

    Args:
        x (float): one bound of the interval
        y (float): the other bound
        mu (float): the rate of the exponential
        p (float): the shape parameter
        settings (deltagammainc.configuration.KernelSettings): provides the largest accepted distortion

    Returns:
        boolean: if the interval is narrow enough
    """
    return x != y and narrow_interval_distortion(x, y, mu, p) <= settings.taylor_max_distortion


def log_narrow_interval(x, y, mu, p, settings):
    """Compute the logarithm of the integral between x and y by expanding the integrand around the midpoint.

    We work with the scaled coefficients ``e_n = c_n (h/2)^n``, these decrease at least geometrically for intervals
    accepted by :func:`is_narrow_interval`.

    Args:
        x (float): one bound of the interval
        y (float): the other bound, different from x
        mu (float): the rate of the exponential
        p (float): the shape parameter
        settings (deltagammainc.configuration.KernelSettings): the tolerance and the maximum number of terms

    Returns:
        float: the natural logarithm of the integral

    Raises:
        NonConvergence: if the expansion did not converge within the maximum number of terms
    """
    midpoint = (x + y) / 2
    width = abs(y - x)
    half_width = width / 2
    q = p - 1
    linear = q - mu * midpoint

    previous = 0.0
    current = 1.0
    total = 1.0

    for n in range(settings.taylor_max_iterations):
        following = ((linear - n) * current * half_width
                     - mu * previous * half_width ** 2) / (midpoint * (n + 1))
        if (n + 1) % 2 == 0:
            total += following / (n + 2)

        if abs(current) + abs(following) <= settings.tolerance * abs(total):
            return q * math.log(midpoint) - mu * midpoint + math.log(width) + math.log(total)
        previous, current = current, following

    raise NonConvergence('The narrow interval expansion did not converge within {} terms for '
                         'x={}, y={}, mu={}, p={}.'.format(settings.taylor_max_iterations, x, y, mu, p))
